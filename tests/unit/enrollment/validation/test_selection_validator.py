"""Tests for step-aware selection validation.

Covers the job step end to end (aggregate count, always-required categories,
camping-option shifts) plus the simpler steps.
"""

from __future__ import annotations

from enrollment.field_values import NumberValue, TextValue
from enrollment.models import FieldType, ProfileData, UserRole
from enrollment.selection import RegistrationSelection
from enrollment.steps import RegistrationStep
from enrollment.validation import SelectionValidator, ValidationResult, validate
from tests.fixtures.catalog import (
    complete_profile,
    make_catalog,
    make_category,
    make_field,
    make_job,
    make_option,
    make_user,
)


def job_selection(option_ids, job_ids):
    return RegistrationSelection(camping_option_ids=set(option_ids), job_ids=set(job_ids))


class TestJobStepScenarios:
    """One camping job plus one always-required category job."""

    def setup_method(self):
        self.catalog = make_catalog(
            options=[make_option("c1", work_shifts_required=1)],
            categories=[make_category("cat1", always_required=True), make_category("camp")],
            jobs=[make_job("j-cat1", "cat1"), make_job("j-camp", "camp"), make_job("j-camp2", "camp")],
        )

    def test_requirements_met_yields_no_errors(self):
        result = validate(RegistrationStep.JOBS, job_selection({"c1"}, {"j-cat1", "j-camp"}), self.catalog)

        assert result.valid
        assert result.errors == {}

    def test_removing_category_job_reports_category_and_count(self):
        result = validate(RegistrationStep.JOBS, job_selection({"c1"}, {"j-camp"}), self.catalog)

        assert set(result.errors) == {"category_cat1", "jobs"}
        assert result.errors["category_cat1"] == "You must select at least one CAT1 shift"
        assert result.errors["jobs"] == "You need to select at least 2 shifts"

    def test_count_met_without_category_still_reports_category(self):
        result = validate(RegistrationStep.JOBS, job_selection({"c1"}, {"j-camp", "j-camp2"}), self.catalog)

        assert set(result.errors) == {"category_cat1"}

    def test_validation_is_idempotent(self):
        selection = job_selection({"c1"}, {"j-camp"})

        assert validate(RegistrationStep.JOBS, selection, self.catalog) == validate(
            RegistrationStep.JOBS, selection, self.catalog
        )

    def test_camping_jobs_cannot_be_covered_by_category_jobs(self):
        catalog = make_catalog(
            options=[make_option("c1", name="Tent", work_shifts_required=1)],
            categories=[make_category("cat1", always_required=True)],
            jobs=[make_job("a", "cat1"), make_job("b", "cat1")],
        )

        result = validate(RegistrationStep.JOBS, job_selection({"c1"}, {"a", "b"}), catalog)

        assert set(result.errors) == {"campingJobs"}
        assert result.errors["campingJobs"] == "You must select at least 1 Tent work shift"


class TestCampingJobsMessage:
    def test_two_options_joined_with_and(self):
        catalog = make_catalog(
            options=[
                make_option("c1", name="RV", work_shifts_required=1),
                make_option("c2", name="Tent", work_shifts_required=2),
            ],
        )

        result = validate(RegistrationStep.JOBS, job_selection({"c1", "c2"}, set()), catalog)

        assert result.errors["campingJobs"] == "You must select at least 1 RV work shift and 2 Tent work shifts"
        assert result.errors["jobs"] == "You need to select at least 3 shifts"

    def test_three_options_use_commas(self):
        catalog = make_catalog(
            options=[
                make_option("a", name="A", work_shifts_required=1),
                make_option("b", name="B", work_shifts_required=1),
                make_option("c", name="C", work_shifts_required=1),
            ],
        )

        result = validate(RegistrationStep.JOBS, job_selection({"a", "b", "c"}, set()), catalog)

        assert result.errors["campingJobs"].endswith("1 A work shift, 1 B work shift and 1 C work shift")


class TestBoundary:
    """Exactly the required jobs pass; removing any counted one fails."""

    def test_each_removal_fails(self):
        catalog = make_catalog(
            options=[make_option("c1", work_shifts_required=2)],
            categories=[make_category("cat1", always_required=True), make_category("camp")],
            jobs=[make_job("k", "cat1"), make_job("x", "camp"), make_job("y", "camp")],
        )
        chosen = {"k", "x", "y"}

        assert validate(RegistrationStep.JOBS, job_selection({"c1"}, chosen), catalog).valid
        for job_id in chosen:
            result = validate(RegistrationStep.JOBS, job_selection({"c1"}, chosen - {job_id}), catalog)
            assert not result.valid, job_id


class TestEffectiveJobs:
    """Full, unknown and hidden jobs never count."""

    def test_full_job_does_not_count(self):
        catalog = make_catalog(
            options=[make_option("c1", work_shifts_required=1)],
            categories=[make_category("camp")],
            jobs=[make_job("full", "camp", max_registrations=2, current_registrations=2)],
        )

        result = validate(RegistrationStep.JOBS, job_selection({"c1"}, {"full"}), catalog)

        assert set(result.errors) == {"jobs", "campingJobs"}

    def test_unknown_job_does_not_count(self):
        catalog = make_catalog(options=[make_option("c1", work_shifts_required=1)])

        assert not validate(RegistrationStep.JOBS, job_selection({"c1"}, {"ghost"}), catalog).valid

    def test_staff_only_job_counts_for_staff_only(self):
        catalog = make_catalog(
            options=[make_option("c1", work_shifts_required=1)],
            categories=[make_category("ops", staff_only=True)],
            jobs=[make_job("j1", "ops")],
        )
        selection = job_selection({"c1"}, {"j1"})

        assert not validate(RegistrationStep.JOBS, selection, catalog, user=make_user()).valid
        assert validate(RegistrationStep.JOBS, selection, catalog, user=make_user(role=UserRole.STAFF)).valid


class TestOtherSteps:
    def test_profile_reports_each_missing_field(self):
        result = validate(
            RegistrationStep.PROFILE,
            RegistrationSelection(),
            make_catalog(),
            profile=ProfileData(first_name="Robin", phone="   "),
        )

        assert result.errors == {
            "lastName": "Last name is required",
            "phone": "Phone is required",
            "emergencyContact": "Emergency contact is required",
        }

    def test_complete_profile_passes(self):
        result = validate(RegistrationStep.PROFILE, RegistrationSelection(), make_catalog(), profile=complete_profile())
        assert result.valid

    def test_camping_options_requires_a_selectable_option(self):
        catalog = make_catalog(options=[make_option("c1", enabled=False), make_option("c2")])

        result = validate(RegistrationStep.CAMPING_OPTIONS, RegistrationSelection({"c1"}), catalog)
        assert result.errors == {"campingOptions": "Please select at least one camping option"}

        assert validate(RegistrationStep.CAMPING_OPTIONS, RegistrationSelection({"c2"}), catalog).valid

    def test_custom_fields_only_checks_selected_options(self):
        catalog = make_catalog(
            options=[make_option("c1"), make_option("c2")],
            fields=[
                make_field("f1", "c1", required=True, display_name="Vehicle"),
                make_field("f2", "c2", required=True),
            ],
        )

        result = validate(RegistrationStep.CUSTOM_FIELDS, RegistrationSelection({"c1"}), catalog)

        assert result.errors == {"field_f1": "Vehicle is required"}

    def test_custom_field_zero_is_an_answer(self):
        catalog = make_catalog(
            options=[make_option("c1")],
            fields=[make_field("f1", "c1", data_type=FieldType.INTEGER, required=True, min_value=0)],
        )
        selection = RegistrationSelection({"c1"}, custom_field_values={"f1": NumberValue(0)})

        assert validate(RegistrationStep.CUSTOM_FIELDS, selection, catalog).valid

    def test_custom_field_bounds(self):
        catalog = make_catalog(
            options=[make_option("c1")],
            fields=[
                make_field("len", "c1", max_length=3, display_name="Code"),
                make_field("num", "c1", data_type=FieldType.NUMBER, min_value=1, max_value=5, display_name="Count"),
            ],
        )
        selection = RegistrationSelection(
            {"c1"}, custom_field_values={"len": TextValue("abcd"), "num": NumberValue(9)}
        )

        result = validate(RegistrationStep.CUSTOM_FIELDS, selection, catalog)

        assert result.errors == {
            "field_len": "Code must be at most 3 characters",
            "field_num": "Count must be at most 5",
        }

    def test_terms(self):
        result = validate(RegistrationStep.TERMS, RegistrationSelection(), make_catalog())
        assert result.errors == {"acceptedTerms": "You must accept the terms to continue"}

        assert validate(RegistrationStep.TERMS, RegistrationSelection(accepted_terms=True), make_catalog()).valid

    def test_steps_without_rules_pass(self):
        validator = SelectionValidator()
        assert validator.validate(RegistrationStep.PAYMENT, RegistrationSelection(), make_catalog()) == (
            ValidationResult.ok()
        )
