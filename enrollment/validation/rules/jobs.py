"""Job selection rules.

Three independent checks over the jobs a registrant has selected:

1. the aggregate count must reach the total requirement
2. every always-required category must have at least one selected job
3. jobs outside always-required categories must cover the shifts required by
   the selected camping options

None of them short-circuits: all failures are reported together. Selected jobs
that are full, unknown, or hidden from the user count toward nothing."""

from __future__ import annotations

from abc import abstractmethod

from ...catalog import CatalogSnapshot
from ...eligibility import is_job_selectable
from ...models import CampingOption, Job, UserAccount
from ...requirements import JobRequirements, compute_requirements
from ...selection import RegistrationSelection
from ..interfaces import CAMPING_JOBS, JOBS, StepContext, ValidationResult, ValidationRule, category_key


def effective_jobs(
    catalog: CatalogSnapshot, selection: RegistrationSelection, user: UserAccount | None = None
) -> list[Job]:
    """Selected jobs that can actually count toward a requirement."""
    jobs = catalog.job_by_id
    result = []
    for job_id in sorted(selection.job_ids):
        job = jobs.get(job_id)
        if job is not None and is_job_selectable(catalog, job, user):
            result.append(job)
    return result


def natural_join(items: list[str]) -> str:
    """Join items as natural language: "a", "a and b", "a, b and c"."""
    if not items:
        return ""
    if len(items) == 1:
        return items[0]
    return f"{', '.join(items[:-1])} and {items[-1]}"


def describe_option_shifts(option: CampingOption) -> str:
    count = option.work_shifts_required
    noun = "work shift" if count == 1 else "work shifts"
    return f"{count} {option.name} {noun}"


class _JobRule(ValidationRule):
    """Shared requirement/effective-job derivation for job rules"""

    def validate(self, context: StepContext) -> ValidationResult:
        requirements = compute_requirements(context.catalog, context.selection.camping_option_ids)
        jobs = effective_jobs(context.catalog, context.selection, context.user)
        return self.check(requirements, jobs)

    @abstractmethod
    def check(self, requirements: JobRequirements, jobs: list[Job]) -> ValidationResult:
        """Check the effective jobs against the requirements"""


class JobCountRule(_JobRule):
    """Aggregate count of selected jobs"""

    @property
    def name(self) -> str:
        return "job_count"

    @property
    def priority(self) -> int:
        return 30

    def check(self, requirements: JobRequirements, jobs: list[Job]) -> ValidationResult:
        required = requirements.total_required
        if len(jobs) < required:
            return ValidationResult.error(JOBS, f"You need to select at least {required} shifts")
        return ValidationResult.ok()


class AlwaysRequiredCategoriesRule(_JobRule):
    """Every always-required category needs one selected job"""

    @property
    def name(self) -> str:
        return "always_required_categories"

    @property
    def priority(self) -> int:
        return 20

    def check(self, requirements: JobRequirements, jobs: list[Job]) -> ValidationResult:
        covered = {job.category_id for job in jobs}
        errors = {
            category_key(category.id): f"You must select at least one {category.name} shift"
            for category in requirements.always_required_categories
            if category.id not in covered
        }
        return ValidationResult(errors)


class CampingJobsRule(_JobRule):
    """Camping options' own work-shift requirement"""

    @property
    def name(self) -> str:
        return "camping_jobs"

    @property
    def priority(self) -> int:
        return 10

    def check(self, requirements: JobRequirements, jobs: list[Job]) -> ValidationResult:
        if requirements.camping_shifts_required <= 0:
            return ValidationResult.ok()
        always_required_ids = requirements.always_required_category_ids
        camping_jobs = [job for job in jobs if job.category_id not in always_required_ids]
        if len(camping_jobs) >= requirements.camping_shifts_required:
            return ValidationResult.ok()
        items = [describe_option_shifts(option) for option in requirements.contributing_options]
        return ValidationResult.error(CAMPING_JOBS, f"You must select at least {natural_join(items)}")
