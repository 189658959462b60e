"""Tests for the registration window, deferred dues and job scope."""

from __future__ import annotations

import pytest

from enrollment.eligibility import (
    deferred_dues_allowed,
    ensure_can_register,
    is_job_selectable,
    jobs_in_scope,
    registration_window_open,
)
from enrollment.errors import RegistrationClosedError
from enrollment.models import UserRole
from tests.fixtures.catalog import make_catalog, make_category, make_job, make_option, make_site, make_user


class TestRegistrationWindow:
    """General registration, or early registration for allowed users."""

    def test_open_registration(self):
        assert registration_window_open(make_site(registration_open=True), make_user())

    def test_early_registration_requires_user_flag(self):
        site = make_site(registration_open=False, early_registration_open=True)
        assert not registration_window_open(site, make_user())
        assert registration_window_open(site, make_user(allow_early_registration=True))

    def test_closed_registration_raises(self):
        with pytest.raises(RegistrationClosedError, match="not currently open"):
            ensure_can_register(make_site(registration_open=False), make_user())

    def test_user_not_allowed_to_register_raises(self):
        with pytest.raises(RegistrationClosedError, match="not allowed"):
            ensure_can_register(make_site(), make_user(allow_registration=False))


class TestDeferredDues:
    def test_requires_site_and_user_permission(self):
        assert deferred_dues_allowed(
            make_site(allow_deferred_dues_payment=True), make_user(allow_deferred_dues_payment=True)
        )
        assert not deferred_dues_allowed(
            make_site(allow_deferred_dues_payment=True), make_user(allow_deferred_dues_payment=False)
        )
        assert not deferred_dues_allowed(
            make_site(allow_deferred_dues_payment=False), make_user(allow_deferred_dues_payment=True)
        )


class TestJobScope:
    """Offered jobs: always-required categories plus the selected options' categories."""

    def setup_method(self):
        self.catalog = make_catalog(
            options=[make_option("c1", job_category_ids=("kitchen",)), make_option("c2")],
            categories=[
                make_category("lnt", always_required=True),
                make_category("kitchen"),
                make_category("build"),
            ],
            jobs=[
                make_job("j-lnt", "lnt"),
                make_job("j-kitchen", "kitchen"),
                make_job("j-build", "build"),
            ],
        )

    def test_scope_includes_option_categories(self):
        assert {j.id for j in jobs_in_scope(self.catalog, {"c1"})} == {"j-lnt", "j-kitchen"}

    def test_scope_with_only_always_required(self):
        assert {j.id for j in jobs_in_scope(self.catalog, {"c2"})} == {"j-lnt"}

    def test_no_scoping_categories_offers_everything(self):
        catalog = make_catalog(categories=[make_category("cat1")], jobs=[make_job("j1"), make_job("j2")])
        assert len(jobs_in_scope(catalog, set())) == 2

    def test_staff_only_category_hidden_from_participants(self):
        catalog = make_catalog(categories=[make_category("ops", staff_only=True)], jobs=[make_job("j1", "ops")])
        job = catalog.jobs[0]

        assert not is_job_selectable(catalog, job, make_user())
        assert not is_job_selectable(catalog, job, None)
        assert is_job_selectable(catalog, job, make_user(role=UserRole.STAFF))
        assert is_job_selectable(catalog, job, make_user(role=UserRole.ADMIN))
