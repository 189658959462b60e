"""Registration window checks and job scoping.

Decides whether a user may start registering at all, and which jobs a
registration may draw from given the selected camping options and the user's
role.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from .capacity import job_has_capacity
from .catalog import CatalogSnapshot
from .errors import RegistrationClosedError
from .models import Job, SiteConfig, UserAccount

logger = logging.getLogger(__name__)


def registration_window_open(site: SiteConfig, user: UserAccount) -> bool:
    """General registration is open, or early registration is open and the user is allowed in early."""
    if site.registration_open:
        return True
    return site.early_registration_open and user.allow_early_registration


def ensure_can_register(site: SiteConfig, user: UserAccount) -> None:
    """Raise RegistrationClosedError if the user may not register now."""
    if not user.allow_registration:
        logger.info(f"User {user.id} is not allowed to register")
        raise RegistrationClosedError("Your account is not allowed to register")
    if not registration_window_open(site, user):
        logger.info(f"Registration window closed for user {user.id}")
        raise RegistrationClosedError("Registration is not currently open")


def deferred_dues_allowed(site: SiteConfig, user: UserAccount) -> bool:
    """Paying later requires permission from both the site and the user's account."""
    return site.allow_deferred_dues_payment and user.allow_deferred_dues_payment


def scoped_category_ids(catalog: CatalogSnapshot, camping_option_ids: Iterable[str]) -> frozenset[str]:
    """Categories whose jobs are offered: always-required ones plus those of the selected options."""
    ids = {c.id for c in catalog.job_categories if c.always_required}
    for option in catalog.selected_options(camping_option_ids):
        ids.update(option.job_category_ids)
    return frozenset(ids)


def jobs_in_scope(catalog: CatalogSnapshot, camping_option_ids: Iterable[str]) -> list[Job]:
    """Jobs offered for the current option selection.

    When nothing scopes the jobs (no always-required categories and no
    categories on the selected options) every job is offered.
    """
    category_ids = scoped_category_ids(catalog, camping_option_ids)
    if not category_ids:
        return list(catalog.jobs)
    return [j for j in catalog.jobs if j.category_id in category_ids]


def job_visible_to(catalog: CatalogSnapshot, job: Job, user: UserAccount | None) -> bool:
    """Staff-only categories are hidden from participants."""
    category = catalog.category_by_id.get(job.category_id)
    if category is None or not category.staff_only:
        return True
    return user is not None and user.role.is_staff_or_admin


def is_job_selectable(catalog: CatalogSnapshot, job: Job, user: UserAccount | None) -> bool:
    return job_has_capacity(job) and job_visible_to(catalog, job, user)
