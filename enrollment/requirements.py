"""Work-shift requirement calculation.

The number of jobs a registration must include is the sum of the selected
camping options' ``work_shifts_required`` plus one job for every
always-required job category.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from .catalog import CatalogSnapshot
from .models import CampingOption, JobCategory


@dataclass(frozen=True)
class JobRequirements:
    """Requirement breakdown for a set of selected camping options."""

    camping_shifts_required: int
    always_required_categories: tuple[JobCategory, ...]
    contributing_options: tuple[CampingOption, ...]

    @property
    def always_required_count(self) -> int:
        return len(self.always_required_categories)

    @property
    def total_required(self) -> int:
        return self.camping_shifts_required + self.always_required_count

    @property
    def always_required_category_ids(self) -> frozenset[str]:
        return frozenset(c.id for c in self.always_required_categories)


def compute_requirements(catalog: CatalogSnapshot, camping_option_ids: Iterable[str]) -> JobRequirements:
    """Compute job requirements for the selected camping options.

    Unknown option ids contribute nothing. The result depends only on the set
    of selected ids, never on the order they were selected in.

    Args:
        catalog: Catalog snapshot
        camping_option_ids: Currently selected camping option ids

    Returns:
        JobRequirements with per-source breakdown
    """
    selected = catalog.selected_options(camping_option_ids)
    return JobRequirements(
        camping_shifts_required=sum(o.work_shifts_required for o in selected),
        always_required_categories=tuple(c for c in catalog.job_categories if c.always_required),
        contributing_options=tuple(o for o in selected if o.work_shifts_required > 0),
    )
