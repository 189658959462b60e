"""Capacity filtering for jobs and camping options.

Full items stay visible for transparency but are never selectable and never
count toward a requirement. Capacity is read from a snapshot with no locking;
the submission API is the authority on the last free slot.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import Generic, TypeVar

from .models import CampingOption, Job

T = TypeVar("T")


@dataclass(frozen=True)
class Partition(Generic[T]):
    """Items split into available and full, each preserving input order."""

    available: tuple[T, ...]
    full: tuple[T, ...]

    @property
    def available_ids(self) -> frozenset[str]:
        return frozenset(getattr(item, "id") for item in self.available)


def job_has_capacity(job: Job) -> bool:
    # A non-positive cap means the job is not capacity limited
    if job.max_registrations <= 0:
        return True
    return job.current_registrations < job.max_registrations


def option_has_capacity(option: CampingOption) -> bool:
    if option.is_unlimited:
        return True
    return option.current_registrations < option.max_signups


def _partition(items: Iterable[T], has_capacity: Callable[[T], bool]) -> Partition[T]:
    available: list[T] = []
    full: list[T] = []
    for item in items:
        (available if has_capacity(item) else full).append(item)
    return Partition(available=tuple(available), full=tuple(full))


def partition_jobs(jobs: Iterable[Job]) -> Partition[Job]:
    """Split jobs into available and full."""
    return _partition(jobs, job_has_capacity)


def partition_camping_options(options: Iterable[CampingOption]) -> Partition[CampingOption]:
    """Split camping options into available and full (max_signups 0 = unlimited)."""
    return _partition(options, option_has_capacity)


def is_option_selectable(option: CampingOption) -> bool:
    """Enabled and not full."""
    return option.enabled and option_has_capacity(option)
