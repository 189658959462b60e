"""
Catalog snapshot used by the registration engine.

A snapshot is fetched once per session and never mutated. Loading the custom
fields of a newly selected camping option produces a new snapshot via
``with_custom_fields``.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Any

from .models import CampingOption, CustomField, Job, JobCategory, Shift


def _freeze(mapping: Mapping[str, tuple[CustomField, ...]]) -> Mapping[str, tuple[CustomField, ...]]:
    return MappingProxyType(dict(mapping))


@dataclass(frozen=True)
class CatalogSnapshot:
    """Immutable view of camping options, job categories, jobs, shifts and fields."""

    camping_options: tuple[CampingOption, ...] = ()
    job_categories: tuple[JobCategory, ...] = ()
    jobs: tuple[Job, ...] = ()
    shifts: tuple[Shift, ...] = ()
    custom_fields: Mapping[str, tuple[CustomField, ...]] = field(default_factory=lambda: _freeze({}))

    @classmethod
    def build(
        cls,
        camping_options: Iterable[CampingOption] = (),
        job_categories: Iterable[JobCategory] = (),
        jobs: Iterable[Job] = (),
        shifts: Iterable[Shift] = (),
        custom_fields: Iterable[CustomField] = (),
    ) -> CatalogSnapshot:
        """Build a snapshot from plain iterables, grouping fields by owning option."""
        grouped: dict[str, list[CustomField]] = {}
        for custom_field in custom_fields:
            grouped.setdefault(custom_field.camping_option_id, []).append(custom_field)
        return cls(
            camping_options=tuple(camping_options),
            job_categories=tuple(job_categories),
            jobs=tuple(jobs),
            shifts=tuple(shifts),
            custom_fields=_freeze({k: _sorted_fields(v) for k, v in grouped.items()}),
        )

    @classmethod
    def from_payloads(
        cls,
        camping_options: Iterable[dict[str, Any]] = (),
        job_categories: Iterable[dict[str, Any]] = (),
        jobs: Iterable[dict[str, Any]] = (),
        shifts: Iterable[dict[str, Any]] = (),
    ) -> CatalogSnapshot:
        """Parse raw API payloads (camelCase dicts) into a snapshot."""
        return cls.build(
            camping_options=[CampingOption.model_validate(o) for o in camping_options],
            job_categories=[JobCategory.model_validate(c) for c in job_categories],
            jobs=[Job.model_validate(j) for j in jobs],
            shifts=[Shift.model_validate(s) for s in shifts],
        )

    def with_custom_fields(self, camping_option_id: str, fields: Iterable[CustomField]) -> CatalogSnapshot:
        """Return a new snapshot with the fields of one camping option replaced."""
        updated = dict(self.custom_fields)
        updated[camping_option_id] = _sorted_fields(fields)
        return replace(self, custom_fields=_freeze(updated))

    # Lookups

    @property
    def option_by_id(self) -> dict[str, CampingOption]:
        return {o.id: o for o in self.camping_options}

    @property
    def category_by_id(self) -> dict[str, JobCategory]:
        return {c.id: c for c in self.job_categories}

    @property
    def job_by_id(self) -> dict[str, Job]:
        return {j.id: j for j in self.jobs}

    def has_fields_for(self, camping_option_id: str) -> bool:
        return camping_option_id in self.custom_fields

    def fields_for(self, camping_option_ids: Iterable[str]) -> list[CustomField]:
        """Custom fields owned by the given options, in catalog option order."""
        wanted = set(camping_option_ids)
        result: list[CustomField] = []
        for option in self.camping_options:
            if option.id in wanted:
                result.extend(self.custom_fields.get(option.id, ()))
        return result

    def selected_options(self, camping_option_ids: Iterable[str]) -> list[CampingOption]:
        """Selected options present in the catalog, in catalog order."""
        wanted = set(camping_option_ids)
        return [o for o in self.camping_options if o.id in wanted]


def _sorted_fields(fields: Iterable[CustomField]) -> tuple[CustomField, ...]:
    return tuple(sorted(fields, key=lambda f: f.order))
