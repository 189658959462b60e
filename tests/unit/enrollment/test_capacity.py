"""Tests for capacity filtering of jobs and camping options."""

from __future__ import annotations

from enrollment.capacity import (
    is_option_selectable,
    job_has_capacity,
    option_has_capacity,
    partition_camping_options,
    partition_jobs,
)
from tests.fixtures.catalog import make_job, make_option


class TestJobCapacity:
    """Jobs are full when current registrations reach the maximum."""

    def test_job_below_capacity_is_available(self):
        assert job_has_capacity(make_job(max_registrations=2, current_registrations=1))

    def test_job_at_capacity_is_full(self):
        assert not job_has_capacity(make_job(max_registrations=2, current_registrations=2))

    def test_job_with_zero_max_is_unlimited(self):
        assert job_has_capacity(make_job(max_registrations=0, current_registrations=50))

    def test_partition_preserves_order(self):
        jobs = [
            make_job("j1", max_registrations=1, current_registrations=1),
            make_job("j2"),
            make_job("j3", max_registrations=1, current_registrations=1),
            make_job("j4"),
        ]

        partition = partition_jobs(jobs)

        assert [j.id for j in partition.available] == ["j2", "j4"]
        assert [j.id for j in partition.full] == ["j1", "j3"]
        assert partition.available_ids == frozenset({"j2", "j4"})


class TestCampingOptionCapacity:
    """Camping options with max_signups 0 are unlimited."""

    def test_unlimited_option_always_has_capacity(self):
        assert option_has_capacity(make_option(max_signups=0, current_registrations=500))

    def test_limited_option_fills_up(self):
        assert option_has_capacity(make_option(max_signups=3, current_registrations=2))
        assert not option_has_capacity(make_option(max_signups=3, current_registrations=3))

    def test_partition_camping_options(self):
        options = [make_option("c1", max_signups=1, current_registrations=1), make_option("c2")]

        partition = partition_camping_options(options)

        assert [o.id for o in partition.available] == ["c2"]
        assert [o.id for o in partition.full] == ["c1"]

    def test_disabled_option_is_not_selectable(self):
        assert not is_option_selectable(make_option(enabled=False))
        assert not is_option_selectable(make_option(max_signups=1, current_registrations=1))
        assert is_option_selectable(make_option())
