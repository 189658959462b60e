"""Tests for fetch generation tokens."""

from __future__ import annotations

from enrollment.session import FetchGenerations


class TestFetchGenerations:
    def test_latest_fetch_is_current(self):
        fetches = FetchGenerations()

        first = fetches.begin("custom_fields:c1")
        second = fetches.begin("custom_fields:c1")

        assert not fetches.is_current("custom_fields:c1", first)
        assert fetches.is_current("custom_fields:c1", second)

    def test_invalidate_prefix_marks_fetches_stale(self):
        fetches = FetchGenerations()
        c1 = fetches.begin("custom_fields:c1")
        other = fetches.begin("jobs")

        fetches.invalidate("custom_fields")

        assert not fetches.is_current("custom_fields:c1", c1)
        assert fetches.is_current("jobs", other)

    def test_is_loading_tracks_in_flight(self):
        fetches = FetchGenerations()
        generation = fetches.begin("custom_fields:c1")

        assert fetches.is_loading("custom_fields")
        assert fetches.is_loading("custom_fields:c1")
        assert not fetches.is_loading("custom_fields:c2")

        fetches.finish("custom_fields:c1", generation)

        assert not fetches.is_loading("custom_fields")

    def test_finishing_stale_fetch_keeps_newer_in_flight(self):
        fetches = FetchGenerations()
        old = fetches.begin("k")
        fetches.begin("k")

        fetches.finish("k", old)

        assert fetches.is_loading("k")
