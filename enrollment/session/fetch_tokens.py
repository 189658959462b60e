"""Generation tokens for in-flight fetches.

Every fetch takes a token for its key. When the fetch completes, the result is
applied only if the token is still the latest one for that key. Invalidating a
key makes every outstanding token for it stale.
"""

from __future__ import annotations


class FetchGenerations:
    def __init__(self) -> None:
        self._generations: dict[str, int] = {}
        self._in_flight: dict[str, int] = {}

    def begin(self, key: str) -> int:
        """Start a fetch for key and return its generation."""
        generation = self._generations.get(key, 0) + 1
        self._generations[key] = generation
        self._in_flight[key] = generation
        return generation

    def is_current(self, key: str, generation: int) -> bool:
        return self._generations.get(key) == generation

    def finish(self, key: str, generation: int) -> None:
        if self._in_flight.get(key) == generation:
            del self._in_flight[key]

    def invalidate(self, prefix: str | None = None) -> None:
        """Make outstanding fetches stale. With a prefix, only keys under it."""
        for key in list(self._generations):
            if prefix is None or _matches(key, prefix):
                self._generations[key] += 1
                self._in_flight.pop(key, None)

    def is_loading(self, key: str) -> bool:
        """True while a fetch for key (or any key under it) is in flight."""
        return any(_matches(k, key) for k in self._in_flight)


def _matches(key: str, prefix: str) -> bool:
    # "custom_fields" covers "custom_fields:opt-1"
    return key == prefix or key.startswith(f"{prefix}:")
