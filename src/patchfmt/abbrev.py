"""Object-id abbreviation used in raw output and `index` lines."""

from __future__ import annotations

from collections.abc import Callable

DEFAULT_ABBREV = 7
MIN_ABBREV = 4


def shorten_hash(object_id: str, length: int = DEFAULT_ABBREV) -> str:
    """Return the leading `length` characters of `object_id`.

    Lengths below MIN_ABBREV are clamped up, matching git's `--abbrev`.
    """

    n = max(MIN_ABBREV, int(length))
    return object_id[:n]


def full_index(object_id: str) -> str:
    return object_id


def abbreviator(length: int | None = None, *, full: bool = False) -> Callable[[str], str]:
    """Build a one-argument abbreviation callable for the renderer."""

    if full:
        return full_index
    if length is None or length == DEFAULT_ABBREV:
        return shorten_hash
    n = max(MIN_ABBREV, int(length))

    def _abbrev(object_id: str) -> str:
        return shorten_hash(object_id, n)

    return _abbrev
