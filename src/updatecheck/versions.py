"""Version string validation and ordering.

Versions are dot-separated non-negative integers (``"0.1.21"``). Tuples of
different length compare as if the shorter one were padded with zeros, so
``"1.2"`` and ``"1.2.0"`` are equal.

Callers are expected to check input with :func:`is_valid_version` first.
:func:`compare_versions` still accepts anything: a segment that is not all
digits counts as ``0``.
"""

from __future__ import annotations

import functools
import re
from itertools import zip_longest

_SEGMENT = re.compile(r"[0-9]+")


def is_valid_version(version: str) -> bool:
    """True iff every ``.``-delimited segment is a base-10 integer."""
    if not version:
        return False
    return all(_SEGMENT.fullmatch(segment) for segment in version.split("."))


def parse_version(version: str) -> tuple[int, ...]:
    return tuple(
        int(segment) if _SEGMENT.fullmatch(segment) else 0 for segment in version.split(".")
    )


def compare_versions(a: str, b: str) -> int:
    """Return -1, 0 or 1 as ``a`` is older than, equal to or newer than ``b``."""
    for left, right in zip_longest(parse_version(a), parse_version(b), fillvalue=0):
        if left != right:
            return 1 if left > right else -1
    return 0


# Ascending sort key: sorted(versions, key=version_sort_key)
version_sort_key = functools.cmp_to_key(compare_versions)
