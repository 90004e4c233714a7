"""
Version Comparison

Numeric, segment-wise comparison of dotted version strings.
"""

import re
from functools import cmp_to_key
from typing import Iterable, List, Optional, Tuple

_SEGMENT = re.compile(r"\d+")
_VERSION_IN_TEXT = re.compile(r"\d+(?:\.\d+)+")


def parse_version(version: str) -> Tuple[int, ...]:
    """
    Split a version string into integer segments.

    Non-numeric text between segments is ignored, so "10.0.20348.0" and
    "v10.0.20348" both parse.

    Args:
        version: Version string

    Returns:
        Tuple of integer segments (empty if none found)
    """
    return tuple(int(s) for s in _SEGMENT.findall(version))


def compare_version(left: str, right: str) -> int:
    """
    Compare two versions numerically, segment by segment.

    Missing trailing segments count as zero.

    Returns:
        Negative if left < right, zero if equal, positive if left > right
    """
    a = list(parse_version(left))
    b = list(parse_version(right))
    width = max(len(a), len(b))
    a += [0] * (width - len(a))
    b += [0] * (width - len(b))

    for x, y in zip(a, b):
        if x != y:
            return -1 if x < y else 1
    return 0


def sort_versions(versions: Iterable[str], descending: bool = True) -> List[str]:
    """Sort version strings numerically."""
    return sorted(versions, key=cmp_to_key(compare_version), reverse=descending)


def extract_version(text: str) -> Optional[str]:
    """
    Pull the first dotted version out of tool output.

    ``"rustc 1.81.0 (eeb90cda1 2024-09-04)"`` gives ``"1.81.0"``.
    """
    match = _VERSION_IN_TEXT.search(text or "")
    return match.group(0) if match else None
