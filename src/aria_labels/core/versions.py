"""
Version string comparison.

Follows the rules plugin hosts use for release tags: versions are split
into numeric and alphabetic parts, numbers compare numerically and the
known suffixes order as ``dev < alpha < beta < RC < (number) < pl``.
"""

import re
from typing import List, Union

_SPECIAL_ORDER = {
    "dev": 0,
    "alpha": 1,
    "a": 1,
    "beta": 2,
    "b": 2,
    "rc": 3,
    "#": 4,
    "pl": 5,
    "p": 5,
}
_UNKNOWN = -1

Part = Union[int, str]


def strip_tag_prefix(tag: str) -> str:
    """Turn a release tag such as ``v1.2.0`` into a version string."""
    return (tag or "").strip().lstrip("v")


def canonicalize(version: str) -> List[Part]:
    """Split a version into numeric and alphabetic parts."""
    version = re.sub(r"[^0-9A-Za-z]", ".", version.strip())
    # Separate runs of digits from runs of letters: 1.0rc1 -> 1.0.rc.1
    version = re.sub(r"(?<=\d)(?=[^\d.])|(?<=[^\d.])(?=\d)", ".", version)

    parts: List[Part] = []
    for piece in version.split("."):
        if not piece:
            continue
        parts.append(int(piece) if piece.isdigit() else piece.lower())
    return parts


def _rank(part: Part) -> int:
    if isinstance(part, int):
        return _SPECIAL_ORDER["#"]
    return _SPECIAL_ORDER.get(part, _UNKNOWN)


def _compare_parts(left: Part, right: Part) -> int:
    if isinstance(left, int) and isinstance(right, int):
        return (left > right) - (left < right)
    return (_rank(left) > _rank(right)) - (_rank(left) < _rank(right))


def compare_versions(left: str, right: str) -> int:
    """
    Compare two version strings.

    Returns:
        -1 if left < right, 0 if equal, 1 if left > right
    """
    a, b = canonicalize(left), canonicalize(right)

    for x, y in zip(a, b):
        result = _compare_parts(x, y)
        if result:
            return result

    # A longer version wins when its next part is a number or "pl";
    # a trailing pre-release suffix makes it older.
    if len(a) > len(b):
        return _compare_leftover(a[len(b)])
    if len(b) > len(a):
        return -_compare_leftover(b[len(a)])
    return 0


def _compare_leftover(part: Part) -> int:
    if isinstance(part, int):
        return 1
    return _compare_parts(part, "#")


def is_newer(remote_tag: str, installed: str) -> bool:
    """Whether a remote release tag is newer than the installed version."""
    remote = strip_tag_prefix(remote_tag)
    if not remote:
        return False
    return compare_versions(remote, installed or "0") > 0
