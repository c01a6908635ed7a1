"""
Field parsers shared by the CSV and SQLite catalog loaders
"""
import re
from typing import Dict, FrozenSet, Optional

from config import ROLE_MARKERS

_TA_ROLE_PATTERN = re.compile(r"([^,(]+?)\s*\(([^)]*)\)")
_KNOWN_MARKERS = frozenset(ROLE_MARKERS.values())


class DataLoadError(Exception):
    """Raised when a catalog source is missing or unreadable."""


def parse_int(value) -> Optional[int]:
    """Parse an integer cell, tolerating '3.0' style floats. None when blank or bad."""
    if value is None:
        return None
    text = str(value).strip()
    if not text:
        return None
    try:
        return int(text)
    except ValueError:
        pass
    try:
        number = float(text)
    except ValueError:
        return None
    if number != number or not number.is_integer():
        return None
    return int(number)


def parse_qualified_courses(text: str) -> FrozenSet[str]:
    """'CSC111, MTH111' -> {'CSC111', 'MTH111'}"""
    if not text:
        return frozenset()
    return frozenset(token.strip() for token in str(text).split(',') if token.strip())


def parse_role_markers(text: str) -> FrozenSet[str]:
    # 'TUT', 'LAB', 'TUT/LAB', 'TUT & LAB' ...
    tokens = re.split(r"[^A-Za-z]+", text.upper())
    return frozenset(t for t in tokens if t in _KNOWN_MARKERS)


def parse_ta_roles(text: str) -> Dict[str, FrozenSet[str]]:
    """
    Parse a TA qualification cell such as 'CSC111 (TUT), PHY113 (LAB)'.
    Repeated course codes merge their markers; tokens without a role are ignored.
    """
    roles: Dict[str, FrozenSet[str]] = {}
    if not text:
        return roles
    for match in _TA_ROLE_PATTERN.finditer(str(text)):
        course = match.group(1).strip()
        markers = parse_role_markers(match.group(2))
        if not course or not markers:
            continue
        roles[course] = roles.get(course, frozenset()) | markers
    return roles
