"""
Qt-free helpers that arrange exported sessions into a day x time grid
"""
import re
from typing import Dict, List, Tuple

WEEKDAYS = ["Saturday", "Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday"]

_TIME = re.compile(r"(\d{1,2}):(\d{2})\s*([AaPp][Mm])?")


def parse_time(time_str: str) -> int:
    """Minutes since midnight of the start of '09:00 - 10:30' or '9:00 AM - ...'; 0 if unparsable."""
    match = _TIME.search(time_str)
    if not match:
        return 0
    hours, mins = int(match.group(1)), int(match.group(2))
    period = (match.group(3) or "").upper()
    if period == "PM" and hours != 12:
        hours += 12
    elif period == "AM" and hours == 12:
        hours = 0
    return hours * 60 + mins


def _sessions(schedule: dict):
    for year_data in schedule.values():
        for sessions in year_data.values():
            yield from sessions


def collect_days(schedule: dict) -> List[str]:
    """Days in weekday order, unknown day names after them in order of appearance."""
    seen = list(dict.fromkeys(s.get('day', '') for s in _sessions(schedule)))
    known = [d for d in WEEKDAYS if d in seen]
    return known + [d for d in seen if d not in WEEKDAYS]


def collect_times(schedule: dict) -> List[str]:
    times = {s.get('time', '') for s in _sessions(schedule)}
    return sorted(times, key=lambda t: (parse_time(t), t))


def group_sessions(sessions: List[dict]) -> Dict[Tuple[str, str], List[dict]]:
    grid: Dict[Tuple[str, str], List[dict]] = {}
    for session in sessions:
        grid.setdefault((session.get('day', ''), session.get('time', '')), []).append(session)
    return grid


def sort_section_key(section: str):
    """Natural sort: 'Y1-CS-G2-S10' after 'Y1-CS-G2-S9'."""
    return [int(part) if part.isdigit() else part for part in re.split(r"(\d+)", section)]
