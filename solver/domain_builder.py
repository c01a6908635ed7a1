"""
Domain construction: which (time slot, room, staff) triples a session may take
"""
import random
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence, Tuple

from config import LECTURE, ROLE_MARKERS, ROOM_RULES
from models.data_models import (
    AssignmentValue, Catalog, Room, SessionVar, StaffKind, StaffRef
)

NO_TIME_SLOTS = "no time slots"
NO_MATCHING_ROOM = "no matching room"
NO_QUALIFIED_STAFF = "no qualified staff"


@dataclass(frozen=True)
class RoomRule:
    session_types: Tuple[str, ...]
    course_marker: Optional[str]
    room_types: Tuple[str, ...]

    def applies_to(self, session_type: str, course_code: str) -> bool:
        if session_type not in self.session_types:
            return False
        return self.course_marker is None or self.course_marker in course_code


def _normalize(room_type: str) -> str:
    return " ".join(room_type.split()).upper()


class RoomClassifier:
    """Maps a session's type and course code to the room types it may use."""

    def __init__(self, rules: Iterable = ROOM_RULES):
        self.rules = [r if isinstance(r, RoomRule) else RoomRule(tuple(r[0]), r[1], tuple(r[2]))
                      for r in rules]

    def rule_for(self, session_type: str, course_code: str) -> Optional[RoomRule]:
        for rule in self.rules:
            if rule.applies_to(session_type, course_code):
                return rule
        return None

    def required_room_types(self, session_type: str, course_code: str) -> Tuple[str, ...]:
        rule = self.rule_for(session_type, course_code)
        return rule.room_types if rule else ()

    def room_matches(self, room: Room, session_type: str, course_code: str) -> bool:
        accepted = {_normalize(t) for t in self.required_room_types(session_type, course_code)}
        return _normalize(room.room_type) in accepted


def eligible_rooms(var: SessionVar, catalog: Catalog, classifier: RoomClassifier) -> List[int]:
    """Indices of rooms large enough for the section and of a matching type."""
    return [
        i for i, room in enumerate(catalog.rooms)
        if room.capacity >= var.section.students
        and classifier.room_matches(room, var.session_type, var.course_code)
    ]


def eligible_staff(var: SessionVar, catalog: Catalog, allow_substitution: bool = True) -> List[StaffRef]:
    """
    Lecture: qualified instructors.
    Tutorial/Lab: TAs holding the matching role marker for the course, followed by
    qualified instructors when substitution is allowed.
    """
    instructors = [StaffRef(StaffKind.INSTRUCTOR, ins.id)
                   for ins in catalog.instructors if ins.is_qualified(var.course_code)]
    if var.session_type == LECTURE:
        staff = instructors
    else:
        marker = ROLE_MARKERS[var.session_type]
        staff = [StaffRef(StaffKind.TA, ta.id)
                 for ta in catalog.teaching_assistants if ta.has_role(var.course_code, marker)]
        if allow_substitution:
            staff += instructors

    # duplicate ids in the source tables would yield duplicate triples
    return list(dict.fromkeys(staff))


def build_domain(var: SessionVar, catalog: Catalog, classifier: RoomClassifier,
                 allow_substitution: bool = True) -> List[AssignmentValue]:
    rooms = eligible_rooms(var, catalog, classifier)
    staff = eligible_staff(var, catalog, allow_substitution)
    return [
        AssignmentValue(ts_idx, room_idx, member)
        for ts_idx in range(len(catalog.time_slots))
        for room_idx in rooms
        for member in staff
    ]


def build_domains(variables: Sequence[SessionVar], catalog: Catalog,
                  classifier: Optional[RoomClassifier] = None,
                  allow_substitution: bool = True,
                  seed: Optional[int] = None) -> List[List[AssignmentValue]]:
    """
    Domains for every variable, in variable order. With a seed each domain is
    shuffled by its own Random(seed + index), so the order is reproducible and
    membership is untouched.
    """
    classifier = classifier or RoomClassifier()
    domains = []
    for i, var in enumerate(variables):
        domain = build_domain(var, catalog, classifier, allow_substitution)
        if seed is not None:
            random.Random(seed + i).shuffle(domain)
        domains.append(domain)
    return domains


def diagnose_empty_domain(var: SessionVar, catalog: Catalog,
                          classifier: Optional[RoomClassifier] = None,
                          allow_substitution: bool = True) -> Optional[str]:
    """Why a variable's domain is empty, or None if it is not."""
    classifier = classifier or RoomClassifier()
    if not catalog.time_slots:
        return NO_TIME_SLOTS
    if not eligible_rooms(var, catalog, classifier):
        return NO_MATCHING_ROOM
    if not eligible_staff(var, catalog, allow_substitution):
        return NO_QUALIFIED_STAFF
    return None
