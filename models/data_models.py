"""
Data models for the timetable scheduling system
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, FrozenSet, List, Mapping, Optional, Tuple

from config import LECTURE, UNCONSTRAINED_SPECIALIZATIONS


@dataclass(frozen=True)
class TimeSlot:
    id: int
    day: str
    start: str
    end: str


@dataclass(frozen=True)
class Room:
    id: str
    building: str
    space: str
    capacity: int
    room_type: str


@dataclass(frozen=True)
class Instructor:
    id: int
    name: str
    preferred_slots: str = ""
    qualified_courses: FrozenSet[str] = frozenset()

    def is_qualified(self, course_code: str) -> bool:
        return course_code in self.qualified_courses


@dataclass(frozen=True)
class TeachingAssistant:
    id: int
    name: str
    preferred_slots: str = ""
    roles: Mapping[str, FrozenSet[str]] = field(default_factory=dict, hash=False)

    def has_role(self, course_code: str, marker: str) -> bool:
        return marker in self.roles.get(course_code, frozenset())


@dataclass(frozen=True)
class Section:
    faculty: str
    year: int
    department: str
    group: int
    number: int
    students: int

    @property
    def key(self) -> str:
        parts = [self.faculty, f"Y{self.year}", self.department, f"G{self.group}", f"S{self.number}"]
        return "-".join(p for p in parts if p)


@dataclass(frozen=True)
class Course:
    year: int
    semester: int
    specialization: str
    code: str
    title: str
    lectures: int
    tutorials: int
    labs: int

    @property
    def total_sessions(self) -> int:
        return self.lectures + self.tutorials + self.labs

    @property
    def is_unconstrained(self) -> bool:
        return self.specialization.strip().upper() in UNCONSTRAINED_SPECIALIZATIONS


@dataclass(frozen=True)
class Catalog:
    """Loaded entity tables, read-only once built."""
    time_slots: Tuple[TimeSlot, ...] = ()
    rooms: Tuple[Room, ...] = ()
    instructors: Tuple[Instructor, ...] = ()
    teaching_assistants: Tuple[TeachingAssistant, ...] = ()
    sections: Tuple[Section, ...] = ()
    courses: Tuple[Course, ...] = ()

    def course(self, code: str) -> Optional[Course]:
        for c in self.courses:
            if c.code == code:
                return c
        return None

    def summary(self) -> str:
        return (f"{len(self.courses)} courses, {len(self.sections)} sections, "
                f"{len(self.instructors)} instructors, {len(self.teaching_assistants)} TAs, "
                f"{len(self.rooms)} rooms, {len(self.time_slots)} time slots")


class StaffKind(str, Enum):
    INSTRUCTOR = "Instructor"
    TA = "TA"


@dataclass(frozen=True)
class StaffRef:
    """Tagged staff reference, instructor and TA ids never share a namespace."""
    kind: StaffKind
    id: int


@dataclass(frozen=True)
class SessionVar:
    session_type: str
    course_code: str
    section: Section
    instance: int

    @property
    def var_id(self) -> str:
        return f"{self.course_code}_{self.section.key}_{self.session_type}_{self.instance}"

    @property
    def is_lecture(self) -> bool:
        return self.session_type == LECTURE


@dataclass(frozen=True)
class AssignmentValue:
    timeslot_index: int
    room_index: int
    staff: StaffRef


class SolveStatus(str, Enum):
    SUCCESS = "success"
    NOTHING_TO_SCHEDULE = "nothing to schedule"
    EMPTY_DOMAIN = "empty domain"
    INFEASIBLE = "infeasible"
    TIMED_OUT = "timed out"


@dataclass
class CSPResult:
    status: SolveStatus
    variables: List[SessionVar] = field(default_factory=list)
    assignments: Dict[int, AssignmentValue] = field(default_factory=dict)
    solve_seconds: float = 0.0
    nodes: int = 0
    backtracks: int = 0
    failed_variable: Optional[SessionVar] = None
    reason: str = ""

    @property
    def success(self) -> bool:
        return self.status is SolveStatus.SUCCESS
