"""Configuration settings for the timetable scheduler."""
from dataclasses import dataclass
from typing import Optional

# Data sources
DEFAULT_DATA_DIR = 'data'
DATABASE_SUFFIXES = ('.db', '.sqlite', '.sqlite3')

# CSV input files, keyed by table
CSV_FILES = {
    'time_slots': 'TimeSlots.csv',
    'rooms': 'Halls.csv',
    'instructors': 'Instructor.csv',
    'teaching_assistants': 'TAs.csv',
    'sections': 'Sections.csv',
    'courses': 'Courses.csv',
}

# Session types
LECTURE = 'Lecture'
TUTORIAL = 'Tutorial'
LAB = 'Lab'
SESSION_TYPES = (LECTURE, TUTORIAL, LAB)

# TA role markers
ROLE_MARKERS = {TUTORIAL: 'TUT', LAB: 'LAB'}

# Course specializations that apply to every department of the year
UNCONSTRAINED_SPECIALIZATIONS = {'N/A', 'ANY', 'ALL', ''}

# Room classification table, first match wins.
# (session types, course code marker or None, accepted room types)
ROOM_RULES = [
    ((LECTURE, TUTORIAL), None, ('Classroom', 'Hall', 'Theater', 'Theatre')),
    ((LAB,), 'PHY', ('PHY_LAB',)),
    ((LAB,), 'Drawing', ('Drawing Studio', 'FoE Drawing Lab')),
    ((LAB,), None, ('Computer Lab', 'Lab')),
]

# Search defaults
ORDERINGS = ('static', 'mrv')
DEFAULT_ORDERING = 'mrv'
DEFAULT_SEED = 123

# Exit codes
EXIT_SUCCESS = 0
EXIT_INFEASIBLE = 1
EXIT_NOTHING_TO_SCHEDULE = 2
EXIT_TIMED_OUT = 3
EXIT_DATA_ERROR = 4


@dataclass
class SolverSettings:
    ordering: str = DEFAULT_ORDERING
    seed: int = DEFAULT_SEED
    shuffle: bool = True
    time_limit: Optional[float] = None
    allow_substitution: bool = True
    strict_staff: bool = False
