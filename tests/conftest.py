from pathlib import Path

import pytest

from config import SolverSettings
from models.data_models import (
    Catalog, Course, Instructor, Room, Section, TeachingAssistant, TimeSlot
)

SAMPLE_DATA = Path(__file__).resolve().parent.parent / "data"


def slot(i, day="Sunday"):
    return TimeSlot(id=i, day=day, start=f"{8 + i:02d}:00", end=f"{9 + i:02d}:00")


def room(space, capacity=100, room_type="Classroom", building="Main"):
    return Room(id=f"{building} {space}", building=building, space=space,
                capacity=capacity, room_type=room_type)


def section(number=1, students=30, year=1, department="", group=1, faculty="CSIT"):
    return Section(faculty=faculty, year=year, department=department, group=group,
                   number=number, students=students)


def course(code, lectures=1, tutorials=0, labs=0, year=1, specialization="N/A", title=None):
    return Course(year=year, semester=1, specialization=specialization, code=code,
                  title=title or f"{code} title", lectures=lectures, tutorials=tutorials, labs=labs)


def instructor(i, *codes, name=None):
    return Instructor(id=i, name=name or f"Instructor {i}", qualified_courses=frozenset(codes))


def ta(i, roles, name=None):
    return TeachingAssistant(id=i, name=name or f"TA {i}",
                             roles={code: frozenset(markers) for code, markers in roles.items()})


def make_catalog(time_slots=(), rooms=(), instructors=(), tas=(), sections=(), courses=()):
    return Catalog(
        time_slots=tuple(time_slots),
        rooms=tuple(rooms),
        instructors=tuple(instructors),
        teaching_assistants=tuple(tas),
        sections=tuple(sections),
        courses=tuple(courses)
    )


@pytest.fixture
def unshuffled():
    return SolverSettings(shuffle=False)


@pytest.fixture
def department_catalog():
    """Two years, three departments, every session type, comfortably feasible."""
    return make_catalog(
        time_slots=[slot(i, day) for day in ("Sunday", "Monday", "Tuesday") for i in range(4)],
        rooms=[
            room("A101", 60),
            room("A102", 40),
            room("Hall 1", 150, "Hall"),
            room("Lab 1", 40, "Computer Lab"),
            room("Lab 2", 40, "lab"),
            room("Physics", 40, "PHY_LAB"),
            room("Studio", 40, "Drawing Studio"),
        ],
        instructors=[
            instructor(1, "CSC111", "CSC211"),
            instructor(2, "PHY113", "MTH111"),
            instructor(3, "Drawing101", "MTH111"),
            instructor(4, "AID211"),
        ],
        tas=[
            ta(1, {"CSC111": {"TUT", "LAB"}, "CSC211": {"LAB"}}),
            ta(2, {"PHY113": {"LAB"}, "MTH111": {"TUT"}}),
            ta(3, {"Drawing101": {"LAB"}, "AID211": {"TUT", "LAB"}}),
        ],
        sections=[
            section(1, 35),
            section(2, 30),
            section(1, 30, year=2, department="CSC"),
            section(1, 25, year=2, department="AID"),
        ],
        courses=[
            course("CSC111", 1, 1, 1),
            course("PHY113", 1, 0, 1),
            course("MTH111", 2, 1, 0),
            course("Drawing101", 0, 0, 1),
            course("CSC211", 1, 0, 1, year=2, specialization="CSC"),
            course("AID211", 1, 1, 1, year=2, specialization="AID"),
        ],
    )
