"""
Expands course requirements into session variables
"""
from typing import List

from config import LAB, LECTURE, TUTORIAL
from models.data_models import Catalog, Course, Section, SessionVar


def section_applies(course: Course, section: Section) -> bool:
    """A section takes a course in its year when the specialization is open or matches."""
    if section.year != course.year:
        return False
    return course.is_unconstrained or not section.department or section.department == course.specialization


def build_session_variables(catalog: Catalog) -> List[SessionVar]:
    """One variable per required lecture, tutorial and lab instance of every applicable section."""
    variables = []

    for course in catalog.courses:
        if course.total_sessions == 0:
            continue

        for section in catalog.sections:
            if not section_applies(course, section):
                continue
            for session_type, count in ((LECTURE, course.lectures),
                                        (TUTORIAL, course.tutorials),
                                        (LAB, course.labs)):
                for instance in range(count):
                    variables.append(SessionVar(session_type, course.code, section, instance))

    return variables
