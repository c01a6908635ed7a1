"""Data models package"""
from .data_models import (
    TimeSlot, Room, Instructor, TeachingAssistant, Section, Course, Catalog,
    StaffKind, StaffRef, SessionVar, AssignmentValue, SolveStatus, CSPResult
)

__all__ = [
    'TimeSlot', 'Room', 'Instructor', 'TeachingAssistant', 'Section', 'Course',
    'Catalog', 'StaffKind', 'StaffRef', 'SessionVar', 'AssignmentValue',
    'SolveStatus', 'CSPResult'
]
