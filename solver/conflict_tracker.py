"""
Occupancy bookkeeping for the backtracking search
"""
from collections import defaultdict
from typing import Dict, Set

from models.data_models import AssignmentValue, Section, SessionVar, StaffRef


class _SlotUsage:
    __slots__ = ("rooms", "sections", "lecture_staff", "other_staff")

    def __init__(self):
        self.rooms: Set[int] = set()
        self.sections: Set[Section] = set()
        self.lecture_staff: Set[StaffRef] = set()
        self.other_staff: Set[StaffRef] = set()

    def is_empty(self) -> bool:
        return not (self.rooms or self.sections or self.lecture_staff or self.other_staff)


class ConflictTracker:
    """
    Per time slot: occupied rooms, occupied sections, and staff busy with
    lecture or non-lecture sessions. Lecture and non-lecture staff are kept
    apart; with strict_staff a member busy in either set is busy for both.
    """

    def __init__(self, strict_staff: bool = False):
        self.strict_staff = strict_staff
        self._slots: Dict[int, _SlotUsage] = defaultdict(_SlotUsage)

    def room_busy(self, timeslot_index: int, room_index: int) -> bool:
        usage = self._slots.get(timeslot_index)
        return usage is not None and room_index in usage.rooms

    def section_busy(self, timeslot_index: int, section: Section) -> bool:
        usage = self._slots.get(timeslot_index)
        return usage is not None and section in usage.sections

    def staff_busy(self, timeslot_index: int, staff: StaffRef, lecture: bool) -> bool:
        usage = self._slots.get(timeslot_index)
        if usage is None:
            return False
        if self.strict_staff:
            return staff in usage.lecture_staff or staff in usage.other_staff
        return staff in (usage.lecture_staff if lecture else usage.other_staff)

    def can_assign(self, var: SessionVar, value: AssignmentValue) -> bool:
        ts = value.timeslot_index
        return not (self.room_busy(ts, value.room_index)
                    or self.section_busy(ts, var.section)
                    or self.staff_busy(ts, value.staff, var.is_lecture))

    def occupy(self, var: SessionVar, value: AssignmentValue):
        usage = self._slots[value.timeslot_index]
        usage.rooms.add(value.room_index)
        usage.sections.add(var.section)
        staff_set = usage.lecture_staff if var.is_lecture else usage.other_staff
        staff_set.add(value.staff)

    def release(self, var: SessionVar, value: AssignmentValue):
        usage = self._slots.get(value.timeslot_index)
        if usage is None:
            raise ValueError(f"{var.var_id}: time slot {value.timeslot_index} is not occupied")
        staff_set = usage.lecture_staff if var.is_lecture else usage.other_staff
        if (value.room_index not in usage.rooms or var.section not in usage.sections
                or value.staff not in staff_set):
            raise ValueError(f"{var.var_id}: releasing {value} that was never occupied")
        usage.rooms.remove(value.room_index)
        usage.sections.remove(var.section)
        staff_set.remove(value.staff)
        if usage.is_empty():
            del self._slots[value.timeslot_index]

    def is_empty(self) -> bool:
        return not self._slots

    def clear(self):
        self._slots.clear()
