"""
Rendering of solver results: console text and JSON
"""
import json
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List

from models.data_models import Catalog, CSPResult, SolveStatus, StaffKind


@dataclass
class ScheduleRecord:
    section: str
    year: int
    department: str
    group: int
    section_number: int
    course_code: str
    course_title: str
    session_type: str
    instance: int
    day: str
    start: str
    end: str
    room: str
    staff: str
    staff_kind: str


def build_records(result: CSPResult, catalog: Catalog) -> List[ScheduleRecord]:
    """One record per session variable of a successful result, in variable order."""
    if not result.success:
        return []

    instructors = {ins.id: ins.name for ins in catalog.instructors}
    tas = {ta.id: ta.name for ta in catalog.teaching_assistants}
    titles = {c.code: c.title for c in catalog.courses}

    records = []
    for i, v in enumerate(result.variables):
        a = result.assignments[i]
        ts = catalog.time_slots[a.timeslot_index]
        rm = catalog.rooms[a.room_index]
        names = instructors if a.staff.kind is StaffKind.INSTRUCTOR else tas
        sec = v.section

        records.append(ScheduleRecord(
            section=sec.key,
            year=sec.year,
            department=sec.department,
            group=sec.group,
            section_number=sec.number,
            course_code=v.course_code,
            course_title=titles.get(v.course_code, v.course_code),
            session_type=v.session_type,
            instance=v.instance,
            day=ts.day,
            start=ts.start,
            end=ts.end,
            room=rm.id,
            staff=names.get(a.staff.id, str(a.staff.id)),
            staff_kind=a.staff.kind.value
        ))

    return records


def format_record(r: ScheduleRecord) -> str:
    return (
        f"Year: {r.year}, Dept: {r.department}, Group: {r.group}, Section: {r.section_number}\n"
        f"Type: {r.session_type}, Course: {r.course_code}, Instance: {r.instance}\n"
        f"Time: {r.day} {r.start} - {r.end}\n"
        f"Room: {r.room}\n"
        f"Teacher: {r.staff}\n"
        f"------------------------"
    )


def failure_message(result: CSPResult) -> str:
    if result.status is SolveStatus.NOTHING_TO_SCHEDULE:
        return "Nothing to schedule: no sessions were generated from the catalog."
    if result.status is SolveStatus.EMPTY_DOMAIN:
        var_id = result.failed_variable.var_id if result.failed_variable else "?"
        return f"No feasible timetable: {var_id} has {result.reason}."
    if result.status is SolveStatus.TIMED_OUT:
        return f"Search timed out after {result.solve_seconds:.2f}s without a complete timetable."
    return "No feasible timetable found without conflicts."


def generate_json(result: CSPResult, catalog: Catalog) -> dict:
    """Schedule organised by year and section, with run statistics"""
    organized: Dict[str, Dict[str, list]] = {}

    for r in build_records(result, catalog):
        session_data = {
            "code": r.course_code,
            "name": r.course_title,
            "type": r.session_type,
            "instance": r.instance,
            "day": r.day,
            "time": f"{r.start} - {r.end}",
            "startTime": r.start,
            "endTime": r.end,
            "staff": r.staff,
            "staffKind": r.staff_kind,
            "room": r.room
        }
        organized.setdefault(str(r.year), {}).setdefault(r.section, []).append(session_data)

    json_data = {
        "success": result.success,
        "status": result.status.value,
        "stats": {
            "totalCourses": len({v.course_code for v in result.variables}),
            "totalSessions": len(result.variables),
            "nodes": result.nodes,
            "backtracks": result.backtracks,
            "solveTime": result.solve_seconds
        },
        "schedule": organized
    }
    if not result.success:
        json_data["reason"] = failure_message(result)

    return json_data


def write_json(json_data: dict, path):
    with open(Path(path), 'w', encoding='utf-8') as f:
        json.dump(json_data, f, indent=2)
