"""
Database manager for reading the catalog from an SQLite database
"""
import logging
import sqlite3
from pathlib import Path
from typing import List

from database.parsing import (
    DataLoadError, parse_int, parse_qualified_courses, parse_ta_roles
)
from models.data_models import (
    Catalog, Course, Instructor, Room, Section, TeachingAssistant, TimeSlot
)

logger = logging.getLogger(__name__)

SCHEMA = """
    CREATE TABLE IF NOT EXISTS TimeSlots (
        TimeSlotID INTEGER PRIMARY KEY, Day TEXT, StartTime TEXT, EndTime TEXT
    );
    CREATE TABLE IF NOT EXISTS Rooms (
        Building TEXT, Space TEXT, Capacity INTEGER, RoomType TEXT
    );
    CREATE TABLE IF NOT EXISTS Instructors (
        InstructorID INTEGER PRIMARY KEY, Name TEXT, PreferredSlots TEXT, QualifiedCourses TEXT
    );
    CREATE TABLE IF NOT EXISTS TeachingAssistants (
        TAID INTEGER PRIMARY KEY, Name TEXT, PreferredSlots TEXT, QualifiedCourses TEXT
    );
    CREATE TABLE IF NOT EXISTS Sections (
        Faculty TEXT, Year INTEGER, Department TEXT, GroupNumber INTEGER,
        SectionNumber INTEGER, StudentCount INTEGER
    );
    CREATE TABLE IF NOT EXISTS Courses (
        Year INTEGER, Semester INTEGER, Specialization TEXT, CourseCode TEXT, Title TEXT,
        LectureSlots INTEGER, TutorialSlots INTEGER, LabSlots INTEGER
    );
"""


class DatabaseManager:
    def __init__(self, db_file: str):
        self.db_file = db_file
        try:
            # mode=rw: never create an empty database for a mistyped path
            uri = Path(db_file).resolve().as_uri() + "?mode=rw"
            self.connection = sqlite3.connect(uri, uri=True)
        except sqlite3.Error as e:
            raise DataLoadError(f"Cannot open database {db_file}: {e}") from e

    def close(self):
        if self.connection:
            self.connection.close()
            self.connection = None

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()

    def _fetch(self, table: str, sql: str) -> list:
        try:
            cursor = self.connection.cursor()
            cursor.execute(sql)
            return cursor.fetchall()
        except sqlite3.Error as e:
            logger.warning("Error while fetching %s: %s", table, e)
            return []

    def get_time_slots(self) -> List[TimeSlot]:
        time_slots = []
        rows = self._fetch("time slots", """
            SELECT TimeSlotID, Day, StartTime, EndTime
            FROM TimeSlots ORDER BY TimeSlotID;
        """)

        for row in rows:
            if row[0] is None or not row[1]:
                logger.warning("Skipping time slot row %r", row)
                continue
            time_slots.append(TimeSlot(
                id=row[0],
                day=row[1],
                start=row[2] if row[2] else "",
                end=row[3] if row[3] else ""
            ))

        return time_slots

    def get_rooms(self) -> List[Room]:
        rooms = []
        rows = self._fetch("rooms", """
            SELECT Building, Space, Capacity, RoomType FROM Rooms ORDER BY rowid;
        """)

        for row in rows:
            building = row[0] if row[0] else ""
            space = row[1] if row[1] else ""
            capacity = parse_int(row[2])
            if not space or capacity is None:
                logger.warning("Skipping room row %r", row)
                continue
            rooms.append(Room(
                id=f"{building} {space}".strip(),
                building=building,
                space=space,
                capacity=capacity,
                room_type=row[3] if row[3] else ""
            ))

        return rooms

    def get_instructors(self) -> List[Instructor]:
        rows = self._fetch("instructors", """
            SELECT InstructorID, Name, PreferredSlots, QualifiedCourses
            FROM Instructors ORDER BY InstructorID;
        """)
        return [
            Instructor(
                id=row[0],
                name=row[1] if row[1] else "",
                preferred_slots=row[2] if row[2] else "",
                qualified_courses=parse_qualified_courses(row[3] or "")
            )
            for row in rows
        ]

    def get_teaching_assistants(self) -> List[TeachingAssistant]:
        rows = self._fetch("teaching assistants", """
            SELECT TAID, Name, PreferredSlots, QualifiedCourses
            FROM TeachingAssistants ORDER BY TAID;
        """)
        return [
            TeachingAssistant(
                id=row[0],
                name=row[1] if row[1] else "",
                preferred_slots=row[2] if row[2] else "",
                roles=parse_ta_roles(row[3] or "")
            )
            for row in rows
        ]

    def get_sections(self) -> List[Section]:
        sections = []
        rows = self._fetch("sections", """
            SELECT Faculty, Year, Department, GroupNumber, SectionNumber, StudentCount
            FROM Sections ORDER BY rowid;
        """)

        for row in rows:
            numbers = [parse_int(v) for v in (row[1], row[3], row[4], row[5])]
            if None in numbers:
                logger.warning("Skipping section row %r", row)
                continue
            year, group, number, students = numbers
            sections.append(Section(
                faculty=row[0] if row[0] else "",
                year=year,
                department=row[2] if row[2] else "",
                group=group,
                number=number,
                students=students
            ))

        return sections

    def get_courses(self) -> List[Course]:
        courses = []
        rows = self._fetch("courses", """
            SELECT Year, Semester, Specialization, CourseCode, Title,
                   LectureSlots, TutorialSlots, LabSlots
            FROM Courses ORDER BY rowid;
        """)

        for row in rows:
            numbers = [parse_int(v) for v in (row[0], row[1], row[5], row[6], row[7])]
            if not row[3] or None in numbers:
                logger.warning("Skipping course row %r", row)
                continue
            year, semester, lec, tut, lab = numbers
            courses.append(Course(
                year=year,
                semester=semester,
                specialization=row[2] if row[2] else "",
                code=row[3],
                title=row[4] if row[4] else "",
                lectures=lec,
                tutorials=tut,
                labs=lab
            ))

        return courses

    def load_catalog(self) -> Catalog:
        catalog = Catalog(
            time_slots=tuple(self.get_time_slots()),
            rooms=tuple(self.get_rooms()),
            instructors=tuple(self.get_instructors()),
            teaching_assistants=tuple(self.get_teaching_assistants()),
            sections=tuple(self.get_sections()),
            courses=tuple(self.get_courses())
        )
        logger.info("Loaded %s from %s", catalog.summary(), self.db_file)
        return catalog


def create_schema(connection: sqlite3.Connection):
    """Create the catalog tables on an open connection."""
    connection.executescript(SCHEMA)
