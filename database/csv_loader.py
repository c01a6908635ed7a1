"""
CSV catalog loader.

Reads the six catalog tables from a directory of CSV files. Columns are
positional, the first row is a header. Hierarchical tables (halls, sections,
courses) leave leading cells blank to mean "same as the row above"; those
columns are forward filled before rows are parsed.
"""
import logging
from pathlib import Path
from typing import List, Sequence

import pandas as pd

from config import CSV_FILES
from database.parsing import (
    DataLoadError, parse_int, parse_qualified_courses, parse_ta_roles
)
from models.data_models import (
    Catalog, Course, Instructor, Room, Section, TeachingAssistant, TimeSlot
)

logger = logging.getLogger(__name__)


def read_table(path: Path, min_columns: int, carry_forward: Sequence[int] = ()) -> pd.DataFrame:
    """Read a CSV as stripped strings, padded to min_columns, with carry-forward applied."""
    if not path.is_file():
        raise DataLoadError(f"Missing data file: {path}")

    try:
        df = pd.read_csv(path, dtype=str, keep_default_na=False, skip_blank_lines=True,
                         index_col=False, on_bad_lines='warn')
    except pd.errors.EmptyDataError:
        logger.warning("%s is empty", path.name)
        return pd.DataFrame(columns=range(min_columns))
    except (pd.errors.ParserError, UnicodeDecodeError) as e:
        raise DataLoadError(f"Could not parse {path}: {e}") from e

    df = df.fillna("")
    df.columns = range(df.shape[1])
    for col in range(df.shape[1], min_columns):
        df[col] = ""
    for col in df.columns:
        df[col] = df[col].astype(str).str.strip()

    if carry_forward and not df.empty:
        cols = list(carry_forward)
        blanks = df[cols] == ""
        df[cols] = df[cols].mask(blanks).ffill().fillna("")

    return df


class CSVCatalogLoader:
    def __init__(self, directory):
        self.directory = Path(directory)
        if not self.directory.is_dir():
            raise DataLoadError(f"Data directory not found: {self.directory}")

    def _path(self, table: str) -> Path:
        return self.directory / CSV_FILES[table]

    def _skip(self, table: str, row_index: int, why: str):
        # +2: header row and 1-based line numbers
        logger.warning("%s line %d skipped: %s", CSV_FILES[table], row_index + 2, why)

    def get_time_slots(self) -> List[TimeSlot]:
        time_slots = []
        df = read_table(self._path('time_slots'), 4)

        for i, row in enumerate(df.itertuples(index=False, name=None)):
            day, start, end = row[0], row[1], row[2]
            ts_id = parse_int(row[3])
            if ts_id is None or not day:
                self._skip('time_slots', i, "missing day or id")
                continue
            time_slots.append(TimeSlot(id=ts_id, day=day, start=start, end=end))

        return time_slots

    def get_rooms(self) -> List[Room]:
        rooms = []
        df = read_table(self._path('rooms'), 4, carry_forward=[0])

        for i, row in enumerate(df.itertuples(index=False, name=None)):
            building, space = row[0], row[1]
            if not space:
                continue
            capacity = parse_int(row[2])
            if capacity is None:
                self._skip('rooms', i, f"bad capacity {row[2]!r}")
                continue
            room_id = f"{building} {space}".strip()
            rooms.append(Room(id=room_id, building=building, space=space,
                              capacity=capacity, room_type=row[3]))

        return rooms

    def get_instructors(self) -> List[Instructor]:
        instructors = []
        df = read_table(self._path('instructors'), 4)

        for i, row in enumerate(df.itertuples(index=False, name=None)):
            ins_id = parse_int(row[0])
            if ins_id is None:
                self._skip('instructors', i, f"bad id {row[0]!r}")
                continue
            instructors.append(Instructor(
                id=ins_id,
                name=row[1],
                preferred_slots=row[2],
                qualified_courses=parse_qualified_courses(row[3])
            ))

        return instructors

    def get_teaching_assistants(self) -> List[TeachingAssistant]:
        tas = []
        df = read_table(self._path('teaching_assistants'), 4)

        for i, row in enumerate(df.itertuples(index=False, name=None)):
            ta_id = parse_int(row[0])
            if ta_id is None:
                self._skip('teaching_assistants', i, f"bad id {row[0]!r}")
                continue
            tas.append(TeachingAssistant(
                id=ta_id,
                name=row[1],
                preferred_slots=row[2],
                roles=parse_ta_roles(row[3])
            ))

        return tas

    def get_sections(self) -> List[Section]:
        sections = []
        df = read_table(self._path('sections'), 6, carry_forward=[0, 1, 2, 3])

        for i, row in enumerate(df.itertuples(index=False, name=None)):
            if not row[4] or not row[5]:
                continue
            year, group = parse_int(row[1]), parse_int(row[3])
            number, students = parse_int(row[4]), parse_int(row[5])
            if None in (year, group, number, students):
                self._skip('sections', i, "non-numeric year/group/section/students")
                continue
            sections.append(Section(
                faculty=row[0],
                year=year,
                department=row[2],
                group=group,
                number=number,
                students=students
            ))

        return sections

    def get_courses(self) -> List[Course]:
        courses = []
        df = read_table(self._path('courses'), 8, carry_forward=[0, 1, 2])

        for i, row in enumerate(df.itertuples(index=False, name=None)):
            code = row[3]
            if not code:
                continue
            numbers = [parse_int(v) for v in (row[0], row[1], row[5], row[6], row[7])]
            if None in numbers:
                self._skip('courses', i, f"non-numeric year/semester/session counts for {code}")
                continue
            year, semester, lec, tut, lab = numbers
            courses.append(Course(
                year=year,
                semester=semester,
                specialization=row[2],
                code=code,
                title=row[4],
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
        logger.info("Loaded %s from %s", catalog.summary(), self.directory)
        return catalog
