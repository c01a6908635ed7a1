import pytest

from config import CSV_FILES
from database import CSVCatalogLoader, DataLoadError, load_catalog
from models.data_models import Section

from conftest import SAMPLE_DATA

TABLES = {
    'time_slots': "Day,Start,End,ID\nSunday,09:00,10:30,1\nSunday,10:45,12:15,2\nMonday,,,x\n",
    'rooms': (
        "Building,Space,Capacity,Type\n"
        "Building A,A101,60,Classroom\n"
        ",A102,40,Classroom\n"
        ",,,\n"
        ",A103,big,Classroom\n"
        "Building B,Lab 1,30,Computer Lab\n"
    ),
    'instructors': (
        "ID,Name,Preferred,Courses\n"
        '1,Dr. Ahmed,Mornings,"CSC111, CSC211"\n'
        "two,Dr. Nobody,,CSC111\n"
    ),
    'teaching_assistants': (
        "ID,Name,Preferred,Courses\n"
        '1,Eng. Nour,,"CSC111 (TUT), CSC111 (LAB), PHY113 (LAB)"\n'
    ),
    'sections': (
        "Faculty,Year,Department,Group,Section,Students\n"
        "CSIT,1,,1,1,35\n"
        ",,,,2,30\n"
        ",,,2,1,28\n"
        ",3,CSC,1,1,20\n"
        ",,AID,,2,\n"
        ",,,,3,many\n"
    ),
    'courses': (
        "Year,Semester,Specialization,Code,Title,Lec,Tut,Lab\n"
        "1,1,N/A,CSC111,Programming,1,1,1\n"
        ",,,PHY113,Physics,1,0,1\n"
        ",,,,,,,\n"
        "3,2,CSC,CSC311,Compilers,2,1,0\n"
        ",,,CSC312,Broken,x,0,0\n"
    ),
}


@pytest.fixture
def data_dir(tmp_path):
    for table, text in TABLES.items():
        (tmp_path / CSV_FILES[table]).write_text(text, encoding="utf-8")
    return tmp_path


def test_time_slots_skip_bad_rows(data_dir):
    slots = CSVCatalogLoader(data_dir).get_time_slots()
    assert [(s.id, s.day, s.start, s.end) for s in slots] == [
        (1, "Sunday", "09:00", "10:30"), (2, "Sunday", "10:45", "12:15")
    ]


def test_rooms_carry_building_forward(data_dir):
    rooms = CSVCatalogLoader(data_dir).get_rooms()

    assert [r.id for r in rooms] == ["Building A A101", "Building A A102", "Building B Lab 1"]
    assert rooms[1].building == "Building A"
    assert rooms[1].capacity == 40
    assert rooms[2].room_type == "Computer Lab"


def test_staff_tables(data_dir):
    loader = CSVCatalogLoader(data_dir)

    instructors = loader.get_instructors()
    assert len(instructors) == 1
    assert instructors[0].qualified_courses == {"CSC111", "CSC211"}
    assert instructors[0].preferred_slots == "Mornings"

    tas = loader.get_teaching_assistants()
    assert tas[0].has_role("CSC111", "TUT")
    assert tas[0].has_role("CSC111", "LAB")
    assert not tas[0].has_role("PHY113", "TUT")


def test_sections_carry_hierarchy_forward(data_dir):
    sections = CSVCatalogLoader(data_dir).get_sections()

    assert sections == [
        Section("CSIT", 1, "", 1, 1, 35),
        Section("CSIT", 1, "", 1, 2, 30),
        Section("CSIT", 1, "", 2, 1, 28),
        Section("CSIT", 3, "CSC", 1, 1, 20),
    ]


def test_courses_carry_year_semester_and_specialization(data_dir):
    courses = CSVCatalogLoader(data_dir).get_courses()

    assert [c.code for c in courses] == ["CSC111", "PHY113", "CSC311"]
    physics = courses[1]
    assert (physics.year, physics.semester, physics.specialization) == (1, 1, "N/A")
    assert (physics.lectures, physics.tutorials, physics.labs) == (1, 0, 1)
    assert courses[2].specialization == "CSC"


def test_missing_file_raises(data_dir):
    (data_dir / CSV_FILES['courses']).unlink()
    with pytest.raises(DataLoadError):
        CSVCatalogLoader(data_dir).load_catalog()


def test_missing_directory_raises(tmp_path):
    with pytest.raises(DataLoadError):
        CSVCatalogLoader(tmp_path / "nowhere")


def test_load_catalog_dispatches_on_directory(data_dir):
    catalog = load_catalog(data_dir)
    assert len(catalog.courses) == 3
    assert len(catalog.sections) == 4


def test_unsupported_source(tmp_path):
    path = tmp_path / "catalog.xlsx"
    path.write_text("")
    with pytest.raises(DataLoadError):
        load_catalog(path)


def test_sample_data_loads():
    catalog = load_catalog(SAMPLE_DATA)
    assert len(catalog.time_slots) == 20
    assert len(catalog.rooms) == 8
    assert len(catalog.sections) == 5
    assert catalog.course("LRA101").total_sessions == 0
