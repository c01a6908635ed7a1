import pytest

from config import LAB, SolverSettings
from models.data_models import SolveStatus, StaffKind, StaffRef
from solver.csp_solver import CSPSolver
from solver.domain_builder import NO_MATCHING_ROOM, NO_QUALIFIED_STAFF

from conftest import course, instructor, make_catalog, room, section, slot, ta


def solve(catalog, **settings):
    solver = CSPSolver(catalog, SolverSettings(**settings))
    return solver, solver.solve()


def test_single_lecture_gets_the_only_triple():
    catalog = make_catalog(
        time_slots=[slot(0)],
        rooms=[room("A101", 100, "Classroom")],
        instructors=[instructor(1, "CSC111")],
        sections=[section(students=30)],
        courses=[course("CSC111", lectures=1)],
    )

    solver, result = solve(catalog)

    assert result.status is SolveStatus.SUCCESS
    assert len(result.assignments) == 1
    value = result.assignments[0]
    assert (value.timeslot_index, value.room_index) == (0, 0)
    assert value.staff == StaffRef(StaffKind.INSTRUCTOR, 1)
    assert solver.verify_solution(result) == []


@pytest.mark.parametrize("ordering", ["static", "mrv"])
def test_two_sections_competing_for_one_slot_room_and_lecturer(ordering):
    catalog = make_catalog(
        time_slots=[slot(0)],
        rooms=[room("A101")],
        instructors=[instructor(1, "CSC111")],
        sections=[section(1), section(2)],
        courses=[course("CSC111", lectures=1)],
    )

    _, result = solve(catalog, ordering=ordering)

    assert result.status is SolveStatus.INFEASIBLE
    assert not result.success
    assert result.assignments == {}
    assert result.backtracks > 0


def test_physics_lab_without_physics_room_is_reported_before_search():
    catalog = make_catalog(
        time_slots=[slot(0)],
        rooms=[room("Lab 1", 40, "Computer Lab")],
        tas=[ta(1, {"PHY113": {"LAB"}})],
        sections=[section()],
        courses=[course("PHY113", lectures=0, labs=1)],
    )

    _, result = solve(catalog)

    assert result.status is SolveStatus.EMPTY_DOMAIN
    assert result.reason == NO_MATCHING_ROOM
    assert result.failed_variable.session_type == LAB
    assert result.failed_variable.course_code == "PHY113"
    assert result.nodes == 0
    assert result.assignments == {}


def test_course_without_qualified_instructor_is_infeasible():
    catalog = make_catalog(
        time_slots=[slot(0), slot(1)],
        rooms=[room("A101")],
        instructors=[instructor(1, "CSC111")],
        sections=[section()],
        courses=[course("CSC111"), course("MTH111")],
    )

    _, result = solve(catalog)

    assert result.status is SolveStatus.EMPTY_DOMAIN
    assert result.reason == NO_QUALIFIED_STAFF
    assert result.failed_variable.course_code == "MTH111"
    assert not result.success


def test_nothing_to_schedule():
    catalog = make_catalog(
        time_slots=[slot(0)],
        rooms=[room("A101")],
        sections=[section()],
        courses=[course("LRA101", 0, 0, 0)],
    )

    _, result = solve(catalog)

    assert result.status is SolveStatus.NOTHING_TO_SCHEDULE
    assert result.variables == []


def test_static_search_backtracks_out_of_a_bad_first_choice():
    small = section(1, students=10, department="SM")
    big = section(2, students=50, department="BG")
    catalog = make_catalog(
        time_slots=[slot(0), slot(1)],
        rooms=[room("Big", 100), room("Small", 20)],
        instructors=[instructor(1, "SM1"), instructor(2, "BG1")],
        sections=[small, big],
        courses=[course("SM1", specialization="SM"), course("BG1", lectures=2, specialization="BG")],
    )

    solver, result = solve(catalog, ordering="static", shuffle=False)

    assert result.success
    assert result.backtracks > 0
    assert result.assignments[0].room_index == 1
    assert solver.verify_solution(result) == []


@pytest.mark.parametrize("ordering", ["static", "mrv"])
@pytest.mark.parametrize("shuffle", [True, False])
def test_solution_satisfies_every_hard_constraint(department_catalog, ordering, shuffle):
    solver, result = solve(department_catalog, ordering=ordering, shuffle=shuffle)

    assert result.success
    assert len(result.assignments) == len(result.variables) == 23
    assert solver.verify_solution(result) == []

    rooms_at = set()
    sections_at = set()
    staff_at = set()
    for i, var in enumerate(result.variables):
        a = result.assignments[i]
        assigned_room = department_catalog.rooms[a.room_index]
        assert assigned_room.capacity >= var.section.students
        assert solver.classifier.room_matches(assigned_room, var.session_type, var.course_code)

        for seen, key in ((rooms_at, (a.timeslot_index, a.room_index)),
                          (sections_at, (a.timeslot_index, var.section)),
                          (staff_at, (a.timeslot_index, a.staff, var.is_lecture))):
            assert key not in seen
            seen.add(key)


def test_repeated_runs_without_shuffling_are_identical(department_catalog):
    _, first = solve(department_catalog, shuffle=False)
    _, second = solve(department_catalog, shuffle=False)
    assert first.assignments == second.assignments


def test_same_seed_gives_same_solution(department_catalog):
    _, first = solve(department_catalog, seed=7)
    _, second = solve(department_catalog, seed=7)
    assert first.assignments == second.assignments


def test_instructor_may_hold_lecture_and_tutorial_in_one_slot_unless_strict():
    catalog = make_catalog(
        time_slots=[slot(0)],
        rooms=[room("A101"), room("A102")],
        instructors=[instructor(1, "CSC111", "CSC112")],
        sections=[section(1, department="A"), section(2, department="B")],
        courses=[
            course("CSC111", lectures=1, specialization="A"),
            course("CSC112", lectures=0, tutorials=1, specialization="B"),
        ],
    )

    solver, relaxed = solve(catalog)
    assert relaxed.success
    assert {a.staff for a in relaxed.assignments.values()} == {StaffRef(StaffKind.INSTRUCTOR, 1)}
    assert solver.verify_solution(relaxed) == []

    _, strict = solve(catalog, strict_staff=True)
    assert strict.status is SolveStatus.INFEASIBLE


def test_substitution_policy_can_be_turned_off():
    catalog = make_catalog(
        time_slots=[slot(0)],
        rooms=[room("A101")],
        instructors=[instructor(1, "CSC111")],
        sections=[section()],
        courses=[course("CSC111", lectures=0, tutorials=1)],
    )

    _, allowed = solve(catalog)
    assert allowed.success

    _, refused = solve(catalog, allow_substitution=False)
    assert refused.status is SolveStatus.EMPTY_DOMAIN
    assert refused.reason == NO_QUALIFIED_STAFF


def test_time_limit_reports_timeout_not_infeasible(department_catalog):
    _, result = solve(department_catalog, time_limit=0)

    assert result.status is SolveStatus.TIMED_OUT
    assert result.assignments == {}


def test_verify_solution_flags_clashes():
    catalog = make_catalog(
        time_slots=[slot(0)],
        rooms=[room("A101")],
        instructors=[instructor(1, "CSC111")],
        sections=[section(1)],
        courses=[course("CSC111", lectures=2)],
    )
    solver = CSPSolver(catalog)
    solver.build_session_variables()
    solver.build_domains()
    result = solver.solve()
    assert result.status is SolveStatus.INFEASIBLE

    forced = result
    forced.assignments = {0: solver.domains[0][0], 1: solver.domains[1][0]}
    problems = solver.verify_solution(forced)

    assert any("room clash" in p for p in problems)
    assert any("section clash" in p for p in problems)
    assert any("staff clash" in p for p in problems)


@pytest.mark.parametrize("settings", [
    dict(ordering="random"),
    dict(time_limit=-1),
])
def test_invalid_settings_are_rejected(settings):
    with pytest.raises(ValueError):
        CSPSolver(make_catalog(), SolverSettings(**settings))
