"""
CSP Solver for timetable generation
"""
import logging
import time
from collections import defaultdict
from typing import Dict, Iterator, List, Optional, Tuple

from config import ORDERINGS, SolverSettings
from models.data_models import (
    AssignmentValue, Catalog, CSPResult, SessionVar, SolveStatus, StaffKind, StaffRef
)
from solver.conflict_tracker import ConflictTracker
from solver.domain_builder import (
    RoomClassifier, build_domains, diagnose_empty_domain, eligible_staff
)
from solver.export import build_records, failure_message, format_record
from solver.session_generator import build_session_variables

logger = logging.getLogger(__name__)


class CSPSolver:
    def __init__(self, catalog: Catalog, settings: Optional[SolverSettings] = None,
                 classifier: Optional[RoomClassifier] = None):
        self.catalog = catalog
        self.settings = settings or SolverSettings()
        self.classifier = classifier or RoomClassifier()

        if self.settings.ordering not in ORDERINGS:
            raise ValueError(f"Unknown variable ordering {self.settings.ordering!r}, "
                             f"expected one of {ORDERINGS}")
        if self.settings.time_limit is not None and self.settings.time_limit < 0:
            raise ValueError("time_limit must be non-negative")

        self.variables: List[SessionVar] = []
        self.domains: List[List[AssignmentValue]] = []

        self.instructor_index = {ins.id: ins for ins in catalog.instructors}
        self.ta_index = {ta.id: ta for ta in catalog.teaching_assistants}

    def build_session_variables(self):
        """Build one variable per required session instance"""
        self.variables = build_session_variables(self.catalog)
        logger.info("Total variables created: %d", len(self.variables))

    def build_domains(self):
        """Build domains for each variable"""
        seed = self.settings.seed if self.settings.shuffle else None
        self.domains = build_domains(
            self.variables, self.catalog, self.classifier,
            allow_substitution=self.settings.allow_substitution,
            seed=seed
        )
        logger.info("Domains built: %d candidate triples in total",
                    sum(len(d) for d in self.domains))

    def find_empty_domain(self) -> Optional[Tuple[int, str]]:
        """First variable that can never be satisfied, with the reason."""
        for i, domain in enumerate(self.domains):
            if not domain:
                reason = diagnose_empty_domain(
                    self.variables[i], self.catalog, self.classifier,
                    self.settings.allow_substitution
                )
                return i, reason or "empty domain"
        return None

    def count_legal_values(self, index: int, tracker: ConflictTracker, limit: int) -> int:
        """Legal candidates of a variable, counting stops once limit is reached."""
        var = self.variables[index]
        count = 0
        for value in self.domains[index]:
            if tracker.can_assign(var, value):
                count += 1
                if count >= limit:
                    break
        return count

    def select_unassigned_var(self, assignment: List[Optional[AssignmentValue]],
                              tracker: ConflictTracker) -> int:
        """Next variable to branch on, -1 when every variable is assigned."""
        if self.settings.ordering == 'static':
            for i, value in enumerate(assignment):
                if value is None:
                    return i
            return -1

        # MRV, ties go to the lowest index
        chosen = -1
        best = float('inf')
        for i, value in enumerate(assignment):
            if value is not None:
                continue
            legal = self.count_legal_values(i, tracker, best)
            if legal < best:
                best = legal
                chosen = i
                if legal == 0:
                    break
        return chosen

    def backtrack_search(self) -> CSPResult:
        """
        Depth-first backtracking over self.variables using self.domains.

        Frames are (variable index, remaining candidates). A variable's
        assignment is occupied in the tracker when made and released before
        its frame tries the next candidate or is popped, so the tracker always
        mirrors the assignments on the stack.
        """
        logger.info("Starting backtrack search (%s ordering)", self.settings.ordering)
        start_time = time.monotonic()
        deadline = None
        if self.settings.time_limit is not None:
            deadline = start_time + self.settings.time_limit

        n = len(self.variables)
        assignment: List[Optional[AssignmentValue]] = [None] * n
        tracker = ConflictTracker(strict_staff=self.settings.strict_staff)
        nodes = 0
        backtracks = 0

        def finish(status: SolveStatus, reason: str = "") -> CSPResult:
            result = CSPResult(
                status=status,
                variables=list(self.variables),
                solve_seconds=time.monotonic() - start_time,
                nodes=nodes,
                backtracks=backtracks,
                reason=reason
            )
            if status is SolveStatus.SUCCESS:
                result.assignments = dict(enumerate(assignment))
            else:
                tracker.clear()
            return result

        first = self.select_unassigned_var(assignment, tracker)
        if first == -1:
            return finish(SolveStatus.SUCCESS)

        stack: List[Tuple[int, Iterator[AssignmentValue]]] = [(first, iter(self.domains[first]))]

        while stack:
            if deadline is not None and time.monotonic() >= deadline:
                logger.warning("Search timed out after %d nodes", nodes)
                return finish(SolveStatus.TIMED_OUT, "time limit reached")

            index, candidates = stack[-1]
            var = self.variables[index]

            previous = assignment[index]
            if previous is not None:
                tracker.release(var, previous)
                assignment[index] = None

            value = next((v for v in candidates if tracker.can_assign(var, v)), None)
            if value is None:
                stack.pop()
                backtracks += 1
                continue

            tracker.occupy(var, value)
            assignment[index] = value
            nodes += 1

            following = self.select_unassigned_var(assignment, tracker)
            if following == -1:
                result = finish(SolveStatus.SUCCESS)
                logger.info("Solution found in %.2fs (%d nodes, %d backtracks)",
                            result.solve_seconds, nodes, backtracks)
                return result
            stack.append((following, iter(self.domains[following])))

        result = finish(SolveStatus.INFEASIBLE, "search exhausted")
        logger.info("No solution found after %.2f seconds", result.solve_seconds)
        return result

    def solve(self) -> CSPResult:
        """Solve the CSP"""
        if not self.variables:
            self.build_session_variables()
        if len(self.domains) != len(self.variables):
            self.build_domains()

        if not self.variables:
            logger.info("No session variables generated, nothing to schedule")
            return CSPResult(status=SolveStatus.NOTHING_TO_SCHEDULE, reason="no sessions")

        empty = self.find_empty_domain()
        if empty is not None:
            index, reason = empty
            var = self.variables[index]
            logger.warning("Variable %s has empty domain: %s", var.var_id, reason)
            return CSPResult(
                status=SolveStatus.EMPTY_DOMAIN,
                variables=list(self.variables),
                failed_variable=var,
                reason=reason
            )

        return self.backtrack_search()

    def verify_solution(self, result: CSPResult) -> List[str]:
        """Independently re-check a result; returns one message per violation."""
        problems = []
        if len(result.assignments) != len(result.variables):
            problems.append(f"{len(result.variables) - len(result.assignments)} variables unassigned")

        rooms_used: Dict[Tuple[int, int], str] = {}
        sections_used: Dict[tuple, str] = {}
        staff_used: Dict[tuple, str] = {}
        per_slot_staff = defaultdict(set)

        for i, var in enumerate(result.variables):
            a = result.assignments.get(i)
            if a is None:
                continue
            room = self.catalog.rooms[a.room_index]
            if room.capacity < var.section.students:
                problems.append(f"{var.var_id}: room {room.id} too small")
            if not self.classifier.room_matches(room, var.session_type, var.course_code):
                problems.append(f"{var.var_id}: room {room.id} has wrong type {room.room_type}")
            if a.staff not in eligible_staff(var, self.catalog, self.settings.allow_substitution):
                problems.append(f"{var.var_id}: {self.staff_name(a.staff)} not qualified")

            for used, key, what in (
                (rooms_used, (a.timeslot_index, a.room_index), "room"),
                (sections_used, (a.timeslot_index, var.section), "section"),
                (staff_used, (a.timeslot_index, a.staff, var.is_lecture), "staff"),
            ):
                if key in used:
                    problems.append(f"{var.var_id}: {what} clash with {used[key]}")
                else:
                    used[key] = var.var_id

            per_slot_staff[(a.timeslot_index, a.staff)].add(var.is_lecture)

        if self.settings.strict_staff:
            for (ts_idx, staff), kinds in per_slot_staff.items():
                if len(kinds) > 1:
                    problems.append(f"{self.staff_name(staff)} double-booked in time slot {ts_idx}")

        return problems

    def staff_name(self, staff: StaffRef) -> str:
        index = self.instructor_index if staff.kind is StaffKind.INSTRUCTOR else self.ta_index
        member = index.get(staff.id)
        return member.name if member else f"{staff.kind.value} {staff.id}"

    def print_result(self, result: CSPResult):
        """Print the result"""
        if not result.success:
            print(failure_message(result))
            return

        for record in build_records(result, self.catalog):
            print(format_record(record))

        print(f"Solution found in {result.solve_seconds:.2f}s "
              f"({result.nodes} nodes, {result.backtracks} backtracks)")
        print("=========================================")
