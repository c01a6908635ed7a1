"""
Main entry point for the Timetable Scheduler application
"""
import argparse
import logging
import sys
from typing import Optional, Sequence

import config
from config import SolverSettings
from database import DataLoadError, load_catalog
from models.data_models import SolveStatus
from solver.csp_solver import CSPSolver
from solver.export import generate_json, write_json

EXIT_CODES = {
    SolveStatus.SUCCESS: config.EXIT_SUCCESS,
    SolveStatus.NOTHING_TO_SCHEDULE: config.EXIT_NOTHING_TO_SCHEDULE,
    SolveStatus.EMPTY_DOMAIN: config.EXIT_INFEASIBLE,
    SolveStatus.INFEASIBLE: config.EXIT_INFEASIBLE,
    SolveStatus.TIMED_OUT: config.EXIT_TIMED_OUT,
}


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Course timetabling CSP solver")
    parser.add_argument("command", nargs="*", metavar="[run] [DATA]",
                        help=f"Optional 'run' action followed by a CSV directory or SQLite file "
                             f"(default: {config.DEFAULT_DATA_DIR})")
    parser.add_argument("--ordering", choices=config.ORDERINGS, default=config.DEFAULT_ORDERING,
                        help="Variable ordering: static input order or MRV")
    parser.add_argument("--seed", type=int, default=config.DEFAULT_SEED,
                        help="Seed for domain shuffling")
    parser.add_argument("--no-shuffle", action="store_true",
                        help="Keep domains in construction order")
    parser.add_argument("--time-limit", type=float, default=None,
                        help="Abort the search after this many seconds")
    parser.add_argument("--strict-staff", action="store_true",
                        help="Forbid a staff member holding a lecture and another session in one slot")
    parser.add_argument("--no-substitution", action="store_true",
                        help="Do not let instructors cover tutorials and labs")
    parser.add_argument("--json", dest="json_path", default=None,
                        help="Also write the result as JSON to this path")
    parser.add_argument("--verbose", action="store_true", help="Log progress")
    parser.add_argument("--gui", action="store_true", help="Open the desktop interface")
    args = parser.parse_args(argv)

    words = list(args.command)
    if words and words[0] == "run":
        words.pop(0)
    if len(words) > 1:
        parser.error(f"unexpected arguments: {' '.join(words[1:])}")
    args.data = words[0] if words else None
    return args


def settings_from_args(args: argparse.Namespace) -> SolverSettings:
    return SolverSettings(
        ordering=args.ordering,
        seed=args.seed,
        shuffle=not args.no_shuffle,
        time_limit=args.time_limit,
        allow_substitution=not args.no_substitution,
        strict_staff=args.strict_staff
    )


def run(args: argparse.Namespace) -> int:
    try:
        catalog = load_catalog(args.data)
    except DataLoadError as e:
        print(f"Error loading data: {e}", file=sys.stderr)
        return config.EXIT_DATA_ERROR

    print("========================================")
    print("Timetable Generation CSP Solver")
    print("========================================")
    print(f"Loaded: {catalog.summary()}\n")

    try:
        solver = CSPSolver(catalog, settings_from_args(args))
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return config.EXIT_DATA_ERROR

    result = solver.solve()
    solver.print_result(result)

    if args.json_path:
        write_json(generate_json(result, catalog), args.json_path)
        print(f"JSON exported to: {args.json_path}")

    return EXIT_CODES[result.status]


def run_gui() -> int:
    from PyQt6.QtWidgets import QApplication
    from gui.main_window import MainWindow

    app = QApplication(sys.argv)
    app.setApplicationName("Timetable Scheduler")

    window = MainWindow()
    window.show()

    return app.exec()


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s"
    )
    if args.gui:
        return run_gui()
    return run(args)


if __name__ == "__main__":
    sys.exit(main())
