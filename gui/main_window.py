"""
Main window for the timetable scheduler application
"""
from pathlib import Path
from PyQt6.QtWidgets import (
    QMainWindow, QWidget, QVBoxLayout, QHBoxLayout,
    QPushButton, QTextEdit, QLabel, QFileDialog, QMessageBox,
    QProgressBar, QTabWidget, QComboBox, QCheckBox, QDoubleSpinBox
)
from PyQt6.QtCore import Qt, QThread, pyqtSignal

from config import DEFAULT_ORDERING, ORDERINGS, SolverSettings
from database import DataLoadError, load_catalog
from solver.csp_solver import CSPSolver
from solver.export import build_records, failure_message, format_record, generate_json, write_json
from gui.timetable_viewer import TimetableViewer


class SolverThread(QThread):
    """Thread for running the solver"""
    finished = pyqtSignal(object)
    progress = pyqtSignal(str)

    def __init__(self, solver):
        super().__init__()
        self.solver = solver

    def run(self):
        try:
            self.progress.emit("Building session variables...")
            self.solver.build_session_variables()
            self.progress.emit(f"{len(self.solver.variables)} sessions to place")

            self.progress.emit("Building domains...")
            self.solver.build_domains()

            self.progress.emit("Solving CSP...")
            result = self.solver.solve()

            self.finished.emit(result)
        except Exception as e:
            self.progress.emit(f"Error: {str(e)}")
            self.finished.emit(None)


class SolverTab(QWidget):
    """Tab for solving timetable scheduling"""

    def __init__(self):
        super().__init__()
        self.catalog = None
        self.result = None
        self.solver_thread = None

        self.init_ui()

    def init_ui(self):
        layout = QVBoxLayout(self)

        title_label = QLabel("Timetable Generation CSP Solver")
        title_label.setStyleSheet("font-size: 18px; font-weight: bold; padding: 10px;")
        title_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        layout.addWidget(title_label)

        button_layout = QHBoxLayout()

        self.load_dir_btn = QPushButton("Load CSV Folder")
        self.load_dir_btn.clicked.connect(self.load_folder)
        button_layout.addWidget(self.load_dir_btn)

        self.load_db_btn = QPushButton("Load Database")
        self.load_db_btn.clicked.connect(self.load_database)
        button_layout.addWidget(self.load_db_btn)

        self.solve_btn = QPushButton("Solve")
        self.solve_btn.clicked.connect(self.solve)
        self.solve_btn.setEnabled(False)
        button_layout.addWidget(self.solve_btn)

        self.export_btn = QPushButton("Export JSON")
        self.export_btn.clicked.connect(self.export_json)
        self.export_btn.setEnabled(False)
        button_layout.addWidget(self.export_btn)

        layout.addLayout(button_layout)

        # Solver options
        options_layout = QHBoxLayout()
        options_layout.addWidget(QLabel("Ordering:"))
        self.ordering_combo = QComboBox()
        self.ordering_combo.addItems(ORDERINGS)
        self.ordering_combo.setCurrentText(DEFAULT_ORDERING)
        options_layout.addWidget(self.ordering_combo)

        self.shuffle_check = QCheckBox("Shuffle domains")
        self.shuffle_check.setChecked(True)
        options_layout.addWidget(self.shuffle_check)

        self.strict_check = QCheckBox("Strict staff overlap")
        options_layout.addWidget(self.strict_check)

        self.substitution_check = QCheckBox("Instructors may cover tutorials/labs")
        self.substitution_check.setChecked(True)
        options_layout.addWidget(self.substitution_check)

        options_layout.addWidget(QLabel("Time limit:"))
        self.time_limit_spin = QDoubleSpinBox()
        self.time_limit_spin.setRange(0, 3600)
        self.time_limit_spin.setSuffix(" s")
        # 0 shows as "None": search until done
        self.time_limit_spin.setSpecialValueText("None")
        options_layout.addWidget(self.time_limit_spin)
        options_layout.addStretch()
        layout.addLayout(options_layout)

        self.progress_bar = QProgressBar()
        self.progress_bar.setVisible(False)
        layout.addWidget(self.progress_bar)

        self.status_label = QLabel("Ready")
        self.status_label.setStyleSheet("padding: 5px;")
        layout.addWidget(self.status_label)

        self.output_text = QTextEdit()
        self.output_text.setReadOnly(True)
        self.output_text.setStyleSheet("font-family: monospace;")
        layout.addWidget(self.output_text)

    def log(self, message: str):
        """Append message to output"""
        self.output_text.append(message)

    def load_folder(self):
        path = QFileDialog.getExistingDirectory(self, "Select CSV Data Folder")
        if path:
            self.load_source(path)

    def load_database(self):
        path, _ = QFileDialog.getOpenFileName(
            self,
            "Select Database File",
            "",
            "Database Files (*.db *.sqlite *.sqlite3);;All Files (*)"
        )
        if path:
            self.load_source(path)

    def load_source(self, path: str):
        try:
            self.catalog = load_catalog(path)
        except DataLoadError as e:
            QMessageBox.critical(self, "Error", f"Failed to load data:\n{str(e)}")
            self.log(f"Error loading data: {str(e)}")
            return

        self.result = None
        self.export_btn.setEnabled(False)
        self.log("========================================")
        self.log("Timetable Generation CSP Solver")
        self.log("========================================")
        self.log(f"Loaded:\n{self.catalog.summary()}\n")

        self.solve_btn.setEnabled(True)
        self.status_label.setText(f"Data loaded: {Path(path).name}")

    def current_settings(self) -> SolverSettings:
        return SolverSettings(
            ordering=self.ordering_combo.currentText(),
            shuffle=self.shuffle_check.isChecked(),
            strict_staff=self.strict_check.isChecked(),
            allow_substitution=self.substitution_check.isChecked(),
            time_limit=self.time_limit_spin.value() or None
        )

    def solve(self):
        """Solve the CSP"""
        if not self.catalog:
            return

        self.solve_btn.setEnabled(False)
        self.load_dir_btn.setEnabled(False)
        self.load_db_btn.setEnabled(False)
        self.progress_bar.setVisible(True)
        self.progress_bar.setRange(0, 0)  # Indeterminate

        solver = CSPSolver(self.catalog, self.current_settings())
        self.solver_thread = SolverThread(solver)
        self.solver_thread.progress.connect(self.on_progress)
        self.solver_thread.finished.connect(self.on_solve_finished)
        self.solver_thread.start()

    def on_progress(self, message: str):
        """Update progress"""
        self.status_label.setText(message)
        self.log(message)

    def on_solve_finished(self, result):
        """Handle solver completion"""
        self.progress_bar.setVisible(False)
        self.solve_btn.setEnabled(True)
        self.load_dir_btn.setEnabled(True)
        self.load_db_btn.setEnabled(True)

        if result is None:
            self.status_label.setText("Solving failed")
            return

        self.result = result

        if result.success:
            self.log("\n" + "=" * 50)
            self.log("SOLUTION FOUND!")
            self.log("=" * 50)
            for record in build_records(result, self.catalog):
                self.log(format_record(record))
            self.log(f"\nSUCCESS | {result.nodes} nodes, {result.backtracks} backtracks")
            self.status_label.setText(f"Solution found in {result.solve_seconds:.2f}s")
            self.export_btn.setEnabled(True)
        else:
            message = failure_message(result)
            self.log("\n" + "=" * 50)
            self.log("NO SOLUTION FOUND")
            self.log("=" * 50)
            self.log(f"FAILED | {message}")
            self.status_label.setText("No solution found")
            QMessageBox.warning(self, "No Solution", message)

    def export_json(self):
        """Export result to JSON"""
        if not self.result or not self.result.success:
            return

        file_path, _ = QFileDialog.getSaveFileName(
            self,
            "Save Timetable",
            "timetable.json",
            "JSON Files (*.json);;All Files (*)"
        )

        if not file_path:
            return

        try:
            write_json(self.get_result_json(), file_path)
            self.log(f"\nJSON exported to: {file_path}")
            self.status_label.setText(f"Exported to: {Path(file_path).name}")
            QMessageBox.information(self, "Success", "Timetable exported successfully!")
        except OSError as e:
            QMessageBox.critical(self, "Error", f"Failed to export JSON:\n{str(e)}")
            self.log(f"Error exporting JSON: {str(e)}")

    def get_result_json(self) -> dict:
        """Get the generated JSON data"""
        if self.result and self.result.success:
            return generate_json(self.result, self.catalog)
        return None


class MainWindow(QMainWindow):
    def __init__(self):
        super().__init__()
        self.init_ui()

    def init_ui(self):
        self.setWindowTitle("Timetable Scheduler - CSP Solver")
        self.setGeometry(100, 100, 1200, 800)

        central_widget = QWidget()
        self.setCentralWidget(central_widget)

        layout = QVBoxLayout(central_widget)

        self.tabs = QTabWidget()

        self.solver_tab = SolverTab()
        self.tabs.addTab(self.solver_tab, "Solver")

        self.viewer_tab = TimetableViewer()
        self.tabs.addTab(self.viewer_tab, "Timetable Viewer")

        button_layout = QHBoxLayout()
        self.view_result_btn = QPushButton("View Current Solution")
        self.view_result_btn.clicked.connect(self.view_current_solution)
        self.view_result_btn.setEnabled(False)
        button_layout.addStretch()
        button_layout.addWidget(self.view_result_btn)

        layout.addWidget(self.tabs)
        layout.addLayout(button_layout)

        self.tabs.currentChanged.connect(self.on_tab_changed)

    def on_tab_changed(self, index):
        """Handle tab change"""
        result = self.solver_tab.result
        self.view_result_btn.setEnabled(bool(result and result.success))

    def view_current_solution(self):
        """Load current solver result into viewer"""
        json_data = self.solver_tab.get_result_json()
        if json_data:
            self.viewer_tab.load_from_result(json_data)
            self.tabs.setCurrentWidget(self.viewer_tab)
        else:
            QMessageBox.warning(
                self,
                "No Solution",
                "Please solve a timetable first before viewing."
            )
