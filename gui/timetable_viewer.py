"""
Timetable viewer widget for displaying schedules
"""
import json
from typing import Dict, List
from PyQt6.QtWidgets import (
    QWidget, QVBoxLayout, QHBoxLayout, QLabel,
    QComboBox, QPushButton, QTableWidget, QTableWidgetItem,
    QHeaderView, QFileDialog, QMessageBox, QScrollArea, QFrame
)
from PyQt6.QtCore import Qt
from PyQt6.QtGui import QColor

from config import LAB, TUTORIAL
from gui.grid import collect_days, collect_times, group_sessions, sort_section_key

SESSION_COLORS = {
    LAB: QColor(255, 243, 205),
    TUTORIAL: QColor(227, 242, 253),
}
LECTURE_COLOR = QColor(232, 245, 233)
EMPTY_COLOR = QColor(250, 250, 250)


class TimetableViewer(QWidget):
    """Widget for viewing a section's week in a day x time grid"""

    def __init__(self):
        super().__init__()
        self.timetable_data = None
        self.days: List[str] = []
        self.time_slots: List[str] = []

        self.init_ui()

    def init_ui(self):
        layout = QVBoxLayout(self)

        title_label = QLabel("Timetable Viewer")
        title_label.setStyleSheet("font-size: 18px; font-weight: bold; padding: 10px;")
        title_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        layout.addWidget(title_label)

        layout.addWidget(self.create_control_panel())

        self.table_scroll = QScrollArea()
        self.table_scroll.setWidgetResizable(True)
        self.table_scroll.setFrameShape(QFrame.Shape.StyledPanel)

        self.table_widget = QTableWidget()
        self.table_widget.setEditTriggers(QTableWidget.EditTrigger.NoEditTriggers)
        self.table_widget.setAlternatingRowColors(True)
        self.table_widget.setStyleSheet("""
            QTableWidget { gridline-color: #d0d0d0; font-size: 11px; }
            QTableWidget::item { padding: 5px; border: 1px solid #e0e0e0; }
            QHeaderView::section {
                background-color: #2196F3; color: white; padding: 8px;
                font-weight: bold; border: 1px solid #1976D2;
            }
        """)

        self.table_scroll.setWidget(self.table_widget)
        layout.addWidget(self.table_scroll)

        self.status_label = QLabel("Load a timetable.json file to view the schedule")
        self.status_label.setStyleSheet("padding: 5px; color: #666;")
        layout.addWidget(self.status_label)

    def create_control_panel(self) -> QWidget:
        """Create the control panel with filters"""
        panel = QWidget()
        layout = QHBoxLayout(panel)

        self.load_btn = QPushButton("Load Timetable")
        self.load_btn.clicked.connect(self.load_timetable)
        layout.addWidget(self.load_btn)

        layout.addWidget(QLabel("Year:"))
        self.year_combo = QComboBox()
        self.year_combo.currentIndexChanged.connect(self.on_year_changed)
        layout.addWidget(self.year_combo)

        layout.addWidget(QLabel("Section:"))
        self.section_combo = QComboBox()
        self.section_combo.currentIndexChanged.connect(self.refresh_table)
        layout.addWidget(self.section_combo)

        layout.addStretch()

        self.year_combo.setEnabled(False)
        self.section_combo.setEnabled(False)

        return panel

    def load_timetable(self):
        """Load timetable from JSON file"""
        file_path, _ = QFileDialog.getOpenFileName(
            self,
            "Load Timetable",
            "",
            "JSON Files (*.json);;All Files (*)"
        )

        if not file_path:
            return

        try:
            with open(file_path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            QMessageBox.critical(self, "Error", f"Failed to load timetable:\n{str(e)}")
            return

        if not data.get('success', False):
            QMessageBox.warning(
                self,
                "Invalid Timetable",
                data.get('reason', "The timetable file indicates no valid schedule was found.")
            )
            return

        self.load_from_result(data)

    def load_from_result(self, json_data: dict):
        """Load timetable directly from result data"""
        if not json_data.get('success', False):
            self.status_label.setText("No valid schedule to display")
            return

        self.timetable_data = json_data
        schedule = json_data.get('schedule', {})
        self.days = collect_days(schedule)
        self.time_slots = collect_times(schedule)
        self.populate_filters()

        stats = json_data.get('stats', {})
        self.status_label.setText(
            f"Displaying: {stats.get('totalCourses', 0)} courses, "
            f"{stats.get('totalSessions', 0)} sessions, "
            f"solved in {stats.get('solveTime', 0):.2f}s"
        )

    def populate_filters(self):
        schedule = self.timetable_data.get('schedule', {})

        self.year_combo.blockSignals(True)
        self.year_combo.clear()
        for year in sorted(schedule.keys(), key=int):
            self.year_combo.addItem(f"Year {year}", year)
        self.year_combo.blockSignals(False)

        self.year_combo.setEnabled(True)
        self.on_year_changed()

    def on_year_changed(self):
        """Handle year selection change"""
        if not self.timetable_data:
            return

        year = self.year_combo.currentData()
        if year is None:
            return

        year_data = self.timetable_data.get('schedule', {}).get(year, {})

        self.section_combo.blockSignals(True)
        self.section_combo.clear()
        for section in sorted(year_data.keys(), key=sort_section_key):
            self.section_combo.addItem(section, section)
        self.section_combo.blockSignals(False)

        self.section_combo.setEnabled(True)
        self.refresh_table()

    def refresh_table(self):
        """Refresh the timetable display"""
        if not self.timetable_data:
            return

        year = self.year_combo.currentData()
        section = self.section_combo.currentData()
        if year is None or section is None:
            return

        sessions = self.timetable_data.get('schedule', {}).get(year, {}).get(section, [])
        self.display_timetable(sessions)

    def display_timetable(self, sessions: List[Dict]):
        """Display timetable in grid format"""
        num_rows = len(self.time_slots)
        num_cols = len(self.days)

        self.table_widget.clearContents()
        self.table_widget.setRowCount(num_rows)
        self.table_widget.setColumnCount(num_cols)
        self.table_widget.setHorizontalHeaderLabels(self.days)
        self.table_widget.setVerticalHeaderLabels(self.time_slots)

        grid = group_sessions(sessions)

        for row, time_slot in enumerate(self.time_slots):
            for col, day in enumerate(self.days):
                cell_sessions = grid.get((day, time_slot))
                if cell_sessions:
                    item = QTableWidgetItem(self.format_cell(cell_sessions))
                    kind = cell_sessions[0].get('type', '')
                    item.setBackground(SESSION_COLORS.get(kind, LECTURE_COLOR))
                    item.setTextAlignment(Qt.AlignmentFlag.AlignTop | Qt.AlignmentFlag.AlignLeft)
                else:
                    item = QTableWidgetItem("")
                    item.setBackground(EMPTY_COLOR)
                self.table_widget.setItem(row, col, item)

        header = self.table_widget.horizontalHeader()
        for i in range(num_cols):
            header.setSectionResizeMode(i, QHeaderView.ResizeMode.Stretch)

        v_header = self.table_widget.verticalHeader()
        for i in range(num_rows):
            v_header.setSectionResizeMode(i, QHeaderView.ResizeMode.ResizeToContents)

    def format_cell(self, sessions: List[Dict]) -> str:
        """Format cell content for one or more sessions"""
        blocks = []
        for session in sessions:
            blocks.append("\n".join([
                f"{session.get('code', '')} - {session.get('name', '')}",
                f"  {session.get('type', '')} #{session.get('instance', 0) + 1}",
                f"  {session.get('staff', '')}",
                f"  {session.get('room', '')}"
            ]))
        return ("\n" + "─" * 30 + "\n").join(blocks)
