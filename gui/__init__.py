"""GUI package (PyQt6 widgets live in main_window and timetable_viewer)"""
