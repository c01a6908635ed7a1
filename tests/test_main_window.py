import pytest

QtWidgets = pytest.importorskip("PyQt6.QtWidgets")


@pytest.fixture
def solver_tab(monkeypatch):
    monkeypatch.setenv("QT_QPA_PLATFORM", "offscreen")
    from gui.main_window import SolverTab

    app = QtWidgets.QApplication.instance() or QtWidgets.QApplication([])
    tab = SolverTab()
    yield tab
    tab.deleteLater()
    app.processEvents()


def test_time_limit_defaults_to_unbounded(solver_tab):
    assert solver_tab.current_settings().time_limit is None


def test_time_limit_reaches_solver_settings(solver_tab):
    solver_tab.time_limit_spin.setValue(2.5)
    assert solver_tab.current_settings().time_limit == 2.5
