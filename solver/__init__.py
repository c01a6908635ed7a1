"""CSP solver package"""
from .csp_solver import CSPSolver
from .domain_builder import RoomClassifier, RoomRule
from .session_generator import build_session_variables

__all__ = ['CSPSolver', 'RoomClassifier', 'RoomRule', 'build_session_variables']
