"""Core package - Scheduling and reporting logic."""

from agenda.core.controller import AgendaController, ReportsController
from agenda.core.fsm import StatusGroup, transition
from agenda.core.reports import ReportRange, compute_report
from agenda.core.windows import Granularity, window_bounds

__all__ = [
    "AgendaController",
    "ReportsController",
    "StatusGroup",
    "transition",
    "ReportRange",
    "compute_report",
    "Granularity",
    "window_bounds",
]
