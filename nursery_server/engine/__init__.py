"""
Period lifecycle and slot grid engine.

Shared by the classroom activity schedules and the category menus.
"""

from .grid import closing_time, generate_slot_grid
from .scope import MENU_SCOPE, SCHEDULE_SCOPE, PeriodScope
from .store import PeriodStore
from .sweep import ActivationSweep, SweepReport
from .validator import BatchValidator, validate_batch

__all__ = [
    "ActivationSweep",
    "BatchValidator",
    "MENU_SCOPE",
    "PeriodScope",
    "PeriodStore",
    "SCHEDULE_SCOPE",
    "SweepReport",
    "closing_time",
    "generate_slot_grid",
    "validate_batch",
]
