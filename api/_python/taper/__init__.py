"""
Taper Plan Generation

Builds monotonically decreasing dose-reduction plans from whole and half
unit combinations, within optional step size, cycle length, step count and
duration constraints.

Main generator: TaperGenerator (greedy search with duration/step repairs)
"""

from .daily_schedule import expand_daily_schedule, get_today_in_tz
from .dose_math import round3, units_to_milligrams
from .generator import (
    TaperGenerator,
    generate_optimal_taper_phases,
    generate_taper,
    generate_taper_phases_legacy,
)
from .plan_math import calculate_taper_duration, chart_points_with_start, step_sizes
from .types import (
    ConstraintRange,
    ConstraintStatus,
    DailyDose,
    DoseCombination,
    TaperConstraints,
    TaperPhase,
    TaperRequest,
    TaperResult,
)

__all__ = [
    # Types
    "ConstraintRange",
    "ConstraintStatus",
    "DailyDose",
    "DoseCombination",
    "TaperConstraints",
    "TaperPhase",
    "TaperRequest",
    "TaperResult",
    # Generator
    "TaperGenerator",
    "generate_taper",
    "generate_optimal_taper_phases",
    "generate_taper_phases_legacy",
    # Plan utilities
    "calculate_taper_duration",
    "chart_points_with_start",
    "step_sizes",
    "round3",
    "units_to_milligrams",
    # Calendar
    "expand_daily_schedule",
    "get_today_in_tz",
]
