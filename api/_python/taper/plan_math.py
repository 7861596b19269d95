"""
Derived measurements of a taper plan.

Used by the status reporter and by consumers that chart or summarize a plan.
"""

from .types import TaperPhase


def calculate_taper_duration(phases: list[TaperPhase]) -> int:
    """Total days across all phases."""
    return sum(phase.cycle_length for phase in phases)


def step_sizes(phases: list[TaperPhase], start_dose: float) -> list[float]:
    """
    Dose drops between consecutive phases, starting from the start dose.

    Only positive drops are returned; stabilization repeats contribute nothing.
    """
    sizes = []
    prev_dose = start_dose
    for phase in phases:
        step = prev_dose - phase.average_daily_dose
        if step > 0:
            sizes.append(step)
        prev_dose = phase.average_daily_dose
    return sizes


def chart_points_with_start(
    phases: list[TaperPhase], start_dose: float
) -> list[dict[str, float]]:
    """
    Chart series with the starting dose as phase 0.

    Returns:
        [{"phase": 0, "average_daily_dose": start}, {"phase": 1, ...}, ...]
    """
    points = [{"phase": 0, "average_daily_dose": start_dose}]
    points.extend(
        {"phase": phase.phase, "average_daily_dose": phase.average_daily_dose}
        for phase in phases
    )
    return points
