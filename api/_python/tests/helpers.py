"""
Test helper functions for taper plan validation.

These functions can be imported by test modules for plan analysis.
"""

import sys
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from taper.types import DoseCombination, TaperConstraints, TaperPhase

# Slack for float comparisons on rounded doses
EPSILON = 1e-9


def phases_from_doses(pattern: list[tuple[int, int, int]]) -> list[TaperPhase]:
    """
    Build numbered phases from (whole, half, cycle) triples.

    Args:
        pattern: Ordered (whole_units, half_units, cycle_length) triples

    Returns:
        TaperPhase list numbered from 1
    """
    return [
        TaperPhase.from_combination(index, DoseCombination.build(*triple))
        for index, triple in enumerate(pattern, start=1)
    ]


def dose_drops(phases: list[TaperPhase], start_dose: float) -> list[float]:
    """Every consecutive dose difference, including zero drops from repeats."""
    drops = []
    prev_dose = start_dose
    for phase in phases:
        drops.append(prev_dose - phase.average_daily_dose)
        prev_dose = phase.average_daily_dose
    return drops


def is_non_increasing(phases: list[TaperPhase], start_dose: float) -> bool:
    """True if no phase is above the one before it (or above the start)."""
    return all(drop >= -EPSILON for drop in dose_drops(phases, start_dose))


def total_days(phases: list[TaperPhase]) -> int:
    return sum(p.cycle_length for p in phases)


def make_constraints(**overrides) -> TaperConstraints:
    """
    Resolved constraints for a 1.0 -> 0.5 taper on fixed 7-day cycles.

    Any field can be overridden by keyword.
    """
    values = dict(
        min_step_size=0.05,
        max_step_size=0.5,
        min_cycle_length=7,
        max_cycle_length=7,
        min_steps=1,
        max_steps=15,
        min_duration=0,
        max_duration=365,
    )
    values.update(overrides)
    return TaperConstraints(**values)
