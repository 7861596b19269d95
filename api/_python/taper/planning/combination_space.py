"""
Enumeration of achievable dosing patterns.

Every (whole, half, cycle) triple inside the cycle bounds whose average daily
dose lies between the goal and the start dose. The list is sorted once,
descending by dose, and then only read. Its order is the tie-break order for
every later selection.
"""

import math
from bisect import bisect_left, bisect_right

from ..types import DoseCombination

MAX_WHOLE_UNITS_PER_DAY = 3

# Slack applied to slice bounds before the exact float checks
SLICE_EPSILON = 1e-9


def generate_combinations(
    start_dose: float, goal_dose: float, min_cycle_length: int, max_cycle_length: int
) -> list[DoseCombination]:
    """
    Enumerate dosing patterns whose average dose is within [goal, start].

    Args:
        start_dose: Upper dose bound (units/day)
        goal_dose: Lower dose bound (units/day)
        min_cycle_length: Shortest cycle (days)
        max_cycle_length: Longest cycle (days)

    Returns:
        Combinations sorted descending by average daily dose (stable)
    """
    units_cap = math.ceil(start_dose * max_cycle_length)
    combinations = []

    for cycle in range(min_cycle_length, max_cycle_length + 1):
        max_whole = min(units_cap, cycle * MAX_WHOLE_UNITS_PER_DAY)
        for whole in range(max_whole + 1):
            max_half = min(units_cap - whole, cycle)
            for half in range(max_half + 1):
                combo = DoseCombination.build(whole, half, cycle)
                if goal_dose <= combo.average_daily_dose <= start_dose:
                    combinations.append(combo)

    # sorted() is stable with reverse=True, so equal doses keep enumeration order
    return sorted(combinations, key=lambda c: c.average_daily_dose, reverse=True)


class CombinationSpace:
    """Read-only view over the sorted combinations with dose-window lookups."""

    def __init__(self, combinations: list[DoseCombination]) -> None:
        self.combinations = combinations
        # Ascending keys for bisect over a descending list
        self._neg_doses = [-c.average_daily_dose for c in combinations]

    @classmethod
    def build(
        cls, start_dose: float, goal_dose: float, min_cycle_length: int, max_cycle_length: int
    ) -> "CombinationSpace":
        return cls(generate_combinations(start_dose, goal_dose, min_cycle_length, max_cycle_length))

    def __len__(self) -> int:
        return len(self.combinations)

    def __iter__(self):
        return iter(self.combinations)

    def between(self, high: float, low: float) -> list[DoseCombination]:
        """
        Combinations with low <= dose <= high, in sort order.

        The window is widened by a tiny epsilon; callers apply their own
        exact comparisons on the result.
        """
        if high < low:
            return []
        start = bisect_left(self._neg_doses, -high - SLICE_EPSILON)
        end = bisect_right(self._neg_doses, -low + SLICE_EPSILON)
        return self.combinations[start:end]

    def with_dose(self, dose: float) -> list[DoseCombination]:
        """Combinations whose rounded dose equals the given dose."""
        return [c for c in self.between(dose, dose) if c.average_daily_dose == dose]
