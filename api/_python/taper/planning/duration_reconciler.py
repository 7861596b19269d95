"""
Minimum-duration repair.

When the greedy path is shorter than the requested minimum duration, hold
intermediate doses longer by inserting stabilization repeats after them.
Dose values never change; only plateaus are added.
"""

import logging
import math
from dataclasses import dataclass, field

from ..dose_math import format_number
from ..types import DoseCombination, TaperConstraints
from .combination_space import CombinationSpace

logger = logging.getLogger(__name__)

# Cycle length assumed when estimating how many repeats a deficit needs
STABILIZATION_CYCLE_DAYS = 14


@dataclass
class DurationRepair:
    """Outcome of a duration repair pass."""

    combinations: list[DoseCombination]
    phases_added: int = 0
    notes: list[str] = field(default_factory=list)


class DurationReconciler:
    """
    Extend a path toward a minimum total duration with stabilization repeats.

    Repeats go after every phase except the last, one per phase per round,
    so extra time spreads evenly over the intermediate doses.
    """

    def __init__(self, space: CombinationSpace, constraints: TaperConstraints) -> None:
        self.space = space
        self.constraints = constraints

    def reconcile(self, combinations: list[DoseCombination]) -> DurationRepair:
        c = self.constraints
        total_duration = sum(combo.cycle_length for combo in combinations)

        if not combinations or total_duration >= c.min_duration:
            return DurationRepair(combinations=combinations)

        deficit = c.min_duration - total_duration
        estimate_days = min(STABILIZATION_CYCLE_DAYS, c.max_cycle_length)
        budget = min(math.ceil(deficit / estimate_days), c.step_ceiling - len(combinations))

        if budget <= 0:
            logger.debug("No step budget left for stabilization phases")
            return DurationRepair(combinations=combinations)

        plateaus = [[combo] for combo in combinations]
        step_count = len(combinations)
        added = 0

        while added < budget and total_duration < c.min_duration:
            inserted_this_round = False

            for plateau in plateaus[:-1]:
                if added >= budget or total_duration >= c.min_duration:
                    break
                if step_count >= c.step_ceiling:
                    break

                repeat = self._find_repeat(plateau[-1])
                if repeat is None:
                    continue
                if total_duration + repeat.cycle_length > c.max_duration:
                    continue

                plateau.append(repeat)
                total_duration += repeat.cycle_length
                step_count += 1
                added += 1
                inserted_this_round = True

            if not inserted_this_round:
                break

        rebuilt = [combo for plateau in plateaus for combo in plateau]
        repair = DurationRepair(combinations=rebuilt, phases_added=added)

        if added:
            logger.debug("Added %d stabilization phases, total %d days", added, total_duration)
            repair.notes.append(
                f"Added {added} stabilization phases to extend the taper to "
                f"{total_duration} days (minimum: {format_number(c.min_duration)} days)"
            )
        return repair

    def _find_repeat(self, phase: DoseCombination) -> DoseCombination | None:
        """Same-dose combination whose cycle length deviates least from the phase."""
        c = self.constraints
        best = None
        best_deviation = math.inf

        for combo in self.space.with_dose(phase.average_daily_dose):
            if not c.min_cycle_length <= combo.cycle_length <= c.max_cycle_length:
                continue
            deviation = abs(combo.cycle_length - phase.cycle_length)
            if deviation < best_deviation:
                best_deviation = deviation
                best = combo

        return best
