"""
Minimum-step-count repair.

Splits the largest dose drop with an intermediate combination until the
path has enough phases or nothing else can be split.
"""

import logging
import math
from dataclasses import dataclass, field

from ..types import DoseCombination, TaperConstraints
from .combination_space import CombinationSpace

logger = logging.getLogger(__name__)


@dataclass
class StepRepair:
    """Outcome of a step-count repair pass."""

    combinations: list[DoseCombination]
    phases_added: int = 0
    notes: list[str] = field(default_factory=list)


class StepCountReconciler:
    """Insert intermediate phases into the largest steps of a path."""

    def __init__(
        self, space: CombinationSpace, start_dose: float, constraints: TaperConstraints
    ) -> None:
        self.space = space
        self.start_dose = start_dose
        self.constraints = constraints

    def reconcile(self, combinations: list[DoseCombination]) -> StepRepair:
        c = self.constraints
        path = list(combinations)

        if not path or len(path) >= c.min_steps:
            return StepRepair(combinations=path)

        target_steps = min(c.min_steps, c.step_ceiling)
        total_duration = sum(combo.cycle_length for combo in path)
        added = 0

        while (
            len(path) < target_steps
            and total_duration < c.max_duration
            and len(path) < c.step_ceiling
        ):
            split_index = self._largest_splittable_step(path)
            if split_index is None:
                break

            if split_index == 0:
                upper_dose = self.start_dose
            else:
                upper_dose = path[split_index - 1].average_daily_dose
            lower_dose = path[split_index].average_daily_dose
            intermediate = self._find_intermediate(upper_dose, lower_dose)

            if intermediate is None or total_duration + intermediate.cycle_length > c.max_duration:
                break

            path.insert(split_index, intermediate)
            total_duration += intermediate.cycle_length
            added += 1
            logger.debug(
                "Split step %.3f -> %.3f with %.3f units/day",
                upper_dose,
                lower_dose,
                intermediate.average_daily_dose,
            )

        repair = StepRepair(combinations=path, phases_added=added)
        if added:
            repair.notes.append(
                f"Added {added} intermediate phases by splitting the largest dose reductions"
            )
        return repair

    def _largest_splittable_step(self, path: list[DoseCombination]) -> int | None:
        """Index of the phase ending the largest step of at least twice the minimum step."""
        min_splittable = self.constraints.min_step_size * 2
        largest_index = None
        largest_step = 0.0
        prev_dose = self.start_dose

        for i, combo in enumerate(path):
            step_size = prev_dose - combo.average_daily_dose
            if step_size > largest_step and step_size >= min_splittable:
                largest_step = step_size
                largest_index = i
            prev_dose = combo.average_daily_dose

        return largest_index

    def _find_intermediate(self, upper_dose: float, lower_dose: float) -> DoseCombination | None:
        """Combination nearest the midpoint that keeps both half-steps in bounds."""
        c = self.constraints
        midpoint = (upper_dose + lower_dose) / 2
        best = None
        best_diff = math.inf

        for combo in self.space.between(upper_dose, lower_dose):
            upper_step = upper_dose - combo.average_daily_dose
            lower_step = combo.average_daily_dose - lower_dose

            if upper_step <= 0 or lower_step <= 0:
                continue
            if not c.min_step_size <= upper_step <= c.max_step_size:
                continue
            if not c.min_step_size <= lower_step <= c.max_step_size:
                continue
            if not c.min_cycle_length <= combo.cycle_length <= c.max_cycle_length:
                continue

            diff = abs(combo.average_daily_dose - midpoint)
            if diff < best_diff:
                best_diff = diff
                best = combo

        return best
