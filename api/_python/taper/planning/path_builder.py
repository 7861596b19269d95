"""
Greedy constrained path search.

Builds the taper one phase at a time. Each iteration scores every admissible
next combination and keeps the lowest score. Smoothness (consistent step
sizes, then consistent cycle lengths) dominates the score; feasibility and
duration terms steer the search toward satisfying the remaining bounds.
"""

import logging
from dataclasses import dataclass, field

from ..types import DoseCombination, TaperConstraints
from .combination_space import CombinationSpace

logger = logging.getLogger(__name__)

# Score weights
STEP_SIZE_WEIGHT = 1.0
STEP_CONSISTENCY_WEIGHT = 2.0
CYCLE_CONSISTENCY_WEIGHT = 1.5
FEASIBILITY_WEIGHT = 0.8
DURATION_BIAS_WEIGHT = 0.5

# Score when the remaining dose cannot be covered by the remaining steps
FEASIBILITY_PENALTY = 1000.0

# Preferred cycle length before any phase has been chosen
DEFAULT_TARGET_CYCLE_LENGTH = 14


@dataclass
class TaperPath:
    """Mutable state of a path under construction."""

    start_dose: float
    combinations: list[DoseCombination] = field(default_factory=list)

    @property
    def current_dose(self) -> float:
        if not self.combinations:
            return self.start_dose
        return self.combinations[-1].average_daily_dose

    @property
    def total_duration(self) -> int:
        return sum(c.cycle_length for c in self.combinations)

    @property
    def step_count(self) -> int:
        return len(self.combinations)

    def previous_step_size(self) -> float | None:
        """Size of the most recent dose drop, or None for an empty path."""
        if not self.combinations:
            return None
        if len(self.combinations) == 1:
            return self.start_dose - self.combinations[0].average_daily_dose
        return self.combinations[-2].average_daily_dose - self.combinations[-1].average_daily_dose


class GreedyPathBuilder:
    """
    Select a phase sequence from start toward goal within the constraints.

    Terminates early when no candidate survives filtering. A short path is
    not an error here; the status reporter explains it later.
    """

    def __init__(
        self,
        space: CombinationSpace,
        start_dose: float,
        goal_dose: float,
        constraints: TaperConstraints,
    ) -> None:
        self.space = space
        self.start_dose = start_dose
        self.goal_dose = goal_dose
        self.constraints = constraints

        average_steps = (constraints.min_steps + constraints.max_steps) / 2
        self.ideal_step_size = (start_dose - goal_dose) / average_steps

    def build(self) -> TaperPath:
        c = self.constraints
        path = TaperPath(start_dose=self.start_dose)
        used: set[tuple] = set()

        while (
            path.current_dose > self.goal_dose + c.min_step_size
            and path.total_duration < c.max_duration
            and path.step_count < c.max_steps
        ):
            best = self._select_next(path, path.current_dose, path.total_duration, used)
            if best is None:
                logger.debug("No admissible step below %.3f units, stopping", path.current_dose)
                break

            path.combinations.append(best)
            used.add(best.key)
            logger.debug(
                "Phase %d: %.3f units/day over %d days",
                path.step_count,
                best.average_daily_dose,
                best.cycle_length,
            )

        return path

    def _select_next(
        self,
        path: TaperPath,
        current_dose: float,
        total_duration: int,
        used: set[tuple],
    ) -> DoseCombination | None:
        c = self.constraints
        best = None
        best_score = float("inf")

        window = self.space.between(current_dose - c.min_step_size, current_dose - c.max_step_size)
        for combo in window:
            step_size = current_dose - combo.average_daily_dose

            if step_size <= 0 or step_size < c.min_step_size or step_size > c.max_step_size:
                continue
            if not c.min_cycle_length <= combo.cycle_length <= c.max_cycle_length:
                continue
            if total_duration + combo.cycle_length > c.max_duration:
                continue
            if combo.key in used:
                continue

            score = self._score(combo, step_size, path, total_duration)
            # Strict comparison keeps the first candidate in sort order on ties
            if score < best_score:
                best_score = score
                best = combo

        return best

    def _score(
        self, combo: DoseCombination, step_size: float, path: TaperPath, total_duration: int
    ) -> float:
        """Weighted score for taking combo as the next phase (lower is better)."""
        c = self.constraints
        step_count = path.step_count

        step_size_score = abs(step_size - self.ideal_step_size)

        step_consistency = 0.0
        cycle_consistency = 0.0
        previous_cycle = DEFAULT_TARGET_CYCLE_LENGTH
        if step_count > 0:
            step_consistency = abs(step_size - path.previous_step_size())
            previous_cycle = path.combinations[-1].cycle_length
            cycle_consistency = abs(combo.cycle_length - previous_cycle)

        # Can the rest of the reduction still fit in the remaining budget?
        remaining_dose = combo.average_daily_dose - self.goal_dose
        remaining_steps = c.max_steps - step_count - 1
        remaining_duration = c.max_duration - total_duration - combo.cycle_length

        if remaining_steps > 0 and remaining_duration > 0:
            feasibility = abs(remaining_dose / remaining_steps - self.ideal_step_size)
        elif remaining_dose > c.min_step_size:
            feasibility = FEASIBILITY_PENALTY
        else:
            feasibility = 0.0

        duration_needed = c.min_duration - total_duration - combo.cycle_length
        if duration_needed > 0 and remaining_steps > 0:
            ideal_cycle = min(duration_needed / remaining_steps, c.max_cycle_length)
            duration_bias = abs(combo.cycle_length - ideal_cycle)
        else:
            duration_bias = abs(combo.cycle_length - previous_cycle)

        return (
            step_size_score * STEP_SIZE_WEIGHT
            + step_consistency * STEP_CONSISTENCY_WEIGHT
            + cycle_consistency * CYCLE_CONSISTENCY_WEIGHT
            + feasibility * FEASIBILITY_WEIGHT
            + duration_bias * DURATION_BIAS_WEIGHT
        )
