"""
Constraint normalization.

Turns the four optional caller ranges into concrete bounds:
1. Fill unset bounds with adaptive defaults
2. Repair inverted ranges so every range is non-empty
3. Bias the cycle-length window upward when only a duration floor is given
"""

import logging
import math

from ..types import ConstraintRange, TaperConstraints, present

logger = logging.getLogger(__name__)

# Step size defaults scale with the total reduction
MIN_STEP_FLOOR = 0.005
MIN_STEP_DIVISOR = 20
MAX_STEP_FLOOR = 0.02
MAX_STEP_DIVISOR = 3

# Inverted step ranges (both bounds from the caller) are rebuilt around
# their midpoint with this spread
REPAIR_MIN_STEP_DIVISOR = 10
REPAIR_MAX_STEP_DIVISOR = 2

DEFAULT_CYCLE_LENGTH = (7, 28)  # Days
DEFAULT_STEPS = (3, 15)
DEFAULT_DURATION = (0, 365)  # Days

# Duration bias
MIN_ESTIMATED_STEPS = 6
ESTIMATED_STEP_MULTIPLIER = 1.5
BIAS_THRESHOLD_DAYS = 14
BIAS_WINDOW_BELOW = 4
BIAS_WINDOW_ABOVE = 2


class ConstraintNormalizer:
    """
    Resolve optional caller ranges into a TaperConstraints.

    Only the start and goal doses are needed up front since the step-size
    defaults scale with the total reduction.
    """

    def __init__(self, start_dose: float, goal_dose: float) -> None:
        self.start_dose = start_dose
        self.goal_dose = goal_dose
        self.total_reduction = start_dose - goal_dose

    def normalize(
        self,
        step_size_range: ConstraintRange | None = None,
        cycle_length_range: ConstraintRange | None = None,
        steps_range: ConstraintRange | None = None,
        duration_range: ConstraintRange | None = None,
    ) -> TaperConstraints:
        """
        Build concrete bounds for every dimension.

        Empty ranges are treated exactly like absent ones.
        """
        step_size_range = present(step_size_range)
        cycle_length_range = present(cycle_length_range)
        steps_range = present(steps_range)
        duration_range = present(duration_range)

        min_step, max_step = self._resolve_step_sizes(step_size_range)

        min_cycle, max_cycle = self._resolve_int_range(cycle_length_range, DEFAULT_CYCLE_LENGTH)
        min_cycle = max(1, min_cycle)
        max_cycle = max(min_cycle, max_cycle)

        # A plan always has at least one phase
        min_steps, max_steps = self._resolve_int_range(steps_range, DEFAULT_STEPS)
        min_steps = max(1, min_steps)
        max_steps = max(min_steps, max_steps)

        min_duration, max_duration = self._resolve_range(duration_range, DEFAULT_DURATION)

        constraints = TaperConstraints(
            min_step_size=min_step,
            max_step_size=max_step,
            min_cycle_length=min_cycle,
            max_cycle_length=max_cycle,
            min_steps=min_steps,
            max_steps=max_steps,
            min_duration=min_duration,
            max_duration=max_duration,
        )

        if steps_range is not None and steps_range.max is not None:
            constraints.step_ceiling = max_steps

        if duration_range is not None and duration_range.min and cycle_length_range is None:
            self._bias_cycle_length_for_duration(constraints, duration_range.min)

        logger.debug("Resolved taper constraints: %s", constraints)
        return constraints

    def default_step_sizes(self) -> tuple[float, float]:
        """Adaptive step size defaults for the current reduction."""
        reduction = self.total_reduction
        default_min = max(MIN_STEP_FLOOR, reduction / MIN_STEP_DIVISOR)
        default_max = min(reduction, max(reduction / MAX_STEP_DIVISOR, MAX_STEP_FLOOR))
        return default_min, default_max

    def _resolve_step_sizes(self, step_size_range: ConstraintRange | None) -> tuple[float, float]:
        default_min, default_max = self.default_step_sizes()
        min_given = step_size_range is not None and step_size_range.min is not None
        max_given = step_size_range is not None and step_size_range.max is not None

        min_step = step_size_range.min if min_given else default_min
        max_step = step_size_range.max if max_given else default_max

        if min_step <= max_step:
            return min_step, max_step

        if min_given and max_given:
            avg_step = (min_step + max_step) / 2
            return (
                min(avg_step, self.total_reduction / REPAIR_MIN_STEP_DIVISOR),
                max(avg_step, self.total_reduction / REPAIR_MAX_STEP_DIVISOR),
            )
        if max_given:
            # Caller's maximum wins over the defaulted minimum
            return max_step / 2, max_step
        return min_step, max(min_step, min(self.total_reduction, min_step * 2))

    def _resolve_range(
        self, constraint: ConstraintRange | None, defaults: tuple[float, float]
    ) -> tuple[float, float]:
        min_given = constraint is not None and constraint.min is not None
        max_given = constraint is not None and constraint.max is not None
        low = constraint.min if min_given else defaults[0]
        high = constraint.max if max_given else defaults[1]

        if low > high:
            if min_given and max_given:
                low, high = high, low
            elif max_given:
                low = high
            else:
                high = low
        return low, high

    def _resolve_int_range(
        self, constraint: ConstraintRange | None, defaults: tuple[int, int]
    ) -> tuple[int, int]:
        low, high = self._resolve_range(constraint, defaults)
        return int(low), int(high)

    def _bias_cycle_length_for_duration(
        self, constraints: TaperConstraints, min_duration: float
    ) -> None:
        """
        Narrow the cycle window toward longer cycles when a duration floor is set.

        Makes the greedy search likelier to reach the floor without repairs.
        """
        estimated_steps = max(
            MIN_ESTIMATED_STEPS,
            math.ceil(
                self.total_reduction / (constraints.max_step_size * ESTIMATED_STEP_MULTIPLIER)
            ),
        )
        target_cycle = math.ceil(min_duration / estimated_steps)

        if target_cycle <= BIAS_THRESHOLD_DAYS:
            return

        capped_target = min(target_cycle, constraints.max_cycle_length)
        biased_min = max(constraints.min_cycle_length, capped_target - BIAS_WINDOW_BELOW)
        biased_max = min(constraints.max_cycle_length, capped_target + BIAS_WINDOW_ABOVE)

        if (
            biased_min > constraints.min_cycle_length
            or biased_max < constraints.max_cycle_length
        ):
            logger.debug(
                "Biasing cycle length to %d-%d days for a %s day minimum duration",
                biased_min,
                biased_max,
                min_duration,
            )
            constraints.min_cycle_length = biased_min
            constraints.max_cycle_length = biased_max
