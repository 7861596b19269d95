"""
Safety bounds on the starting and goal doses.

Checked before any search. A failure ends the call with an empty plan,
one violation naming the offending quantity and one reasoning line.
"""

from dataclasses import dataclass

from ..dose_math import round3, to_fixed
from ..types import ConstraintStatus

MAX_START_DOSE = 2.0  # Units per day
MIN_REDUCTION = 0.25  # Units per day


@dataclass
class BoundsFailure:
    """Why a (start, goal) pair was rejected."""

    violation: str
    reasoning: str

    def to_status(self) -> ConstraintStatus:
        return ConstraintStatus(violated=[self.violation], reasoning=[self.reasoning])


def validate_dose_bounds(start_dose: float, goal_dose: float) -> BoundsFailure | None:
    """
    Reject globally unsafe or nonsensical dose pairs.

    Args:
        start_dose: Current average daily dose (units)
        goal_dose: Target average daily dose (units)

    Returns:
        BoundsFailure for the first failed check, or None if the pair is usable
    """
    reduction = round3(start_dose - goal_dose)

    if start_dose > MAX_START_DOSE:
        return BoundsFailure(
            violation=(
                f"Starting dose too high: {to_fixed(start_dose, 2)} units "
                f"(maximum: {MAX_START_DOSE} units)"
            ),
            reasoning="Tapers starting above 2 units per day are not supported for safety reasons.",
        )

    if goal_dose < 0:
        return BoundsFailure(
            violation=f"Goal dose cannot be negative: {to_fixed(goal_dose, 2)} units",
            reasoning="Goal dose must be 0 or positive.",
        )

    if reduction < MIN_REDUCTION:
        return BoundsFailure(
            violation=(
                f"Reduction too small: {to_fixed(reduction, 2)} units "
                f"(minimum: {MIN_REDUCTION} units)"
            ),
            reasoning="Reductions smaller than 1/4 unit are not practical for tapering.",
        )

    # Only reachable if MIN_REDUCTION is ever lowered to 0
    if start_dose <= goal_dose:
        return BoundsFailure(
            violation=(
                f"Invalid reduction: current dose ({to_fixed(start_dose, 2)}) must be "
                f"greater than goal dose ({to_fixed(goal_dose, 2)})"
            ),
            reasoning="Current dose must be higher than goal dose for tapering.",
        )

    return None
