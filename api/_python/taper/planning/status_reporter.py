"""
Constraint status reporting.

Audits a finished plan against every constraint the caller supplied and
records, for each bound, whether it was respected or violated. Dimensions the
caller left unset are skipped. The report describes the plan; it never feeds
back into generation.
"""

from ..dose_math import format_number, to_fixed
from ..plan_math import calculate_taper_duration, step_sizes
from ..types import ConstraintRange, ConstraintStatus, TaperConstraints, TaperPhase, present

# Tolerance for continuous quantities (doses, step sizes)
DOSE_TOLERANCE = 0.001

# A plan ending further than this above the goal gets a warning
GOAL_PROXIMITY = 0.1

GENERAL_VIOLATION_WARNING = (
    "Some constraints could not be satisfied due to mathematical limitations "
    "or conflicts between constraints."
)
HARD_LIMIT_REASONING = (
    "The algorithm prioritizes maximum constraints (hard limits) over minimum "
    "constraints when conflicts occur."
)


class ConstraintStatusReporter:
    """
    Build the ConstraintStatus for one generation call.

    Repair notes can be recorded before the audit; they appear first in
    the reasoning list.
    """

    def __init__(
        self,
        start_dose: float,
        goal_dose: float,
        step_size_range: ConstraintRange | None = None,
        cycle_length_range: ConstraintRange | None = None,
        steps_range: ConstraintRange | None = None,
        duration_range: ConstraintRange | None = None,
    ) -> None:
        self.start_dose = start_dose
        self.goal_dose = goal_dose
        self.step_size_range = present(step_size_range)
        self.cycle_length_range = present(cycle_length_range)
        self.steps_range = present(steps_range)
        self.duration_range = present(duration_range)
        self.status = ConstraintStatus()

    def add_reasoning(self, notes: list[str]) -> None:
        self.status.reasoning.extend(notes)

    def record_no_combinations(self, constraints: TaperConstraints) -> None:
        """No dosing pattern exists between goal and start within the cycle bounds."""
        self.status.violated.append(
            f"No valid taper combinations found between {to_fixed(self.goal_dose, 3)} and "
            f"{to_fixed(self.start_dose, 3)} units/day with cycle lengths of "
            f"{constraints.min_cycle_length}-{constraints.max_cycle_length} days"
        )
        self.status.reasoning.append(
            f"No whole/half unit pattern fits the dose range with a max cycle length of "
            f"{constraints.max_cycle_length} days. Try increasing the maximum cycle length "
            f"or adjusting the dose range."
        )

    def record_no_first_step(self, constraints: TaperConstraints) -> None:
        """Combinations exist but none is an admissible first step."""
        if constraints.max_duration < constraints.min_cycle_length:
            self.status.violated.append(
                f"No valid taper step found: maximum duration of "
                f"{format_number(constraints.max_duration)} days is shorter than the "
                f"minimum cycle length of {constraints.min_cycle_length} days"
            )
            self.status.reasoning.append(
                "Try increasing the maximum duration or lowering the minimum cycle length."
            )
            return

        self.status.violated.append(
            f"No valid taper step found: step size must be between "
            f"{to_fixed(constraints.min_step_size, 3)} and {to_fixed(constraints.max_step_size, 3)} "
            f"units with cycle lengths of "
            f"{constraints.min_cycle_length}-{constraints.max_cycle_length} days"
        )
        self.status.reasoning.append(
            "Try increasing the maximum step size or adjusting the cycle length range."
        )

    def audit(self, phases: list[TaperPhase]) -> ConstraintStatus:
        """
        Compare realized plan metrics against the supplied bounds.

        Returns:
            The accumulated ConstraintStatus
        """
        if phases:
            self._check_step_sizes(phases)
            self._check_cycle_lengths(phases)
            self._check_steps(phases)
            self._check_duration(phases)
            self._check_goal_reached(phases)

        if self.status.violated:
            self.status.warnings.append(GENERAL_VIOLATION_WARNING)
            self.status.reasoning.append(HARD_LIMIT_REASONING)

        return self.status

    def _check_step_sizes(self, phases: list[TaperPhase]) -> None:
        if self.step_size_range is None:
            return

        sizes = step_sizes(phases, self.start_dose)
        min_actual = min(sizes) if sizes else 0.0
        max_actual = max(sizes) if sizes else 0.0
        bounds = self.step_size_range

        if bounds.min is not None:
            if min_actual >= bounds.min - DOSE_TOLERANCE:
                self.status.respected.append(
                    f"Minimum step size: {to_fixed(min_actual, 3)} units ≥ "
                    f"{format_number(bounds.min)} units"
                )
            else:
                self.status.violated.append(
                    f"Minimum step size: {to_fixed(min_actual, 3)} units < "
                    f"{format_number(bounds.min)} units"
                )

        if bounds.max is not None:
            if max_actual <= bounds.max + DOSE_TOLERANCE:
                self.status.respected.append(
                    f"Maximum step size: {to_fixed(max_actual, 3)} units ≤ "
                    f"{format_number(bounds.max)} units"
                )
            else:
                self.status.violated.append(
                    f"Maximum step size: {to_fixed(max_actual, 3)} units > "
                    f"{format_number(bounds.max)} units"
                )

    def _check_cycle_lengths(self, phases: list[TaperPhase]) -> None:
        if self.cycle_length_range is None:
            return

        cycle_lengths = [p.cycle_length for p in phases]
        min_actual = min(cycle_lengths)
        max_actual = max(cycle_lengths)
        bounds = self.cycle_length_range

        if bounds.min is not None:
            if min_actual >= bounds.min:
                self.status.respected.append(
                    f"Minimum cycle length: {min_actual} days ≥ {format_number(bounds.min)} days"
                )
            else:
                self.status.violated.append(
                    f"Minimum cycle length: {min_actual} days < {format_number(bounds.min)} days"
                )

        if bounds.max is not None:
            if max_actual <= bounds.max:
                self.status.respected.append(
                    f"Maximum cycle length: {max_actual} days ≤ {format_number(bounds.max)} days"
                )
            else:
                self.status.violated.append(
                    f"Maximum cycle length: {max_actual} days > {format_number(bounds.max)} days"
                )

    def _check_steps(self, phases: list[TaperPhase]) -> None:
        if self.steps_range is None:
            return

        count = len(phases)
        bounds = self.steps_range

        if bounds.min is not None:
            if count >= bounds.min:
                self.status.respected.append(
                    f"Minimum steps: {count} ≥ {format_number(bounds.min)}"
                )
            else:
                self.status.violated.append(
                    f"Minimum steps: {count} < {format_number(bounds.min)}"
                )
                self.status.reasoning.append(
                    f"Could not create {format_number(bounds.min)} steps while "
                    f"respecting other constraints"
                )

        if bounds.max is not None:
            if count <= bounds.max:
                self.status.respected.append(
                    f"Maximum steps: {count} ≤ {format_number(bounds.max)}"
                )
            else:
                self.status.violated.append(
                    f"Maximum steps: {count} > {format_number(bounds.max)}"
                )
                self.status.reasoning.append(
                    "Exceeded maximum steps to meet minimum duration requirement"
                )

    def _check_duration(self, phases: list[TaperPhase]) -> None:
        if self.duration_range is None:
            return

        total = calculate_taper_duration(phases)
        bounds = self.duration_range

        if bounds.min is not None:
            if total >= bounds.min:
                self.status.respected.append(
                    f"Minimum duration: {total} days ≥ {format_number(bounds.min)} days"
                )
            else:
                self.status.violated.append(
                    f"Minimum duration: {total} days < {format_number(bounds.min)} days"
                )
                max_steps = self.steps_range.max if self.steps_range else None
                if max_steps is not None and len(phases) >= max_steps:
                    self.status.reasoning.append(
                        f"Could not meet minimum duration due to maximum steps "
                        f"constraint ({format_number(max_steps)} steps)"
                    )
                else:
                    self.status.reasoning.append(
                        "Could not meet minimum duration with available dose combinations"
                    )

        if bounds.max is not None:
            if total <= bounds.max:
                self.status.respected.append(
                    f"Maximum duration: {total} days ≤ {format_number(bounds.max)} days"
                )
            else:
                self.status.violated.append(
                    f"Maximum duration: {total} days > {format_number(bounds.max)} days"
                )

    def _check_goal_reached(self, phases: list[TaperPhase]) -> None:
        final_dose = phases[-1].average_daily_dose
        gap = final_dose - self.goal_dose
        if gap > GOAL_PROXIMITY + DOSE_TOLERANCE:
            self.status.warnings.append(
                f"Taper ends at {to_fixed(final_dose, 3)} units/day, "
                f"{to_fixed(gap, 3)} above the goal of {to_fixed(self.goal_dose, 3)} units/day"
            )
