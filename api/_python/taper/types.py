"""
Data structures for taper plan generation.

Covers the candidate dosing patterns, the resulting phases, the optional
caller constraints and the status report that accompanies every plan.
"""

from dataclasses import dataclass, field
from datetime import date

from .dose_math import round3

# =============================================================================
# Dosing Patterns
# =============================================================================


@dataclass
class DoseCombination:
    """
    A candidate phase shape: whole and half units taken over one cycle.

    average_daily_dose is always derived from the other fields and rounded
    to 3 decimal places. That rounded value is the one every comparison uses.
    """

    whole_units: int
    half_units: int
    total_units: float
    average_daily_dose: float
    cycle_length: int  # Days

    @classmethod
    def build(cls, whole_units: int, half_units: int, cycle_length: int) -> "DoseCombination":
        """Create a combination, deriving total units and average daily dose."""
        total_units = whole_units + 0.5 * half_units
        return cls(
            whole_units=whole_units,
            half_units=half_units,
            total_units=total_units,
            average_daily_dose=round3(total_units / cycle_length),
            cycle_length=cycle_length,
        )

    @property
    def key(self) -> tuple[int, int, float, int]:
        """Identity used for duplicate detection (all four pattern fields)."""
        return (self.whole_units, self.half_units, self.average_daily_dose, self.cycle_length)


@dataclass
class TaperPhase:
    """One step of a taper: a dosing pattern with its 1-based position."""

    phase: int
    whole_units: int
    half_units: int
    total_units: float
    average_daily_dose: float
    cycle_length: int

    @classmethod
    def from_combination(cls, phase: int, combo: DoseCombination) -> "TaperPhase":
        return cls(
            phase=phase,
            whole_units=combo.whole_units,
            half_units=combo.half_units,
            total_units=combo.total_units,
            average_daily_dose=combo.average_daily_dose,
            cycle_length=combo.cycle_length,
        )


# =============================================================================
# Constraints
# =============================================================================


@dataclass
class ConstraintRange:
    """
    Optional bounds for one constraint dimension.

    A range with neither bound carries no meaning beyond an absent range.
    Use from_bounds() at the input boundary so that case becomes None.
    """

    min: float | None = None
    max: float | None = None

    @property
    def is_empty(self) -> bool:
        return self.min is None and self.max is None

    @staticmethod
    def from_bounds(
        min_value: float | None = None, max_value: float | None = None
    ) -> "ConstraintRange | None":
        """Build a range, or None when neither bound is filled in."""
        if min_value is None and max_value is None:
            return None
        return ConstraintRange(min=min_value, max=max_value)


def present(constraint: ConstraintRange | None) -> ConstraintRange | None:
    """Collapse an empty range to None."""
    if constraint is None or constraint.is_empty:
        return None
    return constraint


@dataclass
class TaperConstraints:
    """Fully resolved numeric bounds used by the search and repair passes."""

    min_step_size: float
    max_step_size: float
    min_cycle_length: int
    max_cycle_length: int
    min_steps: int
    max_steps: int
    min_duration: int
    max_duration: int
    # Hard ceiling on phase count for the repair passes. Equals max_steps when
    # the caller set a maximum, otherwise unbounded.
    step_ceiling: float = float("inf")


@dataclass
class TaperRequest:
    """Input to the taper generator. Doses are in units per day."""

    current_dose: float
    goal_dose: float
    step_size_range: ConstraintRange | None = None
    cycle_length_range: ConstraintRange | None = None
    steps_range: ConstraintRange | None = None
    duration_range: ConstraintRange | None = None


# =============================================================================
# Results
# =============================================================================


@dataclass
class ConstraintStatus:
    """Human-readable audit of a generated plan. Never fed back into generation."""

    respected: list[str] = field(default_factory=list)
    violated: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    reasoning: list[str] = field(default_factory=list)


@dataclass
class TaperResult:
    """Output of one generation call."""

    phases: list[TaperPhase]
    constraint_status: ConstraintStatus

    @property
    def total_duration(self) -> int:
        return sum(p.cycle_length for p in self.phases)


@dataclass
class DailyDose:
    """A single calendar day of an expanded plan."""

    day: int  # 1-based day of the taper
    date: date
    phase: int
    whole_units: int
    half_units: int
    dose: float  # Units taken this day
