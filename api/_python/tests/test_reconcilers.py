"""
Tests for the duration and step-count repair passes.

Paths here are hand-built from the weekly 1.0 -> 0.5 combination space so
that every inserted phase can be predicted exactly.
"""

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent))
sys.path.insert(0, str(Path(__file__).parent.parent))

from helpers import make_constraints
from taper.planning.duration_reconciler import DurationReconciler
from taper.planning.step_reconciler import StepCountReconciler


def weekly_path(space, doses: list[float]):
    """First combination in sort order for each dose."""
    return [space.with_dose(dose)[0] for dose in doses]


def durations(combos) -> int:
    return sum(c.cycle_length for c in combos)


class TestDurationReconciler:
    """Stabilization repeats extend short paths toward a minimum duration."""

    def test_no_change_when_long_enough(self, weekly_space) -> None:
        path = weekly_path(weekly_space, [0.857, 0.714, 0.571])
        repair = DurationReconciler(weekly_space, make_constraints(min_duration=21)).reconcile(path)

        assert repair.combinations == path
        assert repair.phases_added == 0
        assert repair.notes == []

    def test_extends_to_minimum_duration(self, weekly_space) -> None:
        path = weekly_path(weekly_space, [0.857, 0.714, 0.571])
        repair = DurationReconciler(weekly_space, make_constraints(min_duration=60)).reconcile(path)

        assert durations(repair.combinations) == 63
        assert repair.phases_added == 6
        assert repair.notes == [
            "Added 6 stabilization phases to extend the taper to 63 days (minimum: 60 days)"
        ]

    def test_repeats_spread_over_intermediate_doses(self, weekly_space) -> None:
        path = weekly_path(weekly_space, [0.857, 0.714, 0.571])
        repair = DurationReconciler(weekly_space, make_constraints(min_duration=60)).reconcile(path)
        doses = [c.average_daily_dose for c in repair.combinations]

        assert doses == [0.857] * 4 + [0.714] * 4 + [0.571]

    def test_dose_values_never_change(self, weekly_space) -> None:
        path = weekly_path(weekly_space, [0.929, 0.786, 0.643, 0.5])
        repair = DurationReconciler(weekly_space, make_constraints(min_duration=100)).reconcile(path)

        assert {c.average_daily_dose for c in repair.combinations} == {0.929, 0.786, 0.643, 0.5}
        assert repair.combinations[-1].average_daily_dose == 0.5

    def test_step_ceiling_limits_repeats(self, weekly_space) -> None:
        path = weekly_path(weekly_space, [0.857, 0.714, 0.571])
        constraints = make_constraints(min_duration=60, step_ceiling=4)
        repair = DurationReconciler(weekly_space, constraints).reconcile(path)

        assert len(repair.combinations) == 4
        assert repair.phases_added == 1

    def test_max_duration_is_never_exceeded(self, weekly_space) -> None:
        path = weekly_path(weekly_space, [0.857, 0.714, 0.571])
        constraints = make_constraints(min_duration=60, max_duration=30)
        repair = DurationReconciler(weekly_space, constraints).reconcile(path)

        assert durations(repair.combinations) == 28

    def test_single_phase_has_no_plateau_to_extend(self, weekly_space) -> None:
        path = weekly_path(weekly_space, [0.5])
        repair = DurationReconciler(weekly_space, make_constraints(min_duration=60)).reconcile(path)

        assert repair.combinations == path
        assert repair.notes == []


class TestStepCountReconciler:
    """Intermediate phases split the largest dose drops."""

    def test_no_change_when_enough_steps(self, weekly_space) -> None:
        path = weekly_path(weekly_space, [0.857, 0.714, 0.571])
        repair = StepCountReconciler(weekly_space, 1.0, make_constraints(min_steps=3)).reconcile(
            path
        )

        assert repair.combinations == path
        assert repair.phases_added == 0

    def test_splits_single_step(self, weekly_space) -> None:
        """The 1.0 -> 0.571 drop is split nearest its 0.7855 midpoint first."""
        path = weekly_path(weekly_space, [0.571])
        repair = StepCountReconciler(weekly_space, 1.0, make_constraints(min_steps=3)).reconcile(
            path
        )
        doses = [c.average_daily_dose for c in repair.combinations]

        assert len(doses) == 3
        assert doses[0] == 0.786
        assert doses[-1] == 0.571
        assert all(a > b for a, b in zip(doses, doses[1:]))
        assert repair.notes == [
            "Added 2 intermediate phases by splitting the largest dose reductions"
        ]

    def test_split_halves_respect_step_bounds(self, weekly_space) -> None:
        path = weekly_path(weekly_space, [0.5])
        constraints = make_constraints(min_steps=4, min_step_size=0.07, max_step_size=0.3)
        repair = StepCountReconciler(weekly_space, 1.0, constraints).reconcile(path)

        prev = 1.0
        for combo in repair.combinations[:-1]:
            step = prev - combo.average_daily_dose
            assert 0.07 <= step <= 0.3
            prev = combo.average_daily_dose

    def test_no_split_below_twice_min_step(self, weekly_space) -> None:
        path = weekly_path(weekly_space, [0.571])
        constraints = make_constraints(min_steps=3, min_step_size=0.3)
        repair = StepCountReconciler(weekly_space, 1.0, constraints).reconcile(path)

        assert repair.combinations == path
        assert repair.notes == []

    def test_step_ceiling_caps_splits(self, weekly_space) -> None:
        path = weekly_path(weekly_space, [0.571])
        constraints = make_constraints(min_steps=5, step_ceiling=2)
        repair = StepCountReconciler(weekly_space, 1.0, constraints).reconcile(path)

        assert len(repair.combinations) == 2
