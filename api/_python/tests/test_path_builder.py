"""
Tests for the greedy path search.
"""

import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent))
sys.path.insert(0, str(Path(__file__).parent.parent))

from helpers import make_constraints
from taper.planning.combination_space import CombinationSpace
from taper.planning.constraint_normalizer import ConstraintNormalizer
from taper.planning.path_builder import GreedyPathBuilder, TaperPath
from taper.types import DoseCombination


def build_default_path(start: float, goal: float) -> tuple[TaperPath, object]:
    constraints = ConstraintNormalizer(start, goal).normalize()
    space = CombinationSpace.build(
        start, goal, constraints.min_cycle_length, constraints.max_cycle_length
    )
    return GreedyPathBuilder(space, start, goal, constraints).build(), constraints


class TestTaperPath:
    def test_empty_path_starts_at_start_dose(self) -> None:
        path = TaperPath(start_dose=1.0)

        assert path.current_dose == 1.0
        assert path.total_duration == 0
        assert path.previous_step_size() is None

    def test_previous_step_size(self) -> None:
        path = TaperPath(
            start_dose=1.0,
            combinations=[DoseCombination.build(6, 0, 7), DoseCombination.build(4, 0, 7)],
        )

        assert path.previous_step_size() == pytest.approx(0.857 - 0.571)
        assert path.total_duration == 14
        assert path.step_count == 2


class TestGreedySelection:
    """Properties every greedy path must have."""

    def test_reaches_goal_neighbourhood(self) -> None:
        path, constraints = build_default_path(2.0, 0.5)

        assert path.combinations
        assert path.current_dose <= 0.5 + constraints.min_step_size + 1e-9

    def test_doses_strictly_decrease(self) -> None:
        path, _ = build_default_path(2.0, 0.5)
        doses = [2.0] + [c.average_daily_dose for c in path.combinations]

        assert all(a > b for a, b in zip(doses, doses[1:]))

    def test_steps_within_bounds(self) -> None:
        path, constraints = build_default_path(1.5, 0.25)
        prev = 1.5
        for combo in path.combinations:
            step = prev - combo.average_daily_dose
            assert constraints.min_step_size <= step <= constraints.max_step_size
            assert constraints.min_cycle_length <= combo.cycle_length <= constraints.max_cycle_length
            prev = combo.average_daily_dose

    def test_no_pattern_used_twice(self) -> None:
        path, _ = build_default_path(2.0, 0.0)
        keys = [c.key for c in path.combinations]

        assert len(keys) == len(set(keys))

    def test_respects_step_and_duration_limits(self) -> None:
        path, constraints = build_default_path(2.0, 0.5)

        assert path.step_count <= constraints.max_steps
        assert path.total_duration <= constraints.max_duration

    def test_deterministic(self) -> None:
        first, _ = build_default_path(2.0, 0.5)
        second, _ = build_default_path(2.0, 0.5)

        assert first == second

    def test_stops_at_max_steps(self, weekly_space) -> None:
        constraints = make_constraints(max_steps=2)
        path = GreedyPathBuilder(weekly_space, 1.0, 0.5, constraints).build()

        assert path.step_count == 2

    def test_empty_when_no_first_step_fits(self, weekly_space) -> None:
        """Weekly doses move in 1/14 unit steps; none lands in [0.3, 0.31]."""
        constraints = make_constraints(min_step_size=0.3, max_step_size=0.31)
        path = GreedyPathBuilder(weekly_space, 1.0, 0.5, constraints).build()

        assert path.combinations == []

    def test_max_duration_limits_phases(self, weekly_space) -> None:
        constraints = make_constraints(max_duration=14)
        path = GreedyPathBuilder(weekly_space, 1.0, 0.5, constraints).build()

        assert path.total_duration <= 14
        assert path.step_count == 2


class TestTieBreak:
    """Equal scores keep the candidate that comes first in sort order."""

    def test_first_of_equal_candidates_wins(self) -> None:
        # Same dose and cycle length, so every score term is identical
        first = DoseCombination.build(1, 5, 7)
        second = DoseCombination.build(0, 7, 7)
        space = CombinationSpace([first, second])

        path = GreedyPathBuilder(space, 1.0, 0.5, make_constraints(max_steps=1)).build()

        assert path.combinations == [first]

    def test_order_decides_not_pattern(self) -> None:
        first = DoseCombination.build(0, 7, 7)
        second = DoseCombination.build(1, 5, 7)
        space = CombinationSpace([first, second])

        path = GreedyPathBuilder(space, 1.0, 0.5, make_constraints(max_steps=1)).build()

        assert path.combinations == [first]
