"""
Pytest fixtures for taper plan tests.
"""

import pytest

import sys
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from taper.generator import TaperGenerator
from taper.planning.combination_space import CombinationSpace
from taper.types import ConstraintRange, TaperRequest


@pytest.fixture
def generator():
    """TaperGenerator instance."""
    return TaperGenerator()


@pytest.fixture
def weekly_space():
    """
    1.0 -> 0.5 units/day with 7-day cycles only.

    Doses present: 1.0, 0.929, 0.857, 0.786, 0.714, 0.643, 0.571, 0.5
    """
    return CombinationSpace.build(1.0, 0.5, 7, 7)


@pytest.fixture
def standard_request():
    """2.0 -> 0.5 units/day with no constraints."""
    return TaperRequest(current_dose=2.0, goal_dose=0.5)


@pytest.fixture
def long_taper_request():
    """2.0 -> 0.5 with short cycles but a six-month minimum duration."""
    return TaperRequest(
        current_dose=2.0,
        goal_dose=0.5,
        cycle_length_range=ConstraintRange(max=6),
        duration_range=ConstraintRange(min=180),
    )
