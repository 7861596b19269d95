"""
Taper Planning Layer.

The stages of plan generation, in pipeline order:

Modules:
- bounds_validator: Reject unsafe (start, goal) pairs
- constraint_normalizer: Resolve optional ranges into concrete bounds
- combination_space: Enumerate achievable dosing patterns
- path_builder: Greedy constrained search for the phase sequence
- duration_reconciler: Insert stabilization repeats to meet a duration floor
- step_reconciler: Split large steps to meet a step-count floor
- status_reporter: Audit the final plan against the caller's constraints
"""

from .bounds_validator import validate_dose_bounds
from .combination_space import CombinationSpace, generate_combinations
from .constraint_normalizer import ConstraintNormalizer
from .duration_reconciler import DurationReconciler
from .path_builder import GreedyPathBuilder
from .status_reporter import ConstraintStatusReporter
from .step_reconciler import StepCountReconciler

__all__ = [
    "validate_dose_bounds",
    "ConstraintNormalizer",
    "CombinationSpace",
    "generate_combinations",
    "GreedyPathBuilder",
    "DurationReconciler",
    "StepCountReconciler",
    "ConstraintStatusReporter",
]
