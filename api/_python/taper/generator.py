"""
Taper plan generation.

Architecture:
1. Bounds validator rejects unsafe start/goal pairs (planning/bounds_validator)
2. Normalizer resolves optional constraints into concrete bounds
3. Combination space enumerates achievable whole/half unit patterns
4. Greedy path builder selects the phase sequence
5. Duration and step-count reconcilers repair unmet minimums, in that order
6. Status reporter audits the final plan against the caller's constraints

The whole pipeline is a pure function of its inputs. Nothing is cached
between calls.
"""

import logging

from .planning.bounds_validator import validate_dose_bounds
from .planning.combination_space import CombinationSpace
from .planning.constraint_normalizer import ConstraintNormalizer
from .planning.duration_reconciler import DurationReconciler
from .planning.path_builder import GreedyPathBuilder
from .planning.status_reporter import ConstraintStatusReporter
from .planning.step_reconciler import StepCountReconciler
from .types import ConstraintRange, TaperPhase, TaperRequest, TaperResult, present

logger = logging.getLogger(__name__)


class TaperGenerator:
    """
    Generate a monotonically decreasing taper plan.

    Never raises for bad doses or unsatisfiable constraints. Every problem
    is reported through the result's constraint_status, and an empty plan
    always carries at least one violation.
    """

    def generate(self, request: TaperRequest) -> TaperResult:
        """
        Generate a taper plan for the request.

        Args:
            request: TaperRequest with doses and optional constraint ranges

        Returns:
            TaperResult with ordered phases and the constraint status
        """
        start = request.current_dose
        goal = request.goal_dose

        # 1. Safety bounds
        failure = validate_dose_bounds(start, goal)
        if failure is not None:
            logger.debug("Rejected taper %.3f -> %.3f: %s", start, goal, failure.violation)
            return TaperResult(phases=[], constraint_status=failure.to_status())

        step_size_range = present(request.step_size_range)
        cycle_length_range = present(request.cycle_length_range)
        steps_range = present(request.steps_range)
        duration_range = present(request.duration_range)

        # 2. Resolve constraints
        constraints = ConstraintNormalizer(start, goal).normalize(
            step_size_range, cycle_length_range, steps_range, duration_range
        )

        reporter = ConstraintStatusReporter(
            start, goal, step_size_range, cycle_length_range, steps_range, duration_range
        )

        # 3. Candidate patterns
        space = CombinationSpace.build(
            start, goal, constraints.min_cycle_length, constraints.max_cycle_length
        )
        logger.debug("Generated %d dose combinations", len(space))
        if not space.combinations:
            reporter.record_no_combinations(constraints)
            return TaperResult(phases=[], constraint_status=reporter.audit([]))

        # 4. Greedy search
        path = GreedyPathBuilder(space, start, goal, constraints).build()
        if not path.combinations:
            reporter.record_no_first_step(constraints)
            return TaperResult(phases=[], constraint_status=reporter.audit([]))

        # 5. Repairs: duration first, then step count
        duration_repair = DurationReconciler(space, constraints).reconcile(path.combinations)
        reporter.add_reasoning(duration_repair.notes)

        step_repair = StepCountReconciler(space, start, constraints).reconcile(
            duration_repair.combinations
        )
        reporter.add_reasoning(step_repair.notes)

        phases = [
            TaperPhase.from_combination(index, combo)
            for index, combo in enumerate(step_repair.combinations, start=1)
        ]

        # 6. Audit
        return TaperResult(phases=phases, constraint_status=reporter.audit(phases))


def generate_taper(
    current_dose: float,
    goal_dose: float,
    step_size_range: ConstraintRange | None = None,
    cycle_length_range: ConstraintRange | None = None,
    steps_range: ConstraintRange | None = None,
    duration_range: ConstraintRange | None = None,
) -> TaperResult:
    """Convenience wrapper around TaperGenerator.generate()."""
    request = TaperRequest(
        current_dose=current_dose,
        goal_dose=goal_dose,
        step_size_range=step_size_range,
        cycle_length_range=cycle_length_range,
        steps_range=steps_range,
        duration_range=duration_range,
    )
    return TaperGenerator().generate(request)


def generate_optimal_taper_phases(
    current_dose: float,
    goal_dose: float,
    max_step_size: float | None = None,
    min_phase_length: int = 7,
    max_total_duration: int = 365,
) -> list[TaperPhase]:
    """
    Auto-optimize mode: only a step cap, a phase length floor and a deadline.

    Returns the phases only.
    """
    result = generate_taper(
        current_dose,
        goal_dose,
        step_size_range=ConstraintRange.from_bounds(max_value=max_step_size),
        cycle_length_range=ConstraintRange(min=min_phase_length),
        duration_range=ConstraintRange(max=max_total_duration),
    )
    return result.phases


def generate_taper_phases_legacy(
    current_dose: float,
    goal_dose: float,
    number_of_steps: int,
    min_cycle_length: int,
    max_cycle_length: int,
) -> list[TaperPhase]:
    """Fixed step count within a cycle length window. Returns the phases only."""
    result = generate_taper(
        current_dose,
        goal_dose,
        cycle_length_range=ConstraintRange(min=min_cycle_length, max=max_cycle_length),
        steps_range=ConstraintRange(min=number_of_steps, max=number_of_steps),
    )
    return result.phases
