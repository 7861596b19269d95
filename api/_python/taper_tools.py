"""
Tool implementations for taper planning.

Provides two tools:
1. check_dose_bounds - Quick safety check of a start/goal pair
2. generate_taper_plan - Full plan generation with summary

plan_response() maps a raw HTTP body onto a status code and JSON payload for
the generate endpoint.

Payloads use plain JSON types. Constraint ranges are objects with optional
"min" and "max" keys; a range with neither filled is treated as absent.
"""

import json
import logging
from dataclasses import asdict
from datetime import date
from typing import Any
from uuid import uuid4

import pytz

from taper.daily_schedule import expand_daily_schedule
from taper.dose_math import units_to_milligrams
from taper.generator import TaperGenerator
from taper.plan_math import calculate_taper_duration, chart_points_with_start
from taper.planning.bounds_validator import validate_dose_bounds
from taper.types import ConstraintRange, TaperRequest, TaperResult

RANGE_FIELDS = ["step_size_range", "cycle_length_range", "steps_range", "duration_range"]

# Largest plan request body accepted over HTTP
MAX_BODY_SIZE = 16 * 1024

logger = logging.getLogger(__name__)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def validate_request(data: dict) -> str | None:
    """Validate request data, return error message or None if valid."""
    for field in ("current_dose", "goal_dose"):
        if field not in data:
            return f"Missing required field: {field}"
        if not _is_number(data[field]):
            return f"{field} must be a number"

    for field in RANGE_FIELDS:
        bounds = data.get(field)
        if bounds is None:
            continue
        if not isinstance(bounds, dict):
            return f"{field} must be an object with optional min and max"
        for key in ("min", "max"):
            value = bounds.get(key)
            if value is None:
                continue
            if not _is_number(value) or value < 0:
                return f"{field}.{key} must be a non-negative number"

    start_date = data.get("start_date")
    if start_date is not None:
        try:
            date.fromisoformat(start_date)
        except (TypeError, ValueError):
            return f"Invalid start_date format: {start_date}"

    timezone = data.get("timezone")
    if timezone is not None and timezone not in pytz.all_timezones_set:
        return f"Invalid timezone: {timezone}"

    strength = data.get("unit_strength_mg")
    if strength is not None and (not _is_number(strength) or strength <= 0):
        return "unit_strength_mg must be a positive number"

    return None


def parse_range(bounds: dict | None) -> ConstraintRange | None:
    """Convert a {"min", "max"} payload into a range, or None when empty."""
    if not bounds:
        return None
    return ConstraintRange.from_bounds(bounds.get("min"), bounds.get("max"))


def request_from_dict(data: dict) -> TaperRequest:
    """Build a TaperRequest from a validated payload."""
    return TaperRequest(
        current_dose=data["current_dose"],
        goal_dose=data["goal_dose"],
        step_size_range=parse_range(data.get("step_size_range")),
        cycle_length_range=parse_range(data.get("cycle_length_range")),
        steps_range=parse_range(data.get("steps_range")),
        duration_range=parse_range(data.get("duration_range")),
    )


def result_to_dict(
    result: TaperResult, start_dose: float, unit_strength_mg: float | None = None
) -> dict[str, Any]:
    """Serialize a TaperResult with summary and chart series."""
    phases = []
    for phase in result.phases:
        phase_dict = asdict(phase)
        if unit_strength_mg is not None:
            phase_dict["average_daily_dose_mg"] = units_to_milligrams(
                phase.average_daily_dose, unit_strength_mg
            )
        phases.append(phase_dict)

    final_dose = result.phases[-1].average_daily_dose if result.phases else None

    return {
        "summary": {
            "total_phases": len(result.phases),
            "total_duration_days": calculate_taper_duration(result.phases),
            "start_dose": start_dose,
            "final_dose": final_dose,
        },
        "phases": phases,
        "chart": chart_points_with_start(result.phases, start_dose) if result.phases else [],
        "constraint_status": asdict(result.constraint_status),
    }


def check_dose_bounds(current_dose: float, goal_dose: float) -> dict[str, Any]:
    """Quick safety check without running the search."""
    failure = validate_dose_bounds(current_dose, goal_dose)
    if failure is None:
        return {"valid": True, "violation": None, "reasoning": None}
    return {"valid": False, "violation": failure.violation, "reasoning": failure.reasoning}


def generate_taper_plan(params: dict[str, Any]) -> dict[str, Any]:
    """
    Generate a full taper plan.

    Optional keys beyond the request itself:
    - unit_strength_mg: adds mg doses to each phase
    - include_schedule: adds the day-by-day schedule
    - start_date / timezone: anchor for the day-by-day schedule

    Raises:
        ValueError: If the payload fails validation
    """
    error = validate_request(params)
    if error:
        raise ValueError(error)

    request = request_from_dict(params)
    result = TaperGenerator().generate(request)
    plan = result_to_dict(result, request.current_dose, params.get("unit_strength_mg"))

    if params.get("include_schedule"):
        start_date = params.get("start_date")
        schedule = expand_daily_schedule(
            result.phases,
            start_date=date.fromisoformat(start_date) if start_date else None,
            timezone=params.get("timezone", "UTC"),
        )
        plan["schedule"] = [
            {**asdict(day), "date": day.date.isoformat()} for day in schedule
        ]

    return plan


def invoke_tool(tool_name: str, arguments: dict[str, Any]) -> dict[str, Any]:
    """Router function for CLI/subprocess invocation."""
    if tool_name == "check_dose_bounds":
        return check_dose_bounds(**arguments)
    elif tool_name == "generate_taper_plan":
        return generate_taper_plan(arguments)
    else:
        raise ValueError(f"Unknown tool: {tool_name}")


def plan_response(body: bytes) -> tuple[int, dict[str, Any]]:
    """
    Turn a raw HTTP request body into a status code and JSON payload.

    Bad input gets 400 with an "error" key. A valid request gets 200 with
    a fresh plan id and the plan. Anything unexpected gets 500.
    """
    if len(body) > MAX_BODY_SIZE:
        return 413, {"error": "Request body too large"}

    try:
        data = json.loads(body)
    except (json.JSONDecodeError, UnicodeDecodeError):
        return 400, {"error": "Invalid JSON in request body"}

    if not isinstance(data, dict):
        return 400, {"error": "Request body must be a JSON object"}

    validation_error = validate_request(data)
    if validation_error:
        return 400, {"error": validation_error}

    try:
        plan = generate_taper_plan(data)
    except Exception as e:
        logger.exception("Taper generation failed")
        return 500, {"error": f"Taper generation failed: {str(e)}"}

    return 200, {"id": str(uuid4()), "plan": plan}
