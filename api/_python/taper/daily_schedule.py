"""
Day-by-day expansion of a taper plan.

Calendar and reminder consumers need the dose for each date, not per-phase
averages. Each phase repeats its pattern for cycle_length days, with its whole
and half units spread as evenly as possible across those days.
"""

from datetime import date, datetime, timedelta

import pytz

from .types import DailyDose, TaperPhase


def get_today_in_tz(tz_name: str) -> date:
    """
    Current calendar date in the given timezone.

    Serverless hosts run in UTC; the user's "today" depends on where they are.

    Args:
        tz_name: IANA timezone name (e.g., "America/Los_Angeles")

    Returns:
        Today's date in that timezone
    """
    tz = pytz.timezone(tz_name)
    now_utc = datetime.now(pytz.UTC)
    return now_utc.astimezone(tz).date()


def spread_units(count: int, days: int) -> list[int]:
    """
    Spread count items over days as evenly as possible.

    Day i receives floor((i+1)*count/days) - floor(i*count/days), so the
    per-day values differ by at most one and sum to count.
    """
    return [((i + 1) * count) // days - (i * count) // days for i in range(days)]


def expand_daily_schedule(
    phases: list[TaperPhase],
    start_date: date | None = None,
    timezone: str = "UTC",
) -> list[DailyDose]:
    """
    Expand phases into one entry per day.

    Args:
        phases: Ordered taper phases
        start_date: First day of the taper (defaults to today in timezone)
        timezone: IANA timezone used for the default start date

    Returns:
        DailyDose entries, day 1 on start_date
    """
    if start_date is None:
        start_date = get_today_in_tz(timezone)

    schedule = []
    day_number = 1

    for phase in phases:
        wholes = spread_units(phase.whole_units, phase.cycle_length)
        halves = spread_units(phase.half_units, phase.cycle_length)

        for whole, half in zip(wholes, halves):
            schedule.append(
                DailyDose(
                    day=day_number,
                    date=start_date + timedelta(days=day_number - 1),
                    phase=phase.phase,
                    whole_units=whole,
                    half_units=half,
                    dose=whole + 0.5 * half,
                )
            )
            day_number += 1

    return schedule
