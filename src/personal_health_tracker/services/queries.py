"""
View derivation over record store snapshots.

Every function here is pure: it takes the snapshot it works on as an
argument, performs no I/O and never changes its input.
"""

import datetime as dt
from collections.abc import Mapping, Sequence
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from personal_health_tracker.domain.models import (
    Activity,
    DailyMetrics,
    DateRangeFilter,
    HealthTip,
    ProgressGoals,
    ProgressRatios,
)
from personal_health_tracker.utils.date_utils import current_date
from personal_health_tracker.utils.exceptions import ValidationError


def build_date_range(
    start_date: Any = None, end_date: Any = None
) -> DateRangeFilter:
    """
    Build a date range from date-picker selections or ISO text.

    Args:
        start_date: Start bound (date, datetime, ISO text or None).
        end_date: End bound (date, datetime, ISO text or None).

    Returns:
        Date range filter.

    Raises:
        ValidationError: If a bound is not a valid calendar date.
    """
    try:
        return DateRangeFilter(start_date=start_date, end_date=end_date)
    except PydanticValidationError as e:
        raise ValidationError(f"Invalid date range: {e.errors()[0]['msg']}") from e


def filter_activities_by_date_range(
    activities: Sequence[Activity],
    date_range: DateRangeFilter | Mapping[str, Any] | None,
    *,
    today: dt.date | None = None,
) -> list[Activity]:
    """
    Select the activities whose date falls inside a range.

    Both bounds are inclusive. A missing start bound means the earliest
    representable date; a missing end bound means today. Activities whose
    stored date does not parse never match.

    Passing ``None`` as the range means no filter was requested, and every
    activity is returned. An empty list therefore always means a filter was
    applied and nothing matched.

    Args:
        activities: Activity snapshot.
        date_range: Range to filter by, or None for no filtering.
        today: Date used for a missing end bound. Defaults to the current
            UTC date.

    Returns:
        Matching activities in their original order.

    Raises:
        ValidationError: If the range is given as a mapping with invalid bounds.
    """
    if date_range is None:
        return list(activities)

    if isinstance(date_range, Mapping):
        date_range = build_date_range(
            date_range.get("startDate", date_range.get("start_date")),
            date_range.get("endDate", date_range.get("end_date")),
        )

    start = date_range.start_date or dt.date.min
    end = date_range.end_date or today or current_date()

    selected: list[Activity] = []
    for activity in activities:
        activity_date = activity.parsed_date
        if activity_date is not None and start <= activity_date <= end:
            selected.append(activity)

    return selected


def search_tips_by_title(tips: Sequence[HealthTip], query_text: str | None) -> list[HealthTip]:
    """
    Find tips whose title contains the query text, ignoring case.

    Args:
        tips: Tip snapshot.
        query_text: Text to look for. Empty text matches every tip.

    Returns:
        Matching tips in their original order.
    """
    if not query_text:
        return list(tips)

    needle = query_text.lower()
    return [tip for tip in tips if needle in tip.title.lower()]


def compute_progress_ratios(
    metrics: DailyMetrics | Mapping[str, Any],
    goals: ProgressGoals | Mapping[str, Any] | None = None,
) -> ProgressRatios:
    """
    Compute progress towards the daily goals.

    Ratios are current / goal and are not clamped.

    Args:
        metrics: Today's metrics.
        goals: Daily goals. Defaults to 10000 steps, 2000 kcal and 8 liters.

    Returns:
        Progress ratios.

    Raises:
        ValidationError: If metrics or goals are given as invalid mappings.
    """
    try:
        if not isinstance(metrics, DailyMetrics):
            metrics = DailyMetrics.model_validate(metrics)
        if goals is None:
            goals = ProgressGoals()
        elif not isinstance(goals, ProgressGoals):
            goals = ProgressGoals.model_validate(goals)
    except PydanticValidationError as e:
        raise ValidationError(f"Invalid progress input: {e.errors()[0]['msg']}") from e

    return ProgressRatios(
        steps_ratio=metrics.steps / goals.steps,
        calories_ratio=metrics.calories_burned / goals.calories,
        water_ratio=metrics.water_liters / goals.water,
    )


def count_tips_by_category(tips: Sequence[HealthTip]) -> dict[str, int]:
    """Count tips per category, in the order categories first appear."""
    counts: dict[str, int] = {}
    for tip in tips:
        counts[tip.category] = counts.get(tip.category, 0) + 1
    return counts
