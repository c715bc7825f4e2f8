"""
Activity summaries for the dashboard.

Aggregates the activity log per calendar date and per weekday using pandas.
"""

import logging
from collections.abc import Sequence

import pandas as pd

from personal_health_tracker.domain.models import Activity, DailyTotal

logger = logging.getLogger(__name__)

WEEKDAY_LABELS: tuple[str, ...] = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")


def _activities_frame(activities: Sequence[Activity]) -> pd.DataFrame:
    """
    Build a DataFrame of activities with a parsed date column.

    Activities whose date does not parse are left out.
    """
    rows = [
        {
            "date": activity.parsed_date,
            "steps": activity.steps,
            "calories_burned": activity.calories_burned,
        }
        for activity in activities
    ]
    df = pd.DataFrame(rows, columns=["date", "steps", "calories_burned"])

    skipped = int(df["date"].isna().sum())
    if skipped:
        logger.warning(f"Skipping {skipped} activities with an unreadable date")

    return df.dropna(subset=["date"])


def summarize_daily_totals(activities: Sequence[Activity]) -> list[DailyTotal]:
    """
    Sum steps and calories per calendar date.

    Args:
        activities: Activity snapshot.

    Returns:
        One total per date that has activities, sorted by date.
    """
    df = _activities_frame(activities)
    if df.empty:
        return []

    daily = (
        df.groupby("date")
        .agg(
            steps=("steps", "sum"),
            calories_burned=("calories_burned", "sum"),
            activity_count=("steps", "size"),
        )
        .reset_index()
        .sort_values("date")
    )

    return [
        DailyTotal(
            date=row.date,
            steps=int(row.steps),
            calories_burned=float(row.calories_burned),
            activity_count=int(row.activity_count),
        )
        for row in daily.itertuples(index=False)
    ]


def steps_by_weekday(activities: Sequence[Activity]) -> dict[str, int]:
    """
    Sum steps per weekday, Monday first.

    Args:
        activities: Activity snapshot.

    Returns:
        Mapping of weekday label to total steps; weekdays without activity are 0.
    """
    totals = {label: 0 for label in WEEKDAY_LABELS}

    df = _activities_frame(activities)
    if df.empty:
        return totals

    weekday = df["date"].map(lambda day: WEEKDAY_LABELS[day.weekday()])
    for label, steps in df.groupby(weekday)["steps"].sum().items():
        totals[label] = int(steps)

    return totals
