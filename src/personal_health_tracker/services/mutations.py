"""
Validated mutations of the record store.

Views hand over raw form input (mostly strings). This module turns it into
typed records, assigns ids and delegates to the record store. Nothing
reaches the store unless validation passes.
"""

import logging
import math
from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from personal_health_tracker.domain.models import Activity, DailyMetrics, HealthTip
from personal_health_tracker.services.record_store import RecordStore, next_record_id
from personal_health_tracker.utils.date_utils import parse_iso_date
from personal_health_tracker.utils.exceptions import ValidationError

logger = logging.getLogger(__name__)

# Accepted spellings of each field, first match wins
ACTIVITY_FIELDS: dict[str, tuple[str, ...]] = {
    "date": ("date",),
    "steps": ("steps",),
    "exercise_description": ("exerciseDescription", "exercise_description", "exercise"),
    "calories_burned": ("caloriesBurned", "calories_burned", "calories"),
}

TIP_FIELDS: dict[str, tuple[str, ...]] = {
    "title": ("title",),
    "content": ("content",),
    "category": ("category",),
    "image": ("image",),
}

METRIC_FIELDS: dict[str, str] = {
    "steps": "steps",
    "caloriesBurned": "calories_burned",
    "calories_burned": "calories_burned",
    "calories": "calories_burned",
    "waterLiters": "water_liters",
    "water_liters": "water_liters",
    "water": "water_liters",
}


def _is_empty(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _pick_fields(
    candidate: Mapping[str, Any], fields: dict[str, tuple[str, ...]], record_name: str
) -> dict[str, Any]:
    """
    Collect required fields from a form mapping.

    Raises:
        ValidationError: If any field is absent or empty.
    """
    values: dict[str, Any] = {}
    missing: list[str] = []

    for field, spellings in fields.items():
        value = next((candidate[name] for name in spellings if name in candidate), None)
        if _is_empty(value):
            missing.append(spellings[0])
            continue
        values[field] = value.strip() if isinstance(value, str) else value

    if missing:
        raise ValidationError(
            f"{record_name}: missing required fields: {', '.join(missing)}"
        )

    return values


def _parse_number(value: Any, field: str, integer: bool = False) -> float | int:
    """
    Parse a numeric form value.

    Raises:
        ValidationError: If the value is not a non-negative number.
    """
    if isinstance(value, bool):
        raise ValidationError(f"{field} must be a number, got {value!r}")

    try:
        number = float(value.strip()) if isinstance(value, str) else float(value)
    except (TypeError, ValueError) as e:
        raise ValidationError(f"{field} must be a number, got {value!r}") from e

    if not math.isfinite(number):
        raise ValidationError(f"{field} must be a finite number, got {value!r}")
    if number < 0:
        raise ValidationError(f"{field} must be non-negative, got {value!r}")

    if integer:
        if not number.is_integer():
            raise ValidationError(f"{field} must be a whole number, got {value!r}")
        return int(number)

    return number


class MutationService:
    """
    Entry point for every change a view makes to the store.

    Validates input, assigns ids and delegates to the record store, which
    writes the change through to storage.
    """

    def __init__(self, store: RecordStore) -> None:
        """
        Initialize mutation service.

        Args:
            store: Record store to mutate.
        """
        self.store = store

    async def add_activity(self, candidate: Mapping[str, Any]) -> Activity:
        """
        Validate and append a new activity.

        Args:
            candidate: Form values for date, steps, exerciseDescription and
                caloriesBurned.

        Returns:
            The created activity.

        Raises:
            ValidationError: If a field is missing, empty or malformed.
            PersistenceError: If the activity was added but could not be saved.
        """
        values = _pick_fields(candidate, ACTIVITY_FIELDS, "Activity")

        activity_date = parse_iso_date(values["date"])
        if activity_date is None:
            raise ValidationError(
                f"Activity: date must be an ISO calendar date (YYYY-MM-DD), got {values['date']!r}"
            )

        steps = _parse_number(values["steps"], "steps", integer=True)
        calories = _parse_number(values["calories_burned"], "caloriesBurned")

        activities = await self.store.get_activities()

        try:
            activity = Activity(
                id=next_record_id(activities),
                date=activity_date.isoformat(),
                steps=steps,
                exercise_description=str(values["exercise_description"]),
                calories_burned=calories,
            )
        except PydanticValidationError as e:
            raise ValidationError(f"Activity: {e.errors()[0]['msg']}") from e

        await self.store.append_activity(activity)
        return activity

    async def add_tip(self, candidate: Mapping[str, Any]) -> HealthTip:
        """
        Validate and append a new health tip.

        Args:
            candidate: Form values for title, content, category and image.

        Returns:
            The created tip.

        Raises:
            ValidationError: If a field is missing or empty.
            PersistenceError: If the tip was added but could not be saved.
        """
        values = _pick_fields(candidate, TIP_FIELDS, "Health tip")

        tips = await self.store.get_tips()

        try:
            tip = HealthTip(id=next_record_id(tips), **values)
        except PydanticValidationError as e:
            raise ValidationError(f"Health tip: {e.errors()[0]['msg']}") from e

        await self.store.append_tip(tip)
        return tip

    async def update_daily_metrics(self, partial: Mapping[str, Any]) -> DailyMetrics:
        """
        Merge new values into today's metrics.

        Fields left out keep their current value.

        Args:
            partial: Any of steps, caloriesBurned and waterLiters.

        Returns:
            The updated metrics.

        Raises:
            ValidationError: If a field is unknown, non-numeric or negative.
            PersistenceError: If the metrics were updated but could not be saved.
        """
        updates: dict[str, Any] = {}

        for name, value in partial.items():
            field = METRIC_FIELDS.get(name)
            if field is None:
                raise ValidationError(f"Daily metrics: unknown field {name!r}")
            if value is None:
                continue
            updates[field] = _parse_number(value, name, integer=field == "steps")

        current = await self.store.get_daily_metrics()
        if not updates:
            logger.debug("Daily metrics update with no values, nothing to do")
            return current

        try:
            metrics = DailyMetrics.model_validate({**current.model_dump(), **updates})
        except PydanticValidationError as e:
            raise ValidationError(f"Daily metrics: {e.errors()[0]['msg']}") from e

        await self.store.set_daily_metrics(metrics)
        return metrics

    async def log_water_intake(self, liters: float = 0.25) -> DailyMetrics:
        """
        Add to today's water intake.

        Args:
            liters: Amount drunk, in liters.

        Returns:
            The updated metrics.

        Raises:
            ValidationError: If the amount is not positive.
        """
        amount = _parse_number(liters, "liters")
        if amount == 0:
            raise ValidationError("liters must be greater than zero")

        current = await self.store.get_daily_metrics()
        return await self.update_daily_metrics(
            {"waterLiters": current.water_liters + amount}
        )
