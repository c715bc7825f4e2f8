"""
Health tracking domain models.

This module defines the canonical records owned by the record store
(activities, health tips, daily metrics) and the transient query types
used to derive views from them.

Attribute names are snake_case; the serialized form uses the camelCase
aliases, which is what ends up in storage.
"""

import datetime as dt
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from personal_health_tracker.utils.date_utils import parse_iso_date


class Activity(BaseModel):
    """
    Single exercise activity in the append-only activity log.

    The date is kept as ISO text. Records created through the mutation API
    always carry a valid calendar date; records loaded from older storage
    may not, and queries skip those.
    """

    id: int = Field(description="Identifier, unique within the activity log")
    date: str = Field(description="Calendar date of the activity (YYYY-MM-DD)")
    steps: int = Field(ge=0, description="Steps taken")
    exercise_description: str = Field(
        alias="exerciseDescription",
        validation_alias=AliasChoices(
            "exerciseDescription", "exercise_description", "exercise"
        ),
        description="Free text description of the exercise",
    )
    calories_burned: float = Field(
        ge=0,
        alias="caloriesBurned",
        validation_alias=AliasChoices("caloriesBurned", "calories_burned", "calories"),
        description="Calories burned in kcal",
    )

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    @property
    def parsed_date(self) -> dt.date | None:
        """Calendar date of the activity, or None if the stored text is malformed."""
        return parse_iso_date(self.date)


class HealthTip(BaseModel):
    """Curated health tip shown in the tips view."""

    id: int = Field(description="Identifier, unique within the tips list")
    title: str
    content: str
    category: str
    image: str = Field(description="Opaque media reference")

    model_config = ConfigDict(frozen=True)

    @field_validator("image", mode="before")
    @classmethod
    def _image_as_text(cls, value: Any) -> Any:
        # Older stores kept bundler asset handles, which are integers
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return value


class DailyMetrics(BaseModel):
    """Today's rolling totals shown on the dashboard."""

    steps: int = Field(6500, ge=0, description="Steps taken today")
    calories_burned: float = Field(
        500,
        ge=0,
        alias="caloriesBurned",
        validation_alias=AliasChoices("caloriesBurned", "calories_burned", "calories"),
        description="Calories burned today in kcal",
    )
    water_liters: float = Field(
        5,
        ge=0,
        alias="waterLiters",
        validation_alias=AliasChoices("waterLiters", "water_liters", "water"),
        description="Water intake today in liters",
    )

    model_config = ConfigDict(populate_by_name=True, validate_assignment=True)


class DateRangeFilter(BaseModel):
    """
    Inclusive date range used to filter the activity log.

    Missing bounds mean "from the beginning" and "up to today".
    """

    start_date: dt.date | None = Field(
        None,
        alias="startDate",
        validation_alias=AliasChoices("startDate", "start_date"),
    )
    end_date: dt.date | None = Field(
        None,
        alias="endDate",
        validation_alias=AliasChoices("endDate", "end_date"),
    )

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    @field_validator("start_date", "end_date", mode="before")
    @classmethod
    def _coerce_bound(cls, value: Any) -> Any:
        if value is None or (isinstance(value, str) and not value.strip()):
            return None
        parsed = parse_iso_date(value)
        if parsed is None:
            raise ValueError(f"not a valid calendar date: {value!r}")
        return parsed


class ProgressGoals(BaseModel):
    """Daily goals the dashboard measures progress against."""

    steps: float = Field(10000, gt=0)
    calories: float = Field(2000, gt=0)
    water: float = Field(8, gt=0)

    model_config = ConfigDict(frozen=True)


class ProgressRatios(BaseModel):
    """
    Progress towards each daily goal.

    Ratios are not clamped; values above 1 mean the goal was surpassed.
    """

    steps_ratio: float = Field(alias="stepsRatio")
    calories_ratio: float = Field(alias="caloriesRatio")
    water_ratio: float = Field(alias="waterRatio")

    model_config = ConfigDict(frozen=True, populate_by_name=True)


class DailyTotal(BaseModel):
    """Activity totals for one calendar date."""

    date: dt.date
    steps: int
    calories_burned: float = Field(alias="caloriesBurned")
    activity_count: int = Field(alias="activityCount")

    model_config = ConfigDict(frozen=True, populate_by_name=True)
