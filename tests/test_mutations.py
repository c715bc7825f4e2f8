"""Unit tests for the mutation service."""

import asyncio
import json

import pytest

from personal_health_tracker.domain.models import DailyMetrics
from personal_health_tracker.services.mutations import MutationService
from personal_health_tracker.services.record_store import RecordStore
from personal_health_tracker.utils.exceptions import PersistenceError, ValidationError

from conftest import FlakyAdapter

VALID_ACTIVITY = {
    "date": "2024-01-08",
    "steps": "7200",
    "exerciseDescription": "Tennis",
    "caloriesBurned": "450.5",
}

VALID_TIP = {
    "title": "Stretch Daily",
    "content": "Five minutes of stretching improves mobility.",
    "category": "Exercise",
    "image": "assets/stretch.png",
}


@pytest.mark.asyncio
async def test_add_activity_parses_form_input(
    mutations: MutationService, store: RecordStore, adapter: FlakyAdapter
) -> None:
    """Test that string form values become a typed activity with the next id."""
    activity = await mutations.add_activity(VALID_ACTIVITY)

    if activity.id != 8:
        raise AssertionError(f"Expected id 8 after the seeded week, got {activity.id}")

    if activity.steps != 7200 or activity.calories_burned != 450.5:
        raise AssertionError(f"Expected parsed numbers, got {activity}")

    if (await store.get_activities())[-1] != activity:
        raise AssertionError("Expected the activity to be appended last")

    if json.loads(adapter.blobs["activities"])[-1]["id"] != 8:
        raise AssertionError("Expected the activity to be persisted")


@pytest.mark.asyncio
async def test_add_activity_accepts_original_form_names(mutations: MutationService) -> None:
    """Test the exercise and calories spellings used by the activity form."""
    activity = await mutations.add_activity(
        {"date": "2024-01-09", "steps": 3000, "exercise": "Rowing", "calories": 210}
    )

    if activity.exercise_description != "Rowing" or activity.calories_burned != 210:
        raise AssertionError(f"Expected form names to be accepted, got {activity}")


@pytest.mark.asyncio
@pytest.mark.parametrize("field", ["date", "steps", "exerciseDescription", "caloriesBurned"])
async def test_add_activity_requires_every_field(
    mutations: MutationService, store: RecordStore, field: str
) -> None:
    """Test that a missing or blank field fails and leaves the log unchanged."""
    before = len(await store.get_activities())

    for candidate in (
        {**VALID_ACTIVITY, field: ""},
        {**VALID_ACTIVITY, field: "   "},
        {key: value for key, value in VALID_ACTIVITY.items() if key != field},
    ):
        with pytest.raises(ValidationError, match=field):
            await mutations.add_activity(candidate)

    if len(await store.get_activities()) != before:
        raise AssertionError("Expected no activity to be added")


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "changes",
    [
        {"date": "08/01/2024"},
        {"date": "2024-02-30"},
        {"date": "2024"},
        {"date": "2024-03"},
        {"date": "2024-W10"},
        {"date": "20240304"},
        {"steps": "-10"},
        {"steps": "12.5"},
        {"steps": "many"},
        {"caloriesBurned": "-1"},
        {"caloriesBurned": "nan"},
    ],
)
async def test_add_activity_rejects_malformed_values(
    mutations: MutationService, store: RecordStore, changes: dict[str, str]
) -> None:
    """Test that unparsable or negative values are rejected."""
    with pytest.raises(ValidationError):
        await mutations.add_activity({**VALID_ACTIVITY, **changes})

    if len(await store.get_activities()) != 7:
        raise AssertionError("Expected the log to be unchanged")


@pytest.mark.asyncio
async def test_ids_stay_unique(mutations: MutationService, store: RecordStore) -> None:
    """Test that every added record gets an unused id."""
    for day in range(10, 15):
        await mutations.add_activity({**VALID_ACTIVITY, "date": f"2024-01-{day}"})

    ids = [activity.id for activity in await store.get_activities()]
    if len(ids) != len(set(ids)):
        raise AssertionError(f"Expected unique ids, got {ids}")

    if ids[-1] != 12:
        raise AssertionError(f"Expected sequential ids after the seed, got {ids}")


@pytest.mark.asyncio
async def test_add_tip(mutations: MutationService, store: RecordStore) -> None:
    """Test adding a valid tip."""
    tip = await mutations.add_tip(VALID_TIP)

    if tip.id != 6:
        raise AssertionError(f"Expected id 6 after the seeded tips, got {tip.id}")

    if (await store.get_tips())[-1].title != "Stretch Daily":
        raise AssertionError("Expected the tip to be appended last")


@pytest.mark.asyncio
@pytest.mark.parametrize("field", ["title", "content", "category", "image"])
async def test_add_tip_requires_every_field(
    mutations: MutationService, store: RecordStore, field: str
) -> None:
    """Test that a tip without any one field is rejected."""
    with pytest.raises(ValidationError, match=field):
        await mutations.add_tip({**VALID_TIP, field: None})

    if len(await store.get_tips()) != 5:
        raise AssertionError("Expected the tips to be unchanged")


@pytest.mark.asyncio
async def test_update_daily_metrics_merges(mutations: MutationService, store: RecordStore) -> None:
    """Test that omitted fields keep their previous values."""
    metrics = await mutations.update_daily_metrics({"waterLiters": "6.5"})

    if metrics != DailyMetrics(steps=6500, calories_burned=500, water_liters=6.5):
        raise AssertionError(f"Expected only water to change, got {metrics}")

    if await store.get_daily_metrics() != metrics:
        raise AssertionError("Expected the store to hold the merged metrics")


@pytest.mark.asyncio
async def test_update_daily_metrics_rejects_negative(
    mutations: MutationService, store: RecordStore, adapter: FlakyAdapter
) -> None:
    """Test that a negative value fails and leaves metrics unchanged."""
    before = await store.get_daily_metrics()

    with pytest.raises(ValidationError):
        await mutations.update_daily_metrics({"waterLiters": -1})

    if await store.get_daily_metrics() != before:
        raise AssertionError("Expected metrics to be unchanged")

    if adapter.save_log:
        raise AssertionError("Expected nothing to be saved")


@pytest.mark.asyncio
async def test_update_daily_metrics_rejects_unknown_field(mutations: MutationService) -> None:
    """Test that unknown metric names are rejected."""
    with pytest.raises(ValidationError, match="heartRate"):
        await mutations.update_daily_metrics({"heartRate": 70})


@pytest.mark.asyncio
async def test_update_daily_metrics_ignores_empty_values(
    mutations: MutationService, adapter: FlakyAdapter
) -> None:
    """Test that a partial of only None values changes nothing."""
    metrics = await mutations.update_daily_metrics({"steps": None})

    if metrics.steps != 6500 or adapter.save_log:
        raise AssertionError("Expected no change and no save")


@pytest.mark.asyncio
async def test_log_water_intake(mutations: MutationService) -> None:
    """Test incrementing water intake."""
    await mutations.log_water_intake()
    metrics = await mutations.log_water_intake(0.5)

    if metrics.water_liters != pytest.approx(5.75):
        raise AssertionError(f"Expected 5.75 liters, got {metrics.water_liters}")

    with pytest.raises(ValidationError):
        await mutations.log_water_intake(0)


@pytest.mark.asyncio
async def test_water_logged_alongside_first_read_is_kept(
    mutations: MutationService, store: RecordStore, adapter: FlakyAdapter
) -> None:
    """Test logging water while another view reads metrics for the first time."""
    await asyncio.gather(mutations.log_water_intake(0.25), store.get_daily_metrics())

    metrics = await store.get_daily_metrics()
    if metrics.water_liters != pytest.approx(5.25):
        raise AssertionError(f"Expected 5.25 liters in memory, got {metrics.water_liters}")

    if json.loads(adapter.blobs["water"]) != pytest.approx(5.25):
        raise AssertionError("Expected the stored water value to match memory")


@pytest.mark.asyncio
async def test_save_failure_surfaces_after_mutation(
    mutations: MutationService, store: RecordStore, adapter: FlakyAdapter
) -> None:
    """Test that a save failure reaches the caller while memory keeps the change."""
    adapter.failing_saves.add("healthTips")

    with pytest.raises(PersistenceError):
        await mutations.add_tip(VALID_TIP)

    if len(await store.get_tips()) != 6:
        raise AssertionError("Expected the tip to stay in memory")

    adapter.failing_saves.clear()
    tip = await mutations.add_tip({**VALID_TIP, "title": "Second"})

    if tip.id != 7:
        raise AssertionError(f"Expected ids to continue after the unsaved tip, got {tip.id}")

    if len(json.loads(adapter.blobs["healthTips"])) != 7:
        raise AssertionError("Expected the next save to include the earlier unsaved tip")
