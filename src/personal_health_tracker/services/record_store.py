"""
Record store holding the canonical activities, tips and daily metrics.

Collections are loaded lazily from the persistence adapter on first access
and written through to it on every mutation. Memory is the source of truth
for the running session: load problems fall back to the seeded defaults and
save problems never undo a mutation.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

from pydantic import ValidationError as PydanticValidationError

from personal_health_tracker.domain.defaults import (
    default_activities,
    default_daily_metrics,
    default_tips,
)
from personal_health_tracker.domain.models import Activity, DailyMetrics, HealthTip
from personal_health_tracker.infrastructure.storage.adapter import (
    ACTIVITIES_KEY,
    CALORIES_KEY,
    STEPS_KEY,
    TIPS_KEY,
    WATER_KEY,
    PersistenceAdapter,
)
from personal_health_tracker.infrastructure.storage.serialization import (
    dump_number,
    dump_records,
    load_number,
    load_records,
)
from personal_health_tracker.utils.exceptions import (
    ParseError,
    PersistenceError,
    ValidationError,
)

logger = logging.getLogger(__name__)

RecordT = TypeVar("RecordT", Activity, HealthTip)

# Daily metrics are stored one field per key
METRIC_KEYS: dict[str, str] = {
    STEPS_KEY: "steps",
    CALORIES_KEY: "calories_burned",
    WATER_KEY: "water_liters",
}


def next_record_id(records: list[Any]) -> int:
    """
    Compute the id for a new record.

    Args:
        records: Current collection.

    Returns:
        One greater than the largest id in use, or 1 for an empty collection.
    """
    return max((record.id for record in records), default=0) + 1


def _renumber_invalid_ids(records: list[RecordT], key: str) -> list[RecordT]:
    """Give records with a missing or duplicate id a fresh one."""
    seen: set[int] = set()
    next_id = max((record.id for record in records if record.id > 0), default=0) + 1
    result: list[RecordT] = []

    for record in records:
        if record.id > 0 and record.id not in seen:
            seen.add(record.id)
            result.append(record)
            continue

        logger.warning(f"Assigning id {next_id} to '{key}' record stored with id {record.id}")
        result.append(record.model_copy(update={"id": next_id}))
        seen.add(next_id)
        next_id += 1

    return result


class RecordStore:
    """
    In-memory owner of the activity log, health tips and daily metrics.

    All accessors are coroutines because the first access to a collection
    reads it from the adapter. Saves are serialized per key: a save waits
    for the previous save of the same key before starting.
    """

    def __init__(self, adapter: PersistenceAdapter) -> None:
        """
        Initialize record store.

        Args:
            adapter: Persistence adapter holding the durable copy.
        """
        self.adapter = adapter
        self._activities: list[Activity] | None = None
        self._tips: list[HealthTip] | None = None
        self._metrics: DailyMetrics | None = None
        self._loads: dict[str, asyncio.Future[Any]] = {}
        self._saves: dict[str, asyncio.Future[None]] = {}

    async def get_activities(self) -> list[Activity]:
        """Get the activity log in insertion order."""
        return list(await self._activity_log())

    async def get_tips(self) -> list[HealthTip]:
        """Get the health tips in insertion order."""
        return list(await self._tip_list())

    async def get_daily_metrics(self) -> DailyMetrics:
        """Get today's metrics."""
        return (await self._daily_metrics()).model_copy()

    async def append_activity(self, activity: Activity) -> None:
        """
        Append an activity and persist the activity log.

        Args:
            activity: Activity to append.

        Raises:
            ValidationError: If the id is already in use.
            PersistenceError: If the log could not be saved. The activity stays
                appended in memory.
        """
        activities = await self._activity_log()
        if any(existing.id == activity.id for existing in activities):
            raise ValidationError(f"Activity id {activity.id} is already in use")

        activities.append(activity)
        logger.info(f"Appended activity {activity.id} ({activity.date})")

        await self._write_through(ACTIVITIES_KEY, dump_records(activities))

    async def append_tip(self, tip: HealthTip) -> None:
        """
        Append a health tip and persist the tips list.

        Args:
            tip: Tip to append.

        Raises:
            ValidationError: If the id is already in use.
            PersistenceError: If the list could not be saved. The tip stays
                appended in memory.
        """
        tips = await self._tip_list()
        if any(existing.id == tip.id for existing in tips):
            raise ValidationError(f"Health tip id {tip.id} is already in use")

        tips.append(tip)
        logger.info(f"Appended health tip {tip.id} ({tip.title})")

        await self._write_through(TIPS_KEY, dump_records(tips))

    async def set_daily_metrics(self, metrics: DailyMetrics) -> None:
        """
        Replace today's metrics and persist every metric key.

        Args:
            metrics: New metrics record.

        Raises:
            PersistenceError: If any metric key could not be saved. The new
                metrics stay in memory.
        """
        await self._daily_metrics()
        self._metrics = metrics.model_copy()
        logger.info(
            f"Daily metrics set to steps={metrics.steps}, "
            f"calories={metrics.calories_burned}, water={metrics.water_liters}"
        )

        keys = list(METRIC_KEYS)
        results = await asyncio.gather(
            *(
                self._write_through(key, dump_number(getattr(metrics, field)))
                for key, field in METRIC_KEYS.items()
            ),
            return_exceptions=True,
        )

        failed: list[str] = []
        for key, result in zip(keys, results):
            if isinstance(result, PersistenceError):
                logger.error(f"Failed to persist metric '{key}': {result}")
                failed.append(key)
            elif isinstance(result, BaseException):
                raise result

        if failed:
            raise PersistenceError(f"Failed to persist daily metrics keys: {', '.join(failed)}")

    async def reload(self) -> None:
        """
        Drop the in-memory snapshot so the next access reads storage again.

        Saves still in flight are allowed to finish first.
        """
        pending = [save for save in self._saves.values() if not save.done()]
        if pending:
            await asyncio.wait(pending)

        self._activities = None
        self._tips = None
        self._metrics = None
        logger.info("Record store snapshot cleared")

    async def _activity_log(self) -> list[Activity]:
        if self._activities is None:
            loaded = await self._shared_load(
                ACTIVITIES_KEY,
                lambda: self._load_collection(ACTIVITIES_KEY, Activity, default_activities),
            )
            # Another waiter on the same load may already have stored it
            if self._activities is None:
                self._activities = loaded
        return self._activities

    async def _tip_list(self) -> list[HealthTip]:
        if self._tips is None:
            loaded = await self._shared_load(
                TIPS_KEY,
                lambda: self._load_collection(TIPS_KEY, HealthTip, default_tips),
            )
            if self._tips is None:
                self._tips = loaded
        return self._tips

    async def _daily_metrics(self) -> DailyMetrics:
        if self._metrics is None:
            loaded = await self._shared_load("dailyMetrics", self._load_daily_metrics)
            # Metrics set while this caller waited win over the loaded value
            if self._metrics is None:
                self._metrics = loaded
        return self._metrics

    async def _shared_load(self, name: str, loader: Callable[[], Awaitable[Any]]) -> Any:
        """Run a loader once even when several callers ask for it at the same time."""
        load = self._loads.get(name)
        if load is None or load.done():
            load = asyncio.ensure_future(loader())
            self._loads[name] = load
        try:
            return await load
        finally:
            if self._loads.get(name) is load and load.done():
                del self._loads[name]

    async def _load_collection(
        self,
        key: str,
        model: type[RecordT],
        defaults: Callable[[], list[RecordT]],
    ) -> list[RecordT]:
        """
        Load one collection, falling back to its seeded defaults.

        Args:
            key: Storage key.
            model: Record model.
            defaults: Factory for the seeded dataset.

        Returns:
            Loaded or seeded records.
        """
        try:
            blob = await self.adapter.load(key)
            if blob is None:
                logger.info(f"No stored data for '{key}', using seeded defaults")
                return defaults()
            records = load_records(blob, model)
        except (PersistenceError, ParseError) as e:
            logger.warning(f"Failed to load '{key}', using seeded defaults: {e}")
            return defaults()

        logger.info(f"Loaded {len(records)} records from '{key}'")
        return _renumber_invalid_ids(records, key)

    async def _load_daily_metrics(self) -> DailyMetrics:
        """Load the metric keys, falling back per field to the seeded value."""
        values: dict[str, Any] = default_daily_metrics().model_dump()

        for key, field in METRIC_KEYS.items():
            try:
                blob = await self.adapter.load(key)
                if blob is None:
                    continue
                candidate = {**values, field: load_number(blob)}
                DailyMetrics.model_validate(candidate)
            except (PersistenceError, ParseError, PydanticValidationError) as e:
                logger.warning(f"Failed to load metric '{key}', using seeded value: {e}")
                continue
            values = candidate

        return DailyMetrics.model_validate(values)

    async def _write_through(self, key: str, blob: str) -> None:
        """Save a blob once the previous save of the same key has settled."""
        previous = self._saves.get(key)
        save = asyncio.ensure_future(self._save_after(previous, key, blob))
        self._saves[key] = save
        save.add_done_callback(lambda done: self._forget_save(key, done))
        await save

    async def _save_after(
        self, previous: asyncio.Future[None] | None, key: str, blob: str
    ) -> None:
        if previous is not None and not previous.done():
            await asyncio.wait([previous])
        await self.adapter.save(key, blob)

    def _forget_save(self, key: str, save: asyncio.Future[None]) -> None:
        if self._saves.get(key) is save:
            del self._saves[key]

