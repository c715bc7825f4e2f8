"""
Health tracker facade used by the views.

Bundles the record store, the mutation service and the query functions
behind the single interface the dashboard, activity log and tips views call.
"""

import datetime as dt
import logging
from collections.abc import Mapping
from typing import Any

from personal_health_tracker.domain.models import (
    Activity,
    DailyMetrics,
    DailyTotal,
    DateRangeFilter,
    HealthTip,
    ProgressGoals,
    ProgressRatios,
)
from personal_health_tracker.infrastructure.storage.adapter import build_adapter
from personal_health_tracker.services import queries, summary
from personal_health_tracker.services.mutations import MutationService
from personal_health_tracker.services.record_store import RecordStore
from personal_health_tracker.utils.date_utils import current_date
from personal_health_tracker.utils.parameters import AppConfig

logger = logging.getLogger(__name__)


class HealthTracker:
    """
    Collaborator interface exposed to the views.

    Snapshot accessors and mutations are coroutines; query methods take the
    snapshot explicitly when the caller already holds one, otherwise they
    read the current one from the store.
    """

    def __init__(
        self,
        store: RecordStore,
        goals: ProgressGoals | None = None,
        timezone: str = "UTC",
        water_increment_liters: float = 0.25,
    ) -> None:
        """
        Initialize health tracker.

        Args:
            store: Record store owning the data.
            goals: Daily goals for progress ratios.
            timezone: Timezone used to resolve "today".
            water_increment_liters: Amount added by one water intake log.
        """
        self.store = store
        self.mutations = MutationService(store)
        self.goals = goals or ProgressGoals()
        self.timezone = timezone
        self.water_increment_liters = water_increment_liters

    @classmethod
    def from_config(cls, config: AppConfig) -> "HealthTracker":
        """
        Build a tracker with the adapter, goals and timezone from configuration.

        Args:
            config: Application configuration.

        Returns:
            Health tracker instance.
        """
        adapter = build_adapter(config.storage)
        logger.debug(f"Using {type(adapter).__name__} for storage")

        goals = ProgressGoals(
            steps=config.goals.steps,
            calories=config.goals.calories,
            water=config.goals.water,
        )
        return cls(
            RecordStore(adapter),
            goals=goals,
            timezone=config.tracker.timezone,
            water_increment_liters=config.tracker.water_increment_liters,
        )

    def today(self) -> dt.date:
        """Today's date in the configured timezone."""
        return current_date(self.timezone)

    async def get_activities(self) -> list[Activity]:
        return await self.store.get_activities()

    async def get_tips(self) -> list[HealthTip]:
        return await self.store.get_tips()

    async def get_daily_metrics(self) -> DailyMetrics:
        return await self.store.get_daily_metrics()

    async def reload(self) -> None:
        await self.store.reload()

    async def filter_activities_by_date_range(
        self,
        date_range: DateRangeFilter | Mapping[str, Any] | None,
        activities: list[Activity] | None = None,
    ) -> list[Activity]:
        """Filter the activity log by an inclusive date range ending today by default."""
        if activities is None:
            activities = await self.store.get_activities()
        return queries.filter_activities_by_date_range(
            activities, date_range, today=self.today()
        )

    async def search_tips_by_title(
        self, query_text: str | None, tips: list[HealthTip] | None = None
    ) -> list[HealthTip]:
        """Search the tips by title, ignoring case."""
        if tips is None:
            tips = await self.store.get_tips()
        return queries.search_tips_by_title(tips, query_text)

    async def compute_progress_ratios(
        self, metrics: DailyMetrics | None = None
    ) -> ProgressRatios:
        """Progress of today's metrics towards the configured goals."""
        if metrics is None:
            metrics = await self.store.get_daily_metrics()
        return queries.compute_progress_ratios(metrics, self.goals)

    async def tip_categories(self) -> dict[str, int]:
        return queries.count_tips_by_category(await self.store.get_tips())

    async def daily_totals(self) -> list[DailyTotal]:
        return summary.summarize_daily_totals(await self.store.get_activities())

    async def weekday_steps(self) -> dict[str, int]:
        return summary.steps_by_weekday(await self.store.get_activities())

    async def add_activity(self, candidate: Mapping[str, Any]) -> Activity:
        return await self.mutations.add_activity(candidate)

    async def add_tip(self, candidate: Mapping[str, Any]) -> HealthTip:
        return await self.mutations.add_tip(candidate)

    async def update_daily_metrics(self, partial: Mapping[str, Any]) -> DailyMetrics:
        return await self.mutations.update_daily_metrics(partial)

    async def log_water_intake(self, liters: float | None = None) -> DailyMetrics:
        """Add one serving of water, or the given amount, to today's intake."""
        return await self.mutations.log_water_intake(
            self.water_increment_liters if liters is None else liters
        )
