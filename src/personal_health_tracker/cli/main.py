"""
Command-line interface for Personal Health Tracker.

Provides one command per view action: the dashboard, the activity log and
the health tips, plus data export.
"""

import asyncio
from typing import Any

import typer

from personal_health_tracker.domain.models import Activity, HealthTip
from personal_health_tracker.services.export import ExportService
from personal_health_tracker.services.queries import build_date_range
from personal_health_tracker.services.tracker import HealthTracker
from personal_health_tracker.utils.exceptions import (
    PersistenceError,
    PersonalHealthTrackerError,
)
from personal_health_tracker.utils.logging_config import get_logger, setup_logging
from personal_health_tracker.utils.parameters import ParameterLoader

app = typer.Typer(help="Personal Health Tracker - Daily metrics, activity log and health tips")

logger = get_logger(__name__)

CONFIG_OPTION = typer.Option("config/config.yaml", help="Path to configuration file")


def init_tracker(config_path: str) -> tuple[ParameterLoader, HealthTracker]:
    """
    Initialize configuration, logging and the tracker.

    Args:
        config_path: Path to configuration file.

    Returns:
        Parameter loader and tracker instance.
    """
    param_loader = ParameterLoader(config_path)
    setup_logging(param_loader.get_logging_config(), "personal_health_tracker")
    return param_loader, HealthTracker.from_config(param_loader.config)


def fail(action: str, error: PersonalHealthTrackerError) -> typer.Exit:
    """Report a failed command and build the exit to raise."""
    logger.error(f"{action} failed: {error}")
    typer.echo(f"Error: {error}", err=True)
    return typer.Exit(code=1)


def warn_not_saved(error: PersistenceError) -> None:
    """Report a change that was applied but could not be saved."""
    logger.warning(f"Change not saved: {error}")
    typer.echo(f"Warning: change applied but not saved: {error}", err=True)


def echo_activity(activity: Activity) -> None:
    typer.echo(
        f"  [{activity.id}] {activity.date}  {activity.steps} steps  "
        f"{activity.exercise_description}  {activity.calories_burned:g} kcal"
    )


def echo_tip(tip: HealthTip) -> None:
    typer.echo(f"  [{tip.id}] {tip.title} ({tip.category})")
    typer.echo(f"      {tip.content}")


@app.command()
def dashboard(config_path: str = CONFIG_OPTION) -> None:
    """
    Show today's metrics, goal progress and the weekly steps series.
    """
    try:
        _, tracker = init_tracker(config_path)

        async def collect() -> tuple[Any, Any, dict[str, int]]:
            metrics = await tracker.get_daily_metrics()
            ratios = await tracker.compute_progress_ratios(metrics)
            return metrics, ratios, await tracker.weekday_steps()

        metrics, ratios, weekly = asyncio.run(collect())

        typer.echo("Health Dashboard")
        typer.echo(
            f"  Steps taken:     {metrics.steps:>8}  ({ratios.steps_ratio:.0%} of goal)"
        )
        typer.echo(
            f"  Calories burned: {metrics.calories_burned:>8g}  "
            f"({ratios.calories_ratio:.0%} of goal)"
        )
        typer.echo(
            f"  Water intake:    {metrics.water_liters:>8g}  ({ratios.water_ratio:.0%} of goal)"
        )
        typer.echo("\nSteps by weekday")
        for label, steps in weekly.items():
            typer.echo(f"  {label}: {steps}")

    except PersonalHealthTrackerError as e:
        raise fail("Dashboard", e) from e


@app.command()
def activities(
    config_path: str = CONFIG_OPTION,
    start_date: str | None = typer.Option(None, help="First date to include (YYYY-MM-DD)"),
    end_date: str | None = typer.Option(None, help="Last date to include (YYYY-MM-DD)"),
) -> None:
    """
    List the activity log, optionally filtered by date range.

    When a filter matches nothing, the full log is listed instead.
    """
    try:
        _, tracker = init_tracker(config_path)

        date_range = None
        if start_date or end_date:
            date_range = build_date_range(start_date, end_date)

        async def collect() -> tuple[list[Activity], list[Activity]]:
            log = await tracker.get_activities()
            return log, await tracker.filter_activities_by_date_range(date_range, log)

        log, selected = asyncio.run(collect())

        if date_range is not None and not selected:
            typer.echo("No activities in that date range, showing all activities")
            selected = log

        typer.echo(f"Activity Log ({len(selected)} entries)")
        for activity in selected:
            echo_activity(activity)

    except PersonalHealthTrackerError as e:
        raise fail("Listing activities", e) from e


@app.command("add-activity")
def add_activity(
    date: str = typer.Option(..., help="Activity date (YYYY-MM-DD)"),
    steps: str = typer.Option(..., help="Steps taken"),
    exercise: str = typer.Option(..., help="Exercise description"),
    calories: str = typer.Option(..., help="Calories burned"),
    config_path: str = CONFIG_OPTION,
) -> None:
    """
    Add an activity to the log.
    """
    try:
        _, tracker = init_tracker(config_path)
        candidate = {
            "date": date,
            "steps": steps,
            "exerciseDescription": exercise,
            "caloriesBurned": calories,
        }
        try:
            activity = asyncio.run(tracker.add_activity(candidate))
            typer.echo("Added activity")
            echo_activity(activity)
        except PersistenceError as e:
            warn_not_saved(e)

    except PersonalHealthTrackerError as e:
        raise fail("Adding activity", e) from e


@app.command()
def tips(
    config_path: str = CONFIG_OPTION,
    search: str = typer.Option("", help="Only show tips whose title contains this text"),
) -> None:
    """
    List health tips, optionally searching by title.
    """
    try:
        _, tracker = init_tracker(config_path)
        matches = asyncio.run(tracker.search_tips_by_title(search))

        typer.echo(f"Health Tips ({len(matches)} found)")
        for tip in matches:
            echo_tip(tip)

    except PersonalHealthTrackerError as e:
        raise fail("Listing tips", e) from e


@app.command("add-tip")
def add_tip(
    title: str = typer.Option(..., help="Tip title"),
    content: str = typer.Option(..., help="Tip text"),
    category: str = typer.Option(..., help="Tip category"),
    image: str = typer.Option(..., help="Image reference"),
    config_path: str = CONFIG_OPTION,
) -> None:
    """
    Add a health tip.
    """
    try:
        _, tracker = init_tracker(config_path)
        candidate = {"title": title, "content": content, "category": category, "image": image}
        try:
            tip = asyncio.run(tracker.add_tip(candidate))
            typer.echo("Added tip")
            echo_tip(tip)
        except PersistenceError as e:
            warn_not_saved(e)

    except PersonalHealthTrackerError as e:
        raise fail("Adding tip", e) from e


@app.command("update-metrics")
def update_metrics(
    config_path: str = CONFIG_OPTION,
    steps: str | None = typer.Option(None, help="Steps taken today"),
    calories: str | None = typer.Option(None, help="Calories burned today"),
    water: str | None = typer.Option(None, help="Water drunk today, in liters"),
) -> None:
    """
    Set today's metrics. Values left out keep their current value.
    """
    try:
        _, tracker = init_tracker(config_path)
        partial = {"steps": steps, "caloriesBurned": calories, "waterLiters": water}
        try:
            metrics = asyncio.run(tracker.update_daily_metrics(partial))
            typer.echo(
                f"Metrics: {metrics.steps} steps, {metrics.calories_burned:g} kcal, "
                f"{metrics.water_liters:g} L"
            )
        except PersistenceError as e:
            warn_not_saved(e)

    except PersonalHealthTrackerError as e:
        raise fail("Updating metrics", e) from e


@app.command("add-water")
def add_water(
    config_path: str = CONFIG_OPTION,
    liters: float | None = typer.Option(None, help="Amount drunk, defaults to one serving"),
) -> None:
    """
    Log water intake.
    """
    try:
        _, tracker = init_tracker(config_path)
        try:
            metrics = asyncio.run(tracker.log_water_intake(liters))
            typer.echo(f"Water intake: {metrics.water_liters:g} L")
        except PersistenceError as e:
            warn_not_saved(e)

    except PersonalHealthTrackerError as e:
        raise fail("Logging water", e) from e


@app.command()
def export(
    config_path: str = CONFIG_OPTION,
    output_dir: str | None = typer.Option(None, help="Override export directory from config"),
) -> None:
    """
    Export activities, tips and daily totals to CSV files.
    """
    try:
        param_loader, tracker = init_tracker(config_path)
        export_config = param_loader.get_export_config()
        if output_dir:
            export_config.dir = output_dir

        async def collect() -> tuple[list[Activity], list[HealthTip]]:
            return await tracker.get_activities(), await tracker.get_tips()

        log, tip_list = asyncio.run(collect())
        written = ExportService(export_config).write_all(log, tip_list)

        typer.echo(f"Exported {len(written)} files")
        for path in written:
            typer.echo(f"  - {path}")

    except PersonalHealthTrackerError as e:
        raise fail("Export", e) from e


if __name__ == "__main__":
    app()
