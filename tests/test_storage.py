"""Unit tests for persistence adapters and blob serialization."""

import json
from pathlib import Path

import pytest

from personal_health_tracker.domain.defaults import default_activities, default_tips
from personal_health_tracker.domain.models import Activity, HealthTip
from personal_health_tracker.infrastructure.storage.adapter import (
    JsonFileAdapter,
    MemoryAdapter,
    build_adapter,
)
from personal_health_tracker.infrastructure.storage.serialization import (
    dump_number,
    dump_records,
    load_number,
    load_records,
)
from personal_health_tracker.utils.exceptions import ParseError, PersistenceError
from personal_health_tracker.utils.parameters import StorageConfig


@pytest.mark.asyncio
async def test_json_adapter_missing_key(tmp_path: Path) -> None:
    """Test that an absent key loads as None."""
    adapter = JsonFileAdapter(tmp_path / "store")

    if await adapter.load("activities") is not None:
        raise AssertionError("Expected None for a key that was never saved")


@pytest.mark.asyncio
async def test_json_adapter_save_replaces_value(tmp_path: Path) -> None:
    """Test that saving twice keeps only the last blob and leaves no temp file."""
    adapter = JsonFileAdapter(tmp_path / "store")

    await adapter.save("healthTips", "[1]")
    await adapter.save("healthTips", "[1, 2]")

    if await adapter.load("healthTips") != "[1, 2]":
        raise AssertionError("Expected the last saved blob")

    files = sorted(p.name for p in (tmp_path / "store").iterdir())
    if files != ["healthTips.json"]:
        raise AssertionError(f"Expected a single file per key, got {files}")


@pytest.mark.asyncio
async def test_json_adapter_write_error(tmp_path: Path) -> None:
    """Test that an unwritable location is reported as PersistenceError."""
    blocker = tmp_path / "blocker"
    blocker.write_text("not a directory", encoding="utf-8")
    adapter = JsonFileAdapter(blocker / "store")

    with pytest.raises(PersistenceError):
        await adapter.save("steps", "1")


@pytest.mark.asyncio
async def test_json_adapter_rejects_path_keys(tmp_path: Path) -> None:
    """Test that keys cannot escape the storage directory."""
    adapter = JsonFileAdapter(tmp_path)

    with pytest.raises(PersistenceError):
        await adapter.load("../secrets")


@pytest.mark.asyncio
async def test_memory_adapter_round_trip() -> None:
    """Test the in-memory backend."""
    adapter = MemoryAdapter()
    await adapter.save("water", "2.5")

    if await adapter.load("water") != "2.5":
        raise AssertionError("Expected saved blob back")


def test_build_adapter_selects_backend(tmp_path: Path) -> None:
    """Test backend selection from configuration."""
    json_adapter = build_adapter(StorageConfig(backend="json", dir=str(tmp_path)))
    if not isinstance(json_adapter, JsonFileAdapter):
        raise AssertionError("Expected JsonFileAdapter for the json backend")

    if not isinstance(build_adapter(StorageConfig(backend="memory")), MemoryAdapter):
        raise AssertionError("Expected MemoryAdapter for the memory backend")


def test_records_round_trip_losslessly() -> None:
    """Test that collections survive serialization unchanged."""
    activities = default_activities()
    tips = default_tips()

    if load_records(dump_records(activities), Activity) != activities:
        raise AssertionError("Activities changed through serialization")

    if load_records(dump_records(tips), HealthTip) != tips:
        raise AssertionError("Tips changed through serialization")

    first = json.loads(dump_records(activities))[0]
    if not isinstance(first["steps"], int) or first["date"] != "2024-01-01":
        raise AssertionError(f"Expected numbers as numbers and ISO dates, got {first}")


def test_load_records_rejects_non_list() -> None:
    """Test that a blob of the wrong shape raises ParseError."""
    with pytest.raises(ParseError):
        load_records('{"activities": []}', Activity)

    with pytest.raises(ParseError):
        load_records("not json", Activity)


def test_legacy_tip_image_handle() -> None:
    """Test that numeric image handles from older stores become text."""
    tips = load_records(
        json.dumps([{"id": 1, "title": "T", "content": "C", "category": "X", "image": 12}]),
        HealthTip,
    )

    if tips[0].image != "12":
        raise AssertionError(f"Expected image reference as text, got {tips[0].image!r}")


def test_metric_numbers() -> None:
    """Test single metric serialization."""
    if load_number(dump_number(5)) != 5:
        raise AssertionError("Expected integer metric back")

    if load_number('"7.5"') != 7.5:
        raise AssertionError("Expected numeric strings from older stores to be accepted")

    with pytest.raises(ParseError):
        load_number("true")

    with pytest.raises(ParseError):
        load_number("[1]")
