"""
Blob serialization for stored collections.

Collections are stored as JSON arrays of objects keyed by their camelCase
wire names; each daily metric is stored as a bare JSON number.
"""

import json
import logging
from typing import Any, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from personal_health_tracker.utils.exceptions import ParseError

logger = logging.getLogger(__name__)

RecordT = TypeVar("RecordT", bound=BaseModel)


def dump_records(records: list[RecordT]) -> str:
    """
    Serialize a collection of records to a JSON blob.

    Args:
        records: Records to serialize.

    Returns:
        JSON text.
    """
    return json.dumps([record.model_dump(mode="json", by_alias=True) for record in records])


def load_records(blob: str, model: type[RecordT]) -> list[RecordT]:
    """
    Deserialize a JSON blob into a list of records.

    Entries that fail validation are skipped with a warning; the blob as a
    whole must still be a JSON array.

    Args:
        blob: JSON text read from storage.
        model: Record model to validate each entry against.

    Returns:
        List of valid records, in stored order.

    Raises:
        ParseError: If the blob is not a JSON array.
    """
    try:
        data = json.loads(blob)
    except (json.JSONDecodeError, TypeError) as e:
        raise ParseError(f"Invalid JSON for {model.__name__} collection: {e}") from e

    if not isinstance(data, list):
        raise ParseError(
            f"{model.__name__} collection must be a list, got {type(data).__name__}"
        )

    records: list[RecordT] = []

    for idx, entry in enumerate(data):
        if isinstance(entry, dict) and entry.get("id") is None:
            # Older stores appended entries without ids; give them a placeholder
            # so the store can renumber them.
            entry = {**entry, "id": 0}
        try:
            records.append(model.model_validate(entry))
        except PydanticValidationError as e:
            logger.warning(f"Skipping invalid {model.__name__} entry {idx}: {e.error_count()} error(s)")
            continue

    return records


def dump_number(value: float) -> str:
    """Serialize a single metric value."""
    return json.dumps(value)


def load_number(blob: str) -> float:
    """
    Deserialize a single metric value.

    Raises:
        ParseError: If the blob is not a JSON number.
    """
    try:
        value: Any = json.loads(blob)
    except (json.JSONDecodeError, TypeError) as e:
        raise ParseError(f"Invalid JSON for metric value: {e}") from e

    # Older stores kept raw form input, so numeric strings are accepted
    if isinstance(value, str):
        try:
            value = float(value.strip())
        except ValueError as e:
            raise ParseError(f"Metric value is not numeric: {value!r}") from e

    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ParseError(f"Metric value must be a number, got {type(value).__name__}")

    return value
