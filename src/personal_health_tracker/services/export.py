"""
Export service for writing tracker data to CSV files.

Handles activities, health tips and per-day activity totals.
"""

import logging
from collections.abc import Sequence
from pathlib import Path

import pandas as pd
from pydantic import BaseModel

from personal_health_tracker.domain.models import Activity, HealthTip
from personal_health_tracker.services.summary import summarize_daily_totals
from personal_health_tracker.utils.exceptions import PersistenceError
from personal_health_tracker.utils.parameters import ExportConfig

logger = logging.getLogger(__name__)


class ExportService:
    """
    Service for writing tracker data to export files.

    Columns use the same camelCase names as the stored records.
    """

    def __init__(self, config: ExportConfig) -> None:
        """
        Initialize export service.

        Args:
            config: Export configuration.
        """
        self.config = config
        self.output_dir = Path(config.dir)

    def write_all(self, activities: list[Activity], tips: list[HealthTip]) -> list[Path]:
        """
        Write activities, tips and daily totals.

        Args:
            activities: Activity snapshot.
            tips: Tip snapshot.

        Returns:
            Paths of the files written.

        Raises:
            PersistenceError: If a file cannot be written.
        """
        written: list[Path] = []

        for records, file_name in (
            (activities, self.config.files.activities),
            (tips, self.config.files.tips),
            (summarize_daily_totals(activities), self.config.files.daily_totals),
        ):
            path = self._write_csv(records, file_name)
            if path is not None:
                written.append(path)

        logger.info(f"Exported {len(written)} files to {self.output_dir}")
        return written

    def _write_csv(self, records: Sequence[BaseModel], file_name: str) -> Path | None:
        """
        Write records to a CSV file.

        Args:
            records: Records to write.
            file_name: File name inside the export directory.

        Returns:
            Path written, or None if there was nothing to write.
        """
        if not records:
            logger.warning(f"No records to write to {file_name}")
            return None

        csv_path = self.output_dir / file_name
        data = [record.model_dump(mode="json", by_alias=True) for record in records]
        df = pd.DataFrame(data)

        try:
            self.output_dir.mkdir(parents=True, exist_ok=True)
            df.to_csv(csv_path, index=False, encoding="utf-8")
        except OSError as e:
            raise PersistenceError(f"Failed to write {csv_path}: {e}") from e

        logger.info(f"Wrote {len(records)} rows to {csv_path}")
        return csv_path
