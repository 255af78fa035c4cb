"""Record persistence boundary and day summaries."""

from dataclasses import dataclass
from datetime import date, tzinfo
from typing import Protocol
from uuid import UUID

from nutrition_ocr.domain.records import DaySummary, NutrientRecord
from nutrition_ocr.services.aggregation import group_by_day, summarize


class RecordRepository(Protocol):
    """Persistence interface for nutrient records."""

    def get(self, record_id: UUID) -> NutrientRecord | None:
        """Return a record by id."""

    def put(self, record: NutrientRecord) -> None:
        """Create or replace a record."""

    def delete(self, record_id: UUID) -> None:
        """Delete a record by id."""

    def list_all(self) -> list[NutrientRecord]:
        """Return every stored record."""

    def list_by_date(self, day: date) -> list[NutrientRecord]:
        """Return records captured on a local calendar day."""


@dataclass
class RecordService:
    """Service for stored records and their daily summaries."""

    repository: RecordRepository
    timezone: tzinfo | None = None

    def get_record(self, record_id: UUID) -> NutrientRecord | None:
        """Return a stored record."""
        return self.repository.get(record_id)

    def save_record(self, record: NutrientRecord) -> NutrientRecord:
        """Persist a reviewed record."""
        self.repository.put(record)
        return record

    def delete_record(self, record_id: UUID) -> None:
        """Delete a stored record."""
        self.repository.delete(record_id)

    def list_records(self) -> list[NutrientRecord]:
        """Return all records, newest first."""
        return sorted(
            self.repository.list_all(),
            key=lambda record: record.timestamp,
            reverse=True,
        )

    def get_grouped_records(self) -> dict[date, list[NutrientRecord]]:
        """Return all records grouped by local day."""
        return group_by_day(self.repository.list_all(), self.timezone)

    def get_day_summary(self, day: date) -> DaySummary:
        """Return the totals for one local calendar day."""
        return summarize(day, self.repository.list_by_date(day))
