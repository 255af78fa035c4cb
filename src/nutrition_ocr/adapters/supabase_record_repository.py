"""Supabase repository for nutrient records."""

from dataclasses import dataclass
from datetime import UTC, date, datetime, time, timedelta, tzinfo
from uuid import UUID

from supabase import Client

from nutrition_ocr.domain.records import NutrientRecord
from nutrition_ocr.services.aggregation import local_day
from nutrition_ocr.services.records import RecordRepository


@dataclass
class SupabaseRecordRepository(RecordRepository):
    """Supabase implementation for nutrient record persistence."""

    client: Client
    table_name: str = "nutrition_facts"
    timezone: tzinfo | None = None

    def get(self, record_id: UUID) -> NutrientRecord | None:
        """Return a record by id."""
        response = (
            self.client.table(self.table_name)
            .select("*")
            .eq("id", str(record_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return NutrientRecord.model_validate(response.data[0])

    def put(self, record: NutrientRecord) -> None:
        """Insert or replace a record row."""
        response = (
            self.client.table(self.table_name)
            .upsert(record.model_dump(mode="json"))
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to save nutrition record")

    def delete(self, record_id: UUID) -> None:
        """Delete a record row."""
        self.client.table(self.table_name).delete().eq("id", str(record_id)).execute()

    def list_all(self) -> list[NutrientRecord]:
        """Return all records, newest first."""
        response = (
            self.client.table(self.table_name)
            .select("*")
            .order("timestamp", desc=True)
            .execute()
        )
        return [NutrientRecord.model_validate(row) for row in response.data or []]

    def list_by_date(self, day: date) -> list[NutrientRecord]:
        """Return records whose local capture date is the given day."""
        start = datetime.combine(day, time.min, tzinfo=self.timezone)
        if self.timezone is None:
            start = start.astimezone()
        # Window padded for DST shifts; rows are filtered by local date below.
        end = start + timedelta(days=1, hours=1)
        start -= timedelta(hours=1)
        response = (
            self.client.table(self.table_name)
            .select("*")
            .gte("timestamp", start.astimezone(UTC).isoformat())
            .lt("timestamp", end.astimezone(UTC).isoformat())
            .order("timestamp", desc=False)
            .execute()
        )
        records = [NutrientRecord.model_validate(row) for row in response.data or []]
        return [
            record
            for record in records
            if local_day(record.timestamp, self.timezone) == day
        ]
