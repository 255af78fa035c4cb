"""Shared test fixtures."""

import asyncio
from dataclasses import dataclass, field
from datetime import UTC, date, tzinfo
from uuid import UUID

import pytest

from nutrition_ocr.config import Settings
from nutrition_ocr.containers import AppContainer
from nutrition_ocr.domain.recognition import (
    FailureReason,
    LabelImage,
    OcrProvider,
    RecognitionFailure,
)
from nutrition_ocr.domain.records import NutrientRecord
from nutrition_ocr.services.aggregation import local_day
from nutrition_ocr.services.recognition import (
    RecognitionOrchestrator,
    TextRecognitionEngine,
)
from nutrition_ocr.services.records import RecordRepository, RecordService
from nutrition_ocr.services.scans import LabelScanService

LABEL_TEXT = """Nutrition Facts
8 servings per container
Serving size 2/3 cup (55g)
Amount per serving
Calories 230
Total Fat 8g
Saturated Fat 1g
Trans Fat 0g
Cholesterol 0mg
Sodium 160mg
Total Carbohydrate 37g
Dietary Fiber 4g
Total Sugars 12g
Includes 10g Added Sugars
Protein 3g
Vitamin D 2mcg 10%
Calcium 260mg 20%
Iron 8mg 45%
Potassium 240mg 6%
"""


@dataclass
class FakeEngine(TextRecognitionEngine):
    """Engine returning fixed text or raising a queued failure."""

    provider: OcrProvider
    text: str = LABEL_TEXT
    failure: Exception | None = None
    delay_seconds: float = 0.0
    calls: list[LabelImage] = field(default_factory=list)

    async def recognize(self, image: LabelImage) -> str:
        self.calls.append(image)
        if self.delay_seconds:
            await asyncio.sleep(self.delay_seconds)
        if self.failure is not None:
            raise self.failure
        return self.text


def remote_engine(**kwargs) -> FakeEngine:  # type: ignore[no-untyped-def]
    return FakeEngine(provider=OcrProvider.OCRSPACE, **kwargs)


def local_engine(**kwargs) -> FakeEngine:  # type: ignore[no-untyped-def]
    return FakeEngine(provider=OcrProvider.TESSERACT, **kwargs)


def failure(reason: FailureReason) -> RecognitionFailure:
    return RecognitionFailure(reason, f"simulated {reason.value}")


@dataclass
class InMemoryRecordRepository(RecordRepository):
    """In-memory record repository for tests."""

    records: dict[UUID, NutrientRecord] = field(default_factory=dict)
    timezone: tzinfo | None = None

    def get(self, record_id: UUID) -> NutrientRecord | None:
        return self.records.get(record_id)

    def put(self, record: NutrientRecord) -> None:
        self.records[record.id] = record

    def delete(self, record_id: UUID) -> None:
        self.records.pop(record_id, None)

    def list_all(self) -> list[NutrientRecord]:
        return list(self.records.values())

    def list_by_date(self, day: date) -> list[NutrientRecord]:
        return [
            record
            for record in self.records.values()
            if local_day(record.timestamp, self.timezone) == day
        ]


@pytest.fixture
def settings() -> Settings:
    return Settings(
        supabase_url="https://example.supabase.co",
        supabase_service_key="test.service.key",
        api_token="api-token",
        ocr_space_api_key="ocr-key",
        local_timezone="UTC",
    )


@pytest.fixture
def image() -> LabelImage:
    return LabelImage(content=b"\x89PNG\r\n\x1a\nfake-label")


@pytest.fixture
def record_repository() -> InMemoryRecordRepository:
    return InMemoryRecordRepository(timezone=UTC)


@pytest.fixture
def container(
    settings: Settings, record_repository: InMemoryRecordRepository
) -> AppContainer:
    orchestrator = RecognitionOrchestrator(
        remote_engine=remote_engine(),
        local_engine=local_engine(),
    )

    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        orchestrator=orchestrator,
        scan_service=LabelScanService(orchestrator=orchestrator),
        record_service=RecordService(repository=record_repository, timezone=UTC),
        warm_up=lambda: None,
        close_resources=close_resources,
    )
