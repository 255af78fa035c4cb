"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from nutrition_ocr.adapters.ocr_space_engine import OcrSpaceEngine
from nutrition_ocr.adapters.supabase_record_repository import (
    SupabaseRecordRepository,
)
from nutrition_ocr.adapters.tesseract_engine import TesseractEngine
from nutrition_ocr.config import Settings, parse_timezone
from nutrition_ocr.services.recognition import RecognitionOrchestrator
from nutrition_ocr.services.records import RecordService
from nutrition_ocr.services.scans import LabelScanService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    orchestrator: RecognitionOrchestrator
    scan_service: LabelScanService
    record_service: RecordService
    warm_up: Callable[[], None]
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    timezone = parse_timezone(resolved_settings.local_timezone)
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    record_repository = SupabaseRecordRepository(
        client=supabase_client,
        table_name=resolved_settings.records_table,
        timezone=timezone,
    )
    remote_engine = OcrSpaceEngine.create(
        api_key=resolved_settings.ocr_space_api_key,
        url=resolved_settings.ocr_space_url,
        language=resolved_settings.ocr_language,
    )
    local_engine = TesseractEngine(
        language=resolved_settings.ocr_language,
        tesseract_cmd=resolved_settings.tesseract_cmd,
    )
    orchestrator = RecognitionOrchestrator(
        remote_engine=remote_engine,
        local_engine=local_engine,
        default_provider=resolved_settings.ocr_provider,
        timeout_seconds=resolved_settings.ocr_timeout_seconds,
    )
    scan_service = LabelScanService(orchestrator=orchestrator, timezone=timezone)
    record_service = RecordService(repository=record_repository, timezone=timezone)

    async def close_resources() -> None:
        await remote_engine.close()

    return AppContainer(
        settings=resolved_settings,
        orchestrator=orchestrator,
        scan_service=scan_service,
        record_service=record_service,
        warm_up=local_engine.initialize,
        close_resources=close_resources,
    )
