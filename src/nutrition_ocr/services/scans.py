"""Label scanning: recognition followed by field extraction."""

import logging
from dataclasses import dataclass
from datetime import datetime, tzinfo

from nutrition_ocr.domain.recognition import LabelImage, OcrProvider
from nutrition_ocr.domain.records import (
    DEFAULT_SERVINGS,
    LabelScan,
    NutrientRecord,
    ParsedLabel,
)
from nutrition_ocr.services.extraction import has_enough_data, parse_label
from nutrition_ocr.services.recognition import RecognitionOrchestrator

_logger = logging.getLogger(__name__)


@dataclass
class LabelScanService:
    """Service that turns a label photo into reviewable nutrient data."""

    orchestrator: RecognitionOrchestrator
    timezone: tzinfo | None = None

    async def scan(
        self, image: LabelImage, provider: OcrProvider | None = None
    ) -> LabelScan:
        """Recognize and parse a label photo.

        Raises ``RecognitionFailure`` when no engine could read the image.
        """
        result = await self.orchestrator.recognize(image, provider)
        label = parse_label(result.text)
        enough = has_enough_data(label)
        if not enough:
            _logger.warning(
                "Not enough nutrition data extracted: engine=%s", result.engine.value
            )
        return LabelScan(engine=result.engine, label=label, has_enough_data=enough)

    def draft_record(  # noqa: PLR0913
        self,
        label: ParsedLabel,
        *,
        photo_ref: str | None = None,
        captured_at: datetime | None = None,
        product_name: str = "",
        servings_consumed: float = DEFAULT_SERVINGS,
    ) -> NutrientRecord:
        """Build an unsaved record from parsed label data."""
        timestamp = captured_at or datetime.now().astimezone(self.timezone)
        return NutrientRecord(
            product_name=product_name,
            timestamp=timestamp,
            photo_ref=photo_ref,
            raw_ocr_text=label.raw_ocr_text,
            serving_size=label.serving_size,
            servings_per_container=label.servings_per_container,
            servings_consumed=servings_consumed,
            **label.present_nutrients(),
        )
