"""Local Tesseract engine used when the remote engine is unreachable."""

import asyncio
import io
import logging
from dataclasses import dataclass, field

import pytesseract
from PIL import Image, UnidentifiedImageError

from nutrition_ocr.domain.recognition import (
    FailureReason,
    LabelImage,
    OcrProvider,
    RecognitionFailure,
)
from nutrition_ocr.services.recognition import TextRecognitionEngine

_logger = logging.getLogger(__name__)


@dataclass
class TesseractEngine(TextRecognitionEngine):
    """Offline engine running Tesseract in a worker thread."""

    language: str = "eng"
    tesseract_cmd: str | None = None
    provider: OcrProvider = OcrProvider.TESSERACT
    _initialized: bool = field(default=False, init=False, repr=False)

    def initialize(self) -> None:
        """Locate the Tesseract binary and check the language model once."""
        if self._initialized:
            return
        if self.tesseract_cmd:
            pytesseract.pytesseract.tesseract_cmd = self.tesseract_cmd
        try:
            version = pytesseract.get_tesseract_version()
            languages = pytesseract.get_languages(config="")
        except pytesseract.TesseractNotFoundError as exc:
            raise self._failure("tesseract binary not found") from exc
        if self.language not in languages:
            raise self._failure(f"language model '{self.language}' is not installed")
        _logger.info(
            "Tesseract initialized: version=%s language=%s", version, self.language
        )
        self._initialized = True

    async def recognize(self, image: LabelImage) -> str:
        """Run Tesseract on the image without blocking the event loop."""
        return await asyncio.to_thread(self._recognize_sync, image)

    def _recognize_sync(self, image: LabelImage) -> str:
        if not self._initialized:
            _logger.info("Initializing Tesseract on first use")
            self.initialize()
        try:
            with Image.open(io.BytesIO(image.content)) as picture:
                text = pytesseract.image_to_string(picture, lang=self.language)
        except UnidentifiedImageError as exc:
            raise self._failure("image could not be decoded") from exc
        except pytesseract.TesseractError as exc:
            raise self._failure(str(exc)) from exc
        _logger.info("Tesseract completed: length=%s", len(text))
        return text

    def _failure(self, message: str) -> RecognitionFailure:
        return RecognitionFailure(
            FailureReason.ENGINE_ERROR,
            f"Tesseract failed: {message}",
            engine=self.provider,
        )
