"""Text recognition orchestration across remote and local engines."""

import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Protocol

from nutrition_ocr.domain.recognition import (
    FailureReason,
    LabelImage,
    OcrProvider,
    RecognitionFailure,
    RecognitionResult,
)

_logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 30.0


class TextRecognitionEngine(Protocol):
    """Interface for an engine that turns an image into raw text."""

    provider: OcrProvider

    async def recognize(self, image: LabelImage) -> str:
        """Return the text recognized in the image.

        Raises ``RecognitionFailure`` for classified failures.
        """


@dataclass
class RecognitionOrchestrator:
    """Runs the preferred engine and falls back to the local engine once.

    The preferred provider is fixed at construction and a per-call override
    never changes it. Only timeouts, transport failures and protocol errors
    of the remote engine are handed to the local engine; every other
    failure is returned to the caller as is.
    """

    remote_engine: TextRecognitionEngine
    local_engine: TextRecognitionEngine
    default_provider: OcrProvider = OcrProvider.OCRSPACE
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS

    async def extract_text(
        self, image: LabelImage, provider: OcrProvider | None = None
    ) -> str:
        """Return recognized text for the image."""
        result = await self.recognize(image, provider)
        return result.text

    async def recognize(
        self, image: LabelImage, provider: OcrProvider | None = None
    ) -> RecognitionResult:
        """Return recognized text with the engine that produced it."""
        selected = provider or self.default_provider
        _logger.info(
            "Recognizing label: provider=%s bytes=%s", selected.value, len(image.content)
        )
        if selected is OcrProvider.TESSERACT:
            return await self._run_local(image)

        try:
            return await self._run_remote(image)
        except RecognitionFailure as failure:
            if not failure.retryable:
                _logger.warning(
                    "Remote recognition failed terminally: reason=%s message=%s",
                    failure.reason.value,
                    failure.message,
                )
                raise
            _logger.warning(
                "Remote recognition failed (reason=%s), falling back to %s: %s",
                failure.reason.value,
                self.local_engine.provider.value,
                failure.message,
            )

        try:
            result = await self._run_local(image)
        except RecognitionFailure as fallback_failure:
            _logger.error(
                "Fallback recognition also failed: reason=%s message=%s",
                fallback_failure.reason.value,
                fallback_failure.message,
            )
            raise RecognitionFailure(
                FailureReason.BOTH_ENGINES_FAILED,
                "Both OCR engines failed. Check the network connection and try again.",
                engine=self.local_engine.provider,
            ) from fallback_failure
        _logger.info("Fallback recognition succeeded")
        return result

    async def _run_remote(self, image: LabelImage) -> RecognitionResult:
        engine = self.remote_engine
        started = time.monotonic()
        try:
            text = await asyncio.wait_for(
                engine.recognize(image), timeout=self.timeout_seconds
            )
        except TimeoutError as exc:
            raise RecognitionFailure(
                FailureReason.TIMEOUT,
                f"OCR request timed out after {self.timeout_seconds:g} seconds",
                engine=engine.provider,
            ) from exc
        except RecognitionFailure:
            raise
        except Exception as exc:
            raise RecognitionFailure(
                FailureReason.ENGINE_ERROR,
                f"{engine.provider.value} failed: {exc}",
                engine=engine.provider,
            ) from exc
        _logger.info(
            "Remote recognition completed: elapsed_ms=%s length=%s",
            int((time.monotonic() - started) * 1000),
            len(text),
        )
        return RecognitionResult(text=text, engine=engine.provider)

    async def _run_local(self, image: LabelImage) -> RecognitionResult:
        engine = self.local_engine
        try:
            text = await engine.recognize(image)
        except RecognitionFailure:
            raise
        except Exception as exc:
            raise RecognitionFailure(
                FailureReason.ENGINE_ERROR,
                f"{engine.provider.value} failed: {exc}",
                engine=engine.provider,
            ) from exc
        _logger.info("Local recognition completed: length=%s", len(text))
        return RecognitionResult(text=text, engine=engine.provider)
