"""OCR.space API engine for remote text recognition."""

import base64
import logging
from dataclasses import dataclass

import httpx

from nutrition_ocr.domain.recognition import (
    FailureReason,
    LabelImage,
    OcrProvider,
    RecognitionFailure,
)
from nutrition_ocr.services.recognition import TextRecognitionEngine

OCR_SPACE_URL = "https://api.ocr.space/parse/image"

_logger = logging.getLogger(__name__)


@dataclass
class OcrSpaceEngine(TextRecognitionEngine):
    """Remote engine backed by the OCR.space parse API."""

    api_key: str
    http_client: httpx.AsyncClient
    url: str = OCR_SPACE_URL
    language: str = "eng"
    provider: OcrProvider = OcrProvider.OCRSPACE

    @classmethod
    def create(
        cls, api_key: str, url: str = OCR_SPACE_URL, language: str = "eng"
    ) -> "OcrSpaceEngine":
        """Create an OCR.space engine with a managed httpx session."""
        return cls(
            api_key=api_key,
            http_client=httpx.AsyncClient(),
            url=url,
            language=language,
        )

    async def recognize(self, image: LabelImage) -> str:
        """Send the image to OCR.space and return the first parsed text."""
        form = {
            "base64Image": _to_data_url(image),
            "apikey": self.api_key,
            "language": self.language,
            "isOverlayRequired": "false",
            "detectOrientation": "true",
            "scale": "true",
            "OCREngine": "2",
        }
        try:
            response = await self.http_client.post(self.url, data=form, timeout=None)
            response.raise_for_status()
        except httpx.TimeoutException as exc:
            raise self._failure(FailureReason.TIMEOUT, f"timed out: {exc}") from exc
        except httpx.HTTPStatusError as exc:
            status = exc.response.status_code
            raise self._failure(
                FailureReason.PROTOCOL_ERROR,
                f"HTTP {status}: {exc.response.reason_phrase}",
            ) from exc
        except httpx.TransportError as exc:
            raise self._failure(
                FailureReason.TRANSPORT_ERROR, f"network error: {exc}"
            ) from exc

        try:
            payload = response.json()
        except ValueError as exc:
            raise self._failure(
                FailureReason.MALFORMED_RESPONSE, "response is not valid JSON"
            ) from exc
        return self._parse_payload(payload)

    def _parse_payload(self, payload: object) -> str:
        if not isinstance(payload, dict):
            raise self._failure(
                FailureReason.MALFORMED_RESPONSE, "response is not a JSON object"
            )
        _logger.info(
            "OCR.space response status: %s",
            "ERROR" if payload.get("IsErroredOnProcessing") else "SUCCESS",
        )
        if payload.get("IsErroredOnProcessing"):
            raise self._failure(
                FailureReason.NO_USABLE_TEXT,
                _error_message(payload.get("ErrorMessage"))
                or "OCR processing failed",
            )

        results = payload.get("ParsedResults")
        if results is not None and not isinstance(results, list):
            raise self._failure(
                FailureReason.MALFORMED_RESPONSE, "ParsedResults is not a list"
            )
        if not results:
            raise self._failure(
                FailureReason.NO_USABLE_TEXT, "No text extracted from image"
            )
        first = results[0]
        if not isinstance(first, dict):
            raise self._failure(
                FailureReason.MALFORMED_RESPONSE,
                "ParsedResults entry is not an object",
            )
        text = first.get("ParsedText")
        if text is None:
            raise self._failure(
                FailureReason.NO_USABLE_TEXT, "No text extracted from image"
            )
        if not isinstance(text, str):
            raise self._failure(
                FailureReason.MALFORMED_RESPONSE, "ParsedText is not a string"
            )
        _logger.debug("OCR.space text preview: %s", text[:100])
        return text

    def _failure(self, reason: FailureReason, message: str) -> RecognitionFailure:
        return RecognitionFailure(
            reason, f"OCR.space failed: {message}", engine=self.provider
        )

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()


def _to_data_url(image: LabelImage) -> str:
    """Convert image bytes to a base64 data URL."""
    encoded = base64.b64encode(image.content).decode("utf-8")
    return f"data:{image.mime_type};base64,{encoded}"


def _error_message(raw: object) -> str | None:
    """OCR.space reports ErrorMessage as a string or a list of strings."""
    if isinstance(raw, list):
        return "; ".join(str(item) for item in raw) or None
    if isinstance(raw, str):
        return raw or None
    return None
