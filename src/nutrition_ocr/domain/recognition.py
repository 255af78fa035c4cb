"""Domain models for text recognition."""

from dataclasses import dataclass
from enum import Enum


class OcrProvider(Enum):
    """Available text recognition engines."""

    OCRSPACE = "ocrspace"
    TESSERACT = "tesseract"


class FailureReason(Enum):
    """Classification of a recognition failure."""

    TIMEOUT = "timeout"
    TRANSPORT_ERROR = "transport_error"
    PROTOCOL_ERROR = "protocol_error"
    NO_USABLE_TEXT = "no_usable_text"
    MALFORMED_RESPONSE = "malformed_response"
    ENGINE_ERROR = "engine_error"
    BOTH_ENGINES_FAILED = "both_engines_failed"


RETRYABLE_REASONS = frozenset(
    {
        FailureReason.TIMEOUT,
        FailureReason.TRANSPORT_ERROR,
        FailureReason.PROTOCOL_ERROR,
    }
)


class RecognitionFailure(Exception):
    """Raised when text could not be recognized from an image."""

    def __init__(
        self,
        reason: FailureReason,
        message: str,
        engine: OcrProvider | None = None,
    ) -> None:
        super().__init__(message)
        self.reason = reason
        self.message = message
        self.engine = engine

    @property
    def retryable(self) -> bool:
        """Whether the failure may be recovered by the fallback engine."""
        return self.reason in RETRYABLE_REASONS

    def __repr__(self) -> str:
        return (
            f"RecognitionFailure(reason={self.reason.value!r}, "
            f"engine={self.engine.value if self.engine else None!r}, "
            f"message={self.message!r})"
        )


@dataclass(frozen=True)
class LabelImage:
    """Raw image bytes of a photographed label."""

    content: bytes
    width: int | None = None
    height: int | None = None

    @property
    def mime_type(self) -> str:
        """Infer a basic image MIME type from file signatures."""
        if self.content.startswith(b"\xff\xd8\xff"):
            return "image/jpeg"
        if self.content.startswith(b"\x89PNG\r\n\x1a\n"):
            return "image/png"
        if self.content[:4] == b"RIFF" and self.content[8:12] == b"WEBP":
            return "image/webp"
        return "image/jpeg"


@dataclass(frozen=True)
class RecognitionResult:
    """Recognized text and the engine that produced it."""

    text: str
    engine: OcrProvider
