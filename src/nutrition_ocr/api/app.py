"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException, Request, status

from nutrition_ocr.api.records import router as records_router
from nutrition_ocr.app_logging import configure_logging
from nutrition_ocr.containers import AppContainer
from nutrition_ocr.domain.recognition import LabelImage, OcrProvider, RecognitionFailure


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        try:
            app.state.container.warm_up()
        except Exception:
            logger.exception("Local OCR engine unavailable, offline fallback disabled")
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    app.include_router(records_router)

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.post("/scans")
    async def scan_label(
        request: Request, provider: OcrProvider | None = None
    ) -> dict[str, object]:
        """Recognize a label photo sent as the raw request body."""
        state_container: AppContainer = request.app.state.container
        content = await request.body()
        if not content:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST, detail="Empty image body"
            )
        try:
            scan = await state_container.scan_service.scan(
                LabelImage(content=content), provider
            )
        except RecognitionFailure as failure:
            logger.warning(
                "Scan failed: reason=%s engine=%s",
                failure.reason.value,
                failure.engine.value if failure.engine else None,
            )
            raise HTTPException(
                status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
                detail={"reason": failure.reason.value, "message": failure.message},
            ) from failure
        draft = state_container.scan_service.draft_record(scan.label)
        return {
            "engine": scan.engine.value,
            "has_enough_data": scan.has_enough_data,
            "label": scan.label.model_dump(mode="json"),
            "draft": draft.model_dump(mode="json"),
        }

    return app
