"""Record and day summary endpoints with simple token auth."""

from __future__ import annotations

from datetime import date  # noqa: TC003
from typing import TYPE_CHECKING
from uuid import UUID  # noqa: TC003

from fastapi import APIRouter, Depends, Header, HTTPException, Request, status

from nutrition_ocr.domain.records import DaySummary, NutrientRecord

if TYPE_CHECKING:
    from nutrition_ocr.containers import AppContainer

router = APIRouter(tags=["records"])


def _get_api_token(request: Request) -> str:
    container: AppContainer = request.app.state.container
    return container.settings.api_token


async def require_token(
    x_api_token: str | None = Header(default=None),
    api_token: str = Depends(_get_api_token),
) -> None:
    """Ensure requests include a valid API token."""
    if not x_api_token or x_api_token != api_token:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED)


@router.get("/records", dependencies=[Depends(require_token)])
async def list_records(request: Request) -> dict[str, object]:
    """Return all records, newest first."""
    container: AppContainer = request.app.state.container
    records = container.record_service.list_records()
    return {"records": [record.model_dump(mode="json") for record in records]}


@router.get("/records/{record_id}", dependencies=[Depends(require_token)])
async def get_record(record_id: UUID, request: Request) -> dict[str, object]:
    """Return a single record."""
    container: AppContainer = request.app.state.container
    record = container.record_service.get_record(record_id)
    if record is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
    return record.model_dump(mode="json")


@router.put("/records/{record_id}", dependencies=[Depends(require_token)])
async def put_record(
    record_id: UUID, record: NutrientRecord, request: Request
) -> dict[str, object]:
    """Create or replace a reviewed record."""
    container: AppContainer = request.app.state.container
    saved = container.record_service.save_record(
        record.model_copy(update={"id": record_id})
    )
    return saved.model_dump(mode="json")


@router.delete("/records/{record_id}", dependencies=[Depends(require_token)])
async def delete_record(record_id: UUID, request: Request) -> dict[str, str]:
    """Delete a record."""
    container: AppContainer = request.app.state.container
    container.record_service.delete_record(record_id)
    return {"status": "deleted"}


@router.get("/days", dependencies=[Depends(require_token)])
async def list_days(request: Request) -> dict[str, object]:
    """Return records grouped by local calendar day."""
    container: AppContainer = request.app.state.container
    grouped = container.record_service.get_grouped_records()
    return {
        "days": {
            day.isoformat(): [record.model_dump(mode="json") for record in records]
            for day, records in grouped.items()
        }
    }


@router.get("/days/{day}/summary", dependencies=[Depends(require_token)])
async def day_summary(day: date, request: Request) -> dict[str, object]:
    """Return serving-adjusted totals for a day."""
    container: AppContainer = request.app.state.container
    return _summary_payload(container.record_service.get_day_summary(day))


def _summary_payload(summary: DaySummary) -> dict[str, object]:
    return {
        "date": summary.day.isoformat(),
        "total_calories": summary.total_calories,
        "total_fat_g": summary.total_fat_g,
        "total_sodium_mg": summary.total_sodium_mg,
        "total_carb_g": summary.total_carb_g,
        "total_sugars_g": summary.total_sugars_g,
        "total_added_sugars_g": summary.total_added_sugars_g,
        "total_protein_g": summary.total_protein_g,
        "items": [record.model_dump(mode="json") for record in summary.items],
    }
