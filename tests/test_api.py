"""Tests for HTTP endpoints."""

from datetime import UTC, datetime
from uuid import uuid4

from fastapi.testclient import TestClient

from nutrition_ocr.api.app import create_app
from nutrition_ocr.domain.recognition import FailureReason
from nutrition_ocr.domain.records import NutrientRecord
from tests.conftest import FakeEngine, InMemoryRecordRepository, failure

HEADERS = {"X-Api-Token": "api-token"}


def test_health(container) -> None:
    client = TestClient(create_app(container))

    response = client.get("/health")

    assert response.json() == {"status": "ok"}


def test_scan_returns_label_and_draft(container) -> None:
    client = TestClient(create_app(container))

    response = client.post(
        "/scans", content=b"image-bytes", headers={"Content-Type": "image/jpeg"}
    )

    assert response.status_code == 200
    data = response.json()
    assert data["engine"] == "ocrspace"
    assert data["has_enough_data"] is True
    assert data["label"]["calories"] == 230
    assert data["draft"]["calories"] == 230
    assert data["draft"]["servings_consumed"] == 1


def test_scan_with_provider_override(container) -> None:
    client = TestClient(create_app(container))

    response = client.post("/scans?provider=tesseract", content=b"image-bytes")

    assert response.json()["engine"] == "tesseract"


def test_scan_terminal_failure_returns_422(container) -> None:
    remote = container.orchestrator.remote_engine
    assert isinstance(remote, FakeEngine)
    remote.failure = failure(FailureReason.NO_USABLE_TEXT)
    client = TestClient(create_app(container))

    response = client.post("/scans", content=b"image-bytes")

    assert response.status_code == 422
    assert response.json()["detail"]["reason"] == "no_usable_text"


def test_scan_rejects_empty_body(container) -> None:
    client = TestClient(create_app(container))

    response = client.post("/scans", content=b"")

    assert response.status_code == 400


def test_records_require_token(container) -> None:
    client = TestClient(create_app(container))

    response = client.get("/records")

    assert response.status_code == 401


def test_record_lifecycle(container, record_repository) -> None:
    client = TestClient(create_app(container))
    record_id = uuid4()
    payload = {
        "product_name": "Yogurt",
        "timestamp": "2024-04-01T08:00:00+00:00",
        "calories": 120,
        "protein_g": 10,
        "servings_consumed": 2,
    }

    created = client.put(f"/records/{record_id}", json=payload, headers=HEADERS)
    fetched = client.get(f"/records/{record_id}", headers=HEADERS)
    deleted = client.delete(f"/records/{record_id}", headers=HEADERS)
    missing = client.get(f"/records/{record_id}", headers=HEADERS)

    assert created.status_code == 200
    assert created.json()["id"] == str(record_id)
    assert fetched.json()["product_name"] == "Yogurt"
    assert deleted.json() == {"status": "deleted"}
    assert missing.status_code == 404
    assert record_repository.records == {}


def test_put_rejects_negative_nutrient(container) -> None:
    client = TestClient(create_app(container))

    response = client.put(
        f"/records/{uuid4()}",
        json={"timestamp": "2024-04-01T08:00:00+00:00", "calories": -5},
        headers=HEADERS,
    )

    assert response.status_code == 422


def test_day_summary_endpoint(
    container, record_repository: InMemoryRecordRepository
) -> None:
    record_repository.put(
        NutrientRecord(
            timestamp=datetime(2024, 4, 1, 8, 0, tzinfo=UTC),
            calories=100,
            servings_consumed=2,
        )
    )
    record_repository.put(
        NutrientRecord(timestamp=datetime(2024, 4, 2, 8, 0, tzinfo=UTC), calories=50)
    )
    client = TestClient(create_app(container))

    summary = client.get("/days/2024-04-01/summary", headers=HEADERS)
    days = client.get("/days", headers=HEADERS)

    assert summary.json()["total_calories"] == 200
    assert len(summary.json()["items"]) == 1
    assert list(days.json()["days"]) == ["2024-04-02", "2024-04-01"]
    assert days.json()["days"]["2024-04-01"][0]["calories"] == 100
    assert days.json()["days"]["2024-04-01"][0]["servings_consumed"] == 2


def test_infinite_servings_do_not_break_day_summary(container) -> None:
    client = TestClient(create_app(container))
    record_id = uuid4()

    stored = client.put(
        f"/records/{record_id}",
        json={
            "timestamp": "2024-03-05T12:00:00+00:00",
            "calories": 0,
            "servings_consumed": "inf",
        },
        headers=HEADERS,
    )
    summary = client.get("/days/2024-03-05/summary", headers=HEADERS)

    assert stored.json()["servings_consumed"] == 1
    assert summary.json()["total_calories"] == 0
