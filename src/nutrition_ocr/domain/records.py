"""Nutrient record models."""

import math
from dataclasses import dataclass
from datetime import date
from typing import Any
from uuid import UUID, uuid4

from pydantic import AwareDatetime, BaseModel, ConfigDict, Field, field_validator

from nutrition_ocr.domain.recognition import OcrProvider

DEFAULT_SERVINGS = 1.0


def _amount() -> Any:
    return Field(default=None, ge=0, allow_inf_nan=False)


class NutrientFields(BaseModel):
    """Per-serving nutrient values as printed on a label."""

    model_config = ConfigDict(frozen=True)

    calories: float | None = _amount()
    total_fat_g: float | None = _amount()
    saturated_fat_g: float | None = _amount()
    trans_fat_g: float | None = _amount()
    cholesterol_mg: float | None = _amount()
    sodium_mg: float | None = _amount()
    total_carb_g: float | None = _amount()
    dietary_fiber_g: float | None = _amount()
    total_sugars_g: float | None = _amount()
    added_sugars_g: float | None = _amount()
    protein_g: float | None = _amount()
    vitamin_d: float | None = _amount()
    calcium: float | None = _amount()
    iron: float | None = _amount()
    potassium: float | None = _amount()

    def present_nutrients(self) -> dict[str, float]:
        """Return only the nutrient fields that carry a value."""
        return {
            name: value
            for name in NUTRIENT_FIELD_NAMES
            if (value := getattr(self, name)) is not None
        }


NUTRIENT_FIELD_NAMES: tuple[str, ...] = tuple(NutrientFields.model_fields)


class ParsedLabel(NutrientFields):
    """Partial record extracted from recognized label text."""

    raw_ocr_text: str = ""
    serving_size: str | None = None
    servings_per_container: str | None = None


class NutrientRecord(NutrientFields):
    """A saved entry for one consumed product."""

    id: UUID = Field(default_factory=uuid4)
    product_name: str = ""
    timestamp: AwareDatetime
    photo_ref: str | None = None
    raw_ocr_text: str | None = None
    serving_size: str | None = None
    servings_per_container: str | None = None
    servings_consumed: float = Field(default=DEFAULT_SERVINGS, allow_inf_nan=False)

    @field_validator("servings_consumed", mode="before")
    @classmethod
    def _normalize_servings(cls, value: object) -> object:
        if value is None:
            return DEFAULT_SERVINGS
        try:
            number = float(value)  # type: ignore[arg-type]
        except (TypeError, ValueError):
            return value
        if not math.isfinite(number) or number <= 0:
            return DEFAULT_SERVINGS
        return number


@dataclass(frozen=True)
class DaySummary:
    """Per-serving-adjusted totals for one local calendar day."""

    day: date
    total_calories: float
    total_fat_g: float
    total_sodium_mg: float
    total_carb_g: float
    total_sugars_g: float
    total_added_sugars_g: float
    total_protein_g: float
    items: list[NutrientRecord]


@dataclass(frozen=True)
class LabelScan:
    """Outcome of scanning one label photo."""

    engine: OcrProvider
    label: ParsedLabel
    has_enough_data: bool
