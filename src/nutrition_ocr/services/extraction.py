"""Nutrition facts extraction from recognized label text."""

import logging
import math
import re
from dataclasses import dataclass
from enum import Enum

from nutrition_ocr.domain.records import ParsedLabel

_logger = logging.getLogger(__name__)

# Non-negative decimal, optionally with comma thousands separators.
_NUMBER = r"(\d[\d,]*\.?\d*)"


class Unit(Enum):
    """Unit printed beside a label value."""

    GRAMS = "g"
    MILLIGRAMS = "mg"
    UNITLESS = ""
    TEXT = "text"


@dataclass(frozen=True)
class ExtractionRule:
    """Pattern that captures one label field in its first group."""

    field: str
    pattern: re.Pattern[str]
    unit: Unit


def _rule(field: str, pattern: str, unit: Unit) -> ExtractionRule:
    return ExtractionRule(
        field=field,
        pattern=re.compile(pattern.replace("(N)", _NUMBER), re.IGNORECASE),
        unit=unit,
    )


# Rules for the same field are listed in priority order.
EXTRACTION_RULES: tuple[ExtractionRule, ...] = (
    _rule("serving_size", r"serving size[:\s]+([^\n]+)", Unit.TEXT),
    _rule(
        "servings_per_container",
        r"servings per container[:\s]+([^\n]+)",
        Unit.TEXT,
    ),
    _rule("calories", r"calories[:\s]+(N)", Unit.UNITLESS),
    _rule("calories", r"amount per serving[:\s\S]*?(N)\s*calories", Unit.UNITLESS),
    _rule("total_fat_g", r"total fat[:\s]+(N)g", Unit.GRAMS),
    _rule("saturated_fat_g", r"saturated fat[:\s]+(N)g", Unit.GRAMS),
    _rule("trans_fat_g", r"trans fat[:\s]+(N)g", Unit.GRAMS),
    _rule("cholesterol_mg", r"cholesterol[:\s]+(N)mg", Unit.MILLIGRAMS),
    _rule("sodium_mg", r"sodium[:\s]+(N)mg", Unit.MILLIGRAMS),
    _rule("total_carb_g", r"total carbohydrate[:\s]+(N)g", Unit.GRAMS),
    _rule("total_carb_g", r"total carb\.?[:\s]+(N)g", Unit.GRAMS),
    _rule("dietary_fiber_g", r"dietary fiber[:\s]+(N)g", Unit.GRAMS),
    _rule("total_sugars_g", r"total sugars[:\s]+(N)g", Unit.GRAMS),
    _rule("total_sugars_g", r"sugars[:\s]+(N)g", Unit.GRAMS),
    _rule(
        "added_sugars_g",
        r"(?:incl\.?|includes?)\s+(N)g?\s+added sugars",
        Unit.GRAMS,
    ),
    _rule("added_sugars_g", r"added sugars[:\s]+(N)g", Unit.GRAMS),
    _rule("protein_g", r"protein[:\s]+(N)g", Unit.GRAMS),
    _rule("vitamin_d", r"vitamin d[:\s]+(N)", Unit.UNITLESS),
    _rule("calcium", r"calcium[:\s]+(N)", Unit.UNITLESS),
    _rule("iron", r"iron[:\s]+(N)", Unit.UNITLESS),
    _rule("potassium", r"potassium[:\s]+(N)", Unit.UNITLESS),
)

QUALITY_GATE_FIELDS = ("calories", "protein_g", "total_fat_g")


def parse_label(text: str) -> ParsedLabel:
    """Extract label fields from raw recognized text.

    Every rule is tried in order and the first rule that yields a value for a
    field wins. A field whose text does not match, or whose capture is not a
    usable number, is left absent. This never raises.
    """
    values: dict[str, object] = {}
    for rule in EXTRACTION_RULES:
        if rule.field in values:
            continue
        match = rule.pattern.search(text)
        if match is None:
            continue
        value = _convert(match.group(1), rule.unit)
        if value is not None:
            values[rule.field] = value

    _logger.debug(
        "Parsed label text: length=%s fields=%s", len(text), sorted(values)
    )
    return ParsedLabel(raw_ocr_text=text, **values)


def has_enough_data(label: ParsedLabel) -> bool:
    """Return whether the label carries at least one headline nutrient."""
    return any(getattr(label, name) is not None for name in QUALITY_GATE_FIELDS)


def _convert(raw: str, unit: Unit) -> float | str | None:
    if unit is Unit.TEXT:
        cleaned = raw.strip()
        return cleaned or None
    return _to_number(raw)


def _to_number(raw: str) -> float | None:
    """Parse a captured number, stripping thousands separators."""
    try:
        number = float(raw.replace(",", ""))
    except ValueError:
        return None
    if not math.isfinite(number) or number < 0:
        return None
    return number
