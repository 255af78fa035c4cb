"""Daily aggregation of nutrient records."""

import math
from collections.abc import Iterable
from datetime import date, datetime, tzinfo

from nutrition_ocr.domain.records import DEFAULT_SERVINGS, DaySummary, NutrientRecord

# Summary total -> record field.
TRACKED_TOTALS = {
    "total_calories": "calories",
    "total_fat_g": "total_fat_g",
    "total_sodium_mg": "sodium_mg",
    "total_carb_g": "total_carb_g",
    "total_sugars_g": "total_sugars_g",
    "total_added_sugars_g": "added_sugars_g",
    "total_protein_g": "protein_g",
}


def serving_multiplier(record: NutrientRecord) -> float:
    """Return the servings consumed, defaulting to one."""
    servings = record.servings_consumed
    if servings is None or not math.isfinite(servings) or servings <= 0:
        return DEFAULT_SERVINGS
    return servings


def summarize(day: date, records: Iterable[NutrientRecord]) -> DaySummary:
    """Sum the tracked nutrients of a day's records, scaled by servings.

    A missing nutrient counts as zero, so a summary always has defined totals.
    """
    items = list(records)
    totals = dict.fromkeys(TRACKED_TOTALS, 0.0)
    for record in items:
        multiplier = serving_multiplier(record)
        for total_name, field_name in TRACKED_TOTALS.items():
            value = getattr(record, field_name)
            if value is not None:
                totals[total_name] += value * multiplier
    return DaySummary(day=day, items=items, **totals)


def local_day(timestamp: datetime, tz: tzinfo | None = None) -> date:
    """Return the calendar date of an instant in the given or host zone."""
    return timestamp.astimezone(tz).date()


def group_by_day(
    records: Iterable[NutrientRecord], tz: tzinfo | None = None
) -> dict[date, list[NutrientRecord]]:
    """Group records by local calendar day, newest day and record first."""
    ordered = sorted(records, key=lambda record: record.timestamp, reverse=True)
    grouped: dict[date, list[NutrientRecord]] = {}
    for record in ordered:
        grouped.setdefault(local_day(record.timestamp, tz), []).append(record)
    return dict(sorted(grouped.items(), reverse=True))
