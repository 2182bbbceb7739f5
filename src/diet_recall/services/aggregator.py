"""Per-participant energy aggregation by meal and NOVA group.

Energy is summed within each recall day and then averaged across the days the
participant reported, so every figure reads as a typical daily intake. Every
meal slot and NOVA group is filled for every observed day, with 0 kcal when
nothing was recorded, so a skipped meal lowers the mean instead of vanishing
from it.
"""

import logging
import math
import numbers
from collections import defaultdict
from collections.abc import Hashable, Iterable, Sequence
from dataclasses import dataclass

from diet_recall.domain.errors import InvalidRecordError
from diet_recall.domain.meals import Meal, NovaGroup
from diet_recall.domain.recall import IntakeRecord, ReferenceTable
from diet_recall.domain.summary import AggregationWarnings, ParticipantSummary

_TOTAL = "total"
_MEAL_TIERS = [(meal, tier) for meal in Meal for tier in NovaGroup]

_logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class _EnergyRow:
    day: int
    meal: Meal | None
    tier: NovaGroup | None
    kcal: float


@dataclass
class DietAggregator:
    """Aggregator bound to a single reference table."""

    reference_table: ReferenceTable

    def aggregate(
        self, records: Sequence[IntakeRecord]
    ) -> tuple[ParticipantSummary, AggregationWarnings]:
        """Summarize one participant's records."""
        return aggregate_diet(records, self.reference_table)


def aggregate_diet(
    records: Sequence[IntakeRecord], reference_table: ReferenceTable
) -> tuple[ParticipantSummary, AggregationWarnings]:
    """Build the fixed-schema summary for one participant.

    Raises InvalidRecordError when a record lacks its day or meal. Unknown
    foods, foods without energy or NOVA group, and unrecognized meal labels
    are reported through the returned warnings and contribute nothing to the
    cells they cannot be placed in.
    """
    _validate_records(records)
    rows, warnings = _join_energy(records, reference_table)
    _log_warnings(warnings)

    days = sorted({row.day for row in rows})
    if not days:
        _logger.info("No intake records; returning an all-zero summary")

    cells = _collect_cells(rows)
    total_daily_kcal = _mean(_complete(cells, [_TOTAL], days)[_TOTAL])
    meal_kcal = {
        meal: _mean(sums) for meal, sums in _complete(cells, list(Meal), days).items()
    }
    tier_kcal = {
        tier: _mean(sums)
        for tier, sums in _complete(cells, list(NovaGroup), days).items()
    }
    meal_tier_kcal = {
        combo: _mean(sums)
        for combo, sums in _complete(cells, _MEAL_TIERS, days).items()
    }

    summary = ParticipantSummary(
        total_daily_kcal=total_daily_kcal,
        meal_kcal=meal_kcal,
        meal_perc={
            meal: _percent(kcal, total_daily_kcal) for meal, kcal in meal_kcal.items()
        },
        tier_kcal=tier_kcal,
        tier_perc={
            tier: _percent(kcal, total_daily_kcal) for tier, kcal in tier_kcal.items()
        },
        meal_tier_kcal=meal_tier_kcal,
        meal_tier_perc={
            (meal, tier): _percent(kcal, meal_kcal[meal])
            for (meal, tier), kcal in meal_tier_kcal.items()
        },
    )
    return summary, warnings


def _validate_records(records: Sequence[IntakeRecord]) -> None:
    for index, record in enumerate(records):
        if not _is_whole_number(record.day):
            raise InvalidRecordError(
                f"Record {index} has no valid day: {record.day!r}"
            )
        if not isinstance(record.meal, str) or not record.meal.strip():
            raise InvalidRecordError(f"Record {index} has no meal")
        if record.food_id is None:
            raise InvalidRecordError(f"Record {index} has no food id")
        grams = record.serving_grams
        if grams is None or math.isnan(grams) or grams < 0:
            raise InvalidRecordError(
                f"Record {index} has an invalid serving size: {grams!r}"
            )


def _is_whole_number(value: object) -> bool:
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        return False
    if isinstance(value, numbers.Integral):
        return True
    return math.isfinite(value) and float(value).is_integer()


def _join_energy(
    records: Iterable[IntakeRecord], reference_table: ReferenceTable
) -> tuple[list[_EnergyRow], AggregationWarnings]:
    """Attach kcal and NOVA group to each record from the reference table."""
    unmatched: set[int] = set()
    unmatched_count = 0
    energy_missing: set[int] = set()
    tier_missing: set[int] = set()
    unknown_meals: set[str] = set()
    rows = []

    for record in records:
        meal = Meal.from_label(record.meal)
        if meal is None:
            unknown_meals.add(record.meal)

        food = reference_table.get(record.food_id)
        kcal = 0.0
        tier = None
        if food is None:
            unmatched.add(record.food_id)
            unmatched_count += 1
        else:
            energy = food.energy_per_100g
            if energy is None or math.isnan(energy):
                energy_missing.add(record.food_id)
            else:
                kcal = record.serving_grams / 100 * energy
            tier = NovaGroup.from_value(food.processing_tier)
            if tier is None:
                tier_missing.add(record.food_id)

        rows.append(_EnergyRow(day=int(record.day), meal=meal, tier=tier, kcal=kcal))

    warnings = AggregationWarnings(
        unmatched_food_ids=frozenset(unmatched),
        tier_missing_food_ids=frozenset(tier_missing),
        energy_missing_food_ids=frozenset(energy_missing),
        unknown_meal_labels=frozenset(unknown_meals),
        unmatched_record_count=unmatched_count,
    )
    return rows, warnings


def _collect_cells(
    rows: Iterable[_EnergyRow],
) -> dict[tuple[Hashable, int], list[float]]:
    """Group kcal values by (grouping key, day) for every grouping level."""
    cells: defaultdict[tuple[Hashable, int], list[float]] = defaultdict(list)
    for row in rows:
        cells[(_TOTAL, row.day)].append(row.kcal)
        if row.meal is not None:
            cells[(row.meal, row.day)].append(row.kcal)
        if row.tier is not None:
            cells[(row.tier, row.day)].append(row.kcal)
        if row.meal is not None and row.tier is not None:
            cells[((row.meal, row.tier), row.day)].append(row.kcal)
    return cells


def _complete(
    cells: dict[tuple[Hashable, int], list[float]],
    keys: Sequence[Hashable],
    days: Sequence[int],
) -> dict[Hashable, list[float]]:
    """Return one daily sum per observed day for every key, 0 where absent."""
    return {
        key: [math.fsum(cells.get((key, day), ())) for day in days] for key in keys
    }


def _mean(daily_sums: Sequence[float]) -> float:
    if not daily_sums:
        return 0.0
    return math.fsum(daily_sums) / len(daily_sums)


def _percent(part: float, whole: float) -> float:
    if whole == 0:
        return 0.0
    return part / whole * 100


def _log_warnings(warnings: AggregationWarnings) -> None:
    if warnings.unmatched_food_ids:
        _logger.warning(
            "%s items found in recall with no matching food id in database: %s",
            warnings.unmatched_record_count,
            sorted(warnings.unmatched_food_ids),
        )
    if warnings.energy_missing_food_ids:
        _logger.warning(
            "Foods without energy value counted as 0 kcal: %s",
            sorted(warnings.energy_missing_food_ids),
        )
    if warnings.tier_missing_food_ids:
        _logger.warning(
            "Foods without NOVA group excluded from NOVA columns: %s",
            sorted(warnings.tier_missing_food_ids),
        )
    if warnings.unknown_meal_labels:
        _logger.warning(
            "Unrecognized meal labels excluded from meal columns: %s",
            sorted(warnings.unknown_meal_labels),
        )
