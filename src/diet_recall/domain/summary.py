"""Fixed-schema participant summary models."""

from dataclasses import dataclass, field

from diet_recall.domain.meals import Meal, NovaGroup


def _summary_columns() -> tuple[str, ...]:
    combos = [(meal, tier) for meal in Meal for tier in NovaGroup]
    return (
        "total_daily_kcal",
        *(f"{meal.column}_kcal" for meal in Meal),
        *(f"{meal.column}_perc" for meal in Meal),
        *(f"{tier.column}_kcal" for tier in NovaGroup),
        *(f"{tier.column}_perc" for tier in NovaGroup),
        *(f"{meal.column}_{tier.column}_kcal" for meal, tier in combos),
        *(f"{meal.column}_{tier.column}_perc" for meal, tier in combos),
    )


SUMMARY_COLUMNS: tuple[str, ...] = _summary_columns()


@dataclass(frozen=True)
class ParticipantSummary:
    """Mean daily energy split by meal, NOVA group and their combination."""

    total_daily_kcal: float
    meal_kcal: dict[Meal, float]
    meal_perc: dict[Meal, float]
    tier_kcal: dict[NovaGroup, float]
    tier_perc: dict[NovaGroup, float]
    meal_tier_kcal: dict[tuple[Meal, NovaGroup], float]
    meal_tier_perc: dict[tuple[Meal, NovaGroup], float]

    def as_row(self) -> dict[str, float]:
        """Flatten into one wide row keyed by SUMMARY_COLUMNS."""
        combos = [(meal, tier) for meal in Meal for tier in NovaGroup]
        values = [
            self.total_daily_kcal,
            *(self.meal_kcal[meal] for meal in Meal),
            *(self.meal_perc[meal] for meal in Meal),
            *(self.tier_kcal[tier] for tier in NovaGroup),
            *(self.tier_perc[tier] for tier in NovaGroup),
            *(self.meal_tier_kcal[combo] for combo in combos),
            *(self.meal_tier_perc[combo] for combo in combos),
        ]
        return dict(zip(SUMMARY_COLUMNS, values, strict=True))


@dataclass(frozen=True)
class AggregationWarnings:
    """Data-quality conditions found while aggregating one participant."""

    unmatched_food_ids: frozenset[int] = field(default_factory=frozenset)
    tier_missing_food_ids: frozenset[int] = field(default_factory=frozenset)
    energy_missing_food_ids: frozenset[int] = field(default_factory=frozenset)
    unknown_meal_labels: frozenset[str] = field(default_factory=frozenset)
    unmatched_record_count: int = 0

    @property
    def has_issues(self) -> bool:
        return bool(
            self.unmatched_food_ids
            or self.tier_missing_food_ids
            or self.energy_missing_food_ids
            or self.unknown_meal_labels
        )
