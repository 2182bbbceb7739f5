"""Canonical meal slots and NOVA processing groups."""

import math
import re
import unicodedata
from dataclasses import dataclass
from enum import Enum, IntEnum


@dataclass(frozen=True)
class MealSlot:
    """Column slug plus the labels a recall export may use for a slot."""

    column: str
    labels: tuple[str, ...]


class Meal(Enum):
    """Fixed, ordered set of daily eating occasions."""

    BREAKFAST = MealSlot("breakfast", ("Breakfast", "Desayuno"))
    MID_MORNING_SNACK = MealSlot(
        "mid_morning_snack", ("Mid-morning-snack", "Media mañana")
    )
    LUNCH = MealSlot("lunch", ("Lunch", "Almuerzo"))
    AFTERNOON_SNACK = MealSlot("afternoon_snack", ("Afternoon-snack", "Merienda"))
    DINNER = MealSlot("dinner", ("Dinner", "Cena"))

    @property
    def column(self) -> str:
        """Snake case prefix used in summary columns."""
        return self.value.column

    @classmethod
    def from_label(cls, label: str | None) -> "Meal | None":
        """Map an exported meal label onto a slot, or None if it is unknown."""
        if label is None:
            return None
        return _LABEL_INDEX.get(_normalize_label(label))


class NovaGroup(IntEnum):
    """NOVA food processing classification; 4 is ultra-processed."""

    UNPROCESSED = 1
    CULINARY_INGREDIENT = 2
    PROCESSED = 3
    ULTRA_PROCESSED = 4

    @property
    def column(self) -> str:
        """Prefix used in summary columns."""
        return f"tier{self.value}"

    @classmethod
    def from_value(cls, value: object) -> "NovaGroup | None":
        """Coerce a raw tier value, returning None when absent or invalid."""
        if value is None or isinstance(value, bool):
            return None
        try:
            number = float(value)
        except (TypeError, ValueError):
            return None
        if math.isnan(number) or not number.is_integer():
            return None
        try:
            return cls(int(number))
        except ValueError:
            return None


def _normalize_label(label: str) -> str:
    decomposed = unicodedata.normalize("NFKD", label)
    stripped = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return re.sub(r"[\s_\-]+", " ", stripped).strip().casefold()


_LABEL_INDEX: dict[str, Meal] = {
    _normalize_label(label): meal for meal in Meal for label in meal.value.labels
}
