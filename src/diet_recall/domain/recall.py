"""Domain models for recall records and the food reference table."""

from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass


@dataclass(frozen=True)
class IntakeRecord:
    """One reported food consumption event."""

    day: int
    meal: str
    food_id: int
    serving_grams: float
    food_name: str | None = None


@dataclass(frozen=True)
class ParticipantHeader:
    """Participant metadata from the first rows of a recall export."""

    code: object | None = None
    name: object | None = None
    family_name: object | None = None
    sex: object | None = None
    age: object | None = None
    resting_energy_expenditure: object | None = None

    def as_row(self) -> dict[str, object | None]:
        """Return header fields in export column order."""
        return {
            "code": self.code,
            "name": self.name,
            "family_name": self.family_name,
            "sex": self.sex,
            "age": self.age,
            "resting_energy_expenditure": self.resting_energy_expenditure,
        }


HEADER_COLUMNS: tuple[str, ...] = tuple(ParticipantHeader().as_row())


@dataclass(frozen=True)
class RecallData:
    """Parsed recall file: participant header plus intake records."""

    header: ParticipantHeader
    records: list[IntakeRecord]


@dataclass(frozen=True)
class FoodReference:
    """Reference composition data for one food."""

    food_id: int
    energy_per_100g: float | None
    processing_tier: int | None
    food_name: str | None = None


class ReferenceTable(Mapping[int, FoodReference]):
    """Read-only lookup of foods keyed by food id."""

    def __init__(self, foods: Iterable[FoodReference] = ()) -> None:
        entries: dict[int, FoodReference] = {}
        for food in foods:
            if food.food_id in entries:
                raise ValueError(f"Duplicate food id: {food.food_id}")
            entries[food.food_id] = food
        self._entries = entries

    def __getitem__(self, food_id: int) -> FoodReference:
        return self._entries[food_id]

    def __iter__(self) -> Iterator[int]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"ReferenceTable({len(self)} foods)"
