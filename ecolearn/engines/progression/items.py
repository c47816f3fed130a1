"""
Growth resource items and reward bundles.

A bundle is an immutable item -> quantity map over a closed set of item names.
Bundles only ever grow: they compose by point-wise addition and are never
decremented by the engine.
"""

from enum import Enum
from typing import Dict, Iterator, Mapping, Tuple, Union

from pydantic import BaseModel, ConfigDict, field_validator, model_validator


class ItemName(str, Enum):
    """The closed set of growth resources."""

    SEED = "seed"
    WATER = "water"
    SUNLIGHT = "sunlight"
    NUTRIENTS = "nutrients"
    FERTILIZER = "fertilizer"
    LOVE = "love"


class ItemRarity(str, Enum):
    COMMON = "common"
    UNCOMMON = "uncommon"
    RARE = "rare"
    EPIC = "epic"


class ItemInfo(BaseModel):
    """Display metadata for one item."""

    model_config = ConfigDict(frozen=True)

    name: ItemName
    title: str
    description: str
    rarity: ItemRarity


ITEM_INFO: Dict[ItemName, ItemInfo] = {
    info.name: info
    for info in (
        ItemInfo(
            name=ItemName.SEED,
            title="Tree Seed",
            description="A small seed that can grow into a beautiful tree",
            rarity=ItemRarity.COMMON,
        ),
        ItemInfo(
            name=ItemName.WATER,
            title="Water",
            description="Essential for plant growth and hydration",
            rarity=ItemRarity.COMMON,
        ),
        ItemInfo(
            name=ItemName.SUNLIGHT,
            title="Sunlight",
            description="Natural light energy for photosynthesis",
            rarity=ItemRarity.COMMON,
        ),
        ItemInfo(
            name=ItemName.NUTRIENTS,
            title="Soil Nutrients",
            description="Essential minerals and nutrients for healthy growth",
            rarity=ItemRarity.UNCOMMON,
        ),
        ItemInfo(
            name=ItemName.FERTILIZER,
            title="Organic Fertilizer",
            description="Natural fertilizer to boost growth and flowering",
            rarity=ItemRarity.RARE,
        ),
        ItemInfo(
            name=ItemName.LOVE,
            title="Care & Love",
            description="The most important ingredient for any living thing",
            rarity=ItemRarity.EPIC,
        ),
    )
}


class RewardBundle(BaseModel):
    """
    Immutable item -> quantity mapping.

    Zero quantities are dropped on construction so that two bundles holding
    the same positive quantities always compare equal.
    """

    model_config = ConfigDict(frozen=True)

    items: Dict[ItemName, int] = {}

    @model_validator(mode="before")
    @classmethod
    def _accept_plain_mapping(cls, data: object) -> object:
        # Catalog content writes bundles as {"seed": 1, "water": 2}
        if isinstance(data, Mapping) and "items" not in data:
            return {"items": dict(data)}
        return data

    @field_validator("items", mode="before")
    @classmethod
    def _validate_items(cls, value: object) -> Dict[ItemName, int]:
        if value is None:
            return {}
        if not isinstance(value, Mapping):
            raise ValueError("bundle items must be a mapping of item name to quantity")
        cleaned: Dict[ItemName, int] = {}
        for raw_name, raw_qty in value.items():
            try:
                name = ItemName(raw_name)
            except ValueError:
                raise ValueError(f"unknown item {raw_name!r}") from None
            if isinstance(raw_qty, bool) or not isinstance(raw_qty, int):
                raise ValueError(f"quantity for {name.value} must be an integer")
            if raw_qty < 0:
                raise ValueError(f"quantity for {name.value} must be non-negative")
            if raw_qty:
                cleaned[name] = cleaned.get(name, 0) + raw_qty
        return cleaned

    @classmethod
    def of(cls, **quantities: int) -> "RewardBundle":
        """Shorthand: RewardBundle.of(seed=1, water=2)."""
        return cls(items=quantities)

    def quantity(self, item: Union[ItemName, str]) -> int:
        return self.items.get(ItemName(item), 0)

    @property
    def is_empty(self) -> bool:
        return not self.items

    @property
    def total(self) -> int:
        return sum(self.items.values())

    def __add__(self, other: "RewardBundle") -> "RewardBundle":
        if not isinstance(other, RewardBundle):
            return NotImplemented
        merged = dict(self.items)
        for name, qty in other.items.items():
            merged[name] = merged.get(name, 0) + qty
        return RewardBundle(items=merged)

    def covers(self, required: "RewardBundle") -> bool:
        """True when every required quantity is held."""
        return all(self.quantity(name) >= qty for name, qty in required.items.items())

    def missing(self, required: "RewardBundle") -> "RewardBundle":
        """Shortfall against a requirement (empty when covered)."""
        return RewardBundle(
            items={
                name: qty - self.quantity(name)
                for name, qty in required.items.items()
                if self.quantity(name) < qty
            }
        )

    def sorted_items(self) -> Iterator[Tuple[ItemName, int]]:
        """Items in the canonical ItemName order."""
        for name in ItemName:
            if name in self.items:
                yield name, self.items[name]

    def as_dict(self) -> Dict[str, int]:
        """Plain JSON-friendly form, keyed by item value."""
        return {name.value: qty for name, qty in self.sorted_items()}

    def __hash__(self) -> int:
        return hash(tuple(self.sorted_items()))


EMPTY_BUNDLE = RewardBundle()
