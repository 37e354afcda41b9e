"""Domain models for drink-sales."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class Temperature(str, Enum):
    """Drink variant recorded with each sale."""

    HOT = "HOT"
    ICE = "ICE"

    @classmethod
    def parse(cls, value: object) -> Temperature:
        """Accept either backend spelling ("hot" or "HOT") or a member."""
        if isinstance(value, cls):
            return value
        return cls(str(value).strip().upper())

    @property
    def remote_value(self) -> str:
        return self.value.lower()


@dataclass(frozen=True)
class Category:
    """A menu category shown as a tab on the input view."""

    id: str
    name: str
    sort_order: int | None = None


@dataclass(frozen=True)
class Menu:
    """A sellable drink with its availability flags."""

    id: str
    category_id: str
    code: str
    name: str
    price: int | None
    is_active: bool = True
    hot_available: bool = True
    ice_available: bool = True

    def allows(self, temperature: Temperature) -> bool:
        if temperature is Temperature.HOT:
            return self.hot_available
        return self.ice_available


@dataclass(frozen=True)
class NewSale:
    """A sale about to be written; the repository assigns its id."""

    menu_id: str
    temperature: Temperature
    price: int | None
    sold_at: datetime
    category: str | None = None
    menu_name: str | None = None


@dataclass(frozen=True)
class SaleRecord:
    """One recorded drink sale as read back from a repository."""

    id: int
    menu_id: str
    temperature: Temperature
    price: int | None
    sold_at: datetime
    sold_date: str | None = None
    time_slot: str | None = None
    category: str | None = None
    menu_name: str | None = None

    @property
    def amount(self) -> int:
        return self.price or 0


@dataclass
class TimeslotStats:
    """Counts and revenue for one one-hour slot."""

    total: int = 0
    hot: int = 0
    ice: int = 0
    revenue: int = 0


@dataclass
class MenuStats:
    """Counts and revenue for one (menu, temperature) pair."""

    menu_id: str
    menu_name: str
    category: str
    temperature: Temperature
    count: int = 0
    revenue: int = 0


@dataclass(frozen=True)
class CategoryStats:
    """Counts and revenue for one category."""

    category: str
    count: int
    revenue: int


@dataclass(frozen=True)
class DaySummary:
    """Headline numbers for the dashboard."""

    cups: int
    revenue: int
    active_slots: int
