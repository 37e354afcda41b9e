"""Static reference data and id-to-display resolution."""

from __future__ import annotations

from dataclasses import dataclass, field

from drink_sales.constant import CATEGORY_CATALOG, MENU_CATALOG, OTHER_CATEGORY_LABEL, UNKNOWN_MENU_LABEL
from drink_sales.models import Category, Menu, SaleRecord


def sort_categories(categories: list[Category]) -> list[Category]:
    """Order by sort_order (missing first), then name."""
    return sorted(categories, key=lambda c: (c.sort_order is not None, c.sort_order or 0, c.name))


STATIC_CATEGORIES: list[Category] = sort_categories(
    [
        Category(id=category_id, name=str(meta["name"]), sort_order=meta["sort_order"])  # type: ignore[arg-type]
        for category_id, meta in CATEGORY_CATALOG.items()
    ]
)

STATIC_MENUS: list[Menu] = [
    Menu(
        id=code,
        category_id=category_id,
        code=code,
        name=name,
        price=price,
        is_active=True,
        hot_available=hot,
        ice_available=ice,
    )
    for code, (category_id, name, price, hot, ice) in sorted(MENU_CATALOG.items())
]


@dataclass
class Catalog:
    """Lookup over categories and menus; dangling ids resolve to fixed labels."""

    categories: list[Category] = field(default_factory=list)
    menus: list[Menu] = field(default_factory=list)

    def __post_init__(self) -> None:
        self._category_names = {c.id: c.name for c in self.categories}
        self._menus_by_id = {m.id: m for m in self.menus}

    def menu(self, menu_id: str) -> Menu | None:
        return self._menus_by_id.get(menu_id)

    def menus_in(self, category_id: str) -> list[Menu]:
        return [m for m in self.menus if m.category_id == category_id]

    def menu_name_for(self, record: SaleRecord) -> str:
        menu = self.menu(record.menu_id)
        if menu is not None:
            return menu.name
        return record.menu_name or UNKNOWN_MENU_LABEL

    def category_for(self, record: SaleRecord) -> str:
        menu = self.menu(record.menu_id)
        if menu is not None and menu.category_id in self._category_names:
            return self._category_names[menu.category_id]
        return record.category or OTHER_CATEGORY_LABEL

    def category_name(self, category_id: str) -> str:
        return self._category_names.get(category_id, OTHER_CATEGORY_LABEL)
