"""Per-timeslot, per-menu and per-category summaries of a day's sales.

Every function here is pure and recomputes from the full record list; callers
re-run them after each mutation instead of patching previous results.
"""

from __future__ import annotations

from typing import Iterable

from drink_sales.data import Catalog
from drink_sales.models import Category, CategoryStats, DaySummary, MenuStats, SaleRecord, Temperature, TimeslotStats
from drink_sales.timeslots import time_slot_of


def slot_for(record: SaleRecord) -> str:
    """Stored slot label, or one recomputed from the sale instant."""
    return record.time_slot or time_slot_of(record.sold_at)


def _count_into(stats: TimeslotStats, record: SaleRecord) -> None:
    stats.total += 1
    if record.temperature is Temperature.HOT:
        stats.hot += 1
    elif record.temperature is Temperature.ICE:
        stats.ice += 1
    stats.revenue += record.amount


def aggregate_by_timeslot(records: Iterable[SaleRecord]) -> dict[str, TimeslotStats]:
    """Group by slot label; keys come back in ascending slot order."""
    stats: dict[str, TimeslotStats] = {}
    for record in records:
        slot = slot_for(record)
        if slot not in stats:
            stats[slot] = TimeslotStats()
        _count_into(stats[slot], record)
    # Labels are fixed-width and zero-padded, so string order is hour order.
    return {slot: stats[slot] for slot in sorted(stats)}


def aggregate_fixed_slots(records: Iterable[SaleRecord], slots: list[str]) -> dict[str, TimeslotStats]:
    """Stats for every canonical slot, zero-filled; sales outside ``slots`` are left out."""
    stats = {slot: TimeslotStats() for slot in slots}
    for record in records:
        slot = slot_for(record)
        if slot in stats:
            _count_into(stats[slot], record)
    return stats


def aggregate_by_menu(records: Iterable[SaleRecord], catalog: Catalog) -> list[MenuStats]:
    """Group by (menu, temperature) and sort by count, most sold first."""
    groups: dict[tuple[str, Temperature], MenuStats] = {}
    for record in records:
        key = (record.menu_id, record.temperature)
        row = groups.get(key)
        if row is None:
            row = MenuStats(
                menu_id=record.menu_id,
                menu_name=catalog.menu_name_for(record),
                category=catalog.category_for(record),
                temperature=record.temperature,
            )
            groups[key] = row
        row.count += 1
        row.revenue += record.amount
    # sorted() is stable, so ties keep group-creation order.
    return sorted(groups.values(), key=lambda row: -row.count)


def aggregate_by_category(menu_stats: list[MenuStats], categories: list[Category]) -> list[CategoryStats]:
    """Per-category totals in category display order."""
    rows: list[CategoryStats] = []
    for category in categories:
        matched = [row for row in menu_stats if row.category == category.name]
        rows.append(
            CategoryStats(
                category=category.name,
                count=sum(row.count for row in matched),
                revenue=sum(row.revenue for row in matched),
            )
        )
    return rows


def summarize_day(records: list[SaleRecord]) -> DaySummary:
    return DaySummary(
        cups=len(records),
        revenue=sum(record.amount for record in records),
        active_slots=len({slot_for(record) for record in records}),
    )
