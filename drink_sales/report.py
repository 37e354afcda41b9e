"""CSV, clipboard and pagination helpers for the report view."""

from __future__ import annotations

import csv
import io
import logging
import math
from dataclasses import dataclass
from pathlib import Path

from drink_sales.aggregation import slot_for
from drink_sales.constant import CLIPBOARD_HEADER, CSV_HEADER
from drink_sales.data import Catalog
from drink_sales.models import SaleRecord, TimeslotStats

logger = logging.getLogger(__name__)


def csv_rows(records: list[SaleRecord], day: str, catalog: Catalog) -> list[list[str]]:
    """One row per sale: date, slot, category, menu name, temperature, price."""
    return [
        [
            day,
            slot_for(record),
            catalog.category_for(record),
            catalog.menu_name_for(record),
            record.temperature.value,
            str(record.amount),
        ]
        for record in records
    ]


def export_csv(records: list[SaleRecord], day: str, catalog: Catalog) -> str:
    """Render the header plus one line per sale, newline-joined."""
    buffer = io.StringIO()
    # QUOTE_MINIMAL leaves comma-free fields untouched.
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(CSV_HEADER)
    writer.writerows(csv_rows(records, day, catalog))
    return buffer.getvalue().rstrip("\n")


def csv_filename(day: str) -> str:
    return f"sales_{day}.csv"


def write_csv(export_dir: Path, records: list[SaleRecord], day: str, catalog: Catalog) -> Path:
    """Write ``sales_<day>.csv`` (UTF-8) and return its path."""
    export_dir.mkdir(parents=True, exist_ok=True)
    path = export_dir / csv_filename(day)
    path.write_text(export_csv(records, day, catalog), encoding="utf-8")
    logger.info("csv exported path=%s rows=%d", path, len(records))
    return path


def clipboard_text(fixed_stats: dict[str, TimeslotStats]) -> str:
    """Tab-separated "slot, total" lines for pasting into a spreadsheet."""
    lines = ["\t".join(CLIPBOARD_HEADER)]
    lines.extend(f"{slot}\t{stats.total}" for slot, stats in fixed_stats.items())
    return "\n".join(lines)


def total_pages(count: int, page_size: int) -> int:
    return max(1, math.ceil(count / page_size))


def clamp_page(page: int, count: int, page_size: int) -> int:
    return min(max(1, page), total_pages(count, page_size))


@dataclass(frozen=True)
class Page:
    """One slice of the management table."""

    number: int
    total_pages: int
    rows: list[SaleRecord]


def paginate(records: list[SaleRecord], page: int, page_size: int) -> Page:
    """Newest sale first; ``page`` is clamped into range."""
    ordered = sorted(records, key=lambda record: record.sold_at, reverse=True)
    number = clamp_page(page, len(ordered), page_size)
    start = (number - 1) * page_size
    return Page(number=number, total_pages=total_pages(len(ordered), page_size), rows=ordered[start : start + page_size])
