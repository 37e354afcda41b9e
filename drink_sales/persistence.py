"""SQLite persistence for recorded drink sales."""

from __future__ import annotations

import logging
import sqlite3
from contextlib import closing, contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterator

from drink_sales.data import STATIC_CATEGORIES, STATIC_MENUS
from drink_sales.errors import RepositoryError, SaleNotFoundError, ValidationError
from drink_sales.models import Category, Menu, NewSale, SaleRecord, Temperature
from drink_sales.repository import UPDATABLE_FIELDS
from drink_sales.timeslots import local_date_of, time_slot_of

logger = logging.getLogger(__name__)

_SELECT_COLUMNS = "id, menu_id, category, menu_name, temperature, price, sold_at_ms, sold_date, time_slot"


def _to_ms(instant: datetime) -> int:
    if instant.tzinfo is None:
        instant = instant.astimezone()
    return int(instant.timestamp() * 1000)


def _from_ms(value: int) -> datetime:
    return datetime.fromtimestamp(value / 1000, tz=timezone.utc).astimezone()


def _row_to_record(row: sqlite3.Row) -> SaleRecord:
    return SaleRecord(
        id=int(row["id"]),
        menu_id=row["menu_id"],
        temperature=Temperature.parse(row["temperature"]),
        price=row["price"],
        sold_at=_from_ms(int(row["sold_at_ms"])),
        sold_date=row["sold_date"],
        time_slot=row["time_slot"],
        category=row["category"],
        menu_name=row["menu_name"],
    )


class SqliteSalesRepository:
    """Sales table in a local SQLite file; reference data from the static menu."""

    def __init__(self, db_path: Path | str) -> None:
        self.db_path = Path(db_path)
        self._schema_ready = False

    def _connect(self) -> sqlite3.Connection:
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        return conn

    @contextmanager
    def _transaction(self, action: str) -> Iterator[sqlite3.Connection]:
        if not self._schema_ready:
            self.bootstrap_schema()
        try:
            with closing(self._connect()) as conn:
                with conn:
                    yield conn
        except sqlite3.Error as exc:
            logger.exception("sqlite %s failed", action)
            raise RepositoryError(f"{action} 실패: {exc}") from exc

    def bootstrap_schema(self) -> None:
        """Create persistence schema if it does not already exist."""
        try:
            with closing(self._connect()) as conn:
                with conn:
                    conn.executescript(
                        """
                        CREATE TABLE IF NOT EXISTS sales (
                            id INTEGER PRIMARY KEY AUTOINCREMENT,
                            menu_id TEXT NOT NULL,
                            category TEXT,
                            menu_name TEXT,
                            temperature TEXT NOT NULL CHECK (temperature IN ('HOT', 'ICE')),
                            price INTEGER,
                            sold_at_ms INTEGER NOT NULL,
                            sold_date TEXT NOT NULL,
                            time_slot TEXT NOT NULL
                        );

                        CREATE INDEX IF NOT EXISTS idx_sales_sold_at_ms ON sales(sold_at_ms);

                        CREATE INDEX IF NOT EXISTS idx_sales_sold_date ON sales(sold_date);
                        """
                    )
        except sqlite3.Error as exc:
            raise RepositoryError(f"데이터베이스 초기화 실패: {exc}") from exc
        self._schema_ready = True

    def add(self, sale: NewSale) -> int:
        with self._transaction("판매 등록") as conn:
            cur = conn.execute(
                """
                INSERT INTO sales (menu_id, category, menu_name, temperature, price, sold_at_ms, sold_date, time_slot)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    sale.menu_id,
                    sale.category,
                    sale.menu_name,
                    sale.temperature.value,
                    sale.price,
                    _to_ms(sale.sold_at),
                    local_date_of(sale.sold_at),
                    time_slot_of(sale.sold_at),
                ),
            )
            sale_id = int(cur.lastrowid)
        logger.info("sale added id=%s menu=%s temperature=%s", sale_id, sale.menu_id, sale.temperature.value)
        return sale_id

    def list_by_date_range(self, start: datetime, end: datetime) -> list[SaleRecord]:
        with self._transaction("판매 조회") as conn:
            rows = conn.execute(
                f"SELECT {_SELECT_COLUMNS} FROM sales WHERE sold_at_ms BETWEEN ? AND ?",
                (_to_ms(start), _to_ms(end)),
            ).fetchall()
        return [_row_to_record(row) for row in rows]

    def list_by_day(self, day: str) -> list[SaleRecord]:
        with self._transaction("판매 조회") as conn:
            rows = conn.execute(
                f"SELECT {_SELECT_COLUMNS} FROM sales WHERE sold_date = ? ORDER BY sold_at_ms ASC",
                (day,),
            ).fetchall()
        return [_row_to_record(row) for row in rows]

    def update(self, sale_id: int, **fields: object) -> None:
        unknown = set(fields) - UPDATABLE_FIELDS
        if unknown:
            raise ValidationError(f"수정할 수 없는 항목: {', '.join(sorted(unknown))}")
        if not fields:
            return

        columns: dict[str, object] = {}
        for name, value in fields.items():
            if name == "temperature":
                columns["temperature"] = Temperature.parse(value).value
            elif name == "sold_at":
                if not isinstance(value, datetime):
                    raise ValidationError(f"판매 시각 형식이 올바르지 않습니다: {value!r}")
                columns["sold_at_ms"] = _to_ms(value)
                columns.setdefault("sold_date", local_date_of(value))
                columns.setdefault("time_slot", time_slot_of(value))
            else:
                columns[name] = value

        assignments = ", ".join(f"{column} = ?" for column in columns)
        with self._transaction("판매 수정") as conn:
            cur = conn.execute(f"UPDATE sales SET {assignments} WHERE id = ?", (*columns.values(), sale_id))
            if cur.rowcount == 0:
                raise SaleNotFoundError(sale_id)
        logger.info("sale updated id=%s fields=%s", sale_id, sorted(fields))

    def delete(self, sale_id: int) -> None:
        with self._transaction("판매 삭제") as conn:
            cur = conn.execute("DELETE FROM sales WHERE id = ?", (sale_id,))
            if cur.rowcount == 0:
                raise SaleNotFoundError(sale_id)
        logger.info("sale deleted id=%s", sale_id)

    def list_categories(self) -> list[Category]:
        return list(STATIC_CATEGORIES)

    def list_menus(self) -> list[Menu]:
        return [menu for menu in STATIC_MENUS if menu.is_active]
