from __future__ import annotations

from datetime import datetime
from itertools import count
from types import SimpleNamespace
from typing import Any, Callable

import pytest

from drink_sales.config import AppConfig
from drink_sales.errors import RepositoryError, SaleNotFoundError
from drink_sales.models import Category, Menu, NewSale, SaleRecord, Temperature
from drink_sales.repository import LocalAuth
from drink_sales.timeslots import local_date_of, time_slot_of

FIXED_NOW = datetime(2025, 3, 14, 9, 30).astimezone()


def at(hour: int, minute: int = 0, day: int = 14) -> datetime:
    return datetime(2025, 3, day, hour, minute).astimezone()


def make_record(
    sale_id: int,
    *,
    menu_id: str = "C01",
    temperature: Temperature = Temperature.HOT,
    price: int | None = 4000,
    sold_at: datetime | None = None,
    time_slot: str | None = None,
) -> SaleRecord:
    instant = sold_at or FIXED_NOW
    return SaleRecord(
        id=sale_id,
        menu_id=menu_id,
        temperature=temperature,
        price=price,
        sold_at=instant,
        sold_date=local_date_of(instant),
        time_slot=time_slot,
    )


CATEGORIES = [
    Category(id="coffee", name="커피", sort_order=1),
    Category(id="tea", name="티", sort_order=2),
]

MENUS = [
    Menu(id="C01", category_id="coffee", code="C01", name="아메리카노", price=4000),
    Menu(id="C02", category_id="coffee", code="C02", name="카페라떼", price=4500),
    Menu(id="C05", category_id="coffee", code="C05", name="콜드브루", price=4800, hot_available=False),
    Menu(id="T01", category_id="tea", code="T01", name="얼그레이", price=4000),
]


class FakeRepository:
    """In-memory repository with switchable failures."""

    def __init__(self, records: list[SaleRecord] | None = None) -> None:
        self.records: list[SaleRecord] = list(records or [])
        self.ids = count(1000)
        self.fail_add = False
        self.fail_reads = False
        self.calls: list[tuple[str, Any]] = []

    def add(self, sale: NewSale) -> int:
        self.calls.append(("add", sale))
        if self.fail_add:
            raise RepositoryError("판매 등록 실패: network down")
        sale_id = next(self.ids)
        self.records.append(
            SaleRecord(
                id=sale_id,
                menu_id=sale.menu_id,
                temperature=sale.temperature,
                price=sale.price,
                sold_at=sale.sold_at,
                sold_date=local_date_of(sale.sold_at),
                time_slot=time_slot_of(sale.sold_at),
                category=sale.category,
                menu_name=sale.menu_name,
            )
        )
        return sale_id

    def list_by_date_range(self, start: datetime, end: datetime) -> list[SaleRecord]:
        return [r for r in self.records if start <= r.sold_at <= end]

    def list_by_day(self, day: str) -> list[SaleRecord]:
        self.calls.append(("list_by_day", day))
        if self.fail_reads:
            raise RepositoryError("판매 조회 실패")
        return [r for r in self.records if r.sold_date == day]

    def update(self, sale_id: int, **fields: object) -> None:
        self.calls.append(("update", (sale_id, fields)))
        for idx, record in enumerate(self.records):
            if record.id == sale_id:
                self.records[idx] = SaleRecord(**{**record.__dict__, **fields})
                return
        raise SaleNotFoundError(sale_id)

    def delete(self, sale_id: int) -> None:
        self.calls.append(("delete", sale_id))
        before = len(self.records)
        self.records = [r for r in self.records if r.id != sale_id]
        if len(self.records) == before:
            raise SaleNotFoundError(sale_id)

    def list_categories(self) -> list[Category]:
        return list(CATEGORIES)

    def list_menus(self) -> list[Menu]:
        return list(MENUS)


class FakeQuery:
    """Chainable stand-in for a PostgREST request builder."""

    def __init__(self, client: FakeSupabaseClient, table: str) -> None:
        self.client = client
        self.table = table
        self.ops: list[tuple] = []

    def __getattr__(self, name: str) -> Callable[..., FakeQuery]:
        def record(*args: Any, **kwargs: Any) -> FakeQuery:
            self.ops.append((name, args, kwargs))
            return self

        return record

    def execute(self) -> SimpleNamespace:
        self.client.queries.append(self)
        if self.client.error is not None:
            raise self.client.error
        return SimpleNamespace(data=self.client.responses.get(self.table, []))


class FakeAuthApi:
    def __init__(self) -> None:
        self.session: object | None = None
        self.anonymous_enabled = True
        self.valid_password = "secret"
        self.signed_out = False

    def get_session(self) -> object | None:
        return self.session

    def sign_in_anonymously(self) -> SimpleNamespace:
        if not self.anonymous_enabled:
            raise RuntimeError("Anonymous sign-ins are disabled")
        self.session = object()
        return SimpleNamespace(user=SimpleNamespace(id="anon-user"))

    def sign_in_with_password(self, credentials: dict[str, str]) -> SimpleNamespace:
        if credentials["password"] != self.valid_password:
            raise RuntimeError("Invalid login credentials")
        self.session = object()
        return SimpleNamespace(user=SimpleNamespace(id="user-1"))

    def get_user(self) -> SimpleNamespace | None:
        if self.session is None:
            return None
        return SimpleNamespace(user=SimpleNamespace(id="user-1"))

    def sign_out(self) -> None:
        self.session = None
        self.signed_out = True


class FakeSupabaseClient:
    def __init__(self) -> None:
        self.auth = FakeAuthApi()
        self.responses: dict[str, list[dict[str, Any]]] = {}
        self.queries: list[FakeQuery] = []
        self.error: Exception | None = None

    def table(self, name: str) -> FakeQuery:
        return FakeQuery(self, name)


@pytest.fixture
def config(tmp_path) -> AppConfig:
    return AppConfig(
        db_path=tmp_path / "drink_sales.db",
        export_dir=tmp_path / "exports",
        log_path=tmp_path / "debug.log",
    )


@pytest.fixture
def fake_repo() -> FakeRepository:
    return FakeRepository()


@pytest.fixture
def local_auth() -> LocalAuth:
    return LocalAuth()


@pytest.fixture
def supabase_client() -> FakeSupabaseClient:
    return FakeSupabaseClient()
