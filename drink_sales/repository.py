"""Backend-neutral contracts for sales storage and authentication."""

from __future__ import annotations

from datetime import datetime
from typing import Protocol

from drink_sales.models import Category, Menu, NewSale, SaleRecord

UPDATABLE_FIELDS = frozenset({"menu_id", "temperature", "price", "sold_at", "sold_date", "time_slot"})


class SalesRepository(Protocol):
    """Sale storage plus the reference data needed to record sales."""

    def add(self, sale: NewSale) -> int: ...

    def list_by_date_range(self, start: datetime, end: datetime) -> list[SaleRecord]: ...

    def list_by_day(self, day: str) -> list[SaleRecord]: ...

    def update(self, sale_id: int, **fields: object) -> None: ...

    def delete(self, sale_id: int) -> None: ...

    def list_categories(self) -> list[Category]: ...

    def list_menus(self) -> list[Menu]: ...


class AuthService(Protocol):
    """Session boundary; the controller only sees success or an AuthError."""

    @property
    def requires_sign_in(self) -> bool: ...

    @property
    def is_configured(self) -> bool: ...

    def ensure_session(self) -> None: ...

    def sign_in(self, email: str, password: str) -> None: ...

    def sign_out(self) -> None: ...


class LocalAuth:
    """The embedded backend has no accounts; the session is always ready."""

    requires_sign_in = False
    is_configured = True

    def ensure_session(self) -> None:
        return None

    def sign_in(self, email: str, password: str) -> None:
        return None

    def sign_out(self) -> None:
        return None
