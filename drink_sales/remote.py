"""Hosted backend: Supabase tables ``categories``, ``menus`` and ``sales``."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Callable, TypeVar

from drink_sales.config import AppConfig
from drink_sales.data import sort_categories
from drink_sales.errors import AuthError, ConfigurationError, RepositoryError, SaleNotFoundError, ValidationError
from drink_sales.models import Category, Menu, NewSale, SaleRecord, Temperature
from drink_sales.repository import UPDATABLE_FIELDS

logger = logging.getLogger(__name__)

_T = TypeVar("_T")

_SALES_COLUMNS = "id, menu_id, temperature, price, sold_at, time_slot, sold_date"

NOT_CONFIGURED_MESSAGE = "Supabase가 구성되어 있지 않습니다. SUPABASE_URL과 SUPABASE_ANON_KEY를 설정하세요."

ANONYMOUS_DISABLED_MESSAGE = (
    "Supabase 익명 로그인이 비활성화되어 있습니다. Anonymous Provider를 활성화하거나 로그인하세요."
)


def create_supabase_client(config: AppConfig) -> Any | None:
    """Create the client once at startup; ``None`` when the backend is not configured."""
    if not config.supabase_configured:
        logger.info("supabase not configured; hosted backend returns empty results")
        return None
    from supabase import create_client

    return create_client(config.supabase_url, config.supabase_anon_key)


def _parse_instant(value: str) -> datetime:
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    return datetime.fromisoformat(text).astimezone()


def _row_to_record(row: dict[str, Any]) -> SaleRecord:
    return SaleRecord(
        id=int(row["id"]),
        menu_id=str(row["menu_id"]),
        temperature=Temperature.parse(row["temperature"]),
        price=row.get("price"),
        sold_at=_parse_instant(row["sold_at"]),
        sold_date=row.get("sold_date"),
        time_slot=row.get("time_slot"),
    )


def _row_to_menu(row: dict[str, Any]) -> Menu:
    return Menu(
        id=str(row["id"]),
        category_id=str(row["category_id"]),
        code=str(row.get("code") or ""),
        name=str(row["name"]),
        price=row.get("price"),
        is_active=bool(row.get("is_active")),
        hot_available=bool(row.get("hot_yn")),
        ice_available=bool(row.get("ice_yn")),
    )


class SupabaseAuth:
    """Anonymous-or-password session handling against Supabase Auth."""

    requires_sign_in = True

    def __init__(self, client: Any | None) -> None:
        self.client = client

    @property
    def is_configured(self) -> bool:
        return self.client is not None

    def ensure_session(self) -> None:
        """Reuse the current session, else try an anonymous sign-in."""
        if self.client is None:
            return
        if self.client.auth.get_session():
            return

        signed_in = False
        try:
            response = self.client.auth.sign_in_anonymously()
            signed_in = bool(getattr(response, "user", None))
        except Exception as exc:
            logger.warning("anonymous sign-in failed: %s", exc)

        if not signed_in and not self.client.auth.get_session():
            raise AuthError(ANONYMOUS_DISABLED_MESSAGE)

    def current_user_id(self) -> str:
        if self.client is None:
            raise AuthError("Supabase가 구성되어 있지 않습니다.")
        response = self.client.auth.get_user()
        user = getattr(response, "user", None)
        if user is None:
            raise AuthError("Supabase 사용자 세션이 필요합니다.")
        return str(user.id)

    def sign_in(self, email: str, password: str) -> None:
        if self.client is None:
            raise AuthError("Supabase가 구성되어 있지 않습니다.")
        try:
            self.client.auth.sign_in_with_password({"email": email, "password": password})
        except Exception as exc:
            logger.warning("password sign-in failed for %s: %s", email, exc)
            raise AuthError(str(exc) or "로그인 실패") from exc
        logger.info("signed in as %s", email)

    def sign_out(self) -> None:
        if self.client is None:
            return
        try:
            self.client.auth.sign_out()
        except Exception as exc:
            raise AuthError(str(exc) or "로그아웃 실패") from exc


class SupabaseSalesRepository:
    """Sales and reference data over PostgREST; reads are empty and writes fail when unconfigured."""

    def __init__(self, client: Any | None, auth: SupabaseAuth) -> None:
        self.client = client
        self.auth = auth

    def _execute(self, action: str, build: Callable[[], _T]) -> _T:
        try:
            return build()
        except (AuthError, RepositoryError):
            raise
        except Exception as exc:
            logger.exception("supabase %s failed", action)
            raise RepositoryError(f"{action} 실패: {exc}") from exc

    def _require_client(self) -> Any:
        if self.client is None:
            raise ConfigurationError(NOT_CONFIGURED_MESSAGE)
        return self.client

    def _session_user_id(self) -> str:
        def lookup() -> str:
            self.auth.ensure_session()
            return self.auth.current_user_id()

        return self._execute("인증 확인", lookup)

    def _ensure_session(self) -> None:
        self._execute("인증 확인", self.auth.ensure_session)

    def list_categories(self) -> list[Category]:
        if self.client is None:
            return []
        response = self._execute(
            "카테고리 조회",
            lambda: self.client.table("categories")
            .select("id, name, sort_order")
            .order("sort_order", desc=False, nullsfirst=True)
            .order("name", desc=False)
            .execute(),
        )
        categories = [
            Category(id=str(row["id"]), name=str(row["name"]), sort_order=row.get("sort_order"))
            for row in response.data or []
        ]
        return sort_categories(categories)

    def list_menus(self) -> list[Menu]:
        if self.client is None:
            return []
        response = self._execute(
            "메뉴 조회",
            lambda: self.client.table("menus").select("*").eq("is_active", True).order("code", desc=False).execute(),
        )
        return [_row_to_menu(row) for row in response.data or []]

    def add(self, sale: NewSale) -> int:
        client = self._require_client()
        user_id = self._session_user_id()
        payload = {
            "menu_id": sale.menu_id,
            "temperature": sale.temperature.remote_value,
            "price": sale.price,
            "user_id": user_id,
        }
        response = self._execute("판매 등록", lambda: client.table("sales").insert(payload).execute())
        rows = response.data or []
        if not rows:
            raise RepositoryError("판매 등록 실패: 응답에 행이 없습니다.")
        sale_id = int(rows[0]["id"])
        logger.info("sale added id=%s menu=%s temperature=%s", sale_id, sale.menu_id, sale.temperature.value)
        return sale_id

    def list_by_date_range(self, start: datetime, end: datetime) -> list[SaleRecord]:
        if self.client is None:
            return []
        response = self._execute(
            "판매 조회",
            lambda: self.client.table("sales")
            .select(_SALES_COLUMNS)
            .gte("sold_at", start.isoformat())
            .lte("sold_at", end.isoformat())
            .execute(),
        )
        return [_row_to_record(row) for row in response.data or []]

    def list_by_day(self, day: str) -> list[SaleRecord]:
        if self.client is None:
            return []
        response = self._execute(
            "판매 조회",
            lambda: self.client.table("sales")
            .select(_SALES_COLUMNS)
            .eq("sold_date", day)
            .order("sold_at", desc=False)
            .execute(),
        )
        return [_row_to_record(row) for row in response.data or []]

    def update(self, sale_id: int, **fields: object) -> None:
        unknown = set(fields) - UPDATABLE_FIELDS
        if unknown:
            raise ValidationError(f"수정할 수 없는 항목: {', '.join(sorted(unknown))}")
        client = self._require_client()
        if not fields:
            return
        payload: dict[str, object] = {}
        for name, value in fields.items():
            if name == "temperature":
                payload[name] = Temperature.parse(value).remote_value
            elif isinstance(value, datetime):
                payload[name] = value.isoformat()
            else:
                payload[name] = value
        self._ensure_session()
        response = self._execute(
            "판매 수정", lambda: client.table("sales").update(payload).eq("id", sale_id).execute()
        )
        if not response.data:
            raise SaleNotFoundError(sale_id)
        logger.info("sale updated id=%s fields=%s", sale_id, sorted(fields))

    def delete(self, sale_id: int) -> None:
        client = self._require_client()
        self._ensure_session()
        response = self._execute("판매 삭제", lambda: client.table("sales").delete().eq("id", sale_id).execute())
        if not response.data:
            raise SaleNotFoundError(sale_id)
        logger.info("sale deleted id=%s", sale_id)
