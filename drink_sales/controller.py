"""UI state and user actions, independent of the terminal widgets."""

from __future__ import annotations

import logging
from dataclasses import replace
from datetime import date, datetime
from itertools import count
from pathlib import Path
from typing import Callable

from drink_sales.aggregation import (
    aggregate_by_category,
    aggregate_by_menu,
    aggregate_by_timeslot,
    aggregate_fixed_slots,
    summarize_day,
)
from drink_sales.config import AppConfig
from drink_sales.constant import VIEW_INPUT, VIEWS
from drink_sales.data import Catalog
from drink_sales.errors import AuthError, DrinkSalesError, ValidationError
from drink_sales.models import (
    Category,
    CategoryStats,
    DaySummary,
    Menu,
    MenuStats,
    NewSale,
    SaleRecord,
    Temperature,
    TimeslotStats,
)
from drink_sales.report import Page, clamp_page, clipboard_text, export_csv, paginate, write_csv
from drink_sales.repository import AuthService, SalesRepository
from drink_sales.timeslots import business_hour_slots, format_date, local_date_of, now, parse_date, time_slot_of

logger = logging.getLogger(__name__)

AUTH_REQUIRED_MESSAGE = "Supabase 인증 세션이 필요합니다. 로그인해 주세요."


def parse_price(raw: str) -> int:
    """Validate a price edit before anything is written."""
    text = raw.strip().replace(",", "")
    if not text.isdigit():
        raise ValidationError("숫자를 입력하세요.")
    return int(text)


class SalesController:
    """Holds view state and wires user actions to the repository and aggregates."""

    def __init__(
        self,
        repository: SalesRepository,
        auth: AuthService,
        config: AppConfig,
        clock: Callable[[], datetime] = now,
    ) -> None:
        self.repository = repository
        self.auth = auth
        self.config = config
        self.clock = clock

        self.view = VIEW_INPUT
        self.date = clock().date()
        self.auth_ready = not auth.requires_sign_in
        self.auth_error: str | None = None
        self.status = ""
        self.categories: list[Category] = []
        self.menus: list[Menu] = []
        self.selected_category_id = ""
        self.records: list[SaleRecord] = []
        self.page = 1
        self.catalog = Catalog()
        self._temp_ids = count(-1, -1)

    # -- lifecycle -------------------------------------------------------

    @property
    def day(self) -> str:
        return format_date(self.date)

    def start(self) -> None:
        """Establish a session, then load reference data and the day's sales."""
        if self.auth.requires_sign_in:
            try:
                self.auth.ensure_session()
                self.auth_ready = True
                self.auth_error = None
            except AuthError as exc:
                logger.warning("session unavailable: %s", exc)
                self.auth_ready = False
                self.auth_error = AUTH_REQUIRED_MESSAGE
        self.load_reference_data()
        self.refresh()

    def load_reference_data(self) -> None:
        try:
            categories = self.repository.list_categories()
            menus = self.repository.list_menus()
        except DrinkSalesError as exc:
            logger.warning("reference data load failed: %s", exc)
            self.status = str(exc)
            return
        self._set_reference_data(categories, menus)

    def _set_reference_data(self, categories: list[Category], menus: list[Menu]) -> None:
        self.categories = categories
        self.menus = menus
        self.catalog = Catalog(categories=categories, menus=menus)
        known = {c.id for c in categories}
        if self.selected_category_id not in known:
            self.selected_category_id = categories[0].id if categories else ""

    def refresh(self) -> None:
        """Re-fetch the selected day's records."""
        try:
            self.records = self.repository.list_by_day(self.day)
        except DrinkSalesError as exc:
            logger.warning("sales load failed day=%s: %s", self.day, exc)
            self.status = str(exc)
            return
        self.page = clamp_page(self.page, len(self.records), self.config.page_size)
        logger.debug("loaded %d sales for %s", len(self.records), self.day)

    # -- navigation ------------------------------------------------------

    def set_view(self, view: str) -> None:
        if view not in VIEWS:
            raise ValueError(f"unknown view {view!r}")
        self.view = view

    def set_date(self, day: date | str) -> None:
        try:
            self.date = parse_date(day) if isinstance(day, str) else day
        except ValidationError as exc:
            self.status = str(exc)
            return
        self.page = 1
        self.refresh()

    def shift_date(self, days: int) -> None:
        self.set_date(date.fromordinal(self.date.toordinal() + days))

    def select_category(self, category_id: str) -> None:
        if any(c.id == category_id for c in self.categories):
            self.selected_category_id = category_id

    def cycle_category(self, delta: int) -> None:
        if not self.categories:
            return
        ids = [c.id for c in self.categories]
        idx = ids.index(self.selected_category_id) if self.selected_category_id in ids else 0
        self.selected_category_id = ids[(idx + delta) % len(ids)]

    def set_page(self, page: int) -> None:
        self.page = clamp_page(page, len(self.records), self.config.page_size)

    # -- sales -----------------------------------------------------------

    def record_sale(self, menu: Menu, temperature: Temperature) -> SaleRecord | None:
        """Show the sale immediately, then write it; roll back if the write fails."""
        if not self.auth_ready:
            self.auth_error = AUTH_REQUIRED_MESSAGE
            return None
        if not menu.allows(temperature):
            self.status = f"{menu.name}은(는) {temperature.value}로 판매하지 않습니다."
            return None

        sold_at = self.clock()
        sale = NewSale(
            menu_id=menu.id,
            temperature=temperature,
            price=menu.price,
            sold_at=sold_at,
            category=self.catalog.category_name(menu.category_id),
            menu_name=menu.name,
        )
        pending = SaleRecord(
            id=next(self._temp_ids),
            menu_id=sale.menu_id,
            temperature=temperature,
            price=sale.price,
            sold_at=sold_at,
            sold_date=local_date_of(sold_at),
            time_slot=time_slot_of(sold_at),
            category=sale.category,
            menu_name=sale.menu_name,
        )
        shown = pending.sold_date == self.day
        if shown:
            self.records.append(pending)

        try:
            sale_id = self.repository.add(sale)
        except DrinkSalesError as exc:
            logger.warning("sale write failed menu=%s: %s", menu.id, exc)
            self.records = [r for r in self.records if r.id != pending.id]
            self.status = str(exc) or "판매 등록 실패"
            return None

        saved = replace(pending, id=sale_id)
        if shown:
            self.records = [saved if r.id == pending.id else r for r in self.records]
        self.status = "판매 내용이 기록됐어요."
        logger.info("recorded %s %s price=%s", menu.name, temperature.value, menu.price)
        return saved

    def delete_sale(self, sale_id: int) -> bool:
        """Durably delete; the in-memory list changes only on success."""
        try:
            self.repository.delete(sale_id)
        except DrinkSalesError as exc:
            logger.warning("delete failed id=%s: %s", sale_id, exc)
            self.status = str(exc) or "삭제 실패"
            return False
        self.records = [r for r in self.records if r.id != sale_id]
        self.page = clamp_page(self.page, len(self.records), self.config.page_size)
        self.status = "삭제했어요."
        return True

    def edit_price(self, sale_id: int, raw_price: str) -> bool:
        try:
            price = parse_price(raw_price)
        except ValidationError as exc:
            self.status = str(exc)
            return False
        try:
            self.repository.update(sale_id, price=price)
        except DrinkSalesError as exc:
            logger.warning("price edit failed id=%s: %s", sale_id, exc)
            self.status = str(exc) or "수정 실패"
            return False
        self.records = [replace(r, price=price) if r.id == sale_id else r for r in self.records]
        self.status = "가격을 수정했어요."
        return True

    def find_record(self, sale_id: int) -> SaleRecord | None:
        return next((r for r in self.records if r.id == sale_id), None)

    # -- auth ------------------------------------------------------------

    def sign_in(self, email: str, password: str) -> bool:
        self.auth_error = None
        try:
            self.auth.sign_in(email, password)
        except AuthError as exc:
            self.auth_error = str(exc) or "로그인 실패"
            return False
        self.auth_ready = True
        self.status = "로그인 됐어요."
        self.load_reference_data()
        self.refresh()
        return True

    def sign_out(self) -> None:
        """Drop the session and every piece of data loaded under it."""
        try:
            self.auth.sign_out()
        except AuthError as exc:
            logger.warning("sign-out failed: %s", exc)
        finally:
            self.auth_ready = not self.auth.requires_sign_in
            self.categories = []
            self.menus = []
            self.records = []
            self.catalog = Catalog()
            self.selected_category_id = ""
            self.page = 1
            self.status = "로그아웃 됐어요."

    # -- derived ---------------------------------------------------------

    @property
    def menus_for_selected_category(self) -> list[Menu]:
        return self.catalog.menus_in(self.selected_category_id)

    @property
    def fixed_slots(self) -> list[str]:
        return business_hour_slots(self.config.open_hour, self.config.close_hour)

    def timeslot_stats(self) -> dict[str, TimeslotStats]:
        return aggregate_by_timeslot(self.records)

    def fixed_slot_stats(self) -> dict[str, TimeslotStats]:
        return aggregate_fixed_slots(self.records, self.fixed_slots)

    def menu_stats(self) -> list[MenuStats]:
        return aggregate_by_menu(self.records, self.catalog)

    def category_stats(self) -> list[CategoryStats]:
        return aggregate_by_category(self.menu_stats(), self.categories)

    def summary(self) -> DaySummary:
        return summarize_day(self.records)

    def page_view(self) -> Page:
        return paginate(self.records, self.page, self.config.page_size)

    # -- export ----------------------------------------------------------

    def csv_text(self) -> str:
        return export_csv(self.records, self.day, self.catalog)

    def export_csv_file(self) -> Path | None:
        try:
            path = write_csv(self.config.export_dir, self.records, self.day, self.catalog)
        except OSError as exc:
            logger.warning("csv export failed: %s", exc)
            self.status = f"CSV 저장 실패: {exc}"
            return None
        self.status = f"CSV 저장: {path}"
        return path

    def clipboard_text(self) -> str:
        return clipboard_text(self.fixed_slot_stats())
