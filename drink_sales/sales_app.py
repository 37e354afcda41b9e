"""Main Textual app class."""

from __future__ import annotations

import logging

from rich.console import Group
from rich.text import Text
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.css.query import NoMatches
from textual.reactive import reactive
from textual.screen import ModalScreen
from textual.widgets import Header, Static

from drink_sales.confirm_modal import ConfirmModal
from drink_sales.constant import TOP_MENU_LIMIT, VIEW_DASHBOARD, VIEW_INPUT, VIEW_REPORT, VIEW_TITLES, VIEWS
from drink_sales.controller import SalesController
from drink_sales.errors import PrinterError
from drink_sales.login_modal import LoginModal
from drink_sales.models import SaleRecord, Temperature
from drink_sales.price_modal import PriceModal
from drink_sales.printer import check_printer_dependencies, print_daily_report
from drink_sales.rendering import (
    category_table,
    format_category_tabs,
    format_menu_line,
    menu_table,
    sales_page_table,
    summary_text,
    timeslot_table,
)
from drink_sales.timeslots import today

logger = logging.getLogger(__name__)


class DrinkSalesApp(App):
    """Record HOT/ICE drink sales and review the day's totals."""

    TITLE = "판매 관리"
    SUB_TITLE = "HOT / ICE"

    CSS = """
    Screen {
        layout: vertical;
    }

    #view-tabs {
        height: 1;
        padding: 0 1;
    }

    #main-layout {
        height: 1fr;
    }

    #primary-pane {
        width: 3fr;
        border: round $primary;
        padding: 0 1;
    }

    #side-pane {
        width: 2fr;
        border: round $secondary;
        padding: 0 1;
    }

    #status-bar {
        height: 2;
        padding: 0 1;
        color: $text-muted;
    }
    """

    menu_index = reactive(0)
    record_index = reactive(0)

    BINDINGS = [
        ("1", "show_view('input')", "입력"),
        ("2", "show_view('dashboard')", "현황"),
        ("3", "show_view('report')", "리포트"),
        ("left_square_bracket", "shift_date(-1)", "Previous day"),
        ("right_square_bracket", "shift_date(1)", "Next day"),
        ("t", "today", "Today"),
        ("left", "cycle_category(-1)", "Previous category"),
        ("right", "cycle_category(1)", "Next category"),
        ("up", "move(-1)", "Up"),
        ("down", "move(1)", "Down"),
        ("k", "move(-1)", "Up"),
        ("j", "move(1)", "Down"),
        ("h", "record('HOT')", "HOT"),
        ("i", "record('ICE')", "ICE"),
        ("n", "change_page(1)", "Next page"),
        ("p", "change_page(-1)", "Previous page"),
        ("e", "edit_price", "Edit price"),
        ("d", "delete_sale", "Delete"),
        ("x", "export_csv", "CSV"),
        ("c", "copy_report", "Copy"),
        ("o", "print_report", "Print"),
        ("l", "login", "Login"),
        ("ctrl+l", "logout", "Logout"),
        Binding("ctrl+q", "quit", "Quit", priority=True),
    ]

    def __init__(self, controller: SalesController) -> None:
        super().__init__()
        self.controller = controller
        self.printer_status = ""

    def compose(self) -> ComposeResult:
        yield Header()
        yield Static(id="view-tabs")
        with Horizontal(id="main-layout"):
            with Vertical(id="primary-pane"):
                yield Static(id="primary")
            with Vertical(id="side-pane"):
                yield Static(id="side")
        yield Static(id="status-bar")

    def on_mount(self) -> None:
        self.controller.start()
        _, self.printer_status = check_printer_dependencies(self.controller.config)
        logger.debug("on_mount auth_ready=%s printer=%r", self.controller.auth_ready, self.printer_status)
        self._refresh_all()

    # -- actions ---------------------------------------------------------

    def action_show_view(self, view: str) -> None:
        if isinstance(self.screen, ModalScreen):
            return
        self.controller.set_view(view)
        self.record_index = 0
        self._refresh_all()

    def action_shift_date(self, days: int) -> None:
        if not self._input_ready():
            return
        self.controller.shift_date(days)
        self.record_index = 0
        self._refresh_all()

    def action_today(self) -> None:
        if not self._input_ready():
            return
        self.controller.set_date(today())
        self.record_index = 0
        self._refresh_all()

    def action_cycle_category(self, delta: int) -> None:
        if not self._input_ready() or self.controller.view != VIEW_INPUT:
            return
        self.controller.cycle_category(delta)
        self.menu_index = 0
        self._refresh_all()

    def action_move(self, delta: int) -> None:
        if not self._input_ready():
            return
        if self.controller.view == VIEW_INPUT:
            menus = self.controller.menus_for_selected_category
            if menus:
                self.menu_index = (self.menu_index + delta) % len(menus)
        elif self.controller.view == VIEW_REPORT:
            rows = self.controller.page_view().rows
            if rows:
                self.record_index = (self.record_index + delta) % len(rows)
        self._refresh_all()

    def action_record(self, temperature: str) -> None:
        if not self._input_ready() or self.controller.view != VIEW_INPUT:
            return
        menus = self.controller.menus_for_selected_category
        if not menus:
            return
        menu = menus[min(self.menu_index, len(menus) - 1)]
        saved = self.controller.record_sale(menu, Temperature.parse(temperature))
        logger.debug("record menu=%s temperature=%s saved_id=%s", menu.id, temperature, saved.id if saved else None)
        self._refresh_all()

    def action_change_page(self, delta: int) -> None:
        if not self._input_ready() or self.controller.view != VIEW_REPORT:
            return
        self.controller.set_page(self.controller.page + delta)
        self.record_index = 0
        self._refresh_all()

    def action_edit_price(self) -> None:
        record = self._selected_record()
        if record is None:
            return
        name = self.controller.catalog.menu_name_for(record)

        def apply(raw: str | None) -> None:
            if raw is None:
                return
            self.controller.edit_price(record.id, raw)
            self._refresh_all()

        self.push_screen(PriceModal(name, record.amount), apply)

    def action_delete_sale(self) -> None:
        record = self._selected_record()
        if record is None:
            return

        def apply(confirmed: bool | None) -> None:
            if not confirmed:
                return
            self.controller.delete_sale(record.id)
            self._clamp_record_index()
            self._refresh_all()

        self.push_screen(ConfirmModal("이 판매 내역을 삭제할까요?"), apply)

    def action_export_csv(self) -> None:
        if not self._input_ready() or self.controller.view != VIEW_REPORT:
            return
        self.controller.export_csv_file()
        self._refresh_all()

    def action_copy_report(self) -> None:
        if not self._input_ready() or self.controller.view != VIEW_REPORT:
            return
        self.copy_to_clipboard(self.controller.clipboard_text())
        self.controller.status = "시간대별 합계를 복사했어요."
        self._refresh_all()

    def action_print_report(self) -> None:
        if not self._input_ready() or self.controller.view != VIEW_REPORT:
            return
        try:
            print_daily_report(
                self.controller.config,
                self.controller.day,
                self.controller.fixed_slot_stats(),
                self.controller.summary(),
                self.controller.menu_stats(),
            )
        except PrinterError as exc:
            logger.warning("report print failed: %s", exc)
            self.controller.status = str(exc)
        else:
            self.controller.status = "리포트를 출력했어요."
        self._refresh_all()

    def action_login(self) -> None:
        if self.controller.auth_ready or isinstance(self.screen, ModalScreen):
            return

        def apply(credentials: tuple[str, str] | None) -> None:
            if credentials is None:
                return
            self.controller.sign_in(*credentials)
            self._refresh_all()

        self.push_screen(LoginModal(self.controller.auth_error), apply)

    def action_logout(self) -> None:
        if isinstance(self.screen, ModalScreen):
            return
        if not self.controller.auth.requires_sign_in or not self.controller.auth_ready:
            return
        self.controller.sign_out()
        self.menu_index = 0
        self.record_index = 0
        self._refresh_all()

    # -- helpers ---------------------------------------------------------

    def _input_ready(self) -> bool:
        if isinstance(self.screen, ModalScreen):
            return False
        return self.controller.auth_ready

    def _selected_record(self) -> SaleRecord | None:
        if not self._input_ready() or self.controller.view != VIEW_REPORT:
            return None
        rows = self.controller.page_view().rows
        if not rows:
            return None
        return rows[min(self.record_index, len(rows) - 1)]

    def _clamp_record_index(self) -> None:
        rows = self.controller.page_view().rows
        self.record_index = min(self.record_index, max(0, len(rows) - 1))

    def _refresh_all(self) -> None:
        try:
            tabs = self.query_one("#view-tabs", Static)
            primary = self.query_one("#primary", Static)
            side = self.query_one("#side", Static)
            status = self.query_one("#status-bar", Static)
        except NoMatches:
            return

        tabs.update(self._render_tabs())
        if not self.controller.auth_ready:
            primary.update(self._render_login_prompt())
            side.update("")
        elif self.controller.view == VIEW_INPUT:
            primary.update(self._render_input())
            side.update(Group(summary_text(self.controller.summary()), timeslot_table(self.controller.timeslot_stats())))
        elif self.controller.view == VIEW_DASHBOARD:
            primary.update(timeslot_table(self.controller.timeslot_stats()))
            side.update(
                Group(
                    summary_text(self.controller.summary()),
                    menu_table(self.controller.menu_stats()[:TOP_MENU_LIMIT], title="인기 메뉴 TOP 5"),
                )
            )
        else:
            self._clamp_record_index()
            primary.update(
                sales_page_table(self.controller.page_view(), self.controller.catalog, self.record_index)
            )
            side.update(
                Group(
                    category_table(self.controller.category_stats()),
                    menu_table(self.controller.menu_stats(), title="메뉴별 판매", show_footer=True),
                )
            )
        status.update(self._render_status())

    def _render_tabs(self) -> Text:
        text = Text()
        for idx, view in enumerate(VIEWS, start=1):
            style = "bold #ffffff on #b7791f" if view == self.controller.view else "#d0d0d0 on #333333"
            text.append(f" {idx} {VIEW_TITLES[view]} ", style=style)
            text.append(" ")
        text.append(f"  {self.controller.day}", style="bold")
        return text

    def _render_login_prompt(self) -> Text:
        text = Text()
        text.append("로그인이 필요합니다.\n\n", style="bold")
        if self.controller.auth_error:
            text.append(f"{self.controller.auth_error}\n\n", style="#ffb3b3")
        text.append("L 키를 눌러 이메일로 로그인하세요.")
        return text

    def _render_input(self) -> Group:
        controller = self.controller
        tabs = format_category_tabs([(c.id, c.name) for c in controller.categories], controller.selected_category_id)
        menus = controller.menus_for_selected_category
        if self.menu_index >= len(menus):
            self.menu_index = 0
        lines = Text()
        for idx, menu in enumerate(menus):
            if idx > 0:
                lines.append("\n")
            lines.append_text(format_menu_line(menu, idx == self.menu_index))
        if not menus:
            lines.append("(메뉴가 없습니다)", style="dim")
        return Group(tabs, Text(""), lines)

    def _render_status(self) -> str:
        message = self.controller.status or "Ready"
        if self.controller.view == VIEW_INPUT:
            keys = "←/→ 카테고리  ↑/↓ 메뉴  H/I 판매  [ ] 날짜"
        elif self.controller.view == VIEW_REPORT:
            keys = "↑/↓ 선택  N/P 페이지  E 수정  D 삭제  X CSV  C 복사  O 출력"
        else:
            keys = "[ ] 날짜  T 오늘"
        return f"{keys}\n{message}  ·  {self.printer_status}"
