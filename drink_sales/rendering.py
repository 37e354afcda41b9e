"""Rich renderables for the three views."""

from __future__ import annotations

from rich.table import Table
from rich.text import Text

from drink_sales.aggregation import slot_for
from drink_sales.data import Catalog
from drink_sales.models import CategoryStats, DaySummary, Menu, MenuStats, Temperature, TimeslotStats
from drink_sales.report import Page


def badge_style(temperature: Temperature, enabled: bool = True) -> str:
    """Return a consistent badge style for HOT/ICE tags."""
    if not enabled:
        return "#8a8a8a on #3a3a3a"
    if temperature is Temperature.HOT:
        return "bold #ffffff on #c0394b"
    return "bold #ffffff on #2f7dc1"


def temperature_badge(temperature: Temperature, enabled: bool = True) -> Text:
    return Text(f" {temperature.value} ", style=badge_style(temperature, enabled))


def won(amount: int) -> str:
    return f"{amount:,}원"


def format_menu_line(menu: Menu, selected: bool) -> Text:
    """One menu card: pointer, name, price and the two sale buttons."""
    text = Text()
    text.append("➤ " if selected else "  ")
    text.append(menu.name, style="bold" if selected else "")
    if menu.price is not None:
        text.append(f"  {won(menu.price)}", style="dim")
    text.append("  ")
    text.append_text(temperature_badge(Temperature.HOT, menu.hot_available))
    text.append(" ")
    text.append_text(temperature_badge(Temperature.ICE, menu.ice_available))
    return text


def format_category_tabs(names: list[tuple[str, str]], selected_id: str) -> Text:
    text = Text()
    for idx, (category_id, name) in enumerate(names):
        if idx > 0:
            text.append(" ")
        style = "bold #ffffff on #b7791f" if category_id == selected_id else "#d0d0d0 on #333333"
        text.append(f" {name} ", style=style)
    return text


def summary_text(summary: DaySummary) -> Text:
    text = Text()
    text.append("오늘 판매 ", style="dim")
    text.append(f"{summary.cups}잔", style="bold")
    text.append("   매출 ", style="dim")
    text.append(won(summary.revenue), style="bold")
    text.append("   영업 ", style="dim")
    text.append(f"{summary.active_slots}시간", style="bold")
    return text


def timeslot_table(stats: dict[str, TimeslotStats], title: str = "시간대별 판매") -> Table:
    table = Table(title=title, expand=True)
    table.add_column("시간대")
    table.add_column("HOT", justify="right")
    table.add_column("ICE", justify="right")
    table.add_column("합계", justify="right")
    table.add_column("매출", justify="right")
    for slot, row in stats.items():
        table.add_row(slot, str(row.hot), str(row.ice), Text(str(row.total), style="bold"), won(row.revenue))
    if not stats:
        table.add_row(Text("아직 판매 기록이 없습니다.", style="dim"), "", "", "", "")
    return table


def menu_table(rows: list[MenuStats], title: str, show_footer: bool = False) -> Table:
    table = Table(title=title, expand=True, show_footer=show_footer)
    table.add_column("#", justify="right", footer="")
    table.add_column("메뉴", footer="합계")
    table.add_column("온도", footer="")
    table.add_column("카테고리", footer="")
    table.add_column("잔", justify="right", footer=str(sum(r.count for r in rows)))
    table.add_column("매출", justify="right", footer=won(sum(r.revenue for r in rows)))
    for rank, row in enumerate(rows, start=1):
        table.add_row(
            str(rank), row.menu_name, temperature_badge(row.temperature), row.category, str(row.count), won(row.revenue)
        )
    return table


def category_table(rows: list[CategoryStats]) -> Table:
    table = Table(title="카테고리별 요약", expand=True)
    table.add_column("카테고리")
    table.add_column("잔", justify="right")
    table.add_column("매출", justify="right")
    for row in rows:
        table.add_row(row.category, str(row.count), won(row.revenue))
    return table


def sales_page_table(page: Page, catalog: Catalog, selected_index: int | None) -> Table:
    """Management table of raw sales for the current page."""
    table = Table(title=f"판매 내역  {page.number}/{page.total_pages}", expand=True)
    table.add_column("", width=2)
    table.add_column("시간")
    table.add_column("메뉴")
    table.add_column("온도")
    table.add_column("가격", justify="right")
    for idx, record in enumerate(page.rows):
        pointer = "➤" if idx == selected_index else ""
        table.add_row(
            pointer,
            f"{record.sold_at:%H:%M} ({slot_for(record)})",
            catalog.menu_name_for(record),
            temperature_badge(record.temperature),
            won(record.amount),
        )
    if not page.rows:
        table.add_row("", Text("판매 내역이 없습니다.", style="dim"), "", "", "")
    return table
