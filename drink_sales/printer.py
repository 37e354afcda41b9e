"""Thermal printer output for the daily timeslot report."""

from __future__ import annotations

from pathlib import Path
from time import sleep

from drink_sales.config import (
    PRINTER_FONT_PATH,
    PRINTER_FONT_SIZE,
    PRINTER_LEFT_INDENT_PX,
    PRINTER_TAIL_SPACER_PX,
    PRINTER_USB_PRODUCT_ID,
    PRINTER_USB_VENDOR_ID,
    PRINTER_WIDTH_PX,
    AppConfig,
)
from drink_sales.errors import PrinterError
from drink_sales.models import DaySummary, MenuStats, TimeslotStats

_RULE_HEIGHT_PX = 16
_RULE_THICKNESS_PX = 3
_RULE_STRIPE_PX = 2
_RULE_PAUSE_SECONDS = 0.1
_LINE_EXTRA_PX = 14
_RULE_TOKEN = "__SEP__"
_REPORT_TOP_MENUS = 5
# Fonts with Hangul coverage first; menu names are Korean.
_LINUX_FONT_FALLBACKS = (
    "/usr/share/fonts/truetype/nanum/NanumGothic.ttf",
    "/usr/share/fonts/opentype/noto/NotoSansCJK-Regular.ttc",
    "/usr/share/fonts/noto-cjk/NotoSansCJK-Regular.ttc",
    "/usr/share/fonts/TTF/DejaVuSans.ttf",
    "/usr/share/fonts/dejavu/DejaVuSans.ttf",
)


def report_lines(
    day: str,
    fixed_stats: dict[str, TimeslotStats],
    summary: DaySummary,
    menu_stats: list[MenuStats],
) -> list[str]:
    """Printable lines: header, one line per fixed slot, totals, top menus."""
    lines = [f"판매 리포트 {day}", _RULE_TOKEN]
    for slot, stats in fixed_stats.items():
        lines.append(f"{slot}  H{stats.hot:>3} I{stats.ice:>3} = {stats.total:>3}")
    lines.append(_RULE_TOKEN)
    lines.append(f"합계 {summary.cups}잔")
    lines.append(f"매출 {summary.revenue:,}원")
    if menu_stats:
        lines.append(_RULE_TOKEN)
        for rank, row in enumerate(menu_stats[:_REPORT_TOP_MENUS], start=1):
            lines.append(f"{rank}. {row.menu_name} {row.temperature.value} x{row.count}")
    return lines


def resolve_printer_font_path(config: AppConfig) -> str:
    """
    Resolve a printer font path.

    Resolution order:
    1. DRINK_SALES_PRINTER_FONT_PATH (via config, if set)
    2. PRINTER_FONT_PATH
    3. Known Linux fallbacks
    """
    candidates: list[str] = []
    if config.printer_font_path:
        candidates.append(config.printer_font_path)
    candidates.append(PRINTER_FONT_PATH)
    candidates.extend(_LINUX_FONT_FALLBACKS)

    seen: set[str] = set()
    for candidate in candidates:
        if not candidate or candidate in seen:
            continue
        seen.add(candidate)
        if Path(candidate).is_file():
            return candidate

    raise PrinterError(
        "No usable printer font found. Set DRINK_SALES_PRINTER_FONT_PATH to a valid .ttf/.otf file. "
        f"Tried: {', '.join(seen)}"
    )


def check_printer_dependencies(config: AppConfig) -> tuple[bool, str]:
    """Check whether printer dependencies are importable."""
    try:
        from escpos.printer import Usb  # noqa: F401
        from PIL import ImageFont

        ImageFont.truetype(resolve_printer_font_path(config), PRINTER_FONT_SIZE)
    except Exception as exc:
        return (False, f"Printer unavailable: {exc}")
    return (True, "Printer ready")


def _blank(height_px: int) -> object:
    from PIL import Image

    return Image.new("1", (PRINTER_WIDTH_PX, max(1, height_px)), color=1)


def _line_image(text: str, font: object) -> object:
    from PIL import ImageDraw

    height = PRINTER_FONT_SIZE + _LINE_EXTRA_PX
    canvas = _blank(height)
    draw = ImageDraw.Draw(canvas)
    _, top, _, bottom = draw.textbbox((0, 0), text, font=font)
    draw.text((PRINTER_LEFT_INDENT_PX, (height - (bottom - top)) // 2 - top), text, font=font, fill=0)
    return canvas


def _rule_image() -> object:
    from PIL import ImageDraw

    canvas = _blank(_RULE_HEIGHT_PX)
    top = (_RULE_HEIGHT_PX - _RULE_THICKNESS_PX) // 2
    ImageDraw.Draw(canvas).rectangle((0, top, PRINTER_WIDTH_PX - 1, top + _RULE_THICKNESS_PX - 1), fill=0)
    return canvas


def _print_rule(printer: object) -> None:
    """Feed the rule in short stripes with a pause after each."""
    rule = _rule_image()
    for top in range(0, rule.height, _RULE_STRIPE_PX):
        printer.image(rule.crop((0, top, PRINTER_WIDTH_PX, min(rule.height, top + _RULE_STRIPE_PX))))
        sleep(_RULE_PAUSE_SECONDS)


def print_lines(config: AppConfig, lines: list[str]) -> None:
    """Send rendered lines to the USB printer and cut the ticket."""
    if not lines:
        return
    try:
        from escpos.printer import Usb
        from PIL import ImageFont
    except Exception as exc:
        raise PrinterError(f"Printer dependencies unavailable: {exc}") from exc

    font = ImageFont.truetype(resolve_printer_font_path(config), PRINTER_FONT_SIZE)
    try:
        printer = Usb(PRINTER_USB_VENDOR_ID, PRINTER_USB_PRODUCT_ID)
        for line in lines:
            if line == _RULE_TOKEN:
                _print_rule(printer)
                continue
            printer.image(_line_image(line, font))
        printer.image(_blank(PRINTER_TAIL_SPACER_PX))
        printer.cut()
    except Exception as exc:
        raise PrinterError(f"Print failed: {exc}") from exc


def print_daily_report(
    config: AppConfig,
    day: str,
    fixed_stats: dict[str, TimeslotStats],
    summary: DaySummary,
    menu_stats: list[MenuStats],
) -> None:
    print_lines(config, report_lines(day, fixed_stats, summary, menu_stats))
