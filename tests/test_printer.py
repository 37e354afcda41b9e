from __future__ import annotations

import pytest
from conftest import CATEGORIES, MENUS, make_record

from drink_sales.aggregation import aggregate_by_menu, aggregate_fixed_slots, summarize_day
from drink_sales.config import PRINTER_WIDTH_PX, AppConfig
from drink_sales.data import Catalog
from drink_sales.errors import PrinterError
from drink_sales.models import Temperature
from drink_sales.printer import _line_image, _print_rule, _rule_image, print_lines, report_lines, resolve_printer_font_path

SLOTS = ["09:00-10:00", "10:00-11:00"]


def test_report_lines_cover_every_fixed_slot_and_totals():
    records = [
        make_record(1, time_slot="09:00-10:00"),
        make_record(2, menu_id="C02", temperature=Temperature.ICE, price=4500, time_slot="09:00-10:00"),
    ]
    lines = report_lines(
        "2025-03-14",
        aggregate_fixed_slots(records, SLOTS),
        summarize_day(records),
        aggregate_by_menu(records, Catalog(categories=CATEGORIES, menus=MENUS)),
    )
    assert lines[0] == "판매 리포트 2025-03-14"
    assert lines[2] == "09:00-10:00  H  1 I  1 =   2"
    assert lines[3] == "10:00-11:00  H  0 I  0 =   0"
    assert "합계 2잔" in lines
    assert "매출 8,500원" in lines
    assert lines[-2:] == ["1. 아메리카노 HOT x1", "2. 카페라떼 ICE x1"]


def test_report_without_sales_skips_menu_section():
    lines = report_lines("2025-03-14", aggregate_fixed_slots([], SLOTS), summarize_day([]), [])
    assert lines[-1] == "매출 0원"


def test_font_override_wins(tmp_path):
    font = tmp_path / "font.ttf"
    font.write_bytes(b"")
    assert resolve_printer_font_path(AppConfig(printer_font_path=str(font))) == str(font)


def test_missing_font_raises_printer_error(tmp_path, monkeypatch):
    monkeypatch.setattr("drink_sales.printer.PRINTER_FONT_PATH", str(tmp_path / "none.ttf"))
    monkeypatch.setattr("drink_sales.printer._LINUX_FONT_FALLBACKS", ())
    with pytest.raises(PrinterError):
        resolve_printer_font_path(AppConfig(printer_font_path=str(tmp_path / "missing.ttf")))


def test_print_lines_with_nothing_to_print_is_a_no_op():
    print_lines(AppConfig(), [])


def test_line_image_spans_printer_width_and_has_ink():
    from PIL import ImageFont

    image = _line_image("09:00-10:00  H  1 I  1 =   2", ImageFont.load_default())
    assert image.width == PRINTER_WIDTH_PX
    assert image.getextrema() == (0, 255)


def test_rule_prints_in_stripes(monkeypatch):
    monkeypatch.setattr("drink_sales.printer.sleep", lambda _: None)

    class Recorder:
        def __init__(self):
            self.images = []

        def image(self, img):
            self.images.append(img)

    printer = Recorder()
    _print_rule(printer)
    assert len(printer.images) > 1
    assert sum(img.height for img in printer.images) == _rule_image().height
    assert all(img.width == PRINTER_WIDTH_PX for img in printer.images)
