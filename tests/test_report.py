from __future__ import annotations

from datetime import timedelta

from conftest import CATEGORIES, FIXED_NOW, MENUS, make_record

from drink_sales.aggregation import aggregate_fixed_slots
from drink_sales.data import Catalog
from drink_sales.models import Temperature
from drink_sales.report import clamp_page, clipboard_text, export_csv, paginate, total_pages, write_csv

CATALOG = Catalog(categories=CATEGORIES, menus=MENUS)
HEADER = "날짜,시간,카테고리,메뉴명,온도,가격"


def test_csv_of_no_records_is_header_only():
    assert export_csv([], "2025-03-14", CATALOG) == HEADER


def test_csv_has_one_row_per_sale():
    records = [
        make_record(1, time_slot="09:00-10:00"),
        make_record(2, menu_id="T01", temperature=Temperature.ICE, price=None, time_slot="10:00-11:00"),
    ]
    assert export_csv(records, "2025-03-14", CATALOG).split("\n") == [
        HEADER,
        "2025-03-14,09:00-10:00,커피,아메리카노,HOT,4000",
        "2025-03-14,10:00-11:00,티,얼그레이,ICE,0",
    ]


def test_csv_quotes_menu_names_containing_commas():
    record = make_record(1, menu_id="gone", time_slot="09:00-10:00")
    record = record.__class__(**{**record.__dict__, "menu_name": "라떼, 큰 사이즈"})
    line = export_csv([record], "2025-03-14", CATALOG).split("\n")[1]
    assert line == '2025-03-14,09:00-10:00,기타,"라떼, 큰 사이즈",HOT,4000'


def test_write_csv_names_file_by_day(tmp_path):
    path = write_csv(tmp_path / "out", [], "2025-03-14", CATALOG)
    assert path.name == "sales_2025-03-14.csv"
    assert path.read_text(encoding="utf-8") == HEADER


def test_clipboard_text_lists_every_fixed_slot():
    stats = aggregate_fixed_slots(
        [make_record(1, time_slot="09:00-10:00"), make_record(2, time_slot="09:00-10:00")],
        ["09:00-10:00", "10:00-11:00"],
    )
    assert clipboard_text(stats) == "시간대\t합계\n09:00-10:00\t2\n10:00-11:00\t0"


def test_pagination_sorts_newest_first():
    records = [make_record(i, sold_at=FIXED_NOW + timedelta(minutes=i)) for i in range(1, 24)]
    page = paginate(records, 1, 10)
    assert page.total_pages == 3
    assert [r.id for r in page.rows] == list(range(23, 13, -1))
    assert [r.id for r in paginate(records, 3, 10).rows] == [3, 2, 1]


def test_page_clamps_after_records_shrink():
    assert total_pages(23, 10) == 3
    assert clamp_page(3, 10, 10) == 1
    assert clamp_page(0, 23, 10) == 1
    assert total_pages(0, 10) == 1


def test_out_of_range_page_is_clamped_when_slicing():
    records = [make_record(i) for i in range(1, 6)]
    page = paginate(records, 7, 10)
    assert page.number == 1
    assert len(page.rows) == 5

