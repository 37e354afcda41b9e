from __future__ import annotations

from datetime import date

import pytest
from conftest import at

from drink_sales.errors import SaleNotFoundError, ValidationError
from drink_sales.models import NewSale, Temperature
from drink_sales.persistence import SqliteSalesRepository
from drink_sales.timeslots import day_bounds_of


@pytest.fixture
def repo(tmp_path):
    return SqliteSalesRepository(tmp_path / "nested" / "sales.db")


def new_sale(hour: int, minute: int = 0, day: int = 14, **overrides) -> NewSale:
    values = dict(
        menu_id="C01",
        temperature=Temperature.HOT,
        price=4000,
        sold_at=at(hour, minute, day=day),
        category="커피",
        menu_name="아메리카노",
    )
    values.update(overrides)
    return NewSale(**values)


def test_add_assigns_fresh_ids_and_derives_day_and_slot(repo):
    first = repo.add(new_sale(9, 15))
    second = repo.add(new_sale(10, 5, temperature=Temperature.ICE))
    assert first != second

    records = repo.list_by_day("2025-03-14")
    assert [r.id for r in records] == [first, second]
    assert records[0].time_slot == "09:00-10:00"
    assert records[0].sold_date == "2025-03-14"
    assert records[0].menu_name == "아메리카노"
    assert records[1].temperature is Temperature.ICE
    assert records[0].sold_at == at(9, 15)


def test_list_by_date_range_is_inclusive_and_day_scoped(repo):
    repo.add(new_sale(0, 0))
    repo.add(new_sale(23, 59))
    repo.add(new_sale(12, 0, day=15))

    start, end = day_bounds_of(date(2025, 3, 14))
    records = repo.list_by_date_range(start, end)
    assert len(records) == 2
    assert {r.sold_date for r in records} == {"2025-03-14"}


def test_update_price_keeps_other_fields(repo):
    sale_id = repo.add(new_sale(9))
    repo.update(sale_id, price=3500)
    (record,) = repo.list_by_day("2025-03-14")
    assert record.price == 3500
    assert record.menu_id == "C01"


def test_update_sold_at_moves_day_and_slot(repo):
    sale_id = repo.add(new_sale(9))
    repo.update(sale_id, sold_at=at(16, 40, day=15))
    assert repo.list_by_day("2025-03-14") == []
    (record,) = repo.list_by_day("2025-03-15")
    assert record.time_slot == "16:00-17:00"


def test_update_rejects_unknown_fields(repo):
    sale_id = repo.add(new_sale(9))
    with pytest.raises(ValidationError):
        repo.update(sale_id, user_id="x")


def test_update_and_delete_of_missing_sale_raise_not_found(repo):
    with pytest.raises(SaleNotFoundError):
        repo.update(999, price=1)
    with pytest.raises(SaleNotFoundError):
        repo.delete(999)


def test_delete_removes_the_row(repo):
    keep = repo.add(new_sale(9))
    drop = repo.add(new_sale(10))
    repo.delete(drop)
    assert [r.id for r in repo.list_by_day("2025-03-14")] == [keep]


def test_reference_data_is_active_and_ordered(repo):
    categories = repo.list_categories()
    assert [c.sort_order for c in categories] == sorted(c.sort_order for c in categories)
    menus = repo.list_menus()
    assert menus and all(m.is_active for m in menus)
    assert {m.category_id for m in menus} <= {c.id for c in categories}


def test_update_rejects_non_datetime_sold_at(repo):
    sale_id = repo.add(new_sale(9))
    with pytest.raises(ValidationError):
        repo.update(sale_id, sold_at="2025-03-14T10:00:00")
    (record,) = repo.list_by_day("2025-03-14")
    assert record.time_slot == "09:00-10:00"
