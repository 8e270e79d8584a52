from decimal import Decimal

import pytest

from orderdesk.errors import ValidationError
from orderdesk.models import ColorIncrement, Customer, PriceList, ProductType, SubCategory
from orderdesk.pricing import (
    area_sqm, compute_price_total, lookup_percent_increment, lookup_price_per_sqm,
    parse_dimensions, quote,
)


def test_parse_dimensions():
    assert parse_dimensions("100x200") == (Decimal(100), Decimal(200))
    assert parse_dimensions(" 80.5 x 120 ") == (Decimal("80.5"), Decimal(120))


@pytest.mark.parametrize("bad", ["100", "100x200x300", "100*200", "axb", "100x", "x200", "", "NaNx10", "100X200"])
def test_parse_dimensions_rejects_malformed(bad):
    with pytest.raises(ValidationError):
        parse_dimensions(bad)


def test_parse_dimensions_rejects_non_string():
    with pytest.raises(ValidationError):
        parse_dimensions(None)


def test_zero_and_negative_sizes_pass_through():
    w, h = parse_dimensions("0x200")
    assert area_sqm(w, h) == 0
    w, h = parse_dimensions("-100x200")
    assert area_sqm(w, h) == Decimal(-2)


def test_formula_example():
    area = area_sqm(Decimal(100), Decimal(200))
    assert area == Decimal(2)
    assert compute_price_total(Decimal(25), area, Decimal(10)) == Decimal("55.0")


def test_result_is_not_rounded():
    area = area_sqm(Decimal(33), Decimal(33))
    total = compute_price_total(Decimal("12.5"), area, Decimal(7))
    assert area == Decimal("0.1089")
    assert total == Decimal("12.5") * Decimal("0.1089") * Decimal("1.07")


def _catalog(db):
    pt = ProductType(name="Veneziana")
    db.add(pt)
    db.flush()
    sc = SubCategory(product_type_id=pt.id, name="Legno")
    cust = Customer(name="Bianchi")
    db.add_all([sc, cust])
    db.flush()
    return pt, sc, cust


def test_missing_rows_count_as_zero(db):
    pt, sc, _ = _catalog(db)
    assert lookup_price_per_sqm(db, pt.id, sc.id) == 0
    assert lookup_percent_increment(db, "Verde") == 0
    q = quote(db, "100x200", pt.id, sc.id, "Verde")
    assert q.price_total == 0
    assert q.area == Decimal(2)


def test_missing_color_means_no_surcharge(db):
    pt, sc, _ = _catalog(db)
    db.add(PriceList(product_type_id=pt.id, sub_category_id=sc.id, price_per_sqm=Decimal(30)))
    db.flush()
    assert float(quote(db, "100x100", pt.id, sc.id, "Verde").price_total) == 30.0


def test_customer_price_takes_precedence(db):
    pt, sc, cust = _catalog(db)
    db.add_all([
        PriceList(product_type_id=pt.id, sub_category_id=sc.id, price_per_sqm=Decimal(20)),
        PriceList(customer_id=cust.id, product_type_id=pt.id, sub_category_id=sc.id, price_per_sqm=Decimal(15)),
        ColorIncrement(color="Nero", percent_increment=Decimal(5)),
    ])
    db.flush()
    assert lookup_price_per_sqm(db, pt.id, sc.id, customer_id=cust.id) == 15
    assert lookup_price_per_sqm(db, pt.id, sc.id) == 20
    q = quote(db, "200x100", pt.id, sc.id, "Nero", customer_id=cust.id)
    assert float(q.price_total) == pytest.approx(31.5)


def test_other_customers_price_is_last_resort(db):
    pt, sc, cust = _catalog(db)
    db.add(PriceList(customer_id=cust.id, product_type_id=pt.id, sub_category_id=sc.id, price_per_sqm=Decimal(18)))
    db.flush()
    assert lookup_price_per_sqm(db, pt.id, sc.id) == 18


def test_null_sub_category_matches_generic_row(db):
    pt, sc, _ = _catalog(db)
    db.add(PriceList(product_type_id=pt.id, sub_category_id=None, price_per_sqm=Decimal(12)))
    db.flush()
    assert lookup_price_per_sqm(db, pt.id, None) == 12
    assert lookup_price_per_sqm(db, pt.id, sc.id) == 0
