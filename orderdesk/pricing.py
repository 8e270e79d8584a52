"""Order price computation.

An order is priced once, when it is created:

    area        = width * height / 10000       (cm x cm -> m2)
    price_total = price_per_sqm * area * (1 + percent_increment / 100)

The per-m2 price comes from ``price_lists`` keyed by (product type,
sub-category) and the surcharge from ``color_increments`` keyed by color.
A missing row in either table counts as zero; it never blocks the order.
The result is kept as an unrounded ``Decimal``.
"""
from __future__ import annotations
import logging
from decimal import Decimal, InvalidOperation
from typing import NamedTuple, Optional, Tuple

from sqlalchemy import select
from sqlalchemy.orm import Session

from .errors import ValidationError
from .models import ColorIncrement, PriceList

log = logging.getLogger(__name__)

CM2_PER_M2 = Decimal(10000)


class Quote(NamedTuple):
    area: Decimal
    price_per_sqm: Decimal
    percent_increment: Decimal
    price_total: Decimal


def _to_number(raw: str, label: str, dimensions: str) -> Decimal:
    raw = raw.strip()
    try:
        value = Decimal(raw)
    except (InvalidOperation, ValueError):
        raise ValidationError(f"Invalid dimensions '{dimensions}': {label} is not a number")
    if not raw or not value.is_finite():
        raise ValidationError(f"Invalid dimensions '{dimensions}': {label} is not a number")
    return value


def parse_dimensions(dimensions) -> Tuple[Decimal, Decimal]:
    """Split ``"<width>x<height>"`` into two numbers."""
    if not isinstance(dimensions, str):
        raise ValidationError("Dimensions must be a string like '100x200'")
    parts = dimensions.split("x")
    if len(parts) != 2:
        raise ValidationError(f"Invalid dimensions '{dimensions}': expected '<width>x<height>'")
    width = _to_number(parts[0], "width", dimensions)
    height = _to_number(parts[1], "height", dimensions)
    # zero or negative sizes are passed through unchanged
    return width, height


def area_sqm(width: Decimal, height: Decimal) -> Decimal:
    return (width * height) / CM2_PER_M2


def compute_price_total(price_per_sqm: Decimal, area: Decimal, percent_increment: Decimal) -> Decimal:
    return price_per_sqm * area * (1 + percent_increment / 100)


def lookup_price_per_sqm(
    db: Session,
    product_type_id: int,
    sub_category_id: Optional[int],
    customer_id: Optional[int] = None,
) -> Decimal:
    """Base price for the pair; customer row first, then generic, then any row."""
    if sub_category_id is None:
        sub_cond = PriceList.sub_category_id.is_(None)
    else:
        sub_cond = PriceList.sub_category_id == sub_category_id
    base = select(PriceList.price_per_sqm).where(PriceList.product_type_id == product_type_id, sub_cond)

    candidates = []
    if customer_id is not None:
        candidates.append(base.where(PriceList.customer_id == customer_id))
    candidates.append(base.where(PriceList.customer_id.is_(None)))
    candidates.append(base)
    for stmt in candidates:
        price = db.execute(stmt.order_by(PriceList.id).limit(1)).scalar()
        if price is not None:
            return Decimal(str(price))
    return Decimal(0)


def lookup_percent_increment(db: Session, color: str) -> Decimal:
    pct = db.execute(
        select(ColorIncrement.percent_increment).where(ColorIncrement.color == color)
    ).scalar()
    return Decimal(str(pct)) if pct is not None else Decimal(0)


def quote(
    db: Session,
    dimensions: str,
    product_type_id: int,
    sub_category_id: Optional[int],
    color: str,
    customer_id: Optional[int] = None,
) -> Quote:
    width, height = parse_dimensions(dimensions)
    area = area_sqm(width, height)
    price_per_sqm = lookup_price_per_sqm(db, product_type_id, sub_category_id, customer_id)
    percent = lookup_percent_increment(db, color)
    total = compute_price_total(price_per_sqm, area, percent)
    log.debug("quote %s type=%s sub=%s color=%s -> %s", dimensions, product_type_id, sub_category_id, color, total)
    return Quote(area=area, price_per_sqm=price_per_sqm, percent_increment=percent, price_total=total)
