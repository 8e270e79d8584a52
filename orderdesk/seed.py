# orderdesk/seed.py
"""Idempotent bootstrap of the default catalogue, the admin worker and demo prices.

Run once at startup (``SEED_DEFAULTS=1``) or by hand with ``python -m orderdesk.seed``.
Every insert is guarded by an existence check, so running it again is harmless.
"""
import logging
from decimal import Decimal
from typing import Dict

from sqlalchemy import select
from sqlalchemy.orm import Session

from .auth import hash_access_code
from .models import ColorIncrement, PriceList, ProductType, SubCategory, Worker
from .utils import settings

log = logging.getLogger(__name__)

PRODUCT_TYPES = {
    "Zanzariera": ["Molla", "Catena", "Jolly", "Telaio Fisso", "Battente", "A Kit"],
    "Riparazione Zanzariera": ["Molla", "Catena"],
    "Veneziana": ["Alluminio", "Legno", "PVC"],
    "Tapparella": ["PVC", "Alluminio", "Motorizzata"],
    "Box Doccia": ["A Battente", "Scorrevole"],
    "Tenda a Rullo": ["Interna", "Esterna"],
    "Tenda da Sole": ["Cassonetto", "A Bracci"],
}

COLOR_INCREMENTS = [("Bianco", Decimal("0")), ("Nero", Decimal("5")), ("Rosso", Decimal("10"))]

# (product type, sub-category, price per m2) without a customer
DEMO_PRICES = [("Zanzariera", "Molla", Decimal("25.0"))]


def _product_type(db: Session, name: str):
    return db.execute(select(ProductType).where(ProductType.name == name)).scalar_one_or_none()


def _sub_category(db: Session, type_id: int, name: str):
    return db.execute(
        select(SubCategory).where(SubCategory.product_type_id == type_id, SubCategory.name == name)
    ).scalar_one_or_none()


def bootstrap(db: Session) -> Dict[str, int]:
    counts = {"product_types": 0, "sub_categories": 0, "workers": 0, "color_increments": 0, "price_lists": 0}

    for type_name, subs in PRODUCT_TYPES.items():
        pt = _product_type(db, type_name)
        if pt is None:
            pt = ProductType(name=type_name)
            db.add(pt)
            db.flush()
            counts["product_types"] += 1
        for sub_name in subs:
            if _sub_category(db, pt.id, sub_name) is None:
                db.add(SubCategory(product_type_id=pt.id, name=sub_name))
                counts["sub_categories"] += 1
    db.flush()

    if db.execute(select(Worker.id).where(Worker.username == settings.ADMIN_USERNAME)).first() is None:
        db.add(Worker(username=settings.ADMIN_USERNAME, access_code=hash_access_code(settings.ADMIN_ACCESS_CODE)))
        counts["workers"] += 1

    for color, pct in COLOR_INCREMENTS:
        if db.execute(select(ColorIncrement.id).where(ColorIncrement.color == color)).first() is None:
            db.add(ColorIncrement(color=color, percent_increment=pct))
            counts["color_increments"] += 1

    for type_name, sub_name, price in DEMO_PRICES:
        pt = _product_type(db, type_name)
        sc = _sub_category(db, pt.id, sub_name) if pt else None
        if sc is None:
            continue
        exists = db.execute(
            select(PriceList.id).where(
                PriceList.customer_id.is_(None),
                PriceList.product_type_id == pt.id,
                PriceList.sub_category_id == sc.id,
            )
        ).first()
        if exists is None:
            db.add(PriceList(customer_id=None, product_type_id=pt.id, sub_category_id=sc.id, price_per_sqm=price))
            counts["price_lists"] += 1

    db.commit()
    log.info("bootstrap done: %s", counts)
    return counts


if __name__ == "__main__":
    from .db import SessionLocal
    from .models import ensure_tables

    logging.basicConfig(level=settings.LOG_LEVEL, format="[orderdesk] %(levelname)s %(name)s: %(message)s")
    ensure_tables()
    with SessionLocal() as s:
        print(bootstrap(s))
