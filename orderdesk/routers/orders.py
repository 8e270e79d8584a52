import logging
from typing import List, Optional

from fastapi import APIRouter, Depends
from sqlalchemy import select
from sqlalchemy.orm import Session

from ..barcodes import mint_barcode
from ..db import get_db, commit_or_conflict
from ..errors import NotFound, ValidationError
from ..models import Customer, Order, ProductType, SubCategory, Worker
from ..pricing import quote
from .customers import find_by_name
from ..utils import settings
from ..utils.schemas import OrderIn, OrderPriceIn, OrderStatusIn

log = logging.getLogger(__name__)

router = APIRouter(prefix="/api/orders", tags=["orders"])

def _num(v) -> Optional[float]:
    return float(v) if v is not None else None

def _to_dict(o: Order, product_type_name=None, sub_category_name=None, worker_name=None) -> dict:
    return {
        "id": o.id,
        "customer_id": o.customer_id,
        "customer_name": o.customer_name,
        "phone": o.phone,
        "address": o.address,
        "product_type_id": o.product_type_id,
        "product_type_name": product_type_name,
        "sub_category_id": o.sub_category_id,
        "sub_category_name": sub_category_name,
        "quantity": o.quantity,
        "dimensions": o.dimensions,
        "color": o.color,
        "custom_notes": o.custom_notes or "",
        "barcode": o.barcode,
        "price_total": _num(o.price_total),
        "manual_price": _num(o.manual_price),
        # what gets shown and billed
        "effective_price": _num(o.manual_price if o.manual_price is not None else o.price_total),
        "status": o.status,
        "assigned_worker_id": o.assigned_worker_id,
        "assigned_worker_name": worker_name,
        "created_at": o.created_at.isoformat() if o.created_at else None,
    }

def _joined():
    return (
        select(Order, ProductType.name, SubCategory.name, Worker.username)
        .outerjoin(ProductType, Order.product_type_id == ProductType.id)
        .outerjoin(SubCategory, Order.sub_category_id == SubCategory.id)
        .outerjoin(Worker, Order.assigned_worker_id == Worker.id)
    )

def _load(db: Session, *conds) -> dict:
    row = db.execute(_joined().where(*conds)).first()
    if row is None:
        raise NotFound("Order not found")
    return _to_dict(*row)

def _get_order(db: Session, oid: int) -> Order:
    o = db.get(Order, oid)
    if not o:
        raise NotFound("Order not found")
    return o

@router.get("", response_model=List[dict])
def list_orders(db: Session = Depends(get_db)):
    rows = db.execute(_joined().order_by(Order.created_at.desc(), Order.id.desc())).all()
    return [_to_dict(*r) for r in rows]

@router.get("/barcode/{barcode}")
def get_order_by_barcode(barcode: str, db: Session = Depends(get_db)):
    return _load(db, Order.barcode == barcode.strip())

@router.get("/{oid}")
def get_order(oid: int, db: Session = Depends(get_db)):
    return _load(db, Order.id == oid)

@router.post("", status_code=201)
def create_order(payload: OrderIn, db: Session = Depends(get_db)):
    customer = None
    if payload.customer_id is not None:
        customer = db.get(Customer, payload.customer_id)
        if not customer:
            raise NotFound("Customer not found")
    elif payload.customer_name:
        customer = find_by_name(db, payload.customer_name)

    customer_name = payload.customer_name or (customer.name if customer else None)
    if not customer_name:
        raise ValidationError("customerName or customerId is required")

    if not db.get(ProductType, payload.product_type_id):
        raise NotFound("Product type not found")
    if payload.sub_category_id is not None:
        sub = db.get(SubCategory, payload.sub_category_id)
        if not sub:
            raise NotFound("Sub-category not found")
        if sub.product_type_id != payload.product_type_id:
            raise ValidationError("Sub-category does not belong to the given product type")

    q = quote(
        db,
        payload.dimensions,
        payload.product_type_id,
        payload.sub_category_id,
        payload.color,
        customer_id=customer.id if customer else None,
    )
    o = Order(
        customer_id=customer.id if customer else None,
        customer_name=customer_name,
        product_type_id=payload.product_type_id,
        sub_category_id=payload.sub_category_id,
        quantity=payload.quantity,
        dimensions=payload.dimensions,
        color=payload.color,
        custom_notes=payload.custom_notes or "",
        phone=payload.phone or (customer.phone if customer else None),
        address=payload.address or (customer.address if customer else None),
        barcode=mint_barcode(),
        price_total=q.price_total,
        status=settings.DEFAULT_ORDER_STATUS,
    )
    db.add(o)
    # a barcode collision surfaces here; the caller retries with a new request
    commit_or_conflict(db, "Barcode already in use, retry the request")
    log.info("order %s created: barcode=%s area=%s price_total=%s", o.id, o.barcode, q.area, q.price_total)
    return _load(db, Order.id == o.id)

@router.patch("/{oid}/status")
def update_order_status(oid: int, payload: OrderStatusIn, db: Session = Depends(get_db)):
    o = _get_order(db, oid)
    if payload.worker_id is not None:
        if not db.get(Worker, payload.worker_id):
            raise NotFound("Worker not found")
        o.assigned_worker_id = payload.worker_id
    # no worker in the request keeps the current assignment
    o.status = payload.status
    db.commit()
    return _load(db, Order.id == oid)

@router.patch("/{oid}/price")
def update_order_price(oid: int, payload: OrderPriceIn, db: Session = Depends(get_db)):
    o = _get_order(db, oid)
    if payload.manual_price is not None and payload.manual_price < 0:
        raise ValidationError("manualPrice must not be negative")
    # price_total is never touched; clearing the override falls back to it
    o.manual_price = payload.manual_price
    db.commit()
    return _load(db, Order.id == oid)

@router.delete("/{oid}", status_code=204)
def delete_order(oid: int, db: Session = Depends(get_db)):
    o = _get_order(db, oid)
    db.delete(o)
    db.commit()
