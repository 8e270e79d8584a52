from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy import select
from sqlalchemy.orm import Session

from ..db import get_db, commit_or_conflict
from ..errors import NotFound, ValidationError
from ..models import Customer, PriceList, ProductType, SubCategory
from ..utils.schemas import PriceListIn, PriceListUpdate

router = APIRouter(prefix="/api/price-lists", tags=["price-lists"])

def _to_dict(p: PriceList) -> dict:
    return {
        "id": p.id,
        "customer_id": p.customer_id,
        "product_type_id": p.product_type_id,
        "sub_category_id": p.sub_category_id,
        "price_per_sqm": float(p.price_per_sqm) if p.price_per_sqm is not None else 0.0,
    }

@router.get("", response_model=List[dict])
def list_price_lists(
    customer_id: Optional[int] = Query(default=None, alias="customerId"),
    db: Session = Depends(get_db),
):
    stmt = select(PriceList)
    if customer_id is not None:
        stmt = stmt.where(PriceList.customer_id == customer_id)
    stmt = stmt.order_by(PriceList.customer_id, PriceList.product_type_id, PriceList.sub_category_id, PriceList.id)
    return [_to_dict(p) for p in db.execute(stmt).scalars().all()]

@router.post("", status_code=201)
def create_price_list(payload: PriceListIn, db: Session = Depends(get_db)):
    if payload.customer_id is not None and not db.get(Customer, payload.customer_id):
        raise NotFound("Customer not found")
    if not db.get(ProductType, payload.product_type_id):
        raise NotFound("Product type not found")
    if payload.sub_category_id is not None:
        sub = db.get(SubCategory, payload.sub_category_id)
        if not sub:
            raise NotFound("Sub-category not found")
        if sub.product_type_id != payload.product_type_id:
            raise ValidationError("Sub-category does not belong to the given product type")
    p = PriceList(
        customer_id=payload.customer_id,
        product_type_id=payload.product_type_id,
        sub_category_id=payload.sub_category_id,
        price_per_sqm=payload.price_per_sqm,
    )
    db.add(p)
    commit_or_conflict(db, "Price list references missing data")
    return _to_dict(p)

@router.put("/{pid}")
def update_price_list(pid: int, payload: PriceListUpdate, db: Session = Depends(get_db)):
    p = db.get(PriceList, pid)
    if not p:
        raise NotFound("Price list not found")
    # existing orders keep the price they were created with
    p.price_per_sqm = payload.price_per_sqm
    db.commit()
    return _to_dict(p)

@router.delete("/{pid}", status_code=204)
def delete_price_list(pid: int, db: Session = Depends(get_db)):
    p = db.get(PriceList, pid)
    if not p:
        raise NotFound("Price list not found")
    db.delete(p)
    db.commit()
