from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy import select
from sqlalchemy.orm import Session

from ..db import get_db, commit_or_conflict
from ..errors import Conflict, NotFound
from ..models import ProductType, SubCategory
from ..utils.schemas import ProductTypeIn, SubCategoryIn, SubCategoryUpdate

router = APIRouter(prefix="/api", tags=["catalog"])

def _type_dict(t: ProductType) -> dict:
    return {"id": t.id, "name": t.name}

def _sub_dict(s: SubCategory) -> dict:
    return {"id": s.id, "product_type_id": s.product_type_id, "name": s.name}

def _get_type(db: Session, tid: int) -> ProductType:
    t = db.get(ProductType, tid)
    if not t:
        raise NotFound("Product type not found")
    return t

def _get_sub(db: Session, sid: int) -> SubCategory:
    s = db.get(SubCategory, sid)
    if not s:
        raise NotFound("Sub-category not found")
    return s

# ---- product types ----
@router.get("/product-types", response_model=List[dict])
def list_product_types(db: Session = Depends(get_db)):
    rows = db.execute(select(ProductType).order_by(ProductType.name)).scalars().all()
    return [_type_dict(t) for t in rows]

@router.post("/product-types", status_code=201)
def create_product_type(payload: ProductTypeIn, db: Session = Depends(get_db)):
    if db.execute(select(ProductType.id).where(ProductType.name == payload.name)).first():
        raise Conflict(f"Product type '{payload.name}' already exists")
    t = ProductType(name=payload.name)
    db.add(t)
    commit_or_conflict(db, f"Product type '{payload.name}' already exists")
    return _type_dict(t)

@router.put("/product-types/{tid}")
def update_product_type(tid: int, payload: ProductTypeIn, db: Session = Depends(get_db)):
    t = _get_type(db, tid)
    t.name = payload.name
    commit_or_conflict(db, f"Product type '{payload.name}' already exists")
    return _type_dict(t)

@router.delete("/product-types/{tid}", status_code=204)
def delete_product_type(tid: int, db: Session = Depends(get_db)):
    t = _get_type(db, tid)
    db.delete(t)
    commit_or_conflict(db, "Product type is still referenced by sub-categories, prices or orders")

# ---- sub-categories ----
@router.get("/sub-categories", response_model=List[dict])
def list_sub_categories(
    product_type_id: Optional[int] = Query(default=None, alias="productTypeId"),
    db: Session = Depends(get_db),
):
    stmt = select(SubCategory)
    if product_type_id is not None:
        stmt = stmt.where(SubCategory.product_type_id == product_type_id)
    rows = db.execute(stmt.order_by(SubCategory.name, SubCategory.id)).scalars().all()
    return [_sub_dict(s) for s in rows]

@router.post("/sub-categories", status_code=201)
def create_sub_category(payload: SubCategoryIn, db: Session = Depends(get_db)):
    _get_type(db, payload.product_type_id)
    s = SubCategory(product_type_id=payload.product_type_id, name=payload.name)
    db.add(s)
    commit_or_conflict(db, f"Sub-category '{payload.name}' already exists for this product type")
    return _sub_dict(s)

@router.put("/sub-categories/{sid}")
def update_sub_category(sid: int, payload: SubCategoryUpdate, db: Session = Depends(get_db)):
    s = _get_sub(db, sid)
    s.name = payload.name
    commit_or_conflict(db, f"Sub-category '{payload.name}' already exists for this product type")
    return _sub_dict(s)

@router.delete("/sub-categories/{sid}", status_code=204)
def delete_sub_category(sid: int, db: Session = Depends(get_db)):
    s = _get_sub(db, sid)
    db.delete(s)
    commit_or_conflict(db, "Sub-category is still referenced by prices or orders")
