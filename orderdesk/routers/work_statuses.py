"""Per-category status vocabularies.

The lists are advisory: clients read them to offer status choices, but
``PATCH /api/orders/{id}/status`` accepts any label.
"""
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy import select
from sqlalchemy.orm import Session

from ..db import get_db, commit_or_conflict
from ..errors import NotFound, ValidationError
from ..models import ProductType, SubCategory, WorkStatus
from ..utils.schemas import WorkStatusIn

router = APIRouter(prefix="/api/work-statuses", tags=["work-statuses"])

def _to_dict(w: WorkStatus) -> dict:
    return {
        "id": w.id,
        "product_type_id": w.product_type_id,
        "sub_category_id": w.sub_category_id,
        "status_list": list(w.status_list or []),
    }

def _find(db: Session, product_type_id: int, sub_category_id: Optional[int]) -> Optional[WorkStatus]:
    if sub_category_id is None:
        sub_cond = WorkStatus.sub_category_id.is_(None)
    else:
        sub_cond = WorkStatus.sub_category_id == sub_category_id
    stmt = select(WorkStatus).where(WorkStatus.product_type_id == product_type_id, sub_cond)
    return db.execute(stmt.order_by(WorkStatus.id).limit(1)).scalar_one_or_none()

@router.get("", response_model=List[dict])
def list_work_statuses(
    product_type_id: Optional[int] = Query(default=None, alias="productTypeId"),
    sub_category_id: Optional[int] = Query(default=None, alias="subCategoryId"),
    db: Session = Depends(get_db),
):
    stmt = select(WorkStatus)
    if product_type_id is not None:
        stmt = stmt.where(WorkStatus.product_type_id == product_type_id)
    if sub_category_id is not None:
        stmt = stmt.where(WorkStatus.sub_category_id == sub_category_id)
    rows = db.execute(stmt.order_by(WorkStatus.product_type_id, WorkStatus.sub_category_id, WorkStatus.id)).scalars().all()
    return [_to_dict(w) for w in rows]

@router.post("", status_code=201)
def save_work_statuses(payload: WorkStatusIn, db: Session = Depends(get_db)):
    """Create or replace the list for (product type, sub-category)."""
    if not db.get(ProductType, payload.product_type_id):
        raise NotFound("Product type not found")
    if payload.sub_category_id is not None:
        sub = db.get(SubCategory, payload.sub_category_id)
        if not sub:
            raise NotFound("Sub-category not found")
        if sub.product_type_id != payload.product_type_id:
            raise ValidationError("Sub-category does not belong to the given product type")

    w = _find(db, payload.product_type_id, payload.sub_category_id)
    if w is None:
        w = WorkStatus(product_type_id=payload.product_type_id, sub_category_id=payload.sub_category_id)
        db.add(w)
    w.status_list = list(payload.status_list)
    # a concurrent save for the same pair loses against the unique constraint
    commit_or_conflict(db, "A status list for this product type and sub-category was saved concurrently, retry the request")
    return _to_dict(w)

@router.delete("/{wid}", status_code=204)
def delete_work_status(wid: int, db: Session = Depends(get_db)):
    w = db.get(WorkStatus, wid)
    if not w:
        raise NotFound("Work status list not found")
    db.delete(w)
    db.commit()
