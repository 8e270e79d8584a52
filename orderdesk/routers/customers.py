from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy import func, select
from sqlalchemy.orm import Session

from ..db import get_db, commit_or_conflict
from ..errors import Conflict, NotFound
from ..models import Customer
from ..utils.schemas import CustomerIn

router = APIRouter(prefix="/api/customers", tags=["customers"])

def _to_dict(c: Customer) -> dict:
    return {"id": c.id, "name": c.name, "phone": c.phone, "address": c.address}

def find_by_name(db: Session, name: str, exclude_id: Optional[int] = None) -> Optional[Customer]:
    """Case-insensitive exact match on the trimmed name."""
    stmt = select(Customer).where(func.lower(Customer.name) == name.strip().lower())
    if exclude_id is not None:
        stmt = stmt.where(Customer.id != exclude_id)
    return db.execute(stmt.limit(1)).scalar_one_or_none()

def _escape_like(s: str) -> str:
    return s.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")

@router.get("", response_model=List[dict])
def list_customers(db: Session = Depends(get_db)):
    rows = db.execute(select(Customer).order_by(func.lower(Customer.name))).scalars().all()
    return [_to_dict(c) for c in rows]

@router.get("/suggest", response_model=List[dict])
def suggest_customers(
    q: str = Query(default=""),
    limit: int = Query(default=10, ge=1, le=50),
    db: Session = Depends(get_db),
):
    prefix = q.strip().lower()
    if not prefix:
        return []
    stmt = (
        select(Customer)
        .where(func.lower(Customer.name).like(_escape_like(prefix) + "%", escape="\\"))
        .order_by(func.lower(Customer.name))
        .limit(limit)
    )
    return [_to_dict(c) for c in db.execute(stmt).scalars().all()]

@router.get("/{cid}")
def get_customer(cid: int, db: Session = Depends(get_db)):
    c = db.get(Customer, cid)
    if not c:
        raise NotFound("Customer not found")
    return _to_dict(c)

@router.post("", status_code=201)
def create_customer(payload: CustomerIn, db: Session = Depends(get_db)):
    if find_by_name(db, payload.name):
        raise Conflict(f"Customer '{payload.name}' already exists")
    c = Customer(name=payload.name, phone=payload.phone or None, address=payload.address or None)
    db.add(c)
    commit_or_conflict(db, f"Customer '{payload.name}' already exists")
    return _to_dict(c)

@router.put("/{cid}")
def update_customer(cid: int, payload: CustomerIn, db: Session = Depends(get_db)):
    c = db.get(Customer, cid)
    if not c:
        raise NotFound("Customer not found")
    if find_by_name(db, payload.name, exclude_id=cid):
        raise Conflict(f"Customer '{payload.name}' already exists")
    c.name = payload.name
    c.phone = payload.phone or None
    c.address = payload.address or None
    commit_or_conflict(db, f"Customer '{payload.name}' already exists")
    return _to_dict(c)

@router.delete("/{cid}", status_code=204)
def delete_customer(cid: int, db: Session = Depends(get_db)):
    c = db.get(Customer, cid)
    if not c:
        raise NotFound("Customer not found")
    # orders keep the customer name; their link is cleared by the FK
    db.delete(c)
    db.commit()
