from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy import select
from sqlalchemy.orm import Session

from ..db import get_db, commit_or_conflict
from ..errors import Conflict, NotFound
from ..models import ColorIncrement
from ..utils.schemas import ColorIncrementIn, ColorIncrementUpdate

router = APIRouter(prefix="/api/color-increments", tags=["color-increments"])

def _to_dict(c: ColorIncrement) -> dict:
    return {
        "id": c.id,
        "color": c.color,
        "percent_increment": float(c.percent_increment) if c.percent_increment is not None else 0.0,
    }

@router.get("", response_model=List[dict])
def list_color_increments(db: Session = Depends(get_db)):
    rows = db.execute(select(ColorIncrement).order_by(ColorIncrement.color)).scalars().all()
    return [_to_dict(c) for c in rows]

@router.post("", status_code=201)
def create_color_increment(payload: ColorIncrementIn, db: Session = Depends(get_db)):
    if db.execute(select(ColorIncrement.id).where(ColorIncrement.color == payload.color)).first():
        raise Conflict(f"Color '{payload.color}' already has an increment")
    c = ColorIncrement(color=payload.color, percent_increment=payload.percent_increment)
    db.add(c)
    commit_or_conflict(db, f"Color '{payload.color}' already has an increment")
    return _to_dict(c)

@router.put("/{cid}")
def update_color_increment(cid: int, payload: ColorIncrementUpdate, db: Session = Depends(get_db)):
    c = db.get(ColorIncrement, cid)
    if not c:
        raise NotFound("Color increment not found")
    c.percent_increment = payload.percent_increment
    db.commit()
    return _to_dict(c)

@router.delete("/{cid}", status_code=204)
def delete_color_increment(cid: int, db: Session = Depends(get_db)):
    c = db.get(ColorIncrement, cid)
    if not c:
        raise NotFound("Color increment not found")
    db.delete(c)
    db.commit()
