from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy import select
from sqlalchemy.orm import Session

from ..auth import hash_access_code
from ..db import get_db, commit_or_conflict
from ..errors import Conflict, NotFound
from ..models import Worker
from ..utils.schemas import WorkerIn

router = APIRouter(prefix="/api/workers", tags=["workers"])

def _to_dict(w: Worker) -> dict:
    # the access code never leaves the server
    return {"id": w.id, "username": w.username}

@router.get("", response_model=List[dict])
def list_workers(db: Session = Depends(get_db)):
    rows = db.execute(select(Worker).order_by(Worker.username)).scalars().all()
    return [_to_dict(w) for w in rows]

@router.post("", status_code=201)
def create_worker(payload: WorkerIn, db: Session = Depends(get_db)):
    if db.execute(select(Worker.id).where(Worker.username == payload.username)).first():
        raise Conflict(f"Worker '{payload.username}' already exists")
    w = Worker(username=payload.username, access_code=hash_access_code(payload.access_code))
    db.add(w)
    commit_or_conflict(db, f"Worker '{payload.username}' already exists")
    return _to_dict(w)

@router.delete("/{wid}", status_code=204)
def delete_worker(wid: int, db: Session = Depends(get_db)):
    w = db.get(Worker, wid)
    if not w:
        raise NotFound("Worker not found")
    # assigned orders fall back to unassigned
    db.delete(w)
    db.commit()
