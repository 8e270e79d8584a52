import hmac
import logging
from typing import Optional, Tuple

from fastapi import APIRouter, Depends, Request
from passlib.context import CryptContext
from sqlalchemy import select
from sqlalchemy.orm import Session

from .db import get_db
from .errors import Unauthorized
from .models import Worker
from .utils.schemas import WorkerLoginIn

log = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["auth"])
pwd = CryptContext(schemes=["pbkdf2_sha256", "bcrypt"], deprecated="auto")

def hash_access_code(plain: str) -> str:
    return pwd.hash(plain)

def verify_access_code(plain: str, stored: str) -> Tuple[bool, Optional[str]]:
    """Check ``plain`` against ``stored``; the second item is a replacement hash when one is due.

    Codes written before hashing was introduced are stored as-is; they still
    match once and are replaced by a hash.
    """
    if pwd.identify(stored, required=False) is None:
        ok = hmac.compare_digest(plain.encode(), stored.encode())
        return ok, (hash_access_code(plain) if ok else None)
    try:
        return pwd.verify_and_update(plain, stored)
    except ValueError:
        return False, None

def authenticate_worker(db: Session, username: str, access_code: str) -> Worker:
    worker = db.execute(select(Worker).where(Worker.username == username)).scalar_one_or_none()
    if worker is None:
        log.warning("login failed: unknown worker %r", username)
        raise Unauthorized("Worker not found")
    ok, new_hash = verify_access_code(access_code, worker.access_code)
    if not ok:
        log.warning("login failed: wrong access code for %r", username)
        raise Unauthorized("Wrong access code")
    if new_hash:
        worker.access_code = new_hash
        db.commit()
        log.info("rehashed access code for %r", username)
    return worker

def current_worker_id(request: Request) -> Optional[int]:
    return request.session.get("worker_id")

@router.post("/worker-login")
def worker_login(request: Request, payload: WorkerLoginIn, db: Session = Depends(get_db)):
    worker = authenticate_worker(db, payload.username, payload.access_code)
    request.session["worker_id"] = int(worker.id)
    request.session["worker_name"] = worker.username
    return {"id": worker.id, "username": worker.username}

@router.post("/worker-logout")
def worker_logout(request: Request):
    request.session.clear()
    return {"ok": True}

@router.get("/worker-me")
def worker_me(request: Request):
    wid = current_worker_id(request)
    if not wid:
        raise Unauthorized("Not logged in")
    return {"id": wid, "username": request.session.get("worker_name")}
