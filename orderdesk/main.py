# orderdesk/main.py
from __future__ import annotations
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse
from starlette.middleware.sessions import SessionMiddleware

from . import __version__
from .auth import router as auth_router
from .db import SessionLocal
from .errors import install_handlers
from .models import ensure_tables
from .routers.catalog import router as catalog_router
from .routers.colors import router as colors_router
from .routers.customers import router as customers_router
from .routers.orders import router as orders_router
from .routers.price_lists import router as price_lists_router
from .routers.work_statuses import router as work_statuses_router
from .routers.workers import router as workers_router
from .seed import bootstrap
from .utils import settings

logging.basicConfig(level=settings.LOG_LEVEL, format="[orderdesk] %(levelname)s %(name)s: %(message)s")
log = logging.getLogger("orderdesk")


@asynccontextmanager
async def lifespan(_: FastAPI):
    ensure_tables()
    log.info("schema ensured on %s", settings.DATABASE_URL.split("@")[-1])
    if settings.SEED_DEFAULTS:
        with SessionLocal() as db:
            bootstrap(db)
    yield


app = FastAPI(title=settings.APP_NAME, version=__version__, lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(SessionMiddleware,
                   secret_key=settings.SECRET_KEY,
                   same_site=settings.SESSION_SAMESITE,
                   https_only=settings.HTTPS_ONLY)

install_handlers(app)

# ── health ──────────────────────────────────────────────────────────
@app.get("/", response_class=PlainTextResponse)
def root():
    return f"OrderDesk backend running (v{__version__})"

@app.get("/healthz")
def healthz():
    return {"ok": True, "version": __version__}

# ── API routers ─────────────────────────────────────────────────────
app.include_router(auth_router)
app.include_router(catalog_router)
app.include_router(colors_router)
app.include_router(price_lists_router)
app.include_router(customers_router)
app.include_router(workers_router)
app.include_router(orders_router)
app.include_router(work_statuses_router)
