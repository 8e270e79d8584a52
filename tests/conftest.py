import os
import tempfile

_TMP = tempfile.mkdtemp(prefix="orderdesk-tests-")
os.environ["DATABASE_URL"] = f"sqlite:///{_TMP}/test.db"
os.environ["SEED_DEFAULTS"] = "0"
os.environ.setdefault("SECRET_KEY", "test-secret")

import pytest
from fastapi.testclient import TestClient

from orderdesk.db import Base, SessionLocal, engine
from orderdesk.main import app


@pytest.fixture(autouse=True)
def fresh_schema():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture
def client():
    with TestClient(app) as c:
        yield c


@pytest.fixture
def db():
    with SessionLocal() as s:
        yield s


@pytest.fixture
def catalog(client):
    """A product type with two sub-categories, a price row and two colors."""
    pt = client.post("/api/product-types", json={"name": "Zanzariera"}).json()
    molla = client.post("/api/sub-categories", json={"productTypeId": pt["id"], "name": "Molla"}).json()
    catena = client.post("/api/sub-categories", json={"productTypeId": pt["id"], "name": "Catena"}).json()
    client.post("/api/price-lists", json={
        "productTypeId": pt["id"], "subCategoryId": molla["id"], "pricePerSqm": 25,
    })
    client.post("/api/color-increments", json={"color": "Bianco", "percentIncrement": 0})
    client.post("/api/color-increments", json={"color": "Rosso", "percentIncrement": 10})
    return {"type": pt, "molla": molla, "catena": catena}
