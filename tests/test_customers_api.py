def test_customer_crud(client):
    r = client.post("/api/customers", json={"name": "  Giulia Neri ", "phone": "347", "address": "Via Dante 3"})
    assert r.status_code == 201
    c = r.json()
    assert c["name"] == "Giulia Neri"
    assert client.get(f"/api/customers/{c['id']}").json() == c

    r = client.put(f"/api/customers/{c['id']}", json={"name": "Giulia Neri", "phone": "348"})
    assert r.json()["phone"] == "348"
    assert r.json()["address"] is None

    assert client.delete(f"/api/customers/{c['id']}").status_code == 204
    assert client.get(f"/api/customers/{c['id']}").status_code == 404


def test_duplicate_name_is_conflict_case_insensitive(client):
    client.post("/api/customers", json={"name": "Rossi"})
    r = client.post("/api/customers", json={"name": "ROSSI "})
    assert r.status_code == 409
    assert "error" in r.json()


def test_rename_onto_existing_name_is_conflict(client):
    client.post("/api/customers", json={"name": "Rossi"})
    other = client.post("/api/customers", json={"name": "Bianchi"}).json()
    r = client.put(f"/api/customers/{other['id']}", json={"name": "rossi"})
    assert r.status_code == 409
    same = client.put(f"/api/customers/{other['id']}", json={"name": "BIANCHI"})
    assert same.status_code == 200


def test_blank_name_is_rejected(client):
    assert client.post("/api/customers", json={"name": " "}).status_code == 400
    assert client.post("/api/customers", json={}).status_code == 400


def test_list_and_suggest(client):
    for name in ("Marco Polo", "maria Rossi", "Luigi Bianchi", "Martina 100%"):
        client.post("/api/customers", json={"name": name})
    assert [c["name"] for c in client.get("/api/customers").json()] == [
        "Luigi Bianchi", "Marco Polo", "maria Rossi", "Martina 100%",
    ]

    names = [c["name"] for c in client.get("/api/customers/suggest", params={"q": "MAR"}).json()]
    assert names == ["Marco Polo", "maria Rossi", "Martina 100%"]
    assert len(client.get("/api/customers/suggest", params={"q": "mar", "limit": 1}).json()) == 1
    assert client.get("/api/customers/suggest", params={"q": "%"}).json() == []
    assert client.get("/api/customers/suggest", params={"q": ""}).json() == []
    assert client.get("/api/customers/suggest", params={"q": "bianchi"}).json() == []


def test_deleting_customer_keeps_orders(client, catalog):
    c = client.post("/api/customers", json={"name": "Ferrari"}).json()
    o = client.post("/api/orders", json={
        "customerId": c["id"], "productTypeId": catalog["type"]["id"],
        "dimensions": "50x50", "color": "Bianco",
    }).json()
    assert client.delete(f"/api/customers/{c['id']}").status_code == 204
    again = client.get(f"/api/orders/{o['id']}").json()
    assert again["customer_id"] is None
    assert again["customer_name"] == "Ferrari"
