def test_category_crud(client):
    res = client.post("/api/category", json={"name": "  Mobilier  "})
    assert res.status_code == 201
    category = res.json()
    assert category["name"] == "Mobilier"

    assert client.get(f"/api/category/{category['id']}").json()["name"] == "Mobilier"

    res = client.put(f"/api/category/{category['id']}", json={"name": "Mobilier de bureau"})
    assert res.status_code == 200
    assert res.json()["name"] == "Mobilier de bureau"

    listing = client.get("/api/category").json()
    assert listing["total"] == 1
    assert listing["items"][0]["id"] == category["id"]

    assert client.delete(f"/api/category/{category['id']}").status_code == 204
    assert client.get(f"/api/category/{category['id']}").status_code == 404


def test_duplicate_name_conflicts(client):
    client.post("/api/category", json={"name": "Salles"})
    res = client.post("/api/category", json={"name": "Salles"})
    assert res.status_code == 409


def test_rename_to_existing_name_conflicts(client):
    client.post("/api/category", json={"name": "Salles"})
    other = client.post("/api/category", json={"name": "Matériel"}).json()
    res = client.put(f"/api/category/{other['id']}", json={"name": "Salles"})
    assert res.status_code == 409


def test_rename_to_own_name_is_allowed(client):
    category = client.post("/api/category", json={"name": "Salles"}).json()
    assert client.put(f"/api/category/{category['id']}", json={"name": "Salles"}).status_code == 200


def test_blank_name_is_rejected(client):
    assert client.post("/api/category", json={"name": "   "}).status_code == 422


def test_deleting_category_keeps_products(client):
    category = client.post("/api/category", json={"name": "Salles"}).json()
    product = client.post(
        "/api/products", json={"title": "Salle A", "price": 1, "category": [category["id"]]}
    ).json()

    assert client.delete(f"/api/category/{category['id']}").status_code == 204
    res = client.get(f"/api/products/{product['id']}")
    assert res.status_code == 200
    assert res.json()["categories"] == []


def test_unknown_category(client):
    assert client.get("/api/category/404").status_code == 404
    assert client.delete("/api/category/404").status_code == 404
