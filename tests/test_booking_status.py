from catalog.db.models.bookings import Booking, STATUS_AVAILABLE, STATUS_UNAVAILABLE
from catalog.db.models.products import Product
from catalog.features.bookings.status import derive_status, refresh_status


def _product(available: bool) -> Product:
    return Product(title="p", description="", price=1.0, availability=available)


# ---------- Fonction pure ----------

def test_derive_status_empty_is_available():
    assert derive_status([]) == STATUS_AVAILABLE


def test_derive_status_all_available():
    assert derive_status([_product(True), _product(True)]) == STATUS_AVAILABLE


def test_derive_status_one_unavailable():
    assert derive_status([_product(True), _product(False)]) == STATUS_UNAVAILABLE


def test_refresh_status_reports_change():
    booking = Booking(quantity=1, status=STATUS_AVAILABLE)
    booking.products = [_product(False)]
    assert refresh_status(booking) is True
    assert booking.status == STATUS_UNAVAILABLE
    assert refresh_status(booking) is False


# ---------- Via l'API ----------

def _create_product(client, title, available=True):
    res = client.post("/api/products", json={"title": title, "price": 10, "availability": available})
    assert res.status_code == 201, res.text
    return res.json()["id"]


def test_status_follows_added_and_removed_products(client, user_headers):
    ok = _create_product(client, "Salle A")
    ko = _create_product(client, "Salle B", available=False)

    res = client.post("/api/booking", json={"quantity": 1, "product": [ok]}, headers=user_headers)
    assert res.status_code == 201
    booking = res.json()
    assert booking["status"] == STATUS_AVAILABLE

    res = client.post(f"/api/booking/{booking['id']}/products/{ko}", headers=user_headers)
    assert res.status_code == 200
    assert res.json()["status"] == STATUS_UNAVAILABLE
    assert {p["id"] for p in res.json()["products"]} == {ok, ko}

    res = client.delete(f"/api/booking/{booking['id']}/products/{ko}", headers=user_headers)
    assert res.status_code == 200
    assert res.json()["status"] == STATUS_AVAILABLE


def test_status_follows_product_availability(client, user_headers):
    pid = _create_product(client, "Projecteur")
    booking = client.post("/api/booking", json={"product": [pid]}, headers=user_headers).json()

    res = client.put(f"/api/products/{pid}", json={"availability": False})
    assert res.status_code == 200
    assert client.get(f"/api/booking/{booking['id']}", headers=user_headers).json()["status"] == STATUS_UNAVAILABLE

    client.put(f"/api/products/{pid}", json={"availability": True})
    assert client.get(f"/api/booking/{booking['id']}", headers=user_headers).json()["status"] == STATUS_AVAILABLE


def test_deleting_unavailable_product_recomputes_status(client, user_headers):
    ok = _create_product(client, "Salle A")
    ko = _create_product(client, "Salle B", available=False)
    booking = client.post("/api/booking", json={"product": [ok, ko]}, headers=user_headers).json()
    assert booking["status"] == STATUS_UNAVAILABLE

    assert client.delete(f"/api/products/{ko}").status_code == 204

    res = client.get(f"/api/booking/{booking['id']}", headers=user_headers)
    assert res.json()["status"] == STATUS_AVAILABLE
    assert [p["id"] for p in res.json()["products"]] == [ok]
