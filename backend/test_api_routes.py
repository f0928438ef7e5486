"""HTTP surface: auth, role gating, error translation, the admission endpoints."""
from conftest import TEST_PASSWORD, auth_headers

from retailhub.core.config import settings
from retailhub.core.security import get_password_hash
from retailhub.models.user import User


def _admit(client, user, batch_id, code):
    return client.post(f"/batches/{batch_id}/admission", json={"code": code}, headers=auth_headers(user))


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}
    assert response.headers["X-Frame-Options"] == "DENY"


def test_requests_without_token_are_rejected(client):
    assert client.get("/batches").status_code == 401
    assert client.get("/batches", headers={"Authorization": "Bearer garbage"}).status_code == 401


def test_login_sets_cookie_that_authenticates(client, db):
    db.add(User(email="owner@example.com", hashed_password=get_password_hash(TEST_PASSWORD), role="super_admin"))
    db.commit()

    bad = client.post("/auth/login", json={"email": "owner@example.com", "password": "wrong-password"})
    assert bad.status_code == 401
    assert bad.json()["detail"] == "Invalid email or password"

    response = client.post("/auth/login", json={"email": "owner@example.com", "password": TEST_PASSWORD})
    assert response.status_code == 200
    assert response.json()["token_type"] == "bearer"
    assert settings.AUTH_COOKIE_NAME in response.cookies

    me = client.get("/auth/me")
    assert me.status_code == 200
    assert me.json()["role"] == "super_admin"


def test_only_super_admin_creates_staff(client, admin, manager):
    payload = {"email": "clerk@example.com", "password": TEST_PASSWORD, "role": "store_manager"}
    assert client.post("/auth/users", json=payload, headers=auth_headers(manager)).status_code == 403

    weak = client.post("/auth/users", json={**payload, "password": "short1!"}, headers=auth_headers(admin))
    assert weak.status_code == 400

    bad_role = client.post("/auth/users", json={**payload, "role": "cashier"}, headers=auth_headers(admin))
    assert bad_role.status_code == 400

    created = client.post("/auth/users", json=payload, headers=auth_headers(admin))
    assert created.status_code == 201
    assert created.json()["role"] == "store_manager"


def test_store_form_aliases_and_type_normalisation(client, admin):
    response = client.post(
        "/stores",
        json={"storeName": "Depot", "address": "Road 3", "type": "warehouse", "isOnline": False},
        headers=auth_headers(admin),
    )
    assert response.status_code == 201
    body = response.json()
    assert body["name"] == "Depot"
    assert body["location"] == "Road 3"
    assert body["type"] == "Warehouse"

    duplicate = client.post("/stores", json={"name": "Depot"}, headers=auth_headers(admin))
    assert duplicate.status_code == 409

    bad_type = client.post("/stores", json={"name": "Kiosk", "type": "kiosk"}, headers=auth_headers(admin))
    assert bad_type.status_code == 400


def test_catalog_writes_need_super_admin(client, manager, product):
    response = client.post("/products", json={"name": "Scarf"}, headers=auth_headers(manager))
    assert response.status_code == 403
    assert response.json()["detail"] == "Access denied"

    response = client.post(
        "/batches",
        json={"product_id": product.id, "cost_price": "10", "selling_price": "20", "quantity": 1},
        headers=auth_headers(manager),
    )
    assert response.status_code == 403


def test_category_endpoints(client, admin):
    headers = auth_headers(admin)
    men = client.post("/categories", json={"title": "Men"}, headers=headers).json()
    shirts = client.post("/categories", json={"title": "Shirts", "parent_id": men["id"]}, headers=headers).json()
    assert shirts["slug"] == "shirts"

    tree = client.get("/categories", headers=headers).json()
    assert tree[0]["subcategories"][0]["title"] == "Shirts"

    cycle = client.put(f"/categories/{men['id']}", json={"move_to_parent_id": shirts["id"]}, headers=headers)
    assert cycle.status_code == 400

    moved = client.put(f"/categories/{shirts['id']}", json={"move_to_parent_id": None}, headers=headers)
    assert moved.status_code == 200
    assert moved.json()["parent_id"] is None

    deleted = client.delete(f"/categories/{men['id']}", headers=headers)
    assert deleted.json() == {"success": True, "removed": [men["id"]]}


def test_batch_admission_over_http(client, admin, manager, product, warehouse):
    response = client.post(
        "/batches",
        json={"product_id": product.id, "cost_price": "250.00", "selling_price": "400.00", "quantity": 2},
        headers=auth_headers(admin),
    )
    assert response.status_code == 201
    batch = response.json()
    base_code = f"BATCH{batch['id']}"
    assert batch["base_code"] == base_code
    assert batch["admitted"] == "no"

    codes = client.get(f"/batches/{batch['id']}/codes", headers=auth_headers(manager)).json()
    assert codes["codes"] == [f"{base_code}-01", f"{base_code}-02"]

    state = client.get(f"/batches/{batch['id']}/admission", headers=auth_headers(manager)).json()
    assert state["expected_code"] == f"{base_code}-01"
    assert state["state"] == "active"

    first = _admit(client, manager, batch["id"], f"{base_code}-01")
    assert first.status_code == 201
    body = first.json()
    assert body["message"] == f"Product {base_code}-01 admitted successfully!"
    assert body["item"]["location"] == warehouse.name
    assert body["admission"]["expected_code"] == f"{base_code}-02"

    duplicate = _admit(client, manager, batch["id"], f"{base_code}-01")
    assert duplicate.status_code == 409
    assert f"({base_code}-01)" in duplicate.json()["detail"]

    wrong = _admit(client, manager, batch["id"], "WRONGCODE")
    assert wrong.status_code == 400
    assert wrong.json()["detail"] == f"Invalid barcode: WRONGCODE. Expected format: {base_code}-XX"

    empty = _admit(client, manager, batch["id"], "")
    assert empty.status_code == 400

    last = _admit(client, manager, batch["id"], f"{base_code}-02")
    assert last.status_code == 201
    body = last.json()
    assert body["message"] == "All products from this batch have been admitted!"
    assert body["admission"]["state"] == "terminal"
    assert body["admission"]["expected_code"] is None
    assert body["batch_flag_persisted"] is True

    admitted = client.get("/batches", params={"admitted": "yes"}, headers=auth_headers(manager)).json()
    assert [b["id"] for b in admitted] == [batch["id"]]

    after = _admit(client, manager, batch["id"], f"{base_code}-03")
    assert after.status_code == 400

    in_use = client.delete(f"/batches/{batch['id']}", headers=auth_headers(admin))
    assert in_use.status_code == 409


def test_social_commerce_manager_cannot_admit(client, social_manager, make_batch):
    batch = make_batch(quantity=1)
    response = _admit(client, social_manager, batch.id, f"{batch.base_code}-01")
    assert response.status_code == 403


def test_unknown_batch_is_404(client, manager):
    response = client.get("/batches/999/admission", headers=auth_headers(manager))
    assert response.status_code == 404
    assert response.json()["detail"] == "Batch not found"


def test_inventory_summary_route_and_item_filters(client, admin, make_batch, warehouse):
    batch = make_batch(quantity=2)
    _admit(client, admin, batch.id, f"{batch.base_code}-01")

    summary = client.get("/inventory/summary", headers=auth_headers(admin))
    assert summary.status_code == 200
    assert summary.json()[0]["outlets"][warehouse.name]["available"] == 1

    items = client.get("/inventory", params={"batch_id": batch.id}, headers=auth_headers(admin)).json()
    assert [i["barcode"] for i in items] == [f"{batch.base_code}-01"]

    sold = client.patch(f"/inventory/{items[0]['id']}", json={"status": "sold"}, headers=auth_headers(admin))
    assert sold.status_code == 200
    assert sold.json()["sold_at"] is not None


def test_store_manager_bound_to_another_outlet_cannot_dispatch(client, db, warehouse, outlet):
    bound = User(email="bound@example.com", hashed_password="x", role="store_manager", store_id=outlet.id)
    db.add(bound)
    db.commit()

    response = client.post(
        "/dispatches",
        json={"from_store_id": warehouse.id, "to_store_id": outlet.id, "barcodes": ["anything"]},
        headers=auth_headers(bound),
    )
    assert response.status_code == 403


def test_dispatch_and_receive_over_http(client, admin, make_batch, warehouse, outlet):
    batch = make_batch(quantity=1)
    code = f"{batch.base_code}-01"
    _admit(client, admin, batch.id, code)

    sent = client.post(
        "/dispatches",
        json={"from_store_id": warehouse.id, "to_store_id": outlet.id, "barcodes": [code]},
        headers=auth_headers(admin),
    )
    assert sent.status_code == 201
    assert sent.json()[0]["status"] == "in-transit"

    received = client.post("/dispatches/receive", json={"store_id": outlet.id, "barcode": code},
                           headers=auth_headers(admin))
    assert received.status_code == 200
    assert received.json()["status"] == "completed"

    again = client.post("/dispatches/receive", json={"store_id": outlet.id, "barcode": code},
                        headers=auth_headers(admin))
    assert again.status_code == 404


def test_manual_inventory_respects_batch_quantity(client, admin, product, make_batch):
    batch = make_batch(quantity=1)
    headers = auth_headers(admin)

    def post(barcode):
        return client.post("/inventory", json={
            "product_id": product.id, "batch_id": batch.id, "barcode": barcode,
            "cost_price": "100", "selling_price": "150",
        }, headers=headers)

    first = post("X-1")
    assert first.status_code == 201
    assert post("X-2").status_code == 400

    units = client.get("/inventory", params={"batch_id": batch.id}, headers=headers).json()
    assert [u["barcode"] for u in units] == ["X-1"]
    assert client.get(f"/batches/{batch.id}", headers=headers).json()["admitted"] == "yes"

    deleted = client.delete(f"/inventory/{first.json()['id']}", headers=headers)
    assert deleted.status_code == 200
    assert client.get(f"/batches/{batch.id}", headers=headers).json()["admitted"] == "no"
    pending = client.get("/batches", params={"admitted": "no"}, headers=headers).json()
    assert batch.id in [b["id"] for b in pending]
