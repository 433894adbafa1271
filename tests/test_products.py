"""
Tests for product inventory routes
"""
from agerapp_api.database import Product, RestockHistory


def _create(client, headers, files=None, **fields):
    data = {"name": "Rice", "quantity": "10", "price": "2500", "measurement": "50kg", "quantity_type": "bags"}
    data.update(fields)
    return client.post("/v1/products/create", data=data, files=files, headers=headers)


class TestCreateProduct:
    """POST /v1/products/create"""

    def test_create_without_images(self, client, auth_headers, test_user):
        response = _create(client, auth_headers, expiry="2027-01-01")

        assert response.status_code == 200
        body = response.json()
        assert body["message"] == "Product Added"
        data = body["data"]
        assert data["owner_id"] == test_user.id
        assert data["quantity"] == 10
        assert data["price"] == 2500
        assert data["expiry_date"] == "2027-01-01"
        assert data["restock_alert"] == 0
        assert data["number_of_restocks"] == 1
        assert data["image"] == []

    def test_create_with_images(self, client, auth_headers, png_file, storage):
        files = [("image", png_file("a.png")), ("image", png_file("b.png"))]

        response = _create(client, auth_headers, files=files)

        images = response.json()["data"]["image"]
        assert len(images) == 2
        assert all(url.startswith("/uploads/products/") for url in images)
        assert all(storage.get(storage.key_from_url("products", url)) for url in images)

    def test_too_many_images(self, client, auth_headers, png_file):
        files = [("image", png_file(f"{n}.png")) for n in range(6)]

        response = _create(client, auth_headers, files=files)

        assert response.status_code == 400

    def test_missing_fields(self, client, auth_headers):
        response = client.post("/v1/products/create", data={"name": "Rice"}, headers=auth_headers)

        assert response.status_code == 400
        assert response.json()["message"] == "Missing fields"

    def test_requires_login(self, client, db_session):
        response = client.post("/v1/products/create", data={"name": "Rice", "quantity": "1", "price": "1"})

        assert response.status_code == 401


class TestEditProduct:
    """PUT /v1/products/edit/{id}"""

    def test_partial_update_keeps_other_fields(self, client, auth_headers):
        product_id = _create(client, auth_headers).json()["data"]["id"]

        response = client.put(f"/v1/products/edit/{product_id}", data={"price": "3000"}, headers=auth_headers)

        assert response.status_code == 200
        assert response.json()["message"] == "Product Updated"
        data = response.json()["data"]
        assert data["price"] == 3000
        assert data["name"] == "Rice"
        assert data["quantity"] == 10

    def test_new_images_replace_and_delete_old(self, client, auth_headers, png_file, storage):
        created = _create(client, auth_headers, files=[("image", png_file("old.png"))]).json()["data"]
        old_key = storage.key_from_url("products", created["image"][0])

        response = client.put(
            f"/v1/products/edit/{created['id']}",
            files=[("image", png_file("new.png"))],
            headers=auth_headers,
        )

        images = response.json()["data"]["image"]
        assert len(images) == 1
        assert images[0] != created["image"][0]
        assert storage.get(old_key) is None

    def test_other_owner_cannot_edit(self, client, auth_headers, make_user, login_headers):
        product_id = _create(client, auth_headers).json()["data"]["id"]
        intruder = make_user()

        response = client.put(f"/v1/products/edit/{product_id}", data={"price": "1"}, headers=login_headers(intruder))

        assert response.status_code == 400
        assert response.json()["message"] == "Product not found"


class TestDeleteProduct:
    """DELETE /v1/products/delete/{id}"""

    def test_delete(self, client, db_session, auth_headers, png_file, storage):
        created = _create(client, auth_headers, files=[("image", png_file())]).json()["data"]
        key = storage.key_from_url("products", created["image"][0])

        response = client.delete(f"/v1/products/delete/{created['id']}", headers=auth_headers)

        assert response.status_code == 200
        assert response.json()["message"] == "Product Deleted"
        assert db_session.query(Product).count() == 0
        assert storage.get(key) is None

    def test_delete_unknown(self, client, auth_headers):
        response = client.delete("/v1/products/delete/missing", headers=auth_headers)

        assert response.status_code == 400


class TestListProducts:
    """Product listings"""

    def test_my_products_paginates_by_limit(self, client, auth_headers):
        for name in ("Rice", "Beans", "Garri"):
            _create(client, auth_headers, name=name)

        response = client.get("/v1/products/my", params={"page": 1, "limit": 2}, headers=auth_headers)

        data = response.json()["data"]
        assert response.json()["message"] == "User products fetched"
        assert data["pagination"] == {"total": 3, "page": 1, "limit": 2, "totalPages": 2}
        assert len(data["items"]) == 2
        assert all("image" not in item for item in data["items"])

    def test_my_products_name_filter(self, client, auth_headers):
        _create(client, auth_headers, name="Brown Rice")
        _create(client, auth_headers, name="Beans")

        response = client.get("/v1/products/my", params={"name": "rice"}, headers=auth_headers)

        assert [item["name"] for item in response.json()["data"]["items"]] == ["Brown Rice"]

    def test_my_products_only_own(self, client, auth_headers, make_user, login_headers):
        other = make_user()
        _create(client, login_headers(other), name="Theirs")
        _create(client, auth_headers, name="Mine")

        items = client.get("/v1/products/my", headers=auth_headers).json()["data"]["items"]

        assert [item["name"] for item in items] == ["Mine"]

    def test_products_by_user(self, client, auth_headers, make_user, login_headers):
        seller = make_user()
        _create(client, login_headers(seller), name="Palm Oil")
        _create(client, login_headers(seller), name="Yam")

        response = client.get(
            f"/v1/products/user/{seller.id}",
            params={"keyword": "oil", "perPage": 5},
            headers=auth_headers,
        )

        data = response.json()["data"]
        assert [item["name"] for item in data["items"]] == ["Palm Oil"]
        assert data["pagination"]["perPage"] == 5


class TestRestock:
    """Restocking and history"""

    def test_restock_adds_quantity_and_records_history(self, client, db_session, auth_headers, test_user):
        product_id = _create(client, auth_headers).json()["data"]["id"]

        response = client.post(f"/v1/products/restock/{product_id}", json={"quantity": 5}, headers=auth_headers)

        assert response.status_code == 200
        assert response.json()["message"] == "Product restocked successfully"
        data = response.json()["data"]
        assert data["quantity"] == 15
        assert data["number_of_restocks"] == 2

        entry = db_session.query(RestockHistory).one()
        assert entry.quantity == 5
        assert entry.restocked_by == test_user.id

    def test_invalid_quantity(self, client, auth_headers):
        product_id = _create(client, auth_headers).json()["data"]["id"]

        for payload in ({}, {"quantity": 0}, {"quantity": -3}):
            response = client.post(f"/v1/products/restock/{product_id}", json=payload, headers=auth_headers)
            assert response.status_code == 400
            assert response.json()["message"] == "Invalid restock quantity"

    def test_history_is_enriched(self, client, auth_headers):
        product_id = _create(client, auth_headers, name="Sugar", measurement="1kg").json()["data"]["id"]
        client.post(f"/v1/products/restock/{product_id}", json={"quantity": 2}, headers=auth_headers)
        client.post(f"/v1/products/restock/{product_id}", json={"quantity": 3}, headers=auth_headers)

        response = client.get("/v1/products/restock-history", headers=auth_headers)

        history = response.json()["data"]
        assert len(history) == 2
        assert {entry["quantity"] for entry in history} == {2, 3}
        assert all(entry["product_name"] == "Sugar" for entry in history)
        assert all(entry["product_measurement"] == "1kg" for entry in history)
