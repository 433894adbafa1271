"""
Tests for customer and invoice routes
"""
from unittest.mock import patch

from agerapp_api.database import Customer, Invoice
from agerapp_api.invoice_routes import next_invoice_id

CUSTOMER = {"name": "Chidi Okafor", "phone_number": "+2348022222222", "location": "Enugu", "email": "chidi@example.com"}
LINE_ITEMS = [{"product_id": "p-1", "name": "Rice", "quantity": 2, "price": 2500}]


def _add_customer(client, headers, **overrides):
    return client.post("/v1/customers", json={**CUSTOMER, **overrides}, headers=headers)


class TestCustomers:
    """Customer book"""

    def test_add_customer(self, client, auth_headers, test_user):
        response = _add_customer(client, auth_headers)

        assert response.status_code == 200
        assert response.json()["message"] == "Customer added"
        data = response.json()["data"]
        assert data["owner_id"] == test_user.id
        assert data["user_id"] is None

    def test_add_customer_missing_fields(self, client, auth_headers):
        response = client.post("/v1/customers", json={"name": "Chidi"}, headers=auth_headers)

        assert response.status_code == 400
        assert response.json()["message"] == "Missing fields"

    def test_add_customer_invalid_email(self, client, auth_headers):
        response = _add_customer(client, auth_headers, email="chidi-at-example")

        assert response.status_code == 400
        assert response.json()["message"] == "Invalid email format"

    def test_list_with_keyword(self, client, auth_headers):
        _add_customer(client, auth_headers)
        _add_customer(client, auth_headers, name="Ngozi", location="Abuja", email="ngozi@example.com")

        response = client.get("/v1/customers", params={"keyword": "abuja"}, headers=auth_headers)

        assert response.json()["message"] == "Customers fetched"
        data = response.json()["data"]
        assert [item["name"] for item in data["items"]] == ["Ngozi"]
        assert data["pagination"]["total"] == 1

    def test_get_update_delete(self, client, db_session, auth_headers):
        customer_id = _add_customer(client, auth_headers).json()["data"]["id"]

        fetched = client.get(f"/v1/customers/{customer_id}", headers=auth_headers)
        assert fetched.json()["message"] == "Customer fetched"

        updated = client.put(f"/v1/customers/{customer_id}", json={"location": "Lagos"}, headers=auth_headers)
        assert updated.json()["data"]["location"] == "Lagos"
        assert updated.json()["data"]["name"] == CUSTOMER["name"]

        deleted = client.delete(f"/v1/customers/{customer_id}", headers=auth_headers)
        assert deleted.json()["message"] == "Customer deleted"
        assert db_session.query(Customer).count() == 0

    def test_other_owner_sees_not_found(self, client, auth_headers, make_user, login_headers):
        customer_id = _add_customer(client, auth_headers).json()["data"]["id"]
        other = make_user()

        response = client.get(f"/v1/customers/{customer_id}", headers=login_headers(other))

        assert response.status_code == 400
        assert response.json()["message"] == "Customer not found"


class TestCustomerFromUser:
    """POST /v1/customers/user"""

    def test_location_falls_back_to_state(self, client, auth_headers, make_user):
        user = make_user(state="Kano", country="Nigeria")

        response = client.post("/v1/customers/user", json={"user_id": user.id}, headers=auth_headers)

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["user_id"] == user.id
        assert data["location"] == "Kano"
        assert data["name"] == user.full_name
        assert data["phone_number"] == user.phone

    def test_body_location_wins(self, client, auth_headers, make_user):
        user = make_user(address="12 Marina", state="Lagos")

        response = client.post("/v1/customers/user", json={"user_id": user.id, "location": "Ikeja"}, headers=auth_headers)

        assert response.json()["data"]["location"] == "Ikeja"

    def test_rejections(self, client, auth_headers, test_user, make_user):
        no_location = make_user()
        no_phone = make_user(country="Ghana", phone=None)

        cases = [
            ({}, "user_id is required"),
            ({"user_id": test_user.id}, "You cannot add yourself as a customer"),
            ({"user_id": "missing"}, "User not found"),
            ({"user_id": no_location.id}, "Customer location is required"),
            ({"user_id": no_phone.id}, "Customer phone number is required"),
        ]
        for payload, message in cases:
            response = client.post("/v1/customers/user", json=payload, headers=auth_headers)
            assert response.status_code == 400
            assert response.json()["message"] == message

    def test_already_added(self, client, auth_headers, make_user):
        user = make_user(country="Nigeria")
        client.post("/v1/customers/user", json={"user_id": user.id}, headers=auth_headers)

        response = client.post("/v1/customers/user", json={"user_id": user.id}, headers=auth_headers)

        assert response.status_code == 400
        assert response.json()["message"] == "User already added as customer"


class TestInvoices:
    """Invoice issuing and updates"""

    def test_create_invoice_snapshots_customer(self, client, auth_headers):
        customer = _add_customer(client, auth_headers).json()["data"]

        response = client.post("/v1/invoices", json={
            "customer_id": customer["id"],
            "products": LINE_ITEMS,
            "total": 5000,
            "narration": "Two bags",
        }, headers=auth_headers)

        assert response.status_code == 200
        assert response.json()["message"] == "Invoice created"
        data = response.json()["data"]
        assert data["id"].startswith("INV-")
        assert data["customer_details"]["name"] == CUSTOMER["name"]
        assert data["products"] == LINE_ITEMS
        assert data["total"] == 5000
        assert data["tax"] is None
        assert data["auto_approve"] is False

    def test_snapshot_survives_customer_edit(self, client, auth_headers):
        customer_id = _add_customer(client, auth_headers).json()["data"]["id"]
        invoice_id = client.post(
            "/v1/invoices", json={"customer_id": customer_id, "products": LINE_ITEMS}, headers=auth_headers
        ).json()["data"]["id"]

        client.put(f"/v1/customers/{customer_id}", json={"name": "Renamed"}, headers=auth_headers)

        items = client.get("/v1/invoices", headers=auth_headers).json()["data"]["items"]
        assert items[0]["id"] == invoice_id
        assert items[0]["customer_details"]["name"] == CUSTOMER["name"]

    def test_create_requires_customer_and_products(self, client, auth_headers):
        customer_id = _add_customer(client, auth_headers).json()["data"]["id"]

        for payload in ({"products": LINE_ITEMS}, {"customer_id": customer_id, "products": []}):
            response = client.post("/v1/invoices", json=payload, headers=auth_headers)
            assert response.status_code == 400
            assert response.json()["message"] == "customer_id and products are required"

    def test_line_item_validation(self, client, auth_headers):
        customer_id = _add_customer(client, auth_headers).json()["data"]["id"]
        bad_items = [{"name": "Rice", "quantity": 0, "price": 10}]

        response = client.post("/v1/invoices", json={"customer_id": customer_id, "products": bad_items}, headers=auth_headers)

        assert response.status_code == 400
        assert response.json()["message"] == "Invalid request data"

    def test_customer_of_other_owner(self, client, auth_headers, make_user, login_headers):
        other = make_user()
        foreign_id = _add_customer(client, login_headers(other)).json()["data"]["id"]

        response = client.post("/v1/invoices", json={"customer_id": foreign_id, "products": LINE_ITEMS}, headers=auth_headers)

        assert response.status_code == 400
        assert response.json()["message"] == "Customer not found"

    def test_update_invoice(self, client, auth_headers):
        first = _add_customer(client, auth_headers).json()["data"]["id"]
        second = _add_customer(client, auth_headers, name="Ngozi", email="ngozi@example.com").json()["data"]["id"]
        invoice_id = client.post(
            "/v1/invoices", json={"customer_id": first, "products": LINE_ITEMS, "narration": "draft"}, headers=auth_headers
        ).json()["data"]["id"]

        response = client.put(f"/v1/invoices/{invoice_id}", json={
            "customer_id": second,
            "auto_approve": True,
        }, headers=auth_headers)

        assert response.status_code == 200
        assert response.json()["message"] == "Invoice updated"
        data = response.json()["data"]
        assert data["customer_id"] == second
        assert data["customer_details"]["name"] == "Ngozi"
        assert data["auto_approve"] is True
        assert data["narration"] == "draft"
        assert data["products"] == LINE_ITEMS

    def test_update_rejects_empty_products(self, client, auth_headers):
        customer_id = _add_customer(client, auth_headers).json()["data"]["id"]
        invoice_id = client.post(
            "/v1/invoices", json={"customer_id": customer_id, "products": LINE_ITEMS}, headers=auth_headers
        ).json()["data"]["id"]

        response = client.put(f"/v1/invoices/{invoice_id}", json={"products": []}, headers=auth_headers)

        assert response.status_code == 400
        assert response.json()["message"] == "products must be a non-empty array"

    def test_update_unknown_invoice(self, client, auth_headers):
        response = client.put("/v1/invoices/INV-1", json={"narration": "x"}, headers=auth_headers)

        assert response.status_code == 400
        assert response.json()["message"] == "Invoice not found"

    def test_customer_invoices(self, client, auth_headers):
        first = _add_customer(client, auth_headers).json()["data"]["id"]
        second = _add_customer(client, auth_headers, name="Ngozi", email="ngozi@example.com").json()["data"]["id"]
        client.post("/v1/invoices", json={"customer_id": first, "products": LINE_ITEMS}, headers=auth_headers)
        client.post("/v1/invoices", json={"customer_id": second, "products": LINE_ITEMS}, headers=auth_headers)

        response = client.get(f"/v1/invoices/customer/{first}", headers=auth_headers)

        assert response.json()["message"] == "Customer invoices fetched"
        items = response.json()["data"]["items"]
        assert [item["customer_id"] for item in items] == [first]


class TestInvoiceNumbering:
    """INV-<epoch ms> identifiers"""

    def test_steps_past_taken_id(self, db_session, test_user):
        db_session.add(Invoice(id="INV-1700000000000", owner_id=test_user.id, products=[]))
        db_session.commit()

        with patch("agerapp_api.invoice_routes.time.time", return_value=1700000000.0):
            assert next_invoice_id(db_session) == "INV-1700000000001"
