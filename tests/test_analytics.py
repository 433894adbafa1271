"""
Tests for analytics service and dashboard routes
"""
from datetime import datetime

import pytest

from agerapp_api.database import Customer, Invoice, Product, RestockHistory
from agerapp_api.services.analytics_service import (
    AnalyticsService,
    month_bounds,
    percent_change,
    previous_month,
)


class TestHelpers:
    """Date and percentage helpers"""

    @pytest.mark.parametrize("previous,current,expected", [
        (0, 0, 0),
        (0, 4, 100),
        (4, 6, 50),
        (4, 2, -50),
    ])
    def test_percent_change(self, previous, current, expected):
        assert percent_change(previous, current) == expected

    def test_december_bounds(self):
        assert month_bounds(2025, 12) == (datetime(2025, 12, 1), datetime(2026, 1, 1))

    def test_previous_month_wraps_year(self):
        assert previous_month(2026, 1) == (2025, 12)
        assert previous_month(2026, 7) == (2026, 6)


class TestAnalyticsService:
    """Owner-scoped aggregates"""

    @pytest.fixture
    def owner(self, make_user):
        return make_user()

    def _invoice(self, db_session, owner, n, total, created_at):
        db_session.add(Invoice(
            id=f"INV-{n}",
            owner_id=owner.id,
            products=[],
            total=total,
            created_at=created_at,
            updated_at=created_at,
        ))

    def test_monthly_totals(self, db_session, owner, make_user):
        self._invoice(db_session, owner, 1, 100, datetime(2026, 1, 5))
        self._invoice(db_session, owner, 2, 50, datetime(2026, 1, 20))
        self._invoice(db_session, owner, 3, None, datetime(2026, 3, 2))
        self._invoice(db_session, owner, 4, 999, datetime(2025, 12, 31))
        self._invoice(db_session, make_user(), 5, 777, datetime(2026, 1, 6))
        db_session.commit()

        totals = AnalyticsService(db_session, owner.id).monthly_invoice_totals(2026)

        assert len(totals) == 12
        assert totals[0] == {"month": "January", "total": 150.0}
        assert totals[2] == {"month": "March", "total": 0.0}
        assert sum(entry["total"] for entry in totals) == 150.0

    def test_products_worth(self, db_session, owner):
        db_session.add_all([
            Product(owner_id=owner.id, name="Rice", quantity=3, price=1000),
            Product(owner_id=owner.id, name="Salt", quantity=0, price=200),
        ])
        db_session.commit()

        assert AnalyticsService(db_session, owner.id).products_worth() == 3000.0

    def test_invoice_analytics_current_month(self, db_session, owner):
        self._invoice(db_session, owner, 1, 400, datetime(2026, 5, 2))
        self._invoice(db_session, owner, 2, 100, datetime(2026, 4, 30))
        db_session.commit()

        data = AnalyticsService(db_session, owner.id).invoice_analytics(2026, now=datetime(2026, 5, 15))

        assert data["year"] == 2026
        assert data["currentMonthInvoicesWorth"] == 400.0
        assert data["productsWorth"] == 0.0

    def test_store_stats(self, db_session, owner):
        self._invoice(db_session, owner, 1, 10, datetime(2026, 2, 3))
        self._invoice(db_session, owner, 2, 10, datetime(2026, 2, 27))
        self._invoice(db_session, owner, 3, 10, datetime(2026, 3, 1))
        db_session.commit()

        stats = AnalyticsService(db_session, owner.id).store_stats(2026, 2)

        assert stats["monthLabel"] == "February"
        assert stats["monthlyCustomers"] == 2

    def test_operations_summary(self, db_session, owner):
        product = Product(owner_id=owner.id, name="Rice", quantity=1, price=1)
        db_session.add(product)
        db_session.add(Customer(owner_id=owner.id, name="C", phone_number="1", location="L"))
        db_session.flush()
        for day in (3, 10):
            db_session.add(RestockHistory(
                product_id=product.id, owner_id=owner.id, quantity=1, created_at=datetime(2026, 4, day)
            ))
        db_session.add(RestockHistory(
            product_id=product.id, owner_id=owner.id, quantity=1, created_at=datetime(2026, 5, 4)
        ))
        self._invoice(db_session, owner, 1, 10, datetime(2026, 5, 1))
        db_session.commit()

        summary = AnalyticsService(db_session, owner.id).operations_summary(now=datetime(2026, 5, 20))

        assert summary == {
            "totalProducts": 1,
            "totalCustomers": 1,
            "restocksChangePercent": -50.0,
            "invoicesChangePercent": 100,
        }


class TestAnalyticsRoutes:
    """HTTP surface"""

    def test_invoice_analytics_defaults_to_current_year(self, client, auth_headers):
        response = client.get("/v1/analytics/invoices", headers=auth_headers)

        assert response.status_code == 200
        assert response.json()["message"] == "Invoice analytics fetched"
        data = response.json()["data"]
        assert data["year"] == datetime.utcnow().year
        assert len(data["monthlyTotals"]) == 12

    def test_store_stats(self, client, auth_headers):
        response = client.get("/v1/analytics/store", params={"year": 2026, "month": 2}, headers=auth_headers)

        assert response.status_code == 200
        assert response.json()["data"]["monthLabel"] == "February"

    @pytest.mark.parametrize("month", ["0", "13", "abc"])
    def test_store_stats_invalid_month(self, client, auth_headers, month):
        response = client.get("/v1/analytics/store", params={"month": month}, headers=auth_headers)

        assert response.status_code == 400
        assert response.json()["message"] == "Invalid month. Use 1-12."

    @pytest.mark.parametrize("path,params", [
        ("/v1/analytics/invoices", {"year": 9999}),
        ("/v1/analytics/invoices", {"year": 0}),
        ("/v1/analytics/store", {"year": 10000, "month": 1}),
        ("/v1/analytics/store", {"year": -5, "month": 1}),
    ])
    def test_year_out_of_range(self, client, auth_headers, path, params):
        response = client.get(path, params=params, headers=auth_headers)

        assert response.status_code == 400
        assert response.json()["message"] == "Invalid year"

    def test_last_supported_year(self, client, auth_headers):
        response = client.get("/v1/analytics/store", params={"year": 9998, "month": 12}, headers=auth_headers)

        assert response.status_code == 200
        assert response.json()["data"]["year"] == 9998

    def test_operations_summary(self, client, auth_headers):
        response = client.get("/v1/operations/summary", headers=auth_headers)

        assert response.status_code == 200
        assert response.json()["data"] == {
            "totalProducts": 0,
            "totalCustomers": 0,
            "restocksChangePercent": 0,
            "invoicesChangePercent": 0,
        }

    def test_requires_login(self, client, db_session):
        assert client.get("/v1/operations/summary").status_code == 401
