from datetime import datetime, timedelta
from decimal import Decimal

from fastapi.testclient import TestClient

from pharmapos.main import app
from pharmapos.models import Sale
from pharmapos.services import StorageService

from conftest import auth_header, make_batch, sale_payload


class TestDashboard:
    """GET /api/dashboard/*"""

    def test_stats_on_empty_store(self, client, cashier):
        response = client.get("/api/dashboard/stats", headers=auth_header(cashier))

        assert response.status_code == 200
        data = response.json()
        assert Decimal(data["todaysSales"]) == Decimal("0")
        assert data["totalItems"] == 0
        assert data["lowStockCount"] == 0
        assert data["expiringCount"] == 0

    def test_stats_after_sale(self, client, db, cashier, catalog):
        make_batch(db, catalog.drug, "AMX-LOW", 4, expires_in_days=7)
        client.post("/api/sales", json=sale_payload([(catalog.batch.id, 10, "12.00")]), headers=auth_header(cashier))

        data = client.get("/api/dashboard/stats", headers=auth_header(cashier)).json()

        assert Decimal(data["todaysSales"]) == Decimal("120.00")
        assert data["totalItems"] == 94
        assert data["lowStockCount"] == 1
        assert data["expiringCount"] == 1

    def test_yesterdays_sales_are_excluded(self, db, cashier, catalog):
        db.add(Sale(
            receipt_number="POS-OLD",
            user_id=cashier.id,
            subtotal=Decimal("50.00"),
            tax_amount=Decimal("0.00"),
            discount_amount=Decimal("0.00"),
            total_amount=Decimal("50.00"),
            payment_method="cash",
            created_at=datetime.utcnow() - timedelta(days=1, hours=1),
        ))
        db.commit()

        stats = StorageService.dashboard_aggregate(db)

        assert stats["todays_sales"] == Decimal("0.00")
        assert StorageService.todays_sales(db) == []

    def test_recent_sales_capped_at_ten(self, client, cashier, catalog):
        for _ in range(12):
            client.post("/api/sales", json=sale_payload([(catalog.batch.id, 1, "12.00")]), headers=auth_header(cashier))

        response = client.get("/api/dashboard/recent-sales", headers=auth_header(cashier))

        assert response.status_code == 200
        assert len(response.json()) == 10

    def test_alerts_capped_at_five(self, client, db, cashier, catalog):
        for i in range(7):
            make_batch(db, catalog.drug, f"LOW{i}", i, expires_in_days=5 + i)

        response = client.get("/api/dashboard/alerts", headers=auth_header(cashier))

        data = response.json()
        assert len(data["lowStock"]) == 5
        assert len(data["expiring"]) == 5
        assert data["lowStock"][0]["quantity"] == 0

    def test_requires_login(self, client):
        assert client.get("/api/dashboard/stats").status_code == 401

    def test_unexpected_errors_become_500(self, cashier, monkeypatch):
        def explode(*args, **kwargs):
            raise RuntimeError("boom")

        monkeypatch.setattr(StorageService, "dashboard_aggregate", staticmethod(explode))
        client = TestClient(app, raise_server_exceptions=False)

        response = client.get("/api/dashboard/stats", headers=auth_header(cashier))

        assert response.status_code == 500
        assert response.json() == {"code": "internal_error", "message": "Internal server error"}

    def test_todays_sales_limit_is_applied_in_query(self, db, cashier, catalog):
        for i in range(4):
            add_sale(db, cashier, f"POS-T{i}", datetime.utcnow() - timedelta(seconds=i))

        latest = StorageService.todays_sales(db, limit=2)

        assert [s.receipt_number for s in latest] == ["POS-T0", "POS-T1"]


def add_sale(db, user, receipt_number, created_at):
    db.add(Sale(
        receipt_number=receipt_number,
        user_id=user.id,
        subtotal=Decimal("10.00"),
        tax_amount=Decimal("0.00"),
        discount_amount=Decimal("0.00"),
        total_amount=Decimal("10.00"),
        payment_method="cash",
        created_at=created_at,
    ))
    db.commit()


class TestSaleListing:
    """GET /api/sales with startDate and endDate"""

    def seed(self, db, user):
        now = datetime.utcnow()
        add_sale(db, user, "POS-OLD", now - timedelta(days=10))
        add_sale(db, user, "POS-MID", now - timedelta(days=5))
        add_sale(db, user, "POS-NEW", now - timedelta(hours=1))
        return now

    def list_sales(self, client, user, **params):
        response = client.get("/api/sales", params=params, headers=auth_header(user))
        assert response.status_code == 200
        return [s["receiptNumber"] for s in response.json()]

    def test_start_date_alone_filters(self, client, db, cashier):
        now = self.seed(db, cashier)
        start = (now - timedelta(days=7)).isoformat()

        assert self.list_sales(client, cashier, startDate=start) == ["POS-NEW", "POS-MID"]

    def test_end_date_alone_filters(self, client, db, cashier):
        now = self.seed(db, cashier)
        end = (now - timedelta(days=7)).isoformat()

        assert self.list_sales(client, cashier, endDate=end) == ["POS-OLD"]

    def test_both_bounds(self, client, db, cashier):
        now = self.seed(db, cashier)
        start = (now - timedelta(days=7)).isoformat()
        end = (now - timedelta(days=2)).isoformat()

        assert self.list_sales(client, cashier, startDate=start, endDate=end) == ["POS-MID"]

    def test_inverted_range_rejected(self, client, db, cashier):
        now = datetime.utcnow()
        response = client.get("/api/sales", params={
            "startDate": now.isoformat(),
            "endDate": (now - timedelta(days=1)).isoformat(),
        }, headers=auth_header(cashier))

        assert response.status_code == 400
