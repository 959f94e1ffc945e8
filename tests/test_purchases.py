from datetime import datetime, timedelta
from decimal import Decimal

from pharmapos.models import DrugBatch, Purchase, PurchaseItem

from conftest import auth_header, batch_quantity


def purchase_body(supplier_id, items):
    total = sum(Decimal(i["totalCost"]) for i in items)
    return {"purchase": {"supplierId": supplier_id, "totalAmount": str(total)}, "items": items}


def item(drug_id, batch_number, quantity, unit_cost, selling_price=None):
    body = {
        "drugId": drug_id,
        "quantity": quantity,
        "unitCost": unit_cost,
        "totalCost": str(Decimal(unit_cost) * quantity),
        "batchNumber": batch_number,
        "expiryDate": (datetime.utcnow() + timedelta(days=400)).isoformat(),
    }
    if selling_price is not None:
        body["sellingPrice"] = selling_price
    return body


class TestCreatePurchase:
    """POST /api/purchases"""

    def test_create_pending_purchase(self, client, db, pharmacist, catalog):
        body = purchase_body(catalog.supplier.id, [item(catalog.drug.id, "AMX002", 50, "8.00", "12.50")])

        response = client.post("/api/purchases", json=body, headers=auth_header(pharmacist))

        assert response.status_code == 201
        data = response.json()
        assert data["purchaseNumber"].startswith("PUR-")
        assert data["status"] == "pending"
        assert data["userId"] == pharmacist.id
        assert len(data["items"]) == 1
        assert Decimal(data["totalAmount"]) == Decimal("400.00")
        # Nothing reaches stock until the purchase is received
        db.expire_all()
        assert db.query(DrugBatch).count() == 1

    def test_cashier_cannot_purchase(self, client, cashier, catalog):
        body = purchase_body(catalog.supplier.id, [item(catalog.drug.id, "AMX002", 5, "8.00")])
        response = client.post("/api/purchases", json=body, headers=auth_header(cashier))
        assert response.status_code == 403

    def test_unknown_drug_writes_nothing(self, client, db, admin, catalog):
        body = purchase_body(catalog.supplier.id, [item(catalog.drug.id, "AMX002", 5, "8.00"), item(999, "X1", 1, "1.00")])

        response = client.post("/api/purchases", json=body, headers=auth_header(admin))

        assert response.status_code == 404
        db.expire_all()
        assert db.query(Purchase).count() == 0
        assert db.query(PurchaseItem).count() == 0

    def test_unknown_supplier(self, client, admin, catalog):
        body = purchase_body(999, [item(catalog.drug.id, "AMX002", 5, "8.00")])
        assert client.post("/api/purchases", json=body, headers=auth_header(admin)).status_code == 404

    def test_items_endpoint(self, client, admin, cashier, catalog):
        body = purchase_body(catalog.supplier.id, [
            item(catalog.drug.id, "AMX002", 5, "8.00"),
            item(catalog.drug.id, "AMX003", 6, "8.00"),
        ])
        purchase_id = client.post("/api/purchases", json=body, headers=auth_header(admin)).json()["id"]

        response = client.get(f"/api/purchases/{purchase_id}/items", headers=auth_header(cashier))

        assert [i["batchNumber"] for i in response.json()] == ["AMX002", "AMX003"]


class TestReceivePurchase:
    """POST /api/purchases/{id}/receive"""

    def create(self, client, user, supplier_id, items):
        response = client.post("/api/purchases", json=purchase_body(supplier_id, items), headers=auth_header(user))
        assert response.status_code == 201
        return response.json()["id"]

    def test_receive_creates_new_batch(self, client, db, pharmacist, catalog):
        purchase_id = self.create(client, pharmacist, catalog.supplier.id, [
            item(catalog.drug.id, "AMX900", 30, "8.00", "13.00"),
        ])

        response = client.post(f"/api/purchases/{purchase_id}/receive", headers=auth_header(pharmacist))

        assert response.status_code == 200
        assert response.json()["status"] == "received"
        assert response.json()["receivedDate"] is not None
        db.expire_all()
        batch = db.query(DrugBatch).filter(DrugBatch.batch_number == "AMX900").one()
        assert batch.quantity == 30
        assert batch.cost_price == Decimal("8.00")
        assert batch.selling_price == Decimal("13.00")
        assert batch.supplier_id == catalog.supplier.id

    def test_selling_price_defaults_to_cost(self, client, db, admin, catalog):
        purchase_id = self.create(client, admin, catalog.supplier.id, [item(catalog.drug.id, "AMX901", 10, "7.25")])

        client.post(f"/api/purchases/{purchase_id}/receive", headers=auth_header(admin))

        db.expire_all()
        batch = db.query(DrugBatch).filter(DrugBatch.batch_number == "AMX901").one()
        assert batch.selling_price == Decimal("7.25")

    def test_receive_tops_up_existing_batch(self, client, db, admin, catalog):
        purchase_id = self.create(client, admin, catalog.supplier.id, [item(catalog.drug.id, "AMX001", 25, "8.50")])

        client.post(f"/api/purchases/{purchase_id}/receive", headers=auth_header(admin))

        assert batch_quantity(db, catalog.batch.id) == 125
        assert db.query(DrugBatch).count() == 1

    def test_repeated_batch_number_in_one_purchase(self, client, db, admin, catalog):
        purchase_id = self.create(client, admin, catalog.supplier.id, [
            item(catalog.drug.id, "AMX950", 10, "8.00"),
            item(catalog.drug.id, "AMX950", 5, "8.00"),
        ])

        client.post(f"/api/purchases/{purchase_id}/receive", headers=auth_header(admin))

        db.expire_all()
        batch = db.query(DrugBatch).filter(DrugBatch.batch_number == "AMX950").one()
        assert batch.quantity == 15

    def test_cannot_receive_twice(self, client, db, admin, catalog):
        purchase_id = self.create(client, admin, catalog.supplier.id, [item(catalog.drug.id, "AMX001", 25, "8.50")])

        client.post(f"/api/purchases/{purchase_id}/receive", headers=auth_header(admin))
        again = client.post(f"/api/purchases/{purchase_id}/receive", headers=auth_header(admin))

        assert again.status_code == 409
        assert batch_quantity(db, catalog.batch.id) == 125

    def test_cancelled_purchase_cannot_be_received(self, client, db, admin, catalog):
        purchase_id = self.create(client, admin, catalog.supplier.id, [item(catalog.drug.id, "AMX001", 25, "8.50")])

        cancelled = client.put(f"/api/purchases/{purchase_id}", json={"status": "cancelled"}, headers=auth_header(admin))
        received = client.post(f"/api/purchases/{purchase_id}/receive", headers=auth_header(admin))

        assert cancelled.status_code == 200
        assert cancelled.json()["status"] == "cancelled"
        assert received.status_code == 409
        assert batch_quantity(db, catalog.batch.id) == 100

    def test_received_purchase_cannot_be_cancelled(self, client, admin, catalog):
        purchase_id = self.create(client, admin, catalog.supplier.id, [item(catalog.drug.id, "AMX001", 1, "8.50")])
        client.post(f"/api/purchases/{purchase_id}/receive", headers=auth_header(admin))

        response = client.put(f"/api/purchases/{purchase_id}", json={"status": "cancelled"}, headers=auth_header(admin))

        assert response.status_code == 409

    def test_status_update_cannot_receive(self, client, admin, catalog):
        purchase_id = self.create(client, admin, catalog.supplier.id, [item(catalog.drug.id, "AMX001", 1, "8.50")])

        response = client.put(f"/api/purchases/{purchase_id}", json={"status": "received"}, headers=auth_header(admin))

        assert response.status_code == 409

    def test_unknown_purchase(self, client, admin):
        assert client.post("/api/purchases/404/receive", headers=auth_header(admin)).status_code == 404
