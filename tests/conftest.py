import os

# Must be set before pharmapos is imported
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["BCRYPT_ROUNDS"] = "4"

from datetime import datetime, timedelta
from decimal import Decimal
from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient

from pharmapos.main import app
from pharmapos.database import Base, SessionLocal, engine
from pharmapos.auth import create_user_token, get_password_hash
from pharmapos.models import Category, Drug, DrugBatch, Supplier, User, UserRole

DEFAULT_PASSWORD = "secret123"


@pytest.fixture(autouse=True)
def fresh_schema():
    """Every test starts from empty tables."""
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture
def db():
    session = SessionLocal()
    yield session
    session.close()


@pytest.fixture
def client():
    # Not used as a context manager so the startup hook does not run
    return TestClient(app)


def make_user(db, username: str, role: UserRole, password: str = DEFAULT_PASSWORD, is_active: bool = True) -> User:
    user = User(
        username=username,
        email=f"{username}@example.com",
        hashed_password=get_password_hash(password),
        role=role.value,
        is_active=is_active,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def auth_header(user: User) -> dict:
    return {"Authorization": f"Bearer {create_user_token(user)}"}


@pytest.fixture
def admin(db):
    return make_user(db, "admin", UserRole.ADMIN)


@pytest.fixture
def pharmacist(db):
    return make_user(db, "pharmacist", UserRole.PHARMACIST)


@pytest.fixture
def cashier(db):
    return make_user(db, "cashier", UserRole.CASHIER)


def make_batch(db, drug: Drug, batch_number: str, quantity: int, price: str = "12.00",
               expires_in_days: int = 365, supplier: Supplier = None) -> DrugBatch:
    batch = DrugBatch(
        drug_id=drug.id,
        batch_number=batch_number,
        expiry_date=datetime.utcnow() + timedelta(days=expires_in_days),
        quantity=quantity,
        cost_price=Decimal(price) / 2,
        selling_price=Decimal(price),
        supplier_id=supplier.id if supplier else None,
    )
    db.add(batch)
    db.commit()
    db.refresh(batch)
    return batch


@pytest.fixture
def catalog(db):
    """One category, supplier and drug with a 100-unit batch priced at 12.00."""
    category = Category(name="Antibiotics", description="Antimicrobial drugs")
    supplier = Supplier(name="MediCorp", contact_person="John Smith", phone="555-0101")
    db.add_all([category, supplier])
    db.commit()

    drug = Drug(name="Amoxicillin", generic_name="Amoxicillin", dosage="500mg", form="Capsules",
                category_id=category.id, barcode="AMX-500")
    db.add(drug)
    db.commit()

    batch = make_batch(db, drug, "AMX001", 100, "12.00", supplier=supplier)
    return SimpleNamespace(category=category, supplier=supplier, drug=drug, batch=batch)


def batch_quantity(db, batch_id: int) -> int:
    db.expire_all()
    return db.get(DrugBatch, batch_id).quantity


def sale_payload(lines, tax="0.00", discount="0.00", amount_received=None, **extra) -> dict:
    """Build a reconciled POST /sales body from (batch_id, quantity, unit_price) tuples."""
    items = []
    subtotal = Decimal("0")
    for batch_id, quantity, unit_price in lines:
        total = Decimal(unit_price) * quantity
        subtotal += total
        items.append({
            "drugBatchId": batch_id,
            "quantity": quantity,
            "unitPrice": unit_price,
            "totalPrice": str(total),
        })
    total_amount = subtotal + Decimal(tax) - Decimal(discount)
    body = {
        "items": items,
        "subtotal": str(subtotal),
        "taxAmount": tax,
        "discountAmount": discount,
        "totalAmount": str(total_amount),
        "paymentMethod": "cash",
    }
    if amount_received is not None:
        body["amountReceived"] = amount_received
    body.update(extra)
    return body
