"""
Seed Service
Default admin account and the demo catalogue used for trying the POS out
"""

import logging
import os
from datetime import datetime, timedelta
from decimal import Decimal
from typing import Any, Dict

from sqlalchemy.orm import Session

from ..auth import get_password_hash
from ..models import Category, Drug, DrugBatch, Supplier, User, UserRole

logger = logging.getLogger(__name__)

DEFAULT_ADMIN_USERNAME = os.getenv("DEFAULT_ADMIN_USERNAME", "admin")
DEFAULT_ADMIN_PASSWORD = os.getenv("DEFAULT_ADMIN_PASSWORD", "admin123")
DEFAULT_ADMIN_EMAIL = os.getenv("DEFAULT_ADMIN_EMAIL", "admin@pharmapos.local")

DEMO_CATEGORIES = [
    {"name": "Antibiotics", "description": "Antimicrobial drugs"},
    {"name": "Painkillers", "description": "Pain relief medications"},
    {"name": "Vitamins", "description": "Vitamin supplements"},
]

DEMO_SUPPLIERS = [
    {"name": "MediCorp", "contact_person": "John Smith", "phone": "555-0101", "email": "john@medicorp.com"},
    {"name": "PharmaSupply", "contact_person": "Jane Doe", "phone": "555-0102", "email": "jane@pharmasupply.com"},
]

# (name, generic name, dosage, form, category)
DEMO_DRUGS = [
    ("Amoxicillin", "Amoxicillin", "500mg", "Capsules", "Antibiotics"),
    ("Paracetamol", "Acetaminophen", "500mg", "Tablets", "Painkillers"),
    ("Vitamin C", "Ascorbic Acid", "1000mg", "Tablets", "Vitamins"),
    ("Ibuprofen", "Ibuprofen", "400mg", "Tablets", "Painkillers"),
]

# (drug, batch number, days until expiry, quantity, cost, selling price, supplier)
DEMO_BATCHES = [
    ("Amoxicillin", "AMX001", 365, 100, "8.50", "12.00", "MediCorp"),
    ("Paracetamol", "PAR001", 330, 150, "3.25", "5.50", "MediCorp"),
    ("Vitamin C", "VIT001", 400, 75, "15.00", "22.50", "PharmaSupply"),
    ("Ibuprofen", "IBU001", 300, 200, "4.75", "8.00", "PharmaSupply"),
]


def ensure_default_admin(db: Session) -> bool:
    """Create the bootstrap admin when the user table is empty. Returns True if one was created."""
    if db.query(User.id).first() is not None:
        return False
    db.add(User(
        username=DEFAULT_ADMIN_USERNAME,
        email=DEFAULT_ADMIN_EMAIL,
        hashed_password=get_password_hash(DEFAULT_ADMIN_PASSWORD),
        role=UserRole.ADMIN.value,
        first_name="System",
        last_name="Administrator",
    ))
    db.commit()
    logger.warning(f"Created default admin user '{DEFAULT_ADMIN_USERNAME}'; change its password")
    return True


def seed_demo_data(db: Session) -> Dict[str, Any]:
    """Insert the demo catalogue. Rows that already exist are left alone."""
    created = {"categories": 0, "suppliers": 0, "drugs": 0, "batches": 0}

    categories = {}
    for data in DEMO_CATEGORIES:
        category = db.query(Category).filter(Category.name == data["name"]).first()
        if category is None:
            category = Category(**data)
            db.add(category)
            created["categories"] += 1
        categories[data["name"]] = category

    suppliers = {}
    for data in DEMO_SUPPLIERS:
        supplier = db.query(Supplier).filter(Supplier.name == data["name"]).first()
        if supplier is None:
            supplier = Supplier(**data)
            db.add(supplier)
            created["suppliers"] += 1
        suppliers[data["name"]] = supplier
    db.flush()

    drugs = {}
    for name, generic_name, dosage, form, category_name in DEMO_DRUGS:
        drug = db.query(Drug).filter(Drug.name == name).first()
        if drug is None:
            drug = Drug(
                name=name,
                generic_name=generic_name,
                dosage=dosage,
                form=form,
                category_id=categories[category_name].id,
            )
            db.add(drug)
            created["drugs"] += 1
        drugs[name] = drug
    db.flush()

    today = datetime.utcnow().replace(hour=0, minute=0, second=0, microsecond=0)
    for drug_name, batch_number, days, quantity, cost, price, supplier_name in DEMO_BATCHES:
        drug = drugs[drug_name]
        exists = db.query(DrugBatch.id).filter(
            DrugBatch.drug_id == drug.id,
            DrugBatch.batch_number == batch_number,
        ).first()
        if exists:
            continue
        db.add(DrugBatch(
            drug_id=drug.id,
            batch_number=batch_number,
            expiry_date=today + timedelta(days=days),
            quantity=quantity,
            cost_price=Decimal(cost),
            selling_price=Decimal(price),
            supplier_id=suppliers[supplier_name].id,
        ))
        created["batches"] += 1

    db.commit()
    logger.info(f"Demo data seeded: {created}")
    return created
