from sqlalchemy import Column, Integer, String, Boolean, ForeignKey, Numeric, Text, DateTime, CheckConstraint
from sqlalchemy.orm import relationship
from datetime import datetime
from ..database import Base

# --- PHARMACY CORE ---

class Category(Base):
    __tablename__ = "categories"
    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), unique=True, index=True, nullable=False) # Antibiotics, Painkillers...
    description = Column(Text, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)

    drugs = relationship("Drug", back_populates="category")

class Supplier(Base):
    __tablename__ = "suppliers"
    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), index=True, nullable=False)
    contact_person = Column(String(100), nullable=True)
    email = Column(String(100), nullable=True)
    phone = Column(String(20), nullable=True)
    address = Column(Text, nullable=True)
    is_active = Column(Boolean, default=True)
    created_at = Column(DateTime, default=datetime.utcnow)

    batches = relationship("DrugBatch", back_populates="supplier")
    purchases = relationship("Purchase", back_populates="supplier")

class Drug(Base):
    __tablename__ = "drugs"
    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), index=True, nullable=False)
    generic_name = Column(String(100), nullable=True)
    brand = Column(String(100), nullable=True)
    category_id = Column(Integer, ForeignKey("categories.id"), nullable=True)
    dosage = Column(String(50), nullable=True)
    form = Column(String(50), nullable=True) # tablet, capsule, syrup...
    description = Column(Text, nullable=True)
    barcode = Column(String(50), unique=True, index=True, nullable=True)
    requires_prescription = Column(Boolean, default=False)
    is_active = Column(Boolean, default=True)
    created_at = Column(DateTime, default=datetime.utcnow)

    category = relationship("Category", back_populates="drugs")
    batches = relationship("DrugBatch", back_populates="drug")

class DrugBatch(Base):
    """A dated, priced lot of one drug; inventory is tracked per batch."""
    __tablename__ = "drug_batches"
    __table_args__ = (
        CheckConstraint("quantity >= 0", name="ck_drug_batches_quantity_non_negative"),
    )
    id = Column(Integer, primary_key=True, index=True)
    drug_id = Column(Integer, ForeignKey("drugs.id"), nullable=False, index=True)
    batch_number = Column(String(50), index=True, nullable=False)
    expiry_date = Column(DateTime, nullable=False)
    quantity = Column(Integer, nullable=False)
    cost_price = Column(Numeric(10, 2), nullable=False)
    selling_price = Column(Numeric(10, 2), nullable=False)
    supplier_id = Column(Integer, ForeignKey("suppliers.id"), nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)

    drug = relationship("Drug", back_populates="batches")
    supplier = relationship("Supplier", back_populates="batches")

class Setting(Base):
    __tablename__ = "settings"
    id = Column(Integer, primary_key=True, index=True)
    key = Column(String(100), unique=True, index=True, nullable=False)
    value = Column(Text, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
