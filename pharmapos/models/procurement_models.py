from sqlalchemy import Column, Integer, String, ForeignKey, Numeric, DateTime
from sqlalchemy.orm import relationship
from datetime import datetime
from enum import Enum
from ..database import Base

# --- PROCUREMENT ---

class PurchaseStatus(str, Enum):
    PENDING = "pending"
    RECEIVED = "received"
    CANCELLED = "cancelled"

class Purchase(Base):
    __tablename__ = "purchases"
    id = Column(Integer, primary_key=True, index=True)
    purchase_number = Column(String(50), unique=True, index=True, nullable=False)
    supplier_id = Column(Integer, ForeignKey("suppliers.id"), nullable=False)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    total_amount = Column(Numeric(10, 2), nullable=False)
    status = Column(String(20), default=PurchaseStatus.PENDING.value) # pending, received, cancelled
    order_date = Column(DateTime, default=datetime.utcnow)
    received_date = Column(DateTime, nullable=True)

    items = relationship("PurchaseItem", back_populates="purchase", order_by="PurchaseItem.id")
    supplier = relationship("Supplier", back_populates="purchases")
    user = relationship("User", back_populates="purchases")

class PurchaseItem(Base):
    __tablename__ = "purchase_items"
    id = Column(Integer, primary_key=True, index=True)
    purchase_id = Column(Integer, ForeignKey("purchases.id"), nullable=False, index=True)
    drug_id = Column(Integer, ForeignKey("drugs.id"), nullable=False)
    quantity = Column(Integer, nullable=False)
    unit_cost = Column(Numeric(10, 2), nullable=False)
    total_cost = Column(Numeric(10, 2), nullable=False)
    selling_price = Column(Numeric(10, 2), nullable=True) # Falls back to unit_cost on receipt
    batch_number = Column(String(50), nullable=False)
    expiry_date = Column(DateTime, nullable=False)

    purchase = relationship("Purchase", back_populates="items")
    drug = relationship("Drug")
