"""
Persistence gateway.

Generic get/list/create/update/delete over any model plus the derived
read queries used by the dashboard, alerts and search endpoints.
Writes commit immediately; multi-step workflows live in their own services.
"""

import os
from datetime import datetime, timedelta
from decimal import Decimal
from typing import Any, Dict, List, Optional, Type, TypeVar

from sqlalchemy import asc, desc, func, or_
from sqlalchemy.orm import Session

from ..database import Base
from ..exceptions import NotFound
from ..models import DrugBatch, Drug, Sale, SaleItem, PurchaseItem, Setting, User

ModelT = TypeVar("ModelT", bound=Base)

LOW_STOCK_THRESHOLD = int(os.getenv("LOW_STOCK_THRESHOLD", 10))
EXPIRY_WINDOW_DAYS = int(os.getenv("EXPIRY_WINDOW_DAYS", 30))


def day_bounds(now: Optional[datetime] = None):
    """Start of today and start of tomorrow."""
    now = now or datetime.utcnow()
    start = now.replace(hour=0, minute=0, second=0, microsecond=0)
    return start, start + timedelta(days=1)


class StorageService:
    """Service class for plain persistence operations"""

    # --- Generic CRUD ---

    @staticmethod
    def get(db: Session, model: Type[ModelT], obj_id: int) -> Optional[ModelT]:
        return db.get(model, obj_id)

    @staticmethod
    def get_or_404(db: Session, model: Type[ModelT], obj_id: int) -> ModelT:
        obj = db.get(model, obj_id)
        if obj is None:
            raise NotFound(f"{model.__name__} {obj_id} not found")
        return obj

    @staticmethod
    def list(db: Session, model: Type[ModelT], order_by=None, descending: bool = False) -> List[ModelT]:
        query = db.query(model)
        if order_by is not None:
            query = query.order_by(desc(order_by) if descending else asc(order_by))
        return query.all()

    @staticmethod
    def create(db: Session, model: Type[ModelT], fields: Dict[str, Any]) -> ModelT:
        obj = model(**fields)
        db.add(obj)
        db.commit()
        db.refresh(obj)
        return obj

    @staticmethod
    def update(db: Session, model: Type[ModelT], obj_id: int, fields: Dict[str, Any]) -> ModelT:
        obj = StorageService.get_or_404(db, model, obj_id)
        for field, value in fields.items():
            setattr(obj, field, value)
        db.commit()
        db.refresh(obj)
        return obj

    @staticmethod
    def delete(db: Session, model: Type[ModelT], obj_id: int) -> None:
        obj = StorageService.get_or_404(db, model, obj_id)
        db.delete(obj)
        db.commit()

    # --- Users ---

    @staticmethod
    def get_user_by_username(db: Session, username: str) -> Optional[User]:
        return db.query(User).filter(User.username == username).first()

    # --- Drugs & batches ---

    @staticmethod
    def search_drugs(db: Session, query: str) -> List[Drug]:
        pattern = f"%{query.strip()}%"
        return db.query(Drug).filter(
            or_(
                Drug.name.ilike(pattern),
                Drug.generic_name.ilike(pattern),
                Drug.brand.ilike(pattern),
                Drug.barcode.ilike(pattern),
            )
        ).order_by(asc(Drug.name)).all()

    @staticmethod
    def batches_for_drug(db: Session, drug_id: int) -> List[DrugBatch]:
        return db.query(DrugBatch).filter(DrugBatch.drug_id == drug_id).order_by(asc(DrugBatch.expiry_date)).all()

    @staticmethod
    def batches_with_quantity_at_most(db: Session, threshold: int) -> List[DrugBatch]:
        return db.query(DrugBatch).filter(DrugBatch.quantity <= threshold).order_by(asc(DrugBatch.quantity)).all()

    @staticmethod
    def batches_expiring_within_days(db: Session, days: int) -> List[DrugBatch]:
        # Already-expired batches are included
        cutoff = datetime.utcnow() + timedelta(days=days)
        return db.query(DrugBatch).filter(DrugBatch.expiry_date <= cutoff).order_by(asc(DrugBatch.expiry_date)).all()

    # --- Sales ---

    @staticmethod
    def sale_items(db: Session, sale_id: int) -> List[SaleItem]:
        return db.query(SaleItem).filter(SaleItem.sale_id == sale_id).order_by(asc(SaleItem.id)).all()

    @staticmethod
    def sales_in_date_range(db: Session, start: Optional[datetime] = None, end: Optional[datetime] = None) -> List[Sale]:
        """Sales newest first; a missing bound leaves that side open."""
        query = db.query(Sale)
        if start is not None:
            query = query.filter(Sale.created_at >= start)
        if end is not None:
            query = query.filter(Sale.created_at <= end)
        return query.order_by(desc(Sale.created_at)).all()

    @staticmethod
    def todays_sales(db: Session, limit: Optional[int] = None) -> List[Sale]:
        start, end = day_bounds()
        query = db.query(Sale).filter(
            Sale.created_at >= start,
            Sale.created_at < end,
        ).order_by(desc(Sale.created_at))
        if limit is not None:
            query = query.limit(limit)
        return query.all()

    # --- Purchases ---

    @staticmethod
    def purchase_items(db: Session, purchase_id: int) -> List[PurchaseItem]:
        return db.query(PurchaseItem).filter(PurchaseItem.purchase_id == purchase_id).order_by(asc(PurchaseItem.id)).all()

    # --- Settings ---

    @staticmethod
    def get_setting(db: Session, key: str) -> Optional[Setting]:
        return db.query(Setting).filter(Setting.key == key).first()

    @staticmethod
    def set_setting(db: Session, key: str, value: str) -> Setting:
        setting = StorageService.get_setting(db, key)
        if setting is None:
            setting = Setting(key=key, value=value)
            db.add(setting)
        else:
            setting.value = value
            setting.updated_at = datetime.utcnow()
        db.commit()
        db.refresh(setting)
        return setting

    # --- Dashboard ---

    @staticmethod
    def dashboard_aggregate(
        db: Session,
        low_stock_threshold: int = LOW_STOCK_THRESHOLD,
        expiry_days: int = EXPIRY_WINDOW_DAYS,
    ) -> Dict[str, Any]:
        start, end = day_bounds()
        todays_sales = db.query(func.coalesce(func.sum(Sale.total_amount), 0)).filter(
            Sale.created_at >= start,
            Sale.created_at < end,
        ).scalar()
        total_items = db.query(func.coalesce(func.sum(DrugBatch.quantity), 0)).scalar()
        low_stock_count = db.query(func.count(DrugBatch.id)).filter(
            DrugBatch.quantity <= low_stock_threshold
        ).scalar()
        expiring_count = db.query(func.count(DrugBatch.id)).filter(
            DrugBatch.expiry_date <= datetime.utcnow() + timedelta(days=expiry_days)
        ).scalar()

        return {
            "todays_sales": Decimal(str(todays_sales or 0)).quantize(Decimal("0.01")),
            "total_items": int(total_items or 0),
            "low_stock_count": int(low_stock_count or 0),
            "expiring_count": int(expiring_count or 0),
        }
