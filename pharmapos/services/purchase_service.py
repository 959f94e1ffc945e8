"""
Purchase Service
Supplier orders and receiving them into batch inventory
"""

import logging
from datetime import datetime
from typing import Any, Dict

from sqlalchemy import update
from sqlalchemy.orm import Session

from ..exceptions import Conflict, NotFound
from ..models import Drug, DrugBatch, Purchase, PurchaseItem, PurchaseStatus, Supplier, User
from ..schemas import PurchaseCreate
from .sales_service import generate_receipt_number, to_money

logger = logging.getLogger(__name__)


class PurchaseService:
    """Service class for purchase orders"""

    @staticmethod
    def create_purchase(db: Session, purchase_in: PurchaseCreate, user: User) -> Purchase:
        """Header and items are written together; the order starts as pending."""
        header = purchase_in.purchase
        if db.get(Supplier, header.supplier_id) is None:
            raise NotFound(f"Supplier {header.supplier_id} not found")
        for item in purchase_in.items:
            if db.get(Drug, item.drug_id) is None:
                raise NotFound(f"Drug {item.drug_id} not found")

        try:
            purchase = Purchase(
                purchase_number=generate_receipt_number(prefix="PUR"),
                supplier_id=header.supplier_id,
                user_id=user.id,
                total_amount=to_money(header.total_amount),
                status=PurchaseStatus.PENDING.value,
            )
            db.add(purchase)
            db.flush()

            for item in purchase_in.items:
                db.add(PurchaseItem(
                    purchase_id=purchase.id,
                    drug_id=item.drug_id,
                    quantity=item.quantity,
                    unit_cost=to_money(item.unit_cost),
                    total_cost=to_money(item.total_cost),
                    selling_price=to_money(item.selling_price) if item.selling_price is not None else None,
                    batch_number=item.batch_number,
                    expiry_date=item.expiry_date,
                ))
            db.commit()
        except Exception:
            db.rollback()
            raise

        db.refresh(purchase)
        logger.info(f"Purchase {purchase.purchase_number} created with {len(purchase_in.items)} item(s)")
        return purchase

    @staticmethod
    def receive_purchase(db: Session, purchase_id: int) -> Purchase:
        """
        Move every item of a pending purchase into stock.

        The purchase is claimed first with a conditional status update, so
        of two overlapping receives only one moves from pending and adds
        stock. An item whose drug already has a batch with the same batch
        number tops that batch up; otherwise a new batch is created at the
        item's cost.
        """
        purchase = db.get(Purchase, purchase_id)
        if purchase is None:
            raise NotFound(f"Purchase {purchase_id} not found")
        purchase_number = purchase.purchase_number

        try:
            claimed = db.execute(
                update(Purchase)
                .where(Purchase.id == purchase_id, Purchase.status == PurchaseStatus.PENDING.value)
                .values(status=PurchaseStatus.RECEIVED.value, received_date=datetime.utcnow())
                .execution_options(synchronize_session=False)
            )
            if claimed.rowcount != 1:
                raise Conflict(f"Purchase {purchase_number} is not pending, only pending purchases can be received")

            for item in purchase.items:
                batch_id = db.query(DrugBatch.id).filter(
                    DrugBatch.drug_id == item.drug_id,
                    DrugBatch.batch_number == item.batch_number,
                ).scalar()

                if batch_id is not None:
                    db.execute(
                        update(DrugBatch)
                        .where(DrugBatch.id == batch_id)
                        .values(quantity=DrugBatch.quantity + item.quantity)
                        .execution_options(synchronize_session=False)
                    )
                else:
                    db.add(DrugBatch(
                        drug_id=item.drug_id,
                        batch_number=item.batch_number,
                        expiry_date=item.expiry_date,
                        quantity=item.quantity,
                        cost_price=item.unit_cost,
                        selling_price=item.selling_price if item.selling_price is not None else item.unit_cost,
                        supplier_id=purchase.supplier_id,
                    ))
                    # Two lines may share a new batch number
                    db.flush()

            db.commit()
        except Exception:
            db.rollback()
            raise

        db.refresh(purchase)
        logger.info(f"Purchase {purchase_number} received into stock")
        return purchase

    @staticmethod
    def update_purchase(db: Session, purchase_id: int, fields: Dict[str, Any]) -> Purchase:
        """Edit header fields. Receiving goes through ``receive_purchase``."""
        purchase = db.get(Purchase, purchase_id)
        if purchase is None:
            raise NotFound(f"Purchase {purchase_id} not found")

        status = fields.pop("status", None)
        if status is not None:
            status = PurchaseStatus(status)
            if status == PurchaseStatus.RECEIVED:
                raise Conflict("Use the receive endpoint to receive a purchase")
            if status.value != purchase.status and purchase.status != PurchaseStatus.PENDING.value:
                raise Conflict(f"Purchase {purchase.purchase_number} is {purchase.status} and can no longer change status")
            purchase.status = status.value

        if fields and purchase.status == PurchaseStatus.RECEIVED.value:
            raise Conflict(f"Purchase {purchase.purchase_number} has been received and can no longer be edited")
        if "supplier_id" in fields and db.get(Supplier, fields["supplier_id"]) is None:
            raise NotFound(f"Supplier {fields['supplier_id']} not found")
        for field, value in fields.items():
            setattr(purchase, field, value)

        db.commit()
        db.refresh(purchase)
        return purchase
