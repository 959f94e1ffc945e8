"""
Sale Commit Service
Turns a cart into a persisted sale and adjusts batch inventory
"""

import logging
import secrets
import time
from datetime import datetime
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional, Tuple

from sqlalchemy import update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..exceptions import Conflict, DuplicateReceipt, InsufficientStock, NotFound, ValidationFailed
from ..models import Customer, DrugBatch, Sale, SaleItem, SaleStatus, User
from ..schemas import SaleCreate

logger = logging.getLogger(__name__)

CENT = Decimal("0.01")
RECEIPT_ATTEMPTS = 2


def to_money(value) -> Decimal:
    return Decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def generate_receipt_number(prefix: str = "POS") -> str:
    """Year, epoch milliseconds and a random suffix, e.g. POS-2026-1760870400000-3F9A1C."""
    millis = time.time_ns() // 1_000_000
    return f"{prefix}-{datetime.now().year}-{millis}-{secrets.token_hex(3).upper()}"


class SaleService:
    """Service class for the sale commit workflow"""

    @staticmethod
    def validate(db: Session, sale_in: SaleCreate) -> None:
        """Business checks that must pass before anything is written."""
        line_sum = Decimal("0")
        for index, item in enumerate(sale_in.items, start=1):
            expected = to_money(item.unit_price * item.quantity)
            if abs(to_money(item.total_price) - expected) > CENT:
                raise ValidationFailed(
                    f"Line {index}: totalPrice {item.total_price} does not equal quantity x unitPrice ({expected})"
                )
            line_sum += to_money(item.total_price)

        subtotal = to_money(sale_in.subtotal)
        if abs(line_sum - subtotal) > CENT:
            raise ValidationFailed(f"Subtotal {subtotal} does not match the sum of line totals ({line_sum})")

        expected_total = subtotal + to_money(sale_in.tax_amount) - to_money(sale_in.discount_amount)
        total = to_money(sale_in.total_amount)
        if abs(expected_total - total) > CENT:
            raise ValidationFailed(
                f"Total amount {total} does not equal subtotal + tax - discount ({expected_total})"
            )

        if sale_in.amount_received is not None and to_money(sale_in.amount_received) < total:
            raise ValidationFailed("Amount received is less than the total amount")

        if sale_in.customer_id is not None and db.get(Customer, sale_in.customer_id) is None:
            raise NotFound(f"Customer {sale_in.customer_id} not found")

    @staticmethod
    def decrement_batch(db: Session, batch_id: int, quantity: int) -> None:
        """Atomically take ``quantity`` units from a batch, never below zero."""
        result = db.execute(
            update(DrugBatch)
            .where(DrugBatch.id == batch_id, DrugBatch.quantity >= quantity)
            .values(quantity=DrugBatch.quantity - quantity)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 1:
            return
        if db.query(DrugBatch.id).filter(DrugBatch.id == batch_id).first() is None:
            raise NotFound(f"Drug batch {batch_id} not found")
        raise InsufficientStock(batch_id, quantity)

    @staticmethod
    def find_by_idempotency_key(db: Session, key: str) -> Optional[Sale]:
        return db.query(Sale).filter(Sale.idempotency_key == key).first()

    @staticmethod
    def _replay(sale: Sale, user: User) -> Tuple[Sale, bool]:
        if sale.user_id != user.id:
            raise Conflict("Idempotency key was already used by another user")
        logger.info(f"Replayed sale {sale.receipt_number} for idempotency key {sale.idempotency_key}")
        return sale, True

    @staticmethod
    def _write_sale(
        db: Session,
        sale_in: SaleCreate,
        user: User,
        receipt_number: str,
        idempotency_key: Optional[str],
    ) -> Sale:
        total = to_money(sale_in.total_amount)
        amount_received = to_money(sale_in.amount_received) if sale_in.amount_received is not None else total

        sale = Sale(
            receipt_number=receipt_number,
            customer_id=sale_in.customer_id,
            customer_name=sale_in.customer_name,
            customer_phone=sale_in.customer_phone,
            user_id=user.id,
            subtotal=to_money(sale_in.subtotal),
            tax_amount=to_money(sale_in.tax_amount),
            discount_amount=to_money(sale_in.discount_amount),
            total_amount=total,
            amount_received=amount_received,
            payment_method=sale_in.payment_method,
            status=SaleStatus.COMPLETED.value,
            idempotency_key=idempotency_key,
        )
        db.add(sale)
        db.flush()

        # Cart lines are applied in caller order
        for item in sale_in.items:
            SaleService.decrement_batch(db, item.drug_batch_id, item.quantity)
            db.add(SaleItem(
                sale_id=sale.id,
                drug_batch_id=item.drug_batch_id,
                quantity=item.quantity,
                unit_price=to_money(item.unit_price),
                total_price=to_money(item.total_price),
            ))
        db.flush()
        return sale

    @staticmethod
    def _receipt_taken(db: Session, receipt_number: str) -> bool:
        return db.query(Sale.id).filter(Sale.receipt_number == receipt_number).first() is not None

    @staticmethod
    def commit_sale(
        db: Session,
        sale_in: SaleCreate,
        user: User,
        idempotency_key: Optional[str] = None,
    ) -> Tuple[Sale, bool]:
        """
        Record the sale header, its items and the batch decrements as one unit.

        Returns the sale and whether it was replayed from an earlier request
        with the same idempotency key. Either everything commits or nothing does.
        """
        if idempotency_key:
            existing = SaleService.find_by_idempotency_key(db, idempotency_key)
            if existing is not None:
                return SaleService._replay(existing, user)

        SaleService.validate(db, sale_in)

        for attempt in range(1, RECEIPT_ATTEMPTS + 1):
            receipt_number = generate_receipt_number()
            try:
                sale = SaleService._write_sale(db, sale_in, user, receipt_number, idempotency_key)
                db.commit()
            except IntegrityError:
                db.rollback()
                if idempotency_key:
                    existing = SaleService.find_by_idempotency_key(db, idempotency_key)
                    if existing is not None:
                        return SaleService._replay(existing, user)
                if not SaleService._receipt_taken(db, receipt_number):
                    raise
                if attempt == RECEIPT_ATTEMPTS:
                    raise DuplicateReceipt("Could not allocate a unique receipt number")
                logger.warning(f"Receipt number {receipt_number} already used, retrying")
                continue
            except Exception:
                db.rollback()
                raise

            db.refresh(sale)
            logger.info(
                f"Sale {sale.receipt_number} committed by user {user.id}: "
                f"{len(sale_in.items)} item(s), total {sale.total_amount}"
            )
            return sale, False

    @staticmethod
    def receipt(sale: Sale) -> dict:
        """Receipt-ready view: header, items, amount received and change due."""
        total = to_money(sale.total_amount)
        amount_received = to_money(sale.amount_received) if sale.amount_received is not None else total
        return {
            "id": sale.id,
            "receipt_number": sale.receipt_number,
            "customer_id": sale.customer_id,
            "customer_name": sale.customer_name,
            "customer_phone": sale.customer_phone,
            "user_id": sale.user_id,
            "subtotal": sale.subtotal,
            "tax_amount": sale.tax_amount,
            "discount_amount": sale.discount_amount,
            "total_amount": sale.total_amount,
            "payment_method": sale.payment_method,
            "status": sale.status,
            "created_at": sale.created_at,
            "items": list(sale.items),
            "amount_received": amount_received,
            "change": amount_received - total,
        }
