from pydantic import Field, PositiveInt, StringConstraints
from typing import Annotated, List, Optional
from datetime import datetime
from decimal import Decimal

from .common_schemas import CamelModel
from ..models import SaleStatus

Money = Annotated[Decimal, Field(ge=0, max_digits=10, decimal_places=2)]
PaymentMethod = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=20)]

class CartItem(CamelModel):
    drug_batch_id: PositiveInt
    quantity: PositiveInt
    unit_price: Money
    total_price: Money

class SaleCreate(CamelModel):
    items: List[CartItem] = Field(min_length=1)
    subtotal: Money
    tax_amount: Money
    discount_amount: Money = Decimal("0")
    total_amount: Money
    payment_method: PaymentMethod # cash, card, mobile-money...
    amount_received: Optional[Money] = None
    customer_id: Optional[PositiveInt] = None
    customer_name: Optional[str] = Field(default=None, max_length=255)
    customer_phone: Optional[str] = Field(default=None, max_length=20)

class SaleItemResponse(CamelModel):
    id: int
    sale_id: int
    drug_batch_id: int
    quantity: int
    unit_price: Decimal
    total_price: Decimal

class SaleResponse(CamelModel):
    id: int
    receipt_number: str
    customer_id: Optional[int] = None
    customer_name: Optional[str] = None
    customer_phone: Optional[str] = None
    user_id: int
    subtotal: Decimal
    tax_amount: Decimal
    discount_amount: Decimal
    total_amount: Decimal
    payment_method: str
    status: SaleStatus
    created_at: Optional[datetime] = None

class SaleDetail(SaleResponse):
    items: List[SaleItemResponse] = []

class SaleReceipt(SaleDetail):
    """Receipt-ready view returned by the sale commit."""
    amount_received: Decimal
    change: Decimal
