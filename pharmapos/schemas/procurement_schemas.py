from pydantic import Field, PositiveInt
from typing import List, Optional
from datetime import datetime
from decimal import Decimal

from .common_schemas import CamelModel
from ..models import PurchaseStatus

class PurchaseItemCreate(CamelModel):
    drug_id: PositiveInt
    quantity: PositiveInt
    unit_cost: Decimal = Field(ge=0)
    total_cost: Decimal = Field(ge=0)
    selling_price: Optional[Decimal] = Field(default=None, ge=0)
    batch_number: str = Field(min_length=1, max_length=50)
    expiry_date: datetime

class PurchaseHeader(CamelModel):
    supplier_id: PositiveInt
    total_amount: Decimal = Field(ge=0)

class PurchaseCreate(CamelModel):
    purchase: PurchaseHeader
    items: List[PurchaseItemCreate] = Field(min_length=1)

class PurchaseUpdate(CamelModel):
    supplier_id: Optional[PositiveInt] = None
    total_amount: Optional[Decimal] = Field(default=None, ge=0)
    status: Optional[PurchaseStatus] = None

class PurchaseItemResponse(CamelModel):
    id: int
    purchase_id: int
    drug_id: int
    quantity: int
    unit_cost: Decimal
    total_cost: Decimal
    selling_price: Optional[Decimal] = None
    batch_number: str
    expiry_date: datetime

class PurchaseResponse(CamelModel):
    id: int
    purchase_number: str
    supplier_id: int
    user_id: int
    total_amount: Decimal
    status: PurchaseStatus
    order_date: Optional[datetime] = None
    received_date: Optional[datetime] = None

class PurchaseDetail(PurchaseResponse):
    items: List[PurchaseItemResponse] = []
