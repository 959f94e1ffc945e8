from pydantic import Field, EmailStr
from typing import Optional
from datetime import datetime
from decimal import Decimal

from .common_schemas import CamelModel

# --- Category ---
class CategoryBase(CamelModel):
    name: str = Field(min_length=1, max_length=100)
    description: Optional[str] = None

class CategoryCreate(CategoryBase):
    pass

class CategoryUpdate(CamelModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    description: Optional[str] = None

class CategoryResponse(CategoryBase):
    id: int
    created_at: Optional[datetime] = None

# --- Supplier ---
class SupplierBase(CamelModel):
    name: str = Field(min_length=1, max_length=100)
    contact_person: Optional[str] = Field(default=None, max_length=100)
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(default=None, max_length=20)
    address: Optional[str] = None
    is_active: bool = True

class SupplierCreate(SupplierBase):
    pass

class SupplierUpdate(CamelModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    contact_person: Optional[str] = Field(default=None, max_length=100)
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(default=None, max_length=20)
    address: Optional[str] = None
    is_active: Optional[bool] = None

class SupplierResponse(SupplierBase):
    id: int
    email: Optional[str] = None
    created_at: Optional[datetime] = None

# --- Drug ---
class DrugBase(CamelModel):
    name: str = Field(min_length=1, max_length=100)
    generic_name: Optional[str] = Field(default=None, max_length=100)
    brand: Optional[str] = Field(default=None, max_length=100)
    category_id: Optional[int] = None
    dosage: Optional[str] = Field(default=None, max_length=50)
    form: Optional[str] = Field(default=None, max_length=50)
    description: Optional[str] = None
    barcode: Optional[str] = Field(default=None, max_length=50)
    requires_prescription: bool = False
    is_active: bool = True

class DrugCreate(DrugBase):
    pass

class DrugUpdate(CamelModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    generic_name: Optional[str] = Field(default=None, max_length=100)
    brand: Optional[str] = Field(default=None, max_length=100)
    category_id: Optional[int] = None
    dosage: Optional[str] = Field(default=None, max_length=50)
    form: Optional[str] = Field(default=None, max_length=50)
    description: Optional[str] = None
    barcode: Optional[str] = Field(default=None, max_length=50)
    requires_prescription: Optional[bool] = None
    is_active: Optional[bool] = None

class DrugResponse(DrugBase):
    id: int
    created_at: Optional[datetime] = None

# --- Drug Batch ---
class DrugBatchBase(CamelModel):
    drug_id: int
    batch_number: str = Field(min_length=1, max_length=50)
    expiry_date: datetime
    quantity: int = Field(ge=0)
    cost_price: Decimal = Field(ge=0)
    selling_price: Decimal = Field(ge=0)
    supplier_id: Optional[int] = None

class DrugBatchCreate(DrugBatchBase):
    pass

# Quantity only moves through sale commits and purchase receipts
class DrugBatchUpdate(CamelModel):
    batch_number: Optional[str] = Field(default=None, min_length=1, max_length=50)
    expiry_date: Optional[datetime] = None
    cost_price: Optional[Decimal] = Field(default=None, ge=0)
    selling_price: Optional[Decimal] = Field(default=None, ge=0)
    supplier_id: Optional[int] = None

class DrugBatchResponse(DrugBatchBase):
    id: int
    created_at: Optional[datetime] = None

# --- Settings ---
class SettingUpdate(CamelModel):
    value: str

class SettingResponse(CamelModel):
    id: int
    key: str
    value: str
    updated_at: Optional[datetime] = None
