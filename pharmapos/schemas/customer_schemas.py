from pydantic import Field, EmailStr
from typing import Optional
from datetime import datetime

from .common_schemas import CamelModel

# --- Customer ---
class CustomerBase(CamelModel):
    name: str = Field(min_length=1, max_length=100)
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(default=None, max_length=20)
    address: Optional[str] = None
    date_of_birth: Optional[datetime] = None

class CustomerCreate(CustomerBase):
    pass

class CustomerUpdate(CamelModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(default=None, max_length=20)
    address: Optional[str] = None
    date_of_birth: Optional[datetime] = None

class CustomerResponse(CustomerBase):
    id: int
    email: Optional[str] = None
    created_at: Optional[datetime] = None
