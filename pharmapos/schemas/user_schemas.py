from pydantic import EmailStr, Field
from typing import Optional
from datetime import datetime

from .common_schemas import CamelModel
from ..models import UserRole

class UserResponse(CamelModel):
    id: int
    username: str
    email: Optional[str] = None
    role: UserRole
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    is_active: Optional[bool] = True
    created_at: Optional[datetime] = None

class UserUpdate(CamelModel):
    email: Optional[EmailStr] = None
    role: Optional[UserRole] = None
    first_name: Optional[str] = Field(default=None, max_length=50)
    last_name: Optional[str] = Field(default=None, max_length=50)
    profile_image_url: Optional[str] = None
    is_active: Optional[bool] = None
