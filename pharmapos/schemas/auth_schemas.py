from pydantic import Field, EmailStr
from typing import Optional

from .common_schemas import CamelModel
from .user_schemas import UserResponse
from ..models import UserRole

class LoginRequest(CamelModel):
    username: str
    password: str

class Token(CamelModel):
    token: str
    token_type: str = "bearer"
    user: UserResponse

class RegisterRequest(CamelModel):
    username: str = Field(min_length=3, max_length=50)
    password: str = Field(min_length=6)
    email: Optional[EmailStr] = None
    role: UserRole = UserRole.CASHIER
    first_name: Optional[str] = Field(default=None, max_length=50)
    last_name: Optional[str] = Field(default=None, max_length=50)

class ChangePasswordRequest(CamelModel):
    current_password: str = Field(min_length=1)
    new_password: str = Field(min_length=1)

class RegisterResponse(CamelModel):
    message: str
    user: UserResponse
