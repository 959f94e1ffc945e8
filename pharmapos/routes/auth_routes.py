from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from typing import Optional
import logging

from ..database import get_db
from ..exceptions import Conflict, ValidationFailed
from ..models import User, UserRole
from ..schemas import Token, LoginRequest, RegisterRequest, RegisterResponse, ChangePasswordRequest, UserResponse, MessageResponse
from ..services import StorageService
from ..auth import (
    get_password_hash,
    verify_password,
    create_user_token,
    get_current_user,
    get_optional_user,
)

router = APIRouter()
logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 6


@router.post("/auth/login", response_model=Token)
def login(login_data: LoginRequest, db: Session = Depends(get_db)):
    user = StorageService.get_user_by_username(db, login_data.username)
    if not user or not user.is_active or not verify_password(login_data.password, user.hashed_password):
        logger.info(f"Failed login for '{login_data.username}'")
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid credentials")

    return {"token": create_user_token(user), "token_type": "bearer", "user": user}


@router.post("/auth/register", response_model=RegisterResponse, status_code=status.HTTP_201_CREATED)
def register(
    user_in: RegisterRequest,
    db: Session = Depends(get_db),
    caller: Optional[User] = Depends(get_optional_user),
):
    if StorageService.get_user_by_username(db, user_in.username):
        raise Conflict("Username already exists")

    # Only an authenticated admin may hand out elevated roles
    role = user_in.role
    if caller is None or caller.role != UserRole.ADMIN.value:
        role = UserRole.CASHIER

    user = StorageService.create(db, User, {
        "username": user_in.username,
        "email": user_in.email,
        "hashed_password": get_password_hash(user_in.password),
        "role": role.value,
        "first_name": user_in.first_name,
        "last_name": user_in.last_name,
    })
    logger.info(f"Registered user '{user.username}' with role {user.role}")
    return {"message": "User created successfully", "user": user}


@router.put("/auth/change-password", response_model=MessageResponse)
def change_password(
    data: ChangePasswordRequest,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    if len(data.new_password) < MIN_PASSWORD_LENGTH:
        raise ValidationFailed(f"New password must be at least {MIN_PASSWORD_LENGTH} characters long")
    if not verify_password(data.current_password, user.hashed_password):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Current password is incorrect")

    user.hashed_password = get_password_hash(data.new_password)
    db.commit()
    return {"message": "Password changed successfully"}


@router.get("/auth/me", response_model=UserResponse)
def read_me(user: User = Depends(get_current_user)):
    return user
