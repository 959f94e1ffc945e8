from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import List
import logging

from ..database import get_db
from ..exceptions import Conflict, NotFound
from ..models import Setting, User
from ..schemas import SettingUpdate, SettingResponse, UserResponse, UserUpdate, MessageResponse
from ..services import StorageService, seed_demo_data
from ..auth import require_admin

router = APIRouter()
logger = logging.getLogger(__name__)

# --- Settings ---

@router.get("/settings", response_model=List[SettingResponse])
def list_settings(db: Session = Depends(get_db), user: User = Depends(require_admin)):
    return StorageService.list(db, Setting, order_by=Setting.key)

@router.get("/settings/{key}", response_model=SettingResponse)
def get_setting(key: str, db: Session = Depends(get_db), user: User = Depends(require_admin)):
    setting = StorageService.get_setting(db, key)
    if setting is None:
        raise NotFound(f"Setting '{key}' not found")
    return setting

@router.put("/settings/{key}", response_model=SettingResponse)
def put_setting(key: str, data: SettingUpdate, db: Session = Depends(get_db), user: User = Depends(require_admin)):
    return StorageService.set_setting(db, key, data.value)

# --- Users ---

@router.get("/users", response_model=List[UserResponse])
def list_users(db: Session = Depends(get_db), user: User = Depends(require_admin)):
    return StorageService.list(db, User, order_by=User.username)

@router.put("/users/{user_id}", response_model=UserResponse)
def update_user(user_id: int, user_in: UserUpdate, db: Session = Depends(get_db), admin: User = Depends(require_admin)):
    fields = user_in.model_dump(exclude_unset=True)
    if "role" in fields and fields["role"] is not None:
        fields["role"] = fields["role"].value
    if user_id == admin.id and (fields.get("is_active") is False or fields.get("role", admin.role) != admin.role):
        raise Conflict("Administrators cannot demote or deactivate themselves")
    updated = StorageService.update(db, User, user_id, fields)
    logger.info(f"User {user_id} updated by {admin.username}")
    return updated

@router.delete("/users/{user_id}", response_model=MessageResponse)
def delete_user(user_id: int, db: Session = Depends(get_db), admin: User = Depends(require_admin)):
    if user_id == admin.id:
        raise Conflict("Administrators cannot delete themselves")
    StorageService.delete(db, User, user_id)
    logger.info(f"User {user_id} deleted by {admin.username}")
    return {"message": "User deleted successfully"}

# --- Demo data ---

@router.post("/init-test-data", response_model=MessageResponse)
def init_test_data(db: Session = Depends(get_db), user: User = Depends(require_admin)):
    seed_demo_data(db)
    return {"message": "Test data initialized successfully"}
