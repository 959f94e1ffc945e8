from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import List

from ..database import get_db
from ..models import Purchase, User
from ..schemas import PurchaseCreate, PurchaseUpdate, PurchaseResponse, PurchaseDetail, PurchaseItemResponse
from ..services import StorageService, PurchaseService
from ..auth import get_current_user, require_staff

router = APIRouter()


@router.get("", response_model=List[PurchaseResponse])
def list_purchases(db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    return StorageService.list(db, Purchase, order_by=Purchase.order_date, descending=True)

@router.post("", response_model=PurchaseDetail, status_code=status.HTTP_201_CREATED)
def create_purchase(purchase_in: PurchaseCreate, db: Session = Depends(get_db), user: User = Depends(require_staff)):
    return PurchaseService.create_purchase(db, purchase_in, user)

@router.get("/{purchase_id}", response_model=PurchaseDetail)
def get_purchase(purchase_id: int, db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    return StorageService.get_or_404(db, Purchase, purchase_id)

@router.get("/{purchase_id}/items", response_model=List[PurchaseItemResponse])
def get_purchase_items(purchase_id: int, db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    StorageService.get_or_404(db, Purchase, purchase_id)
    return StorageService.purchase_items(db, purchase_id)

@router.put("/{purchase_id}", response_model=PurchaseResponse)
def update_purchase(
    purchase_id: int,
    purchase_in: PurchaseUpdate,
    db: Session = Depends(get_db),
    user: User = Depends(require_staff),
):
    return PurchaseService.update_purchase(db, purchase_id, purchase_in.model_dump(exclude_unset=True, exclude_none=True))

@router.post("/{purchase_id}/receive", response_model=PurchaseDetail)
def receive_purchase(purchase_id: int, db: Session = Depends(get_db), user: User = Depends(require_staff)):
    return PurchaseService.receive_purchase(db, purchase_id)
