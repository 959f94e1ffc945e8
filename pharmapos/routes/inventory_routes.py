from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from typing import List, Optional

from ..database import get_db
from ..exceptions import ValidationFailed
from ..models import Drug, DrugBatch, User
from ..schemas import (
    DrugCreate, DrugUpdate, DrugResponse,
    DrugBatchCreate, DrugBatchUpdate, DrugBatchResponse,
)
from ..services import StorageService, LOW_STOCK_THRESHOLD, EXPIRY_WINDOW_DAYS
from ..auth import get_current_user
from .crud_routes import create_crud_routes

router = APIRouter()

# Fixed paths are registered before the /{item_id} routes so they win the match

@router.get("/drugs/search", response_model=List[DrugResponse])
def search_drugs(q: Optional[str] = None, db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    if not q or not q.strip():
        raise ValidationFailed("Query parameter is required")
    return StorageService.search_drugs(db, q)

@router.get("/drugs/{drug_id}/batches", response_model=List[DrugBatchResponse])
def list_drug_batches(drug_id: int, db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    StorageService.get_or_404(db, Drug, drug_id)
    return StorageService.batches_for_drug(db, drug_id)

@router.get("/drug-batches/low-stock", response_model=List[DrugBatchResponse])
def low_stock_batches(
    threshold: int = Query(LOW_STOCK_THRESHOLD, ge=0),
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    return StorageService.batches_with_quantity_at_most(db, threshold)

@router.get("/drug-batches/expiring", response_model=List[DrugBatchResponse])
def expiring_batches(
    days: int = Query(EXPIRY_WINDOW_DAYS, ge=0),
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    return StorageService.batches_expiring_within_days(db, days)


create_crud_routes(
    router, Drug, "drugs", DrugCreate, DrugUpdate, DrugResponse,
    order_by=Drug.name,
)
create_crud_routes(
    router, DrugBatch, "drug-batches", DrugBatchCreate, DrugBatchUpdate, DrugBatchResponse,
    order_by=DrugBatch.expiry_date,
)
