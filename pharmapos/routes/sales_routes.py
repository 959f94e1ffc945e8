from fastapi import APIRouter, Depends, Header, Query, Response, status
from sqlalchemy.orm import Session
from typing import List, Optional
from datetime import datetime

from ..database import get_db
from ..exceptions import ValidationFailed
from ..models import Sale, User
from ..schemas import SaleCreate, SaleResponse, SaleDetail, SaleItemResponse, SaleReceipt
from ..services import StorageService, SaleService
from ..auth import get_current_user

router = APIRouter()


@router.get("", response_model=List[SaleResponse])
def list_sales(
    start_date: Optional[datetime] = Query(None, alias="startDate"),
    end_date: Optional[datetime] = Query(None, alias="endDate"),
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    if start_date and end_date and start_date > end_date:
        raise ValidationFailed("startDate must not be after endDate")
    if start_date or end_date:
        return StorageService.sales_in_date_range(db, start_date, end_date)
    return StorageService.list(db, Sale, order_by=Sale.created_at, descending=True)


@router.post("", response_model=SaleReceipt, status_code=status.HTTP_201_CREATED)
def create_sale(
    sale_in: SaleCreate,
    response: Response,
    idempotency_key: Optional[str] = Header(None, alias="Idempotency-Key", max_length=100),
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """Commit a sale and return its receipt. A replayed Idempotency-Key answers 200 with the original sale."""
    sale, replayed = SaleService.commit_sale(db, sale_in, user, idempotency_key=idempotency_key)
    if replayed:
        response.status_code = status.HTTP_200_OK
    return SaleService.receipt(sale)


@router.get("/{sale_id}", response_model=SaleDetail)
def get_sale(sale_id: int, db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    return StorageService.get_or_404(db, Sale, sale_id)


@router.get("/{sale_id}/items", response_model=List[SaleItemResponse])
def get_sale_items(sale_id: int, db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    StorageService.get_or_404(db, Sale, sale_id)
    return StorageService.sale_items(db, sale_id)
