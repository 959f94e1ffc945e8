from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import List

from ..database import get_db
from ..models import User
from ..schemas import DashboardStats, DashboardAlerts, SaleResponse
from ..services import StorageService, LOW_STOCK_THRESHOLD, EXPIRY_WINDOW_DAYS
from ..auth import get_current_user

router = APIRouter()

RECENT_SALES_LIMIT = 10
ALERTS_LIMIT = 5


@router.get("/stats", response_model=DashboardStats)
def get_stats(db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    return StorageService.dashboard_aggregate(db)

@router.get("/recent-sales", response_model=List[SaleResponse])
def get_recent_sales(db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    # Today's sales only, newest first
    return StorageService.todays_sales(db, limit=RECENT_SALES_LIMIT)

@router.get("/alerts", response_model=DashboardAlerts)
def get_alerts(db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    low_stock = StorageService.batches_with_quantity_at_most(db, LOW_STOCK_THRESHOLD)
    expiring = StorageService.batches_expiring_within_days(db, EXPIRY_WINDOW_DAYS)
    return {"low_stock": low_stock[:ALERTS_LIMIT], "expiring": expiring[:ALERTS_LIMIT]}
