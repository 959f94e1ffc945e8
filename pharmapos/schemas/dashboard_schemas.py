from typing import List
from decimal import Decimal

from .common_schemas import CamelModel
from .pharmacy_schemas import DrugBatchResponse

class DashboardStats(CamelModel):
    todays_sales: Decimal
    total_items: int
    low_stock_count: int
    expiring_count: int

class DashboardAlerts(CamelModel):
    low_stock: List[DrugBatchResponse]
    expiring: List[DrugBatchResponse]
