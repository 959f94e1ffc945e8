# Services package - business workflows on top of the models
from .storage_service import StorageService, LOW_STOCK_THRESHOLD, EXPIRY_WINDOW_DAYS
from .sales_service import SaleService, generate_receipt_number
from .purchase_service import PurchaseService
from .seed_service import ensure_default_admin, seed_demo_data

__all__ = [
    "StorageService",
    "LOW_STOCK_THRESHOLD",
    "EXPIRY_WINDOW_DAYS",
    "SaleService",
    "generate_receipt_number",
    "PurchaseService",
    "ensure_default_admin",
    "seed_demo_data",
]
