# Models package - exports all models
from ..database import Base
from .user_models import User, UserRole
from .pharmacy_models import Category, Supplier, Drug, DrugBatch, Setting
from .customer_models import Customer
from .sales_models import Sale, SaleItem, SaleStatus
from .procurement_models import Purchase, PurchaseItem, PurchaseStatus

__all__ = [
    "Base",  # Re-exported from database
    "User",
    "UserRole",
    "Category",
    "Supplier",
    "Drug",
    "DrugBatch",
    "Setting",
    "Customer",
    "Sale",
    "SaleItem",
    "SaleStatus",
    "Purchase",
    "PurchaseItem",
    "PurchaseStatus",
]
