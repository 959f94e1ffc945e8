# Schemas package - exports all Pydantic models
from .common_schemas import CamelModel, MessageResponse
from .user_schemas import UserResponse, UserUpdate
from .auth_schemas import Token, LoginRequest, RegisterRequest, RegisterResponse, ChangePasswordRequest
from .pharmacy_schemas import (
    CategoryCreate, CategoryUpdate, CategoryResponse,
    SupplierCreate, SupplierUpdate, SupplierResponse,
    DrugCreate, DrugUpdate, DrugResponse,
    DrugBatchCreate, DrugBatchUpdate, DrugBatchResponse,
    SettingUpdate, SettingResponse,
)
from .customer_schemas import CustomerCreate, CustomerUpdate, CustomerResponse
from .sales_schemas import CartItem, SaleCreate, SaleItemResponse, SaleResponse, SaleDetail, SaleReceipt
from .procurement_schemas import (
    PurchaseItemCreate, PurchaseHeader, PurchaseCreate, PurchaseUpdate,
    PurchaseItemResponse, PurchaseResponse, PurchaseDetail,
)
from .dashboard_schemas import DashboardStats, DashboardAlerts

__all__ = [
    "CamelModel",
    "MessageResponse",
    "UserResponse",
    "UserUpdate",
    "Token",
    "LoginRequest",
    "RegisterRequest",
    "RegisterResponse",
    "ChangePasswordRequest",
    "CategoryCreate",
    "CategoryUpdate",
    "CategoryResponse",
    "SupplierCreate",
    "SupplierUpdate",
    "SupplierResponse",
    "DrugCreate",
    "DrugUpdate",
    "DrugResponse",
    "DrugBatchCreate",
    "DrugBatchUpdate",
    "DrugBatchResponse",
    "SettingUpdate",
    "SettingResponse",
    "CustomerCreate",
    "CustomerUpdate",
    "CustomerResponse",
    "CartItem",
    "SaleCreate",
    "SaleItemResponse",
    "SaleResponse",
    "SaleDetail",
    "SaleReceipt",
    "PurchaseItemCreate",
    "PurchaseHeader",
    "PurchaseCreate",
    "PurchaseUpdate",
    "PurchaseItemResponse",
    "PurchaseResponse",
    "PurchaseDetail",
    "DashboardStats",
    "DashboardAlerts",
]
