# Routes package
from fastapi import APIRouter
from .auth_routes import router as auth_router
from .dashboard_routes import router as dashboard_router
from .crud_routes import router as crud_router
from .inventory_routes import router as inventory_router
from .sales_routes import router as sales_router
from .procurement_routes import router as procurement_router
from .admin_routes import router as admin_router

# Create main router
api_router = APIRouter(prefix="/api")

@api_router.get("/health", tags=["Common"])
def health():
    return {"status": "ok", "message": "Backend is running"}

# Include all route modules
api_router.include_router(auth_router, tags=["Authentication"])
api_router.include_router(dashboard_router, prefix="/dashboard", tags=["Dashboard"])
api_router.include_router(crud_router, tags=["Catalogue"])
api_router.include_router(inventory_router, tags=["Inventory"])
api_router.include_router(sales_router, prefix="/sales", tags=["Sales"])
api_router.include_router(procurement_router, prefix="/purchases", tags=["Purchases"])
api_router.include_router(admin_router, tags=["Administration"])


__all__ = ["api_router"]
