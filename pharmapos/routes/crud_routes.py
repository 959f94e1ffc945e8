from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import Callable, List

from ..database import get_db
from ..models import Category, Supplier, Customer, User
from ..schemas import (
    CategoryCreate, CategoryUpdate, CategoryResponse,
    SupplierCreate, SupplierUpdate, SupplierResponse,
    CustomerCreate, CustomerUpdate, CustomerResponse,
    MessageResponse,
)
from ..services import StorageService
from ..auth import get_current_user, require_admin, require_staff

router = APIRouter()


def create_crud_routes(
    router: APIRouter,
    model_class,
    router_prefix: str,
    create_schema,
    update_schema,
    response_schema,
    create_dependency: Callable = require_staff,
    update_dependency: Callable = require_staff,
    delete_dependency: Callable = require_admin,
    order_by=None,
):
    """Generic function to create CRUD routes for a model"""
    label = model_class.__name__

    @router.get(f"/{router_prefix}", response_model=List[response_schema], name=f"list_{router_prefix}")
    def list_items(db: Session = Depends(get_db), user: User = Depends(get_current_user)):
        return StorageService.list(db, model_class, order_by=order_by)

    @router.get(f"/{router_prefix}/{{item_id}}", response_model=response_schema, name=f"get_{router_prefix}")
    def get_item(item_id: int, db: Session = Depends(get_db), user: User = Depends(get_current_user)):
        return StorageService.get_or_404(db, model_class, item_id)

    @router.post(
        f"/{router_prefix}",
        response_model=response_schema,
        status_code=status.HTTP_201_CREATED,
        name=f"create_{router_prefix}",
    )
    def create_item(item: create_schema, db: Session = Depends(get_db), user: User = Depends(create_dependency)):
        return StorageService.create(db, model_class, item.model_dump())

    @router.put(f"/{router_prefix}/{{item_id}}", response_model=response_schema, name=f"update_{router_prefix}")
    def update_item(item_id: int, item: update_schema, db: Session = Depends(get_db), user: User = Depends(update_dependency)):
        return StorageService.update(db, model_class, item_id, item.model_dump(exclude_unset=True))

    @router.delete(f"/{router_prefix}/{{item_id}}", response_model=MessageResponse, name=f"delete_{router_prefix}")
    def delete_item(item_id: int, db: Session = Depends(get_db), user: User = Depends(delete_dependency)):
        StorageService.delete(db, model_class, item_id)
        return {"message": f"{label} deleted successfully"}

    return list_items, get_item, create_item, update_item, delete_item


create_crud_routes(
    router, Category, "categories", CategoryCreate, CategoryUpdate, CategoryResponse,
    create_dependency=require_admin,
    update_dependency=require_admin,
    order_by=Category.name,
)
create_crud_routes(
    router, Supplier, "suppliers", SupplierCreate, SupplierUpdate, SupplierResponse,
    order_by=Supplier.name,
)
# Any signed-in user may register a customer at the till
create_crud_routes(
    router, Customer, "customers", CustomerCreate, CustomerUpdate, CustomerResponse,
    create_dependency=get_current_user,
    order_by=Customer.name,
)
