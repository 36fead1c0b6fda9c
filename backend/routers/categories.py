from fastapi import APIRouter, Depends, HTTPException, status, Response
from sqlalchemy.orm import Session
from typing import List
import logging

from crud import categories as crud_categories
from database import get_db
from schemas.categories import Category, CategoryCreate, CategoryUpdate
from utils.tenancy import get_tenant_id

logger = logging.getLogger("categories")


def build_category_router(category_type: str, prefix: str, tag: str) -> APIRouter:
    router = APIRouter(prefix=prefix, tags=[tag])
    label = f"{category_type.capitalize()} category"

    @router.post("/", response_model=Category, status_code=status.HTTP_201_CREATED)
    def create_category(
        category: CategoryCreate,
        db: Session = Depends(get_db),
        tenant_id: str = Depends(get_tenant_id)
    ):
        if crud_categories.get_category_by_name(db, category_type, category.name, tenant_id):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"{label} '{category.name}' already exists"
            )
        db_category = crud_categories.create_category(db, category_type, category, tenant_id)
        logger.info(f"{label} '{db_category.name}' created for tenant {tenant_id}")
        return db_category

    @router.post("/provision-defaults", response_model=List[Category])
    def provision_default_categories(db: Session = Depends(get_db), tenant_id: str = Depends(get_tenant_id)):
        return crud_categories.provision_default_categories(db, category_type, tenant_id)

    @router.get("/", response_model=List[Category])
    def get_categories(db: Session = Depends(get_db), tenant_id: str = Depends(get_tenant_id)):
        return crud_categories.list_categories(db, category_type, tenant_id)

    @router.get("/{category_id}", response_model=Category)
    def get_category(category_id: int, db: Session = Depends(get_db), tenant_id: str = Depends(get_tenant_id)):
        category = crud_categories.get_category(db, category_type, category_id, tenant_id)
        if not category:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"{label} not found")
        return category

    @router.patch("/{category_id}", response_model=Category)
    def update_category(
        category_id: int,
        category_update: CategoryUpdate,
        db: Session = Depends(get_db),
        tenant_id: str = Depends(get_tenant_id)
    ):
        if category_update.name is not None:
            existing = crud_categories.get_category_by_name(db, category_type, category_update.name, tenant_id)
            if existing and existing.id != category_id:
                raise HTTPException(
                    status_code=status.HTTP_400_BAD_REQUEST,
                    detail=f"{label} '{category_update.name}' already exists"
                )

        category = crud_categories.update_category(db, category_type, category_id, category_update, tenant_id)
        if not category:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"{label} not found")
        return category

    @router.delete("/{category_id}", status_code=status.HTTP_204_NO_CONTENT)
    def delete_category(category_id: int, db: Session = Depends(get_db), tenant_id: str = Depends(get_tenant_id)):
        if not crud_categories.delete_category(db, category_type, category_id, tenant_id):
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"{label} not found")
        logger.info(f"{label} {category_id} deleted for tenant {tenant_id}")
        return Response(status_code=status.HTTP_204_NO_CONTENT)

    return router


income_categories_router = build_category_router("income", "/income-categories", "Income Categories")
expense_categories_router = build_category_router("expense", "/expense-categories", "Expense Categories")
