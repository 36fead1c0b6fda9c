import logging

from sqlalchemy.orm import Session

from models.expense_categories import ExpenseCategory
from models.income_categories import IncomeCategory
from schemas.categories import CategoryCreate, CategoryUpdate
from utils.exceptions import CategoryNotFound

logger = logging.getLogger("categories")

CATEGORY_MODELS = {
    "income": IncomeCategory,
    "expense": ExpenseCategory,
}

DEFAULT_CATEGORIES = {
    "income": [
        {"name": "Sales Revenue", "description": "Income from sales of products or services", "color": "#4caf50"},
        {"name": "Service Income", "description": "Income from providing services", "color": "#2196f3"},
        {"name": "Interest Income", "description": "Income from interest on investments or loans", "color": "#9c27b0"},
        {"name": "Other Income", "description": "Miscellaneous income sources", "color": "#ff9800"},
    ],
    "expense": [
        {"name": "Cost of Goods Sold", "description": "Direct costs of producing goods or services", "color": "#e74c3c"},
        {"name": "Operating Expenses", "description": "Day-to-day business expenses", "color": "#3498db"},
        {"name": "Payroll", "description": "Employee salaries and benefits", "color": "#9b59b6"},
        {"name": "Rent & Utilities", "description": "Office space and utility expenses", "color": "#f39c12"},
        {"name": "Marketing", "description": "Advertising and promotional expenses", "color": "#1abc9c"},
        {"name": "Other Expenses", "description": "Miscellaneous business expenses", "color": "#e67e22"},
    ],
}

def get_category(db: Session, category_type: str, category_id: int, tenant_id: str):
    model = CATEGORY_MODELS[category_type]
    return db.query(model).filter(model.id == category_id, model.tenant_id == tenant_id).first()

def get_category_by_name(db: Session, category_type: str, name: str, tenant_id: str):
    model = CATEGORY_MODELS[category_type]
    return db.query(model).filter(model.name == name, model.tenant_id == tenant_id).first()

def list_categories(db: Session, category_type: str, tenant_id: str):
    model = CATEGORY_MODELS[category_type]
    return db.query(model).filter(model.tenant_id == tenant_id).order_by(model.name).all()

def require_category(db: Session, tenant_id: str, category_type: str, category_id: int):
    category = get_category(db, category_type, category_id, tenant_id)
    if category is None:
        raise CategoryNotFound(category_type, category_id)
    return category

def create_category(db: Session, category_type: str, category: CategoryCreate, tenant_id: str):
    db_category = CATEGORY_MODELS[category_type](**category.model_dump(), tenant_id=tenant_id)
    db.add(db_category)
    db.commit()
    db.refresh(db_category)
    return db_category

def update_category(db: Session, category_type: str, category_id: int, category_update: CategoryUpdate, tenant_id: str):
    db_category = get_category(db, category_type, category_id, tenant_id)
    if not db_category:
        return None

    for key, value in category_update.model_dump(exclude_unset=True).items():
        setattr(db_category, key, value)

    db.commit()
    db.refresh(db_category)
    return db_category

def delete_category(db: Session, category_type: str, category_id: int, tenant_id: str) -> bool:
    """Entries filed under the category keep existing with no category."""
    db_category = get_category(db, category_type, category_id, tenant_id)
    if not db_category:
        return False
    db.delete(db_category)
    db.commit()
    return True

def provision_default_categories(db: Session, category_type: str, tenant_id: str):
    """Adds whichever default categories the tenant is missing; existing names are left alone."""
    model = CATEGORY_MODELS[category_type]
    created = 0
    for category_data in DEFAULT_CATEGORIES[category_type]:
        if not get_category_by_name(db, category_type, category_data["name"], tenant_id):
            db.add(model(**category_data, is_default=True, tenant_id=tenant_id))
            created += 1

    db.commit()
    if created:
        logger.info(f"Provisioned {created} default {category_type} categories for tenant {tenant_id}")
    return list_categories(db, category_type, tenant_id)
