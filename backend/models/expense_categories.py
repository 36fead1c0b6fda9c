from sqlalchemy import Column, Integer, String, Text, Boolean, UniqueConstraint
from database import Base
from models.audit_mixin import TimestampMixin

class ExpenseCategory(Base, TimestampMixin):
    __tablename__ = "expense_categories"

    id = Column(Integer, primary_key=True, index=True)
    tenant_id = Column(String, index=True, nullable=False)
    name = Column(String(100), nullable=False)
    description = Column(Text, nullable=True)
    color = Column(String(7), nullable=False, default='#9e9e9e')  # hex colour for charts
    is_default = Column(Boolean, default=False, nullable=False)

    __table_args__ = (
        UniqueConstraint('tenant_id', 'name', name='_tenant_expense_category_name_uc'),
    )
