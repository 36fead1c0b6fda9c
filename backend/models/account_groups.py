from sqlalchemy import Column, Integer, String, Text, Boolean, UniqueConstraint
from database import Base
from models.audit_mixin import TimestampMixin

class AccountGroup(Base, TimestampMixin):
    __tablename__ = "account_groups"

    id = Column(Integer, primary_key=True, index=True)
    tenant_id = Column(String, index=True, nullable=False)
    name = Column(String(100), nullable=False)
    description = Column(Text, nullable=True)
    account_type = Column(String(20), nullable=False)  # asset, liability, equity, revenue, expense
    is_default = Column(Boolean, default=False, nullable=False)

    __table_args__ = (
        UniqueConstraint('tenant_id', 'name', name='_tenant_account_group_name_uc'),
    )
