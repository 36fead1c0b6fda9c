from sqlalchemy import Column, Integer, String, Text, Date, ForeignKey
from database import Base
from models.audit_mixin import TimestampMixin

class Income(Base, TimestampMixin):
    """Income not related to sales (interest, rent received, ...)."""
    __tablename__ = "incomes"
    # Ids of deleted documents are never handed out again
    __table_args__ = {'sqlite_autoincrement': True}

    id = Column(Integer, primary_key=True, index=True)
    tenant_id = Column(String, index=True, nullable=False)
    date = Column(Date, nullable=False)
    category_id = Column(Integer, ForeignKey("income_categories.id", ondelete="SET NULL"), nullable=True)
    description = Column(String, nullable=False)
    amount = Column(Integer, nullable=False)
    payment_method = Column(String, nullable=True)
    reference_number = Column(String, nullable=True)
    status = Column(String(20), default='completed', nullable=False)
    notes = Column(Text, nullable=True)
