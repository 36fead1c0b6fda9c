from sqlalchemy import Column, Integer, String, Text, Date, ForeignKey
from sqlalchemy.orm import relationship
from database import Base
from models.audit_mixin import TimestampMixin

class SalesReturn(Base, TimestampMixin):
    __tablename__ = "sales_returns"
    # Ids of deleted documents are never handed out again
    __table_args__ = {'sqlite_autoincrement': True}

    id = Column(Integer, primary_key=True, index=True)
    tenant_id = Column(String, index=True, nullable=False)
    return_number = Column(String, nullable=False)
    customer_id = Column(Integer, ForeignKey("business_partners.id"), nullable=False)
    sales_invoice_id = Column(Integer, ForeignKey("sales_invoices.id", ondelete="SET NULL"), nullable=True)
    return_date = Column(Date, nullable=False)
    subtotal = Column(Integer, default=0, nullable=False)
    tax = Column(Integer, default=0, nullable=False)
    total = Column(Integer, nullable=False)
    status = Column(String(20), default='pending', nullable=False)  # draft, pending, approved, rejected, completed
    notes = Column(Text, nullable=True)

    # Relationships
    customer = relationship("BusinessPartner", foreign_keys=[customer_id])
