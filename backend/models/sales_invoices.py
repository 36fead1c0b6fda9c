from sqlalchemy import Column, Integer, String, Text, Date, ForeignKey
from sqlalchemy.orm import relationship
from database import Base
from models.audit_mixin import TimestampMixin

class SalesInvoice(Base, TimestampMixin):
    __tablename__ = "sales_invoices"
    # Ids of deleted documents are never handed out again
    __table_args__ = {'sqlite_autoincrement': True}

    id = Column(Integer, primary_key=True, index=True)
    tenant_id = Column(String, index=True, nullable=False)
    invoice_number = Column(String, nullable=False)
    customer_id = Column(Integer, ForeignKey("business_partners.id"), nullable=False)
    invoice_date = Column(Date, nullable=False)
    due_date = Column(Date, nullable=True)
    subtotal = Column(Integer, default=0, nullable=False)
    tax = Column(Integer, default=0, nullable=False)
    total = Column(Integer, nullable=False)
    status = Column(String(20), default='unpaid', nullable=False)  # unpaid, partial, paid, cancelled
    notes = Column(Text, nullable=True)

    # Relationships
    customer = relationship("BusinessPartner", foreign_keys=[customer_id])
    items = relationship("SalesInvoiceItem", back_populates="invoice", cascade="all, delete-orphan")
