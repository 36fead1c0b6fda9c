from sqlalchemy import Column, Integer, String, Text, Date, ForeignKey
from sqlalchemy.orm import relationship
from database import Base
from models.audit_mixin import TimestampMixin

class PaymentIn(Base, TimestampMixin):
    """Money received from a customer, optionally allocated to sales invoices."""
    __tablename__ = "payment_ins"
    # Ids of deleted documents are never handed out again
    __table_args__ = {'sqlite_autoincrement': True}

    id = Column(Integer, primary_key=True, index=True)
    tenant_id = Column(String, index=True, nullable=False)
    payment_number = Column(String, nullable=False)
    customer_id = Column(Integer, ForeignKey("business_partners.id"), nullable=False)
    payment_date = Column(Date, nullable=False)
    payment_method = Column(String, nullable=True)
    reference_number = Column(String, nullable=True)
    status = Column(String(20), default='completed', nullable=False)  # pending, completed, cancelled
    amount = Column(Integer, nullable=False)
    notes = Column(Text, nullable=True)

    # Relationships
    customer = relationship("BusinessPartner", foreign_keys=[customer_id])
    items = relationship("PaymentInItem", back_populates="payment", cascade="all, delete-orphan")
