from sqlalchemy import Column, Integer, String, Text, Date, ForeignKey
from sqlalchemy.orm import relationship
from database import Base
from models.audit_mixin import TimestampMixin

class PaymentOut(Base, TimestampMixin):
    """Money paid to a vendor, optionally allocated to purchase invoices."""
    __tablename__ = "payment_outs"
    # Ids of deleted documents are never handed out again
    __table_args__ = {'sqlite_autoincrement': True}

    id = Column(Integer, primary_key=True, index=True)
    tenant_id = Column(String, index=True, nullable=False)
    payment_number = Column(String, nullable=False)
    vendor_id = Column(Integer, ForeignKey("business_partners.id"), nullable=False)
    payment_date = Column(Date, nullable=False)
    payment_method = Column(String, nullable=True)
    reference_number = Column(String, nullable=True)
    status = Column(String(20), default='completed', nullable=False)  # pending, completed, cancelled
    amount = Column(Integer, nullable=False)
    notes = Column(Text, nullable=True)

    # Relationships
    vendor = relationship("BusinessPartner", foreign_keys=[vendor_id])
    items = relationship("PaymentOutItem", back_populates="payment", cascade="all, delete-orphan")
