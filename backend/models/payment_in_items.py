from sqlalchemy import Column, Integer, String, Text, ForeignKey
from sqlalchemy.orm import relationship
from database import Base

class PaymentInItem(Base):
    __tablename__ = "payment_in_items"

    id = Column(Integer, primary_key=True, index=True)
    payment_id = Column(Integer, ForeignKey("payment_ins.id"), nullable=False)
    invoice_id = Column(Integer, ForeignKey("sales_invoices.id", ondelete="SET NULL"), nullable=True)
    amount = Column(Integer, nullable=False)
    notes = Column(Text, nullable=True)
    tenant_id = Column(String, index=True)

    # Relationships
    payment = relationship("PaymentIn", back_populates="items")
