from sqlalchemy import Column, Integer, String, Numeric, ForeignKey, Text
from sqlalchemy.orm import relationship
from database import Base

class PurchaseInvoiceItem(Base):
    __tablename__ = "purchase_invoice_items"

    id = Column(Integer, primary_key=True, index=True)
    invoice_id = Column(Integer, ForeignKey("purchase_invoices.id"), nullable=False)
    product_name = Column(String, nullable=False)
    quantity = Column(Numeric(10, 3), nullable=False)
    unit_price = Column(Integer, nullable=False)
    total = Column(Integer, nullable=False)
    notes = Column(Text, nullable=True)
    tenant_id = Column(String, index=True)

    # Relationships
    invoice = relationship("PurchaseInvoice", back_populates="items")
