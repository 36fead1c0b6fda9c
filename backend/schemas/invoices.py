from pydantic import BaseModel, field_validator
from typing import List, Optional
from datetime import date, datetime
from decimal import Decimal

class InvoiceItemBase(BaseModel):
    product_name: str
    quantity: Decimal = Decimal("1")
    unit_price: int
    total: int
    notes: Optional[str] = None

class InvoiceItemCreate(InvoiceItemBase):
    pass

class InvoiceItem(InvoiceItemBase):
    id: int
    invoice_id: int
    tenant_id: Optional[str] = None

    class Config:
        from_attributes = True

class InvoiceBase(BaseModel):
    invoice_number: str
    invoice_date: date
    due_date: Optional[date] = None
    subtotal: int = 0
    tax: int = 0
    total: int  # minor currency units
    status: Optional[str] = None  # unpaid, partial, paid, cancelled
    notes: Optional[str] = None

class InvoiceUpdate(BaseModel):
    invoice_number: Optional[str] = None
    invoice_date: Optional[date] = None
    due_date: Optional[date] = None
    subtotal: Optional[int] = None
    tax: Optional[int] = None
    total: Optional[int] = None
    status: Optional[str] = None
    notes: Optional[str] = None
    items: Optional[List[InvoiceItemCreate]] = None

    @field_validator('invoice_number', 'invoice_date', 'subtotal', 'tax', 'total', 'status',
                     'customer_id', 'vendor_id', check_fields=False)
    @classmethod
    def reject_null(cls, v, info):
        if v is None:
            raise ValueError(f"{info.field_name} cannot be null")
        return v

class InvoiceRead(InvoiceBase):
    id: int
    tenant_id: str
    status: str
    created_at: datetime
    updated_at: Optional[datetime] = None
    items: List[InvoiceItem] = []

    class Config:
        from_attributes = True

# Sales
class SalesInvoiceCreate(InvoiceBase):
    customer_id: int
    items: List[InvoiceItemCreate] = []

class SalesInvoiceUpdate(InvoiceUpdate):
    customer_id: Optional[int] = None

class SalesInvoice(InvoiceRead):
    customer_id: int

# Purchases
class PurchaseInvoiceCreate(InvoiceBase):
    vendor_id: int
    items: List[InvoiceItemCreate] = []

class PurchaseInvoiceUpdate(InvoiceUpdate):
    vendor_id: Optional[int] = None

class PurchaseInvoice(InvoiceRead):
    vendor_id: int
