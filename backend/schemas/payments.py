from pydantic import BaseModel, field_validator
from typing import List, Optional
from datetime import date, datetime

class PaymentItemBase(BaseModel):
    invoice_id: Optional[int] = None
    amount: int
    notes: Optional[str] = None

class PaymentItemCreate(PaymentItemBase):
    pass

class PaymentItem(PaymentItemBase):
    id: int
    payment_id: int

    class Config:
        from_attributes = True

class PaymentBase(BaseModel):
    payment_number: str
    payment_date: date
    amount: int
    payment_method: Optional[str] = None
    reference_number: Optional[str] = None
    status: Optional[str] = None  # pending, completed, cancelled
    notes: Optional[str] = None

class PaymentUpdate(BaseModel):
    payment_number: Optional[str] = None
    payment_date: Optional[date] = None
    amount: Optional[int] = None
    payment_method: Optional[str] = None
    reference_number: Optional[str] = None
    status: Optional[str] = None
    notes: Optional[str] = None
    items: Optional[List[PaymentItemCreate]] = None

    @field_validator('payment_number', 'payment_date', 'amount', 'status', 'customer_id', 'vendor_id', check_fields=False)
    @classmethod
    def reject_null(cls, v, info):
        if v is None:
            raise ValueError(f"{info.field_name} cannot be null")
        return v

class PaymentRead(PaymentBase):
    id: int
    tenant_id: str
    status: str
    created_at: datetime
    updated_at: Optional[datetime] = None
    items: List[PaymentItem] = []

    class Config:
        from_attributes = True

# Money received
class PaymentInCreate(PaymentBase):
    customer_id: int
    items: List[PaymentItemCreate] = []

class PaymentInUpdate(PaymentUpdate):
    customer_id: Optional[int] = None

class PaymentIn(PaymentRead):
    customer_id: int

# Money paid out
class PaymentOutCreate(PaymentBase):
    vendor_id: int
    items: List[PaymentItemCreate] = []

class PaymentOutUpdate(PaymentUpdate):
    vendor_id: Optional[int] = None

class PaymentOut(PaymentRead):
    vendor_id: int

# Allocations against one invoice
class InvoicePaymentLine(BaseModel):
    id: int
    payment_id: int
    invoice_id: int
    amount: int
    payment_number: str
    payment_date: date
    status: str

class InvoicePayments(BaseModel):
    invoice_id: int
    total: int
    total_paid: int
    balance_due: int
    payments: List[InvoicePaymentLine] = []
