from pydantic import BaseModel, field_validator
from typing import Optional
from datetime import date, datetime

RETURN_STATUSES = ["draft", "pending", "approved", "rejected", "completed"]

class ReturnBase(BaseModel):
    return_number: str
    return_date: date
    subtotal: int = 0
    tax: int = 0
    total: int
    status: Optional[str] = None  # only completed returns count toward balances
    notes: Optional[str] = None

    @field_validator('status')
    @classmethod
    def validate_status(cls, v):
        if v is not None and v not in RETURN_STATUSES:
            raise ValueError(f"status must be one of {RETURN_STATUSES}")
        return v

class ReturnUpdate(BaseModel):
    return_number: Optional[str] = None
    return_date: Optional[date] = None
    subtotal: Optional[int] = None
    tax: Optional[int] = None
    total: Optional[int] = None
    status: Optional[str] = None
    notes: Optional[str] = None

    @field_validator('return_number', 'return_date', 'subtotal', 'tax', 'total', 'status',
                     'customer_id', 'vendor_id', check_fields=False)
    @classmethod
    def reject_null(cls, v, info):
        if v is None:
            raise ValueError(f"{info.field_name} cannot be null")
        return v

    @field_validator('status')
    @classmethod
    def validate_status(cls, v):
        if v is not None and v not in RETURN_STATUSES:
            raise ValueError(f"status must be one of {RETURN_STATUSES}")
        return v

class ReturnRead(ReturnBase):
    id: int
    tenant_id: str
    status: str
    created_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True

# Sales returns
class SalesReturnCreate(ReturnBase):
    customer_id: int
    sales_invoice_id: Optional[int] = None

class SalesReturnUpdate(ReturnUpdate):
    customer_id: Optional[int] = None
    sales_invoice_id: Optional[int] = None

class SalesReturn(ReturnRead):
    customer_id: int
    sales_invoice_id: Optional[int] = None

# Purchase returns
class PurchaseReturnCreate(ReturnBase):
    vendor_id: int
    purchase_invoice_id: Optional[int] = None

class PurchaseReturnUpdate(ReturnUpdate):
    vendor_id: Optional[int] = None
    purchase_invoice_id: Optional[int] = None

class PurchaseReturn(ReturnRead):
    vendor_id: int
    purchase_invoice_id: Optional[int] = None
