import datetime
from pydantic import BaseModel, field_validator
from typing import Optional

class CashEntryBase(BaseModel):
    date: datetime.date
    category_id: Optional[int] = None
    description: str
    amount: int
    payment_method: Optional[str] = None
    reference_number: Optional[str] = None
    status: Optional[str] = None
    notes: Optional[str] = None

class CashEntryUpdate(BaseModel):
    date: Optional[datetime.date] = None
    category_id: Optional[int] = None
    description: Optional[str] = None
    amount: Optional[int] = None
    payment_method: Optional[str] = None
    reference_number: Optional[str] = None
    status: Optional[str] = None
    notes: Optional[str] = None

    @field_validator('date', 'description', 'amount', 'status')
    @classmethod
    def reject_null(cls, v, info):
        if v is None:
            raise ValueError(f"{info.field_name} cannot be null")
        return v

class CashEntryRead(CashEntryBase):
    id: int
    tenant_id: str
    status: str
    created_at: datetime.datetime
    updated_at: Optional[datetime.datetime] = None

    class Config:
        from_attributes = True

class IncomeCreate(CashEntryBase):
    pass

class IncomeUpdate(CashEntryUpdate):
    pass

class Income(CashEntryRead):
    pass

class ExpenseCreate(CashEntryBase):
    pass

class ExpenseUpdate(CashEntryUpdate):
    pass

class Expense(CashEntryRead):
    pass
