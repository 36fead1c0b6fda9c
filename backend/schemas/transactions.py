import datetime
from pydantic import BaseModel
from typing import Optional

from posting_rules import SourceDocumentType

class TransactionFeedEntry(BaseModel):
    id: int
    tenant_id: str
    transaction_type: SourceDocumentType
    reference_type: SourceDocumentType
    reference_id: int
    amount: int  # negative for outflows
    date: datetime.date
    description: Optional[str] = None
    status: Optional[str] = None
    payment_method: Optional[str] = None
    reference_number: Optional[str] = None
    created_at: Optional[datetime.datetime] = None

    class Config:
        from_attributes = True

class TransactionSummary(BaseModel):
    transaction_type: SourceDocumentType
    total: int
    count: int
