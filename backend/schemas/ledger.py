from pydantic import BaseModel
from datetime import date, datetime
from typing import List, Optional

from posting_rules import EntryDirection, SourceDocumentType

# Journal rows
class LedgerPosting(BaseModel):
    id: int
    tenant_id: str
    posting_date: date
    source_document_type: SourceDocumentType
    source_document_id: int
    account_id: int
    account_name: Optional[str] = None
    direction: EntryDirection
    amount: int
    description: Optional[str] = None
    reverses_posting_id: Optional[int] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True

# Ledger report
class LedgerReportEntry(BaseModel):
    posting_id: int
    posting_date: date
    account_id: int
    account_name: Optional[str] = None
    source_document_type: SourceDocumentType
    source_document_id: int
    description: Optional[str] = None
    debit: int = 0
    credit: int = 0
    balance: int

class LedgerReport(BaseModel):
    title: str
    account_id: Optional[int] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    opening_balance: int = 0
    entries: List[LedgerReportEntry] = []
    closing_balance: int = 0
    net_change: int = 0
    total_debit: int = 0
    total_credit: int = 0

# Balances
class AccountBalance(BaseModel):
    account_id: int
    account_name: Optional[str] = None
    account_type: Optional[str] = None
    as_of: Optional[date] = None
    total_debit: int = 0
    total_credit: int = 0
    balance: int = 0

class CounterpartyBalance(BaseModel):
    counterparty_id: int
    role: str
    account_name: Optional[str] = None
    total_invoiced: int = 0
    total_paid: int = 0
    total_returned: int = 0
    balance: int = 0

# Trial balance
class TrialBalanceLine(BaseModel):
    account_id: int
    account_name: str
    account_type: str
    total_debit: int = 0
    total_credit: int = 0
    balance: int = 0

class TrialBalance(BaseModel):
    as_of: Optional[date] = None
    lines: List[TrialBalanceLine] = []
    total_debit: int = 0
    total_credit: int = 0
    is_balanced: bool = True
