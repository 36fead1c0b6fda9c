from pydantic import BaseModel
import datetime
from typing import List, Optional

class AmountStats(BaseModel):
    total: int = 0
    count: int = 0
    average: int = 0
    maximum: int = 0
    minimum: int = 0

class InvoiceStats(AmountStats):
    total_paid: int = 0    # invoices with status paid
    total_unpaid: int = 0  # invoices with status unpaid

class CategoryTotal(BaseModel):
    category_id: Optional[int] = None
    category_name: Optional[str] = None
    color: Optional[str] = None
    total: int
    count: int

class PaymentMethodTotal(BaseModel):
    payment_method: Optional[str] = None
    total: int
    count: int

class DailyTotal(BaseModel):
    date: datetime.date
    total: int
    count: int

class CounterpartyTotal(BaseModel):
    counterparty_id: int
    counterparty_name: str
    total: int
    count: int

class CashEntrySummary(BaseModel):
    stats: AmountStats = AmountStats()
    by_category: List[CategoryTotal] = []
    by_payment_method: List[PaymentMethodTotal] = []
    by_date: List[DailyTotal] = []

class InvoiceSummary(BaseModel):
    stats: InvoiceStats = InvoiceStats()
    by_counterparty: List[CounterpartyTotal] = []
