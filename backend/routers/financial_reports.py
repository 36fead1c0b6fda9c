from fastapi import APIRouter, Depends, HTTPException
from typing import Optional
from datetime import date

from crud import business_partners as crud_business_partners
from posting_rules import SourceDocumentType
from schemas.business_partners import CounterpartyRole
from schemas.ledger import AccountBalance, CounterpartyBalance, LedgerReport, TrialBalance
from schemas.summaries import CashEntrySummary, InvoiceSummary
from tenant_ledger import TenantLedger
from utils.tenancy import get_tenant_ledger

router = APIRouter(
    prefix="/financial-reports",
    tags=["Financial Reports"],
)

@router.get("/ledger", response_model=LedgerReport)
def get_ledger_report(
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    account_id: Optional[int] = None,
    source_document_type: Optional[SourceDocumentType] = None,
    ledger: TenantLedger = Depends(get_tenant_ledger)
):
    return ledger.get_ledger_report(
        start_date=start_date,
        end_date=end_date,
        account_id=account_id,
        source_document_type=source_document_type
    )

@router.get("/account-balance/{account_id}", response_model=AccountBalance)
def get_account_balance(
    account_id: int,
    as_of_date: Optional[date] = None,
    ledger: TenantLedger = Depends(get_tenant_ledger)
):
    return ledger.get_account_balance(account_id, as_of=as_of_date)

@router.get("/trial-balance", response_model=TrialBalance)
def get_trial_balance(
    as_of_date: Optional[date] = None,
    ledger: TenantLedger = Depends(get_tenant_ledger)
):
    return ledger.get_trial_balance(as_of=as_of_date)

@router.get("/counterparty-balance/{counterparty_id}", response_model=CounterpartyBalance)
def get_counterparty_balance(
    counterparty_id: int,
    role: CounterpartyRole = "customer",
    ledger: TenantLedger = Depends(get_tenant_ledger)
):
    if crud_business_partners.get_business_partner(ledger.db, counterparty_id, ledger.tenant_id) is None:
        raise HTTPException(status_code=404, detail="Business partner not found")
    return ledger.get_counterparty_balance(counterparty_id, role)

@router.get("/incomes/summary", response_model=CashEntrySummary)
def get_income_summary(
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    ledger: TenantLedger = Depends(get_tenant_ledger)
):
    return ledger.get_cash_entry_summary(SourceDocumentType.INCOME, start_date, end_date)

@router.get("/expenses/summary", response_model=CashEntrySummary)
def get_expense_summary(
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    ledger: TenantLedger = Depends(get_tenant_ledger)
):
    return ledger.get_cash_entry_summary(SourceDocumentType.EXPENSE, start_date, end_date)

@router.get("/sales-invoices/summary", response_model=InvoiceSummary)
def get_sales_invoice_summary(
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    ledger: TenantLedger = Depends(get_tenant_ledger)
):
    """Sales totals with paid and unpaid figures and a per-customer breakdown."""
    return ledger.get_invoice_summary(SourceDocumentType.SALES_INVOICE, start_date, end_date)

@router.get("/purchase-invoices/summary", response_model=InvoiceSummary)
def get_purchase_invoice_summary(
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    ledger: TenantLedger = Depends(get_tenant_ledger)
):
    return ledger.get_invoice_summary(SourceDocumentType.PURCHASE_INVOICE, start_date, end_date)
