from fastapi import APIRouter, Depends
from typing import List, Optional
from datetime import date

from posting_rules import SourceDocumentType
from schemas.ledger import LedgerPosting
from tenant_ledger import TenantLedger
from utils.tenancy import get_tenant_ledger

router = APIRouter(
    prefix="/ledger",
    tags=["Ledger"],
)

@router.get("/postings", response_model=List[LedgerPosting])
def get_postings(
    account_id: Optional[int] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    ledger: TenantLedger = Depends(get_tenant_ledger)
):
    """Postings in date order; without account_id every account of the tenant is included."""
    return ledger.get_postings_by_account(account_id, start_date, end_date)

@router.get("/postings/by-reference/{source_document_type}/{source_document_id}", response_model=List[LedgerPosting])
def get_postings_by_reference(
    source_document_type: SourceDocumentType,
    source_document_id: int,
    ledger: TenantLedger = Depends(get_tenant_ledger)
):
    return ledger.get_postings_by_reference(source_document_type, source_document_id)
