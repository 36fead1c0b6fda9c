from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from typing import List, Optional
from datetime import date

from crud import transactions as crud_transactions
from database import get_db
from posting_rules import SourceDocumentType
from schemas.transactions import TransactionFeedEntry, TransactionSummary
from utils.tenancy import get_tenant_id

router = APIRouter(
    prefix="/transactions",
    tags=["Transactions"],
)

@router.get("/", response_model=List[TransactionFeedEntry])
def get_transactions(
    transaction_type: Optional[SourceDocumentType] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    skip: int = 0,
    limit: int = 100,
    db: Session = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id)
):
    return crud_transactions.list_feed_entries(
        db, tenant_id,
        transaction_type=transaction_type,
        start_date=start_date,
        end_date=end_date,
        skip=skip,
        limit=limit
    )

@router.get("/summary", response_model=List[TransactionSummary])
def get_transaction_summary(
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    db: Session = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id)
):
    return crud_transactions.get_feed_summary(db, tenant_id, start_date, end_date)

@router.get("/{transaction_id}", response_model=TransactionFeedEntry)
def get_transaction(transaction_id: int, db: Session = Depends(get_db), tenant_id: str = Depends(get_tenant_id)):
    db_entry = crud_transactions.get_feed_entry(db, transaction_id, tenant_id)
    if db_entry is None:
        raise HTTPException(status_code=404, detail="Transaction not found")
    return db_entry
