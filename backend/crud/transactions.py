import logging
from datetime import date
from typing import Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from models.transactions import TransactionFeedEntry
from posting_rules import SourceDocumentType, feed_amount

logger = logging.getLogger("transactions")


def get_feed_entry(db: Session, transaction_id: int, tenant_id: str):
    return db.query(TransactionFeedEntry).filter(
        TransactionFeedEntry.id == transaction_id,
        TransactionFeedEntry.tenant_id == tenant_id
    ).first()

def get_feed_entry_by_reference(db: Session, tenant_id: str, document_type: SourceDocumentType, reference_id: int):
    return db.query(TransactionFeedEntry).filter(
        TransactionFeedEntry.tenant_id == tenant_id,
        TransactionFeedEntry.reference_type == SourceDocumentType(document_type).value,
        TransactionFeedEntry.reference_id == reference_id
    ).first()

def upsert_feed_entry(
    db: Session,
    tenant_id: str,
    document_type: SourceDocumentType,
    reference_id: int,
    amount: int,
    entry_date: date,
    description: str,
    status: str,
    payment_method: Optional[str] = None,
    reference_number: Optional[str] = None
) -> TransactionFeedEntry:
    """
    Creates or refreshes the feed row of a source document.

    amount is the unsigned document amount; the stored value carries the feed
    sign of the document type (negative for outflows).
    """
    document_type = SourceDocumentType(document_type)
    values = dict(
        transaction_type=document_type.value,
        amount=feed_amount(document_type, amount),
        date=entry_date,
        description=description,
        status=status,
        payment_method=payment_method,
        reference_number=reference_number,
    )

    db_entry = get_feed_entry_by_reference(db, tenant_id, document_type, reference_id)
    if db_entry is None:
        db_entry = TransactionFeedEntry(
            tenant_id=tenant_id,
            reference_type=document_type.value,
            reference_id=reference_id,
            **values
        )
        db.add(db_entry)
    else:
        for key, value in values.items():
            setattr(db_entry, key, value)
    db.flush()
    return db_entry

def delete_feed_entry(db: Session, tenant_id: str, document_type: SourceDocumentType, reference_id: int) -> bool:
    db_entry = get_feed_entry_by_reference(db, tenant_id, document_type, reference_id)
    if db_entry is None:
        logger.warning(
            f"No transaction feed entry for {SourceDocumentType(document_type).value} {reference_id} "
            f"for tenant {tenant_id}"
        )
        return False
    db.delete(db_entry)
    db.flush()
    return True

def list_feed_entries(
    db: Session,
    tenant_id: str,
    transaction_type: Optional[SourceDocumentType] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    skip: int = 0,
    limit: int = 100
):
    query = db.query(TransactionFeedEntry).filter(TransactionFeedEntry.tenant_id == tenant_id)

    if transaction_type:
        query = query.filter(TransactionFeedEntry.transaction_type == SourceDocumentType(transaction_type).value)
    if start_date:
        query = query.filter(TransactionFeedEntry.date >= start_date)
    if end_date:
        query = query.filter(TransactionFeedEntry.date <= end_date)

    return query.order_by(TransactionFeedEntry.date.desc(), TransactionFeedEntry.id.desc()).offset(skip).limit(limit).all()

def get_feed_summary(db: Session, tenant_id: str, start_date: Optional[date] = None, end_date: Optional[date] = None):
    """Signed total and row count per transaction type."""
    query = db.query(
        TransactionFeedEntry.transaction_type,
        func.sum(TransactionFeedEntry.amount),
        func.count(TransactionFeedEntry.id)
    ).filter(TransactionFeedEntry.tenant_id == tenant_id)

    if start_date:
        query = query.filter(TransactionFeedEntry.date >= start_date)
    if end_date:
        query = query.filter(TransactionFeedEntry.date <= end_date)

    rows = query.group_by(TransactionFeedEntry.transaction_type).order_by(TransactionFeedEntry.transaction_type).all()
    return [
        {"transaction_type": transaction_type, "total": int(total or 0), "count": count}
        for transaction_type, total, count in rows
    ]
