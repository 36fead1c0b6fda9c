import logging
from datetime import date
from typing import Iterable, List, Optional

from sqlalchemy.orm import Session, joinedload

from models.ledger_postings import LedgerPosting
from posting_rules import EntryDirection, PostingDraft, SourceDocumentType, reverse_entries
from utils.exceptions import UnbalancedPostings

logger = logging.getLogger("ledger")


def append_postings(db: Session, tenant_id: str, drafts: Iterable[PostingDraft], account_map) -> List[LedgerPosting]:
    """
    Adds a balanced batch of postings to the session.

    Account names are bound to ids through account_map, which raises
    AccountNotFound before anything is added. Nothing is committed here; the
    caller's unit of work commits the batch together with its source document.
    """
    drafts = list(drafts)
    total_debit = sum(d.amount for d in drafts if d.direction is EntryDirection.DEBIT)
    total_credit = sum(d.amount for d in drafts if d.direction is EntryDirection.CREDIT)
    if total_debit != total_credit:
        raise UnbalancedPostings(total_debit, total_credit)

    account_ids = [d.account_id or account_map.resolve(d.account_name) for d in drafts]

    postings = []
    for draft, account_id in zip(drafts, account_ids):
        postings.append(LedgerPosting(
            tenant_id=tenant_id,
            posting_date=draft.posting_date,
            source_document_type=draft.source_document_type.value,
            source_document_id=draft.source_document_id,
            account_id=account_id,
            direction=draft.direction.value,
            amount=draft.amount,
            description=draft.description,
            reverses_posting_id=draft.reverses_posting_id,
        ))
    db.add_all(postings)
    db.flush()
    return postings

def get_postings_by_reference(
    db: Session,
    tenant_id: str,
    source_document_type: SourceDocumentType,
    source_document_id: int
) -> List[LedgerPosting]:
    return db.query(LedgerPosting).options(joinedload(LedgerPosting.account)).filter(
        LedgerPosting.tenant_id == tenant_id,
        LedgerPosting.source_document_type == SourceDocumentType(source_document_type).value,
        LedgerPosting.source_document_id == source_document_id
    ).order_by(LedgerPosting.id).all()

def get_postings_by_account(
    db: Session,
    tenant_id: str,
    account_id: Optional[int] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    source_document_type: Optional[SourceDocumentType] = None
) -> List[LedgerPosting]:
    """
    Postings ordered by date ascending, the feed for balance derivation.
    An account_id of None or 0 selects every account of the tenant.
    """
    query = db.query(LedgerPosting).options(joinedload(LedgerPosting.account)).filter(
        LedgerPosting.tenant_id == tenant_id
    )

    if account_id:
        query = query.filter(LedgerPosting.account_id == account_id)
    if start_date:
        query = query.filter(LedgerPosting.posting_date >= start_date)
    if end_date:
        query = query.filter(LedgerPosting.posting_date <= end_date)
    if source_document_type:
        query = query.filter(LedgerPosting.source_document_type == SourceDocumentType(source_document_type).value)

    return query.order_by(LedgerPosting.posting_date.asc(), LedgerPosting.id.asc()).all()

def delete_postings_by_reference(
    db: Session,
    tenant_id: str,
    source_document_type: SourceDocumentType,
    source_document_id: int
) -> int:
    query = db.query(LedgerPosting).filter(
        LedgerPosting.tenant_id == tenant_id,
        LedgerPosting.source_document_type == SourceDocumentType(source_document_type).value,
        LedgerPosting.source_document_id == source_document_id
    )
    # Reversal rows point at the rows they reverse, so they go first
    deleted = query.filter(LedgerPosting.reverses_posting_id.isnot(None)).delete(synchronize_session=False)
    deleted += query.delete(synchronize_session=False)
    db.flush()
    logger.info(
        f"Deleted {deleted} ledger postings for {SourceDocumentType(source_document_type).value} "
        f"{source_document_id} for tenant {tenant_id}"
    )
    return deleted

def reverse_postings_by_reference(
    db: Session,
    tenant_id: str,
    source_document_type: SourceDocumentType,
    source_document_id: int,
    posting_date: date,
    account_map
) -> List[LedgerPosting]:
    """Appends equal-and-opposite postings for whatever is still live on a reference."""
    postings = get_postings_by_reference(db, tenant_id, source_document_type, source_document_id)
    drafts = reverse_entries(postings, posting_date)
    if not drafts:
        return []
    reversals = append_postings(db, tenant_id, drafts, account_map)
    logger.info(
        f"Reversed {len(postings)} ledger postings for {SourceDocumentType(source_document_type).value} "
        f"{source_document_id} for tenant {tenant_id}"
    )
    return reversals
