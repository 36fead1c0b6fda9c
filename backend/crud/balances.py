"""
Balances and reports, derived from ledger postings only.

Reads never raise for a missing account or a failing query: they log a
warning and return a zero or empty result instead.
"""

import logging
from datetime import date, timedelta
from typing import Iterable, List, Optional, Tuple

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from crud.account_groups import get_account_group, get_account_group_by_name, list_account_groups
from crud.ledger import get_postings_by_account
from crud.source_documents import DOCUMENT_KINDS, get_document_ids
from posting_rules import (
    ACCOUNTS_PAYABLE, ACCOUNTS_RECEIVABLE, EntryDirection, SourceDocumentType, signed_amount,
)
from schemas.ledger import (
    AccountBalance, CounterpartyBalance, LedgerReport, LedgerReportEntry, TrialBalance, TrialBalanceLine,
)

logger = logging.getLogger("balances")

# invoice, payment and return document types per counterparty role
COUNTERPARTY_DOCUMENTS = {
    "customer": (SourceDocumentType.SALES_INVOICE, SourceDocumentType.PAYMENT_IN, SourceDocumentType.SALES_RETURN),
    "vendor": (SourceDocumentType.PURCHASE_INVOICE, SourceDocumentType.PAYMENT_OUT, SourceDocumentType.PURCHASE_RETURN),
}
COUNTERPARTY_ACCOUNTS = {
    "customer": ACCOUNTS_RECEIVABLE,
    "vendor": ACCOUNTS_PAYABLE,
}


def running_balances(postings: Iterable, opening_balance: int = 0) -> List[Tuple[object, int]]:
    """Pairs each posting with the balance after it; debits add, credits subtract."""
    balance = opening_balance
    result = []
    for posting in postings:
        balance += signed_amount(posting.direction, posting.amount)
        result.append((posting, balance))
    return result


def _totals(postings: Iterable) -> Tuple[int, int]:
    total_debit = total_credit = 0
    for posting in postings:
        if EntryDirection(posting.direction) is EntryDirection.DEBIT:
            total_debit += posting.amount
        else:
            total_credit += posting.amount
    return total_debit, total_credit


def get_account_balance(db: Session, tenant_id: str, account_id: int, as_of: Optional[date] = None) -> AccountBalance:
    try:
        account = get_account_group(db, account_id, tenant_id)
        if account is None:
            logger.warning(f"Account {account_id} not found for tenant {tenant_id}; reporting zero balance")
            return AccountBalance(account_id=account_id, as_of=as_of)

        postings = get_postings_by_account(db, tenant_id, account_id, end_date=as_of)
        total_debit, total_credit = _totals(postings)
        return AccountBalance(
            account_id=account.id,
            account_name=account.name,
            account_type=account.account_type,
            as_of=as_of,
            total_debit=total_debit,
            total_credit=total_credit,
            balance=total_debit - total_credit,
        )
    except SQLAlchemyError as e:
        logger.warning(f"Failed to compute balance of account {account_id} for tenant {tenant_id}: {e}")
        return AccountBalance(account_id=account_id, as_of=as_of)


def get_ledger_report(
    db: Session,
    tenant_id: str,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    account_id: Optional[int] = None,
    source_document_type: Optional[SourceDocumentType] = None
) -> LedgerReport:
    title = "General Ledger"
    try:
        if account_id:
            account = get_account_group(db, account_id, tenant_id)
            if account is None:
                logger.warning(f"Account {account_id} not found for tenant {tenant_id}; returning an empty ledger")
                return LedgerReport(title=title, account_id=account_id, start_date=start_date, end_date=end_date)
            title = f"Ledger - {account.name}"

        opening_balance = 0
        if start_date:
            prior = get_postings_by_account(
                db, tenant_id, account_id,
                end_date=start_date - timedelta(days=1),
                source_document_type=source_document_type,
            )
            opening_balance = sum(signed_amount(p.direction, p.amount) for p in prior)

        postings = get_postings_by_account(
            db, tenant_id, account_id,
            start_date=start_date,
            end_date=end_date,
            source_document_type=source_document_type,
        )
    except SQLAlchemyError as e:
        logger.warning(f"Failed to build ledger report for tenant {tenant_id}: {e}")
        return LedgerReport(title=title, account_id=account_id, start_date=start_date, end_date=end_date)

    entries = []
    for posting, balance in running_balances(postings, opening_balance):
        is_debit = EntryDirection(posting.direction) is EntryDirection.DEBIT
        entries.append(LedgerReportEntry(
            posting_id=posting.id,
            posting_date=posting.posting_date,
            account_id=posting.account_id,
            account_name=posting.account_name,
            source_document_type=posting.source_document_type,
            source_document_id=posting.source_document_id,
            description=posting.description,
            debit=posting.amount if is_debit else 0,
            credit=0 if is_debit else posting.amount,
            balance=balance,
        ))

    closing_balance = entries[-1].balance if entries else opening_balance
    total_debit, total_credit = _totals(postings)
    return LedgerReport(
        title=title,
        account_id=account_id,
        start_date=start_date,
        end_date=end_date,
        opening_balance=opening_balance,
        entries=entries,
        closing_balance=closing_balance,
        net_change=closing_balance - opening_balance,
        total_debit=total_debit,
        total_credit=total_credit,
    )


def get_counterparty_balance(db: Session, tenant_id: str, counterparty_id: int, role: str = "customer") -> CounterpartyBalance:
    """
    Outstanding balance of a customer (receivable) or vendor (payable).

    The counterparty's invoice, payment and completed return ids are collected
    first, then the postings of the control account are scanned for those
    references. Postings left behind by deleted documents no longer match an
    id and drop out.
    """
    if role not in COUNTERPARTY_ACCOUNTS:
        logger.warning(f"Unknown counterparty role '{role}' for tenant {tenant_id}; reporting zero balance")
        return CounterpartyBalance(counterparty_id=counterparty_id, role=role)

    account_name = COUNTERPARTY_ACCOUNTS[role]
    empty = CounterpartyBalance(counterparty_id=counterparty_id, role=role, account_name=account_name)
    invoice_type, payment_type, return_type = COUNTERPARTY_DOCUMENTS[role]

    try:
        account = get_account_group_by_name(db, account_name, tenant_id)
        if account is None:
            logger.warning(f"Account group \"{account_name}\" not found for tenant {tenant_id}; reporting zero balance")
            return empty

        references = {
            invoice_type: get_document_ids(db, tenant_id, DOCUMENT_KINDS[invoice_type], counterparty_id),
            payment_type: get_document_ids(db, tenant_id, DOCUMENT_KINDS[payment_type], counterparty_id),
            return_type: get_document_ids(db, tenant_id, DOCUMENT_KINDS[return_type], counterparty_id, status="completed"),
        }
        postings = get_postings_by_account(db, tenant_id, account.id)
    except SQLAlchemyError as e:
        logger.warning(f"Failed to compute balance of {role} {counterparty_id} for tenant {tenant_id}: {e}")
        return empty

    # Receivables grow with debits, payables with credits
    sign = 1 if role == "customer" else -1
    sums = {invoice_type: 0, payment_type: 0, return_type: 0}
    for posting in postings:
        document_type = SourceDocumentType(posting.source_document_type)
        if document_type in references and posting.source_document_id in references[document_type]:
            sums[document_type] += sign * signed_amount(posting.direction, posting.amount)

    total_invoiced = sums[invoice_type]
    total_paid = -sums[payment_type]
    total_returned = -sums[return_type]
    return CounterpartyBalance(
        counterparty_id=counterparty_id,
        role=role,
        account_name=account_name,
        total_invoiced=total_invoiced,
        total_paid=total_paid,
        total_returned=total_returned,
        balance=total_invoiced - total_paid - total_returned,
    )


def get_trial_balance(db: Session, tenant_id: str, as_of: Optional[date] = None) -> TrialBalance:
    try:
        accounts = list_account_groups(db, tenant_id)
        postings = get_postings_by_account(db, tenant_id, end_date=as_of)
    except SQLAlchemyError as e:
        logger.warning(f"Failed to build trial balance for tenant {tenant_id}: {e}")
        return TrialBalance(as_of=as_of)

    by_account = {account.id: [] for account in accounts}
    for posting in postings:
        by_account.setdefault(posting.account_id, []).append(posting)

    lines = []
    for account in accounts:
        total_debit, total_credit = _totals(by_account[account.id])
        lines.append(TrialBalanceLine(
            account_id=account.id,
            account_name=account.name,
            account_type=account.account_type,
            total_debit=total_debit,
            total_credit=total_credit,
            balance=total_debit - total_credit,
        ))

    total_debit = sum(line.total_debit for line in lines)
    total_credit = sum(line.total_credit for line in lines)
    if total_debit != total_credit:
        logger.warning(f"Trial balance for tenant {tenant_id} is off: debit {total_debit}, credit {total_credit}")
    return TrialBalance(
        as_of=as_of,
        lines=lines,
        total_debit=total_debit,
        total_credit=total_credit,
        is_balanced=total_debit == total_credit,
    )
