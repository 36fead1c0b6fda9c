"""
Posting rules for the double-entry ledger.

Every source document type maps to exactly one debit account and one credit
account. The mapping lives in POSTING_RULES so that each event always produces
a balanced pair of postings from a single table.

The transaction feed uses its own sign convention (FEED_SIGNS). It is
independent of the debit/credit rules and must not be derived from them.
"""

import enum
from dataclasses import dataclass, replace
from datetime import date
from typing import Dict, Iterable, List, Optional, Tuple

from utils.exceptions import InvalidAmount


class SourceDocumentType(str, enum.Enum):
    SALES_INVOICE = "sales_invoice"
    SALES_RETURN = "sales_return"
    PURCHASE_INVOICE = "purchase_invoice"
    PURCHASE_RETURN = "purchase_return"
    PAYMENT_IN = "payment_in"
    PAYMENT_OUT = "payment_out"
    INCOME = "income"
    EXPENSE = "expense"


class EntryDirection(str, enum.Enum):
    DEBIT = "debit"
    CREDIT = "credit"


class AccountType(str, enum.Enum):
    ASSET = "asset"
    LIABILITY = "liability"
    EQUITY = "equity"
    REVENUE = "revenue"
    EXPENSE = "expense"


# Default account group names
BANK_CASH = "Bank/Cash"
ACCOUNTS_RECEIVABLE = "Accounts Receivable"
INVENTORY = "Inventory"
PURCHASE_RETURNS = "Purchase Returns"
ACCOUNTS_PAYABLE = "Accounts Payable"
SALES_REVENUE = "Sales Revenue"
SALES_RETURNS = "Sales Returns"
INCOME = "Income"
EXPENSES = "Expenses"


@dataclass(frozen=True)
class PostingRule:
    debit_account: str
    credit_account: str
    description_prefix: str


POSTING_RULES: Dict[SourceDocumentType, PostingRule] = {
    SourceDocumentType.PAYMENT_IN: PostingRule(BANK_CASH, ACCOUNTS_RECEIVABLE, "Payment received"),
    SourceDocumentType.SALES_INVOICE: PostingRule(ACCOUNTS_RECEIVABLE, SALES_REVENUE, "Sales invoice"),
    SourceDocumentType.SALES_RETURN: PostingRule(SALES_RETURNS, ACCOUNTS_RECEIVABLE, "Sales return"),
    SourceDocumentType.PAYMENT_OUT: PostingRule(ACCOUNTS_PAYABLE, BANK_CASH, "Payment made"),
    SourceDocumentType.PURCHASE_INVOICE: PostingRule(INVENTORY, ACCOUNTS_PAYABLE, "Purchase invoice"),
    SourceDocumentType.PURCHASE_RETURN: PostingRule(ACCOUNTS_PAYABLE, PURCHASE_RETURNS, "Purchase return"),
    SourceDocumentType.INCOME: PostingRule(BANK_CASH, INCOME, "Income"),
    SourceDocumentType.EXPENSE: PostingRule(EXPENSES, BANK_CASH, "Expense"),
}

# +1 for inflows, -1 for outflows in the transaction feed
FEED_SIGNS: Dict[SourceDocumentType, int] = {
    SourceDocumentType.PAYMENT_IN: 1,
    SourceDocumentType.SALES_INVOICE: 1,
    SourceDocumentType.INCOME: 1,
    SourceDocumentType.PURCHASE_RETURN: 1,
    SourceDocumentType.PAYMENT_OUT: -1,
    SourceDocumentType.PURCHASE_INVOICE: -1,
    SourceDocumentType.EXPENSE: -1,
    SourceDocumentType.SALES_RETURN: -1,
}


@dataclass(frozen=True)
class PostingDraft:
    """A ledger posting that has not been bound to an account id yet."""
    source_document_type: SourceDocumentType
    source_document_id: int
    account_name: str
    direction: EntryDirection
    amount: int
    posting_date: date
    description: str
    reverses_posting_id: Optional[int] = None
    # Set when the account is already known, e.g. for reversals
    account_id: Optional[int] = None


def validate_amount(amount) -> int:
    # bool is an int subclass; True must not post as 1
    if isinstance(amount, bool) or not isinstance(amount, int) or amount <= 0:
        raise InvalidAmount(amount)
    return amount


def derive_entries(
    document_type: SourceDocumentType,
    source_id: int,
    amount: int,
    posting_date: date,
    description: str
) -> Tuple[PostingDraft, PostingDraft]:
    """
    Build the debit and credit drafts for one source document event.

    Both drafts always carry the same amount. Raises InvalidAmount for zero,
    negative or non-integer amounts.
    """
    document_type = SourceDocumentType(document_type)
    amount = validate_amount(amount)
    rule = POSTING_RULES[document_type]
    text = f"{rule.description_prefix}: {description}"

    debit = PostingDraft(
        source_document_type=document_type,
        source_document_id=source_id,
        account_name=rule.debit_account,
        direction=EntryDirection.DEBIT,
        amount=amount,
        posting_date=posting_date,
        description=text,
    )
    return debit, replace(debit, account_name=rule.credit_account, direction=EntryDirection.CREDIT)


def reverse_entries(postings: Iterable, posting_date: date) -> List[PostingDraft]:
    """
    Compensating drafts for already written postings.

    The postings are netted per account first, so calling this on a reference
    that was reversed before only reverses what is still live. The result is
    empty when the postings already net to zero.
    """
    net: Dict[Tuple[str, int], int] = {}
    order: List[Tuple[str, int]] = []
    first_posting = {}
    for posting in postings:
        key = (posting.account_name, posting.account_id)
        if key not in net:
            net[key] = 0
            order.append(key)
            first_posting[key] = posting
        net[key] += signed_amount(posting.direction, posting.amount)

    drafts = []
    for key in order:
        balance = net[key]
        if balance == 0:
            continue
        original = first_posting[key]
        drafts.append(PostingDraft(
            source_document_type=SourceDocumentType(original.source_document_type),
            source_document_id=original.source_document_id,
            account_name=key[0],
            # A live debit balance is cancelled by a credit and vice versa
            direction=EntryDirection.CREDIT if balance > 0 else EntryDirection.DEBIT,
            amount=abs(balance),
            posting_date=posting_date,
            description=f"Reversal: {original.description}",
            reverses_posting_id=original.id,
            account_id=key[1],
        ))
    return drafts


def signed_amount(direction, amount: int) -> int:
    """Debits count up and credits count down."""
    return amount if EntryDirection(direction) is EntryDirection.DEBIT else -amount


def feed_amount(document_type: SourceDocumentType, amount: int) -> int:
    return FEED_SIGNS[SourceDocumentType(document_type)] * amount
