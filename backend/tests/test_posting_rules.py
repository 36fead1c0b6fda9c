"""
Unit tests for the posting rules.

No database is involved; postings are plain objects.
"""

from datetime import date
from types import SimpleNamespace

import pytest

from posting_rules import (
    ACCOUNTS_PAYABLE, ACCOUNTS_RECEIVABLE, BANK_CASH, EXPENSES, INCOME, INVENTORY, PURCHASE_RETURNS,
    SALES_RETURNS, SALES_REVENUE, FEED_SIGNS, POSTING_RULES, EntryDirection, SourceDocumentType,
    derive_entries, feed_amount, reverse_entries, signed_amount,
)
from utils.exceptions import InvalidAmount

POSTING_DATE = date(2024, 3, 1)

EXPECTED_ACCOUNTS = {
    SourceDocumentType.PAYMENT_IN: (BANK_CASH, ACCOUNTS_RECEIVABLE),
    SourceDocumentType.SALES_INVOICE: (ACCOUNTS_RECEIVABLE, SALES_REVENUE),
    SourceDocumentType.SALES_RETURN: (SALES_RETURNS, ACCOUNTS_RECEIVABLE),
    SourceDocumentType.PAYMENT_OUT: (ACCOUNTS_PAYABLE, BANK_CASH),
    SourceDocumentType.PURCHASE_INVOICE: (INVENTORY, ACCOUNTS_PAYABLE),
    SourceDocumentType.PURCHASE_RETURN: (ACCOUNTS_PAYABLE, PURCHASE_RETURNS),
    SourceDocumentType.INCOME: (BANK_CASH, INCOME),
    SourceDocumentType.EXPENSE: (EXPENSES, BANK_CASH),
}


def test_every_document_type_has_a_rule_and_a_feed_sign():
    assert set(POSTING_RULES) == set(SourceDocumentType)
    assert set(FEED_SIGNS) == set(SourceDocumentType)


@pytest.mark.parametrize("document_type", list(SourceDocumentType))
def test_derive_entries_balances_for_every_type(document_type):
    debit, credit = derive_entries(document_type, 7, 1250, POSTING_DATE, "INV-7")

    assert debit.direction is EntryDirection.DEBIT
    assert credit.direction is EntryDirection.CREDIT
    assert debit.amount == credit.amount == 1250
    assert (debit.account_name, credit.account_name) == EXPECTED_ACCOUNTS[document_type]
    assert debit.source_document_id == credit.source_document_id == 7
    assert debit.posting_date == credit.posting_date == POSTING_DATE


def test_description_carries_the_event_prefix():
    debit, credit = derive_entries(SourceDocumentType.PAYMENT_IN, 1, 300, POSTING_DATE, "Payment received from customer (PI-1)")
    assert debit.description == "Payment received: Payment received from customer (PI-1)"
    assert credit.description == debit.description

    debit, _ = derive_entries(SourceDocumentType.EXPENSE, 2, 200, POSTING_DATE, "Office rent")
    assert debit.description == "Expense: Office rent"


@pytest.mark.parametrize("amount", [0, -5, 10.5, "100", None, True])
def test_derive_entries_rejects_non_positive_or_non_integer_amounts(amount):
    with pytest.raises(InvalidAmount):
        derive_entries(SourceDocumentType.SALES_INVOICE, 1, amount, POSTING_DATE, "bad")


def test_feed_sign_is_independent_of_ledger_direction():
    # An expense debits Expenses but is an outflow in the feed
    assert feed_amount(SourceDocumentType.EXPENSE, 200) == -200
    assert feed_amount(SourceDocumentType.SALES_RETURN, 80) == -80
    assert feed_amount(SourceDocumentType.PURCHASE_RETURN, 80) == 80
    assert feed_amount(SourceDocumentType.PAYMENT_IN, 300) == 300
    assert feed_amount(SourceDocumentType.PAYMENT_OUT, 300) == -300


def test_signed_amount():
    assert signed_amount(EntryDirection.DEBIT, 100) == 100
    assert signed_amount("credit", 100) == -100


def _posting(posting_id, account_name, account_id, direction, amount):
    return SimpleNamespace(
        id=posting_id,
        account_name=account_name,
        account_id=account_id,
        direction=direction,
        amount=amount,
        source_document_type="sales_invoice",
        source_document_id=9,
        description="Sales invoice: INV-9",
    )


def test_reverse_entries_cancel_live_postings():
    postings = [
        _posting(1, ACCOUNTS_RECEIVABLE, 2, "debit", 500),
        _posting(2, SALES_REVENUE, 6, "credit", 500),
    ]
    reversals = reverse_entries(postings, date(2024, 4, 1))

    assert [(r.account_name, r.direction, r.amount) for r in reversals] == [
        (ACCOUNTS_RECEIVABLE, EntryDirection.CREDIT, 500),
        (SALES_REVENUE, EntryDirection.DEBIT, 500),
    ]
    assert [r.reverses_posting_id for r in reversals] == [1, 2]
    assert [r.account_id for r in reversals] == [2, 6]
    assert all(r.description == "Reversal: Sales invoice: INV-9" for r in reversals)
    assert all(r.posting_date == date(2024, 4, 1) for r in reversals)


def test_reverse_entries_skips_already_reversed_references():
    postings = [
        _posting(1, ACCOUNTS_RECEIVABLE, 2, "debit", 500),
        _posting(2, SALES_REVENUE, 6, "credit", 500),
        _posting(3, ACCOUNTS_RECEIVABLE, 2, "credit", 500),
        _posting(4, SALES_REVENUE, 6, "debit", 500),
    ]
    assert reverse_entries(postings, POSTING_DATE) == []
