"""
Recording, updating and deleting source documents through TenantLedger.
"""

from datetime import date

import pytest

import crud.source_documents as source_documents
from crud import app_config as crud_app_config
from models.ledger_postings import LedgerPosting
from models.sales_invoices import SalesInvoice
from models.transactions import TransactionFeedEntry
from posting_rules import ACCOUNTS_RECEIVABLE, BANK_CASH, EXPENSES, SALES_REVENUE, SourceDocumentType
from tenant_ledger import TenantLedger
from utils import local_today
from utils.exceptions import (
    AccountNotFound, CounterpartyNotFound, InvalidAmount, InvalidCorrectionMode, InvalidDocumentField,
    SourceDocumentNotFound,
)

from conftest import TENANT_ID


def _net_by_account(postings):
    net = {}
    for posting in postings:
        sign = 1 if posting.direction == "debit" else -1
        net[posting.account_name] = net.get(posting.account_name, 0) + sign * posting.amount
    return net


def _row_counts(db_session):
    return (
        db_session.query(SalesInvoice).count(),
        db_session.query(TransactionFeedEntry).count(),
        db_session.query(LedgerPosting).count(),
    )


def test_every_document_type_posts_a_balanced_pair(provisioned_ledger, customer, vendor):
    day = date(2024, 3, 1)
    documents = [
        provisioned_ledger.record_sales_invoice(
            {"invoice_number": "S-1", "customer_id": customer.id, "invoice_date": day, "total": 1000},
            [{"product_name": "Widget", "quantity": 2, "unit_price": 500, "total": 1000}],
        ),
        provisioned_ledger.record_purchase_invoice(
            {"invoice_number": "P-1", "vendor_id": vendor.id, "invoice_date": day, "total": 700}
        ),
        provisioned_ledger.record_sales_return(
            {"return_number": "SR-1", "customer_id": customer.id, "return_date": day, "total": 100}
        ),
        provisioned_ledger.record_purchase_return(
            {"return_number": "PR-1", "vendor_id": vendor.id, "return_date": day, "total": 50}
        ),
        provisioned_ledger.record_payment_in(
            {"payment_number": "PI-1", "customer_id": customer.id, "payment_date": day, "amount": 400}
        ),
        provisioned_ledger.record_payment_out(
            {"payment_number": "PO-1", "vendor_id": vendor.id, "payment_date": day, "amount": 300}
        ),
        provisioned_ledger.record_income({"date": day, "description": "Interest", "amount": 25}),
        provisioned_ledger.record_expense({"date": day, "description": "Office rent", "amount": 200}),
    ]

    for document_type, document in zip(list(source_documents.DOCUMENT_KINDS), documents):
        postings = provisioned_ledger.get_postings_by_reference(document_type, document.id)
        assert len(postings) == 2
        debits = [p.amount for p in postings if p.direction == "debit"]
        credits = [p.amount for p in postings if p.direction == "credit"]
        assert debits == credits


def test_default_statuses_follow_the_document_kind(provisioned_ledger, customer):
    invoice = provisioned_ledger.record_sales_invoice(
        {"invoice_number": "S-1", "customer_id": customer.id, "invoice_date": date(2024, 3, 1), "total": 1000}
    )
    sales_return = provisioned_ledger.record_sales_return(
        {"return_number": "SR-1", "customer_id": customer.id, "return_date": date(2024, 3, 2), "total": 100}
    )
    payment = provisioned_ledger.record_payment_in(
        {"payment_number": "PI-1", "customer_id": customer.id, "payment_date": date(2024, 3, 3), "amount": 100}
    )
    assert (invoice.status, sales_return.status, payment.status) == ("unpaid", "pending", "completed")


def test_sales_invoice_postings_and_feed_entry(provisioned_ledger, invoice_data, db_session):
    invoice = provisioned_ledger.record_sales_invoice(invoice_data)

    postings = provisioned_ledger.get_postings_by_reference(SourceDocumentType.SALES_INVOICE, invoice.id)
    assert [(p.account_name, p.direction, p.amount) for p in postings] == [
        (ACCOUNTS_RECEIVABLE, "debit", 5000),
        (SALES_REVENUE, "credit", 5000),
    ]
    assert postings[0].description == "Sales invoice: Sales Invoice #INV-001"
    assert postings[0].posting_date == date(2024, 3, 1)

    entry = db_session.query(TransactionFeedEntry).one()
    assert (entry.transaction_type, entry.reference_id, entry.amount) == ("sales_invoice", invoice.id, 5000)
    assert entry.status == "unpaid"


def test_expense_feed_sign_differs_from_ledger_direction(provisioned_ledger, db_session):
    expense = provisioned_ledger.record_expense(
        {"date": date(2024, 3, 5), "description": "Office rent", "amount": 200, "payment_method": "bank"}
    )

    entry = db_session.query(TransactionFeedEntry).one()
    assert entry.amount == -200
    assert entry.payment_method == "bank"

    postings = provisioned_ledger.get_postings_by_reference(SourceDocumentType.EXPENSE, expense.id)
    assert [(p.account_name, p.direction, p.amount) for p in postings] == [
        (EXPENSES, "debit", 200),
        (BANK_CASH, "credit", 200),
    ]
    assert postings[0].description == "Expense: Office rent"


def test_posting_before_provisioning_fails_without_partial_rows(ledger, invoice_data, db_session):
    with pytest.raises(AccountNotFound):
        ledger.record_sales_invoice(invoice_data)

    assert _row_counts(db_session) == (0, 0, 0)


def test_invalid_amount_fails_without_partial_rows(provisioned_ledger, invoice_data, db_session):
    invoice_data["total"] = 0
    with pytest.raises(InvalidAmount):
        provisioned_ledger.record_sales_invoice(invoice_data)

    assert _row_counts(db_session) == (0, 0, 0)


def test_failure_after_feed_write_rolls_back_document_and_feed(provisioned_ledger, invoice_data, db_session, monkeypatch):
    def failing_append(*args, **kwargs):
        raise RuntimeError("database went away")

    monkeypatch.setattr(source_documents, "append_postings", failing_append)
    with pytest.raises(RuntimeError):
        provisioned_ledger.record_sales_invoice(invoice_data)

    assert _row_counts(db_session) == (0, 0, 0)


def test_counterparty_must_exist_with_the_right_role(provisioned_ledger, vendor, invoice_data, db_session):
    invoice_data["customer_id"] = vendor.id
    with pytest.raises(CounterpartyNotFound):
        provisioned_ledger.record_sales_invoice(invoice_data)

    invoice_data["customer_id"] = 9999
    with pytest.raises(CounterpartyNotFound):
        provisioned_ledger.record_sales_invoice(invoice_data)

    assert _row_counts(db_session) == (0, 0, 0)


def test_delete_in_retain_mode_keeps_postings(provisioned_ledger, invoice_data, db_session):
    invoice = provisioned_ledger.record_sales_invoice(
        invoice_data, [{"product_name": "Widget", "quantity": 1, "unit_price": 5000, "total": 5000}]
    )
    invoice_id = invoice.id

    assert provisioned_ledger.delete_document(SourceDocumentType.SALES_INVOICE, invoice_id) is True

    assert provisioned_ledger.get_document(SourceDocumentType.SALES_INVOICE, invoice_id) is None
    assert db_session.query(TransactionFeedEntry).count() == 0
    postings = provisioned_ledger.get_postings_by_reference(SourceDocumentType.SALES_INVOICE, invoice_id)
    assert len(postings) == 2


def test_delete_unknown_document_raises(provisioned_ledger):
    with pytest.raises(SourceDocumentNotFound):
        provisioned_ledger.delete_document(SourceDocumentType.EXPENSE, 42)


def test_update_refreshes_feed_and_retains_postings(provisioned_ledger, invoice_data, db_session):
    invoice = provisioned_ledger.record_sales_invoice(invoice_data)

    updated = provisioned_ledger.update_document(
        SourceDocumentType.SALES_INVOICE, invoice.id, {"total": 6000, "notes": "Revised"}
    )

    assert updated.total == 6000
    entry = db_session.query(TransactionFeedEntry).one()
    assert (entry.amount, entry.description) == (6000, "Revised")
    postings = provisioned_ledger.get_postings_by_reference(SourceDocumentType.SALES_INVOICE, invoice.id)
    assert [p.amount for p in postings] == [5000, 5000]


def test_update_replaces_item_lines(provisioned_ledger, invoice_data):
    invoice = provisioned_ledger.record_sales_invoice(
        invoice_data, [{"product_name": "Widget", "quantity": 1, "unit_price": 5000, "total": 5000}]
    )
    updated = provisioned_ledger.update_document(
        SourceDocumentType.SALES_INVOICE, invoice.id, {},
        [
            {"product_name": "Gadget", "quantity": 1, "unit_price": 3000, "total": 3000},
            {"product_name": "Gizmo", "quantity": 1, "unit_price": 2000, "total": 2000},
        ],
    )
    assert sorted(item.product_name for item in updated.items) == ["Gadget", "Gizmo"]


def test_update_with_invalid_amount_leaves_document_unchanged(provisioned_ledger, invoice_data, db_session):
    invoice = provisioned_ledger.record_sales_invoice(invoice_data)

    with pytest.raises(InvalidAmount):
        provisioned_ledger.update_document(SourceDocumentType.SALES_INVOICE, invoice.id, {"total": -1})

    db_session.expire_all()
    assert db_session.get(SalesInvoice, invoice.id).total == 5000


def test_update_cannot_clear_required_fields(provisioned_ledger, invoice_data, db_session):
    invoice = provisioned_ledger.record_sales_invoice(invoice_data)

    with pytest.raises(InvalidDocumentField):
        provisioned_ledger.update_document(SourceDocumentType.SALES_INVOICE, invoice.id, {"invoice_date": None})

    db_session.expire_all()
    assert db_session.get(SalesInvoice, invoice.id).invoice_date == date(2024, 3, 1)

    # Optional fields may still be cleared
    updated = provisioned_ledger.update_document(SourceDocumentType.SALES_INVOICE, invoice.id, {"due_date": None})
    assert updated.due_date is None


def test_cascade_mode_rederives_postings_on_update(db_session, invoice_data):
    ledger = TenantLedger(db_session, TENANT_ID, correction_mode="cascade")
    ledger.provision_defaults()
    invoice = ledger.record_sales_invoice(invoice_data)

    ledger.update_document(SourceDocumentType.SALES_INVOICE, invoice.id, {"total": 6000, "invoice_date": date(2024, 3, 9)})

    postings = ledger.get_postings_by_reference(SourceDocumentType.SALES_INVOICE, invoice.id)
    assert [(p.direction, p.amount, p.posting_date) for p in postings] == [
        ("debit", 6000, date(2024, 3, 9)),
        ("credit", 6000, date(2024, 3, 9)),
    ]


def test_cascade_mode_removes_postings_on_delete(db_session, invoice_data):
    ledger = TenantLedger(db_session, TENANT_ID, correction_mode="cascade")
    ledger.provision_defaults()
    invoice = ledger.record_sales_invoice(invoice_data)

    ledger.delete_document(SourceDocumentType.SALES_INVOICE, invoice.id)

    assert ledger.get_postings_by_reference(SourceDocumentType.SALES_INVOICE, invoice.id) == []


def test_reverse_mode_appends_compensating_postings(db_session, invoice_data):
    ledger = TenantLedger(db_session, TENANT_ID, correction_mode="reverse")
    ledger.provision_defaults()
    invoice = ledger.record_sales_invoice(invoice_data)

    ledger.update_document(SourceDocumentType.SALES_INVOICE, invoice.id, {"total": 6000})

    postings = ledger.get_postings_by_reference(SourceDocumentType.SALES_INVOICE, invoice.id)
    assert len(postings) == 6
    reversals = [p for p in postings if p.reverses_posting_id is not None]
    assert len(reversals) == 2
    assert all(p.posting_date == local_today() for p in reversals)
    assert _net_by_account(postings) == {ACCOUNTS_RECEIVABLE: 6000, SALES_REVENUE: -6000}

    ledger.delete_document(SourceDocumentType.SALES_INVOICE, invoice.id)

    postings = ledger.get_postings_by_reference(SourceDocumentType.SALES_INVOICE, invoice.id)
    assert _net_by_account(postings) == {ACCOUNTS_RECEIVABLE: 0, SALES_REVENUE: 0}


def test_correction_mode_comes_from_tenant_settings(ledger, db_session):
    assert ledger.correction_mode == "retain"
    crud_app_config.update_ledger_settings(db_session, {"ledger_correction_mode": "cascade"}, TENANT_ID)
    assert ledger.correction_mode == "cascade"

    with pytest.raises(InvalidCorrectionMode):
        TenantLedger(db_session, TENANT_ID, correction_mode="rewrite")


def test_documents_are_scoped_to_their_tenant(provisioned_ledger, invoice_data, db_session):
    invoice = provisioned_ledger.record_sales_invoice(invoice_data)
    other = TenantLedger(db_session, "tenant-b")

    assert other.get_document(SourceDocumentType.SALES_INVOICE, invoice.id) is None
    assert other.get_postings_by_reference(SourceDocumentType.SALES_INVOICE, invoice.id) == []
    with pytest.raises(SourceDocumentNotFound):
        other.delete_document(SourceDocumentType.SALES_INVOICE, invoice.id)
