from datetime import date
from types import SimpleNamespace

from crud import account_groups as crud_account_groups
from crud.balances import running_balances
from posting_rules import ACCOUNTS_RECEIVABLE, BANK_CASH, SourceDocumentType

from conftest import TENANT_ID


def test_running_balance_is_a_left_fold():
    postings = [
        SimpleNamespace(direction="debit", amount=1000),
        SimpleNamespace(direction="credit", amount=1000),
        SimpleNamespace(direction="debit", amount=500),
    ]
    assert [balance for _, balance in running_balances(postings)] == [1000, 0, 500]
    assert [balance for _, balance in running_balances(postings, opening_balance=250)] == [1250, 250, 750]


def test_customer_balance_is_invoices_less_payments(provisioned_ledger, customer, invoice_data):
    provisioned_ledger.record_sales_invoice(invoice_data)
    provisioned_ledger.record_payment_in(
        {"payment_number": "PI-1", "customer_id": customer.id, "payment_date": date(2024, 3, 10), "amount": 3000}
    )

    balance = provisioned_ledger.get_counterparty_balance(customer.id, "customer")

    assert balance.account_name == ACCOUNTS_RECEIVABLE
    assert (balance.total_invoiced, balance.total_paid, balance.total_returned) == (5000, 3000, 0)
    assert balance.balance == 2000


def test_only_completed_sales_returns_reduce_the_balance(provisioned_ledger, customer, invoice_data):
    provisioned_ledger.record_sales_invoice(invoice_data)
    provisioned_ledger.record_sales_return(
        {"return_number": "SR-1", "customer_id": customer.id, "return_date": date(2024, 3, 4), "total": 400}
    )
    provisioned_ledger.record_sales_return(
        {"return_number": "SR-2", "customer_id": customer.id, "return_date": date(2024, 3, 5), "total": 600,
         "status": "completed"}
    )

    balance = provisioned_ledger.get_counterparty_balance(customer.id, "customer")

    assert balance.total_returned == 600
    assert balance.balance == 4400


def test_balance_ignores_other_customers(provisioned_ledger, customer, make_partner, invoice_data):
    other = make_partner("Beta Stores", is_vendor=False)
    provisioned_ledger.record_sales_invoice(invoice_data)
    provisioned_ledger.record_sales_invoice(
        {"invoice_number": "INV-002", "customer_id": other.id, "invoice_date": date(2024, 3, 2), "total": 900}
    )

    assert provisioned_ledger.get_counterparty_balance(customer.id).balance == 5000
    assert provisioned_ledger.get_counterparty_balance(other.id).balance == 900


def test_vendor_balance_is_amount_owed(provisioned_ledger, vendor):
    day = date(2024, 3, 1)
    provisioned_ledger.record_purchase_invoice(
        {"invoice_number": "P-1", "vendor_id": vendor.id, "invoice_date": day, "total": 8000}
    )
    provisioned_ledger.record_payment_out(
        {"payment_number": "PO-1", "vendor_id": vendor.id, "payment_date": day, "amount": 2500}
    )
    provisioned_ledger.record_purchase_return(
        {"return_number": "PR-1", "vendor_id": vendor.id, "return_date": day, "total": 500, "status": "completed"}
    )

    balance = provisioned_ledger.get_counterparty_balance(vendor.id, "vendor")

    assert (balance.total_invoiced, balance.total_paid, balance.total_returned) == (8000, 2500, 500)
    assert balance.balance == 5000


def test_deleted_invoice_drops_out_of_the_customer_balance(provisioned_ledger, customer, invoice_data):
    invoice = provisioned_ledger.record_sales_invoice(invoice_data)
    provisioned_ledger.delete_document(SourceDocumentType.SALES_INVOICE, invoice.id)

    # The postings are retained but no longer match one of the customer's invoices
    assert len(provisioned_ledger.get_postings_by_reference(SourceDocumentType.SALES_INVOICE, invoice.id)) == 2
    assert provisioned_ledger.get_counterparty_balance(customer.id).balance == 0


def test_reads_degrade_to_zero_before_provisioning(ledger, customer):
    assert ledger.get_counterparty_balance(customer.id).balance == 0
    assert ledger.get_account_balance(1).balance == 0
    assert ledger.get_ledger_report(account_id=1).entries == []
    assert ledger.get_trial_balance().lines == []


def test_account_balance_as_of_date(provisioned_ledger, db_session):
    provisioned_ledger.record_income({"date": date(2024, 1, 10), "description": "Interest", "amount": 1000})
    provisioned_ledger.record_expense({"date": date(2024, 2, 10), "description": "Rent", "amount": 1000})
    provisioned_ledger.record_income({"date": date(2024, 3, 10), "description": "Rent received", "amount": 500})
    bank_id = crud_account_groups.resolve_account_id(db_session, TENANT_ID, BANK_CASH)

    assert provisioned_ledger.get_account_balance(bank_id).balance == 500
    assert provisioned_ledger.get_account_balance(bank_id, as_of=date(2024, 1, 31)).balance == 1000
    assert provisioned_ledger.get_account_balance(bank_id, as_of=date(2024, 2, 28)).balance == 0


def test_ledger_report_opening_and_running_balance(provisioned_ledger, db_session):
    provisioned_ledger.record_income({"date": date(2024, 1, 10), "description": "Interest", "amount": 1000})
    provisioned_ledger.record_expense({"date": date(2024, 2, 10), "description": "Rent", "amount": 1000})
    provisioned_ledger.record_income({"date": date(2024, 3, 10), "description": "Rent received", "amount": 500})
    bank_id = crud_account_groups.resolve_account_id(db_session, TENANT_ID, BANK_CASH)

    full = provisioned_ledger.get_ledger_report(account_id=bank_id)
    assert [entry.balance for entry in full.entries] == [1000, 0, 500]
    assert (full.opening_balance, full.closing_balance, full.net_change) == (0, 500, 500)
    assert (full.total_debit, full.total_credit) == (1500, 1000)
    assert full.title == f"Ledger - {BANK_CASH}"

    period = provisioned_ledger.get_ledger_report(start_date=date(2024, 2, 1), account_id=bank_id)
    assert period.opening_balance == 1000
    assert [(entry.debit, entry.credit, entry.balance) for entry in period.entries] == [(0, 1000, 0), (500, 0, 500)]
    assert period.net_change == -500


def test_ledger_report_filters_by_source_document_type(provisioned_ledger):
    provisioned_ledger.record_income({"date": date(2024, 1, 10), "description": "Interest", "amount": 1000})
    provisioned_ledger.record_expense({"date": date(2024, 2, 10), "description": "Rent", "amount": 300})

    report = provisioned_ledger.get_ledger_report(source_document_type=SourceDocumentType.EXPENSE)

    assert len(report.entries) == 2
    assert {entry.source_document_type for entry in report.entries} == {SourceDocumentType.EXPENSE}
    assert report.closing_balance == 0


def test_trial_balance_totals_match(provisioned_ledger, customer, vendor, invoice_data):
    provisioned_ledger.record_sales_invoice(invoice_data)
    provisioned_ledger.record_purchase_invoice(
        {"invoice_number": "P-1", "vendor_id": vendor.id, "invoice_date": date(2024, 3, 2), "total": 2000}
    )
    provisioned_ledger.record_expense({"date": date(2024, 3, 3), "description": "Fuel", "amount": 150})

    trial = provisioned_ledger.get_trial_balance()

    assert len(trial.lines) == 9
    assert trial.total_debit == trial.total_credit == 7150
    assert trial.is_balanced
    by_name = {line.account_name: line.balance for line in trial.lines}
    assert by_name[ACCOUNTS_RECEIVABLE] == 5000
    assert by_name[BANK_CASH] == -150


def test_new_invoice_does_not_inherit_postings_of_a_deleted_one(provisioned_ledger, customer, invoice_data):
    deleted = provisioned_ledger.record_sales_invoice(invoice_data)
    deleted_id = deleted.id
    provisioned_ledger.delete_document(SourceDocumentType.SALES_INVOICE, deleted_id)

    invoice = provisioned_ledger.record_sales_invoice(
        {"invoice_number": "INV-002", "customer_id": customer.id, "invoice_date": date(2024, 3, 5), "total": 1000}
    )

    assert invoice.id != deleted_id
    postings = provisioned_ledger.get_postings_by_reference(SourceDocumentType.SALES_INVOICE, invoice.id)
    assert [p.amount for p in postings] == [1000, 1000]
    assert provisioned_ledger.get_counterparty_balance(customer.id).balance == 1000


def test_unknown_counterparty_role_reports_an_empty_balance(provisioned_ledger, customer, invoice_data):
    provisioned_ledger.record_sales_invoice(invoice_data)

    balance = provisioned_ledger.get_counterparty_balance(customer.id, "partner")

    assert (balance.role, balance.account_name, balance.balance) == ("partner", None, 0)
