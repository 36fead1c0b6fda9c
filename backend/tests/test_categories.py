"""
Income and expense categories, and the summaries built on top of them.
"""

from datetime import date

import pytest

from crud import categories as crud_categories
from models.incomes import Income
from posting_rules import SourceDocumentType
from schemas.categories import CategoryCreate
from utils.exceptions import CategoryNotFound

from conftest import OTHER_TENANT_ID, TENANT_ID


def _category_id(db_session, category_type, name):
    return crud_categories.get_category_by_name(db_session, category_type, name, TENANT_ID).id


def test_default_categories_are_provisioned_once(db_session):
    incomes = crud_categories.provision_default_categories(db_session, "income", TENANT_ID)
    expenses = crud_categories.provision_default_categories(db_session, "expense", TENANT_ID)

    assert len(incomes) == 4
    assert len(expenses) == 6
    assert all(category.is_default for category in incomes + expenses)

    again = crud_categories.provision_default_categories(db_session, "income", TENANT_ID)
    assert [c.id for c in again] == [c.id for c in incomes]
    assert crud_categories.list_categories(db_session, "income", OTHER_TENANT_ID) == []


def test_income_must_use_one_of_the_tenants_categories(provisioned_ledger, db_session):
    crud_categories.provision_default_categories(db_session, "income", OTHER_TENANT_ID)
    foreign_id = crud_categories.get_category_by_name(db_session, "income", "Other Income", OTHER_TENANT_ID).id

    with pytest.raises(CategoryNotFound):
        provisioned_ledger.record_income(
            {"date": date(2024, 3, 1), "description": "Interest", "amount": 400, "category_id": foreign_id}
        )
    assert db_session.query(Income).count() == 0

    crud_categories.provision_default_categories(db_session, "income", TENANT_ID)
    interest_id = _category_id(db_session, "income", "Interest Income")
    income = provisioned_ledger.record_income(
        {"date": date(2024, 3, 1), "description": "Interest", "amount": 400, "category_id": interest_id}
    )
    assert income.category_id == interest_id


def test_deleting_a_category_keeps_its_entries(provisioned_ledger, db_session):
    category = crud_categories.create_category(
        db_session, "expense", CategoryCreate(name="Travel", color="#123abc"), TENANT_ID
    )
    expense = provisioned_ledger.record_expense(
        {"date": date(2024, 3, 1), "description": "Train", "amount": 90, "category_id": category.id}
    )

    assert crud_categories.delete_category(db_session, "expense", category.id, TENANT_ID) is True

    db_session.expire_all()
    kept = provisioned_ledger.get_document(SourceDocumentType.EXPENSE, expense.id)
    assert kept is not None
    assert kept.category_id is None


def test_income_summary(provisioned_ledger, db_session):
    crud_categories.provision_default_categories(db_session, "income", TENANT_ID)
    sales_id = _category_id(db_session, "income", "Sales Revenue")
    interest_id = _category_id(db_session, "income", "Interest Income")
    for day, amount, category_id, method in [
        (date(2024, 3, 1), 400, interest_id, "bank"),
        (date(2024, 3, 1), 1000, sales_id, "cash"),
        (date(2024, 3, 2), 700, sales_id, "bank"),
        (date(2024, 3, 3), 100, None, None),
    ]:
        provisioned_ledger.record_income(
            {"date": day, "description": "Income", "amount": amount, "category_id": category_id,
             "payment_method": method}
        )

    summary = provisioned_ledger.get_cash_entry_summary(SourceDocumentType.INCOME)

    assert summary["stats"] == {"total": 2200, "count": 4, "average": 550, "maximum": 1000, "minimum": 100}
    assert [(row["category_name"], row["total"], row["count"]) for row in summary["by_category"]] == [
        ("Sales Revenue", 1700, 2),
        ("Interest Income", 400, 1),
        (None, 100, 1),
    ]
    assert [(row["payment_method"], row["total"]) for row in summary["by_payment_method"]] == [
        ("bank", 1100),
        ("cash", 1000),
        (None, 100),
    ]
    assert [(row["date"], row["total"]) for row in summary["by_date"]] == [
        (date(2024, 3, 1), 1400),
        (date(2024, 3, 2), 700),
        (date(2024, 3, 3), 100),
    ]

    narrowed = provisioned_ledger.get_cash_entry_summary(SourceDocumentType.INCOME, start_date=date(2024, 3, 2))
    assert narrowed["stats"]["total"] == 800


def test_sales_invoice_summary(provisioned_ledger, customer, make_partner, invoice_data):
    other = make_partner("Beta Stores", is_vendor=False)
    provisioned_ledger.record_sales_invoice(invoice_data)
    provisioned_ledger.record_sales_invoice(
        {"invoice_number": "INV-002", "customer_id": customer.id, "invoice_date": date(2024, 3, 2),
         "total": 1000, "status": "paid"}
    )
    provisioned_ledger.record_sales_invoice(
        {"invoice_number": "INV-003", "customer_id": other.id, "invoice_date": date(2024, 3, 3),
         "total": 900, "status": "paid"}
    )

    summary = provisioned_ledger.get_invoice_summary(SourceDocumentType.SALES_INVOICE)

    assert summary["stats"] == {
        "total": 6900, "count": 3, "average": 2300, "maximum": 5000, "minimum": 900,
        "total_paid": 1900, "total_unpaid": 5000,
    }
    assert [(row["counterparty_name"], row["total"], row["count"]) for row in summary["by_counterparty"]] == [
        ("Acme Retail", 6000, 2),
        ("Beta Stores", 900, 1),
    ]


def test_summaries_are_empty_without_documents(ledger):
    summary = ledger.get_cash_entry_summary(SourceDocumentType.EXPENSE)

    assert summary["stats"]["count"] == 0
    assert summary["by_category"] == []
