"""
Tenant-scoped entry point to the ledger.

A TenantLedger binds a session and a tenant id once; every posting, balance
and report operation goes through it so none of them can run without a
tenant.
"""

import logging
from contextlib import contextmanager
from datetime import date
from typing import List, Optional

from sqlalchemy.orm import Session

from crud import account_groups as crud_account_groups
from crud import app_config as crud_app_config
from crud import balances as crud_balances
from crud import document_summaries as crud_summaries
from crud import ledger as crud_ledger
from crud import source_documents as crud_documents
from posting_rules import SourceDocumentType

logger = logging.getLogger("tenant_ledger")


class TenantLedger:
    """Posting, balance and report operations bound to one session and one tenant."""

    def __init__(self, db: Session, tenant_id: str, correction_mode: Optional[str] = None):
        self.db = db
        self.tenant_id = tenant_id
        if correction_mode is not None:
            crud_app_config.validate_correction_mode(correction_mode)
        self._correction_mode = correction_mode

    @property
    def correction_mode(self) -> str:
        """Explicit mode if one was given, else the tenant's ledger setting."""
        if self._correction_mode is not None:
            return self._correction_mode
        settings = crud_app_config.get_ledger_settings(self.db, self.tenant_id)
        return settings[crud_app_config.LEDGER_CORRECTION_MODE]

    @contextmanager
    def unit_of_work(self):
        """
        Yields a fresh account map and commits once on exit.

        Any exception raised inside the block rolls back everything the block
        added, so a failed posting never leaves a document or feed row behind.
        """
        account_map = crud_account_groups.AccountGroupMap(self.db, self.tenant_id)
        try:
            yield account_map
            self.db.commit()
        except Exception as e:
            self.db.rollback()
            logger.warning(f"Rolled back ledger unit of work for tenant {self.tenant_id}: {e}")
            raise

    def provision_defaults(self):
        return crud_account_groups.provision_default_account_groups(self.db, self.tenant_id)

    # Recording source documents

    def record(self, document_type: SourceDocumentType, data: dict, items: Optional[List[dict]] = None):
        kind = crud_documents.get_document_kind(document_type)
        with self.unit_of_work() as account_map:
            db_doc = crud_documents.create_document(self.db, self.tenant_id, kind, data, items, account_map)
        self.db.refresh(db_doc)
        return db_doc

    def record_sales_invoice(self, data: dict, items: Optional[List[dict]] = None):
        return self.record(SourceDocumentType.SALES_INVOICE, data, items)

    def record_purchase_invoice(self, data: dict, items: Optional[List[dict]] = None):
        return self.record(SourceDocumentType.PURCHASE_INVOICE, data, items)

    def record_sales_return(self, data: dict):
        return self.record(SourceDocumentType.SALES_RETURN, data)

    def record_purchase_return(self, data: dict):
        return self.record(SourceDocumentType.PURCHASE_RETURN, data)

    def record_payment_in(self, data: dict, items: Optional[List[dict]] = None):
        return self.record(SourceDocumentType.PAYMENT_IN, data, items)

    def record_payment_out(self, data: dict, items: Optional[List[dict]] = None):
        return self.record(SourceDocumentType.PAYMENT_OUT, data, items)

    def record_income(self, data: dict):
        return self.record(SourceDocumentType.INCOME, data)

    def record_expense(self, data: dict):
        return self.record(SourceDocumentType.EXPENSE, data)

    def update_document(self, document_type: SourceDocumentType, document_id: int, changes: dict,
                        items: Optional[List[dict]] = None):
        kind = crud_documents.get_document_kind(document_type)
        correction_mode = self.correction_mode
        with self.unit_of_work() as account_map:
            db_doc = crud_documents.update_document(
                self.db, self.tenant_id, kind, document_id, changes, items, account_map, correction_mode
            )
        self.db.refresh(db_doc)
        return db_doc

    def delete_document(self, document_type: SourceDocumentType, document_id: int) -> bool:
        kind = crud_documents.get_document_kind(document_type)
        correction_mode = self.correction_mode
        with self.unit_of_work() as account_map:
            return crud_documents.delete_document(
                self.db, self.tenant_id, kind, document_id, account_map, correction_mode
            )

    def get_document(self, document_type: SourceDocumentType, document_id: int):
        kind = crud_documents.get_document_kind(document_type)
        return crud_documents.get_document(self.db, self.tenant_id, kind, document_id)

    def list_documents(self, document_type: SourceDocumentType, **filters):
        kind = crud_documents.get_document_kind(document_type)
        return crud_documents.list_documents(self.db, self.tenant_id, kind, **filters)

    def get_invoice_payments(self, document_type: SourceDocumentType, invoice_id: int):
        """Payments allocated to an invoice and what is still due on it, or None for an unknown invoice."""
        kind = crud_documents.get_document_kind(document_type)
        invoice = crud_documents.get_document(self.db, self.tenant_id, kind, invoice_id)
        if invoice is None:
            return None
        total_paid = crud_documents.get_total_paid_for_invoice(self.db, self.tenant_id, kind, invoice_id)
        return {
            "invoice_id": invoice_id,
            "total": invoice.total,
            "total_paid": total_paid,
            "balance_due": invoice.total - total_paid,
            "payments": crud_documents.get_payments_for_invoice(self.db, self.tenant_id, kind, invoice_id),
        }

    # Journal and reports

    def get_postings_by_reference(self, document_type: SourceDocumentType, document_id: int):
        return crud_ledger.get_postings_by_reference(self.db, self.tenant_id, document_type, document_id)

    def get_postings_by_account(self, account_id: Optional[int] = None, start_date: Optional[date] = None,
                                end_date: Optional[date] = None):
        return crud_ledger.get_postings_by_account(self.db, self.tenant_id, account_id, start_date, end_date)

    def get_account_balance(self, account_id: int, as_of: Optional[date] = None):
        return crud_balances.get_account_balance(self.db, self.tenant_id, account_id, as_of)

    def get_counterparty_balance(self, counterparty_id: int, role: str = "customer"):
        return crud_balances.get_counterparty_balance(self.db, self.tenant_id, counterparty_id, role)

    def get_ledger_report(self, start_date: Optional[date] = None, end_date: Optional[date] = None,
                          account_id: Optional[int] = None,
                          source_document_type: Optional[SourceDocumentType] = None):
        return crud_balances.get_ledger_report(
            self.db, self.tenant_id, start_date, end_date, account_id, source_document_type
        )

    def get_trial_balance(self, as_of: Optional[date] = None):
        return crud_balances.get_trial_balance(self.db, self.tenant_id, as_of)

    def get_cash_entry_summary(self, document_type: SourceDocumentType, start_date: Optional[date] = None,
                               end_date: Optional[date] = None):
        kind = crud_documents.get_document_kind(document_type)
        return crud_summaries.get_cash_entry_summary(self.db, self.tenant_id, kind, start_date, end_date)

    def get_invoice_summary(self, document_type: SourceDocumentType, start_date: Optional[date] = None,
                            end_date: Optional[date] = None):
        kind = crud_documents.get_document_kind(document_type)
        return crud_summaries.get_invoice_summary(self.db, self.tenant_id, kind, start_date, end_date)
