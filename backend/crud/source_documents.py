"""
Source documents and the ledger side effects of changing them.

Every mutation here adds to the session and flushes, but never commits; the
caller wraps it in TenantLedger.unit_of_work so the document row, its item
lines, its transaction feed entry and its ledger postings land together or
not at all.
"""

import logging
from dataclasses import dataclass
from datetime import date
from typing import Callable, Dict, List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from crud.business_partners import require_counterparty
from crud.categories import require_category
from crud.ledger import append_postings, delete_postings_by_reference, reverse_postings_by_reference
from crud.transactions import delete_feed_entry, upsert_feed_entry
from models.expenses import Expense
from models.incomes import Income
from models.payment_in_items import PaymentInItem
from models.payment_ins import PaymentIn
from models.payment_out_items import PaymentOutItem
from models.payment_outs import PaymentOut
from models.purchase_invoice_items import PurchaseInvoiceItem
from models.purchase_invoices import PurchaseInvoice
from models.purchase_returns import PurchaseReturn
from models.sales_invoice_items import SalesInvoiceItem
from models.sales_invoices import SalesInvoice
from models.sales_returns import SalesReturn
from posting_rules import POSTING_RULES, SourceDocumentType, derive_entries, validate_amount
from utils import local_today
from utils.exceptions import InvalidAllocation, InvalidDocumentField, SourceDocumentNotFound

logger = logging.getLogger("source_documents")


def _numbered(label: str):
    def describe(doc, number) -> str:
        return doc.notes or f"{label} #{number}"
    return describe


@dataclass(frozen=True)
class DocumentKind:
    document_type: SourceDocumentType
    label: str
    model: type
    amount_field: str
    date_field: str
    default_status: str
    describe: Callable
    number_field: Optional[str] = None
    counterparty_field: Optional[str] = None
    counterparty_role: Optional[str] = None
    item_model: Optional[type] = None
    allocation_type: Optional[SourceDocumentType] = None
    category_type: Optional[str] = None

    def amount_of(self, doc) -> int:
        return getattr(doc, self.amount_field)

    def date_of(self, doc) -> date:
        return getattr(doc, self.date_field)

    def number_of(self, doc) -> Optional[str]:
        return getattr(doc, self.number_field) if self.number_field else None

    def description_of(self, doc) -> str:
        return self.describe(doc, self.number_of(doc))


DOCUMENT_KINDS: Dict[SourceDocumentType, DocumentKind] = {
    SourceDocumentType.SALES_INVOICE: DocumentKind(
        document_type=SourceDocumentType.SALES_INVOICE,
        label="Sales Invoice",
        model=SalesInvoice,
        amount_field="total",
        date_field="invoice_date",
        default_status="unpaid",
        describe=_numbered("Sales Invoice"),
        number_field="invoice_number",
        counterparty_field="customer_id",
        counterparty_role="customer",
        item_model=SalesInvoiceItem,
    ),
    SourceDocumentType.PURCHASE_INVOICE: DocumentKind(
        document_type=SourceDocumentType.PURCHASE_INVOICE,
        label="Purchase Invoice",
        model=PurchaseInvoice,
        amount_field="total",
        date_field="invoice_date",
        default_status="unpaid",
        describe=_numbered("Purchase Invoice"),
        number_field="invoice_number",
        counterparty_field="vendor_id",
        counterparty_role="vendor",
        item_model=PurchaseInvoiceItem,
    ),
    SourceDocumentType.SALES_RETURN: DocumentKind(
        document_type=SourceDocumentType.SALES_RETURN,
        label="Sales Return",
        model=SalesReturn,
        amount_field="total",
        date_field="return_date",
        default_status="pending",
        describe=_numbered("Sales Return"),
        number_field="return_number",
        counterparty_field="customer_id",
        counterparty_role="customer",
    ),
    SourceDocumentType.PURCHASE_RETURN: DocumentKind(
        document_type=SourceDocumentType.PURCHASE_RETURN,
        label="Purchase Return",
        model=PurchaseReturn,
        amount_field="total",
        date_field="return_date",
        default_status="pending",
        describe=_numbered("Purchase Return"),
        number_field="return_number",
        counterparty_field="vendor_id",
        counterparty_role="vendor",
    ),
    SourceDocumentType.PAYMENT_IN: DocumentKind(
        document_type=SourceDocumentType.PAYMENT_IN,
        label="Payment In",
        model=PaymentIn,
        amount_field="amount",
        date_field="payment_date",
        default_status="completed",
        describe=lambda doc, number: f"Payment received from customer ({number})",
        number_field="payment_number",
        counterparty_field="customer_id",
        counterparty_role="customer",
        item_model=PaymentInItem,
        allocation_type=SourceDocumentType.SALES_INVOICE,
    ),
    SourceDocumentType.PAYMENT_OUT: DocumentKind(
        document_type=SourceDocumentType.PAYMENT_OUT,
        label="Payment Out",
        model=PaymentOut,
        amount_field="amount",
        date_field="payment_date",
        default_status="completed",
        describe=lambda doc, number: f"Payment made to vendor ({number})",
        number_field="payment_number",
        counterparty_field="vendor_id",
        counterparty_role="vendor",
        item_model=PaymentOutItem,
        allocation_type=SourceDocumentType.PURCHASE_INVOICE,
    ),
    SourceDocumentType.INCOME: DocumentKind(
        document_type=SourceDocumentType.INCOME,
        label="Income",
        model=Income,
        amount_field="amount",
        date_field="date",
        default_status="completed",
        describe=lambda doc, number: doc.description,
        category_type="income",
    ),
    SourceDocumentType.EXPENSE: DocumentKind(
        document_type=SourceDocumentType.EXPENSE,
        label="Expense",
        model=Expense,
        amount_field="amount",
        date_field="date",
        default_status="completed",
        describe=lambda doc, number: doc.description,
        category_type="expense",
    ),
}


def get_document_kind(document_type) -> DocumentKind:
    return DOCUMENT_KINDS[SourceDocumentType(document_type)]


def get_document(db: Session, tenant_id: str, kind: DocumentKind, document_id: int):
    return db.query(kind.model).filter(
        kind.model.id == document_id,
        kind.model.tenant_id == tenant_id
    ).first()


def list_documents(
    db: Session,
    tenant_id: str,
    kind: DocumentKind,
    counterparty_id: Optional[int] = None,
    status: Optional[str] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    skip: int = 0,
    limit: int = 100
):
    model = kind.model
    date_column = getattr(model, kind.date_field)
    query = db.query(model).filter(model.tenant_id == tenant_id)

    if counterparty_id and kind.counterparty_field:
        query = query.filter(getattr(model, kind.counterparty_field) == counterparty_id)
    if status:
        query = query.filter(model.status == status)
    if start_date:
        query = query.filter(date_column >= start_date)
    if end_date:
        query = query.filter(date_column <= end_date)

    return query.order_by(date_column.desc(), model.id.desc()).offset(skip).limit(limit).all()


def get_document_ids(
    db: Session,
    tenant_id: str,
    kind: DocumentKind,
    counterparty_id: int,
    status: Optional[str] = None
) -> set:
    """Ids of one counterparty's documents of a kind, optionally by status."""
    model = kind.model
    query = db.query(model.id).filter(
        model.tenant_id == tenant_id,
        getattr(model, kind.counterparty_field) == counterparty_id
    )
    if status:
        query = query.filter(model.status == status)
    return {row[0] for row in query.all()}


def _build_items(kind: DocumentKind, items: Optional[List[dict]], tenant_id: str):
    if not items or kind.item_model is None:
        return []
    return [kind.item_model(**item, tenant_id=tenant_id) for item in items]


def _validate_allocations(db: Session, tenant_id: str, kind: DocumentKind, counterparty_id: int,
                          amount: int, items: List[dict]):
    """Each line must be positive and point at one of the same partner's invoices; together they fit the payment."""
    invoice_kind = DOCUMENT_KINDS[kind.allocation_type]
    allocated = 0
    for item in items:
        item_amount = item.get("amount")
        if not isinstance(item_amount, int) or isinstance(item_amount, bool) or item_amount <= 0:
            raise InvalidAllocation(
                f"Allocation amount must be a positive integer, got {item_amount!r}",
                details={"amount": item_amount}
            )
        invoice_id = item.get("invoice_id")
        if invoice_id is not None:
            invoice = get_document(db, tenant_id, invoice_kind, invoice_id)
            if invoice is None or getattr(invoice, invoice_kind.counterparty_field) != counterparty_id:
                raise InvalidAllocation(
                    f"{invoice_kind.label} {invoice_id} does not belong to {kind.counterparty_role} {counterparty_id}",
                    details={"invoice_id": invoice_id, "counterparty_id": counterparty_id}
                )
        allocated += item_amount

    if allocated > amount:
        raise InvalidAllocation(
            f"Allocated {allocated} exceeds payment amount {amount}",
            details={"allocated": allocated, "amount": amount}
        )


def get_payments_for_invoice(db: Session, tenant_id: str, invoice_kind: DocumentKind, invoice_id: int):
    """Allocation lines pointing at an invoice, joined with their payment, oldest first."""
    payment_kind = next(k for k in DOCUMENT_KINDS.values() if k.allocation_type == invoice_kind.document_type)
    item_model, payment_model = payment_kind.item_model, payment_kind.model
    rows = db.query(
        item_model.id,
        item_model.payment_id,
        item_model.amount,
        payment_model.payment_number,
        payment_model.payment_date,
        payment_model.status
    ).join(
        payment_model, item_model.payment_id == payment_model.id
    ).filter(
        item_model.invoice_id == invoice_id,
        item_model.tenant_id == tenant_id,
        payment_model.tenant_id == tenant_id
    ).order_by(payment_model.payment_date, item_model.id).all()

    return [
        {
            "id": row[0],
            "payment_id": row[1],
            "invoice_id": invoice_id,
            "amount": row[2],
            "payment_number": row[3],
            "payment_date": row[4],
            "status": row[5],
        }
        for row in rows
    ]


def get_total_paid_for_invoice(db: Session, tenant_id: str, invoice_kind: DocumentKind, invoice_id: int) -> int:
    """Sum of allocations against an invoice; cancelled payments do not count."""
    payment_kind = next(k for k in DOCUMENT_KINDS.values() if k.allocation_type == invoice_kind.document_type)
    item_model, payment_model = payment_kind.item_model, payment_kind.model
    total = db.query(func.coalesce(func.sum(item_model.amount), 0)).select_from(item_model).join(
        payment_model, item_model.payment_id == payment_model.id
    ).filter(
        item_model.invoice_id == invoice_id,
        item_model.tenant_id == tenant_id,
        payment_model.tenant_id == tenant_id,
        payment_model.status != "cancelled"
    ).scalar()
    return int(total or 0)


def _project_feed(db: Session, tenant_id: str, kind: DocumentKind, db_doc):
    return upsert_feed_entry(
        db,
        tenant_id,
        kind.document_type,
        db_doc.id,
        kind.amount_of(db_doc),
        kind.date_of(db_doc),
        kind.description_of(db_doc),
        db_doc.status,
        payment_method=getattr(db_doc, "payment_method", None),
        reference_number=getattr(db_doc, "reference_number", None),
    )


def _post(db: Session, tenant_id: str, kind: DocumentKind, db_doc, account_map):
    drafts = derive_entries(
        kind.document_type,
        db_doc.id,
        kind.amount_of(db_doc),
        kind.date_of(db_doc),
        kind.description_of(db_doc),
    )
    return append_postings(db, tenant_id, drafts, account_map)


def _correct_ledger(db: Session, tenant_id: str, kind: DocumentKind, db_doc, account_map,
                    correction_mode: str, repost: bool):
    document_type = kind.document_type.value
    if correction_mode == "cascade":
        delete_postings_by_reference(db, tenant_id, kind.document_type, db_doc.id)
        if repost:
            _post(db, tenant_id, kind, db_doc, account_map)
    elif correction_mode == "reverse":
        reverse_postings_by_reference(db, tenant_id, kind.document_type, db_doc.id, local_today(), account_map)
        if repost:
            _post(db, tenant_id, kind, db_doc, account_map)
    else:
        logger.warning(
            f"Ledger postings for {document_type} {db_doc.id} left unchanged for tenant {tenant_id} "
            f"(correction mode '{correction_mode}')"
        )


def create_document(db: Session, tenant_id: str, kind: DocumentKind, data: dict,
                    items: Optional[List[dict]], account_map):
    data = dict(data)
    if kind.counterparty_field:
        require_counterparty(db, tenant_id, data.get(kind.counterparty_field), kind.counterparty_role)
    validate_amount(data.get(kind.amount_field))
    if kind.allocation_type is not None and items:
        _validate_allocations(db, tenant_id, kind, data.get(kind.counterparty_field),
                              data.get(kind.amount_field), items)
    if kind.category_type and data.get("category_id") is not None:
        require_category(db, tenant_id, kind.category_type, data["category_id"])

    # Both accounts must exist before any row is added
    rule = POSTING_RULES[kind.document_type]
    account_map.resolve(rule.debit_account)
    account_map.resolve(rule.credit_account)

    if not data.get("status"):
        data["status"] = kind.default_status

    db_doc = kind.model(**data, tenant_id=tenant_id)
    if kind.item_model is not None:
        db_doc.items = _build_items(kind, items, tenant_id)
    db.add(db_doc)
    db.flush()

    _project_feed(db, tenant_id, kind, db_doc)
    _post(db, tenant_id, kind, db_doc, account_map)

    logger.info(
        f"Recorded {kind.document_type.value} {db_doc.id} for {kind.amount_of(db_doc)} "
        f"for tenant {tenant_id}"
    )
    return db_doc


def update_document(db: Session, tenant_id: str, kind: DocumentKind, document_id: int, changes: dict,
                    items: Optional[List[dict]], account_map, correction_mode: str):
    db_doc = get_document(db, tenant_id, kind, document_id)
    if db_doc is None:
        raise SourceDocumentNotFound(kind.document_type.value, document_id)

    columns = kind.model.__table__.columns
    for key, value in changes.items():
        if value is None and key in columns and not columns[key].nullable:
            raise InvalidDocumentField(key)

    if kind.counterparty_field and kind.counterparty_field in changes:
        require_counterparty(db, tenant_id, changes[kind.counterparty_field], kind.counterparty_role)
    if kind.amount_field in changes:
        validate_amount(changes[kind.amount_field])
    if kind.category_type and changes.get("category_id") is not None:
        require_category(db, tenant_id, kind.category_type, changes["category_id"])

    if kind.allocation_type is not None and (
        items is not None or kind.amount_field in changes or kind.counterparty_field in changes
    ):
        allocations = items if items is not None else [
            {"invoice_id": item.invoice_id, "amount": item.amount} for item in db_doc.items
        ]
        _validate_allocations(
            db, tenant_id, kind,
            changes.get(kind.counterparty_field, getattr(db_doc, kind.counterparty_field)),
            changes.get(kind.amount_field, kind.amount_of(db_doc)),
            allocations,
        )

    old_amount, old_date = kind.amount_of(db_doc), kind.date_of(db_doc)
    for key, value in changes.items():
        setattr(db_doc, key, value)
    if items is not None and kind.item_model is not None:
        db_doc.items = _build_items(kind, items, tenant_id)
    db.flush()

    _project_feed(db, tenant_id, kind, db_doc)

    if kind.amount_of(db_doc) != old_amount or kind.date_of(db_doc) != old_date:
        _correct_ledger(db, tenant_id, kind, db_doc, account_map, correction_mode, repost=True)

    logger.info(f"Updated {kind.document_type.value} {document_id} for tenant {tenant_id}")
    return db_doc


def delete_document(db: Session, tenant_id: str, kind: DocumentKind, document_id: int,
                    account_map, correction_mode: str) -> bool:
    db_doc = get_document(db, tenant_id, kind, document_id)
    if db_doc is None:
        raise SourceDocumentNotFound(kind.document_type.value, document_id)

    delete_feed_entry(db, tenant_id, kind.document_type, document_id)
    _correct_ledger(db, tenant_id, kind, db_doc, account_map, correction_mode, repost=False)
    db.delete(db_doc)
    db.flush()

    logger.info(f"Deleted {kind.document_type.value} {document_id} for tenant {tenant_id}")
    return True
