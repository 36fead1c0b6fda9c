from fastapi import APIRouter, Depends, HTTPException, status, Response
from typing import List, Optional
from datetime import date
from crud.source_documents import get_document_kind
from posting_rules import SourceDocumentType
from schemas.incomes_expenses import Expense, ExpenseCreate, ExpenseUpdate, Income, IncomeCreate, IncomeUpdate
from schemas.invoices import (
    PurchaseInvoice, PurchaseInvoiceCreate, PurchaseInvoiceUpdate,
    SalesInvoice, SalesInvoiceCreate, SalesInvoiceUpdate,
)
from schemas.ledger import LedgerPosting
from schemas.payments import InvoicePayments, PaymentIn, PaymentInCreate, PaymentInUpdate, PaymentOut, PaymentOutCreate, PaymentOutUpdate
from schemas.returns import (
    PurchaseReturn, PurchaseReturnCreate, PurchaseReturnUpdate,
    SalesReturn, SalesReturnCreate, SalesReturnUpdate,
)
from tenant_ledger import TenantLedger
from utils.tenancy import get_tenant_ledger


def build_document_router(
    document_type: SourceDocumentType,
    prefix: str,
    tag: str,
    create_schema,
    update_schema,
    read_schema,
    allocation_target: bool = False
) -> APIRouter:
    """CRUD routes for one source document type; every write posts to the ledger."""
    router = APIRouter(prefix=prefix, tags=[tag])
    not_found = f"{get_document_kind(document_type).label} not found"

    @router.post("/", response_model=read_schema, status_code=status.HTTP_201_CREATED)
    def create_document(payload: create_schema, ledger: TenantLedger = Depends(get_tenant_ledger)):
        data = payload.model_dump()
        items = data.pop("items", None)
        return ledger.record(document_type, data, items)

    @router.get("/", response_model=List[read_schema])
    def list_documents(
        counterparty_id: Optional[int] = None,
        status: Optional[str] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        skip: int = 0,
        limit: int = 100,
        ledger: TenantLedger = Depends(get_tenant_ledger)
    ):
        return ledger.list_documents(
            document_type,
            counterparty_id=counterparty_id,
            status=status,
            start_date=start_date,
            end_date=end_date,
            skip=skip,
            limit=limit,
        )

    @router.get("/{document_id}", response_model=read_schema)
    def get_document(document_id: int, ledger: TenantLedger = Depends(get_tenant_ledger)):
        db_doc = ledger.get_document(document_type, document_id)
        if db_doc is None:
            raise HTTPException(status_code=404, detail=not_found)
        return db_doc

    @router.get("/{document_id}/postings", response_model=List[LedgerPosting])
    def get_document_postings(document_id: int, ledger: TenantLedger = Depends(get_tenant_ledger)):
        """Postings written for this document, including ones left from earlier versions of it."""
        return ledger.get_postings_by_reference(document_type, document_id)

    if allocation_target:
        @router.get("/{document_id}/payments", response_model=InvoicePayments)
        def get_invoice_payments(document_id: int, ledger: TenantLedger = Depends(get_tenant_ledger)):
            """Payments allocated to this invoice; cancelled ones are listed but not counted as paid."""
            payments = ledger.get_invoice_payments(document_type, document_id)
            if payments is None:
                raise HTTPException(status_code=404, detail=not_found)
            return payments

    @router.patch("/{document_id}", response_model=read_schema)
    def update_document(document_id: int, payload: update_schema, ledger: TenantLedger = Depends(get_tenant_ledger)):
        changes = payload.model_dump(exclude_unset=True)
        items = changes.pop("items", None)
        return ledger.update_document(document_type, document_id, changes, items)

    @router.delete("/{document_id}", status_code=status.HTTP_204_NO_CONTENT)
    def delete_document(document_id: int, ledger: TenantLedger = Depends(get_tenant_ledger)):
        ledger.delete_document(document_type, document_id)
        return Response(status_code=status.HTTP_204_NO_CONTENT)

    return router


sales_invoices_router = build_document_router(
    SourceDocumentType.SALES_INVOICE, "/sales-invoices", "Sales Invoices",
    SalesInvoiceCreate, SalesInvoiceUpdate, SalesInvoice,
    allocation_target=True,
)
purchase_invoices_router = build_document_router(
    SourceDocumentType.PURCHASE_INVOICE, "/purchase-invoices", "Purchase Invoices",
    PurchaseInvoiceCreate, PurchaseInvoiceUpdate, PurchaseInvoice,
    allocation_target=True,
)
sales_returns_router = build_document_router(
    SourceDocumentType.SALES_RETURN, "/sales-returns", "Sales Returns",
    SalesReturnCreate, SalesReturnUpdate, SalesReturn,
)
purchase_returns_router = build_document_router(
    SourceDocumentType.PURCHASE_RETURN, "/purchase-returns", "Purchase Returns",
    PurchaseReturnCreate, PurchaseReturnUpdate, PurchaseReturn,
)
payment_ins_router = build_document_router(
    SourceDocumentType.PAYMENT_IN, "/payment-ins", "Payments In",
    PaymentInCreate, PaymentInUpdate, PaymentIn,
)
payment_outs_router = build_document_router(
    SourceDocumentType.PAYMENT_OUT, "/payment-outs", "Payments Out",
    PaymentOutCreate, PaymentOutUpdate, PaymentOut,
)
incomes_router = build_document_router(
    SourceDocumentType.INCOME, "/incomes", "Incomes",
    IncomeCreate, IncomeUpdate, Income,
)
expenses_router = build_document_router(
    SourceDocumentType.EXPENSE, "/expenses", "Expenses",
    ExpenseCreate, ExpenseUpdate, Expense,
)

DOCUMENT_ROUTERS = [
    sales_invoices_router,
    purchase_invoices_router,
    sales_returns_router,
    purchase_returns_router,
    payment_ins_router,
    payment_outs_router,
    incomes_router,
    expenses_router,
]
