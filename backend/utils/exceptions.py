"""
Ledger exceptions and the FastAPI handler that turns them into JSON responses.

Write-path operations raise these and let them propagate so the enclosing unit
of work rolls back. Balances and reports never raise these; a missing account
there is logged and reported as zero.
"""

from typing import Any, Dict, Optional

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse


class LedgerError(Exception):
    """Base class for ledger failures."""

    status_code = status.HTTP_400_BAD_REQUEST
    error_code = "LEDGER_ERROR"

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)


class AccountNotFound(LedgerError):
    """Raised when a named account is missing from the tenant's chart of accounts."""

    status_code = status.HTTP_409_CONFLICT
    error_code = "ACCOUNT_NOT_FOUND"

    def __init__(self, account_name: str, tenant_id: str):
        super().__init__(
            f'Account group "{account_name}" not found',
            details={"account_name": account_name, "tenant_id": tenant_id}
        )
        self.account_name = account_name


class SourceDocumentNotFound(LedgerError):
    status_code = status.HTTP_404_NOT_FOUND
    error_code = "SOURCE_DOCUMENT_NOT_FOUND"

    def __init__(self, document_type: str, document_id: int):
        super().__init__(
            f"{document_type} with id {document_id} not found",
            details={"document_type": document_type, "document_id": document_id}
        )


class CounterpartyNotFound(LedgerError):
    """Raised when a document references an unknown partner or one with the wrong role."""

    error_code = "COUNTERPARTY_NOT_FOUND"

    def __init__(self, counterparty_id: int, role: str):
        super().__init__(
            f"Business partner {counterparty_id} not found or not a {role}",
            details={"counterparty_id": counterparty_id, "role": role}
        )


class CategoryNotFound(LedgerError):
    error_code = "CATEGORY_NOT_FOUND"

    def __init__(self, category_type: str, category_id: int):
        super().__init__(
            f"{category_type.capitalize()} category {category_id} not found",
            details={"category_type": category_type, "category_id": category_id}
        )


class InvalidDocumentField(LedgerError):
    """Raised when an update would clear a field the document cannot do without."""

    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY
    error_code = "INVALID_DOCUMENT_FIELD"

    def __init__(self, field: str):
        super().__init__(f"{field} cannot be null", details={"field": field})


class InvalidAllocation(LedgerError):
    """Raised when a payment's allocation lines do not fit the payment or its invoices."""

    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY
    error_code = "INVALID_ALLOCATION"

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, details=details)


class InvalidAmount(LedgerError):
    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY
    error_code = "INVALID_AMOUNT"

    def __init__(self, amount: Any):
        super().__init__(
            f"Posting amount must be a positive integer, got {amount!r}",
            details={"amount": amount}
        )


class UnbalancedPostings(LedgerError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    error_code = "UNBALANCED_POSTINGS"

    def __init__(self, total_debit: int, total_credit: int):
        super().__init__(
            f"Debits ({total_debit}) do not equal credits ({total_credit})",
            details={"total_debit": total_debit, "total_credit": total_credit}
        )


class AccountInUse(LedgerError):
    error_code = "ACCOUNT_IN_USE"

    def __init__(self, account_id: int):
        super().__init__(
            "Account group is referenced by ledger postings",
            details={"account_id": account_id}
        )


class InvalidCorrectionMode(LedgerError):
    error_code = "INVALID_CORRECTION_MODE"

    def __init__(self, mode: str, allowed):
        super().__init__(
            f"ledger_correction_mode must be one of {sorted(allowed)}, got {mode!r}",
            details={"mode": mode}
        )


async def ledger_exception_handler(request: Request, exc: LedgerError) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "error_code": exc.error_code,
            "detail": exc.message,
            "details": exc.details,
        }
    )


def register_exception_handlers(app: FastAPI):
    app.add_exception_handler(LedgerError, ledger_exception_handler)
