"""
Aggregate figures over source documents for dashboards.

These are reads; like balances they log a database failure and report an
empty summary rather than raising.
"""

import logging
from datetime import date
from typing import Optional

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from crud.categories import CATEGORY_MODELS
from crud.source_documents import DocumentKind
from models.business_partners import BusinessPartner

logger = logging.getLogger("document_summaries")


def _in_range(query, kind: DocumentKind, tenant_id: str, start_date: Optional[date], end_date: Optional[date]):
    model = kind.model
    date_column = getattr(model, kind.date_field)
    query = query.filter(model.tenant_id == tenant_id)
    if start_date:
        query = query.filter(date_column >= start_date)
    if end_date:
        query = query.filter(date_column <= end_date)
    return query


def get_amount_stats(db: Session, tenant_id: str, kind: DocumentKind,
                     start_date: Optional[date] = None, end_date: Optional[date] = None) -> dict:
    amount = getattr(kind.model, kind.amount_field)
    query = db.query(
        func.coalesce(func.sum(amount), 0),
        func.count(kind.model.id),
        func.avg(amount),
        func.max(amount),
        func.min(amount)
    )
    total, count, average, maximum, minimum = _in_range(query, kind, tenant_id, start_date, end_date).one()
    return {
        "total": int(total or 0),
        "count": count,
        "average": int(round(average)) if average is not None else 0,
        "maximum": maximum or 0,
        "minimum": minimum or 0,
    }


def get_totals_by_category(db: Session, tenant_id: str, kind: DocumentKind,
                           start_date: Optional[date] = None, end_date: Optional[date] = None):
    """Totals per category, largest first; uncategorised entries are grouped under a null category."""
    model = kind.model
    category_model = CATEGORY_MODELS[kind.category_type]
    total = func.sum(getattr(model, kind.amount_field))
    query = db.query(
        model.category_id,
        category_model.name,
        category_model.color,
        total,
        func.count(model.id)
    ).outerjoin(category_model, model.category_id == category_model.id)

    rows = _in_range(query, kind, tenant_id, start_date, end_date).group_by(
        model.category_id, category_model.name, category_model.color
    ).order_by(total.desc()).all()
    return [
        {"category_id": category_id, "category_name": name, "color": color, "total": int(amount or 0), "count": count}
        for category_id, name, color, amount, count in rows
    ]


def get_totals_by_payment_method(db: Session, tenant_id: str, kind: DocumentKind,
                                 start_date: Optional[date] = None, end_date: Optional[date] = None):
    model = kind.model
    total = func.sum(getattr(model, kind.amount_field))
    query = db.query(model.payment_method, total, func.count(model.id))
    rows = _in_range(query, kind, tenant_id, start_date, end_date).group_by(
        model.payment_method
    ).order_by(total.desc()).all()
    return [
        {"payment_method": payment_method, "total": int(amount or 0), "count": count}
        for payment_method, amount, count in rows
    ]


def get_totals_by_date(db: Session, tenant_id: str, kind: DocumentKind,
                       start_date: Optional[date] = None, end_date: Optional[date] = None):
    model = kind.model
    date_column = getattr(model, kind.date_field)
    query = db.query(date_column, func.sum(getattr(model, kind.amount_field)), func.count(model.id))
    rows = _in_range(query, kind, tenant_id, start_date, end_date).group_by(date_column).order_by(date_column).all()
    return [
        {"date": day, "total": int(amount or 0), "count": count}
        for day, amount, count in rows
    ]


def get_totals_by_counterparty(db: Session, tenant_id: str, kind: DocumentKind,
                               start_date: Optional[date] = None, end_date: Optional[date] = None):
    model = kind.model
    counterparty_column = getattr(model, kind.counterparty_field)
    total = func.sum(getattr(model, kind.amount_field))
    query = db.query(
        counterparty_column,
        BusinessPartner.name,
        total,
        func.count(model.id)
    ).join(BusinessPartner, counterparty_column == BusinessPartner.id)

    rows = _in_range(query, kind, tenant_id, start_date, end_date).group_by(
        counterparty_column, BusinessPartner.name
    ).order_by(total.desc()).all()
    return [
        {"counterparty_id": counterparty_id, "counterparty_name": name, "total": int(amount or 0), "count": count}
        for counterparty_id, name, amount, count in rows
    ]


def get_total_by_status(db: Session, tenant_id: str, kind: DocumentKind, status: str,
                        start_date: Optional[date] = None, end_date: Optional[date] = None) -> int:
    query = db.query(func.coalesce(func.sum(getattr(kind.model, kind.amount_field)), 0)).filter(
        kind.model.status == status
    )
    return int(_in_range(query, kind, tenant_id, start_date, end_date).scalar() or 0)


def get_cash_entry_summary(db: Session, tenant_id: str, kind: DocumentKind,
                           start_date: Optional[date] = None, end_date: Optional[date] = None) -> dict:
    """Incomes or expenses: overall figures plus breakdowns by category, payment method and day."""
    try:
        return {
            "stats": get_amount_stats(db, tenant_id, kind, start_date, end_date),
            "by_category": get_totals_by_category(db, tenant_id, kind, start_date, end_date),
            "by_payment_method": get_totals_by_payment_method(db, tenant_id, kind, start_date, end_date),
            "by_date": get_totals_by_date(db, tenant_id, kind, start_date, end_date),
        }
    except SQLAlchemyError as e:
        logger.warning(f"Failed to summarise {kind.document_type.value} for tenant {tenant_id}: {e}")
        return {}


def get_invoice_summary(db: Session, tenant_id: str, kind: DocumentKind,
                        start_date: Optional[date] = None, end_date: Optional[date] = None) -> dict:
    try:
        stats = get_amount_stats(db, tenant_id, kind, start_date, end_date)
        stats["total_paid"] = get_total_by_status(db, tenant_id, kind, "paid", start_date, end_date)
        stats["total_unpaid"] = get_total_by_status(db, tenant_id, kind, "unpaid", start_date, end_date)
        return {
            "stats": stats,
            "by_counterparty": get_totals_by_counterparty(db, tenant_id, kind, start_date, end_date),
        }
    except SQLAlchemyError as e:
        logger.warning(f"Failed to summarise {kind.document_type.value} for tenant {tenant_id}: {e}")
        return {}
