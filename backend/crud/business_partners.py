from typing import Optional

from sqlalchemy.orm import Session

from models.business_partners import BusinessPartner, PartnerStatus
from utils.exceptions import CounterpartyNotFound


def get_business_partner(db: Session, partner_id: int, tenant_id: str):
    return db.query(BusinessPartner).filter(
        BusinessPartner.id == partner_id,
        BusinessPartner.tenant_id == tenant_id
    ).first()

def get_business_partner_by_name(db: Session, name: str, tenant_id: str):
    return db.query(BusinessPartner).filter(
        BusinessPartner.name == name,
        BusinessPartner.tenant_id == tenant_id
    ).first()

def list_business_partners(
    db: Session,
    tenant_id: str,
    status: Optional[PartnerStatus] = None,
    is_vendor: Optional[bool] = None,
    is_customer: Optional[bool] = None,
    skip: int = 0,
    limit: int = 100
):
    query = db.query(BusinessPartner).filter(BusinessPartner.tenant_id == tenant_id)
    if status:
        query = query.filter(BusinessPartner.status == status)
    if is_vendor is not None:
        query = query.filter(BusinessPartner.is_vendor == is_vendor)
    if is_customer is not None:
        query = query.filter(BusinessPartner.is_customer == is_customer)
    return query.order_by(BusinessPartner.name).offset(skip).limit(limit).all()

def require_counterparty(db: Session, tenant_id: str, partner_id: int, role: str) -> BusinessPartner:
    """Returns the partner when it exists for the tenant and plays the given role."""
    partner = get_business_partner(db, partner_id, tenant_id)
    if partner is None:
        raise CounterpartyNotFound(partner_id, role)
    if role == "customer" and not partner.is_customer:
        raise CounterpartyNotFound(partner_id, role)
    if role == "vendor" and not partner.is_vendor:
        raise CounterpartyNotFound(partner_id, role)
    return partner
