from fastapi import APIRouter, Depends, HTTPException, status, Query, Response
from sqlalchemy.orm import Session
from typing import List, Optional
import logging

from crud import business_partners as crud_business_partners
from crud.source_documents import DOCUMENT_KINDS
from database import get_db
from models.business_partners import BusinessPartner as BusinessPartnerModel
from schemas.business_partners import (
    BusinessPartner, BusinessPartnerCreate, BusinessPartnerUpdate, CounterpartyRole, PartnerStatus,
)
from schemas.ledger import CounterpartyBalance
from tenant_ledger import TenantLedger
from utils import local_now
from utils.tenancy import get_tenant_id, get_tenant_ledger

router = APIRouter(prefix="/business-partners", tags=["Business Partners"])
logger = logging.getLogger("business_partners")


def _has_documents(db: Session, partner_id: int, tenant_id: str) -> bool:
    for kind in DOCUMENT_KINDS.values():
        if kind.counterparty_field is None:
            continue
        model = kind.model
        if db.query(model.id).filter(
            getattr(model, kind.counterparty_field) == partner_id,
            model.tenant_id == tenant_id
        ).first():
            return True
    return False

@router.post("/", response_model=BusinessPartner, status_code=status.HTTP_201_CREATED)
def create_business_partner(
    partner: BusinessPartnerCreate,
    db: Session = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id)
):
    if crud_business_partners.get_business_partner_by_name(db, partner.name, tenant_id):
        raise HTTPException(status_code=400, detail="Business partner with this name already exists")

    db_partner = BusinessPartnerModel(**partner.model_dump(), tenant_id=tenant_id)
    db.add(db_partner)
    db.commit()
    db.refresh(db_partner)
    logger.info(f"Business partner '{db_partner.name}' created for tenant {tenant_id}")
    return db_partner

@router.get("/", response_model=List[BusinessPartner])
def read_business_partners(
    skip: int = 0,
    limit: int = 100,
    status: Optional[PartnerStatus] = None,
    is_vendor: Optional[bool] = Query(None),
    is_customer: Optional[bool] = Query(None),
    db: Session = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id)
):
    return crud_business_partners.list_business_partners(
        db, tenant_id, status=status, is_vendor=is_vendor, is_customer=is_customer, skip=skip, limit=limit
    )

@router.get("/{partner_id}", response_model=BusinessPartner)
def read_business_partner(partner_id: int, db: Session = Depends(get_db), tenant_id: str = Depends(get_tenant_id)):
    db_partner = crud_business_partners.get_business_partner(db, partner_id, tenant_id)
    if db_partner is None:
        raise HTTPException(status_code=404, detail="Business partner not found")
    return db_partner

@router.get("/{partner_id}/balance", response_model=CounterpartyBalance)
def read_business_partner_balance(
    partner_id: int,
    role: CounterpartyRole = "customer",
    ledger: TenantLedger = Depends(get_tenant_ledger)
):
    """Outstanding receivable (role=customer) or payable (role=vendor), derived from the ledger."""
    if crud_business_partners.get_business_partner(ledger.db, partner_id, ledger.tenant_id) is None:
        raise HTTPException(status_code=404, detail="Business partner not found")
    return ledger.get_counterparty_balance(partner_id, role)

@router.patch("/{partner_id}", response_model=BusinessPartner)
def update_business_partner(
    partner_id: int,
    partner: BusinessPartnerUpdate,
    db: Session = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id)
):
    db_partner = crud_business_partners.get_business_partner(db, partner_id, tenant_id)
    if db_partner is None:
        raise HTTPException(status_code=404, detail="Business partner not found")

    if partner.name is not None and partner.name != db_partner.name:
        if crud_business_partners.get_business_partner_by_name(db, partner.name, tenant_id):
            raise HTTPException(status_code=400, detail="Business partner with this name already exists")

    partner_data = partner.model_dump(exclude_unset=True)
    for key, value in partner_data.items():
        setattr(db_partner, key, value)
    db_partner.updated_at = local_now()

    db.commit()
    db.refresh(db_partner)
    logger.info(f"Business partner '{db_partner.name}' (ID: {partner_id}) updated for tenant {tenant_id}")
    return db_partner

@router.delete("/{partner_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_business_partner(
    partner_id: int,
    db: Session = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id)
):
    db_partner = crud_business_partners.get_business_partner(db, partner_id, tenant_id)
    if db_partner is None:
        raise HTTPException(status_code=404, detail="Business partner not found")

    # Partners with documents are kept so their balances stay derivable
    if _has_documents(db, partner_id, tenant_id):
        db_partner.status = PartnerStatus.INACTIVE
        db_partner.updated_at = local_now()
        db.commit()
        logger.warning(f"Business partner '{db_partner.name}' (ID: {partner_id}) set to INACTIVE due to associated documents for tenant {tenant_id}")
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Business partner '{db_partner.name}' has associated documents. Status changed to Inactive."
        )

    db.delete(db_partner)
    db.commit()
    logger.info(f"Business partner '{db_partner.name}' (ID: {partner_id}) deleted for tenant {tenant_id}")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
