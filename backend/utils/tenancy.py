from fastapi import Depends, Header, HTTPException
from sqlalchemy.orm import Session

from database import get_db
from tenant_ledger import TenantLedger


def get_tenant_id(x_tenant_id: str = Header(...)) -> str:
    if not x_tenant_id:
        raise HTTPException(status_code=400, detail="X-Tenant-ID header is missing")
    return x_tenant_id


def get_tenant_ledger(db: Session = Depends(get_db), tenant_id: str = Depends(get_tenant_id)) -> TenantLedger:
    """Ledger handle bound to the request's session and tenant."""
    return TenantLedger(db, tenant_id)
