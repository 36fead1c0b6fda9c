from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import List, Optional
import logging

from database import get_db
from schemas.app_config import AppConfigOut, LedgerSettings, LedgerSettingsUpdate
from crud import app_config as crud_app_config
from utils.tenancy import get_tenant_id

router = APIRouter(prefix="/app-config", tags=["App Config"])
logger = logging.getLogger("app_config")


@router.get("/configurations/", response_model=List[AppConfigOut])
def get_configs(name: Optional[str] = None, db: Session = Depends(get_db), tenant_id: str = Depends(get_tenant_id)):
    configs = crud_app_config.get_config(db, tenant_id, name=name)
    # Always return a list, even if empty
    return [configs] if name and configs else configs or []


@router.get("/ledger-settings", response_model=LedgerSettings)
def get_ledger_settings(db: Session = Depends(get_db), tenant_id: str = Depends(get_tenant_id)):
    return crud_app_config.get_ledger_settings(db, tenant_id)


@router.put("/ledger-settings", response_model=LedgerSettings)
def update_ledger_settings(
    settings: LedgerSettingsUpdate,
    db: Session = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id)
):
    """Sets how postings are corrected when a source document is edited or deleted."""
    return crud_app_config.update_ledger_settings(db, settings.model_dump(exclude_unset=True), tenant_id)
