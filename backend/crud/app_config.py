import logging
import os

from sqlalchemy.orm import Session

from models.app_config import AppConfig
from utils import local_now
from utils.exceptions import InvalidCorrectionMode

logger = logging.getLogger("app_config")

LEDGER_CORRECTION_MODE = "ledger_correction_mode"
CORRECTION_MODES = {"retain", "cascade", "reverse"}

# retain keeps postings untouched when a source document changes or goes away
DEFAULT_CORRECTION_MODE = os.getenv("LEDGER_CORRECTION_MODE", "retain")


def validate_correction_mode(mode: str) -> str:
    if mode not in CORRECTION_MODES:
        raise InvalidCorrectionMode(mode, CORRECTION_MODES)
    return mode


# Get config by name (or all configs)
def get_config(db: Session, tenant_id: str, name: str = None):
    if name:
        return db.query(AppConfig).filter(AppConfig.name == name, AppConfig.tenant_id == tenant_id).first()
    return db.query(AppConfig).filter(AppConfig.tenant_id == tenant_id).all()


def set_config(db: Session, tenant_id: str, name: str, value: str):
    db_config = get_config(db, tenant_id, name)
    if db_config:
        db_config.value = str(value)
        db_config.updated_at = local_now()
    else:
        db_config = AppConfig(name=name, value=str(value), tenant_id=tenant_id)
        db.add(db_config)
    db.commit()
    db.refresh(db_config)
    return db_config


def get_ledger_settings(db: Session, tenant_id: str):
    db_config = get_config(db, tenant_id, LEDGER_CORRECTION_MODE)
    mode = db_config.value if db_config else DEFAULT_CORRECTION_MODE
    return {LEDGER_CORRECTION_MODE: validate_correction_mode(mode)}


def update_ledger_settings(db: Session, config_updates: dict, tenant_id: str):
    mode = config_updates.get(LEDGER_CORRECTION_MODE)
    if mode is not None:
        set_config(db, tenant_id, LEDGER_CORRECTION_MODE, validate_correction_mode(mode))
        logger.info(f"Ledger correction mode set to '{mode}' for tenant {tenant_id}")
    return get_ledger_settings(db, tenant_id)
