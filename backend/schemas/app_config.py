from pydantic import BaseModel
from typing import Literal, Optional

CorrectionMode = Literal["retain", "cascade", "reverse"]

class AppConfigBase(BaseModel):
    name: str
    value: str
    tenant_id: Optional[str] = None

class AppConfigOut(AppConfigBase):
    id: int

    class Config:
        from_attributes = True

class LedgerSettings(BaseModel):
    ledger_correction_mode: CorrectionMode

class LedgerSettingsUpdate(BaseModel):
    ledger_correction_mode: Optional[CorrectionMode] = None
