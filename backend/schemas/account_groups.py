from pydantic import BaseModel, field_validator
from typing import Optional
from datetime import datetime

from posting_rules import AccountType

VALID_ACCOUNT_TYPES = [account_type.value for account_type in AccountType]

class AccountGroupBase(BaseModel):
    name: str
    account_type: str  # asset, liability, equity, revenue, expense
    description: Optional[str] = None

    @field_validator('account_type')
    @classmethod
    def validate_account_type(cls, v):
        if v not in VALID_ACCOUNT_TYPES:
            raise ValueError(f"account_type must be one of {VALID_ACCOUNT_TYPES}")
        return v

class AccountGroupCreate(AccountGroupBase):
    pass

class AccountGroupUpdate(BaseModel):
    name: Optional[str] = None
    account_type: Optional[str] = None
    description: Optional[str] = None

    @field_validator('account_type')
    @classmethod
    def validate_account_type(cls, v):
        if v is not None and v not in VALID_ACCOUNT_TYPES:
            raise ValueError(f"account_type must be one of {VALID_ACCOUNT_TYPES}")
        return v

class AccountGroup(AccountGroupBase):
    id: int
    tenant_id: str
    is_default: bool
    created_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
