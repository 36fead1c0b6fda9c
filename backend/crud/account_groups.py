import logging
from typing import Dict, Optional

from sqlalchemy.orm import Session

from models.account_groups import AccountGroup
from models.ledger_postings import LedgerPosting
from posting_rules import (
    ACCOUNTS_PAYABLE, ACCOUNTS_RECEIVABLE, BANK_CASH, EXPENSES, INCOME, INVENTORY,
    PURCHASE_RETURNS, SALES_RETURNS, SALES_REVENUE,
)
from schemas.account_groups import AccountGroupCreate, AccountGroupUpdate
from utils.exceptions import AccountInUse, AccountNotFound

logger = logging.getLogger("account_groups")

DEFAULT_ACCOUNT_GROUPS = [
    {"name": BANK_CASH, "account_type": "asset",
     "description": "Cash and bank accounts for business transactions"},
    {"name": ACCOUNTS_RECEIVABLE, "account_type": "asset",
     "description": "Amounts owed by customers for sales on credit"},
    {"name": INVENTORY, "account_type": "asset",
     "description": "Goods held for sale or raw materials"},
    {"name": PURCHASE_RETURNS, "account_type": "asset",
     "description": "Returns of goods to suppliers"},
    {"name": ACCOUNTS_PAYABLE, "account_type": "liability",
     "description": "Amounts owed to suppliers for purchases on credit"},
    {"name": SALES_REVENUE, "account_type": "revenue",
     "description": "Income from sales of products or services"},
    {"name": SALES_RETURNS, "account_type": "revenue",
     "description": "Returns from customers for sold goods"},
    {"name": INCOME, "account_type": "revenue",
     "description": "Other income sources not related to sales"},
    {"name": EXPENSES, "account_type": "expense",
     "description": "Business operating expenses"},
]


def get_account_group(db: Session, account_id: int, tenant_id: str):
    return db.query(AccountGroup).filter(
        AccountGroup.id == account_id,
        AccountGroup.tenant_id == tenant_id
    ).first()

def get_account_group_by_name(db: Session, name: str, tenant_id: str):
    return db.query(AccountGroup).filter(
        AccountGroup.name == name,
        AccountGroup.tenant_id == tenant_id
    ).first()

def list_account_groups(db: Session, tenant_id: str, account_type: str = None):
    query = db.query(AccountGroup).filter(AccountGroup.tenant_id == tenant_id)

    if account_type:
        query = query.filter(AccountGroup.account_type == account_type)

    return query.order_by(AccountGroup.name).all()

def resolve_account_id(db: Session, tenant_id: str, name: str) -> int:
    """Exact-name lookup. Raises AccountNotFound so the calling write aborts."""
    account = get_account_group_by_name(db, name, tenant_id)
    if account is None:
        raise AccountNotFound(name, tenant_id)
    return account.id

def is_account_in_use(db: Session, account_id: int, tenant_id: str) -> bool:
    return db.query(LedgerPosting.id).filter(
        LedgerPosting.account_id == account_id,
        LedgerPosting.tenant_id == tenant_id
    ).first() is not None

def create_account_group(db: Session, account: AccountGroupCreate, tenant_id: str):
    db_account = AccountGroup(**account.model_dump(), tenant_id=tenant_id)
    db.add(db_account)
    db.commit()
    db.refresh(db_account)
    return db_account

def update_account_group(db: Session, account_id: int, account_update: AccountGroupUpdate, tenant_id: str):
    db_account = get_account_group(db, account_id, tenant_id)
    if not db_account:
        return None

    update_data = account_update.model_dump(exclude_unset=True)

    # Postings keep their meaning only while the account keeps its type
    if 'account_type' in update_data and update_data['account_type'] != db_account.account_type:
        if is_account_in_use(db, account_id, tenant_id):
            raise AccountInUse(account_id)

    for key, value in update_data.items():
        setattr(db_account, key, value)

    db.commit()
    db.refresh(db_account)
    return db_account

def delete_account_group(db: Session, account_id: int, tenant_id: str):
    db_account = get_account_group(db, account_id, tenant_id)
    if not db_account:
        return False

    if is_account_in_use(db, account_id, tenant_id):
        raise AccountInUse(account_id)

    db.delete(db_account)
    db.commit()
    return True

def provision_default_account_groups(db: Session, tenant_id: str):
    """Initialize the default chart of accounts for a tenant.

    Safe to call repeatedly: a default is only inserted when no account with
    its name exists for the tenant yet.
    """
    created = []
    for account_data in DEFAULT_ACCOUNT_GROUPS:
        existing = get_account_group_by_name(db, account_data["name"], tenant_id)
        if not existing:
            db_account = AccountGroup(**account_data, is_default=True, tenant_id=tenant_id)
            db.add(db_account)
            created.append(db_account)

    db.commit()
    if created:
        logger.info(f"Provisioned {len(created)} default account groups for tenant {tenant_id}")
    return list_account_groups(db, tenant_id)


class AccountGroupMap:
    """Name to id map of one tenant's chart of accounts.

    Loaded on first use and then reused for every posting in the same unit of
    work, instead of querying the account name once per posting.
    """

    def __init__(self, db: Session, tenant_id: str):
        self.db = db
        self.tenant_id = tenant_id
        self._ids: Optional[Dict[str, int]] = None

    def load(self):
        rows = self.db.query(AccountGroup.name, AccountGroup.id).filter(
            AccountGroup.tenant_id == self.tenant_id
        ).all()
        self._ids = {name: account_id for name, account_id in rows}
        return self._ids

    def resolve(self, name: str) -> int:
        ids = self._ids if self._ids is not None else self.load()
        if name not in ids:
            raise AccountNotFound(name, self.tenant_id)
        return ids[name]
