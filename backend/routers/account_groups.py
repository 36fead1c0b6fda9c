from fastapi import APIRouter, Depends, HTTPException, status, Response
from sqlalchemy.orm import Session
from typing import List
import logging

from crud import account_groups as crud_account_groups
from database import get_db
from schemas.account_groups import AccountGroup, AccountGroupCreate, AccountGroupUpdate
from schemas.ledger import AccountBalance
from tenant_ledger import TenantLedger
from utils.tenancy import get_tenant_id, get_tenant_ledger

router = APIRouter(
    prefix="/account-groups",
    tags=["Account Groups"],
)
logger = logging.getLogger("account_groups")

@router.post("/", response_model=AccountGroup, status_code=status.HTTP_201_CREATED)
def create_account_group(
    account: AccountGroupCreate,
    db: Session = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id)
):
    if crud_account_groups.get_account_group_by_name(db, account.name, tenant_id):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Account group '{account.name}' already exists"
        )
    db_account = crud_account_groups.create_account_group(db, account, tenant_id)
    logger.info(f"Account group '{db_account.name}' created for tenant {tenant_id}")
    return db_account

@router.post("/provision-defaults", response_model=List[AccountGroup])
def provision_default_account_groups(ledger: TenantLedger = Depends(get_tenant_ledger)):
    """Creates whichever of the default account groups the tenant is still missing."""
    return ledger.provision_defaults()

@router.get("/", response_model=List[AccountGroup])
def get_account_groups(
    db: Session = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id),
    account_type: str = None
):
    return crud_account_groups.list_account_groups(db, tenant_id, account_type)

@router.get("/{account_id}", response_model=AccountGroup)
def get_account_group(
    account_id: int,
    db: Session = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id)
):
    account = crud_account_groups.get_account_group(db, account_id, tenant_id)
    if not account:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Account group with id {account_id} not found"
        )
    return account

@router.get("/{account_id}/balance", response_model=AccountBalance)
def get_account_group_balance(account_id: int, ledger: TenantLedger = Depends(get_tenant_ledger)):
    return ledger.get_account_balance(account_id)

@router.patch("/{account_id}", response_model=AccountGroup)
def update_account_group(
    account_id: int,
    account_update: AccountGroupUpdate,
    db: Session = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id)
):
    if account_update.name is not None:
        existing = crud_account_groups.get_account_group_by_name(db, account_update.name, tenant_id)
        if existing and existing.id != account_id:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Account group '{account_update.name}' already exists"
            )

    # Changing the type of an account with postings raises AccountInUse
    account = crud_account_groups.update_account_group(db, account_id, account_update, tenant_id)
    if not account:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Account group with id {account_id} not found"
        )
    logger.info(f"Account group {account_id} updated for tenant {tenant_id}")
    return account

@router.delete("/{account_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_account_group(
    account_id: int,
    db: Session = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id)
):
    if not crud_account_groups.delete_account_group(db, account_id, tenant_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Account group with id {account_id} not found"
        )
    logger.info(f"Account group {account_id} deleted for tenant {tenant_id}")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
