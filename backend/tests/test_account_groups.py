from datetime import date

import pytest

from crud import account_groups as crud_account_groups
from models.account_groups import AccountGroup
from posting_rules import ACCOUNTS_RECEIVABLE, BANK_CASH, PURCHASE_RETURNS, SALES_REVENUE
from schemas.account_groups import AccountGroupCreate, AccountGroupUpdate
from utils.exceptions import AccountInUse, AccountNotFound

from conftest import OTHER_TENANT_ID, TENANT_ID


def test_provisioning_creates_the_nine_defaults(ledger):
    accounts = ledger.provision_defaults()

    assert len(accounts) == 9
    assert all(account.is_default for account in accounts)
    by_name = {account.name: account.account_type for account in accounts}
    assert by_name[BANK_CASH] == "asset"
    assert by_name[SALES_REVENUE] == "revenue"
    assert by_name[PURCHASE_RETURNS] == "asset"


def test_provisioning_twice_is_idempotent(ledger, db_session):
    ledger.provision_defaults()
    ledger.provision_defaults()

    count = db_session.query(AccountGroup).filter(AccountGroup.tenant_id == TENANT_ID).count()
    assert count == 9


def test_provisioning_keeps_existing_accounts(db_session):
    crud_account_groups.create_account_group(
        db_session, AccountGroupCreate(name=BANK_CASH, account_type="asset", description="Main bank"), TENANT_ID
    )
    accounts = crud_account_groups.provision_default_account_groups(db_session, TENANT_ID)

    assert len(accounts) == 9
    bank = crud_account_groups.get_account_group_by_name(db_session, BANK_CASH, TENANT_ID)
    assert bank.description == "Main bank"
    assert bank.is_default is False


def test_charts_are_isolated_per_tenant(db_session):
    crud_account_groups.provision_default_account_groups(db_session, TENANT_ID)

    assert crud_account_groups.list_account_groups(db_session, OTHER_TENANT_ID) == []
    with pytest.raises(AccountNotFound):
        crud_account_groups.resolve_account_id(db_session, OTHER_TENANT_ID, BANK_CASH)


def test_list_by_type_is_ordered_by_name(db_session):
    crud_account_groups.provision_default_account_groups(db_session, TENANT_ID)

    assets = crud_account_groups.list_account_groups(db_session, TENANT_ID, account_type="asset")
    names = [account.name for account in assets]
    assert names == sorted(names)
    assert len(names) == 4


def test_resolve_account_id_requires_exact_name(db_session):
    crud_account_groups.provision_default_account_groups(db_session, TENANT_ID)

    account_id = crud_account_groups.resolve_account_id(db_session, TENANT_ID, ACCOUNTS_RECEIVABLE)
    assert crud_account_groups.get_account_group(db_session, account_id, TENANT_ID).name == ACCOUNTS_RECEIVABLE
    with pytest.raises(AccountNotFound) as exc_info:
        crud_account_groups.resolve_account_id(db_session, TENANT_ID, "accounts receivable")
    assert exc_info.value.message == 'Account group "accounts receivable" not found'


def test_account_group_map_resolves_from_one_load(db_session):
    crud_account_groups.provision_default_account_groups(db_session, TENANT_ID)
    account_map = crud_account_groups.AccountGroupMap(db_session, TENANT_ID)

    first = account_map.resolve(BANK_CASH)
    assert account_map.resolve(BANK_CASH) == first
    with pytest.raises(AccountNotFound):
        account_map.resolve("Petty Cash")


def test_account_in_use_cannot_be_deleted_or_retyped(provisioned_ledger, db_session):
    provisioned_ledger.record_expense({"date": date(2024, 3, 1), "description": "Office rent", "amount": 200})
    bank_id = crud_account_groups.resolve_account_id(db_session, TENANT_ID, BANK_CASH)

    with pytest.raises(AccountInUse):
        crud_account_groups.delete_account_group(db_session, bank_id, TENANT_ID)
    with pytest.raises(AccountInUse):
        crud_account_groups.update_account_group(
            db_session, bank_id, AccountGroupUpdate(account_type="liability"), TENANT_ID
        )

    renamed = crud_account_groups.update_account_group(
        db_session, bank_id, AccountGroupUpdate(description="Operating account"), TENANT_ID
    )
    assert renamed.description == "Operating account"


def test_unused_account_can_be_deleted(db_session):
    crud_account_groups.provision_default_account_groups(db_session, TENANT_ID)
    income_id = crud_account_groups.resolve_account_id(db_session, TENANT_ID, "Income")

    assert crud_account_groups.delete_account_group(db_session, income_id, TENANT_ID) is True
    assert crud_account_groups.get_account_group(db_session, income_id, TENANT_ID) is None
    assert crud_account_groups.delete_account_group(db_session, income_id, TENANT_ID) is False
