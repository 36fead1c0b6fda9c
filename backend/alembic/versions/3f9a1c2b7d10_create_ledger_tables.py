"""create ledger tables

Revision ID: 3f9a1c2b7d10
Revises:
Create Date: 2026-10-19 10:12:41.508213

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '3f9a1c2b7d10'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps():
    return [
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
    ]


def _document_columns():
    return [
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('tenant_id', sa.String(), nullable=False, index=True),
    ]


def upgrade() -> None:
    op.create_table(
        'account_groups',
        *_document_columns(),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('account_type', sa.String(length=20), nullable=False),
        sa.Column('is_default', sa.Boolean(), nullable=False, server_default=sa.false()),
        *_timestamps(),
        sa.UniqueConstraint('tenant_id', 'name', name='_tenant_account_group_name_uc'),
    )
    op.create_table(
        'app_config',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(length=100), nullable=False, index=True),
        sa.Column('value', sa.String(length=255), nullable=False),
        sa.Column('tenant_id', sa.String(), nullable=True, index=True),
        *_timestamps(),
        sa.UniqueConstraint('name', 'tenant_id', name='_app_config_name_tenant_uc'),
    )
    op.create_table(
        'business_partners',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('tenant_id', sa.String(), nullable=True, index=True),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('contact_name', sa.String(), nullable=True),
        sa.Column('phone', sa.String(), nullable=True),
        sa.Column('address', sa.Text(), nullable=True),
        sa.Column('email', sa.String(), nullable=True),
        sa.Column('status', sa.Enum('ACTIVE', 'INACTIVE', 'BLOCKED', name='partnerstatus'), nullable=False),
        sa.Column('is_vendor', sa.Boolean(), nullable=False),
        sa.Column('is_customer', sa.Boolean(), nullable=False),
        *_timestamps(),
        sa.UniqueConstraint('tenant_id', 'name', name='_tenant_partner_name_uc'),
    )
    op.create_table(
        'ledger_postings',
        *_document_columns(),
        sa.Column('posting_date', sa.Date(), nullable=False),
        sa.Column('source_document_type', sa.String(length=32), nullable=False),
        sa.Column('source_document_id', sa.Integer(), nullable=False),
        sa.Column('account_id', sa.Integer(), sa.ForeignKey('account_groups.id'), nullable=False),
        sa.Column('direction', sa.String(length=6), nullable=False),
        sa.Column('amount', sa.Integer(), nullable=False),
        sa.Column('description', sa.String(), nullable=True),
        sa.Column('reverses_posting_id', sa.Integer(), sa.ForeignKey('ledger_postings.id'), nullable=True),
        *_timestamps(),
        sa.CheckConstraint('amount >= 0', name='check_posting_amount_non_negative'),
        sa.CheckConstraint("direction IN ('debit', 'credit')", name='check_posting_direction'),
    )
    op.create_index(
        'ix_ledger_postings_reference', 'ledger_postings',
        ['tenant_id', 'source_document_type', 'source_document_id']
    )
    op.create_table(
        'transactions',
        *_document_columns(),
        sa.Column('transaction_type', sa.String(length=32), nullable=False),
        sa.Column('reference_type', sa.String(length=32), nullable=False),
        sa.Column('reference_id', sa.Integer(), nullable=False),
        sa.Column('amount', sa.Integer(), nullable=False),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('status', sa.String(length=20), nullable=True),
        sa.Column('payment_method', sa.String(), nullable=True),
        sa.Column('reference_number', sa.String(), nullable=True),
        *_timestamps(),
        sa.UniqueConstraint('tenant_id', 'reference_type', 'reference_id', name='_tenant_transaction_reference_uc'),
    )

    for table, partner in (('sales_invoices', 'customer_id'), ('purchase_invoices', 'vendor_id')):
        op.create_table(
            table,
            *_document_columns(),
            sa.Column('invoice_number', sa.String(), nullable=False),
            sa.Column(partner, sa.Integer(), sa.ForeignKey('business_partners.id'), nullable=False),
            sa.Column('invoice_date', sa.Date(), nullable=False),
            sa.Column('due_date', sa.Date(), nullable=True),
            sa.Column('subtotal', sa.Integer(), nullable=False),
            sa.Column('tax', sa.Integer(), nullable=False),
            sa.Column('total', sa.Integer(), nullable=False),
            sa.Column('status', sa.String(length=20), nullable=False),
            sa.Column('notes', sa.Text(), nullable=True),
            *_timestamps(),
            sqlite_autoincrement=True,
        )
        op.create_table(
            table[:-1] + '_items',
            sa.Column('id', sa.Integer(), primary_key=True),
            sa.Column('invoice_id', sa.Integer(), sa.ForeignKey(f'{table}.id'), nullable=False),
            sa.Column('product_name', sa.String(), nullable=False),
            sa.Column('quantity', sa.Numeric(10, 3), nullable=False),
            sa.Column('unit_price', sa.Integer(), nullable=False),
            sa.Column('total', sa.Integer(), nullable=False),
            sa.Column('notes', sa.Text(), nullable=True),
            sa.Column('tenant_id', sa.String(), nullable=True, index=True),
        )

    for table, partner, invoice_column, invoice_table in (
        ('sales_returns', 'customer_id', 'sales_invoice_id', 'sales_invoices'),
        ('purchase_returns', 'vendor_id', 'purchase_invoice_id', 'purchase_invoices'),
    ):
        op.create_table(
            table,
            *_document_columns(),
            sa.Column('return_number', sa.String(), nullable=False),
            sa.Column(partner, sa.Integer(), sa.ForeignKey('business_partners.id'), nullable=False),
            sa.Column(invoice_column, sa.Integer(), sa.ForeignKey(f'{invoice_table}.id', ondelete='SET NULL'), nullable=True),
            sa.Column('return_date', sa.Date(), nullable=False),
            sa.Column('subtotal', sa.Integer(), nullable=False),
            sa.Column('tax', sa.Integer(), nullable=False),
            sa.Column('total', sa.Integer(), nullable=False),
            sa.Column('status', sa.String(length=20), nullable=False),
            sa.Column('notes', sa.Text(), nullable=True),
            *_timestamps(),
            sqlite_autoincrement=True,
        )

    for table, partner, invoice_table in (
        ('payment_ins', 'customer_id', 'sales_invoices'),
        ('payment_outs', 'vendor_id', 'purchase_invoices'),
    ):
        op.create_table(
            table,
            *_document_columns(),
            sa.Column('payment_number', sa.String(), nullable=False),
            sa.Column(partner, sa.Integer(), sa.ForeignKey('business_partners.id'), nullable=False),
            sa.Column('payment_date', sa.Date(), nullable=False),
            sa.Column('payment_method', sa.String(), nullable=True),
            sa.Column('reference_number', sa.String(), nullable=True),
            sa.Column('status', sa.String(length=20), nullable=False),
            sa.Column('amount', sa.Integer(), nullable=False),
            sa.Column('notes', sa.Text(), nullable=True),
            *_timestamps(),
            sqlite_autoincrement=True,
        )
        op.create_table(
            table[:-1] + '_items',
            sa.Column('id', sa.Integer(), primary_key=True),
            sa.Column('payment_id', sa.Integer(), sa.ForeignKey(f'{table}.id'), nullable=False),
            sa.Column('invoice_id', sa.Integer(), sa.ForeignKey(f'{invoice_table}.id', ondelete='SET NULL'), nullable=True),
            sa.Column('amount', sa.Integer(), nullable=False),
            sa.Column('notes', sa.Text(), nullable=True),
            sa.Column('tenant_id', sa.String(), nullable=True, index=True),
        )

    for table in ('incomes', 'expenses'):
        op.create_table(
            table,
            *_document_columns(),
            sa.Column('date', sa.Date(), nullable=False),
            sa.Column('category', sa.String(), nullable=True),
            sa.Column('description', sa.String(), nullable=False),
            sa.Column('amount', sa.Integer(), nullable=False),
            sa.Column('payment_method', sa.String(), nullable=True),
            sa.Column('reference_number', sa.String(), nullable=True),
            sa.Column('status', sa.String(length=20), nullable=False),
            sa.Column('notes', sa.Text(), nullable=True),
            *_timestamps(),
            sqlite_autoincrement=True,
        )


def downgrade() -> None:
    for table in (
        'expenses', 'incomes',
        'payment_out_items', 'payment_outs', 'payment_in_items', 'payment_ins',
        'purchase_returns', 'sales_returns',
        'purchase_invoice_items', 'purchase_invoices', 'sales_invoice_items', 'sales_invoices',
        'transactions',
    ):
        op.drop_table(table)
    op.drop_index('ix_ledger_postings_reference', table_name='ledger_postings')
    for table in ('ledger_postings', 'business_partners', 'app_config', 'account_groups'):
        op.drop_table(table)
    sa.Enum(name='partnerstatus').drop(op.get_bind(), checkfirst=True)
