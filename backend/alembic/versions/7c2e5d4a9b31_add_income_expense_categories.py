"""add income and expense categories

Revision ID: 7c2e5d4a9b31
Revises: 3f9a1c2b7d10
Create Date: 2026-10-19 15:40:07.113905

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '7c2e5d4a9b31'
down_revision: Union[str, None] = '3f9a1c2b7d10'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    for kind in ('income', 'expense'):
        op.create_table(
            f'{kind}_categories',
            sa.Column('id', sa.Integer(), primary_key=True),
            sa.Column('tenant_id', sa.String(), nullable=False, index=True),
            sa.Column('name', sa.String(length=100), nullable=False),
            sa.Column('description', sa.Text(), nullable=True),
            sa.Column('color', sa.String(length=7), nullable=False),
            sa.Column('is_default', sa.Boolean(), nullable=False),
            sa.Column('created_at', sa.DateTime(timezone=True), nullable=True),
            sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
            sa.UniqueConstraint('tenant_id', 'name', name=f'_tenant_{kind}_category_name_uc'),
        )

    # Free-text categories are not carried over
    for table, kind in (('incomes', 'income'), ('expenses', 'expense')):
        with op.batch_alter_table(table) as batch_op:
            batch_op.drop_column('category')
            batch_op.add_column(sa.Column('category_id', sa.Integer(), nullable=True))
            batch_op.create_foreign_key(
                f'fk_{table}_category_id', f'{kind}_categories', ['category_id'], ['id'], ondelete='SET NULL'
            )


def downgrade() -> None:
    for table in ('incomes', 'expenses'):
        with op.batch_alter_table(table) as batch_op:
            batch_op.drop_constraint(f'fk_{table}_category_id', type_='foreignkey')
            batch_op.drop_column('category_id')
            batch_op.add_column(sa.Column('category', sa.String(), nullable=True))

    for kind in ('expense', 'income'):
        op.drop_table(f'{kind}_categories')
