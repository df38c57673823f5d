"""create_ledger_tables

Revision ID: 3f9a1c2e7b40
Revises:
Create Date: 2026-10-18 09:12:44.518203

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '3f9a1c2e7b40'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table('sales',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('customer_name', sa.String(length=255), nullable=False),
        sa.Column('customer_phone', sa.String(length=50), nullable=False),
        sa.Column('total_amount', sa.Numeric(precision=12, scale=4), nullable=False),
        sa.Column('amount_paid', sa.Numeric(precision=12, scale=4), nullable=False),
        sa.Column('payment_status', sa.String(length=20), nullable=False),
        sa.Column('due_date', sa.DateTime(timezone=True), nullable=True),
        sa.Column('is_manual_balance', sa.Boolean(), nullable=False),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_sales_customer_phone', 'sales', ['customer_phone'], unique=False)

    op.create_table('sale_items',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('sale_id', sa.String(length=36), nullable=False),
        sa.Column('position', sa.Integer(), nullable=False),
        sa.Column('product_id', sa.String(length=36), nullable=True),
        sa.Column('description', sa.String(length=255), nullable=True),
        sa.Column('quantity', sa.Integer(), nullable=False),
        sa.Column('rate', sa.Numeric(precision=12, scale=4), nullable=False),
        sa.Column('subtotal', sa.Numeric(precision=12, scale=4), nullable=False),
        sa.Column('quantity_returned', sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(['sale_id'], ['sales.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_sale_items_sale_id', 'sale_items', ['sale_id'], unique=False)

    op.create_table('payment_history',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('sale_id', sa.String(length=36), nullable=False),
        sa.Column('customer_phone', sa.String(length=50), nullable=False),
        sa.Column('amount', sa.Numeric(precision=12, scale=4), nullable=False),
        sa.Column('previous_balance', sa.Numeric(precision=12, scale=4), nullable=False),
        sa.Column('new_balance', sa.Numeric(precision=12, scale=4), nullable=False),
        sa.Column('payment_method', sa.String(length=20), nullable=False),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(['sale_id'], ['sales.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_payment_history_sale_id', 'payment_history', ['sale_id'], unique=False)
    op.create_index('ix_payment_history_customer_phone', 'payment_history', ['customer_phone'], unique=False)

    op.create_table('returns',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('sale_id', sa.String(length=36), nullable=True),
        sa.Column('customer_name', sa.String(length=255), nullable=False),
        sa.Column('customer_phone', sa.String(length=50), nullable=False),
        sa.Column('return_type', sa.String(length=20), nullable=False),
        sa.Column('refund_method', sa.String(length=20), nullable=False),
        sa.Column('status', sa.String(length=20), nullable=False),
        sa.Column('total_refund', sa.Numeric(precision=12, scale=4), nullable=False),
        sa.Column('reason', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(['sale_id'], ['sales.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_returns_sale_id', 'returns', ['sale_id'], unique=False)
    op.create_index('ix_returns_customer_phone', 'returns', ['customer_phone'], unique=False)

    op.create_table('return_items',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('return_id', sa.String(length=36), nullable=False),
        sa.Column('position', sa.Integer(), nullable=False),
        sa.Column('sale_item_id', sa.String(length=36), nullable=True),
        sa.Column('product_id', sa.String(length=36), nullable=True),
        sa.Column('description', sa.String(length=255), nullable=True),
        sa.Column('quantity', sa.Integer(), nullable=False),
        sa.Column('rate', sa.Numeric(precision=12, scale=4), nullable=False),
        sa.Column('subtotal', sa.Numeric(precision=12, scale=4), nullable=False),
        sa.ForeignKeyConstraint(['return_id'], ['returns.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['sale_item_id'], ['sale_items.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_return_items_return_id', 'return_items', ['return_id'], unique=False)


def downgrade():
    op.drop_index('ix_return_items_return_id', table_name='return_items')
    op.drop_table('return_items')
    op.drop_index('ix_returns_customer_phone', table_name='returns')
    op.drop_index('ix_returns_sale_id', table_name='returns')
    op.drop_table('returns')
    op.drop_index('ix_payment_history_customer_phone', table_name='payment_history')
    op.drop_index('ix_payment_history_sale_id', table_name='payment_history')
    op.drop_table('payment_history')
    op.drop_index('ix_sale_items_sale_id', table_name='sale_items')
    op.drop_table('sale_items')
    op.drop_index('ix_sales_customer_phone', table_name='sales')
    op.drop_table('sales')
