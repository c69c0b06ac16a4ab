"""Initial schema: accounts, products, orders

Revision ID: 20261019_initial
Revises:
Create Date: 2026-10-19

This migration adds:
1. Accounts (email-keyed identities with role and approval status)
2. Products (catalog with a non-negative stock counter and version column)
3. Orders (quantity snapshot, status, tracking history, version column)
"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '20261019_initial'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    # ==========================================================================
    # 1. ACCOUNTS TABLE
    # ==========================================================================
    op.create_table('accounts',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False, server_default=''),
        sa.Column('photo_url', sa.String(length=1024), nullable=True),
        sa.Column('role', sa.String(length=16), nullable=False, server_default='buyer'),
        sa.Column('status', sa.String(length=16), nullable=False, server_default='pending'),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=False),
        sa.CheckConstraint("role IN ('admin', 'manager', 'buyer')", name='ck_accounts_role'),
        sa.CheckConstraint("status IN ('pending', 'approved', 'suspended')", name='ck_accounts_status'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('email', name='uq_accounts_email'),
        sqlite_autoincrement=True
    )
    with op.batch_alter_table('accounts', schema=None) as batch_op:
        batch_op.create_index(batch_op.f('ix_accounts_email'), ['email'], unique=False)

    # ==========================================================================
    # 2. PRODUCTS TABLE
    # ==========================================================================
    op.create_table('products',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('category', sa.String(length=64), nullable=True),
        sa.Column('price', sa.Float(), nullable=False, server_default='0'),
        sa.Column('quantity', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('minimum_order', sa.Integer(), nullable=False, server_default='1'),
        sa.Column('images', sa.JSON(), nullable=False),
        sa.Column('payment_options', sa.String(length=64), nullable=True),
        sa.Column('show_on_home', sa.Boolean(), nullable=False, server_default='0'),
        sa.Column('rating', sa.Float(), nullable=True),
        sa.Column('location', sa.String(length=255), nullable=True),
        sa.Column('created_by', sa.String(length=255), nullable=False),
        sa.Column('version_id', sa.Integer(), nullable=False, server_default='1'),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=False),
        sa.CheckConstraint('quantity >= 0', name='ck_products_quantity_nonnegative'),
        sa.CheckConstraint('price >= 0', name='ck_products_price_nonnegative'),
        sa.PrimaryKeyConstraint('id'),
        sqlite_autoincrement=True
    )
    with op.batch_alter_table('products', schema=None) as batch_op:
        batch_op.create_index(batch_op.f('ix_products_category'), ['category'], unique=False)
        batch_op.create_index(batch_op.f('ix_products_created_by'), ['created_by'], unique=False)
        batch_op.create_index('ix_products_category_name', ['category', 'name'], unique=False)
        batch_op.create_index('ix_products_home', ['show_on_home', 'created_at'], unique=False)

    # ==========================================================================
    # 3. ORDERS TABLE
    # ==========================================================================
    # product_id has no foreign key; orders outlive a deleted product.
    op.create_table('orders',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('product_id', sa.Integer(), nullable=False),
        sa.Column('quantity', sa.Integer(), nullable=False),
        sa.Column('user_email', sa.String(length=255), nullable=False),
        sa.Column('status', sa.String(length=16), nullable=False, server_default='pending'),
        sa.Column('unit_price', sa.Float(), nullable=False, server_default='0'),
        sa.Column('total_price', sa.Float(), nullable=False, server_default='0'),
        sa.Column('delivery_address', sa.Text(), nullable=True),
        sa.Column('contact_number', sa.String(length=32), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('tracking', sa.JSON(), nullable=False),
        sa.Column('version_id', sa.Integer(), nullable=False, server_default='1'),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=False),
        sa.CheckConstraint('quantity > 0', name='ck_orders_quantity_positive'),
        sa.PrimaryKeyConstraint('id'),
        sqlite_autoincrement=True
    )
    with op.batch_alter_table('orders', schema=None) as batch_op:
        batch_op.create_index(batch_op.f('ix_orders_status'), ['status'], unique=False)
        batch_op.create_index('ix_orders_product_status', ['product_id', 'status'], unique=False)
        batch_op.create_index('ix_orders_user_email', ['user_email'], unique=False)


def downgrade():
    op.drop_table('orders')
    op.drop_table('products')
    op.drop_table('accounts')
