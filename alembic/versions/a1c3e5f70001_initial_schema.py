"""initial schema

Revision ID: a1c3e5f70001
Revises:
Create Date: 2026-10-19 09:00:00.000000

"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = 'a1c3e5f70001'
down_revision = None
branch_labels = None
depends_on = None


def _timestamps():
    return [
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
    ]


def _created_at_index(table):
    op.create_index(op.f(f'ix_{table}_created_at'), table, ['created_at'], unique=False)


def upgrade():
    op.create_table(
        'users',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('full_name', sa.String(), nullable=False),
        sa.Column('user_name', sa.String(), nullable=True),
        sa.Column('email', sa.String(), nullable=False),
        sa.Column('phone', sa.String(), nullable=True),
        sa.Column('picture', sa.String(), nullable=True),
        sa.Column('role', sa.String(length=20), nullable=False),
        sa.Column('country', sa.String(), nullable=True),
        sa.Column('state', sa.String(), nullable=True),
        sa.Column('address', sa.String(), nullable=True),
        sa.Column('business_name', sa.String(), nullable=True),
        sa.Column('business_category', sa.String(), nullable=True),
        sa.Column('password', sa.String(), nullable=True),
        sa.Column('socials', sa.JSON(), nullable=True),
        sa.Column('is_verified', sa.Boolean(), nullable=False),
        sa.Column('is_blocked', sa.DateTime(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('user_name'),
    )
    op.create_index(op.f('ix_users_email'), 'users', ['email'], unique=True)
    op.create_index(op.f('ix_users_business_name'), 'users', ['business_name'], unique=False)
    _created_at_index('users')

    op.create_table(
        'tokens',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('email', sa.String(), nullable=True),
        sa.Column('telephone', sa.String(), nullable=True),
        sa.Column('token', sa.String(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('token'),
    )
    op.create_index(op.f('ix_tokens_email'), 'tokens', ['email'], unique=False)

    op.create_table(
        'account_deletion_tokens',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('user_id', sa.String(length=36), nullable=False),
        sa.Column('email', sa.String(), nullable=False),
        sa.Column('token', sa.String(), nullable=False),
        sa.Column('expires_at', sa.DateTime(), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_account_deletion_tokens_user_id'), 'account_deletion_tokens', ['user_id'], unique=False)
    _created_at_index('account_deletion_tokens')

    op.create_table(
        'deleted_accounts',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('email_hash', sa.String(length=64), nullable=False),
        sa.Column('deleted_at', sa.DateTime(), nullable=False),
        sa.Column('allow_after', sa.DateTime(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('email_hash'),
    )
    _created_at_index('deleted_accounts')

    op.create_table(
        'user_settings',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('user_id', sa.String(length=36), nullable=False),
        sa.Column('currency', sa.String(length=10), nullable=True),
        sa.Column('notification', sa.Boolean(), nullable=False),
        sa.Column('taxes_rate', sa.Float(), nullable=True),
        sa.Column('taxes_enabled', sa.Boolean(), nullable=False),
        sa.Column('language', sa.String(length=30), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('user_id'),
    )
    _created_at_index('user_settings')

    op.create_table(
        'user_bank_details',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('user_id', sa.String(length=36), nullable=False),
        sa.Column('bank_name', sa.String(), nullable=False),
        sa.Column('account_number', sa.String(length=20), nullable=False),
        sa.Column('account_name', sa.String(), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('user_id'),
    )
    _created_at_index('user_bank_details')

    op.create_table(
        'products',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('owner_id', sa.String(length=36), nullable=False),
        sa.Column('image', sa.JSON(), nullable=True),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('measurement', sa.String(), nullable=True),
        sa.Column('quantity', sa.Integer(), nullable=False),
        sa.Column('quantity_type', sa.String(), nullable=True),
        sa.Column('price', sa.Float(), nullable=False),
        sa.Column('expiry_date', sa.String(), nullable=True),
        sa.Column('restock_alert', sa.Integer(), nullable=False),
        sa.Column('number_of_restocks', sa.Integer(), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(['owner_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_products_owner_id'), 'products', ['owner_id'], unique=False)
    _created_at_index('products')

    op.create_table(
        'restock_history',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('product_id', sa.String(length=36), nullable=False),
        sa.Column('owner_id', sa.String(length=36), nullable=False),
        sa.Column('restocked_by', sa.String(length=36), nullable=True),
        sa.Column('quantity', sa.Integer(), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(['product_id'], ['products.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['owner_id'], ['users.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['restocked_by'], ['users.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_restock_history_product_id'), 'restock_history', ['product_id'], unique=False)
    op.create_index(op.f('ix_restock_history_owner_id'), 'restock_history', ['owner_id'], unique=False)
    _created_at_index('restock_history')

    op.create_table(
        'customers',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('owner_id', sa.String(length=36), nullable=False),
        sa.Column('user_id', sa.String(length=36), nullable=True),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('phone_number', sa.String(), nullable=False),
        sa.Column('location', sa.String(), nullable=False),
        sa.Column('email', sa.String(), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(['owner_id'], ['users.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_customers_owner_id'), 'customers', ['owner_id'], unique=False)
    op.create_index(op.f('ix_customers_user_id'), 'customers', ['user_id'], unique=False)
    _created_at_index('customers')

    op.create_table(
        'invoices',
        sa.Column('id', sa.String(length=40), nullable=False),
        sa.Column('owner_id', sa.String(length=36), nullable=False),
        sa.Column('customer_id', sa.String(length=36), nullable=True),
        sa.Column('customer_details', sa.JSON(), nullable=True),
        sa.Column('products', sa.JSON(), nullable=False),
        sa.Column('tax', sa.Float(), nullable=True),
        sa.Column('total', sa.Float(), nullable=True),
        sa.Column('narration', sa.String(), nullable=True),
        sa.Column('delivery_fees', sa.Float(), nullable=True),
        sa.Column('auto_approve', sa.Boolean(), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(['owner_id'], ['users.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['customer_id'], ['customers.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_invoices_owner_id'), 'invoices', ['owner_id'], unique=False)
    op.create_index(op.f('ix_invoices_customer_id'), 'invoices', ['customer_id'], unique=False)
    _created_at_index('invoices')

    op.create_table(
        'blog_posts',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('title', sa.String(), nullable=False),
        sa.Column('slug', sa.String(), nullable=False),
        sa.Column('excerpt', sa.Text(), nullable=True),
        sa.Column('content', sa.Text(), nullable=False),
        sa.Column('cover_image', sa.String(), nullable=True),
        sa.Column('author_id', sa.String(length=36), nullable=True),
        sa.Column('author_name', sa.String(), nullable=True),
        sa.Column('is_published', sa.Boolean(), nullable=False),
        sa.Column('published_at', sa.DateTime(), nullable=True),
        sa.Column('views', sa.Integer(), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(['author_id'], ['users.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_blog_posts_slug'), 'blog_posts', ['slug'], unique=True)
    op.create_index(op.f('ix_blog_posts_published_at'), 'blog_posts', ['published_at'], unique=False)
    _created_at_index('blog_posts')

    op.create_table(
        'communities',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('state', sa.String(), nullable=True),
        sa.Column('country', sa.String(), nullable=True),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('whatsapp_link', sa.String(), nullable=True),
        sa.Column('picture', sa.String(), nullable=True),
        sa.Column('phone_number', sa.String(), nullable=True),
        sa.Column('email', sa.String(), nullable=True),
        sa.Column('instagram_link', sa.String(), nullable=True),
        sa.Column('facebook_link', sa.String(), nullable=True),
        sa.Column('created_by', sa.String(length=36), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(['created_by'], ['users.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_communities_name'), 'communities', ['name'], unique=False)
    _created_at_index('communities')

    op.create_table(
        'community_members',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('community_id', sa.String(length=36), nullable=False),
        sa.Column('user_id', sa.String(length=36), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(['community_id'], ['communities.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('community_id', 'user_id', name='uq_community_members_community_user'),
    )
    op.create_index(op.f('ix_community_members_community_id'), 'community_members', ['community_id'], unique=False)
    op.create_index(op.f('ix_community_members_user_id'), 'community_members', ['user_id'], unique=False)
    _created_at_index('community_members')

    op.create_table(
        'banks',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('code', sa.String(length=20), nullable=False),
        sa.Column('currency', sa.String(length=10), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('code'),
    )
    _created_at_index('banks')


def downgrade():
    for table in (
        'banks',
        'community_members',
        'communities',
        'blog_posts',
        'invoices',
        'customers',
        'restock_history',
        'products',
        'user_bank_details',
        'user_settings',
        'deleted_accounts',
        'account_deletion_tokens',
        'tokens',
        'users',
    ):
        op.drop_table(table)
