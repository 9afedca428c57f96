"""Initial migration - creates all tables

Revision ID: 001_initial
Revises:
Create Date: 2025-01-27

"""
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision = '001_initial'
down_revision = None
branch_labels = None
depends_on = None


def _record_id_column(is_sqlite: bool) -> sa.Column:
    if is_sqlite:
        return sa.Column('id', sa.String(36), primary_key=True)
    return sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True)


def upgrade() -> None:
    # Detect database type
    bind = op.get_bind()
    is_sqlite = bind.dialect.name == 'sqlite'

    op.create_table(
        'users',
        sa.Column('id', sa.String(255), primary_key=True),
        sa.Column('email', sa.String(255), nullable=True),
        sa.Column('first_name', sa.String(255)),
        sa.Column('last_name', sa.String(255)),
        sa.Column('profile_image_url', sa.String(500)),
        sa.Column('password_hash', sa.String(255), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
    )
    op.create_index('ix_users_email', 'users', ['email'], unique=True)

    op.create_table(
        'user_settings',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('user_id', sa.String(255), nullable=False),
        sa.Column('financial_year_start', sa.String(5), nullable=False, server_default='04-01'),
        sa.Column('financial_year_end', sa.String(5), nullable=False, server_default='03-31'),
        sa.Column('currency', sa.String(10), nullable=False, server_default='USD'),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['user_id'], ['users.id']),
    )
    op.create_index('ix_user_settings_user_id', 'user_settings', ['user_id'], unique=True)

    op.create_table(
        'income_categories',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('name', sa.String(100), nullable=False, unique=True),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('income_earner_name', sa.String(100), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
    )

    op.create_table(
        'expense_categories',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('name', sa.String(100), nullable=False, unique=True),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
    )

    op.create_table(
        'expense_subcategories',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('name', sa.String(100), nullable=False),
        sa.Column('category_id', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['category_id'], ['expense_categories.id']),
    )
    op.create_index('ix_expense_subcategories_category_id', 'expense_subcategories', ['category_id'])

    op.create_table(
        'payment_methods',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('name', sa.String(50), nullable=False, unique=True),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
    )

    op.create_table(
        'income',
        _record_id_column(is_sqlite),
        sa.Column('user_id', sa.String(255), nullable=False),
        sa.Column('category_id', sa.Integer(), nullable=False),
        sa.Column('amount', sa.Numeric(10, 2), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('payment_method_id', sa.Integer(), nullable=False),
        sa.Column('financial_year', sa.String(10), nullable=False),
        sa.Column('month', sa.String(20), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['user_id'], ['users.id']),
        sa.ForeignKeyConstraint(['category_id'], ['income_categories.id']),
        sa.ForeignKeyConstraint(['payment_method_id'], ['payment_methods.id']),
    )
    op.create_index('ix_income_user_id', 'income', ['user_id'])
    op.create_index('ix_income_date', 'income', ['date'])
    op.create_index('idx_income_user_period', 'income', ['user_id', 'financial_year', 'month'])
    op.create_index('idx_income_user_date', 'income', ['user_id', 'date'])

    op.create_table(
        'expenses',
        _record_id_column(is_sqlite),
        sa.Column('user_id', sa.String(255), nullable=False),
        sa.Column('category_id', sa.Integer(), nullable=False),
        sa.Column('subcategory_id', sa.Integer(), nullable=True),
        sa.Column('amount', sa.Numeric(10, 2), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('payment_method_id', sa.Integer(), nullable=False),
        sa.Column('financial_year', sa.String(10), nullable=False),
        sa.Column('month', sa.String(20), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['user_id'], ['users.id']),
        sa.ForeignKeyConstraint(['category_id'], ['expense_categories.id']),
        sa.ForeignKeyConstraint(['subcategory_id'], ['expense_subcategories.id']),
        sa.ForeignKeyConstraint(['payment_method_id'], ['payment_methods.id']),
    )
    op.create_index('ix_expenses_user_id', 'expenses', ['user_id'])
    op.create_index('ix_expenses_date', 'expenses', ['date'])
    op.create_index('idx_expenses_user_period', 'expenses', ['user_id', 'financial_year', 'month'])
    op.create_index('idx_expenses_user_date', 'expenses', ['user_id', 'date'])
    op.create_index('idx_expenses_user_category', 'expenses', ['user_id', 'category_id'])


def downgrade() -> None:
    op.drop_table('expenses')
    op.drop_table('income')
    op.drop_table('payment_methods')
    op.drop_table('expense_subcategories')
    op.drop_table('expense_categories')
    op.drop_table('income_categories')
    op.drop_table('user_settings')
    op.drop_index('ix_users_email', table_name='users')
    op.drop_table('users')
