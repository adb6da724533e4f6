"""create_accounts_tables

Revision ID: 3f1c9a7d2b10
Revises:
Create Date: 2026-10-19 09:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = '3f1c9a7d2b10'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

ROLES = ('HANDLER', 'TRAINER', 'AIDE', 'ADMIN', 'SUPER_ADMIN')
ACCOUNT_TYPES = ('INDIVIDUAL', 'PROFESSIONAL', 'ORGANIZATION')
AGREEMENT_TYPES = (
    'TRAINING_BEHAVIOR_STANDARDS',
    'TERMS_OF_SERVICE',
    'PRIVACY_POLICY',
    'TRAINER_AGREEMENT',
)


def _json():
    return sa.JSON().with_variant(postgresql.JSONB(), 'postgresql')


def upgrade() -> None:
    """Upgrade schema - organizations, users and agreements."""

    op.create_table(
        'organizations',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('name', sa.String(length=200), nullable=False),
        sa.Column('subdomain', sa.String(length=63), nullable=False),
        sa.Column('theme', _json(), nullable=True),
        sa.Column('settings', _json(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_organizations_subdomain', 'organizations', ['subdomain'], unique=True)

    op.create_table(
        'users',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('auth_id', sa.String(), nullable=False),
        sa.Column('email', sa.String(), nullable=False),
        sa.Column('member_number', sa.String(length=20), nullable=True),
        sa.Column('organization_id', sa.Uuid(), nullable=True),
        sa.Column('role', sa.Enum(*ROLES, name='user_role_enum'), nullable=False),
        sa.Column('account_type', sa.Enum(*ACCOUNT_TYPES, name='account_type_enum'), nullable=False),
        sa.Column('first_name', sa.String(), nullable=True),
        sa.Column('last_name', sa.String(), nullable=True),
        sa.Column('phone', sa.String(), nullable=True),
        sa.Column('profile_image', sa.String(), nullable=True),
        sa.Column('address', _json(), nullable=True),
        sa.Column('bio', sa.Text(), nullable=True),
        sa.Column('email_verified', sa.DateTime(timezone=True), nullable=True),
        sa.Column('profile_complete', sa.Integer(), server_default='0', nullable=False),
        sa.Column('business_name', sa.String(), nullable=True),
        sa.Column('title', sa.String(), nullable=True),
        sa.Column('city', sa.String(), nullable=True),
        sa.Column('state', sa.String(), nullable=True),
        sa.Column('website', sa.String(), nullable=True),
        sa.Column('is_verified', sa.Boolean(), server_default=sa.false(), nullable=True),
        sa.Column('public_profile', sa.Boolean(), server_default=sa.true(), nullable=True),
        sa.Column('public_email', sa.Boolean(), server_default=sa.false(), nullable=True),
        sa.Column('public_phone', sa.Boolean(), server_default=sa.false(), nullable=True),
        sa.Column('show_in_directory', sa.Boolean(), server_default=sa.true(), nullable=True),
        sa.Column('last_login_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(['organization_id'], ['organizations.id']),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('member_number'),
    )
    op.create_index('ix_users_auth_id', 'users', ['auth_id'], unique=True)
    op.create_index('ix_users_email', 'users', ['email'], unique=True)
    op.create_index('ix_users_organization_id', 'users', ['organization_id'], unique=False)

    op.create_table(
        'agreements',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('user_id', sa.Uuid(), nullable=False),
        sa.Column('type', sa.Enum(*AGREEMENT_TYPES, name='agreement_type_enum'), nullable=False),
        sa.Column('version', sa.String(length=20), nullable=False),
        sa.Column('content', _json(), nullable=False),
        sa.Column('accepted_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('expires_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('is_active', sa.Boolean(), server_default=sa.true(), nullable=False),
        sa.Column('superseded_by_id', sa.Uuid(), nullable=True),
        sa.Column('superseded_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['superseded_by_id'], ['agreements.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_agreements_user_id', 'agreements', ['user_id'], unique=False)
    # One active record per (user, type); superseded rows are kept as history
    op.create_index(
        'uq_agreements_one_active_per_type',
        'agreements',
        ['user_id', 'type'],
        unique=True,
        postgresql_where=sa.text('is_active'),
        sqlite_where=sa.text('is_active = 1'),
    )


def downgrade() -> None:
    """Downgrade schema - drop accounts tables and their enum types."""
    op.drop_index('uq_agreements_one_active_per_type', table_name='agreements')
    op.drop_index('ix_agreements_user_id', table_name='agreements')
    op.drop_table('agreements')
    op.drop_index('ix_users_organization_id', table_name='users')
    op.drop_index('ix_users_email', table_name='users')
    op.drop_index('ix_users_auth_id', table_name='users')
    op.drop_table('users')
    op.drop_index('ix_organizations_subdomain', table_name='organizations')
    op.drop_table('organizations')

    sa.Enum(name='agreement_type_enum').drop(op.get_bind(), checkfirst=True)
    sa.Enum(name='account_type_enum').drop(op.get_bind(), checkfirst=True)
    sa.Enum(name='user_role_enum').drop(op.get_bind(), checkfirst=True)
