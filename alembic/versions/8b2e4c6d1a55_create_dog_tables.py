"""create_dog_tables

Revision ID: 8b2e4c6d1a55
Revises: 3f1c9a7d2b10
Create Date: 2026-10-19 15:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '8b2e4c6d1a55'
down_revision: Union[str, Sequence[str], None] = '3f1c9a7d2b10'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

DOG_STATUSES = ('ACTIVE', 'IN_TRAINING', 'RETIRED', 'WASHED_OUT', 'IN_MEMORIAM')
DOG_GENDERS = ('MALE', 'FEMALE', 'MALE_NEUTERED', 'FEMALE_SPAYED')
RELATIONSHIP_TYPES = ('HANDLER', 'TRAINER', 'AIDE', 'EMERGENCY_CONTACT')
RELATIONSHIP_STATUSES = ('PENDING', 'ACCEPTED', 'DECLINED')


def upgrade() -> None:
    """Upgrade schema - dogs and dog/user relationships."""

    op.create_table(
        'dogs',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('registration_num', sa.String(length=20), nullable=False),
        sa.Column('owner_id', sa.Uuid(), nullable=False),
        sa.Column('organization_id', sa.Uuid(), nullable=True),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('breed', sa.String(), nullable=True),
        sa.Column('birth_date', sa.Date(), nullable=True),
        sa.Column('gender', sa.Enum(*DOG_GENDERS, name='dog_gender_enum'), nullable=True),
        sa.Column('weight', sa.Float(), nullable=True),
        sa.Column('color', sa.String(), nullable=True),
        sa.Column('microchip_id', sa.String(), nullable=True),
        sa.Column('bio', sa.Text(), nullable=True),
        sa.Column('profile_image', sa.String(), nullable=True),
        sa.Column('status', sa.Enum(*DOG_STATUSES, name='dog_status_enum'), nullable=False),
        sa.Column('status_reason', sa.Text(), nullable=True),
        sa.Column('status_date', sa.DateTime(timezone=True), nullable=True),
        sa.Column('training_start_date', sa.Date(), nullable=True),
        sa.Column('training_end_date', sa.Date(), nullable=True),
        sa.Column('public_profile', sa.Boolean(), server_default=sa.true(), nullable=True),
        sa.Column('show_in_directory', sa.Boolean(), server_default=sa.true(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(['owner_id'], ['users.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['organization_id'], ['organizations.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_dogs_registration_num', 'dogs', ['registration_num'], unique=True)
    op.create_index('ix_dogs_owner_id', 'dogs', ['owner_id'], unique=False)

    op.create_table(
        'dog_user_relationships',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('dog_id', sa.Uuid(), nullable=False),
        sa.Column('user_id', sa.Uuid(), nullable=False),
        sa.Column(
            'relationship_type',
            sa.Enum(*RELATIONSHIP_TYPES, name='dog_relationship_enum'),
            nullable=False,
        ),
        sa.Column(
            'status',
            sa.Enum(*RELATIONSHIP_STATUSES, name='relationship_status_enum'),
            nullable=False,
        ),
        sa.Column('can_view_profile', sa.Boolean(), server_default=sa.true(), nullable=False),
        sa.Column('can_edit_profile', sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.Column('can_manage_dogs', sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('responded_at', sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(['dog_id'], ['dogs.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('dog_id', 'user_id', 'relationship_type', name='uq_dog_user_relationship'),
    )
    op.create_index('ix_dog_user_relationships_dog_id', 'dog_user_relationships', ['dog_id'], unique=False)
    op.create_index('ix_dog_user_relationships_user_id', 'dog_user_relationships', ['user_id'], unique=False)


def downgrade() -> None:
    """Downgrade schema - drop dog tables and their enum types."""
    op.drop_index('ix_dog_user_relationships_user_id', table_name='dog_user_relationships')
    op.drop_index('ix_dog_user_relationships_dog_id', table_name='dog_user_relationships')
    op.drop_table('dog_user_relationships')
    op.drop_index('ix_dogs_owner_id', table_name='dogs')
    op.drop_index('ix_dogs_registration_num', table_name='dogs')
    op.drop_table('dogs')

    sa.Enum(name='relationship_status_enum').drop(op.get_bind(), checkfirst=True)
    sa.Enum(name='dog_relationship_enum').drop(op.get_bind(), checkfirst=True)
    sa.Enum(name='dog_status_enum').drop(op.get_bind(), checkfirst=True)
    sa.Enum(name='dog_gender_enum').drop(op.get_bind(), checkfirst=True)
