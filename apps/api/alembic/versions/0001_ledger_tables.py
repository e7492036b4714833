"""Ledger tables - ledgers, actions, attachment slots, collaborators, status updates.

Revision ID: 0001_ledger_tables
Revises:
Create Date: 2026-10-16

Creates:
- ledgers
- ledger_actions
- ledger_attachments (unique action_id + slot_key)
- ledger_collaborators (unique ledger_id + user_id)
- ledger_status_updates (action_id SET NULL on action delete)
"""
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision = '0001_ledger_tables'
down_revision = None
branch_labels = None
depends_on = None


def _json():
    return sa.JSON(none_as_null=True).with_variant(
        postgresql.JSONB(none_as_null=True), 'postgresql'
    )


def _timestamp(name: str):
    return sa.Column(name, sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=False)


def upgrade() -> None:
    # ==========================================================================
    # ledgers
    # ==========================================================================
    op.create_table(
        'ledgers',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('owner_user_id', sa.String(255), nullable=False),
        sa.Column('title', sa.String(200), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('linked_entity_type', sa.String(50), nullable=True),
        sa.Column('linked_entity_id', sa.String(255), nullable=True),
        _timestamp('created_at'),
        _timestamp('updated_at'),
        sa.PrimaryKeyConstraint('id', name='pk_ledgers'),
    )
    op.create_index('idx_ledgers_owner_created', 'ledgers', ['owner_user_id', 'created_at'])
    op.create_index('idx_ledgers_linked_entity', 'ledgers', ['linked_entity_type', 'linked_entity_id'])

    # ==========================================================================
    # ledger_actions
    # ==========================================================================
    op.create_table(
        'ledger_actions',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('ledger_id', sa.Uuid(), nullable=False),
        sa.Column('title', sa.String(200), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('status', sa.String(20), server_default='NOT_HANDLED', nullable=False),
        sa.Column('creator_user_id', sa.String(255), nullable=False),
        sa.Column('creator_email', sa.String(320), nullable=False),
        _timestamp('created_at'),
        _timestamp('updated_at'),
        sa.ForeignKeyConstraint(
            ['ledger_id'], ['ledgers.id'],
            name='fk_ledger_actions_ledger_id_ledgers', ondelete='CASCADE',
        ),
        sa.PrimaryKeyConstraint('id', name='pk_ledger_actions'),
    )
    op.create_index('idx_ledger_actions_ledger_created', 'ledger_actions', ['ledger_id', 'created_at'])
    op.create_index('idx_ledger_actions_ledger_status', 'ledger_actions', ['ledger_id', 'status'])

    # ==========================================================================
    # ledger_attachments
    # ==========================================================================
    op.create_table(
        'ledger_attachments',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('action_id', sa.Uuid(), nullable=False),
        sa.Column('type', sa.String(50), nullable=False),
        sa.Column('slot_key', sa.String(100), nullable=False),
        sa.Column('data', _json(), nullable=True),  # NULL = empty slot
        sa.Column('creator_user_id', sa.String(255), nullable=False),
        sa.Column('creator_email', sa.String(320), nullable=False),
        _timestamp('created_at'),
        _timestamp('updated_at'),
        sa.ForeignKeyConstraint(
            ['action_id'], ['ledger_actions.id'],
            name='fk_ledger_attachments_action_id_ledger_actions', ondelete='CASCADE',
        ),
        sa.PrimaryKeyConstraint('id', name='pk_ledger_attachments'),
        sa.UniqueConstraint('action_id', 'slot_key', name='uq_ledger_attachments_action_slot'),
    )
    op.create_index('idx_ledger_attachments_action_created', 'ledger_attachments', ['action_id', 'created_at'])

    # ==========================================================================
    # ledger_collaborators
    # ==========================================================================
    op.create_table(
        'ledger_collaborators',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('ledger_id', sa.Uuid(), nullable=False),
        sa.Column('user_id', sa.String(255), nullable=False),
        sa.Column('role', sa.String(20), nullable=False),
        sa.Column('added_by_user_id', sa.String(255), nullable=False),
        _timestamp('added_at'),
        _timestamp('updated_at'),
        sa.ForeignKeyConstraint(
            ['ledger_id'], ['ledgers.id'],
            name='fk_ledger_collaborators_ledger_id_ledgers', ondelete='CASCADE',
        ),
        sa.PrimaryKeyConstraint('id', name='pk_ledger_collaborators'),
        sa.UniqueConstraint('ledger_id', 'user_id', name='uq_ledger_collaborators_ledger_user'),
    )
    op.create_index('idx_ledger_collaborators_user', 'ledger_collaborators', ['user_id'])

    # ==========================================================================
    # ledger_status_updates (append-only)
    # ==========================================================================
    op.create_table(
        'ledger_status_updates',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('ledger_id', sa.Uuid(), nullable=False),
        sa.Column('action_id', sa.Uuid(), nullable=True),
        sa.Column('type', sa.String(50), nullable=False),
        sa.Column('actor_user_id', sa.String(255), nullable=True),
        sa.Column('actor_email', sa.String(320), nullable=True),
        sa.Column('message', sa.Text(), nullable=True),
        sa.Column('metadata', _json(), nullable=True),
        _timestamp('created_at'),
        sa.ForeignKeyConstraint(
            ['ledger_id'], ['ledgers.id'],
            name='fk_ledger_status_updates_ledger_id_ledgers', ondelete='CASCADE',
        ),
        sa.ForeignKeyConstraint(
            ['action_id'], ['ledger_actions.id'],
            name='fk_ledger_status_updates_action_id_ledger_actions', ondelete='SET NULL',
        ),
        sa.PrimaryKeyConstraint('id', name='pk_ledger_status_updates'),
    )
    op.create_index('idx_ledger_status_updates_ledger_created', 'ledger_status_updates', ['ledger_id', 'created_at'])
    op.create_index('idx_ledger_status_updates_action_created', 'ledger_status_updates', ['action_id', 'created_at'])


def downgrade() -> None:
    op.drop_table('ledger_status_updates')
    op.drop_table('ledger_collaborators')
    op.drop_table('ledger_attachments')
    op.drop_table('ledger_actions')
    op.drop_table('ledgers')
