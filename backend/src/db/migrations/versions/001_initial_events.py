"""Initial events schema

Revision ID: 001_initial_events
Revises:
Create Date: 2024-01-01

Creates the events table with:
- UUID column for external ids (evt_xxx)
- group_id column shared by every occurrence of a series (ser_xxx)
- Indexes for GUID lookups, series deletion and ordered listing
"""
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision = '001_initial_events'
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    """
    Create the events table.

    A series has no table of its own: it is the set of events sharing
    a group_id.
    """
    op.create_table(
        'events',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column(
            'uuid',
            postgresql.UUID(as_uuid=True).with_variant(
                sa.LargeBinary(16), 'sqlite'
            ),
            nullable=False
        ),
        sa.Column('title', sa.String(length=100), nullable=False),
        sa.Column('start_at', sa.DateTime(), nullable=False),
        sa.Column('end_at', sa.DateTime(), nullable=False),
        sa.Column('color', sa.String(), nullable=True),
        sa.Column('location', sa.String(length=500), nullable=True),
        sa.Column('description', sa.String(length=500), nullable=True),
        sa.Column('recurrence', sa.String(length=16), nullable=True),
        sa.Column('notification', sa.Integer(), nullable=True),
        sa.Column('group_id', sa.String(length=30), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )

    op.create_index('ix_events_uuid', 'events', ['uuid'], unique=True)
    op.create_index('ix_events_group_id', 'events', ['group_id'], unique=False)
    op.create_index('ix_events_start_at', 'events', ['start_at'], unique=False)


def downgrade() -> None:
    """Drop the events table and its indexes."""
    op.drop_index('ix_events_start_at', table_name='events')
    op.drop_index('ix_events_group_id', table_name='events')
    op.drop_index('ix_events_uuid', table_name='events')
    op.drop_table('events')
