"""Initial schema

Revision ID: 001
Revises:
Create Date: 2026-10-18

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = '001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # Create ENUM types
    op.execute("CREATE TYPE connector_type AS ENUM ('bureau', 'verification', 'database', 'los', 'api')")
    op.execute("CREATE TYPE connector_status AS ENUM ('connected', 'failed', 'not_tested')")

    # Create connectors table
    op.create_table(
        'connectors',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True, nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('type', postgresql.ENUM(name='connector_type', create_type=False), nullable=False),
        sa.Column('provider', sa.String(length=100), nullable=True),
        sa.Column('config', postgresql.JSONB(), nullable=False, server_default=sa.text("'{}'::jsonb")),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.text('true')),
        sa.Column('status', postgresql.ENUM(name='connector_status', create_type=False), nullable=False, server_default='not_tested'),
        sa.Column('last_tested_at', sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index('ix_connectors_type', 'connectors', ['type'])
    op.create_index('ix_connectors_is_active', 'connectors', ['is_active'])
    op.create_index('ix_connectors_status', 'connectors', ['status'])

    # Create connector_logs table
    op.create_table(
        'connector_logs',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True, nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.Column('connector_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('connectors.id', ondelete='CASCADE'), nullable=False),
        sa.Column('request_data', postgresql.JSONB(), nullable=True),
        sa.Column('response_data', postgresql.JSONB(), nullable=True),
        sa.Column('status_code', sa.Integer(), nullable=False, server_default=sa.text('0')),
        sa.Column('error_message', sa.Text(), nullable=True),
        sa.Column('execution_time_ms', sa.Integer(), nullable=False, server_default=sa.text('0')),
    )
    op.create_index('ix_connector_logs_connector_id', 'connector_logs', ['connector_id'])
    op.create_index('ix_connector_logs_status_code', 'connector_logs', ['status_code'])


def downgrade() -> None:
    op.drop_table('connector_logs')
    op.drop_table('connectors')

    op.execute('DROP TYPE IF EXISTS connector_status')
    op.execute('DROP TYPE IF EXISTS connector_type')
