"""Create SyncEvent, OfflineCache and OfflineOperation tables

Revision ID: 20261018000000
Revises:
Create Date: 2026-10-18 00:00:00.000000

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '20261018000000'
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        'SyncEvent',
        sa.Column('id', sa.String(length=64), primary_key=True, nullable=False),
        sa.Column('type', sa.String(length=100), nullable=False, comment='Tipo da mutação, ex.: create, update'),
        sa.Column('entity', sa.String(length=100), nullable=False, comment='Entidade afetada, ex.: patient'),
        sa.Column('entityId', sa.String(length=255), nullable=False),
        sa.Column('data', sa.Text(), nullable=False, comment='Payload em texto JSON'),
        sa.Column('timestamp', sa.DateTime(timezone=True), nullable=False),
        sa.Column('status', sa.String(length=20), nullable=False, server_default=sa.text("'pending'")),
        sa.Column('retryCount', sa.Integer(), nullable=False, server_default=sa.text('0')),
        sa.Column('createdAt', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updatedAt', sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint("status in ('pending','synced','failed')", name='ck_sync_event_status'),
        sa.CheckConstraint('"retryCount" >= 0', name='ck_sync_event_retry_count'),
    )
    op.create_index('ix_SyncEvent_type', 'SyncEvent', ['type'])
    op.create_index('ix_SyncEvent_entity', 'SyncEvent', ['entity'])
    op.create_index('ix_SyncEvent_timestamp', 'SyncEvent', ['timestamp'])
    op.create_index('ix_SyncEvent_status', 'SyncEvent', ['status'])

    op.create_table(
        'OfflineCache',
        sa.Column('key', sa.String(length=255), primary_key=True, nullable=False),
        sa.Column('data', sa.Text(), nullable=False),
        sa.Column('tags', sa.Text(), nullable=False, comment='Lista de tags em texto JSON'),
        sa.Column('createdAt', sa.DateTime(timezone=True), nullable=False),
        sa.Column('expiresAt', sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index('ix_OfflineCache_expiresAt', 'OfflineCache', ['expiresAt'])

    op.create_table(
        'OfflineOperation',
        sa.Column('id', sa.String(length=64), primary_key=True, nullable=False),
        sa.Column('type', sa.String(length=100), nullable=False),
        sa.Column('entity', sa.String(length=100), nullable=False),
        sa.Column('entityId', sa.String(length=255), nullable=True),
        sa.Column('data', sa.Text(), nullable=False),
        sa.Column('status', sa.String(length=20), nullable=False, server_default=sa.text("'pending'"), comment='pending, completed, failed'),
        sa.Column('error', sa.Text(), nullable=True),
        sa.Column('createdAt', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updatedAt', sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint("status in ('pending','completed','failed')", name='ck_offline_operation_status'),
    )
    op.create_index('ix_OfflineOperation_status', 'OfflineOperation', ['status'])


def downgrade() -> None:
    op.drop_index('ix_OfflineOperation_status', table_name='OfflineOperation')
    op.drop_table('OfflineOperation')

    op.drop_index('ix_OfflineCache_expiresAt', table_name='OfflineCache')
    op.drop_table('OfflineCache')

    for column in ('status', 'timestamp', 'entity', 'type'):
        op.drop_index(f'ix_SyncEvent_{column}', table_name='SyncEvent')
    op.drop_table('SyncEvent')
