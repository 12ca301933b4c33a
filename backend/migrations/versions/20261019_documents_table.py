"""Record store: keyed JSON documents table

1. Creates 'documents' holding every collection (users, businesses,
   auditLogs, systemSettings, orders, sessions)
2. (collection, key) is unique; listing order is the row id
3. version_id backs per-row optimistic locking

Revision ID: 20261019_documents
Revises:
Create Date: 2026-10-19
"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '20261019_documents'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table('documents',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('collection', sa.String(length=64), nullable=False),
        sa.Column('key', sa.String(length=128), nullable=False),
        sa.Column('data', sa.JSON(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column('version_id', sa.Integer(), nullable=False, server_default='1'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('collection', 'key', name='uq_documents_collection_key'),
        sqlite_autoincrement=True,
    )
    op.create_index('ix_documents_collection', 'documents', ['collection'])
    op.create_index('ix_documents_collection_id', 'documents', ['collection', 'id'])


def downgrade():
    op.drop_index('ix_documents_collection_id', table_name='documents')
    op.drop_index('ix_documents_collection', table_name='documents')
    op.drop_table('documents')
