"""create dataroom schema"""

from alembic import op
import sqlalchemy as sa
from typing import Sequence, Union

revision: str = '20250101_01'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        'users',
        sa.Column('id', sa.UUID(as_uuid=True), primary_key=True),
        sa.Column('email', sa.String(), nullable=False),
        sa.Column('full_name', sa.String(), nullable=False, server_default=''),
        sa.Column('hashed_password', sa.String(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP')),
    )
    op.create_index('ix_users_email', 'users', ['email'], unique=True)

    op.create_table(
        'datarooms',
        sa.Column('id', sa.UUID(as_uuid=True), primary_key=True),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('created_by', sa.UUID(as_uuid=True), sa.ForeignKey('users.id'), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP')),
    )
    op.create_index('ix_datarooms_created_at', 'datarooms', ['created_at'])

    op.create_table(
        'dataroom_access',
        sa.Column('id', sa.UUID(as_uuid=True), primary_key=True),
        sa.Column('dataroom_id', sa.UUID(as_uuid=True), sa.ForeignKey('datarooms.id'), nullable=False),
        sa.Column('user_email', sa.String(), nullable=False),
        sa.Column('role', sa.String(), nullable=False),
        sa.Column('invited_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.Column('invited_by', sa.UUID(as_uuid=True), sa.ForeignKey('users.id'), nullable=True),
    )
    op.create_index('ix_dataroom_access_dataroom_id', 'dataroom_access', ['dataroom_id'])
    op.create_index('ix_dataroom_access_user_email', 'dataroom_access', ['user_email'])
    op.create_index('ix_dataroom_access_dataroom_email', 'dataroom_access', ['dataroom_id', 'user_email'])

    op.create_table(
        'folders',
        sa.Column('id', sa.UUID(as_uuid=True), primary_key=True),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('dataroom_id', sa.UUID(as_uuid=True), sa.ForeignKey('datarooms.id'), nullable=False),
        sa.Column('parent_folder_id', sa.UUID(as_uuid=True), sa.ForeignKey('folders.id'), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP')),
    )
    op.create_index('ix_folders_dataroom_id', 'folders', ['dataroom_id'])
    op.create_index('ix_folders_parent_folder_id', 'folders', ['parent_folder_id'])
    op.create_index('ix_folders_dataroom_parent', 'folders', ['dataroom_id', 'parent_folder_id'])

    op.create_table(
        'files',
        sa.Column('id', sa.UUID(as_uuid=True), primary_key=True),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('dataroom_id', sa.UUID(as_uuid=True), sa.ForeignKey('datarooms.id'), nullable=False),
        sa.Column('folder_id', sa.UUID(as_uuid=True), sa.ForeignKey('folders.id'), nullable=True),
        sa.Column('storage_ref', sa.String(), nullable=False),
        sa.Column('mime_type', sa.String(), nullable=False),
        sa.Column('size', sa.BigInteger(), nullable=False, server_default='0'),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP')),
    )
    op.create_index('ix_files_dataroom_id', 'files', ['dataroom_id'])
    op.create_index('ix_files_folder_id', 'files', ['folder_id'])
    op.create_index('ix_files_dataroom_folder', 'files', ['dataroom_id', 'folder_id'])


def downgrade() -> None:
    op.drop_table('files')
    op.drop_table('folders')
    op.drop_table('dataroom_access')
    op.drop_table('datarooms')
    op.drop_index('ix_users_email', table_name='users')
    op.drop_table('users')
