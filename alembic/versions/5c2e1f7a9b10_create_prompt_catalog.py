"""create_prompt_catalog

Revision ID: 5c2e1f7a9b10
Revises:
Create Date: 2026-10-19 09:12:04.318227

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '5c2e1f7a9b10'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        'projects',
        sa.Column('id', sa.String(length=64), primary_key=True),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
    )

    op.create_table(
        'prompts',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('project_id', sa.String(length=64), sa.ForeignKey('projects.id'), nullable=False, index=True),
        sa.Column('key', sa.String(length=255), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('type', sa.String(length=30), nullable=False, server_default='system'),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.UniqueConstraint('project_id', 'key', name='uq_prompts_project_key'),
    )

    op.create_table(
        'prompt_versions',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('prompt_id', sa.Integer(), sa.ForeignKey('prompts.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('version_tag', sa.String(length=50), nullable=False),
        sa.Column('prompt_text', sa.Text(), nullable=False),
        sa.Column('language_code', sa.String(length=10), nullable=False, server_default='en'),
        sa.Column('status', sa.String(length=20), nullable=False, server_default='draft'),
        sa.Column('change_message', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.UniqueConstraint('prompt_id', 'version_tag', name='uq_prompt_versions_prompt_tag'),
    )

    op.create_table(
        'prompt_translations',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('version_id', sa.Integer(), sa.ForeignKey('prompt_versions.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('language_code', sa.String(length=10), nullable=False),
        sa.Column('prompt_text', sa.Text(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.UniqueConstraint('version_id', 'language_code', name='uq_prompt_translations_version_lang'),
    )

    op.create_table(
        'prompt_assets',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('prompt_id', sa.Integer(), sa.ForeignKey('prompts.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('key', sa.String(length=255), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.UniqueConstraint('prompt_id', 'key', name='uq_prompt_assets_prompt_key'),
    )

    op.create_table(
        'prompt_asset_versions',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('asset_id', sa.Integer(), sa.ForeignKey('prompt_assets.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('version_tag', sa.String(length=50), nullable=False),
        sa.Column('value', sa.Text(), nullable=False),
        sa.Column('language_code', sa.String(length=10), nullable=False, server_default='en'),
        sa.Column('status', sa.String(length=20), nullable=False, server_default='draft'),
        sa.Column('change_message', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.UniqueConstraint('asset_id', 'version_tag', name='uq_asset_versions_asset_tag'),
    )

    op.create_table(
        'asset_translations',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('version_id', sa.Integer(), sa.ForeignKey('prompt_asset_versions.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('language_code', sa.String(length=10), nullable=False),
        sa.Column('value', sa.Text(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.UniqueConstraint('version_id', 'language_code', name='uq_asset_translations_version_lang'),
    )

    # Version selection reads by status within a prompt/asset
    op.create_index('ix_prompt_versions_prompt_status', 'prompt_versions', ['prompt_id', 'status'])
    op.create_index('ix_prompt_asset_versions_asset_status', 'prompt_asset_versions', ['asset_id', 'status'])


def downgrade() -> None:
    op.drop_index('ix_prompt_asset_versions_asset_status', table_name='prompt_asset_versions')
    op.drop_index('ix_prompt_versions_prompt_status', table_name='prompt_versions')
    op.drop_table('asset_translations')
    op.drop_table('prompt_asset_versions')
    op.drop_table('prompt_assets')
    op.drop_table('prompt_translations')
    op.drop_table('prompt_versions')
    op.drop_table('prompts')
    op.drop_table('projects')
