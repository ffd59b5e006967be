"""initial applications, components and translation_versions tables

Revision ID: a1c3e5f7b901
Revises:
Create Date: 2026-10-17 00:00:00.000000

"""
from alembic import op
import sqlalchemy as sa
import sqlmodel  # noqa: F401
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision = 'a1c3e5f7b901'
down_revision = None
branch_labels = None
depends_on = None


def _timestamps() -> list:
    return [
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
        sa.Column('created_by', sa.String(), nullable=True),
        sa.Column('updated_by', sa.String(), nullable=True),
    ]


def upgrade() -> None:
    op.create_table(
        'applications',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('code', sa.String(), nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('description', sa.String(), nullable=False),
        sa.Column('enabled_languages', postgresql.JSONB(astext_type=sa.Text()), nullable=False),
        sa.Column('openai_key', sa.Text(), nullable=True),
        sa.Column('deleted_at', sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_applications_code'), 'applications', ['code'], unique=True)
    op.create_index(op.f('ix_applications_deleted_at'), 'applications', ['deleted_at'])
    op.create_index(op.f('ix_applications_created_by'), 'applications', ['created_by'])
    op.create_index(op.f('ix_applications_updated_by'), 'applications', ['updated_by'])

    op.create_table(
        'components',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('application_id', sa.Uuid(), nullable=False),
        sa.Column('code', sa.String(), nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('description', sa.String(), nullable=False),
        sa.Column('structure', postgresql.JSONB(astext_type=sa.Text()), nullable=True),
        sa.Column('default_locale', sa.String(), nullable=False),
        sa.Column('deleted_at', sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(['application_id'], ['applications.id']),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('application_id', 'code', name='uq_component_app_code'),
    )
    op.create_index(op.f('ix_components_application_id'), 'components', ['application_id'])
    op.create_index(op.f('ix_components_code'), 'components', ['code'])
    op.create_index(op.f('ix_components_deleted_at'), 'components', ['deleted_at'])
    op.create_index(op.f('ix_components_created_by'), 'components', ['created_by'])
    op.create_index(op.f('ix_components_updated_by'), 'components', ['updated_by'])

    op.create_table(
        'translation_versions',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('component_id', sa.Uuid(), nullable=False),
        sa.Column('locale', sa.String(), nullable=False),
        sa.Column('stage', sa.String(), nullable=False),
        sa.Column('version', sa.Integer(), nullable=False),
        sa.Column('data', postgresql.JSONB(astext_type=sa.Text()), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(['component_id'], ['components.id']),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('component_id', 'locale', 'stage', 'version', name='uq_translation_slot'),
    )
    op.create_index('ix_translation_key', 'translation_versions', ['component_id', 'locale', 'stage'])
    op.create_index(op.f('ix_translation_versions_component_id'), 'translation_versions', ['component_id'])
    op.create_index(op.f('ix_translation_versions_locale'), 'translation_versions', ['locale'])
    op.create_index(op.f('ix_translation_versions_stage'), 'translation_versions', ['stage'])
    op.create_index(op.f('ix_translation_versions_version'), 'translation_versions', ['version'])
    op.create_index(op.f('ix_translation_versions_is_active'), 'translation_versions', ['is_active'])
    op.create_index(op.f('ix_translation_versions_created_by'), 'translation_versions', ['created_by'])
    op.create_index(op.f('ix_translation_versions_updated_by'), 'translation_versions', ['updated_by'])


def downgrade() -> None:
    op.drop_table('translation_versions')
    op.drop_table('components')
    op.drop_table('applications')
