"""Create briefs table

Revision ID: 001_create_briefs
Revises:
Create Date: 2026-10-18 09:00:00.000000

"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '001_create_briefs'
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    """Create briefs table with raw signal collections as JSON columns."""
    op.create_table(
        'briefs',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('company_name', sa.Text(), nullable=False),
        sa.Column('website', sa.Text(), nullable=True),
        sa.Column('user_intent', sa.Text(), nullable=False),
        sa.Column('summary', sa.Text(), nullable=False),
        sa.Column('pitch_angle', sa.Text(), nullable=False),
        sa.Column('subject_line', sa.Text(), nullable=False),
        sa.Column('what_not_to_pitch', sa.Text(), nullable=False),
        sa.Column('signal_tag', sa.Text(), nullable=False),
        sa.Column('news', sa.JSON(), nullable=True),
        sa.Column('tech_stack', sa.JSON(), nullable=True),
        sa.Column('tech_stack_data', sa.JSON(), nullable=True),
        sa.Column('job_signals', sa.JSON(), nullable=True),
        sa.Column('stock_data', sa.JSON(), nullable=True),
        sa.Column('tone_insights', sa.JSON(), nullable=True),
        sa.Column('intelligence_sources', sa.JSON(), nullable=True),
        sa.Column('company_logo', sa.Text(), nullable=True),
        sa.Column('hiring_trends', sa.Text(), nullable=True),
        sa.Column('news_trends', sa.Text(), nullable=True),
        sa.Column('user_id', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index('ix_briefs_company_name', 'briefs', ['company_name'])
    op.create_index('ix_briefs_user_id', 'briefs', ['user_id'])
    op.create_index('ix_briefs_created_at', 'briefs', ['created_at'])


def downgrade() -> None:
    """Drop briefs table."""
    op.drop_index('ix_briefs_created_at', table_name='briefs')
    op.drop_index('ix_briefs_user_id', table_name='briefs')
    op.drop_index('ix_briefs_company_name', table_name='briefs')
    op.drop_table('briefs')
