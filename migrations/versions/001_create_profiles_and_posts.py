"""Create user_style_profiles and repurposed_posts tables

Revision ID: create_profiles_and_posts
Revises:
Create Date: 2026-10-19

One JSONB style-profile document per user (with completion and onboarding
denormalised), and the queue of repurposed posts with their scheduled slots.
"""

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision = 'create_profiles_and_posts'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        'user_style_profiles',
        sa.Column('user_id', sa.String(128), primary_key=True),
        sa.Column('email', sa.String(255), nullable=False, server_default=''),
        sa.Column('document', postgresql.JSONB, nullable=False),
        sa.Column('profile_completion', sa.Integer, nullable=False, server_default='0'),
        sa.Column('onboarding_completed', sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('NOW()')),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('NOW()')),
    )

    op.create_table(
        'repurposed_posts',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('original', postgresql.JSONB, nullable=False),
        sa.Column('variants', postgresql.JSONB, nullable=False),
        sa.Column('scheduled_at', sa.JSON, nullable=False),
        sa.Column('platforms', sa.JSON, nullable=False),
        sa.Column('status', sa.String(20), nullable=False, server_default='queued'),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('NOW()')),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('NOW()')),
    )
    op.create_index('ix_repurposed_posts_status', 'repurposed_posts', ['status'])


def downgrade():
    op.drop_index('ix_repurposed_posts_status', table_name='repurposed_posts')
    op.drop_table('repurposed_posts')
    op.drop_table('user_style_profiles')
