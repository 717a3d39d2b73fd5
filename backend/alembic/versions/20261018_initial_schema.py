"""initial schema: users, wardrobes, clothing items, outfits, recommendations, chat sessions

Revision ID: initial_schema_20261018
Revises: 
Create Date: 2026-10-18 00:00:00
"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = 'initial_schema_20261018'
down_revision = None
branch_labels = None
depends_on = None


def _timestamps():
    return [
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
    ]


def upgrade() -> None:
    op.create_table(
        'users',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('external_id', sa.String(128), nullable=False),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('username', sa.String(30), nullable=False),
        sa.Column('display_name', sa.String(50), nullable=True),
        sa.Column('photo_url', sa.Text(), nullable=True),
        sa.Column('is_email_verified', sa.Boolean(), nullable=False),
        sa.Column('auth_provider', sa.String(20), nullable=False),
        sa.Column('profile', sa.JSON(), nullable=False),
        sa.Column('preferences', sa.JSON(), nullable=False),
        sa.Column('subscription', sa.JSON(), nullable=False),
        sa.Column('settings', sa.JSON(), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('last_login', sa.DateTime(), nullable=False),
        *_timestamps(),
    )
    op.create_index('ix_users_external_id', 'users', ['external_id'], unique=True)
    op.create_index('ix_users_email', 'users', ['email'], unique=True)
    op.create_index('ix_users_username', 'users', ['username'], unique=True)
    op.create_index('ix_users_is_active', 'users', ['is_active'])

    op.create_table(
        'wardrobes',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('user_id', sa.String(36), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('name', sa.String(100), nullable=False),
        sa.Column('description', sa.String(500), nullable=True),
        sa.Column('items', sa.JSON(), nullable=False),
        sa.Column('is_default', sa.Boolean(), nullable=False),
        sa.Column('visibility', sa.String(10), nullable=False),
        sa.Column('shared_with', sa.JSON(), nullable=False),
        sa.Column('tags', sa.JSON(), nullable=False),
        *_timestamps(),
    )
    op.create_index('ix_wardrobes_user_id', 'wardrobes', ['user_id'])
    op.create_index('ix_wardrobes_created_at', 'wardrobes', ['created_at'])

    op.create_table(
        'clothing_items',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('user_id', sa.String(36), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('wardrobe_id', sa.String(36), sa.ForeignKey('wardrobes.id'), nullable=False),
        sa.Column('name', sa.String(100), nullable=False),
        sa.Column('brand', sa.String(100), nullable=True),
        sa.Column('color', sa.String(50), nullable=False),
        sa.Column('category', sa.String(30), nullable=False),
        sa.Column('image_url', sa.Text(), nullable=False),
        sa.Column('image_public_id', sa.String(255), nullable=True),
        sa.Column('attributes', sa.JSON(), nullable=False),
        sa.Column('ai_classification', sa.JSON(), nullable=False),
        sa.Column('user_metadata', sa.JSON(), nullable=False),
        *_timestamps(),
    )
    op.create_index('ix_clothing_items_user_id', 'clothing_items', ['user_id'])
    op.create_index('ix_clothing_items_wardrobe_id', 'clothing_items', ['wardrobe_id'])
    op.create_index('ix_clothing_items_category', 'clothing_items', ['category'])
    op.create_index('ix_clothing_items_created_at', 'clothing_items', ['created_at'])

    op.create_table(
        'outfits',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('user_id', sa.String(36), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('name', sa.String(100), nullable=False),
        sa.Column('items', sa.JSON(), nullable=False),
        sa.Column('occasion', sa.String(20), nullable=True),
        sa.Column('tags', sa.JSON(), nullable=False),
        sa.Column('is_public', sa.Boolean(), nullable=False),
        sa.Column('rating', sa.Float(), nullable=False),
        sa.Column('times_worn', sa.Integer(), nullable=False),
        *_timestamps(),
    )
    op.create_index('ix_outfits_user_id', 'outfits', ['user_id'])
    op.create_index('ix_outfits_created_at', 'outfits', ['created_at'])

    op.create_table(
        'outfit_recommendations',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('user_id', sa.String(36), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('occasion', sa.String(20), nullable=False),
        sa.Column('season', sa.String(10), nullable=True),
        sa.Column('weather_context', sa.JSON(), nullable=True),
        sa.Column('items', sa.JSON(), nullable=False),
        sa.Column('compatibility_score', sa.Float(), nullable=False),
        sa.Column('ai_reasoning', sa.Text(), nullable=True),
        sa.Column('recommendation_source', sa.String(10), nullable=False),
        sa.Column('user_feedback', sa.JSON(), nullable=True),
        sa.Column('metadata', sa.JSON(), nullable=False),
        sa.Column('expires_at', sa.DateTime(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
    )
    op.create_index('ix_outfit_recommendations_user_id', 'outfit_recommendations', ['user_id'])
    op.create_index('ix_outfit_recommendations_expires_at', 'outfit_recommendations', ['expires_at'])
    op.create_index('ix_outfit_recommendations_created_at', 'outfit_recommendations', ['created_at'])

    op.create_table(
        'chat_sessions',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('user_id', sa.String(36), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('session_type', sa.String(20), nullable=False),
        sa.Column('title', sa.String(100), nullable=False),
        sa.Column('messages', sa.JSON(), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('last_message_at', sa.DateTime(), nullable=False),
    )
    op.create_index('ix_chat_sessions_user_id', 'chat_sessions', ['user_id'])
    op.create_index('ix_chat_sessions_last_message_at', 'chat_sessions', ['last_message_at'])


def downgrade() -> None:
    op.drop_table('chat_sessions')
    op.drop_table('outfit_recommendations')
    op.drop_table('outfits')
    op.drop_table('clothing_items')
    op.drop_table('wardrobes')
    op.drop_table('users')
