"""baseline task board schema

Revision ID: 1f3b9c2d7a41
Revises:
Create Date: 2026-10-17 00:00:00.000000
"""
import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision = '1f3b9c2d7a41'
down_revision = None
branch_labels = None
depends_on = None

board_role = sa.Enum('owner', 'moderator', 'member', name='board_role')


def _timestamps():
    return [
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    ]


def upgrade():
    op.create_table(
        'members',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('email', sa.String(length=254), nullable=False),
        sa.Column('username', sa.String(length=50), nullable=False),
        sa.Column('full_name', sa.String(length=100), nullable=True),
        sa.Column('password_hash', sa.String(length=255), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id', name=op.f('pk_members')),
        sa.UniqueConstraint('email', name='uq_members_email'),
        sa.UniqueConstraint('username', name='uq_members_username'),
    )
    op.create_index('ix_members_email', 'members', ['email'])
    op.create_index('ix_members_username', 'members', ['username'])

    op.create_table(
        'refresh_tokens',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('member_id', sa.Uuid(), nullable=False),
        sa.Column('token_hash', sa.String(length=64), nullable=False),
        sa.Column('expires_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('revoked', sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.Column('revoked_at', sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(
            ['member_id'], ['members.id'],
            name=op.f('fk_refresh_tokens_member_id_members'), ondelete='CASCADE',
        ),
        sa.PrimaryKeyConstraint('id', name=op.f('pk_refresh_tokens')),
        sa.UniqueConstraint('token_hash', name='uq_refresh_tokens_token_hash'),
    )
    op.create_index('ix_refresh_tokens_member_id', 'refresh_tokens', ['member_id'])
    op.create_index('ix_refresh_tokens_expires_at', 'refresh_tokens', ['expires_at'])

    op.create_table(
        'boards',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('name', sa.String(length=120), nullable=False),
        sa.Column('unique_slug', sa.String(length=50), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('password_hash', sa.String(length=255), nullable=False),
        sa.Column('creator_id', sa.Uuid(), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(
            ['creator_id'], ['members.id'],
            name=op.f('fk_boards_creator_id_members'), ondelete='CASCADE',
        ),
        sa.PrimaryKeyConstraint('id', name=op.f('pk_boards')),
        sa.UniqueConstraint('unique_slug', name='uq_boards_unique_slug'),
    )
    op.create_index('ix_boards_creator_id', 'boards', ['creator_id'])

    op.create_table(
        'board_members',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('board_id', sa.Uuid(), nullable=False),
        sa.Column('member_id', sa.Uuid(), nullable=False),
        sa.Column('role', board_role, nullable=False),
        sa.Column('joined_at', sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(
            ['board_id'], ['boards.id'],
            name=op.f('fk_board_members_board_id_boards'), ondelete='CASCADE',
        ),
        sa.ForeignKeyConstraint(
            ['member_id'], ['members.id'],
            name=op.f('fk_board_members_member_id_members'), ondelete='CASCADE',
        ),
        sa.PrimaryKeyConstraint('id', name=op.f('pk_board_members')),
        sa.UniqueConstraint('board_id', 'member_id', name='uq_board_members_board_id_member_id'),
    )
    op.create_index('ix_board_members_member_id', 'board_members', ['member_id'])

    op.create_table(
        'starred_boards',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('board_id', sa.Uuid(), nullable=False),
        sa.Column('member_id', sa.Uuid(), nullable=False),
        sa.Column('starred_at', sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(
            ['board_id'], ['boards.id'],
            name=op.f('fk_starred_boards_board_id_boards'), ondelete='CASCADE',
        ),
        sa.ForeignKeyConstraint(
            ['member_id'], ['members.id'],
            name=op.f('fk_starred_boards_member_id_members'), ondelete='CASCADE',
        ),
        sa.PrimaryKeyConstraint('id', name=op.f('pk_starred_boards')),
        sa.UniqueConstraint('board_id', 'member_id', name='uq_starred_boards_board_id_member_id'),
    )

    op.create_table(
        'lists',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('board_id', sa.Uuid(), nullable=False),
        sa.Column('name', sa.String(length=120), nullable=False),
        sa.Column('position', sa.Float(), nullable=False),
        sa.Column('archived', sa.Boolean(), server_default=sa.false(), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(
            ['board_id'], ['boards.id'],
            name=op.f('fk_lists_board_id_boards'), ondelete='CASCADE',
        ),
        sa.PrimaryKeyConstraint('id', name=op.f('pk_lists')),
    )
    op.create_index('ix_lists_board_id_position', 'lists', ['board_id', 'position'])

    op.create_table(
        'cards',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('list_id', sa.Uuid(), nullable=False),
        sa.Column('title', sa.String(length=200), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('position', sa.Float(), nullable=False),
        sa.Column('archived', sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.Column('created_by', sa.Uuid(), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(
            ['list_id'], ['lists.id'],
            name=op.f('fk_cards_list_id_lists'), ondelete='CASCADE',
        ),
        sa.ForeignKeyConstraint(
            ['created_by'], ['members.id'],
            name=op.f('fk_cards_created_by_members'), ondelete='CASCADE',
        ),
        sa.PrimaryKeyConstraint('id', name=op.f('pk_cards')),
    )
    op.create_index('ix_cards_list_id_position', 'cards', ['list_id', 'position'])
    op.create_index('ix_cards_created_by', 'cards', ['created_by'])


def downgrade():
    op.drop_index('ix_cards_created_by', table_name='cards')
    op.drop_index('ix_cards_list_id_position', table_name='cards')
    op.drop_table('cards')
    op.drop_index('ix_lists_board_id_position', table_name='lists')
    op.drop_table('lists')
    op.drop_table('starred_boards')
    op.drop_index('ix_board_members_member_id', table_name='board_members')
    op.drop_table('board_members')
    op.drop_index('ix_boards_creator_id', table_name='boards')
    op.drop_table('boards')
    op.drop_index('ix_refresh_tokens_expires_at', table_name='refresh_tokens')
    op.drop_index('ix_refresh_tokens_member_id', table_name='refresh_tokens')
    op.drop_table('refresh_tokens')
    op.drop_index('ix_members_username', table_name='members')
    op.drop_index('ix_members_email', table_name='members')
    op.drop_table('members')
    board_role.drop(op.get_bind(), checkfirst=True)
