"""create push_device_registration table

Revision ID: 4f2a9c71d0e3
Revises:
Create Date: 2026-10-19 00:00:00.000000
"""

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '4f2a9c71d0e3'
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        'push_device_registration',
        sa.Column(
            'id',
            sa.BigInteger().with_variant(sa.Integer(), 'sqlite'),
            primary_key=True,
            autoincrement=True,
            nullable=False,
        ),
        sa.Column('activation_id', sa.String(length=37), nullable=True),
        sa.Column('user_id', sa.String(length=255), nullable=True),
        sa.Column('app_id', sa.BigInteger(), nullable=False),
        sa.Column('platform', sa.String(length=30), nullable=False),
        sa.Column('push_token', sa.String(length=255), nullable=False),
        sa.Column('timestamp_last_registered', sa.DateTime(timezone=True), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.text('false')),
    )
    op.create_index(
        'uq_push_device_registration_activation_token',
        'push_device_registration',
        ['activation_id', 'push_token'],
        unique=True,
    )
    op.create_index(
        'ix_push_device_registration_activation',
        'push_device_registration',
        ['activation_id'],
        unique=False,
    )
    op.create_index(
        'ix_push_device_registration_app_token',
        'push_device_registration',
        ['app_id', 'push_token'],
        unique=False,
    )


def downgrade() -> None:
    op.drop_index('ix_push_device_registration_app_token', table_name='push_device_registration')
    op.drop_index('ix_push_device_registration_activation', table_name='push_device_registration')
    op.drop_index(
        'uq_push_device_registration_activation_token', table_name='push_device_registration'
    )
    op.drop_table('push_device_registration')
