"""create accounts table

Revision ID: 3f9c1e2a7b40
Revises: 
Create Date: 2026-10-19 09:00:00.000000
"""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "3f9c1e2a7b40"
down_revision = None
branch_labels = None
depends_on = None

_UNIQUE_ACTIVE = (
    ("uq_accounts_username_active", "username"),
    ("uq_accounts_email_active", "email"),
    ("uq_accounts_phone_active", "phone"),
)


def upgrade() -> None:
    op.create_table(
        "accounts",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("username", sa.String(length=50), nullable=False),
        sa.Column("email", sa.String(length=100), nullable=False),
        sa.Column("phone", sa.String(length=20)),
        sa.Column("password_hash", sa.String(length=255), nullable=False),
        sa.Column("real_name", sa.String(length=50)),
        sa.Column("nickname", sa.String(length=50)),
        sa.Column("avatar_url", sa.String(length=500)),
        sa.Column("remark", sa.Text()),
        sa.Column("status", sa.String(length=20), nullable=False, server_default="normal"),
        sa.Column("role", sa.String(length=20), nullable=False, server_default="user"),
        sa.Column("email_verified", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("phone_verified", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("login_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("last_login_at", sa.DateTime(timezone=True)),
        sa.Column("last_login_ip", sa.String(length=45)),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("is_deleted", sa.Boolean(), nullable=False, server_default=sa.false()),
    )
    op.create_index("ix_accounts_created_at", "accounts", ["created_at"])
    for name, column in _UNIQUE_ACTIVE:
        op.create_index(
            name,
            "accounts",
            [column],
            unique=True,
            sqlite_where=sa.text("is_deleted = 0"),
            postgresql_where=sa.text("is_deleted = false"),
        )


def downgrade() -> None:
    for name, _ in reversed(_UNIQUE_ACTIVE):
        op.drop_index(name, table_name="accounts")
    op.drop_index("ix_accounts_created_at", table_name="accounts")
    op.drop_table("accounts")
