"""SQLAlchemy ORM models."""
import uuid
from datetime import datetime, timezone

from sqlalchemy import Boolean, Column, DateTime, Index, Integer, String, Text, text

from account_server.infrastructure.database.base import Base


def generate_uuid() -> str:
    return str(uuid.uuid4())


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


_ACTIVE_ONLY_SQLITE = text("is_deleted = 0")
_ACTIVE_ONLY_POSTGRES = text("is_deleted = false")


class AccountRecord(Base):
    __tablename__ = "accounts"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    username = Column(String(50), nullable=False)
    email = Column(String(100), nullable=False)
    phone = Column(String(20))
    password_hash = Column(String(255), nullable=False)
    real_name = Column(String(50))
    nickname = Column(String(50))
    avatar_url = Column(String(500))
    remark = Column(Text)
    status = Column(String(20), nullable=False, default="normal")
    role = Column(String(20), nullable=False, default="user")
    email_verified = Column(Boolean, nullable=False, default=False)
    phone_verified = Column(Boolean, nullable=False, default=False)
    login_count = Column(Integer, nullable=False, default=0)
    last_login_at = Column(DateTime(timezone=True))
    last_login_ip = Column(String(45))
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, index=True)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)
    is_deleted = Column(Boolean, nullable=False, default=False)

    # Uniqueness only binds active rows, so a soft-deleted account frees its username, email and phone.
    __table_args__ = (
        Index(
            "uq_accounts_username_active",
            "username",
            unique=True,
            sqlite_where=_ACTIVE_ONLY_SQLITE,
            postgresql_where=_ACTIVE_ONLY_POSTGRES,
        ),
        Index(
            "uq_accounts_email_active",
            "email",
            unique=True,
            sqlite_where=_ACTIVE_ONLY_SQLITE,
            postgresql_where=_ACTIVE_ONLY_POSTGRES,
        ),
        Index(
            "uq_accounts_phone_active",
            "phone",
            unique=True,
            sqlite_where=_ACTIVE_ONLY_SQLITE,
            postgresql_where=_ACTIVE_ONLY_POSTGRES,
        ),
    )
