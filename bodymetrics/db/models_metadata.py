"""SQLAlchemy table metadata mirroring the SQLite schema.

Used by ``bodymetrics/migrations/env.py`` for Alembic autogenerate. Runtime
queries stay raw SQL through aiosqlite.
"""

from sqlalchemy import (
    Column,
    Float,
    ForeignKey,
    Index,
    Integer,
    MetaData,
    Table,
    Text,
    text,
)

metadata = MetaData()

_now = text("CURRENT_TIMESTAMP")

accounts = Table(
    "accounts",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("email", Text, nullable=False, unique=True),
    Column("password_hash", Text, nullable=False),
    Column("created_at", Text, nullable=False, server_default=_now),
    Column("updated_at", Text, nullable=False, server_default=_now),
)

users = Table(
    "users",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("name", Text),
    Column("surname", Text),
    Column("gender", Integer),
    Column("avatar", Text),
    Column("height", Integer),
    Column("birth_of_date", Text),
    Column("created_at", Text, nullable=False, server_default=_now),
    Column("updated_at", Text, nullable=False, server_default=_now),
)

user_metrics = Table(
    "user_metrics",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("user_id", Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
    Column("date", Text, nullable=False),
    Column("weight", Float),
    Column("height", Integer, nullable=False),
    Column("bmi", Float, nullable=False),
    Column("weight_diff", Float),
    Column("body_metric", Text),
    Column("created_at", Text),
    Index("idx_user_metrics_user", "user_id"),
)

password_reset_tokens = Table(
    "password_reset_tokens",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("account_id", Integer, ForeignKey("accounts.id", ondelete="CASCADE"), nullable=False),
    Column("token", Text, nullable=False),
    Column("expires_at", Float, nullable=False),
    Column("used", Integer, nullable=False, server_default="0"),
    Column("created_at", Text, nullable=False, server_default=_now),
    Index("idx_reset_tokens_account", "account_id"),
)
