"""Account persistence (login identities, distinct from tracked users)."""

from __future__ import annotations

import sqlite3
from dataclasses import dataclass

from bodymetrics.core.errors import ConflictAppError
from bodymetrics.db.connection import Database


@dataclass(frozen=True)
class Account:
    id: int
    email: str
    password_hash: str


class AccountRepository:
    def __init__(self, db: Database) -> None:
        self._db = db

    async def create(self, email: str, password_hash: str) -> int:
        """Insert an account and return its id.

        Raises:
            ConflictAppError: If the email is already registered.
        """
        try:
            cursor = await self._db.execute_write(
                "INSERT INTO accounts (email, password_hash) VALUES (?, ?)",
                (email, password_hash),
            )
        except sqlite3.IntegrityError as exc:
            raise ConflictAppError(
                code="email_already_exists",
                message="email already exists",
            ) from exc
        return cursor.lastrowid

    async def get_by_email(self, email: str) -> Account | None:
        row = await self._db.fetchone(
            "SELECT id, email, password_hash FROM accounts WHERE email = ?",
            (email,),
        )
        if row is None:
            return None
        return Account(id=row["id"], email=row["email"], password_hash=row["password_hash"])

    async def update_password(self, account_id: int, password_hash: str) -> None:
        await self._db.execute_write(
            "UPDATE accounts SET password_hash = ?, updated_at = CURRENT_TIMESTAMP WHERE id = ?",
            (password_hash, account_id),
        )
