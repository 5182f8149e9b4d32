"""One-time password reset codes."""

from __future__ import annotations

import time
from dataclasses import dataclass

from bodymetrics.db.connection import Database


@dataclass(frozen=True)
class PasswordResetToken:
    id: int
    account_id: int
    token: str
    expires_at: float
    used: bool


class ResetTokenRepository:
    def __init__(self, db: Database) -> None:
        self._db = db

    async def create(self, account_id: int, token: str, expires_at: float) -> None:
        await self._db.execute_write(
            "INSERT INTO password_reset_tokens (account_id, token, expires_at) VALUES (?, ?, ?)",
            (account_id, token, expires_at),
        )

    async def get_valid_by_email_and_token(
        self,
        email: str,
        token: str,
        *,
        now: float | None = None,
    ) -> PasswordResetToken | None:
        """Return the newest unused, unexpired code matching email and token."""
        row = await self._db.fetchone(
            """
            SELECT prt.id, prt.account_id, prt.token, prt.expires_at, prt.used
            FROM password_reset_tokens prt
            JOIN accounts a ON a.id = prt.account_id
            WHERE a.email = ? AND prt.token = ? AND prt.used = 0 AND prt.expires_at > ?
            ORDER BY prt.id DESC
            LIMIT 1
            """,
            (email, token, time.time() if now is None else now),
        )
        if row is None:
            return None
        return PasswordResetToken(
            id=row["id"],
            account_id=row["account_id"],
            token=row["token"],
            expires_at=row["expires_at"],
            used=bool(row["used"]),
        )

    async def mark_used(self, token_id: int) -> None:
        await self._db.execute_write(
            "UPDATE password_reset_tokens SET used = 1 WHERE id = ?",
            (token_id,),
        )

    async def delete_by_account_id(self, account_id: int) -> None:
        """Drop every code issued to the account, used or not."""
        await self._db.execute_write(
            "DELETE FROM password_reset_tokens WHERE account_id = ?",
            (account_id,),
        )
