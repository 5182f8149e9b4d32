"""Tracked user profiles."""

from __future__ import annotations

from typing import Any, Mapping

from bodymetrics.db.connection import Database

_COLUMNS = "id, name, surname, gender, avatar, height, birth_of_date, created_at, updated_at"

# Columns a PATCH may touch; anything else in the payload is ignored.
UPDATABLE_COLUMNS = frozenset({"name", "surname", "gender", "avatar", "height", "birth_of_date"})


class UserRepository:
    def __init__(self, db: Database) -> None:
        self._db = db

    async def create(self, fields: Mapping[str, Any]) -> int:
        cursor = await self._db.execute_write(
            "INSERT INTO users (name, surname, gender, avatar, height, birth_of_date) "
            "VALUES (?, ?, ?, ?, ?, ?)",
            (
                fields.get("name"),
                fields.get("surname"),
                fields.get("gender"),
                fields.get("avatar"),
                fields.get("height"),
                fields.get("birth_of_date"),
            ),
        )
        return cursor.lastrowid

    async def get_by_id(self, user_id: int) -> dict[str, Any] | None:
        row = await self._db.fetchone(f"SELECT {_COLUMNS} FROM users WHERE id = ?", (user_id,))
        return dict(row) if row is not None else None

    async def get_all(self) -> list[dict[str, Any]]:
        rows = await self._db.fetchall(f"SELECT {_COLUMNS} FROM users ORDER BY id ASC")
        return [dict(row) for row in rows]

    async def update(self, user_id: int, fields: Mapping[str, Any]) -> None:
        """Write the allowed subset of ``fields``; a no-op when nothing applies."""
        assignments = [(column, value) for column, value in fields.items() if column in UPDATABLE_COLUMNS]
        if not assignments:
            return

        set_clause = ", ".join(f"{column} = ?" for column, _ in assignments)
        params = [value for _, value in assignments]
        params.append(user_id)
        await self._db.execute_write(
            f"UPDATE users SET {set_clause}, updated_at = CURRENT_TIMESTAMP WHERE id = ?",
            params,
        )
