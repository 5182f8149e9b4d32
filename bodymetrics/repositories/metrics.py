"""Body-metric history entries, one row per measurement."""

from __future__ import annotations

from typing import Any, Mapping

from bodymetrics.db.connection import Database


class MetricRepository:
    def __init__(self, db: Database) -> None:
        self._db = db

    async def create(self, user_id: int, metric: Mapping[str, Any]) -> int:
        cursor = await self._db.execute_write(
            "INSERT INTO user_metrics "
            "(user_id, date, weight, height, bmi, weight_diff, body_metric, created_at) "
            "VALUES (?, ?, ?, ?, ?, ?, ?, ?)",
            (
                user_id,
                metric["date"],
                metric.get("weight"),
                metric["height"],
                metric["bmi"],
                metric.get("weight_diff"),
                metric.get("body_metric"),
                metric.get("created_at"),
            ),
        )
        return cursor.lastrowid

    async def get_by_user_id(self, user_id: int) -> list[dict[str, Any]]:
        """Return the user's history, oldest first."""
        rows = await self._db.fetchall(
            "SELECT id, user_id, date, weight, height, bmi, weight_diff, body_metric, created_at "
            "FROM user_metrics WHERE user_id = ? ORDER BY created_at ASC, id ASC",
            (user_id,),
        )
        return [dict(row) for row in rows]
