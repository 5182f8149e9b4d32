"""Tests for migrations, the database wrapper and the repositories."""

from __future__ import annotations

import sqlite3
import time

import pytest

from bodymetrics.core.errors import ConflictAppError
from bodymetrics.db.connection import Database
from bodymetrics.db.migrate import current_revision, run_migrations
from bodymetrics.repositories import (
    AccountRepository,
    MetricRepository,
    ResetTokenRepository,
    UserRepository,
)


class TestMigrations:
    async def test_fresh_database_is_at_head(self, tmp_db: Database, tmp_path):
        assert current_revision(tmp_path / "repo.db") == "004"

        rows = await tmp_db.fetchall("SELECT name FROM sqlite_master WHERE type = 'table'")
        tables = {r["name"] for r in rows}
        assert {"accounts", "users", "user_metrics", "password_reset_tokens"} <= tables

    async def test_rerun_is_a_no_op(self, tmp_db: Database, tmp_path):
        run_migrations(tmp_path / "repo.db")

        assert current_revision(tmp_path / "repo.db") == "004"

    def test_revision_is_none_before_migrating(self, tmp_path):
        assert current_revision(tmp_path / "empty.db") is None

    async def test_reopening_existing_file_keeps_data(self, tmp_path):
        path = tmp_path / "persist.db"
        db = Database()
        await db.init(path)
        await AccountRepository(db).create("keep@example.com", "hash")
        await db.close()

        reopened = Database()
        await reopened.init(path)
        try:
            assert await AccountRepository(reopened).get_by_email("keep@example.com") is not None
        finally:
            await reopened.close()


class TestDatabase:
    async def test_transaction_rolls_back_on_error(self, tmp_db: Database):
        accounts = AccountRepository(tmp_db)

        with pytest.raises(RuntimeError):
            async with tmp_db.transaction():
                await tmp_db.execute_write(
                    "INSERT INTO accounts (email, password_hash) VALUES (?, ?)",
                    ("tx@example.com", "hash"),
                )
                raise RuntimeError("abort")

        assert await accounts.get_by_email("tx@example.com") is None

    async def test_transaction_commits_all_writes(self, tmp_db: Database):
        async with tmp_db.transaction():
            for i in range(3):
                await tmp_db.execute_write("INSERT INTO users (name) VALUES (?)", (f"u{i}",))

        assert len(await UserRepository(tmp_db).get_all()) == 3

    async def test_failed_write_does_not_poison_connection(self, tmp_db: Database):
        with pytest.raises(sqlite3.IntegrityError):
            await tmp_db.execute_write("INSERT INTO user_metrics (user_id, date, height, bmi) VALUES (999, 'd', 1, 1)")

        user_id = await UserRepository(tmp_db).create({"name": "after"})
        assert user_id >= 1

    async def test_conn_before_init_raises(self):
        with pytest.raises(RuntimeError):
            _ = Database().conn


class TestAccountRepository:
    async def test_create_and_lookup(self, tmp_db: Database):
        repo = AccountRepository(tmp_db)

        account_id = await repo.create("a@example.com", "hash-1")
        account = await repo.get_by_email("a@example.com")

        assert account is not None
        assert account.id == account_id
        assert account.password_hash == "hash-1"
        assert await repo.get_by_email("missing@example.com") is None

    async def test_duplicate_email_conflicts(self, tmp_db: Database):
        repo = AccountRepository(tmp_db)
        await repo.create("dup@example.com", "hash")

        with pytest.raises(ConflictAppError) as exc_info:
            await repo.create("dup@example.com", "other")

        assert exc_info.value.status_code == 409

    async def test_update_password(self, tmp_db: Database):
        repo = AccountRepository(tmp_db)
        account_id = await repo.create("pw@example.com", "old")

        await repo.update_password(account_id, "new")

        assert (await repo.get_by_email("pw@example.com")).password_hash == "new"


class TestUserRepository:
    async def test_update_ignores_unknown_columns(self, tmp_db: Database):
        repo = UserRepository(tmp_db)
        user_id = await repo.create({"name": "Ada", "height": 168})

        await repo.update(user_id, {"height": 170, "id": 99, "created_at": "never"})

        user = await repo.get_by_id(user_id)
        assert user["id"] == user_id
        assert user["height"] == 170
        assert user["created_at"] != "never"

    async def test_update_with_nothing_applicable_is_noop(self, tmp_db: Database):
        repo = UserRepository(tmp_db)
        user_id = await repo.create({"name": "Ada"})
        before = await repo.get_by_id(user_id)

        await repo.update(user_id, {})

        assert await repo.get_by_id(user_id) == before

    async def test_missing_user_is_none(self, tmp_db: Database):
        assert await UserRepository(tmp_db).get_by_id(1) is None


class TestMetricRepository:
    async def test_history_ordered_by_created_at(self, tmp_db: Database):
        user_id = await UserRepository(tmp_db).create({"name": "m"})
        repo = MetricRepository(tmp_db)
        base = {"height": 170, "bmi": 22.0}

        await repo.create(user_id, {**base, "date": "b", "created_at": "2024-01-02T00:00:00Z"})
        await repo.create(user_id, {**base, "date": "a", "created_at": "2024-01-01T00:00:00Z"})

        assert [m["date"] for m in await repo.get_by_user_id(user_id)] == ["a", "b"]
        assert await repo.get_by_user_id(user_id + 1) == []


class TestResetTokenRepository:
    async def _account(self, db: Database) -> int:
        return await AccountRepository(db).create("reset@example.com", "hash")

    async def test_valid_token_lookup(self, tmp_db: Database):
        account_id = await self._account(tmp_db)
        repo = ResetTokenRepository(tmp_db)
        await repo.create(account_id, "123456", time.time() + 900)

        token = await repo.get_valid_by_email_and_token("reset@example.com", "123456")

        assert token is not None
        assert token.account_id == account_id
        assert token.used is False
        assert await repo.get_valid_by_email_and_token("reset@example.com", "654321") is None
        assert await repo.get_valid_by_email_and_token("other@example.com", "123456") is None

    async def test_expired_token_is_not_valid(self, tmp_db: Database):
        account_id = await self._account(tmp_db)
        repo = ResetTokenRepository(tmp_db)
        await repo.create(account_id, "123456", 1000.0)

        assert await repo.get_valid_by_email_and_token("reset@example.com", "123456", now=999.0) is not None
        assert await repo.get_valid_by_email_and_token("reset@example.com", "123456", now=1000.0) is None

    async def test_used_token_is_not_valid(self, tmp_db: Database):
        account_id = await self._account(tmp_db)
        repo = ResetTokenRepository(tmp_db)
        await repo.create(account_id, "123456", time.time() + 900)
        token = await repo.get_valid_by_email_and_token("reset@example.com", "123456")

        await repo.mark_used(token.id)

        assert await repo.get_valid_by_email_and_token("reset@example.com", "123456") is None

    async def test_delete_by_account_id(self, tmp_db: Database):
        account_id = await self._account(tmp_db)
        repo = ResetTokenRepository(tmp_db)
        await repo.create(account_id, "111111", time.time() + 900)
        await repo.create(account_id, "222222", time.time() + 900)

        await repo.delete_by_account_id(account_id)

        assert await repo.get_valid_by_email_and_token("reset@example.com", "111111") is None
        assert await repo.get_valid_by_email_and_token("reset@example.com", "222222") is None
