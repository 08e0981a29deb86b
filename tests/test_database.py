"""
tests/test_database.py — Session Helper, Schema and Migration Tests
====================================================================
"""

from __future__ import annotations

import asyncio
import importlib.util
from pathlib import Path

import pytest
from alembic.migration import MigrationContext
from alembic.operations import Operations
from conftest import read_account, seed_account
from sqlalchemy import create_engine, inspect
from sqlalchemy.pool import StaticPool

from nuggies.database.engine import get_session, init_db, run_db
from nuggies.database.models import Account
from nuggies.services.economy_service import get_balance

MIGRATION = (
    Path(__file__).resolve().parent.parent
    / "alembic" / "versions" / "5e1c0a7d9b21_create_users_table.py"
)

# 2**63 - 1 is the largest value a signed BIGINT column accepts
LARGEST_SNOWFLAKE = 2**63 - 1


def run_async(coro):
    """Run an async coroutine in a fresh event loop."""
    return asyncio.run(coro)


def _load_migration():
    spec = importlib.util.spec_from_file_location("create_users_table", MIGRATION)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


def _upgrade(engine) -> None:
    migration = _load_migration()
    with engine.begin() as conn:
        with Operations.context(MigrationContext.configure(conn)):
            migration.upgrade()


def _bare_engine():
    return create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )


# ---------------------------------------------------------------------------
# get_session / run_db
# ---------------------------------------------------------------------------
class TestSessionHelper:
    def test_commits_on_clean_exit(self, db_engine):
        with get_session(db_engine) as session:
            session.add(Account(user_id=1, balance=7))
        assert read_account(db_engine, 1).balance == 7

    def test_rolls_back_on_error(self, db_engine):
        with pytest.raises(RuntimeError):
            with get_session(db_engine) as session:
                session.add(Account(user_id=1, balance=7))
                session.flush()
                raise RuntimeError("abort")
        assert read_account(db_engine, 1) is None

    def test_attributes_readable_after_commit(self, db_engine):
        seed_account(db_engine, 1, balance=12)
        with get_session(db_engine) as session:
            account = session.get(Account, 1)
        assert account.balance == 12

    def test_run_db_returns_result(self, db_engine):
        seed_account(db_engine, 1, balance=3)
        assert run_async(run_db(get_balance, db_engine, 1)) == 3

    def test_run_db_propagates_errors(self):
        def broken():
            raise ValueError("bad row")

        with pytest.raises(ValueError, match="bad row"):
            run_async(run_db(broken))


# ---------------------------------------------------------------------------
# users.user_id range
# ---------------------------------------------------------------------------
class TestUserIdColumn:
    def test_largest_signed_snowflake_round_trips(self, db_engine):
        seed_account(db_engine, LARGEST_SNOWFLAKE, balance=9)
        assert get_balance(db_engine, LARGEST_SNOWFLAKE) == 9

    def test_real_snowflake_fits(self, db_engine):
        seed_account(db_engine, 241614046913101825, balance=1)
        assert get_balance(db_engine, 241614046913101825) == 1


# ---------------------------------------------------------------------------
# Alembic revision
# ---------------------------------------------------------------------------
class TestCreateUsersMigration:
    def test_creates_table_on_empty_database(self):
        engine = _bare_engine()
        _upgrade(engine)

        assert inspect(engine).has_table("users")
        columns = {c["name"] for c in inspect(engine).get_columns("users")}
        assert columns == {"user_id", "balance", "last_claim_date"}

    def test_skips_table_created_by_init_db(self):
        engine = _bare_engine()
        init_db(engine)
        seed_account(engine, 1, balance=4)

        _upgrade(engine)

        assert read_account(engine, 1).balance == 4
