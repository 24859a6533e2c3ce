"""Tests for the async connection helper and schema."""

from pathlib import Path

import aiosqlite

from condo.db import get_connection


class TestGetConnection:
    async def test_returns_connection_with_named_rows(self, tmp_path: Path):
        conn = await get_connection(local_path_override=tmp_path / "test.db")
        try:
            assert isinstance(conn, aiosqlite.Connection)
            assert conn.row_factory is aiosqlite.Row
        finally:
            await conn.close()

    async def test_creates_parent_dirs(self, tmp_path: Path):
        db_path = tmp_path / "nested" / "dir" / "test.db"
        conn = await get_connection(local_path_override=db_path)
        await conn.close()
        assert db_path.parent.exists()

    async def test_creates_schema(self, tmp_path: Path):
        conn = await get_connection(local_path_override=tmp_path / "test.db")
        try:
            cursor = await conn.execute("SELECT name FROM sqlite_master WHERE type = 'table'")
            tables = {row["name"] for row in await cursor.fetchall()}
        finally:
            await conn.close()
        assert {
            "users",
            "condominiums",
            "units",
            "suppliers",
            "contracts",
            "inventory_items",
            "payments",
            "notifications",
        } <= tables

    async def test_second_connection_reuses_schema(self, tmp_path: Path):
        db_path = tmp_path / "test.db"
        first = await get_connection(local_path_override=db_path)
        await first.execute("INSERT INTO suppliers (name) VALUES (?)", ("Acme",))
        await first.commit()
        await first.close()

        second = await get_connection(local_path_override=db_path)
        try:
            cursor = await second.execute("SELECT name FROM suppliers")
            rows = await cursor.fetchall()
        finally:
            await second.close()
        assert [r["name"] for r in rows] == ["Acme"]
