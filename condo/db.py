"""Async SQLite connection helper and the back office schema.

Every store opens a short-lived connection per operation through
``get_connection()``.  The schema is created on the first connection to a
given database file; later connections skip the DDL.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import aiosqlite

from condo.config import settings

if TYPE_CHECKING:
    from pathlib import Path

logger = logging.getLogger(__name__)

_SCHEMA = """
CREATE TABLE IF NOT EXISTS users (
    id      INTEGER PRIMARY KEY AUTOINCREMENT,
    name    TEXT NOT NULL,
    email   TEXT NOT NULL DEFAULT '',
    role    TEXT NOT NULL DEFAULT 'resident',
    status  TEXT NOT NULL DEFAULT 'active'
);

CREATE TABLE IF NOT EXISTS condominiums (
    id      INTEGER PRIMARY KEY AUTOINCREMENT,
    name    TEXT NOT NULL,
    status  TEXT NOT NULL DEFAULT 'active'
);

CREATE TABLE IF NOT EXISTS units (
    id              INTEGER PRIMARY KEY AUTOINCREMENT,
    condominium_id  INTEGER NOT NULL REFERENCES condominiums(id),
    number          TEXT NOT NULL,
    owner_id        INTEGER REFERENCES users(id),
    base_fee        TEXT
);

CREATE TABLE IF NOT EXISTS suppliers (
    id      INTEGER PRIMARY KEY AUTOINCREMENT,
    name    TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS contracts (
    id              INTEGER PRIMARY KEY AUTOINCREMENT,
    condominium_id  INTEGER NOT NULL REFERENCES condominiums(id),
    supplier_id     INTEGER NOT NULL REFERENCES suppliers(id),
    number          TEXT NOT NULL,
    description     TEXT NOT NULL DEFAULT '',
    end_date        TEXT NOT NULL,
    status          TEXT NOT NULL DEFAULT 'active'
);

CREATE TABLE IF NOT EXISTS inventory_items (
    id              INTEGER PRIMARY KEY AUTOINCREMENT,
    condominium_id  INTEGER NOT NULL REFERENCES condominiums(id),
    name            TEXT NOT NULL,
    quantity        INTEGER NOT NULL DEFAULT 0,
    minimum_stock   INTEGER NOT NULL DEFAULT 0,
    status          TEXT NOT NULL DEFAULT 'available'
);

CREATE TABLE IF NOT EXISTS payments (
    id               INTEGER PRIMARY KEY AUTOINCREMENT,
    unit_id          INTEGER NOT NULL REFERENCES units(id),
    type             TEXT NOT NULL DEFAULT 'condominium',
    description      TEXT NOT NULL DEFAULT '',
    amount           TEXT NOT NULL,
    due_date         TEXT NOT NULL,
    paid_date        TEXT,
    status           TEXT NOT NULL DEFAULT 'pending',
    reference_month  INTEGER NOT NULL,
    reference_year   INTEGER NOT NULL,
    created_at       TEXT NOT NULL
);

CREATE UNIQUE INDEX IF NOT EXISTS ux_payments_condominium_reference
    ON payments (unit_id, type, reference_month, reference_year)
    WHERE type = 'condominium';

CREATE INDEX IF NOT EXISTS ix_payments_due_status
    ON payments (due_date, status);

CREATE TABLE IF NOT EXISTS notifications (
    id          INTEGER PRIMARY KEY AUTOINCREMENT,
    user_id     INTEGER NOT NULL REFERENCES users(id),
    unit_id     INTEGER REFERENCES units(id),
    title       TEXT NOT NULL,
    message     TEXT NOT NULL,
    kind        TEXT NOT NULL DEFAULT 'info',
    status      TEXT NOT NULL DEFAULT 'sent',
    created_at  TEXT NOT NULL
);

CREATE INDEX IF NOT EXISTS ix_notifications_user_title
    ON notifications (user_id, title, created_at);
"""

_initialised: set[str] = set()


async def get_connection(local_path_override: Path | None = None) -> aiosqlite.Connection:
    """Return an open aiosqlite connection with rows addressable by column name.

    If *local_path_override* is given (test isolation), it takes priority over
    ``settings.database_path``.  The caller is responsible for closing it.
    """
    path = local_path_override or settings.database_path
    path.parent.mkdir(parents=True, exist_ok=True)
    db = await aiosqlite.connect(str(path))
    db.row_factory = aiosqlite.Row
    await db.execute("PRAGMA journal_mode=WAL")
    await db.execute("PRAGMA busy_timeout=5000")
    await db.execute("PRAGMA foreign_keys=ON")

    key = str(path.resolve())
    if key not in _initialised:
        await db.executescript(_SCHEMA)
        await db.commit()
        _initialised.add(key)
        logger.debug("Schema ensured for %s", path)
    return db
