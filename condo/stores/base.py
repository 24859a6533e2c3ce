"""Shared plumbing for the SQLite-backed stores."""

from __future__ import annotations

from typing import TYPE_CHECKING

from condo.db import get_connection

if TYPE_CHECKING:
    from pathlib import Path

    import aiosqlite

# Column lists aliased for eager loading (see condo.models).
UNIT_COLUMNS = (
    "u.id AS unit__id, u.condominium_id AS unit__condominium_id, "
    "u.number AS unit__number, u.owner_id AS unit__owner_id, "
    "u.base_fee AS unit__base_fee"
)
OWNER_COLUMNS = (
    "o.id AS owner__id, o.name AS owner__name, o.email AS owner__email, "
    "o.role AS owner__role, o.status AS owner__status"
)
CONDOMINIUM_COLUMNS = (
    "c.id AS condominium__id, c.name AS condominium__name, c.status AS condominium__status"
)


class BaseStore:
    """Opens one connection per operation against *db_path*.

    Pass an explicit *db_path* for test isolation (e.g. ``tmp_path / "test.db"``);
    ``None`` falls back to ``settings.database_path``.
    """

    def __init__(self, db_path: Path | None = None) -> None:
        self._db_path = db_path

    async def _connect(self) -> aiosqlite.Connection:
        return await get_connection(local_path_override=self._db_path)
