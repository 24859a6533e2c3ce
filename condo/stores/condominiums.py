"""CondominiumStore and UnitStore."""

from __future__ import annotations

from condo.models import STATUS_ACTIVE, Condominium, Unit
from condo.stores.base import OWNER_COLUMNS, BaseStore


class CondominiumStore(BaseStore):
    async def add(self, condominium: Condominium) -> Condominium:
        db = await self._connect()
        try:
            cursor = await db.execute(
                "INSERT INTO condominiums (id, name, status) VALUES (?, ?, ?)",
                (condominium.id, condominium.name, condominium.status),
            )
            await db.commit()
            condominium.id = cursor.lastrowid
            return condominium
        finally:
            await db.close()

    async def get(self, condominium_id: int) -> Condominium | None:
        db = await self._connect()
        try:
            cursor = await db.execute(
                "SELECT * FROM condominiums WHERE id = ?", (condominium_id,)
            )
            row = await cursor.fetchone()
            return Condominium.from_row(row) if row else None
        finally:
            await db.close()

    async def list_active(self) -> list[Condominium]:
        db = await self._connect()
        try:
            cursor = await db.execute(
                "SELECT * FROM condominiums WHERE status = ? ORDER BY id", (STATUS_ACTIVE,)
            )
            rows = await cursor.fetchall()
            return [Condominium.from_row(row) for row in rows]
        finally:
            await db.close()


class UnitStore(BaseStore):
    async def add(self, unit: Unit) -> Unit:
        db = await self._connect()
        try:
            cursor = await db.execute(
                """
                INSERT INTO units (id, condominium_id, number, owner_id, base_fee)
                VALUES (?, ?, ?, ?, ?)
                """,
                (
                    unit.id,
                    unit.condominium_id,
                    unit.number,
                    unit.owner_id,
                    str(unit.base_fee) if unit.base_fee is not None else None,
                ),
            )
            await db.commit()
            unit.id = cursor.lastrowid
            return unit
        finally:
            await db.close()

    async def get(self, unit_id: int) -> Unit | None:
        db = await self._connect()
        try:
            cursor = await db.execute(
                f"""
                SELECT u.*, {OWNER_COLUMNS} FROM units u
                LEFT JOIN users o ON o.id = u.owner_id
                WHERE u.id = ?
                """,
                (unit_id,),
            )
            row = await cursor.fetchone()
            return Unit.from_row(row) if row else None
        finally:
            await db.close()

    async def list_by_condominium(self, condominium_id: int) -> list[Unit]:
        """Units of a condominium (with owners), ordered by ID."""
        db = await self._connect()
        try:
            cursor = await db.execute(
                f"""
                SELECT u.*, {OWNER_COLUMNS} FROM units u
                LEFT JOIN users o ON o.id = u.owner_id
                WHERE u.condominium_id = ?
                ORDER BY u.id
                """,
                (condominium_id,),
            )
            rows = await cursor.fetchall()
            return [Unit.from_row(row) for row in rows]
        finally:
            await db.close()
