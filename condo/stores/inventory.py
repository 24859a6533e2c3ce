"""InventoryStore — stock items per condominium."""

from __future__ import annotations

from condo.models import INVENTORY_AVAILABLE, InventoryItem
from condo.stores.base import CONDOMINIUM_COLUMNS, BaseStore


class InventoryStore(BaseStore):
    async def add(self, item: InventoryItem) -> InventoryItem:
        db = await self._connect()
        try:
            cursor = await db.execute(
                """
                INSERT INTO inventory_items
                    (id, condominium_id, name, quantity, minimum_stock, status)
                VALUES (?, ?, ?, ?, ?, ?)
                """,
                (
                    item.id,
                    item.condominium_id,
                    item.name,
                    item.quantity,
                    item.minimum_stock,
                    item.status,
                ),
            )
            await db.commit()
            item.id = cursor.lastrowid
            return item
        finally:
            await db.close()

    async def find_below_minimum(self) -> list[InventoryItem]:
        """Available items with a positive minimum and a quantity under it."""
        db = await self._connect()
        try:
            cursor = await db.execute(
                f"""
                SELECT i.*, {CONDOMINIUM_COLUMNS}
                FROM inventory_items i
                LEFT JOIN condominiums c ON c.id = i.condominium_id
                WHERE i.status = ? AND i.minimum_stock > 0 AND i.quantity < i.minimum_stock
                ORDER BY i.id
                """,
                (INVENTORY_AVAILABLE,),
            )
            rows = await cursor.fetchall()
            return [InventoryItem.from_row(row) for row in rows]
        finally:
            await db.close()
