"""SupplierStore and ContractStore."""

from __future__ import annotations

from typing import TYPE_CHECKING

from condo.models import CONTRACT_ACTIVE, Contract, Supplier
from condo.stores.base import CONDOMINIUM_COLUMNS, BaseStore

if TYPE_CHECKING:
    from datetime import date


class SupplierStore(BaseStore):
    async def add(self, supplier: Supplier) -> Supplier:
        db = await self._connect()
        try:
            cursor = await db.execute(
                "INSERT INTO suppliers (id, name) VALUES (?, ?)", (supplier.id, supplier.name)
            )
            await db.commit()
            supplier.id = cursor.lastrowid
            return supplier
        finally:
            await db.close()


class ContractStore(BaseStore):
    """Contracts with their supplier and condominium eager-loaded on reads."""

    async def add(self, contract: Contract) -> Contract:
        db = await self._connect()
        try:
            cursor = await db.execute(
                """
                INSERT INTO contracts
                    (id, condominium_id, supplier_id, number, description, end_date, status)
                VALUES (?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    contract.id,
                    contract.condominium_id,
                    contract.supplier_id,
                    contract.number,
                    contract.description,
                    contract.end_date.isoformat(),
                    contract.status,
                ),
            )
            await db.commit()
            contract.id = cursor.lastrowid
            return contract
        finally:
            await db.close()

    async def find_expiring(
        self, start: date, end: date, status: str = CONTRACT_ACTIVE
    ) -> list[Contract]:
        """Contracts with *status* whose end date falls in ``[start, end]``."""
        db = await self._connect()
        try:
            cursor = await db.execute(
                f"""
                SELECT k.*, s.id AS supplier__id, s.name AS supplier__name,
                       {CONDOMINIUM_COLUMNS}
                FROM contracts k
                LEFT JOIN suppliers s ON s.id = k.supplier_id
                LEFT JOIN condominiums c ON c.id = k.condominium_id
                WHERE k.status = ? AND k.end_date BETWEEN ? AND ?
                ORDER BY k.end_date, k.id
                """,
                (status, start.isoformat(), end.isoformat()),
            )
            rows = await cursor.fetchall()
            return [Contract.from_row(row) for row in rows]
        finally:
            await db.close()
