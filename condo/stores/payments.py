"""PaymentStore — aiosqlite access to the ``payments`` table."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import aiosqlite

from condo.models import Payment
from condo.stores.base import OWNER_COLUMNS, UNIT_COLUMNS, BaseStore

if TYPE_CHECKING:
    from datetime import date

logger = logging.getLogger(__name__)

_SELECT_WITH_UNIT = f"""
SELECT p.*, {UNIT_COLUMNS}, {OWNER_COLUMNS}
FROM payments p
LEFT JOIN units u ON u.id = p.unit_id
LEFT JOIN users o ON o.id = u.owner_id
"""


class PaymentStore(BaseStore):
    """Persists payments and answers the date/status queries of the sweeps."""

    async def add(self, payment: Payment) -> Payment | None:
        """Insert a payment and return it with its ``id`` set.

        Returns ``None`` when the insert collides with the one-bill-per-month
        unique index, i.e. the condominium bill for that unit and reference
        month already exists.
        """
        db = await self._connect()
        try:
            cursor = await db.execute(
                """
                INSERT INTO payments
                    (id, unit_id, type, description, amount, due_date, paid_date,
                     status, reference_month, reference_year, created_at)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    payment.id,
                    payment.unit_id,
                    payment.type,
                    payment.description,
                    str(payment.amount),
                    payment.due_date.isoformat(),
                    payment.paid_date.isoformat() if payment.paid_date else None,
                    payment.status,
                    payment.reference_month,
                    payment.reference_year,
                    payment.created_at,
                ),
            )
            await db.commit()
            payment.id = cursor.lastrowid
        except aiosqlite.IntegrityError as exc:
            # Only the one-bill-per-month index means "already exists"
            if "payments.unit_id" not in str(exc):
                raise
            logger.info(
                "Payment already exists for unit %s (%s %d/%d)",
                payment.unit_id,
                payment.type,
                payment.reference_month,
                payment.reference_year,
            )
            return None
        finally:
            await db.close()
        return payment

    async def get(self, payment_id: int) -> Payment | None:
        """Fetch a payment (with unit and owner) by ID, or None if not found."""
        db = await self._connect()
        try:
            cursor = await db.execute(f"{_SELECT_WITH_UNIT} WHERE p.id = ?", (payment_id,))
            row = await cursor.fetchone()
            return Payment.from_row(row) if row else None
        finally:
            await db.close()

    async def find_by_due_date(self, due_date: date, status: str) -> list[Payment]:
        """Payments due exactly on *due_date* with the given status."""
        db = await self._connect()
        try:
            cursor = await db.execute(
                f"{_SELECT_WITH_UNIT} WHERE p.due_date = ? AND p.status = ? ORDER BY p.id",
                (due_date.isoformat(), status),
            )
            rows = await cursor.fetchall()
            return [Payment.from_row(row) for row in rows]
        finally:
            await db.close()

    async def find_due_before(self, cutoff: date, status: str) -> list[Payment]:
        """Payments due strictly before *cutoff* with the given status."""
        db = await self._connect()
        try:
            cursor = await db.execute(
                f"{_SELECT_WITH_UNIT} WHERE p.due_date < ? AND p.status = ? ORDER BY p.id",
                (cutoff.isoformat(), status),
            )
            rows = await cursor.fetchall()
            return [Payment.from_row(row) for row in rows]
        finally:
            await db.close()

    async def find_for_reference(
        self, unit_id: int, payment_type: str, month: int, year: int
    ) -> Payment | None:
        """The payment of *payment_type* billed to a unit for a reference month, if any."""
        db = await self._connect()
        try:
            cursor = await db.execute(
                """
                SELECT * FROM payments
                WHERE unit_id = ? AND type = ? AND reference_month = ? AND reference_year = ?
                LIMIT 1
                """,
                (unit_id, payment_type, month, year),
            )
            row = await cursor.fetchone()
            return Payment.from_row(row) if row else None
        finally:
            await db.close()

    async def set_status(self, payment_id: int, status: str) -> bool:
        """Update a payment's status. Returns True if a row was updated."""
        db = await self._connect()
        try:
            cursor = await db.execute(
                "UPDATE payments SET status = ? WHERE id = ?", (status, payment_id)
            )
            await db.commit()
            return cursor.rowcount > 0
        finally:
            await db.close()

    async def list_for_unit(self, unit_id: int) -> list[Payment]:
        """All payments of a unit, oldest due date first."""
        db = await self._connect()
        try:
            cursor = await db.execute(
                "SELECT * FROM payments WHERE unit_id = ? ORDER BY due_date, id", (unit_id,)
            )
            rows = await cursor.fetchall()
            return [Payment.from_row(row) for row in rows]
        finally:
            await db.close()
