"""NotificationStore — aiosqlite access to the ``notifications`` table."""

from __future__ import annotations

import logging

from condo.models import Notification
from condo.stores.base import BaseStore

logger = logging.getLogger(__name__)


class NotificationStore(BaseStore):
    """Persists notifications created by the recurring jobs."""

    async def add(self, notification: Notification) -> Notification:
        """Insert a notification. Returns it with its ``id`` set."""
        db = await self._connect()
        try:
            cursor = await db.execute(
                """
                INSERT INTO notifications
                    (id, user_id, unit_id, title, message, kind, status, created_at)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    notification.id,
                    notification.user_id,
                    notification.unit_id,
                    notification.title,
                    notification.message,
                    notification.kind,
                    notification.status,
                    notification.created_at,
                ),
            )
            await db.commit()
            notification.id = cursor.lastrowid
        finally:
            await db.close()
        logger.debug(
            "Notification %s (%s) created for user %s",
            notification.id,
            notification.kind,
            notification.user_id,
        )
        return notification

    async def find_recent(
        self,
        title: str,
        user_id: int,
        since: str,
        message_contains: str,
    ) -> Notification | None:
        """Most recent notification with *title* for a user created after *since*.

        *since* is an ISO 8601 UTC timestamp.  Only notifications whose message
        contains *message_contains* (case-insensitive substring) qualify.
        """
        db = await self._connect()
        try:
            cursor = await db.execute(
                """
                SELECT * FROM notifications
                WHERE title = ? AND user_id = ? AND created_at > ?
                  AND instr(lower(message), lower(?)) > 0
                ORDER BY created_at DESC
                LIMIT 1
                """,
                (title, user_id, since, message_contains),
            )
            row = await cursor.fetchone()
            return Notification.from_row(row) if row else None
        finally:
            await db.close()

    async def list_for_user(self, user_id: int) -> list[Notification]:
        """All notifications of a user, oldest first."""
        db = await self._connect()
        try:
            cursor = await db.execute(
                "SELECT * FROM notifications WHERE user_id = ? ORDER BY created_at, id",
                (user_id,),
            )
            rows = await cursor.fetchall()
            return [Notification.from_row(row) for row in rows]
        finally:
            await db.close()

    async def count(self) -> int:
        """Total number of notifications."""
        db = await self._connect()
        try:
            cursor = await db.execute("SELECT COUNT(*) FROM notifications")
            row = await cursor.fetchone()
            return row[0]
        finally:
            await db.close()
