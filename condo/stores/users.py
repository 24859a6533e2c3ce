"""UserStore — residents and staff."""

from __future__ import annotations

from condo.models import STAFF_ROLES, STATUS_ACTIVE, User
from condo.stores.base import BaseStore


class UserStore(BaseStore):
    async def add(self, user: User) -> User:
        db = await self._connect()
        try:
            cursor = await db.execute(
                "INSERT INTO users (id, name, email, role, status) VALUES (?, ?, ?, ?, ?)",
                (user.id, user.name, user.email, user.role, user.status),
            )
            await db.commit()
            user.id = cursor.lastrowid
            return user
        finally:
            await db.close()

    async def get(self, user_id: int) -> User | None:
        db = await self._connect()
        try:
            cursor = await db.execute("SELECT * FROM users WHERE id = ?", (user_id,))
            row = await cursor.fetchone()
            return User.from_row(row) if row else None
        finally:
            await db.close()

    async def list_staff(self) -> list[User]:
        """Active users with an admin or manager role."""
        db = await self._connect()
        try:
            placeholders = ", ".join("?" for _ in STAFF_ROLES)
            cursor = await db.execute(
                f"SELECT * FROM users WHERE role IN ({placeholders}) AND status = ? ORDER BY id",
                (*STAFF_ROLES, STATUS_ACTIVE),
            )
            rows = await cursor.fetchall()
            return [User.from_row(row) for row in rows]
        finally:
            await db.close()
