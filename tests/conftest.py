"""Shared test fixtures."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import TYPE_CHECKING

import pytest

from condo.models import (
    PAYMENT_PENDING,
    PAYMENT_TYPE_CONDOMINIUM,
    STATUS_ACTIVE,
    USER_ROLE_ADMIN,
    USER_ROLE_MANAGER,
    USER_ROLE_RESIDENT,
    Condominium,
    Payment,
    Unit,
    User,
)
from condo.stores import Repositories

if TYPE_CHECKING:
    from pathlib import Path


@dataclass
class Seed:
    """Shortcuts for putting domain rows into a test database."""

    repos: Repositories

    async def user(
        self, name: str = "Owner", role: str = USER_ROLE_RESIDENT, status: str = STATUS_ACTIVE
    ) -> User:
        return await self.repos.users.add(
            User(name=name, role=role, status=status, email=f"{name.lower()}@example.com")
        )

    async def staff(self) -> list[User]:
        admin = await self.user("Admin", role=USER_ROLE_ADMIN)
        manager = await self.user("Manager", role=USER_ROLE_MANAGER)
        return [admin, manager]

    async def condominium(
        self, name: str = "Residencial X", status: str = STATUS_ACTIVE
    ) -> Condominium:
        return await self.repos.condominiums.add(Condominium(name=name, status=status))

    async def unit(
        self,
        condominium: Condominium,
        number: str = "101",
        owner: User | None = None,
        base_fee: Decimal | None = Decimal("500"),
        unit_id: int | None = None,
    ) -> Unit:
        return await self.repos.units.add(
            Unit(
                id=unit_id,
                condominium_id=condominium.id,
                number=number,
                owner_id=owner.id if owner else None,
                base_fee=base_fee,
            )
        )

    async def payment(
        self,
        unit: Unit,
        due_date: date,
        status: str = PAYMENT_PENDING,
        description: str | None = None,
        amount: Decimal = Decimal("500"),
        payment_type: str = PAYMENT_TYPE_CONDOMINIUM,
    ) -> Payment:
        default_description = f"Condominium fee {unit.number} - {due_date.month}/{due_date.year}"
        payment = await self.repos.payments.add(
            Payment(
                unit_id=unit.id,
                type=payment_type,
                description=description or default_description,
                amount=amount,
                due_date=due_date,
                status=status,
                reference_month=due_date.month,
                reference_year=due_date.year,
            )
        )
        assert payment is not None
        return payment


@pytest.fixture
def db_path(tmp_path: Path) -> Path:
    return tmp_path / "test.db"


@pytest.fixture
def repos(db_path: Path) -> Repositories:
    return Repositories.open(db_path)


@pytest.fixture
def seed(repos: Repositories) -> Seed:
    return Seed(repos)
