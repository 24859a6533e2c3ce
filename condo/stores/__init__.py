"""Async stores over the back office database, bundled for the recurring jobs."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from condo.stores.condominiums import CondominiumStore, UnitStore
from condo.stores.contracts import ContractStore, SupplierStore
from condo.stores.inventory import InventoryStore
from condo.stores.notifications import NotificationStore
from condo.stores.payments import PaymentStore
from condo.stores.users import UserStore

if TYPE_CHECKING:
    from pathlib import Path


@dataclass
class Repositories:
    """The stores a job handler may read from or write to."""

    users: UserStore
    condominiums: CondominiumStore
    units: UnitStore
    suppliers: SupplierStore
    payments: PaymentStore
    contracts: ContractStore
    inventory: InventoryStore
    notifications: NotificationStore

    @classmethod
    def open(cls, db_path: Path | None = None) -> Repositories:
        """Build every store over the same database file."""
        return cls(
            users=UserStore(db_path),
            condominiums=CondominiumStore(db_path),
            units=UnitStore(db_path),
            suppliers=SupplierStore(db_path),
            payments=PaymentStore(db_path),
            contracts=ContractStore(db_path),
            inventory=InventoryStore(db_path),
            notifications=NotificationStore(db_path),
        )


__all__ = [
    "CondominiumStore",
    "ContractStore",
    "InventoryStore",
    "NotificationStore",
    "PaymentStore",
    "Repositories",
    "SupplierStore",
    "UnitStore",
    "UserStore",
]
