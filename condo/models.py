"""Back office entities consumed and produced by the recurring jobs.

Rows come back from SQLite as ``aiosqlite.Row`` objects.  Joined queries
alias the columns of an associated table with a prefix (``unit__id``,
``owner__name``) so that ``from_row(row, prefix=...)`` can rebuild the
eager-loaded entity from the same row.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, date, datetime
from decimal import Decimal
from typing import Any

# -- Vocabularies --------------------------------------------------------------

USER_ROLE_ADMIN = "admin"
USER_ROLE_MANAGER = "manager"
USER_ROLE_RESIDENT = "resident"
STAFF_ROLES = (USER_ROLE_ADMIN, USER_ROLE_MANAGER)

STATUS_ACTIVE = "active"
STATUS_INACTIVE = "inactive"

PAYMENT_PENDING = "pending"
PAYMENT_PAID = "paid"
PAYMENT_OVERDUE = "overdue"
PAYMENT_CANCELLED = "cancelled"

PAYMENT_TYPE_CONDOMINIUM = "condominium"
PAYMENT_TYPE_EXTRA = "extra"
PAYMENT_TYPE_FINE = "fine"
PAYMENT_TYPE_OTHER = "other"

CONTRACT_ACTIVE = "active"
CONTRACT_EXPIRED = "expired"
CONTRACT_CANCELLED = "cancelled"

INVENTORY_AVAILABLE = "available"
INVENTORY_UNAVAILABLE = "unavailable"

NOTIFICATION_INFO = "info"
NOTIFICATION_WARNING = "warning"
NOTIFICATION_URGENT = "urgent"
NOTIFICATION_SYSTEM = "system"
NOTIFICATION_KINDS = (
    NOTIFICATION_INFO,
    NOTIFICATION_WARNING,
    NOTIFICATION_URGENT,
    NOTIFICATION_SYSTEM,
)

NOTIFICATION_SENT = "sent"
NOTIFICATION_READ = "read"


# -- Helpers -------------------------------------------------------------------


def _has(row: Any, key: str) -> bool:
    return key in row.keys() and row[key] is not None


def _date(value: str | None) -> date | None:
    return date.fromisoformat(value) if value else None


def _decimal(value: str | None) -> Decimal | None:
    return Decimal(value) if value is not None else None


def utc_now_iso() -> str:
    """Current UTC time as an ISO 8601 string (the ``created_at`` format)."""
    return datetime.now(UTC).isoformat()


# -- Entities ------------------------------------------------------------------


@dataclass
class User:
    name: str
    role: str = USER_ROLE_RESIDENT
    email: str = ""
    status: str = STATUS_ACTIVE
    id: int | None = None

    @classmethod
    def from_row(cls, row: Any, prefix: str = "") -> User:
        return cls(
            id=row[f"{prefix}id"],
            name=row[f"{prefix}name"],
            email=row[f"{prefix}email"],
            role=row[f"{prefix}role"],
            status=row[f"{prefix}status"],
        )


@dataclass
class Condominium:
    name: str
    status: str = STATUS_ACTIVE
    id: int | None = None

    @classmethod
    def from_row(cls, row: Any, prefix: str = "") -> Condominium:
        return cls(
            id=row[f"{prefix}id"],
            name=row[f"{prefix}name"],
            status=row[f"{prefix}status"],
        )


@dataclass
class Unit:
    """A unit of a condominium.

    Attributes:
        base_fee: Recurring condominium charge. ``None`` means no monthly
            bill is generated for the unit.
        owner: Eager-loaded owner, populated only by joined queries.
    """

    condominium_id: int
    number: str
    owner_id: int | None = None
    base_fee: Decimal | None = None
    id: int | None = None
    owner: User | None = None

    @classmethod
    def from_row(cls, row: Any, prefix: str = "") -> Unit:
        owner = None
        if _has(row, "owner__id"):
            owner = User.from_row(row, prefix="owner__")
        return cls(
            id=row[f"{prefix}id"],
            condominium_id=row[f"{prefix}condominium_id"],
            number=row[f"{prefix}number"],
            owner_id=row[f"{prefix}owner_id"],
            base_fee=_decimal(row[f"{prefix}base_fee"]),
            owner=owner,
        )


@dataclass
class Supplier:
    name: str
    id: int | None = None

    @classmethod
    def from_row(cls, row: Any, prefix: str = "") -> Supplier:
        return cls(id=row[f"{prefix}id"], name=row[f"{prefix}name"])


@dataclass
class Payment:
    """A bill owed by a unit.

    Attributes:
        reference_month: 1-12, the billing month the payment refers to.
        unit: Eager-loaded unit (with its owner) for sweep queries.
    """

    unit_id: int
    amount: Decimal
    due_date: date
    reference_month: int
    reference_year: int
    type: str = PAYMENT_TYPE_CONDOMINIUM
    description: str = ""
    status: str = PAYMENT_PENDING
    paid_date: date | None = None
    created_at: str = ""
    id: int | None = None
    unit: Unit | None = None

    def __post_init__(self) -> None:
        if not self.created_at:
            self.created_at = utc_now_iso()

    @classmethod
    def from_row(cls, row: Any) -> Payment:
        unit = None
        if _has(row, "unit__id"):
            unit = Unit.from_row(row, prefix="unit__")
        return cls(
            id=row["id"],
            unit_id=row["unit_id"],
            type=row["type"],
            description=row["description"],
            amount=Decimal(row["amount"]),
            due_date=date.fromisoformat(row["due_date"]),
            paid_date=_date(row["paid_date"]),
            status=row["status"],
            reference_month=row["reference_month"],
            reference_year=row["reference_year"],
            created_at=row["created_at"],
            unit=unit,
        )


@dataclass
class Contract:
    condominium_id: int
    supplier_id: int
    number: str
    end_date: date
    description: str = ""
    status: str = CONTRACT_ACTIVE
    id: int | None = None
    supplier: Supplier | None = None
    condominium: Condominium | None = None

    @classmethod
    def from_row(cls, row: Any) -> Contract:
        supplier = Supplier.from_row(row, "supplier__") if _has(row, "supplier__id") else None
        condominium = (
            Condominium.from_row(row, "condominium__") if _has(row, "condominium__id") else None
        )
        return cls(
            id=row["id"],
            condominium_id=row["condominium_id"],
            supplier_id=row["supplier_id"],
            number=row["number"],
            description=row["description"],
            end_date=date.fromisoformat(row["end_date"]),
            status=row["status"],
            supplier=supplier,
            condominium=condominium,
        )


@dataclass
class InventoryItem:
    condominium_id: int
    name: str
    quantity: int = 0
    minimum_stock: int = 0
    status: str = INVENTORY_AVAILABLE
    id: int | None = None
    condominium: Condominium | None = None

    @classmethod
    def from_row(cls, row: Any) -> InventoryItem:
        condominium = (
            Condominium.from_row(row, "condominium__") if _has(row, "condominium__id") else None
        )
        return cls(
            id=row["id"],
            condominium_id=row["condominium_id"],
            name=row["name"],
            quantity=row["quantity"],
            minimum_stock=row["minimum_stock"],
            status=row["status"],
            condominium=condominium,
        )


@dataclass
class Notification:
    user_id: int
    title: str
    message: str
    kind: str = NOTIFICATION_INFO
    unit_id: int | None = None
    status: str = NOTIFICATION_SENT
    created_at: str = ""
    id: int | None = None

    def __post_init__(self) -> None:
        if self.kind not in NOTIFICATION_KINDS:
            msg = f"Unknown notification kind: {self.kind}"
            raise ValueError(msg)
        if not self.created_at:
            self.created_at = utc_now_iso()

    @classmethod
    def from_row(cls, row: Any) -> Notification:
        return cls(
            id=row["id"],
            user_id=row["user_id"],
            unit_id=row["unit_id"],
            title=row["title"],
            message=row["message"],
            kind=row["kind"],
            status=row["status"],
            created_at=row["created_at"],
        )
