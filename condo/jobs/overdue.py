"""Overdue-payment sweep: reclassify missed payments and escalate delinquency."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING

from condo.config import settings
from condo.models import (
    NOTIFICATION_URGENT,
    NOTIFICATION_WARNING,
    PAYMENT_OVERDUE,
    PAYMENT_PENDING,
    Notification,
)
from condo.scheduler.schedules import local_now

if TYPE_CHECKING:
    from condo.models import Payment
    from condo.stores import Repositories

logger = logging.getLogger(__name__)

OVERDUE_TITLE = "Overdue payment"
CRITICAL_OVERDUE_TITLE = "Critical overdue payment"
CRITICAL_AFTER_DAYS = 5
REMINDER_WINDOW_DAYS = 7


@dataclass
class SweepResult:
    """What one overdue sweep did."""

    marked_overdue: int = 0
    warnings_sent: int = 0
    urgent_sent: int = 0


def _owner_id(payment: Payment) -> int | None:
    if payment.unit is None or payment.unit.owner is None:
        return None
    return payment.unit.owner.id


async def sweep_overdue_payments(
    repos: Repositories,
    now: datetime | None = None,
    currency: str | None = None,
) -> SweepResult:
    """Mark yesterday's unpaid bills overdue and nag owners of critical ones.

    A critical reminder is skipped when the owner already received one
    mentioning the same payment description in the last seven days.
    """
    now = now or local_now()
    currency = currency or settings.currency_symbol
    today = now.date()
    result = SweepResult()

    yesterday = today - timedelta(days=1)
    missed = await repos.payments.find_by_due_date(yesterday, PAYMENT_PENDING)
    logger.info("Found %d payment(s) due %s still pending", len(missed), yesterday)

    for payment in missed:
        await repos.payments.set_status(payment.id, PAYMENT_OVERDUE)
        result.marked_overdue += 1

        owner_id = _owner_id(payment)
        if owner_id is None:
            continue
        await repos.notifications.add(
            Notification(
                user_id=owner_id,
                unit_id=payment.unit_id,
                title=OVERDUE_TITLE,
                message=(
                    f"Payment {payment.description} of {currency} {payment.amount:.2f} "
                    "was due yesterday and has not been recorded as paid."
                ),
                kind=NOTIFICATION_WARNING,
            )
        )
        result.warnings_sent += 1

    five_days_ago = today - timedelta(days=CRITICAL_AFTER_DAYS)
    critical = await repos.payments.find_due_before(five_days_ago, PAYMENT_OVERDUE)
    logger.info("Found %d payment(s) critically overdue", len(critical))

    since = (now - timedelta(days=REMINDER_WINDOW_DAYS)).astimezone(UTC).isoformat()
    for payment in critical:
        owner_id = _owner_id(payment)
        if owner_id is None:
            continue

        existing = await repos.notifications.find_recent(
            CRITICAL_OVERDUE_TITLE, owner_id, since, payment.description
        )
        if existing is not None:
            logger.debug("Owner %s already reminded about payment %s", owner_id, payment.id)
            continue

        await repos.notifications.add(
            Notification(
                user_id=owner_id,
                unit_id=payment.unit_id,
                title=CRITICAL_OVERDUE_TITLE,
                message=(
                    f"Payment {payment.description} of {currency} {payment.amount:.2f} "
                    f"is more than {CRITICAL_AFTER_DAYS} days overdue. Please settle it "
                    "as soon as possible to avoid additional fines."
                ),
                kind=NOTIFICATION_URGENT,
            )
        )
        result.urgent_sent += 1

    return result
