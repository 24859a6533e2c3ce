"""Contract-expiry sweep."""

from __future__ import annotations

import logging
from datetime import timedelta
from typing import TYPE_CHECKING

from condo.models import CONTRACT_ACTIVE, NOTIFICATION_URGENT, NOTIFICATION_WARNING, Notification
from condo.scheduler.schedules import local_now

if TYPE_CHECKING:
    from datetime import datetime

    from condo.stores import Repositories

logger = logging.getLogger(__name__)

EXPIRY_TITLE = "Contract nearing expiry"
EXPIRY_WINDOW_DAYS = 30
URGENT_WITHIN_DAYS = 7


async def sweep_expiring_contracts(repos: Repositories, now: datetime | None = None) -> int:
    """Warn every admin and manager about active contracts ending within 30 days.

    Each run notifies again for every contract still in the window; there is
    no suppression of earlier weeks' notifications.  Returns the number of
    notifications created.
    """
    today = (now or local_now()).date()
    contracts = await repos.contracts.find_expiring(
        today, today + timedelta(days=EXPIRY_WINDOW_DAYS), CONTRACT_ACTIVE
    )
    logger.info("Found %d contract(s) expiring soon", len(contracts))
    if not contracts:
        return 0

    staff = await repos.users.list_staff()
    created = 0
    for contract in contracts:
        days_left = (contract.end_date - today).days
        kind = NOTIFICATION_URGENT if days_left <= URGENT_WITHIN_DAYS else NOTIFICATION_WARNING
        supplier = contract.supplier.name if contract.supplier else "unknown supplier"
        for user in staff:
            await repos.notifications.add(
                Notification(
                    user_id=user.id,
                    title=EXPIRY_TITLE,
                    message=(
                        f"Contract {contract.number} with {supplier} for "
                        f'"{contract.description}" expires in {days_left} days '
                        f"({contract.end_date.isoformat()})."
                    ),
                    kind=kind,
                )
            )
            created += 1
    return created
