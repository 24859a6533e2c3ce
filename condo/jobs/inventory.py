"""Low-stock sweep."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from condo.models import NOTIFICATION_WARNING, Notification

if TYPE_CHECKING:
    from condo.stores import Repositories

logger = logging.getLogger(__name__)

LOW_STOCK_TITLE = "Low stock"


async def sweep_low_stock(repos: Repositories) -> int:
    """Warn every admin and manager about available items under their minimum stock.

    Returns the number of notifications created.
    """
    items = await repos.inventory.find_below_minimum()
    logger.info("Found %d item(s) with low stock", len(items))
    if not items:
        return 0

    staff = await repos.users.list_staff()
    created = 0
    for item in items:
        message = (
            f'Item "{item.name}" is low on stock. Current: {item.quantity}, '
            f"minimum: {item.minimum_stock}. Condominium: {item.condominium.name}."
        )
        for user in staff:
            await repos.notifications.add(
                Notification(
                    user_id=user.id,
                    title=LOW_STOCK_TITLE,
                    message=message,
                    kind=NOTIFICATION_WARNING,
                )
            )
            created += 1
    return created
