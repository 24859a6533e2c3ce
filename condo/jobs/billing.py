"""Monthly billing generator."""

from __future__ import annotations

import logging
from datetime import date
from typing import TYPE_CHECKING

from condo.models import PAYMENT_PENDING, PAYMENT_TYPE_CONDOMINIUM, Payment
from condo.scheduler.schedules import local_now

if TYPE_CHECKING:
    from datetime import datetime

    from condo.stores import Repositories

logger = logging.getLogger(__name__)

DUE_DAY = 10


async def generate_monthly_bills(repos: Repositories, now: datetime | None = None) -> int:
    """Create the current month's condominium bill for every unit with a base fee.

    Units that already have a bill for the month, and units without a base
    fee, are skipped.  Safe to re-run within a month.  Returns the number of
    payments created.
    """
    today = (now or local_now()).date()
    month, year = today.month, today.year
    due_date = date(year, month, DUE_DAY)

    condominiums = await repos.condominiums.list_active()
    logger.info(
        "Generating %d/%d bills for %d condominium(s)", month, year, len(condominiums)
    )

    created = 0
    for condominium in condominiums:
        units = await repos.units.list_by_condominium(condominium.id)
        for unit in units:
            if not unit.base_fee:
                continue
            existing = await repos.payments.find_for_reference(
                unit.id, PAYMENT_TYPE_CONDOMINIUM, month, year
            )
            if existing is not None:
                continue

            payment = await repos.payments.add(
                Payment(
                    unit_id=unit.id,
                    type=PAYMENT_TYPE_CONDOMINIUM,
                    description=f"Condominium fee {unit.number} - {month}/{year}",
                    amount=unit.base_fee,
                    due_date=due_date,
                    status=PAYMENT_PENDING,
                    reference_month=month,
                    reference_year=year,
                )
            )
            if payment is not None:
                created += 1

    logger.info("Monthly billing finished, %d payment(s) created", created)
    return created
