"""Worker process that keeps every user's current-year balances provisioned.

Runs an asyncio loop; each pass creates whatever balance rows are missing for
today's calendar year, so the first pass after New Year opens the new year.
"""

from __future__ import annotations

import asyncio
import logging
from datetime import date

from leave_portal.config import get_settings
from leave_portal.db import session_scope
from leave_portal.services.balance import provision_year_for_all_users

logger = logging.getLogger(__name__)


async def run_provisioning_once(today: date | None = None) -> int:
    """Provision ``today``'s year for all users. Returns the number of rows created."""
    year = (today or date.today()).year
    async with session_scope() as session:
        created = await provision_year_for_all_users(session, year)
    logger.info("Provisioning run for %d complete: created=%d", year, created)
    return created


async def run_provisioning_loop() -> None:
    """Main worker loop."""
    interval = get_settings().provisioning_interval_seconds
    logger.info("Provisioning worker started (interval=%ds)", interval)

    while True:
        try:
            await run_provisioning_once()
        except Exception:
            logger.exception("Provisioning run failed")
        await asyncio.sleep(interval)


def main() -> None:
    """Entry point for the worker process."""
    logging.basicConfig(level=get_settings().log_level, format="%(asctime)s %(name)s %(levelname)s %(message)s")
    asyncio.run(run_provisioning_loop())


if __name__ == "__main__":
    main()
