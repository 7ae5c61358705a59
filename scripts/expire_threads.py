#!/usr/bin/env python3
"""Expire inactive negotiation threads.

Meant to run from a scheduler (cron, k8s CronJob). Running it twice in a
row is harmless: the second run finds nothing to expire.
"""

import asyncio
import sys

import logfire

from barter.application.usecase.maintenance import (
    ExpireThreadsRequest,
    ExpireThreadsUseCase,
)
from barter.config import Settings
from barter.util.di.container import create_container
from barter.util.logging import setup_logging
from barter.util.observability import configure_logfire


async def run() -> int:
    """Run a single sweep and return the number of expired threads."""
    container = create_container()
    try:
        async with container() as request_container:
            use_case = await request_container.get(ExpireThreadsUseCase)
            response = await use_case.execute(ExpireThreadsRequest())
            return response.expired_count
    finally:
        await container.close()


def main() -> int:
    """Run the sweep and log any errors to Logfire."""
    settings = Settings()

    configure_logfire(settings)
    setup_logging(settings)

    try:
        logfire.info("Starting stale thread sweep")
        expired = asyncio.run(run())
        logfire.info("Stale thread sweep completed", expired_count=expired)
        return 0

    except Exception as e:
        logfire.error(
            "Stale thread sweep failed",
            error=str(e),
            error_type=type(e).__name__,
            _exc_info=sys.exc_info(),
        )
        raise


if __name__ == "__main__":
    sys.exit(main())
