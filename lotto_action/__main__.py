"""Entry point for the scheduled workflow step.

Usage:
    python -m lotto_action

The process always exits with status 0; a failed run is reported to the
workflow through an ``::error::`` command instead.
"""

from __future__ import annotations

import asyncio
import logging
import sys

from lotto_action.core.actions import add_mask, set_failed
from lotto_action.core.clock import ClockConfig
from lotto_action.core.config import Settings, get_settings
from lotto_action.core.logging import configure_logging, init_tracer, shutdown_tracer
from lotto_action.services.runner import RunController, RunOutcome
from lotto_action.tickets.repository import GitHubTicketStore

logger = logging.getLogger(__name__)


async def run(settings: Settings) -> RunOutcome:
    clock = ClockConfig(timezone=settings.timezone)
    store = GitHubTicketStore(
        settings.github_repository,
        token=settings.github_token,
        api_url=settings.github_api_url,
    )
    try:
        return await RunController(settings, store, clock=clock).run()
    finally:
        await store.close()


def main() -> None:
    settings = get_settings()
    for secret in (settings.lotto_password, settings.github_token):
        add_mask(secret)
    configure_logging(settings)
    tracer_provider = init_tracer(settings)
    try:
        outcome = asyncio.run(run(settings))
        logger.info("Run finished (success=%s)", outcome.success)
    except Exception as exc:
        logger.exception("Run could not start")
        set_failed(str(exc))
    finally:
        shutdown_tracer(tracer_provider)
    sys.exit(0)


if __name__ == "__main__":
    main()
