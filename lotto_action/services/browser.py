from __future__ import annotations

import asyncio
import logging
import sys

from lotto_action.errors import BootstrapError

logger = logging.getLogger(__name__)


async def install_browser(driver: str = "chromium") -> None:
    """Download the Playwright browser build the session will launch."""

    logger.info("Installing Playwright browser %s", driver)
    process = await asyncio.create_subprocess_exec(
        sys.executable,
        "-m",
        "playwright",
        "install",
        driver,
        stdout=asyncio.subprocess.PIPE,
        stderr=asyncio.subprocess.STDOUT,
    )
    output, _ = await process.communicate()
    if process.returncode != 0:
        tail = output.decode(errors="replace").strip().splitlines()[-5:]
        raise BootstrapError(f"Installing {driver} failed with exit code {process.returncode}: {' | '.join(tail)}")
    logger.debug("Playwright install output:\n%s", output.decode(errors="replace"))
