"""Automation session driving the lottery site with a Playwright browser."""

from __future__ import annotations

import logging
from typing import Sequence

from playwright.async_api import Browser, Page, Playwright, async_playwright
from playwright.async_api import Error as PlaywrightError

from lotto_action.tickets.models import Combination

from .results import DrawResultClient, rank_combination, validate_combination
from .session import CheckResult, PurchaseRejectedError, SessionConfig, SessionError, SignInError

logger = logging.getLogger(__name__)

LOGIN_URL = "https://dhlottery.co.kr/user.do?method=login"
PURCHASE_URL = "https://ol.dhlottery.co.kr/olotto/game/game645.do"
CHECKING_URL = "https://dhlottery.co.kr/qr.do?method=winQr&v="

_SELECTORS = {
    "login_id": "#userId",
    "login_password": "input[name='password']",
    "login_submit": ".btn_common.lrg.blu",
    "logout": "a[href*='logout']",
    "auto_numbers": "#num2",
    "amount": "#amoundApply",
    "select_numbers": "#btnSelectNum",
    "buy": "#btnBuy",
    "confirm": "#popupLayerConfirm input[value='확인']",
    "alert": "#popupLayerAlert",
    "receipt_rows": "#reportRow li",
    "receipt_numbers": ".nums span",
}


class PlaywrightLottoSession:
    """Single browser session used for sign-in and purchases; result checks go through the result API."""

    def __init__(self, config: SessionConfig | None = None, *, results: DrawResultClient | None = None) -> None:
        self._config = config or SessionConfig()
        self._results = results or DrawResultClient()
        self._playwright: Playwright | None = None
        self._browser: Browser | None = None
        self._page: Page | None = None
        self._signed_in = False

    @property
    def signed_in(self) -> bool:
        return self._signed_in

    async def _ensure_page(self) -> Page:
        if self._page is None:
            self._playwright = await async_playwright().start()
            browser_type = getattr(self._playwright, self._config.driver, None)
            if browser_type is None:
                raise SessionError(f"Unknown browser driver {self._config.driver!r}")
            self._browser = await browser_type.launch(
                headless=self._config.headless,
                args=list(self._config.launch_args),
            )
            context = await self._browser.new_context()
            self._page = await context.new_page()
            logger.log(
                self._config.log_level,
                "Launched %s (headless=%s)",
                self._config.driver,
                self._config.headless,
            )
        return self._page

    async def sign_in(self, user_id: str, password: str) -> None:
        page = await self._ensure_page()
        try:
            await page.goto(LOGIN_URL)
            await page.fill(_SELECTORS["login_id"], user_id)
            await page.fill(_SELECTORS["login_password"], password)
            await page.click(_SELECTORS["login_submit"])
            await page.wait_for_load_state("networkidle")
            logged_in = await page.locator(_SELECTORS["logout"]).count() > 0
        except PlaywrightError as exc:
            raise SignInError(f"Sign-in flow failed: {exc}") from exc
        if not logged_in:
            raise SignInError("The lottery site rejected the credentials")
        self._signed_in = True
        logger.info("Signed in to the lottery site")

    async def check(self, combination: Combination, round_number: int) -> CheckResult:
        winning = await self._results.winning_numbers(round_number)
        result = rank_combination(combination, winning)
        logger.log(self._config.log_level, "Round %d %s -> rank %d", round_number, list(combination), int(result.rank))
        return result

    async def purchase(self, amount: int) -> list[list[int]]:
        page = await self._ensure_page()
        try:
            await page.goto(PURCHASE_URL)
            await page.click(_SELECTORS["auto_numbers"])
            await page.select_option(_SELECTORS["amount"], str(amount))
            await page.click(_SELECTORS["select_numbers"])
            await page.click(_SELECTORS["buy"])
            await page.click(_SELECTORS["confirm"])
            await page.wait_for_load_state("networkidle")

            alert = page.locator(_SELECTORS["alert"])
            if await alert.is_visible():
                raise PurchaseRejectedError(f"Purchase rejected: {(await alert.inner_text()).strip()}")

            rows = page.locator(_SELECTORS["receipt_rows"])
            numbers: list[list[int]] = []
            for index in range(await rows.count()):
                texts = await rows.nth(index).locator(_SELECTORS["receipt_numbers"]).all_inner_texts()
                numbers.append(list(validate_combination([int(text) for text in texts])))
        except PlaywrightError as exc:
            raise PurchaseRejectedError(f"Purchase flow failed: {exc}") from exc
        except ValueError as exc:
            raise PurchaseRejectedError(f"Unreadable purchase receipt: {exc}") from exc

        if len(numbers) != amount:
            raise PurchaseRejectedError(f"Expected {amount} combinations on the receipt, found {len(numbers)}")
        logger.info("Purchased %d combinations", amount)
        return numbers

    def checking_link(self, round_number: int, combinations: Sequence[Combination]) -> str:
        encoded = "q".join("".join(f"{number:02d}" for number in combination) for combination in combinations)
        return f"{CHECKING_URL}{round_number:04d}q{encoded}"

    async def release(self) -> None:
        try:
            if self._browser is not None:
                await self._browser.close()
            if self._playwright is not None:
                await self._playwright.stop()
        finally:
            self._page = None
            self._browser = None
            self._playwright = None
            self._signed_in = False
            await self._results.close()
        logger.log(self._config.log_level, "Automation session released")
