"""Page renderer: the Playwright calls capture needs, with failures classified."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from playwright.async_api import Browser, Page, Playwright, async_playwright
from playwright.async_api import Error as PlaywrightError
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from src.errors import (
    CaptureError,
    InteractionError,
    NavigationError,
    SelectorNotFoundError,
    SelectorNotVisibleError,
)
from src.models.config import EventKind, Viewport

logger = logging.getLogger(__name__)

DEFAULT_NAVIGATION_TIMEOUT_MS = 30000


class PlaywrightRenderer:
    """Owns one Chromium instance for the duration of a capture run.

    Use as an async context manager; the browser is closed on exit no
    matter how the block is left.
    """

    def __init__(
        self,
        headless: bool = True,
        timeout_ms: int = 10000,
        navigation_timeout_ms: int = DEFAULT_NAVIGATION_TIMEOUT_MS,
        user_agent: Optional[str] = None,
    ):
        self.headless = headless
        self.timeout_ms = timeout_ms
        self.navigation_timeout_ms = navigation_timeout_ms
        self.user_agent = user_agent
        self._playwright: Playwright | None = None
        self._browser: Browser | None = None

    async def __aenter__(self) -> "PlaywrightRenderer":
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    async def start(self) -> None:
        logger.debug("Launching Chromium (headless=%s)...", self.headless)
        self._playwright = await async_playwright().start()
        try:
            self._browser = await self._playwright.chromium.launch(
                headless=self.headless,
                args=["--disable-blink-features=AutomationControlled"],
            )
        except PlaywrightError as e:
            await self.close()
            raise CaptureError(f"Could not launch browser: {e.message}") from e

    async def close(self) -> None:
        try:
            if self._browser is not None:
                await self._browser.close()
        except PlaywrightError as e:
            raise CaptureError(f"Could not close browser: {e.message}") from e
        finally:
            self._browser = None
            playwright, self._playwright = self._playwright, None
            if playwright is not None:
                try:
                    await playwright.stop()
                except PlaywrightError as e:
                    logger.warning("Playwright did not stop cleanly: %s", e.message)

    async def open_surface(self, viewport: Viewport, has_touch: bool = False) -> Page:
        """New page in its own context, sized to ``viewport``."""
        if self._browser is None:
            raise CaptureError("Renderer not started")
        context = await self._browser.new_context(
            viewport={"width": viewport.width, "height": viewport.height},
            ignore_https_errors=True,
            has_touch=has_touch,
            user_agent=self.user_agent,
        )
        return await context.new_page()

    async def close_surface(self, page: Page) -> None:
        await page.context.close()

    async def navigate(self, page: Page, url: str) -> None:
        logger.debug("Navigating to %s...", url)
        try:
            await page.goto(url, wait_until="networkidle", timeout=self.navigation_timeout_ms)
        except PlaywrightError as e:
            raise NavigationError(f"Page Not Found: {url}") from e

    async def wait_for_element(self, page: Page, selector: str, timeout_ms: int | None = None) -> None:
        try:
            await page.wait_for_selector(
                selector, state="attached", timeout=timeout_ms or self.timeout_ms,
            )
        except PlaywrightTimeoutError as e:
            raise SelectorNotFoundError(f'Selector "{selector}" is null.') from e
        except PlaywrightError as e:
            raise CaptureError(str(e)) from e

    async def perform_interaction(self, page: Page, selector: str, event: EventKind) -> None:
        timeout = self.timeout_ms
        try:
            match event:
                case "hover":
                    await page.hover(selector, timeout=timeout)
                case "focus":
                    await page.focus(selector, timeout=timeout)
                case "tap":
                    await page.tap(selector, timeout=timeout)
                case "click":
                    await page.click(selector, timeout=timeout)
                case _:
                    raise InteractionError(f"Unsupported event kind: {event}")
        except PlaywrightError as e:
            raise InteractionError(f"{event} on \"{selector}\" failed: {e.message}") from e

    async def settle(self, page: Page, wait_ms: int) -> None:
        if wait_ms > 0:
            await page.wait_for_timeout(wait_ms)

    async def screenshot_element(self, page: Page, selector: str, dest: Path) -> None:
        handle = await page.query_selector(selector)
        if handle is None:
            raise SelectorNotFoundError(f'Selector "{selector}" is null.')
        try:
            await handle.screenshot(path=str(dest), timeout=self.timeout_ms)
        except PlaywrightError as e:
            if "not visible" in e.message:
                raise SelectorNotVisibleError(f'Selector "{selector}" is likely not visible.') from e
            raise CaptureError(f"Screenshot of \"{selector}\" failed: {e.message}") from e

    async def screenshot_full_page(self, page: Page, dest: Path) -> None:
        try:
            await page.screenshot(path=str(dest), full_page=True)
        except PlaywrightError as e:
            raise CaptureError(f"Fullpage screenshot failed: {e.message}") from e
