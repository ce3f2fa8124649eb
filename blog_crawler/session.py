"""Browser session used by the crawler.

The crawler only talks to ``BrowserSession``; ``PlaywrightSession`` is the
real implementation backed by headless Chromium.
"""

import asyncio
import logging
import os
import time
from dataclasses import dataclass
from typing import Any, List, Optional

from playwright.async_api import async_playwright, Error as PlaywrightError

from .config import CrawlerConfig
from .errors import (
    ContentWaitTimeout,
    ExtractionError,
    NavigationError,
    ScriptError,
    SessionInitError,
)


@dataclass(frozen=True)
class CandidateLink:
    """A raw href and the page it was found on."""
    href: str
    source_page: str


class BrowserSession:
    """Capabilities the crawler needs from a browser.

    All timeouts are in seconds.
    """

    async def start(self) -> None:
        raise NotImplementedError

    async def navigate(self, url: str, timeout: float) -> None:
        raise NotImplementedError

    async def wait_load(self, timeout: float) -> None:
        raise NotImplementedError

    async def wait_stable(self, quiet_period: float, timeout: float) -> None:
        raise NotImplementedError

    async def query_links(self, selector: str, timeout: float) -> List[CandidateLink]:
        raise NotImplementedError

    async def query_attributes(self, selector: str, attribute: str, timeout: float) -> List[str]:
        raise NotImplementedError

    async def eval_script(self, script: str, timeout: float) -> Any:
        raise NotImplementedError

    async def close(self) -> None:
        raise NotImplementedError

    async def load(self, url: str, timeout: float) -> None:
        """Navigate to *url* and wait for its load event within one *timeout*."""
        deadline = time.monotonic() + timeout
        await self.navigate(url, timeout)

        remaining = deadline - time.monotonic()
        if remaining <= 0:
            raise NavigationError(f"{url} did not load within {timeout:.0f}s")
        await self.wait_load(remaining)


class PlaywrightSession(BrowserSession):
    """Single-page headless Chromium session."""

    def __init__(self, config: CrawlerConfig):
        self.config = config
        self.logger = logging.getLogger("blog_crawler.session")
        self._playwright = None
        self._browser = None
        self._page = None

    def _find_chrome(self) -> Optional[str]:
        """Prefer a system Chrome/Chromium if one is installed."""
        for path in self.config.browser.chrome_paths:
            if os.path.exists(path):
                return path
        return None

    async def start(self) -> None:
        try:
            self._playwright = await async_playwright().start()
            self._browser = await self._playwright.chromium.launch(
                headless=self.config.browser.headless,
                executable_path=self._find_chrome(),
                args=["--disable-blink-features=AutomationControlled"],
            )
            self._page = await self._browser.new_page(
                user_agent=self.config.browser.user_agent
            )
        except PlaywrightError as e:
            await self.close()
            raise SessionInitError(f"failed to launch browser: {e}") from e

    async def navigate(self, url: str, timeout: float) -> None:
        try:
            await self._page.goto(url, timeout=timeout * 1000, wait_until="commit")
        except PlaywrightError as e:
            raise NavigationError(f"failed to navigate to {url}: {e}") from e

    async def wait_load(self, timeout: float) -> None:
        try:
            await self._page.wait_for_load_state("load", timeout=timeout * 1000)
        except PlaywrightError as e:
            raise NavigationError(f"failed to wait for page load: {e}") from e

    async def wait_stable(self, quiet_period: float, timeout: float) -> None:
        """Wait until the document height stops changing for *quiet_period*."""
        deadline = time.monotonic() + timeout
        last_height = None
        stable_since = time.monotonic()

        while True:
            try:
                height = await asyncio.wait_for(
                    self._page.evaluate("document.body ? document.body.scrollHeight : 0"),
                    timeout=max(deadline - time.monotonic(), 0),
                )
            except asyncio.TimeoutError as e:
                raise ContentWaitTimeout(f"page unresponsive after {timeout:.0f}s") from e
            except PlaywrightError as e:
                raise ContentWaitTimeout(f"page unavailable while waiting: {e}") from e

            now = time.monotonic()
            if height != last_height:
                last_height = height
                stable_since = now
            elif now - stable_since >= quiet_period:
                return

            if now >= deadline:
                raise ContentWaitTimeout(
                    f"content still changing after {timeout:.0f}s"
                )
            await asyncio.sleep(min(0.1, quiet_period))

    async def query_links(self, selector: str, timeout: float) -> List[CandidateLink]:
        source_page = self._page.url
        hrefs = await self.query_attributes(selector, "href", timeout)
        return [CandidateLink(href=href, source_page=source_page) for href in hrefs]

    async def query_attributes(self, selector: str, attribute: str, timeout: float) -> List[str]:
        try:
            values = await asyncio.wait_for(
                self._page.eval_on_selector_all(
                    selector,
                    "(els, attr) => els.map(el => el.getAttribute(attr))",
                    attribute,
                ),
                timeout=timeout,
            )
        except (PlaywrightError, asyncio.TimeoutError) as e:
            raise ExtractionError(f"query {selector!r} failed: {e}") from e
        return [value for value in values if value]

    async def eval_script(self, script: str, timeout: float) -> Any:
        try:
            return await asyncio.wait_for(self._page.evaluate(script), timeout=timeout)
        except (PlaywrightError, asyncio.TimeoutError) as e:
            raise ScriptError(f"script evaluation failed: {e}") from e

    async def close(self) -> None:
        """Close browser and driver; safe to call more than once."""
        browser, self._browser = self._browser, None
        playwright, self._playwright = self._playwright, None
        self._page = None

        if browser is not None:
            try:
                await browser.close()
            except PlaywrightError as e:
                self.logger.debug(f"Error closing browser: {e}")
        if playwright is not None:
            try:
                await playwright.stop()
            except PlaywrightError as e:
                self.logger.debug(f"Error stopping playwright: {e}")
