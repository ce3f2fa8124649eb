"""Shared fixtures: an in-memory browser session and a no-delay config."""

import asyncio
from typing import Callable, Dict, List, Optional, Set

import pytest

from blog_crawler.config import CrawlerConfig, CrawlConfig
from blog_crawler.errors import (
    ContentWaitTimeout,
    ExtractionError,
    NavigationError,
    ScriptError,
    SessionInitError,
)
from blog_crawler.session import BrowserSession, CandidateLink
from blog_crawler.strategies import SCROLL_SCRIPT


class FakeSession(BrowserSession):
    """Scriptable stand-in for a browser.

    ``scroll_passes[n]`` are the hrefs visible after ``n`` scrolls (the last
    entry repeats forever). ``pages`` maps a URL to the hrefs shown after
    navigating there; ``page_factory`` is used for URLs not in ``pages``.
    """

    def __init__(self, scroll_passes: Optional[List[List[str]]] = None,
                 pages: Optional[Dict[str, List[str]]] = None,
                 page_factory: Optional[Callable[[str], List[str]]] = None,
                 attributes: Optional[Dict[str, List[str]]] = None,
                 page_count: int = 0):
        self.scroll_passes = scroll_passes
        self.pages = pages or {}
        self.page_factory = page_factory
        self.attributes = attributes or {}
        self.page_count = page_count

        self.start_error = False
        self.navigation_failures: Set[str] = set()
        self.unstable = False
        self.failing_selectors: Set[str] = set()
        self.scroll_fails = False
        self.navigate_delay = 0.0

        self.started = False
        self.close_calls = 0
        self.current_url: Optional[str] = None
        self.visited: List[str] = []
        self.navigate_timeouts: List[float] = []
        self.load_timeouts: List[float] = []
        self.scrolls = 0
        self.extraction_passes = 0

    async def start(self) -> None:
        if self.start_error:
            raise SessionInitError("browser binary not found")
        self.started = True

    async def navigate(self, url: str, timeout: float) -> None:
        self.navigate_timeouts.append(timeout)
        if url in self.navigation_failures:
            raise NavigationError(f"failed to navigate to {url}")
        if self.navigate_delay:
            await asyncio.sleep(self.navigate_delay)
        self.current_url = url
        self.visited.append(url)

    async def wait_load(self, timeout: float) -> None:
        self.load_timeouts.append(timeout)

    async def wait_stable(self, quiet_period: float, timeout: float) -> None:
        if self.unstable:
            raise ContentWaitTimeout("content still changing")

    def _visible_hrefs(self) -> List[str]:
        if self.scroll_passes is not None:
            index = min(self.scrolls, len(self.scroll_passes) - 1)
            return self.scroll_passes[index]
        if self.current_url in self.pages:
            return self.pages[self.current_url]
        if self.page_factory is not None:
            return self.page_factory(self.current_url)
        return []

    async def query_links(self, selector: str, timeout: float) -> List[CandidateLink]:
        if selector in self.failing_selectors:
            raise ExtractionError(f"query {selector!r} failed")
        if selector != "a[href]":
            return []
        self.extraction_passes += 1
        return [CandidateLink(href=href, source_page=self.current_url or "")
                for href in self._visible_hrefs()]

    async def query_attributes(self, selector: str, attribute: str, timeout: float) -> List[str]:
        return self.attributes.get(selector, [])

    async def eval_script(self, script: str, timeout: float):
        if script == SCROLL_SCRIPT:
            if self.scroll_fails:
                raise ScriptError("page crashed")
            self.scrolls += 1
            return None
        return self.page_count

    async def close(self) -> None:
        self.close_calls += 1


@pytest.fixture()
def config() -> CrawlerConfig:
    """Default config with every pause set to zero."""
    return CrawlerConfig(crawl=CrawlConfig(scroll_delay=0, settle_delay=0, page_delay=0))


@pytest.fixture()
def fake_session_cls():
    return FakeSession
