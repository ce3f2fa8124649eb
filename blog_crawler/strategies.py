"""Content discovery strategies: infinite scroll and paginated listings."""

import asyncio
import logging
import re
import time
from typing import Dict, List, Optional, Type
from urllib.parse import urlsplit, urlunsplit

from .classifier import is_blog_post_url
from .config import CrawlerConfig
from .errors import (
    ContentWaitTimeout,
    ExtractionError,
    MalformedURL,
    NavigationError,
    PageVisitError,
    ScriptError,
)
from .logger import ProgressLogger
from .models import UniqueURLSet
from .profiles import ProfileKind, SiteProfile
from .session import BrowserSession, CandidateLink
from .url_normalizer import is_same_site, normalize

# Site-specific layouts first, every link last
LINK_SELECTORS = [
    'a[data-baseweb="card"][href]',  # Uber cards
    'article a[href]',
    'h2 a[href]',
    'h3 a[href]',
    "[data-testid='post-preview-title'] a",  # Medium
    '.post-title a',
    '.blog-post a',
    'a[href]',
]

WEB_SCHEMES = ("http", "https")

SCROLL_SCRIPT = """
(function() {
    window.scrollTo({
        top: document.body.scrollHeight || document.documentElement.scrollHeight,
        behavior: 'smooth'
    });
})()
"""

PAGE_COUNT_SCRIPT = r"""
(function() {
    const allElements = document.querySelectorAll('*');
    for (let el of allElements) {
        const text = el.textContent || el.innerText || '';
        const match = text.match(/Page\s+(\d+)\s+of\s+(\d+)/i);
        if (match) {
            return parseInt(match[2]);
        }
    }
    return 0;
})()
"""


class LinkExtractor:
    """Pulls accepted post URLs out of the page currently shown."""

    def __init__(self, profile: SiteProfile, base_url: str, timeout: float,
                 selectors: Optional[List[str]] = None):
        self.profile = profile
        self.base_url = base_url
        self.timeout = timeout
        self.selectors = selectors or LINK_SELECTORS
        self.logger = logging.getLogger("blog_crawler.extractor")

    def accept(self, link: CandidateLink) -> Optional[str]:
        """Normalize *link* and return it if it is a post on this site."""
        try:
            url = normalize(self.base_url, link.href, self.profile.keep_query)
        except MalformedURL as e:
            self.logger.debug(f"Dropping link from {link.source_page}: {e}")
            return None

        # mailto:, javascript:, tel: and friends pass through urljoin untouched
        parts = urlsplit(url)
        if parts.scheme not in WEB_SCHEMES or not parts.path.startswith("/"):
            return None
        if not is_same_site(self.base_url, url):
            return None
        if not is_blog_post_url(self.profile, self.base_url, url):
            return None
        return url

    async def extract(self, session: BrowserSession) -> List[str]:
        """Run every selector and return the union of accepted URLs."""
        deadline = time.monotonic() + self.timeout
        accepted: Dict[str, None] = {}

        for selector in self.selectors:
            remaining = deadline - time.monotonic()
            if remaining <= 0:
                self.logger.warning(
                    f"Extraction pass exceeded {self.timeout:.0f}s, skipping remaining selectors"
                )
                break

            try:
                links = await session.query_links(selector, remaining)
            except ExtractionError as e:
                self.logger.debug(f"Selector {selector!r} skipped: {e}")
                continue

            for link in links:
                url = self.accept(link)
                if url is not None:
                    accepted[url] = None

        return list(accepted)


async def probe_max_page(session: BrowserSession, profile: SiteProfile,
                         timeout: float) -> Optional[int]:
    """Best-effort guess at the number of listing pages on the current page."""
    numbers: List[int] = []

    try:
        values = await session.query_attributes('[data-baseweb="select"] div[value]', "value", timeout)
        numbers = [int(value) for value in values if value.isdigit()]
    except ExtractionError:
        pass
    if numbers:
        return max(numbers)

    if profile.page_param:
        pattern = re.compile(rf"[?&]{re.escape(profile.page_param)}=(\d+)")
        selector = f'a[href*="{profile.page_param}="]'
    else:
        pattern = re.compile(rf"{re.escape(profile.pagination_segment)}(\d+)")
        selector = f'a[href*="{profile.pagination_segment}"]'
    try:
        hrefs = await session.query_attributes(selector, "href", timeout)
        for href in hrefs:
            match = pattern.search(href)
            if match:
                numbers.append(int(match.group(1)))
    except ExtractionError:
        pass
    if numbers:
        return max(numbers)

    try:
        value = await session.eval_script(PAGE_COUNT_SCRIPT, timeout)
    except ScriptError:
        return None
    if isinstance(value, (int, float)) and value > 0:
        return int(value)
    return None


class PaginationStrategy:
    """Drives the browser and merges accepted URLs into a UniqueURLSet."""

    def __init__(self, profile: SiteProfile, config: CrawlerConfig):
        self.profile = profile
        self.config = config
        self.logger = logging.getLogger("blog_crawler.strategy")

    def make_extractor(self, base_url: str) -> LinkExtractor:
        return LinkExtractor(self.profile, base_url, self.config.crawl.extraction_timeout)

    async def run(self, session: BrowserSession, base_url: str,
                  found: UniqueURLSet, timeout: float) -> UniqueURLSet:
        raise NotImplementedError


class ScrollStrategy(PaginationStrategy):
    """Infinite scroll: extract, scroll, wait, until nothing new shows up."""

    async def run(self, session: BrowserSession, base_url: str,
                  found: UniqueURLSet, timeout: float) -> UniqueURLSet:
        crawl = self.config.crawl
        extractor = self.make_extractor(base_url)
        no_new_content_count = 0

        self.logger.info("Starting to crawl blog URLs (infinite scroll mode)...")

        while True:
            added = found.add_all(await extractor.extract(session))
            self.logger.info(f"Found {len(found)} unique blog URLs so far...")

            if added == 0:
                no_new_content_count += 1
                if no_new_content_count >= crawl.max_no_new_scrolls:
                    self.logger.info(
                        f"No new content detected after {crawl.max_no_new_scrolls} scrolls. Stopping."
                    )
                    break
            else:
                no_new_content_count = 0

            try:
                await session.eval_script(SCROLL_SCRIPT, crawl.extraction_timeout)
            except ScriptError as e:
                self.logger.warning(f"Error scrolling: {e}")

            # Let lazy content render
            await asyncio.sleep(crawl.scroll_delay)
            await asyncio.sleep(crawl.settle_delay)

        return found


class PaginatedStrategy(PaginationStrategy):
    """Visits listing pages 1, 2, 3... until a page adds nothing new.

    Subclasses say where the listing lives and how page N is addressed.
    """

    def listing_base(self, base_url: str) -> str:
        raise NotImplementedError

    def page_url(self, listing_base: str, page_num: int) -> str:
        raise NotImplementedError

    async def visit_page(self, session: BrowserSession, page_url: str,
                         extractor: LinkExtractor, timeout: float) -> List[str]:
        """Load one listing page and return the accepted URLs on it."""
        try:
            await session.load(page_url, timeout)
        except NavigationError as e:
            raise PageVisitError(str(e)) from e

        try:
            await session.wait_stable(
                self.config.crawl.stable_quiet_period,
                self.config.crawl.content_wait_timeout,
            )
        except ContentWaitTimeout as e:
            self.logger.warning(f"Timeout waiting for content on {page_url}: {e}")

        return await extractor.extract(session)

    async def run(self, session: BrowserSession, base_url: str,
                  found: UniqueURLSet, timeout: float) -> UniqueURLSet:
        listing = self.listing_base(base_url)
        extractor = self.make_extractor(base_url)
        max_pages = self.profile.max_pages
        progress = ProgressLogger(self.logger, max_pages, description=self.profile.name)

        detected = await probe_max_page(session, self.profile, self.config.crawl.extraction_timeout)
        if detected:
            self.logger.info(f"Listing reports {detected} page(s)")

        page_num = 1
        while True:
            page_url = self.page_url(listing, page_num)
            self.logger.info(f"Crawling page {page_num}: {page_url}")

            try:
                urls = await self.visit_page(session, page_url, extractor, timeout)
            except PageVisitError as e:
                self.logger.warning(f"Error crawling page {page_num}: {e}")
                progress.complete(f"error on page {page_num}")
                break

            if not urls:
                progress.complete(f"no blog posts found on page {page_num}")
                break

            added = found.add_all(urls)
            progress.page_done(page_num, len(urls), len(found))
            if added == 0:
                progress.complete(f"no new URLs found on page {page_num}")
                break

            if page_num >= max_pages:
                progress.complete(f"reached safety limit of {max_pages} pages")
                break

            page_num += 1
            await asyncio.sleep(self.config.crawl.page_delay)

        return found


class PathPaginatedStrategy(PaginatedStrategy):
    """Listings addressed as ``<base>/page/N/``."""

    def listing_base(self, base_url: str) -> str:
        base = base_url.rstrip("/")
        segment = self.profile.pagination_segment
        if segment in base:
            base = base.split(segment)[0]
        return base.rstrip("/")

    def page_url(self, listing_base: str, page_num: int) -> str:
        if page_num == 1:
            return f"{listing_base}/"
        return f"{listing_base}{self.profile.pagination_segment}{page_num}/"


class QueryPaginatedStrategy(PaginatedStrategy):
    """Listings addressed as ``<base>?<param>=N``."""

    def listing_base(self, base_url: str) -> str:
        parts = urlsplit(base_url)
        return urlunsplit((parts.scheme, parts.netloc, parts.path, "", ""))

    def page_url(self, listing_base: str, page_num: int) -> str:
        if page_num == 1:
            return listing_base
        return f"{listing_base}?{self.profile.page_param}={page_num}"


STRATEGIES: Dict[ProfileKind, Type[PaginationStrategy]] = {
    ProfileKind.GENERIC_SCROLL: ScrollStrategy,
    ProfileKind.PATH_PAGINATED: PathPaginatedStrategy,
    ProfileKind.QUERY_PAGINATED: QueryPaginatedStrategy,
}


def strategy_for(profile: SiteProfile, config: CrawlerConfig) -> PaginationStrategy:
    return STRATEGIES[profile.kind](profile, config)
