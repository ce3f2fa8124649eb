"""Crawl orchestration: one browser session, one strategy, one result."""

import logging
from typing import Callable, Optional

from .config import CrawlerConfig
from .errors import ContentWaitTimeout
from .models import CrawlResult, UniqueURLSet
from .profiles import select_profile
from .session import BrowserSession, PlaywrightSession
from .strategies import strategy_for

SessionFactory = Callable[[CrawlerConfig], BrowserSession]


class BlogCrawler:
    """Collects every blog post URL published under a base URL."""

    def __init__(self, config: CrawlerConfig,
                 session_factory: Optional[SessionFactory] = None):
        self.config = config
        self.session_factory = session_factory or PlaywrightSession
        self.logger = logging.getLogger("blog_crawler.orchestrator")

    async def crawl(self, base_url: str, timeout: Optional[float] = None) -> CrawlResult:
        """Crawl *base_url* and return the accepted post URLs.

        Raises:
            SessionInitError: the browser could not be started.
            NavigationError: *base_url* did not load within *timeout*.
        """
        if timeout is None:
            timeout = self.config.crawl.navigation_timeout

        profile = select_profile(base_url)
        strategy = strategy_for(profile, self.config)
        self.logger.info(f"Using {profile.name} profile ({profile.kind.value})")

        session = self.session_factory(self.config)
        try:
            self.logger.info("Initializing browser...")
            await session.start()

            self.logger.info(f"Navigating to {base_url}...")
            await session.load(base_url, timeout)

            self.logger.info("Waiting for content to load...")
            try:
                await session.wait_stable(
                    self.config.crawl.stable_quiet_period,
                    self.config.crawl.content_wait_timeout,
                )
            except ContentWaitTimeout as e:
                self.logger.warning(f"Timeout waiting for initial content: {e}")

            found = await strategy.run(session, base_url, UniqueURLSet(), timeout)
        finally:
            await session.close()

        result = CrawlResult.from_urls(base_url, found.to_list())
        self.logger.info(f"Crawling completed! Total blog URLs found: {result.total_count}")
        return result
