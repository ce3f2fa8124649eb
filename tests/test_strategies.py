import re

import pytest

from blog_crawler.models import UniqueURLSet
from blog_crawler.profiles import GENERIC, LINKEDIN_ENGINEERING, UBER_ENGINEERING
from blog_crawler.strategies import (
    LinkExtractor,
    PathPaginatedStrategy,
    QueryPaginatedStrategy,
    ScrollStrategy,
    probe_max_page,
)

UBER_BASE = "https://www.uber.com/blog/engineering/backend/"
LINKEDIN_BASE = "https://www.linkedin.com/blog/engineering/data"


def uber_posts(start, count):
    return [f"/blog/post-{n}/" for n in range(start, start + count)]


def linkedin_posts(start, count):
    return [f"/blog/engineering/data/post-{n}" for n in range(start, start + count)]


class TestLinkExtractor:

    async def test_scenario_keeps_only_posts(self, fake_session_cls):
        session = fake_session_cls(scroll_passes=[[
            "https://example.com/blog/post-1",
            "https://example.com/about",
            "https://example.com/blog/tag/x",
        ]])
        extractor = LinkExtractor(GENERIC, "https://example.com/blog", timeout=5)

        assert await extractor.extract(session) == ["https://example.com/blog/post-1"]

    async def test_malformed_href_dropped(self, fake_session_cls):
        session = fake_session_cls(scroll_passes=[[
            "http://[",
            "https://example.com/blog/post-2",
        ]])
        extractor = LinkExtractor(GENERIC, "https://example.com/blog", timeout=5)

        assert await extractor.extract(session) == ["https://example.com/blog/post-2"]

    async def test_other_domains_dropped(self, fake_session_cls):
        session = fake_session_cls(scroll_passes=[[
            "https://other.org/blog/post-1",
            "/blog/post-3#comments",
        ]])
        extractor = LinkExtractor(GENERIC, "https://example.com/blog", timeout=5)

        assert await extractor.extract(session) == ["https://example.com/blog/post-3"]

    async def test_non_web_links_dropped_for_host_only_base(self, fake_session_cls):
        session = fake_session_cls(scroll_passes=[[
            "mailto:editor@example.com",
            "javascript:void(0)",
            "tel:+15551234",
            "/my-first-post",
        ]])
        extractor = LinkExtractor(GENERIC, "https://example.com", timeout=5)

        assert await extractor.extract(session) == ["https://example.com/my-first-post"]

    async def test_failing_selector_is_skipped(self, fake_session_cls):
        session = fake_session_cls(scroll_passes=[["/blog/post-1"]])
        session.failing_selectors = {"article a[href]", "h2 a[href]"}
        extractor = LinkExtractor(GENERIC, "https://example.com/blog", timeout=5)

        assert await extractor.extract(session) == ["https://example.com/blog/post-1"]

    async def test_keeps_query_for_profiles_that_need_it(self, fake_session_cls):
        session = fake_session_cls(scroll_passes=[["/blog/post-1/?uclick_id=9#x"]])
        extractor = LinkExtractor(UBER_ENGINEERING, UBER_BASE, timeout=5)

        assert await extractor.extract(session) == ["https://www.uber.com/blog/post-1/?uclick_id=9"]


class TestScrollStrategy:

    async def test_stops_after_three_passes_without_new_urls(self, fake_session_cls, config):
        session = fake_session_cls(scroll_passes=[
            ["/blog/a", "/blog/b"],
            ["/blog/a", "/blog/b", "/blog/c"],
        ])
        strategy = ScrollStrategy(GENERIC, config)

        found = await strategy.run(session, "https://example.com/blog", UniqueURLSet(), 30)

        assert set(found) == {
            "https://example.com/blog/a",
            "https://example.com/blog/b",
            "https://example.com/blog/c",
        }
        # two productive passes, then three empty ones
        assert session.extraction_passes == 5
        assert session.scrolls == 4

    async def test_new_content_resets_counter(self, fake_session_cls, config):
        session = fake_session_cls(scroll_passes=[
            ["/blog/a"],
            ["/blog/a"],
            ["/blog/a"],
            ["/blog/a", "/blog/b"],
        ])
        strategy = ScrollStrategy(GENERIC, config)

        found = await strategy.run(session, "https://example.com/blog", UniqueURLSet(), 30)

        assert len(found) == 2
        assert session.extraction_passes == 7

    async def test_empty_page_terminates(self, fake_session_cls, config):
        session = fake_session_cls(scroll_passes=[[]])
        strategy = ScrollStrategy(GENERIC, config)

        found = await strategy.run(session, "https://example.com/blog", UniqueURLSet(), 30)

        assert len(found) == 0
        assert session.extraction_passes == 3

    async def test_scroll_errors_are_not_fatal(self, fake_session_cls, config):
        session = fake_session_cls(scroll_passes=[["/blog/a"], ["/blog/b"]])
        session.scroll_fails = True
        strategy = ScrollStrategy(GENERIC, config)

        found = await strategy.run(session, "https://example.com/blog", UniqueURLSet(), 30)

        assert set(found) == {"https://example.com/blog/a"}

    async def test_extends_existing_set(self, fake_session_cls, config):
        session = fake_session_cls(scroll_passes=[["/blog/a"]])
        found = UniqueURLSet(["https://example.com/blog/z"])

        result = await ScrollStrategy(GENERIC, config).run(
            session, "https://example.com/blog", found, 30)

        assert result is found
        assert len(found) == 2


class TestPathPaginatedStrategy:

    def test_listing_base_strips_page_suffix(self, config):
        strategy = PathPaginatedStrategy(UBER_ENGINEERING, config)
        listing = strategy.listing_base("https://www.uber.com/blog/engineering/backend/page/3/")

        assert listing == "https://www.uber.com/blog/engineering/backend"
        assert strategy.page_url(listing, 1) == "https://www.uber.com/blog/engineering/backend/"
        assert strategy.page_url(listing, 2) == "https://www.uber.com/blog/engineering/backend/page/2/"

    async def test_stops_on_empty_page(self, fake_session_cls, config):
        session = fake_session_cls(pages={
            UBER_BASE: uber_posts(1, 5),
            UBER_BASE + "page/2/": [],
        })
        strategy = PathPaginatedStrategy(UBER_ENGINEERING, config)

        found = await strategy.run(session, UBER_BASE, UniqueURLSet(), 30)

        assert len(found) == 5
        assert session.visited == [UBER_BASE, UBER_BASE + "page/2/"]

    async def test_stops_on_duplicate_page(self, fake_session_cls, config):
        session = fake_session_cls(pages={
            UBER_BASE: uber_posts(1, 5),
            UBER_BASE + "page/2/": uber_posts(1, 5),
        })
        strategy = PathPaginatedStrategy(UBER_ENGINEERING, config)

        found = await strategy.run(session, UBER_BASE, UniqueURLSet(), 30)

        assert len(found) == 5
        assert len(session.visited) == 2

    async def test_visit_error_keeps_collected_urls(self, fake_session_cls, config):
        session = fake_session_cls(pages={
            UBER_BASE: uber_posts(1, 5),
            UBER_BASE + "page/2/": uber_posts(6, 5),
        })
        session.navigation_failures = {UBER_BASE + "page/2/"}
        strategy = PathPaginatedStrategy(UBER_ENGINEERING, config)

        found = await strategy.run(session, UBER_BASE, UniqueURLSet(), 30)

        assert len(found) == 5

    async def test_content_timeout_is_not_fatal(self, fake_session_cls, config):
        session = fake_session_cls(pages={UBER_BASE: uber_posts(1, 2)})
        session.unstable = True
        strategy = PathPaginatedStrategy(UBER_ENGINEERING, config)

        found = await strategy.run(session, UBER_BASE, UniqueURLSet(), 30)

        assert len(found) == 2

    async def test_safety_cap_of_twenty_pages(self, fake_session_cls, config):
        def endless(url):
            match = re.search(r"/page/(\d+)/", url)
            page = int(match.group(1)) if match else 1
            return uber_posts(page * 10, 3)

        session = fake_session_cls(page_factory=endless)
        strategy = PathPaginatedStrategy(UBER_ENGINEERING, config)

        found = await strategy.run(session, UBER_BASE, UniqueURLSet(), 30)

        assert len(session.visited) == 20
        assert session.visited[-1] == UBER_BASE + "page/20/"
        assert len(found) == 60

    async def test_page_timeout_is_crawl_timeout(self, fake_session_cls, config):
        session = fake_session_cls(pages={UBER_BASE: []})

        await PathPaginatedStrategy(UBER_ENGINEERING, config).run(
            session, UBER_BASE, UniqueURLSet(), 12.5)

        assert session.navigate_timeouts == [12.5]


class TestQueryPaginatedStrategy:

    def test_page_urls(self, config):
        strategy = QueryPaginatedStrategy(LINKEDIN_ENGINEERING, config)
        listing = strategy.listing_base(LINKEDIN_BASE + "?page0=4")

        assert listing == LINKEDIN_BASE
        assert strategy.page_url(listing, 1) == LINKEDIN_BASE
        assert strategy.page_url(listing, 3) == LINKEDIN_BASE + "?page0=3"

    async def test_stops_when_page_repeats(self, fake_session_cls, config):
        page_two = linkedin_posts(6, 5)
        session = fake_session_cls(pages={
            LINKEDIN_BASE: linkedin_posts(1, 5),
            LINKEDIN_BASE + "?page0=2": page_two,
            LINKEDIN_BASE + "?page0=3": page_two,
        })
        strategy = QueryPaginatedStrategy(LINKEDIN_ENGINEERING, config)

        found = await strategy.run(session, LINKEDIN_BASE, UniqueURLSet(), 30)

        assert len(session.visited) == 3
        assert len(found) == 10
        for href in page_two:
            assert "https://www.linkedin.com" + href in found

    async def test_safety_cap_of_fifty_pages(self, fake_session_cls, config):
        def endless(url):
            match = re.search(r"page0=(\d+)", url)
            page = int(match.group(1)) if match else 1
            return linkedin_posts(page * 10, 2)

        session = fake_session_cls(page_factory=endless)
        strategy = QueryPaginatedStrategy(LINKEDIN_ENGINEERING, config)

        found = await strategy.run(session, LINKEDIN_BASE, UniqueURLSet(), 30)

        assert len(session.visited) == 50
        assert len(found) == 100


class TestProbeMaxPage:

    async def test_reads_dropdown_values(self, fake_session_cls):
        session = fake_session_cls(attributes={
            '[data-baseweb="select"] div[value]': ["1", "2", "7", "all"],
        })
        assert await probe_max_page(session, UBER_ENGINEERING, 5) == 7

    async def test_reads_pagination_links(self, fake_session_cls):
        session = fake_session_cls(attributes={
            'a[href*="/page/"]': ["/blog/engineering/backend/page/3/", "/blog/engineering/backend/page/12/"],
        })
        assert await probe_max_page(session, UBER_ENGINEERING, 5) == 12

    async def test_reads_query_links(self, fake_session_cls):
        session = fake_session_cls(attributes={
            'a[href*="page0="]': ["?page0=2", "/blog/engineering/data?page0=9"],
        })
        assert await probe_max_page(session, LINKEDIN_ENGINEERING, 5) == 9

    async def test_falls_back_to_page_text(self, fake_session_cls):
        session = fake_session_cls(page_count=4)
        assert await probe_max_page(session, UBER_ENGINEERING, 5) == 4

    async def test_unknown(self, fake_session_cls):
        session = fake_session_cls()
        assert await probe_max_page(session, UBER_ENGINEERING, 5) is None
