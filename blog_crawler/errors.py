"""Exceptions raised while crawling.

Only SessionInitError and NavigationError abort a crawl. The others are
caught inside the crawler and turn into "collect less, keep going".
"""


class CrawlError(Exception):
    """Base class for crawl failures."""


class SessionInitError(CrawlError):
    """The browser could not be launched or connected."""


class NavigationError(CrawlError):
    """Initial navigation or load wait failed."""


class MalformedURL(CrawlError):
    """A base URL or href could not be parsed."""


class ContentWaitTimeout(CrawlError):
    """Content did not settle within the stability timeout."""


class PageVisitError(CrawlError):
    """A paginated listing page could not be visited."""


class ExtractionError(CrawlError):
    """A single link selector could not be queried."""


class ScriptError(CrawlError):
    """A page script (scroll trigger, page probe) failed."""
