"""URL resolution and normalization for discovered links."""

from urllib.parse import urljoin, urlsplit, urlunsplit, SplitResult

from .errors import MalformedURL


def _split(url: str) -> SplitResult:
    """Split *url*, raising MalformedURL when it cannot be parsed."""
    try:
        parts = urlsplit(url)
        parts.port  # validates the port component
    except ValueError as e:
        raise MalformedURL(f"failed to parse {url!r}: {e}") from e
    return parts


def normalize(base: str, href: str, keep_query: bool = False) -> str:
    """Resolve *href* against *base* into an absolute URL.

    The fragment is always removed. The query string is removed unless
    ``keep_query`` is set.

    Raises:
        MalformedURL: if either ``base`` or ``href`` cannot be parsed.
    """
    _split(base)
    _split(href)

    try:
        absolute = urljoin(base, href)
    except ValueError as e:
        raise MalformedURL(f"failed to resolve {href!r} against {base!r}: {e}") from e

    parts = _split(absolute)
    query = parts.query if keep_query else ""
    return urlunsplit((parts.scheme, parts.netloc, parts.path, query, ""))


def is_same_site(base: str, url: str) -> bool:
    """True if *url* is on the base URL's host, or carries no host at all."""
    try:
        host = _split(url).netloc
        base_host = _split(base).netloc
    except MalformedURL:
        return False
    return host == base_host or host == ""
