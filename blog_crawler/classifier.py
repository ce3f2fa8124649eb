"""Heuristics deciding whether a URL points at a single blog post."""

import logging
from typing import Callable, Dict, List
from urllib.parse import urlsplit

from .profiles import ProfileKind, SiteProfile

logger = logging.getLogger("blog_crawler.classifier")

# Substrings that mark listing, profile or utility pages on generic blogs
NON_POST_MARKERS = [
    "/about",
    "/archive",
    "/tag/",
    "/search",
    "/@",
    "/latest",
    "/membership",
    "/settings",
    "/me/",
    "/?source=",
    "/page/",
    "/category/",
    "/categories/",
    "/author/",
    "/authors/",
    "/feed",
    "/rss",
    "/sitemap",
    "/contact",
    "/privacy",
    "/terms",
    "/careers",
    "/p/",
]

POST_PATH_MARKERS = ("/blog/", "/post/", "/article/")


def _path_segments(path: str, prefix: str) -> List[str]:
    """Split what follows *prefix* in *path* into segments."""
    if prefix and path.startswith(prefix):
        path = path[len(prefix):]
    return path.strip("/").split("/")


def _is_locale_segment(part: str) -> bool:
    # en-us, es-419, pt-br ...
    return "-us" in part or ("-" in part and len(part) <= 6)


def _is_path_paginated_post(profile: SiteProfile, base_url: str, url: str) -> bool:
    path = urlsplit(url).path.lower()

    if profile.pagination_segment in path:
        return False
    if not path.startswith(profile.path_prefix):
        return False

    parts = _path_segments(path, profile.path_prefix)
    if len(parts) == 1 and parts[0] in profile.categories:
        return False  # category listing
    if not parts[0]:
        return False
    if len(parts) == 2 and parts[0] == profile.reserved_subindex:
        return False  # sub-category listing, e.g. /blog/engineering/backend/
    return True


def _is_query_paginated_post(profile: SiteProfile, base_url: str, url: str) -> bool:
    parsed = urlsplit(url)
    path = parsed.path.lower()

    if profile.page_param and f"{profile.page_param}=" in parsed.query.lower():
        return False
    if not path.startswith(profile.path_prefix):
        return False

    parts = _path_segments(path, profile.path_prefix)
    if len(parts) == 1 and parts[0] in profile.categories:
        return False
    return len(parts) > 1


def _is_generic_post(profile: SiteProfile, base_url: str, url: str) -> bool:
    path = urlsplit(url).path.lower()
    url_lower = url.lower()
    base_path = urlsplit(base_url).path.lower()

    for marker in NON_POST_MARKERS:
        if marker in url_lower:
            # /username/p/post-title-123456 style slugs are posts
            if marker == "/p/" and path.count("/") >= 4:
                continue
            return False

    relative_path = path[len(base_path):] if path.startswith(base_path) else path
    relative_path = relative_path.strip("/")
    if not relative_path:
        return False

    parts = relative_path.split("/")
    for part in parts:
        if _is_locale_segment(part):
            continue
        if part == "page":
            return False

    if any(marker in path for marker in POST_PATH_MARKERS):
        return True
    if len(parts) >= 2 and parts[0] == "blog":
        return True
    # Any direct path under the base counts as a post
    return path.startswith(base_path)


_RULES: Dict[ProfileKind, Callable[[SiteProfile, str, str], bool]] = {
    ProfileKind.PATH_PAGINATED: _is_path_paginated_post,
    ProfileKind.QUERY_PAGINATED: _is_query_paginated_post,
    ProfileKind.GENERIC_SCROLL: _is_generic_post,
}


def is_blog_post_url(profile: SiteProfile, base_url: str, url: str) -> bool:
    """Determine if *url* looks like a blog post under *profile*'s rules."""
    try:
        return _RULES[profile.kind](profile, base_url, url)
    except ValueError as e:
        logger.debug(f"Could not classify {url}: {e}")
        return False
