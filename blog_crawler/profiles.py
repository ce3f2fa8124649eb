"""Site profiles: which pagination shape and URL rules apply to a blog."""

import enum
from dataclasses import dataclass
from typing import Optional, Tuple


class ProfileKind(enum.Enum):
    GENERIC_SCROLL = "generic-scroll"
    PATH_PAGINATED = "path-paginated"
    QUERY_PAGINATED = "query-paginated"


@dataclass(frozen=True)
class SiteProfile:
    """Rules for one kind of blog listing.

    ``host_marker`` and ``path_markers`` are substrings matched against the
    base URL; a profile applies when the host marker and at least one path
    marker are present.
    """
    name: str
    kind: ProfileKind
    host_marker: str = ""
    path_markers: Tuple[str, ...] = ()
    path_prefix: str = ""
    categories: Tuple[str, ...] = ()
    reserved_subindex: Optional[str] = None
    page_param: Optional[str] = None
    pagination_segment: str = "/page/"
    keep_query: bool = False
    max_pages: Optional[int] = None

    def matches(self, base_url: str) -> bool:
        if not self.host_marker or self.host_marker not in base_url:
            return False
        return any(marker in base_url for marker in self.path_markers)


LINKEDIN_ENGINEERING = SiteProfile(
    name="linkedin-engineering",
    kind=ProfileKind.QUERY_PAGINATED,
    host_marker="linkedin.com/blog",
    path_markers=("/blog/engineering/data", "/blog/engineering/infrastructure"),
    path_prefix="/blog/engineering/",
    categories=("data", "infrastructure"),
    page_param="page0",
    max_pages=50,
)

UBER_ENGINEERING = SiteProfile(
    name="uber-engineering",
    kind=ProfileKind.PATH_PAGINATED,
    host_marker="uber.com",
    path_markers=("/blog/engineering/backend",),
    path_prefix="/blog/",
    categories=(
        "engineering", "advertising", "earn", "ride", "eat", "merchants",
        "business", "freight", "health", "higher-education", "transit",
        "careers", "community-support", "research",
    ),
    reserved_subindex="engineering",
    # Uber post links carry tracking parameters that identify the post
    keep_query=True,
    max_pages=20,
)

GENERIC = SiteProfile(name="generic", kind=ProfileKind.GENERIC_SCROLL)

# Checked in order; first match wins.
PROFILE_TABLE: Tuple[SiteProfile, ...] = (
    LINKEDIN_ENGINEERING,
    UBER_ENGINEERING,
)


def select_profile(base_url: str) -> SiteProfile:
    """Pick the profile for *base_url*, falling back to generic scrolling."""
    for profile in PROFILE_TABLE:
        if profile.matches(base_url):
            return profile
    return GENERIC
