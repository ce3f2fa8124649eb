"""Blog URL Crawler: discover every post URL under a blog listing."""

__version__ = "0.1.0"
