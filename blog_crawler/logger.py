"""Logging configuration for the Blog URL Crawler."""

import logging
import sys
from pathlib import Path
from typing import Optional
from datetime import datetime


def setup_logging(
    log_level: str = "INFO",
    log_file: Optional[Path] = None,
    console_output: bool = True
) -> logging.Logger:
    """Set up logging for the crawler.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Optional path to log file
        console_output: Whether to output to console

    Returns:
        Configured ``blog_crawler`` logger; module loggers are its children.
    """
    logger = logging.getLogger("blog_crawler")
    logger.setLevel(getattr(logging, log_level.upper()))

    # Clear existing handlers to avoid duplicates
    logger.handlers.clear()

    formatter = logging.Formatter(
        fmt='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    if console_output:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(getattr(logging, log_level.upper()))
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)

    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding='utf-8')
        file_handler.setLevel(logging.DEBUG)  # Always log debug to file
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    logger.propagate = False

    return logger


def get_default_log_file() -> Path:
    """Get default log file path with timestamp."""
    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    return Path("logs") / f"crawler_{timestamp}.log"


class ProgressLogger:
    """Logs page-by-page progress of a paginated crawl."""

    def __init__(self, logger: logging.Logger, max_pages: int, description: str = "Crawling"):
        self.logger = logger
        self.max_pages = max_pages
        self.description = description
        self.pages_visited = 0

    def page_done(self, page_num: int, found: int, total_unique: int) -> None:
        """Record one visited page."""
        self.pages_visited += 1
        self.logger.info(
            f"  Found {found} blog URLs on page {page_num} "
            f"(total: {total_unique} unique URLs)"
        )

    def complete(self, reason: str) -> None:
        """Log why paging stopped."""
        self.logger.info(
            f"{self.description}: stopped after {self.pages_visited} page(s) "
            f"of at most {self.max_pages}: {reason}"
        )
