"""Configuration management for the Blog URL Crawler."""

import json
import logging
from pathlib import Path
from typing import Optional, List
from dataclasses import dataclass, field, asdict


def _default_chrome_paths() -> List[str]:
    return [
        "/Applications/Google Chrome.app/Contents/MacOS/Google Chrome",
        "/Applications/Chromium.app/Contents/MacOS/Chromium",
    ]


@dataclass
class BrowserConfig:
    """Configuration for the headless browser."""
    headless: bool = True
    user_agent: Optional[str] = None  # None keeps the browser's own UA
    chrome_paths: List[str] = field(default_factory=_default_chrome_paths)


@dataclass
class CrawlConfig:
    """Configuration for crawl pacing and timeouts."""
    navigation_timeout: float = 30.0  # seconds
    content_wait_timeout: float = 10.0  # seconds
    stable_quiet_period: float = 0.5  # seconds
    extraction_timeout: float = 5.0  # seconds, per extraction pass
    scroll_delay: float = 2.0  # seconds
    settle_delay: float = 0.5  # seconds
    page_delay: float = 1.0  # seconds between paginated visits
    max_no_new_scrolls: int = 3


@dataclass
class OutputConfig:
    """Configuration for result output."""
    output_file: str = "blog_urls.json"
    pretty_print_json: bool = True
    backup_existing: bool = False


@dataclass
class CrawlerConfig:
    """Main configuration class."""
    browser: BrowserConfig = None
    crawl: CrawlConfig = None
    output: OutputConfig = None

    def __post_init__(self):
        if self.browser is None:
            self.browser = BrowserConfig()
        if self.crawl is None:
            self.crawl = CrawlConfig()
        if self.output is None:
            self.output = OutputConfig()


class ConfigManager:
    """Manages loading and saving configuration."""

    DEFAULT_CONFIG_FILE = "crawler_config.json"

    @classmethod
    def load_config(cls, config_path: Optional[Path] = None) -> CrawlerConfig:
        """Load configuration from file or create default."""
        if config_path is None:
            config_path = Path(cls.DEFAULT_CONFIG_FILE)

        if config_path.exists():
            try:
                with open(config_path, 'r', encoding='utf-8') as f:
                    data = json.load(f)

                # Reconstruct nested dataclasses
                config = CrawlerConfig(
                    browser=BrowserConfig(**data.get('browser', {})),
                    crawl=CrawlConfig(**data.get('crawl', {})),
                    output=OutputConfig(**data.get('output', {}))
                )

                logging.getLogger("blog_crawler.config").info(
                    f"Loaded configuration from {config_path}"
                )
                return config

            except (json.JSONDecodeError, TypeError) as e:
                logger = logging.getLogger("blog_crawler.config")
                logger.warning(f"Failed to load config from {config_path}: {e}")
                logger.info("Using default configuration")

        return CrawlerConfig()

    @classmethod
    def save_config(cls, config: CrawlerConfig, config_path: Optional[Path] = None) -> None:
        """Save configuration to file."""
        if config_path is None:
            config_path = Path(cls.DEFAULT_CONFIG_FILE)

        logger = logging.getLogger("blog_crawler.config")
        try:
            with open(config_path, 'w', encoding='utf-8') as f:
                json.dump(asdict(config), f, indent=2, ensure_ascii=False)

            logger.info(f"Saved configuration to {config_path}")

        except IOError as e:
            logger.error(f"Failed to save config to {config_path}: {e}")
            raise
