"""Plain HTTP reachability check run before launching a browser."""

import logging
from typing import Dict, Any

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from .config import CrawlerConfig


class ConnectivityChecker:
    """Checks that a blog answers over HTTP at all."""

    def __init__(self, config: CrawlerConfig, max_retries: int = 3, backoff_factor: float = 1.0):
        self.config = config
        self.logger = logging.getLogger("blog_crawler.connectivity")

        # Set up requests session with retries
        self.session = requests.Session()
        retry_strategy = Retry(
            total=max_retries,
            backoff_factor=backoff_factor,
            status_forcelist=[429, 500, 502, 503, 504],
        )
        adapter = HTTPAdapter(max_retries=retry_strategy)
        self.session.mount("http://", adapter)
        self.session.mount("https://", adapter)

        headers = {
            'Accept': 'text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8',
            'Accept-Language': 'en-US,en;q=0.5',
        }
        if config.browser.user_agent:
            headers['User-Agent'] = config.browser.user_agent
        self.session.headers.update(headers)

    def check_basic_connectivity(self, url: str) -> Dict[str, Any]:
        """GET *url* and report status, timing and content type."""
        self.logger.info(f"Checking basic connectivity to {url}")

        try:
            response = self.session.get(
                url,
                timeout=self.config.crawl.navigation_timeout
            )

            result = {
                'success': response.ok,
                'status_code': response.status_code,
                'response_time': response.elapsed.total_seconds(),
                'content_length': len(response.content),
                'content_type': response.headers.get('content-type', ''),
                'final_url': response.url,
            }

            self.logger.info(
                f"Basic connectivity: {response.status_code} "
                f"({response.elapsed.total_seconds():.2f}s)"
            )

            return result

        except requests.RequestException as e:
            self.logger.error(f"Basic connectivity failed: {e}")
            return {
                'success': False,
                'error': str(e),
                'error_type': type(e).__name__
            }

    def close(self) -> None:
        self.session.close()
