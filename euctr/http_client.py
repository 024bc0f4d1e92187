"""
Registry HTTP client
euctr/http_client.py

One GET per (jurisdiction, page). No retries, no caching: any transport
failure or non-200 response surfaces as NetworkError.
"""

from typing import Optional

import requests
import urllib3

from .config import BASE, BASE_HEADERS, SEARCH_PATH, SEARCH_QUERY
from .exceptions import NetworkError
from .log_setup import get_logger

logger = get_logger(__name__)

DEFAULT_POOL_SIZE = 10


def build_search_url(jurisdiction: str, page: int, base_url: str = BASE) -> str:
    """Search URL for one results page (page index is zero-based)."""
    query = SEARCH_QUERY.format(country=jurisdiction, page=page)
    return f"{base_url.rstrip('/')}{SEARCH_PATH}?{query}"


class RegistryClient:
    """Fetches search-result pages from the EU Clinical Trials Register"""

    def __init__(self, base_url: str = BASE, verify: bool = True, timeout: Optional[float] = None,
                 pool_size: int = DEFAULT_POOL_SIZE):
        self.base_url = base_url.rstrip("/")
        self.verify = verify
        self.timeout = timeout
        # Connections kept per host; one per concurrent worker
        self.pool_size = max(pool_size, 1)
        self.session = self._create_session()

        if not verify:
            urllib3.disable_warnings(urllib3.exceptions.InsecureRequestWarning)
            logger.warning(
                "TLS certificate verification is DISABLED for %s; "
                "responses cannot be trusted to come from the registry",
                self.base_url,
            )

    def _create_session(self) -> requests.Session:
        session = requests.Session()
        session.headers.update(BASE_HEADERS)

        adapter = requests.adapters.HTTPAdapter(
            pool_connections=1,
            pool_maxsize=self.pool_size,
            max_retries=0
        )
        session.mount("http://", adapter)
        session.mount("https://", adapter)

        return session

    def fetch(self, jurisdiction: str, page: int) -> bytes:
        """
        Download one search-results page.

        Args:
            jurisdiction: Two-letter lowercase country code.
            page: Zero-based page index.

        Returns:
            Raw response body.

        Raises:
            NetworkError: On transport failure or any status other than 200.
        """
        url = build_search_url(jurisdiction, page, self.base_url)
        try:
            response = self.session.get(url, verify=self.verify, timeout=self.timeout)
        except requests.RequestException as e:
            raise NetworkError(
                f"Request failed: {e}",
                url=url,
                jurisdiction=jurisdiction,
                page=page,
            ) from e

        if response.status_code != 200:
            raise NetworkError(
                f"status code error: {response.status_code} {response.reason}",
                url=url,
                status_code=response.status_code,
                jurisdiction=jurisdiction,
                page=page,
            )

        return response.content

    def close(self):
        """Close the session"""
        if self.session:
            self.session.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
