"""
Pagination driver
euctr/paginator.py
"""

import threading
from typing import List, Optional

from .exceptions import ConfigurationError, CrawlCancelled, EUCTRError
from .extractor import extract_trials
from .fields import Trial
from .log_setup import get_logger

logger = get_logger(__name__)


def crawl(jurisdiction: str, max_pages: int, client,
          cancel_event: Optional[threading.Event] = None) -> List[Trial]:
    """
    Fetch and extract pages 0..max_pages-1 for one jurisdiction, in order.

    The bound is taken as given; the registry's real last page is not checked.
    The first fetch/parse error stops the crawl and is re-raised tagged with
    the jurisdiction and page; nothing collected so far is returned.

    Args:
        jurisdiction: Two-letter lowercase country code.
        max_pages: Number of pages to fetch.
        client: Object with ``fetch(jurisdiction, page) -> bytes``.
        cancel_event: Checked before each fetch; raises CrawlCancelled when set.
    """
    if max_pages < 0:
        raise ConfigurationError(
            f"Page bound for '{jurisdiction}' must be non-negative",
            config_key=f"jurisdictions.{jurisdiction}",
            actual_value=max_pages,
        )

    trials: List[Trial] = []
    for page in range(max_pages):
        if cancel_event is not None and cancel_event.is_set():
            raise CrawlCancelled(jurisdiction=jurisdiction, page=page)

        logger.info(f"[{jurisdiction}] downloading page {page}")
        try:
            document = client.fetch(jurisdiction, page)
            partial = extract_trials(document)
        except EUCTRError as e:
            raise e.with_location(jurisdiction, page)

        logger.debug(f"[{jurisdiction}] page {page}: {len(partial)} trials")
        trials.extend(partial)

    return trials
