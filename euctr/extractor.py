"""
Result-block extraction
euctr/extractor.py

Every ``.result`` block on a search page becomes one Trial. Each ``td`` inside
the block is read as ``Label: value``; recognised labels fill the matching
Trial field, everything else (layout cells, links, spacers) is skipped.
"""

from typing import Dict, List, Optional, Tuple

from bs4 import BeautifulSoup

from .exceptions import ParseError
from .fields import FIELD_LABELS, Trial
from .log_setup import get_logger

logger = get_logger(__name__)

RESULT_SELECTOR = ".result"
CELL_TAG = "td"


def split_cell(text: str) -> Optional[Tuple[str, str]]:
    """
    Split cell text into (label, value) at the first colon.

    Returns None when the text has no colon.

    >>> split_cell("  Full Title: A: B ")
    ('Full Title', 'A: B')
    """
    label, sep, value = text.strip().partition(":")
    if not sep:
        return None
    return label.strip(), value.strip()


def parse_document(document: bytes) -> BeautifulSoup:
    try:
        return BeautifulSoup(document, "html.parser")
    except Exception as e:
        raise ParseError(f"Could not parse search page: {e}") from e


def _trial_from_block(block) -> Trial:
    values: Dict[str, str] = {}
    for cell in block.find_all(CELL_TAG):
        parts = split_cell(cell.get_text())
        if parts is None:
            continue
        label, value = parts
        attr = FIELD_LABELS.get(label)
        if attr is None:
            logger.debug(f"Unmapped label: {label!r}")
            continue
        # Repeated labels: last one wins
        values[attr] = value
    return Trial(**values)


def extract_trials(document: bytes) -> List[Trial]:
    """
    Extract one Trial per result block, in page order.

    Raises:
        ParseError: If the document cannot be parsed.
    """
    soup = parse_document(document)
    return [_trial_from_block(block) for block in soup.select(RESULT_SELECTOR)]
