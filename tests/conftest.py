# tests/conftest.py
"""
Pytest configuration and fixtures for euctr tests.

Provides:
- HTML builders that mimic the registry's search-results markup
- A fake registry client that serves canned pages and records calls
- Sample Trial records
"""

import logging
import sys
from html import escape
from pathlib import Path
from typing import Dict, List, Sequence, Tuple, Union

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))

from euctr.fields import Trial  # noqa: E402


# =============================================================================
# LOGGING ISOLATION
# =============================================================================

@pytest.fixture(autouse=True)
def reset_euctr_logging():
    """Undo handlers/levels installed by configure_logging() in a test."""
    yield
    root = logging.getLogger("euctr")
    for handler in root.handlers[:]:
        root.removeHandler(handler)
        handler.close()
    root.setLevel(logging.NOTSET)


# =============================================================================
# HTML BUILDERS
# =============================================================================

def build_result_block(cells: Sequence[str]) -> str:
    """One ``.result`` table, two cells per row like the live registry."""
    rows = []
    for i in range(0, len(cells), 2):
        pair = "".join(f"<td>{escape(c)}</td>" for c in cells[i:i + 2])
        rows.append(f"<tr>{pair}</tr>")
    return f'<table class="result"><tbody>{"".join(rows)}</tbody></table>'


def build_search_page(blocks: Sequence[Sequence[str]]) -> bytes:
    """A full search-results page containing the given result blocks."""
    body = "".join(build_result_block(cells) for cells in blocks)
    html = (
        "<!DOCTYPE html><html><head><meta charset='utf-8'>"
        "<title>Clinical trials</title></head><body>"
        "<div id='tabs-1'><div class='outcome'>"
        "<table><tr><td>Displaying page 1 of 1.</td></tr></table>"
        f"{body}"
        "</div></div></body></html>"
    )
    return html.encode("utf-8")


@pytest.fixture
def make_page():
    return build_search_page


# =============================================================================
# FAKE CLIENT
# =============================================================================

class FakeRegistryClient:
    """
    Serves canned pages keyed by (jurisdiction, page).

    A value that is an exception instance is raised instead of returned.
    Missing keys return an empty results page.
    """

    def __init__(self, pages: Dict[Tuple[str, int], Union[bytes, Exception]] = None,
                 on_fetch=None):
        self.pages = pages or {}
        self.calls: List[Tuple[str, int]] = []
        self.on_fetch = on_fetch

    def fetch(self, jurisdiction: str, page: int) -> bytes:
        self.calls.append((jurisdiction, page))
        if self.on_fetch is not None:
            self.on_fetch(jurisdiction, page)
        value = self.pages.get((jurisdiction, page), build_search_page([]))
        if isinstance(value, Exception):
            raise value
        return value

    def close(self):
        pass


@pytest.fixture
def fake_client_factory():
    return FakeRegistryClient


# =============================================================================
# SAMPLE DATA
# =============================================================================

@pytest.fixture
def full_block_cells() -> List[str]:
    """Every mapped label, as the registry renders them."""
    return [
        "EudraCT Number: 2015-001314-10",
        "Sponsor Protocol Number: CLNP023X2203",
        "Start Date*: 2015-06-17",
        "Sponsor Name: Novartis Pharma AG",
        "Full Title: A randomized, double-blind study of LNP023 in IgA nephropathy",
        "Medical condition: IgA nephropathy",
        "Disease: ",
        "Population Age: Adults, Elderly",
        "Gender: Male, Female",
        "Trial protocol: DE(Completed) FR(Completed)",
        "Trial results: View results",
        "",
    ]


@pytest.fixture
def sample_trials() -> List[Trial]:
    return [
        Trial(eudract_number="2020-001", full_title="Example Trial"),
        Trial(
            eudract_number="2019-004567-22",
            full_title='Study of "X", a drug, in adults',
            start_date="2019-11-01",
            sponsor_name="Acme, Inc.",
            gender="Female",
        ),
    ]
