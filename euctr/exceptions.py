# euctr/exceptions.py
"""
Exception hierarchy for the EU CTR scraper.

Hierarchy:
    EUCTRError (base)
    ├── ConfigurationError     # Invalid jurisdiction table, bad option values
    ├── NetworkError           # Transport failure or non-200 status
    ├── ParseError             # Document tree could not be built
    ├── FileError              # Output file creation/write failure
    └── CrawlCancelled         # External cancellation signal

None of these are recovered locally: the paginator tags them with the
jurisdiction and page they happened on, and the orchestrator decides whether
the run stops (default) or moves on to the next jurisdiction.

Usage:
    from euctr.exceptions import NetworkError

    try:
        body = client.fetch("de", 0)
    except NetworkError as e:
        logger.error(f"Fetch failed: {e}")
"""

from __future__ import annotations

from typing import Any, Dict, Optional


class EUCTRError(Exception):
    """
    Base exception for all scraper errors.

    Attributes:
        message: Human-readable error description.
        context: Additional context data for debugging.
    """

    def __init__(
        self,
        message: str,
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.context = context or {}

    def __str__(self) -> str:
        """Return error message with optional context."""
        if self.context:
            ctx_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            return f"{self.message} [{ctx_str}]"
        return self.message

    @property
    def jurisdiction(self) -> Optional[str]:
        return self.context.get("jurisdiction")

    @property
    def page(self) -> Optional[int]:
        return self.context.get("page")

    def with_location(self, jurisdiction: str, page: Optional[int] = None) -> "EUCTRError":
        """
        Attach the jurisdiction/page the error happened on.

        Values already present are kept, so the innermost caller wins.

        Returns:
            Self, so it can be used in a ``raise`` statement.
        """
        self.context.setdefault("jurisdiction", jurisdiction)
        if page is not None:
            self.context.setdefault("page", page)
        return self


class ConfigurationError(EUCTRError):
    """
    Raised when configuration is invalid or incomplete.

    Examples:
        - Jurisdiction code that is not two lowercase letters
        - Negative page bound
        - Unknown key in the JSON config file
    """

    def __init__(
        self,
        message: str,
        config_key: Optional[str] = None,
        actual_value: Optional[Any] = None,
    ):
        context = {}
        if config_key:
            context["key"] = config_key
        if actual_value is not None:
            context["actual"] = repr(actual_value)

        super().__init__(message, context)
        self.config_key = config_key
        self.actual_value = actual_value


class NetworkError(EUCTRError):
    """
    Raised when a search page cannot be retrieved.

    Covers both transport failures (DNS, TLS, connection reset) and any
    response whose status is not 200. Status codes are recorded but not
    distinguished.
    """

    def __init__(
        self,
        message: str,
        url: Optional[str] = None,
        status_code: Optional[int] = None,
        jurisdiction: Optional[str] = None,
        page: Optional[int] = None,
    ):
        context: Dict[str, Any] = {}
        if jurisdiction:
            context["jurisdiction"] = jurisdiction
        if page is not None:
            context["page"] = page
        if status_code is not None:
            context["status"] = status_code
        if url:
            context["url"] = url

        super().__init__(message, context)
        self.url = url
        self.status_code = status_code


class ParseError(EUCTRError):
    """Raised when a fetched document cannot be turned into a tree."""

    def __init__(
        self,
        message: str,
        jurisdiction: Optional[str] = None,
        page: Optional[int] = None,
    ):
        context: Dict[str, Any] = {}
        if jurisdiction:
            context["jurisdiction"] = jurisdiction
        if page is not None:
            context["page"] = page
        super().__init__(message, context)


class FileError(EUCTRError):
    """Raised when the output CSV cannot be created or written."""

    def __init__(
        self,
        message: str,
        path: Optional[str] = None,
        jurisdiction: Optional[str] = None,
    ):
        context: Dict[str, Any] = {}
        if jurisdiction:
            context["jurisdiction"] = jurisdiction
        if path:
            context["path"] = path
        super().__init__(message, context)
        self.path = path


class CrawlCancelled(EUCTRError):
    """Raised when pagination is aborted by an external cancellation signal."""

    def __init__(
        self,
        message: str = "Crawl cancelled",
        jurisdiction: Optional[str] = None,
        page: Optional[int] = None,
    ):
        context: Dict[str, Any] = {}
        if jurisdiction:
            context["jurisdiction"] = jurisdiction
        if page is not None:
            context["page"] = page
        super().__init__(message, context)
