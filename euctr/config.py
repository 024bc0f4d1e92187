#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
EU CTR Configuration Module
Registry endpoints, the default jurisdiction table, and the run configuration
euctr/config.py
"""

import json
import os
import re
from dataclasses import dataclass, field, fields
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, Iterable, List, Mapping, Optional, Union

from .exceptions import ConfigurationError

# ===================== Registry Configuration =====================

DEFAULT_BASE = os.environ.get("EUCTR_BASE", "https://www.clinicaltrialsregister.eu")
BASE = DEFAULT_BASE.rstrip("/")
SEARCH_PATH = "/ctr-search/search"
SEARCH_QUERY = "query=&country={country}&page={page}"

# ===================== HTTP Headers =====================

BROWSER_UA = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) "
    "AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/128.0.0.0 Safari/537.36"
)

BASE_HEADERS = {
    "User-Agent": BROWSER_UA,
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
    "Accept-Language": "en-GB,en;q=0.9",
    "Connection": "keep-alive",
}

# ===================== Output =====================

OUTPUT_PREFIX = "eu-ctr"
LEGACY_OUTPUT_NAME = f"{OUTPUT_PREFIX}.csv"

# ===================== Jurisdictions =====================

JURISDICTION_RE = re.compile(r"^[a-z]{2}$")

# Page-count bound per jurisdiction. The registry's real last page is not
# detected, so these must be kept in line with the live result counts.
DEFAULT_JURISDICTION_PAGES: Mapping[str, int] = MappingProxyType({
    "de": 1,
})


@dataclass(frozen=True)
class JurisdictionJob:
    """A jurisdiction code paired with its page-count bound."""
    code: str
    max_pages: int


def validate_jurisdiction(code: Any) -> str:
    """Return ``code`` if it is a two-letter lowercase jurisdiction code."""
    if not isinstance(code, str) or not JURISDICTION_RE.match(code):
        raise ConfigurationError(
            "Jurisdiction code must be two lowercase letters",
            config_key="jurisdictions",
            actual_value=code,
        )
    return code


def validate_page_bound(code: str, pages: Any) -> int:
    if isinstance(pages, bool) or not isinstance(pages, int) or pages < 0:
        raise ConfigurationError(
            f"Page bound for '{code}' must be a non-negative integer",
            config_key=f"jurisdictions.{code}",
            actual_value=pages,
        )
    return pages


def validate_flag(name: str, value: Any) -> bool:
    """Return ``value`` if it is a real bool; JSON strings like "false" are rejected."""
    if not isinstance(value, bool):
        raise ConfigurationError(
            f"{name} must be true or false",
            config_key=name,
            actual_value=value,
        )
    return value


def validate_path(name: str, value: Any) -> Path:
    if not isinstance(value, (str, Path)):
        raise ConfigurationError(
            f"{name} must be a path",
            config_key=name,
            actual_value=value,
        )
    return Path(value)


def freeze_jurisdictions(table: Mapping[str, Any]) -> Mapping[str, int]:
    """Validate a code -> pages table and return a read-only copy."""
    if not isinstance(table, Mapping):
        raise ConfigurationError(
            "jurisdictions must map country codes to page bounds",
            config_key="jurisdictions",
            actual_value=table,
        )
    frozen: Dict[str, int] = {}
    for code, pages in table.items():
        frozen[validate_jurisdiction(code)] = validate_page_bound(code, pages)
    return MappingProxyType(frozen)


# ===================== Run Configuration =====================

@dataclass
class CrawlerConfig:
    """Settings for one run across all configured jurisdictions."""
    jurisdictions: Mapping[str, int] = field(default_factory=lambda: DEFAULT_JURISDICTION_PAGES)
    output_dir: Path = field(default_factory=lambda: Path("."))
    base_url: str = BASE
    insecure: bool = False
    isolate_failures: bool = False
    max_workers: int = 1
    legacy_output: bool = False
    request_timeout: Optional[float] = None
    log_level: str = "INFO"
    log_dir: Optional[Path] = None

    def __post_init__(self):
        self.jurisdictions = freeze_jurisdictions(self.jurisdictions)
        self.output_dir = validate_path("output_dir", self.output_dir)
        if not isinstance(self.base_url, str):
            raise ConfigurationError(
                "base_url must be a string",
                config_key="base_url",
                actual_value=self.base_url,
            )
        self.base_url = self.base_url.rstrip("/")
        if self.log_dir is not None:
            self.log_dir = validate_path("log_dir", self.log_dir)
        for name in ("insecure", "isolate_failures", "legacy_output"):
            validate_flag(name, getattr(self, name))

        if isinstance(self.max_workers, bool) or not isinstance(self.max_workers, int) or self.max_workers < 1:
            raise ConfigurationError(
                "max_workers must be a positive integer",
                config_key="max_workers",
                actual_value=self.max_workers,
            )
        if self.request_timeout is not None and (
            isinstance(self.request_timeout, bool)
            or not isinstance(self.request_timeout, (int, float))
            or self.request_timeout <= 0
        ):
            raise ConfigurationError(
                "request_timeout must be a positive number of seconds",
                config_key="request_timeout",
                actual_value=self.request_timeout,
            )
        if self.legacy_output and len(self.jurisdictions) > 1:
            raise ConfigurationError(
                "Legacy output (eu-ctr.csv) supports a single jurisdiction only",
                config_key="legacy_output",
                actual_value=sorted(self.jurisdictions),
            )

    def jobs(self) -> List[JurisdictionJob]:
        """Jurisdiction jobs in configured order."""
        return [JurisdictionJob(code, pages) for code, pages in self.jurisdictions.items()]

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "CrawlerConfig":
        """Build a config from a plain dict (e.g. a parsed JSON file)."""
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigurationError(
                f"Unknown configuration key(s): {', '.join(unknown)}",
                config_key=unknown[0],
            )
        return cls(**dict(data))

    def with_overrides(self, **overrides: Any) -> "CrawlerConfig":
        """Return a new config with non-None overrides applied."""
        values = {f.name: getattr(self, f.name) for f in fields(self)}
        values.update({k: v for k, v in overrides.items() if v is not None})
        return CrawlerConfig(**values)


def load_config(config_path: Union[str, Path]) -> CrawlerConfig:
    """
    Load configuration from a JSON file.

    Args:
        config_path: Path to the JSON file.

    Returns:
        CrawlerConfig built from the file contents.

    Raises:
        ConfigurationError: If the file is missing, invalid JSON, or has bad values.
    """
    config_path = Path(config_path)
    try:
        with open(config_path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError as e:
        raise ConfigurationError(f"Config file not found: {config_path}") from e
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"Invalid JSON in config file {config_path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigurationError(
            "Config file must contain a JSON object",
            actual_value=type(data).__name__,
        )
    return CrawlerConfig.from_dict(data)


def parse_country_args(values: Iterable[str]) -> Dict[str, int]:
    """
    Parse ``CODE=PAGES`` command-line values into a jurisdiction table.

    >>> parse_country_args(["de=3", "fr=1"])
    {'de': 3, 'fr': 1}
    """
    table: Dict[str, int] = {}
    for value in values:
        code, sep, pages = value.partition("=")
        code = code.strip()
        if not sep:
            raise ConfigurationError(
                "Expected CODE=PAGES",
                config_key="country",
                actual_value=value,
            )
        try:
            bound = int(pages.strip())
        except ValueError as e:
            raise ConfigurationError(
                f"Page bound for '{code}' is not an integer",
                config_key="country",
                actual_value=value,
            ) from e
        table[validate_jurisdiction(code)] = validate_page_bound(code, bound)
    return table
