"""
EU Clinical Trials Register scraper

Pages through clinicaltrialsregister.eu search listings per country code,
extracts the fixed listing fields, and writes one CSV per country.
"""

__version__ = "1.0.0"

from .config import CrawlerConfig, JurisdictionJob
from .exceptions import (
    ConfigurationError,
    CrawlCancelled,
    EUCTRError,
    FileError,
    NetworkError,
    ParseError,
)
from .extractor import extract_trials
from .fields import COLUMNS, FIELD_LABELS, Trial
from .http_client import RegistryClient, build_search_url
from .paginator import crawl
from .writer import output_path, write_trials

__all__ = [
    'CrawlerConfig',
    'JurisdictionJob',
    'EUCTRError',
    'ConfigurationError',
    'NetworkError',
    'ParseError',
    'FileError',
    'CrawlCancelled',
    'Trial',
    'FIELD_LABELS',
    'COLUMNS',
    'RegistryClient',
    'build_search_url',
    'extract_trials',
    'crawl',
    'write_trials',
    'output_path',
]
