"""
Main Sync Orchestrator
Runs crawl + CSV export for every configured jurisdiction

FEATURES:
- Sequential by default; optional ThreadPoolExecutor across jurisdictions
  (pages within one jurisdiction are always fetched in order)
- Fail-fast by default: the first error stops the whole run
- Optional per-jurisdiction failure isolation
- SIGINT/SIGTERM cancel in-flight pagination without writing partial files
"""

import argparse
import signal
import sys
import threading
from concurrent.futures import ThreadPoolExecutor, as_completed
from datetime import datetime
from pathlib import Path
from typing import Dict, List, Optional

from . import __version__
from .config import CrawlerConfig, JurisdictionJob, load_config, parse_country_args
from .exceptions import CrawlCancelled, EUCTRError, FileError
from .http_client import RegistryClient
from .log_setup import LogContext, configure_logging, get_logger
from .paginator import crawl
from .writer import output_path, write_trials

logger = get_logger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_CANCELLED = 130


class EUCTRSyncOrchestrator:
    """Coordinates crawling and CSV export across jurisdictions"""

    def __init__(self, config: CrawlerConfig, client=None,
                 cancel_event: Optional[threading.Event] = None):
        """
        Args:
            config: Run configuration (jurisdiction table, output dir, policies).
            client: Object with ``fetch(jurisdiction, page) -> bytes``. A
                RegistryClient is created (and owned) when omitted.
            cancel_event: Shared cancellation flag; a new one is created when omitted.
        """
        self.config = config
        self._owns_client = client is None
        self.client = client or RegistryClient(
            base_url=config.base_url,
            verify=not config.insecure,
            timeout=config.request_timeout,
            pool_size=config.max_workers,
        )
        self.cancel_event = cancel_event or threading.Event()
        self.failures: Dict[str, EUCTRError] = {}
        self._lock = threading.Lock()
        self._previous_handlers = {}

    # ------------------------------------------------------------------
    # Cancellation
    # ------------------------------------------------------------------

    def cancel(self):
        """Ask every in-flight jurisdiction to stop before its next page."""
        self.cancel_event.set()

    def _signal_handler(self, signum, frame):
        logger.warning(f"Received signal {signum}; cancelling crawl (repeat to force quit)...")
        # A second signal goes to the previous handler (KeyboardInterrupt for SIGINT)
        self.restore_signal_handlers()
        self.cancel()

    def install_signal_handlers(self):
        """Route SIGINT/SIGTERM to cancel(). Must be called from the main thread."""
        for signum in (signal.SIGINT, signal.SIGTERM):
            self._previous_handlers[signum] = signal.signal(signum, self._signal_handler)

    def restore_signal_handlers(self):
        for signum, handler in self._previous_handlers.items():
            signal.signal(signum, handler)
        self._previous_handlers.clear()

    # ------------------------------------------------------------------
    # Per-jurisdiction work
    # ------------------------------------------------------------------

    def process_jurisdiction(self, job: JurisdictionJob) -> Path:
        """Crawl one jurisdiction and write its CSV. Returns the written path."""
        if self.cancel_event.is_set():
            raise CrawlCancelled(jurisdiction=job.code)

        with LogContext(logger, f"jurisdiction {job.code} ({job.max_pages} pages)"):
            trials = crawl(job.code, job.max_pages, self.client, self.cancel_event)
            if self.cancel_event.is_set():
                # Run aborted while the last page was in flight
                raise CrawlCancelled(jurisdiction=job.code)
            path = output_path(job.code, self.config.output_dir, legacy=self.config.legacy_output)
            try:
                write_trials(path, trials)
            except EUCTRError as e:
                raise e.with_location(job.code)
            logger.info(f"[{job.code}] wrote {len(trials)} trials to {path}")
            return path

    def _record_failure(self, job: JurisdictionJob, error: EUCTRError):
        with self._lock:
            self.failures[job.code] = error
        logger.error(f"[{job.code}] jurisdiction failed, continuing: {error}")

    # ------------------------------------------------------------------
    # Run
    # ------------------------------------------------------------------

    def run(self) -> Dict[str, Path]:
        """
        Process all jobs.

        Returns:
            Mapping of jurisdiction code to written CSV path, in configured order.

        Raises:
            EUCTRError: First failure (fail-fast mode).
            CrawlCancelled: If cancelled externally.
        """
        start_time = datetime.now()
        jobs = self.config.jobs()
        try:
            self.config.output_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise FileError(f"Cannot create output directory: {e}",
                            path=str(self.config.output_dir)) from e

        logger.info("=" * 70)
        logger.info(f"EU CTR SCRAPER v{__version__}")
        logger.info(f"Jurisdictions: {', '.join(f'{j.code}={j.max_pages}' for j in jobs) or '(none)'}")
        logger.info(f"Workers: {self.config.max_workers}")
        logger.info(f"Failure policy: {'isolate' if self.config.isolate_failures else 'fail-fast'}")
        logger.info(f"Output: {self.config.output_dir}")
        logger.info("=" * 70)

        if self.config.max_workers > 1 and len(jobs) > 1:
            results = self._run_parallel(jobs)
        else:
            results = self._run_sequential(jobs)

        ordered = {job.code: results[job.code] for job in jobs if job.code in results}
        self._log_summary(ordered, datetime.now() - start_time)
        return ordered

    def _run_sequential(self, jobs: List[JurisdictionJob]) -> Dict[str, Path]:
        results = {}
        for job in jobs:
            try:
                results[job.code] = self.process_jurisdiction(job)
            except CrawlCancelled:
                raise
            except EUCTRError as e:
                if not self.config.isolate_failures:
                    raise
                self._record_failure(job, e)
        return results

    def _run_parallel(self, jobs: List[JurisdictionJob]) -> Dict[str, Path]:
        results = {}
        first_error: Optional[EUCTRError] = None
        cancelled: Optional[CrawlCancelled] = None

        with ThreadPoolExecutor(max_workers=self.config.max_workers) as executor:
            futures = {executor.submit(self.process_jurisdiction, job): job for job in jobs}

            for future in as_completed(futures):
                job = futures[future]
                if future.cancelled():
                    continue
                try:
                    results[job.code] = future.result()
                except CrawlCancelled as e:
                    cancelled = cancelled or e
                except EUCTRError as e:
                    if self.config.isolate_failures:
                        self._record_failure(job, e)
                        continue
                    if first_error is None:
                        first_error = e
                        # Stop in-flight jurisdictions at their next page
                        self.cancel()
                        for other in futures:
                            other.cancel()

        if first_error is not None:
            raise first_error
        if cancelled is not None:
            raise cancelled
        return results

    def _log_summary(self, results: Dict[str, Path], duration):
        logger.info("=" * 70)
        logger.info("SYNC COMPLETE")
        logger.info(f"Duration: {duration}")
        for code, path in results.items():
            logger.info(f"  {code}: {path}")
        for code, error in self.failures.items():
            logger.info(f"  {code}: FAILED - {error}")
        logger.info("=" * 70)

    def close(self):
        if self._owns_client:
            self.client.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()


# ----------------------------------------------------------------------
# CLI
# ----------------------------------------------------------------------

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="euctr",
        description="Scrape EU Clinical Trials Register search listings to CSV, one file per country",
    )
    parser.add_argument("-c", "--config", type=Path, help="JSON config file")
    parser.add_argument("--country", action="append", metavar="CODE=PAGES",
                        help="Jurisdiction and page bound, e.g. de=3 (repeatable; replaces the configured table)")
    parser.add_argument("--out-dir", type=Path, help="Directory for eu-ctr-<code>.csv files")
    parser.add_argument("--insecure", action="store_true", default=None,
                        help="Disable TLS certificate verification")
    parser.add_argument("--isolate-failures", action="store_true", default=None,
                        help="Log a failed jurisdiction and continue with the rest")
    parser.add_argument("--workers", type=int, help="Jurisdictions processed concurrently")
    parser.add_argument("--legacy", dest="legacy_output", action="store_true", default=None,
                        help="Single jurisdiction, written to eu-ctr.csv")
    parser.add_argument("--timeout", type=float, help="Per-request timeout (seconds)")
    parser.add_argument("--log-level", help="DEBUG, INFO, WARNING, ERROR")
    parser.add_argument("--log-dir", type=Path, help="Directory for rotating log files")
    return parser


def resolve_config(args: argparse.Namespace) -> CrawlerConfig:
    """Defaults, then the JSON file, then command-line flags."""
    config = load_config(args.config) if args.config else CrawlerConfig()
    return config.with_overrides(
        jurisdictions=parse_country_args(args.country) if args.country else None,
        output_dir=args.out_dir,
        insecure=args.insecure,
        isolate_failures=args.isolate_failures,
        max_workers=args.workers,
        legacy_output=args.legacy_output,
        request_timeout=args.timeout,
        log_level=args.log_level,
        log_dir=args.log_dir,
    )


def main(argv: Optional[List[str]] = None) -> int:
    """Entry point. Returns the process exit status."""
    args = build_parser().parse_args(argv)

    try:
        configure_logging(args.log_level or "INFO")
        config = resolve_config(args)
        configure_logging(config.log_level, config.log_dir)
    except (EUCTRError, ValueError) as e:
        logger.error(f"Configuration error: {e}")
        return EXIT_FAILURE

    with EUCTRSyncOrchestrator(config) as orchestrator:
        orchestrator.install_signal_handlers()
        try:
            orchestrator.run()
        except CrawlCancelled as e:
            logger.warning(f"Run cancelled: {e}")
            return EXIT_CANCELLED
        except EUCTRError as e:
            where = f"jurisdiction={e.jurisdiction}" if e.jurisdiction else "run"
            if e.page is not None:
                where += f" page={e.page}"
            logger.error(f"Aborting ({where}): {e}")
            return EXIT_FAILURE
        finally:
            orchestrator.restore_signal_handlers()

    if orchestrator.failures:
        logger.error(f"{len(orchestrator.failures)} jurisdiction(s) failed: "
                     f"{', '.join(orchestrator.failures)}")
        return EXIT_FAILURE
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
