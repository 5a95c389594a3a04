import logging
import time
from typing import Any, Optional

import requests

from src.collectors import CollectorSpec, default_collectors
from src.logger import log_function
from src.storage import BaseStorage, LocalStorage
from src.sync.builder import artifact_paths, build_document
from src.sync.config import SyncConfig
from src.sync.fetcher import DEFAULT_HEADERS, download_asset
from src.sync.models import BuildOutput, RunRecord, RunReport
from src.sync.normalize import canonicalize_date
from .build import BuildInvoker, ShellBuildInvoker


class SyncOrchestrator:
    """
    Drives every collected item through the image fetcher and the document
    builder, then runs the optional site build.

    Run stages:
        1. Create the output roots (the only failure that aborts a run)
        2. Fetch metadata from each collector, each in its own failure boundary
        3. Process items one at a time
        4. Invoke the build command, if any
        5. Return the RunReport
    """

    def __init__(
        self,
        config: SyncConfig,
        collectors: list[CollectorSpec],
        build_invoker: Optional[BuildInvoker] = None,
        session: Optional[requests.Session] = None,
        storage: Optional[BaseStorage] = None,
    ):
        self.config = config
        self.collectors = collectors
        self.build_invoker = build_invoker
        self.session = session
        self.storage = storage or LocalStorage()
        self.logger = logging.getLogger("content_sync")

    def prepare_output_dirs(self) -> None:
        """
        Raises:
            RuntimeError: If an output root cannot be created
        """
        self.storage.create_workspace(self.config.documents_root)
        self.storage.create_workspace(self.config.images_root)

    def fetch_metadata(
        self, spec: CollectorSpec, report: RunReport
    ) -> list[dict[str, Any]]:
        """Call one collector; a failure is recorded and yields no items."""
        try:
            raw_items = list(spec.fetch())
        except Exception as e:
            self.logger.error(f"Collector {spec.name} failed: {type(e).__name__}: {e}")
            report.collector_errors[spec.name] = f"{type(e).__name__}: {e}"
            return []
        self.logger.info(f"Collector {spec.name} returned {len(raw_items)} items")
        return raw_items

    def process_item(
        self,
        spec: CollectorSpec,
        raw: dict[str, Any],
        deadline: Optional[float] = None,
    ) -> RunRecord:
        """Fetch the image and build the document for one raw item."""
        try:
            item = spec.to_source_item(raw)
        except ValueError as e:
            self.logger.error(f"Skipping invalid {spec.name} item {spec.raw_title(raw)!r}: {e}")
            return RunRecord(
                title=spec.raw_title(raw),
                timestamp="",
                document_path=None,
                image_path=None,
                image_downloaded=False,
                document_created=False,
                source=spec.name,
                errors=[f"invalid item: {e}"],
            )

        paths = artifact_paths(item.title, self.config)
        record = RunRecord(
            title=item.title,
            timestamp=canonicalize_date(item.raw_timestamp),
            document_path=str(paths.document_path),
            image_path=str(paths.image_path),
            image_downloaded=False,
            document_created=False,
            source=spec.name,
        )

        fetch = download_asset(
            item.image_url,
            paths.image_path,
            session=self.session,
            max_attempts=self.config.max_attempts,
            retry_delay=self.config.retry_delay,
            max_redirects=self.config.max_redirects,
            timeout=self.config.request_timeout,
            deadline=deadline,
        )
        record.image_downloaded = fetch.downloaded
        if fetch.error:
            record.errors.append(f"image: {fetch.error}")

        try:
            build = build_document(item, self.config, self.storage)
        except OSError as e:
            self.logger.error(f"Failed to write {paths.document_path}: {e}")
            record.errors.append(f"document: {e}")
        except Exception as e:
            self.logger.exception(f"Unexpected error building '{item.title}'")
            record.errors.append(f"document: {type(e).__name__}: {e}")
        else:
            record.document_created = build.created
            record.needs_review = build.needs_review
            if build.error:
                record.errors.append(f"document: {build.error}")

        return record

    def invoke_build(self) -> BuildOutput:
        try:
            return self.build_invoker.run()
        except Exception as e:
            self.logger.error(f"Build step failed: {type(e).__name__}: {e}")
            return BuildOutput(stderr=f"{type(e).__name__}: {e}", exit_code=None)

    def list_output_files(self) -> dict[str, list[str]]:
        return {
            "documents": self.storage.list_files(self.config.documents_root),
            "images": self.storage.list_files(self.config.images_root),
        }

    @log_function(logger_name="content_sync", level=logging.INFO, log_execution_time=True)
    def run(self) -> RunReport:
        report = RunReport()
        self.logger.info("=== SYNC STARTED ===")

        self.prepare_output_dirs()

        deadline = None
        if self.config.run_timeout is not None:
            deadline = time.monotonic() + self.config.run_timeout

        batches = [(spec, self.fetch_metadata(spec, report)) for spec in self.collectors]

        owns_session = self.session is None
        if owns_session:
            self.session = requests.Session()
            self.session.headers.update(DEFAULT_HEADERS)

        try:
            for spec, raw_items in batches:
                for raw in raw_items:
                    if deadline is not None and time.monotonic() >= deadline:
                        report.timed_out = True
                        break
                    if spec.is_excluded(raw):
                        self.logger.info(
                            f"Excluded {spec.name} item {spec.raw_title(raw)!r}"
                        )
                        continue
                    report.items.append(self.process_item(spec, raw, deadline))
                if report.timed_out:
                    self.logger.warning("Run deadline reached, remaining items skipped")
                    break
        finally:
            if owns_session:
                self.session.close()
                self.session = None

        if self.build_invoker is not None:
            report.build_output = self.invoke_build()

        if self.config.list_files:
            report.files = self.list_output_files()

        created = sum(1 for r in report.items if r.document_created)
        downloaded = sum(1 for r in report.items if r.image_downloaded)
        self.logger.info(
            f"=== SYNC COMPLETED: {len(report.items)} items, {created} posts created, "
            f"{downloaded} images downloaded ==="
        )
        return report


def run_pipeline(
    config: SyncConfig,
    collectors: Optional[list[CollectorSpec]] = None,
    build_invoker: Optional[BuildInvoker] = None,
) -> RunReport:
    """
    Run a full sync.

    Args:
        config: Sync configuration
        collectors: Collectors to run (defaults to every registered one)
        build_invoker: Build step; defaults to the configured build command

    Returns:
        RunReport

    Raises:
        RuntimeError: If the output roots cannot be created
    """
    if collectors is None:
        collectors = default_collectors()
    if build_invoker is None and config.build_command:
        build_invoker = ShellBuildInvoker(config.build_command, config.build_timeout)
    return SyncOrchestrator(config, collectors, build_invoker=build_invoker).run()
