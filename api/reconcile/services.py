"""
Reconcile sample file records against the shared filesystem
"""

from typing import Any, List

import httpx
from pydantic import ValidationError

from api.files.models import FileRecord
from api.files.services import (
    build_update,
    compare_file,
    get_sample_files,
    is_accessible,
    resolve_expected_location,
    update_file,
)
from api.reconcile.models import ReconcilerConfig, ReconcileStats
from api.samples.services import get_samples
from core.logger import logger
from core.mosaic import MosaicAPIError, MosaicClient


class Reconciler:
    """Walks every sample of a project and repairs broken file records."""

    def __init__(self, client: MosaicClient, config: ReconcilerConfig):
        self.client = client
        self.config = config
        self.stats = ReconcileStats()

    def run(self) -> ReconcileStats:
        """
        Reconcile every sample of the project, one at a time.

        Failing to list the project's samples propagates; everything below
        that is logged and skipped.
        """
        project_id = self.config.project_id
        samples = get_samples(self.client, project_id)
        logger.info(f"Project {project_id}: {len(samples)} samples")

        for sample in samples:
            self.stats.samples += 1
            try:
                files = get_sample_files(self.client, project_id, sample.id)
            except (MosaicAPIError, httpx.HTTPError, ValidationError) as e:
                logger.error(f"Failed to list files for sample {sample.id}: {e}")
                self.stats.errors += 1
                continue
            self.check_files(sample.id, files)

        return self.stats

    def check_files(self, sample_id: int, files: List[Any]):
        """
        Check each record of a sample.

        Records may be raw listing entries or FileRecord objects; a record
        that fails validation or checking is logged and counted in errors.
        """
        for file in files:
            file_id = file.get("id") if isinstance(file, dict) else getattr(file, "id", None)
            try:
                if not isinstance(file, FileRecord):
                    file = FileRecord.model_validate(file)
                self.check_file(sample_id, file)
            except ValidationError as e:
                logger.error(f"Invalid file record {file_id} of sample {sample_id}: {e}")
                self.stats.errors += 1
            except Exception as e:  # pylint: disable=broad-exception-caught
                logger.exception(f"Failed to check file {file_id} of sample {sample_id}: {e}")
                self.stats.errors += 1

    def check_file(self, sample_id: int, file: FileRecord) -> bool:
        """
        Check one file record and repair it when possible.

        Returns True when an update was sent (or would be, in dry-run mode).
        """
        if file.file_type is None:
            logger.debug(f"Skipping file {file.id} of type {file.type}")
            self.stats.skipped += 1
            return False

        self.stats.checked += 1
        expected = resolve_expected_location(file, self.config)
        comparison = compare_file(file, expected, self.config.policy)

        if not comparison.broken:
            logger.debug(f"File {file.id} ({file.name}) OK")
            self.stats.ok += 1
            return False

        logger.info(f"File {file.id} ({file.name}) broken: {comparison.describe()}")

        if expected is None or not is_accessible(expected.uri):
            logger.warning(
                f"Cannot repair file {file.id} of sample {sample_id}: "
                f"no accessible replacement for {file.uri}"
            )
            self.stats.irreparable += 1
            return False

        update = build_update(file, expected, self.config.policy)
        logger.info(f"Repairing file {file.id}: {file.uri} -> {update.uri}")

        if self.config.dry_run:
            logger.info(
                f"[DRY RUN] Would update file {file.id}: "
                f"{update.model_dump(exclude_none=True)}"
            )
            self.stats.repaired += 1
            return True

        try:
            body = update_file(
                self.client, self.config.project_id, sample_id, file.id, update
            )
        except (MosaicAPIError, httpx.HTTPError) as e:
            logger.error(f"Failed to update file {file.id} of sample {sample_id}: {e}")
            self.stats.errors += 1
            return False

        logger.debug(f"Update response for file {file.id}: {body}")
        self.stats.repaired += 1
        return True

    def print_summary(self):
        """Print reconciliation summary."""
        logger.info("=" * 50)
        logger.info("RECONCILIATION SUMMARY")
        logger.info("=" * 50)
        logger.info(f"Samples:         {self.stats.samples}")
        logger.info(f"Files checked:   {self.stats.checked}")
        logger.info(f"Files OK:        {self.stats.ok}")
        logger.info(f"Files repaired:  {self.stats.repaired}")
        logger.info(f"Irreparable:     {self.stats.irreparable}")
        logger.info(f"Skipped:         {self.stats.skipped}")
        logger.info(f"Errors:          {self.stats.errors}")

        if self.config.dry_run:
            logger.info("*** DRY RUN MODE - No records were actually updated ***")
