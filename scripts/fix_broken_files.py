#!/usr/bin/env python
"""
Repair Mosaic file records that no longer match the shared filesystem.

For every sample of a project, each CRAM/CRAI/VCF/TBI file record is
compared against its canonical location under the project directory:

    <projectDir>/Data/PolishedBams/<name>       CRAM and CRAI
    <projectDir>/VCF/Complete/*.vcf.gz[.tbi]    VCF and TBI

Broken records are rewritten to point at the canonical file when it exists.

Usage:
    PYTHONPATH=.
    python scripts/fix_broken_files.py <token> <projectId> <projectDir>
    python scripts/fix_broken_files.py <token> <projectId> <projectDir> --dry-run
"""

import argparse
import sys

import httpx
from pydantic import ValidationError

from api.reconcile.models import ReconcilePolicy, ReconcilerConfig
from api.reconcile.services import Reconciler
from core.config import get_settings
from core.logger import logger
from core.mosaic import MosaicAPIError, MosaicClient


class ArgumentParser(argparse.ArgumentParser):
    """Exit with status 1 on invalid arguments"""

    def error(self, message):
        self.print_usage(sys.stderr)
        logger.error(f"Invalid arguments: {message}")
        sys.exit(1)


def parse_args(argv=None) -> argparse.Namespace:
    parser = ArgumentParser(
        description="Repair Mosaic file records that point at missing or mismatched files",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Check and repair all file records of project 42
  python scripts/fix_broken_files.py $TOKEN 42 /scratch/projects/42

  # Show what would be repaired without making changes
  python scripts/fix_broken_files.py $TOKEN 42 /scratch/projects/42 --dry-run

  # Only repair records whose uri is missing
  python scripts/fix_broken_files.py $TOKEN 42 /scratch/projects/42 --policy access
        """,
    )

    parser.add_argument("token", help="Mosaic API bearer token")
    parser.add_argument("project_id", help="Mosaic project id")
    parser.add_argument("project_dir", help="Project directory on the shared filesystem")
    parser.add_argument(
        "--policy",
        choices=[policy.value for policy in ReconcilePolicy],
        default=ReconcilePolicy.METADATA.value,
        help="metadata: also compare size, name and nickname (default); "
        "access: only check that the uri exists",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Show what would be repaired without making changes",
    )
    parser.add_argument("--api-url", help="Mosaic API base URL (default: MOSAIC_API_URL)")

    return parser.parse_args(argv)


def main(argv=None, client: MosaicClient | None = None) -> int:
    args = parse_args(argv)
    settings = get_settings()

    config = ReconcilerConfig(
        token=args.token,
        project_id=args.project_id,
        project_dir=args.project_dir,
        policy=ReconcilePolicy(args.policy),
        dry_run=args.dry_run,
        polished_bam_subdir=settings.POLISHED_BAM_SUBDIR,
        complete_vcf_subdir=settings.COMPLETE_VCF_SUBDIR,
    )

    if client is None:
        client = MosaicClient(config.token, base_url=args.api_url)

    reconciler = Reconciler(client, config)

    try:
        reconciler.run()
    except (MosaicAPIError, httpx.HTTPError, ValidationError) as e:
        logger.error(f"Failed to list samples for project {config.project_id}: {e}")
        return 1
    finally:
        reconciler.print_summary()
        client.close()

    return 0


if __name__ == "__main__":
    sys.exit(main())
