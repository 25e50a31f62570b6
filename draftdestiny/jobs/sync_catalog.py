"""
Synchronize the local catalog mirror.

Loads persisted catalog data, downloading it first when it is missing. With
--force, always downloads. With --check, downloads only when the upstream
database version differs from the stored one.
"""

import argparse
import logging
import sys

import httpx

from draftdestiny.models.failure import KnownError
from draftdestiny.services.reference_cache import get_reference_cache
from draftdestiny.services.synchronizer import Synchronizer, UpdateStatus

logger = logging.getLogger(__name__)


def run_sync(synchronizer: Synchronizer, force: bool = False, check: bool = False) -> UpdateStatus:
    """Run one synchronization and return its status."""
    if force:
        logger.info("Updating catalog...")
        return synchronizer.update()

    if check:
        try:
            version = synchronizer.update_version()
        except (httpx.HTTPError, KnownError) as e:
            logger.warning("Version check failed: %s", e)
            version = None

        if version is not None:
            logger.info("New catalog version %s available, updating...", version)
            status = synchronizer.update()
            if status is UpdateStatus.COMPLETE:
                synchronizer.save_version(version)
            return status

    logger.info("Loading local catalog...")
    return synchronizer.load_local_data()


def main(argv: list[str] | None = None) -> int:
    """CLI entry point."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    parser = argparse.ArgumentParser(description="Synchronize the card catalog")
    parser.add_argument(
        "--force",
        action="store_true",
        help="Download all catalog data even if a local copy exists",
    )
    parser.add_argument(
        "--check",
        action="store_true",
        help="Download only if the upstream database version changed",
    )
    args = parser.parse_args(argv)

    synchronizer = Synchronizer(get_reference_cache())
    status = run_sync(synchronizer, force=args.force, check=args.check)
    logger.info("Catalog sync finished: %s", status.value)

    return 1 if status is UpdateStatus.FAILED else 0


if __name__ == "__main__":
    sys.exit(main())
