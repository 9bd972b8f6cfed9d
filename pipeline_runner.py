#!/usr/bin/env python3
"""
Pool Snapshot Runner
Runs one pool snapshot mode (daily, weekly, monthly or yearly) and publishes the result.

Usage: python pipeline_runner.py [daily|weekly|monthly|yearly]
"""

import sys
import logging
import json
import traceback
from datetime import datetime
from pathlib import Path
from typing import Optional

# Add project root to Python path
project_root = Path(__file__).parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from config import Settings, load_settings
from api_clients.pools_client import PoolsClient
from data_ingestion import pool_snapshots
from data_processing.periods import epoch_number
from reporting_notification.publishers import GitPublisher
from storage.repositories.pool_snapshot_repository import PoolSnapshotRepository

logger = logging.getLogger(__name__)

MODES = ("daily", "weekly", "monthly", "yearly")


class JsonFormatter(logging.Formatter):
    def format(self, record):
        log_record = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "message": record.getMessage(),
            "name": record.name
        }
        return json.dumps(log_record)


def configure_logging(log_format: str = "json") -> None:
    """
    Progress (INFO) goes to stdout, warnings and errors to stderr.
    Records are JSON lines unless ``log_format`` is 'text'.
    """
    if log_format == "text":
        formatter = logging.Formatter('%(asctime)s - %(levelname)s - %(message)s')
    else:
        formatter = JsonFormatter()

    progress = logging.StreamHandler(sys.stdout)
    progress.addFilter(lambda record: record.levelno < logging.WARNING)
    diagnostics = logging.StreamHandler(sys.stderr)
    diagnostics.setLevel(logging.WARNING)

    # Get root logger and remove existing handlers to avoid duplication
    root_logger = logging.getLogger()
    for h in root_logger.handlers[:]:
        root_logger.removeHandler(h)
    for handler in (progress, diagnostics):
        handler.setFormatter(formatter)
        root_logger.addHandler(handler)
    root_logger.setLevel(logging.INFO)


def run_mode(mode: str, settings: Settings, repo: PoolSnapshotRepository, now: datetime) -> pool_snapshots.RunResult:
    if mode == "daily":
        client = PoolsClient(settings.pools_api_url, timeout=settings.http_timeout)
        return pool_snapshots.run_daily(repo, client, now)
    if mode == "weekly":
        return pool_snapshots.run_weekly(repo, now)
    if mode == "monthly":
        return pool_snapshots.run_monthly(repo, now)
    if mode == "yearly":
        return pool_snapshots.run_yearly(repo, now)
    raise ValueError(f"Unknown mode: {mode}")


def run(mode: str, settings: Settings, publisher: Optional[GitPublisher] = None, now: Optional[datetime] = None) -> pool_snapshots.RunResult:
    """Prepare the data root, run ``mode`` and publish the written files."""
    if mode not in MODES:
        raise ValueError(f"Unknown mode: {mode}")

    now = now or datetime.now().astimezone()
    if publisher is None:
        publisher = GitPublisher(settings.github_token, settings.github_repo, settings.github_branch, settings.data_root)

    logger.info("=" * 40)
    logger.info("  SkeletonSwap Pool Snapshot")
    logger.info(f"  Mode: {mode}")
    logger.info(f"  Time: {now.isoformat()}")
    logger.info(f"  Epoch: {epoch_number(now)}")
    logger.info("=" * 40)

    publisher.prepare()
    repo = PoolSnapshotRepository(settings.data_root)
    repo.ensure_directories()

    result = run_mode(mode, settings, repo, now)

    publisher.publish(f"{mode} snapshot: {result.file}")
    logger.info(f"✓ Complete! Processed {result.pools} pools.")
    return result


def main(argv=None) -> int:
    """Main entry point for the pool snapshot runner."""
    argv = sys.argv[1:] if argv is None else argv
    mode = argv[0] if argv else "daily"

    settings = load_settings()
    configure_logging(settings.log_format)

    try:
        run(mode, settings)
    except Exception as e:
        logger.error(f"✗ Error: {e}")
        traceback.print_exc()
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
