#!/usr/bin/env python3
"""
Votion Snapshot Runner
Captures the vote optimization state of every configured lockup bucket.

Usage: python votion_runner.py
"""

import sys
import logging
import traceback
from pathlib import Path

# Add project root to Python path
project_root = Path(__file__).parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from config import Settings, load_settings
from api_clients.github_client import GitHubContentsClient
from api_clients.votion_client import VotionClient
from data_ingestion.votion_snapshot import capture_votion_snapshot
from pipeline_runner import configure_logging
from reporting_notification.publishers import GitHubContentsPublisher
from storage.repositories.vote_snapshot_repository import VoteSnapshotRepository

logger = logging.getLogger(__name__)


def build_publisher(settings: Settings) -> GitHubContentsPublisher:
    if not settings.github_token:
        return GitHubContentsPublisher(None)
    client = GitHubContentsClient(settings.github_token, settings.votion_github_repo,
                                  settings.github_branch, timeout=settings.http_timeout)
    return GitHubContentsPublisher(client)


def main() -> int:
    settings = load_settings()
    configure_logging(settings.log_format)

    try:
        capture_votion_snapshot(
            settings.lockups,
            VotionClient(settings.votion_api_base, timeout=settings.http_timeout),
            build_publisher(settings),
            VoteSnapshotRepository(settings.data_root),
        )
    except Exception as e:
        logger.error(f"❌ Snapshot failed: {e}")
        traceback.print_exc()
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
