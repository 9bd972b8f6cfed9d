import logging
from datetime import datetime, timezone
from typing import Optional, Sequence

from api_clients.votion_client import VotionClient
from config import Lockup
from reporting_notification.publishers import GitHubContentsPublisher
from storage.models.vote_snapshot import VoteOptimizationSnapshot, snapshot_lines
from storage.repositories.vote_snapshot_repository import VoteSnapshotRepository, remote_path, serialize_snapshot

logger = logging.getLogger(__name__)


def _iso_timestamp(moment: datetime) -> str:
    return moment.astimezone(timezone.utc).isoformat(timespec='milliseconds').replace('+00:00', 'Z')


def collect_snapshot(lockups: Sequence[Lockup], client: VotionClient, now: Optional[datetime] = None) -> VoteOptimizationSnapshot:
    """
    Fetch every lockup bucket in order.

    A bucket that fails or has no position is recorded as None; the
    remaining buckets are still fetched.
    """
    now = now or datetime.now(timezone.utc)
    snapshot = VoteOptimizationSnapshot(
        captured_at=_iso_timestamp(now),
        captured_at_unix=int(now.timestamp() * 1000),
    )

    for lockup in lockups:
        logger.info(f"   Fetching {lockup.type} {lockup.duration}...")
        try:
            result = client.fetch_lockup(lockup)
        except Exception as e:
            logger.error(f"      ✗ Error: {e}")
            snapshot.record(lockup.id, None)
            continue

        snapshot.record(lockup.id, result)
        if result is None:
            logger.info("      ⊘ No position or empty response")
        else:
            logger.info(f"      ✓ VP: {result.voting_power:,.0f}, Expected: ${result.total_expected_reward:.2f}")

    return snapshot


def capture_votion_snapshot(lockups: Sequence[Lockup], client: VotionClient, publisher: GitHubContentsPublisher,
                            repo: VoteSnapshotRepository, now: Optional[datetime] = None) -> VoteOptimizationSnapshot:
    """Collect the snapshot, then push it to GitHub or, without a token, save it locally."""
    snapshot = collect_snapshot(lockups, client, now)

    logger.info(f"📸 Votion Epoch Snapshot {snapshot.captured_at}")
    logger.info("   Summary:")
    for line in snapshot_lines(snapshot):
        logger.info(line)

    if not publisher.enabled:
        logger.warning("   ⚠️ GITHUB_TOKEN not set - skipping push")
        path = repo.save_local(snapshot)
        logger.info(f"   Saved locally: {path}")
    elif snapshot.period is None:
        logger.warning("   No lockup returned a period - nothing to push")
    else:
        message = f"📸 Votion epoch {snapshot.period} snapshot - {snapshot.captured_at.split('T')[0]}"
        logger.info("   Pushing to GitHub...")
        publisher.publish_file(remote_path(snapshot.period), serialize_snapshot(snapshot), message)

    logger.info("✅ Snapshot complete!")
    return snapshot
