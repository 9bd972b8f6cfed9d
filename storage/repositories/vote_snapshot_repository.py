
import json
import logging
from typing import Optional

from storage.models.vote_snapshot import VoteOptimizationSnapshot
from storage.repositories.base_repository import FlatFileRepository

logger = logging.getLogger(__name__)

REMOTE_DIR = "votion"


def snapshot_filename(period: Optional[int]) -> str:
    return f"votion-epoch-{period if period is not None else 'test'}.json"


def remote_path(period: int) -> str:
    return f"{REMOTE_DIR}/{snapshot_filename(period)}"


def serialize_snapshot(snapshot: VoteOptimizationSnapshot) -> str:
    return json.dumps(snapshot.to_dict(), indent=2)


class VoteSnapshotRepository(FlatFileRepository):
    """Local JSON copies of vote optimization snapshots, keyed by voting period."""

    def save_local(self, snapshot: VoteOptimizationSnapshot) -> str:
        return self.write_text(self.path(snapshot_filename(snapshot.period)), serialize_snapshot(snapshot))
