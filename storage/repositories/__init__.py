
from storage.repositories.base_repository import FlatFileRepository
from storage.repositories.pool_snapshot_repository import PoolSnapshotRepository
from storage.repositories.vote_snapshot_repository import VoteSnapshotRepository
from storage.repositories.exceptions import StorageError

__all__ = [
    'FlatFileRepository',
    'PoolSnapshotRepository',
    'VoteSnapshotRepository',
    'StorageError',
]
