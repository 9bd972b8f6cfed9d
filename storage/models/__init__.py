
from storage.models.pool_snapshot import PoolRecord, AggregateRecord, DAILY_HEADERS, AGG_HEADERS
from storage.models.vote_snapshot import (
    VotedPool,
    OptimizationAlternative,
    LockupSnapshot,
    VoteOptimizationSnapshot,
)
