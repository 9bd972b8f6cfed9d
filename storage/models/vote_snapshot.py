from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple


@dataclass(frozen=True)
class VotedPool:
    address: str
    name: str

    def to_dict(self) -> Dict[str, Any]:
        return {"address": self.address, "name": self.name}


@dataclass(frozen=True)
class OptimizationAlternative:
    """One per-strategy optimization result returned for a lockup bucket."""
    bucket: str
    voting_power: float
    expected_rewards: float
    is_worth_changing: bool
    potential_gain: float
    deviation: str
    message: str
    active_voted: Dict[str, Any] = field(default_factory=dict)
    new_voted: Dict[str, Any] = field(default_factory=dict)
    pools: Tuple[VotedPool, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "bucket": self.bucket,
            "votingPower": self.voting_power,
            "expectedRewards": self.expected_rewards,
            "isWorthChanging": self.is_worth_changing,
            "potentialGain": self.potential_gain,
            "deviation": self.deviation,
            "message": self.message,
            "activeVoted": self.active_voted,
            "newVoted": self.new_voted,
            "pools": [pool.to_dict() for pool in self.pools],
        }


@dataclass(frozen=True)
class LockupSnapshot:
    """Optimization state of a single lockup bucket."""
    type: str
    duration: str
    multiplier: int
    period: int
    vote_before: Optional[str]
    calculated: Optional[str]
    voting_power: float
    total_expected_reward: float
    optimizations: Tuple[OptimizationAlternative, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.type,
            "duration": self.duration,
            "multiplier": self.multiplier,
            "period": self.period,
            "voteBefore": self.vote_before,
            "calculated": self.calculated,
            "votingPower": self.voting_power,
            "totalExpectedReward": self.total_expected_reward,
            "optimizations": [opt.to_dict() for opt in self.optimizations],
        }


@dataclass
class VoteOptimizationSnapshot:
    """
    Capture of all configured lockup buckets at one instant.

    ``lockups`` maps bucket id to its snapshot, or to None when the bucket
    has no position or could not be fetched.
    """
    captured_at: str
    captured_at_unix: int
    period: Optional[int] = None
    vote_before: Optional[str] = None
    total_expected_rewards: float = 0.0
    lockups: Dict[str, Optional[LockupSnapshot]] = field(default_factory=dict)

    @property
    def success_count(self) -> int:
        return sum(1 for lockup in self.lockups.values() if lockup is not None)

    def record(self, bucket_id: str, lockup: Optional[LockupSnapshot]) -> None:
        self.lockups[bucket_id] = lockup
        if lockup is None:
            return
        # All buckets share the same voting period; the first success sets it
        if self.period is None:
            self.period = lockup.period
            self.vote_before = lockup.vote_before
        self.total_expected_rewards += lockup.total_expected_reward

    def to_dict(self) -> Dict[str, Any]:
        return {
            "capturedAt": self.captured_at,
            "capturedAtUnix": self.captured_at_unix,
            "period": self.period,
            "voteBefore": self.vote_before,
            "totalExpectedRewards": self.total_expected_rewards,
            "lockups": {
                bucket_id: lockup.to_dict() if lockup is not None else None
                for bucket_id, lockup in self.lockups.items()
            },
        }


def snapshot_lines(snapshot: VoteOptimizationSnapshot) -> List[str]:
    return [
        f"   - Period: {snapshot.period}",
        f"   - Lockups with positions: {snapshot.success_count}/{len(snapshot.lockups)}",
        f"   - Total Expected Rewards: ${snapshot.total_expected_rewards:,.2f}",
        f"   - Vote Before: {snapshot.vote_before}",
    ]
