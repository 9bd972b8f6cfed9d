
import logging
from typing import Any, Dict, Optional

from api_clients.http import get_json
from api_clients.pools_client import dig, to_float
from config import Lockup
from storage.models.vote_snapshot import LockupSnapshot, OptimizationAlternative, VotedPool

logger = logging.getLogger(__name__)


def decode_optimization(raw: Dict[str, Any]) -> OptimizationAlternative:
    votes = dig(raw, 'meta', 'votes', default=[]) or []
    return OptimizationAlternative(
        bucket=dig(raw, 'id', default=''),
        voting_power=to_float(dig(raw, 'votingPower', default=0)),
        expected_rewards=to_float(dig(raw, 'optimization', 'totalExpectedReward', default=0)),
        is_worth_changing=bool(dig(raw, 'diff', 'isWorthChanging', default=False)),
        potential_gain=to_float(dig(raw, 'diff', 'rewardLoss', default=0)),
        deviation=str(dig(raw, 'diff', 'totalDeviation', default="0")),
        message=str(dig(raw, 'diff', 'message', default="")),
        active_voted=dig(raw, 'activeVoted', default={}) or {},
        new_voted=dig(raw, 'newVoted', default={}) or {},
        pools=tuple(
            VotedPool(address=vote.get('id', ''), name=vote.get('title', ''))
            for vote in votes if isinstance(vote, dict)
        ),
    )


def decode_lockup(lockup: Lockup, data: Any) -> Optional[LockupSnapshot]:
    """
    Decode one bucket's optimization response.
    Returns None when the response carries no period (no position for this bucket).
    """
    period = dig(data, 'period')
    if not period:
        return None

    optimizations = dig(data, 'optimizations', default=[]) or []
    return LockupSnapshot(
        type=lockup.type,
        duration=lockup.duration,
        multiplier=lockup.multiplier,
        period=int(period),
        vote_before=dig(data, 'voteBefore'),
        calculated=dig(data, 'calculated'),
        voting_power=to_float(dig(optimizations, 0, 'votingPower', default=0)),
        total_expected_reward=to_float(dig(data, 'summary', 'totalExpectedReward', default=0)),
        optimizations=tuple(decode_optimization(opt) for opt in optimizations if isinstance(opt, dict)),
    )


class VotionClient:
    """Read-only client for the per-lockup vote optimization endpoint."""

    def __init__(self, base_url: str, timeout: float = 30):
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout

    def optimization_url(self, lockup: Lockup) -> str:
        return f"{self.base_url}/{lockup.id}/optimization"

    def fetch_lockup(self, lockup: Lockup) -> Optional[LockupSnapshot]:
        data = get_json(self.optimization_url(lockup), timeout=self.timeout)
        return decode_lockup(lockup, data)
