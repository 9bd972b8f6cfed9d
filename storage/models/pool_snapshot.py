from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Context, Decimal
from typing import List

DAILY_HEADERS = [
    'date', 'time', 'pool_id', 'pool_address', 'tvl_usd', 'volume_24h_usd',
    'volume_7d_usd', 'apr_7d', 'reserve_0', 'reserve_1', 'total_share',
]

AGG_HEADERS = [
    'period', 'pool_id', 'pool_address', 'avg_tvl_usd', 'total_volume_usd',
    'avg_apr_7d', 'avg_reserve_0', 'avg_reserve_1', 'avg_total_share', 'snapshot_count',
]


def fixed(value: float, places: int) -> str:
    """Format ``value`` with ``places`` decimals, rounding exact binary ties away from zero."""
    quantum = Decimal(1).scaleb(-places)
    # Raw reserve amounts can exceed the default 28 digit precision
    return f"{Decimal(value).quantize(quantum, rounding=ROUND_HALF_UP, context=Context(prec=60)):f}"


@dataclass(frozen=True)
class PoolRecord:
    """One pool observed at one instant, as written to a day slot file."""
    date: str
    time: str
    pool_id: str
    pool_address: str
    tvl_usd: float
    volume_24h_usd: float
    volume_7d_usd: float
    apr_7d: float
    reserve_0: str
    reserve_1: str
    total_share: str

    def to_row(self) -> List[str]:
        return [
            self.date,
            self.time,
            self.pool_id,
            self.pool_address,
            fixed(self.tvl_usd, 2),
            fixed(self.volume_24h_usd, 2),
            fixed(self.volume_7d_usd, 2),
            fixed(self.apr_7d, 4),
            self.reserve_0,
            self.reserve_1,
            self.total_share,
        ]


@dataclass(frozen=True)
class AggregateRecord:
    """One rollup row for one pool over a period."""
    period: str
    pool_id: str
    pool_address: str
    avg_tvl_usd: float
    total_volume_usd: float
    avg_apr_7d: float
    avg_reserve_0: float
    avg_reserve_1: float
    avg_total_share: float
    snapshot_count: int

    def to_row(self) -> List[str]:
        return [
            self.period,
            self.pool_id,
            self.pool_address,
            fixed(self.avg_tvl_usd, 2),
            fixed(self.total_volume_usd, 2),
            fixed(self.avg_apr_7d, 4),
            fixed(self.avg_reserve_0, 0),
            fixed(self.avg_reserve_1, 0),
            fixed(self.avg_total_share, 0),
            str(self.snapshot_count),
        ]
