import logging
import math
from dataclasses import dataclass
from typing import Dict, List, Mapping, Optional, Sequence

import pandas as pd

from storage.models.pool_snapshot import AggregateRecord

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FieldScheme:
    """
    Source columns folded into each aggregate statistic.

    ``snapshot_count`` names a column whose values are summed into the output
    count (re-aggregating rollups). When it is None the count is the number of
    TVL observations folded in (aggregating raw daily snapshots).
    """
    tvl: str
    volume: str
    apr: str
    reserve_0: str
    reserve_1: str
    total_share: str
    snapshot_count: Optional[str] = None

    @property
    def metrics(self) -> Dict[str, str]:
        return {
            'tvl': self.tvl,
            'volume': self.volume,
            'apr': self.apr,
            'reserve_0': self.reserve_0,
            'reserve_1': self.reserve_1,
            'total_share': self.total_share,
        }


DAILY_SCHEME = FieldScheme(
    tvl='tvl_usd',
    volume='volume_24h_usd',
    apr='apr_7d',
    reserve_0='reserve_0',
    reserve_1='reserve_1',
    total_share='total_share',
)

ROLLUP_SCHEME = FieldScheme(
    tvl='avg_tvl_usd',
    volume='total_volume_usd',
    apr='avg_apr_7d',
    reserve_0='avg_reserve_0',
    reserve_1='avg_reserve_1',
    total_share='avg_total_share',
    snapshot_count='snapshot_count',
)


def to_number(value) -> float:
    """Parse a CSV cell; empty or unparseable cells become NaN so they are skipped."""
    if value is None:
        return math.nan
    text = str(value).strip()
    if not text:
        return math.nan
    try:
        return float(text)
    except ValueError:
        return math.nan


def build_frame(rows: Sequence[Mapping[str, str]], scheme: FieldScheme) -> pd.DataFrame:
    """Normalize raw row mappings into a numeric frame keyed by pool id."""
    raw = pd.DataFrame(list(rows))
    frame = pd.DataFrame(index=raw.index)
    frame['pool_id'] = raw['pool_id'].fillna('') if 'pool_id' in raw else ''
    frame['pool_address'] = raw['pool_address'].fillna('') if 'pool_address' in raw else ''

    for metric, column in scheme.metrics.items():
        frame[metric] = raw[column].map(to_number) if column in raw else math.nan

    if scheme.snapshot_count is not None:
        counts = raw[scheme.snapshot_count].map(to_number) if scheme.snapshot_count in raw else math.nan
        frame['snapshots'] = counts
    return frame


def aggregate_pools(rows: Sequence[Mapping[str, str]], period: str, scheme: FieldScheme = DAILY_SCHEME) -> List[AggregateRecord]:
    """
    Fold per-pool rows into one AggregateRecord per pool id.

    Averages and sums only consider rows where the source field is present;
    a pool with no observations for a field gets 0. Output order follows the
    first appearance of each pool id in ``rows``.
    """
    if not rows:
        return []

    frame = build_frame(rows, scheme)
    grouped = frame.groupby('pool_id', sort=False)

    summary = grouped.agg(
        pool_address=('pool_address', 'first'),
        avg_tvl_usd=('tvl', 'mean'),
        total_volume_usd=('volume', 'sum'),
        avg_apr_7d=('apr', 'mean'),
        avg_reserve_0=('reserve_0', 'mean'),
        avg_reserve_1=('reserve_1', 'mean'),
        avg_total_share=('total_share', 'mean'),
        tvl_count=('tvl', 'count'),
    )
    if scheme.snapshot_count is not None:
        summary['snapshot_count'] = grouped['snapshots'].sum()
    else:
        summary['snapshot_count'] = summary['tvl_count']

    # mean() of a group with no observations is NaN
    summary = summary.fillna(0)

    records = []
    for pool_id, row in summary.iterrows():
        records.append(AggregateRecord(
            period=period,
            pool_id=str(pool_id),
            pool_address=str(row['pool_address']),
            avg_tvl_usd=float(row['avg_tvl_usd']),
            total_volume_usd=float(row['total_volume_usd']),
            avg_apr_7d=float(row['avg_apr_7d']),
            avg_reserve_0=float(row['avg_reserve_0']),
            avg_reserve_1=float(row['avg_reserve_1']),
            avg_total_share=float(row['avg_total_share']),
            snapshot_count=int(row['snapshot_count']),
        ))

    logger.info(f"Aggregated {len(rows)} rows into {len(records)} pools for {period}")
    return records
