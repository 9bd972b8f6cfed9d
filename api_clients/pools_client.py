
import logging
from typing import Any, Dict, List

from api_clients.exceptions import ShapeError
from api_clients.http import get_json
from storage.models.pool_snapshot import PoolRecord

logger = logging.getLogger(__name__)


def dig(data: Any, *path, default=None):
    """Follow dict keys / list indexes, returning ``default`` on the first missing step."""
    current = data
    for key in path:
        if isinstance(current, dict):
            current = current.get(key)
        elif isinstance(current, list) and isinstance(key, int) and -len(current) <= key < len(current):
            current = current[key]
        else:
            return default
        if current is None:
            return default
    return current


def to_float(value: Any) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        return 0.0


def _raw_string(value: Any) -> str:
    if value is None or value == "":
        return "0"
    return str(value)


def decode_pool(raw: Dict[str, Any], date_str: str, time_str: str) -> PoolRecord:
    """Decode one entry of the pools API into a PoolRecord; missing fields default to 0 or ''."""
    return PoolRecord(
        date=date_str,
        time=time_str,
        pool_id=str(dig(raw, 'id', default='')),
        pool_address=str(dig(raw, 'address', default='')),
        tvl_usd=to_float(dig(raw, 'tvl', 'usd', default=0)),
        volume_24h_usd=to_float(dig(raw, 'volume', '24h', 'usd', default=0)),
        volume_7d_usd=to_float(dig(raw, 'volume', '7d', 'usd', default=0)),
        apr_7d=to_float(dig(raw, 'apr', '7d', default=0)),
        reserve_0=_raw_string(dig(raw, 'reserves', 0, 'amount')),
        reserve_1=_raw_string(dig(raw, 'reserves', 1, 'amount')),
        total_share=_raw_string(dig(raw, 'totalShare')),
    )


class PoolsClient:
    """Read-only client for the DEX pools endpoint."""

    def __init__(self, url: str, timeout: float = 30):
        self.url = url
        self.timeout = timeout

    def fetch_raw_pools(self) -> List[Dict[str, Any]]:
        logger.info("Fetching pool data...")
        data = get_json(self.url, timeout=self.timeout)
        pools = data.get('pools') if isinstance(data, dict) else None
        if not isinstance(pools, list):
            raise ShapeError("Invalid API response: missing 'pools' list")
        logger.info(f"Found {len(pools)} pools")
        return pools

    def fetch_pools(self, date_str: str, time_str: str) -> List[PoolRecord]:
        return [decode_pool(raw, date_str, time_str) for raw in self.fetch_raw_pools() if isinstance(raw, dict)]
