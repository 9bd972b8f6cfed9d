import unittest
from unittest.mock import MagicMock, patch
import sys
import os

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import requests

from api_clients.exceptions import FetchError, ShapeError
from api_clients.http import get_json
from api_clients.pools_client import PoolsClient, decode_pool, dig


RAW_POOL = {
    'id': 'terra1pool-id',
    'address': 'terra1pooladdr',
    'tvl': {'usd': 12345.678},
    'volume': {'24h': {'usd': '100.5'}, '7d': {'usd': 700}},
    'apr': {'7d': 0.0523},
    'reserves': [{'amount': '1000000'}, {'amount': 2000000}],
    'totalShare': '3000000',
}


class TestDecodePool(unittest.TestCase):

    def test_full_pool(self):
        record = decode_pool(RAW_POOL, "2024-01-03", "12:00:00")

        self.assertEqual(record.pool_id, 'terra1pool-id')
        self.assertEqual(record.pool_address, 'terra1pooladdr')
        self.assertEqual(record.tvl_usd, 12345.678)
        self.assertEqual(record.volume_24h_usd, 100.5)
        self.assertEqual(record.volume_7d_usd, 700.0)
        self.assertEqual(record.reserve_0, '1000000')
        self.assertEqual(record.reserve_1, '2000000')
        self.assertEqual(record.total_share, '3000000')
        self.assertEqual(
            record.to_row(),
            ["2024-01-03", "12:00:00", "terra1pool-id", "terra1pooladdr", "12345.68",
             "100.50", "700.00", "0.0523", "1000000", "2000000", "3000000"],
        )

    def test_missing_fields_default_to_zero(self):
        record = decode_pool({'id': 'P1'}, "2024-01-03", "12:00:00")

        self.assertEqual(record.pool_address, '')
        self.assertEqual(record.tvl_usd, 0.0)
        self.assertEqual(record.apr_7d, 0.0)
        self.assertEqual(record.reserve_0, '0')
        self.assertEqual(record.reserve_1, '0')
        self.assertEqual(record.total_share, '0')

    def test_single_reserve(self):
        record = decode_pool({'id': 'P1', 'reserves': [{'amount': '5'}]}, "d", "t")
        self.assertEqual(record.reserve_0, '5')
        self.assertEqual(record.reserve_1, '0')

    def test_dig(self):
        self.assertEqual(dig(RAW_POOL, 'volume', '24h', 'usd'), '100.5')
        self.assertEqual(dig(RAW_POOL, 'reserves', 5, 'amount', default='x'), 'x')
        self.assertIsNone(dig(None, 'a'))


class TestPoolsClient(unittest.TestCase):

    @patch('api_clients.pools_client.get_json')
    def test_fetch_pools(self, mock_get_json):
        mock_get_json.return_value = {'pools': [RAW_POOL, {'id': 'P2'}]}

        records = PoolsClient("https://pools.test", timeout=5).fetch_pools("2024-01-03", "12:00:00")

        mock_get_json.assert_called_once_with("https://pools.test", timeout=5)
        self.assertEqual([r.pool_id for r in records], ['terra1pool-id', 'P2'])

    @patch('api_clients.pools_client.get_json')
    def test_missing_pools_list_is_shape_error(self, mock_get_json):
        mock_get_json.return_value = {'data': []}

        with self.assertRaises(ShapeError):
            PoolsClient("https://pools.test").fetch_pools("d", "t")

    @patch('api_clients.pools_client.get_json')
    def test_empty_pools_list_is_valid(self, mock_get_json):
        mock_get_json.return_value = {'pools': []}
        self.assertEqual(PoolsClient("https://pools.test").fetch_pools("d", "t"), [])


class TestGetJson(unittest.TestCase):

    @patch('api_clients.http.requests.get')
    def test_returns_decoded_body(self, mock_get):
        mock_response = MagicMock()
        mock_response.json.return_value = {'pools': []}
        mock_get.return_value = mock_response

        self.assertEqual(get_json("https://api.test", timeout=3), {'pools': []})
        mock_get.assert_called_once_with("https://api.test", headers=None, timeout=3)

    @patch('api_clients.http.requests.get')
    def test_connection_error(self, mock_get):
        mock_get.side_effect = requests.exceptions.ConnectionError("refused")

        with self.assertRaises(FetchError):
            get_json("https://api.test")

    @patch('api_clients.http.requests.get')
    def test_http_error_status(self, mock_get):
        mock_response = MagicMock()
        mock_response.raise_for_status.side_effect = requests.exceptions.HTTPError("503")
        mock_get.return_value = mock_response

        with self.assertRaises(FetchError):
            get_json("https://api.test")

    @patch('api_clients.http.requests.get')
    def test_non_json_body(self, mock_get):
        mock_response = MagicMock()
        mock_response.json.side_effect = ValueError("Expecting value")
        mock_get.return_value = mock_response

        with self.assertRaises(FetchError) as ctx:
            get_json("https://api.test")
        self.assertIn("Failed to parse JSON", str(ctx.exception))


if __name__ == '__main__':
    unittest.main()
