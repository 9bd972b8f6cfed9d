
import logging
import requests
from typing import Any, Dict, Optional

from api_clients.exceptions import FetchError

logger = logging.getLogger(__name__)


def get_json(url: str, headers: Optional[Dict[str, str]] = None, timeout: float = 30) -> Any:
    """
    GET ``url`` and return the decoded JSON body.
    Network errors, HTTP error statuses and non-JSON bodies raise FetchError.
    """
    try:
        response = requests.get(url, headers=headers, timeout=timeout)
        response.raise_for_status()
        return response.json()
    except ValueError as e:
        # requests raises a ValueError subclass for undecodable bodies
        raise FetchError(f"Failed to parse JSON from {url}") from e
    except requests.exceptions.RequestException as e:
        raise FetchError(f"Request to {url} failed: {e}") from e
