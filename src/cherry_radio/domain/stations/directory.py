"""
Remote station directory (radio-browser.info) client.

Downloads the full catalog of working MP3 stations. Tag filtering happens
locally against the cached snapshot, so no tag is sent to the server.
"""

from typing import Any

import requests
from loguru import logger

from cherry_radio.core.exceptions import NetworkError

from .exceptions import RefreshError

# Fixed server-side filter: decodable codec, last health check passed
CATALOG_FILTER = {"codec": "MP3", "lastcheckok": "1"}


def fetch_catalog(
    endpoint: str,
    timeout: float = 30.0,
    user_agent: str = "cherry-radio/0.1",
    http: Any = None,
) -> list[dict[str, Any]]:
    """Fetch every station matching the fixed catalog filter.

    Args:
        endpoint: Directory search URL
        timeout: Request timeout in seconds
        user_agent: User-Agent header (radio-browser asks clients to send one)
        http: Object with a requests-compatible ``get`` (defaults to requests)

    Returns:
        Raw station objects exactly as returned by the directory

    Raises:
        NetworkError: Connection failed or HTTP error status
        RefreshError: Response body is not a JSON array
    """
    http = http or requests

    logger.info(f"Fetching station catalog from {endpoint}")
    try:
        response = http.get(
            endpoint,
            params=CATALOG_FILTER,
            headers={"User-Agent": user_agent},
            timeout=timeout,
        )
        response.raise_for_status()
    except requests.RequestException as e:
        raise NetworkError(f"Station directory request failed: {e}") from e

    try:
        payload = response.json()
    except ValueError as e:
        raise RefreshError(f"Station directory returned invalid JSON: {e}") from e

    if not isinstance(payload, list):
        raise RefreshError(
            f"Station directory returned {type(payload).__name__}, expected a list"
        )

    logger.info(f"Station directory returned {len(payload)} entries")
    return payload
