"""Small httpx client for the tracker API, used by the command line scripts."""
import logging
from typing import Any, Dict, List, Optional

import httpx

from truck_tracker.config import settings

logger = logging.getLogger(__name__)


class TrackerClientError(Exception):
    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


def error_message(response: httpx.Response, default: str) -> str:
    """Pull ``error.message`` out of an error body, falling back to ``message``."""
    try:
        body = response.json()
    except ValueError:
        return default
    if not isinstance(body, dict):
        return default
    error = body.get("error") or {}
    if isinstance(error, dict) and error.get("message"):
        return error["message"]
    return body.get("message") or default


async def _request(client: Optional[httpx.AsyncClient], method: str, url: str, **kwargs) -> httpx.Response:
    if client is not None:
        return await client.request(method, url, **kwargs)
    async with httpx.AsyncClient(timeout=10.0) as own_client:
        return await own_client.request(method, url, **kwargs)


async def update_truck_position(
    identifier: str,
    latitude: float,
    longitude: float,
    key: str,
    api_url: Optional[str] = None,
    client: Optional[httpx.AsyncClient] = None,
) -> Dict[str, Any]:
    url = f"{api_url or settings.API_URL}/update-position"
    payload = {
        "identifier": identifier,
        "latitude": latitude,
        "longitude": longitude,
        "key": key,
    }
    logger.info("Sending position of %s to %s", identifier, url)
    response = await _request(client, "POST", url, json=payload)
    if response.is_error:
        raise TrackerClientError(
            error_message(response, "Failed to update position"), response.status_code
        )
    return response.json()["data"]


async def get_truck_positions(
    api_url: Optional[str] = None,
    client: Optional[httpx.AsyncClient] = None,
) -> List[Dict[str, Any]]:
    url = f"{api_url or settings.API_URL}/truck-positions"
    logger.info("Fetching truck positions from %s", url)
    response = await _request(client, "GET", url)
    if response.is_error:
        raise TrackerClientError(
            error_message(response, "Failed to fetch truck positions"), response.status_code
        )
    return response.json()
