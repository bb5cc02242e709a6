"""Shared HTTP plumbing for the remote ArcGIS services."""

import logging
from typing import Any

import httpx

from map_elevation.config import Settings
from map_elevation.exceptions import ServiceRequestError, ServiceResponseError

logger = logging.getLogger(__name__)

USER_AGENT = "map-elevation/0.1"


def build_http_client(settings: Settings, **kwargs: Any) -> httpx.AsyncClient:
    """Create the shared async HTTP client used by every service client.

    Extra keyword arguments are passed to ``httpx.AsyncClient`` (tests use
    this to supply a mock transport).
    """
    return httpx.AsyncClient(
        timeout=settings.request_timeout,
        headers={"User-Agent": USER_AGENT},
        **kwargs,
    )


def auth_params(settings: Settings) -> dict[str, str]:
    """Query parameters shared by every ArcGIS REST call."""
    params = {"f": "json"}
    if settings.api_key:
        params["token"] = settings.api_key
    return params


async def send(
    client: httpx.AsyncClient,
    service: str,
    method: str,
    url: str,
    **kwargs: Any,
) -> dict[str, Any]:
    """Issue a request and return its decoded JSON object.

    Raises:
        ServiceRequestError: On transport failure, an HTTP error status, or an
            ``error`` object in the response body.
        ServiceResponseError: If the body is not a JSON object.
    """
    try:
        logger.debug("%s %s request to %s", service, method, url)
        response = await client.request(method, url, **kwargs)
        response.raise_for_status()
    except httpx.HTTPError as exc:
        raise ServiceRequestError(service, str(exc)) from exc
    return read_json(response, service)


def read_json(response: httpx.Response, service: str) -> dict[str, Any]:
    """Decode an ArcGIS JSON body, surfacing in-band errors.

    ArcGIS services report many failures with HTTP 200 and an ``error``
    object in the body.
    """
    try:
        body = response.json()
    except ValueError as exc:
        raise ServiceResponseError(service, "body is not JSON") from exc

    if not isinstance(body, dict):
        raise ServiceResponseError(service, "expected a JSON object")

    error = body.get("error")
    if error:
        message = error.get("message", "unknown error") if isinstance(error, dict) else str(error)
        raise ServiceRequestError(service, message)
    return body
