"""Redfish transport over httpx."""
import logging
from typing import Any, Optional

import httpx

from ..exceptions import TransportError
from .base import EndpointConfig, Transport

logger = logging.getLogger(__name__)


class RedfishClient(Transport):
    """Async Redfish client for a single endpoint.

    URIs are service-relative (``/redfish/v1/...``) and resolved against the
    endpoint's base URL.
    """

    def __init__(
        self,
        endpoint: EndpointConfig,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.endpoint = endpoint
        self._http = httpx.AsyncClient(
            base_url=endpoint.base_url,
            auth=(endpoint.username, endpoint.get_password()),
            verify=endpoint.verify_ssl,
            timeout=httpx.Timeout(endpoint.timeout),
            headers={"Accept": "application/json"},
            transport=transport,
        )

    @property
    def device_id(self) -> str:
        return self.endpoint.name or self.endpoint.host

    async def _request(self, method: str, uri: str, **kwargs: Any) -> httpx.Response:
        try:
            resp = await self._http.request(method, uri, **kwargs)
        except httpx.HTTPError as e:
            raise TransportError(
                f"{method} {uri} on {self.device_id} failed: {e}", uri=uri
            ) from e
        logger.debug(f"{method} {uri} -> {resp.status_code}")
        return resp

    async def get(self, uri: str) -> tuple[bytes, int]:
        resp = await self._request("GET", uri)
        return resp.content, resp.status_code

    async def patch(self, uri: str, payload: Any) -> tuple[bytes, int, Optional[str]]:
        resp = await self._request("PATCH", uri, json=payload)
        return resp.content, resp.status_code, resp.headers.get("Location")

    async def delete(self, uri: str) -> int:
        resp = await self._request("DELETE", uri)
        return resp.status_code

    async def close(self) -> None:
        await self._http.aclose()


async def get_json(transport: Transport, uri: str) -> bytes:
    """GET ``uri`` and return the body, treating any non-200 status as failure.

    Raises:
        TransportError: On network failure or unexpected status
    """
    body, status = await transport.get(uri)
    if status != 200:
        raise TransportError(
            f"GET {uri} returned status {status}", uri=uri, status_code=status
        )
    return body
