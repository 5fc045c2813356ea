"""
HTTP plumbing shared by the key-value and session clients.

Transport owns the httpx.Client, prefixes paths with the API version,
merges default token/datacenter settings into every request, and turns
transport failures and unexpected status codes into ConsulError
subclasses. A 404 is handed back to the caller when it asked for it,
since for reads it just means "absent".
"""
from typing import Any, Optional
from urllib.parse import quote
import logging

import httpx

from consulkv.errors import ConsulConnectionError, ConsulHttpError
from consulkv.option import TOKEN_HEADER

logger = logging.getLogger(__name__)

API_PREFIX = "/v1"


def key_path(endpoint: str, key: str) -> str:
    """
    Build the request path for a key.

    Args:
        endpoint: Endpoint under /v1, e.g. "kv"
        key: Hierarchical key; a leading "/" is ignored

    Returns:
        Path with the key percent-encoded and "/" separators kept
    """
    return f"{API_PREFIX}/{endpoint}/{quote(key.lstrip('/'), safe='/')}"


class Transport:
    """
    Thin wrapper around an httpx.Client bound to the agent's base URL.

    The client is expected to carry the base URL already; Transport never
    sees absolute URLs.
    """

    def __init__(
        self,
        http_client: httpx.Client,
        token: Optional[str] = None,
        datacenter: Optional[str] = None,
    ):
        self.http_client = http_client
        self.token = token
        self.datacenter = datacenter

    def request(
        self,
        method: str,
        path: str,
        params: Optional[dict[str, str]] = None,
        headers: Optional[dict[str, str]] = None,
        content: Optional[bytes] = None,
        json: Any = None,
        allow_not_found: bool = False,
        timeout: Optional[float] = None,
    ) -> httpx.Response:
        """
        Send one request and check its status.

        Args:
            method: HTTP verb
            path: Path starting with /v1
            params: Query parameters; values of "" render as bare flags
            headers: Extra headers (take precedence over the default token)
            content: Raw body
            json: JSON body (mutually exclusive with content)
            allow_not_found: Return a 404 response instead of raising
            timeout: Minimum read timeout for this request, in seconds

        Returns:
            The httpx response

        Raises:
            ConsulConnectionError: No response was received
            ConsulHttpError: Status was not 2xx (or 404 when allowed)
        """
        query = dict(params or {})
        if self.datacenter and "dc" not in query:
            query["dc"] = self.datacenter
        request_headers = {TOKEN_HEADER: self.token} if self.token else {}
        request_headers.update(headers or {})
        extra = {}
        if timeout is not None:
            # never shorten the client's own read timeout
            default = self.http_client.timeout
            if default.read is not None and default.read < timeout:
                extra["timeout"] = httpx.Timeout(timeout, connect=default.connect)

        try:
            response = self.http_client.request(
                method,
                path,
                params=query,
                headers=request_headers,
                content=content,
                json=json,
                **extra,
            )
        except httpx.TransportError as exc:
            raise ConsulConnectionError(f"{method} {path} failed: {exc}") from exc

        logger.debug(f"{method} {path} -> {response.status_code}")

        if response.status_code == 404 and allow_not_found:
            return response
        if not response.is_success:
            raise ConsulHttpError(response.status_code, response.reason_phrase, response.text)
        return response

    def get(self, path: str, **kwargs) -> httpx.Response:
        return self.request("GET", path, **kwargs)

    def put(self, path: str, **kwargs) -> httpx.Response:
        return self.request("PUT", path, **kwargs)

    def delete(self, path: str, **kwargs) -> httpx.Response:
        return self.request("DELETE", path, **kwargs)

    def close(self) -> None:
        self.http_client.close()
