"""
Entry point: the Consul facade and its builder.

    consul = Consul.builder().with_host_and_port("consul.internal", 8500).build()
    kv = consul.key_value_client()
    sessions = consul.session_client()
    ...
    consul.close()

A Consul instance owns one HTTP connection pool and one thread pool for
callback requests; every client it hands out shares them.
"""
from concurrent.futures import ThreadPoolExecutor
from typing import Optional
import logging
import socket

import httpx

from consulkv.config import ConsulConfig
from consulkv.errors import UnknownHostError
from consulkv.kv import KeyValueClient
from consulkv.session import SessionClient
from consulkv.transport import Transport

logger = logging.getLogger(__name__)


class Consul:
    """
    Holds the shared transport and executor.

    Build instances with Consul.builder(); the constructor is for callers
    that already have a Transport.
    """

    def __init__(self, transport: Transport, max_workers: int = 4, owns_http_client: bool = True):
        self.transport = transport
        self.executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="consul")
        self._owns_http_client = owns_http_client
        self._kv = KeyValueClient(transport, self.executor)
        self._sessions = SessionClient(transport)
        self._closed = False

    @staticmethod
    def builder() -> "ConsulBuilder":
        return ConsulBuilder()

    def key_value_client(self) -> KeyValueClient:
        return self._kv

    def session_client(self) -> SessionClient:
        return self._sessions

    def close(self) -> None:
        """
        Wait for pending callback requests, then release connections.

        An HTTP client passed in with with_http_client() is left open.
        """
        if self._closed:
            return
        self.executor.shutdown(wait=True)
        if self._owns_http_client:
            self.transport.close()
        self._closed = True
        logger.info("Consul client closed")

    def __enter__(self) -> "Consul":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()


class ConsulBuilder:
    """
    Fluent configuration for a Consul instance.

    Starts from ConsulConfig.from_env(), so CONSUL_HTTP_ADDR and friends
    apply unless overridden here.
    """

    def __init__(self, config: Optional[ConsulConfig] = None):
        self.config = config or ConsulConfig.from_env()
        self.http_client: Optional[httpx.Client] = None

    def _update(self, **changes) -> "ConsulBuilder":
        # model_validate rather than model_copy so validators run on the new values
        self.config = ConsulConfig.model_validate({**self.config.model_dump(), **changes})
        return self

    def with_url(self, url: str) -> "ConsulBuilder":
        return self._update(url=url)

    def with_host_and_port(self, host: str, port: int) -> "ConsulBuilder":
        return self._update(url=f"http://{host}:{port}")

    def with_token(self, token: str) -> "ConsulBuilder":
        return self._update(token=token)

    def with_datacenter(self, datacenter: str) -> "ConsulBuilder":
        return self._update(datacenter=datacenter)

    def with_timeout(self, seconds: float) -> "ConsulBuilder":
        return self._update(timeout=seconds)

    def with_max_workers(self, max_workers: int) -> "ConsulBuilder":
        return self._update(max_workers=max_workers)

    def with_http_client(self, http_client: httpx.Client) -> "ConsulBuilder":
        """
        Use a preconfigured client (base URL, TLS, transport) instead of
        creating one. The configured URL and timeout are then ignored.
        """
        self.http_client = http_client
        return self

    def build(self) -> Consul:
        """
        Create the Consul instance.

        Raises:
            UnknownHostError: The configured host does not resolve
        """
        owns_http_client = self.http_client is None
        http_client = self.http_client
        if http_client is None:
            resolve_host(self.config.host)
            http_client = httpx.Client(base_url=self.config.url, timeout=self.config.timeout)

        transport = Transport(http_client, token=self.config.token, datacenter=self.config.datacenter)
        logger.info(f"Consul client ready for {http_client.base_url}")
        return Consul(transport, max_workers=self.config.max_workers, owns_http_client=owns_http_client)


def resolve_host(host: str) -> str:
    """
    Resolve `host` to an address (IPv4 or IPv6).

    Raises:
        UnknownHostError: Resolution failed
    """
    try:
        return socket.getaddrinfo(host, None)[0][4][0]
    except socket.gaierror as exc:
        raise UnknownHostError(f"Cannot resolve Consul host '{host}'") from exc
