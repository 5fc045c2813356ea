"""
Connection settings for the Consul HTTP API.

Every setting has an environment variable and a literal default, so a
client built with no arguments talks to a local agent on port 8500.
"""
import os
from typing import Optional
from urllib.parse import urlsplit
import logging

from pydantic import BaseModel, Field, field_validator

logger = logging.getLogger(__name__)

DEFAULT_HOST = "localhost"
DEFAULT_PORT = 8500
DEFAULT_URL = f"http://{DEFAULT_HOST}:{DEFAULT_PORT}"


class ConsulConfig(BaseModel):
    """Where and how to reach the agent."""
    url: str = DEFAULT_URL
    token: Optional[str] = None
    datacenter: Optional[str] = None
    timeout: float = Field(default=10.0, gt=0)
    max_workers: int = Field(default=4, ge=1)

    @field_validator("url")
    @classmethod
    def normalize_url(cls, url: str) -> str:
        # CONSUL_HTTP_ADDR is commonly given as bare host:port
        if "://" not in url:
            url = f"http://{url}"
        return url.rstrip("/")

    @property
    def host(self) -> str:
        return urlsplit(self.url).hostname or DEFAULT_HOST

    @classmethod
    def from_env(cls) -> "ConsulConfig":
        """
        Build settings from the environment.

        Reads CONSUL_HTTP_ADDR, CONSUL_HTTP_TOKEN, CONSUL_DATACENTER,
        CONSUL_TIMEOUT and CONSUL_MAX_WORKERS.
        """
        config = cls(
            url=os.getenv("CONSUL_HTTP_ADDR", DEFAULT_URL),
            token=os.getenv("CONSUL_HTTP_TOKEN") or None,
            datacenter=os.getenv("CONSUL_DATACENTER") or None,
            timeout=float(os.getenv("CONSUL_TIMEOUT", "10")),
            max_workers=int(os.getenv("CONSUL_MAX_WORKERS", "4")),
        )
        logger.debug(f"Loaded Consul config from environment: url={config.url}")
        return config
