"""
Per-request options for reads, writes and deletes.

Each option object renders itself into query parameters (and, for the
ACL token, a header) so the clients never build query strings by hand.
"""
import re
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, field_validator, model_validator

TOKEN_HEADER = "X-Consul-Token"

# Go-style durations as accepted by the agent's "wait" parameter
_DURATION = re.compile(r"^(\d+)(ms|s|m|h)$")
_SECONDS = {"ms": 0.001, "s": 1, "m": 60, "h": 3600}

# the agent adds up to wait/16 of jitter to a blocking query
WAIT_JITTER_DIVISOR = 16
WAIT_MARGIN_SECONDS = 5.0


class ConsistencyMode(str, Enum):
    DEFAULT = "default"
    STALE = "stale"
    CONSISTENT = "consistent"


class QueryOptions(BaseModel):
    """
    Options for read requests.

    Usage:
        first = kv.get_response_with_value("config")
        options = QueryOptions.blocking("30s", first.index)
        changed = kv.get_response_with_value("config", options)
    """
    model_config = ConfigDict(frozen=True)

    wait: Optional[str] = None
    index: Optional[int] = None
    consistency_mode: ConsistencyMode = ConsistencyMode.DEFAULT
    token: Optional[str] = None
    datacenter: Optional[str] = None
    near: Optional[str] = None

    @field_validator("wait")
    @classmethod
    def check_wait(cls, wait: Optional[str]) -> Optional[str]:
        if wait is not None and not _DURATION.match(wait):
            raise ValueError(f"wait must be a duration such as '10s' or '5m', got {wait!r}")
        return wait

    @classmethod
    def blank(cls) -> "QueryOptions":
        return cls()

    @classmethod
    def blocking(cls, wait: str, index: int) -> "QueryOptions":
        """Options for a blocking query that returns once the index moves past `index`."""
        return cls(wait=wait, index=index)

    @property
    def is_blocking(self) -> bool:
        return self.index is not None

    def request_timeout(self) -> Optional[float]:
        """
        Read timeout long enough for the agent to hold a blocking query.

        Returns:
            Seconds covering wait, the agent's jitter and a margin, or
            None when no wait is set
        """
        if self.wait is None:
            return None
        amount, unit = _DURATION.match(self.wait).groups()
        seconds = int(amount) * _SECONDS[unit]
        return seconds + seconds / WAIT_JITTER_DIVISOR + WAIT_MARGIN_SECONDS

    def to_query(self) -> dict[str, str]:
        query: dict[str, str] = {}
        if self.wait is not None:
            query["wait"] = self.wait
        if self.index is not None:
            query["index"] = str(self.index)
        if self.consistency_mode is ConsistencyMode.STALE:
            query["stale"] = ""
        elif self.consistency_mode is ConsistencyMode.CONSISTENT:
            query["consistent"] = ""
        if self.datacenter:
            query["dc"] = self.datacenter
        if self.near:
            query["near"] = self.near
        return query

    def to_headers(self) -> dict[str, str]:
        if self.token:
            return {TOKEN_HEADER: self.token}
        return {}


class PutOptions(BaseModel):
    """Check-and-set and lock parameters for a write."""
    model_config = ConfigDict(frozen=True)

    cas: Optional[int] = None
    acquire: Optional[str] = None
    release: Optional[str] = None
    datacenter: Optional[str] = None

    @model_validator(mode="after")
    def check_lock_mode(self) -> "PutOptions":
        if self.acquire is not None and self.release is not None:
            raise ValueError("acquire and release cannot be combined in one write")
        return self

    def to_query(self) -> dict[str, str]:
        query: dict[str, str] = {}
        if self.cas is not None:
            query["cas"] = str(self.cas)
        if self.acquire is not None:
            query["acquire"] = self.acquire
        if self.release is not None:
            query["release"] = self.release
        if self.datacenter:
            query["dc"] = self.datacenter
        return query


class DeleteOptions(BaseModel):
    model_config = ConfigDict(frozen=True)

    recurse: bool = False
    cas: Optional[int] = None
    datacenter: Optional[str] = None

    def to_query(self) -> dict[str, str]:
        query: dict[str, str] = {}
        if self.recurse:
            query["recurse"] = ""
        if self.cas is not None:
            query["cas"] = str(self.cas)
        if self.datacenter:
            query["dc"] = self.datacenter
        return query
