"""
Response envelope carrying the agent's consistency metadata.

Blocking queries need the X-Consul-Index of the previous answer, so the
callback API and get_response_with_value() hand back the payload wrapped
together with the headers.
"""
from typing import Generic, Mapping, TypeVar

from pydantic import BaseModel

T = TypeVar("T")

INDEX_HEADER = "X-Consul-Index"
LAST_CONTACT_HEADER = "X-Consul-LastContact"
KNOWN_LEADER_HEADER = "X-Consul-KnownLeader"


class ConsulResponse(BaseModel, Generic[T]):
    response: T
    index: int = 0
    last_contact: int = 0
    known_leader: bool = False

    @classmethod
    def from_headers(cls, response: T, headers: Mapping[str, str]) -> "ConsulResponse[T]":
        """
        Wrap a decoded payload with the metadata found in response headers.

        Args:
            response: The decoded body
            headers: HTTP response headers (case-insensitive mapping)

        Returns:
            The envelope; missing headers default to 0 / False
        """
        return cls(
            response=response,
            index=int(headers.get(INDEX_HEADER, 0)),
            last_contact=int(headers.get(LAST_CONTACT_HEADER, 0)),
            known_leader=headers.get(KNOWN_LEADER_HEADER, "false").lower() == "true",
        )
