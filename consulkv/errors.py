"""
Error definitions for the Consul client.

A missing key is not an error: reads return None or an empty list.
"""
from typing import Optional


class ConsulError(Exception):
    """Base class for Consul client errors."""

    pass


class UnknownHostError(ConsulError):
    """Raised at build time when the agent's host name does not resolve."""

    pass


class ConsulConnectionError(ConsulError):
    """Raised when the request never got an HTTP response."""

    pass


class ConsulHttpError(ConsulError):
    """Raised when the agent answers with an unexpected status code."""

    def __init__(self, status_code: int, reason: str, body: Optional[str] = None):
        self.status_code = status_code
        self.reason = reason
        self.body = body
        message = f"Consul request failed: {status_code} {reason}"
        if body:
            message = f"{message}: {body}"
        super().__init__(message)
