"""
Callback-style asynchronous requests.

A callback request returns immediately with a Future; the HTTP call runs
on the Consul instance's thread pool and exactly one of on_complete or
on_failure fires on that pool thread once it finishes.
"""
from abc import ABC, abstractmethod
from concurrent.futures import Executor, Future
from typing import Callable, Generic, Optional, TypeVar
import logging

from consulkv.model.response import ConsulResponse

logger = logging.getLogger(__name__)

T = TypeVar("T")


class ConsulResponseCallback(ABC, Generic[T]):
    """
    Receives the outcome of a callback request.

    Usage:
        class Done(ConsulResponseCallback[list[Value]]):
            def on_complete(self, response):
                print(len(response.response))

            def on_failure(self, error):
                print(f"failed: {error}")

        kv.get_values("config", callback=Done())
    """

    @abstractmethod
    def on_complete(self, response: ConsulResponse[T]) -> None:
        ...

    @abstractmethod
    def on_failure(self, error: Exception) -> None:
        ...


def dispatch(
    executor: Executor,
    call: Callable[[], ConsulResponse[T]],
    callback: ConsulResponseCallback[T],
) -> "Future[Optional[ConsulResponse[T]]]":
    """
    Run `call` on `executor` and report the result to `callback`.

    Args:
        executor: Pool that runs the request
        call: Performs the request and returns the wrapped response
        callback: Notified exactly once

    Returns:
        Future resolving to the response, or None after on_failure.
        An exception raised by on_complete itself is left on the future.
    """
    def run() -> Optional[ConsulResponse[T]]:
        try:
            response = call()
        except Exception as exc:
            # any request error, including a body that fails to decode
            logger.warning(f"Consul request failed: {exc!r}")
            callback.on_failure(exc)
            return None
        callback.on_complete(response)
        return response

    return executor.submit(run)
