"""
Client for the agent's key-value store (/v1/kv).

Reads treat a missing key as absence rather than an error: single-key
reads return None and prefix reads return an empty list. Passing a
callback to get_value() or get_values() runs the request on the Consul
instance's thread pool and returns a Future instead of the result.
"""
from concurrent.futures import Executor, Future
from typing import Optional, Union
import logging

from consulkv.callback import ConsulResponseCallback, dispatch
from consulkv.model.kv import Value
from consulkv.model.response import ConsulResponse
from consulkv.option import DeleteOptions, PutOptions, QueryOptions
from consulkv.transport import Transport, key_path

logger = logging.getLogger(__name__)

MAX_FLAGS = 2 ** 64


class KeyValueClient:
    """
    Key-value operations against one agent.

    Usage:
        kv = consul.key_value_client()
        kv.put_value("app/config", "enabled=true", flags=3)
        value = kv.get_value("app/config")       # Value or None
        kv.get_values_as_string("app")           # every value under the prefix
        kv.delete_keys("app")
    """

    def __init__(self, transport: Transport, executor: Executor):
        self.transport = transport
        self.executor = executor

    # Reads

    def get_value(
        self,
        key: str,
        query_options: Optional[QueryOptions] = None,
        callback: Optional[ConsulResponseCallback[Optional[Value]]] = None,
    ) -> Union[Optional[Value], "Future[Optional[ConsulResponse[Optional[Value]]]]"]:
        """
        Read a single key.

        Args:
            key: The key to look up
            query_options: Consistency, blocking and token settings
            callback: If given, run asynchronously and notify this callback

        Returns:
            The Value, or None if the key doesn't exist. With a callback,
            a Future; the callback's response payload is the same Optional.
        """
        if callback is not None:
            return dispatch(
                self.executor,
                lambda: self.get_response_with_value(key, query_options),
                callback,
            )
        return self.get_response_with_value(key, query_options).response

    def get_response_with_value(
        self, key: str, query_options: Optional[QueryOptions] = None
    ) -> ConsulResponse[Optional[Value]]:
        """Read a single key together with its index and leader metadata."""
        response = self._read(key, query_options)
        if response.status_code == 404:
            return ConsulResponse.from_headers(None, response.headers)
        values = [Value.model_validate(item) for item in response.json() or []]
        return ConsulResponse.from_headers(values[0] if values else None, response.headers)

    def get_values(
        self,
        key: str,
        query_options: Optional[QueryOptions] = None,
        callback: Optional[ConsulResponseCallback[list[Value]]] = None,
    ) -> Union[list[Value], "Future[Optional[ConsulResponse[list[Value]]]]"]:
        """
        Read a key and everything beneath it.

        Args:
            key: Prefix to read recursively
            query_options: Consistency, blocking and token settings
            callback: If given, run asynchronously and notify this callback

        Returns:
            Matching values in key order (empty if none), or a Future
            when a callback is given.
        """
        if callback is not None:
            return dispatch(
                self.executor,
                lambda: self._get_values_response(key, query_options),
                callback,
            )
        return self._get_values_response(key, query_options).response

    def _get_values_response(
        self, key: str, query_options: Optional[QueryOptions]
    ) -> ConsulResponse[list[Value]]:
        response = self._read(key, query_options, {"recurse": ""})
        if response.status_code == 404:
            return ConsulResponse.from_headers([], response.headers)
        values = [Value.model_validate(item) for item in response.json() or []]
        return ConsulResponse.from_headers(values, response.headers)

    def get_value_as_string(self, key: str, encoding: str = "utf-8") -> Optional[str]:
        """Decoded value of `key`, or None if the key is missing or has no value."""
        value = self.get_value(key)
        if value is None:
            return None
        return value.value_as_string(encoding)

    def get_values_as_string(self, key: str, encoding: str = "utf-8") -> list[str]:
        """Decoded values under `key`; entries without a value are skipped."""
        strings = []
        for value in self.get_values(key):
            text = value.value_as_string(encoding)
            if text is not None:
                strings.append(text)
        return strings

    def get_keys(
        self,
        key: str,
        separator: Optional[str] = None,
        query_options: Optional[QueryOptions] = None,
    ) -> list[str]:
        """
        List key names under a prefix without fetching their values.

        Args:
            key: Prefix to list
            separator: Stop listing at this character, e.g. "/" for one level

        Returns:
            Key names, empty if nothing matches
        """
        params = {"keys": ""}
        if separator is not None:
            params["separator"] = separator
        response = self._read(key, query_options, params)
        if response.status_code == 404:
            return []
        return list(response.json() or [])

    def get_session(self, key: str) -> Optional[str]:
        """
        Id of the session holding the lock on `key`.

        Returns:
            The session id, or None if the key is missing or unlocked
        """
        value = self.get_value(key)
        if value is None:
            return None
        return value.session

    # Writes

    def put_value(
        self,
        key: str,
        value: Optional[Union[str, bytes]] = None,
        flags: int = 0,
        put_options: Optional[PutOptions] = None,
    ) -> bool:
        """
        Store a value.

        Args:
            key: The key to write
            value: str (encoded as UTF-8) or bytes; None stores a key with no value
            flags: Unsigned 64-bit tag stored alongside the value
            put_options: Check-and-set or lock parameters

        Returns:
            The agent's verdict; False when a cas or lock condition failed
        """
        if not 0 <= flags < MAX_FLAGS:
            raise ValueError(f"flags must be an unsigned 64-bit integer, got {flags}")

        params = put_options.to_query() if put_options else {}
        if flags:
            params["flags"] = str(flags)
        if isinstance(value, str):
            value = value.encode("utf-8")

        response = self.transport.put(key_path("kv", key), params=params, content=value)
        result = response.json() is True
        logger.debug(f"PUT key='{key}' flags={flags} -> {result}")
        return result

    def acquire_lock(self, key: str, value: Optional[Union[str, bytes]], session_id: str) -> bool:
        """
        Try to lock `key` for a session, writing `value` if it succeeds.

        Returns:
            True if the lock was taken. The agent refuses a key that is
            already locked, including by `session_id` itself.
        """
        return self.put_value(key, value, put_options=PutOptions(acquire=session_id))

    def release_lock(self, key: str, session_id: str) -> bool:
        """
        Release a lock held by `session_id`.

        Returns:
            True if the lock was released; the key and its value remain
        """
        return self.put_value(key, put_options=PutOptions(release=session_id))

    def delete_key(self, key: str, delete_options: Optional[DeleteOptions] = None) -> None:
        """Delete a single key; descendants are left alone."""
        params = delete_options.to_query() if delete_options else {}
        self.transport.delete(key_path("kv", key), params=params)
        logger.debug(f"DELETE key='{key}'")

    def delete_keys(self, key: str) -> None:
        """Delete `key` and every key beneath it."""
        self.delete_key(key, DeleteOptions(recurse=True))

    def _read(self, key: str, query_options: Optional[QueryOptions], params: Optional[dict] = None):
        options = query_options or QueryOptions.blank()
        query = options.to_query()
        query.update(params or {})
        return self.transport.get(
            key_path("kv", key),
            params=query,
            headers=options.to_headers(),
            allow_not_found=True,
            timeout=options.request_timeout(),
        )
