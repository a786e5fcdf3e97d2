"""Request configuration accumulator and the option functions that mutate it."""

from __future__ import annotations

import dataclasses
import json
from datetime import date, datetime
from typing import Any, Callable, Iterable, Protocol, Union, runtime_checkable

import httpx
from pydantic import BaseModel

from .exceptions import ReqOptsConfigurationError, ReqOptsSerializationError

JSON_CONTENT_TYPE = "application/json"

RequestBody = Union[bytes, str, Iterable[bytes]]


@runtime_checkable
class Transport(Protocol):
    """What ``send`` needs from an HTTP client; ``httpx.Client`` satisfies it."""

    def build_request(
        self,
        method: str,
        url: httpx.URL | str,
        *,
        content: Any = None,
        extensions: dict[str, Any] | None = None,
    ) -> httpx.Request: ...

    def send(self, request: httpx.Request) -> httpx.Response: ...


class RequestConfig:
    """Everything collected for one request before it is built."""

    def __init__(self, method: str, url: str, *, http_client: Transport | None = None) -> None:
        self._method = method
        self._url = url
        self.body: RequestBody | None = None
        self.headers = httpx.Headers()
        self.params: dict[str, str] = {}
        self.http_client: Transport | None = http_client

    @property
    def method(self) -> str:
        return self._method

    @property
    def url(self) -> str:
        return self._url

    def __repr__(self) -> str:
        return f"RequestConfig(method={self._method!r}, url={self._url!r})"


Option = Callable[[RequestConfig], None]


def _coerce_value(value: Any) -> str:
    if isinstance(value, datetime):
        return value.isoformat()
    return str(value)


def _json_default(value: Any) -> Any:
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json")
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return dataclasses.asdict(value)
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def _encode_json(value: Any) -> bytes:
    try:
        encoded = json.dumps(
            value,
            default=_json_default,
            allow_nan=False,
            separators=(",", ":"),
        )
    except (TypeError, ValueError, RecursionError) as exc:
        raise ReqOptsSerializationError("could not encode JSON body", cause=exc) from exc
    return encoded.encode("utf-8")


def with_body(body: RequestBody | None) -> Option:
    """Use ``body`` as the request body; a later body option replaces it."""

    def apply(config: RequestConfig) -> None:
        config.body = body

    return apply


def with_json_body(value: Any) -> Option:
    """Send ``value`` encoded as JSON and mark the request as ``application/json``."""

    def apply(config: RequestConfig) -> None:
        config.body = _encode_json(value)
        config.headers["Content-Type"] = JSON_CONTENT_TYPE

    return apply


def with_param(key: str, value: Any) -> Option:
    """Set query parameter ``key``, replacing any value it already has.

    A ``None`` value leaves the parameters untouched.
    """

    def apply(config: RequestConfig) -> None:
        if value is None:
            return
        config.params[str(key)] = _coerce_value(value)

    return apply


def with_header(key: str, value: Any) -> Option:
    """Set header ``key`` (case-insensitive), replacing any value it already has.

    A ``None`` value leaves the headers untouched.
    """

    def apply(config: RequestConfig) -> None:
        if value is None:
            return
        config.headers[str(key)] = _coerce_value(value)

    return apply


def with_http_client(http_client: Transport | None) -> Option:
    """Send through ``http_client`` instead of the shared default client."""

    def apply(config: RequestConfig) -> None:
        if http_client is None:
            raise ReqOptsConfigurationError("http_client must not be None")
        config.http_client = http_client

    return apply
