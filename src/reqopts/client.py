"""Build one HTTP request from a sequence of options and send it."""

from __future__ import annotations

import logging
import os
import re
import threading
from typing import Mapping
from urllib.parse import parse_qs, urlencode

import httpx

from .context import RequestContext
from .exceptions import ReqOptsConfigurationError, ReqOptsRequestConstructionError
from .options import Option, RequestConfig, Transport
from .security import sanitize_headers

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30.0
TIMEOUT_ENV_VAR = "REQOPTS_TIMEOUT"

_METHOD_TOKEN = re.compile(r"[!#$%&'*+\-.^_`|~0-9A-Za-z]+")
_FRAMING_HEADERS = frozenset({b"host", b"content-length", b"transfer-encoding"})


def _default_timeout() -> float:
    raw = os.getenv(TIMEOUT_ENV_VAR)
    if raw is None or not raw.strip():
        return DEFAULT_TIMEOUT
    try:
        timeout = float(raw)
    except ValueError as exc:
        raise ReqOptsConfigurationError(f"{TIMEOUT_ENV_VAR} must be a number", cause=exc) from exc
    if timeout <= 0:
        raise ReqOptsConfigurationError(f"{TIMEOUT_ENV_VAR} must be greater than 0")
    return timeout


_default_client: httpx.Client | None = None
_default_client_lock = threading.Lock()


def default_http_client() -> httpx.Client:
    """Return the client shared by every call that does not pick its own.

    It is built on first use, under a lock, and never replaced afterwards.
    """
    global _default_client
    if _default_client is None:
        with _default_client_lock:
            if _default_client is None:
                _default_client = httpx.Client(timeout=_default_timeout(), follow_redirects=True)
    return _default_client


def send(
    context: RequestContext | None,
    method: str,
    url: str,
    *options: Option,
) -> httpx.Response:
    """Apply ``options`` in order, then build and send one request.

    The first option that raises stops the call; nothing is built or sent.
    Whatever the client's ``send`` returns or raises reaches the caller as is.
    """
    config = RequestConfig(method, url)
    for option in options:
        option(config)
    return _execute(context, config)


def _build_request(
    context: RequestContext | None,
    config: RequestConfig,
    http_client: Transport,
) -> httpx.Request:
    if context is None:
        raise ReqOptsRequestConstructionError("context must not be None")
    method = config.method or "GET"
    if not _METHOD_TOKEN.fullmatch(method):
        raise ReqOptsRequestConstructionError(f"invalid method {method!r}")
    try:
        return http_client.build_request(
            method,
            config.url,
            content=config.body,
            extensions=context.as_extensions(),
        )
    except (httpx.InvalidURL, TypeError, ValueError) as exc:
        raise ReqOptsRequestConstructionError(
            f"could not build {method} request for {config.url!r}", cause=exc
        ) from exc


def _replace_headers(request: httpx.Request, headers: httpx.Headers) -> None:
    # Host and body framing come from the URL and body, not from the caller.
    framing = [(key, value) for key, value in request.headers.raw if key.lower() in _FRAMING_HEADERS]
    chosen = [(key, value) for key, value in headers.raw if key.lower() not in _FRAMING_HEADERS]
    request.headers = httpx.Headers(framing + chosen)


def _merge_query(url: httpx.URL, params: Mapping[str, str]) -> httpx.URL:
    if not params:
        return url
    raw_query = url.query.decode("ascii")
    if not raw_query:
        encoded = urlencode(sorted(params.items()))
    else:
        merged = parse_qs(raw_query, keep_blank_values=True)
        for key, value in params.items():
            merged[key] = [value]
        encoded = urlencode(sorted(merged.items()), doseq=True)
    return url.copy_with(query=encoded.encode("ascii"))


def _execute(context: RequestContext | None, config: RequestConfig) -> httpx.Response:
    http_client = config.http_client
    if http_client is None:
        http_client = default_http_client()
    request = _build_request(context, config, http_client)
    _replace_headers(request, config.headers)
    request.url = _merge_query(request.url, config.params)
    logger.debug(
        "Sending %s %s headers=%s",
        request.method,
        request.url,
        sanitize_headers(request.headers),
    )
    return http_client.send(request)
