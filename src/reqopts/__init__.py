"""Build and send a single HTTP request from composable options."""

from .client import default_http_client, send
from .context import RequestContext, background, with_timeout
from .exceptions import (
    ReqOptsConfigurationError,
    ReqOptsError,
    ReqOptsRequestConstructionError,
    ReqOptsSerializationError,
    TransportError,
)
from .options import (
    Option,
    RequestConfig,
    Transport,
    with_body,
    with_header,
    with_http_client,
    with_json_body,
    with_param,
)

__all__ = [
    "Option",
    "ReqOptsConfigurationError",
    "ReqOptsError",
    "ReqOptsRequestConstructionError",
    "ReqOptsSerializationError",
    "RequestConfig",
    "RequestContext",
    "Transport",
    "TransportError",
    "background",
    "default_http_client",
    "send",
    "with_body",
    "with_header",
    "with_http_client",
    "with_json_body",
    "with_param",
    "with_timeout",
]
