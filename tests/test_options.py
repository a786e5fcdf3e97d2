from __future__ import annotations

import io
import json
from dataclasses import dataclass
from datetime import datetime, timezone

import httpx
import pytest
from pydantic import BaseModel

from reqopts.exceptions import ReqOptsConfigurationError, ReqOptsSerializationError
from reqopts.options import (
    RequestConfig,
    Transport,
    with_body,
    with_header,
    with_http_client,
    with_json_body,
    with_param,
)


class Point(BaseModel):
    x: int
    y: int


@dataclass
class Label:
    name: str
    created_at: datetime


def make_config() -> RequestConfig:
    return RequestConfig("GET", "https://api.example.com/items", http_client=httpx.Client())


def test_new_config_starts_empty() -> None:
    config = make_config()

    assert config.method == "GET"
    assert config.url == "https://api.example.com/items"
    assert config.body is None
    assert len(config.headers) == 0
    assert config.params == {}


def test_method_and_url_are_read_only() -> None:
    config = make_config()

    with pytest.raises(AttributeError):
        config.method = "POST"  # type: ignore[misc]
    with pytest.raises(AttributeError):
        config.url = "https://other.example.com"  # type: ignore[misc]


def test_with_body_last_write_wins() -> None:
    config = make_config()
    second = io.BytesIO(b"second")

    with_body(b"first")(config)
    with_body(second)(config)

    assert config.body is second


def test_with_header_overwrites_case_insensitively() -> None:
    config = make_config()

    with_header("X-Trace", "one")(config)
    with_header("x-trace", "two")(config)

    assert config.headers.get_list("X-Trace") == ["two"]


def test_with_param_overwrites_and_coerces() -> None:
    config = make_config()
    when = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)

    with_param("page", 1)(config)
    with_param("page", 2)(config)
    with_param("since", when)(config)

    assert config.params == {"page": "2", "since": "2024-05-01T12:00:00+00:00"}


def test_with_json_body_sets_body_and_content_type() -> None:
    config = make_config()
    with_header("content-type", "text/plain")(config)

    with_json_body({"k": "v"})(config)

    assert isinstance(config.body, bytes)
    assert json.loads(config.body) == {"k": "v"}
    assert config.headers.get_list("Content-Type") == ["application/json"]


def test_with_json_body_encodes_models_dataclasses_and_datetimes() -> None:
    config = make_config()
    when = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)

    with_json_body({"point": Point(x=1, y=2), "label": Label("urgent", when)})(config)

    assert json.loads(config.body) == {
        "point": {"x": 1, "y": 2},
        "label": {"name": "urgent", "created_at": "2024-05-01T12:00:00+00:00"},
    }


def test_with_json_body_rejects_cyclic_value() -> None:
    config = make_config()
    cyclic: dict[str, object] = {}
    cyclic["self"] = cyclic

    with pytest.raises(ReqOptsSerializationError) as excinfo:
        with_json_body(cyclic)(config)

    assert isinstance(excinfo.value.cause, ValueError)
    assert config.body is None
    assert "content-type" not in config.headers


def test_with_json_body_rejects_unsupported_and_nan_values() -> None:
    config = make_config()

    with pytest.raises(ReqOptsSerializationError):
        with_json_body({"handle": object()})(config)
    with pytest.raises(ReqOptsSerializationError):
        with_json_body([float("nan")])(config)


def test_with_http_client_rejects_none() -> None:
    config = make_config()
    original = config.http_client

    with pytest.raises(ReqOptsConfigurationError, match="must not be None"):
        with_http_client(None)(config)

    assert config.http_client is original


def test_with_http_client_replaces_client() -> None:
    config = make_config()
    replacement = httpx.Client()

    with_http_client(replacement)(config)

    assert config.http_client is replacement
    assert isinstance(replacement, Transport)


def test_config_without_client_defers_to_default() -> None:
    config = RequestConfig("GET", "https://api.example.com/items")

    assert config.http_client is None


def test_none_values_leave_params_and_headers_untouched() -> None:
    config = make_config()
    with_param("page", 2)(config)
    with_header("X-Trace", "one")(config)

    with_param("page", None)(config)
    with_param("cursor", None)(config)
    with_header("X-Trace", None)(config)
    with_header("X-Other", None)(config)

    assert config.params == {"page": "2"}
    assert config.headers.get_list("X-Trace") == ["one"]
    assert "x-other" not in config.headers
