"""Per-call request context forwarded into the built request."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Mapping

import httpx


@dataclass(frozen=True)
class RequestContext:
    timeout: float | None = None
    extensions: Mapping[str, Any] | None = None

    def as_extensions(self) -> dict[str, Any]:
        """Render the context as ``httpx`` request extensions."""
        merged: dict[str, Any] = dict(self.extensions or {})
        if self.timeout is not None:
            merged["timeout"] = httpx.Timeout(self.timeout).as_dict()
        return merged


_BACKGROUND = RequestContext()


def background() -> RequestContext:
    """Return the empty context: no timeout, no extensions."""
    return _BACKGROUND


def with_timeout(parent: RequestContext, seconds: float) -> RequestContext:
    if seconds <= 0:
        raise ValueError("timeout must be greater than 0")
    return replace(parent, timeout=float(seconds))
