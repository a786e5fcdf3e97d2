"""Exceptions raised while configuring and building requests."""

from __future__ import annotations

import httpx

# Failures inside the transport's ``send`` are never wrapped; they surface as
# the transport's own exceptions.
TransportError = httpx.TransportError


class ReqOptsError(Exception):
    """Base exception for all reqopts failures."""

    def __init__(self, message: str, *, cause: Exception | None = None) -> None:
        super().__init__(message)
        self.cause = cause

    def __str__(self) -> str:
        if self.cause is None:
            return str(self.args[0])
        return f"{self.args[0]}: {self.cause}"


class ReqOptsConfigurationError(ReqOptsError):
    """Raised when an option receives an invalid argument."""


class ReqOptsSerializationError(ReqOptsError):
    """Raised when a JSON body cannot be encoded."""


class ReqOptsRequestConstructionError(ReqOptsError):
    """Raised when the accumulated configuration cannot become a request."""
