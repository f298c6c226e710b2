"""Exceptions raised by the discovery runtime.

Transport failures are not wrapped: ``httpx.TransportError`` reaches the
caller unchanged, and non-2xx responses are returned rather than raised.
"""

from __future__ import annotations


class Error(Exception):
    """Base class for all discoclient errors."""


class DiscoveryError(Error):
    """The discovery document is missing something the runtime needs."""


class RequestError(Error):
    """A request builder was misused (executed twice, no method, ...)."""


class UnsupportedMethodError(Error):
    """The HTTP verb of a method is not one of GET, PUT, POST or DELETE."""

    #: The verb as declared in the discovery document.
    method: str

    def __init__(self, method: str) -> None:
        super().__init__(f"unsupported HTTP method: {method!r}")
        self.method = method


class ValidationError(Error):
    """One or more parameters failed validation.

    ``problems`` maps each offending parameter name to a short reason.
    """

    problems: dict[str, str]

    def __init__(self, problems: dict[str, str], rpc_name: str | None = None) -> None:
        details = "; ".join(f"{name}: {reason}" for name, reason in problems.items())
        prefix = f"invalid parameters for {rpc_name}" if rpc_name else "invalid parameters"
        super().__init__(f"{prefix} ({details})")
        self.problems = dict(problems)
        self.rpc_name = rpc_name
