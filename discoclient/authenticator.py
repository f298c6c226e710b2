"""Authenticators produce the outbound ``httpx.Request`` for a call.

The request builder hands over the verb, the final URL, the headers and
the body; the authenticator builds the request and attaches whatever
credentials it manages. Obtaining those credentials (OAuth flows, token
refresh, ...) happens elsewhere.
"""

from __future__ import annotations

import httpx


class Authenticator:
    """Base authenticator. Subclasses override :meth:`apply_credentials`."""

    def create_http_request(
        self,
        client: httpx.Client,
        method: str,
        url: httpx.URL | str,
        headers: dict[str, str] | None = None,
        content: bytes | None = None,
    ) -> httpx.Request:
        request = client.build_request(method, url, headers=headers, content=content)
        self.apply_credentials(request)
        return request

    def apply_credentials(self, request: httpx.Request) -> None:
        raise NotImplementedError


class NullAuthenticator(Authenticator):
    """Sends requests without credentials."""

    def apply_credentials(self, request: httpx.Request) -> None:
        pass


class ApiKeyAuthenticator(Authenticator):
    """Sets the developer key as the ``key`` query parameter, replacing any supplied value."""

    def __init__(self, api_key: str, parameter: str = "key") -> None:
        self.api_key = api_key
        self.parameter = parameter

    def apply_credentials(self, request: httpx.Request) -> None:
        request.url = request.url.copy_set_param(self.parameter, self.api_key)


class BearerTokenAuthenticator(Authenticator):
    """Adds an ``Authorization: Bearer`` header for an already obtained token."""

    def __init__(self, token: str) -> None:
        self.token = token

    def apply_credentials(self, request: httpx.Request) -> None:
        request.headers["Authorization"] = f"Bearer {self.token}"
