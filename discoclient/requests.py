"""Build, validate and send a single API request.

Usage::

    response = (
        create_request(method, service.base_uri)
        .on(method.id)
        .with_parameters({"userId": "@me", "scope": "@self"})
        .with_authentication(authenticator)
        .execute()
    )

A builder is single-use: ``execute()`` consumes it. Parameters are
validated against the method's declared parameters before anything is
sent, and validation problems raise :class:`ValidationError`.
"""

from __future__ import annotations

import dataclasses
import enum
import json
import logging
import re
from typing import Any, ClassVar, Mapping

import httpx

from .authenticator import Authenticator, NullAuthenticator
from .discovery import PATH, MethodDescriptor
from .errors import RequestError, UnsupportedMethodError, ValidationError
from .utilities import query_string_to_dict, stringify

logger = logging.getLogger(__name__)

# The response encoding parameter; set from returning(), never from the parameters.
ALT = "alt"


def _pattern_problem(pattern: str, value: str) -> str | None:
    try:
        matched = re.search(pattern, value)
    except re.error as e:
        return f"pattern {pattern!r} is not a valid regular expression ({e})"
    if matched is None:
        return f"value {value!r} does not match {pattern!r}"
    return None


class ReturnType(enum.Enum):
    JSON = "json"
    ATOM = "atom"

    @property
    def content_type(self) -> str:
        if self is ReturnType.ATOM:
            return "application/atom+xml"
        return "application/json"


@dataclasses.dataclass(frozen=True)
class PreparedRequest:
    """Everything needed to put one request on the wire."""

    method: str
    url: httpx.URL
    headers: tuple[tuple[str, str], ...]
    content: bytes | None = None


class Request:
    """Builder for one call of a discovery method.

    Use :func:`create_request` rather than instantiating directly; it picks
    the subclass matching the method's HTTP verb.
    """

    HTTP_METHOD: ClassVar[str]
    ACCEPTS_BODY: ClassVar[bool] = False

    def __init__(
        self,
        method: MethodDescriptor,
        base_uri: str | httpx.URL,
        client: httpx.Client | None = None,
    ) -> None:
        self.method = method
        self.base_uri = httpx.URL(str(base_uri))
        self.rpc_name: str = method.id
        self.return_type = ReturnType.JSON
        self.authenticator: Authenticator = NullAuthenticator()
        self._client = client
        self._parameters: dict[str, str] = {}
        self._body: bytes | None = None
        self._executed = False

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.rpc_name}>"

    @property
    def http_method(self) -> str:
        return self.HTTP_METHOD

    @property
    def parameters(self) -> dict[str, str]:
        return dict(self._parameters)

    @property
    def body(self) -> bytes | None:
        return self._body

    #
    # Configuration
    #

    def on(self, rpc_name: str) -> Request:
        """Name the call for log messages and errors."""
        self.rpc_name = rpc_name
        return self

    def returning(self, return_type: ReturnType) -> Request:
        """Set the response encoding; defaults to JSON."""
        self.return_type = ReturnType(return_type)
        return self

    def with_parameters(self, parameters: Mapping[str, Any] | str) -> Request:
        """Set the call parameters from a mapping or a raw query string.

        ``None`` values mark absent optional parameters and are dropped.
        """
        if isinstance(parameters, str):
            parameters = query_string_to_dict(parameters)
        self._parameters = {
            k: stringify(v) for k, v in parameters.items() if v is not None
        }
        return self

    def with_body(self, body: str | bytes | Mapping[str, Any] | None) -> Request:
        """Set the request body. Mappings are serialized as JSON."""
        if body is None:
            self._body = None
        elif isinstance(body, bytes):
            self._body = body
        elif isinstance(body, str):
            self._body = body.encode("utf-8")
        else:
            self._body = json.dumps(body).encode("utf-8")
        return self

    def with_authentication(self, authenticator: Authenticator) -> Request:
        self.authenticator = authenticator
        return self

    #
    # Validation and URL construction
    #

    def validate(self) -> None:
        """Check the parameters against the method's declared parameters.

        Raises :class:`ValidationError` listing every offending parameter.
        """
        declared = self.method.parameters
        problems: dict[str, str] = {}

        for name in self._parameters:
            if name not in declared:
                problems[name] = "unknown parameter"

        for name, spec in declared.items():
            value = self._parameters.get(name)
            if spec.required and not value:
                problems[name] = "required parameter is missing"
                continue
            if value is None:
                continue
            if spec.wire_name == ALT and value != self.return_type.value:
                problems[name] = f"conflicts with returning({self.return_type.value!r})"
            elif spec.pattern is not None:
                problem = _pattern_problem(spec.pattern, value)
                if problem:
                    problems[name] = problem

        for name in self.method.path_template.missing(self._path_values()):
            problems.setdefault(name, "no value for path placeholder")

        if problems:
            logger.debug("validation failed for %s: %s", self.rpc_name, problems)
            raise ValidationError(problems, self.rpc_name)

    def _path_values(self) -> dict[str, str]:
        declared = self.method.parameters
        return {
            name: value for name, value in self._parameters.items()
            if name in declared and declared[name].location == PATH
        }

    def build_url(self) -> httpx.URL:
        """Compute the request URL. Call :meth:`validate` first."""
        query = [(ALT, self.return_type.value)]
        for name, value in self._parameters.items():
            spec = self.method.parameters[name]
            if spec.location != PATH and spec.wire_name != ALT:
                query.append((spec.wire_name, value))

        path = self.method.path_template.expand(self._path_values())
        url = self.base_uri.join(path)
        return httpx.URL(f"{url}?{httpx.QueryParams(query)}")

    def build(self) -> PreparedRequest:
        """Validate and freeze the request without sending it."""
        self.validate()
        content = self._body if self.ACCEPTS_BODY and self._body else None
        return PreparedRequest(
            method=self.HTTP_METHOD,
            url=self.build_url(),
            headers=(("Content-Type", self.return_type.content_type),),
            content=content,
        )

    #
    # Execution
    #

    def execute(self) -> httpx.Response:
        """Send the request and return the response.

        Non-2xx responses are returned as-is for the caller to inspect.
        Connection failures raise ``httpx.TransportError``. With a
        caller-supplied client the response is left open (streamed) and
        closing it is the caller's job; otherwise it is read in full.
        """
        if self._executed:
            raise RequestError(f"{self.rpc_name} has already been executed")
        self._executed = True

        prepared = self.build()
        if self._client is not None:
            return self._send(self._client, prepared)

        with httpx.Client() as client:
            response = self._send(client, prepared)
            response.read()
            return response

    def _send(self, client: httpx.Client, prepared: PreparedRequest) -> httpx.Response:
        request = self.authenticator.create_http_request(
            client,
            prepared.method,
            prepared.url,
            headers=dict(prepared.headers),
            content=prepared.content,
        )

        logger.debug(">>> %s %s", request.method, request.url)
        response = client.send(request, stream=True)
        logger.debug("<<< %s %s", response.status_code, self.rpc_name)

        try:
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            logger.info("%s returned HTTP %d", self.rpc_name, e.response.status_code)
            return e.response
        return response


class GetRequest(Request):
    HTTP_METHOD = "GET"


class PutRequest(Request):
    HTTP_METHOD = "PUT"
    ACCEPTS_BODY = True


class PostRequest(Request):
    HTTP_METHOD = "POST"
    ACCEPTS_BODY = True


class DeleteRequest(Request):
    HTTP_METHOD = "DELETE"


_REQUEST_TYPES: dict[str, type[Request]] = {
    cls.HTTP_METHOD: cls for cls in (GetRequest, PutRequest, PostRequest, DeleteRequest)
}


def create_request(
    method: MethodDescriptor,
    base_uri: str | httpx.URL,
    client: httpx.Client | None = None,
) -> Request:
    """Return the request builder matching ``method``'s HTTP verb."""
    try:
        cls = _REQUEST_TYPES[method.http_method.upper()]
    except KeyError:
        raise UnsupportedMethodError(method.http_method) from None
    return cls(method, base_uri, client)
