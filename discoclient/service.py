"""Base class for generated service clients."""

from __future__ import annotations

import logging
from typing import Any, ClassVar

import httpx

from .authenticator import Authenticator, NullAuthenticator
from .discovery import ServiceDescriptor
from .requests import ReturnType, create_request

logger = logging.getLogger(__name__)


class Service:
    """Runtime side of a generated client.

    Generated subclasses set ``DISCOVERY`` to the discovery document they
    were generated from; resource classes call :meth:`execute`.
    """

    #: The discovery document this client was generated from.
    DISCOVERY: ClassVar[dict[str, Any]]

    descriptor: ServiceDescriptor
    authenticator: Authenticator
    return_type: ReturnType

    _client: httpx.Client
    _owns_client: bool

    def __init__(
        self,
        authenticator: Authenticator | None = None,
        client: httpx.Client | None = None,
        base_uri: str | None = None,
        return_type: ReturnType = ReturnType.JSON,
    ) -> None:
        self.descriptor = ServiceDescriptor.from_json(self.DISCOVERY)
        self.base_uri = base_uri or self.descriptor.base_uri
        self.authenticator = authenticator or NullAuthenticator()
        self.return_type = return_type

        self._owns_client = client is None
        self._client = client if client is not None else httpx.Client()

    def __enter__(self):
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    def execute(
        self,
        resource: str,
        method: str,
        parameters: dict[str, Any],
        body: Any = None,
    ) -> httpx.Response:
        """Run ``resource.method`` and return the open response.

        ``resource`` is the dotted resource path. Closing the response is
        up to the caller.
        """
        descriptor = self.descriptor.method(resource, method)
        logger.debug("calling %s", descriptor.id)
        request = (
            create_request(descriptor, self.base_uri, client=self._client)
            .on(descriptor.id)
            .returning(self.return_type)
            .with_parameters(parameters)
            .with_authentication(self.authenticator)
        )
        if body is not None:
            request.with_body(body)
        return request.execute()
