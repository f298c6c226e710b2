"""Decorators that add members to generated service and resource classes.

A service decorator sees the whole service; a resource decorator sees one
resource (by dotted path) and may also adjust each generated method just
before and after its execute call.

Default decorator chains:

  service:  VersionInformation -> DiscoveryDocument -> ResourceAccessor
  resource: StandardServiceField -> StandardResourceName
            -> SubresourceAccessor -> StandardMethod
"""

from __future__ import annotations

from typing import Any, Protocol

from discoclient.discovery import ServiceDescriptor

from .codemodel import (
    ClassModel,
    FieldModel,
    MethodModel,
    add_auto_property,
    add_backing_field,
    add_field,
    add_method,
    add_read_only_property,
)
from .naming import NameAllocator, resource_class_name, to_identifier
from .schema_parser import get_request_type, get_response_type, parse_parameters


class ServiceDecorator(Protocol):
    def decorate_class(self, service: ServiceDescriptor, cls: ClassModel) -> None: ...


class ResourceDecorator(Protocol):
    def decorate_class(self, path: str, resource: dict[str, Any], cls: ClassModel) -> None: ...

    def decorate_method_before_execute(self, path: str, method: MethodModel) -> None: ...

    def decorate_method_after_execute(self, path: str, method: MethodModel) -> None: ...


class BaseResourceDecorator:
    """Resource decorator with no-op method hooks."""

    def decorate_class(self, path: str, resource: dict[str, Any], cls: ClassModel) -> None:
        pass

    def decorate_method_before_execute(self, path: str, method: MethodModel) -> None:
        pass

    def decorate_method_after_execute(self, path: str, method: MethodModel) -> None:
        pass


def _add_accessors(cls: ClassModel, children: list[tuple[str, str]], owner: str) -> None:
    names = NameAllocator(cls.member_names())
    for name, child_path in children:
        prop_name = names.allocate(to_identifier(name))
        class_name = resource_class_name(child_path)
        field = add_backing_field(cls, prop_name, f"{class_name}({owner})")
        add_read_only_property(
            cls, prop_name, class_name, f"self.{field}",
            doc=f"The {child_path!r} resource.",
        )


#
# Service decorators
#

class VersionInformationServiceDecorator:
    """Adds ``NAME``, ``VERSION`` and ``BASE_URI`` constants."""

    NAME = "NAME"
    VERSION = "VERSION"
    BASE_URI = "BASE_URI"

    def decorate_class(self, service: ServiceDescriptor, cls: ClassModel) -> None:
        for field in (
            self.create_name_field(service),
            self.create_version_field(service),
            self.create_uri_field(service),
        ):
            add_field(cls, field.name, field.value)

    def create_name_field(self, service: ServiceDescriptor) -> FieldModel:
        return FieldModel(self.NAME, service.name)

    def create_version_field(self, service: ServiceDescriptor) -> FieldModel:
        return FieldModel(self.VERSION, service.version)

    def create_uri_field(self, service: ServiceDescriptor) -> FieldModel:
        return FieldModel(self.BASE_URI, service.base_uri)


class DiscoveryDocumentServiceDecorator:
    """Embeds the discovery document as ``DISCOVERY``."""

    def __init__(self, document: dict[str, Any]) -> None:
        self.document = document

    def decorate_class(self, service: ServiceDescriptor, cls: ClassModel) -> None:
        add_field(cls, "DISCOVERY", self.document)


class ResourceAccessorServiceDecorator:
    """Exposes top-level resources as read-only properties."""

    def decorate_class(self, service: ServiceDescriptor, cls: ClassModel) -> None:
        _add_accessors(cls, [(name, name) for name in service.resources], "self")


#
# Resource decorators
#

class StandardServiceFieldResourceDecorator(BaseResourceDecorator):
    """Adds the ``service`` property holding the owning service client."""

    def decorate_class(self, path: str, resource: dict[str, Any], cls: ClassModel) -> None:
        add_auto_property(cls, "service", "Service", "The owning service client.", initial="service")


class StandardResourceNameResourceDecorator(BaseResourceDecorator):
    """Adds ``RESOURCE = "<dotted path>"`` to the resource class."""

    RESOURCE = "RESOURCE"

    def decorate_class(self, path: str, resource: dict[str, Any], cls: ClassModel) -> None:
        field = self.create_resource_name_field(path)
        add_field(cls, field.name, field.value)

    def create_resource_name_field(self, path: str) -> FieldModel:
        return FieldModel(self.RESOURCE, path)


class SubresourceAccessorResourceDecorator(BaseResourceDecorator):
    """Exposes nested resources as read-only properties."""

    def decorate_class(self, path: str, resource: dict[str, Any], cls: ClassModel) -> None:
        children = [(name, f"{path}.{name}") for name in resource.get("resources", {})]
        _add_accessors(cls, children, "service")


class StandardMethodResourceDecorator(BaseResourceDecorator):
    """Adds one method per discovery method of the resource.

    Every decorator in ``decorators`` gets its before/after execute hooks
    called for each generated method.
    """

    def __init__(self, body: dict[str, Any], decorators: list[ResourceDecorator] | None = None) -> None:
        self.body = body
        self.decorators = decorators if decorators is not None else []

    def decorate_class(self, path: str, resource: dict[str, Any], cls: ClassModel) -> None:
        names = NameAllocator(cls.member_names())
        for discovery_name, data in resource.get("methods", {}).items():
            name = names.allocate(to_identifier(discovery_name))
            method = self.create_method(path, discovery_name, data, name)
            for decorator in self.decorators:
                decorator.decorate_method_before_execute(path, method)
            for decorator in self.decorators:
                decorator.decorate_method_after_execute(path, method)
            add_method(cls, method)

    def create_method(
        self, path: str, discovery_name: str, data: dict[str, Any], name: str,
    ) -> MethodModel:
        params = parse_parameters(self.body, data)
        args = NameAllocator({"self", "body", "kwargs", "parameters", "response"})
        for param in params:
            param["arg"] = args.allocate(param["arg"])

        request_type = get_request_type(self.body, data)
        response_type = get_response_type(self.body, data)
        return MethodModel(
            name=name,
            resource=path,
            discovery_name=discovery_name,
            rpc_name=data.get("id") or data.get("rpcName") or f"{path}.{discovery_name}",
            http_method=str(data.get("httpMethod", "GET")).upper(),
            params=params,
            doc=_method_doc(data, params, request_type, response_type),
            request_type=request_type,
            response_type=response_type,
        )


def _method_doc(
    data: dict[str, Any],
    params: list[dict[str, Any]],
    request_type: str | None,
    response_type: str,
) -> str:
    """Build a method docstring."""
    description = " ".join(data.get("description", "").split())
    if not description:
        path = data.get("path") or data.get("restPath") or data.get("pathUrl", "")
        description = f"{str(data.get('httpMethod', 'GET')).upper()} {path}"
    lines = [description]

    if params or request_type:
        lines.append("")
    for param in params:
        text = param["description"] or param["name"]
        if param["required"]:
            text += " (required)"
        lines.append(f":param {param['arg']}: {text}")
    if request_type:
        lines.append(f":param body: {request_type} request body.")
    if response_type != "none":
        lines.append("")
        lines.append(f"Responds with {response_type}.")
    return "\n".join(lines)


def default_service_decorators(document: dict[str, Any]) -> list[ServiceDecorator]:
    return [
        VersionInformationServiceDecorator(),
        DiscoveryDocumentServiceDecorator(document),
        ResourceAccessorServiceDecorator(),
    ]


def default_resource_decorators(body: dict[str, Any]) -> list[ResourceDecorator]:
    decorators: list[ResourceDecorator] = [
        StandardServiceFieldResourceDecorator(),
        StandardResourceNameResourceDecorator(),
        SubresourceAccessorResourceDecorator(),
    ]
    decorators.append(StandardMethodResourceDecorator(body, decorators))
    return decorators
