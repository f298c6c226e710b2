"""Build the jinja2 template context from a discovery document.

Creates one class model for the service and one per resource (nested
resources included), runs the decorator chains over them, and assembles
the context dict for service.py.j2.
"""

from __future__ import annotations

import logging
from typing import Any

from discoclient.discovery import ServiceDescriptor

from .codemodel import ClassModel
from .decorators import (
    ResourceDecorator,
    ServiceDecorator,
    default_resource_decorators,
    default_service_decorators,
)
from .loader import get_resources, get_service, iter_resources
from .naming import module_name, resource_class_name, service_class_name

logger = logging.getLogger(__name__)

_SERVICE_INIT_ARGS = (
    "authenticator: Authenticator | None = None,"
    " client: httpx.Client | None = None,"
    " base_uri: str | None = None,"
    " return_type: ReturnType = ReturnType.JSON"
)
_SERVICE_INIT_SUPER = "super().__init__(authenticator, client, base_uri, return_type)"


def _service_doc(service: ServiceDescriptor) -> str:
    title = service.title or f"{service.name} {service.version}"
    description = " ".join(service.description.split())
    if description:
        return f"{title}\n\n{description}"
    return title


def build_service_class(
    service: ServiceDescriptor,
    decorators: list[ServiceDecorator],
) -> ClassModel:
    cls = ClassModel(
        name=service_class_name(service.name),
        bases=["Service"],
        doc=_service_doc(service),
        init_args=_SERVICE_INIT_ARGS,
        init_lines=[_SERVICE_INIT_SUPER],
    )
    for decorator in decorators:
        decorator.decorate_class(service, cls)
    return cls


def build_resource_class(
    path: str,
    resource: dict[str, Any],
    decorators: list[ResourceDecorator],
) -> ClassModel:
    description = " ".join(resource.get("description", "").split())
    cls = ClassModel(
        name=resource_class_name(path),
        doc=description or f"Methods of the {path!r} resource.",
        init_args="service: Service",
    )
    for decorator in decorators:
        decorator.decorate_class(path, resource, cls)
    return cls


def build_context(
    spec: dict[str, Any],
    service_decorators: list[ServiceDecorator] | None = None,
    resource_decorators: list[ResourceDecorator] | None = None,
) -> dict[str, Any]:
    """Build the full template context from the discovery document."""
    service = ServiceDescriptor.from_json(spec)
    name, version, body = get_service(spec)

    if service_decorators is None:
        service_decorators = default_service_decorators(spec)
    if resource_decorators is None:
        resource_decorators = default_resource_decorators(body)

    service_class = build_service_class(service, service_decorators)

    resources: list[ClassModel] = []
    seen: set[str] = {service_class.name}
    for path, resource in iter_resources(get_resources(body)):
        cls = build_resource_class(path, resource, resource_decorators)
        if cls.name in seen:
            raise ValueError(f"resource {path!r} maps to duplicate class name {cls.name}")
        seen.add(cls.name)
        resources.append(cls)
        logger.debug("resource %s -> %s (%d methods)", path, cls.name, len(cls.methods))

    method_count = sum(len(cls.methods) for cls in resources)
    logger.info("%s %s: %d resources, %d methods", name, version, len(resources), method_count)

    return {
        "name": name,
        "version": version,
        "module": module_name(name, version),
        "service": service_class,
        "resources": resources,
        "method_count": method_count,
    }
