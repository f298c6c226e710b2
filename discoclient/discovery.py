"""Immutable model of a discovery document.

Understands the REST discovery format::

    {"name": "buzz", "version": "v1", "rootUrl": "...", "servicePath": "...",
     "resources": {"activities": {"methods": {"list": {
         "id": "buzz.activities.list", "httpMethod": "GET",
         "path": "activities/{userId}/{scope}",
         "parameters": {"userId": {"location": "path", "required": true}}}}}}}

and the older layout where the service sits under ``data.<name>.<version>``,
methods use ``restPath``/``pathUrl`` and ``rpcName``, and parameters
declare ``parameterType`` instead of ``location``.
"""

from __future__ import annotations

import dataclasses
import functools
import json
import re
from pathlib import Path
from typing import Any, Iterator

from .errors import DiscoveryError
from .uritemplate import PathTemplate

PATH = "path"
QUERY = "query"


@dataclasses.dataclass(frozen=True)
class ParameterSpec:
    name: str
    wire_name: str
    location: str = QUERY
    required: bool = False
    pattern: str | None = None
    type: str = "string"
    description: str = ""
    default: str | None = None
    enum: tuple[str, ...] | None = None
    repeated: bool = False

    @classmethod
    def from_json(cls, name: str, v: dict[str, Any]) -> ParameterSpec:
        location = v.get("location") or v.get("parameterType") or QUERY
        if location not in (PATH, QUERY):
            raise DiscoveryError(f"parameter {name!r} has unknown location {location!r}")
        pattern = v.get("pattern")
        if pattern is not None:
            try:
                re.compile(pattern)
            except re.error as e:
                raise DiscoveryError(f"parameter {name!r} has invalid pattern {pattern!r} ({e})") from e
        enum = v.get("enum")
        default = v.get("default")
        return cls(
            name=name,
            wire_name=v.get("name", name),
            location=location,
            required=bool(v.get("required", False)),
            pattern=pattern,
            type=v.get("type", "string"),
            description=v.get("description", ""),
            default=None if default is None else str(default),
            enum=tuple(str(e) for e in enum) if enum else None,
            repeated=bool(v.get("repeated", False)),
        )


@dataclasses.dataclass(frozen=True)
class MethodDescriptor:
    name: str
    id: str
    http_method: str
    path: str
    parameters: dict[str, ParameterSpec]
    parameter_order: tuple[str, ...] = ()
    description: str = ""
    has_body: bool = False

    @classmethod
    def from_json(
        cls,
        name: str,
        v: dict[str, Any],
        shared: dict[str, ParameterSpec] | None = None,
    ) -> MethodDescriptor:
        path = v.get("path") or v.get("restPath") or v.get("pathUrl")
        if not path:
            raise DiscoveryError(f"method {name!r} has no path")

        parameters = dict(shared or {})
        for pname, pdata in v.get("parameters", {}).items():
            parameters[pname] = ParameterSpec.from_json(pname, pdata)

        return cls(
            name=name,
            id=v.get("id") or v.get("rpcName") or name,
            http_method=str(v.get("httpMethod", "GET")).upper(),
            path=path,
            parameters=parameters,
            parameter_order=tuple(v.get("parameterOrder", ())),
            description=v.get("description", ""),
            has_body="request" in v,
        )

    @functools.cached_property
    def path_template(self) -> PathTemplate:
        return PathTemplate(self.path)


@dataclasses.dataclass(frozen=True)
class ResourceDescriptor:
    name: str
    methods: dict[str, MethodDescriptor]
    resources: dict[str, ResourceDescriptor]

    @classmethod
    def from_json(
        cls,
        name: str,
        v: dict[str, Any],
        shared: dict[str, ParameterSpec] | None = None,
    ) -> ResourceDescriptor:
        methods = {
            mname: MethodDescriptor.from_json(mname, mdata, shared)
            for mname, mdata in v.get("methods", {}).items()
        }
        resources = {
            rname: cls.from_json(rname, rdata, shared)
            for rname, rdata in v.get("resources", {}).items()
        }
        return cls(name=name, methods=methods, resources=resources)


@dataclasses.dataclass(frozen=True)
class ServiceDescriptor:
    name: str
    version: str
    base_uri: str
    resources: dict[str, ResourceDescriptor]
    parameters: dict[str, ParameterSpec] = dataclasses.field(default_factory=dict)
    title: str = ""
    description: str = ""

    @classmethod
    def from_json(cls, doc: dict[str, Any]) -> ServiceDescriptor:
        name, version, v = unwrap_document(doc)

        base_uri = v.get("baseUrl")
        if "rootUrl" in v:
            base_uri = v["rootUrl"] + v.get("servicePath", "")
        if not base_uri:
            raise DiscoveryError(f"service {name!r} has no base url")

        shared = {
            pname: ParameterSpec.from_json(pname, pdata)
            for pname, pdata in v.get("parameters", {}).items()
        }
        resources = {
            rname: ResourceDescriptor.from_json(rname, rdata, shared)
            for rname, rdata in v.get("resources", {}).items()
        }
        return cls(
            name=name,
            version=version,
            base_uri=base_uri,
            resources=resources,
            parameters=shared,
            title=v.get("title", ""),
            description=v.get("description", ""),
        )

    def resource(self, path: str) -> ResourceDescriptor:
        """Look up a resource by dotted path, e.g. ``"activities.comments"``."""
        resources = self.resources
        found = None
        for part in path.split("."):
            try:
                found = resources[part]
            except KeyError:
                raise DiscoveryError(f"{self.name} has no resource {path!r}") from None
            resources = found.resources
        if found is None:
            raise DiscoveryError(f"{self.name} has no resource {path!r}")
        return found

    def method(self, resource: str, name: str) -> MethodDescriptor:
        try:
            return self.resource(resource).methods[name]
        except KeyError:
            raise DiscoveryError(f"{self.name} has no method {resource}.{name}") from None

    def iter_methods(self) -> Iterator[tuple[str, MethodDescriptor]]:
        """Yield ``(dotted_resource_path, method)`` for every method."""
        def walk(prefix: str, resources: dict[str, ResourceDescriptor]):
            for rname, resource in resources.items():
                path = f"{prefix}.{rname}" if prefix else rname
                for method in resource.methods.values():
                    yield path, method
                yield from walk(path, resource.resources)
        yield from walk("", self.resources)


def unwrap_document(doc: dict[str, Any]) -> tuple[str, str, dict[str, Any]]:
    """Return ``(name, version, body)`` for either document layout."""
    if not isinstance(doc, dict):
        raise DiscoveryError("discovery document must be a JSON object")

    if "name" in doc and "version" in doc:
        return str(doc["name"]), str(doc["version"]), doc

    data = doc.get("data")
    if isinstance(data, dict) and len(data) == 1:
        (name, versions), = data.items()
        if isinstance(versions, dict) and len(versions) == 1:
            (version, body), = versions.items()
            if isinstance(body, dict):
                return name, version, body

    raise DiscoveryError("document has no service name and version")


def load_discovery(path: str | Path) -> ServiceDescriptor:
    """Read a discovery document from disk and build its descriptor."""
    with open(path) as f:
        try:
            doc = json.load(f)
        except json.JSONDecodeError as e:
            raise DiscoveryError(f"{path}: not valid JSON ({e})") from e
    return ServiceDescriptor.from_json(doc)
