"""In-memory model of a generated class.

Decorators add members to a :class:`ClassModel`; the jinja2 template
turns the model into source. Member names are unique per class across
fields, properties and methods.
"""

from __future__ import annotations

import dataclasses
import pprint
from typing import Any


@dataclasses.dataclass
class FieldModel:
    """A class-level constant, ``NAME = value``."""

    name: str
    value: Any

    @property
    def literal(self) -> str:
        return pprint.pformat(self.value, width=100, sort_dicts=False)


@dataclasses.dataclass
class PropertyModel:
    """A ``@property``, optionally with a setter writing ``field``.

    ``getter`` is the expression returned by the getter; it defaults to
    ``self.<field>``.
    """

    name: str
    type: str
    doc: str = ""
    field: str | None = None
    getter: str | None = None
    settable: bool = False

    @property
    def expression(self) -> str:
        if self.getter:
            return self.getter
        return f"self.{self.field}"


@dataclasses.dataclass
class MethodModel:
    """A generated method that calls one discovery method."""

    name: str
    resource: str
    discovery_name: str
    rpc_name: str
    http_method: str
    params: list[dict[str, Any]]
    doc: str = ""
    request_type: str | None = None
    response_type: str = "none"
    before_execute: list[str] = dataclasses.field(default_factory=list)
    after_execute: list[str] = dataclasses.field(default_factory=list)


@dataclasses.dataclass
class ClassModel:
    name: str
    bases: list[str] = dataclasses.field(default_factory=list)
    doc: str = ""
    fields: list[FieldModel] = dataclasses.field(default_factory=list)
    properties: list[PropertyModel] = dataclasses.field(default_factory=list)
    methods: list[MethodModel] = dataclasses.field(default_factory=list)
    #: Instance attributes assigned in ``__init__``: name -> expression.
    attributes: dict[str, str] = dataclasses.field(default_factory=dict)
    #: ``__init__`` parameters after ``self``, as source text.
    init_args: str = ""
    #: Statements run in ``__init__`` before the attributes are assigned.
    init_lines: list[str] = dataclasses.field(default_factory=list)

    def find_member(self, name: str) -> FieldModel | PropertyModel | MethodModel | None:
        for member in (*self.fields, *self.properties, *self.methods):
            if member.name == name:
                return member
        return None

    def member_names(self) -> set[str]:
        names = {m.name for m in (*self.fields, *self.properties, *self.methods)}
        return names | set(self.attributes)


def _check_name(cls: ClassModel, name: str, kind: str) -> None:
    if cls is None:
        raise ValueError("class model is required")
    if not name:
        raise ValueError(f"{kind} name must not be empty")
    if name in cls.member_names():
        raise ValueError(f"the {kind} name [{name}] was already used within {cls.name}")


def add_field(cls: ClassModel, name: str, value: Any) -> FieldModel:
    """Add a class constant."""
    _check_name(cls, name, "field")
    field = FieldModel(name, value)
    cls.fields.append(field)
    return field


def backing_field_name(name: str) -> str:
    return "_" + name


def add_backing_field(cls: ClassModel, name: str, initial: str = "None") -> str:
    """Add the private instance attribute backing property ``name``."""
    field_name = backing_field_name(name)
    _check_name(cls, field_name, "field")
    cls.attributes[field_name] = initial
    return field_name


def add_auto_property(
    cls: ClassModel,
    name: str,
    type: str,
    doc: str = "",
    initial: str = "None",
) -> PropertyModel:
    """Add a read/write property and its ``_name`` backing attribute."""
    _check_name(cls, name, "property")
    field_name = add_backing_field(cls, name, initial)
    prop = PropertyModel(name, type, doc, field=field_name, settable=True)
    cls.properties.append(prop)
    return prop


def add_read_only_property(
    cls: ClassModel, name: str, type: str, getter: str, doc: str = "",
) -> PropertyModel:
    """Add a property computing ``getter`` on each access."""
    _check_name(cls, name, "property")
    prop = PropertyModel(name, type, doc, getter=getter)
    cls.properties.append(prop)
    return prop


def add_method(cls: ClassModel, method: MethodModel) -> MethodModel:
    _check_name(cls, method.name, "method")
    cls.methods.append(method)
    return method
