"""
Declarative base classes for FHIR datatypes and resources.

Every datatype and resource is a plain :mod:`dataclasses` dataclass.
The wire semantics of each attribute (primitive, complex element, boxed
resource, choice, XML attribute, XHTML) are attached as field metadata
by the helper functions in this module, and read back by the codecs
through :func:`fields_of`::

    @dataclass
    class Period(Element):
        start: Optional[DateTime] = element(DateTime)
        end: Optional[DateTime] = element(DateTime)

    @dataclass
    class Observation(DomainResource):
        resource_type = "Observation"
        effective: Any = choice(DateTime, Period, Timing, Instant)

Attribute names are snake_case; wire names are derived camelCase
(``implicit_rules`` -> ``implicitRules``; a trailing ``_`` guarding a
Python keyword is dropped, so ``class_`` -> ``class``).
"""

from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass, field
from functools import lru_cache
from typing import TYPE_CHECKING, Any, ClassVar, Optional, Union

from fhir_toolbox.choice import ChoiceField
from fhir_toolbox.primitives import Code, Id, PrimitiveValue, Uri
from fhir_toolbox.registry import (
    register_element_type,
    register_resource_type,
    resolve_element_type,
)
from fhir_toolbox.typeinfo import TypeInfo, TypeInfoElement

if TYPE_CHECKING:
    from fhir_toolbox.r4 import Extension, Meta, Narrative

logger = logging.getLogger(__name__)

FIELD_METADATA_KEY = "fhir"

# Field kinds
PRIMITIVE = "primitive"
ELEMENT = "element"
RESOURCE = "resource"
CHOICE = "choice"
ATTRIBUTE = "attribute"
XHTML = "xhtml"

TypeSpec = Union[type, str]


# ═══════════════════════════════════════════════════════════════════
# FIELD DECLARATION HELPERS
# ═══════════════════════════════════════════════════════════════════


def element(
    type_: TypeSpec,
    *,
    repeated: bool = False,
    name: Optional[str] = None,
) -> Any:
    """Declare a primitive, complex or boxed-resource field.

    Args:
        type_:    A :class:`PrimitiveValue` subclass, an element class,
                  :class:`Resource` for an "any resource" field, or the
                  registered name of any of these.
        repeated: Whether the field holds a list (defaults to ``[]``)
                  instead of a single optional value (defaults to
                  ``None``).
        name:     Explicit wire name, overriding the derived one.
    """
    meta = {FIELD_METADATA_KEY: {"kind": ELEMENT, "type": type_, "repeated": repeated, "name": name}}
    if repeated:
        return field(default_factory=list, metadata=meta)
    return field(default=None, metadata=meta)


def choice(*types: TypeSpec, name: Optional[str] = None) -> Any:
    """Declare a choice (``[x]``) field over the given variant types."""
    if not types:
        raise ValueError("choice() requires at least one variant type")
    return field(
        default=None,
        metadata={FIELD_METADATA_KEY: {"kind": CHOICE, "types": types, "name": name}},
    )


def attribute(name: Optional[str] = None) -> Any:
    """Declare a plain string carried as an XML attribute (``id``, ``url``)."""
    return field(
        default=None,
        metadata={FIELD_METADATA_KEY: {"kind": ATTRIBUTE, "name": name}},
    )


def xhtml(name: Optional[str] = None) -> Any:
    """Declare the narrative ``div``: a string of XHTML markup."""
    return field(
        default=None,
        metadata={FIELD_METADATA_KEY: {"kind": XHTML, "name": name}},
    )


def wire_name(attr: str) -> str:
    """Derive the camelCase wire name of a snake_case attribute."""
    parts = attr.rstrip("_").split("_")
    return parts[0] + "".join(p[:1].upper() + p[1:] for p in parts[1:])


# ═══════════════════════════════════════════════════════════════════
# FIELD INTROSPECTION
# ═══════════════════════════════════════════════════════════════════


@dataclass(frozen=True)
class FieldSpec:
    """Resolved wire description of one dataclass field.

    Attributes:
        attr:     Python attribute name.
        name:     Wire name (JSON key / XML element or attribute name).
        kind:     One of ``primitive``, ``element``, ``resource``,
                  ``choice``, ``attribute``, ``xhtml``.
        type:     Resolved class for primitive/element/resource fields.
        repeated: Whether the attribute holds a list.
        choice:   The :class:`ChoiceField` for choice fields.
    """

    attr: str
    name: str
    kind: str
    type: Optional[type] = None
    repeated: bool = False
    choice: Optional[ChoiceField] = None


@lru_cache(maxsize=None)
def fields_of(cls: type) -> tuple[FieldSpec, ...]:
    """Return the wire fields of a datatype or resource class, in order.

    Computed on first use (so string type references can name classes
    declared later) and cached per class.  Choice tables are built here
    too, so the returned specs are fully resolved.  Two threads racing
    on a first call compute equal results and either may be cached.
    """
    specs: list[FieldSpec] = []
    for f in dataclasses.fields(cls):
        meta = f.metadata.get(FIELD_METADATA_KEY)
        if meta is None:
            continue
        name = meta.get("name") or wire_name(f.name)
        kind = meta["kind"]
        if kind == CHOICE:
            choice_field = ChoiceField(name, meta["types"]).resolve()
            specs.append(FieldSpec(f.name, name, CHOICE, choice=choice_field))
        elif kind == ELEMENT:
            type_ = meta["type"]
            if isinstance(type_, str):
                type_ = resolve_element_type(type_)
            if issubclass(type_, PrimitiveValue):
                kind = PRIMITIVE
            elif issubclass(type_, Resource):
                kind = RESOURCE
            specs.append(FieldSpec(f.name, name, kind, type_, meta["repeated"]))
        else:
            specs.append(FieldSpec(f.name, name, kind))
    return tuple(specs)


# ═══════════════════════════════════════════════════════════════════
# BASE CLASSES
# ═══════════════════════════════════════════════════════════════════


@dataclass
class Base:
    """Root of every complex datatype and resource."""

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        register_element_type(cls)

    def __str__(self) -> str:
        # Diagnostic output only: never raises.
        from fhir_toolbox.json_codec import encode_json

        try:
            return encode_json(self, indent=2).decode("utf-8")
        except Exception:
            logger.warning(
                "could not render %s for debug output",
                type(self).__name__,
                exc_info=True,
            )
            return "null"

    def children(self, *names: str) -> list[Any]:
        """Child values selected by wire name, in declaration order.

        A choice field is addressed by its logical name (``"value"``,
        not ``"valueQuantity"``).  Repeated fields contribute each item;
        absent fields contribute nothing.  With no ``names``, every
        populated child is returned.
        """
        out: list[Any] = []
        for spec in fields_of(type(self)):
            if names and spec.name not in names:
                continue
            value = getattr(self, spec.attr)
            if spec.repeated:
                out.extend(value)
            elif value is not None:
                out.append(value)
        return out

    @classmethod
    def type_info(cls) -> TypeInfo:
        """Describe this class: its name, base type and elements."""
        base = next((b.__name__ for b in cls.__mro__[1:] if issubclass(b, Base)), None)
        elements = tuple(
            TypeInfoElement(spec.name, _TYPE_NAMES.get(spec.kind) or spec.type.__name__, spec.repeated)
            for spec in fields_of(cls)
        )
        return TypeInfo(name=cls.__name__, base_type=base, elements=elements)


_TYPE_NAMES = {
    CHOICE: "Element",
    RESOURCE: "Resource",
    ATTRIBUTE: "string",
    XHTML: "xhtml",
}


@dataclass
class Element(Base):
    """Base for all elements: an element id and extensions."""

    id: Optional[str] = attribute()
    extension: list[Extension] = element("Extension", repeated=True)


@dataclass
class BackboneElement(Element):
    """An element nested in a resource, which may carry modifier extensions."""

    modifier_extension: list[Extension] = element("Extension", repeated=True)


@dataclass
class Resource(Base):
    """Base for all resources.

    Concrete resources set the class attribute ``resource_type`` to
    their discriminator tag, which registers them for boxed-resource
    decoding.
    """

    resource_type: ClassVar[str] = ""

    id: Optional[Id] = element(Id)
    meta: Optional[Meta] = element("Meta")
    implicit_rules: Optional[Uri] = element(Uri)
    language: Optional[Code] = element(Code)

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        if "resource_type" in cls.__dict__:
            register_resource_type(cls)

    @classmethod
    def discriminator_tag(cls) -> str:
        """The ``resourceType`` string identifying this class on the wire."""
        return cls.resource_type

    def resource_id(self) -> Optional[str]:
        """The logical id, or ``None``."""
        if self.id is None:
            return None
        return self.id.value


@dataclass
class DomainResource(Resource):
    """A resource with narrative, extensions and contained resources."""

    text: Optional[Narrative] = element("Narrative")
    contained: list[Resource] = element(Resource, repeated=True)
    extension: list[Extension] = element("Extension", repeated=True)
    modifier_extension: list[Extension] = element("Extension", repeated=True)
