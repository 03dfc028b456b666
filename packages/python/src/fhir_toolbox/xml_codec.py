"""
FHIR XML wire format.

The same field model as the JSON codec, rendered onto XML:

* the root element is named after the ``resourceType`` and lives in
  the ``http://hl7.org/fhir`` namespace, as does every descendant;
* primitives are empty elements carrying ``value`` and ``id``
  attributes, with their extensions as ``<extension>`` children (XML
  has no sidecar key; the element *is* the sidecar);
* the element id of a complex element and ``Extension.url`` are XML
  attributes;
* boxed resources are wrapped: ``<contained><Patient>...</Patient></contained>``;
* the narrative ``div`` is embedded as XHTML.

Decoding rejects anything outside that shape: foreign namespaces,
unexpected attributes, unknown elements, stray text, a singular element
repeated, and two branches of one choice field.
"""

from __future__ import annotations

import copy
import xml.etree.ElementTree as ET
from collections import defaultdict
from functools import lru_cache
from typing import Any, Optional, Union

from fhir_toolbox._constants import FHIR_NAMESPACE, XHTML_NAMESPACE
from fhir_toolbox.element import (
    ATTRIBUTE,
    CHOICE,
    RESOURCE,
    XHTML,
    Base,
    FieldSpec,
    Resource,
    fields_of,
)
from fhir_toolbox.errors import (
    ChoiceConflictError,
    MalformedInputError,
    XMLStructureError,
)
from fhir_toolbox.primitives import PrimitiveValue
from fhir_toolbox.registry import resolve_element_type, resolve_resource_type

ET.register_namespace("", FHIR_NAMESPACE)

_FHIR_PREFIX = f"{{{FHIR_NAMESPACE}}}"
_XHTML_PREFIX = f"{{{XHTML_NAMESPACE}}}"
_XHTML_DIV = f"{_XHTML_PREFIX}div"


def _tag(name: str) -> str:
    return f"{_FHIR_PREFIX}{name}"


# ═══════════════════════════════════════════════════════════════════
# ENCODE
# ═══════════════════════════════════════════════════════════════════


def to_xml_element(obj: Base, name: Optional[str] = None) -> ET.Element:
    """Build the XML element tree of a resource or datatype.

    Args:
        obj:  The value to render.
        name: Element name for a datatype; resources always use their
              ``resourceType``.

    Raises:
        TypeError:  If a choice attribute holds an undeclared type.
        ValueError: If a narrative ``div`` is not well-formed XHTML.
    """
    if isinstance(obj, Resource):
        name = obj.discriminator_tag()
    elif name is None:
        name = type(obj).__name__
    root = ET.Element(_tag(name))
    _write_fields(root, obj)
    return root


def encode_xml(resource: Base, *, xml_declaration: bool = False) -> bytes:
    """Serialize a resource to UTF-8 XML bytes."""
    root = to_xml_element(resource)
    return ET.tostring(root, encoding="utf-8", xml_declaration=xml_declaration)


def _write_fields(elem: ET.Element, obj: Base) -> None:
    for spec in fields_of(type(obj)):
        value = getattr(obj, spec.attr)
        kind = spec.kind

        if kind == ATTRIBUTE:
            if value is not None:
                elem.set(spec.name, value)

        elif kind == XHTML:
            if value is not None:
                elem.append(_xhtml_to_element(value))

        elif kind == CHOICE:
            key = spec.choice.key_for(value)
            if key is not None:
                _write_value(elem, key, value)

        elif spec.repeated:
            for item in value:
                _write_value(elem, spec.name, item, boxed=kind == RESOURCE)

        elif value is not None:
            _write_value(elem, spec.name, value, boxed=kind == RESOURCE)


def _write_value(parent: ET.Element, name: str, value: Any, *, boxed: bool = False) -> None:
    if isinstance(value, PrimitiveValue):
        if value.is_empty():
            return
        child = ET.SubElement(parent, _tag(name))
        if value.id is not None:
            child.set("id", value.id)
        if value.value is not None:
            child.set("value", value.to_xml_text())
        for ext in value.extension:
            _write_value(child, "extension", ext)
        return

    child = ET.SubElement(parent, _tag(name))
    if boxed:
        child = ET.SubElement(child, _tag(value.discriminator_tag()))
    _write_fields(child, value)


def _xhtml_to_element(markup: str) -> ET.Element:
    try:
        div = ET.fromstring(markup)
    except ET.ParseError as e:
        raise ValueError(f"Narrative div is not well-formed XHTML: {e}") from e
    if div.tag != _XHTML_DIV:
        raise ValueError(f"Narrative must be an XHTML div, got: {div.tag}")
    return _unqualify_xhtml(div)


def _unqualify_xhtml(div: ET.Element) -> ET.Element:
    """Copy of ``div`` with XHTML tags made local and the namespace
    declared as a literal ``xmlns`` attribute on the root."""
    out = copy.deepcopy(div)
    for node in out.iter():
        if isinstance(node.tag, str) and node.tag.startswith(_XHTML_PREFIX):
            node.tag = node.tag[len(_XHTML_PREFIX):]
    attrib = {"xmlns": XHTML_NAMESPACE}
    attrib.update(out.attrib)
    out.attrib.clear()
    out.attrib.update(attrib)
    out.tail = None
    return out


# ═══════════════════════════════════════════════════════════════════
# DECODE
# ═══════════════════════════════════════════════════════════════════


def decode_xml(data: Union[bytes, str], cls: Optional[type] = None) -> Any:
    """Parse FHIR XML and decode it into a resource.

    Args:
        data: XML document bytes or text.
        cls:  Expected resource class.  When omitted, the root element
              name selects the class through the registry.

    Raises:
        MalformedInputError: Not well-formed XML, or a bad value.
        XMLStructureError: Namespace, attribute or element violations.
        ChoiceConflictError: Two branches of one choice field present.
        UnknownResourceTypeError: Unregistered root element name.
    """
    try:
        root = ET.fromstring(data)
    except ET.ParseError as e:
        raise MalformedInputError(f"invalid XML: {e}") from e

    name = _local_name(root, None)
    if cls is None or (issubclass(cls, Resource) and not cls.resource_type):
        cls = resolve_resource_type(name)
    elif issubclass(cls, Resource) and name != cls.resource_type:
        raise XMLStructureError(
            f"expected root element {cls.resource_type!r}, got {name!r}"
        )
    return _read_element(cls, root, name)


def _local_name(elem: ET.Element, path: Optional[str]) -> str:
    tag = elem.tag
    if not isinstance(tag, str) or not tag.startswith(_FHIR_PREFIX):
        raise XMLStructureError(
            f"invalid namespace for element {tag!r}, expected {FHIR_NAMESPACE!r}",
            path=path,
        )
    return tag[len(_FHIR_PREFIX):]


def _check_text(elem: ET.Element, path: str) -> None:
    if elem.text is not None and elem.text.strip():
        raise XMLStructureError("unexpected text content", path=path)
    for child in elem:
        if child.tail is not None and child.tail.strip():
            raise XMLStructureError("unexpected text content", path=path)


@lru_cache(maxsize=None)
def _child_table(cls: type) -> dict[str, tuple[FieldSpec, Optional[type]]]:
    """Element name -> (field, choice variant) for the children of ``cls``."""
    table: dict[str, tuple[FieldSpec, Optional[type]]] = {}
    for spec in fields_of(cls):
        if spec.kind == CHOICE:
            for key in spec.choice.wire_keys():
                table[key] = (spec, spec.choice.variant_for_key(key))
        elif spec.kind not in (ATTRIBUTE, XHTML):
            table[spec.name] = (spec, None)
    return table


def _read_element(cls: type, elem: ET.Element, path: str) -> Any:
    allowed_attrs = {s.name: s for s in fields_of(cls) if s.kind == ATTRIBUTE}
    kwargs: dict[str, Any] = {}
    for key, raw in elem.attrib.items():
        spec = allowed_attrs.get(key)
        if spec is None:
            raise XMLStructureError(f"invalid attribute {key!r}", path=path)
        kwargs[spec.attr] = raw
    _check_text(elem, path)

    xhtml_spec = next((s for s in fields_of(cls) if s.kind == XHTML), None)
    table = _child_table(cls)
    choice_keys: dict[str, str] = {}
    counts: dict[str, int] = defaultdict(int)

    for child in elem:
        if child.tag == _XHTML_DIV and xhtml_spec is not None:
            if xhtml_spec.attr in kwargs:
                raise XMLStructureError("duplicate element 'div'", path=path)
            kwargs[xhtml_spec.attr] = ET.tostring(_unqualify_xhtml(child), encoding="unicode")
            continue

        name = _local_name(child, path)
        entry = table.get(name)
        if entry is None:
            raise XMLStructureError(f"unknown element {name!r} for {cls.__name__}", path=path)
        spec, variant = entry

        if spec.kind == CHOICE:
            seen = choice_keys.get(spec.attr)
            if seen is not None:
                if seen == name:
                    raise XMLStructureError(f"duplicate element {name!r}", path=path)
                raise ChoiceConflictError(spec.name, [seen, name], path=f"{path}.{spec.name}")
            choice_keys[spec.attr] = name
            kwargs[spec.attr] = _read_value(variant, CHOICE, child, f"{path}.{name}")
            continue

        if spec.repeated:
            index = counts[name]
            counts[name] += 1
            value = _read_value(spec.type, spec.kind, child, f"{path}.{name}[{index}]")
            kwargs.setdefault(spec.attr, []).append(value)
        else:
            if spec.attr in kwargs:
                raise XMLStructureError(f"duplicate element {name!r}", path=path)
            kwargs[spec.attr] = _read_value(spec.type, spec.kind, child, f"{path}.{name}")

    return cls(**kwargs)


def _read_value(type_: type, kind: str, elem: ET.Element, path: str) -> Any:
    if kind == RESOURCE:
        return _read_boxed(elem, path)
    if issubclass(type_, PrimitiveValue):
        return _read_primitive(type_, elem, path)
    return _read_element(type_, elem, path)


def _read_boxed(wrapper: ET.Element, path: str) -> Resource:
    if wrapper.attrib:
        key = next(iter(wrapper.attrib))
        raise XMLStructureError(f"invalid attribute {key!r}", path=path)
    _check_text(wrapper, path)
    children = list(wrapper)
    if len(children) != 1:
        raise XMLStructureError(
            f"expected exactly one resource element, got {len(children)}", path=path
        )
    inner = children[0]
    tag = _local_name(inner, path)
    cls = resolve_resource_type(tag, path=path)
    return _read_element(cls, inner, path)


def _read_primitive(cls: type[PrimitiveValue], elem: ET.Element, path: str) -> PrimitiveValue:
    element_id = None
    value = None
    for key, raw in elem.attrib.items():
        if key == "id":
            element_id = raw
        elif key == "value":
            try:
                value = cls.from_xml_text(raw)
            except ValueError as e:
                raise MalformedInputError(str(e), path=path) from e
        else:
            raise XMLStructureError(f"invalid attribute {key!r}", path=path)
    _check_text(elem, path)

    ext_cls = resolve_element_type("Extension")
    extension = []
    for i, child in enumerate(elem):
        name = _local_name(child, path)
        if name != "extension":
            raise XMLStructureError(f"unknown element {name!r} for {cls.__name__}", path=path)
        extension.append(_read_element(ext_cls, child, f"{path}.extension[{i}]"))

    return cls(value=value, id=element_id, extension=extension)
