"""
FHIR JSON wire format.

Encoding walks the dataclass tree through :func:`fields_of` and builds
the wire mapping in a single pass:

* primitive fields are split into a bare value under ``name`` and a
  sidecar object under ``_name``;
* repeated primitive fields become two index-aligned arrays, with
  ``null`` placeholders; fully empty entries are dropped;
* choice fields emit exactly one type-suffixed key (plus its sidecar
  when the branch is a primitive);
* boxed resources embed their own ``resourceType``.

Numbers are written by :func:`dump_json_text`, which keeps the exact
digits of a decimal (``1.50`` stays ``1.50``).

Decoding is the exact inverse and is strict: unknown keys, malformed
sidecars, wrong JSON types, ambiguous choice fields and unknown
``resourceType`` tags all abort with a :class:`~fhir_toolbox.errors.DecodeError`
naming the dotted path of the offending element.  No partial resource
is ever returned.

Example::

    >>> data = encode_json(patient)
    >>> decode_json(data) == patient
    True
"""

from __future__ import annotations

import decimal as _decimal
import json
from functools import lru_cache, partial
from typing import Any, Optional, Union

from fhir_toolbox._constants import (
    COMPACT_SEPARATORS,
    RESOURCE_TYPE_KEY,
    SIDECAR_KEYS,
    SIDECAR_PREFIX,
)
from fhir_toolbox.element import (
    CHOICE,
    ELEMENT,
    PRIMITIVE,
    RESOURCE,
    Base,
    Resource,
    fields_of,
)
from fhir_toolbox.errors import MalformedInputError
from fhir_toolbox.primitives import (
    PrimitiveValue,
    Sidecar,
    decimal_text,
    join_primitive,
    join_primitive_list,
    split_primitive,
    split_primitive_list,
)
from fhir_toolbox.registry import resolve_element_type, resolve_resource_type


# ═══════════════════════════════════════════════════════════════════
# ENCODE
# ═══════════════════════════════════════════════════════════════════


def to_json_dict(obj: Base) -> dict[str, Any]:
    """Build the JSON wire mapping of a resource or datatype.

    Raises:
        TypeError: If a choice attribute holds an undeclared type.
    """
    if not isinstance(obj, Base):
        raise TypeError(f"Expected a FHIR element or resource, got: {type(obj).__name__}")
    return _encode_element(obj)


def encode_json(obj: Base, *, indent: Optional[int] = None) -> bytes:
    """Serialize a resource (or datatype) to UTF-8 JSON bytes.

    Args:
        obj:    The value to encode.
        indent: Pretty-print with this indent; compact when ``None``.

    Raises:
        ValueError: If a decimal is NaN or infinite.
    """
    return dump_json_text(to_json_dict(obj), indent=indent).encode("utf-8")


def dump_json_text(doc: Any, *, indent: Optional[int] = None) -> str:
    """Serialize a wire mapping to JSON text.

    Decimals are written with exactly the digits they hold (``1.50``
    stays ``1.50``); strings, integers, booleans and ``null`` go
    through :func:`json.dumps` with ``ensure_ascii=False``.  Compact
    separators are used when ``indent`` is ``None``.

    Raises:
        ValueError: If a number is NaN or infinite.
    """
    out: list[str] = []
    _write_json(doc, out, indent, 0)
    return "".join(out)


def _write_json(node: Any, out: list[str], indent: Optional[int], depth: int) -> None:
    if isinstance(node, dict):
        _write_container("{", "}", list(node.items()), out, indent, depth)
    elif isinstance(node, list):
        _write_container("[", "]", [(None, item) for item in node], out, indent, depth)
    elif isinstance(node, (float, _decimal.Decimal)):
        out.append(decimal_text(node))
    else:
        out.append(json.dumps(node, ensure_ascii=False))


def _write_container(
    open_: str,
    close: str,
    entries: list[tuple[Optional[str], Any]],
    out: list[str],
    indent: Optional[int],
    depth: int,
) -> None:
    if not entries:
        out.append(open_ + close)
        return
    if indent is None:
        item_sep, key_sep = COMPACT_SEPARATORS
        lead = tail = ""
    else:
        lead = "\n" + " " * (indent * (depth + 1))
        tail = "\n" + " " * (indent * depth)
        item_sep, key_sep = "," + lead, ": "

    out.append(open_ + lead)
    for i, (key, value) in enumerate(entries):
        if i:
            out.append(item_sep)
        if key is not None:
            out.append(json.dumps(key, ensure_ascii=False) + key_sep)
        _write_json(value, out, indent, depth + 1)
    out.append(tail + close)


def _encode_element(obj: Base) -> dict[str, Any]:
    out: dict[str, Any] = {}
    if isinstance(obj, Resource):
        out[RESOURCE_TYPE_KEY] = obj.discriminator_tag()

    for spec in fields_of(type(obj)):
        value = getattr(obj, spec.attr)
        kind = spec.kind

        if kind == PRIMITIVE:
            if spec.repeated:
                _put_primitive_list(out, spec.name, value)
            else:
                _put_primitive(out, spec.name, value)

        elif kind == CHOICE:
            key = spec.choice.key_for(value)
            if key is None:
                continue
            if isinstance(value, PrimitiveValue):
                _put_primitive(out, key, value)
            else:
                out[key] = _encode_element(value)

        elif kind in (ELEMENT, RESOURCE):
            if spec.repeated:
                if value:
                    out[spec.name] = [_encode_element(v) for v in value]
            elif value is not None:
                out[spec.name] = _encode_element(value)

        elif value is not None:
            # ATTRIBUTE / XHTML: plain strings
            out[spec.name] = value

    return out


def _put_primitive(out: dict[str, Any], name: str, value: Optional[PrimitiveValue]) -> None:
    bare, sidecar = split_primitive(value)
    if bare is not None:
        out[name] = bare
    if sidecar is not None:
        out[SIDECAR_PREFIX + name] = _encode_sidecar(sidecar)


def _put_primitive_list(out: dict[str, Any], name: str, values: list[PrimitiveValue]) -> None:
    if not values:
        return
    bares, sidecars = split_primitive_list(values)
    if bares is not None:
        out[name] = bares
    if sidecars is not None:
        out[SIDECAR_PREFIX + name] = [
            _encode_sidecar(s) if s is not None else None for s in sidecars
        ]


def _encode_sidecar(sidecar: Sidecar) -> dict[str, Any]:
    out: dict[str, Any] = {}
    if sidecar.id is not None:
        out["id"] = sidecar.id
    if sidecar.extension:
        out["extension"] = [_encode_element(ext) for ext in sidecar.extension]
    return out


# ═══════════════════════════════════════════════════════════════════
# DECODE
# ═══════════════════════════════════════════════════════════════════


def decode_json(data: Union[bytes, str], cls: Optional[type] = None) -> Any:
    """Parse JSON text and decode it into a resource.

    Args:
        data: UTF-8 bytes or text of one JSON object.
        cls:  Expected class.  When omitted, the ``resourceType`` of the
              document selects the class through the registry.

    Raises:
        MalformedInputError: Invalid JSON, or structurally invalid FHIR.
        ChoiceConflictError: Two branches of one choice field present.
        UnknownResourceTypeError: Unregistered ``resourceType``.
    """
    try:
        doc = json.loads(data, parse_float=_decimal.Decimal, parse_constant=_reject_constant)
    except ValueError as e:
        raise MalformedInputError(f"invalid JSON: {e}") from e
    return from_json_dict(doc, cls)


def from_json_dict(data: Any, cls: Optional[type] = None) -> Any:
    """Decode an already-parsed JSON mapping.  See :func:`decode_json`."""
    if not isinstance(data, dict):
        raise MalformedInputError(f"expected a JSON object, got {_json_type(data)}")

    if cls is None or (issubclass(cls, Resource) and not cls.resource_type):
        return _decode_boxed(data, None)

    if issubclass(cls, Resource):
        tag = data.get(RESOURCE_TYPE_KEY)
        if tag != cls.resource_type:
            raise MalformedInputError(
                f"expected resourceType {cls.resource_type!r}, got {tag!r}"
            )
    return _decode_element(cls, data, cls.__name__)


def _reject_constant(name: str) -> Any:
    raise ValueError(f"{name} is not a valid JSON number")


def _json_type(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float, _decimal.Decimal)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, list):
        return "array"
    if isinstance(value, dict):
        return "object"
    return type(value).__name__


@lru_cache(maxsize=None)
def _allowed_keys(cls: type) -> frozenset[str]:
    keys: set[str] = set()
    if issubclass(cls, Resource):
        keys.add(RESOURCE_TYPE_KEY)
    for spec in fields_of(cls):
        if spec.kind == CHOICE:
            for key in spec.choice.wire_keys():
                keys.add(key)
                if issubclass(spec.choice.variant_for_key(key), PrimitiveValue):
                    keys.add(SIDECAR_PREFIX + key)
        else:
            keys.add(spec.name)
            if spec.kind == PRIMITIVE:
                keys.add(SIDECAR_PREFIX + spec.name)
    return frozenset(keys)


def _present(data: dict[str, Any], key: str) -> bool:
    return data.get(key) is not None


def _decode_boxed(data: Any, path: Optional[str]) -> Resource:
    if not isinstance(data, dict):
        raise MalformedInputError(f"expected a JSON object, got {_json_type(data)}", path=path)
    tag = data.get(RESOURCE_TYPE_KEY)
    if tag is None:
        raise MalformedInputError(f"missing {RESOURCE_TYPE_KEY!r}", path=path)
    cls = resolve_resource_type(tag, path=path)
    return _decode_element(cls, data, path or tag)


def _decode_element(cls: type, data: Any, path: str) -> Any:
    if not isinstance(data, dict):
        raise MalformedInputError(f"expected a JSON object, got {_json_type(data)}", path=path)

    allowed = _allowed_keys(cls)
    for key in data:
        if key not in allowed:
            raise MalformedInputError(f"unknown field {key!r} for {cls.__name__}", path=path)

    kwargs: dict[str, Any] = {}
    for spec in fields_of(cls):
        name = spec.name
        fpath = f"{path}.{name}"
        kind = spec.kind

        if kind == PRIMITIVE:
            bare = data.get(name)
            sidecar = data.get(SIDECAR_PREFIX + name)
            if spec.repeated:
                kwargs[spec.attr] = _decode_primitive_list(spec.type, bare, sidecar, fpath)
            else:
                kwargs[spec.attr] = _decode_primitive(spec.type, bare, sidecar, fpath)

        elif kind == CHOICE:
            present = [
                key
                for key in spec.choice.wire_keys()
                if _present(data, key) or _present(data, SIDECAR_PREFIX + key)
            ]
            selected = spec.choice.select(present, path=fpath)
            if selected is None:
                continue
            key, variant = selected
            kpath = f"{path}.{key}"
            if issubclass(variant, PrimitiveValue):
                kwargs[spec.attr] = _decode_primitive(
                    variant, data.get(key), data.get(SIDECAR_PREFIX + key), kpath
                )
            else:
                kwargs[spec.attr] = _decode_element(variant, data[key], kpath)

        elif kind in (ELEMENT, RESOURCE):
            raw = data.get(name)
            if raw is None:
                continue
            decode_one = _decode_boxed if kind == RESOURCE else partial(_decode_element, spec.type)
            if spec.repeated:
                if not isinstance(raw, list):
                    raise MalformedInputError(f"expected an array, got {_json_type(raw)}", path=fpath)
                kwargs[spec.attr] = [decode_one(item, f"{fpath}[{i}]") for i, item in enumerate(raw)]
            else:
                kwargs[spec.attr] = decode_one(raw, fpath)

        else:
            raw = data.get(name)
            if raw is None:
                continue
            if not isinstance(raw, str):
                raise MalformedInputError(f"expected a string, got {_json_type(raw)}", path=fpath)
            kwargs[spec.attr] = raw

    return cls(**kwargs)


def _decode_primitive(
    cls: type[PrimitiveValue],
    bare: Any,
    raw_sidecar: Any,
    path: str,
) -> Optional[PrimitiveValue]:
    _check_bare(cls, bare, path)
    sidecar = _decode_sidecar(raw_sidecar, _sidecar_path(path))
    return join_primitive(cls, bare, sidecar)


def _decode_primitive_list(
    cls: type[PrimitiveValue],
    bares: Any,
    raw_sidecars: Any,
    path: str,
) -> list[PrimitiveValue]:
    if bares is not None and not isinstance(bares, list):
        raise MalformedInputError(f"expected an array, got {_json_type(bares)}", path=path)
    if raw_sidecars is not None and not isinstance(raw_sidecars, list):
        raise MalformedInputError(
            f"expected an array, got {_json_type(raw_sidecars)}",
            path=_sidecar_path(path),
        )
    for i, bare in enumerate(bares or []):
        _check_bare(cls, bare, f"{path}[{i}]")
    sidecars = [
        _decode_sidecar(raw, f"{_sidecar_path(path)}[{i}]")
        for i, raw in enumerate(raw_sidecars or [])
    ]
    return join_primitive_list(cls, bares, sidecars)


def _check_bare(cls: type[PrimitiveValue], bare: Any, path: str) -> None:
    if bare is not None and not cls.accepts(bare):
        raise MalformedInputError(
            f"expected {cls.__name__} value, got {_json_type(bare)}", path=path
        )


def _sidecar_path(path: str) -> str:
    head, _, name = path.rpartition(".")
    return f"{head}.{SIDECAR_PREFIX}{name}" if head else SIDECAR_PREFIX + name


def _decode_sidecar(raw: Any, path: str) -> Optional[Sidecar]:
    if raw is None:
        return None
    if not isinstance(raw, dict):
        raise MalformedInputError(
            f"expected a primitive extension object, got {_json_type(raw)}", path=path
        )
    for key in raw:
        if key not in SIDECAR_KEYS:
            raise MalformedInputError(
                f"invalid field {key!r} in primitive extension", path=path
            )

    element_id = raw.get("id")
    if element_id is not None and not isinstance(element_id, str):
        raise MalformedInputError(f"expected a string, got {_json_type(element_id)}", path=f"{path}.id")

    raw_ext = raw.get("extension")
    extension: list[Any] = []
    if raw_ext is not None:
        if not isinstance(raw_ext, list):
            raise MalformedInputError(
                f"expected an array, got {_json_type(raw_ext)}", path=f"{path}.extension"
            )
        ext_cls = resolve_element_type("Extension")
        extension = [
            _decode_element(ext_cls, item, f"{path}.extension[{i}]")
            for i, item in enumerate(raw_ext)
        ]

    sidecar = Sidecar(id=element_id, extension=extension)
    return None if sidecar.is_empty() else sidecar
