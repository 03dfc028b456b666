"""
Primitive values with out-of-band element metadata.

A FHIR primitive is a bare scalar (string, boolean, number, date...)
that may additionally carry an element ``id`` and a list of
extensions.  On the JSON wire the two halves travel separately: the
scalar under the field's own key, the metadata in a *sidecar* object
under the ``_``-prefixed shadow key::

    "birthDate": "1970-03-30",
    "_birthDate": {"id": "bd1", "extension": [...]}

This module holds the value model and the split/join routines that
move between the joined (in-memory) and split (wire) shapes.  The
routines know nothing about JSON or XML syntax; the codecs build on
them.

Invariants:
  - A value is *empty* iff it has no scalar, no id and no extensions.
    Empty values are never serialized.
  - A value with metadata but no scalar (an "annotated null") emits
    only its sidecar, and decodes back to the same shape.
"""

from __future__ import annotations

import decimal as _decimal
import logging
import math
import re
from dataclasses import dataclass, field
from typing import Any, ClassVar, Iterable, Optional, Sequence

from fhir_toolbox.registry import register_element_type
from fhir_toolbox.typeinfo import TypeInfo, TypeInfoElement

logger = logging.getLogger(__name__)


# ═══════════════════════════════════════════════════════════════════
# SIDECAR
# ═══════════════════════════════════════════════════════════════════


@dataclass
class Sidecar:
    """The id/extension half of a split primitive."""

    id: Optional[str] = None
    extension: list[Any] = field(default_factory=list)

    def is_empty(self) -> bool:
        return self.id is None and not self.extension


# ═══════════════════════════════════════════════════════════════════
# VALUE MODEL
# ═══════════════════════════════════════════════════════════════════


@dataclass
class PrimitiveValue:
    """A scalar with an optional element id and extensions.

    Concrete subclasses fix the accepted Python types of ``value`` and
    its XML lexical form.  Subclasses are registered by class name so
    that datatypes can refer to them by string.

    Attributes:
        value:     The bare scalar, or ``None`` when absent.
        id:        Element id for internal references (not the
                   resource id).
        extension: Ordered list of ``Extension`` elements.
    """

    value: Any = None
    id: Optional[str] = None
    extension: list[Any] = field(default_factory=list)

    json_types: ClassVar[tuple[type, ...]] = (str,)

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        register_element_type(cls)

    def __post_init__(self) -> None:
        """Normalization hook for subclasses; the base keeps ``value`` as given."""

    def __str__(self) -> str:
        # Diagnostic output only: never raises.
        from fhir_toolbox.json_codec import dump_json_text, to_json_dict

        try:
            out: dict[str, Any] = {}
            if self.id is not None:
                out["id"] = self.id
            if self.extension:
                out["extension"] = [to_json_dict(ext) for ext in self.extension]
            if self.value is not None:
                out["value"] = self.value
            return dump_json_text(out, indent=2)
        except Exception:
            logger.warning(
                "could not render %s for debug output",
                type(self).__name__,
                exc_info=True,
            )
            return "null"

    # ── Navigation ────────────────────────────────────────────────

    def children(self, *names: str) -> list[Any]:
        """The element id and extensions, filtered by wire name.

        With no ``names``, every present child is returned.  The bare
        scalar is not a child; read it from ``value``.
        """
        out: list[Any] = []
        if self.id is not None and (not names or "id" in names):
            out.append(self.id)
        if not names or "extension" in names:
            out.extend(self.extension)
        return out

    @classmethod
    def type_info(cls) -> TypeInfo:
        """Type description: a ``PrimitiveType`` with ``id`` and ``extension``."""
        return TypeInfo(
            name=cls.__name__,
            base_type="PrimitiveType",
            elements=(
                TypeInfoElement("id", "string"),
                TypeInfoElement("extension", "Extension", repeated=True),
            ),
        )

    # ── Emptiness ─────────────────────────────────────────────────

    def is_empty(self) -> bool:
        """True iff value, id and extensions are all absent."""
        return self.value is None and self.id is None and not self.extension

    def has_sidecar(self) -> bool:
        return self.id is not None or bool(self.extension)

    # ── Split / join ──────────────────────────────────────────────

    def split_for_wire(self) -> tuple[Any, Optional[Sidecar]]:
        """Separate the bare scalar from its id/extension sidecar.

        Returns:
            ``(bare, sidecar)`` where ``bare`` is ``None`` when the
            scalar is absent and ``sidecar`` is ``None`` when there is
            neither an id nor any extension.
        """
        sidecar = None
        if self.has_sidecar():
            sidecar = Sidecar(id=self.id, extension=list(self.extension))
        return self.value, sidecar

    @classmethod
    def join_from_wire(
        cls,
        bare: Any = None,
        sidecar: Optional[Sidecar] = None,
    ) -> PrimitiveValue:
        """Rebuild a value from its wire halves.

        Any combination is valid, including both absent (which yields
        an empty value).
        """
        if sidecar is None:
            return cls(value=bare)
        return cls(value=bare, id=sidecar.id, extension=list(sidecar.extension))

    # ── Wire typing ───────────────────────────────────────────────

    @classmethod
    def accepts(cls, bare: Any) -> bool:
        """Whether ``bare`` is a valid JSON-level scalar for this type."""
        # bool is an int subclass; only Boolean may hold it
        if isinstance(bare, bool) and bool not in cls.json_types:
            return False
        return isinstance(bare, cls.json_types)

    def to_xml_text(self) -> str:
        """Lexical form used in the XML ``value`` attribute."""
        return str(self.value)

    @classmethod
    def from_xml_text(cls, text: str) -> Any:
        """Parse an XML ``value`` attribute.

        Raises:
            ValueError: If ``text`` is not a valid lexical form.
        """
        return text


# ── Boolean ───────────────────────────────────────────────────────


class Boolean(PrimitiveValue):
    """Value of "true" or "false"."""

    json_types = (bool,)

    def to_xml_text(self) -> str:
        return "true" if self.value else "false"

    @classmethod
    def from_xml_text(cls, text: str) -> Any:
        if text == "true":
            return True
        if text == "false":
            return False
        raise ValueError(f"invalid boolean: {text!r}")


# ── Numbers ───────────────────────────────────────────────────────

_INTEGER_RE = re.compile(r"-?[0-9]+")
_DECIMAL_RE = re.compile(r"-?[0-9]+(\.[0-9]+)?([eE][+-]?[0-9]+)?")


class Integer(PrimitiveValue):
    """A signed 32-bit integer."""

    json_types = (int,)

    @classmethod
    def from_xml_text(cls, text: str) -> Any:
        if not _INTEGER_RE.fullmatch(text):
            raise ValueError(f"invalid integer: {text!r}")
        return int(text)


class UnsignedInt(Integer):
    """An integer with a value that is not negative (e.g. >= 0)."""


class PositiveInt(Integer):
    """An integer with a value that is positive (e.g. >0)."""


class Decimal(PrimitiveValue):
    """A rational number with implicit precision.

    Held as :class:`decimal.Decimal` so the written digits survive a
    round trip (``1.50`` stays ``1.50``).  Integral wire values stay
    ``int``.  A ``float`` passed to the constructor is converted through
    its shortest repr, so ``Decimal(6.3).value == decimal.Decimal("6.3")``.
    """

    json_types = (int, float, _decimal.Decimal)

    def __post_init__(self) -> None:
        if isinstance(self.value, float):
            self.value = _decimal.Decimal(repr(self.value))

    @classmethod
    def accepts(cls, bare: Any) -> bool:
        if not super().accepts(bare):
            return False
        if isinstance(bare, float):
            return math.isfinite(bare)
        if isinstance(bare, _decimal.Decimal):
            return bare.is_finite()
        return True

    def to_xml_text(self) -> str:
        return decimal_text(self.value)

    @classmethod
    def from_xml_text(cls, text: str) -> Any:
        if not _DECIMAL_RE.fullmatch(text):
            raise ValueError(f"invalid decimal: {text!r}")
        if any(c in text for c in ".eE"):
            return _decimal.Decimal(text)
        return int(text)


def decimal_text(value: Any) -> str:
    """Lexical form of a decimal value, digits exactly as held.

    Raises:
        ValueError: If the value is NaN or infinite.
    """
    if isinstance(value, float):
        value = _decimal.Decimal(repr(value))
    if isinstance(value, _decimal.Decimal) and not value.is_finite():
        raise ValueError(f"Out of range decimal value: {value}")
    return str(value)


# ── Strings and string-like types ─────────────────────────────────


class String(PrimitiveValue):
    """A sequence of Unicode characters."""


class Code(PrimitiveValue):
    """A string restricted to a value set; no leading or trailing whitespace."""


class Id(PrimitiveValue):
    """Any combination of letters, numerals, "-" and ".", up to 64 characters."""


class Markdown(PrimitiveValue):
    """A string that may contain GitHub Flavored Markdown syntax."""


class Uri(PrimitiveValue):
    """String of characters used to identify a name or a resource."""


class Url(PrimitiveValue):
    """A URI that is a literal reference."""


class Canonical(PrimitiveValue):
    """A URI that refers to a resource by its canonical URL."""


class Oid(PrimitiveValue):
    """An OID represented as a URI (``urn:oid:...``)."""


class Uuid(PrimitiveValue):
    """A UUID, represented as a URI (``urn:uuid:...``)."""


class Base64Binary(PrimitiveValue):
    """A stream of bytes, base64 encoded."""


# ── Dates and times ───────────────────────────────────────────────
#
# Held as their lexical strings so partial precision ("2020",
# "2020-01") survives a round trip unchanged.


class Date(PrimitiveValue):
    """A date, or partial date (e.g. just year or year + month)."""


class DateTime(PrimitiveValue):
    """A date, date-time or partial date."""


class Instant(PrimitiveValue):
    """An instant in time, known at least to the second."""


class Time(PrimitiveValue):
    """A time during the day, with no date specified."""


PRIMITIVE_TYPES: tuple[type[PrimitiveValue], ...] = (
    Base64Binary,
    Boolean,
    Canonical,
    Code,
    Date,
    DateTime,
    Decimal,
    Id,
    Instant,
    Integer,
    Markdown,
    Oid,
    PositiveInt,
    String,
    Time,
    UnsignedInt,
    Uri,
    Url,
    Uuid,
)
"""Every primitive type, in the order FHIR lists choice variants."""


# ═══════════════════════════════════════════════════════════════════
# SPLIT / JOIN HELPERS
# ═══════════════════════════════════════════════════════════════════


def split_primitive(
    value: Optional[PrimitiveValue],
) -> tuple[Any, Optional[Sidecar]]:
    """Split a singular primitive field; ``None`` splits to ``(None, None)``."""
    if value is None:
        return None, None
    return value.split_for_wire()


def join_primitive(
    cls: type[PrimitiveValue],
    bare: Any,
    sidecar: Optional[Sidecar],
) -> Optional[PrimitiveValue]:
    """Join a singular primitive field; both halves absent yields ``None``."""
    if bare is None and sidecar is None:
        return None
    return cls.join_from_wire(bare, sidecar)


def split_primitive_list(
    values: Sequence[PrimitiveValue],
) -> tuple[Optional[list[Any]], Optional[list[Optional[Sidecar]]]]:
    """Split a repeated primitive field into index-aligned wire arrays.

    Empty elements (no scalar, id or extension) are dropped first, as
    neither wire format can carry them.  The bare array is returned only
    if at least one element has a scalar; absent scalars become ``None``
    placeholders.  The sidecar array is returned only if at least one
    element carries metadata; it always has the full length, with
    ``None`` at every index whose element has no metadata.
    """
    bares: list[Any] = []
    sidecars: list[Optional[Sidecar]] = []
    for item in values:
        if item.is_empty():
            continue
        bare, sidecar = item.split_for_wire()
        bares.append(bare)
        sidecars.append(sidecar)

    out_bares = bares if any(b is not None for b in bares) else None
    out_sidecars = sidecars if any(s is not None for s in sidecars) else None
    return out_bares, out_sidecars


def join_primitive_list(
    cls: type[PrimitiveValue],
    bares: Optional[Iterable[Any]],
    sidecars: Optional[Iterable[Optional[Sidecar]]],
) -> list[PrimitiveValue]:
    """Merge index-aligned wire arrays back into a list of values.

    A sidecar array longer than the bare array pads the bare side with
    absent scalars, so annotated nulls at any position survive.  A
    position where both halves are absent yields no element.
    """
    bare_list = list(bares or [])
    sidecar_list = list(sidecars or [])
    if len(sidecar_list) > len(bare_list):
        bare_list.extend([None] * (len(sidecar_list) - len(bare_list)))

    result: list[PrimitiveValue] = []
    for i, bare in enumerate(bare_list):
        sidecar = sidecar_list[i] if i < len(sidecar_list) else None
        if bare is None and sidecar is None:
            continue
        result.append(cls.join_from_wire(bare, sidecar))
    return result
