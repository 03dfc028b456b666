"""
R4 general-purpose and metadata datatypes.

Declaration order does not matter: fields may name a datatype declared
further down (or in another module) as a string, resolved on first use.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from fhir_toolbox.element import BackboneElement, Element, attribute, choice, element, xhtml
from fhir_toolbox.primitives import (
    PRIMITIVE_TYPES,
    Base64Binary,
    Boolean,
    Canonical,
    Code,
    DateTime,
    Decimal,
    Id,
    Instant,
    Markdown,
    PositiveInt,
    String,
    Time,
    UnsignedInt,
    Uri,
    Url,
)

OPEN_COMPLEX_TYPES = (
    "Address",
    "Age",
    "Annotation",
    "Attachment",
    "CodeableConcept",
    "Coding",
    "ContactPoint",
    "Count",
    "Distance",
    "Duration",
    "HumanName",
    "Identifier",
    "Money",
    "Period",
    "Quantity",
    "Range",
    "Ratio",
    "Reference",
    "SampledData",
    "Signature",
    "Timing",
    "ContactDetail",
    "Expression",
    "RelatedArtifact",
    "UsageContext",
    "Meta",
)
"""Complex types allowed in open ``[x]`` fields (Extension.value, Parameters.value)."""

OPEN_TYPES = PRIMITIVE_TYPES + OPEN_COMPLEX_TYPES


# ── Extensibility ─────────────────────────────────────────────────


@dataclass
class Extension(Element):
    """Additional content defined by implementations.

    ``url`` identifies the meaning of the extension; ``value`` holds at
    most one value of any open type.  Extensions may nest.
    """

    url: Optional[str] = attribute()
    value: Any = choice(*OPEN_TYPES)


@dataclass
class Narrative(Element):
    """Human-readable summary of the resource (XHTML ``div``)."""

    status: Optional[Code] = element(Code)
    div: Optional[str] = xhtml()


@dataclass
class Meta(Element):
    """Metadata about a resource."""

    version_id: Optional[Id] = element(Id)
    last_updated: Optional[Instant] = element(Instant)
    source: Optional[Uri] = element(Uri)
    profile: list[Canonical] = element(Canonical, repeated=True)
    security: list[Coding] = element("Coding", repeated=True)
    tag: list[Coding] = element("Coding", repeated=True)


# ── General-purpose types ─────────────────────────────────────────


@dataclass
class Coding(Element):
    system: Optional[Uri] = element(Uri)
    version: Optional[String] = element(String)
    code: Optional[Code] = element(Code)
    display: Optional[String] = element(String)
    user_selected: Optional[Boolean] = element(Boolean)


@dataclass
class CodeableConcept(Element):
    coding: list[Coding] = element(Coding, repeated=True)
    text: Optional[String] = element(String)


@dataclass
class Period(Element):
    start: Optional[DateTime] = element(DateTime)
    end: Optional[DateTime] = element(DateTime)


@dataclass
class Identifier(Element):
    use: Optional[Code] = element(Code)
    type: Optional[CodeableConcept] = element(CodeableConcept)
    system: Optional[Uri] = element(Uri)
    value: Optional[String] = element(String)
    period: Optional[Period] = element(Period)
    assigner: Optional[Reference] = element("Reference")


@dataclass
class Reference(Element):
    """A reference from one resource to another."""

    reference: Optional[String] = element(String)
    type: Optional[Uri] = element(Uri)
    identifier: Optional[Identifier] = element(Identifier)
    display: Optional[String] = element(String)


@dataclass
class Quantity(Element):
    value: Optional[Decimal] = element(Decimal)
    comparator: Optional[Code] = element(Code)
    unit: Optional[String] = element(String)
    system: Optional[Uri] = element(Uri)
    code: Optional[Code] = element(Code)


@dataclass
class Age(Quantity):
    """A duration of time during which an organism has existed."""


@dataclass
class Count(Quantity):
    """A measured amount of discrete items."""


@dataclass
class Distance(Quantity):
    """A length, with a UCUM unit."""


@dataclass
class Duration(Quantity):
    """A length of time."""


@dataclass
class Money(Element):
    value: Optional[Decimal] = element(Decimal)
    currency: Optional[Code] = element(Code)


@dataclass
class Range(Element):
    low: Optional[Quantity] = element(Quantity)
    high: Optional[Quantity] = element(Quantity)


@dataclass
class Ratio(Element):
    numerator: Optional[Quantity] = element(Quantity)
    denominator: Optional[Quantity] = element(Quantity)


@dataclass
class SampledData(Element):
    origin: Optional[Quantity] = element(Quantity)
    period: Optional[Decimal] = element(Decimal)
    factor: Optional[Decimal] = element(Decimal)
    lower_limit: Optional[Decimal] = element(Decimal)
    upper_limit: Optional[Decimal] = element(Decimal)
    dimensions: Optional[PositiveInt] = element(PositiveInt)
    data: Optional[String] = element(String)


@dataclass
class Annotation(Element):
    """A text note with attribution."""

    author: Any = choice("Reference", String)
    time: Optional[DateTime] = element(DateTime)
    text: Optional[Markdown] = element(Markdown)


@dataclass
class Attachment(Element):
    content_type: Optional[Code] = element(Code)
    language: Optional[Code] = element(Code)
    data: Optional[Base64Binary] = element(Base64Binary)
    url: Optional[Url] = element(Url)
    size: Optional[UnsignedInt] = element(UnsignedInt)
    hash: Optional[Base64Binary] = element(Base64Binary)
    title: Optional[String] = element(String)
    creation: Optional[DateTime] = element(DateTime)


@dataclass
class HumanName(Element):
    use: Optional[Code] = element(Code)
    text: Optional[String] = element(String)
    family: Optional[String] = element(String)
    given: list[String] = element(String, repeated=True)
    prefix: list[String] = element(String, repeated=True)
    suffix: list[String] = element(String, repeated=True)
    period: Optional[Period] = element(Period)


@dataclass
class Address(Element):
    use: Optional[Code] = element(Code)
    type: Optional[Code] = element(Code)
    text: Optional[String] = element(String)
    line: list[String] = element(String, repeated=True)
    city: Optional[String] = element(String)
    district: Optional[String] = element(String)
    state: Optional[String] = element(String)
    postal_code: Optional[String] = element(String)
    country: Optional[String] = element(String)
    period: Optional[Period] = element(Period)


@dataclass
class ContactPoint(Element):
    system: Optional[Code] = element(Code)
    value: Optional[String] = element(String)
    use: Optional[Code] = element(Code)
    rank: Optional[PositiveInt] = element(PositiveInt)
    period: Optional[Period] = element(Period)


@dataclass
class Signature(Element):
    """A digital signature along with supporting context."""

    type: list[Coding] = element(Coding, repeated=True)
    when: Optional[Instant] = element(Instant)
    who: Optional[Reference] = element(Reference)
    on_behalf_of: Optional[Reference] = element(Reference)
    target_format: Optional[Code] = element(Code)
    sig_format: Optional[Code] = element(Code)
    data: Optional[Base64Binary] = element(Base64Binary)


@dataclass
class TimingRepeat(Element):
    bounds: Any = choice(Duration, Range, Period)
    count: Optional[PositiveInt] = element(PositiveInt)
    count_max: Optional[PositiveInt] = element(PositiveInt)
    duration: Optional[Decimal] = element(Decimal)
    duration_max: Optional[Decimal] = element(Decimal)
    duration_unit: Optional[Code] = element(Code)
    frequency: Optional[PositiveInt] = element(PositiveInt)
    frequency_max: Optional[PositiveInt] = element(PositiveInt)
    period: Optional[Decimal] = element(Decimal)
    period_max: Optional[Decimal] = element(Decimal)
    period_unit: Optional[Code] = element(Code)
    day_of_week: list[Code] = element(Code, repeated=True)
    time_of_day: list[Time] = element(Time, repeated=True)
    when: list[Code] = element(Code, repeated=True)
    offset: Optional[UnsignedInt] = element(UnsignedInt)


@dataclass
class Timing(BackboneElement):
    """An event that may occur multiple times."""

    event: list[DateTime] = element(DateTime, repeated=True)
    repeat: Optional[TimingRepeat] = element(TimingRepeat)
    code: Optional[CodeableConcept] = element(CodeableConcept)


# ── Metadata types ────────────────────────────────────────────────


@dataclass
class ContactDetail(Element):
    name: Optional[String] = element(String)
    telecom: list[ContactPoint] = element(ContactPoint, repeated=True)


@dataclass
class UsageContext(Element):
    code: Optional[Coding] = element(Coding)
    value: Any = choice(CodeableConcept, Quantity, Range, Reference)


@dataclass
class Expression(Element):
    description: Optional[String] = element(String)
    name: Optional[Id] = element(Id)
    language: Optional[Code] = element(Code)
    expression: Optional[String] = element(String)
    reference: Optional[Uri] = element(Uri)


@dataclass
class RelatedArtifact(Element):
    type: Optional[Code] = element(Code)
    label: Optional[String] = element(String)
    display: Optional[String] = element(String)
    citation: Optional[Markdown] = element(Markdown)
    url: Optional[Url] = element(Url)
    document: Optional[Attachment] = element(Attachment)
    resource: Optional[Canonical] = element(Canonical)
