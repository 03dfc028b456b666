"""
fhir-toolbox: FHIR R4 resource model with lossless JSON and XML codecs.

Resources are plain dataclasses.  Primitive fields carry their element
id and extensions alongside the value, choice (``[x]``) fields hold a
single typed variant, and the codecs split and join both across the
wire boundary so that ``decode(encode(x)) == x``.
"""

__version__ = "0.1.0"

from fhir_toolbox.errors import (
    FHIRError,
    DecodeError,
    MalformedInputError,
    ChoiceConflictError,
    UnknownResourceTypeError,
    XMLStructureError,
    RegistrationError,
)
from fhir_toolbox.primitives import (
    PrimitiveValue,
    Sidecar,
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
    PRIMITIVE_TYPES,
    split_primitive,
    join_primitive,
    split_primitive_list,
    join_primitive_list,
)
from fhir_toolbox.choice import ChoiceField
from fhir_toolbox.registry import (
    register_resource_type,
    resolve_resource_type,
    list_resource_types,
    resolve_element_type,
)
from fhir_toolbox.element import (
    Base,
    Element,
    BackboneElement,
    Resource,
    DomainResource,
    FieldSpec,
    element,
    choice,
    attribute,
    xhtml,
    fields_of,
)
from fhir_toolbox.json_codec import to_json_dict, from_json_dict, encode_json, decode_json
from fhir_toolbox.xml_codec import to_xml_element, encode_xml, decode_xml
from fhir_toolbox.cbor_codec import encode_cbor, decode_cbor, payload_stats, PayloadStats
from fhir_toolbox.formats import match_format, detect_format, MIME_TYPES
from fhir_toolbox.typeinfo import TypeInfo, TypeInfoElement

# Registers the R4 catalogue.
from fhir_toolbox import r4

__all__ = [
    "__version__",
    # Errors
    "FHIRError",
    "DecodeError",
    "MalformedInputError",
    "ChoiceConflictError",
    "UnknownResourceTypeError",
    "XMLStructureError",
    "RegistrationError",
    # Primitives
    "PrimitiveValue",
    "Sidecar",
    "Base64Binary",
    "Boolean",
    "Canonical",
    "Code",
    "Date",
    "DateTime",
    "Decimal",
    "Id",
    "Instant",
    "Integer",
    "Markdown",
    "Oid",
    "PositiveInt",
    "String",
    "Time",
    "UnsignedInt",
    "Uri",
    "Url",
    "Uuid",
    "PRIMITIVE_TYPES",
    "split_primitive",
    "join_primitive",
    "split_primitive_list",
    "join_primitive_list",
    # Choice fields
    "ChoiceField",
    # Registry
    "register_resource_type",
    "resolve_resource_type",
    "list_resource_types",
    "resolve_element_type",
    # Model
    "Base",
    "Element",
    "BackboneElement",
    "Resource",
    "DomainResource",
    "FieldSpec",
    "element",
    "choice",
    "attribute",
    "xhtml",
    "fields_of",
    # Codecs
    "to_json_dict",
    "from_json_dict",
    "encode_json",
    "decode_json",
    "to_xml_element",
    "encode_xml",
    "decode_xml",
    "encode_cbor",
    "decode_cbor",
    "payload_stats",
    "PayloadStats",
    # Formats
    "match_format",
    "detect_format",
    "MIME_TYPES",
    # Navigation
    "TypeInfo",
    "TypeInfoElement",
    "r4",
]
