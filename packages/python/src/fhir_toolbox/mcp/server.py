"""
fhir-toolbox MCP Server: Model Context Protocol integration.

Exposes the FHIR R4 codecs as MCP tools for LLM agents.  Five
read-only, stateless tools: list and describe the registered resource
types, decode a resource, convert it between JSON and XML, and
validate it structurally.

Usage::

    python -m fhir_toolbox.mcp          # stdio transport (default)
    python -m fhir_toolbox.mcp --http   # streamable HTTP

Requires: pip install fhir-toolbox[mcp]
"""

from __future__ import annotations

import json
from typing import Any

from mcp.server.fastmcp import FastMCP

from fhir_toolbox._constants import SUPPORTED_FHIR_VERSIONS
from fhir_toolbox.element import CHOICE, Resource, fields_of
from fhir_toolbox.errors import DecodeError
from fhir_toolbox.formats import FORMAT_JSON, decoder_for, encoder_for, require_format
from fhir_toolbox.json_codec import encode_json, to_json_dict
from fhir_toolbox.registry import (
    list_resource_types as _list_resource_types_raw,
    resolve_resource_type,
)


# ═══════════════════════════════════════════════════════════════════
# Server instance
# ═══════════════════════════════════════════════════════════════════

mcp = FastMCP(
    "fhir-toolbox",
    instructions=(
        "FHIR R4 resource model with lossless JSON and XML codecs. "
        "Decodes, converts and structurally validates resources, "
        "including primitive extensions and choice ([x]) fields. "
        "All tools are read-only and stateless."
    ),
)


# ── Helpers ────────────────────────────────────────────────────────

def _decode(document: str, fmt: str, label: str = "format") -> Resource:
    return decoder_for(require_format(fmt, label))(document)


# ═══════════════════════════════════════════════════════════════════
# Tools
# ═══════════════════════════════════════════════════════════════════


@mcp.tool()
def list_resource_types() -> list[str]:
    """List the FHIR resource types this server can decode.

    Returns:
        Sorted list of resourceType discriminator strings.
    """
    return _list_resource_types_raw()


@mcp.tool()
def describe_resource_type(resource_type: str) -> dict:
    """Describe the wire fields of a FHIR resource type.

    Choice fields list every type-suffixed wire key they may appear
    under (e.g. ``valueQuantity``, ``valueString``).

    Args:
        resource_type: A resourceType such as "Patient" or "Bundle".

    Returns:
        Dict with ``resourceType`` and an ordered ``fields`` list.
    """
    cls = resolve_resource_type(resource_type)
    fields = []
    for spec in fields_of(cls):
        entry: dict[str, Any] = {"name": spec.name, "kind": spec.kind}
        if spec.kind == CHOICE:
            entry["choices"] = spec.choice.wire_keys()
        elif spec.type is not None:
            entry["type"] = spec.type.__name__
            entry["repeated"] = spec.repeated
        fields.append(entry)
    return {"resourceType": resource_type, "fields": fields}


@mcp.tool()
def decode_resource(document: str, format: str = "json") -> dict:
    """Decode a FHIR resource and return its normalized JSON form.

    Args:
        document: The resource as a JSON or XML string.
        format: "json" (default), "xml" or a FHIR media type.

    Returns:
        Dict with ``resourceType``, ``id`` and the normalized
        ``resource`` JSON object.
    """
    resource = _decode(document, format)
    return {
        "resourceType": resource.discriminator_tag(),
        "id": resource.resource_id(),
        "resource": to_json_dict(resource),
    }


@mcp.tool()
def convert_resource(
    document: str,
    source_format: str = "json",
    target_format: str = "xml",
) -> str:
    """Convert a FHIR resource between JSON and XML.

    Primitive ids and extensions, choice fields and contained
    resources are carried over losslessly.

    Args:
        document: The resource in the source format.
        source_format: "json" or "xml", or a FHIR media type such as
            "application/fhir+xml".
        target_format: Same choices as ``source_format``.

    Returns:
        The resource serialized in the target format.
    """
    target = require_format(target_format, "target_format")
    resource = _decode(document, source_format, "source_format")
    if target == FORMAT_JSON:
        data = encode_json(resource, indent=2)
    else:
        data = encoder_for(target)(resource)
    return data.decode("utf-8")


@mcp.tool()
def validate_resource(document: str, format: str = "json") -> dict:
    """Check that a document is a structurally valid FHIR resource.

    Structural only: unknown fields, wrong value types, ambiguous
    choice fields, unknown resource types and (for XML) namespace or
    attribute violations.  Terminology and cardinality are not checked.

    Args:
        document: The resource as a JSON or XML string.
        format: "json" (default) or "xml".

    Returns:
        Dict with ``valid`` and, when invalid, an ``error`` object with
        ``type``, ``path`` and ``message``.
    """
    decode = decoder_for(require_format(format))
    try:
        resource = decode(document)
    except DecodeError as e:
        return {
            "valid": False,
            "error": {
                "type": type(e).__name__,
                "path": e.path,
                "message": e.message,
            },
        }
    return {"valid": True, "resourceType": resource.discriminator_tag()}


# ═══════════════════════════════════════════════════════════════════
# Resources
# ═══════════════════════════════════════════════════════════════════


@mcp.resource("fhir-toolbox://resource-types")
def get_resource_types() -> str:
    """The registered FHIR resource types."""
    return json.dumps({"fhirVersion": SUPPORTED_FHIR_VERSIONS[0], "resourceTypes": _list_resource_types_raw()})


# ═══════════════════════════════════════════════════════════════════
# Prompts
# ═══════════════════════════════════════════════════════════════════


@mcp.prompt()
def review_resource(document: str) -> str:
    """Guide for structurally reviewing a FHIR resource."""
    return (
        "Review the following FHIR resource:\n"
        f"```\n{document}\n```\n\n"
        "1. Call validate_resource to check its structure.\n"
        "2. If it is invalid, use the error path to locate the problem "
        "and describe_resource_type to see which fields are allowed.\n"
        "3. If it is valid, call decode_resource and summarize the "
        "populated fields, including any primitive extensions "
        "(keys starting with '_').\n"
    )
