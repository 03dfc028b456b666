"""
Shared constants for the fhir-toolbox wire formats.

Namespace URIs and version identifiers used across the codecs are
centralised here to avoid circular imports.
"""

from __future__ import annotations

# ── Namespace & Version Constants ──────────────────────────────────

FHIR_NAMESPACE = "http://hl7.org/fhir"
"""XML namespace of every FHIR element."""

XHTML_NAMESPACE = "http://www.w3.org/1999/xhtml"
"""XML namespace of the narrative ``div``."""

SUPPORTED_FHIR_VERSIONS = ("R4",)
"""FHIR versions with a shipped type catalogue."""

# ── JSON wire conventions ──────────────────────────────────────────

RESOURCE_TYPE_KEY = "resourceType"
"""JSON property carrying the resource discriminator tag."""

SIDECAR_PREFIX = "_"
"""Prefix of the shadow key that carries a primitive's id/extension."""

SIDECAR_KEYS = frozenset({"id", "extension"})
"""The only properties allowed inside a primitive sidecar object."""

COMPACT_SEPARATORS = (",", ":")
