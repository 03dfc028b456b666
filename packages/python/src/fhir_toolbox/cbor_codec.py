"""
CBOR rendering of the FHIR JSON wire model.

The JSON wire mapping (bare values, ``_``-prefixed sidecars,
type-suffixed choice keys, embedded ``resourceType``) serialized with
CBOR (RFC 8949) instead of JSON text.  Decoding runs the same strict
decoder as :func:`fhir_toolbox.json_codec.decode_json`, so every
structural check applies unchanged.

Requires the ``cbor2`` package::

    pip install fhir-toolbox[cbor]
"""

from __future__ import annotations

import gzip
from dataclasses import dataclass
from typing import Any, Optional

from fhir_toolbox.element import Base
from fhir_toolbox.errors import MalformedInputError
from fhir_toolbox.json_codec import encode_json, from_json_dict, to_json_dict
from fhir_toolbox.xml_codec import encode_xml

try:
    import cbor2

    _HAS_CBOR2 = True
except ImportError:
    _HAS_CBOR2 = False


def _require_cbor2() -> None:
    if not _HAS_CBOR2:
        raise ImportError(
            "cbor2 is required for CBOR serialization. "
            "Install it with: pip install fhir-toolbox[cbor]"
        )


# ── Data Structures ────────────────────────────────────────────────


@dataclass
class PayloadStats:
    """Comparison of serialization sizes for one resource."""

    json_bytes: int
    xml_bytes: int
    cbor_bytes: int
    gzip_json_bytes: int
    gzip_cbor_bytes: int

    @property
    def cbor_ratio(self) -> float:
        """CBOR size as a fraction of JSON size (lower = better)."""
        if self.json_bytes == 0:
            return 0.0
        return self.cbor_bytes / self.json_bytes

    @property
    def gzip_cbor_ratio(self) -> float:
        """Gzipped CBOR as a fraction of JSON."""
        if self.json_bytes == 0:
            return 0.0
        return self.gzip_cbor_bytes / self.json_bytes


# ═══════════════════════════════════════════════════════════════════
# SERIALIZATION
# ═══════════════════════════════════════════════════════════════════


def encode_cbor(resource: Base) -> bytes:
    """Serialize a resource to CBOR bytes.

    Raises:
        ImportError: If ``cbor2`` is not installed.
    """
    _require_cbor2()
    return cbor2.dumps(to_json_dict(resource))


def decode_cbor(data: bytes, cls: Optional[type] = None) -> Any:
    """Deserialize CBOR bytes produced by :func:`encode_cbor`.

    Args:
        data: CBOR-encoded bytes.
        cls:  Expected class; see :func:`fhir_toolbox.json_codec.decode_json`.

    Raises:
        ImportError: If ``cbor2`` is not installed.
        MalformedInputError: Invalid CBOR, or structurally invalid FHIR.
    """
    _require_cbor2()
    try:
        doc = cbor2.loads(data)
    except cbor2.CBORDecodeError as e:
        raise MalformedInputError(f"invalid CBOR: {e}") from e
    return from_json_dict(doc, cls)


# ═══════════════════════════════════════════════════════════════════
# PAYLOAD STATISTICS
# ═══════════════════════════════════════════════════════════════════


def payload_stats(resource: Base) -> PayloadStats:
    """Compare serialization sizes for a resource.

    Computes compact JSON, XML, CBOR, gzipped JSON and gzipped CBOR
    sizes.
    """
    _require_cbor2()
    json_bytes = encode_json(resource)
    xml_bytes = encode_xml(resource)
    cbor_bytes = encode_cbor(resource)

    return PayloadStats(
        json_bytes=len(json_bytes),
        xml_bytes=len(xml_bytes),
        cbor_bytes=len(cbor_bytes),
        gzip_json_bytes=len(gzip.compress(json_bytes)),
        gzip_cbor_bytes=len(gzip.compress(cbor_bytes)),
    )
