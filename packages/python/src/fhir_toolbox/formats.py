"""
Wire-format negotiation.

Maps the format names a FHIR client may send (the ``_format`` query
parameter, ``Accept`` and ``Content-Type`` header values) onto the two
supported wire formats, and picks the decoder and encoder for each::

    >>> match_format("application/fhir+xml")
    'xml'
    >>> detect_format("json", ["application/xml"])
    'json'
"""

from __future__ import annotations

from typing import Any, Callable, Iterable, Optional

from fhir_toolbox.json_codec import decode_json, encode_json
from fhir_toolbox.xml_codec import decode_xml, encode_xml

FORMAT_JSON = "json"
FORMAT_XML = "xml"

MIME_TYPES = {
    FORMAT_JSON: "application/fhir+json",
    FORMAT_XML: "application/fhir+xml",
}
"""Canonical media type of each wire format."""

_ALIASES = {
    "application/fhir+json": FORMAT_JSON,
    "application/json": FORMAT_JSON,
    "text/json": FORMAT_JSON,
    "json": FORMAT_JSON,
    "application/fhir+xml": FORMAT_XML,
    "application/xml": FORMAT_XML,
    "text/xml": FORMAT_XML,
    "xml": FORMAT_XML,
}

_DECODERS: dict[str, Callable[..., Any]] = {
    FORMAT_JSON: decode_json,
    FORMAT_XML: decode_xml,
}

_ENCODERS: dict[str, Callable[..., bytes]] = {
    FORMAT_JSON: encode_json,
    FORMAT_XML: encode_xml,
}


def match_format(requested: str) -> Optional[str]:
    """The wire format named by ``requested``, or ``None``.

    Matching ignores case, surrounding whitespace and media-type
    parameters (``application/fhir+json; charset=utf-8``).
    """
    key = requested.split(";", 1)[0].strip().lower()
    return _ALIASES.get(key)


def detect_format(
    format_param: Optional[str] = None,
    header_values: Iterable[str] = (),
    default: str = FORMAT_JSON,
) -> str:
    """Pick the wire format of a request or response.

    The ``_format`` parameter wins when it names a known format;
    otherwise the first recognised header value is used, then
    ``default``.  A comma-separated header contributes each of its
    entries in order.
    """
    if format_param:
        fmt = match_format(format_param)
        if fmt is not None:
            return fmt
    for value in header_values:
        for entry in value.split(","):
            fmt = match_format(entry)
            if fmt is not None:
                return fmt
    return default


def require_format(requested: str, label: str = "format") -> str:
    """Like :func:`match_format`, but fail on an unknown name.

    Raises:
        ValueError: If ``requested`` names no supported format.
    """
    fmt = match_format(requested)
    if fmt is None:
        raise ValueError(
            f"Unsupported {label} '{requested}'. Supported: {sorted(_DECODERS)}"
        )
    return fmt


def decoder_for(fmt: str) -> Callable[..., Any]:
    """The ``decode_*`` function of a wire format name or alias."""
    return _DECODERS[require_format(fmt)]


def encoder_for(fmt: str) -> Callable[..., bytes]:
    """The ``encode_*`` function of a wire format name or alias."""
    return _ENCODERS[require_format(fmt)]
