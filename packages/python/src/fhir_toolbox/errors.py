"""
Error taxonomy for fhir-toolbox.

Every decode failure aborts the whole resource; there is no partial
result.  All decode errors derive from :class:`DecodeError`, which is
also a ``ValueError`` so callers that only care about "bad input" can
catch the builtin.
"""

from __future__ import annotations

from typing import Optional, Sequence


class FHIRError(Exception):
    """Base class for all fhir-toolbox errors."""


class DecodeError(FHIRError, ValueError):
    """A wire document could not be turned into a model object.

    Attributes:
        path: Dotted location of the offending element
            (e.g. ``"Observation.component[1].valueQuantity"``), or
            ``None`` when the failure concerns the document as a whole.
    """

    def __init__(self, message: str, *, path: Optional[str] = None) -> None:
        self.path = path
        self.message = message
        super().__init__(f"{path}: {message}" if path else message)


class MalformedInputError(DecodeError):
    """Syntactically invalid input, or a value of the wrong wire type."""


class ChoiceConflictError(DecodeError):
    """More than one branch of a choice field was populated."""

    def __init__(
        self,
        field_name: str,
        keys: Sequence[str],
        *,
        path: Optional[str] = None,
    ) -> None:
        self.field_name = field_name
        self.keys = tuple(keys)
        super().__init__(
            f'multiple values for field "{field_name}": {", ".join(self.keys)}',
            path=path,
        )


class UnknownResourceTypeError(DecodeError):
    """A discriminator tag did not match any registered resource type."""

    def __init__(self, tag: object, *, path: Optional[str] = None) -> None:
        self.tag = tag
        super().__init__(f"unknown resource type: {tag!r}", path=path)


class XMLStructureError(DecodeError):
    """An XML element or attribute outside the expected schema."""


class RegistrationError(FHIRError, RuntimeError):
    """Invalid type registration (duplicate tag or name).

    Raised at import time; indicates a broken type catalogue rather
    than bad input data.
    """
