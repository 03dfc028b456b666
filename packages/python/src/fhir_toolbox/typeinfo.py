"""
Type descriptions for model navigation.

Every datatype and resource class answers ``type_info()`` with a
:class:`TypeInfo`: its own name, the name of the type it specializes
and its elements in wire order.  Names are FHIR type names in the
``FHIR`` namespace; choice fields are typed as ``Element`` and boxed
resources as ``Resource``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

FHIR_TYPE_NAMESPACE = "FHIR"


@dataclass(frozen=True)
class TypeInfoElement:
    """One element of a class: wire name, type name and cardinality."""

    name: str
    type: str
    repeated: bool = False
    namespace: str = FHIR_TYPE_NAMESPACE

    def type_specifier(self) -> str:
        """``FHIR.Coding`` or ``List<FHIR.Coding>``."""
        qualified = f"{self.namespace}.{self.type}"
        return f"List<{qualified}>" if self.repeated else qualified


@dataclass(frozen=True)
class TypeInfo:
    """Class description of a FHIR type.

    Attributes:
        name:      Type name (``Patient``, ``Quantity``, ``Decimal``).
        base_type: Name of the specialized type, ``None`` at the root.
        elements:  Element descriptions in wire order.
        namespace: Type namespace, always ``FHIR`` for model types.
    """

    name: str
    base_type: Optional[str]
    elements: tuple[TypeInfoElement, ...] = ()
    namespace: str = FHIR_TYPE_NAMESPACE

    def element(self, name: str) -> Optional[TypeInfoElement]:
        """The element named ``name``, or ``None``."""
        for item in self.elements:
            if item.name == name:
                return item
        return None
