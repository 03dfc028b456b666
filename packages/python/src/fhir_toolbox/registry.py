"""
Process-wide type registries.

Two tables live here:

* **Resource types** keyed by discriminator tag (``"Patient"``,
  ``"Bundle"``...).  Boxed-resource fields (``contained``,
  ``Bundle.entry.resource``) resolve the ``resourceType`` they read
  through :func:`resolve_resource_type`.
* **Element types** keyed by class name.  Datatype fields may name
  their type as a string (``element("Extension", repeated=True)``) so
  that mutually recursive datatypes can be declared in any order.

Both tables are filled once, at import of the type catalogue, by the
classes themselves (see ``__init_subclass__`` in
:mod:`fhir_toolbox.element` and :mod:`fhir_toolbox.primitives`), and
are read-only afterwards.  There is no unregister or reset.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from fhir_toolbox.errors import RegistrationError, UnknownResourceTypeError

logger = logging.getLogger(__name__)

_resource_types: dict[str, type] = {}
_element_types: dict[str, type] = {}


# ═══════════════════════════════════════════════════════════════════
# RESOURCE TYPES
# ═══════════════════════════════════════════════════════════════════


def register_resource_type(cls: type) -> type:
    """Register a concrete resource class under its discriminator tag.

    Args:
        cls: Class with a non-empty string ``resource_type`` attribute.

    Returns:
        ``cls`` unchanged, so this can be used as a decorator.

    Raises:
        RegistrationError: If the tag is empty or already taken.
    """
    tag = getattr(cls, "resource_type", None)
    if not isinstance(tag, str) or not tag.strip():
        raise RegistrationError(
            f"Resource class {cls.__qualname__} must define a non-empty "
            f"resource_type, got: {tag!r}"
        )
    existing = _resource_types.get(tag)
    if existing is not None and existing is not cls:
        raise RegistrationError(
            f"Resource type '{tag}' is already registered by "
            f"{existing.__module__}.{existing.__qualname__}"
        )
    _resource_types[tag] = cls
    logger.debug("registered resource type %s -> %s", tag, cls.__qualname__)
    return cls


def resolve_resource_type(tag: Any, *, path: Optional[str] = None) -> type:
    """Return the resource class registered for ``tag``.

    Raises:
        UnknownResourceTypeError: If no class carries that tag.
    """
    try:
        return _resource_types[tag]
    except (KeyError, TypeError):
        raise UnknownResourceTypeError(tag, path=path) from None


def list_resource_types() -> list[str]:
    """Return the sorted discriminator tags of all registered resources.

    The returned list is a snapshot; mutating it does not affect the
    registry.
    """
    return sorted(_resource_types)


# ═══════════════════════════════════════════════════════════════════
# ELEMENT TYPES
# ═══════════════════════════════════════════════════════════════════


def register_element_type(cls: type) -> type:
    """Register a datatype (or primitive, or resource) class by name.

    Raises:
        RegistrationError: If a different class already holds the name.
    """
    name = cls.__name__
    existing = _element_types.get(name)
    if existing is not None and existing is not cls:
        raise RegistrationError(
            f"Element type '{name}' is already registered by "
            f"{existing.__module__}.{existing.__qualname__}"
        )
    _element_types[name] = cls
    logger.debug("registered element type %s", name)
    return cls


def resolve_element_type(name: str) -> type:
    """Return the class registered under ``name``.

    Raises:
        KeyError: If nothing is registered under that name.
    """
    try:
        return _element_types[name]
    except KeyError:
        raise KeyError(
            f"No element type registered as '{name}'. "
            f"Known types: {len(_element_types)}"
        ) from None
