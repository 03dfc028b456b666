"""
Closed one-of fields ("choice" or ``[x]`` fields).

A choice field is a single logical attribute whose value is one of a
fixed, ordered set of variant types.  On the wire each variant gets its
own key, formed by appending the variant's type name to the field
name::

    effective[x]  ->  effectiveDateTime | effectivePeriod | effectiveTiming

The in-memory attribute simply holds ``None`` or an instance of exactly
one declared variant; :class:`ChoiceField` is the descriptor that
knows the variant set, derives the wire keys and enforces exclusivity
when reading them back.  Codecs call :meth:`ChoiceField.key_for` when
writing and :meth:`ChoiceField.select` when reading.
"""

from __future__ import annotations

from functools import cached_property
from typing import Any, Iterable, Optional, Union

from fhir_toolbox.errors import ChoiceConflictError
from fhir_toolbox.registry import resolve_element_type

VariantSpec = Union[type, str]


class ChoiceField:
    """Variant set and wire-key mapping for one choice field.

    Args:
        name:     Wire name of the logical field (``"value"``,
                  ``"deceased"``).
        variants: Variant types in declaration order, as classes or as
                  registered type names resolved on first use.

    Raises:
        ValueError: If ``variants`` is empty.
    """

    def __init__(self, name: str, variants: Iterable[VariantSpec]) -> None:
        self.name = name
        self._specs = tuple(variants)
        if not self._specs:
            raise ValueError(f"Choice field '{name}' must declare at least one variant")

    def __repr__(self) -> str:
        names = [s if isinstance(s, str) else s.__name__ for s in self._specs]
        return f"ChoiceField({self.name!r}, [{', '.join(names)}])"

    # ── Variant table ─────────────────────────────────────────────
    #
    # Built lazily; the tables depend only on the declared variants, so
    # concurrent first access computes identical values.

    def resolve(self) -> ChoiceField:
        """Build the variant tables now and return ``self``.

        Raises:
            KeyError:   If a variant name is not registered.
            ValueError: If a variant type is declared twice.
        """
        self._by_type  # noqa: B018
        return self

    @cached_property
    def variants(self) -> tuple[type, ...]:
        """The declared variant classes, in declaration order."""
        return tuple(
            resolve_element_type(s) if isinstance(s, str) else s
            for s in self._specs
        )

    @cached_property
    def _by_key(self) -> dict[str, type]:
        table: dict[str, type] = {}
        for cls in self.variants:
            key = self.name + cls.__name__
            if key in table:
                raise ValueError(
                    f"Choice field '{self.name}' declares variant "
                    f"{cls.__name__} twice"
                )
            table[key] = cls
        return table

    @cached_property
    def _by_type(self) -> dict[type, str]:
        return {cls: key for key, cls in self._by_key.items()}

    def wire_keys(self) -> list[str]:
        """All type-suffixed keys, in declaration order."""
        return list(self._by_key)

    def variant_for_key(self, key: str) -> Optional[type]:
        """The variant class a wire key stands for, or ``None``."""
        return self._by_key.get(key)

    # ── Encode side ───────────────────────────────────────────────

    def key_for(self, value: Any) -> Optional[str]:
        """Wire key under which ``value`` is emitted.

        Returns ``None`` for ``None``.  The runtime class must be one of
        the declared variants exactly; a subclass of a variant is not
        accepted in its parent's place (``Age`` is not a ``Quantity``
        branch).

        Raises:
            TypeError: If ``value`` is not an instance of a declared
                variant.
        """
        if value is None:
            return None
        try:
            return self._by_type[type(value)]
        except KeyError:
            allowed = ", ".join(cls.__name__ for cls in self.variants)
            raise TypeError(
                f"Choice field '{self.name}' does not accept "
                f"{type(value).__name__}; expected one of: {allowed}"
            ) from None

    # ── Decode side ───────────────────────────────────────────────

    def select(
        self,
        present: Iterable[str],
        *,
        path: Optional[str] = None,
    ) -> Optional[tuple[str, type]]:
        """Pick the single populated branch among ``present`` wire keys.

        ``present`` lists every declared key that the wire data
        populates, either by its bare value or (for primitive variants)
        by its sidecar alone.  Keys that are not declared for this field
        are ignored.

        Returns:
            ``None`` when no branch is populated, else ``(key, cls)``.

        Raises:
            ChoiceConflictError: If two or more branches are populated.
        """
        hits: list[str] = []
        for key in present:
            if key in self._by_key and key not in hits:
                hits.append(key)
        if not hits:
            return None
        if len(hits) > 1:
            raise ChoiceConflictError(self.name, hits, path=path)
        key = hits[0]
        return key, self._by_key[key]
