"""Attribute set lookup for code generation."""

from collections.abc import Sequence

from .types import Attribute, AttributeSet, Spec


class InconsistentSpecError(RuntimeError):
    """Raised when a spec contradicts itself, e.g. names unknown attributes."""


class AttributeIndex:
    """Maps attribute set names to their definitions for one generation run.

    When a spec declares the same set name twice, the later one wins.
    """

    def __init__(self, spec: Spec) -> None:
        self._sets: dict[str, AttributeSet] = {aset.name: aset for aset in spec.attribute_sets}

    def name_prefix(self, name: str) -> str:
        """Return the constant prefix of a set, or "" for an unknown set."""
        aset = self._sets.get(name)
        return aset.name_prefix if aset else ""

    def resolve(self, set_name: str, wanted: Sequence[str]) -> list[Attribute]:
        """Resolve wanted attribute names against an attribute set.

        The result follows the order of wanted, not the set's declaration
        order. Names missing from the set are dropped, but a non-empty
        wanted list that matches nothing at all is an error.
        """
        if not set_name:
            raise InconsistentSpecError(
                f"empty attribute set reference for attributes {list(wanted)!r}"
            )

        if not wanted:
            return []

        aset = self._sets.get(set_name)
        idx = {a.name: a for a in aset.attributes} if aset else {}

        attrs = [idx[name] for name in wanted if name in idx]
        if not attrs:
            raise InconsistentSpecError(
                f"found no attributes for set {set_name!r} in list {list(wanted)!r}"
            )

        return attrs
