"""YAML netlink specification parser."""

from typing import Any, TextIO

import yaml

from .types import Spec, normalize_description


class ParseError(RuntimeError):
    """Raised when a document cannot be decoded into a Spec."""


def _drop_nulls(value: Any) -> Any:
    """Remove keys with empty values so dataclass defaults apply."""
    if isinstance(value, dict):
        return {k: _drop_nulls(v) for k, v in value.items() if v is not None}
    if isinstance(value, list):
        return [_drop_nulls(v) for v in value if v is not None]
    return value


def normalize(spec: Spec) -> Spec:
    """Tidy a Spec's description strings in place.

    Newlines become spaces and surrounding whitespace is trimmed so that
    descriptions can be embedded in single-line comments.
    """
    spec.description = normalize_description(spec.description)

    for aset in spec.attribute_sets:
        for attr in aset.attributes:
            attr.description = normalize_description(attr.description)

    for op in spec.operations.list_:
        op.description = normalize_description(op.description)

    return spec


def from_document(doc: Any) -> Spec:
    """Build a normalized Spec from an already decoded YAML document."""
    if not isinstance(doc, dict):
        raise ParseError(f"expected a mapping at the top level, got {type(doc).__name__}")

    try:
        spec = Spec.from_dict(_drop_nulls(doc))
    except (KeyError, TypeError, ValueError, AttributeError) as e:
        raise ParseError(f"invalid specification: {e}") from e

    if not isinstance(spec.name, str) or not spec.name:
        raise ParseError("specification has no name")

    return normalize(spec)


def parse(text: str | TextIO) -> Spec:
    """Parse a YAML netlink specification into a Spec."""
    try:
        doc = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise ParseError(str(e)) from e

    return from_document(doc)


def parse_file(path: str) -> Spec:
    """Read and parse a YAML netlink specification file."""
    with open(path, encoding="utf-8") as f:
        return parse(f)
