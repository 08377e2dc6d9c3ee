"""Type definitions for YAML netlink specifications."""

from dataclasses import dataclass, field

from dataclasses_json import DataClassJsonMixin, Undefined, config

# Unknown document keys are dropped rather than failing the whole spec.
_EXCLUDE_UNKNOWN = config(undefined=Undefined.EXCLUDE)["dataclasses_json"]


def _key(name: str) -> dict:
    """Map a dataclass field to its kebab-case document key."""
    return config(field_name=name)


@dataclass
class Attribute(DataClassJsonMixin):
    """A single netlink attribute within an attribute set.

    type is one of the scalar types understood by the generator (u8, u16,
    u32, u64, nul-string) or any other spec type, such as array-nest, which
    is carried through untouched.
    """

    dataclass_json_config = _EXCLUDE_UNKNOWN

    name: str
    type: str = ""
    type_value: list[str] = field(default_factory=list, metadata=_key("type-value"))
    len: str = ""
    description: str = ""
    nested_attributes: str = field(default="", metadata=_key("nested-attributes"))


@dataclass
class AttributeSet(DataClassJsonMixin):
    """A named, ordered collection of attributes sharing a constant prefix."""

    dataclass_json_config = _EXCLUDE_UNKNOWN

    name: str
    name_prefix: str = field(default="", metadata=_key("name-prefix"))
    attributes: list[Attribute] = field(default_factory=list)


@dataclass
class OperationAttributesList(DataClassJsonMixin):
    """Attribute names used by one request or reply."""

    dataclass_json_config = _EXCLUDE_UNKNOWN

    attributes: list[str] = field(default_factory=list)


@dataclass
class OperationAttributes(DataClassJsonMixin):
    """The request and reply attribute lists for a do or dump."""

    dataclass_json_config = _EXCLUDE_UNKNOWN

    request: OperationAttributesList = field(default_factory=OperationAttributesList)
    reply: OperationAttributesList = field(default_factory=OperationAttributesList)

    def has_attributes(self) -> bool:
        return bool(self.request.attributes or self.reply.attributes)


@dataclass
class Operation(DataClassJsonMixin):
    """A single netlink request/reply exchange or notification."""

    dataclass_json_config = _EXCLUDE_UNKNOWN

    name: str
    description: str = ""
    attribute_set: str = field(default="", metadata=_key("attribute-set"))
    dont_validate: list[str] = field(default_factory=list, metadata=_key("dont-validate"))
    notify: str = ""
    do: OperationAttributes = field(default_factory=OperationAttributes)
    dump: OperationAttributes = field(default_factory=OperationAttributes)


@dataclass
class Operations(DataClassJsonMixin):
    """All operations of a family under one command constant prefix."""

    dataclass_json_config = _EXCLUDE_UNKNOWN

    name_prefix: str = field(default="", metadata=_key("name-prefix"))
    list_: list[Operation] = field(default_factory=list, metadata=_key("list"))


@dataclass
class Spec(DataClassJsonMixin):
    """A complete YAML netlink specification for one family."""

    dataclass_json_config = _EXCLUDE_UNKNOWN

    name: str
    protocol: str = ""
    description: str = ""
    uapi_header: str = field(default="", metadata=_key("uapi-header"))
    attribute_sets: list[AttributeSet] = field(
        default_factory=list, metadata=_key("attribute-sets")
    )
    operations: Operations = field(default_factory=Operations)


def normalize_description(text: str | None) -> str:
    """Flatten a multi-line description into one trimmed line."""
    if not text:
        return ""
    return " ".join(text.splitlines()).strip()
