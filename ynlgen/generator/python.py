"""Python code generator for YAML netlink specifications."""

from dataclasses import dataclass
from enum import StrEnum
from importlib import resources

from jinja2 import Environment, PackageLoader

from .naming import camel_case, constant_ref, snake_case
from .resolver import AttributeIndex
from .types import Attribute, Operation, OperationAttributes, OperationAttributesList, Spec

DEFAULT_RUNTIME_IMPORT = "ynlgen.proto"

RUNTIME_FILES = [
    "__init__.py",
    "attributes.py",
    "genetlink.py",
    "uapi.py",
]


@dataclass(frozen=True)
class ScalarType:
    """How one spec scalar type is declared, encoded and decoded.

    annotation is the record field type, zero the literal for its default
    value (never written to the wire), encode the AttributeEncoder method
    and decode the Attribute accessor.
    """

    annotation: str
    zero: str
    encode: str
    decode: str


SCALAR_TYPES: dict[str, ScalarType] = {
    "u8": ScalarType("int", "0", "uint8", "uint8"),
    "u16": ScalarType("int", "0", "uint16", "uint16"),
    "u32": ScalarType("int", "0", "uint32", "uint32"),
    "u64": ScalarType("int", "0", "uint64", "uint64"),
    "nul-string": ScalarType("str", '""', "string", "string"),
}


class OpKind(StrEnum):
    """Selects the single-shot Do or the enumerating Dump variant."""

    DO = "Do"
    DUMP = "Dump"

    def attributes(self, op: Operation) -> OperationAttributes:
        return _OP_ATTRIBUTES[self](op)

    @property
    def flags(self) -> str:
        return _OP_FLAGS[self]


_OP_ATTRIBUTES = {
    OpKind.DO: lambda op: op.do,
    OpKind.DUMP: lambda op: op.dump,
}

_OP_FLAGS = {
    OpKind.DO: "genetlink.Flags.REQUEST",
    OpKind.DUMP: "genetlink.Flags.REQUEST | genetlink.Flags.DUMP",
}


class Direction(StrEnum):
    """Selects the request or reply half of an operation variant."""

    REQUEST = "Request"
    REPLY = "Reply"

    def attributes(self, oas: OperationAttributes) -> OperationAttributesList:
        return _DIRECTION_ATTRIBUTES[self](oas)


_DIRECTION_ATTRIBUTES = {
    Direction.REQUEST: lambda oas: oas.request,
    Direction.REPLY: lambda oas: oas.reply,
}


@dataclass
class Config:
    """Configuration for render().

    package names the generated module in its header and defaults to the
    spec name. runtime_import is the import path of the runtime package the
    generated module uses.
    """

    package: str | None = None
    runtime_import: str = DEFAULT_RUNTIME_IMPORT


@dataclass
class FieldView:
    """Template-friendly view of one resolved attribute."""

    name: str
    attr: Attribute
    const: str
    scalar: ScalarType | None

    @property
    def description(self) -> str:
        return self.attr.description

    @property
    def marker(self) -> str:
        return f'unimplemented: field "{self.name}", type "{self.attr.type}"'


@dataclass
class RecordView:
    """Template-friendly view of a request or reply record type."""

    name: str
    method: str
    fields: list[FieldView]


@dataclass
class MethodView:
    """Template-friendly view of one Do or Dump binding."""

    name: str
    kind: OpKind
    operation: Operation
    command: str
    request: RecordView | None
    reply: RecordView | None
    body: list[str]

    @property
    def records(self) -> list[RecordView]:
        return [r for r in (self.request, self.reply) if r is not None]

    @property
    def params(self) -> str:
        if self.request is None:
            return ""
        return f", req: {self.request.name}"

    @property
    def returns(self) -> str:
        if self.reply is None:
            return "None"
        if self.kind is OpKind.DUMP:
            return f"list[{self.reply.name}]"
        return self.reply.name


def _quote(text: str) -> str:
    """Render text as a double-quoted Python string literal."""
    return '"' + text.replace("\\", "\\\\").replace('"', '\\"') + '"'


def _docstring(text: str) -> str:
    """Escape text for embedding inside a triple-quoted docstring."""
    return text.replace("\\", "\\\\").replace('"""', '\\"\\"\\"')


env = Environment(
    loader=PackageLoader("ynlgen.generator", "templates"),
    trim_blocks=True,
    lstrip_blocks=True,
    keep_trailing_newline=True,
    line_comment_prefix="%%",
    line_statement_prefix="%",
)
env.filters["quote"] = _quote
env.filters["docstring"] = _docstring

template = env.get_template("python.py.j2")


def _record(
    index: AttributeIndex,
    op: Operation,
    oas: OperationAttributes,
    direction: Direction,
    op_name: str,
    method_name: str,
) -> RecordView | None:
    """Build the record type for one half of an operation, if it has attributes."""
    wanted = direction.attributes(oas).attributes
    if not wanted:
        return None

    prefix = index.name_prefix(op.attribute_set)
    fields = [
        FieldView(
            name=snake_case(a.name),
            attr=a,
            const=constant_ref(prefix, a.name),
            scalar=SCALAR_TYPES.get(a.type),
        )
        for a in index.resolve(op.attribute_set, wanted)
    ]
    return RecordView(name=op_name + direction.value, method=method_name, fields=fields)


def _gen_encoder(request: RecordView | None) -> list[str]:
    """Generate code packing the non-default request fields into b."""
    if request is None:
        return ["# No attribute arguments.", 'b = b""']

    lines = ["ae = AttributeEncoder()"]
    for f in request.fields:
        if f.scalar is None:
            lines.append(f"# {f.marker}")
            continue

        lines.append(f"if req.{f.name} != {f.scalar.zero}:")
        lines.append(f"    ae.{f.scalar.encode}({f.const}, req.{f.name})")

    lines.append("b = ae.encode()")
    return lines


def _gen_decoder(kind: OpKind, reply: RecordView, family: str) -> list[str]:
    """Generate code decoding msgs into reply records and returning them."""
    lines = [
        f"replies: list[{reply.name}] = []",
        "for m in msgs:",
        f"    reply = {reply.name}()",
        "    for attr in AttributeDecoder(m.data):",
    ]

    branch = "if"
    for f in reply.fields:
        if f.scalar is None:
            lines.append(f"        # {f.marker}")
            continue

        lines.append(f"        {branch} attr.type == {f.const}:")
        lines.append(f"            reply.{f.name} = attr.{f.scalar.decode}()")
        branch = "elif"

    if branch == "if":
        # No modeled fields, but the stream is still validated.
        lines.append("        pass")

    lines.append("    replies.append(reply)")
    lines.append("")

    if kind is OpKind.DO:
        message = f"{family}: expected exactly one {reply.name}"
        lines.append("if len(replies) != 1:")
        lines.append(f"    raise genetlink.ReplyError({_quote(message)})")
        lines.append("")
        lines.append("return replies[0]")
    else:
        lines.append("return replies")

    return lines


def _gen_body(
    kind: OpKind,
    command: str,
    request: RecordView | None,
    reply: RecordView | None,
    family: str,
) -> list[str]:
    """Generate the encode, dispatch and decode sequence of a method."""
    lines = _gen_encoder(request)
    lines.append("")
    lines.append("msg = genetlink.Message(")
    lines.append(f"    header=genetlink.Header(command={command}),")
    lines.append("    data=b,")
    lines.append(")")

    call = f"self.c.execute(msg, self.family(), {kind.flags})"
    if reply is None:
        lines.append(call)
        return lines

    lines.append(f"msgs = {call}")
    lines.append("")
    lines.extend(_gen_decoder(kind, reply, family))
    return lines


def plan(spec: Spec, index: AttributeIndex) -> list[MethodView]:
    """Decide which bindings to emit for every operation, in declared order.

    A variant gets a method only when its request or reply lists at least one
    attribute, so notification-only operations produce nothing.
    """
    methods: list[MethodView] = []
    for op in spec.operations.list_:
        for kind in OpKind:
            oas = kind.attributes(op)
            if not oas.has_attributes():
                continue

            op_name = kind.value + camel_case(op.name)
            method_name = f"{kind.value.lower()}_{snake_case(op.name)}"
            command = constant_ref(spec.operations.name_prefix, op.name)
            request = _record(index, op, oas, Direction.REQUEST, op_name, method_name)
            reply = _record(index, op, oas, Direction.REPLY, op_name, method_name)

            methods.append(
                MethodView(
                    name=method_name,
                    kind=kind,
                    operation=op,
                    command=command,
                    request=request,
                    reply=reply,
                    body=_gen_body(kind, command, request, reply, spec.name),
                )
            )

    return methods


def tidy(text: str) -> str:
    """Strip trailing whitespace and collapse runs of blank lines."""
    lines: list[str] = []
    blanks = 0
    for line in text.splitlines():
        line = line.rstrip()
        if not line:
            blanks += 1
            if blanks > 2:
                continue
        else:
            blanks = 0
        lines.append(line)

    return "\n".join(lines).strip("\n") + "\n"


def render(spec: Spec, config: Config | None = None) -> str:
    """Render a YAML netlink Spec to Python source code."""
    if config is None:
        config = Config()

    methods = plan(spec, AttributeIndex(spec))
    text = template.render(
        spec=spec,
        package=config.package or spec.name,
        runtime_import=config.runtime_import,
        methods=methods,
    )
    return tidy(text)


def runtime() -> dict[str, str]:
    """Return the Python runtime files as a dict of filename -> content."""
    result: dict[str, str] = {}
    for filename in RUNTIME_FILES:
        content = resources.files("ynlgen.proto").joinpath(filename).read_text()
        result[filename] = content
    return result
