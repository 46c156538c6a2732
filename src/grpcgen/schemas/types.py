"""Go to proto3 type translation.

Go type text is parsed into a small TypeExpr model and then mapped onto the
proto3 vocabulary. Only the outermost slice or map is unwrapped; element,
key and value types are rendered flat, which means Go scalars inside a
collection keep their Go names (``[]int`` becomes ``repeated int``).
"""

import re
from dataclasses import dataclass

from grpcgen.schemas.base import WELL_KNOWN_VALUE

# Go predeclared types
GO_SCALARS = frozenset({
    "bool",
    "byte",
    "complex64",
    "complex128",
    "error",
    "float32",
    "float64",
    "int",
    "int8",
    "int16",
    "int32",
    "int64",
    "rune",
    "string",
    "uint",
    "uint8",
    "uint16",
    "uint32",
    "uint64",
    "uintptr",
})

SCALAR_MAPPING = {
    "int": "int32",
    "uint": "uint32",
}

DYNAMIC_SPELLINGS = ("interface{}", "any")

_IDENTIFIER = re.compile(r"[A-Za-z_]\w*(\.[A-Za-z_]\w*)?")


@dataclass(frozen=True)
class Scalar:
    name: str


@dataclass(frozen=True)
class Named:
    name: str


@dataclass(frozen=True)
class Pointer:
    elem: "TypeExpr"


@dataclass(frozen=True)
class Sequence:
    elem: "TypeExpr"


@dataclass(frozen=True)
class Mapping:
    key: "TypeExpr"
    value: "TypeExpr"


@dataclass(frozen=True)
class Dynamic:
    pass


@dataclass(frozen=True)
class Opaque:
    """Go syntax outside the model (arrays, channels, funcs, generics)."""

    text: str


TypeExpr = Scalar | Named | Pointer | Sequence | Mapping | Dynamic | Opaque


def _closing_bracket(text: str, start: int) -> int:
    """Index of the ``]`` matching the ``[`` at ``start``, or -1."""
    depth = 0
    for i in range(start, len(text)):
        if text[i] == "[":
            depth += 1
        elif text[i] == "]":
            depth -= 1
            if depth == 0:
                return i
    return -1


def parse_type_expr(text: str) -> TypeExpr:
    """Parse Go type text into a TypeExpr.

    Never raises: anything not understood becomes Opaque.
    """
    text = text.strip()

    if text in DYNAMIC_SPELLINGS:
        return Dynamic()

    if text.startswith("*"):
        return Pointer(parse_type_expr(text[1:]))

    if text.startswith("[]"):
        return Sequence(parse_type_expr(text[2:]))

    if text.startswith("map["):
        end = _closing_bracket(text, 3)
        if end > 0 and end + 1 < len(text):
            return Mapping(
                parse_type_expr(text[4:end]),
                parse_type_expr(text[end + 1:]),
            )
        return Opaque(text)

    if text in GO_SCALARS:
        return Scalar(text)

    if _IDENTIFIER.fullmatch(text):
        return Named(text)

    return Opaque(text)


def render_flat(expr: TypeExpr) -> str:
    """Render an expression back to Go-like text.

    Dynamic becomes the well-known Value type and pointer markers are
    dropped; nothing else is translated.
    """
    if isinstance(expr, Dynamic):
        return WELL_KNOWN_VALUE
    if isinstance(expr, Pointer):
        return render_flat(expr.elem)
    if isinstance(expr, Sequence):
        return f"[]{render_flat(expr.elem)}"
    if isinstance(expr, Mapping):
        return f"map[{render_flat(expr.key)}]{render_flat(expr.value)}"
    if isinstance(expr, Opaque):
        text = expr.text
        for spelling in ("interface {}", "interface{}"):
            text = text.replace(spelling, WELL_KNOWN_VALUE)
        return text.replace("*", "")
    return expr.name


def to_schema_type(expr: TypeExpr) -> str:
    """Map a parsed Go type onto a proto3 type expression."""
    if isinstance(expr, Scalar) and expr.name in SCALAR_MAPPING:
        return SCALAR_MAPPING[expr.name]

    if isinstance(expr, Sequence):
        if expr.elem == Scalar("byte"):
            return "bytes"
        return f"repeated {render_flat(expr.elem)}"

    if isinstance(expr, Mapping):
        return f"map<{render_flat(expr.key)}, {render_flat(expr.value)}>"

    return render_flat(expr)


def translate(source_type: str) -> str:
    """Translate a Go type expression into a proto3 type expression.

    Examples:
        >>> translate("map[string]*Bar")
        'map<string, Bar>'
        >>> translate("[]string")
        'repeated string'
    """
    return to_schema_type(parse_type_expr(source_type))
