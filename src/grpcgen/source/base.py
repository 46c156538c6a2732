"""Declarations read from a Go source file.

These are plain records produced by the parser; the extractors only read them.
Line numbers are 1-based.
"""

from dataclasses import dataclass, field
from enum import Enum


class DeclarationKind(str, Enum):
    """Kinds of top-level Go declarations."""

    TYPE = "type"
    FUNCTION = "function"
    METHOD = "method"
    IMPORT = "import"
    VAR = "var"
    CONST = "const"
    OTHER = "other"


class TypeKind(str, Enum):
    """Shape of the type in a type spec."""

    STRUCT = "struct"
    ALIAS = "alias"
    OTHER = "other"


@dataclass
class Comment:
    """One comment, including its ``//`` or ``/* */`` delimiters."""

    text: str
    line: int = 0


@dataclass
class FieldEntry:
    """One struct field line; several names may share the type."""

    names: list[str]
    type: str
    line: int = 0


@dataclass
class TypeSpec:
    """One ``Name Type`` pair inside a type declaration."""

    name: str
    kind: TypeKind
    type: str = ""
    fields: list[FieldEntry] = field(default_factory=list)


@dataclass
class Parameter:
    """A parameter or result entry; names may be empty."""

    names: list[str]
    type: str


@dataclass
class Declaration:
    """A top-level declaration with its doc comments."""

    kind: DeclarationKind
    name: str = ""
    doc: list[Comment] = field(default_factory=list)
    start_line: int = 0
    end_line: int = 0
    specs: list[TypeSpec] = field(default_factory=list)
    receiver: Parameter | None = None
    parameters: list[Parameter] = field(default_factory=list)
    results: list[Parameter] = field(default_factory=list)

    @property
    def doc_text(self) -> list[str]:
        return [c.text for c in self.doc]

    @property
    def is_function(self) -> bool:
        return self.kind in (DeclarationKind.FUNCTION, DeclarationKind.METHOD)

    def describe(self) -> str:
        """Short label used in log messages."""
        if self.name:
            return f"{self.kind.value} {self.name}"
        return self.kind.value


@dataclass
class SourceFile:
    """A parsed Go file."""

    package_name: str
    declarations: list[Declaration] = field(default_factory=list)
    path: str | None = None
