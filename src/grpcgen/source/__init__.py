"""Go source parsing (tree-sitter)."""

from grpcgen.source.base import (
    Comment,
    Declaration,
    DeclarationKind,
    FieldEntry,
    Parameter,
    SourceFile,
    TypeKind,
    TypeSpec,
)
from grpcgen.source.parser import parse_go_file, parse_go_source

__all__ = [
    "Comment",
    "Declaration",
    "DeclarationKind",
    "FieldEntry",
    "Parameter",
    "SourceFile",
    "TypeKind",
    "TypeSpec",
    "parse_go_file",
    "parse_go_source",
]
