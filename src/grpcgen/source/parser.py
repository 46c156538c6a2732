"""Parse Go source files with tree-sitter.

Produces a SourceFile whose top-level declarations carry their doc comments.
A doc comment group is the run of comments ending on the line directly above
a declaration with no blank line inside, as in go/ast.
"""

import logging
from pathlib import Path

import tree_sitter_go as tsgo
from tree_sitter import Language, Node, Parser

from grpcgen.errors import InputValidationError, SourceParseError
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

logger = logging.getLogger(__name__)

DECLARATION_KINDS = {
    "type_declaration": DeclarationKind.TYPE,
    "function_declaration": DeclarationKind.FUNCTION,
    "method_declaration": DeclarationKind.METHOD,
    "import_declaration": DeclarationKind.IMPORT,
    "var_declaration": DeclarationKind.VAR,
    "const_declaration": DeclarationKind.CONST,
}


def get_node_text(node: Node) -> str:
    """Extract text from a tree-sitter node."""
    return node.text.decode("utf-8") if node.text is not None else ""


def _collapse(text: str) -> str:
    return " ".join(text.split())


def _named_children(node: Node) -> list[Node]:
    """Named children without comments."""
    return [child for child in node.named_children if child.type != "comment"]


def find_children_by_type(node: Node, type_name: str) -> list[Node]:
    """Find all children of given type."""
    return [child for child in node.children if child.type == type_name]


def type_text(node: Node | None) -> str:
    """Render a type node the way go/types.ExprString would.

    Spacing inside composite types is normalised so ``map[string] *Bar`` and
    ``map[string]*Bar`` come out the same.
    """
    if node is None:
        return ""

    kind = node.type
    children = _named_children(node)

    if kind == "pointer_type" and children:
        return "*" + type_text(children[-1])

    if kind == "slice_type":
        element = node.child_by_field_name("element")
        if element is not None:
            return "[]" + type_text(element)

    if kind == "array_type":
        length = node.child_by_field_name("length")
        element = node.child_by_field_name("element")
        if length is not None and element is not None:
            return f"[{_collapse(get_node_text(length))}]{type_text(element)}"

    if kind == "map_type":
        key = node.child_by_field_name("key")
        value = node.child_by_field_name("value")
        if key is not None and value is not None:
            return f"map[{type_text(key)}]{type_text(value)}"

    if kind == "interface_type" and not children:
        return "interface{}"

    if kind == "struct_type":
        field_list = children[0] if children else None
        if field_list is None or not _named_children(field_list):
            return "struct{}"

    if kind == "parenthesized_type" and children:
        return type_text(children[0])

    return _collapse(get_node_text(node))


def _parse_field_list(node: Node) -> list[FieldEntry]:
    """Read the fields of a struct_type node."""
    field_list = next(
        (c for c in node.named_children if c.type == "field_declaration_list"),
        None,
    )
    if field_list is None:
        return []

    entries = []
    for decl in find_children_by_type(field_list, "field_declaration"):
        names = [get_node_text(n) for n in decl.children_by_field_name("name")]
        entries.append(
            FieldEntry(
                names=names,
                type=type_text(decl.child_by_field_name("type")),
                line=decl.start_point[0] + 1,
            )
        )
    return entries


def _parse_type_spec(node: Node) -> TypeSpec:
    name_node = node.child_by_field_name("name")
    type_node = node.child_by_field_name("type")
    name = get_node_text(name_node) if name_node is not None else ""

    if node.type == "type_alias":
        return TypeSpec(name=name, kind=TypeKind.ALIAS, type=type_text(type_node))

    if type_node is not None and type_node.type == "struct_type":
        return TypeSpec(
            name=name,
            kind=TypeKind.STRUCT,
            type="struct",
            fields=_parse_field_list(type_node),
        )

    return TypeSpec(name=name, kind=TypeKind.OTHER, type=type_text(type_node))


def _parse_parameter_list(node: Node | None) -> list[Parameter]:
    if node is None:
        return []

    if node.type != "parameter_list":
        # Single unparenthesised result type
        return [Parameter(names=[], type=type_text(node))]

    params = []
    for child in _named_children(node):
        names = [get_node_text(n) for n in child.children_by_field_name("name")]
        param_type = type_text(child.child_by_field_name("type"))
        if child.type == "variadic_parameter_declaration":
            param_type = "..." + param_type
        params.append(Parameter(names=names, type=param_type))
    return params


def _parse_declaration(node: Node, kind: DeclarationKind, doc: list[Comment]) -> Declaration:
    decl = Declaration(
        kind=kind,
        doc=doc,
        start_line=node.start_point[0] + 1,
        end_line=node.end_point[0] + 1,
    )

    if kind == DeclarationKind.TYPE:
        for child in _named_children(node):
            if child.type in ("type_spec", "type_alias"):
                decl.specs.append(_parse_type_spec(child))
        if decl.specs:
            decl.name = decl.specs[0].name

    elif decl.is_function:
        name_node = node.child_by_field_name("name")
        decl.name = get_node_text(name_node) if name_node is not None else ""
        decl.parameters = _parse_parameter_list(node.child_by_field_name("parameters"))
        decl.results = _parse_parameter_list(node.child_by_field_name("result"))
        if kind == DeclarationKind.METHOD:
            receiver = _parse_parameter_list(node.child_by_field_name("receiver"))
            decl.receiver = receiver[0] if receiver else None

    return decl


def _first_error(node: Node) -> Node | None:
    if node.type == "ERROR" or node.is_missing:
        return node
    for child in node.children:
        if child.has_error or child.is_missing:
            found = _first_error(child)
            if found is not None:
                return found
    return None


def parse_go_source(source: bytes | str, path: str | None = None) -> SourceFile:
    """Parse Go source text.

    Args:
        source: Go source as bytes or str
        path: Optional path, used in error messages

    Returns:
        Parsed SourceFile
    """
    where = path or "<source>"
    if isinstance(source, bytes):
        try:
            source = source.decode("utf-8")
        except UnicodeDecodeError as e:
            raise SourceParseError(f"{where}: invalid UTF-8 at byte {e.start}") from e

    # tree-sitter-go reports a missing terminator when the last line has no newline
    if not source.endswith("\n"):
        source += "\n"

    parser = Parser(Language(tsgo.language()))
    tree = parser.parse(source.encode("utf-8"))
    root = tree.root_node

    if root.has_error:
        error = _first_error(root)
        line = error.start_point[0] + 1 if error is not None else 0
        raise SourceParseError(f"{where}:{line}: syntax error")

    package_name = None
    declarations: list[Declaration] = []
    pending: list[Comment] = []
    pending_end_row = -1
    last_end_row = -1

    for node in root.named_children:
        row = node.start_point[0]

        if node.type == "comment":
            if row == last_end_row:
                # trailing comment on the previous declaration's last line
                continue
            comment = Comment(text=get_node_text(node), line=row + 1)
            if pending and row > pending_end_row + 1:
                pending = [comment]
            else:
                pending.append(comment)
            pending_end_row = node.end_point[0]
            continue

        doc = pending if pending and pending_end_row + 1 == row else []
        pending = []
        last_end_row = node.end_point[0]

        if node.type == "package_clause":
            ident = next(iter(_named_children(node)), None)
            package_name = get_node_text(ident) if ident is not None else None
            continue

        kind = DECLARATION_KINDS.get(node.type, DeclarationKind.OTHER)
        declarations.append(_parse_declaration(node, kind, doc))

    if not package_name:
        raise SourceParseError(f"{where}: missing package clause")

    logger.debug("parsed %s: package %s, %d declarations", where, package_name, len(declarations))
    return SourceFile(package_name=package_name, declarations=declarations, path=path)


def parse_go_file(path: Path | str) -> SourceFile:
    """Read and parse a Go file.

    Args:
        path: Path to the .go file

    Returns:
        Parsed SourceFile
    """
    path = Path(path)
    try:
        source = path.read_bytes()
    except OSError as e:
        raise InputValidationError(f"Cannot read {path}: {e.strerror or e}") from e
    return parse_go_source(source, str(path))
