"""Record extraction.

Turns a struct type declaration marked with the record marker into a
RecordDescriptor. Field types are captured as Go text; translation happens
later, in the assembler.
"""

from collections.abc import Sequence

from grpcgen.config.base import MarkerConfig
from grpcgen.errors import MalformedDeclarationError
from grpcgen.schemas.base import FieldDescriptor, RecordDescriptor
from grpcgen.source.base import Declaration, DeclarationKind, TypeKind


def has_marker(comments: Sequence[str], marker: str) -> bool:
    """Whether any comment line contains the marker."""
    return any(marker in comment for comment in comments)


def extract_record(
    decl: Declaration,
    comments: Sequence[str],
    markers: MarkerConfig,
) -> RecordDescriptor | None:
    """Extract a record from a marked struct declaration.

    Args:
        decl: Top-level declaration
        comments: Doc comment lines preceding the declaration
        markers: Marker configuration

    Returns:
        RecordDescriptor, or None if the declaration is not marked

    Raises:
        MalformedDeclarationError: The declaration is marked but is not a
            single named struct type
    """
    if not has_marker(comments, markers.record):
        return None

    label = decl.describe()

    def malformed(message: str) -> MalformedDeclarationError:
        return MalformedDeclarationError(message, declaration=label, line=decl.start_line)

    if decl.kind != DeclarationKind.TYPE:
        raise malformed(f"{markers.record} on a {decl.kind.value} declaration")
    if len(decl.specs) != 1:
        raise malformed(f"{markers.record} needs exactly one type spec, found {len(decl.specs)}")

    spec = decl.specs[0]
    if not spec.name:
        raise malformed("type spec has no name")
    if spec.kind != TypeKind.STRUCT:
        raise malformed(f"{spec.name} is not a struct type")

    fields = []
    for entry in spec.fields:
        if not entry.names:
            raise malformed(f"{spec.name} has an embedded field {entry.type} (line {entry.line})")
        # Name, Email string -> two fields sharing one type
        fields.extend(FieldDescriptor(name=name, type=entry.type) for name in entry.names)

    return RecordDescriptor(name=spec.name, fields=fields)
