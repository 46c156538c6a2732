"""Procedure extraction.

A function or method becomes a remote procedure when its doc comments carry
both the procedure marker and the group marker. The group marker's value
names the service the procedure belongs to.
"""

from collections.abc import Sequence
from typing import NamedTuple

from grpcgen.config.base import MarkerConfig
from grpcgen.errors import MalformedDeclarationError
from grpcgen.schemas.base import ProcedureDescriptor
from grpcgen.source.base import Declaration, Parameter


class ExtractedProcedure(NamedTuple):
    group_name: str
    procedure: ProcedureDescriptor


def group_value(comment: str, marker: str) -> str:
    """Text following the group marker on a comment line.

    Examples:
        >>> group_value("// @grpcGen:SrvName: Greeting", "@grpcGen:SrvName:")
        'Greeting'
    """
    value = comment.split(marker, 1)[1]
    if value.rstrip().endswith("*/"):
        value = value.rstrip()[:-2]
    return value.strip()


def _boundary_types(params: Sequence[Parameter], prefix: str) -> list[str]:
    """Types of the parameters following the cross-boundary convention."""
    return [p.type.removeprefix(prefix) for p in params if prefix in p.type]


def extract_procedure(
    decl: Declaration,
    comments: Sequence[str],
    markers: MarkerConfig,
) -> ExtractedProcedure | None:
    """Extract a procedure and its group from a marked function.

    The first matching parameter is the input; every matching result
    overwrites the output, so the last one wins.

    Args:
        decl: Top-level declaration
        comments: Doc comment lines preceding the declaration
        markers: Marker configuration

    Returns:
        ExtractedProcedure, or None unless both markers are present

    Raises:
        MalformedDeclarationError: Both markers are present but the
            declaration is not a named function or the group is empty
    """
    found_procedure = False
    group_name = None

    for comment in comments:
        if found_procedure and group_name is not None:
            break
        if markers.procedure in comment:
            found_procedure = True
        elif markers.group in comment and group_name is None:
            group_name = group_value(comment, markers.group)

    if not found_procedure or group_name is None:
        return None

    label = decl.describe()
    if not decl.is_function or not decl.name:
        raise MalformedDeclarationError(
            f"{markers.procedure} on a {decl.kind.value} declaration",
            declaration=label,
            line=decl.start_line,
        )
    if not group_name:
        raise MalformedDeclarationError(
            f"{markers.group} has no service name",
            declaration=label,
            line=decl.start_line,
        )

    prefix = markers.cross_boundary_prefix
    inputs = _boundary_types(decl.parameters, prefix)
    outputs = _boundary_types(decl.results, prefix)

    procedure = ProcedureDescriptor(
        name=decl.name,
        input_type=inputs[0] if inputs else "",
        output_type=outputs[-1] if outputs else "",
    )
    return ExtractedProcedure(group_name=group_name, procedure=procedure)
