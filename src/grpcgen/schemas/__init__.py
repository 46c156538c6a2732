"""Schema model, Go type translation and proto rendering.

Example usage:
    from grpcgen.schemas import render_proto, translate

    translate("map[string]*Bar")   # 'map<string, Bar>'
    document = render_proto(model)
"""

from grpcgen.schemas.base import (
    AssemblyIssue,
    AssemblyResult,
    FieldDescriptor,
    IssueSeverity,
    ProcedureDescriptor,
    RecordDescriptor,
    SchemaModel,
    ServiceGroup,
    WELL_KNOWN_VALUE,
)
from grpcgen.schemas.protobuf import ProtobufRenderer, render_proto
from grpcgen.schemas.types import parse_type_expr, to_schema_type, translate

__all__ = [
    "AssemblyIssue",
    "AssemblyResult",
    "FieldDescriptor",
    "IssueSeverity",
    "ProcedureDescriptor",
    "RecordDescriptor",
    "SchemaModel",
    "ServiceGroup",
    "WELL_KNOWN_VALUE",
    "ProtobufRenderer",
    "render_proto",
    "parse_type_expr",
    "to_schema_type",
    "translate",
]
