"""Base classes for the schema model.

The schema model sits between extraction and rendering: the extractors build
it from Go declarations and the protobuf renderer turns it into a document.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field

WELL_KNOWN_VALUE = "google.protobuf.Value"


class FieldDescriptor(BaseModel):
    """A single field of a record.

    ``type`` holds the Go type expression until the type translator rewrites
    it into a proto type.
    """

    name: str = Field(..., min_length=1, description="Field name")
    type: str = Field(..., description="Field type expression")


class RecordDescriptor(BaseModel):
    """A struct declaration marked for inclusion as a proto message."""

    name: str = Field(..., min_length=1, description="Record name")
    fields: list[FieldDescriptor] = Field(default_factory=list, description="Fields in declaration order")


class ProcedureDescriptor(BaseModel):
    """A function marked as a remote procedure.

    Input and output types are proto message names with the cross-boundary
    prefix already removed. Either may be empty.
    """

    name: str = Field(..., min_length=1, description="Procedure name")
    input_type: str = Field(default="", description="Request message name")
    output_type: str = Field(default="", description="Response message name")


class ServiceGroup(BaseModel):
    """Procedures sharing one service-group name."""

    name: str = Field(..., description="Service name")
    procedures: list[ProcedureDescriptor] = Field(default_factory=list)

    def add(self, procedure: ProcedureDescriptor) -> None:
        self.procedures.append(procedure)


class SchemaModel(BaseModel):
    """Everything extracted from one source file."""

    package_name: str = Field(..., description="Package of the source file")
    records: dict[str, RecordDescriptor] = Field(default_factory=dict)
    service_groups: dict[str, ServiceGroup] = Field(default_factory=dict)

    def add_record(self, record: RecordDescriptor) -> bool:
        """Add a record, replacing any earlier record with the same name.

        Returns:
            True if an earlier record was replaced
        """
        replaced = record.name in self.records
        self.records[record.name] = record
        return replaced

    def add_procedure(self, group_name: str, procedure: ProcedureDescriptor) -> None:
        """Append a procedure to its group, creating the group on first use."""
        if group_name not in self.service_groups:
            self.service_groups[group_name] = ServiceGroup(name=group_name)
        self.service_groups[group_name].add(procedure)

    @property
    def procedure_count(self) -> int:
        return sum(len(g.procedures) for g in self.service_groups.values())

    @property
    def uses_dynamic_value(self) -> bool:
        """Whether any field refers to the well-known Value type."""
        return any(
            WELL_KNOWN_VALUE in f.type
            for record in self.records.values()
            for f in record.fields
        )

    def summary(self) -> dict[str, Any]:
        return {
            "package": self.package_name,
            "records": {name: len(r.fields) for name, r in self.records.items()},
            "services": {
                name: [p.name for p in g.procedures]
                for name, g in self.service_groups.items()
            },
        }


class IssueSeverity(str, Enum):
    """Severity levels for assembly issues."""

    WARNING = "warning"
    INFO = "info"


@dataclass
class AssemblyIssue:
    """Something the assembler skipped or adjusted for one declaration."""

    severity: IssueSeverity
    message: str
    declaration: str = ""
    line: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "severity": self.severity.value,
            "message": self.message,
            "declaration": self.declaration,
            "line": self.line,
        }


@dataclass
class AssemblyResult:
    """Schema model plus the per-declaration issues met while building it."""

    model: SchemaModel
    issues: list[AssemblyIssue] = field(default_factory=list)
    # line spans of every extracted record declaration, duplicates included
    record_spans: list[tuple[int, int]] = field(default_factory=list)

    @property
    def warning_count(self) -> int:
        return sum(1 for i in self.issues if i.severity == IssueSeverity.WARNING)

    def add_issue(
        self,
        severity: IssueSeverity,
        message: str,
        declaration: str = "",
        line: int = 0,
    ) -> None:
        self.issues.append(
            AssemblyIssue(
                severity=severity,
                message=message,
                declaration=declaration,
                line=line,
            )
        )
