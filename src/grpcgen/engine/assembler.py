"""Schema Assembler - builds a SchemaModel from a parsed source file.

The assembler:
- Dispatches type declarations to the record extractor
- Dispatches functions and methods to the procedure extractor
- Logs and skips everything else, including malformed declarations
- Translates record field types once the scan is complete
"""

import logging

from grpcgen.config.base import MarkerConfig
from grpcgen.errors import (
    MalformedDeclarationError,
    NoDeclarationsError,
    NoProceduresError,
    NoRecordsError,
)
from grpcgen.extractors import extract_procedure, extract_record
from grpcgen.schemas.base import AssemblyResult, IssueSeverity, SchemaModel
from grpcgen.schemas.types import translate
from grpcgen.source.base import Declaration, DeclarationKind, SourceFile

logger = logging.getLogger(__name__)


def _handle_record(decl: Declaration, markers: MarkerConfig, result: AssemblyResult) -> None:
    record = extract_record(decl, decl.doc_text, markers)
    if record is None:
        logger.debug("%s (line %d): no %s marker", decl.describe(), decl.start_line, markers.record)
        return

    result.record_spans.append((decl.start_line, decl.end_line))
    if result.model.add_record(record):
        logger.warning("record %s declared again at line %d; keeping the later one", record.name, decl.start_line)
        result.add_issue(
            IssueSeverity.WARNING,
            f"record {record.name} redeclared, earlier declaration replaced",
            declaration=decl.describe(),
            line=decl.start_line,
        )


def _handle_procedure(decl: Declaration, markers: MarkerConfig, result: AssemblyResult) -> None:
    extracted = extract_procedure(decl, decl.doc_text, markers)
    if extracted is None:
        logger.debug("%s (line %d): missing procedure markers", decl.describe(), decl.start_line)
        return

    group_name, procedure = extracted
    result.model.add_procedure(group_name, procedure)

    missing = [
        label
        for label, value in (("input", procedure.input_type), ("output", procedure.output_type))
        if not value
    ]
    if missing:
        message = (
            f"rpc {procedure.name} has no {' or '.join(missing)} type "
            f"matching {markers.cross_boundary_prefix}"
        )
        logger.warning(message)
        result.add_issue(IssueSeverity.WARNING, message, declaration=decl.describe(), line=decl.start_line)


def translate_field_types(model: SchemaModel) -> None:
    """Rewrite every record field's Go type into its proto type, in place."""
    for record in model.records.values():
        for field in record.fields:
            field.type = translate(field.type)


def assemble(source: SourceFile, markers: MarkerConfig | None = None) -> AssemblyResult:
    """Build the schema model for one source file.

    Args:
        source: Parsed Go source file
        markers: Marker configuration (defaults apply when omitted)

    Returns:
        AssemblyResult holding the model and per-declaration issues

    Raises:
        NoDeclarationsError: The file has no top-level declarations
        NoRecordsError: No record was extracted
        NoProceduresError: No procedure was extracted
    """
    markers = markers or MarkerConfig()

    if not source.declarations:
        raise NoDeclarationsError("no declaration exists")

    result = AssemblyResult(model=SchemaModel(package_name=source.package_name))

    for index, decl in enumerate(source.declarations):
        try:
            if decl.kind == DeclarationKind.TYPE:
                _handle_record(decl, markers, result)
            elif decl.is_function:
                _handle_procedure(decl, markers, result)
            else:
                logger.debug("decl[%d] %s skipped", index, decl.describe())
                result.add_issue(
                    IssueSeverity.INFO,
                    f"{decl.kind.value} declaration skipped",
                    declaration=decl.describe(),
                    line=decl.start_line,
                )
        except MalformedDeclarationError as e:
            logger.warning("decl[%d] %s (line %d) skipped: %s", index, e.declaration, e.line, e)
            result.add_issue(IssueSeverity.WARNING, str(e), declaration=e.declaration, line=e.line)

    if not result.model.records:
        raise NoRecordsError(f"no {markers.record} marker found")
    if not result.model.service_groups:
        raise NoProceduresError(f"no {markers.procedure} marker found")

    translate_field_types(result.model)

    logger.info(
        "assembled package %s: %d records, %d services, %d rpcs",
        result.model.package_name,
        len(result.model.records),
        len(result.model.service_groups),
        result.model.procedure_count,
    )
    return result
