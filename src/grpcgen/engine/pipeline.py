"""Generation pipeline - runs one source file from Go to compiled bindings.

For each input the pipeline:
- Validates the path and parses the Go source
- Assembles the schema model
- Renders and writes the .proto document
- Runs the schema compiler
- Comments out the converted records in the source
"""

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from grpcgen.config.base import GeneratorConfig
from grpcgen.engine.assembler import assemble
from grpcgen.engine.compiler import run_compiler
from grpcgen.engine.rewrite import mark_records_as_comment
from grpcgen.errors import GrpcGenError
from grpcgen.schemas.base import AssemblyResult
from grpcgen.schemas.protobuf import ProtobufRenderer
from grpcgen.source.parser import parse_go_file
from grpcgen.utils.helpers import get_out_path, validate_source_path, write_document

logger = logging.getLogger(__name__)


@dataclass
class GenerationResult:
    """Outcome of one input file."""

    source: Path
    document: Path | None = None
    assembly: AssemblyResult | None = None
    compiled: bool = False
    rewritten: bool = False
    error: GrpcGenError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def summary(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            "source": str(self.source),
            "document": str(self.document) if self.document else None,
            "compiled": self.compiled,
            "rewritten": self.rewritten,
            "error": str(self.error) if self.error else None,
        }
        if self.assembly is not None:
            result.update(self.assembly.model.summary())
            result["warnings"] = self.assembly.warning_count
            result["issues"] = [i.to_dict() for i in self.assembly.issues]
        return result


class GenerationPipeline:
    """Runs the generator over source files, one at a time."""

    def __init__(self, config: GeneratorConfig | None = None):
        self.config = config or GeneratorConfig()
        self.renderer = ProtobufRenderer()

    def build(self, path: Path | str) -> tuple[AssemblyResult, str]:
        """Parse, assemble and render without touching the file system.

        Args:
            path: Go source path

        Returns:
            Tuple of (assembly result, document text)
        """
        path = validate_source_path(path, self.config.output)
        source = parse_go_file(path)
        assembly = assemble(source, self.config.markers)
        return assembly, self.renderer.render(assembly.model)

    def run(self, path: Path | str) -> GenerationResult:
        """Generate, compile and rewrite for one source file.

        Raises:
            GrpcGenError: Any failure for this input
        """
        result = GenerationResult(source=Path(path))
        result.assembly, document = self.build(path)

        result.document = get_out_path(path, self.config.output)
        write_document(result.document, document)
        logger.info("wrote %s", result.document)

        if self.config.compiler.enabled:
            run_compiler(result.document, self.config.compiler)
            result.compiled = True

        if self.config.rewrite_source:
            result.rewritten = mark_records_as_comment(path, result.assembly.record_spans)

        return result

    def run_many(self, paths: Iterable[Path | str], fail_fast: bool = False) -> list[GenerationResult]:
        """Process several inputs in order, each with a fresh model.

        A failing input is recorded and the next one still runs unless
        ``fail_fast`` is set.
        """
        results = []
        for path in paths:
            try:
                results.append(self.run(path))
            except GrpcGenError as e:
                logger.error("%s: %s", path, e)
                results.append(GenerationResult(source=Path(path), error=e))
                if fail_fast:
                    break
        return results
