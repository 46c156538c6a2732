"""Path and file helper functions."""

from pathlib import Path

from grpcgen.config.base import OutputConfig
from grpcgen.errors import InputValidationError, OutputError


def validate_source_path(path: Path | str, output: OutputConfig) -> Path:
    """Check an input path before it is parsed.

    Args:
        path: Candidate source path
        output: Output configuration holding the required extension

    Returns:
        The path as a Path
    """
    if not str(path):
        raise InputValidationError("File does not exist")

    path = Path(path)
    if not path.name.endswith(output.source_extension):
        raise InputValidationError(f"path {path} doesn't have {output.source_extension} extension")
    return path


def get_out_path(path: Path | str, output: OutputConfig) -> Path:
    """Derive the document path for a source file.

    ``svc/server.go`` becomes ``svc/pb/server.go.proto`` with the default
    configuration.

    Args:
        path: Source path
        output: Output configuration

    Returns:
        Path of the document to generate
    """
    path = validate_source_path(path, output)
    stem = path.name[: -len(output.source_extension)]
    return path.parent / output.subdirectory / f"{stem}{output.document_suffix}"


def write_document(path: Path, content: str) -> None:
    """Write a generated document, replacing any existing file.

    Args:
        path: Document path; its directory is created when missing
        content: Document text
    """
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.unlink(missing_ok=True)
        path.write_text(content, encoding="ascii")
    except OSError as e:
        raise OutputError(f"Cannot write {path}: {e.strerror or e}") from e
    except UnicodeEncodeError as e:
        raise OutputError(f"Document for {path} is not ASCII: {e}") from e
