"""Schema compiler invocation."""

import logging
import subprocess
from pathlib import Path

from grpcgen.config.base import CompilerConfig
from grpcgen.errors import CompilerError

logger = logging.getLogger(__name__)


def build_command(document: Path, config: CompilerConfig) -> list[str]:
    """Build the compiler command line for a document.

    The document directory is both the include path and the output
    directory.
    """
    out_dir = str(document.parent)
    args = [arg.format(out_dir=out_dir) for arg in config.plugin_args]
    return [config.command, "-I", out_dir, str(document), *args]


def run_compiler(document: Path, config: CompilerConfig) -> None:
    """Run the schema compiler on a generated document.

    Args:
        document: Path of the .proto document
        config: Compiler configuration

    Raises:
        CompilerError: The compiler is missing or exited non-zero; the
            message is its stderr, unmodified
    """
    cmd = build_command(document, config)
    logger.info("running %s", " ".join(cmd))

    try:
        proc = subprocess.run(cmd, capture_output=True, text=True, check=False)
    except FileNotFoundError as e:
        raise CompilerError(f"{config.command}: command not found") from e

    if proc.returncode != 0:
        raise CompilerError(proc.stderr)
