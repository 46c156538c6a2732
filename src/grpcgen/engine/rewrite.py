"""Source rewrite that disables converted record declarations.

Every line of an extracted record declaration, from its ``type`` line through
the line holding its closing brace, is turned into a comment. The line spans
come from the parsed declarations, so braces inside field types do not end a
span early and malformed marked declarations are left alone. Lines that are
already comments are not touched, which makes rewriting twice the same as
rewriting once.
"""

import logging
from collections.abc import Iterable
from pathlib import Path

from grpcgen.errors import OutputError

logger = logging.getLogger(__name__)

COMMENT_PREFIX = "//"


def comment_out_records(text: str, spans: Iterable[tuple[int, int]]) -> str:
    """Comment out the given declaration line spans.

    Args:
        text: Go source text
        spans: 1-based inclusive (start_line, end_line) pairs

    Returns:
        The rewritten text
    """
    lines = text.split("\n")
    for start, end in spans:
        # a span past the end of the text stops at the last line
        for i in range(max(start, 1) - 1, min(end, len(lines))):
            if not lines[i].lstrip().startswith(COMMENT_PREFIX):
                lines[i] = f"{COMMENT_PREFIX} {lines[i]}"
    return "\n".join(lines)


def mark_records_as_comment(path: Path | str, spans: Iterable[tuple[int, int]]) -> bool:
    """Rewrite a source file in place.

    Args:
        path: Go source file
        spans: Line spans of the extracted record declarations

    Returns:
        True if the file changed
    """
    path = Path(path)
    try:
        original = path.read_text(encoding="utf-8")
        rewritten = comment_out_records(original, spans)
        if rewritten == original:
            return False
        path.write_text(rewritten, encoding="utf-8")
    except OSError as e:
        raise OutputError(f"Cannot rewrite {path}: {e.strerror or e}") from e

    logger.info("commented out converted records in %s", path)
    return True
