"""Utility functions for grpcgen."""

from grpcgen.utils.helpers import (
    get_out_path,
    validate_source_path,
    write_document,
)

__all__ = [
    "get_out_path",
    "validate_source_path",
    "write_document",
]
