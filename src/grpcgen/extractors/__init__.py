"""Extractors turning marked Go declarations into schema descriptors.

Each extractor has three outcomes: a descriptor when the declaration is
marked and well formed, None when it is not marked, and
MalformedDeclarationError when it is marked but has the wrong shape.
"""

from grpcgen.extractors.procedures import ExtractedProcedure, extract_procedure
from grpcgen.extractors.records import extract_record, has_marker

__all__ = [
    "ExtractedProcedure",
    "extract_procedure",
    "extract_record",
    "has_marker",
]
