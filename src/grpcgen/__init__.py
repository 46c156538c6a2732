"""
grpcgen - Generate gRPC service definitions from annotated Go source.

Structs and functions carrying grpcGen doc-comment markers are collected into
a proto3 document, which is then handed to protoc to produce Go bindings.
"""

__version__ = "0.1.0"

from grpcgen.config.base import GeneratorConfig, MarkerConfig
from grpcgen.engine.assembler import assemble
from grpcgen.engine.pipeline import GenerationPipeline, GenerationResult
from grpcgen.schemas.base import SchemaModel
from grpcgen.schemas.protobuf import render_proto
from grpcgen.schemas.types import translate
from grpcgen.source.parser import parse_go_file, parse_go_source

__all__ = [
    "GeneratorConfig",
    "MarkerConfig",
    "assemble",
    "GenerationPipeline",
    "GenerationResult",
    "SchemaModel",
    "render_proto",
    "translate",
    "parse_go_file",
    "parse_go_source",
]
