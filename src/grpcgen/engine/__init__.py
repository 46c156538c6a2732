"""Engine module - assembly and the generation pipeline."""

from grpcgen.engine.assembler import assemble, translate_field_types
from grpcgen.engine.pipeline import GenerationPipeline, GenerationResult

__all__ = [
    "assemble",
    "translate_field_types",
    "GenerationPipeline",
    "GenerationResult",
]
