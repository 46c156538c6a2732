"""Configuration for the generator.

Markers, output layout, compiler invocation and logging level, loadable from a
YAML file and passed explicitly to the pipeline.
"""

from grpcgen.config.base import CompilerConfig, GeneratorConfig, MarkerConfig, OutputConfig
from grpcgen.config.loader import DEFAULT_CONFIG_NAME, ConfigLoader, load_config

__all__ = [
    "CompilerConfig",
    "GeneratorConfig",
    "MarkerConfig",
    "OutputConfig",
    "ConfigLoader",
    "DEFAULT_CONFIG_NAME",
    "load_config",
]
