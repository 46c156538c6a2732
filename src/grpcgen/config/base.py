"""Configuration models for the generator.

A GeneratorConfig is built once at startup and handed to the pipeline; the
extractors only ever see the MarkerConfig part of it.
"""

from pydantic import BaseModel, Field, field_validator


class MarkerConfig(BaseModel):
    """Annotation markers recognised in Go doc comments."""

    record: str = Field(default="@grpcGen:Message", min_length=1, description="Marks a struct as a message")
    procedure: str = Field(default="@grpcGen:Service", min_length=1, description="Marks a function as an rpc")
    group: str = Field(default="@grpcGen:SrvName:", min_length=1, description="Names the service of an rpc")
    cross_boundary_prefix: str = Field(
        default="*pb.",
        min_length=1,
        description="Prefix of parameter/result types coming from generated bindings",
    )


class OutputConfig(BaseModel):
    """Where the generated document goes."""

    source_extension: str = Field(default=".go", description="Required extension of input files")
    subdirectory: str = Field(default="pb", description="Directory, next to the input, receiving the document")
    document_suffix: str = Field(default=".go.proto", description="Suffix replacing the source extension")

    @field_validator("source_extension", "document_suffix")
    @classmethod
    def _must_start_with_dot(cls, value: str) -> str:
        if not value.startswith("."):
            raise ValueError(f"extension must start with '.': {value!r}")
        return value


class CompilerConfig(BaseModel):
    """How the schema compiler is invoked.

    ``{out_dir}`` in an argument is replaced with the document directory.
    """

    enabled: bool = Field(default=True, description="Run the compiler after generation")
    command: str = Field(default="protoc", description="Compiler executable")
    plugin_args: list[str] = Field(
        default_factory=lambda: ["--go_out=plugins=grpc:{out_dir}"],
        description="Arguments appended after the document path",
    )


class GeneratorConfig(BaseModel):
    """Top-level configuration."""

    markers: MarkerConfig = Field(default_factory=MarkerConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)
    compiler: CompilerConfig = Field(default_factory=CompilerConfig)
    rewrite_source: bool = Field(default=True, description="Comment out converted records in the source")
    log_level: str = Field(default="INFO", description="Logging level for the CLI")

    @field_validator("log_level")
    @classmethod
    def _known_level(cls, value: str) -> str:
        level = value.upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"unknown log level: {value!r}")
        return level
