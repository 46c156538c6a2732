"""Exception hierarchy for grpcgen.

Every failure the generator reports derives from GrpcGenError so callers can
stop one input without catching unrelated exceptions.
"""


class GrpcGenError(Exception):
    """Base class for all grpcgen errors."""


class ConfigError(GrpcGenError):
    """Configuration file could not be loaded or is invalid."""


class InputValidationError(GrpcGenError):
    """Input path rejected before parsing."""


class SourceParseError(GrpcGenError):
    """Source file could not be parsed."""


class MalformedDeclarationError(GrpcGenError):
    """A marked declaration does not have the shape its marker requires.

    Only fatal for the declaration it was raised for; the assembler logs it
    and keeps scanning.
    """

    def __init__(self, message: str, declaration: str = "", line: int = 0):
        super().__init__(message)
        self.declaration = declaration
        self.line = line


class EmptySchemaError(GrpcGenError):
    """Nothing usable was extracted from a source file."""


class NoDeclarationsError(EmptySchemaError):
    """The source file has no top-level declarations."""


class NoRecordsError(EmptySchemaError):
    """No declaration carried the record marker."""


class NoProceduresError(EmptySchemaError):
    """No declaration carried the procedure markers."""


class OutputError(GrpcGenError):
    """The generated document could not be written."""


class CompilerError(GrpcGenError):
    """The schema compiler failed; the message is its diagnostic output."""
