"""Domain-specific errors for ridicule."""

from __future__ import annotations


class RidiculeError(Exception):
    """Base error for ridicule."""


class SourceNotFoundError(RidiculeError):
    """Raised when the source Go file does not exist or cannot be read."""


class ParseError(RidiculeError):
    """Raised when the Go parser rejects the source file."""


class ScanError(RidiculeError):
    """Raised when the source scanner cannot run or reports garbage."""


class DocumentError(RidiculeError):
    """Raised when a declaration document does not have the expected shape."""


class UnsupportedTypeError(RidiculeError):
    """Raised when a type expression has a shape the resolver does not model."""

    def __init__(self, shape: str, message: str | None = None) -> None:
        super().__init__(message or f"unsupported type expression: {shape}")
        self.shape = shape


class SynthesisError(RidiculeError):
    """Raised when the mock code model cannot be built or rendered."""


class NormalizeError(RidiculeError):
    """Raised by a normalizer stage; never escapes `normalize`."""


class OutputError(RidiculeError):
    """Raised when the generated file cannot be written."""
