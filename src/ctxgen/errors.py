"""Domain-specific errors for ctxgen."""

from __future__ import annotations


class CtxGenError(Exception):
    """Base error for ctxgen."""


class ConfigurationError(CtxGenError):
    """Raised when the target selection is missing or ambiguous."""


class FileAccessError(CtxGenError):
    """Raised when a file or directory cannot be read or created."""


class ToolchainError(CtxGenError):
    """Raised when the Go helper cannot be run or returns garbage."""


class ParseError(CtxGenError):
    """Raised when a Go source file cannot be parsed."""

    def __init__(self, path: str, message: str) -> None:
        super().__init__(f"{path}: {message}")
        self.path = path
        self.message = message


class SynthesisError(CtxGenError):
    """Raised when a forwarder cannot be built for an eligible declaration."""

    def __init__(self, path: str, decl: str, message: str) -> None:
        super().__init__(f"{path}: {decl}: {message}")
        self.path = path
        self.decl = decl
        self.message = message


class RenderError(CtxGenError):
    """Raised when the assembled output cannot be formatted or its imports resolved."""
