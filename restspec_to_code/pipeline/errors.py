"""
Error kinds raised while compiling resource schemas.

Every user-facing failure derives from :class:`CompilationError`. The driver
catches these per resource (or per sub-resource subtree) and turns them into
:class:`Diagnostic` entries so that one bad resource never stops the batch.

Hierarchy::

    CompilationError
    +-- SchemaValidationError
    +-- UnsupportedResourceShapeError
    +-- TypeResolutionError
    +-- ParseError
    +-- DuplicateKeyNameError
    +-- NameCollisionError

``InternalCompilerError`` sits outside this hierarchy: it marks a
defect in the compiler itself and is never aggregated.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Diagnostic:
    """A single aggregated problem report."""

    path: str
    message: str
    kind: str = "error"

    def __str__(self) -> str:
        return f"[{self.kind}] {self.path}: {self.message}"


class CompilationError(Exception):
    """Base class for errors caused by bad input.

    Args:
        message: Human readable description
        path: Source file and/or resource the error is scoped to
    """

    kind = "CompilationError"

    def __init__(self, message: str, path: str = ""):
        super().__init__(message)
        self.message = message
        self.path = path

    def with_path(self, path: str) -> CompilationError:
        """Scope the error to a path if it has none yet."""
        if not self.path:
            self.path = path
        return self

    def to_diagnostic(self) -> Diagnostic:
        return Diagnostic(path=self.path, message=self.message, kind=self.kind)

    def __str__(self) -> str:
        if self.path:
            return f"{self.path}: {self.message}"
        return self.message


class SchemaValidationError(CompilationError):
    """A resource node failed structural validation."""

    kind = "SchemaValidationError"

    def __init__(self, message: str, path: str = "", violations: list[str] | None = None):
        super().__init__(message, path)
        self.violations = list(violations or [])


class UnsupportedResourceShapeError(CompilationError):
    """A resource has none of collection, association or actionsSet."""

    kind = "UnsupportedResourceShapeError"


class TypeResolutionError(CompilationError):
    """A type reference could not be resolved."""

    kind = "TypeResolutionError"

    def __init__(self, reference: str, detail: str = "", path: str = ""):
        message = f"cannot resolve type reference '{reference}'"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message, path)
        self.reference = reference


class ParseError(CompilationError):
    """An input document is not valid JSON or cannot be read."""

    kind = "ParseError"


class DuplicateKeyNameError(CompilationError):
    """Two association keys or two path keys share a name."""

    kind = "DuplicateKeyNameError"


class NameCollisionError(CompilationError):
    """Two resources or operations would generate the same type, method or module."""

    kind = "NameCollisionError"


class InternalCompilerError(RuntimeError):
    """An invariant the compiler itself maintains was violated.

    This indicates a bug in the compiler, not bad input, and halts the run.
    """


class CompilationFailedError(Exception):
    """Raised by the driver when nothing could be compiled."""

    def __init__(self, diagnostics: list[Diagnostic]):
        self.diagnostics = list(diagnostics)
        lines = "\n".join(str(d) for d in self.diagnostics)
        super().__init__(f"Compilation failed with {len(self.diagnostics)} error(s):\n{lines}")


class CodeWriteError(Exception):
    """Raised when emitted code fails validation before being written."""
