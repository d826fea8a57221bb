"""Resource IDL to Request Builder Generator

A Python package for compiling REST resource interface descriptions into
typed request builder classes, with atomic incremental output.
"""

__version__ = "1.0.1"
__author__ = "François Lagunas"

from .pipeline import (
    AtomicWriter,
    CodeGeneratorConfig,
    CompilationFailedError,
    Diagnostic,
    OutputConfig,
    OutputMode,
    RequestBuilderGenerator,
)

__all__ = [
    "RequestBuilderGenerator",
    "CodeGeneratorConfig",
    "OutputConfig",
    "OutputMode",
    "CompilationFailedError",
    "Diagnostic",
    "AtomicWriter",
]
