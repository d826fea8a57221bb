"""
Pipeline - resource IDL to request builder compiler.

This module provides a multi-phase architecture for generating typed
request builders from resource schemas:

1. Phase 1 (Parser): Validate resource IDL and build the Schema AST
2. Phase 2 (Analyzer): Resolve keys and types, build the descriptor IR
3. Phase 3 (Backend): Render one Python module per resource with Jinja2
4. Phase 4 (Writer): Atomically write modules that are out of date
"""

from __future__ import annotations

from .analyzer import CompilationResult, FacadeDescriptor, ResourceAnalyzer
from .config import CodeGeneratorConfig, OutputConfig, OutputMode
from .context import CompilationContext
from .errors import (
    CodeWriteError,
    CompilationError,
    CompilationFailedError,
    Diagnostic,
    DuplicateKeyNameError,
    InternalCompilerError,
    NameCollisionError,
    ParseError,
    SchemaValidationError,
    TypeResolutionError,
    UnsupportedResourceShapeError,
)
from .generator import GeneratorResult, RequestBuilderGenerator
from .merger import AtomicWriter
from .staleness import is_up_to_date

__all__ = [
    "RequestBuilderGenerator",
    "GeneratorResult",
    "ResourceAnalyzer",
    "CompilationContext",
    "CompilationResult",
    "FacadeDescriptor",
    "CodeGeneratorConfig",
    "OutputConfig",
    "OutputMode",
    "AtomicWriter",
    "is_up_to_date",
    "Diagnostic",
    "CompilationError",
    "SchemaValidationError",
    "UnsupportedResourceShapeError",
    "TypeResolutionError",
    "ParseError",
    "DuplicateKeyNameError",
    "NameCollisionError",
    "InternalCompilerError",
    "CompilationFailedError",
    "CodeWriteError",
]
