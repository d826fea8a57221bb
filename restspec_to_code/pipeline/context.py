"""
Per-run compilation state.

A CompilationContext is created for one run, threaded through the walker
and resolvers, and discarded afterwards.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from .analyzer.type_resolver import TypeResolver
from .config import CodeGeneratorConfig
from .errors import CompilationError, Diagnostic, InternalCompilerError
from .schema_ast.data_schema import DataSchemaResolver

logger = logging.getLogger(__name__)


@dataclass
class CompilationContext:
    """Shared state of one compilation run."""

    config: CodeGeneratorConfig = field(default_factory=CodeGeneratorConfig)
    type_system: DataSchemaResolver | None = None
    type_resolver: TypeResolver | None = None
    diagnostics: list[Diagnostic] = field(default_factory=list)

    # Qualified names of every type defined so far (the namespace registry)
    defined_types: dict[str, str] = field(default_factory=dict)  # qualified name -> defining source

    def __post_init__(self):
        if self.type_system is None:
            self.type_system = DataSchemaResolver(
                schema_paths=self.config.schema_paths,
                schema_file_extension=self.config.schema_file_extension,
                native_override_key=self.config.native_override_key,
            )
        if self.type_resolver is None:
            self.type_resolver = TypeResolver(self.type_system)

    def namespace_for(self, declared: str) -> str:
        return declared or self.config.default_namespace

    @staticmethod
    def qualify(namespace: str, name: str) -> str:
        return f"{namespace}.{name}" if namespace else name

    def defined_by(self, namespace: str, name: str) -> str | None:
        """Source that already defined ``namespace.name``, if any."""
        return self.defined_types.get(self.qualify(namespace, name))

    def define_type(self, namespace: str, name: str, source: str) -> str:
        """Register a generated type name.

        Callers check user-derived names with :meth:`defined_by` first, so a
        collision here is a compiler defect.

        Raises:
            InternalCompilerError: If the qualified name is already taken
        """
        qualified = self.qualify(namespace, name)
        if qualified in self.defined_types:
            raise InternalCompilerError(
                f"Unexpected name collision while compiling {source}: {qualified} already defined by {self.defined_types[qualified]}"
            )
        self.defined_types[qualified] = source
        return qualified

    def report(self, error: CompilationError) -> None:
        diagnostic = error.to_diagnostic()
        logger.warning("%s", diagnostic)
        self.diagnostics.append(diagnostic)
