"""
Pipeline driver: compile resource IDL files and write request builder modules.

Phases:
1. Parse: read IDL documents (ParseError per unreadable file)
2. Analyze: walk each resource tree into FacadeDescriptors
3. Emit: render one module per facade with the Python backend
4. Write: atomically write modules that are out of date
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from .. import __version__
from ..cli_utils import reconstruct_command_line
from .analyzer import CompilationResult, FacadeDescriptor, ResourceAnalyzer
from .backends import PythonBackend
from .config import CodeGeneratorConfig, OutputMode
from .context import CompilationContext
from .errors import CompilationError, CompilationFailedError, Diagnostic, NameCollisionError, ParseError
from .merger import AtomicWriter
from .schema_ast import load_document
from .staleness import is_up_to_date

logger = logging.getLogger(__name__)


@dataclass
class GeneratorResult:
    """Outcome of one :meth:`RequestBuilderGenerator.run`."""

    source_files: list[Path] = field(default_factory=list)
    target_files: list[Path] = field(default_factory=list)
    modified_files: list[Path] = field(default_factory=list)
    diagnostics: list[Diagnostic] = field(default_factory=list)


class RequestBuilderGenerator:
    """
    Request builder generator.

    Usage:
        generator = RequestBuilderGenerator(config)
        result = generator.run("generated", "idl/")
    """

    def __init__(self, config: CodeGeneratorConfig | None = None):
        """
        Initialize the generator.

        Args:
            config: Code generation configuration
        """
        self.config = config or CodeGeneratorConfig()
        self.backend = PythonBackend(self.config)
        self.writer = AtomicWriter()

    def new_context(self) -> CompilationContext:
        return CompilationContext(config=self.config)

    def compile(self, data: dict[str, Any], source_file: str = "", context: CompilationContext | None = None) -> CompilationResult:
        """
        Compile one already decoded IDL document.

        Args:
            data: Raw resource document
            source_file: Name used in diagnostics
            context: Context to compile into; a fresh one by default

        Returns:
            CompilationResult with the facade (if it compiled) and diagnostics
        """
        context = context or self.new_context()
        result = CompilationResult()
        facade = self._compile_document(data, source_file, context)
        if facade is not None:
            result.facades.append(facade)
        result.diagnostics = list(context.diagnostics)
        return result

    def compile_sources(self, *source_paths: str | Path) -> CompilationResult:
        """
        Compile every IDL file named by, or found under, ``source_paths``.

        Missing paths, unreadable files and malformed documents become
        diagnostics; they never stop the batch.
        """
        context = self.new_context()
        result = CompilationResult()

        for path in self.find_sources(source_paths, context):
            result.source_files.append(path)
            try:
                data = load_document(path)
            except ParseError as e:
                context.report(e)
                continue

            facade = self._compile_document(data, str(path), context)
            if facade is not None:
                result.facades.append(facade)

        if self.config.generate_data_templates:
            for schema_file in context.type_system.source_files:
                if schema_file not in result.source_files:
                    result.source_files.append(schema_file)

        result.diagnostics = list(context.diagnostics)
        logger.debug("Compiled %d resource(s) with %d diagnostic(s)", len(result.facades), len(result.diagnostics))
        return result

    def find_sources(self, source_paths: tuple[str | Path, ...], context: CompilationContext) -> list[Path]:
        """Expand directories to the IDL files below them, in sorted order.

        A file reached through more than one source path is listed once.
        """
        found = []
        for source in source_paths:
            path = Path(source)
            if path.is_dir():
                found.extend(sorted(p for p in path.rglob(f"*{self.config.resource_file_extension}") if p.is_file()))
            elif path.is_file():
                found.append(path)
            else:
                context.report(ParseError("source path does not exist", str(path)))

        files = []
        seen = set()
        for path in found:
            resolved = path.resolve()
            if resolved not in seen:
                seen.add(resolved)
                files.append(path)
        return files

    def generate(self, *facades: FacadeDescriptor, diagnostics: list[Diagnostic] | None = None) -> dict[Path, str]:
        """
        Render facades and every nested facade.

        Args:
            facades: Top-level facades
            diagnostics: Receives a NameCollisionError for each facade whose
                module path is already taken; raised instead when omitted

        Returns:
            Module path (relative to the target directory) -> module source
        """
        generation_comment = self._generation_comment()
        modules: dict[Path, str] = {}
        owners: dict[Path, FacadeDescriptor] = {}
        for root in facades:
            for facade in root.walk():
                path = self.backend.module_path(facade)
                if path in owners:
                    error = NameCollisionError(
                        f"module '{path.as_posix()}' of {facade.qualified_name} is already generated for {owners[path].qualified_name}",
                        facade.source_file,
                    )
                    if diagnostics is None:
                        raise error
                    logger.warning("%s", error.to_diagnostic())
                    diagnostics.append(error.to_diagnostic())
                    continue
                owners[path] = facade
                modules[path] = self.backend.render(facade, generation_comment)
        return modules

    def run(self, target_dir: str | Path, *source_paths: str | Path) -> GeneratorResult:
        """
        Compile ``source_paths`` and write the modules below ``target_dir``.

        Raises:
            CompilationFailedError: If nothing compiled and errors were reported
        """
        target_dir = Path(target_dir)
        compiled = self.compile_sources(*source_paths)
        if not compiled.facades and compiled.diagnostics:
            raise CompilationFailedError(compiled.diagnostics)

        diagnostics = list(compiled.diagnostics)
        modules = {target_dir / relative: content for relative, content in self.generate(*compiled.facades, diagnostics=diagnostics).items()}

        result = GeneratorResult(
            source_files=compiled.source_files,
            target_files=list(modules),
            diagnostics=diagnostics,
        )

        if self.config.output.mode == OutputMode.INCREMENTAL and is_up_to_date(result.source_files, result.target_files):
            logger.info("Target files are up-to-date")
            return result

        logger.info("Generating %d files", len(modules))
        for path, content in modules.items():
            self._write(path, content)
            result.modified_files.append(path)
        return result

    def _compile_document(self, data: dict[str, Any], source_file: str, context: CompilationContext) -> FacadeDescriptor | None:
        analyzer = ResourceAnalyzer(context)
        try:
            return analyzer.walk(data, source_file=source_file)
        except CompilationError as e:
            context.report(e.with_path(source_file))
            return None

    def _write(self, path: Path, content: str) -> None:
        output = self.config.output
        if output.atomic_write:
            self.writer.write(path, content, validate=output.validate_before_write)
        else:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content, encoding="utf-8")
        logger.debug("Wrote %s", path)

    def _generation_comment(self) -> str:
        """Generate a simplified command line comment for the generated file"""
        if not self.config.add_generation_comment:
            return ""

        from ..restspec_to_code import restspec_to_code as click_command  # noqa

        command_line = reconstruct_command_line(click_command)
        return f"{self.backend.COMMENT_PREFIX} Generated by restspec_to_code v{__version__} : {command_line}"
