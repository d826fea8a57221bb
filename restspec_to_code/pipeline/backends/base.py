"""
Base class for code generation backends.

Defines the interface that all language-specific backends must implement.
"""

from __future__ import annotations

import json
from abc import ABC, abstractmethod
from pathlib import Path

import jinja2

from ..analyzer.ir_nodes import FacadeDescriptor, TypeRef
from ..config import CodeGeneratorConfig


class CodeBackend(ABC):
    """Abstract base class for code generation backends."""

    # Template directory name
    TEMPLATE_LANG: str = ""

    # File extension
    FILE_EXTENSION: str = ""

    # Line comment marker of the emitted language
    COMMENT_PREFIX: str = ""

    def __init__(self, config: CodeGeneratorConfig):
        """
        Initialize the backend.

        Args:
            config: Code generation configuration
        """
        self.config = config
        self._setup_templates()

    def _setup_templates(self) -> None:
        """Set up Jinja2 templates."""
        template_dir = Path(__file__).parent.parent.parent / "templates" / self.TEMPLATE_LANG
        self.jinja_env = jinja2.Environment(
            loader=jinja2.FileSystemLoader(str(template_dir)),
            lstrip_blocks=True,
            trim_blocks=True,
            keep_trailing_newline=True,
        )
        # Add custom filters
        self.jinja_env.filters["string_literal"] = self._string_literal
        self.jinja_env.filters["docstring"] = self._docstring

        self.prefix_template = self.jinja_env.get_template(f"prefix.{self.FILE_EXTENSION}.jinja2")
        self.builder_template = self.jinja_env.get_template(f"builder.{self.FILE_EXTENSION}.jinja2")
        self.facade_template = self.jinja_env.get_template(f"facade.{self.FILE_EXTENSION}.jinja2")

    @abstractmethod
    def render(self, facade: FacadeDescriptor, generation_comment: str = "") -> str:
        """
        Generate the module for one facade (not its sub-resources).

        Args:
            facade: The facade descriptor
            generation_comment: Header comment, or "" for none

        Returns:
            Generated code as a string
        """

    @abstractmethod
    def module_path(self, facade: FacadeDescriptor) -> Path:
        """Path of the facade's module, relative to the target directory."""

    @abstractmethod
    def translate_type(self, type_ref: TypeRef) -> str:
        """
        Translate an IR type to a language-specific annotation string.

        Args:
            type_ref: The type reference

        Returns:
            Language-specific type string
        """

    def _string_literal(self, text: str) -> str:
        """Double-quoted string literal."""
        return json.dumps(text)

    def _docstring(self, text: str | None) -> str:
        """Make documentation safe to place between triple quotes."""
        if not text:
            return ""
        text = text.strip().replace("\\", "\\\\").replace('"""', '\\"\\"\\"')
        if text.endswith('"'):
            text = text[:-1] + '\\"'
        return text
