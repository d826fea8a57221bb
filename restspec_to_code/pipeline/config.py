"""
Configuration for the request builder generator.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class OutputMode(str, Enum):
    """Output mode for file generation.

    Controls behavior when target files already exist.
    """

    INCREMENTAL = "incremental"  # Default: skip emission when targets are up to date
    FORCE = "force"  # Always rewrite targets


@dataclass
class OutputConfig:
    """Configuration for output file handling.

    Attributes:
        mode: How to handle existing output files
        validate_before_write: Whether to validate code before writing
        atomic_write: Whether to use atomic file writes
    """

    mode: OutputMode = OutputMode.INCREMENTAL
    validate_before_write: bool = True
    atomic_write: bool = True


@dataclass
class CodeGeneratorConfig:
    """Configuration options for request builder generation."""

    # Package used for resources that declare no namespace
    default_namespace: str = ""

    # Record named schemas reached through type references as source files
    generate_data_templates: bool = True

    # Typeref property holding the native class override, e.g. {"python": {"class": "uuid.UUID"}}
    native_override_key: str = "python"

    # Extension of resource IDL files when scanning directories
    resource_file_extension: str = ".restspec.json"

    # Extension of named data schema files on the schema path
    schema_file_extension: str = ".pdsc"

    # Directories searched for named data schemas
    schema_paths: list[str] = field(default_factory=list)

    # Add generation comment at top of each emitted file
    add_generation_comment: bool = True

    # Module the emitted code imports its runtime base classes from
    client_module: str = "restspec_to_code.client"

    output: OutputConfig = field(default_factory=OutputConfig)

    @staticmethod
    def from_dict(d: dict) -> CodeGeneratorConfig:
        """Create a config from a dictionary."""
        config = CodeGeneratorConfig()
        for k, v in d.items():
            if k == "output" and isinstance(v, dict):
                mode = v.get("mode", OutputMode.INCREMENTAL)
                if isinstance(mode, str):
                    mode = OutputMode(mode)
                config.output = OutputConfig(
                    mode=mode,
                    validate_before_write=v.get("validate_before_write", True),
                    atomic_write=v.get("atomic_write", True),
                )
            elif hasattr(config, k):
                setattr(config, k, v)
        return config

    def to_dict(self) -> dict:
        """Convert config to a dictionary."""
        return {
            "default_namespace": self.default_namespace,
            "generate_data_templates": self.generate_data_templates,
            "native_override_key": self.native_override_key,
            "resource_file_extension": self.resource_file_extension,
            "schema_file_extension": self.schema_file_extension,
            "schema_paths": self.schema_paths,
            "add_generation_comment": self.add_generation_comment,
            "client_module": self.client_module,
            "output": {
                "mode": self.output.mode.value,
                "validate_before_write": self.output.validate_before_write,
                "atomic_write": self.output.atomic_write,
            },
        }
