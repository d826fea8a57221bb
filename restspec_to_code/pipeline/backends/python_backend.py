"""
Python code generation backend.

Generates one Python module per facade: the request builder classes of the
resource followed by the facade class itself.
"""

from __future__ import annotations

import collections
from pathlib import Path
from typing import Any

from ...client.common import ResourceMethod
from ...utils import to_snake_case
from ..analyzer.ir_nodes import BuilderDescriptor, FacadeDescriptor, KeyBinding, ParamBinding, TypeKind, TypeRef
from ..config import CodeGeneratorConfig
from .base import CodeBackend

# Kinds emitted as quoted (string) annotations and literals
_NAMED_KINDS = {TypeKind.RECORD, TypeKind.ENUM, TypeKind.FIXED, TypeKind.NATIVE}

_RUNTIME_CLASSES = {
    TypeKind.ARRAY: "list",
    TypeKind.MAP: "dict",
    TypeKind.VOID: "None",
}


class PythonBackend(CodeBackend):
    """Python code generation backend."""

    TEMPLATE_LANG = "python"
    FILE_EXTENSION = "py"
    COMMENT_PREFIX = "#"

    def __init__(self, config: CodeGeneratorConfig):
        super().__init__(config)
        self.python_imports: set[tuple[str, str]] = set()

    def module_path(self, facade: FacadeDescriptor) -> Path:
        parts = [part for part in facade.namespace.split(".") if part]
        return Path(*parts, f"{to_snake_case(facade.class_name)}.{self.FILE_EXTENSION}")

    def render(self, facade: FacadeDescriptor, generation_comment: str = "") -> str:
        """Generate Python code for one facade."""
        # Reset import tracking
        self.python_imports = {("__future__", "annotations")}
        self._client_import("ResourceSpec")

        class_content = ""
        for builder in facade.builders:
            rendered = self.builder_template.render(self._prepare_builder_context(builder))
            class_content += rendered + "\n\n"

        class_content += self.facade_template.render(self._prepare_facade_context(facade))

        prefix = self.prefix_template.render(
            generation_comment=generation_comment,
            source_file=Path(facade.source_file).name if facade.source_file else "",
            required_imports=self._assemble_imports(),
        )
        return prefix + class_content

    def translate_type(self, type_ref: TypeRef) -> str:
        """Translate IR type to a Python annotation."""
        if type_ref.kind == TypeKind.COMPOUND_KEY:
            self._client_import("CompoundKey")
        elif type_ref.kind == TypeKind.COMPLEX_KEY:
            self._client_import("ComplexResourceKey")

        if self._is_named(type_ref):
            return f'"{type_ref.python_name}"'
        return type_ref.python_name

    def class_literal(self, type_ref: TypeRef | None) -> str:
        """Runtime expression standing for a type: a builtin, a runtime class or a dotted name."""
        if type_ref is None:
            return "None"
        if type_ref.kind in _NAMED_KINDS or type_ref.kind == TypeKind.UNION:
            return self._string_literal(type_ref.python_name)
        if type_ref.kind in _RUNTIME_CLASSES:
            return _RUNTIME_CLASSES[type_ref.kind]
        if type_ref.kind in (TypeKind.COMPOUND_KEY, TypeKind.COMPLEX_KEY):
            self.translate_type(type_ref)
        return type_ref.python_name

    def _is_named(self, type_ref: TypeRef) -> bool:
        return type_ref.kind in _NAMED_KINDS or any(self._is_named(arg) for arg in type_ref.type_args)

    def _client_import(self, name: str) -> None:
        self.python_imports.add((self.config.client_module, name))

    def _prepare_builder_context(self, builder: BuilderDescriptor) -> dict[str, Any]:
        """
        Prepare the template context for a builder class.

        Args:
            builder: The builder descriptor

        Returns:
            Dictionary of template variables
        """
        self._client_import(builder.contract.base_class)
        is_action = builder.kind == ResourceMethod.ACTION
        if is_action:
            self.python_imports.add(("typing", "Any"))

        context = {
            "CLASS_NAME": builder.class_name,
            "EXTENDS": builder.contract.base_class,
            "DOC": builder.doc,
            "IS_ACTION": is_action,
            "OPERATION_NAME": builder.operation_name,
            "REQUIRED_PARAMS": [param.name for param in builder.query_params if not param.optional],
            "VALUE_CLASS": self.class_literal(builder.contract.value_type),
            "path_keys": [self._prepare_key_context(key) for key in builder.path_keys],
            "assoc_keys": [self._prepare_key_context(key) for key in builder.assoc_keys],
            "query_params": [self._prepare_param_context(param) for param in builder.query_params],
            "action_params": [self._prepare_param_context(param) for param in builder.action_params],
        }
        if builder.action_params:
            self._client_import("FieldDef")
        return context

    def _prepare_key_context(self, key: KeyBinding) -> dict[str, Any]:
        return {"NAME": key.name, "METHOD": key.method_name, "TYPE": self.translate_type(key.type_ref)}

    def _prepare_param_context(self, param: ParamBinding) -> dict[str, Any]:
        annotation = self.translate_type(param.type_ref)
        field_class = self.class_literal(param.type_ref)
        if param.is_iterable:
            self.python_imports.add(("collections.abc", "Iterable"))
            annotation = f"Iterable[{annotation}]"
            field_class = "list"
        if param.optional:
            annotation = f"{annotation} | None"

        return {
            "NAME": param.name,
            "METHOD": param.method_name,
            "TYPE": annotation,
            "FIELD_CLASS": field_class,
            "SETTER": "param" if param.optional else "req_param",
            "DOC": param.doc,
        }

    def _prepare_facade_context(self, facade: FacadeDescriptor) -> dict[str, Any]:
        """
        Prepare the template context for the facade class.

        Args:
            facade: The facade descriptor

        Returns:
            Dictionary of template variables
        """
        spec = facade.resource_spec
        key_shape = spec.key_shape

        if spec.supported_methods:
            self._client_import("ResourceMethod")

        uri_suffix = None
        if "/" in facade.base_uri_template:
            uri_suffix = "/" + facade.base_uri_template.split("/", 1)[1]

        association_key = None
        if facade.association_key is not None:
            self._client_import("CompoundKey")
            association_key = {
                "CLASS_NAME": facade.association_key.class_name,
                "parts": [
                    {
                        "NAME": part.name,
                        "SETTER": part.setter,
                        "GETTER": part.getter,
                        "TYPE": self.translate_type(part.type_ref),
                    }
                    for part in facade.association_key.parts
                ],
            }

        factories = []
        for builder in facade.builders:
            args = ["self._base_uri_template"]
            if builder.kind == ResourceMethod.ACTION:
                args.append(self.class_literal(builder.return_type))
            args.append("self._RESOURCE_SPEC")
            factories.append({"METHOD": builder.factory_method, "BUILDER": builder.class_name, "ARGS": ", ".join(args)})

        return {
            "CLASS_NAME": facade.class_name,
            "DOC": facade.doc,
            "BASE_URI_TEMPLATE": facade.base_uri_template,
            "URI_SUFFIX": uri_suffix,
            "SUPPORTED_METHODS": self._supported_methods_literal(spec.supported_methods),
            "KEY_CLASS": self.class_literal(key_shape.key_type),
            "KEY_KEY_CLASS": self.class_literal(key_shape.key_key_type),
            "KEY_PARAMS_CLASS": self.class_literal(key_shape.key_params_type),
            "VALUE_CLASS": self.class_literal(spec.value_type),
            "KEY_PARTS": self._key_parts_literal(spec.key_parts),
            "ASSOCIATION_KEY": association_key,
            "factories": factories,
        }

    def _supported_methods_literal(self, methods: tuple[ResourceMethod, ...]) -> str:
        if not methods:
            return "frozenset()"
        return "frozenset({" + ", ".join(f"ResourceMethod.{method.name}" for method in methods) + "})"

    def _key_parts_literal(self, key_parts: dict[str, TypeRef]) -> str:
        items = [f"{self._string_literal(name)}: {self.class_literal(type_ref)}" for name, type_ref in key_parts.items()]
        return "{" + ", ".join(items) + "}"

    def _assemble_imports(self) -> list[str]:
        """Assemble Python import statements."""
        # Group imports by module
        import_groups: dict[str, set[str]] = collections.defaultdict(set)
        for module, name in self.python_imports:
            import_groups[module].add(name)

        stdlib_groups = {m: import_groups[m] for m in import_groups if m in ("collections.abc", "typing")}
        third_party_groups = {m: import_groups[m] for m in import_groups if m not in stdlib_groups and m != "__future__"}

        assembled = []

        # __future__ imports first
        if "__future__" in import_groups:
            names = sorted(import_groups["__future__"])
            assembled.append(f"from __future__ import {', '.join(names)}")
            if stdlib_groups or third_party_groups:
                assembled.append("")

        # Standard library
        for module in sorted(stdlib_groups.keys()):
            names = sorted(stdlib_groups[module])
            assembled.append(f"from {module} import {', '.join(names)}")

        if stdlib_groups and third_party_groups:
            assembled.append("")

        # Runtime client
        for module in sorted(third_party_groups.keys()):
            names = sorted(third_party_groups[module])
            if len(names) > 3:
                assembled.append(f"from {module} import (")
                assembled.extend(f"    {name}," for name in names)
                assembled.append(")")
            else:
                assembled.append(f"from {module} import {', '.join(names)}")

        return assembled
