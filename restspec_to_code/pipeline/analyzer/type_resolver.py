"""
Type resolver for IDL type references.

Turns the type references found in resource schemas into IR TypeRefs by
delegating to the data schema type system.
"""

from __future__ import annotations

import json
from typing import Any, Protocol

from ..errors import TypeResolutionError
from ..schema_ast.data_schema import AliasType, SchemaLookupError, StructuralType
from .ir_nodes import TypeKind, TypeRef

_STRUCTURAL_KINDS = {
    "primitive": TypeKind.PRIMITIVE,
    "record": TypeKind.RECORD,
    "enum": TypeKind.ENUM,
    "fixed": TypeKind.FIXED,
    "array": TypeKind.ARRAY,
    "map": TypeKind.MAP,
    "union": TypeKind.UNION,
}


class TypeSystem(Protocol):
    """The resolver interface of the data schema type system."""

    def resolve(self, schema: Any, namespace: str = "") -> StructuralType | AliasType: ...


class TypeResolver:
    """Resolves type references, memoized for the lifetime of one run."""

    def __init__(self, type_system: TypeSystem):
        self.type_system = type_system
        self._cache: dict[tuple[str, str], TypeRef] = {}

    def resolve(self, reference: str, namespace: str = "", scope: str = "") -> TypeRef:
        """
        Resolve a type reference.

        Args:
            reference: A bare name ("long", "com.example.Widget") or inline JSON
            namespace: Namespace used to qualify relative names
            scope: Resource the reference belongs to, for error messages

        Returns:
            The resolved TypeRef; a typeref with a native override resolves to
            the native class

        Raises:
            TypeResolutionError: If the reference cannot be resolved
        """
        canonical = self.canonicalize(reference)
        key = (canonical, namespace)
        if key in self._cache:
            return self._cache[key]

        try:
            parsed = json.loads(canonical)
        except json.JSONDecodeError as e:
            raise TypeResolutionError(reference, f"malformed inline schema ({e})", scope) from e

        try:
            resolved = self.type_system.resolve(parsed, namespace)
        except SchemaLookupError as e:
            raise TypeResolutionError(reference, str(e), scope) from e

        type_ref = self._to_type_ref(resolved)
        self._cache[key] = type_ref
        return type_ref

    @staticmethod
    def canonicalize(reference: str) -> str:
        """Wrap bare names in quotes so that every reference is valid JSON."""
        reference = reference.strip()
        if not reference.startswith("{") and not reference.startswith('"') and not reference.startswith("["):
            reference = f'"{reference}"'
        return reference

    def _to_type_ref(self, resolved: StructuralType | AliasType) -> TypeRef:
        if isinstance(resolved, AliasType):
            if resolved.native_override:
                return TypeRef(kind=TypeKind.NATIVE, name=resolved.native_override)
            return self._to_type_ref(resolved.target)

        kind = _STRUCTURAL_KINDS[resolved.kind]
        if kind in (TypeKind.ARRAY, TypeKind.MAP):
            return TypeRef(kind=kind, name=resolved.name, type_args=(self._to_type_ref(resolved.items),))
        if kind == TypeKind.UNION:
            return TypeRef(kind=kind, name=resolved.name, type_args=tuple(self._to_type_ref(m) for m in resolved.members))
        return TypeRef(kind=kind, name=resolved.name)
