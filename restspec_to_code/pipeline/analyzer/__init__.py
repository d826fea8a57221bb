"""
Analyzer module.

Contains type resolution, key derivation, builder generation and the
resource tree walker that builds the descriptor IR.
"""

from __future__ import annotations

from .analyzer import ResourceAnalyzer, get_path_keys, get_resource_path
from .builders import BuilderHierarchyGenerator
from .ir_nodes import (
    COMPOUND_KEY,
    VOID,
    AssociationKeyDescriptor,
    AssocKey,
    BuilderDescriptor,
    CompilationResult,
    FacadeDescriptor,
    KeyBinding,
    KeyKind,
    KeyShape,
    OperationContract,
    ParamBinding,
    PathKey,
    PathKeyChain,
    ResourceSpec,
    TypeKind,
    TypeRef,
)
from .key_resolver import resolve_key
from .type_resolver import TypeResolver

__all__ = [
    "ResourceAnalyzer",
    "BuilderHierarchyGenerator",
    "TypeResolver",
    "resolve_key",
    "get_path_keys",
    "get_resource_path",
    "TypeRef",
    "TypeKind",
    "VOID",
    "COMPOUND_KEY",
    "KeyKind",
    "KeyShape",
    "AssocKey",
    "PathKey",
    "PathKeyChain",
    "ResourceSpec",
    "OperationContract",
    "KeyBinding",
    "ParamBinding",
    "BuilderDescriptor",
    "AssociationKeyDescriptor",
    "FacadeDescriptor",
    "CompilationResult",
]
