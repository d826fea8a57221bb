"""
Schema AST (Abstract Syntax Tree) module.

Contains the node definitions, structural validator and parser for
resource IDL documents, plus the data schema resolver.
"""

from __future__ import annotations

from .data_schema import DataSchemaResolver, SchemaLookupError
from .nodes import (
    ActionNode,
    ActionsSetNode,
    AssociationNode,
    AssocKeyNode,
    CollectionNode,
    EntityNode,
    FinderNode,
    IdentifierNode,
    ParameterNode,
    ResourceNode,
    RestMethodNode,
    SchemaNode,
)
from .parser import ResourceSchemaParser, load_document
from .validator import ValidationResult, validate

__all__ = [
    "SchemaNode",
    "ParameterNode",
    "RestMethodNode",
    "FinderNode",
    "ActionNode",
    "IdentifierNode",
    "AssocKeyNode",
    "EntityNode",
    "CollectionNode",
    "AssociationNode",
    "ActionsSetNode",
    "ResourceNode",
    "ResourceSchemaParser",
    "load_document",
    "validate",
    "ValidationResult",
    "DataSchemaResolver",
    "SchemaLookupError",
]
