"""
Node definitions for parsed resource IDL documents.

These nodes mirror the structure of a resource schema before any type
resolution or key derivation. Sub-resources are kept as raw dictionaries
so that each one is validated when the walker reaches it.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass
class SchemaNode:
    """Base class for all resource IDL nodes."""

    # Location inside the document (for error messages)
    source_path: str = ""

    doc: str | None = None


@dataclass
class ParameterNode(SchemaNode):
    """A query, finder or action parameter."""

    name: str = ""
    type: str = ""
    items: str | None = None  # Item type when type == "array"
    optional: bool = False
    default: Any = None
    has_default: bool = False


@dataclass
class RestMethodNode(SchemaNode):
    """A CRUD/batch method entry of ``methods``."""

    method: str = ""
    parameters: list[ParameterNode] = field(default_factory=list)


@dataclass
class FinderNode(SchemaNode):
    name: str = ""
    parameters: list[ParameterNode] = field(default_factory=list)
    assoc_keys: list[str] = field(default_factory=list)  # assocKey and assocKeys merged, declaration order
    metadata_type: str | None = None


@dataclass
class ActionNode(SchemaNode):
    name: str = ""
    parameters: list[ParameterNode] = field(default_factory=list)
    returns: str | None = None


@dataclass
class IdentifierNode(SchemaNode):
    """Collection identifier: key name, key type and optional params type."""

    name: str = ""
    type: str = ""
    params: str | None = None


@dataclass
class AssocKeyNode(SchemaNode):
    name: str = ""
    type: str = ""


@dataclass
class EntityNode(SchemaNode):
    path: str = ""
    actions: list[ActionNode] = field(default_factory=list)
    subresources: list[dict[str, Any]] = field(default_factory=list)


@dataclass
class CollectionNode(SchemaNode):
    identifier: IdentifierNode | None = None
    supports: list[str] = field(default_factory=list)
    methods: list[RestMethodNode] = field(default_factory=list)
    finders: list[FinderNode] = field(default_factory=list)
    actions: list[ActionNode] = field(default_factory=list)
    entity: EntityNode | None = None


@dataclass
class AssociationNode(SchemaNode):
    identifier: str | None = None
    assoc_keys: list[AssocKeyNode] = field(default_factory=list)
    supports: list[str] = field(default_factory=list)
    methods: list[RestMethodNode] = field(default_factory=list)
    finders: list[FinderNode] = field(default_factory=list)
    actions: list[ActionNode] = field(default_factory=list)
    entity: EntityNode | None = None


@dataclass
class ActionsSetNode(SchemaNode):
    actions: list[ActionNode] = field(default_factory=list)


@dataclass
class ResourceNode(SchemaNode):
    """A resource: exactly one of collection, association or actions_set is set."""

    name: str = ""
    namespace: str = ""
    path: str = ""
    schema: str | None = None  # Value type reference
    collection: CollectionNode | None = None
    association: AssociationNode | None = None
    actions_set: ActionsSetNode | None = None

    # Raw document, for diagnostics
    raw: dict[str, Any] = field(default_factory=dict)

    @property
    def body(self) -> CollectionNode | AssociationNode | ActionsSetNode | None:
        return self.collection or self.association or self.actions_set

    @property
    def entity(self) -> EntityNode | None:
        body = self.collection or self.association
        return body.entity if body else None
