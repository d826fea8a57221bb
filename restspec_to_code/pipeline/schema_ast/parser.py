"""
Resource IDL parser.

Phase 1 of the pipeline: validate one resource level of a raw IDL document
and build nodes for it. Sub-resources stay raw and are parsed when the tree
walker descends into them.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from ..errors import ParseError, SchemaValidationError
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
)
from .validator import validate


def load_document(path: Path) -> dict[str, Any]:
    """Read and decode one IDL file.

    Raises:
        ParseError: If the file cannot be read or is not a JSON object
    """
    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise ParseError(f"Error parsing json file: {e}", str(path)) from e
    except OSError as e:
        raise ParseError(f"Error processing file: {e}", str(path)) from e

    if not isinstance(data, dict):
        raise ParseError("IDL document must be a JSON object", str(path))
    return data


def type_reference(value: Any) -> str | None:
    """Normalize a type reference to its string form.

    Inline definitions may be given as JSON objects; they are re-encoded so
    that every reference reaching the type resolver is a string.
    """
    if value is None:
        return None
    if isinstance(value, dict):
        return json.dumps(value, sort_keys=True)
    return str(value)


class ResourceSchemaParser:
    """Parses one level of a resource IDL document into nodes."""

    def parse(self, data: dict[str, Any], source: str = "") -> ResourceNode:
        """
        Validate and parse a resource document.

        Args:
            data: The raw resource document
            source: Source file (and resource chain) for error messages

        Returns:
            ResourceNode for the resource; its sub-resources are left raw

        Raises:
            SchemaValidationError: If the document fails structural validation
        """
        result = validate(data, "resource")
        name = data.get("name") if isinstance(data, dict) else None
        if not result.ok:
            raise SchemaValidationError(
                f"Resource validation error for '{name or '<unnamed>'}': {result}",
                source,
                violations=result.violations,
            )

        populated = [k for k in ("collection", "association", "actionsSet") if data.get(k) is not None]
        if len(populated) > 1:
            raise SchemaValidationError(
                f"resource '{name}' declares more than one of {', '.join(populated)}",
                source,
            )

        node = ResourceNode(
            name=data["name"],
            namespace=data.get("namespace") or "",
            path=data["path"],
            schema=type_reference(data.get("schema")),
            doc=data.get("doc"),
            source_path=source,
            raw=data,
        )

        if data.get("collection") is not None:
            node.collection = self._parse_collection(data["collection"], f"{source}#/collection")
        elif data.get("association") is not None:
            node.association = self._parse_association(data["association"], f"{source}#/association")
        elif data.get("actionsSet") is not None:
            node.actions_set = ActionsSetNode(
                actions=self._parse_actions(data["actionsSet"].get("actions"), f"{source}#/actionsSet"),
                source_path=f"{source}#/actionsSet",
            )

        return node

    def _parse_collection(self, data: dict[str, Any], path: str) -> CollectionNode:
        ident = data["identifier"]
        return CollectionNode(
            identifier=IdentifierNode(
                name=ident["name"],
                type=type_reference(ident["type"]),
                params=type_reference(ident.get("params")),
                source_path=f"{path}/identifier",
            ),
            supports=list(data.get("supports") or []),
            methods=self._parse_methods(data.get("methods"), path),
            finders=self._parse_finders(data.get("finders"), path),
            actions=self._parse_actions(data.get("actions"), path),
            entity=self._parse_entity(data["entity"], f"{path}/entity"),
            source_path=path,
        )

    def _parse_association(self, data: dict[str, Any], path: str) -> AssociationNode:
        assoc_keys = [
            AssocKeyNode(
                name=key["name"],
                type=type_reference(key["type"]),
                source_path=f"{path}/assocKeys/{i}",
            )
            for i, key in enumerate(data.get("assocKeys") or [])
        ]
        return AssociationNode(
            identifier=data.get("identifier"),
            assoc_keys=assoc_keys,
            supports=list(data.get("supports") or []),
            methods=self._parse_methods(data.get("methods"), path),
            finders=self._parse_finders(data.get("finders"), path),
            actions=self._parse_actions(data.get("actions"), path),
            entity=self._parse_entity(data["entity"], f"{path}/entity"),
            source_path=path,
        )

    def _parse_entity(self, data: dict[str, Any], path: str) -> EntityNode:
        return EntityNode(
            path=data["path"],
            actions=self._parse_actions(data.get("actions"), path),
            subresources=list(data.get("subresources") or []),
            source_path=path,
        )

    def _parse_methods(self, methods: list[dict[str, Any]] | None, path: str) -> list[RestMethodNode]:
        return [
            RestMethodNode(
                method=m["method"],
                doc=m.get("doc"),
                parameters=self._parse_parameters(m.get("parameters"), f"{path}/methods/{i}"),
                source_path=f"{path}/methods/{i}",
            )
            for i, m in enumerate(methods or [])
        ]

    def _parse_finders(self, finders: list[dict[str, Any]] | None, path: str) -> list[FinderNode]:
        nodes = []
        for i, f in enumerate(finders or []):
            finder_path = f"{path}/finders/{i}"
            assoc_keys = []
            if f.get("assocKey"):
                assoc_keys.append(f["assocKey"])
            for key in f.get("assocKeys") or []:
                if key not in assoc_keys:
                    assoc_keys.append(key)

            metadata = f.get("metadata") or {}
            nodes.append(
                FinderNode(
                    name=f["name"],
                    doc=f.get("doc"),
                    parameters=self._parse_parameters(f.get("parameters"), finder_path),
                    assoc_keys=assoc_keys,
                    metadata_type=type_reference(metadata.get("type")),
                    source_path=finder_path,
                )
            )
        return nodes

    def _parse_actions(self, actions: list[dict[str, Any]] | None, path: str) -> list[ActionNode]:
        return [
            ActionNode(
                name=a["name"],
                doc=a.get("doc"),
                parameters=self._parse_parameters(a.get("parameters"), f"{path}/actions/{i}"),
                returns=type_reference(a.get("returns")),
                source_path=f"{path}/actions/{i}",
            )
            for i, a in enumerate(actions or [])
        ]

    def _parse_parameters(self, parameters: list[dict[str, Any]] | None, path: str) -> list[ParameterNode]:
        return [
            ParameterNode(
                name=p["name"],
                type=type_reference(p["type"]),
                items=type_reference(p.get("items")),
                optional=bool(p.get("optional", False)),
                default=p.get("default"),
                has_default="default" in p,
                doc=p.get("doc"),
                source_path=f"{path}/parameters/{i}",
            )
            for i, p in enumerate(parameters or [])
        ]
