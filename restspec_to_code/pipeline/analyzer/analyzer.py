"""
Resource tree walker that transforms resource IDL into descriptors.

Phase 2 of the pipeline: validate each resource node, derive its key
shape, build its ResourceSpec and builders, and recurse into sub-resources
with the extended path key chain.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from ...client.common import ResourceMethod
from ...utils import capitalize, name_caps_case
from ..errors import CompilationError, DuplicateKeyNameError, NameCollisionError, SchemaValidationError
from ..schema_ast.nodes import ResourceNode
from ..schema_ast.parser import ResourceSchemaParser
from .builders import BuilderHierarchyGenerator
from .ir_nodes import (
    COMPOUND_KEY,
    AssociationKeyDescriptor,
    BuilderDescriptor,
    FacadeDescriptor,
    KeyPartAccessor,
    KeyShape,
    PathKey,
    PathKeyChain,
    ResourceSpec,
)
from .key_resolver import resolve_key

if TYPE_CHECKING:
    from ..context import CompilationContext

logger = logging.getLogger(__name__)

_TEMPLATE_VARIABLE = re.compile(r"\{([^}/]+)\}")


def get_resource_path(raw_path: str) -> str:
    """Strip the leading slash of a resource path."""
    return raw_path[1:] if raw_path.startswith("/") else raw_path


def get_path_keys(path: str, scope: str = "") -> list[str]:
    """
    Template variables of a URI template, in order.

    Raises:
        DuplicateKeyNameError: If a variable appears twice
    """
    keys = []
    for name in _TEMPLATE_VARIABLE.findall(path):
        if name in keys:
            raise DuplicateKeyNameError(f"path template '{path}' names '{name}' more than once", scope)
        keys.append(name)
    return keys


class ResourceAnalyzer:
    """Walks a resource tree and builds FacadeDescriptors."""

    def __init__(self, context: CompilationContext):
        self.context = context
        self.parser = ResourceSchemaParser()

    def walk(
        self,
        data: dict[str, Any],
        path_keys: PathKeyChain | None = None,
        source_file: str = "",
        parent_label: str = "",
        parent_namespace: str = "",
    ) -> FacadeDescriptor:
        """
        Compile one resource and, recursively, its sub-resources.

        Args:
            data: Raw resource document
            path_keys: Key chain inherited from the enclosing resources
            source_file: IDL file the resource came from
            parent_label: Resource chain of the parent, for error messages
            parent_namespace: Namespace inherited by resources that declare none

        Returns:
            FacadeDescriptor for the resource. Sub-resources that fail are
            reported to the context and left out.

        Raises:
            CompilationError: If this resource itself cannot be compiled
        """
        path_keys = path_keys or PathKeyChain()
        name = data.get("name") if isinstance(data, dict) else None
        label = f"{parent_label}/{name or '<unnamed>'}" if parent_label else (name or "<unnamed>")
        scope = f"{source_file}:{label}" if source_file else label

        # Step 1: structural validation
        node = self.parser.parse(data, scope)

        # Step 2: naming and base URI
        resource_class = capitalize(node.name)
        namespace = self.context.namespace_for(node.namespace or parent_namespace)
        resource_path = get_resource_path(node.path)
        template_keys = get_path_keys(resource_path, scope)
        for key in template_keys:
            if key not in path_keys:
                raise SchemaValidationError(
                    f"path key '{key}' of '{resource_path}' is not bound by an enclosing resource",
                    scope,
                )

        # Step 3: key shape and the chain handed to sub-resources
        key_shape = resolve_key(node, self.context.type_resolver, namespace)
        child_keys = path_keys.extend(*self._own_path_keys(node, key_shape), path=scope)

        # Step 4: resource spec
        resource_spec = self._build_resource_spec(node, key_shape, namespace, scope)
        methods = self._methods_by_kind(node, scope) if node.actions_set is None else {}

        facade_class = f"{resource_class}Builders"
        owner = self.context.defined_by(namespace, facade_class)
        if owner is not None:
            raise NameCollisionError(
                f"resource '{node.name}' generates {self.context.qualify(namespace, facade_class)}, already defined by {owner}",
                scope,
            )
        self.context.define_type(namespace, facade_class, scope)
        facade = FacadeDescriptor(
            class_name=facade_class,
            resource_name=node.name,
            namespace=namespace,
            base_uri_template=resource_path,
            path_keys=template_keys,
            resource_spec=resource_spec,
            is_actions_set=node.actions_set is not None,
            doc=node.doc,
            source_file=source_file,
        )

        if key_shape.assoc_keys:
            facade.association_key = AssociationKeyDescriptor(
                parts=[
                    KeyPartAccessor(
                        name=key.name,
                        setter="set" + name_caps_case(key.name),
                        getter="get" + name_caps_case(key.name),
                        type_ref=key.type_ref,
                    )
                    for key in key_shape.assoc_keys
                ]
            )
            self.context.define_type(namespace, f"{facade_class}.{facade.association_key.class_name}", scope)

        # Step 5: builders, then sub-resources
        generator = BuilderHierarchyGenerator(self.context, resource_class, namespace, resource_spec, path_keys, scope)

        if node.actions_set is not None:
            for action in node.actions_set.actions:
                self._add_builder(facade, scope, lambda a=action: generator.action_builder(a))
        else:
            body = node.collection or node.association
            for method in ResourceMethod.crud_methods():
                if resource_spec.supports(method):
                    self._add_builder(facade, scope, lambda m=method: generator.crud_builder(m, methods.get(m)))
            for finder in body.finders:
                self._add_builder(facade, scope, lambda f=finder: generator.finder_builder(f))
            for action in body.actions:
                self._add_builder(facade, scope, lambda a=action: generator.action_builder(a))
            for action in body.entity.actions:
                self._add_builder(facade, scope, lambda a=action: generator.action_builder(a, entity_level=True))

            for sub in body.entity.subresources:
                try:
                    facade.subresources.append(self.walk(sub, child_keys, source_file, label, namespace))
                except CompilationError as e:
                    self.context.report(e.with_path(scope))

        logger.debug("Compiled resource %s: %d builder(s), %d sub-resource(s)", label, len(facade.builders), len(facade.subresources))
        return facade

    def _own_path_keys(self, node: ResourceNode, key_shape: KeyShape) -> list[PathKey]:
        """Keys this resource contributes to its sub-resources' chain."""
        if node.collection is not None:
            return [PathKey(name=node.collection.identifier.name, type_ref=key_shape.key_type)]
        if node.association is not None:
            return [PathKey(name=node.association.identifier or f"{node.name}Id", type_ref=COMPOUND_KEY)]
        return []

    def _build_resource_spec(self, node: ResourceNode, key_shape: KeyShape, namespace: str, scope: str) -> ResourceSpec:
        if node.actions_set is not None:
            return ResourceSpec(key_shape=key_shape)

        if node.schema is None:
            raise SchemaValidationError(f"resource '{node.name}' does not declare its value type ('schema')", scope)
        value_type = self.context.type_resolver.resolve(node.schema, namespace, scope)

        body = node.collection or node.association
        supported = set()
        for entry in body.supports:
            try:
                supported.add(ResourceMethod.from_string(entry))
            except ValueError as e:
                raise SchemaValidationError(f"resource '{node.name}': {e}", scope) from e

        return ResourceSpec(
            supported_methods=tuple(m for m in ResourceMethod if m in supported),
            key_shape=key_shape,
            value_type=value_type,
        )

    def _methods_by_kind(self, node: ResourceNode, scope: str) -> dict:
        body = node.collection or node.association
        methods = {}
        for method in body.methods:
            try:
                methods[ResourceMethod.from_string(method.method)] = method
            except ValueError as e:
                raise SchemaValidationError(f"resource '{node.name}': {e}", method.source_path or scope) from e
        return methods

    def _add_builder(self, facade: FacadeDescriptor, scope: str, build: Callable[[], BuilderDescriptor]) -> None:
        """Build one descriptor; a failure drops only that builder."""
        try:
            builder = build()
        except CompilationError as e:
            self.context.report(e.with_path(scope))
            return

        for other in facade.builders:
            if other.factory_method == builder.factory_method or other.class_name == builder.class_name:
                self.context.report(
                    NameCollisionError(
                        f"{_operation_label(other)} and {_operation_label(builder)} both generate "
                        f"'{builder.factory_method}' ({builder.class_name})",
                        scope,
                    )
                )
                return

        owner = self.context.defined_by(facade.namespace, builder.class_name)
        if owner is not None:
            self.context.report(
                NameCollisionError(
                    f"{_operation_label(builder)} generates {self.context.qualify(facade.namespace, builder.class_name)}, "
                    f"already defined by {owner}",
                    scope,
                )
            )
            return

        self.context.define_type(facade.namespace, builder.class_name, scope)
        facade.builders.append(builder)


def _operation_label(builder: BuilderDescriptor) -> str:
    if builder.kind == ResourceMethod.FINDER:
        return f"finder '{builder.operation_name}'"
    if builder.kind == ResourceMethod.ACTION:
        level = "entity action" if builder.entity_level else "action"
        return f"{level} '{builder.operation_name}'"
    return f"method '{builder.kind.value}'"
