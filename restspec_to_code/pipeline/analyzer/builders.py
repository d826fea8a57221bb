"""
Builder descriptor generation.

Every supported CRUD/batch method, finder and action of a resource becomes
one BuilderDescriptor. CRUD builders share a generic base contract keyed by
(key type, value type); each action gets its own contract since parameters
and return type differ per action.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from ...client.common import ResourceMethod
from ...utils import capitalize, name_camel_case, name_caps_case, normalize_underscores
from ..errors import SchemaValidationError
from ..schema_ast.nodes import ActionNode, FinderNode, ParameterNode, RestMethodNode
from .ir_nodes import (
    VOID,
    BuilderDescriptor,
    KeyBinding,
    OperationContract,
    ParamBinding,
    PathKeyChain,
    ResourceSpec,
)

if TYPE_CHECKING:
    from ..context import CompilationContext


def finder_suffix(name: str) -> str:
    """Type-name suffix of a finder: "byOwner" and "owner" both give "Owner"."""
    if len(name) > 2 and name.startswith("by") and name[2].isupper():
        name = name[2:]
    return capitalize(name)


class BuilderHierarchyGenerator:
    """Derives builder descriptors for the operations of one resource."""

    def __init__(
        self,
        context: CompilationContext,
        resource_name: str,
        namespace: str,
        resource_spec: ResourceSpec,
        path_keys: PathKeyChain,
        scope: str,
    ):
        """
        Args:
            context: The compilation context of the run
            resource_name: Capitalized resource name used as the type-name prefix
            namespace: Namespace of the resource (qualifies relative type names)
            resource_spec: Compiled spec shared by every builder of the resource
            path_keys: Ancestor key chain bound on every builder
            scope: Source/resource path for error messages
        """
        self.context = context
        self.resource_name = resource_name
        self.namespace = namespace
        self.resource_spec = resource_spec
        self.path_keys = path_keys
        self.scope = scope

    def path_key_bindings(self) -> list[KeyBinding]:
        """One binding per inherited path key, root to leaf."""
        return [
            KeyBinding(name=key.name, method_name=name_camel_case(key.name + "Key"), type_ref=key.type_ref)
            for key in self.path_keys
        ]

    def crud_builder(self, method: ResourceMethod, schema: RestMethodNode | None) -> BuilderDescriptor:
        """Builder for a supported CRUD or batch method."""
        method_name = normalize_underscores(method.value)
        builder = BuilderDescriptor(
            class_name=f"{self.resource_name}{name_caps_case(method_name)}Builder",
            factory_method=name_camel_case(method_name),
            contract=OperationContract(
                method=method,
                key_type=self.resource_spec.key_shape.key_type,
                value_type=self.resource_spec.value_type,
            ),
            path_keys=self.path_key_bindings(),
        )
        if schema is not None:
            builder.query_params = self._query_param_bindings(schema.parameters, schema.source_path)
            builder.doc = schema.doc
        return builder

    def finder_builder(self, finder: FinderNode) -> BuilderDescriptor:
        """Builder for a finder, bound to its association keys and parameters."""
        key_parts = self.resource_spec.key_parts
        assoc_keys = []
        for name in finder.assoc_keys:
            if name not in key_parts:
                raise SchemaValidationError(
                    f"finder '{finder.name}' references unknown association key '{name}'",
                    finder.source_path or self.scope,
                )
            assoc_keys.append(KeyBinding(name=name, method_name=name_camel_case(name + "Key"), type_ref=key_parts[name]))

        suffix = finder_suffix(finder.name)
        builder = BuilderDescriptor(
            class_name=f"{self.resource_name}FindBy{suffix}Builder",
            factory_method=f"findBy{suffix}",
            contract=OperationContract(
                method=ResourceMethod.FINDER,
                key_type=self.resource_spec.key_shape.key_type,
                value_type=self.resource_spec.value_type,
            ),
            operation_name=finder.name,
            path_keys=self.path_key_bindings(),
            assoc_keys=assoc_keys,
            query_params=self._query_param_bindings(finder.parameters, finder.source_path),
            doc=finder.doc,
        )

        # Resolved for validation only; metadata binds nothing
        if finder.metadata_type is not None:
            self.context.type_resolver.resolve(finder.metadata_type, self.namespace, finder.source_path or self.scope)

        return builder

    def action_builder(self, action: ActionNode, entity_level: bool = False) -> BuilderDescriptor:
        """Builder for one action; the return type defaults to VOID."""
        scope = action.source_path or self.scope
        return_type = VOID
        if action.returns is not None:
            return_type = self.context.type_resolver.resolve(action.returns, self.namespace, scope)

        action_params = []
        for param in action.parameters:
            type_ref, is_iterable = self._param_type(param)
            action_params.append(
                ParamBinding(
                    name=param.name,
                    method_name="param" + capitalize(param.name),
                    type_ref=type_ref,
                    optional=param.optional,
                    is_iterable=is_iterable,
                    doc=param.doc,
                )
            )

        return BuilderDescriptor(
            class_name=f"{self.resource_name}Do{capitalize(action.name)}Builder",
            factory_method=f"action{capitalize(action.name)}",
            contract=OperationContract(
                method=ResourceMethod.ACTION,
                key_type=self.resource_spec.key_shape.key_type,
                value_type=return_type,
            ),
            operation_name=action.name,
            path_keys=self.path_key_bindings(),
            action_params=action_params,
            return_type=return_type,
            entity_level=entity_level,
            doc=action.doc,
        )

    def _query_param_bindings(self, parameters: list[ParameterNode], scope: str) -> list[ParamBinding]:
        bindings = []
        for param in parameters:
            type_ref, is_iterable = self._param_type(param, scope)
            bindings.append(
                ParamBinding(
                    name=param.name,
                    method_name=name_camel_case(param.name + "Param"),
                    type_ref=type_ref,
                    optional=param.optional,
                    is_iterable=is_iterable,
                    doc=param.doc,
                )
            )
        return bindings

    def _param_type(self, param: ParameterNode, scope: str = ""):
        """Resolve a parameter type; "array" binds an iterable of the item type."""
        scope = param.source_path or scope or self.scope
        if param.type == "array":
            return self.context.type_resolver.resolve(param.items, self.namespace, scope), True
        return self.context.type_resolver.resolve(param.type, self.namespace, scope), False
