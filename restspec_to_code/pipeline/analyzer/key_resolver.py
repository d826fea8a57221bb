"""
Key shape derivation for resources.
"""

from __future__ import annotations

from ..errors import DuplicateKeyNameError, TypeResolutionError, UnsupportedResourceShapeError
from ..schema_ast.nodes import ResourceNode
from .ir_nodes import AssocKey, KeyShape
from .type_resolver import TypeResolver


def resolve_key(resource: ResourceNode, type_resolver: TypeResolver, namespace: str = "") -> KeyShape:
    """
    Determine the key shape of a resource.

    Rules, in priority order:
      1. actions set -> none
      2. association -> compound, one part per association key
      3. collection with identifier params -> composite(type, params)
      4. collection without params -> simple(type)

    Raises:
        DuplicateKeyNameError: If two association keys share a name
        TypeResolutionError: If a key component type cannot be resolved
        UnsupportedResourceShapeError: If the resource has no recognized shape
    """
    scope = resource.source_path or resource.name

    if resource.actions_set is not None:
        return KeyShape.none()

    if resource.association is not None:
        assoc_keys = []
        seen = set()
        for key in resource.association.assoc_keys:
            if key.name in seen:
                raise DuplicateKeyNameError(
                    f"association key '{key.name}' is declared more than once in resource '{resource.name}'",
                    scope,
                )
            seen.add(key.name)
            assoc_keys.append(AssocKey(name=key.name, type_ref=type_resolver.resolve(key.type, namespace, scope)))
        return KeyShape.compound(assoc_keys)

    if resource.collection is not None:
        identifier = resource.collection.identifier
        if identifier.params is None:
            return KeyShape.simple(type_resolver.resolve(identifier.type, namespace, scope))
        try:
            key_type = type_resolver.resolve(identifier.type, namespace, scope)
            params_type = type_resolver.resolve(identifier.params, namespace, scope)
        except TypeResolutionError as e:
            e.message = f"composite key of resource '{resource.name}': {e.message}"
            raise
        return KeyShape.composite(key_type, params_type)

    raise UnsupportedResourceShapeError(f"unsupported resource type for resource: '{resource.name}'", scope)
