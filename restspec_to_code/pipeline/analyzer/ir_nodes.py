"""
Descriptor (IR) definitions.

These nodes describe the client surface compiled from a resource schema:
one FacadeDescriptor per resource, owning its BuilderDescriptors and the
facades of its sub-resources. All type references are resolved. The
emitter renders them; nothing here knows about text.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from ...client.common import ResourceMethod
from ..errors import Diagnostic, DuplicateKeyNameError

_PYTHON_PRIMITIVES = {
    "int": "int",
    "long": "int",
    "float": "float",
    "double": "float",
    "boolean": "bool",
    "string": "str",
    "bytes": "bytes",
    "null": "None",
}


class TypeKind(Enum):
    """Kind of type in the IR."""

    PRIMITIVE = "primitive"  # int, long, string, ...
    RECORD = "record"  # Named record schema
    ENUM = "enum"
    FIXED = "fixed"
    UNION = "union"
    ARRAY = "array"  # list[T]
    MAP = "map"  # dict[str, T]
    NATIVE = "native"  # Native class from a typeref override
    VOID = "void"  # The "no value" marker
    COMPOUND_KEY = "compound_key"
    COMPLEX_KEY = "complex_key"  # ComplexResourceKey[K, P]


@dataclass(frozen=True)
class TypeRef:
    """A resolved type reference."""

    kind: TypeKind = TypeKind.PRIMITIVE
    name: str = ""  # Schema name, primitive name or native dotted class

    # For container and key types
    type_args: tuple[TypeRef, ...] = ()

    @property
    def python_name(self) -> str:
        """Python spelling of the type, used in emitted annotations."""
        if self.kind == TypeKind.PRIMITIVE:
            return _PYTHON_PRIMITIVES.get(self.name, self.name)
        if self.kind == TypeKind.VOID:
            return "None"
        if self.kind == TypeKind.ARRAY:
            return f"list[{self.type_args[0].python_name}]"
        if self.kind == TypeKind.MAP:
            return f"dict[str, {self.type_args[0].python_name}]"
        if self.kind == TypeKind.UNION:
            return " | ".join(arg.python_name for arg in self.type_args)
        if self.kind == TypeKind.COMPOUND_KEY:
            return "CompoundKey"
        if self.kind == TypeKind.COMPLEX_KEY:
            return "ComplexResourceKey"
        return self.name

    def __str__(self) -> str:
        return self.python_name


VOID = TypeRef(kind=TypeKind.VOID, name="Void")
COMPOUND_KEY = TypeRef(kind=TypeKind.COMPOUND_KEY, name="CompoundKey")


class KeyKind(Enum):
    SIMPLE = "simple"
    COMPOSITE = "composite"
    COMPOUND = "compound"
    NONE = "none"


@dataclass(frozen=True)
class AssocKey:
    """One named component of a compound key."""

    name: str
    type_ref: TypeRef


@dataclass(frozen=True)
class KeyShape:
    """Key structure of a resource, derived from its schema node."""

    kind: KeyKind
    key_type: TypeRef  # Type every builder of the resource is keyed by
    key_key_type: TypeRef | None = None  # Composite only
    key_params_type: TypeRef | None = None  # Composite only
    assoc_keys: tuple[AssocKey, ...] = ()  # Compound only, declaration order

    @classmethod
    def simple(cls, key_type: TypeRef) -> KeyShape:
        return cls(kind=KeyKind.SIMPLE, key_type=key_type)

    @classmethod
    def composite(cls, key_type: TypeRef, params_type: TypeRef) -> KeyShape:
        return cls(
            kind=KeyKind.COMPOSITE,
            key_type=TypeRef(kind=TypeKind.COMPLEX_KEY, name="ComplexResourceKey", type_args=(key_type, params_type)),
            key_key_type=key_type,
            key_params_type=params_type,
        )

    @classmethod
    def compound(cls, assoc_keys: list[AssocKey]) -> KeyShape:
        return cls(kind=KeyKind.COMPOUND, key_type=COMPOUND_KEY, assoc_keys=tuple(assoc_keys))

    @classmethod
    def none(cls) -> KeyShape:
        return cls(kind=KeyKind.NONE, key_type=VOID)


@dataclass(frozen=True)
class PathKey:
    name: str
    type_ref: TypeRef


@dataclass(frozen=True)
class PathKeyChain:
    """Path-template variables from the root resource down, with their key types.

    Immutable: :meth:`extend` returns a new chain, so sibling sub-resources
    never observe each other's keys.
    """

    keys: tuple[PathKey, ...] = ()

    def extend(self, *keys: PathKey, path: str = "") -> PathKeyChain:
        """Return a copy of the chain with ``keys`` appended.

        Raises:
            DuplicateKeyNameError: If a key name is already bound
        """
        names = set(self.names)
        for key in keys:
            if key.name in names:
                raise DuplicateKeyNameError(f"path key '{key.name}' is already bound by an enclosing resource", path)
            names.add(key.name)
        return PathKeyChain(keys=self.keys + tuple(keys))

    @property
    def names(self) -> list[str]:
        return [key.name for key in self.keys]

    def __contains__(self, name: object) -> bool:
        return any(key.name == name for key in self.keys)

    def __iter__(self) -> Iterator[PathKey]:
        return iter(self.keys)

    def __len__(self) -> int:
        return len(self.keys)


@dataclass(frozen=True)
class ResourceSpec:
    """Per-resource compiled description shared by all of its builders."""

    supported_methods: tuple[ResourceMethod, ...] = ()
    key_shape: KeyShape = field(default_factory=KeyShape.none)
    value_type: TypeRef | None = None

    @property
    def key_parts(self) -> dict[str, TypeRef]:
        """Association key name -> type (empty unless the key is compound)."""
        return {key.name: key.type_ref for key in self.key_shape.assoc_keys}

    def supports(self, method: ResourceMethod) -> bool:
        return method in self.supported_methods


# Runtime base class per operation kind
BASE_BUILDER_CLASSES: dict[ResourceMethod, str] = {
    ResourceMethod.GET: "GetRequestBuilderBase",
    ResourceMethod.CREATE: "CreateRequestBuilderBase",
    ResourceMethod.UPDATE: "UpdateRequestBuilderBase",
    ResourceMethod.PARTIAL_UPDATE: "PartialUpdateRequestBuilderBase",
    ResourceMethod.DELETE: "DeleteRequestBuilderBase",
    ResourceMethod.BATCH_GET: "BatchGetRequestBuilderBase",
    ResourceMethod.BATCH_CREATE: "BatchCreateRequestBuilderBase",
    ResourceMethod.BATCH_UPDATE: "BatchUpdateRequestBuilderBase",
    ResourceMethod.BATCH_PARTIAL_UPDATE: "BatchPartialUpdateRequestBuilderBase",
    ResourceMethod.BATCH_DELETE: "BatchDeleteRequestBuilderBase",
    ResourceMethod.FINDER: "FindRequestBuilderBase",
    ResourceMethod.ACTION: "ActionRequestBuilderBase",
}


@dataclass(frozen=True)
class OperationContract:
    """The generic base operation a builder is derived from.

    ``value_type`` is the entity type, or the return type for actions.
    """

    method: ResourceMethod
    key_type: TypeRef
    value_type: TypeRef | None

    @property
    def base_class(self) -> str:
        return BASE_BUILDER_CLASSES[self.method]


@dataclass(frozen=True)
class KeyBinding:
    """A typed path-key or association-key binding method."""

    name: str  # Key name as it appears in the schema
    method_name: str
    type_ref: TypeRef


@dataclass(frozen=True)
class ParamBinding:
    """A typed query-parameter or action-parameter binding method."""

    name: str  # Parameter name as it appears in the schema
    method_name: str
    type_ref: TypeRef  # Item type when is_iterable
    optional: bool = False
    is_iterable: bool = False
    doc: str | None = None


@dataclass
class BuilderDescriptor:
    """One generated request builder type."""

    class_name: str = ""
    factory_method: str = ""  # Name of the facade method returning this builder
    contract: OperationContract | None = None

    # Finder or action name handed to the runtime base
    operation_name: str | None = None

    path_keys: list[KeyBinding] = field(default_factory=list)
    assoc_keys: list[KeyBinding] = field(default_factory=list)  # Finders only
    query_params: list[ParamBinding] = field(default_factory=list)
    action_params: list[ParamBinding] = field(default_factory=list)  # Actions only

    # Actions only; VOID when the schema declares no return type
    return_type: TypeRef | None = None

    # Actions only: declared on the entity rather than the resource
    entity_level: bool = False

    doc: str | None = None

    @property
    def kind(self) -> ResourceMethod:
        return self.contract.method

    @property
    def constructor_params(self) -> list[str]:
        if self.kind == ResourceMethod.ACTION:
            return ["base_uri_template", "return_class", "resource_spec"]
        return ["base_uri_template", "resource_spec"]


@dataclass(frozen=True)
class KeyPartAccessor:
    name: str
    setter: str
    getter: str
    type_ref: TypeRef


@dataclass
class AssociationKeyDescriptor:
    """Typesafe compound key class nested in an association facade."""

    class_name: str = "Key"
    parts: list[KeyPartAccessor] = field(default_factory=list)


@dataclass
class FacadeDescriptor:
    """The client-facing type of one resource."""

    class_name: str = ""
    resource_name: str = ""
    namespace: str = ""
    base_uri_template: str = ""
    path_keys: list[str] = field(default_factory=list)  # Variables of base_uri_template, in order
    resource_spec: ResourceSpec = field(default_factory=ResourceSpec)
    builders: list[BuilderDescriptor] = field(default_factory=list)
    subresources: list[FacadeDescriptor] = field(default_factory=list)
    association_key: AssociationKeyDescriptor | None = None
    is_actions_set: bool = False
    doc: str | None = None
    source_file: str = ""

    @property
    def qualified_name(self) -> str:
        return f"{self.namespace}.{self.class_name}" if self.namespace else self.class_name

    def base_uri_for(self, primary_resource_name: str) -> str:
        """Base URI with the primary (root) resource name replaced.

        Only the first path component is rewritten; deeper components are kept.
        """
        if "/" in self.base_uri_template:
            _, rest = self.base_uri_template.split("/", 1)
            return f"{primary_resource_name}/{rest}"
        return primary_resource_name

    def builder(self, factory_method: str) -> BuilderDescriptor | None:
        for builder in self.builders:
            if builder.factory_method == factory_method:
                return builder
        return None

    def walk(self) -> Iterator[FacadeDescriptor]:
        """Yield this facade and every nested facade, depth first."""
        yield self
        for sub in self.subresources:
            yield from sub.walk()


@dataclass
class CompilationResult:
    """Everything one compilation run produced."""

    facades: list[FacadeDescriptor] = field(default_factory=list)
    diagnostics: list[Diagnostic] = field(default_factory=list)
    source_files: list[Path] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.diagnostics

    def all_facades(self) -> Iterator[FacadeDescriptor]:
        for facade in self.facades:
            yield from facade.walk()
