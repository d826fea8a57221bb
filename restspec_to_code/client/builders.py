"""
Base classes for emitted request builders.

Each emitted builder subclasses exactly one of the operation bases below and
only adds typed binding methods that delegate to them. The bases accumulate
keys, parameters and headers and assemble a :class:`Request`; they never
execute or serialize anything.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from typing import Any, Self

from .common import FieldDef, Request, ResourceMethod, ResourceSpec

_TEMPLATE_VARIABLE = re.compile(r"\{([^}/]+)\}")


class RequestBuilderBase:
    """Accumulates the parts shared by every request kind."""

    METHOD: ResourceMethod = ResourceMethod.GET

    def __init__(self, base_uri_template: str, value_class: Any, resource_spec: ResourceSpec):
        self._base_uri_template = base_uri_template
        self._value_class = value_class
        self._resource_spec = resource_spec
        self._headers: dict[str, str] = {}
        self._path_keys: dict[str, Any] = {}
        self._query_params: dict[str, Any] = {}
        self._required_params: set[str] = set()

    def header(self, key: str, value: str) -> Self:
        self._headers[key] = value
        return self

    def path_key(self, name: str, value: Any) -> Self:
        self._path_keys[name] = value
        return self

    def param(self, name: str, value: Any) -> Self:
        """Bind an optional query parameter; ``None`` clears it."""
        if value is None:
            self._query_params.pop(name, None)
        else:
            self._query_params[name] = _freeze(value)
        return self

    def req_param(self, name: str, value: Any) -> Self:
        """Bind a query parameter that must be set before :meth:`build`."""
        self._required_params.add(name)
        return self.param(name, value)

    def required(self, *names: str) -> Self:
        """Declare query parameters that must be bound before :meth:`build`."""
        self._required_params.update(names)
        return self

    def _check(self) -> None:
        missing = sorted(name for name in self._required_params if name not in self._query_params)
        if missing:
            raise ValueError(f"required parameter(s) not set: {', '.join(missing)}")
        unbound = [v for v in _TEMPLATE_VARIABLE.findall(self._base_uri_template) if v not in self._path_keys]
        if unbound:
            raise ValueError(f"path key(s) not bound: {', '.join(unbound)}")

    def _request(self, **kwargs: Any) -> Request:
        return Request(
            method=self.METHOD,
            base_uri_template=self._base_uri_template,
            resource_spec=self._resource_spec,
            path_keys=dict(self._path_keys),
            query_params=dict(self._query_params),
            headers=dict(self._headers),
            value_class=self._value_class,
            **kwargs,
        )

    def build(self) -> Request:
        self._check()
        return self._request()


class _SingleEntityBuilderBase(RequestBuilderBase):
    def __init__(self, base_uri_template: str, value_class: Any, resource_spec: ResourceSpec):
        super().__init__(base_uri_template, value_class, resource_spec)
        self._id: Any = None
        self._input: Any = None

    def id(self, id: Any) -> Self:
        self._id = id
        return self

    def build(self) -> Request:
        self._check()
        return self._request(id=self._id, input=self._input)


class GetRequestBuilderBase(_SingleEntityBuilderBase):
    METHOD = ResourceMethod.GET


class DeleteRequestBuilderBase(_SingleEntityBuilderBase):
    METHOD = ResourceMethod.DELETE


class CreateRequestBuilderBase(_SingleEntityBuilderBase):
    METHOD = ResourceMethod.CREATE

    def input(self, entity: Any) -> Self:
        self._input = entity
        return self


class UpdateRequestBuilderBase(CreateRequestBuilderBase):
    METHOD = ResourceMethod.UPDATE


class PartialUpdateRequestBuilderBase(CreateRequestBuilderBase):
    METHOD = ResourceMethod.PARTIAL_UPDATE


class _BatchBuilderBase(RequestBuilderBase):
    def __init__(self, base_uri_template: str, value_class: Any, resource_spec: ResourceSpec):
        super().__init__(base_uri_template, value_class, resource_spec)
        self._ids: list[Any] = []

    def ids(self, ids: Iterable[Any]) -> Self:
        self._ids.extend(ids)
        return self

    def build(self) -> Request:
        self._check()
        return self._request(ids=list(self._ids))


class BatchGetRequestBuilderBase(_BatchBuilderBase):
    METHOD = ResourceMethod.BATCH_GET


class BatchDeleteRequestBuilderBase(_BatchBuilderBase):
    METHOD = ResourceMethod.BATCH_DELETE


class BatchCreateRequestBuilderBase(RequestBuilderBase):
    METHOD = ResourceMethod.BATCH_CREATE

    def __init__(self, base_uri_template: str, value_class: Any, resource_spec: ResourceSpec):
        super().__init__(base_uri_template, value_class, resource_spec)
        self._inputs: list[Any] = []

    def input(self, entity: Any) -> Self:
        self._inputs.append(entity)
        return self

    def build(self) -> Request:
        self._check()
        return self._request(input=list(self._inputs))


class BatchUpdateRequestBuilderBase(RequestBuilderBase):
    METHOD = ResourceMethod.BATCH_UPDATE

    def __init__(self, base_uri_template: str, value_class: Any, resource_spec: ResourceSpec):
        super().__init__(base_uri_template, value_class, resource_spec)
        self._inputs: dict[Any, Any] = {}

    def input(self, id: Any, entity: Any) -> Self:
        self._inputs[id] = entity
        return self

    def build(self) -> Request:
        self._check()
        return self._request(ids=list(self._inputs), input=dict(self._inputs))


class BatchPartialUpdateRequestBuilderBase(BatchUpdateRequestBuilderBase):
    METHOD = ResourceMethod.BATCH_PARTIAL_UPDATE


class FindRequestBuilderBase(RequestBuilderBase):
    METHOD = ResourceMethod.FINDER

    def __init__(self, base_uri_template: str, value_class: Any, resource_spec: ResourceSpec):
        super().__init__(base_uri_template, value_class, resource_spec)
        self._name: str | None = None
        self._assoc_keys: dict[str, Any] = {}

    def name(self, name: str) -> Self:
        self._name = name
        return self

    def assoc_key(self, name: str, value: Any) -> Self:
        self._assoc_keys[name] = value
        return self

    def paginate(self, start: int, count: int) -> Self:
        self.param("start", start)
        return self.param("count", count)

    def build(self) -> Request:
        self._check()
        return self._request(name=self._name, assoc_keys=dict(self._assoc_keys))


class ActionRequestBuilderBase(RequestBuilderBase):
    METHOD = ResourceMethod.ACTION

    def __init__(self, base_uri_template: str, return_class: Any, resource_spec: ResourceSpec):
        super().__init__(base_uri_template, return_class, resource_spec)
        self._name: str | None = None
        self._id: Any = None
        self._action_params: dict[str, Any] = {}

    @property
    def return_class(self) -> Any:
        return self._value_class

    def name(self, name: str) -> Self:
        self._name = name
        return self

    def id(self, id: Any) -> Self:
        self._id = id
        return self

    def action_param(self, field_def: FieldDef, value: Any) -> Self:
        self._action_params[field_def.name] = _freeze(value)
        return self

    def build(self) -> Request:
        self._check()
        return self._request(name=self._name, id=self._id, action_params=dict(self._action_params))


def _freeze(value: Any) -> Any:
    # Iterables bound to array parameters are materialized once, strings stay scalar
    if isinstance(value, (str, bytes)) or not isinstance(value, Iterable):
        return value
    if isinstance(value, dict):
        return dict(value)
    return list(value)
