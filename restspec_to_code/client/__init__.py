"""
Runtime base classes imported by emitted request builders.
"""

from __future__ import annotations

from .builders import (
    ActionRequestBuilderBase,
    BatchCreateRequestBuilderBase,
    BatchDeleteRequestBuilderBase,
    BatchGetRequestBuilderBase,
    BatchPartialUpdateRequestBuilderBase,
    BatchUpdateRequestBuilderBase,
    CreateRequestBuilderBase,
    DeleteRequestBuilderBase,
    FindRequestBuilderBase,
    GetRequestBuilderBase,
    PartialUpdateRequestBuilderBase,
    RequestBuilderBase,
    UpdateRequestBuilderBase,
)
from .common import (
    ComplexResourceKey,
    CompoundKey,
    FieldDef,
    Request,
    ResourceMethod,
    ResourceSpec,
)

__all__ = [
    "RequestBuilderBase",
    "GetRequestBuilderBase",
    "CreateRequestBuilderBase",
    "UpdateRequestBuilderBase",
    "PartialUpdateRequestBuilderBase",
    "DeleteRequestBuilderBase",
    "BatchGetRequestBuilderBase",
    "BatchCreateRequestBuilderBase",
    "BatchUpdateRequestBuilderBase",
    "BatchPartialUpdateRequestBuilderBase",
    "BatchDeleteRequestBuilderBase",
    "FindRequestBuilderBase",
    "ActionRequestBuilderBase",
    "ComplexResourceKey",
    "CompoundKey",
    "FieldDef",
    "Request",
    "ResourceMethod",
    "ResourceSpec",
]
