"""
Tests for the descriptor IR.
"""

from __future__ import annotations

import pytest

from restspec_to_code.client import ResourceMethod
from restspec_to_code.pipeline.analyzer import (
    CompilationResult,
    FacadeDescriptor,
    PathKey,
    PathKeyChain,
    ResourceSpec,
    TypeKind,
    TypeRef,
)
from restspec_to_code.pipeline.errors import DuplicateKeyNameError

LONG = TypeRef(kind=TypeKind.PRIMITIVE, name="long")
STRING = TypeRef(kind=TypeKind.PRIMITIVE, name="string")


class TestPathKeyChain:
    def test_extend_returns_a_new_chain(self):
        root = PathKeyChain()
        albums = root.extend(PathKey("albumId", LONG))
        photos = albums.extend(PathKey("photoId", STRING))

        assert len(root) == 0
        assert albums.names == ["albumId"]
        assert photos.names == ["albumId", "photoId"]
        assert "photoId" in photos
        assert "photoId" not in albums

    def test_duplicate_name(self):
        chain = PathKeyChain().extend(PathKey("albumId", LONG))
        with pytest.raises(DuplicateKeyNameError, match="path key 'albumId' is already bound"):
            chain.extend(PathKey("albumId", STRING), path="albums.restspec.json:albums.photos")


class TestTypeRef:
    def test_python_names(self):
        assert LONG.python_name == "int"
        assert TypeRef(kind=TypeKind.ARRAY, name="array", type_args=(STRING,)).python_name == "list[str]"
        assert TypeRef(kind=TypeKind.RECORD, name="com.example.Widget").python_name == "com.example.Widget"
        assert str(TypeRef(kind=TypeKind.VOID, name="Void")) == "None"


class TestFacadeDescriptor:
    def test_base_uri_for_replaces_the_first_component(self):
        facade = FacadeDescriptor(base_uri_template="albums/{albumId}/photos")
        assert facade.base_uri_for("myAlbums") == "myAlbums/{albumId}/photos"
        assert FacadeDescriptor(base_uri_template="albums").base_uri_for("myAlbums") == "myAlbums"

    def test_walk_and_all_facades(self):
        tags = FacadeDescriptor(class_name="TagsBuilders")
        photos = FacadeDescriptor(class_name="PhotosBuilders", subresources=[tags])
        contributors = FacadeDescriptor(class_name="ContributorsBuilders")
        albums = FacadeDescriptor(class_name="AlbumsBuilders", subresources=[photos, contributors])
        widgets = FacadeDescriptor(class_name="WidgetBuilders")

        result = CompilationResult(facades=[albums, widgets])
        assert [f.class_name for f in result.all_facades()] == [
            "AlbumsBuilders",
            "PhotosBuilders",
            "TagsBuilders",
            "ContributorsBuilders",
            "WidgetBuilders",
        ]
        assert result.ok


def test_resource_spec_supports():
    spec = ResourceSpec(supported_methods=(ResourceMethod.GET, ResourceMethod.BATCH_GET))
    assert spec.supports(ResourceMethod.BATCH_GET)
    assert not spec.supports(ResourceMethod.DELETE)
    assert spec.key_parts == {}
