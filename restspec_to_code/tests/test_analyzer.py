"""
Tests for the resource tree walker and builder descriptor generation.
"""

from __future__ import annotations

import copy
import json
from pathlib import Path

import pytest

from restspec_to_code.client.common import ResourceMethod
from restspec_to_code.pipeline import CodeGeneratorConfig, CompilationContext, ResourceAnalyzer
from restspec_to_code.pipeline.analyzer import VOID, KeyKind, TypeKind, get_path_keys
from restspec_to_code.pipeline.errors import (
    DuplicateKeyNameError,
    InternalCompilerError,
    NameCollisionError,
    SchemaValidationError,
    TypeResolutionError,
)

TEST_DATA = Path(__file__).parent / "test_data"


def load_idl(name):
    with open(TEST_DATA / "idl" / f"{name}.restspec.json") as f:
        return json.load(f)


@pytest.fixture
def context():
    return CompilationContext(config=CodeGeneratorConfig(schema_paths=[str(TEST_DATA / "schemas")]))


@pytest.fixture
def analyzer(context):
    return ResourceAnalyzer(context)


def factories(facade):
    return [builder.factory_method for builder in facade.builders]


class TestWidgetResource:
    def test_facade(self, analyzer, context):
        facade = analyzer.walk(load_idl("widget"), source_file="widget.restspec.json")

        assert context.diagnostics == []
        assert facade.class_name == "WidgetBuilders"
        assert facade.qualified_name == "com.example.WidgetBuilders"
        assert facade.base_uri_template == "widget"
        assert facade.doc == "Widgets owned by users."
        assert factories(facade) == ["get", "create", "findByOwner"]

    def test_resource_spec(self, analyzer):
        facade = analyzer.walk(load_idl("widget"))
        spec = facade.resource_spec
        assert spec.supported_methods == (ResourceMethod.GET, ResourceMethod.CREATE)
        assert spec.key_shape.kind == KeyKind.SIMPLE
        assert spec.key_shape.key_type.python_name == "int"
        assert spec.value_type.name == "com.example.Widget"
        assert spec.key_parts == {}

    def test_crud_builders_share_the_key_type(self, analyzer):
        facade = analyzer.walk(load_idl("widget"))
        get, create = facade.builder("get"), facade.builder("create")

        assert get.class_name == "WidgetGetBuilder"
        assert get.contract.base_class == "GetRequestBuilderBase"
        assert get.doc == "Fetch one widget."
        assert create.class_name == "WidgetCreateBuilder"
        assert create.contract.base_class == "CreateRequestBuilderBase"
        for builder in (get, create):
            assert builder.contract.key_type.python_name == "int"
            assert builder.contract.value_type.name == "com.example.Widget"
            assert builder.path_keys == []

    def test_finder(self, analyzer):
        finder = analyzer.walk(load_idl("widget")).builder("findByOwner")

        assert finder.class_name == "WidgetFindByOwnerBuilder"
        assert finder.kind == ResourceMethod.FINDER
        assert finder.operation_name == "byOwner"
        assert [(p.method_name, p.type_ref.python_name, p.optional) for p in finder.query_params] == [
            ("ownerParam", "str", False)
        ]


class TestNestedResources:
    def test_three_level_path_keys(self, analyzer, context):
        albums = analyzer.walk(load_idl("albums"), source_file="albums.restspec.json")
        photos = albums.subresources[0]
        tags = photos.subresources[0]

        assert context.diagnostics == []
        assert tags.class_name == "TagsBuilders"
        assert tags.namespace == "com.example.photos"
        assert tags.base_uri_template == "albums/{albumId}/photos/{photoId}/tags"
        assert tags.path_keys == ["albumId", "photoId"]

        for builder in tags.builders:
            assert [(k.name, k.method_name, k.type_ref.python_name) for k in builder.path_keys] == [
                ("albumId", "albumIdKey", "int"),
                ("photoId", "photoIdKey", "str"),
            ]

    def test_finder_with_two_required_and_one_optional_parameter(self, analyzer):
        tags = analyzer.walk(load_idl("albums")).subresources[0].subresources[0]
        finder = tags.builder("findBySearch")

        assert [p.method_name for p in finder.query_params] == ["qParam", "limitParam", "cursorParam"]
        assert [p.optional for p in finder.query_params] == [False, False, True]
        assert finder.query_params[0].doc == "Search terms."

    def test_sibling_subresources_do_not_share_keys(self, analyzer):
        albums = analyzer.walk(load_idl("albums"))
        photos, contributors = albums.subresources

        assert [k.name for k in photos.builders[0].path_keys] == ["albumId"]
        assert [k.name for k in contributors.builders[0].path_keys] == ["albumId"]
        assert factories(contributors) == ["get", "batchCreate"]

    def test_walk_visits_every_facade(self, analyzer):
        albums = analyzer.walk(load_idl("albums"))
        assert [f.class_name for f in albums.walk()] == [
            "AlbumsBuilders",
            "PhotosBuilders",
            "TagsBuilders",
            "ContributorsBuilders",
        ]

    def test_base_uri_override_replaces_the_primary_resource(self, analyzer):
        tags = analyzer.walk(load_idl("albums")).subresources[0].subresources[0]
        assert tags.base_uri_for("myAlbums") == "myAlbums/{albumId}/photos/{photoId}/tags"
        assert analyzer.walk(load_idl("widget")).base_uri_for("gadget") == "gadget"


class TestActions:
    def test_resource_and_entity_actions(self, analyzer):
        albums = analyzer.walk(load_idl("albums"))
        purge, share = albums.builder("actionPurge"), albums.builder("actionShare")

        assert purge.class_name == "AlbumsDoPurgeBuilder"
        assert purge.return_type.python_name == "int"
        assert purge.entity_level is False
        assert purge.constructor_params == ["base_uri_template", "return_class", "resource_spec"]

        assert share.entity_level is True
        assert share.return_type == VOID
        assert [(p.method_name, p.type_ref.python_name, p.is_iterable, p.optional) for p in share.action_params] == [
            ("paramEmails", "str", True, False),
            ("paramMessage", "str", False, True),
        ]

    def test_actions_set_generates_only_actions(self, analyzer):
        admin = analyzer.walk(load_idl("admin"))

        assert admin.is_actions_set
        assert admin.resource_spec.supported_methods == ()
        assert admin.resource_spec.key_shape.kind == KeyKind.NONE
        assert admin.resource_spec.value_type is None
        assert factories(admin) == ["actionRebuildIndex", "actionPing"]
        assert all(b.kind == ResourceMethod.ACTION for b in admin.builders)
        assert admin.builder("actionPing").return_type == VOID
        assert admin.builder("actionRebuildIndex").return_type.python_name == "int"


class TestAssociation:
    def test_compound_key(self, analyzer):
        memberships = analyzer.walk(load_idl("memberships"))
        spec = memberships.resource_spec

        assert spec.key_shape.kind == KeyKind.COMPOUND
        assert {name: t.python_name for name, t in spec.key_parts.items()} == {"groupID": "int", "memberId": "str"}
        # Declaration order of ResourceMethod, not of "supports"
        assert factories(memberships) == ["get", "update", "batchGet", "findByGroup"]

    def test_association_key_class(self, analyzer):
        key = analyzer.walk(load_idl("memberships")).association_key
        assert key.class_name == "Key"
        assert [(p.setter, p.getter) for p in key.parts] == [("setGroupId", "getGroupId"), ("setMemberId", "getMemberId")]

    def test_finder_binds_association_keys(self, analyzer):
        finder = analyzer.walk(load_idl("memberships")).builder("findByGroup")
        assert [(k.name, k.method_name, k.type_ref.python_name) for k in finder.assoc_keys] == [("groupID", "groupIdKey", "int")]
        assert finder.query_params[0].type_ref.kind == TypeKind.ENUM

    def test_subresource_of_association_is_keyed_by_compound_key(self, analyzer, context):
        resource = load_idl("memberships")
        resource["association"]["entity"]["subresources"] = [
            {
                "name": "notes",
                "path": "/memberships/{membershipsId}/notes",
                "schema": "com.example.Tag",
                "collection": {
                    "identifier": {"name": "noteId", "type": "long"},
                    "supports": ["get"],
                    "entity": {"path": "/memberships/{membershipsId}/notes/{noteId}"},
                },
            }
        ]
        notes = analyzer.walk(resource).subresources[0]
        assert context.diagnostics == []
        assert [(k.name, k.type_ref.kind) for k in notes.builders[0].path_keys] == [("membershipsId", TypeKind.COMPOUND_KEY)]

    def test_finder_with_unknown_association_key_is_dropped(self, analyzer, context):
        resource = load_idl("memberships")
        resource["association"]["finders"][0]["assocKey"] = "nope"
        memberships = analyzer.walk(resource, source_file="memberships.restspec.json")

        assert memberships.builder("findByGroup") is None
        assert factories(memberships) == ["get", "update", "batchGet"]
        assert [d.kind for d in context.diagnostics] == ["SchemaValidationError"]
        assert "unknown association key 'nope'" in context.diagnostics[0].message


class TestCompositeKey:
    def test_composite_resource_spec(self, analyzer):
        reports = analyzer.walk(load_idl("reports"))
        key_shape = reports.resource_spec.key_shape

        assert key_shape.kind == KeyKind.COMPOSITE
        assert key_shape.key_key_type.name == "com.example.ReportKey"
        assert key_shape.key_params_type.name == "com.example.ReportParams"
        assert factories(reports) == ["get", "partialUpdate", "batchUpdate"]
        assert reports.builder("batchUpdate").class_name == "ReportsBatchUpdateBuilder"
        assert reports.builder("batchUpdate").contract.key_type.kind == TypeKind.COMPLEX_KEY


class TestErrors:
    def test_failing_subresource_only_drops_its_subtree(self, analyzer, context):
        resource = load_idl("albums")
        broken = copy.deepcopy(resource["collection"]["entity"]["subresources"][1])
        broken["name"] = "comments"
        broken["path"] = "/albums/{albumId}/comments"
        broken["schema"] = "com.example.Missing"
        resource["collection"]["entity"]["subresources"].insert(1, broken)

        albums = analyzer.walk(resource, source_file="albums.restspec.json")

        assert [f.class_name for f in albums.subresources] == ["PhotosBuilders", "ContributorsBuilders"]
        assert len(context.diagnostics) == 1
        diagnostic = context.diagnostics[0]
        assert diagnostic.kind == "TypeResolutionError"
        assert "com.example.Missing" in diagnostic.message
        assert "albums/comments" in diagnostic.path

    def test_unresolvable_action_return_drops_only_that_builder(self, analyzer, context):
        resource = load_idl("admin")
        resource["actionsSet"]["actions"][0]["returns"] = "com.example.Nothing"
        admin = analyzer.walk(resource)

        assert factories(admin) == ["actionPing"]
        assert [d.kind for d in context.diagnostics] == ["TypeResolutionError"]

    def test_unresolvable_value_type_fails_the_resource(self, analyzer):
        resource = load_idl("widget")
        resource["schema"] = "com.example.Nothing"
        with pytest.raises(TypeResolutionError):
            analyzer.walk(resource)

    def test_missing_value_type(self, analyzer):
        resource = load_idl("widget")
        del resource["schema"]
        with pytest.raises(SchemaValidationError, match="does not declare its value type"):
            analyzer.walk(resource)

    def test_unknown_supported_method(self, analyzer):
        resource = load_idl("widget")
        resource["collection"]["supports"].append("upsert")
        with pytest.raises(SchemaValidationError, match="unknown resource method 'upsert'"):
            analyzer.walk(resource)

    def test_unbound_path_template_variable(self, analyzer):
        resource = load_idl("widget")
        resource["path"] = "/owners/{ownerId}/widget"
        with pytest.raises(SchemaValidationError, match="path key 'ownerId'"):
            analyzer.walk(resource)

    def test_subresource_reusing_an_ancestor_key_name(self, analyzer, context):
        resource = load_idl("albums")
        contributors = resource["collection"]["entity"]["subresources"][1]
        contributors["collection"]["identifier"]["name"] = "albumId"

        albums = analyzer.walk(resource)

        assert [f.class_name for f in albums.subresources] == ["PhotosBuilders"]
        assert [d.kind for d in context.diagnostics] == ["DuplicateKeyNameError"]

    def test_duplicate_template_variable(self):
        with pytest.raises(DuplicateKeyNameError):
            get_path_keys("a/{id}/b/{id}")

    def test_resource_defined_twice(self, analyzer):
        analyzer.walk(load_idl("widget"), source_file="a.restspec.json")
        with pytest.raises(NameCollisionError, match="com.example.WidgetBuilders, already defined by a.restspec.json:widget"):
            analyzer.walk(load_idl("widget"), source_file="b.restspec.json")

    def test_define_type_collision_is_an_internal_error(self, context):
        context.define_type("com.example", "WidgetGetBuilder", "a.restspec.json:widget")
        with pytest.raises(InternalCompilerError, match="com.example.WidgetGetBuilder already defined by a.restspec.json:widget"):
            context.define_type("com.example", "WidgetGetBuilder", "b.restspec.json:widget")


class TestNameCollisions:
    def test_finders_with_the_same_factory(self, analyzer, context):
        resource = load_idl("widget")
        owner = copy.deepcopy(resource["collection"]["finders"][0])
        owner["name"] = "owner"
        resource["collection"]["finders"].append(owner)

        widget = analyzer.walk(resource)

        assert [b.factory_method for b in widget.builders] == ["get", "create", "findByOwner"]
        assert widget.builder("findByOwner").operation_name == "byOwner"
        assert [d.kind for d in context.diagnostics] == ["NameCollisionError"]
        assert "finder 'byOwner' and finder 'owner' both generate 'findByOwner'" in context.diagnostics[0].message

    def test_resource_and_entity_action_with_the_same_name(self, analyzer, context):
        resource = load_idl("albums")
        resource["collection"]["entity"]["actions"].append({"name": "purge"})

        albums = analyzer.walk(resource)

        assert [b.factory_method for b in albums.builders if b.kind == ResourceMethod.ACTION] == ["actionPurge", "actionShare"]
        assert albums.builder("actionPurge").entity_level is False
        assert "action 'purge' and entity action 'purge'" in context.diagnostics[0].message

    def test_builder_matching_another_resource_builder(self, analyzer, context):
        # Finder "create" of widget and method "create" of widgetFindBy share one class name
        widget = load_idl("widget")
        widget["collection"]["finders"][0]["name"] = "create"
        analyzer.walk(widget, source_file="widget.restspec.json")

        other = load_idl("widget")
        other["name"] = "widgetFindBy"
        other["path"] = "/widgetFindBy"
        other["collection"]["finders"] = []
        clashing = analyzer.walk(other, source_file="other.restspec.json")

        assert [b.class_name for b in clashing.builders] == ["WidgetFindByGetBuilder"]
        assert [d.kind for d in context.diagnostics] == ["NameCollisionError"]
        assert "already defined by widget.restspec.json:widget" in context.diagnostics[0].message


def test_get_path_keys_in_order():
    assert get_path_keys("albums/{albumId}/photos/{photoId}") == ["albumId", "photoId"]
    assert get_path_keys("albums") == []
