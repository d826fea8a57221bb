"""
Tests for structural validation and parsing of resource IDL documents.
"""

from __future__ import annotations

import pytest

from restspec_to_code.pipeline.errors import ParseError, SchemaValidationError
from restspec_to_code.pipeline.schema_ast import ResourceSchemaParser, load_document, validate


def collection_resource(**overrides):
    resource = {
        "name": "widget",
        "path": "/widget",
        "schema": "com.example.Widget",
        "collection": {
            "identifier": {"name": "widgetId", "type": "int"},
            "supports": ["get"],
            "entity": {"path": "/widget/{widgetId}"},
        },
    }
    resource.update(overrides)
    return resource


class TestValidate:
    def test_valid_collection(self):
        result = validate(collection_resource())
        assert result.ok
        assert str(result) == "ok"

    def test_missing_required_fields_are_all_reported(self):
        result = validate({"collection": {"supports": ["get"]}})
        assert not result.ok
        assert "/name: required field is missing" in result.violations
        assert "/path: required field is missing" in result.violations
        assert "/collection/identifier: required field is missing" in result.violations
        assert "/collection/entity: required field is missing" in result.violations

    def test_wrong_field_types(self):
        resource = collection_resource(name=42)
        resource["collection"]["supports"] = "get"
        result = validate(resource)
        assert "/name: expected string, got int" in result.violations
        assert "/collection/supports: expected array, got str" in result.violations

    def test_array_parameter_requires_items(self):
        resource = collection_resource()
        resource["collection"]["finders"] = [{"name": "search", "parameters": [{"name": "ids", "type": "array"}]}]
        result = validate(resource)
        assert result.violations == ["/collection/finders/0/parameters/0/items: required for array parameters"]

    def test_inline_type_reference_is_accepted(self):
        resource = collection_resource(schema={"type": "record", "name": "Inline", "fields": []})
        assert validate(resource).ok

    def test_empty_type_reference_is_rejected(self):
        resource = collection_resource(schema="  ")
        assert validate(resource).violations == ["/schema: expected a type reference"]

    def test_subresources_are_not_descended(self):
        resource = collection_resource()
        resource["collection"]["entity"]["subresources"] = [{"not": "checked here"}]
        assert validate(resource).ok

    def test_non_object_document(self):
        result = validate(["widget"])
        assert result.violations == ["/: expected object for 'resource', got list"]


class TestResourceSchemaParser:
    def setup_method(self):
        self.parser = ResourceSchemaParser()

    def test_parse_collection(self):
        node = self.parser.parse(collection_resource(namespace="com.example"), "widget.restspec.json")
        assert node.name == "widget"
        assert node.namespace == "com.example"
        assert node.schema == "com.example.Widget"
        assert node.collection.identifier.name == "widgetId"
        assert node.collection.identifier.params is None
        assert node.association is None
        assert node.actions_set is None

    def test_validation_failure_raises(self):
        with pytest.raises(SchemaValidationError) as excinfo:
            self.parser.parse({"name": "broken"}, "broken.restspec.json")
        assert excinfo.value.path == "broken.restspec.json"
        assert "/path: required field is missing" in excinfo.value.violations

    def test_more_than_one_shape_is_rejected(self):
        resource = collection_resource(actionsSet={"actions": []})
        with pytest.raises(SchemaValidationError, match="more than one of collection, actionsSet"):
            self.parser.parse(resource)

    def test_no_shape_parses(self):
        # Rejected later by the key resolver
        node = self.parser.parse({"name": "bare", "path": "/bare"})
        assert node.collection is None and node.association is None and node.actions_set is None

    def test_finder_assoc_keys_are_merged(self):
        resource = {
            "name": "memberships",
            "path": "/memberships",
            "schema": "com.example.Membership",
            "association": {
                "assocKeys": [{"name": "groupId", "type": "long"}, {"name": "memberId", "type": "long"}],
                "supports": [],
                "finders": [{"name": "pair", "assocKey": "groupId", "assocKeys": ["groupId", "memberId"]}],
                "entity": {"path": "/memberships/{membershipsId}"},
            },
        }
        node = self.parser.parse(resource)
        assert node.association.identifier is None
        assert node.association.finders[0].assoc_keys == ["groupId", "memberId"]

    def test_parameters(self):
        resource = collection_resource()
        resource["collection"]["finders"] = [
            {
                "name": "search",
                "parameters": [
                    {"name": "q", "type": "string"},
                    {"name": "tags", "type": "array", "items": "string", "optional": True, "default": []},
                ],
            }
        ]
        finder = self.parser.parse(resource).collection.finders[0]
        q, tags = finder.parameters
        assert (q.optional, q.has_default, q.items) == (False, False, None)
        assert (tags.optional, tags.has_default, tags.default, tags.items) == (True, True, [], "string")

    def test_action_returns(self):
        resource = {"name": "admin", "path": "/admin", "actionsSet": {"actions": [{"name": "ping"}, {"name": "count", "returns": "long"}]}}
        node = self.parser.parse(resource)
        ping, count = node.actions_set.actions
        assert ping.returns is None
        assert count.returns == "long"


class TestLoadDocument:
    def test_malformed_json(self, tmp_path):
        path = tmp_path / "bad.restspec.json"
        path.write_text("{ not json")
        with pytest.raises(ParseError) as excinfo:
            load_document(path)
        assert excinfo.value.path == str(path)

    def test_missing_file(self, tmp_path):
        with pytest.raises(ParseError):
            load_document(tmp_path / "missing.restspec.json")

    def test_non_object_document(self, tmp_path):
        path = tmp_path / "list.restspec.json"
        path.write_text("[]")
        with pytest.raises(ParseError, match="must be a JSON object"):
            load_document(path)
