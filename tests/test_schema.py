"""Tests for decoding lexicon documents into schema nodes."""

import json

import pytest

from lexgen.codegen.core.schema import (
    ArrayType,
    BlobType,
    IntegerType,
    ObjectType,
    ParamsType,
    QueryType,
    RecordType,
    RefType,
    SchemaDocument,
    StringType,
    StructuralDecodeError,
    SubscriptionType,
    TokenType,
    UnionType,
    UnknownType,
    decode_document,
    decode_node,
    iter_nodes,
)


class TestDecodeDocument:
    def test_metadata_and_definition_order(self, profile_lexicon):
        document = decode_document(profile_lexicon)

        assert isinstance(document, SchemaDocument)
        assert document.lexicon == 1
        assert document.id == "com.example.profile"
        assert document.description == "Profiles for the example service."
        assert document.revision is None
        assert document.definition_names() == [
            "Profile",
            "Image",
            "Embed",
            "getProfile",
            "Status",
        ]

    def test_raw_json_text(self, profile_lexicon_text):
        document = decode_document(profile_lexicon_text)
        assert document.id == "com.example.profile"

    def test_raw_json_bytes(self, profile_lexicon_text):
        document = decode_document(profile_lexicon_text.encode("utf-8"))
        assert len(document.defs) == 5

    def test_revision_accepts_integer_or_string(self, make_document):
        payload = make_document({})
        payload["revision"] = 3
        assert decode_document(payload).revision == 3

        payload["revision"] = "3b"
        assert decode_document(payload).revision == "3b"

    def test_get_definition(self, profile_lexicon):
        document = decode_document(profile_lexicon)

        assert isinstance(document.get_definition("Embed"), UnionType)
        assert document.get_definition("Missing") is None

    def test_empty_defs_is_valid(self, make_document):
        document = decode_document(make_document({}))
        assert document.definition_names() == []

    def test_missing_defs_fails(self):
        with pytest.raises(StructuralDecodeError, match="defs"):
            decode_document({"lexicon": 1, "id": "com.example.nodefs"})

    def test_missing_id_fails(self):
        with pytest.raises(StructuralDecodeError, match="'id'"):
            decode_document({"lexicon": 1, "defs": {}})

    def test_lexicon_must_be_integer(self):
        with pytest.raises(StructuralDecodeError, match="expected integer"):
            decode_document({"lexicon": "1", "id": "com.example.x", "defs": {}})

    def test_invalid_json_text(self):
        with pytest.raises(StructuralDecodeError, match="invalid JSON"):
            decode_document("{not json")

    def test_invalid_utf8_bytes(self):
        with pytest.raises(StructuralDecodeError, match="invalid JSON"):
            decode_document(b'{"lexicon": 1, "id": "x\xc3", "defs": {}}')

    def test_top_level_must_be_object(self):
        with pytest.raises(StructuralDecodeError, match="expected object"):
            decode_document(json.dumps([1, 2, 3]))

    def test_unknown_type_reports_path(self, make_document):
        payload = make_document({"Widget": {"type": "widget"}})

        with pytest.raises(StructuralDecodeError) as excinfo:
            decode_document(payload)

        assert excinfo.value.path == "defs.Widget"
        assert "unknown type 'widget'" in str(excinfo.value)

    def test_structural_decode_error_is_value_error(self, make_document):
        with pytest.raises(ValueError):
            decode_document(make_document({"Widget": {"description": "no type"}}))

    def test_defs_are_read_only(self, profile_lexicon):
        document = decode_document(profile_lexicon)
        with pytest.raises(TypeError):
            document.defs["Other"] = TokenType()


class TestDecodeNode:
    def test_string_constraints(self):
        node = decode_node(
            {
                "type": "string",
                "format": "datetime",
                "maxLength": 640,
                "maxGraphemes": 64,
                "knownValues": ["a", "b"],
                "description": "When.",
            }
        )

        assert isinstance(node, StringType)
        assert node.format == "datetime"
        assert node.max_length == 640
        assert node.max_graphemes == 64
        assert node.known_values == ("a", "b")
        assert node.description == "When."

    def test_integer_bounds(self):
        node = decode_node({"type": "integer", "minimum": 1, "maximum": 100})
        assert node == IntegerType(minimum=1, maximum=100)

    def test_null_fields_use_defaults(self):
        node = decode_node({"type": "integer", "minimum": None})
        assert node.minimum is None

    def test_blob_accept_defaults_to_empty(self):
        node = decode_node({"type": "blob", "maxSize": 1000000})
        assert isinstance(node, BlobType)
        assert node.accept == ()
        assert node.max_size == 1000000

    def test_array_items_are_decoded(self):
        node = decode_node(
            {"type": "array", "items": {"type": "ref", "ref": "#tag"}, "maxLength": 8}
        )

        assert isinstance(node, ArrayType)
        assert node.items == RefType(ref="#tag")
        assert node.max_length == 8

    def test_array_without_items_fails(self):
        with pytest.raises(StructuralDecodeError, match="'items'"):
            decode_node({"type": "array"})

    def test_object_keeps_property_order(self):
        node = decode_node(
            {
                "type": "object",
                "required": ["b"],
                "properties": {
                    "b": {"type": "string"},
                    "a": {"type": "integer"},
                    "c": {"type": "unknown"},
                },
            }
        )

        assert isinstance(node, ObjectType)
        assert list(node.properties) == ["b", "a", "c"]
        assert node.required == ("b",)
        assert node.nullable == ()
        assert isinstance(node.properties["c"], UnknownType)

    def test_object_without_properties_is_empty(self):
        node = decode_node({"type": "object"})
        assert dict(node.properties) == {}

    def test_required_must_be_strings(self):
        with pytest.raises(StructuralDecodeError, match=r"required\[1\]"):
            decode_node(
                {"type": "object", "required": ["a", 3], "properties": {}}, "defs.X"
            )

    def test_record_wraps_object(self):
        node = decode_node(
            {
                "type": "record",
                "key": "tid",
                "record": {"type": "object", "properties": {}},
            }
        )

        assert isinstance(node, RecordType)
        assert node.key == "tid"
        assert isinstance(node.record, ObjectType)

    def test_record_must_contain_object(self):
        with pytest.raises(StructuralDecodeError, match="record must be an object"):
            decode_node(
                {"type": "record", "key": "tid", "record": {"type": "string"}}
            )

    def test_record_requires_key(self):
        with pytest.raises(StructuralDecodeError, match="'key'"):
            decode_node({"type": "record", "record": {"type": "object"}})

    def test_union_refs_required(self):
        with pytest.raises(StructuralDecodeError, match="'refs'"):
            decode_node({"type": "union"})

    def test_union_with_empty_refs_decodes(self):
        node = decode_node({"type": "union", "refs": [], "closed": True})
        assert node == UnionType(refs=(), closed=True)
        assert node.is_closed

    def test_ref_requires_ref(self):
        with pytest.raises(StructuralDecodeError, match="'ref'"):
            decode_node({"type": "ref"})

    def test_query(self):
        node = decode_node(
            {
                "type": "query",
                "parameters": {
                    "type": "params",
                    "required": ["limit"],
                    "properties": {"limit": {"type": "integer"}},
                },
                "output": {"encoding": "application/json"},
                "errors": [{"name": "NotFound", "description": "Missing."}],
            }
        )

        assert isinstance(node, QueryType)
        assert isinstance(node.parameters, ParamsType)
        assert node.output.encoding == "application/json"
        assert node.output.schema is None
        assert [error.name for error in node.errors] == ["NotFound"]

    def test_output_requires_encoding(self):
        with pytest.raises(StructuralDecodeError, match="'encoding'"):
            decode_node({"type": "query", "output": {}})

    def test_subscription_message(self):
        node = decode_node(
            {
                "type": "subscription",
                "message": {"schema": {"type": "union", "refs": ["#commit"]}},
            }
        )

        assert isinstance(node, SubscriptionType)
        assert node.message.schema == UnionType(refs=("#commit",))

    def test_description_must_be_string(self):
        with pytest.raises(StructuralDecodeError, match="description"):
            decode_node({"type": "token", "description": 5})

    def test_type_must_be_string(self):
        with pytest.raises(StructuralDecodeError, match="expected string"):
            decode_node({"type": 3})


class TestIterNodes:
    def test_walks_parents_before_children(self, profile_lexicon):
        document = decode_document(profile_lexicon)

        paths = [path for path, _ in iter_nodes(document.defs["Profile"])]

        assert paths[0] == ""
        assert paths.index("address") < paths.index("address.city")
        assert "tags.items" in paths

    def test_walks_endpoint_bodies(self, profile_lexicon):
        document = decode_document(profile_lexicon)

        nodes = dict(iter_nodes(document.defs["getProfile"]))

        assert isinstance(nodes["parameters"], ParamsType)
        assert nodes["output"] == RefType(ref="#Profile")
