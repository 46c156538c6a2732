"""Tests for the schema model, type translation and proto rendering.

Tests cover:
- Schema model containers
- Go type expression parsing
- Go to proto3 type translation
- Protobuf document rendering
"""

import pytest

from grpcgen.schemas import (
    FieldDescriptor,
    ProcedureDescriptor,
    ProtobufRenderer,
    RecordDescriptor,
    SchemaModel,
    ServiceGroup,
    WELL_KNOWN_VALUE,
    parse_type_expr,
    render_proto,
    to_schema_type,
    translate,
)
from grpcgen.schemas.types import Dynamic, Mapping, Named, Opaque, Pointer, Scalar, Sequence


# =============================================================================
# Schema Model Tests
# =============================================================================

class TestSchemaModel:
    """Tests for SchemaModel containers."""

    def test_add_record_replaces_same_name(self):
        """Test that a later record with the same name wins."""
        model = SchemaModel(package_name="demo")
        first = RecordDescriptor(name="User", fields=[FieldDescriptor(name="Id", type="int")])
        second = RecordDescriptor(name="User", fields=[FieldDescriptor(name="Email", type="string")])

        assert model.add_record(first) is False
        assert model.add_record(second) is True
        assert list(model.records) == ["User"]
        assert model.records["User"].fields[0].name == "Email"

    def test_add_procedure_groups_by_name(self):
        """Test that procedures are grouped in encounter order."""
        model = SchemaModel(package_name="demo")
        model.add_procedure("Greeting", ProcedureDescriptor(name="SayHello", input_type="Request", output_type="Reply"))
        model.add_procedure("Admin", ProcedureDescriptor(name="Reset"))
        model.add_procedure("Greeting", ProcedureDescriptor(name="SayYa", input_type="Request", output_type="Reply"))

        assert list(model.service_groups) == ["Greeting", "Admin"]
        assert [p.name for p in model.service_groups["Greeting"].procedures] == ["SayHello", "SayYa"]
        assert model.procedure_count == 3

    def test_uses_dynamic_value(self):
        model = SchemaModel(package_name="demo")
        model.add_record(RecordDescriptor(name="A", fields=[FieldDescriptor(name="X", type="string")]))
        assert model.uses_dynamic_value is False

        model.add_record(RecordDescriptor(
            name="B",
            fields=[FieldDescriptor(name="Y", type=f"map<string, {WELL_KNOWN_VALUE}>")],
        ))
        assert model.uses_dynamic_value is True

    def test_field_name_required(self):
        with pytest.raises(ValueError):
            FieldDescriptor(name="", type="string")

    def test_summary(self):
        model = SchemaModel(package_name="demo")
        model.add_record(RecordDescriptor(name="A", fields=[FieldDescriptor(name="X", type="string")]))
        model.add_procedure("Svc", ProcedureDescriptor(name="Do"))

        summary = model.summary()
        assert summary["package"] == "demo"
        assert summary["records"] == {"A": 1}
        assert summary["services"] == {"Svc": ["Do"]}


# =============================================================================
# Type Expression Parsing Tests
# =============================================================================

class TestParseTypeExpr:
    """Tests for parse_type_expr."""

    def test_scalars_and_names(self):
        assert parse_type_expr("int") == Scalar("int")
        assert parse_type_expr("string") == Scalar("string")
        assert parse_type_expr("Bar") == Named("Bar")
        assert parse_type_expr("pb.Reply") == Named("pb.Reply")

    def test_pointer(self):
        assert parse_type_expr("*Bar") == Pointer(Named("Bar"))

    def test_sequence(self):
        assert parse_type_expr("[]string") == Sequence(Scalar("string"))
        assert parse_type_expr("[]*Bar") == Sequence(Pointer(Named("Bar")))

    def test_mapping(self):
        assert parse_type_expr("map[string]*Bar") == Mapping(Scalar("string"), Pointer(Named("Bar")))

    def test_nested_mapping_key(self):
        expr = parse_type_expr("map[[2]int][]string")
        assert expr == Mapping(Opaque("[2]int"), Sequence(Scalar("string")))

    def test_dynamic(self):
        assert parse_type_expr("interface{}") == Dynamic()
        assert parse_type_expr("any") == Dynamic()

    def test_opaque(self):
        assert parse_type_expr("[4]byte") == Opaque("[4]byte")
        assert parse_type_expr("chan int") == Opaque("chan int")


# =============================================================================
# Type Translation Tests
# =============================================================================

class TestTranslate:
    """Tests for Go to proto3 type translation."""

    @pytest.mark.parametrize("go_type,proto_type", [
        ("uint", "uint32"),
        ("[]byte", "bytes"),
        ("int", "int32"),
        ("[]string", "repeated string"),
        ("map[string]*Bar", "map<string, Bar>"),
        ("*Bar", "Bar"),
        ("interface{}", "google.protobuf.Value"),
        ("map[string]interface{}", "map<string, google.protobuf.Value>"),
    ])
    def test_translation_table(self, go_type, proto_type):
        assert translate(go_type) == proto_type

    def test_unmapped_types_pass_through(self):
        assert translate("string") == "string"
        assert translate("int64") == "int64"
        assert translate("Timestamp") == "Timestamp"
        assert translate("[4]byte") == "[4]byte"

    def test_sequence_element_not_translated(self):
        """Only the outer slice is unwrapped; int inside stays int."""
        assert translate("[]int") == "repeated int"

    def test_sequence_of_pointers(self):
        assert translate("[]*Bar") == "repeated Bar"

    def test_sequence_of_mapping_is_flat(self):
        assert translate("[]map[string]*Bar") == "repeated map[string]Bar"

    def test_pointer_to_scalar(self):
        """Pointers are dropped after scalar mapping, so *int stays int."""
        assert translate("*int") == "int"

    def test_dynamic_in_opaque_text(self):
        assert translate("chan interface{}") == "chan google.protobuf.Value"

    def test_to_schema_type_on_model(self):
        assert to_schema_type(Sequence(Scalar("byte"))) == "bytes"
        assert to_schema_type(Mapping(Scalar("string"), Dynamic())) == "map<string, google.protobuf.Value>"


# =============================================================================
# Renderer Tests
# =============================================================================

def _greeting_model() -> SchemaModel:
    model = SchemaModel(package_name="grpc_test")
    model.add_procedure("Greeting", ProcedureDescriptor(name="SayHello", input_type="Request", output_type="Reply"))
    model.add_procedure("Greeting", ProcedureDescriptor(name="SayYa", input_type="Request", output_type="Reply"))
    model.add_record(RecordDescriptor(name="Request", fields=[FieldDescriptor(name="Name", type="string")]))
    model.add_record(RecordDescriptor(
        name="Reply",
        fields=[
            FieldDescriptor(name="Name", type="string"),
            FieldDescriptor(name="Email", type="string"),
            FieldDescriptor(name="Counter", type="int32"),
        ],
    ))
    return model


class TestProtobufRenderer:
    """Tests for ProtobufRenderer."""

    def test_full_document(self):
        expected = "\n".join([
            "//",
            "// Generated by grpcgen -- DO NOT EDIT",
            "//",
            'syntax = "proto3";',
            "",
            "package grpc_test;",
            "",
            "service Greeting {",
            "  rpc SayHello (Request) returns (Reply) {}",
            "  rpc SayYa (Request) returns (Reply) {}",
            "}",
            "",
            "message Request {",
            "  string Name = 1;",
            "}",
            "",
            "message Reply {",
            "  string Name = 1;",
            "  string Email = 2;",
            "  int32 Counter = 3;",
            "}",
            "",
        ])
        assert render_proto(_greeting_model()) == expected

    def test_no_services_renders_no_service_block(self):
        model = SchemaModel(package_name="demo")
        model.add_record(RecordDescriptor(
            name="Reply",
            fields=[
                FieldDescriptor(name="A", type="string"),
                FieldDescriptor(name="B", type="int32"),
                FieldDescriptor(name="C", type="bytes"),
            ],
        ))

        document = render_proto(model)

        assert "service" not in document
        assert document.count("message ") == 1
        assert "  string A = 1;" in document
        assert "  int32 B = 2;" in document
        assert "  bytes C = 3;" in document

    def test_ordinals_are_per_message(self):
        document = render_proto(_greeting_model())
        assert "  string Name = 1;\n}\n\nmessage Reply" in document
        assert document.count("= 1;") == 2

    def test_struct_import_only_when_needed(self):
        model = _greeting_model()
        assert "import" not in render_proto(model)

        model.records["Reply"].fields.append(FieldDescriptor(name="Extra", type=WELL_KNOWN_VALUE))
        document = render_proto(model)
        assert 'import "google/protobuf/struct.proto";' in document
        assert document.index("import") < document.index("service")

    def test_empty_group_renders_empty_block(self):
        model = SchemaModel(package_name="demo")
        model.service_groups["Idle"] = ServiceGroup(name="Idle")

        assert "service Idle {\n}" in render_proto(model)

    def test_render_is_deterministic(self):
        renderer = ProtobufRenderer()
        model = _greeting_model()
        assert renderer.render(model) == renderer.render(model)

    def test_custom_generator_name(self):
        document = render_proto(_greeting_model(), generator_name="mytool")
        assert "// Generated by mytool -- DO NOT EDIT" in document
