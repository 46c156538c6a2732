"""Protobuf document renderer.

Renders a SchemaModel as a proto3 file: header, package, optional import of
struct.proto, one service block per group and one message block per record.
"""

from grpcgen.schemas.base import RecordDescriptor, SchemaModel, ServiceGroup

STRUCT_IMPORT = 'import "google/protobuf/struct.proto";'


class ProtobufRenderer:
    """Render a schema model as a .proto document."""

    def __init__(self, generator_name: str = "grpcgen", indent: str = "  "):
        """Initialize the renderer.

        Args:
            generator_name: Name written into the generated-file header
            indent: Indentation for block members
        """
        self.generator_name = generator_name
        self.indent = indent

    def render(self, model: SchemaModel) -> str:
        """Render the complete document.

        Services come in first-seen group order and messages in record
        order, so the output only depends on the model.
        """
        lines = [
            "//",
            f"// Generated by {self.generator_name} -- DO NOT EDIT",
            "//",
            'syntax = "proto3";',
            "",
            f"package {model.package_name};",
        ]

        if model.uses_dynamic_value:
            lines.extend(["", STRUCT_IMPORT])

        for group in model.service_groups.values():
            lines.append("")
            lines.extend(self._render_service(group))

        for record in model.records.values():
            lines.append("")
            lines.extend(self._render_message(record))

        return "\n".join(lines) + "\n"

    def _render_service(self, group: ServiceGroup) -> list[str]:
        lines = [f"service {group.name} {{"]
        for proc in group.procedures:
            lines.append(
                f"{self.indent}rpc {proc.name} ({proc.input_type}) returns ({proc.output_type}) {{}}"
            )
        lines.append("}")
        return lines

    def _render_message(self, record: RecordDescriptor) -> list[str]:
        lines = [f"message {record.name} {{"]
        # Ordinals are per message and follow declaration order
        for ordinal, field in enumerate(record.fields, start=1):
            lines.append(f"{self.indent}{field.type} {field.name} = {ordinal};")
        lines.append("}")
        return lines


def render_proto(model: SchemaModel, generator_name: str = "grpcgen") -> str:
    """Convenience function to render a model.

    Args:
        model: Schema model to render
        generator_name: Name written into the generated-file header

    Returns:
        The .proto document text
    """
    return ProtobufRenderer(generator_name=generator_name).render(model)
