#!/usr/bin/env python3
"""
Demo script showing basic usage of grpcgen.

Run this script after installing the package:
    pip install -e .
    python demo.py
"""

from pathlib import Path

from grpcgen.engine.assembler import assemble
from grpcgen.schemas.protobuf import render_proto
from grpcgen.schemas.types import translate
from grpcgen.source.parser import parse_go_file, parse_go_source


GREETER_FILE = Path(__file__).parent / "examples" / "greeter" / "server.go"


def demo_parsing():
    """Demonstrate reading declarations from a Go source."""
    print("=" * 60)
    print("1. PARSING GO SOURCE")
    print("=" * 60)

    source = parse_go_file(GREETER_FILE)

    print(f"Package: {source.package_name}")
    for decl in source.declarations:
        doc = " | ".join(decl.doc_text) if decl.doc_text else "-"
        print(f"  {decl.describe():<20} lines {decl.start_line}-{decl.end_line}  doc: {doc}")

    print()
    return source


def demo_type_translation():
    """Demonstrate translating Go field types."""
    print("=" * 60)
    print("2. TRANSLATING FIELD TYPES")
    print("=" * 60)

    for go_type in ["int", "uint", "[]byte", "[]string", "*Reply", "map[string]interface{}", "[]*pb.Reply"]:
        print(f"  {go_type:<24} -> {translate(go_type)}")

    print()


def demo_assembly(source):
    """Demonstrate building the schema model."""
    print("=" * 60)
    print("3. ASSEMBLING THE SCHEMA MODEL")
    print("=" * 60)

    result = assemble(source)
    model = result.model

    for record in model.records.values():
        print(f"Message {record.name}")
        for f in record.fields:
            print(f"  {f.type} {f.name}")

    for group in model.service_groups.values():
        print(f"Service {group.name}")
        for proc in group.procedures:
            print(f"  {proc.name}({proc.input_type}) -> {proc.output_type}")

    print()
    return result


def demo_rendering(result):
    """Demonstrate rendering the proto3 document."""
    print("=" * 60)
    print("4. RENDERING THE DOCUMENT")
    print("=" * 60)

    print(render_proto(result.model))


def demo_issues():
    """Demonstrate issues reported for malformed declarations."""
    print("=" * 60)
    print("5. ASSEMBLY ISSUES")
    print("=" * 60)

    source = parse_go_source('''package demo

// @grpcGen:Message
type ID int

// @grpcGen:Message
type Ping struct {
	Seq int64
}

// @grpcGen:Service
// @grpcGen:SrvName: Health
func Check(in *pb.Ping) (*pb.Ping, error) { return in, nil }
''')
    result = assemble(source)

    print(f"Records: {list(result.model.records)}")
    print(f"Issues: {len(result.issues)}")
    for issue in result.issues:
        print(f"  - [{issue.severity.value}] {issue.message}")


def main():
    """Run all demos."""
    print()
    print("GRPCGEN DEMO")
    print("=" * 60)
    print()

    source = demo_parsing()
    demo_type_translation()
    result = demo_assembly(source)
    demo_rendering(result)
    demo_issues()

    print()
    print("=" * 60)
    print("DEMO COMPLETE")
    print("=" * 60)
    print()
    print("To use the CLI, install the package and run:")
    print("  pip install -e .")
    print("  grpcgen --help")
    print()


if __name__ == "__main__":
    main()
