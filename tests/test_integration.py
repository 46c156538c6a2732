"""Integration tests for the generation pipeline."""

import shutil
import subprocess
from pathlib import Path

import pytest

from grpcgen.config import GeneratorConfig
from grpcgen.engine import GenerationPipeline
from grpcgen.errors import CompilerError, InputValidationError, NoRecordsError, SourceParseError
from grpcgen.source import DeclarationKind, parse_go_file
from grpcgen.utils import get_out_path


EXAMPLES_DIR = Path(__file__).parent.parent / "examples"
GREETER_FILE = EXAMPLES_DIR / "greeter" / "server.go"

IDS_SOURCE = """package ids

// @grpcGen:Message
type ID int

func Keep() {
	return
}

// @grpcGen:Message
type Ping struct {
	Seq int64
}

// @grpcGen:Service
// @grpcGen:SrvName: Health
func Check(in *pb.Ping) (*pb.Ping, error) { return in, nil }
"""


@pytest.fixture
def greeter(tmp_path):
    """Copy of the greeter example in a temporary directory."""
    path = tmp_path / "server.go"
    shutil.copy(GREETER_FILE, path)
    return path


@pytest.fixture
def offline_config():
    """Config that never runs protoc."""
    config = GeneratorConfig()
    config.compiler.enabled = False
    return config


class TestOutputPath:
    """Tests for document path derivation."""

    def test_default_layout(self):
        assert get_out_path("svc/server.go", GeneratorConfig().output) == Path("svc/pb/server.go.proto")

    def test_custom_subdirectory(self):
        config = GeneratorConfig()
        config.output.subdirectory = "proto"
        assert get_out_path("server.go", config.output) == Path("proto/server.go.proto")

    def test_rejects_wrong_extension(self):
        with pytest.raises(InputValidationError):
            get_out_path("server.py", GeneratorConfig().output)

    def test_rejects_empty_path(self):
        with pytest.raises(InputValidationError):
            get_out_path("", GeneratorConfig().output)


class TestGenerationPipeline:
    """End-to-end tests for GenerationPipeline."""

    def test_generate_document(self, greeter, offline_config):
        result = GenerationPipeline(offline_config).run(greeter)

        assert result.ok
        assert result.document == greeter.parent / "pb" / "server.go.proto"
        document = result.document.read_text()
        assert "package greeter;" in document
        assert 'import "google/protobuf/struct.proto";' in document
        assert "  rpc SayHello (Request) returns (Reply) {}" in document
        assert "  rpc SayYa (Request) returns (Reply) {}" in document
        assert "  repeated string Tags = 2;" in document
        assert "  map<string, google.protobuf.Value> Extra = 3;" in document
        assert result.compiled is False

    def test_source_rewritten_after_generation(self, greeter, offline_config):
        result = GenerationPipeline(offline_config).run(greeter)

        assert result.rewritten is True
        text = greeter.read_text()
        assert "// type Reply struct {" in text
        assert "func (s *server) SayHello" in text

    def test_rewritten_source_still_parses(self, greeter, offline_config):
        GenerationPipeline(offline_config).run(greeter)

        source = parse_go_file(greeter)
        assert [d.name for d in source.declarations if d.kind == DeclarationKind.TYPE] == ["server"]
        assert "// \tExtra   map[string]interface{}\n// }" in greeter.read_text()

    def test_marked_non_struct_not_rewritten(self, tmp_path, offline_config):
        path = tmp_path / "ids.go"
        path.write_text(IDS_SOURCE)

        result = GenerationPipeline(offline_config).run(path)

        assert any(i.declaration == "type ID" for i in result.assembly.issues)
        text = path.read_text()
        assert "\ntype ID int\n" in text
        assert "\nfunc Keep() {\n\treturn\n}\n" in text
        assert "// type Ping struct {" in text

    def test_no_rewrite(self, greeter, offline_config):
        original = greeter.read_text()
        offline_config.rewrite_source = False

        GenerationPipeline(offline_config).run(greeter)

        assert greeter.read_text() == original

    def test_second_run_finds_no_records(self, greeter, offline_config):
        pipeline = GenerationPipeline(offline_config)
        pipeline.run(greeter)

        with pytest.raises(NoRecordsError):
            pipeline.run(greeter)

    def test_existing_document_replaced(self, greeter, offline_config):
        out = greeter.parent / "pb" / "server.go.proto"
        out.parent.mkdir()
        out.write_text("stale content that is longer than nothing\n" * 100)

        GenerationPipeline(offline_config).run(greeter)

        assert "stale" not in out.read_text()
        assert out.read_text().startswith("//\n// Generated by grpcgen")

    def test_wrong_extension_rejected_before_parsing(self, tmp_path, offline_config):
        path = tmp_path / "server.txt"
        path.write_text("not go at all {")

        with pytest.raises(InputValidationError):
            GenerationPipeline(offline_config).run(path)

    def test_parse_error(self, tmp_path, offline_config):
        path = tmp_path / "broken.go"
        path.write_text("package broken\n\nfunc {\n")

        with pytest.raises(SourceParseError):
            GenerationPipeline(offline_config).run(path)

    def test_compiler_invoked(self, greeter, monkeypatch):
        calls = []

        def fake_run(cmd, **kwargs):
            calls.append(cmd)
            return subprocess.CompletedProcess(cmd, 0, stdout="", stderr="")

        monkeypatch.setattr(subprocess, "run", fake_run)
        result = GenerationPipeline(GeneratorConfig()).run(greeter)

        assert result.compiled is True
        out_dir = str(greeter.parent / "pb")
        assert calls == [[
            "protoc",
            "-I",
            out_dir,
            str(result.document),
            f"--go_out=plugins=grpc:{out_dir}",
        ]]

    def test_compiler_failure_keeps_source(self, greeter, monkeypatch):
        original = greeter.read_text()

        def fake_run(cmd, **kwargs):
            return subprocess.CompletedProcess(cmd, 1, stdout="", stderr="protoc: boom\n")

        monkeypatch.setattr(subprocess, "run", fake_run)
        with pytest.raises(CompilerError, match="protoc: boom"):
            GenerationPipeline(GeneratorConfig()).run(greeter)

        assert greeter.read_text() == original

    def test_build_has_no_side_effects(self, greeter, offline_config):
        original = greeter.read_text()

        assembly, document = GenerationPipeline(offline_config).build(greeter)

        assert "service Greeting {" in document
        assert list(assembly.model.records) == ["Request", "Reply"]
        assert greeter.read_text() == original
        assert not (greeter.parent / "pb").exists()


class TestRunMany:
    """Tests for processing several inputs."""

    def test_continues_after_failure(self, greeter, tmp_path, offline_config):
        bad = tmp_path / "bad.txt"
        bad.write_text("")

        results = GenerationPipeline(offline_config).run_many([bad, greeter])

        assert [r.ok for r in results] == [False, True]
        assert isinstance(results[0].error, InputValidationError)

    def test_continues_after_invalid_utf8(self, greeter, tmp_path, offline_config):
        bad = tmp_path / "latin1.go"
        bad.write_bytes(b"package p\n\n// caf\xe9\nfunc F() {}\n")

        results = GenerationPipeline(offline_config).run_many([bad, greeter])

        assert [r.ok for r in results] == [False, True]
        assert isinstance(results[0].error, SourceParseError)

    def test_fail_fast(self, greeter, tmp_path, offline_config):
        bad = tmp_path / "bad.txt"
        bad.write_text("")

        results = GenerationPipeline(offline_config).run_many([bad, greeter], fail_fast=True)

        assert len(results) == 1
        assert not results[0].ok

    def test_each_input_gets_fresh_model(self, greeter, tmp_path, offline_config):
        other = tmp_path / "other" / "admin.go"
        other.parent.mkdir()
        other.write_text('''package admin

// @grpcGen:Message
type Empty struct {
	Ok bool
}

// @grpcGen:Service
// @grpcGen:SrvName: Admin
func Reset(in *pb.Empty) (*pb.Empty, error) { return in, nil }
''')

        results = GenerationPipeline(offline_config).run_many([greeter, other])

        second = results[1].assembly.model
        assert list(second.records) == ["Empty"]
        assert list(second.service_groups) == ["Admin"]
        assert "Greeting" not in results[1].document.read_text()
