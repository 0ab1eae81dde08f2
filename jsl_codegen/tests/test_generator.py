"""
Tests for the pipeline generator and multi-target generation.
"""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from jsl_codegen.pipeline import (
    CodeGeneratorConfig,
    NameCollisionError,
    OutputMode,
    PipelineGenerator,
    SchemaError,
    generate_targets,
)

SCHEMAS_DIR = Path(__file__).parent / "test_data" / "schemas"


def load_schema(name: str) -> dict:
    with open(SCHEMAS_DIR / f"{name}.json") as f:
        return json.load(f)


@pytest.mark.parametrize("language", ["go", "typescript", "python"])
@pytest.mark.parametrize("schema_name", ["shapes", "book", "events"])
def test_output_is_deterministic(language, schema_name):
    schema = load_schema(schema_name)
    first = PipelineGenerator("Root", schema, CodeGeneratorConfig(), language).generate()
    second = PipelineGenerator("Root", schema, CodeGeneratorConfig(), language).generate()
    assert first == second


def test_unknown_language():
    with pytest.raises(ValueError, match="Unsupported language"):
        PipelineGenerator("Root", {}, CodeGeneratorConfig(), "cs")


def test_ir_is_built_once():
    generator = PipelineGenerator("Root", load_schema("shapes"), language="python")
    assert generator.transform() is generator.transform()


def test_output_paths(tmp_path):
    schema = load_schema("book")
    go = PipelineGenerator("BookCatalog", schema, language="go", output_dir=tmp_path / "catalog")
    ts = PipelineGenerator("BookCatalog", schema, language="typescript", output_dir=tmp_path / "ts")
    py = PipelineGenerator("BookCatalog", schema, language="python", output_dir=tmp_path / "py")
    assert go.output_path() == tmp_path / "catalog" / "catalog.go"
    assert ts.output_path() == tmp_path / "ts" / "BookCatalog.ts"
    assert py.output_path() == tmp_path / "py" / "book_catalog.py"
    assert "package catalog\n" in go.generate()


def test_formatter_missing_leaves_code_unchanged(monkeypatch):
    monkeypatch.setattr("shutil.which", lambda name: None)
    config = CodeGeneratorConfig()
    config.formatter.enabled = True
    formatted = PipelineGenerator("Root", load_schema("shapes"), config, "python").generate()
    plain = PipelineGenerator("Root", load_schema("shapes"), CodeGeneratorConfig(), "python").generate()
    assert formatted == plain


class TestWrite:
    def test_refuses_to_overwrite_by_default(self, tmp_path):
        generator = PipelineGenerator("Root", {"type": "string"}, language="typescript", output_dir=tmp_path)
        path = generator.write(generator.generate())
        assert path.read_text().endswith("export type Root = string;\n")

        with pytest.raises(FileExistsError):
            generator.write(generator.generate())

    def test_force_overwrites(self, tmp_path):
        config = CodeGeneratorConfig()
        config.output.mode = OutputMode.FORCE
        (tmp_path / "Root.ts").write_text("stale")

        generator = PipelineGenerator("Root", {"type": "string"}, config, "typescript", output_dir=tmp_path)
        generator.write(generator.generate())
        assert "stale" not in (tmp_path / "Root.ts").read_text()

    def test_non_atomic_write(self, tmp_path):
        config = CodeGeneratorConfig()
        config.output.atomic_write = False
        generator = PipelineGenerator("Root", {"type": "string"}, config, "python", output_dir=tmp_path / "new")
        path = generator.write(generator.generate())
        assert path == tmp_path / "new" / "root.py"
        assert path.read_text().endswith("type Root = str\n")

        with pytest.raises(FileExistsError):
            generator.write(generator.generate())


class TestGenerateTargets:
    def test_writes_every_target(self, tmp_path):
        targets = {"go": tmp_path / "shapes", "typescript": tmp_path / "ts", "python": tmp_path / "py"}
        written = generate_targets("Shape", load_schema("shapes"), targets)
        assert written == [tmp_path / "shapes" / "shapes.go", tmp_path / "ts" / "Shape.ts", tmp_path / "py" / "shape.py"]
        assert all(path.exists() for path in written)

    def test_failure_in_one_target_writes_nothing(self, tmp_path):
        # "val" folds onto the Go holder's value member, other targets are fine
        schema = {"discriminator": {"tag": "val", "mapping": {"a": {"properties": {}}}}}
        targets = {"python": tmp_path / "py", "go": tmp_path / "go"}
        with pytest.raises(NameCollisionError):
            generate_targets("Root", schema, targets)
        assert not (tmp_path / "py").exists()

    def test_existing_output_writes_nothing(self, tmp_path):
        (tmp_path / "ts").mkdir()
        (tmp_path / "ts" / "Root.ts").write_text("keep")
        targets = {"python": tmp_path / "py", "typescript": tmp_path / "ts"}
        with pytest.raises(FileExistsError):
            generate_targets("Root", {"type": "string"}, targets)
        assert not (tmp_path / "py").exists()
        assert (tmp_path / "ts" / "Root.ts").read_text() == "keep"

    def test_invalid_schema(self, tmp_path):
        with pytest.raises(SchemaError):
            generate_targets("Root", {"type": "integer"}, {"go": tmp_path})
        assert list(tmp_path.iterdir()) == []
