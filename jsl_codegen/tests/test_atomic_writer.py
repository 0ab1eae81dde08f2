"""
Tests for the atomic writer.
"""

from __future__ import annotations

import pytest

from jsl_codegen.pipeline import AtomicWriter, OutputValidationError


def leftovers(directory):
    return [p.name for p in directory.iterdir() if p.name.endswith(".tmp")]


def test_write_creates_parent_directories(tmp_path):
    path = tmp_path / "a" / "b" / "out.py"
    AtomicWriter().write(path, "x = 1\n", "python")
    assert path.read_text() == "x = 1\n"
    assert leftovers(path.parent) == []


def test_write_replaces_existing_file(tmp_path):
    path = tmp_path / "out.ts"
    path.write_text("old")
    AtomicWriter().write(path, "export type A = string;\n", "typescript")
    assert path.read_text() == "export type A = string;\n"


def test_write_if_not_exists(tmp_path):
    path = tmp_path / "out.go"
    path.write_text("package old\n")
    with pytest.raises(FileExistsError, match="already exists"):
        AtomicWriter().write_if_not_exists(path, "package new\n", "go")
    assert path.read_text() == "package old\n"


@pytest.mark.parametrize(
    "language,content,filename",
    [
        ("python", "def broken(:\n", "out.py"),
        ("go", "type A struct {\n", "out.go"),
        ("go", "type A string\n", "out.go"),
        ("typescript", "export interface A {\n", "out.ts"),
    ],
)
def test_invalid_content_is_not_written(tmp_path, language, content, filename):
    path = tmp_path / filename
    with pytest.raises(OutputValidationError):
        AtomicWriter().write(path, content, language)
    assert not path.exists()
    assert leftovers(tmp_path) == []


def test_validation_can_be_skipped(tmp_path):
    path = tmp_path / "out.py"
    AtomicWriter().write(path, "def broken(:\n", "python", validate=False)
    assert path.exists()


def test_custom_validator(tmp_path):
    def reject_everything(content):
        raise OutputValidationError("nope")

    writer = AtomicWriter(validators={"typescript": reject_everything})
    with pytest.raises(OutputValidationError, match="nope"):
        writer.write(tmp_path / "out.ts", "export type A = string;\n", "typescript")


def test_unknown_language_is_not_validated(tmp_path):
    path = tmp_path / "notes.txt"
    AtomicWriter().write(path, "{{{", "text")
    assert path.read_text() == "{{{"
