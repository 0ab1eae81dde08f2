"""
Tests for the template backends beyond the functional pattern cases.
"""

from __future__ import annotations

import ast
from pathlib import Path

import pytest

from jsl_codegen.pipeline.backends import GoBackend, PythonBackend, TypeScriptBackend
from jsl_codegen.pipeline.backends.go_backend import go_package_name
from jsl_codegen.pipeline.config import CodeGeneratorConfig
from jsl_codegen.pipeline.errors import InvariantViolation
from jsl_codegen.pipeline.ir_nodes import IR, ConstantDef, TypeKind, TypeRef
from jsl_codegen.pipeline.schema_ast import SchemaParser
from jsl_codegen.pipeline.transformer import TypeTransformer

EMPTY_UNION = {"discriminator": {"tag": "type", "mapping": {}}}
SHAPES = {
    "discriminator": {
        "tag": "type",
        "mapping": {
            "circle": {"properties": {"radius": {"type": "number"}}},
            "square": {"optionalProperties": {"side": {"type": "number"}}},
        },
    }
}


def render(backend, schema, root_name="Root"):
    ast_ = SchemaParser().parse(schema, root_name)
    ir = TypeTransformer(backend.namer, backend.capabilities).transform(ast_)
    return backend.generate(ir)


def quiet_config():
    config = CodeGeneratorConfig()
    config.add_generation_comment = False
    return config


class TestGoBackend:
    @pytest.mark.parametrize(
        "name,expected",
        [("models", "models"), ("my-models", "mymodels"), ("API_v2", "apiv2"), ("2d", "x2d"), ("", "x")],
    )
    def test_package_name(self, name, expected):
        assert go_package_name(name) == expected

    def test_package_precedence(self):
        backend = GoBackend(quiet_config(), package_name="out-dir")
        assert render(backend, {"type": "string"}).startswith("package outdir\n")

        config = quiet_config()
        config.go_package = "explicit"
        backend = GoBackend(config, package_name="out-dir")
        assert render(backend, {"type": "string"}).startswith("package explicit\n")
        assert backend.output_filename("Root", Path("somewhere")) == "explicit.go"

    def test_output_filename_follows_directory(self):
        backend = GoBackend(quiet_config())
        assert backend.output_filename("Root", Path("/tmp/api/models")) == "models.go"

    def test_no_imports_without_need(self):
        code = render(GoBackend(quiet_config()), {"properties": {"a": {"type": "string"}}})
        assert "import" not in code
        assert code.startswith("package root\n\ntype Root struct {\n")

    def test_braces_balance(self):
        code = render(GoBackend(quiet_config()), SHAPES)
        assert code.count("{") == code.count("}")

    def test_empty_union_does_not_bind_unused_value(self):
        code = render(GoBackend(quiet_config()), EMPTY_UNION)
        assert "\tswitch s.Val.(type) {\n" in code
        assert "val :=" not in code

    def test_translate_type(self):
        backend = GoBackend(quiet_config())
        assert backend.translate_type(TypeRef.map(TypeRef.array(TypeRef.identifier("Item")))) == "map[string][]Item"
        assert backend.translate_type(TypeRef(kind=TypeKind.TIMESTAMP)) == "time.Time"


class TestTypeScriptBackend:
    def test_empty_union_is_never(self):
        code = render(TypeScriptBackend(quiet_config()), EMPTY_UNION)
        assert "export type Root = never;" in code

    def test_rejects_declarations_it_cannot_render(self):
        backend = TypeScriptBackend(quiet_config())
        ir = IR(root_name="Root", declarations=(ConstantDef(name="RootA", type_name="Root", value="A"),))
        with pytest.raises(InvariantViolation):
            backend.generate(ir)

    def test_output_filename(self):
        assert TypeScriptBackend(quiet_config()).output_filename("BookCatalog", Path("out")) == "BookCatalog.ts"

    def test_generation_comment(self):
        code = render(TypeScriptBackend(CodeGeneratorConfig()), {"type": "string"})
        assert code.startswith("// Code generated by jsl_codegen v")
        assert "// Command: jsl_codegen\n\nexport type Root = string;\n" in code


class TestPythonBackend:
    def test_empty_union_is_never(self):
        code = render(PythonBackend(quiet_config()), EMPTY_UNION)
        assert "type RootVariant = Never" in code
        assert "from typing import Any, Never" in code
        ast.parse(code)

    def test_output_filename(self):
        assert PythonBackend(quiet_config()).output_filename("BookCatalog", Path("out")) == "book_catalog.py"

    def test_recursive_alias(self):
        code = render(PythonBackend(quiet_config()), {"definitions": {"tree": {"elements": {"ref": "tree"}}}, "properties": {"t": {"ref": "tree"}}})
        assert "type Tree = list[Tree]" in code
        assert "t=list(data[\"t\"])" in code
        ast.parse(code)

    def test_definition_named_like_typing_import(self):
        code = render(PythonBackend(quiet_config()), {"definitions": {"any": {}}, "properties": {"a": {"ref": "any"}}})
        assert "from typing import Any\n" in code
        assert "type Any_ = Any" in code
        assert "a: Any_" in code
        ast.parse(code)

    def test_generation_comment_uses_hash(self):
        code = render(PythonBackend(CodeGeneratorConfig()), {"type": "string"})
        assert code.startswith("# Code generated by jsl_codegen v")
        assert "\nfrom __future__ import annotations\n" in code
        ast.parse(code)

    def test_minimal_module_layout(self):
        code = render(PythonBackend(quiet_config()), {"type": "number"})
        assert code == "from __future__ import annotations\n\n\ntype Root = float\n"
