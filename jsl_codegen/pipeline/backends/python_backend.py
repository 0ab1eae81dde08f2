"""
Python code generation backend.

Generates dataclasses with from_json/to_json methods. Discriminated unions
get a holder dataclass that decodes in two passes (tag first, then the
whole object into the selected variant) and refuses to encode a variant
that does not match its tag.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from ...utils import to_snake_case
from ..ir_nodes import IR, ClassDef, EnumDef, TypeAlias, TypeKind, TypeRef, UnionDef
from ..naming import PythonNamer
from .base import CodeBackend, quote_string


class PythonBackend(CodeBackend):
    """Python code generation backend."""

    TEMPLATE_LANG = "python"
    FILE_EXTENSION = "py"

    COMMENT_PREFIX = "#"

    # Two blank lines between top-level definitions
    DECLARATION_SEPARATOR = "\n\n"

    TEMPLATES = {
        ClassDef: "class",
        UnionDef: "union",
        TypeAlias: "alias",
        EnumDef: "enum",
    }

    TYPE_MAP = {
        TypeKind.ANY: "Any",
        TypeKind.BOOLEAN: "bool",
        TypeKind.NUMBER: "float",
        TypeKind.STRING: "str",
        TypeKind.TIMESTAMP: "datetime",
    }

    def create_namer(self) -> PythonNamer:
        return PythonNamer()

    def translate_type(self, type_ref: TypeRef) -> str:
        if type_ref.kind == TypeKind.IDENTIFIER:
            return type_ref.name
        if type_ref.kind == TypeKind.LITERAL:
            return f"Literal[{quote_string(type_ref.const_value)}]"
        if type_ref.kind == TypeKind.ARRAY:
            return f"list[{self.translate_type(type_ref.item)}]"
        if type_ref.kind == TypeKind.MAP:
            return f"dict[str, {self.translate_type(type_ref.item)}]"
        return self.TYPE_MAP[type_ref.kind]

    def output_filename(self, root_name: str, output_dir: Path) -> str:
        return f"{to_snake_case(root_name)}.py"

    def _prepare_context(self, decl) -> dict[str, Any]:
        context = super()._prepare_context(decl)
        if isinstance(decl, UnionDef):
            context["variant_union"] = " | ".join(context["variants"]) or "Never"
        elif isinstance(decl, EnumDef):
            context["literals"] = ", ".join(quote_string(value) for value in decl.values)
        return context

    def _prepare_field_context(self, class_def: ClassDef, field) -> dict[str, Any]:
        context = super()._prepare_field_context(class_def, field)
        key = quote_string(field.json_name)
        if field.is_required:
            context["annotation"] = context["type"]
            context["decode"] = self.decode_expr(field.type_ref, f"data[{key}]")
        else:
            context["annotation"] = f"{context['type']} | None = None"
            decoded = self.decode_expr(field.type_ref, f"data[{key}]")
            if decoded == f"data[{key}]":
                context["decode"] = f"data.get({key})"
            else:
                context["decode"] = f"{decoded} if data.get({key}) is not None else None"
        context["key"] = key
        context["encode"] = self.encode_expr(field.type_ref, f"self.{field.name}")
        return context

    def decode_expr(self, type_ref: TypeRef, expr: str, depth: int = 0) -> str:
        """Expression converting the JSON value ``expr`` to ``type_ref``."""
        return self._convert(type_ref, expr, depth, decode=True, seen=frozenset())

    def encode_expr(self, type_ref: TypeRef, expr: str, depth: int = 0) -> str:
        """Expression converting the Python value ``expr`` of ``type_ref`` to JSON."""
        return self._convert(type_ref, expr, depth, decode=False, seen=frozenset())

    def _convert(self, type_ref: TypeRef, expr: str, depth: int, decode: bool, seen: frozenset[str]) -> str:
        kind = type_ref.kind

        if kind == TypeKind.TIMESTAMP:
            return f"datetime.fromisoformat({expr})" if decode else f"{expr}.isoformat()"

        if kind == TypeKind.ARRAY:
            item = f"v{depth}"
            inner = self._convert(type_ref.item, item, depth + 1, decode, seen)
            if inner == item:
                return f"list({expr})"
            return f"[{inner} for {item} in {expr}]"

        if kind == TypeKind.MAP:
            key, item = f"k{depth}", f"v{depth}"
            inner = self._convert(type_ref.item, item, depth + 1, decode, seen)
            if inner == item:
                return f"dict({expr})"
            return f"{{{key}: {inner} for {key}, {item} in {expr}.items()}}"

        if kind == TypeKind.IDENTIFIER:
            decl = self.resolve(type_ref.name)
            if isinstance(decl, (ClassDef, UnionDef)):
                return f"{decl.name}.from_json({expr})" if decode else f"{expr}.to_json()"
            if isinstance(decl, TypeAlias):
                if decl.name in seen:
                    # An alias chain that reaches itself holds only nested lists and dicts
                    return expr
                return self._convert(decl.target, expr, depth, decode, seen | {decl.name})

        # Primitives, enums and untyped values are already JSON
        return expr

    def _collect_imports(self, ir: IR) -> list[str]:
        typing_names = set()
        has_classes = bool(ir.of_type(ClassDef) or ir.of_type(UnionDef))
        if has_classes or self.uses_kind(ir, TypeKind.ANY):
            typing_names.add("Any")
        if ir.of_type(EnumDef) or self.uses_kind(ir, TypeKind.LITERAL):
            typing_names.add("Literal")
        if any(not decl.codec.cases for decl in ir.of_type(UnionDef)):
            typing_names.add("Never")

        imports = []
        if has_classes:
            imports.append("from dataclasses import dataclass")
        if self.uses_kind(ir, TypeKind.TIMESTAMP):
            imports.append("from datetime import datetime")
        if typing_names:
            imports.append(f"from typing import {', '.join(sorted(typing_names))}")
        return imports
