"""
TypeScript code generation backend.

TypeScript has structural tagged unions, so discriminators need no
runtime code: every variant interface carries its tag as a literal-typed
field and the union is a plain type alias.
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import Any

from ..ir_nodes import ClassDef, EnumDef, TypeAlias, TypeKind, TypeRef, UnionDef
from ..naming import TypeScriptNamer
from ..transformer import TargetCapabilities
from .base import CodeBackend, quote_string

_IDENTIFIER = re.compile(r"^[A-Za-z_$][A-Za-z0-9_$]*$")


class TypeScriptBackend(CodeBackend):
    """TypeScript code generation backend."""

    TEMPLATE_LANG = "typescript"
    FILE_EXTENSION = "ts"

    TEMPLATES = {
        ClassDef: "class",
        UnionDef: "union",
        TypeAlias: "alias",
        EnumDef: "enum",
    }

    TYPE_MAP = {
        TypeKind.ANY: "any",
        TypeKind.BOOLEAN: "boolean",
        TypeKind.NUMBER: "number",
        TypeKind.STRING: "string",
        TypeKind.TIMESTAMP: "string",
    }

    capabilities = TargetCapabilities(enum_constants=False, native_tagged_unions=True)

    def create_namer(self) -> TypeScriptNamer:
        return TypeScriptNamer()

    def translate_type(self, type_ref: TypeRef) -> str:
        if type_ref.kind == TypeKind.IDENTIFIER:
            return type_ref.name
        if type_ref.kind == TypeKind.LITERAL:
            return quote_string(type_ref.const_value)
        if type_ref.kind == TypeKind.ARRAY:
            return f"{self.translate_type(type_ref.item)}[]"
        if type_ref.kind == TypeKind.MAP:
            return f"{{ [name: string]: {self.translate_type(type_ref.item)} }}"
        return self.TYPE_MAP[type_ref.kind]

    def output_filename(self, root_name: str, output_dir: Path) -> str:
        return f"{root_name}.ts"

    def _prepare_field_context(self, class_def: ClassDef, field) -> dict[str, Any]:
        context = super()._prepare_field_context(class_def, field)
        # Wire names that are not identifiers become string-literal keys
        if not _IDENTIFIER.match(field.name):
            context["name"] = quote_string(field.name)
        context["optional_marker"] = "" if field.is_required else "?"
        return context

    def _prepare_context(self, decl) -> dict[str, Any]:
        context = super()._prepare_context(decl)
        if isinstance(decl, UnionDef):
            context["union"] = " | ".join(context["variants"]) or "never"
        elif isinstance(decl, EnumDef):
            context["union"] = " | ".join(quote_string(value) for value in decl.values)
        return context
