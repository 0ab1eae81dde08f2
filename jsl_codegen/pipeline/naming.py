"""
Identifier namers.

A namer turns a schema path into a target identifier. Every method is a
pure function of its arguments: the same path always yields the same
identifier, which keeps generated output diffable run to run. Namers do
not detect collisions; the transformer does.
"""

from __future__ import annotations

import keyword
from collections.abc import Sequence

from ..utils import to_pascal_case, to_snake_case


class IdentifierNamer:
    """Derives target identifiers from schema paths."""

    # Prefix for identifiers that would otherwise be empty or start with a digit
    INVALID_PREFIX = "X"

    # Name of the union holder member that carries the active variant
    value_field_name = "value"

    def type_name(self, path: Sequence[str]) -> str:
        """Identifier for the declaration reached by ``path``."""
        return self._make_valid(to_pascal_case("_".join(path)))

    def field_name(self, json_name: str) -> str:
        """Identifier for the field whose wire name is ``json_name``."""
        return self._make_valid(to_pascal_case(json_name))

    def constant_name(self, type_name: str, value: str) -> str:
        """Identifier for the enum member ``value`` of ``type_name``."""
        return self._make_valid(to_pascal_case(f"{type_name}_{value}"))

    def variant_interface_name(self, union_name: str) -> str:
        """Identifier for the closed set of variants of a union."""
        return f"{union_name}Variant"

    def _make_valid(self, name: str) -> str:
        if not name or name[0].isdigit():
            name = self.INVALID_PREFIX + name
        return self._escape_reserved(name)

    def _escape_reserved(self, name: str) -> str:
        return name


class GoNamer(IdentifierNamer):
    """Exported PascalCase identifiers for every declaration and field."""

    value_field_name = "Val"


class TypeScriptNamer(IdentifierNamer):
    """PascalCase type names; fields keep their wire names."""

    def field_name(self, json_name: str) -> str:
        return json_name


class PythonNamer(IdentifierNamer):
    """PascalCase classes, snake_case fields, keyword-safe."""

    SNAKE_INVALID_PREFIX = "x_"

    # Names a generated dataclass already uses
    RESERVED_MEMBERS = frozenset({"self", "from_json", "to_json"})

    # Names the generated module imports from typing
    RESERVED_TYPES = frozenset({"Any", "Literal", "Never"})

    def type_name(self, path: Sequence[str]) -> str:
        name = super().type_name(path)
        if name in self.RESERVED_TYPES:
            return f"{name}_"
        return name

    def field_name(self, json_name: str) -> str:
        name = to_snake_case(json_name)
        if not name or name[0].isdigit():
            name = self.SNAKE_INVALID_PREFIX + name
        return self._escape_reserved(name)

    def _escape_reserved(self, name: str) -> str:
        # None, True and False are PascalCase keywords
        if keyword.iskeyword(name) or name in self.RESERVED_MEMBERS:
            return f"{name}_"
        return name
