"""
AST (Abstract Syntax Tree) node definitions for JSON Schema Language.

Each node carries exactly one form. Nodes are frozen: the transformer
only ever reads them, and a node's identity is the path used to reach it.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class PrimitiveType(str, Enum):
    """Primitive types of the ``type`` form."""

    BOOLEAN = "boolean"
    NUMBER = "number"
    STRING = "string"
    TIMESTAMP = "timestamp"


@dataclass(frozen=True)
class SchemaNode:
    """Base class for all schema nodes."""

    # JSON pointer of the node in the input document (for error messages)
    source_path: str = "#"

    # Keywords outside the JSL grammar, kept verbatim
    metadata: dict[str, Any] = field(default_factory=dict, compare=False)

    @property
    def description(self) -> str | None:
        """Free-form description attached to the node, if any."""
        value = self.metadata.get("description")
        return value if isinstance(value, str) else None


@dataclass(frozen=True)
class EmptyNode(SchemaNode):
    """Accepts any JSON value."""


@dataclass(frozen=True)
class RefNode(SchemaNode):
    """Refers to a definition by name."""

    definition: str = ""


@dataclass(frozen=True)
class TypeNode(SchemaNode):
    """A primitive value."""

    type_name: PrimitiveType = PrimitiveType.STRING


@dataclass(frozen=True)
class EnumNode(SchemaNode):
    """One of a fixed set of strings."""

    values: tuple[str, ...] = ()


@dataclass(frozen=True)
class ElementsNode(SchemaNode):
    """An array whose items all match one schema."""

    elements: SchemaNode | None = None


@dataclass(frozen=True)
class PropertiesNode(SchemaNode):
    """An object with known required and optional properties."""

    required: dict[str, SchemaNode] = field(default_factory=dict)
    optional: dict[str, SchemaNode] = field(default_factory=dict)
    additional: bool = False


@dataclass(frozen=True)
class ValuesNode(SchemaNode):
    """An object used as a string-keyed map."""

    values: SchemaNode | None = None


@dataclass(frozen=True)
class DiscriminatorNode(SchemaNode):
    """A tagged union: ``tag`` selects which mapping entry describes the object."""

    tag: str = ""
    mapping: dict[str, SchemaNode] = field(default_factory=dict)


@dataclass(frozen=True)
class SchemaAST:
    """Root of the parsed schema."""

    root_name: str = ""
    root_node: SchemaNode = field(default_factory=EmptyNode)

    # Definition name -> node, in document order
    definitions: dict[str, SchemaNode] = field(default_factory=dict)
