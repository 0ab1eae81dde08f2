"""
Schema AST (Abstract Syntax Tree) module.

Contains the JSL node definitions and the validating parser.
"""

from __future__ import annotations

from .nodes import (
    DiscriminatorNode,
    ElementsNode,
    EmptyNode,
    EnumNode,
    PrimitiveType,
    PropertiesNode,
    RefNode,
    SchemaAST,
    SchemaNode,
    TypeNode,
    ValuesNode,
)
from .parser import SchemaParser

__all__ = [
    "SchemaNode",
    "EmptyNode",
    "RefNode",
    "TypeNode",
    "PrimitiveType",
    "EnumNode",
    "ElementsNode",
    "PropertiesNode",
    "ValuesNode",
    "DiscriminatorNode",
    "SchemaAST",
    "SchemaParser",
]
