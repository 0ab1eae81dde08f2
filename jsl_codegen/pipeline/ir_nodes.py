"""
IR (Intermediate Representation) node definitions.

The IR is the target-neutral type AST produced by the transformer: inline
type expressions (TypeRef) and the hoisted, named declarations they refer
to. Emitters render it; they never change it.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from .union_codec import UnionCodec


class TypeKind(Enum):
    """Kind of inline type expression."""

    ANY = "any"
    BOOLEAN = "boolean"
    NUMBER = "number"
    STRING = "string"
    TIMESTAMP = "timestamp"
    LITERAL = "literal"  # A constant string
    IDENTIFIER = "identifier"  # Reference to a named declaration
    ARRAY = "array"  # list[T]
    MAP = "map"  # dict[str, T]


@dataclass(frozen=True)
class TypeRef:
    """An inline type expression."""

    kind: TypeKind = TypeKind.ANY
    name: str = ""  # Declaration name, for IDENTIFIER

    # Element type, for ARRAY and MAP
    type_args: tuple[TypeRef, ...] = ()

    # For LITERAL
    const_value: Any = None

    @staticmethod
    def identifier(name: str) -> TypeRef:
        return TypeRef(kind=TypeKind.IDENTIFIER, name=name)

    @staticmethod
    def array(item: TypeRef) -> TypeRef:
        return TypeRef(kind=TypeKind.ARRAY, type_args=(item,))

    @staticmethod
    def map(value: TypeRef) -> TypeRef:
        return TypeRef(kind=TypeKind.MAP, type_args=(value,))

    @staticmethod
    def literal(value: str) -> TypeRef:
        return TypeRef(kind=TypeKind.LITERAL, const_value=value)

    @property
    def item(self) -> TypeRef:
        """Element type of an ARRAY or MAP."""
        return self.type_args[0]


@dataclass(frozen=True)
class Declaration:
    """Base class for hoisted, named declarations."""

    name: str = ""

    # Schema path the name was derived from
    path: tuple[str, ...] = ()

    description: str | None = None


@dataclass(frozen=True)
class TypeAlias(Declaration):
    """Binds a name to an inline expression."""

    target: TypeRef = field(default_factory=TypeRef)


@dataclass(frozen=True)
class EnumDef(Declaration):
    """A closed set of string constants."""

    values: tuple[str, ...] = ()


@dataclass(frozen=True)
class ConstantDef(Declaration):
    """An addressable constant for one enum member."""

    type_name: str = ""
    value: str = ""


@dataclass(frozen=True)
class FieldDef:
    """A field of an aggregate."""

    name: str = ""  # Target identifier
    json_name: str = ""  # Wire name, verbatim from the schema
    type_ref: TypeRef = field(default_factory=TypeRef)
    is_required: bool = True
    description: str | None = None


@dataclass(frozen=True)
class ClassDef(Declaration):
    """A named aggregate (struct, interface, dataclass)."""

    fields: tuple[FieldDef, ...] = ()

    # Whether the schema allows properties beyond the declared ones
    additional: bool = False

    # (union name, tag value) when this aggregate is a discriminator case
    variant_of: tuple[str, str] | None = None


@dataclass(frozen=True)
class UnionDef(Declaration):
    """The holder of a discriminated union; its codec says how it is encoded."""

    codec: UnionCodec | None = None


@dataclass(frozen=True)
class IR:
    """The complete Intermediate Representation for one target."""

    root_name: str = ""
    target: str = ""

    # All declarations, in traversal order
    declarations: tuple[Declaration, ...] = ()

    def by_name(self) -> dict[str, Declaration]:
        """Index declarations by identifier."""
        return {decl.name: decl for decl in self.declarations}

    def of_type(self, kind: type[Declaration]) -> list[Declaration]:
        return [decl for decl in self.declarations if isinstance(decl, kind)]
