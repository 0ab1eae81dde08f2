"""
Type transformer that turns the schema AST into IR.

Phase 2 of the pipeline. Walks the schema depth-first, returning an inline
type expression for every node and hoisting a named declaration for every
node whose form needs one. Definitions and the root are then coerced to a
named declaration so that every ref resolves.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass

from .errors import InvariantViolation, NameCollisionError
from .ir_nodes import (
    IR,
    ClassDef,
    ConstantDef,
    Declaration,
    EnumDef,
    FieldDef,
    TypeAlias,
    TypeKind,
    TypeRef,
    UnionDef,
)
from .naming import IdentifierNamer
from .schema_ast.nodes import (
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
from .union_codec import CodecStrategy, UnionCodecDesigner

logger = logging.getLogger(__name__)

PRIMITIVE_KINDS = {
    PrimitiveType.BOOLEAN: TypeKind.BOOLEAN,
    PrimitiveType.NUMBER: TypeKind.NUMBER,
    PrimitiveType.STRING: TypeKind.STRING,
    PrimitiveType.TIMESTAMP: TypeKind.TIMESTAMP,
}


@dataclass(frozen=True)
class TargetCapabilities:
    """What a target language can express natively."""

    # Emit one ConstantDef per enum member (targets without closed string unions)
    enum_constants: bool = False

    # Express discriminated unions as a plain union of tagged variants
    native_tagged_unions: bool = False


class DeclarationBuilder:
    """Collects declarations for a single transform call.

    Owns the identifier -> path table used to reject collisions.
    """

    def __init__(self) -> None:
        self.declarations: list[Declaration] = []
        self._owners: dict[str, tuple[str, ...]] = {}
        self._declared: set[str] = set()

    def reserve(self, name: str, path: Sequence[str]) -> None:
        """Claim ``name`` for ``path``; a claim from another path is a collision."""
        path = tuple(path)
        owner = self._owners.setdefault(name, path)
        if owner != path:
            raise NameCollisionError(name, owner, path)

    def add(self, decl: Declaration) -> None:
        """Append ``decl``; a name is declared at most once, whatever its path."""
        self.reserve(decl.name, decl.path)
        if decl.name in self._declared:
            raise NameCollisionError(decl.name, decl.path, decl.path)
        self._declared.add(decl.name)
        self.declarations.append(decl)


class TypeTransformer:
    """Transforms a schema AST into the IR of one target."""

    def __init__(
        self,
        namer: IdentifierNamer,
        capabilities: TargetCapabilities,
        target: str = "",
        include_descriptions: bool = True,
    ):
        """
        Initialize the transformer.

        Args:
            namer: Identifier namer of the target
            capabilities: Native features of the target
            target: Target name recorded on the IR
            include_descriptions: Whether schema descriptions are carried into the IR
        """
        self.namer = namer
        self.capabilities = capabilities
        self.target = target
        self.codec_designer = UnionCodecDesigner(namer, capabilities.native_tagged_unions)
        self.include_descriptions = include_descriptions

    def transform(self, ast: SchemaAST) -> IR:
        """
        Transform the AST into IR.

        Definitions come first, in document order, each under the one-segment
        path of its name; the root follows under ``[ast.root_name]``.

        Args:
            ast: The parsed schema AST

        Returns:
            IR whose declaration tuple is final

        Raises:
            NameCollisionError: If two paths fold to the same identifier
            InvariantViolation: If the AST breaks an invariant the parser guarantees
        """
        builder = DeclarationBuilder()

        root_type_name = self.namer.type_name([ast.root_name])
        for name in ast.definitions:
            if self.namer.type_name([name]) == root_type_name:
                raise NameCollisionError(root_type_name, ["definitions", name], [ast.root_name])

        for name, definition in ast.definitions.items():
            self._transform_top_level(builder, name, definition)
        self._transform_top_level(builder, ast.root_name, ast.root_node)

        logger.debug("Transformed %s into %d declarations for %s", ast.root_name, len(builder.declarations), self.target or "target")
        return IR(root_name=self.namer.type_name([ast.root_name]), target=self.target, declarations=tuple(builder.declarations))

    def _transform_top_level(self, builder: DeclarationBuilder, name: str, node: SchemaNode) -> TypeRef:
        """Transform a definition or the root and bind it to the name of ``[name]``.

        A list or map has no declaration of its own, so whatever it hoists
        is named under an extra ``item``/``value`` segment, leaving ``[name]``
        to the alias.
        """
        path = [name]
        inner_path = path
        if isinstance(node, ElementsNode):
            inner_path = [name, "item"]
        elif isinstance(node, ValuesNode):
            inner_path = [name, "value"]

        expr = self._transform_node(builder, inner_path, node)
        return self._ensure_named(builder, path, expr, node)

    def _transform_node(self, builder: DeclarationBuilder, path: list[str], node: SchemaNode) -> TypeRef:
        """Return the inline expression for ``node``, hoisting declarations into ``builder``."""
        if isinstance(node, EmptyNode):
            return TypeRef(kind=TypeKind.ANY)

        if isinstance(node, RefNode):
            return TypeRef.identifier(self.namer.type_name([node.definition]))

        if isinstance(node, TypeNode):
            return TypeRef(kind=PRIMITIVE_KINDS[node.type_name])

        if isinstance(node, EnumNode):
            return self._transform_enum(builder, path, node)

        if isinstance(node, ElementsNode):
            return TypeRef.array(self._transform_node(builder, path, node.elements))

        if isinstance(node, PropertiesNode):
            class_def = self._transform_properties(builder, path, node)
            return TypeRef.identifier(class_def.name)

        if isinstance(node, ValuesNode):
            return TypeRef.map(self._transform_node(builder, path, node.values))

        if isinstance(node, DiscriminatorNode):
            return self._transform_discriminator(builder, path, node)

        raise InvariantViolation(f"unknown schema form at {node.source_path}: {type(node).__name__}")

    def _transform_enum(self, builder: DeclarationBuilder, path: list[str], node: EnumNode) -> TypeRef:
        name = self.namer.type_name(path)
        builder.add(EnumDef(name=name, path=tuple(path), description=self._description(node), values=node.values))

        if self.capabilities.enum_constants:
            for value in node.values:
                builder.add(
                    ConstantDef(
                        name=self.namer.constant_name(name, value),
                        path=(*path, value),
                        type_name=name,
                        value=value,
                    )
                )

        return TypeRef.identifier(name)

    def _transform_properties(
        self,
        builder: DeclarationBuilder,
        path: list[str],
        node: PropertiesNode,
        leading: Sequence[FieldDef] = (),
        variant_of: tuple[str, str] | None = None,
    ) -> ClassDef:
        """Hoist a properties node (or discriminator case) into a ClassDef."""
        fields = list(leading)
        for prop_name, prop in node.required.items():
            fields.append(self._transform_prop(builder, path, True, prop_name, prop))
        for prop_name, prop in node.optional.items():
            fields.append(self._transform_prop(builder, path, False, prop_name, prop))

        self._check_field_names(path, fields)

        class_def = ClassDef(
            name=self.namer.type_name(path),
            path=tuple(path),
            description=self._description(node),
            fields=tuple(fields),
            additional=node.additional,
            variant_of=variant_of,
        )
        builder.add(class_def)
        return class_def

    def _transform_prop(
        self,
        builder: DeclarationBuilder,
        path: list[str],
        required: bool,
        name: str,
        prop: SchemaNode,
    ) -> FieldDef:
        path.append(name)
        try:
            type_ref = self._transform_node(builder, path, prop)
        finally:
            path.pop()

        return FieldDef(
            name=self.namer.field_name(name),
            json_name=name,
            type_ref=type_ref,
            is_required=required,
            description=self._description(prop),
        )

    def _transform_discriminator(self, builder: DeclarationBuilder, path: list[str], node: DiscriminatorNode) -> TypeRef:
        name = self.namer.type_name(path)
        native = self.codec_designer.strategy == CodecStrategy.NATIVE_UNION

        cases: list[tuple[str, str]] = []
        for tag_value, case in node.mapping.items():
            if not isinstance(case, PropertiesNode):
                raise InvariantViolation(f"discriminator case {tag_value!r} at {case.source_path} is not of the properties form")

            leading = ()
            if native:
                leading = (
                    FieldDef(
                        name=self.namer.field_name(node.tag),
                        json_name=node.tag,
                        type_ref=TypeRef.literal(tag_value),
                        is_required=True,
                    ),
                )

            path.append(tag_value)
            try:
                variant = self._transform_properties(builder, path, case, leading=leading, variant_of=(name, tag_value))
            finally:
                path.pop()
            cases.append((tag_value, variant.name))

        codec = self.codec_designer.design(name, node.tag, cases, path)
        if codec.variant_type_name:
            builder.reserve(codec.variant_type_name, (*path, "<variant>"))
        builder.add(UnionDef(name=name, path=tuple(path), description=self._description(node), codec=codec))
        return TypeRef.identifier(name)

    def _ensure_named(self, builder: DeclarationBuilder, path: list[str], expr: TypeRef, node: SchemaNode) -> TypeRef:
        """Ensure a definition or the root resolves to a declaration named after its path.

        Anything else (primitive, array, map, any, or a ref to another
        definition) is bound to the name with a TypeAlias.
        """
        name = self.namer.type_name(path)
        if expr.kind == TypeKind.IDENTIFIER and expr.name == name:
            return expr

        builder.add(TypeAlias(name=name, path=tuple(path), description=self._description(node), target=expr))
        return TypeRef.identifier(name)

    def _check_field_names(self, path: Sequence[str], fields: Sequence[FieldDef]) -> None:
        """Reject two wire names folding to the same field identifier."""
        seen: dict[str, str] = {}
        for field in fields:
            other = seen.setdefault(field.name, field.json_name)
            if other != field.json_name:
                raise NameCollisionError(field.name, [*path, other], [*path, field.json_name])

    def _description(self, node: SchemaNode) -> str | None:
        return node.description if self.include_descriptions else None
