"""
JSON Schema Language parser that builds the schema AST.

Phase 1 of the pipeline: validate the raw JSON document and turn it into
schema nodes. Everything the transformer later assumes about its input
(refs resolve, discriminator cases are properties-form, property names are
disjoint) is checked here, once.
"""

from __future__ import annotations

from typing import Any

from ..errors import SchemaError
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

# Keywords that select a form; properties and optionalProperties share one
FORM_KEYWORDS = {
    "ref": "ref",
    "type": "type",
    "enum": "enum",
    "elements": "elements",
    "properties": "properties",
    "optionalProperties": "properties",
    "values": "values",
    "discriminator": "discriminator",
}

# Keywords that belong to the grammar but do not select a form
STRUCTURAL_KEYWORDS = {"definitions", "additionalProperties"}


class SchemaParser:
    """Parses a JSL document into a SchemaAST."""

    def parse(self, schema: Any, root_name: str) -> SchemaAST:
        """
        Parse and validate a JSL document.

        Args:
            schema: The decoded JSON document
            root_name: Name for the root declaration

        Returns:
            SchemaAST with parsed definitions and root node

        Raises:
            SchemaError: If the document is not a valid schema
        """
        if not isinstance(schema, dict):
            raise SchemaError("schema must be a JSON object")

        raw_definitions = schema.get("definitions", {})
        if not isinstance(raw_definitions, dict):
            raise SchemaError("definitions must be an object", "#/definitions")

        definitions: dict[str, SchemaNode] = {}
        for name, def_schema in raw_definitions.items():
            definitions[name] = self._parse_schema_node(def_schema, f"#/definitions/{_escape(name)}")

        root_node = self._parse_schema_node(schema, "#", is_root=True)

        ast = SchemaAST(root_name=root_name, root_node=root_node, definitions=definitions)
        self._check_refs(ast)
        return ast

    def _parse_schema_node(self, schema: Any, path: str, is_root: bool = False) -> SchemaNode:
        """
        Parse a schema node recursively.

        Args:
            schema: The schema dictionary
            path: Current path in schema (for error messages)
            is_root: Whether this is the document root (the only place definitions may appear)

        Returns:
            Appropriate SchemaNode subclass
        """
        if not isinstance(schema, dict):
            raise SchemaError("schema must be a JSON object", path)

        if not is_root and "definitions" in schema:
            raise SchemaError("definitions are only allowed at the root", path)

        metadata = self._extract_metadata(schema)

        forms = {FORM_KEYWORDS[key] for key in schema if key in FORM_KEYWORDS}
        if len(forms) > 1:
            raise SchemaError(f"schema mixes incompatible forms: {', '.join(sorted(forms))}", path)

        if "additionalProperties" in schema and forms != {"properties"}:
            raise SchemaError("additionalProperties requires properties or optionalProperties", path)

        if not forms:
            return EmptyNode(source_path=path, metadata=metadata)

        form = forms.pop()
        if form == "ref":
            return self._parse_ref_node(schema, path, metadata)
        if form == "type":
            return self._parse_type_node(schema, path, metadata)
        if form == "enum":
            return self._parse_enum_node(schema, path, metadata)
        if form == "elements":
            return ElementsNode(
                elements=self._parse_schema_node(schema["elements"], f"{path}/elements"),
                source_path=path,
                metadata=metadata,
            )
        if form == "properties":
            return self._parse_properties_node(schema, path, metadata)
        if form == "values":
            return ValuesNode(
                values=self._parse_schema_node(schema["values"], f"{path}/values"),
                source_path=path,
                metadata=metadata,
            )
        return self._parse_discriminator_node(schema, path, metadata)

    def _extract_metadata(self, schema: dict[str, Any]) -> dict[str, Any]:
        """Extract keywords outside the grammar (description, x-* extensions, ...)."""
        return {key: value for key, value in schema.items() if key not in FORM_KEYWORDS and key not in STRUCTURAL_KEYWORDS}

    def _parse_ref_node(self, schema: dict[str, Any], path: str, metadata: dict[str, Any]) -> RefNode:
        """Parse a ref node. Resolution is checked once the whole document is parsed."""
        ref = schema["ref"]
        if not isinstance(ref, str):
            raise SchemaError("ref must be a string", f"{path}/ref")
        return RefNode(definition=ref, source_path=path, metadata=metadata)

    def _parse_type_node(self, schema: dict[str, Any], path: str, metadata: dict[str, Any]) -> TypeNode:
        """Parse a primitive type node."""
        type_value = schema["type"]
        try:
            type_name = PrimitiveType(type_value)
        except ValueError:
            allowed = ", ".join(t.value for t in PrimitiveType)
            raise SchemaError(f"type must be one of {allowed}, got {type_value!r}", f"{path}/type") from None
        return TypeNode(type_name=type_name, source_path=path, metadata=metadata)

    def _parse_enum_node(self, schema: dict[str, Any], path: str, metadata: dict[str, Any]) -> EnumNode:
        """Parse an enum node."""
        values = schema["enum"]
        if not isinstance(values, list) or not values:
            raise SchemaError("enum must be a non-empty array", f"{path}/enum")
        if not all(isinstance(v, str) for v in values):
            raise SchemaError("enum values must be strings", f"{path}/enum")
        if len(set(values)) != len(values):
            raise SchemaError("enum values must be unique", f"{path}/enum")
        return EnumNode(values=tuple(values), source_path=path, metadata=metadata)

    def _parse_properties_node(
        self,
        schema: dict[str, Any],
        path: str,
        metadata: dict[str, Any],
    ) -> PropertiesNode:
        """Parse a properties node (required and optional properties)."""
        required = self._parse_property_map(schema, "properties", path)
        optional = self._parse_property_map(schema, "optionalProperties", path)

        shared = required.keys() & optional.keys()
        if shared:
            raise SchemaError(f"properties and optionalProperties share {', '.join(sorted(shared))}", path)

        additional = schema.get("additionalProperties", False)
        if not isinstance(additional, bool):
            raise SchemaError("additionalProperties must be a boolean", f"{path}/additionalProperties")

        return PropertiesNode(
            required=required,
            optional=optional,
            additional=additional,
            source_path=path,
            metadata=metadata,
        )

    def _parse_property_map(self, schema: dict[str, Any], keyword: str, path: str) -> dict[str, SchemaNode]:
        raw = schema.get(keyword, {})
        if not isinstance(raw, dict):
            raise SchemaError(f"{keyword} must be an object", f"{path}/{keyword}")
        return {name: self._parse_schema_node(prop, f"{path}/{keyword}/{_escape(name)}") for name, prop in raw.items()}

    def _parse_discriminator_node(
        self,
        schema: dict[str, Any],
        path: str,
        metadata: dict[str, Any],
    ) -> DiscriminatorNode:
        """Parse a discriminator node (tagged union)."""
        discriminator = schema["discriminator"]
        disc_path = f"{path}/discriminator"
        if not isinstance(discriminator, dict):
            raise SchemaError("discriminator must be an object", disc_path)

        tag = discriminator.get("tag")
        if not isinstance(tag, str):
            raise SchemaError("discriminator tag must be a string", f"{disc_path}/tag")

        raw_mapping = discriminator.get("mapping")
        if not isinstance(raw_mapping, dict):
            raise SchemaError("discriminator mapping must be an object", f"{disc_path}/mapping")

        mapping: dict[str, SchemaNode] = {}
        for case_name, case_schema in raw_mapping.items():
            case_path = f"{disc_path}/mapping/{_escape(case_name)}"
            case_node = self._parse_schema_node(case_schema, case_path)
            if not isinstance(case_node, PropertiesNode):
                raise SchemaError("discriminator mapping values must be of the properties form", case_path)
            if tag in case_node.required or tag in case_node.optional:
                raise SchemaError(f"discriminator case redefines the tag property {tag!r}", case_path)
            mapping[case_name] = case_node

        return DiscriminatorNode(tag=tag, mapping=mapping, source_path=path, metadata=metadata)

    def _check_refs(self, ast: SchemaAST) -> None:
        """Ensure every ref names an existing definition."""
        for node in _walk(ast):
            if isinstance(node, RefNode) and node.definition not in ast.definitions:
                raise SchemaError(f"ref to undefined definition {node.definition!r}", node.source_path)

        # A chain of bare refs must end in a definition of another form
        for name, node in ast.definitions.items():
            chain = [name]
            while isinstance(node, RefNode):
                if node.definition in chain:
                    cycle = " -> ".join([*chain, node.definition])
                    raise SchemaError(f"ref cycle without a concrete type: {cycle}", ast.definitions[name].source_path)
                chain.append(node.definition)
                node = ast.definitions[node.definition]


def _walk(ast: SchemaAST):
    """Yield every node of the document, definitions first."""
    stack = list(reversed([*ast.definitions.values(), ast.root_node]))
    while stack:
        node = stack.pop()
        yield node
        if isinstance(node, ElementsNode) and node.elements is not None:
            stack.append(node.elements)
        elif isinstance(node, ValuesNode) and node.values is not None:
            stack.append(node.values)
        elif isinstance(node, PropertiesNode):
            stack.extend(reversed([*node.required.values(), *node.optional.values()]))
        elif isinstance(node, DiscriminatorNode):
            stack.extend(reversed(list(node.mapping.values())))


def _escape(segment: str) -> str:
    """Escape a key for use in a JSON pointer."""
    return segment.replace("~", "~0").replace("/", "~1")
