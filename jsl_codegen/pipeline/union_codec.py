"""
Union codec designer.

Decides how a discriminator node is represented in a target and how its
generated code moves between that representation and the wire shape.

The wire shape is always one flat JSON object: the tag member plus the
members of the variant it selects, side by side. Two strategies cover the
targets:

TWO_PASS
    Variants carry only their own fields. A holder type carries the tag
    string and the active variant, typed as a closed sum over the variants.
    Decoding reads the tag alone, then decodes the whole object again into
    the variant the tag selects. Encoding checks that the active variant is
    the one the holder's tag names (a mismatch is fatal), then writes the tag
    followed by every variant field into a single object.

NATIVE_UNION
    The target has structural tagged unions. Each variant declares the tag
    as a required field whose type is its literal tag value, and the holder
    is simply the union of the variants. No runtime code is generated.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum

from .errors import InvariantViolation, NameCollisionError
from .naming import IdentifierNamer


class CodecStrategy(str, Enum):
    """How a discriminated union is represented in a target."""

    TWO_PASS = "two_pass"
    NATIVE_UNION = "native_union"


@dataclass(frozen=True)
class UnionCase:
    """One discriminator mapping entry."""

    tag_value: str
    variant_name: str


@dataclass(frozen=True)
class UnionCodec:
    """Everything an emitter needs to render a discriminated union."""

    strategy: CodecStrategy
    tag_json_name: str

    # Holder member identifiers (TWO_PASS only)
    tag_field: str = ""
    value_field: str = ""

    # Name of the closed sum over the variants (TWO_PASS only)
    variant_type_name: str = ""

    cases: tuple[UnionCase, ...] = ()

    @property
    def variant_names(self) -> list[str]:
        return [case.variant_name for case in self.cases]

    def variant_for(self, tag_value: str) -> str:
        """Variant declaration selected by ``tag_value``."""
        for case in self.cases:
            if case.tag_value == tag_value:
                return case.variant_name
        raise KeyError(tag_value)

    def tag_for(self, variant_name: str) -> str:
        """Tag value that selects ``variant_name``."""
        for case in self.cases:
            if case.variant_name == variant_name:
                return case.tag_value
        raise KeyError(variant_name)


class UnionCodecDesigner:
    """Builds the UnionCodec for each discriminator node of one target."""

    def __init__(self, namer: IdentifierNamer, native_tagged_unions: bool = False):
        self.namer = namer
        self.strategy = CodecStrategy.NATIVE_UNION if native_tagged_unions else CodecStrategy.TWO_PASS

    def design(self, union_name: str, tag: str, cases: Sequence[tuple[str, str]], path: Sequence[str] = ()) -> UnionCodec:
        """
        Design the codec of one discriminated union.

        Args:
            union_name: Identifier of the holder declaration
            tag: Wire name of the tag member
            cases: (tag value, variant declaration name) pairs, in mapping order
            path: Schema path of the union, for error messages

        Returns:
            The codec to attach to the holder declaration

        Raises:
            InvariantViolation: If a tag value repeats or two tags share a variant
            NameCollisionError: If the holder's members fold to the same identifier
        """
        union_cases = tuple(UnionCase(tag_value=value, variant_name=variant) for value, variant in cases)
        self._check_bijective(union_name, union_cases)

        if self.strategy == CodecStrategy.NATIVE_UNION:
            return UnionCodec(strategy=self.strategy, tag_json_name=tag, cases=union_cases)

        tag_field = self.namer.field_name(tag)
        value_field = self.namer.value_field_name
        if tag_field == value_field:
            raise NameCollisionError(tag_field, [*path, tag], [*path, "<value>"])

        return UnionCodec(
            strategy=self.strategy,
            tag_json_name=tag,
            tag_field=tag_field,
            value_field=value_field,
            variant_type_name=self.namer.variant_interface_name(union_name),
            cases=union_cases,
        )

    def _check_bijective(self, union_name: str, cases: tuple[UnionCase, ...]) -> None:
        tag_values = [case.tag_value for case in cases]
        variants = [case.variant_name for case in cases]
        if len(set(tag_values)) != len(tag_values):
            raise InvariantViolation(f"union {union_name} repeats a tag value: {tag_values}")
        if len(set(variants)) != len(variants):
            raise InvariantViolation(f"union {union_name} maps two tags to one variant: {variants}")
