"""
Tests for the discriminated union codec designer.
"""

from __future__ import annotations

import pytest

from jsl_codegen.pipeline.errors import InvariantViolation, NameCollisionError
from jsl_codegen.pipeline.naming import GoNamer, PythonNamer, TypeScriptNamer
from jsl_codegen.pipeline.union_codec import CodecStrategy, UnionCase, UnionCodecDesigner

CASES = [("circle", "ShapeCircle"), ("square", "ShapeSquare")]


def test_two_pass_codec():
    codec = UnionCodecDesigner(GoNamer()).design("Shape", "type", CASES)
    assert codec.strategy == CodecStrategy.TWO_PASS
    assert codec.tag_json_name == "type"
    assert codec.tag_field == "Type"
    assert codec.value_field == "Val"
    assert codec.variant_type_name == "ShapeVariant"
    assert codec.cases == (UnionCase("circle", "ShapeCircle"), UnionCase("square", "ShapeSquare"))


def test_native_codec_has_no_holder_members():
    codec = UnionCodecDesigner(TypeScriptNamer(), native_tagged_unions=True).design("Shape", "type", CASES)
    assert codec.strategy == CodecStrategy.NATIVE_UNION
    assert (codec.tag_field, codec.value_field, codec.variant_type_name) == ("", "", "")
    assert codec.variant_names == ["ShapeCircle", "ShapeSquare"]


def test_lookups_are_inverse():
    codec = UnionCodecDesigner(PythonNamer()).design("Shape", "kind", CASES)
    for tag_value, variant in CASES:
        assert codec.variant_for(tag_value) == variant
        assert codec.tag_for(variant) == tag_value

    with pytest.raises(KeyError):
        codec.variant_for("triangle")
    with pytest.raises(KeyError):
        codec.tag_for("ShapeTriangle")


def test_repeated_tag_value():
    with pytest.raises(InvariantViolation):
        UnionCodecDesigner(GoNamer()).design("Shape", "type", [("a", "A"), ("a", "B")])


def test_shared_variant():
    with pytest.raises(InvariantViolation):
        UnionCodecDesigner(GoNamer()).design("Shape", "type", [("a", "A"), ("b", "A")])


def test_tag_member_colliding_with_value_member():
    with pytest.raises(NameCollisionError) as exc_info:
        UnionCodecDesigner(GoNamer()).design("Shape", "val", CASES, path=["Shape"])
    assert exc_info.value.identifier == "Val"
    assert exc_info.value.first == ("Shape", "val")


def test_empty_mapping():
    codec = UnionCodecDesigner(GoNamer()).design("Nothing", "type", [])
    assert codec.cases == ()
    assert codec.variant_names == []
