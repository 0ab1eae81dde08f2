"""
Functional tests driven by the JSON cases in test_data/functional.

Each case holds a schema (inline or by file), an optional config and the
patterns that must or must not appear in the output of one target.
"""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from jsl_codegen.pipeline import CodeGeneratorConfig, PipelineGenerator

TEST_DATA_DIR = Path(__file__).parent / "test_data"


def load_all_test_cases():
    """Load all test cases from all JSON files in test_data/functional directory."""
    test_cases = []

    for json_file in sorted((TEST_DATA_DIR / "functional").glob("*_tests.json")):
        with open(json_file) as f:
            data = json.load(f)

        for test_case in data:
            test_case["_source_file"] = json_file.name
            test_cases.append(test_case)

    return test_cases


def _generate_code(schema, config_dict, language, class_name="TestClass"):
    """Helper to generate code with given schema and config."""
    config = CodeGeneratorConfig()

    if config_dict:
        for key, value in config_dict.items():
            if hasattr(config, key):
                setattr(config, key, value)

    generator = PipelineGenerator(class_name, schema, config, language)
    return generator.generate()


def _load_schema(test_case):
    """Load schema from test case (either inline or from file)."""
    if "schema" in test_case:
        return test_case["schema"]
    elif "schema_file" in test_case:
        with open(TEST_DATA_DIR / test_case["schema_file"]) as f:
            return json.load(f)
    else:
        raise ValueError("Test case must have either 'schema' or 'schema_file'")


@pytest.mark.parametrize("test_case", load_all_test_cases(), ids=lambda tc: tc["name"])
def test_functional_generation(test_case):
    """Unified test for all JSON test cases using a single pattern."""
    language = test_case["test_language"]
    schema = _load_schema(test_case)
    generated_code = _generate_code(schema, test_case.get("config", {}), language)

    for pattern in test_case.get("expected_contains", []):
        assert pattern in generated_code, f"Expected pattern {pattern!r} not found in {language} output:\n{generated_code}"

    for pattern in test_case.get("expected_not_contains", []):
        assert pattern not in generated_code, f"Unexpected pattern {pattern!r} found in {language} output"


if __name__ == "__main__":
    pytest.main([__file__])
