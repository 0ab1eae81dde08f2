"""
Case conversion helpers shared by the namers and the CLI.
"""

import re

# Regex pattern to split text into words, handling camelCase boundaries and
# upper-case runs ("HTTPServer" -> "HTTP", "Server")
_WORD_PATTERN = re.compile(r"[A-Z]+(?![a-z])|[A-Z]?[a-z]+|[0-9]+")


def _normalize_separators(text: str) -> str:
    """Normalize separators (underscores, hyphens, dots) to spaces."""
    return text.replace("_", " ").replace("-", " ").replace(".", " ")


def split_words(text: str) -> list[str]:
    """Split text into words, handling camelCase boundaries.

    Characters outside ``[A-Za-z0-9]`` act as separators and are dropped.
    """
    return _WORD_PATTERN.findall(_normalize_separators(text))


def to_pascal_case(text: str) -> str:
    """Convert snake_case, camelCase, or space-separated text to PascalCase.

    Examples:
        "first_name" -> "FirstName"
        "FIRST_NAME" -> "FirstName"
        "actionTemplate" -> "ActionTemplate"
        "shape_circle" -> "ShapeCircle"
        "first 3 rows" -> "First3Rows"
        "HTTPServer" -> "HttpServer"

    Args:
        text: The text to convert

    Returns:
        PascalCase string, empty when the text holds no word characters
    """
    if not text:
        return ""
    return "".join(word.capitalize() for word in split_words(text))


def to_snake_case(text: str) -> str:
    """Convert camelCase, PascalCase or hyphenated text to snake_case.

    Examples:
        "userId" -> "user_id"
        "Created-At" -> "created_at"
    """
    return "_".join(word.lower() for word in split_words(text))
