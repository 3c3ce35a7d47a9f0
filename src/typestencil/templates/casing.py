"""Identifier casing transforms exposed as template filters."""

import re
from typing import Any, List

from .adapters import is_collection

_UPPERCASE_INSIDE_WORD = re.compile(r"(?<=[^\s_])([A-Z])")


def _capitalized_words(text: str) -> str:
    return "".join(word.capitalize() for word in text.split(" "))


def camel_cased(text: str) -> str:
    """Convert text to camelCase.

    Text containing spaces is treated as several words: each word is
    capitalized and the spaces are removed. Only the first character of the
    result is lowercased, the rest of an unspaced identifier is kept as is.

    Args:
        text: Identifier or space separated words

    Returns:
        camelCased identifier
    """
    if " " in text:
        text = _capitalized_words(text)
    return text[:1].lower() + text[1:]


def pascal_cased(text: str) -> str:
    """Convert text to PascalCase.

    Args:
        text: Identifier or space separated words

    Returns:
        PascalCased identifier
    """
    if " " in text:
        return _capitalized_words(text)
    return text[:1].upper() + text[1:]


def snake_cased(text: str) -> str:
    """Convert text to snake_case.

    An underscore goes before every uppercase letter that does not start the
    text or follow a space or underscore, spaces become underscores and the
    result is lowercased.

    Args:
        text: Identifier or space separated words

    Returns:
        snake_cased identifier
    """
    if any(char.isupper() for char in text):
        text = _UPPERCASE_INSIDE_WORD.sub(r"_\1", text)
    return text.replace(" ", "_").lower()


def dotted_name_to_camel_cased(text: str) -> str:
    """Flatten a dotted name such as ``foo.bar.baz`` into ``fooBarBaz``."""
    segments: List[str] = [segment for segment in text.split(".") if segment]
    return camel_cased("".join(pascal_cased(segment) for segment in segments))


def undotted(text: str) -> str:
    """Remove every dot from text."""
    return text.replace(".", "")


def upper_first(text: str) -> str:
    """Uppercase the first character of text only."""
    return text[:1].upper() + text[1:]


def count(value: Any) -> Any:
    """Return the number of elements of a collection.

    Any other value, strings included, is returned unchanged.
    """
    if is_collection(value):
        return len(list(value))
    return value
