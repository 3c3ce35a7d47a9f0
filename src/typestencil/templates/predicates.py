"""Capability predicates over reflected declarations.

Plain functions of one object (and, for some, one string argument). They are
lifted into template filters by the adapters in ``adapters``.
"""

from typing import Any

from ..typegraph.models import Declaration, Method, Type, Typed, TypeKind, Variable


def is_computed(variable: Variable) -> bool:
    return variable.is_computed and not variable.is_static


def is_stored(variable: Variable) -> bool:
    return not variable.is_computed and not variable.is_static


def is_tuple(variable: Variable) -> bool:
    return variable.is_tuple


def is_initializer(method: Method) -> bool:
    return method.is_initializer


def is_class_type(type_: Type) -> bool:
    return type_.is_class


def is_class_method(method: Method) -> bool:
    return method.is_class


def is_static_variable(variable: Variable) -> bool:
    return variable.is_static


def is_static_method(method: Method) -> bool:
    return method.is_static


def is_instance_variable(variable: Variable) -> bool:
    return not variable.is_static


def is_instance_method(method: Method) -> bool:
    return not (method.is_static or method.is_class)


def is_enum(type_: Type) -> bool:
    return type_.kind is TypeKind.ENUM


def is_struct(type_: Type) -> bool:
    return type_.kind is TypeKind.STRUCT


def is_protocol(type_: Type) -> bool:
    return type_.kind is TypeKind.PROTOCOL


def type_is_based_on(type_: Type, name: str) -> bool:
    return name in type_.based


def typed_is_based_on(typed: Typed, name: str) -> bool:
    return typed.type is not None and name in typed.type.based


def type_implements(type_: Type, name: str) -> bool:
    return name in type_.implements


def typed_implements(typed: Typed, name: str) -> bool:
    return typed.type is not None and name in typed.type.implements


def type_inherits(type_: Type, name: str) -> bool:
    return name in type_.inherits


def typed_inherits(typed: Typed, name: str) -> bool:
    return typed.type is not None and name in typed.type.inherits


def annotation_text(value: Any) -> str:
    """String form of an annotation value, booleans spelled as in source."""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def is_annotated_with(declaration: Declaration, annotation: str) -> bool:
    """Check a declaration's annotations.

    ``"key"`` checks that the annotation is present. ``"key=value"`` checks
    that its string form equals ``value``; the text is split on the first
    ``=`` and both sides are stripped.

    Args:
        declaration: Annotated declaration
        annotation: Annotation name, optionally with ``=value``

    Returns:
        True if the declaration carries the annotation
    """
    if "=" in annotation:
        key, _, expected = annotation.partition("=")
        key = key.strip()
        if key not in declaration.annotations:
            return False
        return annotation_text(declaration.annotations[key]) == expected.strip()
    return annotation in declaration.annotations


def contains(text: str, other: str) -> bool:
    return other in text


def has_prefix(text: str, prefix: str) -> bool:
    return text.startswith(prefix)


def has_suffix(text: str, suffix: str) -> bool:
    return text.endswith(suffix)
