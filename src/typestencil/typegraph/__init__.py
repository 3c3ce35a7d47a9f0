"""Reflected type model rendered by templates."""

from .collection import TypesCollection
from .loader import (
    TypeGraphDocument,
    build_type_graph,
    load_type_graph,
    parse_type_graph,
)
from .models import (
    Declaration,
    Method,
    MethodParameter,
    Type,
    Typed,
    TypeKind,
    Variable,
)

__all__ = [
    "Declaration",
    "Method",
    "MethodParameter",
    "Type",
    "Typed",
    "TypeKind",
    "Variable",
    "TypesCollection",
    "TypeGraphDocument",
    "build_type_graph",
    "load_type_graph",
    "parse_type_graph",
]
