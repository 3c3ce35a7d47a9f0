"""Template filters and rendering for typestencil code generation."""

from .adapters import (
    FilterSyntaxError,
    either_filter,
    is_collection,
    predicate_filter,
    transform_filter,
    with_argument,
)
from .casing import (
    camel_cased,
    count,
    dotted_name_to_camel_cased,
    pascal_cased,
    snake_cased,
    undotted,
    upper_first,
)
from .engine import TemplateEngine
from .filters import (
    FILTER_CATALOG,
    BoolFilter,
    TransformFilter,
    ValueFilter,
    build_filter_registry,
    install_filters,
)

__all__ = [
    "TemplateEngine",
    "FilterSyntaxError",
    "FILTER_CATALOG",
    "BoolFilter",
    "TransformFilter",
    "ValueFilter",
    "build_filter_registry",
    "install_filters",
    "predicate_filter",
    "transform_filter",
    "either_filter",
    "with_argument",
    "is_collection",
    "camel_cased",
    "pascal_cased",
    "snake_cased",
    "dotted_name_to_camel_cased",
    "undotted",
    "upper_first",
    "count",
]
