"""Template filter catalog and registry.

Every filter is described by a record in ``FILTER_CATALOG``. Boolean filters
are ``BoolFilter`` records, which build the filter and its negation (the same
name prefixed with ``!``) together from the same predicates.
"""

import logging
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Callable, Dict, Mapping, Optional, Tuple

from ..typegraph.models import Declaration, Method, Type, Typed, Variable
from . import casing, predicates
from .adapters import (
    Filter,
    Kind,
    either_filter,
    predicate_filter,
    transform_filter,
    with_argument,
)

logger = logging.getLogger(__name__)

NEGATION_PREFIX = "!"

# Jinja2 filter names must be identifiers, negated filters are installed under
# this prefix instead of NEGATION_PREFIX.
NEGATED_ALIAS_PREFIX = "not_"

Case = Tuple[Kind, Callable[..., bool]]


def _complement(predicate: Callable[..., bool]) -> Callable[..., bool]:
    def negated(item: Any, *args: Any) -> bool:
        return not predicate(item, *args)

    return negated


@dataclass(frozen=True)
class BoolFilter:
    """A boolean filter paired with its negation.

    Attributes:
        name: Filter name; the negation is registered as ``!name``
        cases: One (kind, predicate) pair, or two for dual-type filters
        argument: Type of the single filter argument, None for no argument
        description: Short help text
        example: Template usage example
    """

    name: str
    cases: Tuple[Case, ...]
    argument: Optional[type] = None
    description: str = ""
    example: str = ""

    @property
    def negated_name(self) -> str:
        return NEGATION_PREFIX + self.name

    def build(self) -> Dict[str, Filter]:
        """Build the filter and its negation."""
        negated_cases = tuple((kind, _complement(check)) for kind, check in self.cases)
        return {
            self.name: self._lift(self.name, self.cases),
            self.negated_name: self._lift(self.negated_name, negated_cases),
        }

    def _lift(self, name: str, cases: Tuple[Case, ...]) -> Filter:
        if len(cases) == 1:
            kind, check = cases[0]
            apply = predicate_filter(kind, check)
        elif len(cases) == 2:
            (first_kind, first), (second_kind, second) = cases
            apply = either_filter(first_kind, first, second_kind, second)
        else:
            raise ValueError(
                f"Filter '{name}' must have one or two cases, got {len(cases)}"
            )

        if self.argument is not None:
            return with_argument(name, apply, self.argument)
        return apply


@dataclass(frozen=True)
class TransformFilter:
    """A filter mapping objects of one kind to new values."""

    name: str
    kind: Kind
    transform: Callable[..., Any]
    description: str = ""
    example: str = ""

    def build(self) -> Dict[str, Filter]:
        return {self.name: transform_filter(self.kind, self.transform)}


@dataclass(frozen=True)
class ValueFilter:
    """A filter applied to the value as a whole."""

    name: str
    apply: Filter
    description: str = ""
    example: str = ""

    def build(self) -> Dict[str, Filter]:
        return {self.name: self.apply}


FILTER_CATALOG = (
    # String transforms
    TransformFilter(
        "upperFirst",
        str,
        casing.upper_first,
        "Uppercase the first character",
        "{{ 'name' | upperFirst }} → Name",
    ),
    TransformFilter(
        "camelCased",
        str,
        casing.camel_cased,
        "Convert to camelCase",
        "{{ 'Hello World' | camelCased }} → helloWorld",
    ),
    TransformFilter(
        "PascalCased",
        str,
        casing.pascal_cased,
        "Convert to PascalCase",
        "{{ 'hello world' | PascalCased }} → HelloWorld",
    ),
    TransformFilter(
        "snake_cased",
        str,
        casing.snake_cased,
        "Convert to snake_case",
        "{{ 'HelloWorld' | snake_cased }} → hello_world",
    ),
    TransformFilter(
        "dottedNameToCamelCased",
        str,
        casing.dotted_name_to_camel_cased,
        "Flatten a dotted name into camelCase",
        "{{ 'foo.bar.baz' | dottedNameToCamelCased }} → fooBarBaz",
    ),
    TransformFilter(
        "undotted",
        str,
        casing.undotted,
        "Remove dots",
        "{{ 'a.b.c' | undotted }} → abc",
    ),
    ValueFilter(
        "count",
        casing.count,
        "Number of elements of a collection",
        "{{ type.variables | count }}",
    ),
    # String predicates
    BoolFilter(
        "contains",
        ((str, predicates.contains),),
        argument=str,
        description="String contains the argument",
        example="{{ name | contains('Id') }}",
    ),
    BoolFilter(
        "hasPrefix",
        ((str, predicates.has_prefix),),
        argument=str,
        description="String starts with the argument",
        example="{{ name | hasPrefix('is') }}",
    ),
    BoolFilter(
        "hasSuffix",
        ((str, predicates.has_suffix),),
        argument=str,
        description="String ends with the argument",
        example="{{ name | hasSuffix('Id') }}",
    ),
    # Variables
    BoolFilter(
        "computed",
        ((Variable, predicates.is_computed),),
        description="Computed instance variables",
        example="{{ type.variables | computed }}",
    ),
    BoolFilter(
        "stored",
        ((Variable, predicates.is_stored),),
        description="Stored instance variables",
        example="{{ type.variables | stored }}",
    ),
    BoolFilter(
        "tuple",
        ((Variable, predicates.is_tuple),),
        description="Variables of tuple type",
        example="{{ type.variables | tuple }}",
    ),
    # Methods
    BoolFilter(
        "initializer",
        ((Method, predicates.is_initializer),),
        description="Initializer methods",
        example="{{ type.methods | initializer }}",
    ),
    # Types and methods or variables
    BoolFilter(
        "class",
        ((Type, predicates.is_class_type), (Method, predicates.is_class_method)),
        description="Class types, or class-scoped methods",
        example="{{ types.all | class }}",
    ),
    BoolFilter(
        "static",
        (
            (Variable, predicates.is_static_variable),
            (Method, predicates.is_static_method),
        ),
        description="Static variables or methods",
        example="{{ type.methods | static }}",
    ),
    BoolFilter(
        "instance",
        (
            (Variable, predicates.is_instance_variable),
            (Method, predicates.is_instance_method),
        ),
        description="Instance variables or methods",
        example="{{ type.methods | instance }}",
    ),
    # Types
    BoolFilter(
        "enum",
        ((Type, predicates.is_enum),),
        description="Enum types",
        example="{{ types.all | enum }}",
    ),
    BoolFilter(
        "struct",
        ((Type, predicates.is_struct),),
        description="Struct types",
        example="{{ types.all | struct }}",
    ),
    BoolFilter(
        "protocol",
        ((Type, predicates.is_protocol),),
        description="Protocol types",
        example="{{ types.all | protocol }}",
    ),
    # Relationships, directly on a type or through a typed declaration
    BoolFilter(
        "based",
        (
            (Type, predicates.type_is_based_on),
            (Typed, predicates.typed_is_based_on),
        ),
        argument=str,
        description="Names the argument in its inheritance clause",
        example="{{ types.all | based('Codable') }}",
    ),
    BoolFilter(
        "implements",
        (
            (Type, predicates.type_implements),
            (Typed, predicates.typed_implements),
        ),
        argument=str,
        description="Implements the protocol",
        example="{{ type.variables | implements('AutoEquatable') }}",
    ),
    BoolFilter(
        "inherits",
        (
            (Type, predicates.type_inherits),
            (Typed, predicates.typed_inherits),
        ),
        argument=str,
        description="Inherits from the type",
        example="{{ types.classes | inherits('BaseView') }}",
    ),
    # Annotations
    BoolFilter(
        "annotated",
        ((Declaration, predicates.is_annotated_with),),
        argument=str,
        description="Carries the annotation, optionally with a value",
        example="{{ type.variables | annotated('skip') }}",
    ),
)


def build_filter_registry() -> Mapping[str, Filter]:
    """Build the table of all template filters.

    Returns:
        Read-only mapping of filter name to filter, negations included
    """
    registry: Dict[str, Filter] = {}
    for record in FILTER_CATALOG:
        for name, apply in record.build().items():
            if name in registry:
                raise ValueError(f"Duplicate template filter name: {name}")
            registry[name] = apply

    logger.debug(f"Built filter registry with {len(registry)} filters")
    return MappingProxyType(registry)


def argument_types(registry: Mapping[str, Filter]) -> Dict[str, type]:
    """Expected argument type of every argument-taking filter in a registry."""
    return {
        name: apply.argument_type  # type: ignore[attr-defined]
        for name, apply in registry.items()
        if hasattr(apply, "argument_type")
    }


def jinja_filter_name(name: str) -> str:
    """Name under which a registry filter is installed in Jinja2."""
    if name.startswith(NEGATION_PREFIX):
        return NEGATED_ALIAS_PREFIX + name[len(NEGATION_PREFIX) :]
    return name


def install_filters(env: Any, registry: Mapping[str, Filter]) -> None:
    """Register all filters of a registry with a Jinja2 environment.

    Args:
        env: Jinja2 Environment instance
        registry: Filter table from build_filter_registry
    """
    for name, apply in registry.items():
        env.filters[jinja_filter_name(name)] = apply
