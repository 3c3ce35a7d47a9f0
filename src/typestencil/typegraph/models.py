"""Reflected type model queried by template filters.

The model is a closed set of declaration kinds. Filters dispatch on these
classes, so every object handed to a template is one of ``Type``,
``Variable``, ``Method`` or ``MethodParameter``.

Objects reference each other in cycles (a type's variables point back at
types), so they compare by identity and keep their reprs shallow.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


class TypeKind(str, Enum):
    """Kinds of reflected types."""

    CLASS = "class"
    STRUCT = "struct"
    ENUM = "enum"
    PROTOCOL = "protocol"


@dataclass(eq=False)
class Declaration:
    """Named declaration carrying source annotations.

    Attributes:
        name: Declared name
        annotations: Annotation values keyed by annotation name
    """

    name: str
    annotations: Dict[str, Any] = field(default_factory=dict, repr=False)


@dataclass(eq=False)
class Type(Declaration):
    """A reflected type.

    Attributes:
        kind: Class, struct, enum or protocol
        variables: Declared variables in source order
        methods: Declared methods in source order
        based: Names listed in the inheritance clause, keyed by name
        inherits: Known supertypes, transitively, keyed by name
        implements: Known protocols, transitively, keyed by name
    """

    kind: TypeKind = TypeKind.CLASS
    variables: List["Variable"] = field(default_factory=list, repr=False)
    methods: List["Method"] = field(default_factory=list, repr=False)
    based: Dict[str, str] = field(default_factory=dict, repr=False)
    inherits: Dict[str, "Type"] = field(default_factory=dict, repr=False)
    implements: Dict[str, "Type"] = field(default_factory=dict, repr=False)

    @property
    def is_class(self) -> bool:
        return self.kind is TypeKind.CLASS


@dataclass(eq=False)
class Typed(Declaration):
    """Declaration with a type annotation.

    Attributes:
        type_name: Type name as written in source
        type: Resolved type, None when the type is not part of the graph
    """

    type_name: str = ""
    type: Optional[Type] = field(default=None, repr=False)


@dataclass(eq=False)
class Variable(Typed):
    """A stored or computed variable."""

    is_computed: bool = False
    is_static: bool = False
    is_tuple: bool = False


@dataclass(eq=False)
class MethodParameter(Typed):
    """A method parameter."""


@dataclass(eq=False)
class Method(Declaration):
    """A method or initializer."""

    parameters: List[MethodParameter] = field(default_factory=list, repr=False)
    return_type_name: str = ""
    is_initializer: bool = False
    is_static: bool = False
    is_class: bool = False
