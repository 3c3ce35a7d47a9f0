"""YAML loader for type graphs."""

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .collection import TypesCollection
from .models import Method, MethodParameter, Type, TypeKind, Variable

logger = logging.getLogger(__name__)


class ParameterSpec(BaseModel):
    """Method parameter entry of a type graph document."""

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    name: str
    type_name: str = Field(default="", alias="type")
    annotations: Dict[str, Any] = {}


class VariableSpec(BaseModel):
    """Variable entry of a type graph document.

    Attributes:
        name: Variable name
        type_name: Type as written in source, ``type`` in YAML
        is_computed: Whether the variable has a getter/setter instead of storage
        is_static: Whether the variable belongs to the type
        is_tuple: Whether the variable is a tuple, derived from the type name
            when omitted
        annotations: Source annotations
    """

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    name: str
    type_name: str = Field(default="", alias="type")
    is_computed: bool = False
    is_static: bool = False
    is_tuple: Optional[bool] = None
    annotations: Dict[str, Any] = {}


class MethodSpec(BaseModel):
    """Method entry of a type graph document."""

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    name: str
    parameters: List[ParameterSpec] = []
    return_type_name: str = Field(default="", alias="returns")
    is_initializer: bool = False
    is_static: bool = False
    is_class: bool = False
    annotations: Dict[str, Any] = {}


class TypeSpec(BaseModel):
    """Type entry of a type graph document."""

    model_config = ConfigDict(extra="forbid")

    name: str
    kind: TypeKind = TypeKind.CLASS
    based: List[str] = []
    variables: List[VariableSpec] = []
    methods: List[MethodSpec] = []
    annotations: Dict[str, Any] = {}

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Type name cannot be empty")
        return v


class TypeGraphDocument(BaseModel):
    """Root of a type graph document."""

    model_config = ConfigDict(extra="forbid")

    types: List[TypeSpec] = []

    @field_validator("types")
    @classmethod
    def validate_unique_names(cls, v: List[TypeSpec]) -> List[TypeSpec]:
        seen = set()
        for spec in v:
            if spec.name in seen:
                raise ValueError(f"Duplicate type name: {spec.name}")
            seen.add(spec.name)
        return v


def _looks_like_tuple(type_name: str) -> bool:
    type_name = type_name.strip()
    return type_name.startswith("(") and type_name.endswith(")")


def _supertypes(
    type_: Type, direct: Dict[str, List[Type]], visiting: Optional[set] = None
) -> Dict[str, Type]:
    """All known supertypes of a type, nearest first."""
    visiting = visiting if visiting is not None else {type_.name}
    found: Dict[str, Type] = {}
    for parent in direct[type_.name]:
        if parent.name in visiting:
            continue
        visiting.add(parent.name)
        found[parent.name] = parent
        found.update(_supertypes(parent, direct, visiting))
    return found


def build_type_graph(document: TypeGraphDocument) -> List[Type]:
    """Turn a validated document into linked Type objects.

    Names in a type's ``based`` list that name a protocol of the document go
    into ``implements``, other known types into ``inherits``; both include
    the relationships of supertypes. Variable and parameter type names are
    resolved to types of the document where possible.

    Args:
        document: Validated type graph document

    Returns:
        Types in document order
    """
    types = [
        Type(
            name=spec.name,
            kind=spec.kind,
            annotations=dict(spec.annotations),
            based={name: name for name in spec.based},
        )
        for spec in document.types
    ]
    by_name = {type_.name: type_ for type_ in types}

    direct = {
        type_.name: [by_name[name] for name in type_.based if name in by_name]
        for type_ in types
    }
    for type_ in types:
        for name, supertype in _supertypes(type_, direct).items():
            if supertype.kind is TypeKind.PROTOCOL:
                type_.implements[name] = supertype
            else:
                type_.inherits[name] = supertype

    for type_, spec in zip(types, document.types):
        type_.variables = [
            Variable(
                name=variable.name,
                annotations=dict(variable.annotations),
                type_name=variable.type_name,
                type=by_name.get(variable.type_name),
                is_computed=variable.is_computed,
                is_static=variable.is_static,
                is_tuple=(
                    variable.is_tuple
                    if variable.is_tuple is not None
                    else _looks_like_tuple(variable.type_name)
                ),
            )
            for variable in spec.variables
        ]
        type_.methods = [
            Method(
                name=method.name,
                annotations=dict(method.annotations),
                parameters=[
                    MethodParameter(
                        name=parameter.name,
                        annotations=dict(parameter.annotations),
                        type_name=parameter.type_name,
                        type=by_name.get(parameter.type_name),
                    )
                    for parameter in method.parameters
                ],
                return_type_name=method.return_type_name,
                is_initializer=method.is_initializer,
                is_static=method.is_static,
                is_class=method.is_class,
            )
            for method in spec.methods
        ]

    return types


def parse_type_graph(data: Any) -> TypesCollection:
    """Validate parsed YAML data and build a type graph.

    Raises:
        ValueError: If the data does not match the document schema
    """
    if data is None:
        data = {}
    try:
        document = TypeGraphDocument.model_validate(data)
    except ValidationError as e:
        raise ValueError(f"Type graph validation failed:\n{e}") from e
    return TypesCollection(build_type_graph(document))


def load_type_graph(file_path: Union[str, Path]) -> TypesCollection:
    """Load a type graph from a YAML file.

    Args:
        file_path: Path to the YAML document

    Returns:
        Collection of the loaded types

    Raises:
        FileNotFoundError: If the file doesn't exist
        yaml.YAMLError: If the YAML is invalid
        ValueError: If the document doesn't match the schema
    """
    path = Path(file_path)
    if not path.exists():
        raise FileNotFoundError(
            f"Type graph file not found: {path}. "
            f"Suggestion: Check the path or export the type graph first."
        )

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise yaml.YAMLError(f"Failed to parse YAML file {path}: {e}") from e

    try:
        types = parse_type_graph(data)
    except ValueError as e:
        raise ValueError(f"Invalid type graph in {path}: {e}") from e

    logger.info(f"Loaded {len(types)} types from {path}")
    return types
