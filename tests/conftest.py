"""Shared pytest fixtures and configuration."""

from typing import Any

from pytest import fixture

from typestencil.templates import TemplateEngine, build_filter_registry
from typestencil.typegraph import parse_type_graph

SAMPLE_TYPE_GRAPH: dict[str, Any] = {
    "types": [
        {"name": "AutoEquatable", "kind": "protocol"},
        {"name": "Codable", "kind": "protocol"},
        {"name": "BaseModel", "kind": "class", "based": ["Codable"]},
        {
            "name": "User",
            "kind": "class",
            "based": ["BaseModel", "AutoEquatable"],
            "annotations": {"role": "admin", "table": "users"},
            "variables": [
                {"name": "id", "type": "Int"},
                {"name": "displayName", "type": "String", "is_computed": True},
                {"name": "shared", "type": "User", "is_static": True},
                {"name": "location", "type": "(lat: Double, lon: Double)"},
                {
                    "name": "address",
                    "type": "Address",
                    "annotations": {"skipEquality": True},
                },
            ],
            "methods": [
                {
                    "name": "init",
                    "is_initializer": True,
                    "parameters": [{"name": "id", "type": "Int"}],
                },
                {"name": "make", "is_static": True, "returns": "User"},
                {"name": "register", "is_class": True},
                {"name": "save"},
            ],
        },
        {
            "name": "Address",
            "kind": "struct",
            "based": ["AutoEquatable"],
            "variables": [{"name": "street", "type": "String"}],
        },
        {"name": "Color", "kind": "enum"},
    ]
}

SAMPLE_TYPE_GRAPH_YAML = """\
types:
  - name: AutoEquatable
    kind: protocol
  - name: User
    based: [AutoEquatable]
    variables:
      - name: id
        type: Int
      - name: fullName
        type: String
        is_computed: true
  - name: Color
    kind: enum
"""


@fixture
def types():
    """Provide the sample type graph as a TypesCollection."""
    return parse_type_graph(SAMPLE_TYPE_GRAPH)


@fixture
def user(types):
    """Provide the User type of the sample graph."""
    return types.by_name()["User"]


@fixture
def variables(user):
    """Provide User's variables keyed by name."""
    return {variable.name: variable for variable in user.variables}


@fixture
def methods(user):
    """Provide User's methods keyed by name."""
    return {method.name: method for method in user.methods}


@fixture
def registry():
    """Provide the full filter registry."""
    return build_filter_registry()


@fixture
def engine():
    """Create a template engine instance."""
    return TemplateEngine()


@fixture
def type_graph_file(tmp_path):
    """Write a small type graph YAML file."""
    path = tmp_path / "types.yaml"
    path.write_text(SAMPLE_TYPE_GRAPH_YAML)
    return path
