"""Tests for the filter catalog, negation and registry."""

from types import MappingProxyType

import pytest
from jinja2 import Environment

from typestencil.templates import (
    FILTER_CATALOG,
    BoolFilter,
    FilterSyntaxError,
    build_filter_registry,
    install_filters,
)
from typestencil.templates.filters import argument_types, jinja_filter_name
from typestencil.typegraph import Method, Type, Variable

BOOL_FILTERS = [record for record in FILTER_CATALOG if isinstance(record, BoolFilter)]


def names(items):
    """Names of the given objects, in order."""
    return [item.name for item in items]


class TestRegistry:
    """Test building the filter registry."""

    def test_is_read_only(self, registry):
        """Test the registry cannot be modified."""
        assert isinstance(registry, MappingProxyType)
        with pytest.raises(TypeError):
            registry["extra"] = lambda value: value

    def test_contains_all_filters(self, registry):
        """Test every catalog filter is registered."""
        expected = {
            "upperFirst",
            "camelCased",
            "PascalCased",
            "snake_cased",
            "dottedNameToCamelCased",
            "undotted",
            "count",
            "contains",
            "hasPrefix",
            "hasSuffix",
            "computed",
            "stored",
            "tuple",
            "initializer",
            "class",
            "static",
            "instance",
            "enum",
            "struct",
            "protocol",
            "based",
            "implements",
            "inherits",
            "annotated",
        }
        assert expected <= set(registry)

    def test_every_bool_filter_has_negation(self, registry):
        """Test each boolean filter has a negated twin."""
        for record in BOOL_FILTERS:
            assert "!" + record.name in registry

    def test_transforms_have_no_negation(self, registry):
        """Test transforms are not negated."""
        assert "!camelCased" not in registry
        assert "!count" not in registry

    def test_argument_types(self, registry):
        """Test argument types of argument-taking filters."""
        assert argument_types(registry) == {
            name: str
            for record in BOOL_FILTERS
            if record.argument is not None
            for name in (record.name, record.negated_name)
        }

    def test_builds_are_independent(self):
        """Test each build returns a new registry."""
        assert build_filter_registry() is not build_filter_registry()

    def test_duplicate_names_rejected(self, monkeypatch):
        """Test duplicate filter names fail the build."""
        from typestencil.templates import filters

        duplicate = FILTER_CATALOG + (FILTER_CATALOG[0],)
        monkeypatch.setattr(filters, "FILTER_CATALOG", duplicate)
        with pytest.raises(ValueError, match="Duplicate template filter name"):
            filters.build_filter_registry()


class TestInstallFilters:
    """Test installing filters into an environment."""

    def test_negations_installed_under_alias(self, registry):
        """Test negations are installed as not_ aliases."""
        env = Environment()
        install_filters(env, registry)
        assert env.filters["computed"] is registry["computed"]
        assert env.filters["not_computed"] is registry["!computed"]
        assert "!computed" not in env.filters

    def test_jinja_filter_name(self):
        """Test mapping registry names to Jinja2 names."""
        assert jinja_filter_name("!implements") == "not_implements"
        assert jinja_filter_name("implements") == "implements"


class TestVariableFilters:
    """Test filters over variables."""

    def test_computed(self, registry, user, variables):
        """Test the computed filter."""
        assert registry["computed"](user.variables) == [variables["displayName"]]
        assert registry["computed"](variables["displayName"]) is True

    def test_stored(self, registry, user):
        """Test the stored filter."""
        assert names(registry["stored"](user.variables)) == [
            "id",
            "location",
            "address",
        ]

    def test_not_computed(self, registry, user):
        """Test the negated computed filter."""
        assert names(registry["!computed"](user.variables)) == [
            "id",
            "shared",
            "location",
            "address",
        ]

    def test_tuple(self, registry, user):
        """Test the tuple filter."""
        assert names(registry["tuple"](user.variables)) == ["location"]

    def test_variable_filters_ignore_other_kinds(self, registry, user):
        """Test other kinds are dropped from mixed collections."""
        mixed = list(user.variables) + list(user.methods) + [user]
        assert names(registry["stored"](mixed)) == ["id", "location", "address"]
        assert names(registry["!stored"](mixed)) == ["displayName", "shared"]


class TestMethodFilters:
    """Test filters over methods."""

    def test_initializer(self, registry, user):
        """Test the initializer filter and its negation."""
        assert names(registry["initializer"](user.methods)) == ["init"]
        assert names(registry["!initializer"](user.methods)) == [
            "make",
            "register",
            "save",
        ]

    def test_static(self, registry, user):
        """Test static methods and variables."""
        assert names(registry["static"](user.methods)) == ["make"]
        assert names(registry["static"](user.variables)) == ["shared"]

    def test_instance(self, registry, user):
        """Test instance methods and variables."""
        assert names(registry["instance"](user.methods)) == ["init", "save"]
        assert names(registry["instance"](user.variables)) == [
            "id",
            "displayName",
            "location",
            "address",
        ]

    def test_class_on_methods_and_types(self, registry, types, user):
        """Test the class filter on methods and types."""
        assert names(registry["class"](user.methods)) == ["register"]
        assert names(registry["class"](types.all)) == ["BaseModel", "User"]
        assert registry["class"](user) is True


class TestTypeFilters:
    """Test filters over types."""

    def test_kinds(self, registry, types):
        """Test the type kind filters."""
        assert names(registry["enum"](types.all)) == ["Color"]
        assert names(registry["struct"](types.all)) == ["Address"]
        assert names(registry["protocol"](types.all)) == ["AutoEquatable", "Codable"]
        assert names(registry["!protocol"](types.all)) == [
            "BaseModel",
            "User",
            "Address",
            "Color",
        ]

    def test_implements(self, registry, types):
        """Test implements, including inherited protocols."""
        implements = registry["implements"]
        assert names(implements(types.all, "AutoEquatable")) == ["User", "Address"]
        assert names(implements(types.all, "Codable")) == ["BaseModel", "User"]

    def test_inherits_and_based(self, registry, types):
        """Test inherits and based."""
        assert names(registry["inherits"](types.all, "BaseModel")) == ["User"]
        assert names(registry["based"](types.all, "Codable")) == ["BaseModel"]

    def test_relationships_through_variables(self, registry, user):
        """Test relationships through variable types."""
        implements = registry["implements"]
        assert names(implements(user.variables, "AutoEquatable")) == [
            "shared",
            "address",
        ]
        assert names(registry["!implements"](user.variables, "AutoEquatable")) == [
            "id",
            "displayName",
            "location",
        ]

    def test_relationships_on_mixed_collection(self, registry, user, variables):
        """Test types and variables in one collection."""
        mixed = [user.methods[0], variables["shared"], user, variables["id"]]
        result = registry["implements"](mixed, "AutoEquatable")
        assert result == [variables["shared"], user]


class TestAnnotatedFilter:
    """Test the annotated filter."""

    def test_key_and_value(self, registry, types):
        """Test key and key=value forms."""
        annotated = registry["annotated"]
        assert names(annotated(types.all, "role=admin")) == ["User"]
        assert names(annotated(types.all, "role")) == ["User"]
        assert annotated(types.all, "role=user") == []

    def test_on_variables(self, registry, user):
        """Test the negated filter on variables."""
        assert names(registry["!annotated"](user.variables, "skipEquality")) == [
            "id",
            "displayName",
            "shared",
            "location",
        ]

    def test_requires_single_argument(self, registry, user):
        """Test the argument count is enforced."""
        with pytest.raises(FilterSyntaxError) as exc_info:
            registry["annotated"](user, "role", "admin")
        assert exc_info.value.filter_name == "annotated"

        with pytest.raises(FilterSyntaxError) as exc_info:
            registry["!annotated"](user)
        assert exc_info.value.filter_name == "!annotated"


class TestStringFilters:
    """Test filters over strings."""

    def test_casing_over_collections(self, registry):
        """Test casing maps over collections."""
        assert registry["camelCased"](["Hello World", 3, "Foo"]) == [
            "helloWorld",
            "foo",
        ]
        assert registry["snake_cased"]("HelloWorld") == "hello_world"
        assert registry["undotted"]("a.b.c") == "abc"

    def test_casing_passes_through_other_kinds(self, registry, user):
        """Test casing leaves other values alone."""
        assert registry["PascalCased"](user) is user

    def test_string_predicates(self, registry):
        """Test string predicates and their negations."""
        assert registry["hasPrefix"](["isValid", "valid", "isOn"], "is") == [
            "isValid",
            "isOn",
        ]
        assert registry["!hasSuffix"](["userId", "name"], "Id") == ["name"]
        assert registry["contains"]("userId", "rI") is True

    def test_count(self, registry, user):
        """Test the count filter."""
        assert registry["count"](user.variables) == 5
        assert registry["count"]("abc") == "abc"


@pytest.mark.parametrize("record", BOOL_FILTERS, ids=lambda record: record.name)
def test_negation_is_complement(record, registry, types):
    """Test a filter and its negation partition the matching objects."""
    objects = [*types.all]
    for type_ in types.all:
        objects.extend(type_.variables)
        objects.extend(type_.methods)
        for method in type_.methods:
            objects.extend(method.parameters)
    objects.extend(["userId", "isValid"])

    args = ("Id",) if record.argument is not None else ()
    if record.name in ("based", "implements", "inherits"):
        args = ("AutoEquatable",)
    positive = registry[record.name]
    negative = registry[record.negated_name]

    kinds = tuple(kind for kind, _ in record.cases)
    matching = [item for item in objects if isinstance(item, kinds)]
    for item in matching:
        assert positive(item, *args) is (not negative(item, *args))

    kept = positive(objects, *args)
    dropped = negative(objects, *args)
    assert len(kept) + len(dropped) == len(matching)
    assert all(any(item is other for other in matching) for item in kept + dropped)


def test_dual_filters_cover_two_kinds():
    """Test which filters handle two kinds."""
    dual = {record.name for record in BOOL_FILTERS if len(record.cases) == 2}
    assert dual == {"class", "static", "instance", "based", "implements", "inherits"}
    kinds = {record.name: record.cases[0][0] for record in BOOL_FILTERS}
    assert kinds["computed"] is Variable
    assert kinds["initializer"] is Method
    assert kinds["enum"] is Type
