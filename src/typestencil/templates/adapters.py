"""Adapters lifting typed predicates and transforms into template filters.

A filter receives whatever value is in scope in the template: one metadata
object, a collection of them, or something unrelated. The adapters here make
a function written for one kind of object behave sensibly on all three:

* a value of the expected kind is passed to the function;
* a collection is filtered (predicates) or mapped (transforms), and elements
  of other kinds are dropped;
* anything else is returned unchanged.
"""

from collections.abc import Iterable, Mapping
from typing import Any, Callable, List, Optional, Tuple, Type, Union

from jinja2 import TemplateSyntaxError, Undefined

from ..typegraph.collection import TypesCollection

Kind = Union[Type[Any], Tuple[Type[Any], ...]]
Filter = Callable[..., Any]


class FilterSyntaxError(TemplateSyntaxError):
    """Argument-taking filter called with the wrong arguments.

    Raised at render time when the arguments are only known then, and at
    compile time, with the template line number, when they are literals.
    """

    def __init__(
        self,
        filter_name: str,
        expected: str,
        lineno: int = 0,
        name: Optional[str] = None,
        filename: Optional[str] = None,
    ) -> None:
        self.filter_name = filter_name
        self.expected = expected
        super().__init__(
            f"'{filter_name}' filter takes a single {expected} argument",
            lineno,
            name=name,
            filename=filename,
        )


def is_collection(value: Any) -> bool:
    """Check whether a filter value should be treated as a collection.

    Any iterable counts, including the generators returned by Jinja2's
    ``map``, ``select`` and ``reject``. Strings, mappings, undefined values
    and the TypesCollection itself are single values.
    """
    if isinstance(value, (str, bytes, Mapping, Undefined, TypesCollection)):
        return False
    return isinstance(value, Iterable)


def predicate_filter(kind: Kind, predicate: Callable[..., bool]) -> Filter:
    """Lift a predicate over one kind of object into a filter.

    Args:
        kind: Class (or tuple of classes) the predicate accepts
        predicate: Function of the object and any filter arguments

    Returns:
        Filter returning the predicate result for an object of ``kind``, the
        matching elements for a collection and the value itself otherwise
    """

    def apply(value: Any, *args: Any) -> Any:
        if isinstance(value, kind):
            return predicate(value, *args)
        if is_collection(value):
            return [
                item
                for item in value
                if isinstance(item, kind) and predicate(item, *args)
            ]
        return value

    return apply


def transform_filter(kind: Kind, transform: Callable[..., Any]) -> Filter:
    """Lift a transform over one kind of object into a filter.

    Over a collection the transform is mapped, and elements for which it
    returns None are left out of the result.
    """

    def apply(value: Any, *args: Any) -> Any:
        if isinstance(value, kind):
            return transform(value, *args)
        if is_collection(value):
            results: List[Any] = []
            for item in value:
                if not isinstance(item, kind):
                    continue
                result = transform(item, *args)
                if result is not None:
                    results.append(result)
            return results
        return value

    return apply


def either_filter(
    first_kind: Kind,
    first: Callable[..., bool],
    second_kind: Kind,
    second: Callable[..., bool],
) -> Filter:
    """Lift two predicates over unrelated kinds into one filter.

    A scalar goes to the predicate of its kind. Each element of a collection
    is classified on its own, so mixed collections keep the matching elements
    of both kinds, and an empty collection gives an empty list.

    Args:
        first_kind: Kind accepted by ``first``, checked first
        first: Predicate for ``first_kind`` objects
        second_kind: Kind accepted by ``second``
        second: Predicate for ``second_kind`` objects

    Returns:
        Filter dispatching on the kind of the value or of each element
    """

    def check(item: Any, args: Tuple[Any, ...]) -> Optional[bool]:
        if isinstance(item, first_kind):
            return first(item, *args)
        if isinstance(item, second_kind):
            return second(item, *args)
        return None

    def apply(value: Any, *args: Any) -> Any:
        result = check(value, args)
        if result is not None:
            return result
        if is_collection(value):
            return [item for item in value if check(item, args)]
        return value

    return apply


def with_argument(name: str, apply: Filter, argument_type: type = str) -> Filter:
    """Require exactly one argument of ``argument_type`` for a filter.

    Args:
        name: Filter name reported in errors
        apply: Filter taking the value and one argument
        argument_type: Expected argument type

    Returns:
        Filter raising FilterSyntaxError on a wrong argument count or type
    """

    def checked(value: Any, *args: Any) -> Any:
        if len(args) != 1 or not isinstance(args[0], argument_type):
            raise FilterSyntaxError(name, argument_type.__name__)
        return apply(value, args[0])

    checked.argument_type = argument_type  # type: ignore[attr-defined]
    return checked
