"""Collection view of a type graph exposed to templates as ``types``."""

from typing import Dict, Iterable, Iterator, List

from .models import Type, TypeKind


class TypesCollection:
    """All types of a graph, with the groupings templates usually need.

    Attributes:
        all: Every type in declaration order
        classes: Class types
        structs: Struct types
        enums: Enum types
        protocols: Protocol types
        based: Types by each name in their inheritance clause
        implementing: Types by each protocol they implement
        inheriting: Types by each type they inherit from
    """

    def __init__(self, types: Iterable[Type]) -> None:
        self.all: List[Type] = list(types)
        self.classes = self._of_kind(TypeKind.CLASS)
        self.structs = self._of_kind(TypeKind.STRUCT)
        self.enums = self._of_kind(TypeKind.ENUM)
        self.protocols = self._of_kind(TypeKind.PROTOCOL)
        self.based = self._group_by(lambda type_: type_.based)
        self.implementing = self._group_by(lambda type_: type_.implements)
        self.inheriting = self._group_by(lambda type_: type_.inherits)

    def _of_kind(self, kind: TypeKind) -> List[Type]:
        return [type_ for type_ in self.all if type_.kind is kind]

    def _group_by(self, relation) -> Dict[str, List[Type]]:
        groups: Dict[str, List[Type]] = {}
        for type_ in self.all:
            for name in relation(type_):
                groups.setdefault(name, []).append(type_)
        return groups

    def by_name(self) -> Dict[str, Type]:
        """Types keyed by name, exposed to templates as ``type``."""
        return {type_.name: type_ for type_ in self.all}

    def __iter__(self) -> Iterator[Type]:
        return iter(self.all)

    def __len__(self) -> int:
        return len(self.all)

    def __repr__(self) -> str:
        return f"TypesCollection({len(self.all)} types)"
