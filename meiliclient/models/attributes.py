"""Attribute lists that may be the ``"*"`` wildcard."""

from collections.abc import Iterable
from typing import Annotated, Any

from pydantic import PlainSerializer, PlainValidator

WILDCARD = "*"


class AttributeSelection:
    """Either every attribute (``All``) or an ordered list of names (``Specific``).

    On the wire this is ``["*"]`` or the list of names; any list that contains
    ``"*"`` decodes to ``All``.
    """

    __slots__ = ("_names", "_all")

    def __init__(self, names: Iterable[str] = (), *, all_attributes: bool = False):
        self._all = all_attributes
        self._names: tuple[str, ...] = () if all_attributes else tuple(names)

    @classmethod
    def all(cls) -> "AttributeSelection":
        return cls(all_attributes=True)

    @classmethod
    def of(cls, *names: str) -> "AttributeSelection":
        return cls(names)

    @classmethod
    def parse(cls, value: Any) -> "AttributeSelection":
        """Coerce a wire value, a list of names or a selection."""
        if isinstance(value, AttributeSelection):
            return value
        if value == WILDCARD:
            return cls.all()
        if isinstance(value, str):
            raise ValueError(f"expected a list of attribute names, got {value!r}")
        if isinstance(value, Iterable):
            names = list(value)
            if not all(isinstance(name, str) for name in names):
                raise ValueError("attribute names must be strings")
            if WILDCARD in names:
                return cls.all()
            return cls(names)
        raise ValueError(f"expected a list of attribute names, got {value!r}")

    @property
    def is_all(self) -> bool:
        return self._all

    @property
    def names(self) -> tuple[str, ...]:
        """Explicit names; empty for ``All``."""
        return self._names

    def to_json(self) -> list[str]:
        if self._all:
            return [WILDCARD]
        return list(self._names)

    def __contains__(self, name: object) -> bool:
        return self._all or name in self._names

    def __eq__(self, other: object) -> bool:
        if isinstance(other, AttributeSelection):
            return self._all == other._all and self._names == other._names
        if isinstance(other, (list, tuple)):
            try:
                return self == AttributeSelection.parse(other)
            except ValueError:
                return False
        return NotImplemented

    def __hash__(self) -> int:
        return hash((self._all, self._names))

    def __repr__(self) -> str:
        if self._all:
            return "AttributeSelection.all()"
        return f"AttributeSelection.of({', '.join(repr(n) for n in self._names)})"


Attributes = Annotated[
    AttributeSelection,
    PlainValidator(AttributeSelection.parse),
    PlainSerializer(lambda value: value.to_json(), return_type=list[str]),
]
"""Pydantic field type for attribute lists."""
