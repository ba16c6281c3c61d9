from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any

from ..errors import InvariantViolation

"""TaggedValue model: one spreadsheet cell value plus its kind.

The set of kinds is closed (STRING, NUMBER, DATETIME, BOOLEAN, EMPTY). Every
consumer (type unification, SQL rendering, parameter binding) dispatches on
ValueKind explicitly and raises on an unknown kind, so adding a kind fails loudly
at each consumption site instead of being silently mishandled.
"""

__all__ = [
    "ValueKind",
    "TaggedValue",
]


class ValueKind(Enum):
    """Kind of a cell value.

    EMPTY denotes absence of a value and matches every other kind during
    column type unification.
    """
    STRING = "string"
    NUMBER = "number"  # all numbers, integral ones included
    DATETIME = "datetime"
    BOOLEAN = "boolean"
    EMPTY = "empty"


# payload type expected for each kind
_PAYLOAD_TYPES: dict[ValueKind, type | None] = {
    ValueKind.STRING: str,
    ValueKind.NUMBER: float,
    ValueKind.DATETIME: datetime,
    ValueKind.BOOLEAN: bool,
    ValueKind.EMPTY: None,
}


@dataclass(frozen=True)
class TaggedValue:
    """Immutable cell value. Exactly one kind, payload matching the kind."""
    kind: ValueKind
    value: Any = None

    def __post_init__(self) -> None:
        expected = _PAYLOAD_TYPES[self.kind]
        if expected is None:
            if self.value is not None:
                raise InvariantViolation(f"EMPTY value must not carry a payload: {self.value!r}")
            return
        # bool は int のサブクラスなので NUMBER 側では明示的に除外する
        if type(self.value) is bool and expected is not bool:
            raise InvariantViolation(f"{self.kind.name} value cannot hold bool {self.value!r}")
        if not isinstance(self.value, expected):
            raise InvariantViolation(
                f"{self.kind.name} value must hold {expected.__name__}, "
                f"got {type(self.value).__name__}"
            )

    # -- constructors -------------------------------------------------
    @classmethod
    def string(cls, text: str) -> TaggedValue:
        return cls(ValueKind.STRING, text)

    @classmethod
    def number(cls, number: float) -> TaggedValue:
        return cls(ValueKind.NUMBER, float(number))

    @classmethod
    def date_time(cls, timestamp: datetime) -> TaggedValue:
        return cls(ValueKind.DATETIME, timestamp)

    @classmethod
    def boolean(cls, flag: bool) -> TaggedValue:
        return cls(ValueKind.BOOLEAN, bool(flag))

    @classmethod
    def empty(cls) -> TaggedValue:
        return _EMPTY

    @classmethod
    def of(cls, obj: Any) -> TaggedValue:
        """Classify a plain Python object.

        Raises:
            TypeError: object type has no corresponding kind
        """
        if obj is None:
            return _EMPTY
        if isinstance(obj, bool):
            return cls.boolean(obj)
        if isinstance(obj, str):
            return cls.string(obj)
        if isinstance(obj, (int, float)):
            return cls.number(obj)
        if isinstance(obj, datetime):
            return cls.date_time(obj)
        raise TypeError(f"values of type {type(obj).__name__} are not supported")

    # -- accessors ----------------------------------------------------
    @property
    def is_empty(self) -> bool:
        return self.kind is ValueKind.EMPTY

    def _expect(self, kind: ValueKind) -> Any:
        if self.kind is not kind:
            raise InvariantViolation(f"expected {kind.name} value, got {self.kind.name}")
        return self.value

    def as_string(self) -> str:
        return self._expect(ValueKind.STRING)

    def as_number(self) -> float:
        return self._expect(ValueKind.NUMBER)

    def as_datetime(self) -> datetime:
        return self._expect(ValueKind.DATETIME)

    def as_boolean(self) -> bool:
        return self._expect(ValueKind.BOOLEAN)

    def __repr__(self) -> str:
        if self.is_empty:
            return "TaggedValue.EMPTY"
        return f"TaggedValue.{self.kind.name}({self.value!r})"


_EMPTY = TaggedValue(ValueKind.EMPTY)
