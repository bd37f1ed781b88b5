"""
Runtime values for the Monkey interpreter.

Every value carries an ObjectType, whose name is what error messages print,
and an ``inspect()`` display form used by the console. Booleans and null
are process-wide singletons, so identity comparison is enough for them.
"""

import hashlib
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Dict, List, Optional, TYPE_CHECKING

from ..ast import BlockStatement, Identifier

if TYPE_CHECKING:
    from .environment import Environment

INT64_MIN = -(2 ** 63)
INT64_MASK = 2 ** 64 - 1


class ObjectType(Enum):
    """Runtime type tags. The value is the display name."""
    INTEGER = "INTEGER"
    BOOLEAN = "BOOLEAN"
    NULL = "NULL"
    STRING = "STRING"
    ARRAY = "ARRAY"
    HASH = "HASH"
    FUNCTION = "FUNCTION"
    BUILTIN = "BUILTIN"
    RETURN_VALUE = "RETURN_VALUE"
    ERROR = "ERROR"

    def __str__(self) -> str:
        return self.value


def wrap_int64(n: int) -> int:
    """Wrap an arbitrary Python int to signed 64-bit two's complement."""
    return ((n - INT64_MIN) & INT64_MASK) + INT64_MIN


@dataclass(frozen=True)
class HashKey:
    """Identity of a hashable value inside a Hash: its type plus a 64-bit code."""
    type: ObjectType
    value: int


class Value(ABC):
    """Base class for all runtime values."""

    type: ObjectType

    @abstractmethod
    def inspect(self) -> str:
        """Display form shown by the console."""

    def __str__(self) -> str:
        return self.inspect()


class Hashable(Value):
    """Values that may be used as Hash keys."""

    @abstractmethod
    def hash_key(self) -> HashKey:
        ...


@dataclass
class Integer(Hashable):
    value: int
    type: ObjectType = field(default=ObjectType.INTEGER, init=False, repr=False)

    def inspect(self) -> str:
        return str(self.value)

    def hash_key(self) -> HashKey:
        return HashKey(self.type, self.value)


class Boolean(Hashable):
    """Boolean singleton. Use TRUE / FALSE or bool_val(), never construct."""

    type = ObjectType.BOOLEAN

    def __init__(self, value: bool):
        self.value = value

    def __repr__(self) -> str:
        return f"Boolean({self.value})"

    def inspect(self) -> str:
        return "true" if self.value else "false"

    def hash_key(self) -> HashKey:
        return HashKey(self.type, 1 if self.value else 0)


class Null(Value):
    """The null singleton."""

    type = ObjectType.NULL

    def __repr__(self) -> str:
        return "NULL"

    def inspect(self) -> str:
        return "null"


TRUE = Boolean(True)
FALSE = Boolean(False)
NULL = Null()


@dataclass
class String(Hashable):
    value: str
    type: ObjectType = field(default=ObjectType.STRING, init=False, repr=False)
    _hash: Optional[HashKey] = field(default=None, init=False, repr=False, compare=False)

    def inspect(self) -> str:
        return self.value

    def hash_key(self) -> HashKey:
        # Strings are immutable, so the digest is computed once
        if self._hash is None:
            digest = hashlib.sha256(self.value.encode("utf-8")).digest()
            self._hash = HashKey(self.type, int.from_bytes(digest[:8], "big"))
        return self._hash


@dataclass
class Array(Value):
    elements: List[Value] = field(default_factory=list)
    type: ObjectType = field(default=ObjectType.ARRAY, init=False, repr=False)

    def inspect(self) -> str:
        return "[" + ", ".join(e.inspect() for e in self.elements) + "]"


@dataclass
class HashPair:
    """Original key kept alongside the value so the hash can be displayed."""
    key: Value
    value: Value


@dataclass
class Hash(Value):
    pairs: Dict[HashKey, HashPair] = field(default_factory=dict)
    type: ObjectType = field(default=ObjectType.HASH, init=False, repr=False)

    def inspect(self) -> str:
        items = [f"{p.key.inspect()}: {p.value.inspect()}" for p in self.pairs.values()]
        return "{" + ", ".join(items) + "}"


@dataclass(eq=False)
class Function(Value):
    """
    A user function: parameters, body, and the environment it was defined in.

    The captured environment is shared, not copied, so the closure sees
    later bindings made in its defining scope.
    """
    parameters: List[Identifier]
    body: BlockStatement
    env: "Environment" = field(repr=False)
    type: ObjectType = field(default=ObjectType.FUNCTION, init=False, repr=False)

    def inspect(self) -> str:
        params = ", ".join(str(p) for p in self.parameters)
        return f"fn({params}) {{\n{self.body}\n}}"


BuiltinFn = Callable[..., Value]


@dataclass(eq=False)
class Builtin(Value):
    """A host-implemented function."""
    name: str
    fn: BuiltinFn = field(repr=False)
    type: ObjectType = field(default=ObjectType.BUILTIN, init=False, repr=False)

    def inspect(self) -> str:
        return "builtin function"


@dataclass
class ReturnValue(Value):
    """Wrapper marking a value in flight from a return statement."""
    value: Value
    type: ObjectType = field(default=ObjectType.RETURN_VALUE, init=False, repr=False)

    def inspect(self) -> str:
        return self.value.inspect()


@dataclass
class ErrorValue(Value):
    """A runtime error travelling through the ordinary result channel."""
    message: str
    type: ObjectType = field(default=ObjectType.ERROR, init=False, repr=False)

    def inspect(self) -> str:
        return f"ERROR: {self.message}"


# Convenience constructors

def int_val(n: int) -> Integer:
    """Create an integer value, wrapped to 64 bits."""
    return Integer(wrap_int64(int(n)))


def bool_val(b: bool) -> Boolean:
    """Return the boolean singleton for b."""
    return TRUE if b else FALSE


def string_val(s: str) -> String:
    return String(str(s))


def array_val(elements: List[Value]) -> Array:
    return Array(list(elements))


def error_val(message: str) -> ErrorValue:
    return ErrorValue(message)


def is_error(value: Optional[Value]) -> bool:
    return value is not None and value.type == ObjectType.ERROR


def is_truthy(value: Optional[Value]) -> bool:
    """Only false and null (or no value at all) are falsy."""
    if value is None or value is NULL or value is FALSE:
        return False
    return True


def type_name(value: Optional[Value]) -> str:
    """Display name of a value's type; a missing value reads as NULL."""
    if value is None:
        return ObjectType.NULL.value
    return value.type.value
