"""
Built-in function registry for the Monkey interpreter.

Builtins are looked up by name after the environment chain misses, so a
program may shadow any of them with its own binding. Argument problems are
reported as error values, never raised.

Registered functions:
- len(x): length of a string or element count of an array
- first(arr), last(arr): an element, or null for an empty array
- rest(arr): a new array without the first element, or null when empty
- push(arr, v): a new array with v appended
- puts(...): write each argument's display form to the output stream
"""

import sys
from typing import Dict, List, Optional, TextIO

from .values import (
    Value, Builtin, Array, String, ObjectType, NULL,
    int_val, error_val, type_name,
)


def wrong_arg_count(got: int, want: int) -> Value:
    return error_val(f"wrong number of arguments. got={got}, want={want}")


def _require_array(name: str, arg: Value) -> Optional[Value]:
    """Return an error value unless arg is an array."""
    if arg.type != ObjectType.ARRAY:
        return error_val(f"argument to `{name}` must be ARRAY, got {type_name(arg)}")
    return None


class BuiltinRegistry:
    """
    Registry of built-in functions.

    Each interpreter session owns one, so ``puts`` writes to that
    session's output stream. Embedders may ``register`` extra builtins.
    """

    def __init__(self, output: Optional[TextIO] = None):
        self._functions: Dict[str, Builtin] = {}
        self._output = output
        self._register_all()

    @property
    def output(self) -> TextIO:
        # Resolved per call so tests that swap sys.stdout still see output
        return self._output if self._output is not None else sys.stdout

    def get_function(self, name: str) -> Optional[Builtin]:
        """Look up a function by name."""
        return self._functions.get(name)

    def register(self, func: Builtin) -> None:
        """Register a function, replacing any previous one of the same name."""
        self._functions[func.name] = func

    @property
    def names(self) -> List[str]:
        return sorted(self._functions)

    def __contains__(self, name: str) -> bool:
        return name in self._functions

    def _register_all(self) -> None:
        """Register all built-in functions."""
        self._register_sequence_functions()
        self._register_io_functions()

    # --- Sequence Functions ---

    def _register_sequence_functions(self) -> None:
        """Register len and the array helpers."""

        def _len(*args: Value) -> Value:
            if len(args) != 1:
                return wrong_arg_count(len(args), 1)
            arg = args[0]
            if isinstance(arg, String):
                return int_val(len(arg.value))
            if isinstance(arg, Array):
                return int_val(len(arg.elements))
            return error_val(f"argument to `len` not supported, got {type_name(arg)}")

        def _first(*args: Value) -> Value:
            if len(args) != 1:
                return wrong_arg_count(len(args), 1)
            err = _require_array("first", args[0])
            if err is not None:
                return err
            elements = args[0].elements
            return elements[0] if elements else NULL

        def _last(*args: Value) -> Value:
            if len(args) != 1:
                return wrong_arg_count(len(args), 1)
            err = _require_array("last", args[0])
            if err is not None:
                return err
            elements = args[0].elements
            return elements[-1] if elements else NULL

        def _rest(*args: Value) -> Value:
            if len(args) != 1:
                return wrong_arg_count(len(args), 1)
            err = _require_array("rest", args[0])
            if err is not None:
                return err
            elements = args[0].elements
            if not elements:
                return NULL
            return Array(list(elements[1:]))

        def _push(*args: Value) -> Value:
            if len(args) != 2:
                return wrong_arg_count(len(args), 2)
            err = _require_array("push", args[0])
            if err is not None:
                return err
            return Array(list(args[0].elements) + [args[1]])

        self.register(Builtin("len", _len))
        self.register(Builtin("first", _first))
        self.register(Builtin("last", _last))
        self.register(Builtin("rest", _rest))
        self.register(Builtin("push", _push))

    # --- I/O Functions ---

    def _register_io_functions(self) -> None:
        """Register output functions."""

        def _puts(*args: Value) -> Value:
            out = self.output
            for arg in args:
                out.write(arg.inspect() + "\n")
            return NULL

        self.register(Builtin("puts", _puts))


# Global default registry, writing to stdout
_registry: Optional[BuiltinRegistry] = None


def get_builtin_registry() -> BuiltinRegistry:
    """Get the shared default registry."""
    global _registry
    if _registry is None:
        _registry = BuiltinRegistry()
    return _registry


def call_builtin(name: str, args: List[Value]) -> Value:
    """
    Call a built-in function from the default registry by name.

    Raises KeyError if no such builtin exists.
    """
    func = get_builtin_registry().get_function(name)
    if func is None:
        raise KeyError(f"Unknown built-in function: {name}")
    return func.fn(*args)
