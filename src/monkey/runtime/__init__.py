"""
Monkey runtime - tree-walking evaluation.

This module provides:
- Interpreter: Long-lived session that parses and evaluates source
- Evaluator: The recursive AST walker
- Environment: Lexical scope chain
- BuiltinRegistry: Built-in function implementations
- Value and its subclasses: The runtime object model
"""

from .values import (
    ObjectType,
    Value,
    Hashable,
    HashKey,
    HashPair,
    Integer,
    Boolean,
    Null,
    String,
    Array,
    Hash,
    Function,
    Builtin,
    ReturnValue,
    ErrorValue,
    TRUE,
    FALSE,
    NULL,
    int_val,
    bool_val,
    string_val,
    array_val,
    error_val,
    is_error,
    is_truthy,
    type_name,
    wrap_int64,
)

from .environment import Environment, new_enclosed_environment

from .builtins import BuiltinRegistry, get_builtin_registry, call_builtin

from .evaluator import Evaluator, evaluate

from .interpreter import Interpreter, ExecutionResult, run_source

__all__ = [
    # Values
    "ObjectType",
    "Value",
    "Hashable",
    "HashKey",
    "HashPair",
    "Integer",
    "Boolean",
    "Null",
    "String",
    "Array",
    "Hash",
    "Function",
    "Builtin",
    "ReturnValue",
    "ErrorValue",
    "TRUE",
    "FALSE",
    "NULL",
    "int_val",
    "bool_val",
    "string_val",
    "array_val",
    "error_val",
    "is_error",
    "is_truthy",
    "type_name",
    "wrap_int64",
    # Environment
    "Environment",
    "new_enclosed_environment",
    # Builtins
    "BuiltinRegistry",
    "get_builtin_registry",
    "call_builtin",
    # Evaluation
    "Evaluator",
    "evaluate",
    "Interpreter",
    "ExecutionResult",
    "run_source",
]
