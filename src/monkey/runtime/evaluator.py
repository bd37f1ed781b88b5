"""
Tree-walking evaluator for Monkey programs.

Evaluation is a plain recursive walk over the AST. Runtime failures are
ErrorValue objects returned through the normal result channel; a
ReturnValue marker carries ``return`` out of nested blocks and is unwrapped
only at a function-call boundary (or at the top of the program).

Deeply recursive Monkey programs recurse in Python too. A non-terminating
recursion ends in RecursionError, which is left for the host (CLI or
console) to report.
"""

from typing import List, Optional, Union

from ..ast import (
    AstNode, Program, BlockStatement, ExpressionStatement, LetStatement,
    ReturnStatement, Identifier, IntegerLiteral, BooleanLiteral,
    StringLiteral, ArrayLiteral, HashLiteral, PrefixExpression,
    InfixExpression, IfExpression, FunctionLiteral, CallExpression,
    IndexExpression, Expression,
)
from .values import (
    Value, Integer, String, Array, Hash, HashPair, Hashable, Function,
    Builtin, ReturnValue, ErrorValue, ObjectType, NULL,
    int_val, bool_val, string_val, error_val, is_truthy, type_name,
)
from .environment import Environment, new_enclosed_environment
from .builtins import BuiltinRegistry, get_builtin_registry


class Evaluator:
    """
    Evaluates AST nodes by dispatching to node-specific methods.

    The evaluator holds no per-program state beyond its builtin registry,
    so one instance can evaluate any number of programs against any
    environment.
    """

    def __init__(self, builtins: Optional[BuiltinRegistry] = None):
        self.builtins = builtins if builtins is not None else get_builtin_registry()

    def evaluate(self, node: AstNode, env: Environment) -> Optional[Value]:
        """
        Evaluate a node in an environment.

        Returns None only for statements that produce no value (a ``let``,
        or a program/block made solely of them).
        """
        # Statements
        if isinstance(node, Program):
            return self._eval_program(node, env)
        elif isinstance(node, BlockStatement):
            return self._eval_block(node, env)
        elif isinstance(node, ExpressionStatement):
            return self.evaluate(node.expression, env)
        elif isinstance(node, LetStatement):
            return self._eval_let(node, env)
        elif isinstance(node, ReturnStatement):
            value = self._eval_expression(node.return_value, env)
            # An inner return is already wrapped and must not be wrapped twice
            if _is_abrupt(value):
                return value
            return ReturnValue(value)

        # Literals
        elif isinstance(node, IntegerLiteral):
            return int_val(node.value)
        elif isinstance(node, BooleanLiteral):
            return bool_val(node.value)
        elif isinstance(node, StringLiteral):
            return string_val(node.value)
        elif isinstance(node, ArrayLiteral):
            elements = self._eval_expressions(node.elements, env)
            if not isinstance(elements, list):
                return elements
            return Array(elements)
        elif isinstance(node, HashLiteral):
            return self._eval_hash_literal(node, env)
        elif isinstance(node, FunctionLiteral):
            return Function(node.parameters, node.body, env)

        # Expressions
        elif isinstance(node, Identifier):
            return self._eval_identifier(node, env)
        elif isinstance(node, PrefixExpression):
            right = self._eval_expression(node.right, env)
            if _is_abrupt(right):
                return right
            return self._eval_prefix(node.operator, right)
        elif isinstance(node, InfixExpression):
            left = self._eval_expression(node.left, env)
            if _is_abrupt(left):
                return left
            right = self._eval_expression(node.right, env)
            if _is_abrupt(right):
                return right
            return self._eval_infix(node.operator, left, right)
        elif isinstance(node, IfExpression):
            return self._eval_if(node, env)
        elif isinstance(node, CallExpression):
            return self._eval_call(node, env)
        elif isinstance(node, IndexExpression):
            left = self._eval_expression(node.left, env)
            if _is_abrupt(left):
                return left
            index = self._eval_expression(node.index, env)
            if _is_abrupt(index):
                return index
            return self._eval_index(left, index)

        raise TypeError(f"Cannot evaluate node type: {type(node).__name__}")

    def _eval_expression(self, node: Expression, env: Environment) -> Value:
        """Evaluate in a value position, where no-value reads as null."""
        value = self.evaluate(node, env)
        return NULL if value is None else value

    # =========================================================================
    # Statements
    # =========================================================================

    def _eval_program(self, program: Program, env: Environment) -> Optional[Value]:
        result: Optional[Value] = None
        for stmt in program.statements:
            result = self.evaluate(stmt, env)
            if isinstance(result, ReturnValue):
                return result.value
            if isinstance(result, ErrorValue):
                return result
        return result

    def _eval_block(self, block: BlockStatement, env: Environment) -> Optional[Value]:
        # ReturnValue stays wrapped so it escapes every enclosing block
        result: Optional[Value] = None
        for stmt in block.statements:
            result = self.evaluate(stmt, env)
            if _is_abrupt(result):
                return result
        return result

    def _eval_let(self, stmt: LetStatement, env: Environment) -> Optional[Value]:
        value = self._eval_expression(stmt.value, env)
        if _is_abrupt(value):
            return value
        env.set(stmt.name.value, value)
        return None

    # =========================================================================
    # Expressions
    # =========================================================================

    def _eval_identifier(self, node: Identifier, env: Environment) -> Value:
        if env.contains(node.value):
            return env.get(node.value)
        builtin = self.builtins.get_function(node.value)
        if builtin is not None:
            return builtin
        return error_val(f"identifier not found: {node.value}")

    def _eval_expressions(self, exprs: List[Expression],
                          env: Environment) -> Union[List[Value], Value]:
        """Evaluate left to right, stopping at the first error or return."""
        values: List[Value] = []
        for expr in exprs:
            value = self._eval_expression(expr, env)
            if _is_abrupt(value):
                return value
            values.append(value)
        return values

    def _eval_prefix(self, operator: str, right: Value) -> Value:
        if operator == "!":
            return bool_val(not is_truthy(right))
        # Otherwise "-", the only other prefix operator the parser accepts
        if not isinstance(right, Integer):
            return error_val(f"unknown operator: -{type_name(right)}")
        return int_val(-right.value)

    def _eval_infix(self, operator: str, left: Value, right: Value) -> Value:
        if isinstance(left, Integer) and isinstance(right, Integer):
            return self._eval_integer_infix(operator, left, right)
        if left.type != right.type:
            return error_val(f"type mismatch: {type_name(left)} {operator} {type_name(right)}")
        if left.type == ObjectType.BOOLEAN:
            # Booleans are singletons, so identity is equality
            if operator == "==":
                return bool_val(left is right)
            if operator == "!=":
                return bool_val(left is not right)
        elif isinstance(left, String) and isinstance(right, String):
            if operator == "+":
                return string_val(left.value + right.value)
        return error_val(f"unknown operator: {type_name(left)} {operator} {type_name(right)}")

    def _eval_integer_infix(self, operator: str, left: Integer, right: Integer) -> Value:
        a, b = left.value, right.value
        if operator == "+":
            return int_val(a + b)
        elif operator == "-":
            return int_val(a - b)
        elif operator == "*":
            return int_val(a * b)
        elif operator == "/":
            if b == 0:
                return error_val("division by zero: INTEGER / INTEGER")
            return int_val(a // b)
        elif operator == "<":
            return bool_val(a < b)
        elif operator == ">":
            return bool_val(a > b)
        elif operator == "==":
            return bool_val(a == b)
        elif operator == "!=":
            return bool_val(a != b)
        return error_val(f"unknown operator: INTEGER {operator} INTEGER")

    def _eval_if(self, node: IfExpression, env: Environment) -> Value:
        condition = self._eval_expression(node.condition, env)
        if _is_abrupt(condition):
            return condition

        if is_truthy(condition):
            result = self.evaluate(node.consequence, env)
        elif node.alternative is not None:
            result = self.evaluate(node.alternative, env)
        else:
            return NULL
        return NULL if result is None else result

    def _eval_call(self, node: CallExpression, env: Environment) -> Value:
        function = self._eval_expression(node.function, env)
        if _is_abrupt(function):
            return function
        if not isinstance(function, (Function, Builtin)):
            return error_val(f"not a function: {type_name(function)}")

        args = self._eval_expressions(node.arguments, env)
        if not isinstance(args, list):
            return args
        return self.apply_function(function, args)

    def apply_function(self, function: Union[Function, Builtin], args: List[Value]) -> Value:
        """Invoke a function value with already-evaluated arguments."""
        if isinstance(function, Builtin):
            return function.fn(*args)

        # Chained to the closure's environment, not the caller's
        call_env = new_enclosed_environment(function.env)
        for param, arg in zip(function.parameters, args):
            call_env.set(param.value, arg)

        result = self.evaluate(function.body, call_env)
        if isinstance(result, ReturnValue):
            return result.value
        return NULL if result is None else result

    def _eval_index(self, left: Value, index: Value) -> Value:
        if isinstance(left, Array):
            if not isinstance(index, Integer):
                return error_val(f"index operator not supported: {type_name(left)}")
            i = index.value
            if i < 0 or i >= len(left.elements):
                return NULL
            return left.elements[i]

        if isinstance(left, Hash):
            if not isinstance(index, Hashable):
                return error_val(f"unusable as hash key: {type_name(index)}")
            pair = left.pairs.get(index.hash_key())
            return NULL if pair is None else pair.value

        return error_val(f"index operator not supported: {type_name(left)}")

    def _eval_hash_literal(self, node: HashLiteral, env: Environment) -> Value:
        result = Hash()
        for key_node, value_node in node.pairs:
            key = self._eval_expression(key_node, env)
            if _is_abrupt(key):
                return key
            if not isinstance(key, Hashable):
                return error_val(f"unusable as hash key: {type_name(key)}")

            value = self._eval_expression(value_node, env)
            if _is_abrupt(value):
                return value

            # A later pair with an equal key replaces the earlier one
            result.pairs[key.hash_key()] = HashPair(key, value)
        return result


def _is_abrupt(value: Optional[Value]) -> bool:
    """True for values that must stop evaluation and travel outward unchanged."""
    return value is not None and value.type in (ObjectType.RETURN_VALUE, ObjectType.ERROR)


def evaluate(node: AstNode, env: Environment,
             builtins: Optional[BuiltinRegistry] = None) -> Optional[Value]:
    """Convenience function: evaluate a node with a fresh Evaluator."""
    return Evaluator(builtins).evaluate(node, env)
