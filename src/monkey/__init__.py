"""
Monkey programming language interpreter.

This module provides:
- Lexer: Tokenizes Monkey source code
- Parser: Builds an AST with a Pratt parser
- Interpreter: Evaluates programs by walking the AST

Usage:
    from monkey import tokenize, parse, Interpreter

    tokens = tokenize('let x = 5;')
    program = parse('let add = fn(a, b) { a + b }; add(1, 2);')
    print(program)

    interp = Interpreter()
    result = interp.run('let twice = fn(f, x) { f(f(x)) }; twice(fn(n) { n * 2 }, 3)')
    if result.success:
        print(result.display)   # 12
    else:
        print(result.error_message)
"""

__version__ = "0.3.0"

from .tokens import (
    Token,
    TokenType,
    SourceLocation,
    SourceSpan,
    KEYWORDS,
    lookup_ident,
)

from .lexer import (
    Lexer,
    tokenize,
)

from .parser import (
    Parser,
    Precedence,
    parse,
)

from .ast import (
    # Base
    AstNode,
    Statement,
    Expression,
    # Expressions
    Identifier,
    IntegerLiteral,
    BooleanLiteral,
    StringLiteral,
    ArrayLiteral,
    HashLiteral,
    PrefixExpression,
    InfixExpression,
    IfExpression,
    FunctionLiteral,
    CallExpression,
    IndexExpression,
    # Statements
    LetStatement,
    ReturnStatement,
    ExpressionStatement,
    BlockStatement,
    Program,
    # Helpers
    dump_ast,
    print_ast,
)

from .errors import (
    MonkeyError,
    ParseError,
    ConfigError,
    Diagnostic,
    DiagnosticCollector,
    ErrorSeverity,
)

from .config import (
    Settings,
    load_settings,
)

from .runtime import (
    Interpreter,
    ExecutionResult,
    Environment,
    Evaluator,
    evaluate,
    run_source,
)

__all__ = [
    # Tokens
    "Token",
    "TokenType",
    "SourceLocation",
    "SourceSpan",
    "KEYWORDS",
    "lookup_ident",
    # Lexer
    "Lexer",
    "tokenize",
    # Parser
    "Parser",
    "Precedence",
    "parse",
    # AST
    "AstNode",
    "Statement",
    "Expression",
    "Identifier",
    "IntegerLiteral",
    "BooleanLiteral",
    "StringLiteral",
    "ArrayLiteral",
    "HashLiteral",
    "PrefixExpression",
    "InfixExpression",
    "IfExpression",
    "FunctionLiteral",
    "CallExpression",
    "IndexExpression",
    "LetStatement",
    "ReturnStatement",
    "ExpressionStatement",
    "BlockStatement",
    "Program",
    "dump_ast",
    "print_ast",
    # Errors
    "MonkeyError",
    "ParseError",
    "ConfigError",
    "Diagnostic",
    "DiagnosticCollector",
    "ErrorSeverity",
    # Config
    "Settings",
    "load_settings",
    # Runtime
    "Interpreter",
    "ExecutionResult",
    "Environment",
    "Evaluator",
    "evaluate",
    "run_source",
]
