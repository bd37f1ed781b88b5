"""
Pratt (operator-precedence) parser for the Monkey language.

Converts a lazy token stream into an Abstract Syntax Tree (AST). Parsing
never raises: structural problems are recorded as diagnostics and the
offending subtree is dropped, so callers must check ``Parser.errors``
before trusting the resulting Program.
"""

import logging
from enum import IntEnum
from typing import Callable, Dict, List, Optional

from .tokens import Token, TokenType
from .lexer import Lexer
from .ast import (
    Program, Statement, Expression,
    LetStatement, ReturnStatement, ExpressionStatement, BlockStatement,
    Identifier, IntegerLiteral, BooleanLiteral, StringLiteral,
    ArrayLiteral, HashLiteral, PrefixExpression, InfixExpression,
    IfExpression, FunctionLiteral, CallExpression, IndexExpression,
)
from .errors import (
    Diagnostic,
    DiagnosticCollector,
    ParseError,
    error_unexpected_token,
    error_no_prefix_parse_fn,
    error_invalid_integer,
)

logger = logging.getLogger(__name__)

INT64_MAX = 2 ** 63 - 1

PrefixParseFn = Callable[[], Optional[Expression]]
InfixParseFn = Callable[[Expression], Optional[Expression]]


class Precedence(IntEnum):
    """Binding strength, lowest to highest."""
    LOWEST = 1
    EQUALS = 2        # == !=
    LESSGREATER = 3   # < >
    SUM = 4           # + -
    PRODUCT = 5       # * /
    PREFIX = 6        # -x !x
    CALL = 7          # f(x)
    INDEX = 8         # a[i]


PRECEDENCES: Dict[TokenType, Precedence] = {
    TokenType.EQ: Precedence.EQUALS,
    TokenType.NOT_EQ: Precedence.EQUALS,
    TokenType.LT: Precedence.LESSGREATER,
    TokenType.GT: Precedence.LESSGREATER,
    TokenType.PLUS: Precedence.SUM,
    TokenType.MINUS: Precedence.SUM,
    TokenType.SLASH: Precedence.PRODUCT,
    TokenType.ASTERISK: Precedence.PRODUCT,
    TokenType.LPAREN: Precedence.CALL,
    TokenType.LBRACKET: Precedence.INDEX,
}


class Parser:
    """
    Pratt parser with a two-token lookahead (current and peek).

    Usage:
        parser = Parser(Lexer(source))
        program = parser.parse_program()
        if parser.errors:
            ...

    Each token type that can start an expression has a prefix parse
    function; each token type that can continue one has an infix parse
    function. ``_parse_expression`` climbs precedence using the
    PRECEDENCES table, so calls and index access bind tighter than any
    arithmetic or comparison.
    """

    def __init__(self, lexer: Lexer, max_errors: int = 20):
        self.lexer = lexer
        self.diagnostics = DiagnosticCollector(max_errors)

        self.cur_token: Token = Token(TokenType.ILLEGAL, "")
        self.peek_token: Token = Token(TokenType.ILLEGAL, "")

        self.prefix_parse_fns: Dict[TokenType, PrefixParseFn] = {}
        self.infix_parse_fns: Dict[TokenType, InfixParseFn] = {}

        self._register_prefix(TokenType.IDENT, self._parse_identifier)
        self._register_prefix(TokenType.INT, self._parse_integer_literal)
        self._register_prefix(TokenType.STRING, self._parse_string_literal)
        self._register_prefix(TokenType.TRUE, self._parse_boolean_literal)
        self._register_prefix(TokenType.FALSE, self._parse_boolean_literal)
        self._register_prefix(TokenType.BANG, self._parse_prefix_expression)
        self._register_prefix(TokenType.MINUS, self._parse_prefix_expression)
        self._register_prefix(TokenType.LPAREN, self._parse_grouped_expression)
        self._register_prefix(TokenType.IF, self._parse_if_expression)
        self._register_prefix(TokenType.FUNCTION, self._parse_function_literal)
        self._register_prefix(TokenType.LBRACKET, self._parse_array_literal)
        self._register_prefix(TokenType.LBRACE, self._parse_hash_literal)

        for token_type in (TokenType.PLUS, TokenType.MINUS, TokenType.SLASH,
                           TokenType.ASTERISK, TokenType.EQ, TokenType.NOT_EQ,
                           TokenType.LT, TokenType.GT):
            self._register_infix(token_type, self._parse_infix_expression)
        self._register_infix(TokenType.LPAREN, self._parse_call_expression)
        self._register_infix(TokenType.LBRACKET, self._parse_index_expression)

        # Fill both cur_token and peek_token
        self._next_token()
        self._next_token()

    def _register_prefix(self, token_type: TokenType, fn: PrefixParseFn) -> None:
        self.prefix_parse_fns[token_type] = fn

    def _register_infix(self, token_type: TokenType, fn: InfixParseFn) -> None:
        self.infix_parse_fns[token_type] = fn

    @property
    def errors(self) -> List[str]:
        """Diagnostic messages recorded so far."""
        return self.diagnostics.messages

    # =========================================================================
    # Token Navigation
    # =========================================================================

    def _next_token(self) -> None:
        self.cur_token = self.peek_token
        self.peek_token = self.lexer.next_token()

    def _cur_token_is(self, token_type: TokenType) -> bool:
        return self.cur_token.type == token_type

    def _peek_token_is(self, token_type: TokenType) -> bool:
        return self.peek_token.type == token_type

    def _expect_peek(self, token_type: TokenType) -> bool:
        """Advance if the peek token has the expected type, else record an error."""
        if self._peek_token_is(token_type):
            self._next_token()
            return True
        self._peek_error(token_type)
        return False

    def _peek_precedence(self) -> Precedence:
        return PRECEDENCES.get(self.peek_token.type, Precedence.LOWEST)

    def _cur_precedence(self) -> Precedence:
        return PRECEDENCES.get(self.cur_token.type, Precedence.LOWEST)

    # =========================================================================
    # Diagnostics
    # =========================================================================

    def _add_diagnostic(self, diagnostic: Diagnostic) -> None:
        if self.diagnostics.should_stop:
            return
        self.diagnostics.add(diagnostic)

    def _source_line(self, token: Token) -> Optional[str]:
        return self.lexer.get_source_line(token.span.start.line)

    def _peek_error(self, expected: TokenType) -> None:
        token = self.peek_token
        self._add_diagnostic(error_unexpected_token(
            expected.name, token.type.name, token.span, self._source_line(token)
        ))

    def _no_prefix_parse_fn_error(self, token: Token) -> None:
        self._add_diagnostic(error_no_prefix_parse_fn(
            token.type.name, token.span, self._source_line(token)
        ))

    # =========================================================================
    # Statements
    # =========================================================================

    def parse_program(self) -> Program:
        """Parse statements until end of input."""
        start = self.cur_token
        statements: List[Statement] = []

        while not self._cur_token_is(TokenType.EOF):
            stmt = self._parse_statement()
            if stmt is not None:
                statements.append(stmt)
            self._next_token()

        logger.debug("parsed %d statement(s) with %d diagnostic(s)",
                     len(statements), self.diagnostics.error_count)
        return Program(token=start, statements=statements)

    def _parse_statement(self) -> Optional[Statement]:
        if self._cur_token_is(TokenType.LET):
            return self._parse_let_statement()
        if self._cur_token_is(TokenType.RETURN):
            return self._parse_return_statement()
        return self._parse_expression_statement()

    def _parse_let_statement(self) -> Optional[LetStatement]:
        """Parse ``let <ident> = <expr>;``."""
        token = self.cur_token

        if not self._expect_peek(TokenType.IDENT):
            return None
        name = Identifier(token=self.cur_token, value=self.cur_token.literal)

        if not self._expect_peek(TokenType.ASSIGN):
            return None
        self._next_token()

        value = self._parse_expression(Precedence.LOWEST)
        if self._peek_token_is(TokenType.SEMICOLON):
            self._next_token()

        if value is None:
            return None
        return LetStatement(token=token, name=name, value=value)

    def _parse_return_statement(self) -> Optional[ReturnStatement]:
        """Parse ``return <expr>;``."""
        token = self.cur_token
        self._next_token()

        value = self._parse_expression(Precedence.LOWEST)
        if self._peek_token_is(TokenType.SEMICOLON):
            self._next_token()

        if value is None:
            return None
        return ReturnStatement(token=token, return_value=value)

    def _parse_expression_statement(self) -> Optional[ExpressionStatement]:
        token = self.cur_token
        expression = self._parse_expression(Precedence.LOWEST)

        if self._peek_token_is(TokenType.SEMICOLON):
            self._next_token()

        if expression is None:
            return None
        return ExpressionStatement(token=token, expression=expression)

    def _parse_block_statement(self) -> BlockStatement:
        """Parse statements up to the closing brace (or end of input)."""
        token = self.cur_token
        statements: List[Statement] = []
        self._next_token()

        while not self._cur_token_is(TokenType.RBRACE) and not self._cur_token_is(TokenType.EOF):
            stmt = self._parse_statement()
            if stmt is not None:
                statements.append(stmt)
            self._next_token()

        return BlockStatement(token=token, statements=statements)

    # =========================================================================
    # Expressions
    # =========================================================================

    def _parse_expression(self, precedence: Precedence) -> Optional[Expression]:
        """Parse an expression whose operators bind tighter than ``precedence``."""
        prefix = self.prefix_parse_fns.get(self.cur_token.type)
        if prefix is None:
            self._no_prefix_parse_fn_error(self.cur_token)
            return None

        left = prefix()
        if left is None:
            return None

        while not self._peek_token_is(TokenType.SEMICOLON) and precedence < self._peek_precedence():
            infix = self.infix_parse_fns.get(self.peek_token.type)
            if infix is None:
                return left

            self._next_token()
            left = infix(left)
            if left is None:
                return None

        return left

    def _parse_identifier(self) -> Expression:
        return Identifier(token=self.cur_token, value=self.cur_token.literal)

    def _parse_integer_literal(self) -> Optional[Expression]:
        token = self.cur_token
        try:
            value = int(token.literal)
        except ValueError:
            value = None
        if value is None or value > INT64_MAX:
            self._add_diagnostic(error_invalid_integer(
                token.literal, token.span, self._source_line(token)
            ))
            return None
        return IntegerLiteral(token=token, value=value)

    def _parse_string_literal(self) -> Expression:
        return StringLiteral(token=self.cur_token, value=self.cur_token.literal)

    def _parse_boolean_literal(self) -> Expression:
        return BooleanLiteral(token=self.cur_token, value=self._cur_token_is(TokenType.TRUE))

    def _parse_prefix_expression(self) -> Optional[Expression]:
        token = self.cur_token
        self._next_token()

        right = self._parse_expression(Precedence.PREFIX)
        if right is None:
            return None
        return PrefixExpression(token=token, operator=token.literal, right=right)

    def _parse_infix_expression(self, left: Expression) -> Optional[Expression]:
        token = self.cur_token
        precedence = self._cur_precedence()
        self._next_token()

        # Same precedence on the right makes operators left-associative
        right = self._parse_expression(precedence)
        if right is None:
            return None
        return InfixExpression(token=token, left=left, operator=token.literal, right=right)

    def _parse_grouped_expression(self) -> Optional[Expression]:
        self._next_token()
        expression = self._parse_expression(Precedence.LOWEST)
        if expression is None:
            return None
        if not self._expect_peek(TokenType.RPAREN):
            return None
        return expression

    def _parse_if_expression(self) -> Optional[Expression]:
        """Parse ``if (<cond>) { ... } else { ... }``."""
        token = self.cur_token

        if not self._expect_peek(TokenType.LPAREN):
            return None
        self._next_token()

        condition = self._parse_expression(Precedence.LOWEST)
        if condition is None:
            return None
        if not self._expect_peek(TokenType.RPAREN):
            return None
        if not self._expect_peek(TokenType.LBRACE):
            return None

        consequence = self._parse_block_statement()

        alternative = None
        if self._peek_token_is(TokenType.ELSE):
            self._next_token()
            if not self._expect_peek(TokenType.LBRACE):
                return None
            alternative = self._parse_block_statement()

        return IfExpression(token=token, condition=condition,
                            consequence=consequence, alternative=alternative)

    def _parse_function_literal(self) -> Optional[Expression]:
        """Parse ``fn(<params>) { ... }``."""
        token = self.cur_token

        if not self._expect_peek(TokenType.LPAREN):
            return None

        parameters = self._parse_function_parameters()
        if parameters is None:
            return None
        if not self._expect_peek(TokenType.LBRACE):
            return None

        body = self._parse_block_statement()
        return FunctionLiteral(token=token, parameters=parameters, body=body)

    def _parse_function_parameters(self) -> Optional[List[Identifier]]:
        parameters: List[Identifier] = []

        if self._peek_token_is(TokenType.RPAREN):
            self._next_token()
            return parameters

        if not self._expect_peek(TokenType.IDENT):
            return None
        parameters.append(Identifier(token=self.cur_token, value=self.cur_token.literal))

        while self._peek_token_is(TokenType.COMMA):
            self._next_token()
            if not self._expect_peek(TokenType.IDENT):
                return None
            parameters.append(Identifier(token=self.cur_token, value=self.cur_token.literal))

        if not self._expect_peek(TokenType.RPAREN):
            return None
        return parameters

    def _parse_call_expression(self, function: Expression) -> Optional[Expression]:
        token = self.cur_token
        arguments = self._parse_expression_list(TokenType.RPAREN)
        if arguments is None:
            return None
        return CallExpression(token=token, function=function, arguments=arguments)

    def _parse_array_literal(self) -> Optional[Expression]:
        token = self.cur_token
        elements = self._parse_expression_list(TokenType.RBRACKET)
        if elements is None:
            return None
        return ArrayLiteral(token=token, elements=elements)

    def _parse_expression_list(self, end: TokenType) -> Optional[List[Expression]]:
        """Parse a comma-separated expression list closed by ``end``."""
        items: List[Expression] = []

        if self._peek_token_is(end):
            self._next_token()
            return items

        self._next_token()
        item = self._parse_expression(Precedence.LOWEST)
        if item is None:
            return None
        items.append(item)

        while self._peek_token_is(TokenType.COMMA):
            self._next_token()
            self._next_token()
            item = self._parse_expression(Precedence.LOWEST)
            if item is None:
                return None
            items.append(item)

        if not self._expect_peek(end):
            return None
        return items

    def _parse_index_expression(self, left: Expression) -> Optional[Expression]:
        token = self.cur_token
        self._next_token()

        index = self._parse_expression(Precedence.LOWEST)
        if index is None:
            return None
        if not self._expect_peek(TokenType.RBRACKET):
            return None
        return IndexExpression(token=token, left=left, index=index)

    def _parse_hash_literal(self) -> Optional[Expression]:
        """Parse ``{<key>: <value>, ...}``."""
        token = self.cur_token
        pairs = []

        while not self._peek_token_is(TokenType.RBRACE):
            self._next_token()
            key = self._parse_expression(Precedence.LOWEST)
            if key is None:
                return None
            if not self._expect_peek(TokenType.COLON):
                return None

            self._next_token()
            value = self._parse_expression(Precedence.LOWEST)
            if value is None:
                return None
            pairs.append((key, value))

            if not self._peek_token_is(TokenType.RBRACE) and not self._expect_peek(TokenType.COMMA):
                return None

        if not self._expect_peek(TokenType.RBRACE):
            return None
        return HashLiteral(token=token, pairs=pairs)


def parse(source: str, filename: Optional[str] = None, max_errors: int = 20) -> Program:
    """
    Convenience function to parse source code into a Program.

    Args:
        source: The source code to parse
        filename: Optional filename for diagnostics
        max_errors: Stop recording diagnostics after this many errors

    Returns:
        Parsed Program AST

    Raises:
        ParseError: If the parser recorded any diagnostics
    """
    parser = Parser(Lexer(source, filename), max_errors)
    program = parser.parse_program()
    if parser.diagnostics.has_errors:
        raise ParseError(parser.diagnostics.diagnostics)
    return program
