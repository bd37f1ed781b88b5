"""
Token types for the Monkey lexer.

Tokens are small immutable records produced on demand by the lexer and
consumed once by the parser. Each token keeps the raw literal text it was
scanned from plus a source span used when rendering diagnostics.
"""

from enum import Enum, auto
from dataclasses import dataclass
from typing import Optional


class TokenType(Enum):
    """All token types recognized by the lexer."""

    # --- Special ---
    ILLEGAL = auto()            # unknown character or unterminated string
    EOF = auto()                # end of input

    # --- Identifiers and literals ---
    IDENT = auto()              # add, foobar, x, y
    INT = auto()                # 1343456
    STRING = auto()             # "foo bar"

    # --- Operators ---
    ASSIGN = auto()             # =
    PLUS = auto()               # +
    MINUS = auto()              # -
    BANG = auto()               # !
    ASTERISK = auto()           # *
    SLASH = auto()              # /
    LT = auto()                 # <
    GT = auto()                 # >
    EQ = auto()                 # ==
    NOT_EQ = auto()             # !=

    # --- Delimiters ---
    COMMA = auto()              # ,
    SEMICOLON = auto()          # ;
    COLON = auto()              # :
    LPAREN = auto()             # (
    RPAREN = auto()             # )
    LBRACE = auto()             # {
    RBRACE = auto()             # }
    LBRACKET = auto()           # [
    RBRACKET = auto()           # ]

    # --- Keywords ---
    FUNCTION = auto()           # fn
    LET = auto()                # let
    IF = auto()                 # if
    ELSE = auto()               # else
    RETURN = auto()             # return
    TRUE = auto()               # true
    FALSE = auto()              # false


@dataclass(frozen=True)
class SourceLocation:
    """Represents a position in source code."""
    line: int           # 1-indexed line number
    column: int         # 1-indexed column number
    offset: int         # 0-indexed character offset from start
    filename: Optional[str] = None

    def __str__(self) -> str:
        if self.filename:
            return f"{self.filename}:{self.line}:{self.column}"
        return f"{self.line}:{self.column}"


@dataclass(frozen=True)
class SourceSpan:
    """Represents a range in source code."""
    start: SourceLocation
    end: SourceLocation

    def __str__(self) -> str:
        if self.start.filename:
            return f"{self.start.filename}:{self.start.line}:{self.start.column}-{self.end.line}:{self.end.column}"
        return f"{self.start.line}:{self.start.column}-{self.end.line}:{self.end.column}"


NO_SPAN = SourceSpan(SourceLocation(1, 1, 0), SourceLocation(1, 1, 0))


@dataclass(frozen=True)
class Token:
    """A single token from the lexer."""
    type: TokenType
    literal: str            # The original source text
    span: SourceSpan = NO_SPAN

    def __str__(self) -> str:
        if self.type in (TokenType.INT, TokenType.STRING,
                         TokenType.IDENT, TokenType.ILLEGAL):
            return f"{self.type.name}({self.literal!r})"
        return self.type.name


# Keyword mapping - maps identifier text to token type
KEYWORDS: dict[str, TokenType] = {
    "fn": TokenType.FUNCTION,
    "let": TokenType.LET,
    "if": TokenType.IF,
    "else": TokenType.ELSE,
    "return": TokenType.RETURN,
    "true": TokenType.TRUE,
    "false": TokenType.FALSE,
}


def lookup_ident(ident: str) -> TokenType:
    """Resolve an identifier to its keyword token type, or IDENT."""
    return KEYWORDS.get(ident, TokenType.IDENT)

