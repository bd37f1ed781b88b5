"""
Lexer for the Monkey language.

Converts source text into a lazy stream of tokens for the parser.
Supports:
- Single-character operators and delimiters
- Two-character operators (== and !=)
- Identifiers and keywords (runs of ASCII letters and underscores)
- Integer literals (runs of decimal digits, kept as raw text)
- Double-quoted string literals (no escape processing)

The lexer never raises. Unknown characters and unterminated strings come
out as ILLEGAL tokens, and the parser reports them downstream.
"""

from typing import List, Optional, Iterator
from .tokens import Token, TokenType, SourceLocation, SourceSpan, lookup_ident

WHITESPACE = ' \t\n\r'

SINGLE_CHAR_TOKENS = {
    '=': TokenType.ASSIGN,
    '+': TokenType.PLUS,
    '-': TokenType.MINUS,
    '!': TokenType.BANG,
    '*': TokenType.ASTERISK,
    '/': TokenType.SLASH,
    '<': TokenType.LT,
    '>': TokenType.GT,
    ',': TokenType.COMMA,
    ';': TokenType.SEMICOLON,
    ':': TokenType.COLON,
    '(': TokenType.LPAREN,
    ')': TokenType.RPAREN,
    '{': TokenType.LBRACE,
    '}': TokenType.RBRACE,
    '[': TokenType.LBRACKET,
    ']': TokenType.RBRACKET,
}


def _is_letter(ch: str) -> bool:
    return ('a' <= ch <= 'z') or ('A' <= ch <= 'Z') or ch == '_'


def _is_digit(ch: str) -> bool:
    return '0' <= ch <= '9'


class Lexer:
    """
    Tokenizer for Monkey source text.

    Usage:
        lexer = Lexer(source_code)
        token = lexer.next_token()

    Or for streaming:
        for token in Lexer(source_code):
            process(token)

    Calling ``next_token`` past the end of input keeps returning EOF.
    """

    def __init__(self, source: str, filename: Optional[str] = None):
        self.source = source
        self.filename = filename
        self.pos = 0            # Current position in source
        self.line = 1           # Current line (1-indexed)
        self.column = 1         # Current column (1-indexed)
        self._lines: Optional[List[str]] = None  # Cached line list

    @property
    def lines(self) -> List[str]:
        """Lazy-load line list for error reporting."""
        if self._lines is None:
            self._lines = self.source.splitlines()
        return self._lines

    def get_source_line(self, line_num: int) -> Optional[str]:
        """Get a specific line of source (1-indexed)."""
        if 1 <= line_num <= len(self.lines):
            return self.lines[line_num - 1]
        return None

    def _location(self) -> SourceLocation:
        """Get current source location."""
        return SourceLocation(self.line, self.column, self.pos, self.filename)

    def _peek(self, offset: int = 0) -> str:
        """Look at character at current position + offset without consuming."""
        idx = self.pos + offset
        if idx >= len(self.source):
            return '\0'
        return self.source[idx]

    def _advance(self) -> str:
        """Consume and return current character."""
        if self.pos >= len(self.source):
            return '\0'
        ch = self.source[self.pos]
        self.pos += 1
        if ch == '\n':
            self.line += 1
            self.column = 1
        else:
            self.column += 1
        return ch

    def _is_at_end(self) -> bool:
        """Check if we've reached end of source."""
        return self.pos >= len(self.source)

    def _skip_whitespace(self) -> None:
        while not self._is_at_end() and self._peek() in WHITESPACE:
            self._advance()

    def _make_token(self, token_type: TokenType, start: SourceLocation,
                    literal: Optional[str] = None) -> Token:
        """Create a token spanning from start to the current position."""
        if literal is None:
            literal = self.source[start.offset:self.pos]
        return Token(token_type, literal, SourceSpan(start, self._location()))

    def _scan_string(self, start: SourceLocation) -> Token:
        """Scan a string literal; the opening quote is already consumed."""
        while not self._is_at_end() and self._peek() != '"':
            self._advance()

        if self._is_at_end():
            return self._make_token(TokenType.ILLEGAL, start)

        value = self.source[start.offset + 1:self.pos]
        self._advance()  # consume closing quote
        return self._make_token(TokenType.STRING, start, value)

    def _scan_run(self, predicate) -> None:
        while not self._is_at_end() and predicate(self._peek()):
            self._advance()

    def next_token(self) -> Token:
        """Scan and return the next token."""
        self._skip_whitespace()

        start = self._location()
        if self._is_at_end():
            return self._make_token(TokenType.EOF, start, "")

        ch = self._peek()

        if _is_letter(ch):
            self._scan_run(_is_letter)
            literal = self.source[start.offset:self.pos]
            return self._make_token(lookup_ident(literal), start, literal)

        if _is_digit(ch):
            self._scan_run(_is_digit)
            return self._make_token(TokenType.INT, start)

        self._advance()

        if ch == '"':
            return self._scan_string(start)

        # Two-character operators
        if ch == '=' and self._peek() == '=':
            self._advance()
            return self._make_token(TokenType.EQ, start)
        if ch == '!' and self._peek() == '=':
            self._advance()
            return self._make_token(TokenType.NOT_EQ, start)

        if ch in SINGLE_CHAR_TOKENS:
            return self._make_token(SINGLE_CHAR_TOKENS[ch], start)

        return self._make_token(TokenType.ILLEGAL, start)

    def tokenize(self) -> List[Token]:
        """Tokenize the remaining source, returning a list ending with EOF."""
        return list(self)

    def __iter__(self) -> Iterator[Token]:
        """Iterate over tokens up to and including EOF."""
        while True:
            token = self.next_token()
            yield token
            if token.type == TokenType.EOF:
                break


def tokenize(source: str, filename: Optional[str] = None) -> List[Token]:
    """
    Convenience function to tokenize source code.

    Args:
        source: The source code to tokenize
        filename: Optional filename for diagnostics

    Returns:
        List of tokens, the last of which is EOF
    """
    lexer = Lexer(source, filename)
    return lexer.tokenize()
