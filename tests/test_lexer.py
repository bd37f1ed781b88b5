"""
Unit tests for the Monkey lexer.
"""

import pytest
from monkey import tokenize, Lexer, TokenType, lookup_ident


def kinds(source):
    return [t.type for t in tokenize(source)]


class TestLexerBasics:
    """Test basic lexer functionality."""

    def test_empty_source(self):
        """Empty source produces only EOF."""
        tokens = tokenize("")
        assert len(tokens) == 1
        assert tokens[0].type == TokenType.EOF
        assert tokens[0].literal == ""

    def test_whitespace_only(self):
        """Whitespace-only source produces only EOF."""
        assert kinds("  \t\r\n  ") == [TokenType.EOF]

    def test_single_character_tokens(self):
        """Operators and delimiters are scanned one character at a time."""
        tokens = tokenize("=+(){},;!-/* 5 < 10 > 5")
        pairs = [(t.type, t.literal) for t in tokens]
        assert pairs == [
            (TokenType.ASSIGN, "="),
            (TokenType.PLUS, "+"),
            (TokenType.LPAREN, "("),
            (TokenType.RPAREN, ")"),
            (TokenType.LBRACE, "{"),
            (TokenType.RBRACE, "}"),
            (TokenType.COMMA, ","),
            (TokenType.SEMICOLON, ";"),
            (TokenType.BANG, "!"),
            (TokenType.MINUS, "-"),
            (TokenType.SLASH, "/"),
            (TokenType.ASTERISK, "*"),
            (TokenType.INT, "5"),
            (TokenType.LT, "<"),
            (TokenType.INT, "10"),
            (TokenType.GT, ">"),
            (TokenType.INT, "5"),
            (TokenType.EOF, ""),
        ]

    def test_let_statement(self):
        """Basic let statement tokenization."""
        tokens = tokenize("let five = 5;")
        assert [t.type for t in tokens] == [
            TokenType.LET,
            TokenType.IDENT,
            TokenType.ASSIGN,
            TokenType.INT,
            TokenType.SEMICOLON,
            TokenType.EOF,
        ]
        assert tokens[1].literal == "five"
        assert tokens[3].literal == "5"

    def test_function_definition(self):
        """A function literal bound with let."""
        source = "let add = fn(x, y) {\n  x + y;\n};"
        assert kinds(source) == [
            TokenType.LET, TokenType.IDENT, TokenType.ASSIGN,
            TokenType.FUNCTION, TokenType.LPAREN, TokenType.IDENT,
            TokenType.COMMA, TokenType.IDENT, TokenType.RPAREN,
            TokenType.LBRACE, TokenType.IDENT, TokenType.PLUS,
            TokenType.IDENT, TokenType.SEMICOLON, TokenType.RBRACE,
            TokenType.SEMICOLON, TokenType.EOF,
        ]

    def test_array_and_hash_delimiters(self):
        """Brackets and colons for array, index and hash syntax."""
        assert kinds('[1, 2]; {"foo": "bar"}') == [
            TokenType.LBRACKET, TokenType.INT, TokenType.COMMA,
            TokenType.INT, TokenType.RBRACKET, TokenType.SEMICOLON,
            TokenType.LBRACE, TokenType.STRING, TokenType.COLON,
            TokenType.STRING, TokenType.RBRACE, TokenType.EOF,
        ]


class TestOperators:
    """Test one- and two-character operators."""

    def test_equality_operators(self):
        """== and != are single tokens."""
        tokens = tokenize("10 == 10; 10 != 9;")
        assert [t.type for t in tokens] == [
            TokenType.INT, TokenType.EQ, TokenType.INT, TokenType.SEMICOLON,
            TokenType.INT, TokenType.NOT_EQ, TokenType.INT, TokenType.SEMICOLON,
            TokenType.EOF,
        ]
        assert tokens[1].literal == "=="
        assert tokens[5].literal == "!="

    def test_bang_and_assign_without_equals(self):
        """A lone ! or = stays a single-character token."""
        assert kinds("!x = y") == [
            TokenType.BANG, TokenType.IDENT, TokenType.ASSIGN,
            TokenType.IDENT, TokenType.EOF,
        ]

    def test_no_whitespace_needed(self):
        """Operators split adjacent operands."""
        tokens = tokenize("5!=10")
        assert [t.literal for t in tokens] == ["5", "!=", "10", ""]


class TestKeywordsAndIdentifiers:
    """Test keyword lookup and identifier scanning."""

    @pytest.mark.parametrize("word,expected", [
        ("fn", TokenType.FUNCTION),
        ("let", TokenType.LET),
        ("if", TokenType.IF),
        ("else", TokenType.ELSE),
        ("return", TokenType.RETURN),
        ("true", TokenType.TRUE),
        ("false", TokenType.FALSE),
        ("foobar", TokenType.IDENT),
        ("letter", TokenType.IDENT),
    ])
    def test_lookup_ident(self, word, expected):
        """Keywords map to their token type, everything else is IDENT."""
        assert lookup_ident(word) == expected
        assert tokenize(word)[0].type == expected

    def test_underscore_identifier(self):
        """Underscores are identifier characters."""
        tokens = tokenize("foo_bar _x")
        assert [t.literal for t in tokens[:2]] == ["foo_bar", "_x"]

    def test_digits_end_identifier(self):
        """Digits are not identifier characters."""
        tokens = tokenize("x1")
        assert [(t.type, t.literal) for t in tokens[:2]] == [
            (TokenType.IDENT, "x"),
            (TokenType.INT, "1"),
        ]


class TestStrings:
    """Test string literal scanning."""

    def test_simple_string(self):
        """Literal excludes the quotes."""
        tokens = tokenize('"foobar"')
        assert tokens[0].type == TokenType.STRING
        assert tokens[0].literal == "foobar"

    def test_string_with_spaces(self):
        """Whitespace inside a string is kept."""
        assert tokenize('"foo bar"')[0].literal == "foo bar"

    def test_empty_string(self):
        """Two quotes make an empty string."""
        token = tokenize('""')[0]
        assert token.type == TokenType.STRING
        assert token.literal == ""

    def test_no_escape_processing(self):
        """Backslashes are kept as-is."""
        assert tokenize(r'"a\nb"')[0].literal == "a\\nb"

    def test_unterminated_string(self):
        """An unterminated string becomes ILLEGAL including the opening quote."""
        tokens = tokenize('"abc')
        assert tokens[0].type == TokenType.ILLEGAL
        assert tokens[0].literal == '"abc'
        assert tokens[1].type == TokenType.EOF


class TestIllegalAndEof:
    """Test unknown characters and end of input."""

    @pytest.mark.parametrize("ch", ["@", "#", "$", "%", "&", "."])
    def test_unknown_character(self, ch):
        """Unknown characters produce ILLEGAL tokens."""
        token = tokenize(ch)[0]
        assert token.type == TokenType.ILLEGAL
        assert token.literal == ch

    def test_lexing_continues_after_illegal(self):
        """An ILLEGAL token does not stop the stream."""
        assert kinds("1 @ 2") == [
            TokenType.INT, TokenType.ILLEGAL, TokenType.INT, TokenType.EOF,
        ]

    def test_eof_repeats(self):
        """next_token keeps returning EOF at end of input."""
        lexer = Lexer("x")
        assert lexer.next_token().type == TokenType.IDENT
        for _ in range(3):
            assert lexer.next_token().type == TokenType.EOF

    def test_iteration_ends_with_single_eof(self):
        """Iterating a lexer yields tokens through exactly one EOF."""
        tokens = list(Lexer("let x"))
        assert [t.type for t in tokens].count(TokenType.EOF) == 1
        assert tokens[-1].type == TokenType.EOF


class TestPositions:
    """Test source span tracking."""

    def test_position_tracking(self):
        """Token positions are tracked correctly."""
        tokens = tokenize("let x = 5;")
        assert tokens[0].span.start.line == 1
        assert tokens[0].span.start.column == 1
        assert tokens[1].span.start.column == 5
        assert tokens[3].span.start.column == 9

    def test_multiline_positions(self):
        """Line numbers advance across newlines."""
        tokens = tokenize("let a = 1;\nlet b = 2;")
        second_let = tokens[5]
        assert second_let.type == TokenType.LET
        assert second_let.span.start.line == 2
        assert second_let.span.start.column == 1

    def test_filename_in_location(self):
        """Filename is carried into locations."""
        tokens = tokenize("x", filename="prog.monkey")
        assert str(tokens[0].span.start) == "prog.monkey:1:1"

    def test_get_source_line(self):
        """Source lines are available for diagnostics."""
        lexer = Lexer("first\nsecond")
        assert lexer.get_source_line(2) == "second"
        assert lexer.get_source_line(3) is None
