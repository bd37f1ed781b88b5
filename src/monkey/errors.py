"""
Diagnostics and host-level exceptions.

Language-level failures never travel as Python exceptions: the lexer emits
ILLEGAL tokens, the parser records diagnostics, and the evaluator returns
error values. The exceptions here cover the host side (the strict ``parse``
helper and configuration loading).

Error code ranges:
- E1xx: Parser errors
- E5xx: Configuration errors
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, List
from .tokens import SourceSpan, NO_SPAN


class ErrorSeverity(Enum):
    """Severity levels for diagnostics. The parser only reports errors."""
    ERROR = "error"


@dataclass
class Diagnostic:
    """A single parser diagnostic with its location and optional hints."""
    code: str                       # E101, E102, etc.
    message: str                    # Human-readable message
    severity: ErrorSeverity
    span: SourceSpan
    source_line: Optional[str] = None   # The actual line of source code
    hints: List[str] = field(default_factory=list)

    def format(self, show_source: bool = True) -> str:
        """Format the diagnostic for display."""
        parts = []

        # Header: location: severity[code]: message
        loc = f"{self.span.start}"
        parts.append(f"{loc}: {self.severity.value}[{self.code}]: {self.message}")

        # Source line with caret
        if show_source and self.source_line is not None:
            parts.append("  |")
            line_num = str(self.span.start.line)
            parts.append(f"{line_num:>3} | {self.source_line}")

            col = self.span.start.column
            end_col = self.span.end.column if self.span.start.line == self.span.end.line else len(self.source_line) + 1
            underline_len = max(1, end_col - col)
            parts.append(f"    | {' ' * (col - 1)}{'^' * underline_len}")

        for hint in self.hints:
            parts.append(f"    = hint: {hint}")

        return "\n".join(parts)

    def to_json(self) -> dict:
        """Convert to JSON-serializable dict for tooling integration."""
        return {
            "code": self.code,
            "message": self.message,
            "severity": self.severity.value,
            "range": {
                "start": {
                    "line": self.span.start.line,
                    "column": self.span.start.column,
                    "offset": self.span.start.offset,
                },
                "end": {
                    "line": self.span.end.line,
                    "column": self.span.end.column,
                    "offset": self.span.end.offset,
                },
            },
            "hints": self.hints,
        }


class MonkeyError(Exception):
    """Base exception for host-level interpreter errors."""

    def __init__(self, diagnostic: Diagnostic):
        self.diagnostic = diagnostic
        super().__init__(diagnostic.message)

    def __str__(self) -> str:
        return self.diagnostic.format()


class ParseError(MonkeyError):
    """Raised by the strict ``parse`` helper when the parser recorded diagnostics."""

    def __init__(self, diagnostics: List[Diagnostic]):
        self.diagnostics = list(diagnostics)
        super().__init__(self.diagnostics[0])

    @property
    def messages(self) -> List[str]:
        return [d.message for d in self.diagnostics]

    def __str__(self) -> str:
        return "\n".join(d.format() for d in self.diagnostics)


class ConfigError(MonkeyError):
    """Invalid configuration file or value (E5xx)."""
    pass


# --- Parser diagnostics ---

def error_unexpected_token(expected: str, found: str, span: SourceSpan,
                           source_line: str = None) -> Diagnostic:
    """E101: Unexpected token."""
    return Diagnostic(
        code="E101",
        message=f"expected next token to be {expected}, got {found} instead",
        severity=ErrorSeverity.ERROR,
        span=span,
        source_line=source_line,
    )


def error_no_prefix_parse_fn(token_type: str, span: SourceSpan,
                             source_line: str = None) -> Diagnostic:
    """E102: No expression can start with this token."""
    diag = Diagnostic(
        code="E102",
        message=f"no prefix parse function for {token_type} found",
        severity=ErrorSeverity.ERROR,
        span=span,
        source_line=source_line,
    )
    if token_type == "ILLEGAL":
        diag.hints.append("the lexer could not recognize this text; check for stray characters or unterminated strings")
    return diag


def error_invalid_integer(literal: str, span: SourceSpan,
                          source_line: str = None) -> Diagnostic:
    """E103: Integer literal that does not fit in 64 bits."""
    return Diagnostic(
        code="E103",
        message=f"could not parse {literal} as integer",
        severity=ErrorSeverity.ERROR,
        span=span,
        source_line=source_line,
        hints=["integer literals must fit in a signed 64-bit integer"],
    )


# --- Configuration errors ---

def error_invalid_config(message: str) -> ConfigError:
    """E501: Invalid configuration."""
    diag = Diagnostic(
        code="E501",
        message=message,
        severity=ErrorSeverity.ERROR,
        span=NO_SPAN,
    )
    return ConfigError(diag)


class DiagnosticCollector:
    """Collects diagnostics during parsing."""

    def __init__(self, max_errors: int = 20):
        self.diagnostics: List[Diagnostic] = []
        self.max_errors = max_errors
        self._error_count = 0

    def add(self, diagnostic: Diagnostic) -> None:
        """Add a diagnostic."""
        self.diagnostics.append(diagnostic)
        if diagnostic.severity == ErrorSeverity.ERROR:
            self._error_count += 1

    @property
    def error_count(self) -> int:
        return self._error_count

    @property
    def has_errors(self) -> bool:
        return self._error_count > 0

    @property
    def should_stop(self) -> bool:
        """Check if we've hit the max error limit."""
        return self._error_count >= self.max_errors

    @property
    def messages(self) -> List[str]:
        return [d.message for d in self.diagnostics]

    def format_all(self, show_source: bool = True) -> str:
        """Format all diagnostics for display."""
        parts = [d.format(show_source) for d in self.diagnostics]
        if self._error_count > 0:
            parts.append(f"{self._error_count} error(s)")
        return "\n\n".join(parts)

    def to_json(self) -> dict:
        """Convert all diagnostics to JSON format."""
        return {
            "diagnostics": [d.to_json() for d in self.diagnostics],
            "error_count": self._error_count,
        }
