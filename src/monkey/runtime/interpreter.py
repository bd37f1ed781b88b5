"""
Interpreter sessions for embedding Monkey.

An Interpreter keeps one global environment alive across ``run`` calls, so
bindings made by one snippet are visible to the next, as in the console.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional, TextIO, Tuple

from ..ast import Program
from ..config import Settings
from ..errors import Diagnostic, DiagnosticCollector
from ..lexer import Lexer
from ..parser import Parser
from .builtins import BuiltinRegistry
from .environment import Environment
from .evaluator import Evaluator
from .values import Value, ErrorValue

logger = logging.getLogger(__name__)

PARSE_ERROR_HEADER = "parser errors:"


@dataclass
class ExecutionResult:
    """Result of running one piece of source."""
    success: bool
    value: Optional[Value] = None
    diagnostics: List[Diagnostic] = field(default_factory=list)
    error_message: Optional[str] = None

    @property
    def errors(self) -> List[str]:
        """Parser diagnostic messages."""
        return [d.message for d in self.diagnostics]

    @property
    def display(self) -> str:
        """Text a console should print for this result (may be empty)."""
        if self.diagnostics:
            lines = [PARSE_ERROR_HEADER]
            lines.extend(f"\t{msg}" for msg in self.errors)
            return "\n".join(lines)
        if self.value is None:
            return ""
        return self.value.inspect()


class Interpreter:
    """
    Long-lived evaluation session.

    Usage:
        interp = Interpreter()
        interp.run("let x = 5;")
        result = interp.run("x * 2")
        print(result.display)   # 10
    """

    def __init__(self, settings: Optional[Settings] = None,
                 output: Optional[TextIO] = None):
        self.settings = settings if settings is not None else Settings()
        self.builtins = BuiltinRegistry(output)
        self.evaluator = Evaluator(self.builtins)
        self.env = Environment(name="global")

    def parse(self, source: str,
              filename: Optional[str] = None) -> Tuple[Program, DiagnosticCollector]:
        """Parse source, returning the program and any diagnostics."""
        parser = Parser(Lexer(source, filename), self.settings.max_errors)
        program = parser.parse_program()
        return program, parser.diagnostics

    def run(self, source: str, filename: Optional[str] = None) -> ExecutionResult:
        """
        Tokenize, parse and evaluate source in this session.

        Nothing is evaluated when the parser recorded diagnostics. A
        runtime error value yields ``success=False`` with the error value
        kept in ``value``.
        """
        program, diagnostics = self.parse(source, filename)
        if diagnostics.has_errors:
            logger.info("refusing to evaluate %s: %d parse error(s)",
                        filename or "<input>", diagnostics.error_count)
            return ExecutionResult(
                success=False,
                diagnostics=list(diagnostics.diagnostics),
                error_message=diagnostics.format_all(self.settings.show_source),
            )

        logger.debug("evaluating %d statement(s)", len(program.statements))
        value = self.evaluator.evaluate(program, self.env)

        if isinstance(value, ErrorValue):
            return ExecutionResult(success=False, value=value, error_message=value.message)
        return ExecutionResult(success=True, value=value)


def run_source(source: str, settings: Optional[Settings] = None,
               output: Optional[TextIO] = None) -> ExecutionResult:
    """Convenience function: run source once in a fresh session."""
    return Interpreter(settings, output).run(source)
