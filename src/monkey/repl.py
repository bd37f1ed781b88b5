"""
Interactive console for Monkey.

Reads one line at a time, runs it in a persistent Interpreter and prints
either the parser diagnostics or the value's display form.
"""

import logging
import sys
from typing import Optional, TextIO

from .config import Settings
from .runtime.interpreter import Interpreter

logger = logging.getLogger(__name__)


def start(input: Optional[TextIO] = None, output: Optional[TextIO] = None,
          settings: Optional[Settings] = None) -> int:
    """
    Run the read-eval-print loop until end of input.

    Returns the number of lines evaluated.
    """
    input = input if input is not None else sys.stdin
    output = output if output is not None else sys.stdout
    settings = settings if settings is not None else Settings()

    interpreter = Interpreter(settings, output)
    count = 0

    while True:
        output.write(settings.prompt)
        output.flush()

        line = input.readline()
        if not line:
            break
        count += 1

        try:
            result = interpreter.run(line, filename="<stdin>")
        except RecursionError:
            logger.debug("recursion limit hit on line %d", count)
            output.write("fatal: maximum recursion depth exceeded\n")
            continue

        text = result.display
        if text:
            output.write(text + "\n")

    return count
