"""A simple Julia REPL running through the call bridge."""

import builtins
import enum
from typing import Callable, Optional

from jlbridge.calling import CallLayer
import jlbridge.logging


DEFAULT_PROMPT = 'julia> '
TERMINATOR = ';'

_logger = jlbridge.logging.get_logger(__name__)


class ReplState(enum.Enum):
    READING = 'reading'
    TERMINATED = 'terminated'


def is_terminator(line: str) -> bool:
    return line.startswith(TERMINATOR)


def repl(
    layer: CallLayer,
    prompt: str = DEFAULT_PROMPT,
    is_done: Optional[Callable[[str], bool]] = None,
    input: Optional[Callable[[str], str]] = None,
    on_result: Optional[Callable[[object], None]] = None,
) -> ReplState:
    """Read Julia expressions and evaluate them until is_done says to stop.

    By default a line starting with ';' ends the session. Errors raised while
    evaluating a line are not caught here; they end the loop.

    A trailing ';' does not suppress anything: every line is evaluated the
    same way and its value passed to on_result. Whether to show the value is
    up to on_result.
    """
    if is_done is None:
        is_done = is_terminator
    if input is None:
        input = builtins.input
    state = ReplState.READING
    while state is ReplState.READING:
        line = input(prompt)
        if is_done(line):
            state = ReplState.TERMINATED
            continue
        value = layer.eval(line)
        if on_result is not None:
            on_result(value)
    _logger.debug('REPL terminated')
    return state
