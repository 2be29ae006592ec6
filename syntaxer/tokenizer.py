"""
Command-line text tokenizer.

tokenize() splits a free-form command string into the command name and the
parameter names it mentions. It is a heuristic, not a shell parser:

- the command name is the first run of non-whitespace characters;
- a parameter token is any run of non-whitespace characters that follows
  whitespace and a single dash ("Get-Item -Path x -Force" → Path, Force).

Known limitations (kept on purpose)
- values are not told apart from parameters: a hyphenated value that follows a
  space ("-Filter -x") is reported as a parameter too;
- quotes are not honoured, so "'a -b'" yields the token "b'".
"""
import logging
import re
from typing import NamedTuple

from .faults import NoCommandFoundError

logger = logging.getLogger(__name__)

_COMMAND = re.compile(r"\S+")
_PARAMETER = re.compile(r"\s-(\S+)")


class Invocation(NamedTuple):
    """
    Tokenized command text: the command name and its parameter tokens.

    tokens keeps the input order and drops repeated occurrences.
    """
    name: str
    tokens: tuple[str, ...]


def tokenize(raw, /):
    """
    Split `raw` into an Invocation.

    Raises
    - TypeError: when raw is not a string.
    - NoCommandFoundError: when raw holds no non-whitespace character.
    """
    if not isinstance(raw, str):
        raise TypeError("tokenize() argument must be a string")

    if not (match := _COMMAND.search(raw)):
        raise NoCommandFoundError(
            "no command name could be read from the input",
            hint="start the text with the command to inspect, e.g. 'Get-Item -Path'",
        )

    # dict keeps first-seen order while dropping repeats
    tokens = dict.fromkeys(_PARAMETER.findall(raw, match.end()))

    logger.debug("tokenized %r: command=%r tokens=%r", raw, match.group(), tuple(tokens))
    return Invocation(match.group(), tuple(tokens))


__all__ = (
    "Invocation",
    "tokenize",
)
