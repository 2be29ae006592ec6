"""
Syntaxer faults (errors) and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for every user-facing failure of
  the pipeline. Codes are grouped by stage to keep logs/searches predictable.
- SyntaxFault: base type that carries message + options and knows how to render
  itself (header, message and a single hint) through rich.
- trigger(): central entry point to surface a fault (respecting shell/fancy/colorful).

Stages and faults
- tokenize (2110x): NoCommandFoundError, the input holds no command name.
- resolve  (2110x): CommandNotFoundError, the resolver knows no such command.
- validate (2111x): NoParametersFoundError, validation was asked for but the input
  names no parameter.

Integration
- Pipeline code raises a fault as soon as its stage detects it; the caller passes it
  to trigger(fault, **options).
- In non-shell mode the fault is raised to the caller; in shell mode it is rendered on
  stderr via rich and the process exits with status 1, so scripted callers can still
  detect the failure.
"""
import copy
import sys
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Console, Group
from rich.panel import Panel
from rich.text import Text

console = Console(stderr=True)


class FaultCode(IntEnum):
    """
    canonical fault codes used across the pipeline (stable identifiers).

    grouping
    - lookup (2110x)
      • NO_COMMAND_FOUND, COMMAND_NOT_FOUND
    - validation (2111x)
      • NO_PARAMETERS_FOUND

    normalize() allows host remapping to custom labels while keeping code-stability.
    """
    # --- lookup errors (21xxx) ---
    NO_COMMAND_FOUND    = 21101
    COMMAND_NOT_FOUND   = 21102

    # --- validation errors (21xxx) ---
    NO_PARAMETERS_FOUND = 21111

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__ to
        override numeric ids with friendlier labels.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


class SyntaxFault(Exception):
    """
    Base of every pipeline fault.

    Subclasses set `code` and `title`; instances carry a one-sentence message and
    read-only options (hint, shell, colorful, fancy and any context such as the
    offending input).
    """
    code = None
    title = "fault"

    def __init__(self, message, /, **options):
        if not isinstance(message, str):
            raise TypeError(f"{type(self).__name__} message must be a string")
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType({
            "code": type(self).code,
            "title": type(self).title,
            "hint": None,
            "shell": False,
            "colorful": True,
            "fancy": False,
        } | options)

    def __rich__(self):
        main = __import__("__main__")

        styles = defaultdict(str, {
            # header parts
            "prog-name": "bold #E6E6F0",  # near-white program name
            "code": "bold #00E5FF",  # neon cyan fault code
            "error-title": "bold #FF4DA6",  # friendly pinky title

            # body
            "error-message": "#C8C8D0",  # soft light gray message
            "hint-arrow": "#9CE19C dim",  # gentle green arrow
            "hint": "italic #9CE19C",  # gentle green hint text
        } | getattr(main, "__styles__", {}))

        def styler(style):
            return styles[style] if self.options["colorful"] else ""

        def text(fragment, style=""):
            if not fragment:
                return Text("")
            if isinstance(fragment, Text):
                return fragment if self.options["colorful"] else Text(fragment.plain)
            return Text(str(fragment), styler(style))

        header = Text.assemble(
            "[ ",
            text(getattr(main, "__prog__", "syntaxer"), "prog-name"),
            " — ",
            text(self.options["code"].normalize(), "code"),
            " | ",
            text(self.options["title"].title(), "error-title"),
            " ]"
        )
        message = text(self.message, "error-message")
        renders = [message]
        if self.options["hint"]:
            renders.append(Text.assemble(text(" → ", "hint-arrow"), text(self.options["hint"], "hint")))

        if self.options["fancy"]:
            return Panel(Group(*renders), title=header, title_align="left")

        return Group(header, *renders)

    def __trigger__(self):
        if not self.options["shell"]:
            raise self from None
        console.print(self)
        sys.exit(1)

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class NoCommandFoundError(SyntaxFault):
    code = FaultCode.NO_COMMAND_FOUND
    title = "no command found"


class CommandNotFoundError(SyntaxFault):
    code = FaultCode.COMMAND_NOT_FOUND
    title = "command not found"


class NoParametersFoundError(SyntaxFault):
    code = FaultCode.NO_PARAMETERS_FOUND
    title = "no parameters found"


def trigger(fault, /, **options):
    """
    surface a fault with the given runtime options.

    contract
    - fault must provide __trigger__ and __replace__ methods (see SyntaxFault).
    - options are merged into the fault via copy.replace() before triggering.
    - in shell mode, rendering happens via the rich console and the process exits
      with status 1; otherwise the fault is raised.

    typical options
    - shell, fancy, colorful, hint, and any context the reporter may want to keep.
    """
    if (
        not hasattr(fault, "__trigger__") or
        not callable(fault.__trigger__) or
        not hasattr(fault, "__replace__") or
        not callable(fault.__replace__)
    ):
        raise TypeError("trigger() argument must have a __trigger__ and __replace__ methods")
    copy.replace(fault, **options).__trigger__()


__all__ = (
    "FaultCode",
    "SyntaxFault",
    "NoCommandFoundError",
    "CommandNotFoundError",
    "NoParametersFoundError",
    "trigger",
)
