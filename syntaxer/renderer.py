"""
Syntax renderer: annotated parameter sets → styled lines.

render() is the only place where text is laid out. It returns a tuple of Line
objects, each an immutable sequence of Segment(text, style) pairs. Styles are
semantic (Style members); nothing in here knows about escape codes or terminal
width. paint() is the console edge: it maps each Style onto a rich style string
and produces a rich Text.

Layout (one block per parameter set, blocks separated by a blank line)
    ParameterSet Name: ByPath - Validated List
    Get-Item -Path <value> [+] -Filter <value> -Force [!]
    <blank>
    Parameters Not Found:            (validate mode only, always present)
      -Zzz
    <blank>
    Legend:                          (only when requested)
      ...

Palette keys (overridable via __styles__ in __main__ or paint(styles=...))
- command-name, mandatory-param, optional-param, value-placeholder,
  matched-marker, mandatory-missing-marker, not-found-param, emphasis
"""
from collections import defaultdict
from enum import StrEnum
from typing import NamedTuple

from rich.text import Text

from .annotator import Category, Mode


class Style(StrEnum):
    COMMAND_NAME = "command-name"
    MANDATORY_PARAM = "mandatory-param"
    OPTIONAL_PARAM = "optional-param"
    VALUE_PLACEHOLDER = "value-placeholder"
    MATCHED_MARKER = "matched-marker"
    MANDATORY_MISSING_MARKER = "mandatory-missing-marker"
    NOT_FOUND_PARAM = "not-found-param"
    EMPHASIS = "emphasis"


VALUE_PLACEHOLDER = "<value>"
MATCHED_MARKER = "[+]"
MANDATORY_MISSING_MARKER = "[!]"

_HEADINGS = {
    Mode.VALIDATE: "Validated List",
    Mode.SHOW: "Parameter List",
}

_LEGENDS = {
    Mode.VALIDATE: (
        ("<command>", Style.COMMAND_NAME, "command name"),
        ("-Name", Style.MANDATORY_PARAM, "mandatory parameter"),
        ("-Name", Style.OPTIONAL_PARAM, "optional parameter"),
        (VALUE_PLACEHOLDER, Style.VALUE_PLACEHOLDER, "the parameter takes a value"),
        (MATCHED_MARKER, Style.MATCHED_MARKER, "parameter present in the input"),
        (MANDATORY_MISSING_MARKER, Style.MANDATORY_MISSING_MARKER, "mandatory parameter missing from the input"),
        ("-Name", Style.NOT_FOUND_PARAM, "input parameter the command does not declare"),
    ),
    Mode.SHOW: (
        ("<command>", Style.COMMAND_NAME, "command name"),
        ("-Name", Style.MANDATORY_PARAM, "mandatory parameter"),
        ("-Name", Style.OPTIONAL_PARAM, "optional parameter"),
        (VALUE_PLACEHOLDER, Style.VALUE_PLACEHOLDER, "the parameter takes a value"),
    ),
}

_MARKERS = {
    Category.MATCHED: (MATCHED_MARKER, Style.MATCHED_MARKER),
    Category.MANDATORY_MISSING: (MANDATORY_MISSING_MARKER, Style.MANDATORY_MISSING_MARKER),
}


class Segment(NamedTuple):
    text: str
    style: Style | None = None


class Line(tuple):
    """
    One rendered line: an immutable sequence of Segments.

    Plain strings given to the constructor become unstyled segments.
    """

    def __new__(cls, *segments):
        return super().__new__(cls, (
            segment if isinstance(segment, Segment) else Segment(str(segment)) for segment in segments
        ))

    @property
    def plain(self):
        return "".join(segment.text for segment in self)

    def __repr__(self):
        return f"Line({self.plain!r})"


def _parameter(annotated, mode):
    descriptor, category = annotated
    style = Style.MANDATORY_PARAM if descriptor.mandatory else Style.OPTIONAL_PARAM
    yield Segment(" ")
    yield Segment("-" + descriptor.name, style)
    if descriptor.valued:
        yield Segment(" ")
        yield Segment(VALUE_PLACEHOLDER, Style.VALUE_PLACEHOLDER)
    if mode is Mode.VALIDATE and category in _MARKERS:
        yield Segment(" ")
        yield Segment(*_MARKERS[category])


def _block(annotated, command, mode):
    header = Line(
        "ParameterSet Name: ",
        Segment(annotated.name, Style.EMPHASIS),
        " - " + _HEADINGS[mode],
    )
    syntax = Line(
        Segment(command, Style.COMMAND_NAME),
        *(segment for parameter in annotated.parameters for segment in _parameter(parameter, mode)),
    )
    return header, syntax


def _missing(tokens):
    yield Line(Segment("Parameters Not Found:", Style.EMPHASIS))
    for token in tokens:
        yield Line("  ", Segment("-" + token, Style.NOT_FOUND_PARAM))


def _legend(mode):
    yield Line(Segment("Legend:", Style.EMPHASIS))
    width = max(len(sample) for sample, _, _ in _LEGENDS[mode])
    for sample, style, meaning in _LEGENDS[mode]:
        yield Line("  ", Segment(sample, style), " " * (width - len(sample) + 2), meaning)


def render(annotation, command, /, mode=Mode.VALIDATE, *, legend=False):
    """
    Lay out an Annotation as styled lines.

    Parameters
    - annotation: Annotation from annotate().
    - command: command name shown at the head of each syntax line.
    - mode: Mode.VALIDATE or Mode.SHOW (selects headings, markers and legend).
    - legend: append the legend block for this mode.

    Returns
    - tuple[Line, ...]; blocks are separated by one empty Line.
    """
    mode = Mode(mode)
    blocks = [_block(annotated, command, mode) for annotated in annotation.sets]
    if mode is Mode.VALIDATE:
        blocks.append(tuple(_missing(annotation.missing)))
    if legend:
        blocks.append(tuple(_legend(mode)))

    lines = []
    for index, block in enumerate(blocks):
        if index:
            lines.append(Line())
        lines.extend(block)
    return tuple(lines)


def plain(lines, /):
    """
    Join rendered lines into unstyled text.
    """
    return "\n".join(line.plain for line in lines)


def paint(lines, /, *, colorful=True, styles=None):
    """
    Map rendered lines onto a rich Text.

    Palette resolution: built-in defaults, then __styles__ from __main__, then the
    `styles` argument. With colorful=False every segment is left unstyled.
    """
    palette = defaultdict(str, {
        "command-name": "bold #FF4D94",  # MAGENTA-PINK → brand pop
        "mandatory-param": "bold #00E6FF",  # CYAN for required parameters
        "optional-param": "#9CA3AF",  # Muted gray for optional ones
        "value-placeholder": "bold #FFD600",  # AMBER for values
        "matched-marker": "bold #22C55E",  # GREEN
        "mandatory-missing-marker": "bold #EF4444",  # RED
        "not-found-param": "bold #F97316 strike",  # ORANGE strike
        "emphasis": "bold #FFFFFF",  # Pure white headers
    } | getattr(__import__("__main__"), "__styles__", {}) | dict(styles or {}))

    painted = Text()
    for index, line in enumerate(lines):
        if index:
            painted.append("\n")
        for segment in line:
            painted.append(segment.text, palette[segment.style] if colorful and segment.style else "")
    return painted


__all__ = (
    "Style",
    "Segment",
    "Line",
    "render",
    "plain",
    "paint",
    "VALUE_PLACEHOLDER",
    "MATCHED_MARKER",
    "MANDATORY_MISSING_MARKER",
)
