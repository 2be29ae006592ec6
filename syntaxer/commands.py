"""
Syntaxer command layer: run the pipeline and expose it on the command line.

What this module provides
- syntax(text, mode, ...): tokenize → resolve → annotate → render, returning the
  rendered lines; in shell mode the lines are also printed through rich and faults
  end the process with status 1.
- main(argv): the `syntaxer` console script.

Quick start
    from syntaxer import registry, syntax, plain, Mode

    @registry.command(name="Get-Item")
    def get_item(path, filter=None, *, force: bool = False): ...

    print(plain(syntax("Get-Item -Path C:\\ -Recurse")))
    # ParameterSet Name: Default - Validated List
    # Get-Item -path <value> [+] -filter <value> -force
    #
    # Parameters Not Found:
    #   -Recurse

Fault order
- NoCommandFoundError and NoParametersFoundError are raised while reading the text,
  before any lookup; CommandNotFoundError comes from the resolver. Nothing is
  rendered once a fault is raised.
"""
import argparse
import builtins
import logging

from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.text import Text

from .annotator import Mode, annotate
from .faults import NoParametersFoundError, SyntaxFault, trigger
from .parameters import COMMON_PARAMETERS
from .renderer import paint, render
from .resolvers import ChainResolver, ImportResolver, registry
from .tokenizer import tokenize
from .utils import *

logger = logging.getLogger(__name__)


def syntax(
        text,
        mode=Mode.VALIDATE,
        /,
        *,
        legend=False,
        resolver=Unset,
        exclusions=COMMON_PARAMETERS,
        ignorecase=True,
        shell=False,
        colorful=True,
        fancy=False,
):
    """
    Render the syntax of the command named in `text`.

    Parameters
    - text: command line such as "Get-Item -Path x -Force".
    - mode: Mode.VALIDATE cross-checks the parameters in `text`; Mode.SHOW only lists
      the command's parameter sets.
    - legend: append the legend block.
    - resolver: object with resolve(name); defaults to the process-wide registry.
    - exclusions: common parameter names left out of the analysis.
    - ignorecase: match parameter names case-insensitively.
    - shell: print the result (stdout) and report faults on stderr with exit status 1
      instead of raising them.
    - colorful / fancy: console styling when shell is True.

    Returns
    - tuple[Line, ...] as produced by render().

    Raises (shell=False)
    - NoCommandFoundError, NoParametersFoundError, CommandNotFoundError.
    """
    mode = Mode(mode)
    resolver = coalesce(resolver, registry)
    if not hasattr(resolver, "resolve") or not builtins.callable(resolver.resolve):
        raise TypeError("syntax() resolver must implement a resolve method")
    options = {"shell": bool(shell), "colorful": bool(colorful), "fancy": bool(fancy)}

    try:
        invocation = tokenize(text)
        if mode is Mode.VALIDATE and not invocation.tokens:
            raise NoParametersFoundError(
                f"no parameters were found after {invocation.name!r}",
                input=text,
                hint="add parameters such as '-Name', or list the parameter sets instead",
            )
        metadata = resolver.resolve(invocation.name)
    except SyntaxFault as fault:
        trigger(fault, **options)
        raise  # unreachable: trigger() raises or exits

    logger.debug("resolved %r to %r", invocation.name, metadata.name)
    annotation = annotate(metadata, invocation.tokens, mode, exclusions=exclusions, ignorecase=ignorecase)
    lines = render(annotation, metadata.name, mode, legend=legend)

    if shell:
        console = Console()
        renderable = paint(lines, colorful=colorful)
        if fancy:
            renderable = Panel(
                renderable,
                title=Text.assemble("[", " ", f"{metadata.name} SYNTAX".upper(), " ", "]",
                                    style="bold #FF4D94" if colorful else ""),
                title_align="left",
            )
        console.print(renderable, soft_wrap=True)

    return lines


def _parser():
    parser = argparse.ArgumentParser(
        prog="syntaxer",
        description="Show the parameter sets of a command, or check a command line against them.",
        epilog="put '--' before the command text when it starts with parameters: syntaxer -- Get-Item -Path",
    )
    parser.add_argument("text", nargs="+", help="command text, e.g. 'Get-Item -Path x -Force'")
    parser.add_argument("-s", "--show", action="store_true",
                        help="list the parameter sets without validating the command text")
    parser.add_argument("-l", "--legend", "--help-legend", action="store_true", dest="legend",
                        help="append a legend explaining colors and markers")
    parser.add_argument("-i", "--include", action="append", default=[], metavar="PATTERN",
                        help="import command modules matching a module glob (repeatable)")
    parser.add_argument("--case-sensitive", action="store_true",
                        help="match parameter names case-sensitively")
    parser.add_argument("--no-color", action="store_true", help="disable colors")
    parser.add_argument("--fancy", action="store_true", help="render inside a panel")
    parser.add_argument("--debug", action="store_true", help="log pipeline steps on stderr")
    return parser


def main(argv=None):
    """
    Entry point of the `syntaxer` console script.

    Returns 0 on success; faults exit with status 1, usage errors with status 2.
    """
    parser = _parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
    )

    for pattern in args.include:
        try:
            registry.include(pattern)
        except (TypeError, ValueError) as error:
            parser.error(str(error))

    syntax(
        " ".join(args.text),
        Mode.SHOW if args.show else Mode.VALIDATE,
        legend=args.legend,
        resolver=ChainResolver(registry, ImportResolver()),
        ignorecase=not args.case_sensitive,
        shell=True,
        colorful=not args.no_color,
        fancy=args.fancy,
    )
    return 0


__all__ = (
    "syntax",
    "main",
)
