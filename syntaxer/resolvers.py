"""
Syntaxer resolvers: command name → CommandMetadata.

A resolver is any object with a `resolve(name)` method that returns a
CommandMetadata or raises CommandNotFoundError. The pipeline treats it as a black
box; this module ships the resolvers the CLI and the library use.

What this module provides
- Registry: in-memory, case-insensitive table of commands.
  • register(metadata) or register(callable, name=..., sets=...).
  • @registry.command decorator (bare or with keywords).
  • include("pkg.**.tools"): import command modules and pick up their top-level
    CommandMetadata objects; modules may also register themselves on import.
  • resolve(name) with close-match suggestions on failure.
- signature(callable): reflect a Python callable into CommandMetadata.
  • every typing.overload variant becomes its own parameter set ("Overload1", ...);
    a callable without overloads exposes one set named "Default".
  • mandatory  = the parameter has no default.
  • valued     = the parameter is not a bool toggle (annotated bool or defaulting
    to True/False).
  • *args/**kwargs and a leading self/cls are skipped.
- ImportResolver: resolves dotted paths ("json.dumps", "pkg.mod:func") by import.
- ChainResolver: tries several resolvers in order.
- registry: the process-wide default Registry used by the CLI.

Example
    from syntaxer import registry

    @registry.command(name="Copy-Item")
    def copy_item(path, destination=None, *, recurse: bool = False): ...

    registry.resolve("copy-item").sets[0].parameters
    # (path: mandatory valued, destination: optional valued, recurse: optional toggle)
"""
import builtins
import difflib
import functools
import importlib
import inspect
import logging
import typing
from inspect import Parameter

from .faults import CommandNotFoundError
from .parameters import CommandMetadata, ParameterDescriptor, ParameterSet
from .utils import *

logger = logging.getLogger(__name__)


def _is_toggle(parameter):
    if parameter.annotation is bool or parameter.annotation == "bool":
        return True
    return isinstance(parameter.default, bool)


def _describe(signature):
    for index, parameter in enumerate(signature.parameters.values()):
        if parameter.kind in (Parameter.VAR_POSITIONAL, Parameter.VAR_KEYWORD):
            continue
        if index == 0 and parameter.name in ("self", "cls"):
            continue
        yield ParameterDescriptor(
            parameter.name,
            mandatory=parameter.default is Parameter.empty,
            valued=not _is_toggle(parameter),
        )


def signature(callable, /, name=Unset):
    """
    Build CommandMetadata from a Python callable by reflection.

    Parameters
    - callable: function, method, class or any object inspect.signature accepts.
    - name: command name; defaults to the callable's __name__.

    Raises
    - TypeError: when the object is not callable, has no name, or exposes no
      introspectable signature.
    - ValueError: when two parameters share a name under case-insensitive
      comparison (for instance `a` and `A`).
    """
    if not builtins.callable(callable):
        raise TypeError("signature() argument must be callable")
    if not isinstance(name := coalesce(name, getattr(callable, "__name__", None)), str):
        raise TypeError("signature() cannot name a callable without __name__")

    try:
        overloads = typing.get_overloads(callable)
    except AttributeError:
        overloads = []

    try:
        variants = [inspect.signature(variant) for variant in overloads or [callable]]
    except ValueError as error:
        # inspect.signature() fails this way for some C-implemented callables
        raise TypeError(f"no signature available for {name!r}") from error

    if overloads:
        sets = [ParameterSet(f"Overload{index}", _describe(variant)) for index, variant in enumerate(variants, 1)]
    else:
        sets = [ParameterSet("Default", _describe(variants[0]))]

    return CommandMetadata(name, sets)


class Registry:
    """
    In-memory command table implementing the resolver contract.

    Names are compared case-insensitively unless ignorecase=False, matching how
    command names are typed on a command line.
    """

    def __init__(self, *, ignorecase=True):
        self._commands = {}
        self._key = casekey(ignorecase)

    def __contains__(self, name):
        return isinstance(name, str) and self._key(name) in self._commands

    def __iter__(self):
        return iter(self._commands.values())

    def __len__(self):
        return len(self._commands)

    def register(self, source, /, name=Unset, sets=Unset):
        """
        Register a command and return `source` unchanged.

        Forms
        - register(CommandMetadata(...))
        - register(callable)                  → reflected with signature()
        - register(callable, name="Get-Item") → reflected, renamed
        - register(callable, sets=[...])      → explicit sets, named after the callable

        Raises
        - TypeError: unsupported source, or name/sets given with a CommandMetadata.
        - ValueError: a command with the same name is already registered.
        """
        if isinstance(source, CommandMetadata):
            if name is not Unset or sets is not Unset:
                raise TypeError("register() cannot rename or reshape a command-metadata")
            metadata = source
        elif builtins.callable(source):
            if sets is Unset:
                metadata = signature(source, name)
            else:
                metadata = CommandMetadata(coalesce(name, getattr(source, "__name__", None)), sets)
        else:
            raise TypeError("register() argument must be a command-metadata or a callable")

        if (key := self._key(metadata.name)) in self._commands:
            raise ValueError(f"command {metadata.name!r} is already registered")
        self._commands[key] = metadata
        logger.debug("registered %r with %d parameter set(s)", metadata.name, len(metadata))
        return source

    def command(self, source=Unset, /, *, name=Unset, sets=Unset):
        """
        Decorator form of register().

            @registry.command
            def get_item(path, *, force: bool = False): ...

            @registry.command(name="Get-Item")
            def get_item(path, *, force: bool = False): ...
        """
        @rename("command")
        def wrapper(source, /):
            if not builtins.callable(source):
                raise TypeError("@command() must be applied to a callable")
            return self.register(source, name, sets)

        return wrapper(source) if source is not Unset else wrapper

    def include(self, source, /):
        """
        Import every module matched by a module glob and register its commands.

        Modules may register themselves on import (for instance through
        @registry.command); in addition every top-level CommandMetadata found in a
        module's globals is registered. Objects already registered under the same
        name with equal metadata are skipped.

        Returns
        - list of imported module names.

        Raises
        - TypeError: when source is not a string or a module cannot be imported.
        - ValueError: when a discovered command clashes with a different one.
        """
        if not isinstance(source, str):
            raise TypeError("include() argument must be a string")

        def imp(module):
            try:
                return importlib.import_module(module)
            except ImportError:
                raise TypeError(f"unable to import module {module!r}") from None

        modules = mglob(source)
        for module in map(imp, modules):
            for _, object in inspect.getmembers(module, lambda x: isinstance(x, CommandMetadata)):
                if self._commands.get(self._key(object.name)) == object:
                    continue
                self.register(object)

        logger.debug("included %r: %s", source, ", ".join(modules) or "no module")
        return modules

    def resolve(self, name, /):
        """
        Return the CommandMetadata registered under `name`.

        Raises
        - CommandNotFoundError: with up to five close matches in the hint.
        """
        try:
            return self._commands[self._key(name)]
        except KeyError:
            pass

        names = [metadata.name for metadata in self._commands.values()]
        suggestions = difflib.get_close_matches(name, names, 5)
        raise CommandNotFoundError(
            f"command {name!r} is not known",
            input=name,
            hint=f"did you mean: {", ".join(map(repr, suggestions))}?" if suggestions else
            "register the command or include the module that declares it",
        )


class ImportResolver:
    """
    Resolve dotted paths to Python callables and reflect their signatures.

    Accepted forms: "package.module.function", "package.module:Class.method".
    The longest importable module prefix wins; the rest is walked with getattr.

    Importing runs the module's import-time code in-process. A module that fails
    while importing (any exception other than a missing module) ends the lookup
    with CommandNotFoundError, and so does a callable whose parameters clash.
    """

    def resolve(self, name, /):
        parts = name.replace(":", ".").split(".")

        for index in range(len(parts) - 1, 0, -1):
            try:
                module = importlib.import_module(prefix := ".".join(parts[:index]))
            except (ImportError, ValueError):
                continue
            except Exception as error:
                raise CommandNotFoundError(
                    f"command {name!r} is not importable",
                    input=name,
                    hint=f"importing {prefix!r} failed: {type(error).__name__}: {error}",
                ) from error
            try:
                object = functools.reduce(getattr, parts[index:], module)
            except AttributeError:
                break
            try:
                return signature(object, name)
            except TypeError:
                break
            except ValueError as error:
                raise CommandNotFoundError(
                    f"command {name!r} cannot be described",
                    input=name,
                    hint=str(error),
                ) from error

        raise CommandNotFoundError(
            f"command {name!r} is not importable",
            input=name,
            hint="use a dotted path such as 'package.module.function'",
        )


class ChainResolver:
    """
    Try each resolver in order; the first one that does not raise
    CommandNotFoundError wins. When all fail, the first failure is re-raised.
    """

    def __init__(self, *resolvers):
        for resolver in resolvers:
            if not hasattr(resolver, "resolve") or not builtins.callable(resolver.resolve):
                raise TypeError("ChainResolver() arguments must implement a resolve method")
        self._resolvers = resolvers

    def resolve(self, name, /):
        faults = []
        for resolver in self._resolvers:
            try:
                return resolver.resolve(name)
            except CommandNotFoundError as fault:
                faults.append(fault)
        if faults:
            raise faults[0]
        raise CommandNotFoundError(f"command {name!r} is not known", input=name)


registry = Registry()


__all__ = (
    "Registry",
    "ImportResolver",
    "ChainResolver",
    "signature",
    "registry",
)
