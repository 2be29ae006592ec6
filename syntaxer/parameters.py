r"""
Syntaxer parameter model: descriptors, parameter sets and command metadata.

Overview
- Specs
  • ParameterDescriptor: one declared parameter of a command (name, mandatory, valued).
  • ParameterSet: a named, ordered grouping of descriptors; a command may expose several
    mutually exclusive sets.
  • CommandMetadata: the resolved command name plus its ordered parameter sets.

- Introspection & representation
  • ParameterType metaclass provides stable __repr__/__rich_repr__, value equality and
    hashing, and exposes the fields listed in __introspectable__ as read-only properties.

Metadata (sanitized on construction)
- name: non-empty string without whitespace. For descriptors, one leading dash is
  accepted and stripped, so "-Path" and "Path" declare the same parameter.
- mandatory / valued: coerced to bool.
- parameters: iterable of ParameterDescriptor; names must be unique inside a set
  (compared case-insensitively, the way command lines are matched).
- sets: iterable of ParameterSet; set names must be unique inside a command.

Quick example:
    >>> from syntaxer.parameters import ParameterDescriptor, ParameterSet, CommandMetadata
    >>> items = ParameterSet("ByPath", (
    ...     ParameterDescriptor("Path", mandatory=True),
    ...     ParameterDescriptor("Force", valued=False),
    ... ))
    >>> CommandMetadata("Get-Item", (items,))
    command-metadata(name='Get-Item', sets=(...))

Public API
- Classes: ParameterDescriptor, ParameterSet, CommandMetadata
- Constants: COMMON_PARAMETERS
"""
import functools
import operator
import re
from collections.abc import Iterable

from .utils import *

COMMON_PARAMETERS = frozenset({
    # verbosity / diagnostics
    "Verbose",
    "Debug",
    "ErrorAction",
    "WarningAction",
    "InformationAction",
    "ProgressAction",
    "ErrorVariable",
    "WarningVariable",
    "InformationVariable",
    "OutVariable",
    "OutBuffer",
    "PipelineVariable",
    # confirmation
    "WhatIf",
    "Confirm",
})


class ParameterType(type):
    """
    Metaclass that turns model classes into immutable, introspectable values.

    Responsibilities
    - Derive __typename__ from the class name (camel-case split with hyphens) for
      messages and representations.
    - Expose every name listed in __introspectable__ as a read-only property
      backed by the private "_{name}" field.
    - Provide __repr__/__rich_repr__ plus __eq__/__hash__ over those fields.
    - Lock instances after construction: attribute assignment raises.
    """
    __introspectable__ = ()

    def __new__(cls, name, bases, namespace, **options):
        self = super().__new__(
            cls,
            name,
            bases,
            namespace | {
                "__typename__": re.sub(r"(?<!^)(?=[A-Z])", r"-", name).lower(),
            } | {
                name: mirror(name) for name in namespace.get("__introspectable__", ())
            },
        )

        @rename("__repr__")
        def __repr__(self):
            return f"{type(self).__typename__}({
                ", ".join(map(functools.partial(operator.mod, "%s=%r"), self.__rich_repr__()))
            })"
        self.__repr__ = __repr__

        @rename("__rich_repr__")
        def __rich_repr__(self):
            for name in type(self).__introspectable__:
                yield name, getattr(self, name)
        self.__rich_repr__ = __rich_repr__

        @rename("__eq__")
        def __eq__(self, other):
            if type(other) is not type(self):
                return NotImplemented
            return tuple(self.__rich_repr__()) == tuple(other.__rich_repr__())
        self.__eq__ = __eq__

        @rename("__hash__")
        def __hash__(self):
            return hash((type(self).__typename__, *self.__rich_repr__()))
        self.__hash__ = __hash__

        @rename("__setattr__")
        def __setattr__(self, name, value, /):
            if getattr(self, "_sealed", False):
                raise AttributeError(f"{type(self).__typename__} is immutable")
            object.__setattr__(self, name, value)
        self.__setattr__ = __setattr__

        return self


def _sanitize_name(cls, name, /, *, dashed=False):
    """
    Internal: validate and normalize a parameter, set or command name.

    Rules
    - must be a string; surrounding whitespace is trimmed.
    - must be non-empty and contain no inner whitespace.
    - when dashed is True, a single leading dash is stripped ("-Path" → "Path").

    Raises
    - TypeError: when name is not a string.
    - ValueError: when the normalized name is empty or contains whitespace.
    """
    if not isinstance(name, str):
        raise TypeError(f"{cls.__typename__} 'name' must be a string")
    name = name.strip()
    if dashed and name.startswith("-"):
        name = name[1:]
    if not name:
        raise ValueError(f"{cls.__typename__} 'name' cannot be empty")
    if re.search(r"\s", name):
        raise ValueError(f"{cls.__typename__} 'name' cannot contain whitespace")
    return name


def _sanitize_members(cls, members, kind, /, *, ignorecase=True):
    """
    Internal: validate an iterable of model members and reject duplicate names.

    Duplicates are detected with the same comparison used for matching, so a set
    declaring both "Path" and "path" is rejected under case-insensitive matching.
    """
    if isinstance(members, str) or not isinstance(members, Iterable):
        raise TypeError(f"{cls.__typename__} members must be an iterable of {kind.__typename__}")
    key = casekey(ignorecase)
    sanitized = []
    seen = set()
    for member in members:
        if not isinstance(member, kind):
            raise TypeError(f"{cls.__typename__} members must be {kind.__typename__} instances")
        if (folded := key(member.name)) in seen:
            raise ValueError(f"{cls.__typename__} cannot contain duplicated name {member.name!r}")
        seen.add(folded)
        sanitized.append(member)
    return tuple(sanitized)


class ParameterDescriptor(metaclass=ParameterType):
    """
    One declared parameter of a command.

    Properties
    - name: parameter name without its leading dash.
    - mandatory: the parameter must be supplied for its set to be satisfied.
    - valued: the parameter carries a value; False means a presence-only toggle.
    """

    __introspectable__ = (
        "name",
        "mandatory",
        "valued",
    )

    def __init__(self, name, /, mandatory=False, valued=True):
        self._name = _sanitize_name(type(self), name, dashed=True)
        self._mandatory = bool(mandatory)
        self._valued = bool(valued)
        self._sealed = True

    @property
    def toggle(self):
        """
        True for presence-only parameters (the inverse of valued).
        """
        return not self.valued


class ParameterSet(metaclass=ParameterType):
    """
    A named, ordered grouping of parameter descriptors.

    The order of `parameters` is the declaration order supplied by the resolver and
    is kept through annotation and rendering.
    """

    __introspectable__ = (
        "name",
        "parameters",
    )

    def __init__(self, name, parameters=(), /):
        self._name = _sanitize_name(type(self), name)
        self._parameters = _sanitize_members(type(self), parameters, ParameterDescriptor)
        self._sealed = True

    def __iter__(self):
        return iter(self._parameters)

    def __len__(self):
        return len(self._parameters)

    def names(self, *, ignorecase=True):
        """
        Return the comparison keys of every parameter name in this set.
        """
        return frozenset(map(casekey(ignorecase), (parameter.name for parameter in self._parameters)))

    def without(self, exclusions, /, *, ignorecase=True):
        """
        Return a copy of this set with every parameter named in `exclusions` removed.

        Names are compared with the same case rule used for matching.
        """
        key = casekey(ignorecase)
        excluded = frozenset(map(key, exclusions))
        return type(self)(self.name, (
            parameter for parameter in self._parameters if key(parameter.name) not in excluded
        ))


class CommandMetadata(metaclass=ParameterType):
    """
    Resolved command name and its parameter sets, in resolver order.

    Zero sets is legal: such a command renders no set blocks.
    """

    __introspectable__ = (
        "name",
        "sets",
    )

    def __init__(self, name, sets=(), /):
        self._name = _sanitize_name(type(self), name)
        self._sets = _sanitize_members(type(self), sets, ParameterSet, ignorecase=False)
        self._sealed = True

    def __iter__(self):
        return iter(self._sets)

    def __len__(self):
        return len(self._sets)


__all__ = (
    # Classes
    "ParameterDescriptor",
    "ParameterSet",
    "CommandMetadata",

    # Constants
    "COMMON_PARAMETERS",
)

# Keep the internal metaclass out of star-imports and docs.
del ParameterType
