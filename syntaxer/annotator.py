"""
Parameter-set annotator.

annotate() walks every parameter set of a resolved command and assigns each
descriptor a display Category:

- Mode.VALIDATE compares the descriptors with the tokens read from the command
  text: MATCHED when present (presence always wins over mandatory status),
  otherwise MANDATORY_MISSING or OPTIONAL_ABSENT.
- Mode.SHOW ignores the tokens and only tells MANDATORY from OPTIONAL.

Tokens that match no descriptor of any set are reported once, in input order, in
Annotation.missing. Common parameters (see COMMON_PARAMETERS) are dropped from the
sets and from not-found detection before anything else happens.

annotate() is a pure function: the same inputs always produce an equal Annotation.
"""
import logging
from enum import Enum, StrEnum
from typing import NamedTuple

from .parameters import COMMON_PARAMETERS, ParameterDescriptor
from .utils import casekey

logger = logging.getLogger(__name__)


class Mode(StrEnum):
    VALIDATE = "validate"
    SHOW = "show"


class Category(Enum):
    # validate mode
    MATCHED = "matched"
    MANDATORY_MISSING = "mandatory-missing"
    OPTIONAL_ABSENT = "optional-absent"
    # show mode
    MANDATORY = "mandatory"
    OPTIONAL = "optional"


class AnnotatedParameter(NamedTuple):
    descriptor: ParameterDescriptor
    category: Category


class AnnotatedSet(NamedTuple):
    name: str
    parameters: tuple[AnnotatedParameter, ...]


class Annotation(NamedTuple):
    """
    Result of annotate().

    - sets: one AnnotatedSet per parameter set, in resolver order.
    - missing: input tokens matching no declared parameter (the not-found list).
    """
    sets: tuple[AnnotatedSet, ...]
    missing: tuple[str, ...]


def _categorize(descriptor, present, mode):
    if mode is Mode.SHOW:
        return Category.MANDATORY if descriptor.mandatory else Category.OPTIONAL
    if present:
        return Category.MATCHED
    return Category.MANDATORY_MISSING if descriptor.mandatory else Category.OPTIONAL_ABSENT


def annotate(metadata, tokens=(), /, mode=Mode.VALIDATE, *, exclusions=COMMON_PARAMETERS, ignorecase=True):
    """
    Annotate every parameter set of `metadata` against `tokens`.

    Parameters
    - metadata: CommandMetadata returned by a resolver.
    - tokens: parameter names read from the command text (ignored in Mode.SHOW).
    - mode: Mode.VALIDATE or Mode.SHOW.
    - exclusions: names removed from every set and from not-found detection.
    - ignorecase: compare names case-insensitively (default).

    Returns
    - Annotation(sets, missing).
    """
    mode = Mode(mode)
    key = casekey(ignorecase)
    excluded = frozenset(map(key, exclusions))

    # The first spelling of a token wins when several only differ by case.
    unique = {}
    for token in tokens if mode is Mode.VALIDATE else ():
        if (folded := key(token)) not in excluded:
            unique.setdefault(folded, token)
    tokens = tuple(unique.values())
    present = frozenset(unique)

    sets = []
    declared = set()
    for parameters in metadata.sets:
        parameters = parameters.without(exclusions, ignorecase=ignorecase)
        declared |= parameters.names(ignorecase=ignorecase)
        sets.append(AnnotatedSet(parameters.name, tuple(
            AnnotatedParameter(descriptor, _categorize(descriptor, key(descriptor.name) in present, mode))
            for descriptor in parameters
        )))

    missing = tuple(token for token in tokens if key(token) not in declared)

    logger.debug(
        "annotated %r in %s mode: %d set(s), %d token(s) not found",
        metadata.name, mode, len(sets), len(missing),
    )
    return Annotation(tuple(sets), missing)


__all__ = (
    "Mode",
    "Category",
    "AnnotatedParameter",
    "AnnotatedSet",
    "Annotation",
    "annotate",
)
