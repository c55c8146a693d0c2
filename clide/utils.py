"""
Clide utilities (internal helpers, carefully exposed)

Overview
- UnsetType / Unset
  • Singleton sentinel to represent “value not provided” without conflating with None.
  • Falsey (bool(Unset) is False), printable as "Unset", and non-subclassable.

- coalesce(value, default=None)
  • Replace Unset with a concrete default, but preserve legitimate falsey values like None/0/""/False.

- mirror("attr")
  • Read-only property factory exposing a private backing field (self._attr) with fresh copies
    for containers so public state cannot be mutated through the returned value.

- ordinal(number)
  • English ordinal words for position-first messages ("first", "twenty-second", "101st").

- pluralize(text)
  • Small English pluralizer for labels and messages.

Usage guidance
- Prefer Unset for API defaults when None is a meaningful user value; materialize with coalesce().
- Use mirror() to expose internal state safely as read-only properties.
"""
import functools
import re
from collections.abc import Sequence, Mapping, Set
from typing import final


@final
class UnsetType:
    """
    Internal sentinel type representing a value that was not provided.

    Characteristics
    - Boolean-false: bool(Unset) is False, but it is distinct from None and 0.
    - Printable: repr(Unset) -> "Unset" for friendly diagnostics.
    - Non-subclassable: this type is sealed; do not subclass.
    - Singleton per process: UnsetType() always yields the same instance.
    """

    def __or__(self, other, /):
        """
        Support PEP 604 unions in annotations (e.g., str | UnsetType).
        """
        try:
            return type(self) | other
        except TypeError:
            return NotImplemented

    def __ror__(self, other, /):
        """
        Support reversed PEP 604 unions when UnsetType appears on the right.
        """
        try:
            return other | type(self)
        except TypeError:
            return NotImplemented

    @functools.cache
    def __new__(cls):
        return super().__new__(cls)

    def __bool__(self):
        return False

    def __repr__(self):
        return "Unset"

    def __init_subclass__(cls, **options):
        raise TypeError("type 'UnsetType' is not an acceptable base type")


def coalesce(object, default=None, /):
    """
    Resolve the Unset sentinel to a concrete default.

    Falsey values like None, 0, "", or False are preserved as-is; only Unset
    is replaced.

    Examples
    - coalesce("name", "fallback") -> "name"
    - coalesce(Unset, "fallback")  -> "fallback"
    - coalesce(False, "fallback")  -> False
    """
    return object if object is not Unset else default


def _immortalize(object):
    """
    Recursively copy container values.

    - Sequence (non-string): new list.
    - Mapping: new dict with the same keys.
    - Set: new set.
    - Anything else: returned as-is (Unset materializes to None).
    """
    if isinstance(object, Sequence) and not isinstance(object, str):
        return list(map(_immortalize, object))
    elif isinstance(object, Mapping):
        return dict(zip(object.keys(), map(_immortalize, object.values())))
    elif isinstance(object, Set):
        return set(map(_immortalize, object))
    else:
        return coalesce(object)


def mirror(name, /):
    """
    Define a read-only property that mirrors a private backing attribute.

    The generated property reads "_{name}" from the instance and returns a
    fresh copy for container types.

    Example
    - Given self._options, declare options = mirror("options") to expose it safely.
    """
    if not isinstance(name, str):
        raise TypeError("mirror() argument must be a string")

    def getter(self):
        return _immortalize(getattr(self, "_" + name))

    getter.__name__ = getter.__qualname__ = name
    return property(getter)


_ORDINALS = (
    "zeroth", "first", "second", "third", "fourth", "fifth", "sixth", "seventh", "eighth", "ninth",
    "tenth", "eleventh", "twelfth", "thirteenth", "fourteenth", "fifteenth", "sixteenth",
    "seventeenth", "eighteenth", "nineteenth",
)
_TENS = ("", "", "twenty", "thirty", "forty", "fifty", "sixty", "seventy", "eighty", "ninety")


@functools.cache
def ordinal(number, /):
    """
    Return the English ordinal for a non-negative integer.

    Words are used below one hundred ("third", "forty-second"); numeric
    suffixes above ("101st", "112th").
    """
    if not isinstance(number, int) or number < 0:
        raise TypeError("ordinal() argument must be a non-negative integer")

    if number < 20:
        return _ORDINALS[number]

    if number < 100:
        tens, units = divmod(number, 10)
        if not units:
            return _TENS[tens][:-1] + "ieth"
        return "%s-%s" % (_TENS[tens], _ORDINALS[units])

    if number % 100 in (11, 12, 13):
        return "%dth" % number
    return "%d%s" % (number, {1: "st", 2: "nd", 3: "rd"}.get(number % 10, "th"))


@functools.cache
def pluralize(text, /):
    """
    Best-effort English pluralizer for messages and labels.

    Only the last word of a phrase is pluralized; casing of that word is kept.

    Examples
    - pluralize("option")          -> "options"
    - pluralize("missing switch")  -> "missing switches"
    - pluralize("Entry")           -> "Entries"
    """
    if not isinstance(text, str):
        raise TypeError("pluralize() argument must be a string")

    match = re.search(r"(\S+)(\s*)$", text)
    if not match:
        return text

    head, last, trail = text[:match.start(1)], match.group(1), match.group(2)
    lower = last.lower()

    if lower.endswith(("s", "sh", "ch", "x", "z")):
        plural = lower + "es"
    elif lower.endswith("y") and len(lower) > 1 and lower[-2] not in "aeiou":
        plural = lower[:-1] + "ies"
    else:
        plural = lower + "s"

    if last.isupper():
        plural = plural.upper()
    elif last[:1].isupper():
        plural = plural[:1].upper() + plural[1:]

    return head + plural + trail


Unset = UnsetType()
"""
Internal sentinel for “not provided”.

Use Unset as a default when None is a valid, user-meaningful value but you still
need to distinguish “no input” from “explicitly passed None”.
"""


__all__ = (
    # Functions
    "coalesce",
    "mirror",
    "ordinal",
    "pluralize",

    # Types
    "UnsetType",

    # Constants
    "Unset",
)
