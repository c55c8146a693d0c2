"""
Clide value coercion and validation rules.

Overview
- tonumber(text): numeric parse of a raw string (int when integral, float otherwise).
- toboolean(text, truthy, falsy): literal lookup, case-insensitive.
- fromtext(type, text, ...): dispatch on the option type; Unset when the text
  cannot be read as a value of that type.
- check(option, name, value, command=...): the validation rules shared by the
  finalizer and the prompter (type, then choices, then the custom validate).

Every helper matches exhaustively on the option type; an unknown type is a
programming error (AssertionError), since Option already rejects it.
"""
import re

from .faults import *
from .utils import *

TRUTHY = ("true", "yes", "1")
FALSY = ("false", "no", "0")

NUMBER = re.compile(
    r"""
    (?P<radix>0[xX][0-9a-fA-F]+|0[oO][0-7]+|0[bB][01]+)
    | (?P<integer>[+-]?[0-9]+)
    | (?P<decimal>[+-]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?|[+-]?Infinity)
    """,
    re.VERBOSE,
)


def tonumber(text, /):
    """
    Parse text as a number, or return Unset.

    Accepted forms, surrounding whitespace ignored:
    - integers ("42", "-7") and radix literals ("0x1F", "0o17", "0b101") give an int.
    - decimals ("2.5", ".5", "1.", "1e3") and "Infinity" give a float.

    Empty text, NaN, digit separators ("1_000") and signed radix literals are
    not numbers.
    """
    if (match := NUMBER.fullmatch(text.strip())) is None:
        return Unset
    if match["radix"] is not None:
        return int(match["radix"], 0)
    if match["integer"] is not None:
        return int(match["integer"])
    return float(match["decimal"])


def toboolean(text, /, truthy=TRUTHY, falsy=FALSY):
    """
    Read text as a boolean literal, or return Unset.
    """
    text = text.lower()
    if text in truthy:
        return True
    if text in falsy:
        return False
    return Unset


def fromtext(type, text, /, *, truthy=TRUTHY, falsy=FALSY):
    match type:
        case "string":
            return text
        case "number":
            return tonumber(text)
        case "boolean":
            return toboolean(text, truthy, falsy)
    raise AssertionError("unreachable option type %r" % type)


def _where(command, /):
    return "" if command is None else " for command %r" % command


def check(option, name, value, /, *, command=None):
    """
    Validate a resolved value against its option.

    Rules, in order
    - type: the value must be of the declared type (TypeMismatchError).
    - choices: when declared, the value must be one of them (InvalidChoiceError).
    - validate: when declared, a string result is the rejection message and a
      falsy result is a generic rejection (RejectedValueError).

    Returns the value unchanged when every rule passes.
    """
    scope = "global" if command is None else "command"

    if not option.accepts(value):
        raise TypeMismatchError(
            "value %r for option %r%s is not a %s" % (value, name, _where(command), option.type),
            code=FaultCode.TYPE_MISMATCH,
            input=value,
            option=name,
            scope=scope,
            command=command,
            hint="pass a %s value to '--%s'" % (option.type, name),
        )

    if (choices := option.choices) and value not in choices:
        raise InvalidChoiceError(
            "value %r for option %r%s is not a valid choice" % (value, name, _where(command)),
            code=FaultCode.INVALID_CHOICE,
            input=value,
            option=name,
            scope=scope,
            command=command,
            choices=tuple(choices),
            hint="valid choices are %s" % ", ".join(map(str, choices)),
        )

    if (validate := option.validate) is not None:
        verdict = validate(value)
        if isinstance(verdict, str) and verdict:
            raise RejectedValueError(
                verdict,
                code=FaultCode.REJECTED_VALUE,
                input=value,
                option=name,
                scope=scope,
                command=command,
            )
        if not verdict:
            raise RejectedValueError(
                "value %r for option %r%s is invalid" % (value, name, _where(command)),
                code=FaultCode.REJECTED_VALUE,
                input=value,
                option=name,
                scope=scope,
                command=command,
            )

    return value


__all__ = (
    # Constants
    "TRUTHY",
    "FALSY",

    # Functions
    "tonumber",
    "toboolean",
    "fromtext",
    "check",
)
