r"""
Clide option and command descriptors.

Overview
- Option: a named, typed configurable value. The 'type' field is the
  discriminant of a tagged variant:
  • "string":  free text; may declare choices and a validate callable.
  • "number":  int or float; may declare choices and a validate callable.
  • "boolean": presence or literal; may be negatable (synthetic --no-<name>).
- Command: a description plus its own option table, scoped independently
  from the global options.
- Scope: which result map a resolved value belongs to (global or command).

- Factories
  • string(...), number(...), boolean(...) build an Option of that type.

Metadata (sanitized on construction)
- short: Unset | str (the one-letter rule is enforced by the config validator).
- description/env: Unset | str, non-empty when provided.
- required/hidden/negatable: bool; negatable is only meaningful for booleans.
- default: Unset | value of the declared type.
- choices: Iterable of values of the declared type (duplicates rejected, booleans excluded).
- validate: Unset | Callable[[value], bool | str].

Quick example:
    >>> from clide.options import Command, boolean, string
    >>> build = Command("compile sources", options={
    ...     "minify": boolean(short="m"),
    ...     "out": string(required=True, env="BUILD_OUT"),
    ... })
"""
import functools
import operator
import re
from collections.abc import Iterable, Mapping
from enum import Enum

from .utils import *

TYPES = ("string", "number", "boolean")


class Scope(str, Enum):
    """
    Result map a resolved option value lands in.
    """
    GLOBAL = "global"
    COMMAND = "command"

    def __str__(self):
        return self.value


class DescriptorType(type):
    """
    Metaclass that turns descriptor classes into introspectable, read-only records.

    Responsibilities
    - Expose every name listed in __introspectable__ as a read-only property
      mirroring the private "_<name>" field (see mirror()).
    - Provide stable __repr__/__rich_repr__ implementations for diagnostics.
    - Derive __typename__ from the class name for messages.
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

        def __repr__(self):
            return "%s(%s)" % (
                type(self).__typename__,
                ", ".join(map(functools.partial(operator.mod, "%s=%r"), self.__rich_repr__())),
            )
        self.__repr__ = __repr__

        def __rich_repr__(self):
            for name in type(self).__introspectable__:
                if (object := getattr(self, name)) is not None:
                    yield name, object
        self.__rich_repr__ = __rich_repr__

        return self


def _isvalue(type, object, /):
    """
    Check that object is a value of the declared option type.
    """
    match type:
        case "string":
            return isinstance(object, str)
        case "number":
            return isinstance(object, int | float) and not isinstance(object, bool) and object == object
        case "boolean":
            return isinstance(object, bool)
    raise AssertionError("unreachable option type %r" % type)


def _sanitize_metadata(cls, metadata, /):
    """
    Internal: normalize and validate the shared descriptor text fields.

    - description/env: optional; non-empty strings after trimming when provided.

    Raises
    - TypeError: if a field is not a string or Unset.
    - ValueError: if a field is a string but empty after trimming.
    """
    for field in ("description", "env"):
        if field not in metadata:
            continue
        if not isinstance(value := metadata[field], str | Unset):
            raise TypeError(f"{cls.__typename__} {field!r} must be a string")
        elif isinstance(value, str) and not (value := value.strip()):
            raise ValueError(f"{cls.__typename__} {field!r} cannot be empty")
        metadata[field] = value


def _sanitize_typed_metadata(cls, metadata, /):
    """
    Internal: validate the fields whose contents depend on the option type.

    - type: one of "string", "number", "boolean".
    - short: Unset or a string (its one-letter shape is checked by the config validator).
    - default: Unset or a value of the declared type.
    - choices: values of the declared type, no duplicates, not for booleans.
    - validate: Unset or callable, not for booleans.
    - negatable: booleans only.
    """
    if (type := metadata["type"]) not in TYPES:
        raise ValueError(f"{cls.__typename__} 'type' must be one of {', '.join(map(repr, TYPES))}")

    if not isinstance(metadata["short"], str | Unset):
        raise TypeError(f"{cls.__typename__} 'short' must be a string")

    if (default := metadata["default"]) is not Unset and not _isvalue(type, default):
        raise TypeError(f"{cls.__typename__} 'default' must be a {type} value")

    if not isinstance(choices := metadata["choices"], Iterable) or isinstance(choices, str):
        raise TypeError(f"{cls.__typename__} 'choices' must be an iterable of values")
    sanitized = []
    for choice in choices:
        if not _isvalue(type, choice):
            raise TypeError(f"{cls.__typename__} 'choices' must only contain {type} values")
        if choice in sanitized:
            raise ValueError(f"{cls.__typename__} 'choices' cannot contain duplicates")
        sanitized.append(choice)
    metadata["choices"] = tuple(sanitized)

    if metadata["validate"] is not Unset and not callable(metadata["validate"]):
        raise TypeError(f"{cls.__typename__} 'validate' must be callable")

    if type == "boolean":
        if metadata["choices"]:
            raise TypeError(f"boolean {cls.__typename__} cannot declare 'choices'")
        if metadata["validate"] is not Unset:
            raise TypeError(f"boolean {cls.__typename__} cannot declare 'validate'")
    elif metadata["negatable"]:
        raise TypeError(f"{type} {cls.__typename__} cannot be 'negatable'")


class Option(metaclass=DescriptorType):
    """
    Named, typed option specification.

    Option declares how one configurable value is supplied (flag, environment,
    default, or prompt), coerced, validated, and rendered in help. It is an
    immutable record: every field is a read-only property.

    Highlights
    - 'type' is the discriminant: "string", "number", or "boolean".
    - 'short' is a one-letter alias unique within its scope.
    - 'env' names an environment variable used when no flag is given.
    - 'required' options left unresolved are prompted for (or rejected when
      prompts are disabled).
    - 'negatable' booleans accept --no-<name> to store False.
    - 'hidden' options are parsed but omitted from help.
    """

    __introspectable__ = (
        "type",
        "short",
        "description",
        "required",
        "default",
        "env",
        "choices",
        "validate",
        "negatable",
        "hidden",
    )

    def __init__(
            self,
            type,
            /,
            *,
            short=Unset,
            description=Unset,
            required=False,
            default=Unset,
            env=Unset,
            choices=(),
            validate=Unset,
            negatable=False,
            hidden=False,
    ):
        metadata = {
            "type": type,
            "short": short,
            "description": description,
            "required": bool(required),
            "default": default,
            "env": env,
            "choices": choices,
            "validate": validate,
            "negatable": bool(negatable),
            "hidden": bool(hidden),
        }
        _sanitize_metadata(self.__class__, metadata)
        _sanitize_typed_metadata(self.__class__, metadata)

        # Mirror sanitized metadata into private fields; read-only properties expose them.
        for name, object in metadata.items():
            setattr(self, "_" + name, object)

    def accepts(self, value, /):
        """
        Tell whether value is of this option's declared type.
        """
        return _isvalue(self._type, value)


class Command(metaclass=DescriptorType):
    """
    Subcommand specification: a description and its own option table.

    The option table is copied on construction; option names live in their
    own scope, so a command may reuse names and short aliases of other
    commands or of the global options.
    """

    __introspectable__ = (
        "description",
        "options",
    )

    def __init__(self, description=Unset, /, *, options=None):
        metadata = {
            "description": description,
        }
        _sanitize_metadata(self.__class__, metadata)

        if options is None:
            options = {}
        if not isinstance(options, Mapping):
            raise TypeError(f"{self.__class__.__typename__} 'options' must be a mapping")
        for name, option in options.items():
            if not isinstance(name, str):
                raise TypeError(f"{self.__class__.__typename__} option names must be strings")
            if not isinstance(option, Option):
                raise TypeError(f"{self.__class__.__typename__} option {name!r} must be an option")

        self._description = metadata["description"]
        self._options = dict(options)


def string(**metadata):
    """
    Build a string Option; keyword arguments are forwarded to Option.
    """
    return Option("string", **metadata)


def number(**metadata):
    """
    Build a number Option; keyword arguments are forwarded to Option.
    """
    return Option("number", **metadata)


def boolean(**metadata):
    """
    Build a boolean Option; keyword arguments are forwarded to Option.
    """
    return Option("boolean", **metadata)


__all__ = (
    # Types
    "Scope",
    "Option",
    "Command",

    # Factories
    "string",
    "number",
    "boolean",
)
