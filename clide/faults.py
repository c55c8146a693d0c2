"""
Clide faults (errors and warnings) and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for every user-facing issue.
  Codes are grouped by pipeline stage so logs and searches stay predictable.
- ClideException: base type that carries a message plus context options
  (code, hint, input, index, scope, command, ...) and renders itself as a single
  highlighted line through rich.
- ClideWarning: base type for non-fatal diagnostics emitted through `warnings`.

Hierarchy
- ConfigurationError: the declarative schema is invalid (raised before parsing).
- ParseError: a token cannot be understood in the current scope.
- ResolutionError: a required option is missing and prompts are disabled.
- ValidationError: a resolved value breaks its type, choices, or custom check.
- PromptError: the interactive prompt could not produce a value.
- DelegatedError: a user-supplied callable (validate, prompt) raised an
  ordinary exception; the original is chained as __cause__.

Integration
- The pipeline raises faults where they are detected; the top-level parser
  catches them once and either re-raises (throw_on_error) or prints the fault
  line followed by help and terminates with status 1.
"""
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.text import Text

from .utils import Unset


class FaultCode(IntEnum):
    """
    canonical fault codes used across the pipeline (stable identifiers).

    grouping
    - configuration (101xx)
    - parsing (111xx)
    - resolution (121xx)
    - validation (131xx)
    - prompting (141xx)
    - delegated callables (151xx)
    - warnings (2xxxx)
    """
    # --- configuration errors ---
    UNKNOWN_DEFAULT_COMMAND = 10101
    UPPERCASE_NAME          = 10102
    MALFORMED_NAME          = 10103
    MALFORMED_SHORT         = 10104
    DUPLICATED_SHORT        = 10105
    NEGATION_CONFLICT       = 10106

    # --- parse errors ---
    UNKNOWN_OPTION          = 11101
    UNKNOWN_ARGUMENT        = 11102
    MISSING_VALUE           = 11103
    INVALID_BOOLEAN         = 11104
    NOT_A_NUMBER            = 11105
    INVALID_STACK           = 11106

    # --- resolution errors ---
    MISSING_REQUIRED_OPTION = 12101

    # --- validation errors ---
    TYPE_MISMATCH           = 13101
    INVALID_CHOICE          = 13102
    REJECTED_VALUE          = 13103

    # --- prompt errors ---
    PROMPT_FAILURE          = 14101
    PROMPT_TIMEOUT          = 14102

    # --- delegated errors ---
    DELEGATED_FAILURE       = 15101

    # --- warnings ---
    IGNORED_ENVIRONMENT     = 21101

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__
        to override numeric ids with friendlier labels.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


class ClideException(Exception):
    """
    Base fault: a message plus read-only context options.

    Common options
    - code: FaultCode identifying the fault.
    - hint: one short, actionable sentence.
    - colorful: style the rendered line (default True).
    """

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str)
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType(options)

    @property
    def code(self):
        return self.options.get("code")

    @property
    def hint(self):
        return self.options.get("hint")

    def __rich__(self):
        styles = defaultdict(str, {
            "error-label": "bold #FF4DA6",  # friendly pinky label
            "code": "bold #00E5FF",  # neon cyan fault code
            "error-message": "#C8C8D0",  # soft light gray message
            "hint-arrow": "#9CE19C dim",  # gentle green arrow
            "hint": "italic #9CE19C",  # gentle green hint text
        } | getattr(__import__("__main__"), "__styles__", {}))

        def styler(style):
            return styles[style] if self.options.get("colorful", True) else ""

        line = Text.assemble(("error", styler("error-label")))
        if self.code is not None:
            line.append(" [").append(self.code.normalize(), styler("code")).append("]")
        line.append(": ").append(self.message, styler("error-message"))
        if self.hint:
            line.append(" → ", styler("hint-arrow")).append(self.hint, styler("hint"))
        return line

    def __replace__(self, *unused, **overrides):
        assert not unused, "unused arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class ConfigurationError(ClideException): ...
class UnknownDefaultCommandError(ConfigurationError): ...
class UppercaseNameError(ConfigurationError): ...
class MalformedNameError(ConfigurationError): ...
class MalformedShortError(ConfigurationError): ...
class DuplicatedShortError(ConfigurationError): ...
class NegationConflictError(ConfigurationError): ...

class ParseError(ClideException): ...
class UnknownOptionError(ParseError): ...
class UnknownArgumentError(ParseError): ...
class MissingValueError(ParseError): ...
class InvalidBooleanError(ParseError): ...
class NotANumberError(ParseError): ...
class InvalidStackError(ParseError): ...

class ResolutionError(ClideException): ...
class MissingRequiredOptionError(ResolutionError): ...

class ValidationError(ClideException): ...
class TypeMismatchError(ValidationError): ...
class InvalidChoiceError(ValidationError): ...
class RejectedValueError(ValidationError): ...

class PromptError(ClideException): ...
class PromptTimeoutError(PromptError): ...

class DelegatedError(ClideException): ...


class ClideWarning(UserWarning):
    """
    Base non-fatal diagnostic; emitted with warnings.warn and never stops parsing.
    """

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str)
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType(options)

    @property
    def code(self):
        return self.options.get("code")

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class IgnoredEnvironmentWarning(ClideWarning): ...


__all__ = (
    "FaultCode",
    "ClideException",
    "ConfigurationError",
    "UnknownDefaultCommandError",
    "UppercaseNameError",
    "MalformedNameError",
    "MalformedShortError",
    "DuplicatedShortError",
    "NegationConflictError",
    "ParseError",
    "UnknownOptionError",
    "UnknownArgumentError",
    "MissingValueError",
    "InvalidBooleanError",
    "NotANumberError",
    "InvalidStackError",
    "ResolutionError",
    "MissingRequiredOptionError",
    "ValidationError",
    "TypeMismatchError",
    "InvalidChoiceError",
    "RejectedValueError",
    "PromptError",
    "PromptTimeoutError",
    "DelegatedError",
    "ClideWarning",
    "IgnoredEnvironmentWarning",
)
