r"""
Clide token parser.

A Scanner walks one segment of the argument list at a time against the option
table of its parsing context and writes what it reads into a Program.

Parsing context
- program segment: global options only.
- command segment: that command's options; for the default command, global
  options are accepted too and are looked up first (fallthrough).

Token shapes
- "--name", "--name=value": long options, names lowercased. "--no-name" falls
  back to the negation of a negatable boolean "name".
- "-x", "-x=value", "-xyz", "-xyz=value": short letters, case-sensitive. Every
  letter but the last must be a boolean in scope and is set to true; the last
  one is the primary option.
- "--": ends option parsing; every following token is positional.
- anything else (including a lone "-"): positional when permitted.

Values
- boolean: an "=value" or a following true/false literal is consumed;
  presence alone means true. Other "=value" text is an InvalidBooleanError.
- number: required; int when integral, float otherwise; NaN is not a number.
- string: required; taken as is, even when it starts with "-".

Messages lead with the token's ordinal position in the full argument list.
"""
import difflib
import re
from collections import deque

from .faults import *
from .utils import *
from .values import FALSY, TRUTHY, fromtext

STACK = re.compile(r"-(?P<stack>[^=]*)(=(?P<value>.*))?", re.DOTALL)


class Scanner:
    """
    Segment parser bound to a registry and the Program being built.

    Parameters
    - registry: the validated Registry.
    - program: the Program that receives values and positionals.
    - truthy/falsy: boolean literals (compared lowercased).
    """

    def __init__(self, registry, program, /, *, truthy=TRUTHY, falsy=FALSY):
        self._registry = registry
        self._program = program
        self._truthy = tuple(map(str.lower, truthy))
        self._falsy = tuple(map(str.lower, falsy))

        self._tokens = deque()
        self._index = 0
        self._command = None
        self._fallthrough = False

    def scan(self, tokens, /, *, command=None, fallthrough=False, offset=0):
        """
        Parse one segment.

        Parameters
        - tokens: the segment's raw tokens.
        - command: active command for a command segment; None for the program segment.
        - fallthrough: the command is the default one (global options accepted first).
        - offset: number of tokens before this segment in the full argument list.

        Returns the Program, updated in place.
        """
        self._tokens = deque(tokens)
        self._index = offset
        self._command = command
        self._fallthrough = fallthrough

        while self._tokens:
            token = self._next()
            if token == "--":
                while self._tokens:
                    self._positional(self._next())
            elif token.startswith("--"):
                self._long(token)
            elif token.startswith("-") and token != "-":
                self._short(token)
            else:
                self._positional(token)

        return self._program

    def _next(self):
        self._index += 1
        return self._tokens.popleft()

    def _where(self):
        return "" if self._command is None else " for command %r" % self._command

    def _lookup(self, name=Unset, /, *, short=Unset):
        return self._registry.lookup(name, short=short, command=self._command, fallthrough=self._fallthrough)

    def _unknown(self, input, position, /, *, name=Unset):
        """
        Build the UnknownOptionError for input, with a did-you-mean hint when one is close.
        """
        hint = None
        if name is not Unset:
            candidates = self._registry.names(self._command, fallthrough=self._fallthrough)
            if suggestions := difflib.get_close_matches(name.lower(), candidates, 1):
                hint = "did you mean '--%s'?" % suggestions[0]
        if hint is None and self._registry.helpers:
            hint = "run '%s --help' to see all available options" % self._registry.name
        return UnknownOptionError(
            "unknown option %r%s at %s position" % (input, self._where(), ordinal(position)),
            code=FaultCode.UNKNOWN_OPTION,
            input=input,
            index=position,
            command=self._command,
            hint=hint,
        )

    def _long(self, token):
        position = self._index
        name, separator, value = token[2:].partition("=")
        value = value if separator else Unset

        if (resolved := self._lookup(name)) is not None:
            scope, name, option = resolved
            return self._consume(scope, name, option, value, token, position)

        if name.lower().startswith("no-") and (resolved := self._lookup(name[3:])) is not None:
            if resolved[2].type == "boolean" and resolved[2].negatable:
                return self._consume(*resolved, value, token, position, negated=True)

        raise self._unknown(token.partition("=")[0], position, name=name)

    def _short(self, token):
        position = self._index
        match = STACK.fullmatch(token)
        stack = match["stack"]
        value = Unset if match["value"] is None else match["value"]

        if not stack:
            raise self._unknown(token, position)

        *leading, last = stack
        for letter in leading:
            resolved = self._lookup(short=letter)
            if resolved is None or resolved[2].type != "boolean":
                raise InvalidStackError(
                    "invalid option stack %r%s at %s position: '-%s' is not a boolean option"
                    % (token, self._where(), ordinal(position), letter),
                    code=FaultCode.INVALID_STACK,
                    input=token,
                    index=position,
                    command=self._command,
                    hint="only boolean options can be stacked before the last letter",
                )
            scope, name, option = resolved
            self._program._assign(name, True, scope)

        if (resolved := self._lookup(short=last)) is None:
            raise self._unknown("-" + last, position)
        scope, name, option = resolved
        return self._consume(scope, name, option, value, token, position)

    def _literal(self, text):
        return fromtext("boolean", text, truthy=self._truthy, falsy=self._falsy)

    def _require(self, name, token, position):
        """
        Take the next token as the value of a string or number option.
        """
        if not self._tokens:
            raise MissingValueError(
                "missing value for option %r%s at %s position" % (name, self._where(), ordinal(position)),
                code=FaultCode.MISSING_VALUE,
                input=token,
                index=position,
                option=name,
                command=self._command,
                hint="pass it as '--%s=<value>' or '--%s <value>'" % (name, name),
            )
        return self._next()

    def _consume(self, scope, name, option, value, token, position, *, negated=False):
        """
        Read the value of a resolved option and store it in its scope.
        """
        match option.type:
            case "boolean":
                if value is Unset and self._tokens and self._literal(self._tokens[0]) is not Unset:
                    value = self._next()
                if value is Unset:
                    result = True
                elif (result := self._literal(value)) is Unset:
                    raise InvalidBooleanError(
                        "invalid boolean value %r for option %r%s at %s position"
                        % (value, name, self._where(), ordinal(position)),
                        code=FaultCode.INVALID_BOOLEAN,
                        input=value,
                        index=position,
                        option=name,
                        command=self._command,
                        hint="use one of %s" % ", ".join(self._truthy + self._falsy),
                    )
                if negated:
                    result = not result
            case "number":
                if value is Unset:
                    value = self._require(name, token, position)
                if (result := fromtext("number", value)) is Unset:
                    raise NotANumberError(
                        "value %r for option %r%s at %s position is not a number"
                        % (value, name, self._where(), ordinal(position)),
                        code=FaultCode.NOT_A_NUMBER,
                        input=value,
                        index=position,
                        option=name,
                        command=self._command,
                        hint="pass a number such as 8080 or 0.5",
                    )
            case "string":
                if value is Unset:
                    value = self._require(name, token, position)
                result = value
            case _:
                raise AssertionError("unreachable option type %r" % option.type)

        self._program._assign(name, result, scope)

    def _positional(self, token):
        if self._program._positionals is None:
            raise UnknownArgumentError(
                "unknown argument %r%s at %s position" % (token, self._where(), ordinal(self._index)),
                code=FaultCode.UNKNOWN_ARGUMENT,
                input=token,
                index=self._index,
                command=self._command,
                hint="positional arguments are not accepted; pass values through options",
            )
        self._program._extend([token])


__all__ = (
    "Scanner",
)
