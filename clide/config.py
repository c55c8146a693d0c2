"""
Clide root configuration and its validated registry.

What this module provides
- Config: the declarative root schema (global options, commands, default
  command, and runtime switches such as prompts, help, and error policy).
- Registry: the validated, read-only view the pipeline consults. Building a
  Registry
  • copies the option tables (callers' mappings are never mutated),
  • injects the synthetic --help/-h option into every scope unless help is
    disabled or the scope already declares its own "help",
  • validates names, short aliases, and negation conflicts, and
  • builds the per-scope short → name maps used by the scanner.

Scope keys
- None stands for the global scope; a command name stands for that command's scope.

Faults
- Every schema problem raises a ConfigurationError subclass before any token
  is looked at; these are never recovered.
"""
import re
from collections.abc import Mapping
from types import MappingProxyType

from .faults import *
from .options import Command, DescriptorType, Option, Scope
from .utils import *

NAME = re.compile(r"[a-z][a-z0-9-_]*")
SHORT = re.compile(r"[a-zA-Z]")


class Config(metaclass=DescriptorType):
    """
    Root configuration of a command-line program.

    Parameters
    - options: Mapping[str, Option], the global options.
    - commands: Mapping[str, Command], the subcommands (one level).
    - name: program name shown in help (defaults to __main__.__prog__ or "cli").
    - description: text shown at the top of root help.
    - default_command: command used when the arguments name none.
    - allow_positionals: collect bare tokens instead of rejecting them.
    - disable_help: do not inject --help and do not print help.
    - disable_prompts: fail instead of prompting for missing required options.
    - prompt: collaborator (name, option, scope, program) -> value (sync or async).
    - throw_on_error: propagate faults instead of printing them and exiting.
    - timeout: seconds the default prompter waits for an answer.
    - colorful: style help and error lines.

    The option and command maps are shallow-copied, so later changes to the
    caller's dictionaries do not leak into a parse run.
    """

    __introspectable__ = (
        "options",
        "commands",
        "name",
        "description",
        "default_command",
        "allow_positionals",
        "disable_help",
        "disable_prompts",
        "prompt",
        "throw_on_error",
        "timeout",
        "colorful",
    )

    def __init__(
            self,
            options=None,
            commands=None,
            /,
            *,
            name=Unset,
            description=Unset,
            default_command=Unset,
            allow_positionals=False,
            disable_help=False,
            disable_prompts=False,
            prompt=Unset,
            throw_on_error=False,
            timeout=120.0,
            colorful=True,
    ):
        options = {} if options is None else options
        commands = {} if commands is None else commands

        if not isinstance(options, Mapping):
            raise TypeError("config 'options' must be a mapping")
        if not isinstance(commands, Mapping):
            raise TypeError("config 'commands' must be a mapping")
        for key, option in options.items():
            if not isinstance(key, str) or not isinstance(option, Option):
                raise TypeError("config 'options' must map names to options")
        for key, command in commands.items():
            if not isinstance(key, str) or not isinstance(command, Command):
                raise TypeError("config 'commands' must map names to commands")

        for field, value in (("name", name), ("description", description), ("default_command", default_command)):
            if not isinstance(value, str | Unset):
                raise TypeError(f"config {field!r} must be a string")
        if prompt is not Unset and not callable(prompt):
            raise TypeError("config 'prompt' must be callable")
        if not isinstance(timeout, int | float) or isinstance(timeout, bool) or timeout <= 0:
            raise ValueError("config 'timeout' must be a positive number of seconds")

        self._options = dict(options)
        self._commands = dict(commands)
        self._name = name
        self._description = description
        self._default_command = default_command
        self._allow_positionals = bool(allow_positionals)
        self._disable_help = bool(disable_help)
        self._disable_prompts = bool(disable_prompts)
        self._prompt = prompt
        self._throw_on_error = bool(throw_on_error)
        self._timeout = timeout
        self._colorful = bool(colorful)


def _checkname(name, kind, /):
    if name != name.lower():
        raise UppercaseNameError(
            "%s %r must be all lower case" % (kind, name),
            code=FaultCode.UPPERCASE_NAME,
            input=name,
            hint="rename it to %r" % name.lower(),
        )
    if not NAME.fullmatch(name):
        raise MalformedNameError(
            "%s %r must start with an alphabet and contain only lowercase letters, numbers, hyphens, and underscores"
            % (kind, name),
            code=FaultCode.MALFORMED_NAME,
            input=name,
            hint="use a name such as 'output-dir' or 'dry_run'",
        )


def _where(command, /):
    return "" if command is None else " for command %r" % command


def _validate(table, command, /):
    """
    Validate one scope's option table and return its short → name map.
    """
    shorts = {}
    for name, option in table.items():
        _checkname(name, "option name")

        if (short := option.short) is not None:
            if not SHORT.fullmatch(short):
                raise MalformedShortError(
                    "short option %r (on '--%s') must be a single alphabetical character" % (short, name),
                    code=FaultCode.MALFORMED_SHORT,
                    input=short,
                    option=name,
                    command=command,
                    hint="use one letter, e.g. short=%r" % name[0],
                )
            if short in shorts:
                raise DuplicatedShortError(
                    "short option '-%s' (on '--%s') is already in use by '--%s'%s"
                    % (short, name, shorts[short], _where(command)),
                    code=FaultCode.DUPLICATED_SHORT,
                    input=short,
                    option=name,
                    command=command,
                    hint="pick a different letter for one of them",
                )
            shorts[short] = name

        if option.type == "boolean" and option.negatable and "no-" + name in table:
            raise NegationConflictError(
                "boolean option %r%s is negatable but a conflicting option %r is already defined"
                % (name, _where(command), "no-" + name),
                code=FaultCode.NEGATION_CONFLICT,
                input=name,
                option=name,
                command=command,
                hint="drop 'negatable' or remove '--no-%s'" % name,
            )
    return shorts


class Registry:
    """
    Validated, immutable lookup tables built once from a Config.

    Properties
    - config: the Config this registry was built from.
    - name: program name for usage lines (config name, then __main__.__prog__, then "cli").
    - helpers: frozenset of scope keys that received the synthetic help option.

    Methods
    - table(command=None): option table of a scope (read-only mapping).
    - lookup(name, short=..., command=..., fallthrough=...): resolve a long
      name or short letter to (scope, name, option), or None.
    """

    HELP = Option("boolean", description="Show help information")

    def __init__(self, config, /):
        if not isinstance(config, Config):
            raise TypeError("registry() argument must be a config")

        tables = {None: config.options}
        for name, command in config.commands.items():
            tables[name] = command.options

        helpers = set()
        if not config.disable_help:
            for key, table in tables.items():
                if "help" in table:
                    continue
                taken = any(option.short == "h" for option in table.values())
                table["help"] = self.HELP if taken else Option(
                    "boolean", short="h", description=self.HELP.description
                )
                helpers.add(key)

        if (default := config.default_command) is not None and default not in config.commands:
            raise UnknownDefaultCommandError(
                "default command %r not found in config" % default,
                code=FaultCode.UNKNOWN_DEFAULT_COMMAND,
                input=default,
                hint="declare it under 'commands' or fix 'default_command'",
            )

        shorts = {}
        for key, table in tables.items():
            if key is not None:
                _checkname(key, "command name")
            shorts[key] = MappingProxyType(_validate(table, key))

        self._config = config
        self._name = config.name or getattr(__import__("__main__"), "__prog__", "cli")
        self._tables = MappingProxyType({key: MappingProxyType(table) for key, table in tables.items()})
        self._shorts = MappingProxyType(shorts)
        self._helpers = frozenset(helpers)

    @property
    def config(self):
        return self._config

    @property
    def name(self):
        return self._name

    @property
    def helpers(self):
        return self._helpers

    def table(self, command=None, /):
        return self._tables[command]

    def shorts(self, command=None, /):
        return self._shorts[command]

    def lookup(self, name=Unset, /, *, short=Unset, command=None, fallthrough=False):
        """
        Resolve a long name or a short letter within the parsing context.

        Parameters
        - name: long option name (matched lowercased).
        - short: short letter (matched as-is).
        - command: active command while parsing its segment; None for the
          program segment.
        - fallthrough: the active command is the default one, so global
          options are accepted in its segment and are tried first.

        Returns
        - tuple (Scope, str, Option) or None when nothing matches.
        """
        scopes = []
        if command is None or fallthrough:
            scopes.append((Scope.GLOBAL, None))
        if command is not None:
            scopes.append((Scope.COMMAND, command))

        for scope, key in scopes:
            if short is not Unset:
                resolved = self._shorts[key].get(short)
            else:
                resolved = name.lower()
            if resolved is not None and (option := self._tables[key].get(resolved)) is not None:
                return scope, resolved, option
        return None

    def names(self, command=None, /, *, fallthrough=False):
        """
        Long names accepted in a parsing context (used for suggestions).
        """
        names = []
        if command is None or fallthrough:
            names.extend(self._tables[None])
        if command is not None:
            names.extend(self._tables[command])
        return names


__all__ = (
    "Config",
    "Registry",
)
