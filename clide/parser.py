"""
Clide top-level invocation.

What this module provides
- Parser: the configurable form. It owns the registry, the two consoles, the
  boolean literals, and the terminate(status) hook. All process-lifecycle
  effects go through that hook, so tests substitute a recording terminator.
- parse(config, args=..., env=...): await a fully resolved Program.
- invoke(config, args=..., env=...): synchronous wrapper around parse().

Pipeline
- split → scan the program segment → scan the command segment → help
  trigger → resolve (environment/defaults, validation, prompts).

Help trigger
- When "help" is true after scanning: an explicit (non-default) command that
  set its own injected help gets command help; otherwise the injected global
  help gets root help. Help goes to stdout, then terminate(0). If the
  terminator returns, the un-finalized Program is returned.

Failure surface
- ConfigurationError always propagates (raised by Registry, before parsing).
- With throw_on_error, every other fault propagates to the caller, and so
  does any exception raised by a validate or prompt callable.
- Otherwise the fault line and root help (unless disable_help) go to stderr,
  then terminate(1). Other exceptions are reported the same way as a
  DelegatedError chained to the original. If the terminator returns, the
  fault is re-raised; a partial Program is never returned.
"""
import asyncio
import copy
import os
import sys
from collections.abc import Iterable, Mapping

from dotenv import dotenv_values, find_dotenv
from rich.console import Console, Group

from .config import Config, Registry
from .faults import *
from .helper import render
from .program import Program
from .prompts import Prompter
from .resolver import Resolver
from .scanner import Scanner
from .splitter import split
from .utils import *
from .values import FALSY, TRUTHY


def _sanitize_literals(field, literals, /):
    if not isinstance(literals, Iterable) or isinstance(literals, str):
        raise TypeError(f"parser {field!r} must be an iterable of strings")
    literals = tuple(literals)
    if not literals or not all(isinstance(literal, str) and literal for literal in literals):
        raise ValueError(f"parser {field!r} must contain non-empty strings")
    return tuple(literal.lower() for literal in literals)


def _environ():
    """
    The process environment layered over the nearest .env file (searched from the working directory).
    """
    values = dotenv_values(find_dotenv(usecwd=True))
    return {key: value for key, value in values.items() if value is not None} | dict(os.environ)


class Parser:
    """
    Argument parser bound to one Config and one invocation.

    Parameters
    - config: the root Config.
    - args: argument tokens (default: sys.argv[1:]).
    - env: environment mapping (default: os.environ layered over the nearest .env file).
    - truthy/falsy: boolean literals, compared case-insensitively.
    - stdout/stderr: rich Consoles for help and error output.
    - terminate: callable(status) ending the process (default: sys.exit).

    Raises
    - ConfigurationError: the config breaks a naming, short-alias, negation,
      or default-command rule.
    """

    def __init__(
            self,
            config,
            /,
            args=Unset,
            env=Unset,
            *,
            truthy=TRUTHY,
            falsy=FALSY,
            stdout=Unset,
            stderr=Unset,
            terminate=sys.exit,
    ):
        if not isinstance(config, Config):
            raise TypeError("parser() argument must be a config")

        args = list(coalesce(args, sys.argv[1:]))
        if not all(isinstance(arg, str) for arg in args):
            raise TypeError("parser 'args' must only contain strings")
        env = _environ() if env is Unset else env
        if not isinstance(env, Mapping):
            raise TypeError("parser 'env' must be a mapping")
        if not callable(terminate):
            raise TypeError("parser 'terminate' must be callable")

        truthy = _sanitize_literals("truthy", truthy)
        falsy = _sanitize_literals("falsy", falsy)
        if overlap := set(truthy) & set(falsy):
            raise ValueError("parser literals cannot be both truthy and falsy: %s" % ", ".join(sorted(overlap)))

        self._config = config
        self._registry = Registry(config)
        self._args = args
        self._env = env
        self._truthy = truthy
        self._falsy = falsy
        self._stdout = coalesce(stdout, Console())
        self._stderr = coalesce(stderr, Console(stderr=True))
        self._terminate = terminate

    @property
    def registry(self):
        return self._registry

    def _prompter(self):
        if (prompt := self._config.prompt) is not None:
            return prompt
        return Prompter(
            self._stdout,
            stderr=self._stderr,
            timeout=self._config.timeout,
            truthy=self._truthy,
            falsy=self._falsy,
        )

    def _show(self, console, command=None, /, *, isdefault=False):
        if self._config.disable_help:
            return
        console.print(Group(*render(self._registry, command, isdefault=isdefault, colorful=self._config.colorful)))

    def help(self, command=None, /):
        """
        Print root help, or the help of one command, to stdout.
        """
        self._show(self._stdout, command)

    def _helped(self, program):
        """
        Apply the help trigger; True when help was printed.
        """
        if not program.get("help"):
            return False

        helpers = self._registry.helpers
        command = program.command
        if (
                command is not None
                and not program.isdefault
                and program.command_options.get("help")
                and command in helpers
        ):
            self.help(command)
        elif None in helpers:
            self.help()
        else:
            return False

        self._terminate(0)
        return True

    async def parse(self):
        """
        Run the pipeline and return the resolved Program.
        """
        program = Program(positionals=self._config.allow_positionals)
        try:
            segments = split(self._args, self._registry)
            program._route(segments.command, isdefault=segments.isdefault)

            scanner = Scanner(self._registry, program, truthy=self._truthy, falsy=self._falsy)
            scanner.scan(segments.program)
            if segments.command is not None:
                scanner.scan(
                    segments.arguments,
                    command=segments.command,
                    fallthrough=segments.isdefault,
                    offset=segments.offset,
                )

            if self._helped(program):
                return program

            resolver = Resolver(
                self._registry,
                program,
                env=self._env,
                prompt=self._prompter(),
                truthy=self._truthy,
                falsy=self._falsy,
            )
            await resolver.resolve()
        except ConfigurationError:
            raise
        except ClideException as fault:
            if self._config.throw_on_error:
                raise
            self._fail(fault)
            raise
        except Exception as error:
            if self._config.throw_on_error:
                raise
            fault = DelegatedError(
                "%s raised by a delegated callable%s" % (type(error).__name__, ": %s" % error if str(error) else ""),
                code=FaultCode.DELEGATED_FAILURE,
                hint="check the validate and prompt callables of the configuration",
            )
            self._fail(fault)
            raise fault from error
        return program

    def _fail(self, fault):
        self._stderr.print(copy.replace(fault, colorful=self._config.colorful))
        self._show(self._stderr)
        self._terminate(1)


async def parse(config, /, args=Unset, env=Unset, **options):
    """
    Parse args and env against config and return the resolved Program.

    Keyword options are forwarded to Parser (truthy, falsy, stdout, stderr, terminate).

    Example
        >>> program = await parse(Config({"verbose": boolean(short="v")}), ["-v"])
        >>> program["verbose"]
        True
    """
    return await Parser(config, args, env, **options).parse()


def invoke(config, /, args=Unset, env=Unset, **options):
    """
    Synchronous form of parse(); runs it in a fresh event loop.
    """
    return asyncio.run(parse(config, args, env, **options))


__all__ = (
    # Types
    "Parser",

    # Functions
    "parse",
    "invoke",
)
