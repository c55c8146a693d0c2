"""
Clide resolver (finalization).

After both segments are scanned, the Resolver completes the Program in three
passes:

1. Environment/default pass, global scope then the active command's scope.
   For every option not already set in its own scope map:
   • an "env" variable present in the environment wins and is coerced to the
     option type (boolean: "" or a truthy literal is true, a falsy literal is
     false; number: numeric text). A present but unreadable value is ignored
     with an IgnoredEnvironmentWarning and does not fall back to the default.
   • otherwise the declared default is used.
   • a required option still unresolved is queued for prompting. With prompts
     disabled, every missing name of the scope is reported at once by a
     MissingRequiredOptionError.
2. Validation pass over every value present in the Program (check()).
3. Prompting pass: queued options, global queue first, in declaration order.
   The collaborator is called as prompt(name, option, scope, program); its
   result is awaited when awaitable, validated with the same rules, and stored.
"""
import inspect
import warnings

from .faults import *
from .options import Scope
from .utils import *
from .values import FALSY, TRUTHY, check, fromtext


class Resolver:
    """
    Finalizer for a scanned Program.

    Parameters
    - registry: the validated Registry.
    - program: the Program filled in by the scanner.
    - env: mapping of environment variable names to strings.
    - prompt: prompt collaborator, sync or async.
    - truthy/falsy: boolean literals used to read environment values.
    """

    def __init__(self, registry, program, /, *, env, prompt, truthy=TRUTHY, falsy=FALSY):
        self._registry = registry
        self._program = program
        self._env = env
        self._prompt = prompt
        self._truthy = tuple(map(str.lower, truthy))
        self._falsy = tuple(map(str.lower, falsy))

    def _scopes(self):
        yield Scope.GLOBAL, None
        if (command := self._program._command) is not None:
            yield Scope.COMMAND, command

    async def resolve(self):
        queues = self._apply()
        self._validate()
        await self._ask(queues)
        return self._program

    def _fromenv(self, option, text, /):
        if option.type == "boolean" and not text:
            return True
        return fromtext(option.type, text, truthy=self._truthy, falsy=self._falsy)

    def _apply(self):
        """
        Fill unset options from the environment or their defaults; return the prompt queues.
        """
        queues = []
        for scope, command in self._scopes():
            current = self._program._scoped(scope)
            missing = []

            for name, option in self._registry.table(command).items():
                if name in current:
                    continue

                value = Unset
                if option.env is not None and (text := self._env.get(option.env)) is not None:
                    if (value := self._fromenv(option, text)) is Unset:
                        warnings.warn(IgnoredEnvironmentWarning(
                            "ignoring environment variable %r for option %r: %r is not a %s value"
                            % (option.env, name, text, option.type),
                            code=FaultCode.IGNORED_ENVIRONMENT,
                            input=text,
                            option=name,
                            env=option.env,
                            scope=str(scope),
                            command=command,
                        ), stacklevel=2)
                elif option.default is not None:
                    value = option.default

                if value is not Unset:
                    self._program._assign(name, value, scope)
                elif option.required:
                    missing.append(name)

            if missing and self._registry.config.disable_prompts:
                raise MissingRequiredOptionError(
                    "missing required %s %s%s" % (
                        "option" if len(missing) == 1 else pluralize("option"),
                        ", ".join("'--%s'" % name for name in missing),
                        "" if command is None else " for command %r" % command,
                    ),
                    code=FaultCode.MISSING_REQUIRED_OPTION,
                    input=tuple(missing),
                    scope=str(scope),
                    command=command,
                    hint="pass each missing option as a flag or through its environment variable",
                )
            queues.append((scope, command, missing))
        return queues

    def _validate(self):
        for scope, command in self._scopes():
            table = self._registry.table(command)
            for name, value in self._program._scoped(scope).items():
                if (option := table.get(name)) is not None:
                    check(option, name, value, command=command)

    async def _ask(self, queues):
        for scope, command, missing in queues:
            table = self._registry.table(command)
            for name in missing:
                option = table[name]
                value = self._prompt(name, option, scope, self._program)
                if inspect.isawaitable(value):
                    value = await value
                check(option, name, value, command=command)
                self._program._assign(name, value, scope)


__all__ = (
    "Resolver",
)
