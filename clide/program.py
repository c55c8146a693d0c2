"""
Clide program result.

A Program is filled in by the pipeline (splitter, scanner, resolver) and
handed back to the caller once every option is resolved. Its public surface is
read-only: properties return fresh copies, so neither the caller nor a prompt
collaborator holding a snapshot can change what the pipeline builds.

Fields
- command: selected command name, or None.
- isdefault: True only when no command token was found and the default
  command was substituted.
- options: union of global and command options (name → value).
- global_options / command_options: the per-scope maps.
- positionals: bare tokens in input order, or None when positionals are not
  permitted.
"""
from .options import DescriptorType, Scope


class Program(metaclass=DescriptorType):
    __introspectable__ = (
        "command",
        "isdefault",
        "options",
        "global_options",
        "command_options",
        "positionals",
    )

    def __init__(self, *, positionals=False):
        self._command = None
        self._isdefault = False
        self._options = {}
        self._global_options = {}
        self._command_options = {}
        self._positionals = [] if positionals else None

    def __getitem__(self, name):
        return self._options[name]

    def __contains__(self, name):
        return name in self._options

    def get(self, name, default=None, /):
        return self._options.get(name, default)

    def _route(self, command, /, *, isdefault=False):
        self._command = command
        self._isdefault = isdefault

    def _assign(self, name, value, scope, /):
        """
        Store a resolved value under the union map and its scope map.
        """
        self._options[name] = value
        match scope:
            case Scope.GLOBAL:
                self._global_options[name] = value
            case Scope.COMMAND:
                self._command_options[name] = value
            case _:
                raise AssertionError("unreachable scope %r" % scope)

    def _scoped(self, scope, /):
        return self._global_options if scope is Scope.GLOBAL else self._command_options

    def _extend(self, tokens, /):
        self._positionals.extend(tokens)


__all__ = (
    "Program",
)
