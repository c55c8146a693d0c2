"""
Clide command/argument splitter.

The raw argument list is scanned once, left to right, for the first token that
names a declared command (case-insensitively):
- tokens before it form the program segment (global options only),
- tokens after it form the command segment (that command's options),
- the token itself selects the command.

Without a command token, a configured default command takes the whole list as
its segment (isdefault is set); otherwise the whole list is the program
segment. Scanning stops at a "--" terminator: nothing after it is a command.

Known limitation: a value that equals a command name ("--output build") is
taken as the command boundary. Flat single-pass scanning cannot tell the two
apart, and the behaviour is kept as is.
"""
from typing import NamedTuple


class Split(NamedTuple):
    """
    Result of splitting: the two segments and the selected command.
    """
    program: list
    arguments: list
    command: str | None
    isdefault: bool

    @property
    def offset(self):
        """
        Number of tokens preceding the command segment in the full list.
        """
        if self.command is None or self.isdefault:
            return 0
        return len(self.program) + 1


def split(tokens, registry, /):
    tokens = list(tokens)
    commands = registry.config.commands

    for index, token in enumerate(tokens):
        if token == "--":
            break
        if (name := token.lower()) in commands:
            return Split(tokens[:index], tokens[index + 1:], name, False)

    if (default := registry.config.default_command) is not None:
        return Split([], tokens, default, True)
    return Split(tokens, [], None, False)


__all__ = (
    "Split",
    "split",
)
