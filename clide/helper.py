"""
Clide help renderer.

render(registry, command=None, *, isdefault=False, colorful=True) is a pure
function from the validated registry to a list of rich Text lines; printing is
left to the caller's console.

Layout
- a blank line, then the description (command description for command help,
  falling back to the program description).
- USAGE: "$ <name> [<command>|[<default>]] [options] [arguments]".
- Root help: GLOBAL OPTIONS, then DEFAULT COMMAND OPTIONS (<default>), then
  COMMANDS with a "(default)" tag.
- Command help: COMMAND OPTIONS (<command>), then GLOBAL OPTIONS; no command list.
- Option rows: "-x, --name, ENV" in a 40-column left column, then the
  description followed by "<type>" (not for booleans), "required" and
  "default: ..."; choices go on a continuation line. A left column too wide
  for the gutter pushes the description to the next line. Hidden options are
  omitted, and a table with no visible rows is skipped.

Palette keys
- section-label, program-name, command-name, default-tag, dollar
- option-name, env-name, meta, choices-label, choice, description

Customization
- Define a mapping named __styles__ in __main__ to override any palette entry.
- When colorful is False, every line is plain text.
"""
from collections import defaultdict

from rich.text import Text

WIDTH = 40


def _palette(colorful):
    styles = defaultdict(str, {
        "section-label": "bold #FFFFFF",  # white section headers
        "program-name": "bold #FF4D94",  # magenta-pink brand
        "command-name": "bold #36C5F0",  # sky-blue commands
        "default-tag": "#737373",  # dim gray
        "dollar": "#737373",
        "option-name": "bold #FFD600",  # amber names
        "env-name": "#9CA3AF",  # muted gray
        "meta": "#737373",
        "choices-label": "#737373",
        "choice": "bold #FF4D94",
        "description": "#D1D5DB",
    } | getattr(__import__("__main__"), "__styles__", {}))

    def styler(style):
        return styles[style] if colorful else ""
    return styler


def _literal(value):
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _table(header, table, styler):
    """
    Render one option table; an empty list when every option is hidden.
    """
    lines = []
    for name, option in table.items():
        if option.hidden:
            continue

        left = Text("  ")
        if option.short is not None:
            left.append("-%s" % option.short, styler("option-name")).append(", ", styler("option-name"))
        else:
            left.append("    ")
        left.append("--%s" % name, styler("option-name"))
        if option.env is not None:
            left.append(", ", styler("option-name")).append(option.env, styler("env-name"))

        meta = []
        if option.type != "boolean":
            meta.append("<%s>" % option.type)
        if option.required:
            meta.append("required")
        if option.default is not None:
            meta.append("default: %s" % _literal(option.default))

        right = Text()
        if option.description is not None:
            right.append(option.description, styler("description"))
        if meta:
            right.append(" " if right else "").append(", ".join(meta), styler("meta"))

        if right:
            if len(left) < WIDTH:
                left.append(" " * (WIDTH + 2 - len(left))).append_text(right)
                lines.append(left)
            else:
                lines.append(left)
                lines.append(Text(" " * (WIDTH + 2)).append_text(right))
        else:
            lines.append(left)

        if choices := option.choices:
            line = Text(" " * (WIDTH + 2))
            line.append("choices:", styler("choices-label")).append(" ")
            line.append_text(Text("|").join(Text(_literal(choice), styler("choice")) for choice in choices))
            lines.append(line)

    if not lines:
        return []
    return [Text(header.upper(), styler("section-label")), *lines, Text()]


def _commands(registry, styler):
    commands = registry.config.commands
    default = registry.config.default_command

    labels = {name: name + " (default)" * (name == default) for name in commands}
    column = max(map(len, labels.values())) + 4

    lines = [Text("COMMANDS", styler("section-label"))]
    for name, command in commands.items():
        line = Text("  ").append(name, styler("command-name"))
        if name == default:
            line.append(" (default)", styler("default-tag"))
        line.append(" " * (column - len(labels[name])))
        if command.description is not None:
            line.append(command.description, styler("description"))
        line.rstrip()
        lines.append(line)
    lines.append(Text())
    return lines


def render(registry, command=None, /, *, isdefault=False, colorful=True):
    """
    Render root help (command=None) or the help of one command.

    Parameters
    - registry: the validated Registry (option tables include injected help).
    - command: command to render help for; None renders root help.
    - isdefault: the command was substituted as the default one, so the usage
      line does not name it.
    - colorful: apply the palette; False yields plain lines.

    Returns
    - list[rich.text.Text]: one Text per output line.
    """
    styler = _palette(colorful)
    config = registry.config

    if command is not None and command not in config.commands:
        raise KeyError("unknown command %r" % command)

    lines = [Text()]

    description = None
    if command is not None:
        description = config.commands[command].description
    if description is None:
        description = config.description
    if description is not None:
        lines.append(Text(description, styler("description")))
        lines.append(Text())

    usage = Text("  ").append("$", styler("dollar")).append(" ").append(registry.name, styler("program-name"))
    if command is not None and not isdefault:
        usage.append(" ").append(command, styler("command-name"))
    elif command is None and config.default_command is not None:
        usage.append(" ").append("[%s]" % config.default_command, styler("default-tag"))
    usage.append(" ").append("[options]", styler("option-name"))
    if config.allow_positionals:
        usage.append(" ").append("[arguments]", styler("meta"))

    lines.append(Text("USAGE", styler("section-label")))
    lines.append(usage)
    lines.append(Text())

    if command is not None:
        lines.extend(_table("Command Options (%s)" % command, registry.table(command), styler))
        lines.extend(_table("Global Options", registry.table(), styler))
    else:
        lines.extend(_table("Global Options", registry.table(), styler))
        if (default := config.default_command) is not None:
            lines.extend(_table("Default Command Options (%s)" % default, registry.table(default), styler))
        if config.commands:
            lines.extend(_commands(registry, styler))

    return lines


__all__ = (
    "render",
)
