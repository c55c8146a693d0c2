"""
Help renderer tests (ordering, row layout, usage line, styling switch).

Conventions
- Test method names follow CamelCase per project convention.
- Lines are compared through Text.plain with colorful=False.
"""

import unittest
from unittest import TestCase

from clide import Command, Config, Registry, boolean, string
from clide.helper import WIDTH, render

CONFIG = Config(
    {
        "verbose": boolean(short="v", description="Verbose output"),
        "secret": string(hidden=True),
    },
    {
        "build": Command("Compile sources", options={
            "out": string(short="o", required=True, env="BUILD_OUT", description="Output directory"),
            "mode": string(choices=["dev", "prod"], default="dev"),
        }),
        "serve": Command("Serve files"),
    },
    name="tool",
    description="A tool",
    default_command="serve",
)


def _plain(config=CONFIG, command=None, **options):
    return [line.plain for line in render(Registry(config), command, colorful=False, **options)]


class TestRootHelp(TestCase):
    def setUp(self):
        self.lines = _plain()

    def testHeader(self):
        self.assertEqual(self.lines[:6], ["", "A tool", "", "USAGE", "  $ tool [serve] [options]", ""])

    def testSectionOrder(self):
        globals = self.lines.index("GLOBAL OPTIONS")
        default = self.lines.index("DEFAULT COMMAND OPTIONS (SERVE)")
        commands = self.lines.index("COMMANDS")
        self.assertLess(globals, default)
        self.assertLess(default, commands)

    def testOptionRow(self):
        self.assertIn("  -v, --verbose".ljust(WIDTH + 2) + "Verbose output", self.lines)
        self.assertIn("  -h, --help".ljust(WIDTH + 2) + "Show help information", self.lines)

    def testHiddenOptionsOmitted(self):
        self.assertFalse(any("--secret" in line for line in self.lines))

    def testCommandList(self):
        self.assertIn("  build" + " " * 14 + "Compile sources", self.lines)
        self.assertIn("  serve (default)" + " " * 4 + "Serve files", self.lines)

    def testPositionalsInUsage(self):
        lines = _plain(Config({}, allow_positionals=True, name="tool"))
        self.assertIn("  $ tool [options] [arguments]", lines)
        self.assertNotIn("COMMANDS", lines)


class TestCommandHelp(TestCase):
    def setUp(self):
        self.lines = _plain(command="build")

    def testUsageNamesCommand(self):
        self.assertIn("Compile sources", self.lines)
        self.assertIn("  $ tool build [options]", self.lines)

    def testCommandOptionsBeforeGlobals(self):
        self.assertLess(self.lines.index("COMMAND OPTIONS (BUILD)"), self.lines.index("GLOBAL OPTIONS"))
        self.assertNotIn("COMMANDS", self.lines)

    def testAnnotations(self):
        self.assertIn("  -o, --out, BUILD_OUT".ljust(WIDTH + 2) + "Output directory <string>, required", self.lines)
        self.assertIn("      --mode".ljust(WIDTH + 2) + "<string>, default: dev", self.lines)
        self.assertIn(" " * (WIDTH + 2) + "choices: dev|prod", self.lines)

    def testDefaultCommandUsageOmitsName(self):
        lines = _plain(command="serve", isdefault=True)
        self.assertIn("  $ tool [options]", lines)

    def testUnknownCommand(self):
        with self.assertRaises(KeyError):
            render(Registry(CONFIG), "deploy")


class TestLayout(TestCase):
    def testWideLeftColumnWraps(self):
        config = Config({"a-rather-long-option-name": string(env="SOME_LONG_VARIABLE", description="Wrapped")})
        lines = _plain(config)
        index = lines.index("      --a-rather-long-option-name, SOME_LONG_VARIABLE")
        self.assertEqual(lines[index + 1], " " * (WIDTH + 2) + "Wrapped <string>")

    def testHelpWithoutShortWhenTaken(self):
        lines = _plain(Config({"host": string(short="h")}))
        self.assertIn("      --help".ljust(WIDTH + 2) + "Show help information", lines)

    def testBooleanDefaultsAreLowercase(self):
        lines = _plain(Config({"color": boolean(default=True)}))
        self.assertIn("      --color".ljust(WIDTH + 2) + "default: true", lines)

    def testDescriptionFallsBackToProgram(self):
        lines = _plain(Config({}, {"x": Command()}, description="A tool"), command="x")
        self.assertEqual(lines[1], "A tool")

    def testColorfulSwitch(self):
        colorful = render(Registry(CONFIG))
        plain = render(Registry(CONFIG), colorful=False)
        self.assertTrue(any(line.spans or line.style for line in colorful))
        self.assertFalse(any(line.spans or line.style for line in plain))


if __name__ == "__main__":
    unittest.main()
