"""
Default prompt collaborator tests (line reader, retries, timeout, end of input).

Scope
- Validate LineReader delivery, TIMEOUT signalling, and that a line arriving
  after a timeout reaches the next reader of the same stream.
- Validate Prompter coercion, retry on invalid answers, and faults.

Conventions
- Test method names follow CamelCase per project convention.
- Answers come from in-memory streams or pipes; output goes to in-memory consoles.
"""

import io
import os
import threading
import unittest
from unittest import IsolatedAsyncioTestCase

from rich.console import Console

from clide import Program, Scope, boolean, number, string
from clide.faults import PromptError, PromptTimeoutError
from clide.prompts import TIMEOUT, LineReader, Prompter, PromptState, feed


class BlockingStream:
    """Stream whose readline blocks until released, then reports end of input."""

    def __init__(self):
        self.released = threading.Event()

    def readline(self):
        self.released.wait()
        return ""


def _console():
    return Console(file=io.StringIO(), width=200)


def _program(command=None):
    program = Program()
    program._route(command)
    return program


class TestLineReader(IsolatedAsyncioTestCase):
    async def testReadsOneLine(self):
        console = _console()
        async with LineReader(console, "name: ", stream=io.StringIO("hello\nworld\n")) as reader:
            self.assertEqual(await reader.read(), "hello")
        self.assertIn("name:", console.file.getvalue())

    async def testTimeoutIsASignal(self):
        stream = BlockingStream()
        self.addCleanup(stream.released.set)
        async with LineReader(_console(), "name: ", stream=stream, timeout=0.05) as reader:
            self.assertIs(await reader.read(), TIMEOUT)
        self.assertIs(feed(stream).request(), reader._pending)

    async def testLateLineGoesToTheNextReader(self):
        read, write = os.pipe()
        stream = os.fdopen(read, "r")
        self.addCleanup(stream.close)
        self.addCleanup(os.close, write)

        async with LineReader(_console(), "name: ", stream=stream, timeout=0.05) as reader:
            self.assertIs(await reader.read(), TIMEOUT)
        os.write(write, b"answer\nnext\n")
        async with LineReader(_console(), "name: ", stream=stream, timeout=5) as reader:
            self.assertEqual(await reader.read(), "answer")
        async with LineReader(_console(), "name: ", stream=stream, timeout=5) as reader:
            self.assertEqual(await reader.read(), "next")

    async def testEachReaderPrintsTheQuestion(self):
        console = _console()
        stream = io.StringIO("a\nb\n")
        for expected in ("a", "b"):
            async with LineReader(console, "name: ", stream=stream) as reader:
                self.assertEqual(await reader.read(), expected)
        self.assertEqual(console.file.getvalue().count("name:"), 2)

    async def testEndOfInputRaises(self):
        with self.assertRaises(EOFError):
            async with LineReader(_console(), "name: ", stream=io.StringIO("")) as reader:
                await reader.read()


class TestPrompter(IsolatedAsyncioTestCase):
    async def testStringAnswer(self):
        console = _console()
        prompter = Prompter(console, stream=io.StringIO("dist\n"))
        value = await prompter("out", string(), Scope.GLOBAL, _program())
        self.assertEqual(value, "dist")
        self.assertIn("Please enter a value for out:", console.file.getvalue())

    async def testCommandScopeQuestion(self):
        console = _console()
        prompter = Prompter(console, stream=io.StringIO("dist\n"))
        await prompter("out", string(), Scope.COMMAND, _program("build"))
        self.assertIn("Please enter a value for out (command build):", console.file.getvalue())

    async def testRetriesUntilValid(self):
        console, stderr = _console(), _console()
        prompter = Prompter(console, stderr=stderr, stream=io.StringIO("abc\n8080\n"))
        self.assertEqual(await prompter("port", number(), Scope.GLOBAL, _program()), 8080)
        self.assertEqual(console.file.getvalue().count("Please enter a value for port:"), 2)
        self.assertNotIn("is not a number", console.file.getvalue())
        self.assertIn("is not a number", stderr.file.getvalue())

    async def testRetriesOnChoicesAndValidate(self):
        stderr = _console()
        option = string(choices=["dev", "prod", "x"], validate=lambda value: len(value) > 1 or "too short")
        prompter = Prompter(_console(), stderr=stderr, stream=io.StringIO("test\nx\nprod\n"))
        self.assertEqual(await prompter("mode", option, Scope.GLOBAL, _program()), "prod")
        output = stderr.file.getvalue()
        self.assertIn("not a valid choice", output)
        self.assertIn("too short", output)

    async def testBooleanAnswersAreCaseInsensitive(self):
        prompter = Prompter(_console(), stream=io.StringIO("YES\n"))
        self.assertIs(await prompter("debug", boolean(), Scope.GLOBAL, _program()), True)

    async def testCustomLiterals(self):
        prompter = Prompter(_console(), stderr=_console(), stream=io.StringIO("yes\nnein\n"), truthy=("ja",), falsy=("nein",))
        self.assertIs(await prompter("debug", boolean(), Scope.GLOBAL, _program()), False)

    async def testEndOfInputIsPromptError(self):
        prompter = Prompter(_console(), stream=io.StringIO(""))
        with self.assertRaises(PromptError) as context:
            await prompter("out", string(), Scope.GLOBAL, _program())
        self.assertNotIsInstance(context.exception, PromptTimeoutError)
        self.assertIsInstance(context.exception.__cause__, EOFError)

    async def testTimeoutIsPromptTimeoutError(self):
        stream = BlockingStream()
        self.addCleanup(stream.released.set)
        prompter = Prompter(_console(), stream=stream, timeout=0.05)
        with self.assertRaises(PromptTimeoutError) as context:
            await prompter("out", string(), Scope.GLOBAL, _program())
        self.assertIn("'out'", context.exception.message)

    async def testAnswerAfterTimeoutReachesTheNextPrompt(self):
        read, write = os.pipe()
        stream = os.fdopen(read, "r")
        self.addCleanup(stream.close)
        self.addCleanup(os.close, write)

        with self.assertRaises(PromptTimeoutError):
            await Prompter(_console(), stream=stream, timeout=0.05)("out", string(), Scope.GLOBAL, _program())
        os.write(write, b"dist\n")
        prompter = Prompter(_console(), stream=stream, timeout=5)
        self.assertEqual(await prompter("out", string(), Scope.GLOBAL, _program()), "dist")


class TestPromptState(unittest.TestCase):
    def testStates(self):
        self.assertEqual(
            [state.name for state in PromptState],
            ["AWAITING", "VALIDATING", "RETRYING", "TIMED_OUT", "ACCEPTED"],
        )


if __name__ == "__main__":
    unittest.main()
