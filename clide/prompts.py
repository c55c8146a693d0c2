"""
Clide default prompt collaborator.

Prompter is the collaborator used when a Config declares no prompt of its
own. It asks for one value, and loops until the answer is valid, the input is
exhausted, or the wait times out.

State machine (PromptState)
- AWAITING: a LineReader is acquired and one line is read.
- VALIDATING: the answer is coerced to the option type and checked.
- RETRYING: the answer was rejected; the reason is printed to stderr and a new
  reader is acquired.
- TIMED_OUT: the reader delivered the TIMEOUT signal; PromptTimeoutError is raised.
- ACCEPTED: the coerced value is returned.

Resources
- Every input stream has one Feed: a long-lived source that runs at most one
  blocking readline on a daemon thread at a time.
- LineReader is an async context manager that prints the question through a
  rich Console and waits on the feed's pending line. Leaving the context drops
  the reader's interest in that line but never the line itself: a line that
  arrives after a timeout is handed to the next reader of the same stream.
- A timeout is a value (TIMEOUT), not an exception; only the state machine
  turns it into a fault.
"""
import asyncio
import sys
import threading
import weakref
from concurrent.futures import Future
from enum import Enum

from rich.console import Console

from .faults import *
from .options import Scope
from .utils import *
from .values import FALSY, TRUTHY, check, fromtext


class Signal(Enum):
    TIMEOUT = "timeout"

    def __repr__(self):
        return self.name


TIMEOUT = Signal.TIMEOUT


class PromptState(Enum):
    AWAITING = "awaiting"
    VALIDATING = "validating"
    RETRYING = "retrying"
    TIMED_OUT = "timed-out"
    ACCEPTED = "accepted"


class Feed:
    """
    Line source shared by every reader of one stream.

    A read is started on demand and its outcome stays pending until a reader
    takes it, so no line is read twice and none is lost.
    """

    def __init__(self, stream, /):
        self._stream = stream
        self._lock = threading.Lock()
        self._pending = None

    def request(self):
        """
        Return the future of the next line, starting a read if none is in flight.
        """
        with self._lock:
            if self._pending is None:
                self._pending = Future()
                threading.Thread(target=self._run, args=(self._pending,), daemon=True).start()
            return self._pending

    def release(self, pending, /):
        """
        Mark a settled outcome as taken; the next request reads a new line.
        """
        with self._lock:
            if self._pending is pending and pending.done():
                self._pending = None

    def _run(self, pending):
        # Runs on the reader thread.
        if not pending.set_running_or_notify_cancel():
            return
        try:
            line = self._stream.readline()
            if not line:
                raise EOFError("end of input")
        except (EOFError, OSError) as error:
            pending.set_exception(error)
        else:
            pending.set_result(line.rstrip("\r\n"))


_feeds = weakref.WeakKeyDictionary()
_lock = threading.Lock()


def feed(stream=None, /):
    """
    Return the Feed of stream (None is sys.stdin), creating it on first use.
    """
    if stream is None and (stream := sys.stdin) is None:
        raise OSError("standard input is not available")
    with _lock:
        if (source := _feeds.get(stream)) is None:
            source = _feeds[stream] = Feed(stream)
        return source


def _observe(future):
    # Retrieve the outcome of a line nobody waits for anymore.
    if not future.cancelled():
        future.exception()


class LineReader:
    """
    Read one line from a stream without blocking the event loop.

    Parameters
    - console: rich Console that prints the question.
    - question: text printed before reading.
    - stream: file-like object read with readline() (None reads from stdin).
    - timeout: seconds to wait before read() yields TIMEOUT.

    Usage
        async with LineReader(console, "name: ", timeout=5) as reader:
            line = await reader.read()
    """

    def __init__(self, console, question, /, *, stream=None, timeout=120.0):
        self._console = console
        self._question = question
        self._stream = stream
        self._timeout = timeout
        self._feed = None
        self._pending = None
        self._future = None

    async def __aenter__(self):
        self._feed = feed(self._stream)
        self._console.print(self._question, end="")
        self._pending = self._feed.request()
        self._future = asyncio.wrap_future(self._pending)
        return self

    async def __aexit__(self, *exc_info):
        if self._future.done():
            self._feed.release(self._pending)
        else:
            self._future.add_done_callback(_observe)
        return False

    async def read(self):
        """
        Return the line read, or TIMEOUT when nothing arrived in time.

        Raises EOFError or OSError when the input could not be read.
        """
        done, _ = await asyncio.wait({self._future}, timeout=self._timeout)
        if not done:
            return TIMEOUT
        return self._future.result()


class Prompter:
    """
    Interactive prompt collaborator: prompter(name, option, scope, program) -> value.

    Parameters
    - console: rich Console used for questions.
    - stderr: rich Console used for rejection messages (default: a stderr console).
    - stream: file-like object to read answers from (None reads from stdin).
    - timeout: seconds to wait for each answer.
    - truthy/falsy: boolean literals accepted as answers.
    """

    def __init__(self, console=None, /, *, stderr=None, stream=None, timeout=120.0, truthy=TRUTHY, falsy=FALSY):
        self._console = Console() if console is None else console
        self._stderr = Console(stderr=True) if stderr is None else stderr
        self._stream = stream
        self._timeout = timeout
        self._truthy = tuple(map(str.lower, truthy))
        self._falsy = tuple(map(str.lower, falsy))

    @staticmethod
    def question(name, scope, program, /):
        if scope is Scope.GLOBAL:
            return "Please enter a value for %s: " % name
        return "Please enter a value for %s (command %s): " % (name, program.command)

    async def __call__(self, name, option, scope, program, /):
        command = None if scope is Scope.GLOBAL else program.command
        question = self.question(name, scope, program)

        state = PromptState.AWAITING
        answer = value = None
        while True:
            match state:
                case PromptState.AWAITING | PromptState.RETRYING:
                    try:
                        async with LineReader(
                                self._console, question, stream=self._stream, timeout=self._timeout
                        ) as reader:
                            answer = await reader.read()
                    except (EOFError, OSError) as error:
                        raise PromptError(
                            "could not read a value for option %r" % name,
                            code=FaultCode.PROMPT_FAILURE,
                            option=name,
                            command=command,
                            hint="pass '--%s' as a flag when input is not interactive" % name,
                        ) from error
                    state = PromptState.TIMED_OUT if answer is TIMEOUT else PromptState.VALIDATING

                case PromptState.VALIDATING:
                    value = fromtext(option.type, answer, truthy=self._truthy, falsy=self._falsy)
                    if value is Unset:
                        value = answer
                    try:
                        check(option, name, value, command=command)
                    except ValidationError as error:
                        self._stderr.print(error)
                        state = PromptState.RETRYING
                    else:
                        state = PromptState.ACCEPTED

                case PromptState.TIMED_OUT:
                    raise PromptTimeoutError(
                        "timed out after %g seconds waiting for option %r" % (self._timeout, name),
                        code=FaultCode.PROMPT_TIMEOUT,
                        option=name,
                        command=command,
                        hint="answer within the time limit or pass '--%s' as a flag" % name,
                    )

                case PromptState.ACCEPTED:
                    return value


__all__ = (
    "TIMEOUT",
    "PromptState",
    "Feed",
    "LineReader",
    "Prompter",
    "feed",
)
