"""Interactive line input: plain for usernames, masked for passwords.

:class:`SecureLineReader` switches the terminal into raw mode so that it
sees every keystroke, echoes ``*`` for each printable character, and
handles backspace and Ctrl+C itself. The original terminal settings are
restored on every exit path, including interrupts and read failures.

When input is not a terminal (piped or injected), raw mode is skipped and
the same byte-by-byte editing rules apply to the stream.
"""

from __future__ import annotations

import contextlib
import logging
import sys
import termios
import tty
from collections.abc import Callable, Iterator
from contextlib import AbstractContextManager
from typing import BinaryIO, TextIO

from skectl.errors import InputInterruptedError, InputReadError

logger = logging.getLogger(__name__)

CTRL_C = 0x03
BACKSPACE = 0x08
DELETE = 0x7F
CARRIAGE_RETURN = 0x0D
LINE_FEED = 0x0A

MASK_CHAR = "*"
ERASE_SEQUENCE = "\b \b"

TerminalMode = Callable[[BinaryIO], AbstractContextManager[object]]


@contextlib.contextmanager
def raw_terminal(stream: BinaryIO) -> Iterator[None]:
    """Put the terminal behind *stream* into raw mode for the ``with`` block.

    Non-terminal streams are left alone.
    """
    if not stream.isatty():
        yield
        return

    fd = stream.fileno()
    try:
        saved = termios.tcgetattr(fd)
        tty.setraw(fd)
    except termios.error as exc:
        raise InputReadError(f"failed to set terminal to raw mode: {exc}") from exc
    logger.debug("Terminal fd %d switched to raw mode", fd)
    try:
        yield
    finally:
        try:
            termios.tcsetattr(fd, termios.TCSADRAIN, saved)
        except termios.error as exc:
            raise InputReadError(f"failed to restore terminal: {exc}") from exc
        logger.debug("Terminal fd %d restored", fd)


class LineReader:
    """Read one echoed line of input and strip surrounding whitespace.

    Reads from the binary stdin buffer so it can share the stream with a
    :class:`SecureLineReader` without losing buffered bytes.
    """

    def __init__(
        self,
        stdin: BinaryIO | None = None,
        stdout: TextIO | None = None,
    ) -> None:
        self._stdin = stdin
        self._stdout = stdout

    def read_line(self, prompt: str) -> str:
        out = self._stdout or sys.stdout
        out.write(prompt)
        out.flush()

        source = self._stdin or sys.stdin.buffer
        try:
            raw = source.readline()
        except OSError as exc:
            raise InputReadError(f"failed to read input: {exc}") from exc
        if not raw:
            raise InputReadError("failed to read input: end of input")
        try:
            text = raw.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise InputReadError(f"failed to read input: {exc}") from exc
        return text.strip()


class SecureLineReader:
    """Read a masked line one byte at a time.

    ``terminal_mode`` wraps the read loop; it defaults to
    :func:`raw_terminal` and can be replaced to observe acquisition and
    release.
    """

    def __init__(
        self,
        stdin: BinaryIO | None = None,
        stdout: TextIO | None = None,
        terminal_mode: TerminalMode = raw_terminal,
    ) -> None:
        self._stdin = stdin
        self._stdout = stdout
        self._terminal_mode = terminal_mode

    def read_masked(self, prompt: str) -> str:
        """Prompt, then return the typed text without echoing it.

        Raises:
            InputInterruptedError: Ctrl+C was pressed.
            InputReadError: The input source failed or hit end of input.
        """
        out = self._stdout or sys.stdout
        source = self._stdin or sys.stdin.buffer
        self._write(out, prompt)

        try:
            with self._terminal_mode(source):
                return self._read_loop(source, out)
        finally:
            self._write(out, "\n")

    def _read_loop(self, source: BinaryIO, out: TextIO) -> str:
        buffer: list[str] = []
        while True:
            try:
                chunk = source.read(1)
            except OSError as exc:
                raise InputReadError(f"failed to read character: {exc}") from exc
            if not chunk:
                raise InputReadError("failed to read character: end of input")

            byte = chunk[0]
            if byte in (CARRIAGE_RETURN, LINE_FEED):
                return "".join(buffer)
            if byte == CTRL_C:
                raise InputInterruptedError
            if byte in (BACKSPACE, DELETE):
                if buffer:
                    buffer.pop()
                    self._write(out, ERASE_SEQUENCE)
            elif 32 <= byte <= 126:
                buffer.append(chr(byte))
                self._write(out, MASK_CHAR)

    @staticmethod
    def _write(out: TextIO, text: str) -> None:
        out.write(text)
        out.flush()
