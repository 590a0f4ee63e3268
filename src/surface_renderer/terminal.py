"""Small helper for controlling ANSI terminal output."""

from __future__ import annotations

import os
import select
import sys
import termios
import tty
from typing import List, Optional

TermiosAttr = List[int | List[bytes | int]]


class TerminalController:
    """Context manager that prepares the terminal for in-place frame redraws."""

    def __init__(self) -> None:
        self._cursor_hidden = False
        self._stdin_fd: Optional[int] = None
        self._termios_before: Optional[TermiosAttr] = None
        self._input_enabled = False

    def __enter__(self) -> "TerminalController":
        sys.stdout.write("\033[2J\033[H")
        sys.stdout.write("\033[?25l")
        sys.stdout.flush()
        self._cursor_hidden = True

        if sys.stdin.isatty():
            fd = sys.stdin.fileno()
            try:
                self._termios_before = termios.tcgetattr(fd)
                tty.setcbreak(fd)
                self._stdin_fd = fd
                self._input_enabled = True
            except termios.error:
                self._termios_before = None
                self._stdin_fd = None
                self._input_enabled = False
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.restore()

    def restore(self) -> None:
        if self._cursor_hidden:
            sys.stdout.write("\033[?25h")
            sys.stdout.flush()
            self._cursor_hidden = False

        if self._input_enabled and self._stdin_fd is not None and self._termios_before is not None:
            try:
                termios.tcsetattr(self._stdin_fd, termios.TCSADRAIN, self._termios_before)
            except termios.error:
                pass
        self._input_enabled = False
        self._stdin_fd = None
        self._termios_before = None

    def draw(self, frame: str) -> None:
        sys.stdout.write("\033[2J\033[H")
        sys.stdout.write(frame)
        sys.stdout.flush()

    def poll_keys(self) -> List[str]:
        """Return pending key presses without blocking."""
        if not self._input_enabled or self._stdin_fd is None:
            return []

        keys: List[str] = []
        try:
            while True:
                readable, _, _ = select.select([sys.stdin], [], [], 0)
                if not readable:
                    break

                data = os.read(self._stdin_fd, 1)
                if not data:
                    break

                char = data.decode("utf-8", errors="ignore")
                if char == "\x03":
                    raise KeyboardInterrupt
                if char:
                    keys.append(char)
        except OSError:
            return keys

        return keys

    def stop_requested(self) -> bool:
        return any(key in ("q", "Q") for key in self.poll_keys())
