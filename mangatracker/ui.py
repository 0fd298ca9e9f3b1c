from __future__ import annotations

import os
import sys
from typing import Callable, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from .tracker import Decision, FetchFailure, UpdateReport


class ConsoleUI:
    _COLORS = {
        "info": "36",      # cyan
        "success": "32",   # green
        "warning": "33",   # yellow
        "error": "31",     # red
        "muted": "90",     # bright black / grey
    }
    _LABELS = {
        "info": "INFO",
        "success": "DONE",
        "warning": "WARN",
        "error": "ERR",
        "muted": "...",
    }

    def __init__(self, *, reader: Callable[[str], str] = input) -> None:
        self._reader = reader
        self._supports_ansi = sys.stdout.isatty() and os.getenv("TERM") != "dumb"
        self._status_line: Optional[str] = None
        self._status_level = "info"
        self._detail_line: Optional[str] = None
        self._detail_level = "muted"
        self._last_line_length = 0

        if os.name == "nt" and self._supports_ansi:
            try:
                import colorama
            except ImportError:
                self._supports_ansi = False
            else:
                colorama.just_fix_windows_console()

    def _format_plain(self, message: str, level: str) -> str:
        if level == "muted":
            return message
        label = self._LABELS.get(level, level.upper())
        return f"[{label}] {message}"

    def _colorize(self, text: str, level: str) -> str:
        if not self._supports_ansi:
            return text
        code = self._COLORS.get(level)
        if not code:
            return text
        return f"\x1b[{code}m{text}\x1b[0m"

    def _clear_line(self) -> None:
        if not self._last_line_length:
            return
        if self._supports_ansi:
            sys.stdout.write("\r\x1b[2K")
        else:
            sys.stdout.write("\r" + " " * self._last_line_length + "\r")
        sys.stdout.flush()
        self._last_line_length = 0

    def _render(self) -> None:
        self._clear_line()
        parts: list[str] = []
        if self._status_line:
            parts.append(self._colorize(self._format_plain(self._status_line, self._status_level), self._status_level))
        if self._detail_line:
            parts.append(self._colorize(self._format_plain(self._detail_line, self._detail_level), self._detail_level))
        if not parts:
            return
        line = " | ".join(parts)
        sys.stdout.write("\r" + line)
        sys.stdout.flush()
        self._last_line_length = len(line)

    def update_status(self, message: Optional[str], *, level: str = "info") -> None:
        self._status_line = message
        self._status_level = level
        self._render()

    def update_detail(self, message: Optional[str], *, level: str = "muted") -> None:
        self._detail_line = message
        self._detail_level = level
        self._render()

    def log_event(self, message: str, *, level: str = "info") -> None:
        self._clear_line()
        print(self._colorize(self._format_plain(message, level), level), flush=True)
        self._render()

    def report_update(self, report: "UpdateReport") -> None:
        self._clear_line()
        print(f"{report.last_read_url:100}\t\t\tlast chapter {report.latest}", flush=True)
        self._render()

    def report_failure(self, failure: "FetchFailure") -> None:
        self.log_event(f"{failure.series_url}: {failure.error.message}", level="error")

    def ask_decision(self, series_url: str) -> Optional["Decision"]:
        """Ask whether ``series_url`` should be tracked.

        Re-asks until the answer is ``y`` or ``n``; returns None at end of input.
        """
        from .tracker import Decision

        self._clear_line()
        while True:
            try:
                answer = self._reader(f"Do you want to track {series_url} ? [y/n]: ")
            except EOFError:
                print(flush=True)
                return None
            answer = answer.strip()
            if answer == "y":
                return Decision.ALLOW
            if answer == "n":
                return Decision.DENY
            print("Please either answer with 'y' or 'n'", flush=True)

    def finalize(self) -> None:
        self._status_line = None
        self._detail_line = None
        self._clear_line()
