"""
Terminal input and output for one agent session.

A single :class:`Console` owns the input stream.  The interactive loop, plan
confirmation, step-failure prompts and write confirmation all ask through the
same instance so that no two readers ever compete for stdin.
"""
from __future__ import annotations
import sys
import threading
from contextlib import contextmanager
from typing import Callable, Iterator, Optional, TextIO

from colorama import Fore, Style, init

init()  # Initialize colorama for Windows

SPINNER_FRAMES = ("⠋", "⠙", "⠹", "⠸", "⠼", "⠴", "⠦", "⠧", "⠇", "⠏")
THINKING_FRAMES = ("🤔", "💭", "🧠", "⚡")


class CLIColors:
    """Color utilities for CLI output"""

    @staticmethod
    def success(text: str) -> str:
        return f"{Fore.GREEN}{text}{Style.RESET_ALL}"

    @staticmethod
    def error(text: str) -> str:
        return f"{Fore.RED}{text}{Style.RESET_ALL}"

    @staticmethod
    def warning(text: str) -> str:
        return f"{Fore.YELLOW}{text}{Style.RESET_ALL}"

    @staticmethod
    def info(text: str) -> str:
        return f"{Fore.CYAN}{text}{Style.RESET_ALL}"

    @staticmethod
    def highlight(text: str) -> str:
        return f"{Fore.MAGENTA}{Style.BRIGHT}{text}{Style.RESET_ALL}"

    @staticmethod
    def dim(text: str) -> str:
        return f"{Style.DIM}{text}{Style.RESET_ALL}"


class Console:
    def __init__(
        self,
        input_func: Callable[[str], str] = input,
        out: Optional[TextIO] = None,
        animate: Optional[bool] = None,
    ):
        self._input = input_func
        self.out = out or sys.stdout
        if animate is None:
            animate = hasattr(self.out, "isatty") and self.out.isatty()
        self.animate = animate

    def print(self, text: str = "") -> None:
        self.out.write(text + "\n")
        self.out.flush()

    def info(self, text: str) -> None:
        self.print(CLIColors.info(f"ℹ {text}"))

    def success(self, text: str) -> None:
        self.print(CLIColors.success(f"✅ {text}"))

    def warning(self, text: str) -> None:
        self.print(CLIColors.warning(f"⚠️  {text}"))

    def error(self, text: str) -> None:
        self.print(CLIColors.error(f"❌ {text}"))

    def header(self, title: str) -> None:
        bar = "─" * (len(title) + 2)
        self.print(CLIColors.highlight(f"\n╭{bar}╮\n│ {title} │\n╰{bar}╯"))

    def separator(self, char: str = "─", length: int = 60) -> None:
        self.print(CLIColors.dim(char * length))

    def ask(self, prompt: str) -> str:
        return self._input(prompt).strip()

    def confirm(self, question: str) -> bool:
        answer = self.ask(CLIColors.warning(f"{question} (y/N): ")).lower()
        return answer in ("y", "yes")

    @contextmanager
    def spinner(self, message: str, frames: tuple[str, ...] = SPINNER_FRAMES,
                interval: float = 0.1) -> Iterator[None]:
        """Repaint a progress line while the body runs; always stopped on exit."""
        if not self.animate:
            yield
            return

        stop = threading.Event()

        def repaint():
            i = 0
            while True:
                self.out.write(f"\r{frames[i % len(frames)]} {CLIColors.info(message)}")
                self.out.flush()
                i += 1
                if stop.wait(interval):
                    break

        t = threading.Thread(target=repaint, name="console-spinner", daemon=True)
        t.start()
        ok = False
        try:
            yield
            ok = True
        finally:
            stop.set()
            t.join()
            mark = CLIColors.success("✓") if ok else CLIColors.error("✗")
            self.out.write(f"\r{mark} {message}\n")
            self.out.flush()

    def thinking(self, message: str):
        return self.spinner(message, frames=THINKING_FRAMES, interval=0.5)
