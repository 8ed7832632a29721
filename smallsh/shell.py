import os
import sys

from smallsh.builtin import execute_builtin
from smallsh.config import BANNER, PROMPT, READ_CHUNK_SIZE
from smallsh.exceptions import ShellError
from smallsh.executor import launch
from smallsh.job_control import JobControl
from smallsh.parser import parse_command
from smallsh.state import ShellState


def clear_screen():
    os.system('cls' if os.name == 'nt' else 'clear')


class Shell:
    """Prompt loop: read a line, dispatch it, repeat until `exit`."""

    def __init__(self, stdin_fd=0):
        self.state = ShellState()
        self.jobs = JobControl(self.state)
        self.stdin_fd = stdin_fd
        self._buffer = b""
        self._stdin_open = True

    def prompt(self):
        sys.stdout.write(PROMPT)
        sys.stdout.flush()

    def read_line(self):
        """
        Wait for a complete input line, handling signals meanwhile.
        Returns: the line without its newline, or None at end of input
        """
        while True:
            if b"\n" in self._buffer:
                line, self._buffer = self._buffer.split(b"\n", 1)
                return line.decode(errors="replace")

            if not self._stdin_open:
                self.jobs.wait_for_event()
                continue

            ready = self.jobs.wait_for_event([self.stdin_fd])
            if self.stdin_fd not in ready:
                continue

            chunk = os.read(self.stdin_fd, READ_CHUNK_SIZE)
            if chunk:
                self._buffer += chunk
                continue

            # EOF on a terminal is just ^D; on a pipe or file it is final
            if not os.isatty(self.stdin_fd):
                self._stdin_open = False
            if self._buffer:
                line, self._buffer = self._buffer, b""
                return line.decode(errors="replace")
            return None

    def execute_line(self, line):
        """Parse one line and run it as a built-in or external command."""
        line = line.rstrip("\r\n")
        if line.startswith("#") or not line.strip(" "):
            return

        try:
            command = parse_command(line, foreground_only=self.state.foreground_only)
        except ShellError as e:
            print(f"smallsh: {e}", file=sys.stderr)
            return

        if execute_builtin(command, self.state, self.jobs):
            return

        launch(command, self.state, self.jobs)

    def run(self):
        """Main shell loop"""
        if os.isatty(self.stdin_fd):
            clear_screen()
            print(BANNER, flush=True)

        self.jobs.install()
        try:
            while True:
                self.prompt()
                line = self.read_line()
                if line is None:
                    continue
                self.execute_line(line)
        finally:
            self.jobs.uninstall()


def main():
    Shell().run()
