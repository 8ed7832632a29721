import os
from dataclasses import dataclass, field
from typing import List, Optional

from smallsh.config import MAX_ARGS, MAX_LINE_LENGTH, PID_MARKER
from smallsh.exceptions import LineTooLongError, TooManyArgumentsError


@dataclass(frozen=True)
class Command:
    """One parsed input line, ready for dispatch."""

    argv: List[str] = field(default_factory=list)
    input_file: Optional[str] = None
    output_file: Optional[str] = None
    background: bool = False

    @property
    def name(self):
        return self.argv[0] if self.argv else None


def expand_shell_id(token, pid=None):
    """
    Replace every "$$" in token with the shell's process id.
    Occurrences are matched left to right without overlap, so "$$$$"
    expands twice and "$$$" expands once and keeps the trailing "$".
    """
    if PID_MARKER not in token:
        return token
    if pid is None:
        pid = os.getpid()
    return token.replace(PID_MARKER, str(pid))


def split_words(line):
    """Split on single spaces. Runs of spaces never yield empty words."""
    return [word for word in line.split(" ") if word]


def parse_command(line, foreground_only=False, pid=None):
    """
    Parse a raw line into a Command.
    Returns: Command

    "<" and ">" take the following word as a path; with nothing after
    them the redirection is dropped. "&" requests background execution
    and is ignored while foreground-only mode is on.
    """
    if len(line) > MAX_LINE_LENGTH:
        raise LineTooLongError(len(line), MAX_LINE_LENGTH)

    words = split_words(line)
    args, stdin_f, stdout_f = [], None, None
    background = False
    i = 0

    while i < len(words):
        tok = words[i]
        if tok == "<":
            if i + 1 < len(words):
                stdin_f = words[i + 1]
            i += 2
        elif tok == ">":
            if i + 1 < len(words):
                stdout_f = words[i + 1]
            i += 2
        elif tok == "&":
            if not foreground_only:
                background = True
            i += 1
        else:
            args.append(expand_shell_id(tok, pid))
            i += 1

    if len(args) > MAX_ARGS:
        raise TooManyArgumentsError(len(args), MAX_ARGS)

    return Command(
        argv=args,
        input_file=stdin_f,
        output_file=stdout_f,
        background=background,
    )
