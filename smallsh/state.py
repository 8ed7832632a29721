import os
from dataclasses import dataclass
from enum import Enum


class StatusKind(Enum):
    EXITED = "exited"
    SIGNALED = "signaled"


@dataclass(frozen=True)
class ExecutionStatus:
    """How a child finished: an exit code or the signal that killed it."""

    kind: StatusKind = StatusKind.EXITED
    value: int = 0

    @classmethod
    def exited(cls, code):
        return cls(StatusKind.EXITED, code)

    @classmethod
    def signaled(cls, signum):
        return cls(StatusKind.SIGNALED, signum)

    @classmethod
    def from_wait_status(cls, status):
        """Build from the raw status word returned by os.waitpid()."""
        if os.WIFSIGNALED(status):
            return cls.signaled(os.WTERMSIG(status))
        return cls.exited(os.WEXITSTATUS(status))

    @property
    def was_signaled(self):
        return self.kind is StatusKind.SIGNALED

    def __str__(self):
        if self.was_signaled:
            return f"terminated by signal {self.value}"
        return f"exit value {self.value}"


class ShellState:
    """
    State shared by the dispatcher, the launcher and the job controller.

    last_status is only written after a foreground wait. The
    foreground-only flag is only flipped by toggle_foreground_only(),
    which the SIGTSTP path calls; everyone else reads the property.
    """

    def __init__(self):
        self.last_status = ExecutionStatus()
        self._foreground_only = False

    @property
    def foreground_only(self):
        return self._foreground_only

    def toggle_foreground_only(self):
        self._foreground_only = not self._foreground_only
        return self._foreground_only

    def record_foreground(self, status):
        self.last_status = status
