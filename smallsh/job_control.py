import os
import selectors
import signal
import sys
from collections import deque

import psutil

from smallsh.config import TERMINATE_TIMEOUT
from smallsh.state import ExecutionStatus

ENTER_FOREGROUND_ONLY = "\nEntering foreground-only mode (& is now ignored)\n"
EXIT_FOREGROUND_ONLY = "\nExiting foreground-only mode\n"


def format_background_done(pid, status):
    if status.was_signaled:
        return f"Background process with PID {pid} terminated by signal {status.value}"
    return f"Background process with PID {pid} exited with status {status.value}"


class JobControl:
    """
    Bridges SIGCHLD and SIGTSTP into the main loop and owns background children.

    The signal handlers only queue the signal number; set_wakeup_fd()
    makes the pipe readable so a blocked select() returns. All reaping,
    printing and mode changes happen in drain(), on the main flow.
    """

    def __init__(self, state, out_fd=1):
        self.state = state
        self.out_fd = out_fd
        # Background jobs: pid → command name
        self.background = {}
        self._pending = deque()
        self._wakeup_r = None
        self._wakeup_w = None
        self._saved_handlers = {}
        self._saved_wakeup_fd = -1

    @property
    def installed(self):
        return self._wakeup_r is not None

    @property
    def wakeup_fd(self):
        return self._wakeup_r

    def install(self):
        """Set up the wakeup pipe and the SIGCHLD/SIGTSTP/SIGINT dispositions."""
        if self.installed:
            return
        r, w = os.pipe()
        os.set_blocking(r, False)
        os.set_blocking(w, False)
        self._wakeup_r, self._wakeup_w = r, w
        self._saved_wakeup_fd = signal.set_wakeup_fd(w, warn_on_full_buffer=False)

        for signum, handler in (
            (signal.SIGCHLD, self._queue_signal),
            (signal.SIGTSTP, self._queue_signal),
            (signal.SIGINT, signal.SIG_IGN),
        ):
            self._saved_handlers[signum] = signal.signal(signum, handler)

    def uninstall(self):
        if not self.installed:
            return
        for signum, handler in self._saved_handlers.items():
            signal.signal(signum, signal.SIG_DFL if handler is None else handler)
        self._saved_handlers.clear()
        signal.set_wakeup_fd(self._saved_wakeup_fd)
        os.close(self._wakeup_r)
        os.close(self._wakeup_w)
        self._wakeup_r = self._wakeup_w = None
        self._pending.clear()

    def _queue_signal(self, signum, frame):
        self._pending.append(signum)

    def drain(self):
        """Dispatch every signal queued since the last call."""
        if self.installed:
            try:
                while os.read(self._wakeup_r, 512):
                    pass
            except BlockingIOError:
                pass
        while self._pending:
            self.dispatch(self._pending.popleft())

    def dispatch(self, signum):
        if signum == signal.SIGCHLD:
            self.reap_background()
        elif signum == signal.SIGTSTP:
            self.toggle_mode()

    def wait_for_event(self, fds=(), timeout=None):
        """
        Block until a signal is delivered or one of fds becomes readable.
        Returns: list of readable fds from fds
        """
        if self._pending:
            self.drain()
            return []

        # epoll refuses regular files, and stdin may be one
        with selectors.SelectSelector() as sel:
            if self.installed:
                sel.register(self._wakeup_r, selectors.EVENT_READ)
            for fd in fds:
                sel.register(fd, selectors.EVENT_READ)
            ready = [key.fd for key, _ in sel.select(timeout)]

        self.drain()
        return [fd for fd in ready if fd != self._wakeup_r]

    def toggle_mode(self):
        """Flip foreground-only mode and announce it straight to the output fd."""
        entering = self.state.toggle_foreground_only()
        notice = ENTER_FOREGROUND_ONLY if entering else EXIT_FOREGROUND_ONLY
        sys.stdout.flush()
        os.write(self.out_fd, notice.encode())
        return entering

    def add_background_job(self, pid, name):
        self.background[pid] = name
        print(f"Background process ID: {pid}", flush=True)

    def reap_background(self):
        """
        Collect every background child that has terminated, without blocking.
        Returns: list of (pid, ExecutionStatus)
        """
        finished = []
        for pid in list(self.background):
            try:
                done, status = os.waitpid(pid, os.WNOHANG)
            except ChildProcessError:
                # Already collected elsewhere
                self.background.pop(pid, None)
                continue
            if done == 0:
                continue

            self.background.pop(pid, None)
            result = ExecutionStatus.from_wait_status(status)
            finished.append((pid, result))
            print(format_background_done(pid, result), flush=True)
        return finished

    def wait_foreground(self, pid):
        """
        Wait for one foreground child while still servicing signals.
        Returns: ExecutionStatus
        """
        if not self.installed:
            _, status = os.waitpid(pid, 0)
            return ExecutionStatus.from_wait_status(status)

        while True:
            done, status = os.waitpid(pid, os.WNOHANG)
            if done == pid:
                return ExecutionStatus.from_wait_status(status)
            self.wait_for_event()

    def terminate_all(self, timeout=TERMINATE_TIMEOUT):
        """
        SIGTERM every descendant of the shell, SIGKILL whatever survives,
        and collect them all.
        Returns: number of processes signalled
        """
        try:
            children = psutil.Process(os.getpid()).children(recursive=True)
        except psutil.Error as e:
            print(f"smallsh: could not list child processes: {e}", file=sys.stderr)
            children = []

        for child in children:
            try:
                child.terminate()
            except psutil.NoSuchProcess:
                pass

        _, alive = psutil.wait_procs(children, timeout=timeout)
        for child in alive:
            try:
                child.kill()
            except psutil.NoSuchProcess:
                pass
        if alive:
            psutil.wait_procs(alive, timeout=timeout)

        for pid in list(self.background):
            try:
                os.waitpid(pid, os.WNOHANG)
            except ChildProcessError:
                pass
        self.background.clear()
        return len(children)
