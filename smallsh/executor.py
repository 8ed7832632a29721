import os
import signal
import sys

from smallsh.config import (
    EXIT_NOT_EXECUTABLE,
    EXIT_NOT_FOUND,
    EXIT_REDIRECT_FAILED,
    REDIRECT_FILE_MODE,
)


def _child_error(message):
    # Python's buffered streams are a copy of the parent's; write to the fd
    os.write(2, f"smallsh: {message}\n".encode(errors="replace"))


def _redirect(path, flags, target_fd, direction):
    try:
        fd = os.open(path, flags, REDIRECT_FILE_MODE)
    except (OSError, ValueError) as e:
        reason = e.strerror if isinstance(e, OSError) else e
        _child_error(f"cannot open {path} for {direction}: {reason}")
        os._exit(EXIT_REDIRECT_FAILED)
    os.dup2(fd, target_fd)
    os.close(fd)


def exec_child(command):
    """
    Runs in the forked child. Wires redirection and replaces the image.
    Never returns.
    """
    try:
        signal.signal(signal.SIGTSTP, signal.SIG_IGN)
        signal.signal(signal.SIGINT, signal.SIG_DFL)
        signal.signal(signal.SIGCHLD, signal.SIG_DFL)

        if command.input_file:
            _redirect(command.input_file, os.O_RDONLY, 0, "input")
        if command.output_file:
            _redirect(command.output_file,
                      os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 1, "output")

        try:
            os.execvp(command.argv[0], command.argv)
        except FileNotFoundError:
            _child_error(f"{command.argv[0]}: command not found")
            os._exit(EXIT_NOT_FOUND)
        except OSError as e:
            _child_error(f"{command.argv[0]}: {e.strerror}")
            os._exit(EXIT_NOT_EXECUTABLE)
        except ValueError as e:
            _child_error(f"{command.argv[0]}: {e}")
            os._exit(EXIT_NOT_EXECUTABLE)
    finally:
        os._exit(EXIT_NOT_EXECUTABLE)


def launch(command, state, jobs):
    """
    Fork and run an external command.
    Returns: ExecutionStatus for foreground runs, None for background
    runs or when the fork failed.
    """
    sys.stdout.flush()
    sys.stderr.flush()

    try:
        pid = os.fork()
    except OSError as e:
        print(f"smallsh: fork failed: {e}", file=sys.stderr)
        return None

    if pid == 0:
        exec_child(command)

    if command.background and not state.foreground_only:
        jobs.add_background_job(pid, command.name)
        return None

    status = jobs.wait_foreground(pid)
    state.record_foreground(status)
    return status
