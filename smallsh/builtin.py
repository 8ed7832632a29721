import os
import sys


def builtin_exit(args, state, jobs):
    """Kill every child the shell started, then leave with status 0"""
    jobs.terminate_all()
    sys.exit(0)


def builtin_cd(args, state, jobs):
    """Change directory"""
    if args:
        path = args[0]
    else:
        path = os.environ.get("HOME")
        if not path:
            print("cd: HOME not set", file=sys.stderr)
            return 1
    try:
        os.chdir(path)
        return 0
    except OSError as e:
        print(f"cd: {path}: {e.strerror}", file=sys.stderr)
        return 1


def builtin_status(args, state, jobs):
    """Print how the last foreground command finished"""
    print(state.last_status, flush=True)
    return 0


BUILTINS = {
    'exit': builtin_exit,
    'cd': builtin_cd,
    'status': builtin_status,
}


def execute_builtin(command, state, jobs):
    """
    Execute built-in command if it matches.
    Returns: True when the command was handled here
    """
    if not command.argv:
        return True

    handler = BUILTINS.get(command.name)
    if handler is None:
        return False

    handler(command.argv[1:], state, jobs)
    return True
