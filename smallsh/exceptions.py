"""
Error types raised by smallsh.

Usage:
    from smallsh.exceptions import ShellError

    try:
        command = parse_command(line)
    except ShellError as e:
        print(f"smallsh: {e}", file=sys.stderr)
"""


class ShellError(Exception):
    """
    Base class for all shell errors.

    Attributes:
        message: Error message
        exit_code: Suggested exit code (default: 1)
    """

    def __init__(self, message, exit_code=1):
        super().__init__(message)
        self.message = message
        self.exit_code = exit_code

    def __str__(self):
        return self.message


class InputLimitError(ShellError):
    """Raised when a line exceeds one of the configured input limits."""

    def __init__(self, message, limit):
        super().__init__(message)
        self.limit = limit


class LineTooLongError(InputLimitError):
    def __init__(self, length, limit):
        super().__init__(f"line too long ({length} > {limit} characters)", limit)
        self.length = length


class TooManyArgumentsError(InputLimitError):
    def __init__(self, count, limit):
        super().__init__(f"too many arguments ({count} > {limit})", limit)
        self.count = count
