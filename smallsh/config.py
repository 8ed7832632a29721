PROMPT = ": "
BANNER = "smallsh$"

# Input limits
MAX_LINE_LENGTH = 2048
MAX_ARGS = 512
READ_CHUNK_SIZE = 4096

# Expanded to the shell's own pid
PID_MARKER = "$$"

# Mode for files created by "> file"
REDIRECT_FILE_MODE = 0o644

# Child exit codes when the program never started
EXIT_REDIRECT_FAILED = 1
EXIT_NOT_EXECUTABLE = 126
EXIT_NOT_FOUND = 127

# Seconds to wait for children after SIGTERM on exit
TERMINATE_TIMEOUT = 3

