"""Constants and configuration defaults for the rut editor."""

class EditorConstants:
    """Central configuration constants for the editor."""

    # Command line
    USAGE = "Usage: rut <filename>"

    # Keyboard timing
    KEY_POLL_TIMEOUT = 0  # Non-blocking read once select() reports stdin ready

    # Terminal requirements
    MIN_TERMINAL_WIDTH = 1
    MIN_TERMINAL_HEIGHT = 2  # One text row plus the status line

    # Self-pipe markers used to wake the event loop
    RESIZE_PIPE_MARKER = b'R'
    SAVE_PIPE_MARKER = b'S'
    QUIT_PIPE_MARKER = b'Q'

    # File operations
    FILE_ENCODING = "utf-8"
    ATOMIC_SAVE_PREFIX = "."  # Prefix for temporary save files
    ATOMIC_SAVE_SUFFIX = ".tmp"  # Suffix for temporary save files

    # Settings / logging
    APP_NAME = "rut"
    SETTINGS_FILENAME = "settings.json"
    LOG_FILENAME = "rut.log"
    LOG_MAX_BYTES = 2 * 1024 * 1024
    LOG_BACKUP_COUNT = 3
    DEFAULT_LOG_LEVEL = "WARNING"

    # Status messages
    SAVED_MESSAGE = "Saved {} characters to {}"
    SAVING_MESSAGE = "Saving..."
    PERMISSION_DENIED_MESSAGE = "Error: Permission denied saving {}"
    NO_SPACE_MESSAGE = "Error: No space left on device"
    SAVE_FAILED_MESSAGE = "Error: Cannot save to {}"
    TERMINAL_TOO_SMALL_MESSAGE = "Terminal too small! Need at least {}x{}."
