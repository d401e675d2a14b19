"""Domain errors for escli."""


class EscliError(RuntimeError):
    """Raised when a command cannot continue safely."""

    kind = "EscliError"
    exit_code = 1


class ConfigInvalid(EscliError):
    """The persisted configuration is missing, unreadable or unrecognized."""

    kind = "ConfigInvalid"


class ConnectionFailed(EscliError):
    """The runner could not be connected to the cluster."""

    kind = "ConnectionFailed"


class ArgumentError(EscliError):
    """Positional arguments do not match the declared arity."""

    kind = "ArgumentError"
    exit_code = 2


class Cancelled(EscliError):
    """The command context was cancelled."""

    kind = "Cancelled"
    exit_code = 130

    def __init__(self, message: str = "operation cancelled"):
        super().__init__(message)


class HandlerError(EscliError):
    """Opaque failure raised by a command's own logic."""

    kind = "HandlerError"
