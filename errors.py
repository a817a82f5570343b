# errors.py
"""
Error types for the expense relay bot.

Everything except ConfigError is line-scoped: the dispatcher turns it into a
Failure outcome and reports it in the chat instead of raising it further.
"""


class ExpenseBotError(Exception):
    """Base class for all bot errors."""


class MalformedLine(ExpenseBotError):
    """A line did not split into 4 or 5 fields."""

    def __init__(self, line, position):
        self.line = line
        self.position = position
        super().__init__(f"Line {position} has the wrong number of fields: {line!r}")


class RemoteRejected(ExpenseBotError):
    """The endpoint answered with a falsy "ok" flag."""

    def __init__(self, reason):
        self.reason = reason
        super().__init__(reason)


class TransportFault(ExpenseBotError):
    """The request never produced a usable answer (network, status, body)."""

    def __init__(self, reason):
        self.reason = reason
        super().__init__(reason)


class ConfigError(ExpenseBotError):
    """Startup configuration is missing or invalid."""

    def __init__(self, missing=(), detail=None):
        self.missing = list(missing)
        message = detail or f"Missing required settings: {', '.join(self.missing)}"
        super().__init__(message)
