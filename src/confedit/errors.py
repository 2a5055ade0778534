class ConfEditError(Exception):
    """Base class for confedit errors."""


class IOFailureError(ConfEditError):
    """Raised when the document file cannot be read or written."""


class ParseError(ConfEditError):
    """Raised when an adapter fails to parse its text."""


class SerializeError(ConfEditError):
    """Raised when a tree cannot be encoded by an adapter."""


class WatchError(ConfEditError):
    """Raised when the file watcher cannot be started."""


class UnknownFormatError(ConfEditError):
    """Raised when no adapter is registered for a file suffix."""
