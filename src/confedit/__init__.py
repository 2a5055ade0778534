from . import log  # noqa: F401
from .errors import (
    ConfEditError,
    IOFailureError,
    ParseError,
    SerializeError,
    UnknownFormatError,
    WatchError,
)
from .formats import FormatAdapter, adapter_for_path
from .session import Document, Session, SyncResult, open
from .value import KeyPath, ValueKind, kind_of, values_equal

__all__ = [
    "ConfEditError",
    "Document",
    "FormatAdapter",
    "IOFailureError",
    "KeyPath",
    "ParseError",
    "SerializeError",
    "Session",
    "SyncResult",
    "UnknownFormatError",
    "ValueKind",
    "WatchError",
    "adapter_for_path",
    "kind_of",
    "open",
    "values_equal",
]
