"""buildevents integration: sidecar fields, span emission and installation."""

from .emitter import SpanEmitter
from .fields import FieldStore, format_logfmt, parse_logfmt
from .installer import construct_executable_name, install

__all__ = [
    "FieldStore",
    "SpanEmitter",
    "construct_executable_name",
    "format_logfmt",
    "install",
    "parse_logfmt",
]
