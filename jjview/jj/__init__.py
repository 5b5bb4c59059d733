"""Access to the ``jj`` command-line engine: runner, templates, parsers, errors."""

from .errors import CommandFailed, JjError, JjNotFound, NotARepository, ParseError
from .executor import JjExecutor

__all__ = [
    "CommandFailed",
    "JjError",
    "JjExecutor",
    "JjNotFound",
    "NotARepository",
    "ParseError",
]
