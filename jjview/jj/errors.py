"""Exception taxonomy for ``jj`` invocations and output parsing.

Controllers catch ``JjError`` at their boundary; parse failures are handled
inside the executor and never reach the UI as crashes.
"""

from __future__ import annotations


class JjError(Exception):
    """Base class for every failure surfaced by the ``jj`` layer."""


class NotARepository(JjError):
    """The working directory is not inside a ``jj`` repository."""

    def __init__(self, path: str = "") -> None:
        self.path = path
        super().__init__(f"not a jj repository: {path}" if path else "not a jj repository")


class CommandFailed(JjError):
    """``jj`` exited non-zero; ``stderr`` is kept verbatim for classification."""

    def __init__(self, stderr: str, exit_code: int) -> None:
        self.stderr = stderr
        self.exit_code = exit_code
        message = stderr.strip() or f"jj exited with status {exit_code}"
        super().__init__(message)


class JjNotFound(JjError):
    """The ``jj`` executable could not be launched."""

    def __init__(self, binary: str = "jj") -> None:
        self.binary = binary
        super().__init__(f"'{binary}' command not found. Install jj and make sure it is on PATH.")


class ParseError(JjError):
    """Command output did not match the expected format."""
