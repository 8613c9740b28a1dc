"""
Errors raised while parsing schemas and paths or deriving keys.

Every error carries optional ``position``, ``label`` and ``value`` attributes
so callers can point at the offending part of a path or schema.
"""

from typing import Any, Optional


class HDError(Exception):
    """Base class for all hdsk errors."""

    def __init__(
        self,
        message: str,
        position: Optional[int] = None,
        label: Optional[str] = None,
        value: Any = None,
    ):
        super().__init__(message)
        self.message = message
        self.position = position
        self.label = label
        self.value = value

    def at(
        self, position: int, label: Optional[str] = None, value: Any = None
    ) -> "HDError":
        """Return a copy of this error located at a path position."""
        where = f"position {position}"
        if label is not None:
            where += f' label "{label}"'
        return type(self)(
            f"{where}: {self.message}",
            position=position,
            label=label,
            value=self.value if value is None else value,
        )


class HDGrammarError(HDError, ValueError):
    """Malformed schema or path text: missing root, bad segment, empty input."""


class HDTypeError(HDError, TypeError):
    """A value does not match the type required at its position."""


class HDRangeError(HDError, ValueError):
    """A size or index lies outside its accepted range."""
