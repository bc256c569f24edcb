"""Errors raised by the version algebra."""

from __future__ import annotations

from typing import Optional


class VersionError(ValueError):
    """A version or version range string could not be parsed or used.

    Subclasses ``ValueError`` so that pydantic field validators surface
    it as a ``ValidationError`` when a record carries a malformed version.

    Attributes:
        version: The offending version string, when one is involved.
        range: The offending range string, when one is involved.
    """

    def __init__(
        self,
        message: str,
        version: Optional[str] = None,
        range: Optional[str] = None,  # noqa: A002
    ) -> None:
        super().__init__(message)
        self.message = message
        self.version = version
        self.range = range

    def __reduce__(self):
        return (type(self), (self.message, self.version, self.range))
