"""
Exception types raised while loading and building course catalogs.
"""

from pathlib import Path
from typing import Union


class CourseGraphError(Exception):
    """Base class for all course graph errors."""


class CatalogIOError(CourseGraphError):
    """The catalog file could not be opened or read."""

    def __init__(self, path: Union[str, Path], reason: str = ""):
        self.path = Path(path)
        self.reason = reason
        message = f"Could not read in JSON file {self.path}."
        if reason:
            message += f" ({reason})"
        super().__init__(message)


class CatalogDecodeError(CourseGraphError, ValueError):
    """The catalog content does not match the expected JSON grammar."""


class MalformedPrerequisiteError(CatalogDecodeError):
    """A prerequisite expression has an unknown tag or a bad payload."""

    def __init__(self, message: str, location: str = "prerequisite"):
        self.location = location
        super().__init__(f"{location}: {message}")


class UsageError(CourseGraphError):
    """No input mode was selected on the command line."""


class UnsupportedInputError(CourseGraphError):
    """The requested input format has no implementation yet."""


class BuilderConsumedError(CourseGraphError):
    """A catalog builder was used after it had been built."""
