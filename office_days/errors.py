"""Error kinds raised while reading a location-history export."""

from __future__ import annotations

from pathlib import Path


class OfficeDaysError(Exception):
    """Base class for all errors raised by office_days."""


class ArgumentParseError(OfficeDaysError, ValueError):
    """A numeric or date argument could not be parsed."""


class PointParseError(OfficeDaysError, ValueError):
    """Coordinate text such as "51.65°, 5.04°" could not be parsed."""


class DirectoryListError(OfficeDaysError):
    """The input directory could not be read."""

    def __init__(self, path: str | Path, cause: OSError) -> None:
        super().__init__(f"could not read directory {str(path)!r}: {cause}")
        self.path = Path(path)
        self.cause = cause


class FileOpenError(OfficeDaysError):
    """An input file could not be opened."""

    def __init__(self, path: str | Path, cause: OSError) -> None:
        super().__init__(f"could not open file {str(path)!r}: {cause}")
        self.path = Path(path)
        self.cause = cause


class DecodeError(OfficeDaysError):
    """A timeline document could not be decoded."""
