"""Audio container formats known to the tag layer."""

from enum import Enum
from pathlib import Path
from typing import Optional, Union


class Format(Enum):
    """Supported tag formats.

    The set is closed: every variant maps to exactly one mutagen backend.
    """
    FLAC = "flac"
    MP4 = "m4a"
    ID3 = "mp3"
    APE = "ape"

    @property
    def ext(self) -> str:
        """File extension without the leading dot."""
        return self.value

    @classmethod
    def from_ext(cls, ext: str) -> Optional["Format"]:
        """Look up a format from a file extension (with or without dot)."""
        normalized = ext.lower().lstrip(".")
        return _EXTENSIONS.get(normalized)

    @classmethod
    def from_path(cls, path: Union[str, Path]) -> Optional["Format"]:
        """Look up a format from a path's suffix."""
        return cls.from_ext(Path(path).suffix)

    def __str__(self) -> str:
        return self.value


_EXTENSIONS = {
    "flac": Format.FLAC,
    "m4a": Format.MP4,
    "mp4": Format.MP4,
    "m4b": Format.MP4,
    "aac": Format.MP4,
    "mp3": Format.ID3,
    "ape": Format.APE,
}
