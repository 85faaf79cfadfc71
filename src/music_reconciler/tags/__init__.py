"""Tag reading and writing for local audio files.

:class:`~music_reconciler.tags.file.TrackFile` lives in ``tags.file``; it
depends on the domain model, which itself imports :class:`Format` from here.
"""

from .base import Tag
from .format import Format
from .mutagen_tag import MutagenTag

__all__ = ["Format", "MutagenTag", "Tag"]
