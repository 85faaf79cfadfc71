"""
Mutagen tag backend.

Each :class:`Format` variant maps to one mutagen class. ID3 and MP4 go
through mutagen's "easy" wrappers so that all formats answer to the same
lowercase keys; Vorbis comments and APEv2 keys are case-insensitive already.
"""

import logging
from datetime import timedelta
from pathlib import Path
from typing import Any, List, Optional, Union

from mutagen import MutagenError
from mutagen.easymp4 import EasyMP4
from mutagen.flac import FLAC
from mutagen.monkeysaudio import MonkeysAudio
from mutagen.mp3 import EasyMP3

from ..exceptions import DecodeError
from .base import Tag
from .format import Format

logger = logging.getLogger(__name__)

_BACKENDS = {
    Format.FLAC: FLAC,
    Format.MP4: EasyMP4,
    Format.ID3: EasyMP3,
    Format.APE: MonkeysAudio,
}


def _as_list(value: Any) -> List[str]:
    """Normalize a mutagen tag value to a list of strings."""
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        return [str(v) for v in value]
    # APEv2 text values keep multiple entries separated by NUL
    return str(value).split("\0")


class MutagenTag(Tag):
    """:class:`Tag` on top of a loaded mutagen file object."""

    def __init__(self, audio: Any, format: Format, path: Optional[Path] = None):
        self._audio = audio
        self.format = format
        self.path = path
        if audio.tags is None:
            audio.add_tags()

    @classmethod
    def load(cls, path: Union[str, Path], format: Format) -> "MutagenTag":
        """Open ``path`` with the backend of ``format``."""
        path = Path(path)
        backend = _BACKENDS[format]
        try:
            audio = backend(str(path))
        except (MutagenError, OSError) as e:
            raise DecodeError(f"Cannot read {format} tags from {path}: {e}") from e
        logger.debug(f"Loaded {format} tags from {path}")
        return cls(audio, format, path)

    def get_all(self, key: str) -> List[str]:
        return [v for v in _as_list(self._audio.tags.get(key)) if v is not None]

    def set_str(self, key: str, value: str) -> None:
        self._audio.tags[key] = [value]

    def write(self) -> None:
        self._audio.save()
        logger.info(f"Wrote tags to {self.path}")

    @property
    def length(self) -> Optional[timedelta]:
        info = getattr(self._audio, "info", None)
        seconds = getattr(info, "length", None)
        if not seconds:
            return None
        return timedelta(seconds=seconds)
