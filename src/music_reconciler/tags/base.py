"""Tag capability shared by every container format."""

from abc import ABC, abstractmethod
from datetime import timedelta
from typing import List, Optional


class Tag(ABC):
    """Key/value access to the tags of one audio file.

    Keys are the lowercase "easy" names (``title``, ``artist``,
    ``albumartist``, ``musicbrainz_trackid``, ...). A key may hold several
    values.
    """

    @abstractmethod
    def get_all(self, key: str) -> List[str]:
        """All values stored under ``key``, empty when absent."""
        pass

    @abstractmethod
    def set_str(self, key: str, value: str) -> None:
        """Replace every value of ``key`` with ``value``."""
        pass

    @abstractmethod
    def write(self) -> None:
        """Persist pending changes to the file."""
        pass

    def get_str(self, key: str) -> Optional[str]:
        """First non-empty value of ``key``."""
        for value in self.get_all(key):
            if value:
                return value
        return None

    @property
    def length(self) -> Optional[timedelta]:
        """Audio duration when the backend knows it."""
        return None
