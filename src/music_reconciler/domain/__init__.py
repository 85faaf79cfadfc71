"""Domain layer for music reconciler."""

from .models import (
    UNKNOWN_ARTIST,
    UNKNOWN_TITLE,
    Artist,
    Release,
    Track,
    ids,
    instruments,
    joined,
    names,
    sort_order,
    sort_order_joined,
)
from .shared import Shared

__all__ = [
    "Artist",
    "Release",
    "Track",
    "Shared",
    "UNKNOWN_ARTIST",
    "UNKNOWN_TITLE",
    "names",
    "ids",
    "sort_order",
    "joined",
    "sort_order_joined",
    "instruments",
]
