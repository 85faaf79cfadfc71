"""Explicit shared ownership for aggregates that are handed around.

A ``Shared`` handle is a counted reference to one value. Each holder gets its
own handle through :meth:`Shared.share` and gives it back with
:meth:`Shared.drop`. :meth:`Shared.take` reclaims the value for the caller
and only succeeds while that caller is the last live holder.
"""

from __future__ import annotations

from typing import Generic, TypeVar

from ..exceptions import OwnershipError

T = TypeVar("T")


class _Cell(Generic[T]):
    __slots__ = ("value", "holders")

    def __init__(self, value: T) -> None:
        self.value = value
        self.holders = 1


class Shared(Generic[T]):
    """A counted handle to a value that several holders may reference."""

    __slots__ = ("_cell", "_alive")

    def __init__(self, value: T) -> None:
        self._cell: _Cell[T] = _Cell(value)
        self._alive = True

    @classmethod
    def _from_cell(cls, cell: _Cell[T]) -> Shared[T]:
        handle = cls.__new__(cls)
        handle._cell = cell
        handle._alive = True
        cell.holders += 1
        return handle

    @property
    def value(self) -> T:
        """Read access to the shared value."""
        self._check_alive()
        return self._cell.value

    @property
    def holders(self) -> int:
        """Number of live handles pointing at the value."""
        return self._cell.holders

    @property
    def alive(self) -> bool:
        return self._alive

    def share(self) -> Shared[T]:
        """Create another holder of the same value."""
        self._check_alive()
        return Shared._from_cell(self._cell)

    def drop(self) -> None:
        """Release this handle. Dropping twice is a no-op."""
        if self._alive:
            self._alive = False
            self._cell.holders -= 1

    def take(self) -> T:
        """Reclaim sole ownership of the value.

        Raises:
            OwnershipError: If another handle to the value is still alive.
        """
        self._check_alive()
        if self._cell.holders > 1:
            raise OwnershipError(
                f"Could not take ownership of shared {type(self._cell.value).__name__}: "
                f"{self._cell.holders - 1} other holder(s) still alive"
            )
        value = self._cell.value
        self.drop()
        return value

    def _check_alive(self) -> None:
        if not self._alive:
            raise OwnershipError("Shared handle was already dropped or taken")

    def __repr__(self) -> str:
        state = "alive" if self._alive else "dropped"
        return f"Shared({self._cell.value!r}, holders={self._cell.holders}, {state})"
