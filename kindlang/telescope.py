"""A sequence of arguments in which each may depend on the previous ones."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Generic, Iterator, TypeVar

T = TypeVar("T")
U = TypeVar("U")


@dataclass
class Telescope(Generic[T]):
    """An iterated sigma type represented as a list."""

    items: list[T] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self) -> Iterator[T]:
        return iter(self.items)

    def __getitem__(self, index: int) -> T:
        return self.items[index]

    def push(self, el: T) -> None:
        self.items.append(el)

    def extend(self, other: Telescope[T]) -> Telescope[T]:
        """Return a new telescope with the other's items appended."""
        return Telescope([*self.items, *other.items])

    def map(self, f: Callable[[T], U]) -> Telescope[U]:
        return Telescope([f(item) for item in self.items])

    def drop(self, num: int) -> Telescope[T]:
        """Return a telescope without the first ``num`` items."""
        if num > len(self.items):
            raise IndexError(f"cannot drop {num} items from a telescope of {len(self.items)}")
        return Telescope(self.items[num:])

    def is_empty(self) -> bool:
        return not self.items