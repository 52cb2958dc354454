"""Active filter tags with toggle semantics."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Iterator, Literal

FilterAction = Literal["Added", "Removed"]


@dataclass(frozen=True)
class FilterChange:
    """Outcome of one toggle."""

    action: FilterAction
    tag: str

    def describe(self) -> str:
        return f"{self.action} filter: {self.tag}"


class FilterSet:
    """Ordered, duplicate-free set of filter tags."""

    def __init__(self, tags: list[str] | None = None, on_change: Callable[[], None] | None = None) -> None:
        self._tags: list[str] = []
        for tag in tags or []:
            if tag not in self._tags:
                self._tags.append(tag)
        self._on_change = on_change

    def __contains__(self, tag: object) -> bool:
        return tag in self._tags

    def __iter__(self) -> Iterator[str]:
        return iter(tuple(self._tags))

    def __len__(self) -> int:
        return len(self._tags)

    def __bool__(self) -> bool:
        return bool(self._tags)

    @property
    def tags(self) -> tuple[str, ...]:
        return tuple(self._tags)

    def toggle(self, tag: str) -> FilterChange:
        """Remove *tag* if active, otherwise append it."""
        if tag in self._tags:
            self._tags.remove(tag)
            change = FilterChange("Removed", tag)
        else:
            self._tags.append(tag)
            change = FilterChange("Added", tag)
        if self._on_change is not None:
            self._on_change()
        return change

    def describe(self) -> str:
        return ", ".join(self._tags) if self._tags else "None"
