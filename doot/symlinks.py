"""Collection of installed links and their listing formats."""

from __future__ import annotations

import json
from collections.abc import Iterator, Mapping


class SymlinkCollection:
    """Maps installed link paths to the dotfile paths they point at."""

    def __init__(self, links: Mapping[str, str] | None = None) -> None:
        self._links: dict[str, str] = dict(links or {})

    def add(self, path: str, target: str) -> None:
        self._links[path] = target

    def get(self, path: str) -> str | None:
        return self._links.get(path)

    def remove(self, path: str) -> None:
        self._links.pop(path, None)

    def items(self) -> list[tuple[str, str]]:
        """All (link, target) pairs, ordered by link path."""
        return sorted(self._links.items())

    def __len__(self) -> int:
        return len(self._links)

    def __iter__(self) -> Iterator[str]:
        return iter(sorted(self._links))

    def __contains__(self, path: object) -> bool:
        return path in self._links

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SymlinkCollection):
            return NotImplemented
        return self._links == other._links

    def __repr__(self) -> str:
        return f"SymlinkCollection({self._links!r})"

    def print_list(self) -> str:
        """One ``link -> target`` line per entry, sorted by link."""
        return "".join(f"{path} -> {target}\n" for path, target in self.items())

    def to_json(self) -> str:
        """Compact JSON object of link to target, sorted by link."""
        return json.dumps(dict(self.items()), separators=(",", ":"), ensure_ascii=False)


def format_installed(links: SymlinkCollection, as_json: bool) -> str:
    """Text that the ``ls`` command shows for the installed links."""
    return links.to_json() if as_json else links.print_list()