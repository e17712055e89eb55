"""Candidate sets and the merge/filter/dedup helpers around them."""

from __future__ import annotations

import re
from enum import Enum
from typing import Callable, Dict, Iterable, Iterator, List, Optional

from ..runtime.config import CompletionConfig


class CandidateKind(str, Enum):
    """Where a candidate came from; decides the suffix added on insertion."""
    FILE = "file"
    DIRECTORY = "directory"
    EXECUTABLE = "executable"
    COMMAND = "command"
    SYMBOL = "symbol"


class CandidateSet:
    """Ordered set of completion strings.

    Membership is exact string equality, so names differing only in case
    stay distinct. The first kind recorded for a name is kept.
    """

    def __init__(self, names: Optional[Iterable[str]] = None, kind: CandidateKind = CandidateKind.FILE):
        self._items: Dict[str, CandidateKind] = {}
        for name in names or ():
            self.add(name, kind)

    def add(self, name: str, kind: CandidateKind = CandidateKind.FILE) -> bool:
        """Add ``name``; return False if it was already present."""
        if name in self._items:
            return False
        self._items[name] = kind
        return True

    def update(self, other: "CandidateSet") -> None:
        for name in other:
            self.add(name, other.kind(name))

    def kind(self, name: str) -> CandidateKind:
        return self._items[name]

    def is_directory(self, name: str) -> bool:
        return self._items.get(name) is CandidateKind.DIRECTORY

    def names(self) -> List[str]:
        return list(self._items)

    def filter(self, predicate: Callable[[str], bool]) -> "CandidateSet":
        result = CandidateSet()
        for name, kind in self._items.items():
            if predicate(name):
                result.add(name, kind)
        return result

    def matching(self, stub: str, config: CompletionConfig) -> "CandidateSet":
        """Entries starting with ``stub``, case folded when configured."""
        return self.filter(lambda name: config.matches(name, stub))

    def __iter__(self) -> Iterator[str]:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __contains__(self, name: object) -> bool:
        return name in self._items

    def __bool__(self) -> bool:
        return bool(self._items)

    def __repr__(self) -> str:
        return f"CandidateSet({self.names()!r})"


def dedup(names: Iterable[str]) -> List[str]:
    """Drop repeated names, keeping the first occurrence and its case."""
    seen = set()
    result = []
    for name in names:
        if name not in seen:
            seen.add(name)
            result.append(name)
    return result


def merge(*sets: CandidateSet) -> CandidateSet:
    """Union in argument order."""
    merged = CandidateSet()
    for candidates in sets:
        merged.update(candidates)
    return merged


def common_prefix(names: Iterable[str], ignore_case: bool = False) -> str:
    """Longest prefix shared by all names, taken from the first name."""
    names = list(names)
    if not names:
        return ""
    first = names[0]
    folded = [name.lower() for name in names] if ignore_case else names
    length = len(first)
    for name in folded[1:]:
        length = min(length, len(name))
        for index in range(length):
            if folded[0][index] != name[index]:
                length = index
                break
    return first[:length]


def is_visible(name: str, stub: str) -> bool:
    """Hidden entries are only offered once the stub starts with a dot."""
    return not name.startswith(".") or stub.startswith(".")


def is_ignored(name: str, is_dir: bool, config: CompletionConfig) -> bool:
    pattern = config.dir_ignore if is_dir else config.file_ignore
    return bool(pattern) and re.search(pattern, name) is not None
