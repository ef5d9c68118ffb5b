from __future__ import annotations

from typing import Dict, Iterable, Iterator, List, Sequence

from .folded import Frame

SAMPLES = "samples"
COUNT = "count"
CPU = "cpu"
NANOSECONDS = "nanoseconds"

FIXED_LABELS = (SAMPLES, COUNT, CPU, NANOSECONDS)


class StringTable:
    """Deduplicated string table, the empty string always sits at index 0."""

    def __init__(self, strings: Iterable[str] = ()):
        self._strings: List[str] = [""]
        self._index: Dict[str, int] = {"": 0}
        for s in strings:
            if s not in self._index:
                self._index[s] = len(self._strings)
                self._strings.append(s)

    @classmethod
    def from_frames(cls, frames: Sequence[Frame]) -> "StringTable":
        """Intern every name and file label across all frames, plus the value type labels."""
        def collect() -> Iterator[str]:
            for frame in frames:
                for symbol in frame.stack:
                    yield symbol.display_name
                    yield symbol.display_file
            yield from FIXED_LABELS

        return cls(collect())

    def index(self, value: str) -> int:
        return self._index[value]

    @property
    def strings(self) -> List[str]:
        return list(self._strings)

    def __contains__(self, value: object) -> bool:
        return value in self._index

    def __iter__(self) -> Iterator[str]:
        return iter(self._strings)

    def __len__(self) -> int:
        return len(self._strings)
