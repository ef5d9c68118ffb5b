from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Tuple

from .folded import Symbol
from .strings import StringTable


@dataclass(frozen=True)
class FunctionRecord:
    id: int
    name: int           # string table indices from here on
    system_name: int
    filename: int


@dataclass(frozen=True)
class LineRecord:
    function_id: int
    line: int = 0


@dataclass(frozen=True)
class LocationRecord:
    id: int
    lines: Tuple[LineRecord, ...]


class FunctionRegistry:
    """Assigns one function and one location per distinct symbol name.

    Symbols are keyed on their name alone, so the same name seen with two
    different files collapses into one function carrying the first file.
    Location ids reuse the function id: every function has exactly one
    synthetic location with line number 0.
    """

    def __init__(self, strings: StringTable):
        self._strings = strings
        self._ids: Dict[str, int] = {}
        self.functions: List[FunctionRecord] = []
        self.locations: List[LocationRecord] = []

    def resolve(self, symbol: Symbol) -> int:
        name = symbol.display_name
        function_id = self._ids.get(name)
        if function_id is not None:
            return function_id

        function_id = len(self.functions) + 1
        name_index = self._strings.index(name)
        # TODO: demangle C++ names so system_name can keep the mangled form
        self.functions.append(FunctionRecord(
            id=function_id,
            name=name_index,
            system_name=name_index,
            filename=self._strings.index(symbol.display_file),
        ))
        self.locations.append(LocationRecord(
            id=function_id,
            lines=(LineRecord(function_id=function_id, line=0),),
        ))
        self._ids[name] = function_id
        return function_id

    def __len__(self) -> int:
        return len(self.functions)
