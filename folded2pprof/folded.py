from __future__ import annotations

import re
import sys
from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple

from .errors import ParseError

UNKNOWN = "<Unknown>"
FRAME_SEPARATOR = "; "

_CYCLES_RE = re.compile(r"\+?[0-9]+")
_U64_MAX = 2 ** 64 - 1


@dataclass(frozen=True)
class Symbol:
    name: Optional[str] = None
    file: Optional[str] = None

    @property
    def display_name(self) -> str:
        return UNKNOWN if self.name is None else self.name

    @property
    def display_file(self) -> str:
        return UNKNOWN if self.file is None else self.file


@dataclass(frozen=True)
class Frame:
    stack: Tuple[Symbol, ...]   # leaf first
    cycles: int


def normalize_function_name(name: str) -> str:
    """Swap angle brackets for braces, renderers treat <...> as markup."""
    return name.replace("<", "{").replace(">", "}")


def parse_symbol(token: str) -> Symbol:
    file, sep, name = token.partition(":")
    if not sep:
        return Symbol(name=normalize_function_name(token))
    return Symbol(name=normalize_function_name(name), file=file)


def parse_cycles(text: str) -> int:
    if not _CYCLES_RE.fullmatch(text):
        raise ValueError(f"not an unsigned integer: {text!r}")
    cycles = int(text)
    if cycles > _U64_MAX:
        raise ValueError(f"cycle count does not fit in 64 bits: {text!r}")
    return cycles


def parse_folded_line(line: str) -> Frame:
    i = line.rfind(" ")   # split point is the last space, not the last token
    if i < 0:
        raise ParseError("no cycles available", line)
    stack_str, count_str = line[:i], line[i + 1:]

    stack = [parse_symbol(token) for token in stack_str.split(FRAME_SEPARATOR)]
    stack.reverse()

    try:
        cycles = parse_cycles(count_str)
    except ValueError as e:
        raise ParseError("invalid cycle", line) from e

    return Frame(stack=tuple(stack), cycles=cycles)
    """
    input : "lib.c:main; foo<T>; bar 5"
    output : Frame(stack=(Symbol('bar'), Symbol('foo{T}'), Symbol('main', 'lib.c')), cycles=5)
    """


def read_frames(lines: Iterable[str], skip_invalid: bool = False) -> List[Frame]:
    """Decode every line, blank lines included.

    A malformed line aborts with ParseError carrying its line number, unless
    skip_invalid is set, in which case it is reported on stderr and dropped.
    """
    frames: List[Frame] = []
    for lineno, raw in enumerate(lines, 1):
        line = raw.rstrip("\r\n")
        try:
            frames.append(parse_folded_line(line))
        except ParseError as e:
            if not skip_invalid:
                raise ParseError(e.reason, line, lineno) from e
            print(f"Warning: skipping line {lineno}: {e.reason}: {line!r}",
                  file=sys.stderr)
    return frames
