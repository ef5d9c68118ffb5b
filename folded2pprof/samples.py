from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Tuple

from .config import DEFAULT_FREQUENCY_HZ
from .folded import Frame
from .registry import FunctionRegistry

NANOS_PER_SECOND = 1_000_000_000


@dataclass(frozen=True)
class SampleRecord:
    location_ids: Tuple[int, ...]
    values: Tuple[int, int]     # (cycles, nanoseconds)


def cycles_to_nanoseconds(cycles: int, frequency_hz: int = DEFAULT_FREQUENCY_HZ) -> int:
    # multiply before dividing so truncation matches for any frequency
    return cycles * NANOS_PER_SECOND // frequency_hz


def build_samples(
    frames: Iterable[Frame],
    registry: FunctionRegistry,
    frequency_hz: int = DEFAULT_FREQUENCY_HZ,
) -> List[SampleRecord]:
    """One sample per frame, identical stacks are not merged."""
    samples: List[SampleRecord] = []
    for frame in frames:
        location_ids = tuple(registry.resolve(symbol) for symbol in frame.stack)
        samples.append(SampleRecord(
            location_ids=location_ids,
            values=(frame.cycles, cycles_to_nanoseconds(frame.cycles, frequency_hz)),
        ))
    return samples
