from __future__ import annotations

import gzip
import os
import tempfile
from typing import Iterable, List

from google.protobuf.message import EncodeError

from . import profile_pb
from .config import DEFAULT_FREQUENCY_HZ, DEFAULT_OUTPUT, ConvertConfig
from .errors import SerializationError
from .folded import Frame, read_frames
from .registry import FunctionRegistry
from .samples import NANOS_PER_SECOND, build_samples
from .strings import COUNT, CPU, NANOSECONDS, SAMPLES, StringTable


def assemble_profile(frames: List[Frame],
                     frequency_hz: int = DEFAULT_FREQUENCY_HZ):
    """Build the pprof Profile message for the decoded frames."""
    strings = StringTable.from_frames(frames)
    registry = FunctionRegistry(strings)
    samples = build_samples(frames, registry, frequency_hz)

    try:
        samples_value = profile_pb.ValueType(
            type=strings.index(SAMPLES), unit=strings.index(COUNT))
        time_value = profile_pb.ValueType(
            type=strings.index(CPU), unit=strings.index(NANOSECONDS))
        return profile_pb.Profile(
            sample_type=[samples_value, time_value],
            sample=[
                profile_pb.Sample(location_id=s.location_ids, value=s.values)
                for s in samples
            ],
            string_table=strings.strings,
            function=[
                profile_pb.Function(
                    id=f.id,
                    name=f.name,
                    system_name=f.system_name,
                    filename=f.filename,
                )
                for f in registry.functions
            ],
            location=[
                profile_pb.Location(
                    id=loc.id,
                    line=[profile_pb.Line(function_id=ln.function_id, line=ln.line)
                          for ln in loc.lines],
                )
                for loc in registry.locations
            ],
            period_type=time_value,
            period=NANOS_PER_SECOND // frequency_hz,
        )
    except (ValueError, OverflowError, TypeError) as e:
        # int64 fields reject cycle counts and durations past 2**63 - 1
        raise SerializationError(f"cannot encode profile: {e}") from e


def serialize_profile(profile, compress: bool = False) -> bytes:
    try:
        data = profile.SerializeToString()
    except EncodeError as e:
        raise SerializationError(f"cannot encode profile: {e}") from e
    if compress:
        data = gzip.compress(data)
    return data


def write_profile(profile, path: str = DEFAULT_OUTPUT,
                  compress: bool = False) -> int:
    """Serialize the profile and write it to path, returning the byte count.

    The bytes go to a temporary file next to path which then replaces it, so
    a failed write never leaves a truncated profile behind.
    """
    data = serialize_profile(profile, compress=compress)
    fd, tmp_path = tempfile.mkstemp(
        dir=os.path.dirname(os.path.abspath(path)), suffix=".tmp")
    try:
        with os.fdopen(fd, "wb") as f:
            f.write(data)
        os.replace(tmp_path, path)
    except BaseException:
        os.unlink(tmp_path)
        raise
    return len(data)


def convert(frames: List[Frame], config: ConvertConfig):
    config.validate()
    return assemble_profile(frames, config.frequency_hz)


def convert_lines(lines: Iterable[str], config: ConvertConfig):
    return convert(read_frames(lines, skip_invalid=config.skip_invalid), config)
