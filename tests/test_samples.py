from folded2pprof.registry import FunctionRegistry
from folded2pprof.samples import build_samples, cycles_to_nanoseconds
from folded2pprof.strings import StringTable


def test_cycles_to_nanoseconds_default_is_identity():
    assert cycles_to_nanoseconds(12345) == 12345


def test_cycles_to_nanoseconds_truncates():
    assert cycles_to_nanoseconds(3, 2_000_000_000) == 1
    assert cycles_to_nanoseconds(1, 3) == 333_333_333
    assert cycles_to_nanoseconds(7, 100_000_000) == 70


def test_one_sample_per_frame_without_merging(frames_from):
    frames = frames_from("main; foo 5", "main; foo 5", "main; bar 2")
    registry = FunctionRegistry(StringTable.from_frames(frames))
    samples = build_samples(frames, registry)
    assert len(samples) == 3
    assert samples[0].location_ids == (1, 2)   # foo, main
    assert samples[0] == samples[1]
    assert samples[2].location_ids == (3, 2)
    assert samples[2].values == (2, 2)


def test_values_use_frequency(frames_from):
    frames = frames_from("main 10")
    registry = FunctionRegistry(StringTable.from_frames(frames))
    sample, = build_samples(frames, registry, frequency_hz=100_000_000)
    assert sample.values == (10, 100)
