import pytest

from folded2pprof.folded import read_frames


@pytest.fixture
def frames_from():
    def build(*lines):
        return read_frames(lines)
    return build
