DEFAULT_FREQUENCY_HZ = 1_000_000_000
DEFAULT_OUTPUT = "output.pprof"


class ConvertConfig:
    """Configuration for a folded stack to pprof conversion."""

    def __init__(self):
        # 1 GHz means one cycle takes one nanosecond
        self.frequency_hz: int = DEFAULT_FREQUENCY_HZ
        self.output: str = DEFAULT_OUTPUT
        self.compress: bool = False
        self.skip_invalid: bool = False

    def validate(self) -> None:
        if int(self.frequency_hz) <= 0:
            raise ValueError(
                f"frequency must be a positive number of Hz, got {self.frequency_hz}")
