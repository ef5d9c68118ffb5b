"""Convert folded callstack cycle samples into pprof profiles."""

from .config import DEFAULT_FREQUENCY_HZ, DEFAULT_OUTPUT, ConvertConfig
from .errors import ConversionError, ParseError, SerializationError
from .folded import Frame, Symbol, parse_folded_line, read_frames
from .profile import (assemble_profile, convert, convert_lines,
                      serialize_profile, write_profile)

__version__ = "0.1.0"
