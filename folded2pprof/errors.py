from typing import Optional


class ConversionError(Exception):
    """Base class for failures while converting folded stacks."""


class ParseError(ConversionError):
    """A folded stack line could not be decoded."""

    def __init__(self, message: str, line: Optional[str] = None,
                 lineno: Optional[int] = None):
        self.reason = message
        self.line = line
        self.lineno = lineno
        if lineno is not None:
            message = f"line {lineno}: {message}: {line!r}"
        elif line is not None:
            message = f"{message}: {line!r}"
        super().__init__(message)


class SerializationError(ConversionError):
    """The assembled profile could not be encoded."""
