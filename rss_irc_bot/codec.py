"""IRC line parsing and formatting for RSS IRC Bot."""

from dataclasses import dataclass, field

# Characters stripped from both ends of a raw line before parsing
TRIM_CHARS = " \r\n"


class LineParseError(ValueError):
    """Raised when a raw protocol line cannot be parsed."""


class MalformedLineError(LineParseError):
    """Raised when a line is empty after trimming."""


class MissingCommandError(LineParseError):
    """Raised when a line carries no command token."""


@dataclass
class Line:
    """A single IRC protocol message.

    An absent prefix or suffix is represented by the empty string.
    """

    command: str
    arguments: list[str] = field(default_factory=list)
    prefix: str = ""
    suffix: str = ""

    def encode(self) -> bytes:
        """Return the wire bytes for this line, CRLF included."""
        return format_line(self).encode("utf-8")


def parse_line(raw: str) -> Line:
    """Parse one line of protocol text.

    Rules are applied in a fixed order: prefix detection, then the first
    " :" trailing marker, then the space-separated command and arguments.

    Args:
        raw: Raw line, possibly with trailing CRLF and surrounding spaces

    Returns:
        Parsed Line with a non-empty command

    Raises:
        MalformedLineError: If the line is empty after trimming
        MissingCommandError: If no command token is present
    """
    line = raw.strip(TRIM_CHARS)
    if not line:
        raise MalformedLineError("Line is 0 characters long. This is too short")

    prefix = ""
    prefix_end = -1
    if line[0] == ":":
        space = line.find(" ")
        if space != -1:
            prefix_end = space
            prefix = line[1:space]

    suffix = ""
    trailing_start = len(line)
    marker = line.find(" :")
    if marker != -1:
        trailing_start = marker
        suffix = line[marker + 2 :]

    params = line[prefix_end + 1 : trailing_start].split(" ")
    if not params[0]:
        raise MissingCommandError(f"There is no command in line: {line!r}")

    return Line(command=params[0], arguments=params[1:], prefix=prefix, suffix=suffix)


def format_line(line: Line) -> str:
    """Serialize a Line to wire text terminated by CRLF.

    Content is not validated; callers must not embed CR or LF.
    """
    text = ""
    if line.prefix:
        text = f":{line.prefix} "

    text += f"{line.command} "

    if line.arguments:
        text += " ".join(line.arguments) + " "

    if line.suffix:
        text += f":{line.suffix}"

    return text + "\r\n"
