"""Hard-wrap item bodies into fixed-width display lines."""

from typing import Iterator

TAB_WIDTH = 4
CONTROL_REPLACEMENT = "?"


def printable(text: str) -> str:
    """Replace control characters, which curses draws as multi-cell ``^X``."""
    return "".join(
        CONTROL_REPLACEMENT if ord(ch) < 32 or 127 <= ord(ch) < 160 else ch
        for ch in text
    )


def _source_lines(text: str) -> list[str]:
    if not text:
        return []
    lines = text.split("\n")
    # A trailing newline terminates the last line, it does not start a new one
    if lines[-1] == "":
        lines.pop()
    return [line.rstrip("\r") for line in lines]


class WrappedText:
    """Lazy, restartable sequence of display lines for one body.

    Tabs expand to four spaces and other control characters become ``?``.
    Lines longer than ``width`` are split into ``width``-sized chunks with
    no regard for word boundaries. Blank source lines are kept as a single
    empty display line.
    """

    def __init__(self, text: str, width: int):
        if width <= 0:
            raise ValueError(f"wrap width must be positive, got {width}")
        self.text = text or ""
        self.width = width

    def __iter__(self) -> Iterator[str]:
        for line in _source_lines(self.text):
            line = printable(line.replace("\t", " " * TAB_WIDTH))
            if not line:
                yield ""
                continue
            for start in range(0, len(line), self.width):
                yield line[start: start + self.width]

    def count(self) -> int:
        return sum(1 for _ in self)


def wrap_text(text: str, width: int) -> WrappedText:
    return WrappedText(text, width)
