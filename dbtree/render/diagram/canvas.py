"""Fixed-size character canvas for ASCII diagrams."""

from __future__ import annotations

BLANK = " "

# Characters produced by box drawing and arrow routing.
ROUTING_CHARS = frozenset("─│┌┐└┘├┤┬┴┼◄►▲▼")


class Canvas:
    """A width x height grid of single characters stored row-major in one list.

    Writes outside the grid are ignored and reads outside it return a blank,
    so callers never have to clip coordinates themselves.
    """

    def __init__(self, width: int, height: int):
        if width < 0 or height < 0:
            raise ValueError(f"canvas size must be non-negative, got {width}x{height}")
        self.width = width
        self.height = height
        self._cells = [BLANK] * (width * height)

    def _index(self, x: int, y: int) -> int | None:
        if 0 <= x < self.width and 0 <= y < self.height:
            return y * self.width + x
        return None

    def get(self, x: int, y: int) -> str:
        i = self._index(x, y)
        return BLANK if i is None else self._cells[i]

    def put(self, x: int, y: int, char: str) -> None:
        """Write ``char`` at (x, y) unconditionally."""
        i = self._index(x, y)
        if i is not None:
            self._cells[i] = char

    def put_line(self, x: int, y: int, char: str) -> None:
        """Write a plain line character unless the cell already holds a routing character."""
        if self.get(x, y) not in ROUTING_CHARS:
            self.put(x, y, char)

    def write(self, x: int, y: int, text: str) -> None:
        for offset, char in enumerate(text):
            self.put(x + offset, y, char)

    def hline(self, x0: int, x1: int, y: int, char: str = "─") -> None:
        for x in range(min(x0, x1), max(x0, x1) + 1):
            self.put_line(x, y, char)

    def vline(self, x: int, y0: int, y1: int, char: str = "│") -> None:
        for y in range(min(y0, y1), max(y0, y1) + 1):
            self.put_line(x, y, char)

    def rows(self) -> list[str]:
        return [
            "".join(self._cells[y * self.width : (y + 1) * self.width]).rstrip()
            for y in range(self.height)
        ]

    def __str__(self) -> str:
        return "\n".join(self.rows())
