from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator, List, Optional, Tuple

Position = Tuple[int, int]
BoardSnapshot = Tuple[Tuple[Optional[str], ...], ...]


@dataclass(slots=True)
class Board:
    """Square grid of token names addressed by (column, row).

    ``cells`` is stored row-major (``cells[row][col]``); ``None`` marks an
    empty cell. Row 0 is the top of the board, gravity pulls toward the
    highest row index. Tokens carry no coordinates, so moving a token is an
    index exchange and storage cannot drift from position.
    """
    size: int
    cells: List[List[Optional[str]]] = field(default_factory=list)

    def __post_init__(self) -> None:
        if not self.cells:
            self.cells = [[None] * self.size for _ in range(self.size)]
        elif len(self.cells) != self.size or any(len(row) != self.size for row in self.cells):
            raise ValueError(f"Board cells must be {self.size}x{self.size}")

    def in_bounds(self, pos: Position) -> bool:
        col, row = pos
        return 0 <= col < self.size and 0 <= row < self.size

    def get(self, pos: Position) -> Optional[str]:
        col, row = pos
        return self.cells[row][col]

    def set(self, pos: Position, token: Optional[str]) -> None:
        col, row = pos
        self.cells[row][col] = token

    def swap(self, a: Position, b: Position) -> None:
        (ac, ar), (bc, br) = a, b
        self.cells[ar][ac], self.cells[br][bc] = self.cells[br][bc], self.cells[ar][ac]

    def positions(self) -> Iterator[Position]:
        """Yield every position in raster (row-major) order."""
        for row in range(self.size):
            for col in range(self.size):
                yield (col, row)

    def is_full(self) -> bool:
        return all(token is not None for row in self.cells for token in row)

    def load(self, layout) -> None:
        """Replace the whole grid with ``layout`` (rows of token names)."""
        rows = [list(row) for row in layout]
        if len(rows) != self.size or any(len(row) != self.size for row in rows):
            raise ValueError(f"Layout must be {self.size}x{self.size}")
        self.cells = rows

    def copy(self) -> Board:
        return Board(size=self.size, cells=[list(row) for row in self.cells])

    def snapshot(self) -> BoardSnapshot:
        return tuple(tuple(row) for row in self.cells)
