from __future__ import annotations

from typing import Dict, Iterable, Iterator, Optional, Tuple, Union

import numpy as np

from .pieces import Block, Cell, Coordinate, Move, Part, Player


GRID_SIZE = 9
WIN_LENGTH = 5
MAX_BLOCKS_PER_PLAYER = 20


class Board:
    """Sparse, immutable snapshot of the structure.

    Cells are keyed by ``(x, y)`` tuples and kept in placement order, which is
    the order the win scan visits them. The x axis is unbounded; y runs from
    the ground (0) up to ``GRID_SIZE - 1``. ``place`` never mutates the board
    it is called on.
    """

    __slots__ = ("_cells", "_min_x", "_max_x", "_block_counts")

    def __init__(self) -> None:
        self._cells: Dict[Coordinate, Cell] = {}
        self._min_x: Optional[int] = None
        self._max_x: Optional[int] = None
        self._block_counts: Dict[Player, int] = {Player.WHITE: 0, Player.BLACK: 0}

    @classmethod
    def from_blocks(cls, blocks: Iterable[Block]) -> "Board":
        board = cls()
        for block in blocks:
            board._put(block)
        return board

    def copy(self) -> "Board":
        new_board = Board()
        new_board._cells = dict(self._cells)
        new_board._min_x = self._min_x
        new_board._max_x = self._max_x
        new_board._block_counts = dict(self._block_counts)
        return new_board

    def place(self, block: Union[Block, Move]) -> "Board":
        """Return a new board with ``block`` written into it."""
        new_board = self.copy()
        new_board._put(block.to_block() if isinstance(block, Move) else block)
        return new_board

    def _put(self, block: Block) -> None:
        origin, extension = block.cells()
        self._cells[origin] = Cell(block.owner, block.orientation, block.id, Part.ORIGIN)
        self._cells[extension] = Cell(block.owner, block.orientation, block.id, Part.EXTENSION)
        left, right = block.columns()
        self._min_x = left if self._min_x is None else min(self._min_x, left)
        self._max_x = right if self._max_x is None else max(self._max_x, right)
        self._block_counts[block.owner] += 1

    # ---- queries ----
    def get(self, x: int, y: int) -> Optional[Cell]:
        return self._cells.get((x, y))

    def is_occupied(self, x: int, y: int) -> bool:
        return (x, y) in self._cells

    def is_empty(self) -> bool:
        return not self._cells

    def height(self, x: int) -> int:
        """Resting height of column ``x``: contiguous cells counted from the ground."""
        y = 0
        while (x, y) in self._cells:
            y += 1
        return y

    def bounds(self) -> Tuple[int, int]:
        """Leftmost and rightmost occupied column, ``(0, 0)`` when empty."""
        if self._min_x is None or self._max_x is None:
            return 0, 0
        return self._min_x, self._max_x

    def block_count(self, owner: Player) -> int:
        return self._block_counts[owner]

    def items(self) -> Iterator[Tuple[Coordinate, Cell]]:
        return iter(self._cells.items())

    def cells_of(self, owner: Player) -> Iterator[Coordinate]:
        return (pos for pos, cell in self._cells.items() if cell.owner is owner)

    def to_array(self, origin_x: int, width: int, perspective: Player, height: int = GRID_SIZE) -> np.ndarray:
        """Dense ``(height, width)`` view starting at column ``origin_x``.

        Row index is y. ``perspective`` cells are +1, opponent cells -1.
        """
        arr = np.zeros((height, width), dtype=np.int8)
        for (x, y), cell in self._cells.items():
            col = x - origin_x
            if 0 <= col < width and 0 <= y < height:
                arr[y, col] = 1 if cell.owner is perspective else -1
        return arr

    def __len__(self) -> int:
        return len(self._cells)

    def __contains__(self, pos: object) -> bool:
        return pos in self._cells

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Board):
            return NotImplemented
        return self._cells == other._cells

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"Board(cells={len(self._cells)}, bounds={self.bounds()})"


def height(board: Board, x: int) -> int:
    return board.height(x)


def bounds(board: Board) -> Tuple[int, int]:
    return board.bounds()


def rebuild(history: Iterable[Union[Block, dict]]) -> Board:
    """Replay a block history, in order, into a fresh board."""
    return Board.from_blocks(b if isinstance(b, Block) else Block.from_dict(b) for b in history)


def format_board(board: Board, perspective: Player = Player.WHITE) -> str:
    """Text dump of the occupied window, top row first."""
    if board.is_empty():
        return "(empty)"
    min_x, max_x = board.bounds()
    arr = board.to_array(min_x, max_x - min_x + 1, perspective)
    symbols = {0: "·", 1: "W" if perspective is Player.WHITE else "B", -1: "B" if perspective is Player.WHITE else "W"}
    top = max(y for (_, y), _ in board.items()) + 1
    rows = []
    for y in range(top - 1, -1, -1):
        rows.append("".join(symbols[int(v)] for v in arr[y]))
    return "\n".join(rows)
