"""
Shared fixtures for the Block Stack test suite.

Blocks are written as ``(x, y, "v" | "h", "w" | "b")`` tuples.
"""

from typing import Callable, List, Tuple

import pytest

from block_stack_rl.game import Block, Board, Orientation, Player, rebuild

Spec = Tuple[int, int, str, str]

_ORIENTATIONS = {"v": Orientation.VERTICAL, "h": Orientation.HORIZONTAL}
_PLAYERS = {"w": Player.WHITE, "b": Player.BLACK}


def make_blocks(*specs: Spec) -> List[Block]:
    return [
        Block(f"t{i}", x, y, _ORIENTATIONS[o], _PLAYERS[p])
        for i, (x, y, o, p) in enumerate(specs)
    ]


@pytest.fixture
def blocks_of() -> Callable[..., List[Block]]:
    return make_blocks


@pytest.fixture
def board_of() -> Callable[..., Board]:
    def build(*specs: Spec) -> Board:
        return rebuild(make_blocks(*specs))

    return build


@pytest.fixture
def stalemate_history() -> List[Block]:
    """Forty legal blocks, twenty per player, leaving no placement for anyone.

    Columns 0..8 hold four vertical blocks each with colours alternating up
    the column and across columns; row 8 is capped by four horizontal blocks
    over columns 0..7. Cell (8, 8) stays empty but nothing can land there.
    """
    specs: List[Spec] = []
    for x in range(9):
        for j in range(4):
            specs.append((x, 2 * j, "v", "w" if (x + j) % 2 == 0 else "b"))
    for k in range(4):
        specs.append((2 * k, 8, "h", "w" if k % 2 == 0 else "b"))
    return make_blocks(*specs)
