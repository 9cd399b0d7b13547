from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Tuple


Coordinate = Tuple[int, int]


class Player(str, Enum):
    WHITE = "white"
    BLACK = "black"

    @property
    def opponent(self) -> "Player":
        return Player.BLACK if self is Player.WHITE else Player.WHITE


class Orientation(str, Enum):
    VERTICAL = "vertical"
    HORIZONTAL = "horizontal"


class Part(str, Enum):
    ORIGIN = "origin"
    EXTENSION = "extension"


ORIENTATIONS = (Orientation.VERTICAL, Orientation.HORIZONTAL)

# Offset of the extension cell relative to the anchor.
EXTENSION_OFFSET: Dict[Orientation, Coordinate] = {
    Orientation.VERTICAL: (0, 1),
    Orientation.HORIZONTAL: (1, 0),
}

# At least one of these must be occupied for a block to touch the structure.
CONNECT_OFFSETS: Dict[Orientation, Tuple[Coordinate, ...]] = {
    Orientation.VERTICAL: ((-1, 0), (1, 0), (0, -1), (-1, 1), (1, 1), (0, 2)),
    Orientation.HORIZONTAL: ((-1, 0), (0, -1), (0, 1), (1, -1), (1, 1), (2, 0)),
}

# Cells touching the short edges of a block.
SHORT_SIDE_OFFSETS: Dict[Orientation, Tuple[Coordinate, ...]] = {
    Orientation.VERTICAL: ((0, -1),),
    Orientation.HORIZONTAL: ((-1, 0), (2, 0)),
}


@dataclass(frozen=True)
class Cell:
    owner: Player
    orientation: Orientation
    block_id: str
    part: Part


@dataclass(frozen=True)
class Move:
    x: int
    y: int
    orientation: Orientation
    owner: Player

    def cells(self) -> Tuple[Coordinate, Coordinate]:
        dx, dy = EXTENSION_OFFSET[self.orientation]
        return (self.x, self.y), (self.x + dx, self.y + dy)

    def columns(self) -> Tuple[int, int]:
        """Leftmost and rightmost column covered by the block."""
        if self.orientation is Orientation.HORIZONTAL:
            return self.x, self.x + 1
        return self.x, self.x

    def to_block(self, block_id: Optional[str] = None) -> "Block":
        if block_id is None:
            block_id = f"{self.owner.value}:{self.x}:{self.y}:{self.orientation.value}"
        return Block(block_id, self.x, self.y, self.orientation, self.owner)


@dataclass(frozen=True)
class Block:
    """A placed block: a move plus the id shared by its two cells."""

    id: str
    x: int
    y: int
    orientation: Orientation
    owner: Player

    def cells(self) -> Tuple[Coordinate, Coordinate]:
        return self.as_move().cells()

    def columns(self) -> Tuple[int, int]:
        return self.as_move().columns()

    def as_move(self) -> Move:
        return Move(self.x, self.y, self.orientation, self.owner)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "x": self.x,
            "y": self.y,
            "orientation": self.orientation.value,
            "owner": self.owner.value,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Block":
        owner = data["owner"] if "owner" in data else data["player"]
        return cls(
            id=str(data["id"]),
            x=int(data["x"]),
            y=int(data["y"]),
            orientation=Orientation(data["orientation"]),
            owner=Player(owner),
        )
