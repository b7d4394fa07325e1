"""
Tile representation.
A tile has a fixed identity and a mutable position, value and owner.
"""

from dataclasses import dataclass
from typing import Any


Cell = tuple[int, int]


@dataclass
class Tile:
    """A single numbered tile on the grid."""
    tile_id: int  # Unique within its grid (see Grid.generate_tile_id)
    x: int
    y: int
    value: int  # Power of two, >= 2
    owner: int  # Player index whose score this tile counts toward
    # Position at the start of the current pass (None until first saved)
    previous_position: Cell | None = None

    @property
    def position(self) -> Cell:
        return (self.x, self.y)

    def save_position(self) -> None:
        self.previous_position = (self.x, self.y)

    def update_position(self, cell: Cell) -> None:
        self.x, self.y = cell

    def has_moved(self) -> bool:
        """True if the tile is no longer where it was at the start of the pass."""
        return self.previous_position is not None and self.previous_position != self.position

    def to_dict(self) -> dict[str, Any]:
        return {"value": self.value, "owner": self.owner}

    @classmethod
    def from_dict(cls, tile_id: int, cell: Cell, data: dict[str, Any]) -> "Tile":
        if not isinstance(data, dict):
            raise ValueError(f"Tile data must be a dict, got {type(data).__name__}")
        if "value" not in data or "owner" not in data:
            raise ValueError(f"Tile data missing value/owner: {data!r}")
        value = data["value"]
        owner = data["owner"]
        for name, field_value in (("value", value), ("owner", owner)):
            if isinstance(field_value, bool) or not isinstance(field_value, int):
                raise ValueError(f"Tile {name} must be an integer, got {field_value!r}")
        if value < 2 or value & (value - 1):
            raise ValueError(f"Tile value must be a power of two >= 2, got {value}")
        if owner < 0:
            raise ValueError(f"Tile owner must be a player index, got {owner}")
        return cls(tile_id=tile_id, x=cell[0], y=cell[1], value=value, owner=owner)
