import math
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterator, List, Optional, Tuple

Point = Tuple[float, float]  # (x, y) in world units (pixels)

@dataclass(frozen=True)
class GridPosition:
    """Integer cell coordinate on the grid (not world coordinates)."""
    x: int
    y: int

    def adjacent(self) -> List["GridPosition"]:
        """The four 4-connected neighbours, no diagonals."""
        return [
            GridPosition(self.x + 1, self.y),
            GridPosition(self.x - 1, self.y),
            GridPosition(self.x, self.y + 1),
            GridPosition(self.x, self.y - 1),
        ]

    def distance_to(self, other: "GridPosition") -> int:
        """Manhattan distance to another position."""
        return abs(self.x - other.x) + abs(self.y - other.y)

    def is_adjacent(self, other: "GridPosition") -> bool:
        return self.distance_to(other) == 1

    def as_list(self) -> List[int]:
        return [self.x, self.y]

class TileType(Enum):
    """Terrain kind"""
    GRASS = "grass"        # Normal walkable terrain
    WATER = "water"        # Non-walkable
    MOUNTAIN = "mountain"  # Non-walkable

@dataclass(frozen=True)
class Tile:
    walkable: bool
    tile_type: TileType

    @classmethod
    def grass(cls) -> "Tile":
        return cls(walkable=True, tile_type=TileType.GRASS)

    @classmethod
    def water(cls) -> "Tile":
        return cls(walkable=False, tile_type=TileType.WATER)

    @classmethod
    def mountain(cls) -> "Tile":
        return cls(walkable=False, tile_type=TileType.MOUNTAIN)

class GridMap:
    """Grid dimensions, coordinate conversion and the tile registry."""

    def __init__(self, width: int, height: int, tile_size: float):
        self.width = width
        self.height = height
        self.tile_size = float(tile_size)
        self.tiles: Dict[GridPosition, Tile] = {}

    @classmethod
    def from_settings(cls, settings) -> "GridMap":
        return cls(settings.grid_width, settings.grid_height, settings.tile_size)

    def world_to_grid(self, point: Point) -> GridPosition:
        """Convert a world point to the grid cell containing it."""
        x = math.floor(point[0] / self.tile_size)
        y = math.floor(point[1] / self.tile_size)
        return GridPosition(int(x), int(y))

    def grid_to_world(self, pos: GridPosition) -> Point:
        """Convert a grid cell to the world point at its centre."""
        half = self.tile_size / 2.0
        return (pos.x * self.tile_size + half, pos.y * self.tile_size + half)

    def is_in_bounds(self, pos: GridPosition) -> bool:
        return 0 <= pos.x < self.width and 0 <= pos.y < self.height

    def positions(self) -> Iterator[GridPosition]:
        """Every in-bounds position, row by row."""
        for y in range(self.height):
            for x in range(self.width):
                yield GridPosition(x, y)

    def register_tile(self, pos: GridPosition, tile: Tile) -> None:
        self.tiles[pos] = tile

    def get_tile(self, pos: GridPosition) -> Optional[Tile]:
        return self.tiles.get(pos)

    def build(self) -> int:
        """Lay out a grass tile on every cell and return the tile count."""
        for pos in self.positions():
            self.register_tile(pos, Tile.grass())
        return len(self.tiles)
