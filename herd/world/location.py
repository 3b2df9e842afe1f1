# herd/world/location.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Tuple

import numpy as np
import structlog

log = structlog.get_logger()

Tile = Tuple[int, int]  # (x, y)


# --- Placed objects ---------------------------------------------------------


@dataclass
class Fence:
    """A fence segment; gates can be swung open."""

    is_gate: bool = False
    gate_open: bool = False

    @property
    def blocks_movement(self) -> bool:
        return not (self.is_gate and self.gate_open)

    def toggle_gate(self) -> bool:
        """Flip an open gate shut or a shut gate open; returns the new state."""
        if not self.is_gate:
            raise ValueError("Only gates can be toggled")
        self.gate_open = not self.gate_open
        return self.gate_open


@dataclass
class BigCraftable:
    name: str = "chest"
    blocks_movement: bool = True


WorldObject = Fence | BigCraftable


# --- Terrain features ---------------------------------------------------------


@dataclass
class Tree:
    kind: str = "oak"
    blocks_movement: bool = True


@dataclass
class GrassPatch:
    """A grazable patch.  ``amount`` bites remain before the patch is gone."""

    kind: str = "grass"
    amount: int = 4
    blocks_movement: bool = False


TerrainFeature = Tree | GrassPatch


# --- Buildings ---------------------------------------------------------------


@dataclass(eq=False)
class Building:
    """An animal house placed on the farm.

    ``animal_door`` is relative to the building's top-left tile.  The door tile
    itself belongs to the footprint; animals enter and leave through the tile
    directly below it.
    """

    building_type: str
    tile_x: int
    tile_y: int
    tiles_wide: int
    tiles_high: int
    animal_door: Tile = (1, 2)
    door_open: bool = True
    interior: "Location | None" = None
    parent_location: "Location | None" = None

    def door_tile(self) -> Tile:
        return self.tile_x + self.animal_door[0], self.tile_y + self.animal_door[1]

    def approach_tile(self) -> Tile:
        dx, dy = self.door_tile()
        return dx, dy + 1

    def footprint_contains(self, tile: Tile) -> bool:
        x, y = tile
        return (
            self.tile_x <= x < self.tile_x + self.tiles_wide
            and self.tile_y <= y < self.tile_y + self.tiles_high
        )


# --- Locations ---------------------------------------------------------------


class Location:
    def __init__(self, name: str, width: int, height: int, outdoors: bool = True):
        if width <= 0 or height <= 0:
            log.error("Invalid location dimensions", name=name, width=width, height=height)
            raise ValueError("Location width and height must be positive integers.")
        self.name = name
        self._width = width
        self._height = height
        self.outdoors = outdoors
        # Base terrain passability; objects, features and buildings are layered on top.
        self.passable: np.ndarray = np.ones((height, width), dtype=bool, order="C")
        self.objects: Dict[Tile, WorldObject] = {}
        self.terrain_features: Dict[Tile, TerrainFeature] = {}
        self.buildings: List[Building] = []
        # Interiors point back at the outdoor location they belong to.
        self.parent: Location | None = None
        self.entry_tile: Tile | None = None

    def __repr__(self) -> str:
        return f"Location({self.name!r}, {self._width}x{self._height})"

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    def is_tile_on_map(self, tile: Tile) -> bool:
        x, y = tile
        return 0 <= x < self._width and 0 <= y < self._height

    def is_tile_location_open(self, tile: Tile) -> bool:
        """Base terrain check only (water, cliffs, walls painted into ``passable``)."""
        if not self.is_tile_on_map(tile):
            return False
        x, y = tile
        return bool(self.passable[y, x])

    def set_blocked(self, tile: Tile, blocked: bool = True) -> None:
        x, y = tile
        self.passable[y, x] = not blocked

    def building_at(self, tile: Tile) -> Building | None:
        for building in self.buildings:
            if building.footprint_contains(tile):
                return building
        return None

    def is_walkable(self, tile: Tile) -> bool:
        """Whether an animal can step onto ``tile`` right now."""
        if not self.is_tile_location_open(tile):
            return False
        if self.building_at(tile) is not None:
            return False
        obj = self.objects.get(tile)
        if obj is not None and obj.blocks_movement:
            return False
        feature = self.terrain_features.get(tile)
        if feature is not None and feature.blocks_movement:
            return False
        return True

    def walkable_mask(self) -> np.ndarray:
        """Boolean ``(height, width)`` grid combining every walkability layer."""
        mask = self.passable.copy()
        for building in self.buildings:
            y0 = max(0, building.tile_y)
            x0 = max(0, building.tile_x)
            mask[
                y0 : building.tile_y + building.tiles_high,
                x0 : building.tile_x + building.tiles_wide,
            ] = False
        for layer in (self.objects, self.terrain_features):
            for (x, y), thing in layer.items():
                if thing.blocks_movement and self.is_tile_on_map((x, y)):
                    mask[y, x] = False
        return mask

    def add_building(self, building: Building) -> Building:
        self.buildings.append(building)
        building.parent_location = self
        if building.interior is not None:
            building.interior.parent = self
        log.debug(
            "Building placed",
            location=self.name,
            building_type=building.building_type,
            origin=(building.tile_x, building.tile_y),
        )
        return building

    def remove_building(self, building: Building) -> None:
        if building in self.buildings:
            self.buildings.remove(building)
            building.parent_location = None


class Farm(Location):
    """The outdoor farm: buildings plus the shared hay pool."""

    def __init__(self, name: str, width: int, height: int, pieces_of_hay: int = 0):
        super().__init__(name, width, height, outdoors=True)
        if pieces_of_hay < 0:
            raise ValueError("pieces_of_hay must not be negative")
        self.pieces_of_hay = pieces_of_hay


def make_interior(building: Building, width: int = 8, height: int = 6) -> Location:
    """Create an indoor location for ``building`` with an entry tile by the door."""
    interior = Location(f"{building.building_type}@{building.tile_x},{building.tile_y}", width, height, outdoors=False)
    interior.entry_tile = (min(building.animal_door[0], width - 1), height - 1)
    building.interior = interior
    return interior


__all__ = [
    "BigCraftable",
    "Building",
    "Farm",
    "Fence",
    "GrassPatch",
    "Location",
    "TerrainFeature",
    "Tile",
    "Tree",
    "WorldObject",
    "make_interior",
]
