"""World query facade used by feasibility checks."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:  # pragma: no cover - type checking only
    from herd.world.location import Location, Tile


class TileService:
    def is_clear_tile(self, location: "Location | None", tile: "Tile") -> bool:
        """Whether an animal may land on ``tile`` in ``location``.

        True iff the tile is on the map, outside every building footprint
        (door tile included), open under the base terrain grid, and free of
        terrain features and placed objects.  Pure query.
        """
        if location is None or not location.is_tile_on_map(tile):
            return False
        if location.building_at(tile) is not None:
            return False
        if not location.is_tile_location_open(tile):
            return False
        if tile in location.terrain_features:
            return False
        if tile in location.objects:
            return False
        return True
