# solver/state.py
from typing import List, Optional, Sequence, Tuple

from models import Solution, TilePlacement, TileSpec, TILE_COUNT
from tiles import default_tile_specs, spec_for


class SearchState:
    """Tile records indexed by grid position, owned by one search.

    ``tiles[p]`` carries both the identity placed at position ``p`` and its
    current transform, so the placement order can never drift from the
    instances it describes.
    """

    def __init__(self, specs: Optional[Sequence[TileSpec]] = None):
        self.specs: Tuple[TileSpec, ...] = tuple(specs) if specs is not None else default_tile_specs()
        if len(self.specs) != TILE_COUNT:
            raise ValueError(f"expected {TILE_COUNT} tile specs, got {len(self.specs)}")
        for index, spec in enumerate(self.specs):
            if spec.tile_id != index:
                raise ValueError(f"tile spec at index {index} carries id {spec.tile_id}")
        self.tiles: List[TilePlacement] = [
            TilePlacement.from_spec(spec_for(self.specs, i)) for i in range(TILE_COUNT)
        ]

    @property
    def order(self) -> Tuple[int, ...]:
        return tuple(t.tile_id for t in self.tiles)

    def reset(self, pos: int) -> None:
        """Restore the tile at ``pos`` to its untransformed, face-up spec."""
        t = self.tiles[pos]
        spec = spec_for(self.specs, t.tile_id)
        t.sides[:] = spec.sides
        t.rotation = 0
        t.face_up = True

    def swap(self, x: int, y: int) -> None:
        tiles = self.tiles
        tiles[x], tiles[y] = tiles[y], tiles[x]

    def snapshot(self, index: int) -> Solution:
        return Solution(
            index=index,
            order=self.order,
            tiles=tuple(t.freeze(pos) for pos, t in enumerate(self.tiles)),
        )

    def __repr__(self) -> str:
        return f"SearchState(order={list(self.order)})"
