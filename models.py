from dataclasses import dataclass, field
from enum import Enum
from typing import List, Tuple

TILE_COUNT = 16
SIDE_COUNT = 4


class Connector(Enum):
    ARROW_IN = 0
    ARROW_OUT = 1
    CROSS = 2
    ROUND = 3

    @property
    def label(self) -> str:
        return {
            Connector.ARROW_IN: "ArrowIn",
            Connector.ARROW_OUT: "ArrowOut",
            Connector.CROSS: "Cross",
            Connector.ROUND: "Round",
        }[self]


class Gender(Enum):
    FEMALE = 0
    MALE = 1

    @property
    def label(self) -> str:
        return "Male" if self is Gender.MALE else "Female"


@dataclass(frozen=True)
class Side:
    connector: Connector
    gender: Gender

    def fits(self, other: "Side") -> bool:
        """Same connector profile, opposite gender."""
        return self.connector is other.connector and self.gender is not other.gender

    def key(self) -> Tuple[int, int]:
        return (self.connector.value, self.gender.value)


@dataclass(frozen=True)
class TileSpec:
    tile_id: int
    sides: Tuple[Side, ...]


@dataclass
class TilePlacement:
    """The tile occupying one grid position, in its current transform."""

    tile_id: int
    sides: List[Side] = field(default_factory=list)
    rotation: int = 0
    face_up: bool = True

    @classmethod
    def from_spec(cls, spec: TileSpec) -> "TilePlacement":
        return cls(spec.tile_id, list(spec.sides))

    def freeze(self, position: int) -> "PlacedTile":
        return PlacedTile(
            position=position,
            tile_id=self.tile_id,
            rotation=self.rotation,
            face_up=self.face_up,
            sides=tuple(self.sides),
        )


@dataclass(frozen=True)
class PlacedTile:
    position: int
    tile_id: int
    rotation: int
    face_up: bool
    sides: Tuple[Side, ...]


@dataclass(frozen=True)
class Solution:
    index: int
    order: Tuple[int, ...]
    tiles: Tuple[PlacedTile, ...]

    def sides_at(self, position: int) -> Tuple[Side, ...]:
        return self.tiles[position].sides
