# solver/orientation.py: per-tile rotation / flip cycling
from typing import Iterator, List, Tuple

from models import Side, TilePlacement, TileSpec

MAX_ROTATION = 3


def rotate_placement(t: TilePlacement) -> None:
    # clockwise: side i takes what was on side i-1
    t.sides.insert(0, t.sides.pop())
    t.rotation = (t.rotation + 1) % 4


def flip_placement(t: TilePlacement) -> None:
    # swap 0<->3 and 1<->2; the male pair trades edges
    t.sides.reverse()
    t.face_up = not t.face_up


def rotate(state, pos: int) -> None:
    rotate_placement(state.tiles[pos])


def flip(state, pos: int) -> None:
    flip_placement(state.tiles[pos])


def nudgeable(state, pos: int, use_flipped: bool = False) -> bool:
    """True while an untried orientation remains for the tile at ``pos``."""
    t = state.tiles[pos]
    if t.rotation < MAX_ROTATION:
        return True
    return bool(use_flipped and t.face_up)


def nudge(state, pos: int, use_flipped: bool = False) -> bool:
    """Advance the tile at ``pos`` to its next orientation.

    Face-up rotations 0..3 come first; with ``use_flipped`` the tile is then
    reset and turned over, and rotations 0..3 repeat face-down. Returns False
    without touching the tile once every orientation has been tried.
    """
    if not nudgeable(state, pos, use_flipped):
        return False
    t = state.tiles[pos]
    if t.rotation < MAX_ROTATION:
        rotate_placement(t)
    else:
        state.reset(pos)
        flip_placement(t)
    return True


def orientations(use_flipped: bool = False) -> List[Tuple[int, bool]]:
    """(rotation, face_up) pairs in the order :func:`nudge` visits them."""
    faces = (True, False) if use_flipped else (True,)
    return [(r, face) for face in faces for r in range(MAX_ROTATION + 1)]


def oriented_sides(spec: TileSpec, rotation: int, face_up: bool = True) -> Tuple[Side, ...]:
    t = TilePlacement.from_spec(spec)
    if not face_up:
        flip_placement(t)
    for _ in range(rotation % 4):
        rotate_placement(t)
    return tuple(t.sides)


def iter_oriented(spec: TileSpec, use_flipped: bool = False) -> Iterator[Tuple[int, bool, Tuple[Side, ...]]]:
    for rotation, face_up in orientations(use_flipped):
        yield rotation, face_up, oriented_sides(spec, rotation, face_up)
