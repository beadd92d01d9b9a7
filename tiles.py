# tiles.py: tile specification table and tolerant table parser
from __future__ import annotations
import re
from typing import Any, Iterable, List, Optional, Sequence, Tuple

from models import Connector, Gender, Side, TileSpec, TILE_COUNT, SIDE_COUNT

M, F = Gender.MALE, Gender.FEMALE
ARROW_IN, ARROW_OUT = Connector.ARROW_IN, Connector.ARROW_OUT
CROSS, ROUND = Connector.CROSS, Connector.ROUND

# The physical set: side 0 is the top edge, sides run clockwise.
# Sides 0 and 3 carry the male connectors, sides 1 and 2 the female ones.
DEFAULT_TILE_TABLE: Tuple[Tuple[Tuple[Connector, Gender], ...], ...] = (
    ((ROUND, M),     (ARROW_OUT, F), (ROUND, F),     (ROUND, M)),      # 0
    ((ARROW_IN, M),  (CROSS, F),     (ARROW_OUT, F), (ARROW_IN, M)),   # 1
    ((ARROW_IN, M),  (CROSS, F),     (ROUND, F),     (ARROW_IN, M)),   # 2
    ((ROUND, M),     (ARROW_OUT, F), (ARROW_IN, F),  (ARROW_IN, M)),   # 3
    ((ROUND, M),     (ARROW_IN, F),  (CROSS, F),     (ARROW_IN, M)),   # 4
    ((ROUND, M),     (CROSS, F),     (ROUND, F),     (ARROW_IN, M)),   # 5
    ((ARROW_IN, M),  (ROUND, F),     (ARROW_OUT, F), (ARROW_OUT, M)),  # 6
    ((ARROW_OUT, M), (ARROW_IN, F),  (ROUND, F),     (ARROW_OUT, M)),  # 7
    ((CROSS, M),     (ARROW_IN, F),  (CROSS, F),     (ARROW_OUT, M)),  # 8
    ((CROSS, M),     (ROUND, F),     (ARROW_OUT, F), (ARROW_OUT, M)),  # 9
    ((ARROW_IN, M),  (ARROW_IN, F),  (ARROW_OUT, F), (CROSS, M)),      # 10
    ((ROUND, M),     (ARROW_OUT, F), (ARROW_OUT, F), (CROSS, M)),      # 11
    ((ROUND, M),     (ROUND, F),     (ARROW_IN, F),  (CROSS, M)),      # 12
    ((ROUND, M),     (ROUND, F),     (CROSS, F),     (CROSS, M)),      # 13
    ((ARROW_OUT, M), (ARROW_OUT, F), (ROUND, F),     (ROUND, M)),      # 14
    ((ARROW_OUT, M), (CROSS, F),     (ROUND, F),     (ROUND, M)),      # 15
)

# Gender every side must carry in canonical (untransformed) order.
CANONICAL_GENDERS = (M, F, F, M)

_CONNECTOR_ALIASES = {
    "arrowin": ARROW_IN,
    "in": ARROW_IN,
    "arrowout": ARROW_OUT,
    "out": ARROW_OUT,
    "cross": CROSS,
    "round": ROUND,
}
_GENDER_ALIASES = {
    "m": M,
    "male": M,
    "f": F,
    "female": F,
}
_TOKEN_SPLIT_RE = re.compile(r"[\s:/,|]+")


def _norm(token: Any) -> str:
    return re.sub(r"[\s_\-]+", "", str(token)).lower()


def _as_connector(value: Any) -> Connector:
    if isinstance(value, Connector):
        return value
    if isinstance(value, int) and not isinstance(value, bool):
        return Connector(value)
    try:
        return _CONNECTOR_ALIASES[_norm(value)]
    except KeyError:
        raise ValueError(f"unknown connector {value!r}") from None


def _as_gender(value: Any) -> Gender:
    if isinstance(value, Gender):
        return value
    if isinstance(value, int) and not isinstance(value, bool):
        return Gender(value)
    try:
        return _GENDER_ALIASES[_norm(value)]
    except KeyError:
        raise ValueError(f"unknown gender {value!r}") from None


def _as_side(item: Any) -> Side:
    if isinstance(item, Side):
        return item
    if isinstance(item, dict):
        return Side(_as_connector(item.get("connector")), _as_gender(item.get("gender")))
    if isinstance(item, str):
        parts = [p for p in _TOKEN_SPLIT_RE.split(item.strip()) if p]
        if len(parts) != 2:
            raise ValueError(f"side token {item!r} must read '<connector>:<gender>'")
        return Side(_as_connector(parts[0]), _as_gender(parts[1]))
    if isinstance(item, (list, tuple)) and len(item) == 2:
        return Side(_as_connector(item[0]), _as_gender(item[1]))
    raise ValueError(f"not a side-like value: {item!r}")


def build_tile_specs(rows: Sequence[Iterable[Any]]) -> Tuple[TileSpec, ...]:
    """Build the immutable spec table; raise ``ValueError`` on any malformed row."""
    rows = list(rows)
    if len(rows) != TILE_COUNT:
        raise ValueError(f"expected {TILE_COUNT} tiles, got {len(rows)}")

    specs: List[TileSpec] = []
    for tile_id, row in enumerate(rows):
        sides = tuple(_as_side(item) for item in row)
        if len(sides) != SIDE_COUNT:
            raise ValueError(f"tile {tile_id}: expected {SIDE_COUNT} sides, got {len(sides)}")
        for idx, (side, want) in enumerate(zip(sides, CANONICAL_GENDERS)):
            if side.gender is not want:
                raise ValueError(
                    f"tile {tile_id}: side {idx} must be {want.label}, got {side.gender.label}"
                )
        specs.append(TileSpec(tile_id, sides))
    return tuple(specs)


def default_tile_specs() -> Tuple[TileSpec, ...]:
    return build_tile_specs(DEFAULT_TILE_TABLE)


def spec_for(specs: Sequence[TileSpec], identity: int) -> TileSpec:
    """Return the spec for ``identity``; an identity outside 0..15 is fatal."""
    if not isinstance(identity, int) or not 0 <= identity < TILE_COUNT:
        raise ValueError(f"illegal tile identity {identity!r}; expected 0..{TILE_COUNT - 1}")
    return specs[identity]


def parse_tile_table(payload: Any) -> Tuple[Optional[Tuple[TileSpec, ...]], Optional[str]]:
    """
    Return (specs, error_message_or_None).
    Accepts a bare list of 16 rows or a mapping with a "tiles" list; each row
    holds 4 sides written as "Round:M" tokens, [connector, gender] pairs or
    {"connector": ..., "gender": ...} dicts.
    """
    if not payload:
        return None, "nothing parsed from request"

    rows = payload
    if isinstance(payload, dict):
        rows = payload.get("tiles")
        if not rows:
            return None, "no 'tiles' list in payload"

    if isinstance(rows, (str, bytes)) or not hasattr(rows, "__iter__"):
        return None, "tile table must be a list of rows"

    try:
        return build_tile_specs(list(rows)), None
    except (TypeError, ValueError) as e:
        return None, f"Bad tile table: {e}"


def side_token(side: Side) -> str:
    return f"{side.connector.label}:{side.gender.label[0]}"


def table_rows(specs: Sequence[TileSpec]) -> List[List[str]]:
    """Inverse of :func:`parse_tile_table` using the compact token form."""
    return [[side_token(side) for side in spec.sides] for spec in specs]
