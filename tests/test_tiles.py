import pytest

from models import Connector, Gender
from tiles import (
    DEFAULT_TILE_TABLE,
    build_tile_specs,
    default_tile_specs,
    parse_tile_table,
    spec_for,
    table_rows,
)


def test_default_set_has_sixteen_four_sided_tiles():
    specs = default_tile_specs()
    assert len(specs) == 16
    assert [s.tile_id for s in specs] == list(range(16))
    assert all(len(s.sides) == 4 for s in specs)


def test_default_set_male_female_pattern():
    for spec in default_tile_specs():
        assert spec.sides[0].gender is Gender.MALE
        assert spec.sides[3].gender is Gender.MALE
        assert spec.sides[1].gender is Gender.FEMALE
        assert spec.sides[2].gender is Gender.FEMALE


def test_default_set_first_tile_matches_physical_piece():
    tile0 = default_tile_specs()[0]
    assert [s.connector for s in tile0.sides] == [
        Connector.ROUND, Connector.ARROW_OUT, Connector.ROUND, Connector.ROUND,
    ]


def test_spec_for_rejects_identity_outside_range():
    specs = default_tile_specs()
    assert spec_for(specs, 15).tile_id == 15
    with pytest.raises(ValueError):
        spec_for(specs, 16)
    with pytest.raises(ValueError):
        spec_for(specs, -1)


def test_build_rejects_wrong_tile_count():
    with pytest.raises(ValueError, match="expected 16 tiles"):
        build_tile_specs(DEFAULT_TILE_TABLE[:15])


def test_build_rejects_broken_gender_pattern():
    rows = [list(r) for r in DEFAULT_TILE_TABLE]
    rows[4][1] = (Connector.ARROW_IN, Gender.MALE)
    with pytest.raises(ValueError, match="tile 4: side 1 must be Female"):
        build_tile_specs(rows)


def test_parse_accepts_tokens_pairs_and_dicts():
    rows = table_rows(default_tile_specs())
    rows[0] = [
        ["round", "male"],
        {"connector": "Arrow Out", "gender": "F"},
        "ROUND/female",
        "Round:M",
    ]
    specs, err = parse_tile_table({"tiles": rows})
    assert err is None
    assert specs == default_tile_specs()


def test_parse_reports_errors_instead_of_raising():
    specs, err = parse_tile_table({"tiles": [["Round:M"] * 4]})
    assert specs is None
    assert err.startswith("Bad tile table")

    specs, err = parse_tile_table({})
    assert specs is None
    assert err == "nothing parsed from request"

    rows = table_rows(default_tile_specs())
    rows[2][0] = "Hexagon:M"
    specs, err = parse_tile_table(rows)
    assert specs is None
    assert "unknown connector" in err
