import pytest
from pydantic import ValidationError

from tensu_drill.schemas import HonorKind, Meld, MeldKind, Pair, SevenPairsHand, Suit, WaitType
from tensu_drill.tiles import (
    compare_for_display,
    dora_from_indicator,
    is_double_wind_honor,
    is_simple,
    is_terminal_or_honor,
    is_value_honor,
    make_pair,
    make_quad,
    make_sequence,
    make_tile,
    parse_tiles,
    sort_tiles,
    tile_from_code,
    tile_name,
    tiles_equal,
    tiles_to_notation,
    wait_name,
    wind_name,
)


@pytest.mark.parametrize(
    ("indicator", "dora"),
    [
        ("5p", "6p"),
        ("9m", "1m"),
        ("9s", "1s"),
        ("3z", "4z"),
        ("4z", "1z"),
        ("5z", "6z"),
        ("7z", "5z"),
    ],
)
def test_dora_from_indicator_wraps(indicator, dora):
    assert dora_from_indicator(tile_from_code(indicator)).code == dora


def test_parse_tiles_keeps_order():
    tiles = parse_tiles("123m55p11z")
    assert [t.code for t in tiles] == ["1m", "2m", "3m", "5p", "5p", "1z", "1z"]
    assert tiles[-1].suit == Suit.honor


@pytest.mark.parametrize("notation", ["", "12x", "0m", "m123", "123"])
def test_parse_tiles_rejects_bad_notation(notation):
    with pytest.raises(ValueError):
        parse_tiles(notation)


def test_parse_tiles_rejects_out_of_range_honor():
    with pytest.raises(ValueError):
        parse_tiles("8z")


def test_tiles_to_notation_groups_by_suit():
    tiles = parse_tiles("123m456p11z")
    assert tiles_to_notation(tiles) == "123m456p11z"


def test_sort_tiles_orders_man_pin_sou_honor():
    tiles = parse_tiles("1z9s5p2m")
    assert tiles_to_notation(sort_tiles(tiles)) == "2m5p9s1z"


def test_tile_names():
    assert tile_name(make_tile(Suit.man, 5)) == "五萬"
    assert tile_name(make_tile(Suit.pin, 1)) == "一筒"
    assert tile_name(make_tile(Suit.honor, 1)) == "東"
    assert tile_name(make_tile(Suit.honor, 7)) == "中"


def test_tile_classification():
    assert is_terminal_or_honor(tile_from_code("1m"))
    assert is_terminal_or_honor(tile_from_code("9s"))
    assert is_terminal_or_honor(tile_from_code("6z"))
    assert not is_terminal_or_honor(tile_from_code("5p"))
    assert is_simple(tile_from_code("2m"))
    assert not is_simple(tile_from_code("9m"))
    assert not is_simple(tile_from_code("2z"))


def test_value_honor_uses_seat_and_round_wind():
    assert is_value_honor(tile_from_code("5z"), seat_wind=2, round_wind=1)
    assert is_value_honor(tile_from_code("2z"), seat_wind=2, round_wind=1)
    assert is_value_honor(tile_from_code("1z"), seat_wind=2, round_wind=1)
    assert not is_value_honor(tile_from_code("3z"), seat_wind=2, round_wind=1)
    assert not is_value_honor(tile_from_code("1m"), seat_wind=1, round_wind=1)


def test_double_wind_honor_requires_both_winds():
    assert is_double_wind_honor(tile_from_code("1z"), seat_wind=1, round_wind=1)
    assert not is_double_wind_honor(tile_from_code("1z"), seat_wind=2, round_wind=1)
    assert not is_double_wind_honor(tile_from_code("5z"), seat_wind=1, round_wind=1)


def test_meld_builders():
    sequence = make_sequence(Suit.sou, 7, is_exposed=True)
    assert [t.code for t in sequence.tiles] == ["7s", "8s", "9s"]
    assert sequence.is_exposed
    quad = make_quad(Suit.honor, 6)
    assert quad.kind == MeldKind.kantsu
    assert len(quad.tiles) == 4
    assert quad.is_triplet_like


def test_tile_rejects_honor_above_seven():
    with pytest.raises(ValidationError):
        make_tile(Suit.honor, 8)


def test_sequence_must_be_consecutive():
    with pytest.raises(ValidationError):
        Meld(kind=MeldKind.shuntsu, tiles=tuple(parse_tiles("134m")))


def test_sequence_cannot_use_honors():
    with pytest.raises(ValidationError):
        Meld(kind=MeldKind.shuntsu, tiles=tuple(parse_tiles("123z")))


def test_triplet_must_be_identical():
    with pytest.raises(ValidationError):
        Meld(kind=MeldKind.koutsu, tiles=tuple(parse_tiles("556p")))


def test_pair_must_be_identical():
    with pytest.raises(ValidationError):
        Pair(tiles=tuple(parse_tiles("12m")))


def test_seven_pairs_only_waits_on_a_single_tile():
    pairs = tuple(make_pair(Suit.man, v) for v in range(1, 8))
    with pytest.raises(ValidationError):
        SevenPairsHand(
            pairs=pairs,
            win_type="ron",
            player_type="ko",
            wait_type=WaitType.ryanmen,
            winning_tile=make_tile(Suit.man, 1),
            seat_wind=2,
            round_wind=1,
            dora_indicators=(make_tile(Suit.honor, 1),),
        )


def test_tiles_equal_and_display_order():
    assert tiles_equal(make_tile(Suit.sou, 3), tile_from_code("3s"))
    assert not tiles_equal(make_tile(Suit.sou, 3), make_tile(Suit.pin, 3))
    assert compare_for_display(tile_from_code("9m"), tile_from_code("1p")) == -1
    assert compare_for_display(tile_from_code("1z"), tile_from_code("9s")) == 1
    assert compare_for_display(tile_from_code("4p"), tile_from_code("4p")) == 0


def test_honor_kind_and_wind_names():
    assert make_tile(Suit.honor, 1).honor_kind == HonorKind.ton
    assert make_tile(Suit.honor, 5).honor_kind == HonorKind.hatsu
    assert make_tile(Suit.honor, 6).honor_kind == HonorKind.haku
    assert make_tile(Suit.man, 1).honor_kind is None
    assert [wind_name(v) for v in (1, 2, 3, 4)] == ["東", "南", "西", "北"]


def test_wait_names():
    assert wait_name(WaitType.ryanmen) == "両面待ち"
    assert wait_name("kanchan") == "カンチャン待ち"
    assert wait_name(WaitType.penchan) == "ペンチャン待ち"
    assert wait_name(WaitType.shanpon) == "シャンポン待ち"
    assert wait_name(WaitType.tanki) == "単騎待ち"
