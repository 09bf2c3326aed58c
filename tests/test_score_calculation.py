import pytest

from tensu_drill.schemas import LimitName, Meld, MeldKind, Pair, PlayerType, StandardHand, WinType
from tensu_drill.score_calculation import (
    base_points,
    compute_score,
    encode_score_answer,
    expected_score_answer,
    format_score,
    limit_tier,
    round_up_100,
    score_from_fu_han,
    score_label,
    tsumo_total,
)
from tensu_drill.tiles import parse_tiles, tile_from_code


def hand_from(codes, jantou, winning_tile, wait_type, **kwargs) -> StandardHand:
    melds = []
    for code in codes:
        tiles = tuple(parse_tiles(code))
        kind = MeldKind.shuntsu if tiles[0] != tiles[1] else MeldKind.koutsu
        melds.append(Meld(kind=kind, tiles=tiles))
    payload = {
        "win_type": "ron",
        "player_type": "ko",
        "seat_wind": 2,
        "round_wind": 1,
        "dora_indicators": (tile_from_code("1z"),),
    }
    payload.update(kwargs)
    return StandardHand(
        melds=tuple(melds),
        pair=Pair(tiles=tuple(parse_tiles(jantou))),
        winning_tile=tile_from_code(winning_tile),
        wait_type=wait_type,
        **payload,
    )


def test_round_up_100():
    assert round_up_100(3840) == 3900
    assert round_up_100(3900) == 3900
    assert round_up_100(1) == 100


def test_base_points():
    assert base_points(30, 3) == 960
    assert base_points(20, 2) == 320


def test_non_dealer_ron_30_fu_3_han():
    result = score_from_fu_han(30, 3, PlayerType.ko, WinType.ron)
    assert result.points.ron == 3900
    assert result.limit_name is None
    assert format_score(result, PlayerType.ko, WinType.ron) == "3,900点"


def test_non_dealer_tsumo_30_fu_3_han():
    result = score_from_fu_han(30, 3, PlayerType.ko, WinType.tsumo)
    assert result.points.tsumo_non_dealer_pay == 1000
    assert result.points.tsumo_dealer_pay == 2000
    assert format_score(result, PlayerType.ko, WinType.tsumo) == "1,000/2,000点"
    assert tsumo_total(result, PlayerType.ko) == 4000


def test_pinfu_tsumo_20_fu_2_han():
    result = score_from_fu_han(20, 2, PlayerType.ko, WinType.tsumo)
    assert (result.points.tsumo_non_dealer_pay, result.points.tsumo_dealer_pay) == (400, 700)


def test_dealer_tsumo_pays_each():
    result = score_from_fu_han(30, 3, PlayerType.oya, WinType.tsumo)
    assert result.points.tsumo_non_dealer_pay == 2000
    assert result.points.tsumo_dealer_pay == 2000
    assert format_score(result, PlayerType.oya, WinType.tsumo) == "2,000点オール"
    assert tsumo_total(result, PlayerType.oya) == 6000


def test_dealer_ron():
    assert score_from_fu_han(40, 3, PlayerType.oya, WinType.ron).points.ron == 7700


def test_five_han_is_mangan_regardless_of_fu():
    result = score_from_fu_han(25, 5, PlayerType.ko, WinType.ron)
    assert result.points.ron == 8000
    assert result.limit_name == LimitName.mangan
    assert score_label(result, PlayerType.ko, WinType.ron) == "満貫 8,000点"


def test_four_han_40_fu_is_mangan_not_formula():
    result = score_from_fu_han(40, 4, PlayerType.ko, WinType.ron)
    assert result.base_points == 2560
    assert result.limit_name == LimitName.mangan
    assert result.points.ron == 8000


def test_four_han_30_fu_stays_below_mangan():
    result = score_from_fu_han(30, 4, PlayerType.ko, WinType.ron)
    assert result.limit_name is None
    assert result.points.ron == 7700


def test_three_han_70_fu_is_mangan():
    assert limit_tier(70, 3) == LimitName.mangan
    assert limit_tier(60, 3) is None


@pytest.mark.parametrize(
    ("han", "limit", "ko_ron", "oya_ron"),
    [
        (6, LimitName.haneman, 12000, 18000),
        (7, LimitName.haneman, 12000, 18000),
        (8, LimitName.baiman, 16000, 24000),
        (10, LimitName.baiman, 16000, 24000),
        (11, LimitName.sanbaiman, 24000, 36000),
        (13, LimitName.yakuman, 32000, 48000),
    ],
)
def test_limit_tiers(han, limit, ko_ron, oya_ron):
    assert score_from_fu_han(30, han, PlayerType.ko, WinType.ron).points.ron == ko_ron
    dealer = score_from_fu_han(30, han, PlayerType.oya, WinType.ron)
    assert dealer.points.ron == oya_ron
    assert dealer.limit_name == limit


def test_limit_tsumo_split():
    result = score_from_fu_han(30, 8, PlayerType.ko, WinType.tsumo)
    assert (result.points.tsumo_non_dealer_pay, result.points.tsumo_dealer_pay) == (4000, 8000)
    dealer = score_from_fu_han(30, 6, PlayerType.oya, WinType.tsumo)
    assert tsumo_total(dealer, PlayerType.oya) == 18000


@pytest.mark.parametrize("fu", [20, 25, 30, 40, 50, 70, 110])
@pytest.mark.parametrize("player_type", [PlayerType.ko, PlayerType.oya])
def test_ron_never_decreases_with_han(fu, player_type):
    payments = [score_from_fu_han(fu, han, player_type, WinType.ron).points.ron for han in range(1, 14)]
    assert payments == sorted(payments)


def test_compute_score_uses_fu_and_han_of_hand():
    hand = hand_from(["123m", "456m", "234p", "567s"], "22s", "4m", "ryanmen")
    result = compute_score(hand)
    assert (result.fu, result.han) == (30, 2)
    assert result.points.ron == 2000
    assert score_label(result, hand.player_type, hand.win_type) == "30符2翻 2,000点"


def test_compute_score_pinfu_tanyao_tsumo():
    hand = hand_from(["234m", "456p", "678s", "345s"], "55m", "2m", "ryanmen", win_type="tsumo")
    result = compute_score(hand)
    assert (result.fu, result.han) == (20, 4)
    assert (result.points.tsumo_non_dealer_pay, result.points.tsumo_dealer_pay) == (1300, 2600)


def test_expected_score_answer_encoding():
    ron = score_from_fu_han(30, 3, PlayerType.ko, WinType.ron)
    assert expected_score_answer(ron, PlayerType.ko, WinType.ron) == 3900
    dealer_tsumo = score_from_fu_han(30, 3, PlayerType.oya, WinType.tsumo)
    assert expected_score_answer(dealer_tsumo, PlayerType.oya, WinType.tsumo) == 2000
    tsumo = score_from_fu_han(30, 3, PlayerType.ko, WinType.tsumo)
    assert expected_score_answer(tsumo, PlayerType.ko, WinType.tsumo) == 1000002000
    assert encode_score_answer(PlayerType.ko, WinType.tsumo, tsumo_non_dealer_pay=1000, tsumo_dealer_pay=2000) == 1000002000
