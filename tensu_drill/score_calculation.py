from __future__ import annotations

from tensu_drill.fu_calculation import compute_fu
from tensu_drill.schemas import (
    LimitName,
    PlayerType,
    Points,
    ScoreResult,
    SevenPairsHand,
    StandardHand,
    WinType,
)
from tensu_drill.yaku_calculation import compute_yaku

# ko_ron, oya_ron, ko_tsumo (non-dealer pays), ko_tsumo (dealer pays), oya_tsumo (each pays)
LIMIT_SCORES: dict[LimitName, tuple[int, int, int, int, int]] = {
    LimitName.mangan: (8000, 12000, 2000, 4000, 4000),
    LimitName.haneman: (12000, 18000, 3000, 6000, 6000),
    LimitName.baiman: (16000, 24000, 4000, 8000, 8000),
    LimitName.sanbaiman: (24000, 36000, 6000, 12000, 12000),
    LimitName.yakuman: (32000, 48000, 8000, 16000, 16000),
}

LIMIT_LABELS = {
    LimitName.mangan: "満貫",
    LimitName.haneman: "跳満",
    LimitName.baiman: "倍満",
    LimitName.sanbaiman: "三倍満",
    LimitName.yakuman: "役満",
}

# Single-integer answer encoding for a non-dealer self-draw: non_dealer_pay * 1_000_000 + dealer_pay.
TSUMO_ANSWER_FACTOR = 1_000_000


def round_up_100(value: int) -> int:
    return ((value + 99) // 100) * 100


def base_points(fu: int, han: int) -> int:
    return fu * (2 ** (han + 2))


def limit_tier(fu: int, han: int) -> LimitName | None:
    if han >= 13:
        return LimitName.yakuman
    if han >= 11:
        return LimitName.sanbaiman
    if han >= 8:
        return LimitName.baiman
    if han >= 6:
        return LimitName.haneman
    if han == 5 or (han == 4 and fu >= 40) or (han == 3 and fu >= 70):
        return LimitName.mangan
    return None


def _limit_points(limit: LimitName, player_type: PlayerType, win_type: WinType) -> Points:
    ko_ron, oya_ron, ko_tsumo_ko, ko_tsumo_oya, oya_tsumo = LIMIT_SCORES[limit]
    if win_type == WinType.ron:
        return Points(ron=oya_ron if player_type == PlayerType.oya else ko_ron)
    if player_type == PlayerType.oya:
        return Points(tsumo_non_dealer_pay=oya_tsumo, tsumo_dealer_pay=oya_tsumo)
    return Points(tsumo_non_dealer_pay=ko_tsumo_ko, tsumo_dealer_pay=ko_tsumo_oya)


def _formula_points(base: int, player_type: PlayerType, win_type: WinType) -> Points:
    if win_type == WinType.ron:
        return Points(ron=round_up_100(base * (6 if player_type == PlayerType.oya else 4)))
    if player_type == PlayerType.oya:
        each = round_up_100(base * 2)
        return Points(tsumo_non_dealer_pay=each, tsumo_dealer_pay=each)
    return Points(
        tsumo_non_dealer_pay=round_up_100(base),
        tsumo_dealer_pay=round_up_100(base * 2),
    )


def score_from_fu_han(fu: int, han: int, player_type: PlayerType, win_type: WinType) -> ScoreResult:
    base = base_points(fu, han)
    limit = limit_tier(fu, han)
    if limit is not None:
        points = _limit_points(limit, player_type, win_type)
    else:
        points = _formula_points(base, player_type, win_type)
    return ScoreResult(fu=fu, han=han, base_points=base, points=points, limit_name=limit)


def compute_score(hand: StandardHand | SevenPairsHand) -> ScoreResult:
    han = compute_yaku(hand).total_han
    fu = compute_fu(hand).total
    return score_from_fu_han(fu, han, hand.player_type, hand.win_type)


def tsumo_total(result: ScoreResult, player_type: PlayerType) -> int:
    if player_type == PlayerType.oya:
        return result.points.tsumo_non_dealer_pay * 3
    return result.points.tsumo_non_dealer_pay * 2 + result.points.tsumo_dealer_pay


def format_score(result: ScoreResult, player_type: PlayerType, win_type: WinType) -> str:
    if win_type == WinType.ron:
        return f"{result.points.ron:,}点"
    if player_type == PlayerType.oya:
        return f"{result.points.tsumo_non_dealer_pay:,}点オール"
    return f"{result.points.tsumo_non_dealer_pay:,}/{result.points.tsumo_dealer_pay:,}点"


def score_label(result: ScoreResult, player_type: PlayerType, win_type: WinType) -> str:
    formatted = format_score(result, player_type, win_type)
    if result.limit_name is None:
        return f"{result.fu}符{result.han}翻 {formatted}"
    return f"{LIMIT_LABELS[result.limit_name]} {formatted}"


def encode_score_answer(
    player_type: PlayerType,
    win_type: WinType,
    ron: int = 0,
    tsumo_non_dealer_pay: int = 0,
    tsumo_dealer_pay: int = 0,
) -> int:
    if win_type == WinType.ron:
        return ron
    if player_type == PlayerType.oya:
        return tsumo_non_dealer_pay
    return tsumo_non_dealer_pay * TSUMO_ANSWER_FACTOR + tsumo_dealer_pay


def expected_score_answer(result: ScoreResult, player_type: PlayerType, win_type: WinType) -> int:
    return encode_score_answer(player_type, win_type, **result.points.model_dump())
