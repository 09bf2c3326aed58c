from __future__ import annotations

from tensu_drill.schemas import (
    FuBreakdown,
    Meld,
    MeldFu,
    MeldKind,
    Pair,
    SevenPairsHand,
    StandardHand,
    WaitType,
    WinType,
)
from tensu_drill.tiles import is_double_wind_honor, is_terminal_or_honor, is_value_honor

CHIITOITSU_FU = 25
PINFU_TSUMO_FU = 20
PINFU_RON_FU = 30

_MELD_TYPE_NAMES = {
    (MeldKind.koutsu, True): "明刻",
    (MeldKind.koutsu, False): "暗刻",
    (MeldKind.kantsu, True): "明槓",
    (MeldKind.kantsu, False): "暗槓",
}


def _meld_fu(meld: Meld) -> int:
    if meld.kind == MeldKind.shuntsu:
        return 0
    is_yaochu = is_terminal_or_honor(meld.tiles[0])
    if meld.kind == MeldKind.koutsu:
        return 4 if is_yaochu and meld.is_exposed else 8 if is_yaochu else 2 if meld.is_exposed else 4
    return 16 if is_yaochu and meld.is_exposed else 32 if is_yaochu else 8 if meld.is_exposed else 16


def _pair_fu(pair: Pair, seat_wind: int, round_wind: int) -> int:
    if is_double_wind_honor(pair.tile, seat_wind, round_wind):
        return 4
    if is_value_honor(pair.tile, seat_wind, round_wind):
        return 2
    return 0


def _wait_fu(wait_type: WaitType) -> int:
    if wait_type in {WaitType.kanchan, WaitType.penchan, WaitType.tanki}:
        return 2
    return 0


def _round_up_10(value: int) -> int:
    return ((value + 9) // 10) * 10


def is_standard_wait_pinfu(hand: StandardHand | SevenPairsHand) -> bool:
    """Concealed, four sequences, non-value pair and a two-sided wait."""
    if isinstance(hand, SevenPairsHand):
        return False
    if not isinstance(hand, StandardHand):
        raise TypeError(f"Unsupported hand type: {type(hand).__name__}")
    if not hand.is_concealed:
        return False
    if any(m.kind != MeldKind.shuntsu for m in hand.melds):
        return False
    if is_value_honor(hand.pair.tile, hand.seat_wind, hand.round_wind):
        return False
    return hand.wait_type == WaitType.ryanmen


def compute_fu(hand: StandardHand | SevenPairsHand) -> FuBreakdown:
    if isinstance(hand, SevenPairsHand):
        return FuBreakdown(subtotal=CHIITOITSU_FU, total=CHIITOITSU_FU)
    if not isinstance(hand, StandardHand):
        raise TypeError(f"Unsupported hand type: {type(hand).__name__}")

    breakdown = FuBreakdown(
        meld_fu=[MeldFu(meld=m, fu=_meld_fu(m)) for m in hand.melds],
        pair_fu=_pair_fu(hand.pair, hand.seat_wind, hand.round_wind),
        wait_fu=_wait_fu(hand.wait_type),
    )

    # Itemized values stay visible for pinfu; only the total is fixed.
    if is_standard_wait_pinfu(hand):
        fixed = PINFU_TSUMO_FU if hand.win_type == WinType.tsumo else PINFU_RON_FU
        breakdown.subtotal = fixed
        breakdown.total = fixed
        return breakdown

    if hand.is_concealed and hand.win_type == WinType.ron:
        breakdown.menzen_ron = 10
    if hand.win_type == WinType.tsumo:
        breakdown.tsumo = 2

    subtotal = (
        breakdown.base
        + breakdown.menzen_ron
        + breakdown.tsumo
        + sum(item.fu for item in breakdown.meld_fu)
        + breakdown.pair_fu
        + breakdown.wait_fu
    )
    breakdown.subtotal = subtotal
    # 喰い平和形: an open hand never scores below 30 fu
    if not hand.is_concealed and subtotal == 20:
        breakdown.total = 30
    else:
        breakdown.total = _round_up_10(subtotal)
    return breakdown


def describe_fu(breakdown: FuBreakdown, is_pinfu: bool = False, win_type: WinType | None = None) -> list[str]:
    if is_pinfu:
        if win_type == WinType.tsumo:
            return ["平和ツモ: 20符固定"]
        return ["平和ロン: 30符固定", "（門前ロン10符がつかない）"]
    if not breakdown.meld_fu and breakdown.total == CHIITOITSU_FU:
        return ["七対子: 25符固定"]

    lines = [f"副底: {breakdown.base}符"]
    if breakdown.menzen_ron:
        lines.append(f"門前ロン: {breakdown.menzen_ron}符")
    if breakdown.tsumo:
        lines.append(f"ツモ: {breakdown.tsumo}符")
    for item in breakdown.meld_fu:
        if item.fu:
            name = _MELD_TYPE_NAMES[(item.meld.kind, item.meld.is_exposed)]
            lines.append(f"{name}: {item.fu}符")
    if breakdown.pair_fu:
        lines.append(f"雀頭: {breakdown.pair_fu}符")
    if breakdown.wait_fu:
        lines.append(f"待ち: {breakdown.wait_fu}符")

    if breakdown.subtotal != breakdown.total:
        lines.append(f"小計: {breakdown.subtotal}符")
        lines.append(f"切り上げ: {breakdown.total}符")
    else:
        lines.append(f"合計: {breakdown.total}符")
    return lines
