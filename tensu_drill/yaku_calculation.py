from __future__ import annotations

from collections import Counter

from tensu_drill.fu_calculation import is_standard_wait_pinfu
from tensu_drill.schemas import (
    JudgedYaku,
    Meld,
    MeldKind,
    SevenPairsHand,
    StandardHand,
    Suit,
    WaitType,
    WinType,
    YakuId,
    YakuResult,
)
from tensu_drill.tiles import (
    dora_from_indicator,
    is_dragon,
    is_simple,
    is_terminal_or_honor,
)
from tensu_drill.yaku_definitions import get_yaku_definition

_DRAGON_YAKU = {
    5: YakuId.yakuhai_hatsu,
    6: YakuId.yakuhai_haku,
    7: YakuId.yakuhai_chun,
}


def _add_yaku(yaku_list: list[JudgedYaku], yaku_id: YakuId, is_concealed: bool) -> None:
    definition = get_yaku_definition(yaku_id)
    han = definition.han if is_concealed else definition.han_open
    if han is None:
        return
    yaku_list.append(JudgedYaku(id=yaku_id, han=han))


def count_dora(hand: StandardHand | SevenPairsHand) -> int:
    counts = Counter(hand.all_tiles())
    return sum(counts.get(dora_from_indicator(indicator), 0) for indicator in hand.dora_indicators)


def _sequences(hand: StandardHand) -> list[Meld]:
    return [m for m in hand.melds if m.kind == MeldKind.shuntsu]


def _triplets(hand: StandardHand) -> list[Meld]:
    return [m for m in hand.melds if m.is_triplet_like]


def _sequence_counts(hand: StandardHand) -> Counter:
    return Counter((m.tiles[0].suit, m.tiles[0].value) for m in _sequences(hand))


def _has_tanyao(hand: StandardHand) -> bool:
    return all(is_simple(t) for t in hand.all_tiles())


def _has_toitoi(hand: StandardHand) -> bool:
    return all(m.is_triplet_like for m in hand.melds)


def _has_sanankou(hand: StandardHand) -> bool:
    # A shanpon ron completes exactly one triplet with the discard; that one is not concealed.
    claimed_by_ron = hand.win_type == WinType.ron and hand.wait_type == WaitType.shanpon
    concealed = 0
    for meld in _triplets(hand):
        if meld.is_exposed:
            continue
        if claimed_by_ron and meld.tiles[0] == hand.winning_tile:
            claimed_by_ron = False
            continue
        concealed += 1
    return concealed >= 3


def _append_yakuhai_yaku(yaku_list: list[JudgedYaku], hand: StandardHand) -> None:
    for meld in _triplets(hand):
        tile = meld.tiles[0]
        if tile.suit != Suit.honor:
            continue
        if tile.value in _DRAGON_YAKU:
            _add_yaku(yaku_list, _DRAGON_YAKU[tile.value], hand.is_concealed)
        if tile.value == hand.round_wind:
            _add_yaku(yaku_list, YakuId.yakuhai_bakaze, hand.is_concealed)
        if tile.value == hand.seat_wind:
            _add_yaku(yaku_list, YakuId.yakuhai_jikaze, hand.is_concealed)


def _has_honitsu(hand: StandardHand) -> bool:
    tiles = hand.all_tiles()
    suits = {t.suit for t in tiles if t.suit != Suit.honor}
    has_honor = any(t.suit == Suit.honor for t in tiles)
    return len(suits) == 1 and has_honor


def _has_chinitsu(hand: StandardHand) -> bool:
    suits = {t.suit for t in hand.all_tiles()}
    return len(suits) == 1 and Suit.honor not in suits


def _has_iipeikou(hand: StandardHand) -> bool:
    if not hand.is_concealed:
        return False
    return any(c >= 2 for c in _sequence_counts(hand).values())


def _has_ryanpeikou(hand: StandardHand) -> bool:
    if not hand.is_concealed or len(_sequences(hand)) < 4:
        return False
    return sum(c // 2 for c in _sequence_counts(hand).values()) >= 2


def _has_honroutou(hand: StandardHand) -> bool:
    return all(is_terminal_or_honor(t) for t in hand.all_tiles())


def _has_sanshoku_doujun(hand: StandardHand) -> bool:
    suits_by_start: dict[int, set[Suit]] = {}
    for meld in _sequences(hand):
        suits_by_start.setdefault(meld.tiles[0].value, set()).add(meld.tiles[0].suit)
    return any(len(suits) == 3 for suits in suits_by_start.values())


def _has_ittsu(hand: StandardHand) -> bool:
    starts_by_suit: dict[Suit, set[int]] = {}
    for meld in _sequences(hand):
        starts_by_suit.setdefault(meld.tiles[0].suit, set()).add(meld.tiles[0].value)
    return any({1, 4, 7} <= starts for starts in starts_by_suit.values())


def _meld_is_outside(meld: Meld, allow_honor: bool) -> bool:
    tile = meld.tiles[0]
    if meld.kind == MeldKind.shuntsu:
        return tile.value in {1, 7}
    if tile.suit == Suit.honor:
        return allow_honor
    return tile.value in {1, 9}


def _has_chanta(hand: StandardHand) -> bool:
    if not is_terminal_or_honor(hand.pair.tile):
        return False
    if not all(_meld_is_outside(m, allow_honor=True) for m in hand.melds):
        return False
    return any(t.suit == Suit.honor for t in hand.all_tiles())


def _has_junchan(hand: StandardHand) -> bool:
    pair_tile = hand.pair.tile
    if pair_tile.suit == Suit.honor or pair_tile.value not in {1, 9}:
        return False
    return all(_meld_is_outside(m, allow_honor=False) for m in hand.melds)


def _has_sanshoku_doukou(hand: StandardHand) -> bool:
    suits_by_value: dict[int, set[Suit]] = {}
    for meld in _triplets(hand):
        tile = meld.tiles[0]
        if tile.suit == Suit.honor:
            continue
        suits_by_value.setdefault(tile.value, set()).add(tile.suit)
    return any(len(suits) == 3 for suits in suits_by_value.values())


def _has_sankantsu(hand: StandardHand) -> bool:
    return sum(1 for m in hand.melds if m.kind == MeldKind.kantsu) >= 3


def _has_shousangen(hand: StandardHand) -> bool:
    dragon_melds = {m.tiles[0].value for m in _triplets(hand) if is_dragon(m.tiles[0])}
    if len(dragon_melds) != 2:
        return False
    pair_tile = hand.pair.tile
    return is_dragon(pair_tile) and pair_tile.value not in dragon_melds


def _result(yaku_list: list[JudgedYaku], dora_count: int) -> YakuResult:
    return YakuResult(
        yaku_list=yaku_list,
        total_han=sum(y.han for y in yaku_list) + dora_count,
        dora_count=dora_count,
    )


def _seven_pairs_yaku(hand: SevenPairsHand) -> YakuResult:
    yaku_list: list[JudgedYaku] = []
    _add_yaku(yaku_list, YakuId.chiitoitsu, True)
    _add_yaku(yaku_list, YakuId.riichi, True)
    if hand.win_type == WinType.tsumo:
        _add_yaku(yaku_list, YakuId.menzen_tsumo, True)
    return _result(yaku_list, count_dora(hand))


def _standard_yaku(hand: StandardHand) -> YakuResult:
    yaku_list: list[JudgedYaku] = []
    concealed = hand.is_concealed

    # Every concealed win in the drill is assumed to have declared riichi.
    if concealed:
        _add_yaku(yaku_list, YakuId.riichi, concealed)
    if concealed and hand.win_type == WinType.tsumo:
        _add_yaku(yaku_list, YakuId.menzen_tsumo, concealed)
    if _has_tanyao(hand):
        _add_yaku(yaku_list, YakuId.tanyao, concealed)
    if is_standard_wait_pinfu(hand):
        _add_yaku(yaku_list, YakuId.pinfu, concealed)
    if _has_toitoi(hand):
        _add_yaku(yaku_list, YakuId.toitoi, concealed)
    if _has_sanankou(hand):
        _add_yaku(yaku_list, YakuId.sanankou, concealed)

    _append_yakuhai_yaku(yaku_list, hand)

    if _has_honitsu(hand):
        _add_yaku(yaku_list, YakuId.honitsu, concealed)
    if _has_chinitsu(hand):
        _add_yaku(yaku_list, YakuId.chinitsu, concealed)
    has_ryanpeikou = _has_ryanpeikou(hand)
    if _has_iipeikou(hand) and not has_ryanpeikou:
        _add_yaku(yaku_list, YakuId.iipeikou, concealed)
    if _has_honroutou(hand):
        _add_yaku(yaku_list, YakuId.honroutou, concealed)
    if _has_sanshoku_doujun(hand):
        _add_yaku(yaku_list, YakuId.sanshoku_doujun, concealed)
    if _has_ittsu(hand):
        _add_yaku(yaku_list, YakuId.ittsu, concealed)
    if _has_chanta(hand):
        _add_yaku(yaku_list, YakuId.chanta, concealed)
    if _has_junchan(hand):
        _add_yaku(yaku_list, YakuId.junchan, concealed)
    if _has_sanshoku_doukou(hand):
        _add_yaku(yaku_list, YakuId.sanshoku_doukou, concealed)
    if _has_sankantsu(hand):
        _add_yaku(yaku_list, YakuId.sankantsu, concealed)
    if _has_shousangen(hand):
        _add_yaku(yaku_list, YakuId.shousangen, concealed)
    if has_ryanpeikou:
        _add_yaku(yaku_list, YakuId.ryanpeikou, concealed)

    return _result(yaku_list, count_dora(hand))


def compute_yaku(hand: StandardHand | SevenPairsHand) -> YakuResult:
    """Hand -> applicable yaku with han for its concealment state, plus dora.

    An empty yaku_list means the hand is not a valid scoring hand (dora alone
    never wins); callers must discard it.
    """
    if isinstance(hand, SevenPairsHand):
        return _seven_pairs_yaku(hand)
    if isinstance(hand, StandardHand):
        return _standard_yaku(hand)
    raise TypeError(f"Unsupported hand type: {type(hand).__name__}")
