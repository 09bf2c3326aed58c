from __future__ import annotations

from collections import Counter

from fastapi import HTTPException

from tensu_drill.problem_generator import wait_from_sequence_position
from tensu_drill.schemas import (
    MeldKind,
    SevenPairsHand,
    StandardHand,
    WaitType,
    YakuResult,
)

MAX_DORA_INDICATORS = 3


def _reject(detail: str) -> None:
    raise HTTPException(status_code=422, detail=detail)


def _possible_waits(hand: StandardHand) -> set[WaitType]:
    waits: set[WaitType] = set()
    for meld in hand.melds:
        if meld.is_exposed or hand.winning_tile not in meld.tiles:
            continue
        if meld.kind == MeldKind.shuntsu:
            start = meld.tiles[0].value
            waits.add(wait_from_sequence_position(start, meld.tiles.index(hand.winning_tile)))
        elif meld.kind == MeldKind.koutsu:
            waits.add(WaitType.shanpon)
    if hand.pair.tile == hand.winning_tile:
        waits.add(WaitType.tanki)
    return waits


def _validate_tile_counts(hand: StandardHand | SevenPairsHand) -> None:
    counts = Counter(t.code for t in hand.all_tiles())
    counts.update(t.code for t in hand.dora_indicators)
    for code, count in counts.items():
        if count > 4:
            _reject(f"Tile appears 5+ times in hand and dora indicators: {code}")


def _validate_dora_indicators(hand: StandardHand | SevenPairsHand) -> None:
    count = len(hand.dora_indicators)
    if not 1 <= count <= MAX_DORA_INDICATORS:
        _reject(f"dora_indicators must contain 1-{MAX_DORA_INDICATORS} tiles, got {count}")
    has_quad = isinstance(hand, StandardHand) and any(m.kind == MeldKind.kantsu for m in hand.melds)
    if has_quad and count < 2:
        _reject("A hand with a quad must show at least 2 dora indicators")


def validate_hand(hand: StandardHand | SevenPairsHand) -> None:
    _validate_tile_counts(hand)
    _validate_dora_indicators(hand)

    if hand.winning_tile not in hand.all_tiles():
        _reject(f"Winning tile {hand.winning_tile.code} is not part of the hand")

    if isinstance(hand, SevenPairsHand):
        codes = [p.tile.code for p in hand.pairs]
        if len(set(codes)) != len(codes):
            _reject("Seven pairs must be seven different tiles")
        return

    if isinstance(hand, StandardHand):
        waits = _possible_waits(hand)
        if hand.wait_type not in waits:
            allowed = ", ".join(sorted(w.value for w in waits)) or "none"
            _reject(
                f"wait_type {hand.wait_type.value} is inconsistent with winning tile "
                f"{hand.winning_tile.code} (possible: {allowed})"
            )
        return

    raise TypeError(f"Unsupported hand type: {type(hand).__name__}")


def validate_has_yaku(result: YakuResult) -> None:
    if not result.yaku_list:
        _reject("No yaku: dora-only hands cannot win")
