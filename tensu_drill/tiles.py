from __future__ import annotations

import re
from collections.abc import Iterable

from tensu_drill.schemas import Meld, MeldKind, Pair, Suit, Tile, WaitType

SUITED = (Suit.man, Suit.pin, Suit.sou)
DRAGON_VALUES = (5, 6, 7)
WIND_VALUES = (1, 2, 3, 4)

SUIT_LETTERS = {"m": Suit.man, "p": Suit.pin, "s": Suit.sou, "z": Suit.honor}
NOTATION_RE = re.compile(r"^(?:[1-9]+[mpsz])+$")

NUMBER_KANJI = ["", "一", "二", "三", "四", "五", "六", "七", "八", "九"]
HONOR_NAMES = {1: "東", 2: "南", 3: "西", 4: "北", 5: "發", 6: "白", 7: "中"}
SUIT_NAMES = {Suit.man: "萬", Suit.pin: "筒", Suit.sou: "索"}
WAIT_NAMES = {
    WaitType.ryanmen: "両面待ち",
    WaitType.kanchan: "カンチャン待ち",
    WaitType.penchan: "ペンチャン待ち",
    WaitType.shanpon: "シャンポン待ち",
    WaitType.tanki: "単騎待ち",
}
_DISPLAY_ORDER = {Suit.man: 0, Suit.pin: 1, Suit.sou: 2, Suit.honor: 3}


def make_tile(suit: Suit | str, value: int) -> Tile:
    return Tile(suit=suit, value=value)


def is_terminal_or_honor(tile: Tile) -> bool:
    if tile.suit == Suit.honor:
        return True
    return tile.value in {1, 9}


def is_simple(tile: Tile) -> bool:
    return tile.suit != Suit.honor and 2 <= tile.value <= 8


def is_dragon(tile: Tile) -> bool:
    return tile.suit == Suit.honor and tile.value in DRAGON_VALUES


def tiles_equal(a: Tile, b: Tile) -> bool:
    return a.suit == b.suit and a.value == b.value


def display_key(tile: Tile) -> tuple[int, int]:
    return _DISPLAY_ORDER[tile.suit], tile.value


def compare_for_display(a: Tile, b: Tile) -> int:
    ka, kb = display_key(a), display_key(b)
    return (ka > kb) - (ka < kb)


def sort_tiles(tiles: Iterable[Tile]) -> list[Tile]:
    return sorted(tiles, key=display_key)


def is_value_honor(tile: Tile, seat_wind: int, round_wind: int) -> bool:
    """Dragons, the seat wind and the round wind."""
    if tile.suit != Suit.honor:
        return False
    if tile.value in DRAGON_VALUES:
        return True
    return tile.value in {seat_wind, round_wind}


def is_double_wind_honor(tile: Tile, seat_wind: int, round_wind: int) -> bool:
    if tile.suit != Suit.honor or tile.value not in WIND_VALUES:
        return False
    return tile.value == seat_wind and tile.value == round_wind


def dora_from_indicator(indicator: Tile) -> Tile:
    """The tile following the indicator: 9->1, 北->東, 中->發."""
    if indicator.suit != Suit.honor:
        return make_tile(indicator.suit, 1 if indicator.value == 9 else indicator.value + 1)
    if indicator.value in WIND_VALUES:
        return make_tile(Suit.honor, 1 if indicator.value == 4 else indicator.value + 1)
    return make_tile(Suit.honor, 5 if indicator.value == 7 else indicator.value + 1)


def tile_from_code(code: str) -> Tile:
    tiles = parse_tiles(code)
    if len(tiles) != 1:
        raise ValueError(f"Invalid tile code: {code}")
    return tiles[0]


def parse_tiles(notation: str) -> list[Tile]:
    """Decode compact notation such as "123m456p11z" into tiles, in order."""
    if not NOTATION_RE.fullmatch(notation):
        raise ValueError(f"Invalid tile notation: {notation!r}")
    tiles: list[Tile] = []
    numbers: list[int] = []
    for char in notation:
        if char.isdigit():
            numbers.append(int(char))
            continue
        suit = SUIT_LETTERS[char]
        tiles.extend(make_tile(suit, n) for n in numbers)
        numbers = []
    return tiles


def tiles_to_notation(tiles: Iterable[Tile]) -> str:
    parts: list[str] = []
    current_letter = ""
    digits = ""
    for tile in tiles:
        letter = tile.code[1]
        if letter != current_letter and digits:
            parts.append(digits + current_letter)
            digits = ""
        current_letter = letter
        digits += str(tile.value)
    if digits:
        parts.append(digits + current_letter)
    return "".join(parts)


def tile_name(tile: Tile) -> str:
    if tile.suit == Suit.honor:
        return HONOR_NAMES[tile.value]
    return f"{NUMBER_KANJI[tile.value]}{SUIT_NAMES[tile.suit]}"


def wind_name(value: int) -> str:
    return HONOR_NAMES[value]


def wait_name(wait_type: WaitType | str) -> str:
    return WAIT_NAMES[WaitType(wait_type)]


def make_sequence(suit: Suit | str, start: int, is_exposed: bool = False) -> Meld:
    tiles = tuple(make_tile(suit, start + i) for i in range(3))
    return Meld(kind=MeldKind.shuntsu, tiles=tiles, is_exposed=is_exposed)


def _copies(suit: Suit | str, value: int, count: int) -> tuple[Tile, ...]:
    return tuple(make_tile(suit, value) for _ in range(count))


def make_triplet(suit: Suit | str, value: int, is_exposed: bool = False) -> Meld:
    return Meld(kind=MeldKind.koutsu, tiles=_copies(suit, value, 3), is_exposed=is_exposed)


def make_quad(suit: Suit | str, value: int, is_exposed: bool = False) -> Meld:
    return Meld(kind=MeldKind.kantsu, tiles=_copies(suit, value, 4), is_exposed=is_exposed)


def make_pair(suit: Suit | str, value: int) -> Pair:
    return Pair(tiles=_copies(suit, value, 2))
