from __future__ import annotations

import logging
import random
from collections import Counter
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import TypeVar

from tensu_drill.schemas import (
    Difficulty,
    Meld,
    MeldKind,
    Pair,
    PlayerType,
    Problem,
    SevenPairsHand,
    StandardHand,
    Suit,
    Tile,
    WaitType,
    WinType,
    YakuId,
)
from tensu_drill.tiles import (
    DRAGON_VALUES,
    SUITED,
    make_pair,
    make_quad,
    make_sequence,
    make_tile,
    make_triplet,
)
from tensu_drill.yaku_calculation import compute_yaku

logger = logging.getLogger(__name__)

T = TypeVar("T")

MAX_COPIES = 4
MELD_ATTEMPTS = 10
DORA_ATTEMPTS = 20
SHOWCASE_ATTEMPTS = 100
PROBLEM_ATTEMPTS = 10
LIMIT_HAN = 13

MAX_EXPOSED_MELDS = 2
EXPOSE_RATE = 0.5
SEQUENCE_CUTOFF = 0.6
SEVEN_PAIRS_RATE = 0.05
SEVEN_PAIRS_HONOR_RATE = 0.15
DORA_SUITED_RATE = 0.7
DEALER_RATE = 0.25
SHOWCASE_HONOR_RATE = 0.3

TERMINALS = tuple(make_tile(suit, value) for suit in SUITED for value in (1, 9))
HONORS = tuple(make_tile(Suit.honor, value) for value in range(1, 8))
ALL_TILES = tuple(make_tile(suit, value) for suit in SUITED for value in range(1, 10)) + HONORS


@dataclass(frozen=True)
class DifficultySettings:
    quad_rate: float
    honor_rate: float
    open_rate: float


DIFFICULTY_SETTINGS: dict[Difficulty, DifficultySettings] = {
    Difficulty.beginner: DifficultySettings(quad_rate=0.0, honor_rate=0.1, open_rate=0.3),
    Difficulty.intermediate: DifficultySettings(quad_rate=0.15, honor_rate=0.25, open_rate=0.4),
    Difficulty.advanced: DifficultySettings(quad_rate=0.25, honor_rate=0.35, open_rate=0.5),
}

# Checked in order; the first hit gets a dedicated constructor.
RARE_YAKU_RATES: list[tuple[YakuId, float]] = [
    (YakuId.ittsu, 0.05),
    (YakuId.sanshoku_doujun, 0.05),
    (YakuId.sanshoku_doukou, 0.05),
    (YakuId.ryanpeikou, 0.05),
    (YakuId.junchan, 0.02),
    (YakuId.chanta, 0.02),
    (YakuId.shousangen, 0.02),
    (YakuId.sankantsu, 0.02),
    (YakuId.honroutou, 0.01),
    (YakuId.chinitsu, 0.01),
]


class TileCounter:
    """Copies of each tile already placed during one generation call (at most 4)."""

    def __init__(self) -> None:
        self._counts: Counter = Counter()

    def count(self, tile: Tile) -> int:
        return self._counts[(tile.suit, tile.value)]

    def can_use(self, tile: Tile, n: int = 1) -> bool:
        return self.count(tile) + n <= MAX_COPIES

    def use(self, tile: Tile, n: int = 1) -> None:
        self._counts[(tile.suit, tile.value)] += n

    def take(self, tiles: Iterable[Tile]) -> bool:
        """All-or-nothing: reserve every tile or none of them."""
        needed = Counter((t.suit, t.value) for t in tiles)
        if any(self._counts[key] + n > MAX_COPIES for key, n in needed.items()):
            return False
        self._counts.update(needed)
        return True


def try_construct(build: Callable[[], T | None], max_attempts: int) -> T | None:
    for _ in range(max_attempts):
        result = build()
        if result is not None:
            return result
    return None


class _ExposureBudget:
    def __init__(self, has_open: bool, rng: random.Random) -> None:
        self._has_open = has_open
        self._rng = rng
        self._used = 0

    def draw(self) -> bool:
        if not self._has_open or self._used >= MAX_EXPOSED_MELDS:
            return False
        if self._rng.random() >= EXPOSE_RATE:
            return False
        self._used += 1
        return True


def _random_tile(rng: random.Random, use_honor: bool) -> Tile:
    if use_honor:
        return make_tile(Suit.honor, rng.randint(1, 7))
    return make_tile(rng.choice(SUITED), rng.randint(1, 9))


def _claim(counter: TileCounter, meld: Meld) -> Meld | None:
    return meld if counter.take(meld.tiles) else None


def _claim_pair(counter: TileCounter, tile: Tile) -> Pair | None:
    if not counter.can_use(tile, 2):
        return None
    counter.use(tile, 2)
    return make_pair(tile.suit, tile.value)


def _sequence_at(counter: TileCounter, suit: Suit, start: int, is_exposed: bool = False) -> Meld | None:
    return _claim(counter, make_sequence(suit, start, is_exposed))


def _triplet_of(counter: TileCounter, tile: Tile, is_exposed: bool = False) -> Meld | None:
    return _claim(counter, make_triplet(tile.suit, tile.value, is_exposed))


def _quad_of(counter: TileCounter, tile: Tile, is_exposed: bool = False) -> Meld | None:
    return _claim(counter, make_quad(tile.suit, tile.value, is_exposed))


def _random_sequence(counter: TileCounter, rng: random.Random, is_exposed: bool) -> Meld | None:
    return try_construct(
        lambda: _sequence_at(counter, rng.choice(SUITED), rng.randint(1, 7), is_exposed),
        MELD_ATTEMPTS,
    )


def _random_triplet(counter: TileCounter, rng: random.Random, use_honor: bool, is_exposed: bool) -> Meld | None:
    return try_construct(lambda: _triplet_of(counter, _random_tile(rng, use_honor), is_exposed), MELD_ATTEMPTS)


def _random_quad(counter: TileCounter, rng: random.Random, use_honor: bool, is_exposed: bool) -> Meld | None:
    return try_construct(lambda: _quad_of(counter, _random_tile(rng, use_honor), is_exposed), MELD_ATTEMPTS)


def _random_pair(counter: TileCounter, rng: random.Random, use_honor: bool) -> Pair | None:
    return try_construct(lambda: _claim_pair(counter, _random_tile(rng, use_honor)), MELD_ATTEMPTS)


def _first_pair(counter: TileCounter, candidates: Iterable[Tile]) -> Pair | None:
    for tile in candidates:
        pair = _claim_pair(counter, tile)
        if pair is not None:
            return pair
    return None


def _shuffled(rng: random.Random, items: Iterable[T]) -> list[T]:
    result = list(items)
    rng.shuffle(result)
    return result


def _choose_meld_kind(use_honor: bool, quad_rate: float, rng: random.Random) -> MeldKind:
    if use_honor:
        return MeldKind.kantsu if rng.random() < quad_rate else MeldKind.koutsu
    roll = rng.random()
    if roll < quad_rate:
        return MeldKind.kantsu
    if roll < SEQUENCE_CUTOFF:
        return MeldKind.shuntsu
    return MeldKind.koutsu


def _standard_meld(
    counter: TileCounter,
    rng: random.Random,
    use_honor: bool,
    is_exposed: bool,
    kind: MeldKind,
) -> Meld | None:
    if kind == MeldKind.shuntsu:
        meld = _random_sequence(counter, rng, is_exposed)
    elif kind == MeldKind.koutsu:
        meld = _random_triplet(counter, rng, use_honor, is_exposed)
    else:
        meld = _random_quad(counter, rng, use_honor, is_exposed)
    if meld is None:
        meld = _random_sequence(counter, rng, is_exposed)
    if meld is None:
        meld = _random_triplet(counter, rng, False, is_exposed)
    return meld


def _standard_hand(
    counter: TileCounter, rng: random.Random, settings: DifficultySettings, has_open: bool
) -> tuple[list[Meld], Pair | None]:
    exposure = _ExposureBudget(has_open, rng)
    melds: list[Meld] = []
    for _ in range(4):
        use_honor = rng.random() < settings.honor_rate
        is_exposed = exposure.draw()
        kind = _choose_meld_kind(use_honor, settings.quad_rate, rng)
        meld = _standard_meld(counter, rng, use_honor, is_exposed, kind)
        if meld is not None:
            melds.append(meld)

    pair = _random_pair(counter, rng, rng.random() < settings.honor_rate)
    if pair is None:
        pair = _random_pair(counter, rng, False)
    if pair is None:
        pair = _claim_pair(counter, make_tile(Suit.man, 1))
    return melds, pair


# Showcase constructors. Each returns whatever it managed to place; callers
# discard results that are short of four melds or a pair.


def _add(melds: list[Meld], meld: Meld | None) -> bool:
    if meld is None:
        return False
    melds.append(meld)
    return True


def _build_chanta(counter: TileCounter, rng: random.Random, has_open: bool) -> tuple[list[Meld], Pair | None]:
    exposure = _ExposureBudget(has_open, rng)
    melds: list[Meld] = []
    for tile in _shuffled(rng, HONORS):
        if counter.can_use(tile, 3):
            _add(melds, _triplet_of(counter, tile, exposure.draw()))
            break
    _add(melds, _sequence_at(counter, Suit.man, 1, exposure.draw()))
    _add(melds, _sequence_at(counter, Suit.pin, 7, exposure.draw()))
    if len(melds) < 4:
        for start in (1, 7):
            if _add(melds, _sequence_at(counter, Suit.sou, start, exposure.draw())):
                break
    pair = _first_pair(counter, _shuffled(rng, HONORS)) or _first_pair(counter, _shuffled(rng, TERMINALS))
    return melds, pair


def _build_junchan(counter: TileCounter, rng: random.Random, has_open: bool) -> tuple[list[Meld], Pair | None]:
    exposure = _ExposureBudget(has_open, rng)
    suits = _shuffled(rng, SUITED)
    melds: list[Meld] = []
    for i in range(2):
        _add(melds, _sequence_at(counter, suits[i % 3], 1, exposure.draw()))
    for i in range(2):
        _add(melds, _sequence_at(counter, suits[(i + 1) % 3], 7, exposure.draw()))
    return melds, _first_pair(counter, _shuffled(rng, TERMINALS))


def _build_sanshoku_doujun(
    counter: TileCounter, rng: random.Random, has_open: bool
) -> tuple[list[Meld], Pair | None]:
    exposure = _ExposureBudget(has_open, rng)
    start = rng.randint(1, 7)
    melds: list[Meld] = []
    for suit in SUITED:
        _add(melds, _sequence_at(counter, suit, start, exposure.draw()))
    if len(melds) < 4:
        _add(melds, _sequence_at(counter, rng.choice(SUITED), rng.randint(1, 7), exposure.draw()))
    pair = _first_pair(counter, (make_tile(suit, v) for suit in SUITED for v in range(1, 10)))
    return melds, pair


def _build_ittsu(counter: TileCounter, rng: random.Random, has_open: bool) -> tuple[list[Meld], Pair | None]:
    exposure = _ExposureBudget(has_open, rng)
    suit = rng.choice(SUITED)
    others = [s for s in SUITED if s != suit]
    melds: list[Meld] = []
    for start in (1, 4, 7):
        _add(melds, _sequence_at(counter, suit, start, exposure.draw()))
    if len(melds) < 4:
        _add(melds, _sequence_at(counter, rng.choice(others), rng.randint(1, 7), exposure.draw()))
    pair = _first_pair(counter, (make_tile(s, v) for s in [suit, *others] for v in range(1, 10)))
    return melds, pair


def _build_toitoi(counter: TileCounter, rng: random.Random, has_open: bool) -> tuple[list[Meld], Pair | None]:
    exposure = _ExposureBudget(has_open, rng)
    melds: list[Meld] = []
    for tile in _shuffled(rng, ALL_TILES):
        if len(melds) >= 4:
            break
        if counter.can_use(tile, 3):
            _add(melds, _triplet_of(counter, tile, exposure.draw()))
    return melds, _first_pair(counter, _shuffled(rng, ALL_TILES))


def _build_honitsu(counter: TileCounter, rng: random.Random, has_open: bool) -> tuple[list[Meld], Pair | None]:
    exposure = _ExposureBudget(has_open, rng)
    suit = rng.choice(SUITED)
    melds: list[Meld] = []
    for tile in _shuffled(rng, HONORS):
        if counter.can_use(tile, 3):
            _add(melds, _triplet_of(counter, tile, exposure.draw()))
            break
    while len(melds) < 4:
        start = rng.randint(1, 7)
        if not counter.take(make_sequence(suit, start).tiles):
            break
        melds.append(make_sequence(suit, start, exposure.draw()))
    pair = _first_pair(counter, _shuffled(rng, HONORS))
    if pair is None:
        pair = _first_pair(counter, (make_tile(suit, v) for v in range(1, 10)))
    return melds, pair


def _build_chinitsu(counter: TileCounter, rng: random.Random, has_open: bool) -> tuple[list[Meld], Pair | None]:
    exposure = _ExposureBudget(has_open, rng)
    suit = rng.choice(SUITED)
    melds: list[Meld] = []
    while len(melds) < 4:
        start = rng.randint(1, 7)
        if not counter.take(make_sequence(suit, start).tiles):
            break
        melds.append(make_sequence(suit, start, exposure.draw()))
    return melds, _first_pair(counter, (make_tile(suit, v) for v in range(1, 10)))


def _distinct_melds(
    counter: TileCounter,
    rng: random.Random,
    count: int,
    build: Callable[[Tile], Meld | None],
) -> list[Meld]:
    melds: list[Meld] = []
    used: set[Tile] = set()

    def next_meld() -> Meld | None:
        tile = _random_tile(rng, rng.random() < SHOWCASE_HONOR_RATE)
        if tile in used:
            return None
        meld = build(tile)
        if meld is not None:
            used.add(tile)
        return meld

    while len(melds) < count:
        meld = try_construct(next_meld, SHOWCASE_ATTEMPTS)
        if meld is None:
            break
        melds.append(meld)
    return melds


def _showcase_pair(counter: TileCounter, rng: random.Random) -> Pair | None:
    return try_construct(
        lambda: _claim_pair(counter, _random_tile(rng, rng.random() < SHOWCASE_HONOR_RATE)),
        DORA_ATTEMPTS,
    )


def _build_sanankou(counter: TileCounter, rng: random.Random, has_open: bool) -> tuple[list[Meld], Pair | None]:
    melds = _distinct_melds(counter, rng, 3, lambda tile: _triplet_of(counter, tile))
    # The fourth meld is a sequence so the hand never becomes four concealed triplets.
    if len(melds) == 3:
        sequence = try_construct(
            lambda: _sequence_at(counter, rng.choice(SUITED), rng.randint(1, 7), has_open),
            DORA_ATTEMPTS,
        )
        _add(melds, sequence)
    return melds, _showcase_pair(counter, rng)


def _build_honroutou(counter: TileCounter, rng: random.Random, has_open: bool) -> tuple[list[Meld], Pair | None]:
    exposure = _ExposureBudget(has_open, rng)
    melds: list[Meld] = []
    # At least one honor triplet, otherwise the hand would be all terminals.
    honor = rng.choice(HONORS)
    _add(melds, _triplet_of(counter, honor, exposure.draw()))
    for tile in _shuffled(rng, [t for t in TERMINALS + HONORS if t != honor]):
        if len(melds) >= 4:
            break
        if counter.can_use(tile, 3):
            _add(melds, _triplet_of(counter, tile, exposure.draw()))
    used = {m.tiles[0] for m in melds}
    pair = _first_pair(counter, (t for t in TERMINALS + HONORS if t not in used))
    return melds, pair


def _build_sanshoku_doukou(
    counter: TileCounter, rng: random.Random, has_open: bool
) -> tuple[list[Meld], Pair | None]:
    exposure = _ExposureBudget(has_open, rng)
    value = rng.randint(1, 9)
    melds: list[Meld] = []
    for suit in SUITED:
        _add(melds, _triplet_of(counter, make_tile(suit, value), exposure.draw()))
    if len(melds) == 3:
        sequence = try_construct(
            lambda: _sequence_at(counter, rng.choice(SUITED), rng.randint(1, 7), exposure.draw()),
            DORA_ATTEMPTS,
        )
        _add(melds, sequence)
    return melds, _showcase_pair(counter, rng)


def _build_sankantsu(counter: TileCounter, rng: random.Random, has_open: bool) -> tuple[list[Meld], Pair | None]:
    exposure = _ExposureBudget(has_open, rng)
    melds = _distinct_melds(counter, rng, 3, lambda tile: _quad_of(counter, tile, exposure.draw()))
    if len(melds) == 3:
        sequence = try_construct(
            lambda: _sequence_at(counter, rng.choice(SUITED), rng.randint(1, 7), exposure.draw()),
            DORA_ATTEMPTS,
        )
        _add(melds, sequence)
    return melds, _showcase_pair(counter, rng)


def _build_shousangen(counter: TileCounter, rng: random.Random, has_open: bool) -> tuple[list[Meld], Pair | None]:
    exposure = _ExposureBudget(has_open, rng)
    dragons = _shuffled(rng, DRAGON_VALUES)
    melds: list[Meld] = []
    for value in dragons[:2]:
        _add(melds, _triplet_of(counter, make_tile(Suit.honor, value), exposure.draw()))
    while len(melds) < 4:
        suit, start = rng.choice(SUITED), rng.randint(1, 7)
        if not counter.take(make_sequence(suit, start).tiles):
            break
        melds.append(make_sequence(suit, start, exposure.draw()))
    return melds, _claim_pair(counter, make_tile(Suit.honor, dragons[2]))


def _build_ryanpeikou(counter: TileCounter, rng: random.Random, has_open: bool) -> tuple[list[Meld], Pair | None]:
    # Concealed only, so has_open is ignored.
    first = (rng.choice(SUITED), rng.randint(1, 7))
    second = first
    for _ in range(DORA_ATTEMPTS):
        if second != first:
            break
        second = (rng.choice(SUITED), rng.randint(1, 7))
    melds: list[Meld] = []
    for suit, start in (first, first, second, second):
        _add(melds, _sequence_at(counter, suit, start))
    pair = try_construct(lambda: _claim_pair(counter, _random_tile(rng, False)), DORA_ATTEMPTS)
    return melds, pair


ShowcaseBuilder = Callable[[TileCounter, random.Random, bool], tuple[list[Meld], Pair | None]]

SHOWCASE_BUILDERS: dict[YakuId, ShowcaseBuilder] = {
    YakuId.chanta: _build_chanta,
    YakuId.junchan: _build_junchan,
    YakuId.sanshoku_doujun: _build_sanshoku_doujun,
    YakuId.ittsu: _build_ittsu,
    YakuId.toitoi: _build_toitoi,
    YakuId.honitsu: _build_honitsu,
    YakuId.chinitsu: _build_chinitsu,
    YakuId.sanankou: _build_sanankou,
    YakuId.honroutou: _build_honroutou,
    YakuId.sanshoku_doukou: _build_sanshoku_doukou,
    YakuId.sankantsu: _build_sankantsu,
    YakuId.shousangen: _build_shousangen,
    YakuId.ryanpeikou: _build_ryanpeikou,
}


def wait_from_sequence_position(start: int, position: int) -> WaitType:
    if position == 1:
        return WaitType.kanchan
    if position == 0:
        return WaitType.penchan if start == 7 else WaitType.ryanmen
    return WaitType.penchan if start == 1 else WaitType.ryanmen


def _visible_in_exposed_meld(tile: Tile, melds: list[Meld]) -> bool:
    return any(tile in m.tiles for m in melds if m.is_exposed)


def _pick_winning_tile(
    melds: list[Meld],
    pair: Pair,
    win_type: WinType,
    counter: TileCounter,
    rng: random.Random,
) -> tuple[Tile, WaitType] | None:
    candidates: list[tuple[Tile, WaitType]] = []
    for meld in melds:
        if meld.is_exposed:
            continue
        if meld.kind == MeldKind.shuntsu:
            start = meld.tiles[0].value
            candidates.extend((tile, wait_from_sequence_position(start, pos)) for pos, tile in enumerate(meld.tiles))
        else:
            candidates.append((meld.tiles[0], WaitType.shanpon))
    candidates.append((pair.tile, WaitType.tanki))

    rng.shuffle(candidates)
    for tile, wait_type in candidates:
        if not counter.can_use(tile, 1):
            continue
        if win_type == WinType.ron and _visible_in_exposed_meld(tile, melds):
            continue
        counter.use(tile, 1)
        return tile, wait_type
    return None


def _single_dora_indicator(counter: TileCounter, rng: random.Random) -> Tile:
    def draw() -> Tile | None:
        tile = _random_tile(rng, rng.random() >= DORA_SUITED_RATE)
        if not counter.can_use(tile, 1):
            return None
        counter.use(tile, 1)
        return tile

    tile = try_construct(draw, DORA_ATTEMPTS)
    if tile is not None:
        return tile
    for candidate in ALL_TILES:
        if counter.can_use(candidate, 1):
            counter.use(candidate, 1)
            return candidate
    raise RuntimeError("no tile left for a dora indicator")


def dora_indicator_count(melds: list[Meld], rng: random.Random) -> int:
    if any(m.kind == MeldKind.kantsu for m in melds):
        return 2 if rng.random() < 0.5 else 3
    roll = rng.random()
    if roll < 0.5:
        return 1
    if roll < 0.75:
        return 2
    return 3


def _dora_indicators(counter: TileCounter, melds: list[Meld], rng: random.Random) -> tuple[Tile, ...]:
    count = dora_indicator_count(melds, rng)
    return tuple(_single_dora_indicator(counter, rng) for _ in range(count))


def _is_acceptable(problem: Problem) -> bool:
    result = problem.yaku_result
    return bool(result.yaku_list) and result.total_han < LIMIT_HAN


def _build_problem(
    melds: list[Meld], pair: Pair | None, counter: TileCounter, rng: random.Random
) -> Problem | None:
    if len(melds) != 4 or pair is None:
        return None
    win_type = rng.choice((WinType.tsumo, WinType.ron))
    player_type = PlayerType.oya if rng.random() < DEALER_RATE else PlayerType.ko
    winning = _pick_winning_tile(melds, pair, win_type, counter, rng)
    if winning is None:
        logger.debug("no legal winning tile for %s", [m.tiles[0].code for m in melds])
        return None
    winning_tile, wait_type = winning
    round_wind = rng.choice((1, 2))
    seat_wind = rng.randint(1, 4)
    hand = StandardHand(
        melds=tuple(melds),
        pair=pair,
        win_type=win_type,
        player_type=player_type,
        wait_type=wait_type,
        winning_tile=winning_tile,
        seat_wind=seat_wind,
        round_wind=round_wind,
        dora_indicators=_dora_indicators(counter, melds, rng),
    )
    problem = Problem(hand=hand, yaku_result=compute_yaku(hand))
    if not _is_acceptable(problem):
        logger.debug("rejected hand: yaku=%s han=%d", problem.yaku_result.yaku_ids, problem.han)
        return None
    return problem


def _seven_pairs_problem(counter: TileCounter, rng: random.Random) -> Problem | None:
    pairs: list[Pair] = []
    used: set[Tile] = set()

    def next_pair() -> Pair | None:
        tile = _random_tile(rng, rng.random() < SEVEN_PAIRS_HONOR_RATE)
        if tile in used:
            return None
        pair = _claim_pair(counter, tile)
        if pair is not None:
            used.add(tile)
        return pair

    while len(pairs) < 7:
        pair = try_construct(next_pair, SHOWCASE_ATTEMPTS)
        if pair is None:
            logger.debug("seven pairs dead-end after %d pairs", len(pairs))
            return None
        pairs.append(pair)

    win_type = rng.choice((WinType.tsumo, WinType.ron))
    player_type = PlayerType.oya if rng.random() < DEALER_RATE else PlayerType.ko
    winning_tile = rng.choice(pairs).tile
    round_wind = rng.choice((1, 2))
    seat_wind = rng.randint(1, 4)
    hand = SevenPairsHand(
        pairs=tuple(pairs),
        win_type=win_type,
        player_type=player_type,
        winning_tile=winning_tile,
        seat_wind=seat_wind,
        round_wind=round_wind,
        dora_indicators=_dora_indicators(counter, [], rng),
    )
    problem = Problem(hand=hand, yaku_result=compute_yaku(hand))
    return problem if _is_acceptable(problem) else None


def fallback_problem() -> Problem:
    hand = StandardHand(
        melds=(
            make_sequence(Suit.man, 1),
            make_sequence(Suit.man, 4),
            make_sequence(Suit.pin, 2),
            make_sequence(Suit.sou, 5),
        ),
        pair=make_pair(Suit.sou, 2),
        win_type=WinType.ron,
        player_type=PlayerType.ko,
        wait_type=WaitType.ryanmen,
        winning_tile=make_tile(Suit.man, 4),
        seat_wind=2,
        round_wind=1,
        dora_indicators=(make_tile(Suit.honor, 1),),
    )
    return Problem(hand=hand, yaku_result=compute_yaku(hand))


def _showcase_attempt(
    settings: DifficultySettings, yaku_id: YakuId, rng: random.Random
) -> Problem | None:
    counter = TileCounter()
    if yaku_id == YakuId.chiitoitsu:
        return _seven_pairs_problem(counter, rng)
    has_open = rng.random() < settings.open_rate
    builder = SHOWCASE_BUILDERS.get(yaku_id)
    if builder is None:
        melds, pair = _standard_hand(counter, rng, settings, has_open)
    else:
        melds, pair = builder(counter, rng, has_open)
    problem = _build_problem(melds, pair, counter, rng)
    if problem is None or yaku_id not in problem.yaku_result.yaku_ids:
        return None
    return problem


def _showcase_problem(difficulty: Difficulty, yaku_id: YakuId, rng: random.Random) -> Problem | None:
    settings = DIFFICULTY_SETTINGS[difficulty]
    problem = try_construct(lambda: _showcase_attempt(settings, yaku_id, rng), SHOWCASE_ATTEMPTS)
    if problem is None:
        logger.debug("showcase for %s gave up after %d attempts", yaku_id.value, SHOWCASE_ATTEMPTS)
    return problem


def _generate_once(difficulty: Difficulty, rng: random.Random) -> Problem | None:
    settings = DIFFICULTY_SETTINGS[difficulty]

    if rng.random() < SEVEN_PAIRS_RATE:
        problem = _seven_pairs_problem(TileCounter(), rng)
        if problem is not None:
            return problem

    for yaku_id, rate in RARE_YAKU_RATES:
        if rng.random() < rate:
            problem = _showcase_problem(difficulty, yaku_id, rng)
            if problem is not None:
                return problem

    counter = TileCounter()
    has_open = rng.random() < settings.open_rate
    melds, pair = _standard_hand(counter, rng, settings, has_open)
    return _build_problem(melds, pair, counter, rng)


def generate_problem(difficulty: Difficulty | str, rng: random.Random | None = None) -> Problem:
    """Random scoring problem with at least one yaku and fewer than 13 han.

    Gives up after a bounded number of whole-hand attempts and returns the fixed
    fallback problem instead; never raises for an unlucky draw.
    """
    difficulty = Difficulty(difficulty)
    rng = rng if rng is not None else random.Random()
    problem = try_construct(lambda: _generate_once(difficulty, rng), PROBLEM_ATTEMPTS)
    if problem is None:
        logger.info("generation exhausted %d attempts, using fallback problem", PROBLEM_ATTEMPTS)
        return fallback_problem()
    return problem


def generate_problem_with_target_yaku(
    difficulty: Difficulty | str,
    yaku_id: YakuId | str,
    rng: random.Random | None = None,
) -> Problem:
    difficulty = Difficulty(difficulty)
    yaku_id = YakuId(yaku_id)
    rng = rng if rng is not None else random.Random()
    problem = _showcase_problem(difficulty, yaku_id, rng)
    if problem is None:
        logger.info("no %s hand found, generating an unconstrained problem", yaku_id.value)
        return generate_problem(difficulty, rng)
    return problem
