import random

import pytest

from tensu_drill import problem_generator
from tensu_drill.problem_generator import (
    DIFFICULTY_SETTINGS,
    SHOWCASE_BUILDERS,
    TileCounter,
    dora_indicator_count,
    fallback_problem,
    generate_problem,
    generate_problem_with_target_yaku,
    try_construct,
    wait_from_sequence_position,
)
from tensu_drill.schemas import Difficulty, MeldKind, SevenPairsHand, StandardHand, Suit, WaitType, YakuId
from tensu_drill.tiles import make_quad, make_sequence, make_tile
from tensu_drill.validators import validate_hand
from tensu_drill.yaku_calculation import compute_yaku


def test_tile_counter_caps_at_four_copies():
    counter = TileCounter()
    tile = make_tile(Suit.pin, 5)
    assert counter.can_use(tile, 4)
    counter.use(tile, 3)
    assert counter.can_use(tile, 1)
    assert not counter.can_use(tile, 2)
    assert counter.count(tile) == 3


def test_tile_counter_take_is_all_or_nothing():
    counter = TileCounter()
    counter.use(make_tile(Suit.man, 3), 4)
    assert not counter.take(make_sequence(Suit.man, 1).tiles)
    assert counter.count(make_tile(Suit.man, 1)) == 0
    assert counter.take(make_sequence(Suit.man, 4).tiles)
    assert counter.count(make_tile(Suit.man, 5)) == 1


def test_try_construct_stops_at_first_value():
    calls = []

    def build():
        calls.append(1)
        return "ok" if len(calls) == 3 else None

    assert try_construct(build, 10) == "ok"
    assert len(calls) == 3


def test_try_construct_gives_up():
    calls = []
    assert try_construct(lambda: calls.append(1), 5) is None
    assert len(calls) == 5


@pytest.mark.parametrize(
    ("start", "position", "wait_type"),
    [
        (3, 1, WaitType.kanchan),
        (3, 0, WaitType.ryanmen),
        (7, 0, WaitType.penchan),
        (3, 2, WaitType.ryanmen),
        (1, 2, WaitType.penchan),
        (1, 0, WaitType.ryanmen),
    ],
)
def test_wait_from_sequence_position(start, position, wait_type):
    assert wait_from_sequence_position(start, position) == wait_type


def test_dora_indicator_count_with_quad():
    rng = random.Random(3)
    melds = [make_quad(Suit.sou, 4)]
    counts = {dora_indicator_count(melds, rng) for _ in range(200)}
    assert counts == {2, 3}


def test_dora_indicator_count_without_quad():
    rng = random.Random(3)
    counts = {dora_indicator_count([], rng) for _ in range(200)}
    assert counts == {1, 2, 3}


def test_beginner_settings_have_no_quads():
    assert DIFFICULTY_SETTINGS[Difficulty.beginner].quad_rate == 0


def test_generated_problems_always_have_yaku_and_stay_below_yakuman():
    rng = random.Random(20240601)
    difficulties = list(Difficulty)
    for i in range(1000):
        problem = generate_problem(difficulties[i % 3], rng)
        result = compute_yaku(problem.hand)
        assert len(result.yaku_list) >= 1
        assert result.total_han < 13
        assert problem.yaku_result == result


def test_generated_hands_are_well_formed():
    rng = random.Random(7)
    for difficulty in Difficulty:
        for _ in range(150):
            problem = generate_problem(difficulty, rng)
            validate_hand(problem.hand)
            if isinstance(problem.hand, StandardHand):
                assert sum(1 for m in problem.hand.melds if m.is_exposed) <= 2


def test_ron_winning_tile_is_not_visible_in_exposed_melds():
    rng = random.Random(11)
    for _ in range(300):
        hand = generate_problem(Difficulty.advanced, rng).hand
        if not isinstance(hand, StandardHand) or hand.win_type != "ron":
            continue
        assert all(hand.winning_tile not in m.tiles for m in hand.melds if m.is_exposed)


def test_beginner_hands_contain_no_quads():
    rng = random.Random(5)
    for _ in range(200):
        hand = generate_problem(Difficulty.beginner, rng).hand
        if isinstance(hand, StandardHand) and any(m.kind == MeldKind.kantsu for m in hand.melds):
            # Only the three-quads showcase places quads regardless of difficulty.
            assert YakuId.sankantsu in compute_yaku(hand).yaku_ids


def test_same_seed_gives_same_problem():
    first = generate_problem(Difficulty.intermediate, random.Random(42))
    second = generate_problem(Difficulty.intermediate, random.Random(42))
    assert first.model_dump() == second.model_dump()


def test_generate_problem_accepts_plain_strings():
    problem = generate_problem("advanced", random.Random(1))
    assert problem.yaku_result.yaku_list


@pytest.mark.parametrize("yaku_id", sorted(SHOWCASE_BUILDERS, key=lambda y: y.value))
def test_target_yaku_showcase(yaku_id):
    problem = generate_problem_with_target_yaku(Difficulty.advanced, yaku_id, random.Random(99))
    assert yaku_id in problem.yaku_result.yaku_ids
    validate_hand(problem.hand)


def test_target_seven_pairs():
    problem = generate_problem_with_target_yaku("beginner", "chiitoitsu", random.Random(8))
    assert isinstance(problem.hand, SevenPairsHand)
    assert len({p.tile for p in problem.hand.pairs}) == 7
    assert problem.hand.winning_tile in [p.tile for p in problem.hand.pairs]
    assert problem.hand.wait_type == WaitType.tanki


def test_target_yaku_without_constructor_still_returns_valid_problem():
    problem = generate_problem_with_target_yaku(Difficulty.beginner, YakuId.riichi, random.Random(4))
    assert problem.yaku_result.yaku_list
    assert problem.han < 13


def test_fallback_problem_is_a_pinfu_ron():
    problem = fallback_problem()
    assert problem.yaku_result.yaku_ids == {YakuId.riichi, YakuId.pinfu}
    assert problem.han == 2
    validate_hand(problem.hand)


def test_generate_problem_falls_back_after_retries(monkeypatch):
    calls = []

    def always_fail(difficulty, rng):
        calls.append(difficulty)
        return None

    monkeypatch.setattr(problem_generator, "_generate_once", always_fail)
    problem = generate_problem(Difficulty.beginner, random.Random(0))
    assert len(calls) == problem_generator.PROBLEM_ATTEMPTS
    assert problem.model_dump() == fallback_problem().model_dump()
