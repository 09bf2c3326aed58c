from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Annotated, Literal, Union
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, conint, model_validator


class Suit(str, Enum):
    man = "man"
    pin = "pin"
    sou = "sou"
    honor = "honor"


class HonorKind(str, Enum):
    ton = "ton"
    nan = "nan"
    sha = "sha"
    pei = "pei"
    hatsu = "hatsu"
    haku = "haku"
    chun = "chun"


# value -> honor kind (5=發, 6=白, 7=中)
VALUE_TO_HONOR: dict[int, HonorKind] = {
    1: HonorKind.ton,
    2: HonorKind.nan,
    3: HonorKind.sha,
    4: HonorKind.pei,
    5: HonorKind.hatsu,
    6: HonorKind.haku,
    7: HonorKind.chun,
}


class MeldKind(str, Enum):
    shuntsu = "shuntsu"
    koutsu = "koutsu"
    kantsu = "kantsu"


class WaitType(str, Enum):
    ryanmen = "ryanmen"
    kanchan = "kanchan"
    penchan = "penchan"
    shanpon = "shanpon"
    tanki = "tanki"


class WinType(str, Enum):
    tsumo = "tsumo"
    ron = "ron"


class PlayerType(str, Enum):
    oya = "oya"
    ko = "ko"


class Difficulty(str, Enum):
    beginner = "beginner"
    intermediate = "intermediate"
    advanced = "advanced"


class YakuId(str, Enum):
    riichi = "riichi"
    menzen_tsumo = "menzen_tsumo"
    tanyao = "tanyao"
    pinfu = "pinfu"
    iipeikou = "iipeikou"
    yakuhai_haku = "yakuhai_haku"
    yakuhai_hatsu = "yakuhai_hatsu"
    yakuhai_chun = "yakuhai_chun"
    yakuhai_bakaze = "yakuhai_bakaze"
    yakuhai_jikaze = "yakuhai_jikaze"
    sanshoku_doujun = "sanshoku_doujun"
    ittsu = "ittsu"
    chanta = "chanta"
    toitoi = "toitoi"
    sanankou = "sanankou"
    sanshoku_doukou = "sanshoku_doukou"
    sankantsu = "sankantsu"
    honroutou = "honroutou"
    shousangen = "shousangen"
    chiitoitsu = "chiitoitsu"
    honitsu = "honitsu"
    junchan = "junchan"
    ryanpeikou = "ryanpeikou"
    chinitsu = "chinitsu"


class LimitName(str, Enum):
    mangan = "mangan"
    haneman = "haneman"
    baiman = "baiman"
    sanbaiman = "sanbaiman"
    yakuman = "yakuman"


class Tile(BaseModel):
    model_config = ConfigDict(frozen=True)

    suit: Suit
    value: conint(ge=1, le=9)

    @model_validator(mode="after")
    def _check_honor_range(self) -> Tile:
        if self.suit == Suit.honor and self.value > 7:
            raise ValueError(f"honor tile value must be 1-7, got {self.value}")
        return self

    @property
    def honor_kind(self) -> HonorKind | None:
        if self.suit != Suit.honor:
            return None
        return VALUE_TO_HONOR[self.value]

    @property
    def code(self) -> str:
        letter = "z" if self.suit == Suit.honor else self.suit.value[0]
        return f"{self.value}{letter}"


class Meld(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: MeldKind
    tiles: tuple[Tile, ...]
    is_exposed: bool = False

    @model_validator(mode="after")
    def _check_shape(self) -> Meld:
        first = self.tiles[0] if self.tiles else None
        if self.kind == MeldKind.shuntsu:
            if len(self.tiles) != 3:
                raise ValueError("shuntsu must contain exactly 3 tiles")
            if first.suit == Suit.honor:
                raise ValueError("shuntsu cannot be made of honor tiles")
            if any(t.suit != first.suit or t.value != first.value + i for i, t in enumerate(self.tiles)):
                raise ValueError("shuntsu tiles must be consecutive in one suit")
            return self
        expected = 3 if self.kind == MeldKind.koutsu else 4
        if len(self.tiles) != expected:
            raise ValueError(f"{self.kind.value} must contain exactly {expected} tiles")
        if any(t != first for t in self.tiles):
            raise ValueError(f"{self.kind.value} tiles must be identical")
        return self

    @property
    def is_triplet_like(self) -> bool:
        return self.kind in {MeldKind.koutsu, MeldKind.kantsu}


class Pair(BaseModel):
    model_config = ConfigDict(frozen=True)

    tiles: tuple[Tile, Tile]

    @model_validator(mode="after")
    def _check_identical(self) -> Pair:
        if self.tiles[0] != self.tiles[1]:
            raise ValueError("pair tiles must be identical")
        return self

    @property
    def tile(self) -> Tile:
        return self.tiles[0]


class _HandBase(BaseModel):
    model_config = ConfigDict(frozen=True)

    win_type: WinType
    player_type: PlayerType
    wait_type: WaitType
    winning_tile: Tile
    seat_wind: conint(ge=1, le=4)
    round_wind: conint(ge=1, le=4)
    dora_indicators: tuple[Tile, ...] = ()


class StandardHand(_HandBase):
    shape: Literal["standard"] = "standard"
    melds: tuple[Meld, Meld, Meld, Meld]
    pair: Pair

    @property
    def is_concealed(self) -> bool:
        return not any(m.is_exposed for m in self.melds)

    def all_tiles(self) -> list[Tile]:
        tiles = [t for m in self.melds for t in m.tiles]
        tiles.extend(self.pair.tiles)
        return tiles


class SevenPairsHand(_HandBase):
    shape: Literal["seven_pairs"] = "seven_pairs"
    wait_type: WaitType = WaitType.tanki
    pairs: tuple[Pair, Pair, Pair, Pair, Pair, Pair, Pair]

    @model_validator(mode="after")
    def _check_tanki(self) -> SevenPairsHand:
        if self.wait_type != WaitType.tanki:
            raise ValueError("seven pairs hands always wait on a single tile (tanki)")
        return self

    @property
    def is_concealed(self) -> bool:
        return True

    def all_tiles(self) -> list[Tile]:
        return [t for p in self.pairs for t in p.tiles]


Hand = Annotated[Union[StandardHand, SevenPairsHand], Field(discriminator="shape")]


class MeldFu(BaseModel):
    meld: Meld
    fu: int


class FuBreakdown(BaseModel):
    base: int = 20
    menzen_ron: int = 0
    tsumo: int = 0
    meld_fu: list[MeldFu] = Field(default_factory=list)
    pair_fu: int = 0
    wait_fu: int = 0
    subtotal: int = 0
    total: int = 0


class YakuDefinition(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: YakuId
    name: str
    han: int
    han_open: int | None
    description: str
    example_tiles: str | None = None
    example_note: str | None = None


class JudgedYaku(BaseModel):
    id: YakuId
    han: int


class YakuResult(BaseModel):
    yaku_list: list[JudgedYaku] = Field(default_factory=list)
    total_han: int = 0
    dora_count: int = 0

    @property
    def yaku_ids(self) -> set[YakuId]:
        return {y.id for y in self.yaku_list}


class Points(BaseModel):
    ron: int = 0
    tsumo_non_dealer_pay: int = 0
    tsumo_dealer_pay: int = 0


class ScoreResult(BaseModel):
    fu: int
    han: int
    base_points: int
    points: Points
    limit_name: LimitName | None = None


class Problem(BaseModel):
    hand: Hand
    yaku_result: YakuResult

    @property
    def han(self) -> int:
        return self.yaku_result.total_han


class ProblemRequest(BaseModel):
    difficulty: Difficulty | None = None
    target_yaku: YakuId | None = None


class ProblemResponse(BaseModel):
    problem_id: UUID
    status: Literal["ok"]
    hand: Hand
    notation: str
    wait_name: str
    seat_wind_name: str
    round_wind_name: str
    expires_at: datetime


class SolutionResponse(BaseModel):
    problem_id: UUID
    yaku_result: YakuResult
    fu: FuBreakdown
    fu_explanation: list[str] = Field(default_factory=list)
    score: ScoreResult
    score_label: str
    score_answer: int
    tsumo_total: int | None = None


class AnswerRequest(BaseModel):
    yaku_ids: list[YakuId] = Field(default_factory=list)
    dora_count: conint(ge=0) = 0
    fu: int | None = None
    score: int | None = None


class StepCheck(BaseModel):
    submitted: bool
    correct: bool


class AnswerResponse(BaseModel):
    problem_id: UUID
    yaku: StepCheck
    fu: StepCheck
    score: StepCheck
    all_correct: bool
    attempts: int
    solved: bool
    expected: SolutionResponse


class ScoreRequest(BaseModel):
    hand: Hand


class ScoreResponse(BaseModel):
    status: Literal["ok"]
    yaku_result: YakuResult
    fu: FuBreakdown
    score: ScoreResult
    score_label: str


class YakuListResponse(BaseModel):
    yaku: list[YakuDefinition]
    by_han: dict[int, list[YakuId]] = Field(default_factory=dict)
