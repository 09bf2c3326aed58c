from __future__ import annotations

from tensu_drill.schemas import YakuDefinition, YakuId

# han_open=None marks a concealed-only yaku.
YAKU_DEFINITIONS: list[YakuDefinition] = [
    # 1翻役
    YakuDefinition(
        id=YakuId.riichi,
        name="リーチ",
        han=1,
        han_open=None,
        description="鳴いていない状態でテンパイし、1000点を供託して宣言すると成立。宣言後は手牌を変えられない。",
        example_tiles="123m456p789s234s11z",
        example_note="門前テンパイ→リーチ宣言",
    ),
    YakuDefinition(
        id=YakuId.menzen_tsumo,
        name="門前清自摸和",
        han=1,
        han_open=None,
        description="鳴かずに自力でツモあがりすると成立。ロンあがりでは成立しない。",
        example_tiles="123m456p789s234s11z",
        example_note="門前でツモあがり",
    ),
    YakuDefinition(
        id=YakuId.tanyao,
        name="断么九",
        han=1,
        han_open=1,
        description="1・9・字牌を使わず、2〜8の数牌のみで手を作ると成立。",
        example_tiles="234m345p678s567p55s",
        example_note="中張牌（2〜8）のみ",
    ),
    YakuDefinition(
        id=YakuId.pinfu,
        name="平和",
        han=1,
        han_open=None,
        description="順子4つ＋役牌以外の雀頭＋両面待ちで構成。符がつかない最も基本的な形。",
        example_tiles="123m456p789s234s44p",
        example_note="順子×4+両面待ち",
    ),
    YakuDefinition(
        id=YakuId.iipeikou,
        name="一盃口",
        han=1,
        han_open=None,
        description="同じ種類で同じ並びの順子が2組あると成立。例：123+123。",
        example_tiles="112233m456p789s11z",
        example_note="同じ順子が2組",
    ),
    YakuDefinition(
        id=YakuId.yakuhai_haku,
        name="役牌（白）",
        han=1,
        han_open=1,
        description="白を3枚揃えて刻子・槓子にすると成立。ポンしてもOK。",
        example_tiles="666z",
        example_note="白の刻子",
    ),
    YakuDefinition(
        id=YakuId.yakuhai_hatsu,
        name="役牌（發）",
        han=1,
        han_open=1,
        description="發を3枚揃えて刻子・槓子にすると成立。ポンしてもOK。",
        example_tiles="555z",
        example_note="發の刻子",
    ),
    YakuDefinition(
        id=YakuId.yakuhai_chun,
        name="役牌（中）",
        han=1,
        han_open=1,
        description="中を3枚揃えて刻子・槓子にすると成立。ポンしてもOK。",
        example_tiles="777z",
        example_note="中の刻子",
    ),
    YakuDefinition(
        id=YakuId.yakuhai_bakaze,
        name="役牌（場風）",
        han=1,
        han_open=1,
        description="場風牌（東場なら東、南場なら南）を3枚揃えると成立。",
        example_tiles="111z",
        example_note="東場なら東の刻子",
    ),
    YakuDefinition(
        id=YakuId.yakuhai_jikaze,
        name="役牌（自風）",
        han=1,
        han_open=1,
        description="自風牌（東家なら東、南家なら南など）を3枚揃えると成立。",
        example_tiles="222z",
        example_note="南家なら南の刻子",
    ),
    # 2翻役
    YakuDefinition(
        id=YakuId.sanshoku_doujun,
        name="三色同順",
        han=2,
        han_open=1,
        description="萬子・筒子・索子で同じ数字の順子を揃える。例：123m+123p+123s。",
        example_tiles="123m123p123s456m11z",
        example_note="3色で同じ順子",
    ),
    YakuDefinition(
        id=YakuId.ittsu,
        name="一気通貫",
        han=2,
        han_open=1,
        description="同じ種類の数牌で123・456・789の順子を全て揃えると成立。",
        example_tiles="123456789m234p11z",
        example_note="1〜9を順子で",
    ),
    YakuDefinition(
        id=YakuId.chanta,
        name="混全帯么九",
        han=2,
        han_open=1,
        description="全ての面子と雀頭に1・9・字牌のいずれかが含まれていると成立。",
        example_tiles="123m789p111z789s77z",
        example_note="全てに1,9,字牌",
    ),
    YakuDefinition(
        id=YakuId.toitoi,
        name="対々和",
        han=2,
        han_open=2,
        description="4面子を全て刻子（3枚同じ）で揃えると成立。順子が1つもない形。",
        example_tiles="111m555p999s333m11z",
        example_note="刻子×4",
    ),
    YakuDefinition(
        id=YakuId.sanankou,
        name="三暗刻",
        han=2,
        han_open=2,
        description="自力で揃えた暗刻が3組あると成立。ポンした刻子やシャンポン待ちのロンで完成した刻子はカウントしない。",
        example_tiles="111m555p999s234m11z",
        example_note="暗刻×3",
    ),
    YakuDefinition(
        id=YakuId.sanshoku_doukou,
        name="三色同刻",
        han=2,
        han_open=2,
        description="萬子・筒子・索子で同じ数字の刻子を揃える。例：111m+111p+111s。",
        example_tiles="111m111p111s234m11z",
        example_note="3色で同じ刻子",
    ),
    YakuDefinition(
        id=YakuId.sankantsu,
        name="三槓子",
        han=2,
        han_open=2,
        description="カンを3回して槓子を3組作ると成立。暗槓でも明槓でもOK。",
        example_tiles="1111m2222p3333s11z",
        example_note="槓子×3",
    ),
    YakuDefinition(
        id=YakuId.honroutou,
        name="混老頭",
        han=2,
        han_open=2,
        description="1・9・字牌のみで構成。必ず対々和か七対子と複合する。",
        example_tiles="111m999p111s999m11z",
        example_note="1,9,字牌のみ",
    ),
    YakuDefinition(
        id=YakuId.shousangen,
        name="小三元",
        han=2,
        han_open=2,
        description="白・發・中のうち2つを刻子、1つを雀頭にする。役牌と複合で実質4翻。",
        example_tiles="555z666z77z234m11p",
        example_note="三元牌2刻子+1雀頭",
    ),
    YakuDefinition(
        id=YakuId.chiitoitsu,
        name="七対子",
        han=2,
        han_open=None,
        description="7組の対子（2枚ずつ）で構成する特殊な形。同じ牌4枚は2対子にできない。",
        example_tiles="1199m2288p1177s11z",
        example_note="対子×7",
    ),
    # 3翻役
    YakuDefinition(
        id=YakuId.honitsu,
        name="混一色",
        han=3,
        han_open=2,
        description="1種類の数牌と字牌のみで構成。例：萬子と字牌だけで手を作る。",
        example_tiles="123456789m111z11z",
        example_note="1種の数牌+字牌",
    ),
    YakuDefinition(
        id=YakuId.junchan,
        name="純全帯么九",
        han=3,
        han_open=2,
        description="全ての面子と雀頭に1か9を含む。チャンタと違い字牌は使えない。",
        example_tiles="123m789p111s789m99s",
        example_note="全てに1か9",
    ),
    YakuDefinition(
        id=YakuId.ryanpeikou,
        name="二盃口",
        han=3,
        han_open=None,
        description="一盃口が2組ある形。例：112233m+445566p。",
        example_tiles="112233m445566p11z",
        example_note="一盃口×2",
    ),
    # 6翻役
    YakuDefinition(
        id=YakuId.chinitsu,
        name="清一色",
        han=6,
        han_open=5,
        description="1種類の数牌のみで構成。字牌も使えない。読みが難しく高得点。",
        example_tiles="11123456789m99m",
        example_note="1種の数牌のみ",
    ),
]

_BY_ID: dict[YakuId, YakuDefinition] = {d.id: d for d in YAKU_DEFINITIONS}


def get_yaku_definition(yaku_id: YakuId | str) -> YakuDefinition:
    return _BY_ID[YakuId(yaku_id)]


def yaku_by_han() -> dict[int, list[YakuDefinition]]:
    grouped: dict[int, list[YakuDefinition]] = {}
    for definition in YAKU_DEFINITIONS:
        grouped.setdefault(definition.han, []).append(definition)
    return grouped
