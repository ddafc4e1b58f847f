from __future__ import annotations

import pytest

from gatherer_ingest.cards import Color, Language, RawCardBundle
from gatherer_ingest.engine.parser import (
    DEFAULT_PREFIX,
    CardParser,
    candidate_prefixes,
    parse_power_toughness,
)
from gatherer_ingest.errors import CardParseError


def _parse(card_bundle, card_page, identifier: int = 1, **page_kwargs):
    bundle = card_bundle(identifier=identifier, page=card_page(**page_kwargs))
    return CardParser().parse(bundle)


# ------------------------------------------------------------------
# Power / toughness cell layouts


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ("3 / 3", ("3", "3")),
        ("*/*", ("*", "*")),
        ("1+* / 2+*", ("1+*", "2+*")),
        ("{1/2} / {1/2}", ("½", "½")),
        ("{^2} / {^2}", ("²", "²")),
        ("(Hand Modifier: +0 , Life Modifier: +6)", ("0", "6")),
        ("(Hand Modifier:\u00a0-1\u00a0,\u00a0Life Modifier:\u00a0+3)", ("1", "3")),
        ("(Hand Modifier: -2\u00a0, Life Modifier: +4)\u00a0", ("2", "4")),
        ("(Hand Modifier: +1 ,\u00a0Life Modifier: -5)\u00a0\u00a0", ("1", "5")),
        ("3", ("3", None)),
    ],
)
def test_parse_power_toughness_layouts(value: str, expected: tuple) -> None:
    assert parse_power_toughness(value) == expected


def test_candidate_prefixes_default_first() -> None:
    prefixes = candidate_prefixes()
    assert prefixes[0] == DEFAULT_PREFIX
    assert prefixes[1] == f"{DEFAULT_PREFIX}ctl00_"
    assert prefixes[-1] == f"{DEFAULT_PREFIX}ctl09_"
    assert len(prefixes) == 11


# ------------------------------------------------------------------
# Mana cost and colours


def test_phyrexian_cost(card_bundle, card_page) -> None:
    card = _parse(card_bundle, card_page, mana=("3", "Phyrexian Red", "Phyrexian Red"), type_line="Instant")
    assert card.mana_cost_string == "3RPRP"
    assert card.converted_cost == 5
    assert card.colors_string == "R"


def test_multicolour_cost(card_bundle, card_page) -> None:
    card = _parse(card_bundle, card_page, mana=("3", "Green", "Blue"), type_line="Sorcery")
    assert card.mana_cost_string == "3GU"
    assert card.colors == [Color.GREEN, Color.BLUE]


def test_hybrid_generic_cost(card_bundle, card_page) -> None:
    card = _parse(
        card_bundle,
        card_page,
        mana=("Two or White", "Two or White", "Two or White"),
        type_line="Enchantment",
    )
    assert card.mana_cost_string == "{2/W}{2/W}{2/W}"
    assert card.converted_cost == 6


def test_double_coloured_cost(card_bundle, card_page) -> None:
    card = _parse(card_bundle, card_page, mana=("5", "White", "White"))
    assert card.mana_cost_string == "5WW"
    assert card.converted_cost == 7


def test_land_without_mana_row(card_bundle, card_page) -> None:
    card = _parse(card_bundle, card_page, name="Island", mana=(), type_line="Basic Land  — Island")
    assert card.mana_cost_string == "0"
    assert card.converted_cost == 0
    assert card.colors == [Color.COLORLESS]
    assert card.type_line == "Basic Land — Island"


# ------------------------------------------------------------------
# Text fields


def test_rules_text_symbols_become_braced(card_bundle, card_page) -> None:
    card = _parse(
        card_bundle,
        card_page,
        name="Avatar of Discord",
        mana=("Black or Red", "Black or Red", "Black or Red"),
        text_blocks=(
            '(<img alt="Black or Red"> can be paid with either <img alt="Black"> or <img alt="Red">.)',
            "Flying",
            "When Avatar of Discord enters the battlefield, sacrifice it unless you discard two cards.",
        ),
    )
    assert card.rules_text == (
        "({B/R} can be paid with either {B} or {R}.) Flying When Avatar of Discord enters "
        "the battlefield, sacrifice it unless you discard two cards."
    )


def test_rules_text_tap_and_variable_symbols(card_bundle, card_page) -> None:
    card = _parse(
        card_bundle,
        card_page,
        name="Clockwork Beast",
        text_blocks=('<img alt="Variable Colorless">, <img alt="Tap">: Put up to X +1/+0 counters.',),
    )
    assert card.rules_text.startswith("{X}, {T}: ")


def test_rules_text_numeric_symbol(card_bundle, card_page) -> None:
    card = _parse(card_bundle, card_page, text_blocks=('<img alt="2">: Regenerate this creature.',))
    assert card.rules_text == "{2}: Regenerate this creature."


def test_multiline_flavor_text(card_bundle, card_page) -> None:
    card = _parse(
        card_bundle,
        card_page,
        flavor_blocks=('"The bear is the forest\'s oldest friend."', "—Elvish saying"),
    )
    assert card.flavor_text == '"The bear is the forest\'s oldest friend."\n—Elvish saying'


def test_missing_optional_rows_are_none(card_bundle, card_page) -> None:
    card = _parse(card_bundle, card_page, rarity=None, artist_html=None, number=None)
    assert card.rarity is None
    assert card.artist is None
    assert card.collector_number is None
    assert card.flavor_text is None
    assert card.rules_text is None
    assert card.watermark is None


def test_artist_without_link_and_collector_suffix(card_bundle, card_page) -> None:
    card = _parse(card_bundle, card_page, name="Huntmaster of the Fells", number="140a", artist_html="(none)")
    assert card.collector_number == "140a"
    assert card.artist == "(none)"


def test_watermark_and_rarity(card_bundle, card_page) -> None:
    card = _parse(card_bundle, card_page, watermark="Simic", rarity="Mythic Rare")
    assert card.watermark == "Simic"
    assert card.rarity == "Mythic Rare"
    assert card.expansion == "Limited Edition Alpha"


# ------------------------------------------------------------------
# Power, toughness and loyalty


def test_creature_power_toughness(card_bundle, card_page) -> None:
    card = _parse(card_bundle, card_page, pt="2 / 2")
    assert (card.power, card.toughness, card.loyalty) == ("2", "2", None)


def test_vanguard_modifiers(card_bundle, card_page) -> None:
    card = _parse(
        card_bundle,
        card_page,
        name="Barrin",
        mana=(),
        type_line="Vanguard",
        pt="(Hand Modifier: +0 , Life Modifier: +6)",
        pt_label="Hand/Life:",
    )
    assert card.power == "0"
    assert card.toughness == "6"


def test_vanguard_modifiers_with_non_breaking_spaces(card_bundle, card_page) -> None:
    card = _parse(
        card_bundle,
        card_page,
        name="Barrin",
        type_line="Vanguard",
        pt="(Hand Modifier: +1&nbsp;,&nbsp;Life Modifier: -1)&nbsp;",
        pt_label="Hand/Life:",
    )
    assert card.power == "1"
    assert card.toughness == "1"


def test_planeswalker_loyalty(card_bundle, card_page) -> None:
    card = _parse(
        card_bundle,
        card_page,
        name="Jace Beleren",
        mana=("1", "Blue", "Blue"),
        type_line="Planeswalker  — Jace",
        pt="3",
        pt_label="Loyalty:",
    )
    assert card.power == "3"
    assert card.loyalty == "3"
    assert card.toughness is None


# ------------------------------------------------------------------
# Missing cards, variants and structural failures


def test_empty_detail_page_is_no_card() -> None:
    assert CardParser().parse(RawCardBundle(identifier=5)) is None


def test_page_without_name_row_is_no_card(card_bundle) -> None:
    bundle = card_bundle(page="<html><body><p>Your search returned zero results.</p></body></html>")
    parser = CardParser()
    assert parser.parse(bundle) is None
    assert parser.prefix is None


def test_variant_card_uses_alternate_prefix(card_bundle, card_page) -> None:
    prefix = f"{DEFAULT_PREFIX}ctl02_"
    bundle = card_bundle(page=card_page(name="Fire", prefix=prefix, pt="1 / 1"))
    parser = CardParser()
    card = parser.parse(bundle)
    assert card is not None
    assert card.name == "Fire"
    assert card.power == "1"
    assert parser.prefix == prefix


def test_prefix_is_reset_between_documents(card_bundle, card_page) -> None:
    parser = CardParser()
    alternate = card_bundle(page=card_page(prefix=f"{DEFAULT_PREFIX}ctl00_"))
    assert parser.parse(alternate) is not None
    default = card_bundle(identifier=2, page=card_page(name="Shock"))
    card = parser.parse(default)
    assert card.name == "Shock"
    assert parser.prefix == DEFAULT_PREFIX


def test_missing_type_row_raises(card_bundle, card_page) -> None:
    with pytest.raises(CardParseError) as excinfo:
        _parse(card_bundle, card_page, identifier=42, type_line=None)
    assert excinfo.value.identifier == 42
    assert excinfo.value.field == "typeRow"


def test_missing_expansion_raises(card_bundle, card_page) -> None:
    with pytest.raises(CardParseError):
        _parse(card_bundle, card_page, expansion=None)


# ------------------------------------------------------------------
# Full page


def test_parses_fixture_page_end_to_end(fixture_bytes) -> None:
    bundle = RawCardBundle(
        identifier=230076,
        detail=fixture_bytes("act_of_aggression.html"),
        image=b"\x89PNG",
        language=fixture_bytes("act_of_aggression_languages.html"),
    )
    card = CardParser().parse(bundle)
    assert card is not None
    assert card.identifier == 230076
    assert card.name == "Act of Aggression"
    assert card.type_line == "Instant"
    assert card.mana_cost_string == "3RPRP"
    assert card.converted_cost == 5
    assert card.colors_string == "R"
    assert card.rules_text == (
        "({RP} can be paid with either {R} or 2 life.) Gain control of target creature an "
        "opponent controls until end of turn. Untap that creature. It gains haste until end of turn."
    )
    assert card.expansion == "New Phyrexia"
    assert card.rarity == "Uncommon"
    assert card.collector_number == "78"
    assert card.artist == "Whit Brachna"
    assert card.power is None
    assert card.language is Language.ENGLISH
    assert card.image == b"\x89PNG"
