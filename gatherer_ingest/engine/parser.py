"""Turn a fetched card detail page into a ``CardRecord``."""

from __future__ import annotations

import re
from typing import Any

import structlog
from selectolax.parser import HTMLParser, Node

from ..cards import CardRecord, Language, Mana, RawCardBundle
from ..errors import CardParseError
from .language import resolve_language
from .symbols import decode_mana_label, is_recognised

DEFAULT_PREFIX = "ctl00_ctl00_ctl00_MainContent_SubContent_SubContent_"
ALTERNATE_PREFIX_COUNT = 10

HALF_GLYPH = ("{1/2}", "½")
SQUARED_GLYPH = ("{^2}", "²")
NBSP = "\u00a0"

# ASCII whitespace only; non-breaking spaces survive for the Vanguard layout
_WHITESPACE = re.compile(r"[ \t\r\n\f]+")


def candidate_prefixes() -> list[str]:
    """Default markup prefix followed by the numbered alternates."""

    return [DEFAULT_PREFIX] + [
        f"{DEFAULT_PREFIX}ctl0{index}_" for index in range(ALTERNATE_PREFIX_COUNT)
    ]


def node_text(node: Node) -> str:
    return _WHITESPACE.sub(" ", node.text(separator="")).strip(" ")


def parse_power_toughness(value: str) -> tuple[str | None, str | None]:
    """Split a power/toughness cell.

    ``"3 / 3"`` gives ``("3", "3")``. Without a slash the value is read as the
    Vanguard layout ``"(Hand Modifier: +0 , Life Modifier: +6)"``: power is
    the last character of the first segment and toughness the second-to-last
    character of the second one.
    """

    text = value.replace(*HALF_GLYPH).replace(*SQUARED_GLYPH)
    if "/" in text:
        parts = text.split("/")
        return parts[0].strip() or None, parts[1].strip() or None

    segments = text.split(",")
    power_segment = segments[0].replace(NBSP, " ").strip()
    power = power_segment[-1] if power_segment else None
    toughness = None
    if len(segments) > 1:
        toughness_segment = segments[1].replace(NBSP, " ").strip()
        if len(toughness_segment) >= 2:
            toughness = toughness_segment[-2]
    return power, toughness


class CardParser:
    """Stateful, single-threaded parser; each worker owns exactly one.

    The catalog re-bases every element id under a prefix that has to be
    discovered per document, so the parser remembers the prefix that located
    the name row and uses it for every later field of the same page.
    """

    def __init__(self, logger: structlog.BoundLogger | None = None) -> None:
        self.logger = logger or structlog.get_logger("gatherer_ingest.parser")
        self._prefix: str | None = None

    @property
    def prefix(self) -> str | None:
        return self._prefix

    def parse(self, bundle: RawCardBundle) -> CardRecord | None:
        """Return the parsed card, or None when no card is assigned to the identifier."""

        self._prefix = None
        identifier = bundle.identifier
        if not bundle.has_detail:
            self.logger.debug("card_missing", identifier=identifier, reason="empty_detail_page")
            return None

        tree = HTMLParser(bundle.detail.decode("utf-8", errors="replace"))
        name = self._locate_name(tree, identifier)
        if name is None:
            return None

        fields: dict[str, Any] = {"identifier": identifier, "name": name}
        fields["type_line"] = self._required_value(tree, "typeRow", identifier)
        fields["mana_cost"] = self._mana_cost(tree)
        fields["rules_text"] = self._rules_text(tree, identifier)
        fields["flavor_text"] = self._flavor_text(tree)
        fields.update(self._power_toughness(tree, fields["type_line"]))
        fields["expansion"] = self._expansion(tree, identifier)
        fields["rarity"] = self._rarity(tree)
        fields["collector_number"] = self._optional_value(tree, "numberRow")
        fields["artist"] = self._artist(tree)
        fields["watermark"] = self._optional_value(tree, "markRow")
        fields["image"] = bundle.image
        fields["language"] = self._language(bundle, name)
        return CardRecord(**fields)

    # ------------------------------------------------------------------
    def _locate_name(self, tree: HTMLParser, identifier: int) -> str | None:
        for index, prefix in enumerate(candidate_prefixes()):
            row = tree.css_first(f"#{prefix}nameRow")
            value = row.css_first("div.value") if row is not None else None
            if value is None:
                continue
            if index > 0:
                self.logger.warning(
                    "multiple_cards_for_identifier", identifier=identifier, prefix=prefix
                )
            self._prefix = prefix
            return node_text(value)
        self.logger.debug("card_missing", identifier=identifier, reason="name_row_not_found")
        return None

    def _row(self, tree: HTMLParser, suffix: str) -> Node | None:
        return tree.css_first(f"#{self._prefix}{suffix}")

    def _value(self, tree: HTMLParser, suffix: str) -> Node | None:
        row = self._row(tree, suffix)
        if row is None:
            return None
        return row.css_first("div.value")

    def _optional_value(self, tree: HTMLParser, suffix: str) -> str | None:
        value = self._value(tree, suffix)
        if value is None:
            return None
        return node_text(value) or None

    def _required_value(self, tree: HTMLParser, suffix: str, identifier: int) -> str:
        value = self._value(tree, suffix)
        if value is None:
            raise CardParseError(identifier, suffix)
        return node_text(value)

    def _mana_cost(self, tree: HTMLParser) -> tuple[Mana, ...]:
        value = self._value(tree, "manaRow")
        if value is None:
            return ()
        return tuple(
            Mana.from_symbol(decode_mana_label(img.attributes.get("alt") or ""))
            for img in value.css("img")
        )

    def _rules_text(self, tree: HTMLParser, identifier: int) -> str | None:
        value = self._value(tree, "textRow")
        if value is None:
            return None
        for img in value.css("img"):
            img.replace_with(self._inline_symbol(img.attributes.get("alt") or "", identifier))
        blocks = value.css("div.cardtextbox") or [value]
        text = " ".join(part for part in (node_text(block) for block in blocks) if part)
        return text or None

    def _inline_symbol(self, alt: str, identifier: int) -> str:
        label = alt.strip()
        if label.lower() == "tap":
            return "{T}"
        if label.isdigit():
            return "{" + label + "}"
        decoded = decode_mana_label(label)
        if not is_recognised(label, decoded):
            self.logger.error("unexpected_text_symbol", identifier=identifier, alt=alt)
        return "{" + decoded + "}"

    def _flavor_text(self, tree: HTMLParser) -> str | None:
        row = self._row(tree, "FlavorText")
        if row is None:
            return None
        text = "".join(node_text(block) + "\n" for block in row.css("div.cardtextbox"))
        return text.strip() or None

    def _power_toughness(self, tree: HTMLParser, type_line: str) -> dict[str, str | None]:
        row = self._row(tree, "ptRow")
        value = row.css_first("div.value") if row is not None else None
        if value is None:
            return {}
        power, toughness = parse_power_toughness(node_text(value))
        result: dict[str, str | None] = {"power": power, "toughness": toughness}
        label = row.css_first("div.label")
        is_loyalty = label is not None and "loyalty" in node_text(label).lower()
        if is_loyalty or "planeswalker" in type_line.lower():
            result["loyalty"] = power
        return result

    def _expansion(self, tree: HTMLParser, identifier: int) -> str:
        row = self._row(tree, "currentSetSymbol")
        links = row.css("a") if row is not None else []
        if not links:
            raise CardParseError(identifier, "currentSetSymbol")
        return node_text(links[-1])

    def _rarity(self, tree: HTMLParser) -> str | None:
        value = self._value(tree, "rarityRow")
        span = value.css_first("span") if value is not None else None
        if span is None:
            return None
        return node_text(span) or None

    def _artist(self, tree: HTMLParser) -> str | None:
        value = self._value(tree, "artistRow")
        if value is None:
            return None
        link = value.css_first("a")
        if link is not None:
            return node_text(link) or None
        return node_text(value) or None

    def _language(self, bundle: RawCardBundle, name: str) -> Language:
        return resolve_language(bundle.language, card_name=name, identifier=bundle.identifier)


__all__ = [
    "ALTERNATE_PREFIX_COUNT",
    "CardParser",
    "DEFAULT_PREFIX",
    "candidate_prefixes",
    "node_text",
    "parse_power_toughness",
]
