"""Card data model: raw bundles, mana symbols, languages and parsed records."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable


class Color(str, Enum):
    """Mana colours keyed by their single-letter symbol."""

    WHITE = "W"
    BLUE = "U"
    BLACK = "B"
    RED = "R"
    GREEN = "G"
    COLORLESS = "C"
    VARIABLE_COLORLESS = "X"

    @classmethod
    def from_name(cls, name: str) -> "Color | None":
        """Look up a colour by enum name (``"BLACK"``), returning None when unknown."""

        return cls.__members__.get(name)

    @classmethod
    def from_letter(cls, letter: str) -> "Color | None":
        for color in cls:
            if color.value == letter:
                return color
        return None

    @property
    def is_real(self) -> bool:
        return self not in (Color.COLORLESS, Color.VARIABLE_COLORLESS)


class Language(str, Enum):
    """Printed languages, valued by the label the catalog site uses for them."""

    ENGLISH = "English"
    CHINESE_SIMPLIFIED = "Chinese Simplified"
    CHINESE_TRADITIONAL = "Chinese Traditional"
    FRENCH = "French"
    GERMAN = "German"
    ITALIAN = "Italian"
    JAPANESE = "Japanese"
    KOREAN = "Korean"
    PORTUGUESE_BRAZIL = "Portuguese (Brazil)"
    RUSSIAN = "Russian"
    SPANISH = "Spanish"
    UNKNOWN_NON_ENGLISH = "Unknown (non-English)"

    @property
    def label(self) -> str:
        return self.value

    @classmethod
    def supported(cls) -> list["Language"]:
        return [language for language in cls if language is not cls.UNKNOWN_NON_ENGLISH]


@dataclass(frozen=True, slots=True)
class RawCardBundle:
    """As-fetched payloads for one identifier; absent resources are empty bytes."""

    identifier: int
    detail: bytes = field(default=b"", repr=False)
    image: bytes = field(default=b"", repr=False)
    language: bytes = field(default=b"", repr=False)

    @property
    def has_detail(self) -> bool:
        return bool(self.detail)


@dataclass(frozen=True, slots=True)
class Mana:
    """A single decoded mana symbol such as ``B``, ``B/W``, ``RP``, ``2`` or ``X``."""

    symbol: str
    colors: tuple[Color, ...] = ()
    generic: int | None = None
    phyrexian: bool = False
    variable: bool = False

    @classmethod
    def from_symbol(cls, symbol: str) -> "Mana":
        colors: list[Color] = []
        generic: int | None = None
        phyrexian = False
        variable = False
        for part in symbol.split("/"):
            if not part:
                continue
            if part.isdigit():
                generic = max(generic or 0, int(part))
                continue
            letter = part
            if len(part) == 2 and part.endswith("P"):
                letter = part[0]
                phyrexian = True
            color = Color.from_letter(letter)
            if color is Color.VARIABLE_COLORLESS:
                variable = True
            elif color is not None and color not in colors:
                colors.append(color)
        return cls(
            symbol=symbol,
            colors=tuple(colors),
            generic=generic,
            phyrexian=phyrexian,
            variable=variable,
        )

    @property
    def is_hybrid(self) -> bool:
        return "/" in self.symbol

    @property
    def converted_cost(self) -> int:
        cost = self.generic or 0
        if self.colors:
            cost = max(cost, 1)
        return cost

    def __str__(self) -> str:
        if self.is_hybrid:
            return "{" + self.symbol + "}"
        return self.symbol


@dataclass(frozen=True, slots=True)
class CardRecord:
    """Fully parsed card, handed to the sink and never changed afterwards."""

    identifier: int
    name: str
    type_line: str
    expansion: str
    mana_cost: tuple[Mana, ...] = ()
    rules_text: str | None = None
    flavor_text: str | None = None
    power: str | None = None
    toughness: str | None = None
    loyalty: str | None = None
    rarity: str | None = None
    collector_number: str | None = None
    artist: str | None = None
    watermark: str | None = None
    language: Language = Language.ENGLISH
    image: bytes = field(default=b"", repr=False)

    @property
    def converted_cost(self) -> int:
        return sum(mana.converted_cost for mana in self.mana_cost)

    @property
    def mana_cost_string(self) -> str:
        if not self.mana_cost:
            return "0"
        return "".join(str(mana) for mana in self.mana_cost)

    @property
    def colors(self) -> list[Color]:
        return card_colors(self.mana_cost)

    @property
    def colors_string(self) -> str:
        return "".join(color.value for color in self.colors)

    def to_dict(self) -> dict[str, object]:
        return {
            "identifier": self.identifier,
            "name": self.name,
            "mana_cost": self.mana_cost_string,
            "converted_cost": self.converted_cost,
            "colors": self.colors_string,
            "type_line": self.type_line,
            "rules_text": self.rules_text,
            "flavor_text": self.flavor_text,
            "power": self.power,
            "toughness": self.toughness,
            "loyalty": self.loyalty,
            "rarity": self.rarity,
            "collector_number": self.collector_number,
            "artist": self.artist,
            "watermark": self.watermark,
            "expansion": self.expansion,
            "language": self.language.label,
        }


def card_colors(cost: Iterable[Mana]) -> list[Color]:
    """Distinct real colours in order of first appearance; colourless when none."""

    colors: list[Color] = []
    for mana in cost:
        for color in mana.colors:
            if color.is_real and color not in colors:
                colors.append(color)
    return colors or [Color.COLORLESS]


__all__ = ["CardRecord", "Color", "Language", "Mana", "RawCardBundle", "card_colors"]
