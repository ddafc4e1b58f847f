"""Decode the catalog's spelled-out mana symbol labels into compact symbols."""

from __future__ import annotations

import structlog

from ..cards import Color

_NUMERALS = {
    "ONE": "1",
    "TWO": "2",
    "THREE": "3",
    "FOUR": "4",
    "FIVE": "5",
    "SIX": "6",
    "SEVEN": "7",
    "EIGHT": "8",
    "NINE": "9",
    "TEN": "10",
}
_PHYREXIAN = "PHYREXIAN_"
_HYBRID_SEPARATOR = "_OR_"

logger = structlog.get_logger("gatherer_ingest.symbols")


def decode_mana_label(label: str) -> str:
    """Convert a symbol label to its short form.

    ``"Black"`` -> ``"B"``, ``"Black or White"`` -> ``"B/W"``,
    ``"Phyrexian Black"`` -> ``"BP"``, ``"Two"`` -> ``"2"`` and numeric
    labels pass through unchanged. Unrecognised components are logged and
    kept as their normalised token.
    """

    normalised = label.strip().upper().replace(" ", "_")
    phyrexian = _PHYREXIAN in normalised
    parts = normalised.split(_PHYREXIAN) if phyrexian else normalised.split(_HYBRID_SEPARATOR)

    decoded: list[str] = []
    for part in parts:
        if not part:
            continue
        color = Color.from_name(part)
        if color is not None:
            decoded.append(color.value + ("P" if phyrexian else ""))
        elif part in _NUMERALS:
            decoded.append(_NUMERALS[part])
        else:
            if not part.isdigit():
                logger.error("unrecognised_mana_label", label=label, component=part)
            decoded.append(part)
    return "/".join(decoded)


def is_recognised(label: str, decoded: str) -> bool:
    """False when decoding only re-cased the label."""

    return decoded.lower() != label.strip().lower()


__all__ = ["decode_mana_label", "is_recognised"]
